from flask import current_app, request

from kioskvote_app.core.error_handlers import success_response
from kioskvote_app.core.extensions import csrf_protect
from . import voting_bp
from .schemas import VoteRequestDTO
from .services.vote_service import VoteService


@voting_bp.route('/items', methods=['GET'])
def list_items():
    """Grid contents and supported languages for a kiosk front end."""
    return success_response(data={
        'items': list(current_app.config['VOTE_ITEMS']),
        'choices': current_app.config['VOTE_CHOICES'],
        'languages': list(current_app.config['LANGUAGES']),
        'default_language': current_app.config['DEFAULT_LANGUAGE'],
    })


@voting_bp.route('/votes', methods=['POST'])
@csrf_protect.exempt
def submit_vote():
    """
    Record a ballot.
    Body: { "keys": ["a", "b", "c"], "language": "en", "submission_id": "..." }
    """
    dto = VoteRequestDTO.from_payload(
        request.get_json(silent=True),
        current_app.config['VOTE_ITEMS'],
        current_app.config['LANGUAGES'],
        current_app.config['VOTE_CHOICES'],
    )
    vote, created = VoteService.record_vote(dto.keys, dto.language, dto.submission_id)
    data = vote.to_dict()
    data['created'] = created
    return success_response(data=data), 201 if created else 200


@voting_bp.route('/votes/tally', methods=['GET'])
def tally():
    items = current_app.config['VOTE_ITEMS']
    return success_response(data={
        'tally': VoteService.get_tally(items),
        'total_votes': VoteService.count_votes(),
    })
