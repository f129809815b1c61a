import os

from flask import current_app, request, send_from_directory

from kioskvote_app.core.error_handlers import NotFoundError, ValidationError, success_response
from kioskvote_app.core.extensions import csrf_protect
from kioskvote_app.modules.voting.schemas import (
    validate_keys,
    validate_language,
    validate_submission_id,
)
from . import results_bp
from .services.wordcloud_service import WordCloudService


def _json_body():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload


def _check_language(language):
    if language not in current_app.config['LANGUAGES']:
        raise NotFoundError(f"Unsupported language '{language}'", resource=language)


@results_bp.route('/api/results/precompute', methods=['POST'])
@csrf_protect.exempt
def precompute():
    """
    Render the word clouds a kiosk will show for its pending ballot.
    Body: { "keys": [...], "language": "en", "submission_id": "..." }
    """
    payload = _json_body()
    config = current_app.config
    keys = validate_keys(payload.get('keys'), config['VOTE_ITEMS'], config['VOTE_CHOICES'])
    language = validate_language(payload.get('language'), config['LANGUAGES'])
    submission_id = validate_submission_id(payload.get('submission_id'))

    assets = WordCloudService.precompute(keys, language, submission_id)
    return success_response(data={'submission_id': submission_id, 'assets': assets})


@results_bp.route('/api/results/commit', methods=['POST'])
@csrf_protect.exempt
def commit():
    payload = _json_body()
    submission_id = validate_submission_id(payload.get('submission_id'))
    assets = WordCloudService.commit(submission_id)
    return success_response(data={'submission_id': submission_id, 'assets': assets})


@results_bp.route('/results/staging/<submission_id>/<language>.png', methods=['GET'])
def staged_asset(submission_id, language):
    _check_language(language)
    try:
        validate_submission_id(submission_id)
    except ValidationError:
        raise NotFoundError('Unknown result', resource=submission_id) from None
    return send_from_directory(WordCloudService.staging_dir(submission_id), f'{language}.png',
                               mimetype='image/png')


@results_bp.route('/results/current/<language>.png', methods=['GET'])
def current_asset(language):
    _check_language(language)
    directory = WordCloudService.current_dir()
    if not os.path.isfile(os.path.join(directory, f'{language}.png')):
        raise NotFoundError('No result has been committed yet', resource=language)
    response = send_from_directory(directory, f'{language}.png', mimetype='image/png')
    # Same URL, new picture after every commit
    response.cache_control.no_cache = True
    return response
