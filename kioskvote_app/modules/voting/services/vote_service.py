import logging
import uuid
from typing import Dict, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from kioskvote_app.core.extensions import db
from kioskvote_app.models import Vote, VoteChoice
from kioskvote_app.utils.db_session import safe_commit

logger = logging.getLogger(__name__)


class VoteService:
    """
    Records ballots and aggregates them into per-item counts.
    """

    @staticmethod
    def record_vote(keys: Sequence[str], language: str,
                    submission_id: Optional[str] = None) -> Tuple[Vote, bool]:
        """
        Store one ballot. Returns ``(vote, created)``; a repeated
        ``submission_id`` returns the stored vote with ``created=False``.
        """
        submission_id = submission_id or uuid.uuid4().hex

        existing = Vote.query.filter_by(submission_id=submission_id).first()
        if existing is not None:
            logger.info("Vote %s already recorded, ignoring resubmission.", submission_id)
            return existing, False

        vote = Vote(submission_id=submission_id, language=language)
        for slot_index, key in enumerate(keys):
            vote.choices.append(VoteChoice(item_key=key, slot_index=slot_index))

        try:
            safe_commit(db.session, stage=lambda: db.session.add(vote))
        except IntegrityError:
            # Another request stored the same submission between the lookup and the insert
            db.session.rollback()
            existing = Vote.query.filter_by(submission_id=submission_id).first()
            if existing is None:
                raise
            return existing, False

        logger.info("Recorded vote %s (%s): %s", vote.vote_id, language, ", ".join(keys))
        return vote, True

    @staticmethod
    def get_tally(items: Sequence[str], exclude_submission_id: Optional[str] = None) -> Dict[str, int]:
        """
        Count how often each item was chosen. Every key in ``items`` is present
        in the result, with 0 when never chosen; keys no longer offered are
        dropped.
        """
        query = db.session.query(VoteChoice.item_key, func.count(VoteChoice.choice_id))
        if exclude_submission_id:
            query = query.join(Vote, Vote.vote_id == VoteChoice.vote_id).filter(
                Vote.submission_id != exclude_submission_id
            )
        counts = dict(query.group_by(VoteChoice.item_key).all())
        return {key: int(counts.get(key, 0)) for key in items}

    @staticmethod
    def count_votes() -> int:
        return Vote.query.count()
