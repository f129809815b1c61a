# File: kioskvote_app/models.py
# Votes, their three chosen items, and the per-language font-size cache.

from sqlalchemy.sql import func

from .core.extensions import db


class Vote(db.Model):
    """
    One submitted ballot. ``submission_id`` is generated by the kiosk for each
    transition so a retried or concurrently-precomputed submission maps to the
    same row.
    """
    __tablename__ = 'votes'
    vote_id = db.Column(db.Integer, primary_key=True)
    submission_id = db.Column(db.String(64), unique=True, nullable=False, index=True)
    language = db.Column(db.String(10), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    choices = db.relationship(
        'VoteChoice', backref='vote', lazy=True,
        cascade="all, delete-orphan", order_by='VoteChoice.slot_index',
    )

    @property
    def item_keys(self):
        return [choice.item_key for choice in self.choices]

    def to_dict(self):
        return {
            'vote_id': self.vote_id,
            'submission_id': self.submission_id,
            'language': self.language,
            'keys': self.item_keys,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class VoteChoice(db.Model):
    __tablename__ = 'vote_choices'
    choice_id = db.Column(db.Integer, primary_key=True)
    vote_id = db.Column(db.Integer, db.ForeignKey('votes.vote_id'), nullable=False, index=True)
    item_key = db.Column(db.String(64), nullable=False, index=True)
    slot_index = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('vote_id', 'item_key', name='uq_vote_choice_item'),
        db.UniqueConstraint('vote_id', 'slot_index', name='uq_vote_choice_slot'),
    )


class FontSizeCache(db.Model):
    """Auto-fit font size measured by a kiosk for one item label in one language."""
    __tablename__ = 'font_size_cache'
    id = db.Column(db.Integer, primary_key=True)
    language = db.Column(db.String(10), nullable=False)
    item_key = db.Column(db.String(64), nullable=False)
    font_px = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        db.UniqueConstraint('language', 'item_key', name='uq_font_size_language_item'),
    )
