from typing import Dict, Mapping, Sequence

from kioskvote_app.core.error_handlers import ValidationError
from kioskvote_app.core.extensions import db
from kioskvote_app.models import FontSizeCache
from kioskvote_app.utils.db_session import safe_commit


class FontSizeService:
    """
    Persists the auto-fit font sizes a kiosk page measured for its item
    labels, so the next page load can skip measuring.
    """

    @staticmethod
    def get_sizes(language: str) -> Dict[str, int]:
        rows = FontSizeCache.query.filter_by(language=language).all()
        return {row.item_key: row.font_px for row in rows}

    @staticmethod
    def validate(sizes, known_items: Sequence[str], minimum: int, maximum: int) -> Dict[str, int]:
        if not isinstance(sizes, Mapping) or not sizes:
            raise ValidationError('sizes must be a non-empty object')
        errors = {}
        for key, value in sizes.items():
            if key not in known_items:
                errors[key] = 'unknown item'
            elif isinstance(value, bool) or not isinstance(value, int):
                errors[key] = 'must be an integer'
            elif not minimum <= value <= maximum:
                errors[key] = f'must be between {minimum} and {maximum}'
        if errors:
            raise ValidationError('Invalid font sizes', errors=errors)
        return dict(sizes)

    @staticmethod
    def save_sizes(language: str, sizes: Mapping[str, int]) -> Dict[str, int]:
        """Upsert ``sizes`` for ``language`` and return the merged cache."""
        existing = {row.item_key: row for row in FontSizeCache.query.filter_by(language=language).all()}

        def stage():
            for key, font_px in sizes.items():
                row = existing.get(key)
                if row is None:
                    row = FontSizeCache(language=language, item_key=key)
                    existing[key] = row
                row.font_px = font_px
                db.session.add(row)

        safe_commit(db.session, stage=stage)
        return FontSizeService.get_sizes(language)
