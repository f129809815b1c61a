import json
import logging
import os
from typing import Dict, Optional

from flask import current_app

from kioskvote_app.core.error_handlers import NotFoundError, TranslationError

logger = logging.getLogger(__name__)

RTL_LANGUAGES = {'he', 'ar', 'fa', 'ur', 'yi'}


class TranslationService:
    """
    Loads ``translations/<lang>.json`` files. Each file looks like
    ``{"direction": "rtl", "strings": {"title": "...", "hope": "..."}}``.
    Parsed files are cached per folder for the lifetime of the process.
    """

    _cache: Dict[str, Dict[str, dict]] = {}

    @classmethod
    def _folder(cls, folder: Optional[str]) -> str:
        return folder or current_app.config['TRANSLATIONS_FOLDER']

    @classmethod
    def load(cls, language: str, folder: Optional[str] = None) -> dict:
        folder = cls._folder(folder)
        cached = cls._cache.setdefault(folder, {})
        if language in cached:
            return cached[language]

        path = os.path.join(folder, f'{language}.json')
        if not os.path.isfile(path):
            raise NotFoundError(f"No translations for language '{language}'", resource=language)
        try:
            with open(path, encoding='utf-8') as handle:
                raw = json.load(handle)
        except (OSError, ValueError) as exc:
            logger.error("Could not read translation file %s: %s", path, exc, exc_info=True)
            raise TranslationError(f"Translation file for '{language}' is unreadable", language) from exc

        strings = raw.get('strings') if isinstance(raw, dict) else None
        if not isinstance(strings, dict):
            raise TranslationError(f"Translation file for '{language}' has no 'strings' mapping", language)

        entry = {
            'language': language,
            'direction': raw.get('direction') or ('rtl' if language in RTL_LANGUAGES else 'ltr'),
            'strings': {str(k): str(v) for k, v in strings.items()},
        }
        cached[language] = entry
        return entry

    @classmethod
    def get_strings(cls, language: str, folder: Optional[str] = None) -> Dict[str, str]:
        return cls.load(language, folder)['strings']

    @classmethod
    def label_for(cls, language: str, item_key: str, folder: Optional[str] = None) -> str:
        """Display label of one grid item; falls back to the key itself."""
        return cls.get_strings(language, folder).get(item_key) or item_key

    @classmethod
    def is_rtl(cls, language: str, folder: Optional[str] = None) -> bool:
        return cls.load(language, folder)['direction'] == 'rtl'

    @classmethod
    def clear_cache(cls) -> None:
        cls._cache.clear()
