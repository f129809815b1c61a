from flask import current_app

from kioskvote_app.core.error_handlers import NotFoundError, success_response
from . import i18n_bp
from .services.translation_service import TranslationService


@i18n_bp.route('/translations/<language>', methods=['GET'])
def get_translations(language):
    """All display strings of one language, with item keys falling back to themselves."""
    if language not in current_app.config['LANGUAGES']:
        raise NotFoundError(f"Unsupported language '{language}'", resource=language)

    entry = TranslationService.load(language)
    strings = dict(entry['strings'])
    for key in current_app.config['VOTE_ITEMS']:
        strings.setdefault(key, key)

    return success_response(data={
        'language': language,
        'direction': entry['direction'],
        'strings': strings,
    })
