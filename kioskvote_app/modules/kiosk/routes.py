from flask import current_app, render_template, request

from kioskvote_app.core.error_handlers import NotFoundError, success_response
from . import kiosk_bp
from .services.font_size_service import FontSizeService


def _check_language(language):
    if language not in current_app.config['LANGUAGES']:
        raise NotFoundError(f"Unsupported language '{language}'", resource=language)


@kiosk_bp.route('/', methods=['GET'])
def index():
    """The kiosk page: item grid, three slots, launch button and result view."""
    config = current_app.config
    return render_template(
        'kiosk/index.html',
        items=config['VOTE_ITEMS'],
        choices=config['VOTE_CHOICES'],
        languages=config['LANGUAGES'],
        default_language=config['DEFAULT_LANGUAGE'],
        launch_seconds=config['LAUNCH_ANIMATION_SECONDS'],
        idle_seconds=config['RESULT_IDLE_SECONDS'],
    )


@kiosk_bp.route('/api/font-sizes/<language>', methods=['GET'])
def get_font_sizes(language):
    _check_language(language)
    return success_response(data={'language': language, 'sizes': FontSizeService.get_sizes(language)})


@kiosk_bp.route('/api/font-sizes/<language>', methods=['POST'])
def save_font_sizes(language):
    """Body: { "sizes": { "hope": 42, ... } }. Requires the page's CSRF token."""
    _check_language(language)
    payload = request.get_json(silent=True) or {}
    config = current_app.config
    sizes = FontSizeService.validate(
        payload.get('sizes'), config['VOTE_ITEMS'], config['FONT_SIZE_MIN'], config['FONT_SIZE_MAX'],
    )
    merged = FontSizeService.save_sizes(language, sizes)
    return success_response(data={'language': language, 'sizes': merged})
