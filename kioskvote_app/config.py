# File: kioskvote_app/config.py
# Runtime configuration for the voting kiosk. Values can be overridden through
# environment variables (a .env file is loaded by start_kioskvote_app.py).

import os

# The project root sits one level above the package directory.
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

# SQLite database holding votes and the font-size cache
DATABASE_PATH = os.path.join(BASE_DIR, "database", "kioskvote.db")


def _env_list(name, default):
    raw = os.environ.get(name)
    if not raw:
        return tuple(default)
    return tuple(part.strip() for part in raw.split(',') if part.strip())


# System fonts with Hebrew glyphs. wordcloud's bundled DroidSansMono has none
# and draws Hebrew labels as boxes.
HEBREW_FONT_CANDIDATES = (
    '/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf',
    '/usr/share/fonts/dejavu/DejaVuSans.ttf',
    '/usr/share/fonts/truetype/noto/NotoSansHebrew-Regular.ttf',
    '/usr/share/fonts/noto/NotoSansHebrew-Regular.ttf',
    '/usr/share/fonts/truetype/freefont/FreeSans.ttf',
    '/Library/Fonts/Arial Unicode.ttf',
    'C:\\Windows\\Fonts\\arial.ttf',
)


def find_font(candidates=HEBREW_FONT_CANDIDATES):
    """First existing font file among ``candidates``, or None."""
    return next((path for path in candidates if os.path.isfile(path)), None)


class Config:
    """
    Configuration class for the Flask application.
    """
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'change_me_kiosk_secret'

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Grid items offered on the kiosk, in display order
    VOTE_ITEMS = _env_list('VOTE_ITEMS', (
        'curiosity', 'community', 'creativity', 'courage',
        'kindness', 'freedom', 'hope', 'wisdom',
        'joy', 'peace', 'justice', 'imagination',
    ))
    VOTE_CHOICES = 3

    LANGUAGES = _env_list('LANGUAGES', ('en', 'he'))
    DEFAULT_LANGUAGE = os.environ.get('DEFAULT_LANGUAGE', 'en')
    TRANSLATIONS_FOLDER = os.path.join(os.path.dirname(__file__), 'translations')

    # Word-cloud images: staging/<submission_id>/<lang>.png and current/<lang>.png
    RESULTS_FOLDER = os.environ.get('RESULTS_FOLDER') or os.path.join(BASE_DIR, 'results')
    RESULTS_STAGING_KEEP = int(os.environ.get('RESULTS_STAGING_KEEP', 20))

    WORDCLOUD_WIDTH = int(os.environ.get('WORDCLOUD_WIDTH', 1200))
    WORDCLOUD_HEIGHT = int(os.environ.get('WORDCLOUD_HEIGHT', 800))
    WORDCLOUD_BACKGROUND = os.environ.get('WORDCLOUD_BACKGROUND', 'white')
    WORDCLOUD_COLORMAP = os.environ.get('WORDCLOUD_COLORMAP', 'viridis')
    WORDCLOUD_MAX_WORDS = int(os.environ.get('WORDCLOUD_MAX_WORDS', 200))
    # Must cover every configured script. None falls back to wordcloud's
    # DroidSansMono, which is Latin-only.
    WORDCLOUD_FONT_PATH = os.environ.get('WORDCLOUD_FONT_PATH') or find_font()

    # Front-end timing (opaque to the controller)
    LAUNCH_ANIMATION_SECONDS = float(os.environ.get('LAUNCH_ANIMATION_SECONDS', 2.5))
    RESULT_IDLE_SECONDS = float(os.environ.get('RESULT_IDLE_SECONDS', 30))

    # Bounds accepted by the font-size cache
    FONT_SIZE_MIN = 8
    FONT_SIZE_MAX = 200

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')

    # Make sure the database directory exists when the app starts
    db_dir = os.path.dirname(DATABASE_PATH)
    if not os.path.exists(db_dir):
        os.makedirs(db_dir)
