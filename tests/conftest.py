import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from kioskvote_app import create_app, db
from kioskvote_app.config import Config
from kioskvote_app.modules.i18n.services.translation_service import TranslationService


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    WTF_CSRF_ENABLED = False
    WORDCLOUD_WIDTH = 400
    WORDCLOUD_HEIGHT = 200
    RESULTS_STAGING_KEEP = 5


@pytest.fixture
def app(tmp_path):
    class _Config(TestConfig):
        RESULTS_FOLDER = str(tmp_path / 'results')
        LOG_DIR = str(tmp_path / 'logs')

    app = create_app(_Config)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()
    TranslationService.clear_cache()


@pytest.fixture
def client(app):
    return app.test_client()
