import os
import time

import pytest
from PIL import Image

from kioskvote_app.core.error_handlers import ResultGenerationError
from kioskvote_app.modules.results.services import wordcloud_service
from kioskvote_app.modules.results.services.wordcloud_service import WordCloudService
from kioskvote_app.modules.voting.services.vote_service import VoteService

BALLOT = ['hope', 'joy', 'peace']


def precompute(client, submission_id='sub1', keys=BALLOT, language='en'):
    return client.post('/api/results/precompute', json={
        'keys': keys, 'language': language, 'submission_id': submission_id,
    })


class TestFrequencies:

    def test_submitted_ballot_counted_once(self, app):
        tally = {'hope': 2, 'joy': 0, 'peace': 0, 'wisdom': 0}

        frequencies = WordCloudService.build_frequencies('en', tally, ['hope', 'joy', 'peace'])

        assert frequencies == {'Hope': 3, 'Joy': 1, 'Peace': 1}

    def test_rtl_labels_are_reordered_for_drawing(self, app):
        frequencies = WordCloudService.build_frequencies('he', {'hope': 1}, [])

        (label,) = frequencies
        assert label == 'תקווה'[::-1]

    def test_empty_frequencies_rejected(self, app, tmp_path):
        with pytest.raises(ResultGenerationError):
            WordCloudService.render({}, str(tmp_path / 'empty.png'))

    def test_render_uses_configured_font(self, app, tmp_path, monkeypatch):
        created = []

        class FakeCloud:
            def __init__(self, **kwargs):
                created.append(kwargs)

            def generate_from_frequencies(self, frequencies):
                return self

            def to_file(self, path):
                with open(path, 'wb') as handle:
                    handle.write(b'\x89PNG')

        monkeypatch.setattr(wordcloud_service, 'WordCloud', FakeCloud)
        app.config['WORDCLOUD_FONT_PATH'] = '/fonts/NotoSansHebrew-Regular.ttf'

        path = WordCloudService.render({'תקווה': 2}, str(tmp_path / 'he.png'))

        assert created[0]['font_path'] == '/fonts/NotoSansHebrew-Regular.ttf'
        with open(path, 'rb') as handle:
            assert handle.read() == b'\x89PNG'


class TestPrecompute:

    def test_precompute_renders_every_language(self, app, client):
        response = precompute(client)
        data = response.get_json()['data']

        assert response.status_code == 200
        assert set(data['assets']) == {'en', 'he'}
        assert data['assets']['en'] == '/results/staging/sub1/en.png'
        for language in ('en', 'he'):
            path = os.path.join(WordCloudService.staging_dir('sub1'), f'{language}.png')
            with Image.open(path) as image:
                assert image.size == (400, 200)

    def test_staged_asset_is_served(self, app, client):
        precompute(client)

        response = client.get('/results/staging/sub1/he.png')

        assert response.status_code == 200
        assert response.mimetype == 'image/png'
        assert response.data.startswith(b'\x89PNG')

    def test_precompute_ignores_stored_copy_of_same_ballot(self, app, client, monkeypatch):
        VoteService.record_vote(BALLOT, 'en', 'sub1')
        VoteService.record_vote(['hope', 'courage', 'wisdom'], 'en', 'other')
        captured = []
        monkeypatch.setattr(
            WordCloudService, 'render',
            staticmethod(lambda frequencies, path: captured.append(dict(frequencies)) or path),
        )

        precompute(client)

        assert captured[0] == {'Hope': 2, 'Joy': 1, 'Peace': 1, 'Courage': 1, 'Wisdom': 1}

    def test_precompute_validates_request(self, client):
        assert precompute(client, keys=['hope']).status_code == 400
        assert precompute(client, submission_id='../etc').status_code == 400
        assert precompute(client, language='xx').status_code == 400

    def test_render_failure_is_reported(self, app, client, monkeypatch):
        def broken(frequencies, path):
            raise OSError('cannot open resource')
        monkeypatch.setattr(WordCloudService, 'render', staticmethod(broken))

        response = precompute(client)

        assert response.status_code == 500
        assert response.get_json()['code'] == 'RESULT_GENERATION_FAILED'

    def test_old_staging_directories_are_pruned(self, app, monkeypatch):
        monkeypatch.setattr(WordCloudService, 'render', staticmethod(lambda frequencies, path: path))
        staging_root = os.path.join(app.config['RESULTS_FOLDER'], 'staging')
        for index in range(8):
            os.makedirs(os.path.join(staging_root, f'old{index}'))
            stamp = time.time() - 1000 + index
            os.utime(os.path.join(staging_root, f'old{index}'), (stamp, stamp))

        with app.test_request_context():
            WordCloudService.precompute(BALLOT, 'en', 'fresh')

        remaining = sorted(os.listdir(staging_root))
        assert len(remaining) == app.config['RESULTS_STAGING_KEEP']
        assert 'fresh' in remaining
        assert 'old7' in remaining and 'old0' not in remaining


class TestCommit:

    def test_commit_promotes_staged_images(self, app, client):
        precompute(client)

        response = client.post('/api/results/commit', json={'submission_id': 'sub1'})
        data = response.get_json()['data']

        assert response.status_code == 200
        assert data['assets']['en'] == '/results/current/en.png?v=sub1'
        current = client.get('/results/current/en.png')
        assert current.status_code == 200
        staged = client.get('/results/staging/sub1/en.png')
        assert current.data == staged.data

    def test_commit_without_precompute_is_404(self, client):
        response = client.post('/api/results/commit', json={'submission_id': 'missing'})

        assert response.status_code == 404
        assert response.get_json()['code'] == 'NOT_FOUND'

    def test_current_asset_before_any_commit(self, client):
        response = client.get('/results/current/en.png')

        assert response.status_code == 404
