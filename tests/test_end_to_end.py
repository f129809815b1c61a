"""
The controller driven against the real Flask API through the test client,
with genuine word-cloud rendering.
"""

import asyncio

from kioskvote_app.controller import (
    AssetLoadFailure,
    KioskBackend,
    NetworkFailure,
    PrecomputedResult,
    Renderer,
    Return,
    SetLanguage,
    ToggleItem,
    ViewController,
    ViewState,
)
from kioskvote_app.models import Vote


class FlaskClientBackend(KioskBackend):

    def __init__(self, client):
        self.client = client

    def _data(self, operation, response):
        body = response.get_json(silent=True) or {}
        if response.status_code >= 400 or not body.get('success'):
            raise NetworkFailure(operation, body.get('message', 'failed'), response.status_code)
        return body['data']

    async def submit_vote(self, keys, language, submission_id):
        self._data('submit_vote', self.client.post('/api/votes', json={
            'keys': list(keys), 'language': language, 'submission_id': submission_id,
        }))

    async def precompute_result(self, keys, language, submission_id):
        data = self._data('precompute_result', self.client.post('/api/results/precompute', json={
            'keys': list(keys), 'language': language, 'submission_id': submission_id,
        }))
        return PrecomputedResult(data['submission_id'], data['assets'])

    async def commit_result(self, submission_id):
        self._data('commit_result', self.client.post('/api/results/commit', json={
            'submission_id': submission_id,
        }))

    async def fetch_result_asset(self, result, language):
        response = self.client.get(result.asset_for(language))
        if response.status_code != 200:
            raise AssetLoadFailure(language)
        return response.data

    async def translate(self, language):
        return self._data('translate', self.client.get(f'/api/translations/{language}'))['strings']


class ImageRenderer(Renderer):

    def __init__(self):
        super().__init__(launch_duration=0.01)
        self.images = []
        self.errors = []

    def render_selection(self, view, state):
        self.last_view = view

    def render_result(self, state, image):
        self.images.append((state.language, image))

    def show_error(self, message):
        self.errors.append(message)


def test_vote_flow_against_flask_api(app, client):
    async def scenario():
        renderer = ImageRenderer()
        controller = ViewController(
            FlaskClientBackend(client), renderer, list(app.config['VOTE_ITEMS']),
            language='en', idle_timeout=5,
        )
        await controller.start()
        for key in ('hope', 'joy', 'peace'):
            await controller.dispatch(ToggleItem(key))
        controller.submit()
        await controller.wait_for_transition()

        assert controller.state.view is ViewState.RESULT_SHOWN
        assert renderer.images[0][0] == 'en'
        assert renderer.images[0][1].startswith(b'\x89PNG')

        await controller.dispatch(SetLanguage('he'))
        assert renderer.images[-1][0] == 'he'
        assert controller.state.translations['submit'] == 'שיגור'

        await controller.dispatch(Return())
        assert controller.state.view is ViewState.SELECTING
        assert len(controller.state.selection) == 0
        await controller.close()
        return controller.state

    run_state = asyncio.run(scenario())

    assert run_state.result is None
    vote = Vote.query.one()
    assert vote.item_keys == ['hope', 'joy', 'peace']
    assert vote.language == 'en'
    assert client.get('/results/current/he.png').status_code == 200
