from kioskvote_app.models import Vote
from kioskvote_app.modules.voting.services.vote_service import VoteService


def post_vote(client, keys, language='en', submission_id=None):
    payload = {'keys': keys, 'language': language}
    if submission_id:
        payload['submission_id'] = submission_id
    return client.post('/api/votes', json=payload)


def test_items_endpoint_lists_grid(app, client):
    response = client.get('/api/items')
    data = response.get_json()['data']

    assert response.status_code == 200
    assert data['items'] == list(app.config['VOTE_ITEMS'])
    assert data['choices'] == 3
    assert data['default_language'] == 'en'


def test_vote_is_recorded(app, client):
    response = post_vote(client, ['hope', 'joy', 'peace'], submission_id='abc123')
    body = response.get_json()

    assert response.status_code == 201
    assert body['success'] is True
    assert body['data']['keys'] == ['hope', 'joy', 'peace']
    assert body['data']['language'] == 'en'
    assert body['data']['created_at']
    vote = Vote.query.filter_by(submission_id='abc123').one()
    assert [c.slot_index for c in vote.choices] == [0, 1, 2]


def test_resubmission_returns_existing_vote(app, client):
    first = post_vote(client, ['hope', 'joy', 'peace'], submission_id='same')
    second = post_vote(client, ['hope', 'joy', 'peace'], submission_id='same')

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.get_json()['data']['created'] is False
    assert Vote.query.count() == 1


def test_vote_without_submission_id_gets_one(app, client):
    response = post_vote(client, ['hope', 'joy', 'peace'])

    assert response.status_code == 201
    assert response.get_json()['data']['submission_id']


def test_vote_requires_three_distinct_known_items(app, client):
    too_few = post_vote(client, ['hope', 'joy'])
    duplicate = post_vote(client, ['hope', 'hope', 'joy'])
    unknown = post_vote(client, ['hope', 'joy', 'banana'])
    bad_language = post_vote(client, ['hope', 'joy', 'peace'], language='xx')

    for response in (too_few, duplicate, unknown, bad_language):
        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'
    assert Vote.query.count() == 0


def test_vote_rejects_non_json_body(app, client):
    response = client.post('/api/votes', data='keys=hope')

    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_tally_counts_choices(app, client):
    post_vote(client, ['hope', 'joy', 'peace'], submission_id='a')
    post_vote(client, ['hope', 'courage', 'peace'], submission_id='b')

    response = client.get('/api/votes/tally')
    data = response.get_json()['data']

    assert data['total_votes'] == 2
    assert data['tally']['hope'] == 2
    assert data['tally']['courage'] == 1
    assert data['tally']['wisdom'] == 0


def test_tally_can_exclude_a_submission(app):
    VoteService.record_vote(['hope', 'joy', 'peace'], 'en', 'a')
    VoteService.record_vote(['hope', 'courage', 'peace'], 'he', 'b')

    tally = VoteService.get_tally(['hope', 'courage', 'joy'], exclude_submission_id='b')

    assert tally == {'hope': 1, 'courage': 0, 'joy': 1}


def test_unknown_api_route_returns_json_404(client):
    response = client.get('/api/nothing-here')

    assert response.status_code == 404
    assert response.get_json()['code'] == 'NOT_FOUND'
