from helpers import match_payload


def _create(client, **overrides):
    res = client.post('/api/matches', json=match_payload(**overrides))
    assert res.status_code == 201
    return res.get_json()


def test_healthcheck(client):
    res = client.get('/healthcheck')
    assert res.status_code == 200
    assert res.get_json()['status'] == 'ok'


def test_create_and_list_matches(client):
    created = _create(client, total_rounds=2, round_duration_minutes=3)
    assert created['status'] == 'upcoming'
    assert created['total_rounds'] == 2
    assert created['round_duration_minutes'] == 3
    assert created['winner_color'] is None

    res = client.get('/api/matches')
    assert res.status_code == 200
    assert [m['id'] for m in res.get_json()] == [created['id']]


def test_create_rejects_bad_requests(client):
    res = client.post('/api/matches', json={'weight_category': '-68kg'})
    assert res.status_code == 400
    body = res.get_json()
    assert body['code'] == 'invalid_request'
    assert any(d['field'] == 'red_competitor_name' for d in body['details'])

    res = client.post('/api/matches', json=match_payload(total_rounds=6))
    assert res.status_code == 400
    assert res.get_json()['code'] == 'total_rounds_out_of_range'


def test_full_match_flow(client):
    match_id = _create(client, total_rounds=1)['id']

    # detail before start: no rounds yet
    detail = client.get(f'/api/matches/{match_id}').get_json()
    assert detail['rounds'] == []
    assert detail['current_round_data'] is None

    started = client.post(f'/api/matches/{match_id}/start').get_json()
    assert started['status'] == 'ongoing'

    res = client.post(f'/api/matches/{match_id}/scores', json={'competitor_color': 'red', 'score_type': 'head_kick'})
    assert res.status_code == 200
    detail = res.get_json()
    assert detail['current_round_data']['red_score'] == 3
    assert detail['score_entries'][0]['points'] == 3

    res = client.post(f'/api/matches/{match_id}/scores', json={'competitor_color': 'blue', 'score_type': 'punch'})
    assert res.get_json()['match']['blue_total_score'] == 1

    res = client.post(f'/api/matches/{match_id}/penalties', json={'competitor_color': 'blue', 'penalty_type': 'grab'})
    detail = res.get_json()
    assert detail['match']['red_total_score'] == 4
    assert detail['current_round_data']['blue_penalties'] == 1
    assert detail['penalty_entries'][0]['penalty_type'] == 'grab'

    detail = client.post(f'/api/matches/{match_id}/rounds/end').get_json()
    assert detail['match']['status'] == 'completed'
    assert detail['match']['winner_color'] == 'red'
    assert detail['current_round_data'] is None


def test_pause_blocks_scoring(client):
    match_id = _create(client)['id']
    client.post(f'/api/matches/{match_id}/start')
    assert client.post(f'/api/matches/{match_id}/pause').get_json()['status'] == 'paused'

    res = client.post(f'/api/matches/{match_id}/scores', json={'competitor_color': 'red', 'score_type': 'punch'})
    assert res.status_code == 409
    assert res.get_json()['code'] == 'invalid_transition'

    assert client.post(f'/api/matches/{match_id}/resume').get_json()['status'] == 'ongoing'
    res = client.post(f'/api/matches/{match_id}/scores', json={'competitor_color': 'red', 'score_type': 'punch'})
    assert res.status_code == 200
    assert res.get_json()['match']['red_total_score'] == 1


def test_invalid_transitions_are_conflicts(client):
    match_id = _create(client)['id']
    assert client.post(f'/api/matches/{match_id}/pause').status_code == 409
    assert client.post(f'/api/matches/{match_id}/rounds/end').status_code == 409
    client.post(f'/api/matches/{match_id}/start')
    res = client.post(f'/api/matches/{match_id}/start')
    assert res.status_code == 409
    assert 'not upcoming' in res.get_json()['error']


def test_unknown_match_returns_404(client):
    assert client.get('/api/matches/404').status_code == 404
    res = client.post('/api/matches/404/scores', json={'competitor_color': 'red', 'score_type': 'punch'})
    assert res.status_code == 404
    assert res.get_json()['code'] == 'not_found'


def test_unknown_technique_is_a_bad_request(client):
    match_id = _create(client)['id']
    client.post(f'/api/matches/{match_id}/start')
    res = client.post(f'/api/matches/{match_id}/scores', json={'competitor_color': 'green', 'score_type': 'elbow'})
    assert res.status_code == 400
    fields = {d['field'] for d in res.get_json()['details']}
    assert fields == {'competitor_color', 'score_type'}


def test_patch_match(client):
    match_id = _create(client)['id']
    res = client.patch(f'/api/matches/{match_id}', json={'blue_competitor_country': 'MEX', 'total_rounds': 5})
    assert res.status_code == 200
    body = res.get_json()
    assert body['blue_competitor_country'] == 'MEX'
    assert body['total_rounds'] == 5
    assert body['red_competitor_country'] == 'KOR'

    res = client.patch(f'/api/matches/{match_id}', json={'round_duration_minutes': 20})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'round_duration_out_of_range'


def test_second_round_needs_explicit_start(client):
    match_id = _create(client, total_rounds=2)['id']
    client.post(f'/api/matches/{match_id}/start')
    detail = client.post(f'/api/matches/{match_id}/rounds/end').get_json()
    assert detail['current_round_data']['round_number'] == 2
    assert detail['current_round_data']['started_at'] is None

    detail = client.post(f'/api/matches/{match_id}/rounds/start').get_json()
    assert detail['current_round_data']['started_at'] is not None
    res = client.post(f'/api/matches/{match_id}/rounds/start')
    assert res.status_code == 400
    assert res.get_json()['code'] == 'round_started'


def test_over_length_and_blank_fields_are_bad_requests(client):
    res = client.post('/api/matches', json=match_payload(red_competitor_name='x' * 300, blue_competitor_country=''))
    assert res.status_code == 400
    body = res.get_json()
    assert body['code'] == 'invalid_request'
    assert {d['field'] for d in body['details']} == {'red_competitor_name', 'blue_competitor_country'}
    assert client.get('/api/matches').get_json() == []

    match_id = _create(client)['id']
    res = client.patch(f'/api/matches/{match_id}', json={'weight_category': 'k' * 65})
    assert res.status_code == 400
    assert res.get_json()['details'][0]['field'] == 'weight_category'
    assert client.get(f'/api/matches/{match_id}').get_json()['match']['weight_category'] == '-68kg'

    res = client.post('/api/matches', json=match_payload(red_competitor_name='x' * 128))
    assert res.status_code == 201
