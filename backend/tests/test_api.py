def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_qr_uses_forwarded_host(client):
    res = client.get('/qr', headers={'X-Forwarded-Proto': 'https', 'X-Forwarded-Host': 'party.example'})
    assert res.status_code == 200
    data = res.get_json()
    assert data['url'] == 'https://party.example/phone.html'
    assert data['qr'].startswith('data:image/png;base64,')


def test_qr_defaults_to_request_host(client):
    data = client.get('/qr').get_json()
    assert data['url'] == 'http://localhost/phone.html'


def test_qr_failure_is_reported(client, monkeypatch):
    def boom(*args, **kwargs):
        raise ValueError('encoder exploded')

    monkeypatch.setattr('redlight.routes.make_qr_data_url', boom)
    res = client.get('/qr')
    assert res.status_code == 500
    assert res.get_json() == {'error': 'QR generation failed'}


def test_state_snapshot(client, game_session):
    game_session.join('sid-1', 'Alice')
    res = client.get('/api/state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['phase'] == 'lobby'
    assert state['players'][0]['name'] == 'Alice'
    assert state['leaderboard'][0]['status'] == 'alive'
    assert state['roundHistory'] == []


def test_difficulty_table(client):
    table = client.get('/api/difficulty').get_json()
    assert len(table) == 5
    assert table[0]['label'] == 'WARM-UP'
    assert table[0]['gracePeriodMs'] == 1000
    assert table[-1]['progressRate'] == 0.8


def test_difficulty_cli(flask_app):
    result = flask_app.test_cli_runner().invoke(args=['difficulty'])
    assert result.exit_code == 0
    assert 'WARM-UP' in result.output
    assert 'MAXIMUM' in result.output
