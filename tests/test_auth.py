from uuid import uuid4

from sqlalchemy.exc import OperationalError

from app.services import settings_service


def _register(client, email=None):
    return client.post('/api/v1/auth/register', json={'email': email or f"{uuid4()}@b.com", 'password': 'secret123'})


def test_register_login_refresh_logout(client):
    email = f"{uuid4()}@b.com"
    r = _register(client, email)
    assert r.status_code == 201
    assert r.json()['role'] == 'user'

    login = client.post('/api/v1/auth/login', json={'email': email, 'password': 'secret123'})
    assert login.status_code == 200
    refresh_token = login.json()['refresh_token']

    refresh = client.post('/api/v1/auth/refresh', json={'refresh_token': refresh_token})
    assert refresh.status_code == 200

    reused = client.post('/api/v1/auth/refresh', json={'refresh_token': refresh_token})
    assert reused.status_code == 401

    logout = client.post('/api/v1/auth/logout', json={'refresh_token': refresh.json()['refresh_token']})
    assert logout.json() == {'status': 'ok'}


def test_register_rejects_duplicate_email(client):
    email = f"{uuid4()}@b.com"
    _register(client, email)
    assert _register(client, email).status_code == 400


def test_login_errors(client):
    missing = client.post('/api/v1/auth/login', json={'email': 'missing@b.com', 'password': 'secret123'})
    assert missing.status_code == 401
    assert missing.json()['detail'] == 'Account not found'

    email = f"{uuid4()}@b.com"
    _register(client, email)
    wrong = client.post('/api/v1/auth/login', json={'email': email, 'password': 'wrongpass'})
    assert wrong.status_code == 401
    assert wrong.json()['detail'] == 'Wrong password'


def test_refresh_token_cannot_be_used_as_access_token(client):
    email = f"{uuid4()}@b.com"
    _register(client, email)
    tokens = client.post('/api/v1/auth/login', json={'email': email, 'password': 'secret123'}).json()
    headers = {'Authorization': f"Bearer {tokens['refresh_token']}"}
    assert client.get('/api/v1/me', headers=headers).status_code == 401


def test_beta_status_defaults_to_open(client):
    response = client.get('/api/v1/auth/beta-status')
    assert response.status_code == 200
    assert response.json()['beta_enabled'] is False
    assert response.json()['registration_open'] is True


def test_beta_limit_closes_registration(client, admin_headers):
    _, admin = admin_headers()
    client.patch('/api/v1/admin/settings', json={'beta_enabled': True, 'max_beta_users': 2}, headers=admin)

    assert _register(client).status_code == 201
    status = client.get('/api/v1/auth/beta-status').json()
    assert status == {'beta_enabled': True, 'registration_open': False, 'current_users': 2, 'max_users': 2}

    blocked = _register(client)
    assert blocked.status_code == 403


def test_beta_status_falls_back_to_open_on_failure(client, admin_headers, monkeypatch):
    _, admin = admin_headers()
    client.patch('/api/v1/admin/settings', json={'beta_enabled': True, 'max_beta_users': 1}, headers=admin)

    def _db_down(session):
        raise OperationalError('SELECT', {}, Exception('connection refused'))

    monkeypatch.setattr(settings_service, 'find_settings', _db_down)

    response = client.get('/api/v1/auth/beta-status')
    assert response.status_code == 200
    assert response.json()['registration_open'] is True


def test_back_to_back_logins_issue_distinct_tokens(client):
    email = f"{uuid4()}@b.com"
    _register(client, email)

    first = client.post('/api/v1/auth/login', json={'email': email, 'password': 'secret123'})
    second = client.post('/api/v1/auth/login', json={'email': email, 'password': 'secret123'})

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()['refresh_token'] != second.json()['refresh_token']
    assert first.json()['access_token'] != second.json()['access_token']


def test_rapid_refreshes_rotate_the_token(client):
    email = f"{uuid4()}@b.com"
    _register(client, email)
    token = client.post('/api/v1/auth/login', json={'email': email, 'password': 'secret123'}).json()['refresh_token']

    for _ in range(2):
        rotated = client.post('/api/v1/auth/refresh', json={'refresh_token': token})
        assert rotated.status_code == 200
        new_token = rotated.json()['refresh_token']
        assert new_token != token
        assert client.post('/api/v1/auth/refresh', json={'refresh_token': token}).status_code == 401
        token = new_token
