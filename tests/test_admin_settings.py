def test_settings_are_created_with_defaults(client, admin_headers):
    _, admin = admin_headers()
    response = client.get('/api/v1/admin/settings', headers=admin)
    assert response.status_code == 200
    body = response.json()
    assert body['feedback_system_enabled'] is True
    assert body['beta_enabled'] is False
    assert body['max_beta_users'] == 10


def test_patch_settings_is_partial(client, admin_headers):
    admin_id, admin = admin_headers()
    first = client.patch(
        '/api/v1/admin/settings',
        json={'beta_enabled': True, 'beta_end_date': '2026-12-31T00:00:00Z'},
        headers=admin,
    )
    assert first.status_code == 200
    assert first.json()['beta_end_date'].startswith('2026-12-31')
    assert first.json()['updated_by'] == admin_id

    second = client.patch('/api/v1/admin/settings', json={'max_beta_users': 50}, headers=admin)
    body = second.json()
    assert body['beta_enabled'] is True
    assert body['max_beta_users'] == 50
    assert body['beta_end_date'] is not None

    cleared = client.patch('/api/v1/admin/settings', json={'beta_end_date': None}, headers=admin)
    assert cleared.json()['beta_end_date'] is None


def test_settings_are_admin_only(client, user_headers):
    _, user = user_headers()
    assert client.get('/api/v1/admin/settings', headers=user).status_code == 403
    assert client.patch('/api/v1/admin/settings', json={'beta_enabled': True}, headers=user).status_code == 403
    assert client.get('/api/v1/admin/settings').status_code == 401
