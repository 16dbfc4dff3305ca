from sqlalchemy.exc import OperationalError

from app.api.v1 import feedback as feedback_routes
from app.api.v1 import notifications as notification_routes
from app.core.errors import GENERIC_ERROR_DETAIL


def _db_down(*args, **kwargs):
    raise OperationalError('SELECT count(*)', {}, Exception('connection refused'))


def test_notification_count_failure_is_a_generic_500(client, user_headers, monkeypatch):
    _, headers = user_headers()
    monkeypatch.setattr(notification_routes, 'count_unread_notifications', _db_down)

    response = client.get('/api/v1/notifications/unread-count', headers=headers)

    assert response.status_code == 500
    assert response.json() == {'detail': GENERIC_ERROR_DETAIL}


def test_thread_count_failure_is_a_generic_500(client, user_headers, monkeypatch):
    _, headers = user_headers()
    monkeypatch.setattr(feedback_routes, 'count_unread_threads_for_user', _db_down)

    response = client.get('/api/v1/feedback/user-unread-count', headers=headers)

    assert response.status_code == 500
    assert 'connection refused' not in response.text


def test_unauthenticated_request_never_reaches_the_counter(client, monkeypatch):
    calls = []
    monkeypatch.setattr(notification_routes, 'count_unread_notifications', lambda *args: calls.append(args) or 0)

    response = client.get('/api/v1/notifications/unread-count')

    assert response.status_code == 401
    assert calls == []
