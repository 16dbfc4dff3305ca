import threading

import pytest
import requests

from app.clients.unread_poller import UnreadCountError, UnreadCountPoller, http_fetcher


class _FakeResponse:
    def __init__(self, status_code: int, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError('no json')
        return self._payload


class _FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers, timeout))
        if self.error:
            raise self.error
        return self.response


def test_http_fetcher_reads_count():
    session = _FakeSession(_FakeResponse(200, {'count': 4}))
    fetch = http_fetcher('http://api.local/', '/api/v1/notifications/unread-count', 'tok', session=session)

    assert fetch() == 4
    url, headers, _ = session.calls[0]
    assert url == 'http://api.local/api/v1/notifications/unread-count'
    assert headers == {'Authorization': 'Bearer tok'}


@pytest.mark.parametrize(
    'session',
    [
        _FakeSession(_FakeResponse(401, {'detail': 'Not authenticated'})),
        _FakeSession(_FakeResponse(200, None)),
        _FakeSession(error=requests.ConnectionError('down')),
    ],
)
def test_http_fetcher_raises_unread_count_error(session):
    fetch = http_fetcher('http://api.local', '/x', 'tok', session=session)
    with pytest.raises(UnreadCountError):
        fetch()


def test_poll_once_applies_latest_value():
    values = iter([3, 1])
    updates = []
    poller = UnreadCountPoller(lambda: next(values), interval=5, on_update=updates.append)

    assert poller.poll_once() == 3
    assert poller.poll_once() == 1
    assert poller.count == 1
    assert updates == [3, 1]


def test_poll_failure_keeps_previous_value_and_reports():
    calls = {'n': 0}

    def fetch():
        calls['n'] += 1
        if calls['n'] == 2:
            raise UnreadCountError('unexpected status 500', 500)
        return 2

    errors = []
    poller = UnreadCountPoller(fetch, interval=5, on_error=errors.append)
    poller.poll_once()
    assert poller.poll_once() is None
    assert poller.count == 2
    assert isinstance(errors[0], UnreadCountError)
    assert errors[0].status_code == 500
    assert poller.poll_once() == 2


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        UnreadCountPoller(lambda: 0, interval=0)


def test_default_interval_comes_from_settings():
    from app.core.config import settings

    assert UnreadCountPoller(lambda: 0).interval == settings.UNREAD_POLL_INTERVAL_SECONDS


def test_start_polls_immediately_and_stop_cancels():
    polled = threading.Event()
    poller = UnreadCountPoller(lambda: 7, interval=60, on_update=lambda _: polled.set())

    with poller:
        assert polled.wait(2)
        assert poller.running
    assert not poller.running
    assert poller.count == 7


def test_result_arriving_after_stop_is_dropped():
    release = threading.Event()
    started = threading.Event()
    updates = []

    def slow_fetch():
        started.set()
        release.wait(2)
        return 9

    poller = UnreadCountPoller(slow_fetch, interval=60, on_update=updates.append)
    poller.start()
    assert started.wait(2)
    poller.stop(timeout=0)
    release.set()
    poller.stop(timeout=2)

    assert updates == []
    assert poller.count is None


def test_failing_update_callback_does_not_stop_polling():
    values = iter([1, 2, 3])
    seen = []

    def on_update(value):
        seen.append(value)
        if value == 1:
            raise RuntimeError('ui gone')

    poller = UnreadCountPoller(lambda: next(values), interval=5, on_update=on_update)

    assert poller.poll_once() == 1
    assert poller.poll_once() == 2
    assert seen == [1, 2]
    assert poller.count == 2


def test_failing_error_callback_is_contained():
    def fetch():
        raise UnreadCountError('unexpected status 503', 503)

    def on_error(exc):
        raise RuntimeError('handler broke')

    poller = UnreadCountPoller(fetch, interval=5, on_error=on_error)

    assert poller.poll_once() is None


def test_background_thread_survives_callback_failure():
    ticks = threading.Event()
    calls = []

    def on_update(value):
        calls.append(value)
        if len(calls) >= 2:
            ticks.set()
        raise RuntimeError('ui gone')

    poller = UnreadCountPoller(lambda: 4, interval=0.01, on_update=on_update)
    with poller:
        assert ticks.wait(2)
        assert poller.running
