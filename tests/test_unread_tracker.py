from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import Session

from app.core.context import RequestContext
from app.models.enums import AuthorType, FeedbackSeverity, FeedbackType, UserRole
from app.models.feedback import Feedback
from app.models.feedback_message import FeedbackMessage
from app.models.notification import Notification
from app.services.unread_service import (
    count_unread_notifications,
    count_unread_threads_for_admin,
    count_unread_threads_for_user,
    is_unread,
    latest_message_times,
)

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
OWNER = RequestContext(user_id='owner-1')
ADMIN = RequestContext(user_id='admin-1', role=UserRole.ADMIN)


def at(seconds: int) -> datetime:
    return T0 + timedelta(seconds=seconds)


def _thread(session: Session, user_id='owner-1', last_user_read_at=None, last_admin_read_at=None, viewed_at=None):
    record = Feedback(
        user_id=user_id,
        type=FeedbackType.BUG,
        severity=FeedbackSeverity.LOW,
        title='Broken export',
        message='PDF export fails',
        last_user_read_at=last_user_read_at,
        last_admin_read_at=last_admin_read_at,
        viewed_at=viewed_at,
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def _message(session: Session, record: Feedback, author_type: AuthorType, created_at: datetime) -> None:
    author_id = 'admin-1' if author_type == AuthorType.ADMIN else record.user_id or 'anon'
    session.add(
        FeedbackMessage(
            feedback_id=record.id,
            author_id=author_id,
            author_type=author_type,
            message='reply',
            created_at=created_at,
        )
    )
    session.commit()


def test_is_unread_requires_counterpart_message():
    assert is_unread(None, None) is False
    assert is_unread(at(5), None) is False


def test_is_unread_without_watermark():
    assert is_unread(None, at(10)) is True


def test_is_unread_uses_strict_inequality():
    assert is_unread(at(10), at(10)) is False
    assert is_unread(at(9), at(10)) is True
    assert is_unread(at(11), at(10)) is False


def test_is_unread_treats_naive_values_as_utc():
    naive = at(10).replace(tzinfo=None)
    assert is_unread(naive, at(10)) is False
    assert is_unread(at(5), naive) is True


def test_scenario_three_threads_counts_one(db):
    thread_a = _thread(db, last_user_read_at=at(5))
    _message(db, thread_a, AuthorType.ADMIN, at(10))
    thread_b = _thread(db, last_user_read_at=at(15))
    _message(db, thread_b, AuthorType.ADMIN, at(10))
    thread_c = _thread(db)
    _message(db, thread_c, AuthorType.USER, at(20))

    assert count_unread_threads_for_user(db, OWNER) == 1


def test_threads_without_admin_messages_are_never_unread(db):
    _thread(db)
    user_only = _thread(db, last_user_read_at=None)
    _message(db, user_only, AuthorType.USER, at(1))
    _message(db, user_only, AuthorType.USER, at(2))

    assert count_unread_threads_for_user(db, OWNER) == 0


def test_equal_timestamp_counts_as_read(db):
    record = _thread(db, last_user_read_at=at(10))
    _message(db, record, AuthorType.ADMIN, at(10))

    assert count_unread_threads_for_user(db, OWNER) == 0


def test_only_latest_admin_message_matters(db):
    record = _thread(db, last_user_read_at=at(15))
    _message(db, record, AuthorType.ADMIN, at(10))
    _message(db, record, AuthorType.ADMIN, at(20))
    _message(db, record, AuthorType.USER, at(30))

    latest = latest_message_times(db, [record.id], AuthorType.ADMIN)
    assert is_unread(at(15), latest[record.id])
    assert count_unread_threads_for_user(db, OWNER) == 1


def test_watermark_then_new_admin_message_reinstates_unread(db):
    record = _thread(db)
    _message(db, record, AuthorType.ADMIN, at(10))
    assert count_unread_threads_for_user(db, OWNER) == 1

    record.last_user_read_at = at(12)
    db.add(record)
    db.commit()
    assert count_unread_threads_for_user(db, OWNER) == 0

    _message(db, record, AuthorType.ADMIN, at(13))
    assert count_unread_threads_for_user(db, OWNER) == 1


def test_count_is_scoped_to_the_caller(db):
    other = _thread(db, user_id='someone-else')
    _message(db, other, AuthorType.ADMIN, at(10))

    assert count_unread_threads_for_user(db, OWNER) == 0
    assert count_unread_threads_for_user(db, RequestContext(user_id='someone-else')) == 1


def test_admin_count_includes_unviewed_and_new_user_replies(db):
    _thread(db)  # never viewed by an admin
    replied = _thread(db, viewed_at=at(0), last_admin_read_at=at(5))
    _message(db, replied, AuthorType.USER, at(10))
    seen = _thread(db, viewed_at=at(0), last_admin_read_at=at(20))
    _message(db, seen, AuthorType.USER, at(10))
    admin_only = _thread(db, viewed_at=at(0), last_admin_read_at=at(5))
    _message(db, admin_only, AuthorType.ADMIN, at(10))

    assert count_unread_threads_for_admin(db, ADMIN) == 2


def test_admin_count_rejects_regular_users(db):
    with pytest.raises(PermissionError):
        count_unread_threads_for_admin(db, OWNER)


def test_notification_count_tracks_read_flag(db):
    rows = [
        Notification(user_id='owner-1', type='system', title=f"n{index}", message='hello')
        for index in range(3)
    ]
    rows.append(Notification(user_id='owner-1', type='system', title='old', message='hello', read=True))
    rows.append(Notification(user_id='someone-else', type='system', title='other', message='hello'))
    db.add_all(rows)
    db.commit()

    assert count_unread_notifications(db, OWNER) == 3

    rows[0].read = True
    db.add(rows[0])
    db.commit()
    assert count_unread_notifications(db, OWNER) == 2

    rows[0].read = False
    db.add(rows[0])
    db.commit()
    assert count_unread_notifications(db, OWNER) == 3
