"""Unread-activity tracking for feedback threads and the notification inbox.

A feedback thread is unread for one party when the other party wrote a
message after that party's watermark (``last_user_read_at`` for the owner,
``last_admin_read_at`` for the admin side). Only the newest counterpart
message matters, so per thread we read a single ``max(created_at)`` instead
of the message history.

Notifications carry a plain ``read`` flag and are counted directly.

Every count is recomputed from the database on each call. Persistence
errors are not caught here: callers get the ``SQLAlchemyError`` and the
application boundary turns it into a 500.
"""
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from app.core.context import RequestContext
from app.models.base import ensure_utc
from app.models.enums import AuthorType
from app.models.feedback import Feedback
from app.models.feedback_message import FeedbackMessage
from app.models.notification import Notification


def is_unread(last_read_at: Optional[datetime], latest_counterpart_at: Optional[datetime]) -> bool:
    if latest_counterpart_at is None:
        return False
    if last_read_at is None:
        return True
    # strictly after: a message stamped exactly at the watermark has been seen
    return ensure_utc(latest_counterpart_at) > ensure_utc(last_read_at)


def latest_message_times(
    session: Session,
    feedback_ids: Iterable[str],
    author_type: AuthorType,
) -> dict[str, datetime]:
    """Newest message time per thread for one author side."""
    ids = list(feedback_ids)
    if not ids:
        return {}
    statement = (
        select(FeedbackMessage.feedback_id, func.max(FeedbackMessage.created_at))
        .where(FeedbackMessage.feedback_id.in_(ids))
        .where(FeedbackMessage.author_type == author_type)
        .group_by(FeedbackMessage.feedback_id)
    )
    return {feedback_id: latest for feedback_id, latest in session.exec(statement).all() if latest is not None}


def is_thread_unread_for_user(session: Session, record: Feedback) -> bool:
    latest = latest_message_times(session, [record.id], AuthorType.ADMIN).get(record.id)
    return is_unread(record.last_user_read_at, latest)


def count_unread_threads_for_user(session: Session, ctx: RequestContext) -> int:
    rows = session.exec(
        select(Feedback.id, Feedback.last_user_read_at).where(Feedback.user_id == ctx.user_id)
    ).all()
    if not rows:
        return 0
    latest_admin = latest_message_times(session, [feedback_id for feedback_id, _ in rows], AuthorType.ADMIN)
    return sum(1 for feedback_id, watermark in rows if is_unread(watermark, latest_admin.get(feedback_id)))


def count_unread_threads_for_admin(session: Session, ctx: RequestContext) -> int:
    if not ctx.is_admin:
        raise PermissionError('Admin only')

    never_viewed = session.exec(
        select(func.count()).select_from(Feedback).where(Feedback.viewed_at.is_(None))
    ).one()

    rows = session.exec(
        select(Feedback.id, Feedback.last_admin_read_at).where(Feedback.viewed_at.is_not(None))
    ).all()
    latest_user = latest_message_times(session, [feedback_id for feedback_id, _ in rows], AuthorType.USER)
    with_replies = sum(1 for feedback_id, watermark in rows if is_unread(watermark, latest_user.get(feedback_id)))

    return int(never_viewed or 0) + with_replies


def count_unread_notifications(session: Session, ctx: RequestContext) -> int:
    statement = (
        select(func.count())
        .select_from(Notification)
        .where((Notification.user_id == ctx.user_id) & (Notification.read.is_(False)))
    )
    return int(session.exec(statement).one() or 0)
