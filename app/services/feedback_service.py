from datetime import datetime
from typing import Optional
from sqlalchemy import func
from sqlmodel import Session, select
from app.core.context import RequestContext
from app.models.base import ensure_utc, utc_now
from app.models.enums import AuthorType, FeedbackStatus, FeedbackType
from app.models.feedback import Feedback
from app.models.feedback_message import FeedbackMessage
from app.schemas.feedback import FeedbackCreate, FeedbackUpdate


def create_feedback(session: Session, owner_id: Optional[str], payload: FeedbackCreate) -> Feedback:
    record = Feedback(
        user_id=None if payload.is_anonymous else owner_id,
        type=payload.type,
        severity=payload.severity,
        title=payload.title,
        message=payload.message,
        screenshot=payload.screenshot,
        is_anonymous=payload.is_anonymous,
        page_url=payload.page_url or '',
        page_title=payload.page_title,
        user_agent=payload.user_agent,
        screen_size=payload.screen_size,
        device_type=payload.device_type,
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def list_feedbacks(
    session: Session,
    ctx: RequestContext,
    status: Optional[FeedbackStatus] = None,
    type: Optional[FeedbackType] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> list[Feedback]:
    statement = select(Feedback)
    if not ctx.is_admin:
        statement = statement.where(Feedback.user_id == ctx.user_id)
    if status is not None:
        statement = statement.where(Feedback.status == status)
    if type is not None:
        statement = statement.where(Feedback.type == type)
    statement = statement.order_by(Feedback.created_at.desc())
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def count_messages(session: Session, feedback_ids: list[str]) -> dict[str, int]:
    if not feedback_ids:
        return {}
    statement = (
        select(FeedbackMessage.feedback_id, func.count())
        .where(FeedbackMessage.feedback_id.in_(feedback_ids))
        .group_by(FeedbackMessage.feedback_id)
    )
    return {feedback_id: int(count) for feedback_id, count in session.exec(statement).all()}


def get_feedback(session: Session, feedback_id: str) -> Optional[Feedback]:
    return session.exec(select(Feedback).where(Feedback.id == feedback_id)).first()


def can_access(record: Feedback, ctx: RequestContext) -> bool:
    return ctx.is_admin or (record.user_id is not None and record.user_id == ctx.user_id)


def _advance(watermark: Optional[datetime], now: datetime) -> datetime:
    if watermark is not None and ensure_utc(watermark) >= now:
        return watermark
    return now


def mark_viewed(session: Session, record: Feedback, ctx: RequestContext) -> Feedback:
    """Advance the caller's watermark to now.

    Admins also stamp ``viewed_at`` the first time the thread is opened.
    Watermarks only move forward.
    """
    now = utc_now()
    if ctx.is_admin:
        if record.viewed_at is None:
            record.viewed_at = now
        record.last_admin_read_at = _advance(record.last_admin_read_at, now)
    else:
        record.last_user_read_at = _advance(record.last_user_read_at, now)
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def update_feedback(session: Session, record: Feedback, payload: FeedbackUpdate) -> Feedback:
    data = payload.model_dump(exclude_unset=True)
    for key in ('status', 'priority', 'admin_note', 'linked_issue'):
        if key in data:
            setattr(record, key, data[key])
    if data.get('status') == FeedbackStatus.RESOLVED:
        record.resolved_at = utc_now()
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def delete_feedback(session: Session, record: Feedback) -> None:
    messages = session.exec(select(FeedbackMessage).where(FeedbackMessage.feedback_id == record.id)).all()
    for message in messages:
        session.delete(message)
    session.delete(record)
    session.commit()


def list_messages(session: Session, feedback_id: str) -> list[FeedbackMessage]:
    statement = (
        select(FeedbackMessage)
        .where(FeedbackMessage.feedback_id == feedback_id)
        .order_by(FeedbackMessage.created_at.asc())
    )
    return list(session.exec(statement).all())


def add_message(session: Session, record: Feedback, ctx: RequestContext, message: str) -> FeedbackMessage:
    author_type = AuthorType.ADMIN if ctx.is_admin else AuthorType.USER
    if author_type == AuthorType.ADMIN and record.status == FeedbackStatus.NEW:
        record.status = FeedbackStatus.IN_PROGRESS
        session.add(record)
    entry = FeedbackMessage(
        feedback_id=record.id,
        author_id=ctx.user_id,
        author_type=author_type,
        message=message,
    )
    session.add(entry)
    session.commit()
    session.refresh(entry)
    return entry
