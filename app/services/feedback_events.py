"""In-app notifications emitted on feedback activity.

Emitting is best effort: a failure is logged and rolled back so the request
that created the feedback or the message still succeeds.
"""
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.context import RequestContext
from app.models.enums import AuthorType, NotificationType
from app.models.feedback import Feedback
from app.models.feedback_message import FeedbackMessage
from app.services.notification_service import notify_users
from app.services.user_service import list_admin_ids

PREVIEW_LENGTH = 140


def _preview(text: str) -> str:
    text = ' '.join(text.split())
    if len(text) <= PREVIEW_LENGTH:
        return text
    return text[: PREVIEW_LENGTH - 3].rstrip() + '...'


def feedback_link(feedback_id: str) -> str:
    return f"/feedback/{feedback_id}"


def _emit(session: Session, event: str, recipients: list[str], **fields) -> int:
    try:
        records = notify_users(session, recipients, **fields)
    except SQLAlchemyError:
        session.rollback()
        logger.exception('feedback_event_failed', event=event, recipients=len(recipients))
        return 0
    logger.info('feedback_event_sent', event=event, recipients=len(records))
    return len(records)


def on_feedback_created(session: Session, record: Feedback) -> int:
    recipients = [admin_id for admin_id in list_admin_ids(session) if admin_id != record.user_id]
    if not recipients:
        logger.warning('feedback_event_no_admins', feedback_id=record.id)
        return 0
    return _emit(
        session,
        NotificationType.FEEDBACK_CREATED.value,
        recipients,
        type=NotificationType.FEEDBACK_CREATED.value,
        title=f"New feedback: {record.title}",
        message=_preview(record.message),
        link=feedback_link(record.id),
    )


def on_message_created(session: Session, record: Feedback, entry: FeedbackMessage, ctx: RequestContext) -> int:
    if entry.author_type == AuthorType.ADMIN:
        # anonymous threads have nobody to tell
        recipients = [record.user_id] if record.user_id and record.user_id != ctx.user_id else []
    else:
        recipients = [admin_id for admin_id in list_admin_ids(session) if admin_id != ctx.user_id]
    if not recipients:
        return 0
    return _emit(
        session,
        NotificationType.FEEDBACK_MESSAGE.value,
        recipients,
        type=NotificationType.FEEDBACK_MESSAGE.value,
        title=f"New reply on: {record.title}",
        message=_preview(entry.message),
        link=feedback_link(record.id),
    )
