from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlmodel import Session
from app.core.context import RequestContext
from app.db.session import get_session
from app.models.enums import FeedbackStatus, FeedbackType
from app.models.feedback import Feedback
from app.models.feedback_message import FeedbackMessage
from app.models.user import User
from app.schemas.common import CountOut
from app.schemas.feedback import (
    FeedbackCreate,
    FeedbackDetailOut,
    FeedbackMessageCreate,
    FeedbackMessageOut,
    FeedbackOut,
    FeedbackUpdate,
)
from app.services.auth_service import get_admin_context, get_optional_user, get_request_context
from app.services.feedback_events import on_feedback_created, on_message_created
from app.services.feedback_service import (
    add_message,
    can_access,
    count_messages,
    create_feedback,
    delete_feedback,
    get_feedback,
    list_feedbacks,
    list_messages,
    mark_viewed,
    update_feedback,
)
from app.services.settings_service import is_feedback_enabled
from app.services.unread_service import count_unread_threads_for_admin, count_unread_threads_for_user

router = APIRouter(prefix='/feedback', tags=['feedback'])


def _to_message_out(entry: FeedbackMessage) -> FeedbackMessageOut:
    return FeedbackMessageOut(
        id=entry.id,
        feedback_id=entry.feedback_id,
        author_id=entry.author_id,
        author_type=entry.author_type,
        message=entry.message,
        created_at=entry.created_at,
    )


def _to_feedback_out(record: Feedback, message_count: int = 0) -> FeedbackOut:
    return FeedbackOut(
        id=record.id,
        user_id=record.user_id,
        type=record.type,
        severity=record.severity,
        title=record.title,
        message=record.message,
        status=record.status,
        priority=record.priority,
        admin_note=record.admin_note,
        linked_issue=record.linked_issue,
        screenshot=record.screenshot,
        is_anonymous=record.is_anonymous,
        page_url=record.page_url,
        page_title=record.page_title,
        device_type=record.device_type,
        viewed_at=record.viewed_at,
        last_user_read_at=record.last_user_read_at,
        last_admin_read_at=record.last_admin_read_at,
        resolved_at=record.resolved_at,
        created_at=record.created_at,
        message_count=message_count,
    )


def _ensure_feedback(session: Session, feedback_id: str, ctx: RequestContext) -> Feedback:
    record = get_feedback(session, feedback_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Feedback not found')
    if not can_access(record, ctx):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Not allowed')
    return record


def _ensure_admin_feedback(session: Session, feedback_id: str) -> Feedback:
    record = get_feedback(session, feedback_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Feedback not found')
    return record


@router.get('/user-unread-count', response_model=CountOut)
def user_unread_count(
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_request_context),
) -> CountOut:
    return CountOut(count=count_unread_threads_for_user(session, ctx))


@router.get('/unread-count', response_model=CountOut)
def admin_unread_count(
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_admin_context),
) -> CountOut:
    return CountOut(count=count_unread_threads_for_admin(session, ctx))


@router.post('', response_model=FeedbackOut, status_code=status.HTTP_201_CREATED)
def create_feedback_endpoint(
    payload: FeedbackCreate,
    session: Session = Depends(get_session),
    user: Optional[User] = Depends(get_optional_user),
) -> FeedbackOut:
    if not is_feedback_enabled(session):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Feedback system is disabled')
    record = create_feedback(session, user.id if user else None, payload)
    logger.info('feedback_created', feedback_id=record.id, anonymous=record.user_id is None)
    on_feedback_created(session, record)
    return _to_feedback_out(record)


@router.get('', response_model=list[FeedbackOut])
def list_feedbacks_endpoint(
    status: Optional[FeedbackStatus] = None,
    type: Optional[FeedbackType] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_request_context),
) -> list[FeedbackOut]:
    records = list_feedbacks(session, ctx, status=status, type=type, limit=limit, offset=offset)
    counts = count_messages(session, [record.id for record in records])
    return [_to_feedback_out(record, counts.get(record.id, 0)) for record in records]


@router.get('/{feedback_id}', response_model=FeedbackDetailOut)
def get_feedback_endpoint(
    feedback_id: str,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_request_context),
) -> FeedbackDetailOut:
    record = _ensure_feedback(session, feedback_id, ctx)
    record = mark_viewed(session, record, ctx)
    messages = [_to_message_out(entry) for entry in list_messages(session, record.id)]
    return FeedbackDetailOut(
        **_to_feedback_out(record, len(messages)).model_dump(),
        messages=messages,
    )


@router.patch('/{feedback_id}', response_model=FeedbackOut)
def update_feedback_endpoint(
    feedback_id: str,
    payload: FeedbackUpdate,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_admin_context),
) -> FeedbackOut:
    record = _ensure_admin_feedback(session, feedback_id)
    record = update_feedback(session, record, payload)
    logger.info('feedback_updated', feedback_id=record.id, status=record.status.value, by=ctx.user_id)
    counts = count_messages(session, [record.id])
    return _to_feedback_out(record, counts.get(record.id, 0))


@router.delete('/{feedback_id}')
def delete_feedback_endpoint(
    feedback_id: str,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_admin_context),
) -> dict:
    record = _ensure_admin_feedback(session, feedback_id)
    delete_feedback(session, record)
    logger.info('feedback_deleted', feedback_id=feedback_id, by=ctx.user_id)
    return {'status': 'ok'}


@router.get('/{feedback_id}/messages', response_model=list[FeedbackMessageOut])
def list_feedback_messages(
    feedback_id: str,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_request_context),
) -> list[FeedbackMessageOut]:
    record = _ensure_feedback(session, feedback_id, ctx)
    return [_to_message_out(entry) for entry in list_messages(session, record.id)]


@router.post('/{feedback_id}/messages', response_model=FeedbackMessageOut, status_code=status.HTTP_201_CREATED)
def create_feedback_message(
    feedback_id: str,
    payload: FeedbackMessageCreate,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_request_context),
) -> FeedbackMessageOut:
    record = _ensure_feedback(session, feedback_id, ctx)
    entry = add_message(session, record, ctx, payload.message)
    on_message_created(session, record, entry, ctx)
    return _to_message_out(entry)
