from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from app.core.context import RequestContext
from app.db.session import get_session
from app.models.notification import Notification
from app.schemas.common import CountOut
from app.schemas.notification import NotificationCreate, NotificationOut, NotificationUpdate
from app.services.auth_service import get_request_context
from app.services.notification_service import (
    create_notification,
    get_notification,
    list_notifications,
    mark_all_read,
    delete_notification,
    update_notification,
)
from app.services.unread_service import count_unread_notifications

router = APIRouter(prefix='/notifications', tags=['notifications'])


def _to_notification_out(record: Notification) -> NotificationOut:
    return NotificationOut(
        id=record.id,
        type=record.type,
        title=record.title,
        message=record.message,
        link=record.link,
        read=record.read,
        created_at=record.created_at,
    )


def _ensure_owned(session: Session, notification_id: str, ctx: RequestContext) -> Notification:
    record = get_notification(session, notification_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Notification not found')
    if record.user_id != ctx.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Not allowed')
    return record


@router.get('/unread-count', response_model=CountOut)
def unread_count(
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_request_context),
) -> CountOut:
    return CountOut(count=count_unread_notifications(session, ctx))


@router.post('', response_model=NotificationOut, status_code=status.HTTP_201_CREATED)
def create_notification_endpoint(
    payload: NotificationCreate,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_request_context),
) -> NotificationOut:
    record = create_notification(session, ctx.user_id, payload)
    return _to_notification_out(record)


@router.get('', response_model=list[NotificationOut])
def list_notifications_endpoint(
    unread_only: bool = False,
    limit: int = 10,
    offset: int = 0,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_request_context),
) -> list[NotificationOut]:
    notifications = list_notifications(
        session,
        ctx.user_id,
        unread_only=unread_only,
        limit=limit,
        offset=offset,
    )
    return [_to_notification_out(record) for record in notifications]


@router.patch('/{notification_id}', response_model=NotificationOut)
def update_notification_endpoint(
    notification_id: str,
    payload: NotificationUpdate,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_request_context),
) -> NotificationOut:
    record = _ensure_owned(session, notification_id, ctx)
    record = update_notification(session, record, payload)
    return _to_notification_out(record)


@router.post('/read-all')
def mark_all_notifications_read(
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    count = mark_all_read(session, ctx.user_id)
    return {'status': 'ok', 'updated': count}


@router.delete('/{notification_id}')
def delete_notification_endpoint(
    notification_id: str,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    record = _ensure_owned(session, notification_id, ctx)
    delete_notification(session, record)
    return {'status': 'ok'}
