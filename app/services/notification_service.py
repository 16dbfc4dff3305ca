from typing import Optional
from sqlmodel import Session, select
from app.models.notification import Notification
from app.schemas.notification import NotificationCreate, NotificationUpdate


def create_notification(session: Session, user_id: str, payload: NotificationCreate) -> Notification:
    record = Notification(
        user_id=user_id,
        type=payload.type,
        title=payload.title,
        message=payload.message,
        link=payload.link,
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def list_notifications(
    session: Session,
    user_id: str,
    unread_only: bool = False,
    limit: Optional[int] = 50,
    offset: int = 0,
) -> list[Notification]:
    statement = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        statement = statement.where(Notification.read.is_(False))
    statement = statement.order_by(Notification.created_at.desc())
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def get_notification(session: Session, notification_id: str) -> Optional[Notification]:
    return session.exec(select(Notification).where(Notification.id == notification_id)).first()


def update_notification(session: Session, record: Notification, payload: NotificationUpdate) -> Notification:
    record.read = payload.read
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def mark_all_read(session: Session, user_id: str) -> int:
    notifications = session.exec(
        select(Notification).where((Notification.user_id == user_id) & (Notification.read.is_(False)))
    ).all()
    for record in notifications:
        record.read = True
        session.add(record)
    session.commit()
    return len(notifications)


def delete_notification(session: Session, record: Notification) -> None:
    session.delete(record)
    session.commit()


def notify_users(
    session: Session,
    user_ids: list[str],
    type: str,
    title: str,
    message: str,
    link: Optional[str] = None,
) -> list[Notification]:
    records = [
        Notification(user_id=user_id, type=type, title=title, message=message, link=link)
        for user_id in dict.fromkeys(user_ids)
    ]
    if not records:
        return []
    session.add_all(records)
    session.commit()
    return records
