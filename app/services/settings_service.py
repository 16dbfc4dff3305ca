from typing import Optional
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select
from app.core.config import settings
from app.models.system_settings import SystemSettings
from app.schemas.auth import BetaStatusOut
from app.schemas.system_settings import SystemSettingsUpdate
from app.services.user_service import count_users


def find_settings(session: Session) -> Optional[SystemSettings]:
    return session.exec(select(SystemSettings).order_by(SystemSettings.created_at.asc())).first()


def get_or_create_settings(session: Session) -> SystemSettings:
    record = find_settings(session)
    if record:
        return record
    record = SystemSettings(max_beta_users=settings.DEFAULT_MAX_BETA_USERS)
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def update_settings(session: Session, payload: SystemSettingsUpdate, updated_by: str) -> SystemSettings:
    record = get_or_create_settings(session)
    data = payload.model_dump(exclude_unset=True)
    for key in ('feedback_system_enabled', 'beta_enabled', 'max_beta_users'):
        # null leaves the stored value alone
        if data.get(key) is not None:
            setattr(record, key, data[key])
    if 'beta_end_date' in data:
        record.beta_end_date = data['beta_end_date']
    record.updated_by = updated_by
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def is_feedback_enabled(session: Session) -> bool:
    record = find_settings(session)
    return record is None or record.feedback_system_enabled


def registration_limit_reached(session: Session) -> bool:
    record = find_settings(session)
    if not record or not record.beta_enabled:
        return False
    return count_users(session) >= record.max_beta_users


def get_beta_status(session: Session) -> BetaStatusOut:
    """Report whether sign-ups are open.

    Falls back to an open registration when the database cannot be read.
    """
    try:
        record = find_settings(session)
        if not record or not record.beta_enabled:
            return BetaStatusOut(beta_enabled=False, registration_open=True)
        user_count = count_users(session)
    except SQLAlchemyError:
        session.rollback()
        logger.exception('beta_status_failed')
        return BetaStatusOut(beta_enabled=False, registration_open=True)
    return BetaStatusOut(
        beta_enabled=True,
        registration_open=user_count < record.max_beta_users,
        current_users=user_count,
        max_users=record.max_beta_users,
    )
