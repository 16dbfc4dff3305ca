from fastapi import APIRouter, Depends
from loguru import logger
from sqlmodel import Session
from app.core.context import RequestContext
from app.db.session import get_session
from app.models.system_settings import SystemSettings
from app.schemas.system_settings import SystemSettingsOut, SystemSettingsUpdate
from app.services.auth_service import get_admin_context
from app.services.settings_service import get_or_create_settings, update_settings

router = APIRouter(prefix='/admin', tags=['admin'])


def _to_settings_out(record: SystemSettings) -> SystemSettingsOut:
    return SystemSettingsOut(
        id=record.id,
        feedback_system_enabled=record.feedback_system_enabled,
        beta_enabled=record.beta_enabled,
        beta_end_date=record.beta_end_date,
        max_beta_users=record.max_beta_users,
        updated_by=record.updated_by,
        updated_at=record.updated_at,
    )


@router.get('/settings', response_model=SystemSettingsOut)
def get_settings_endpoint(
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_admin_context),
) -> SystemSettingsOut:
    return _to_settings_out(get_or_create_settings(session))


@router.patch('/settings', response_model=SystemSettingsOut)
def update_settings_endpoint(
    payload: SystemSettingsUpdate,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_admin_context),
) -> SystemSettingsOut:
    record = update_settings(session, payload, ctx.user_id)
    logger.info('system_settings_updated', by=ctx.user_id, fields=sorted(payload.model_dump(exclude_unset=True)))
    return _to_settings_out(record)
