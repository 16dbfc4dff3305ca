from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from app.core.context import RequestContext
from app.db.session import get_session
from app.models.user import User
from app.schemas.common import UnreadSummaryOut
from app.schemas.user import UserOut, UserUpdate
from app.services.auth_service import get_current_user, get_request_context
from app.services.unread_service import count_unread_notifications, count_unread_threads_for_user
from app.services.user_service import to_user_out, update_user

router = APIRouter(prefix='/me', tags=['me'])


@router.get('', response_model=UserOut)
def get_me(user: User = Depends(get_current_user)) -> UserOut:
    return to_user_out(user)


@router.patch('', response_model=UserOut)
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> UserOut:
    try:
        record = update_user(session, user, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return to_user_out(record)


@router.get('/unread', response_model=UnreadSummaryOut)
def get_my_unread_summary(
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_request_context),
) -> UnreadSummaryOut:
    return UnreadSummaryOut(
        notifications=count_unread_notifications(session, ctx),
        feedback_threads=count_unread_threads_for_user(session, ctx),
    )
