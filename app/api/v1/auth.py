from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlmodel import Session
from app.db.session import get_session
from app.schemas.auth import BetaStatusOut, LoginRequest, RegisterRequest, RefreshRequest, TokenResponse, LogoutRequest
from app.schemas.user import UserOut
from app.services.auth_service import (
    create_access_token,
    create_refresh_token,
    create_user,
    revoke_refresh_token,
    store_refresh_token,
    validate_refresh_token,
    verify_password,
)
from app.services.settings_service import get_beta_status, registration_limit_reached
from app.services.user_service import get_user_by_email, to_user_out

router = APIRouter(prefix='/auth', tags=['auth'])


@router.get('/beta-status', response_model=BetaStatusOut)
def beta_status(session: Session = Depends(get_session)) -> BetaStatusOut:
    return get_beta_status(session)


@router.post('/register', response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, session: Session = Depends(get_session)) -> UserOut:
    if registration_limit_reached(session):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Beta user limit reached')
    if get_user_by_email(session, payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Email already registered')
    user = create_user(session, payload.email, payload.password, name=payload.name, company=payload.company)
    logger.info('user_registered', user_id=user.id)
    return to_user_out(user)


@router.post('/login', response_model=TokenResponse)
def login(payload: LoginRequest, session: Session = Depends(get_session)) -> TokenResponse:
    user = get_user_by_email(session, payload.email)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Account not found')
    if not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Wrong password')
    access_token = create_access_token(user.id)
    refresh_token, expires_at = create_refresh_token(user.id)
    store_refresh_token(session, refresh_token, user.id, expires_at)
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


@router.post('/refresh', response_model=TokenResponse)
def refresh(payload: RefreshRequest, session: Session = Depends(get_session)) -> TokenResponse:
    user_id = validate_refresh_token(session, payload.refresh_token)
    revoke_refresh_token(session, payload.refresh_token)
    access_token = create_access_token(user_id)
    refresh_token, expires_at = create_refresh_token(user_id)
    store_refresh_token(session, refresh_token, user_id, expires_at)
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


@router.post('/logout')
def logout(payload: LogoutRequest, session: Session = Depends(get_session)) -> dict:
    revoke_refresh_token(session, payload.refresh_token)
    return {'status': 'ok'}
