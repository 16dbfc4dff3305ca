from typing import Callable, Optional
from sqlalchemy import func
from sqlmodel import Session, select

from app.models.enums import UserRole
from app.models.user import User
from app.schemas.user import UserOut, UserUpdate
from app.services.auth_service import create_user


def to_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        name=user.name,
        company=user.company,
        is_active=user.is_active,
        role=user.role,
    )


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email)).first()


def count_users(session: Session) -> int:
    return int(session.exec(select(func.count()).select_from(User)).one() or 0)


def list_admin_ids(session: Session) -> list[str]:
    statement = select(User.id).where((User.role == UserRole.ADMIN) & (User.is_active.is_(True)))
    return list(session.exec(statement).all())


def update_user(session: Session, user: User, payload: UserUpdate) -> User:
    data = payload.model_dump(exclude_unset=True)
    email = data.get('email')
    if email is not None and email != user.email:
        existing = get_user_by_email(session, email)
        if existing and existing.id != user.id:
            raise ValueError('Email already registered')
        user.email = email
    if 'name' in data:
        user.name = data['name']
    if 'company' in data:
        user.company = data['company']

    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def ensure_admin(
    session: Session,
    email: str,
    password_factory: Callable[[], str],
    name: Optional[str] = None,
) -> tuple[User, bool]:
    """Promote ``email`` to admin, creating the account when it is missing."""
    user = get_user_by_email(session, email)
    if user is None:
        return create_user(session, email, password_factory(), name=name, role=UserRole.ADMIN), True
    user.role = UserRole.ADMIN
    session.add(user)
    session.commit()
    session.refresh(user)
    return user, False
