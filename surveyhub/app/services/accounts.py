# surveyhub/app/services/accounts.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from surveyhub.app.core.errors import Conflict, Unauthorized
from surveyhub.app.core.logging import get_logs_writer_logger
from surveyhub.app.core.security import hash_password, verify_password
from surveyhub.app.schemas.user import UserRegister
from surveyhub.app.services.tokens import sign_token
from surveyhub.db.models import User

logger = get_logs_writer_logger()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def register_user(db: Session, data: UserRegister) -> User:
    if get_user_by_email(db, data.email):
        raise Conflict("Email is already registered")

    user = User(email=data.email, name=data.name, password_hash=hash_password(data.password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User %s registered", user.email)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise Unauthorized("Invalid credentials")
    logger.info("User %s logged in", email)
    return user


def issue_access_token(user: User) -> str:
    return sign_token({"sub": user.user_id, "email": user.email})
