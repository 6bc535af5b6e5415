# surveyhub/app/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from surveyhub.app.schemas.user import RegisterOut, TokenOut, UserLogin, UserOut, UserRegister
from surveyhub.app.services.accounts import authenticate_user, issue_access_token, register_user
from surveyhub.db.session import get_db

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterOut, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """Create a creator account"""
    user = register_user(db, user_data)
    return RegisterOut(message="User registered successfully", user=UserOut.model_validate(user))


@router.post("/login", response_model=TokenOut)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token"""
    user = authenticate_user(db, credentials.email, credentials.password)
    return TokenOut(access_token=issue_access_token(user), user=UserOut.model_validate(user))
