# surveyhub/app/routers/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from surveyhub.app.core.security import get_current_user
from surveyhub.app.schemas.user import UserOut, UserStatsOut
from surveyhub.app.services.results import get_user_stats
from surveyhub.db.models import User
from surveyhub.db.session import get_db

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=UserOut)
def get_profile(user: User = Depends(get_current_user)):
    return user


@router.get("/stats", response_model=UserStatsOut)
def get_stats(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Totals and most recent surveys of the caller"""
    return get_user_stats(db, user.user_id)
