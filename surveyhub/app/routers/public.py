"""Anonymous endpoints reached through a survey's public identifier."""
# surveyhub/app/routers/public.py
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from surveyhub.app.schemas.answer import SubmitResponseIn, SubmitResponseOut
from surveyhub.app.schemas.survey import PublicSurveyOut
from surveyhub.app.services.responses import check_duplicate, resolve_client_ip, submit_response
from surveyhub.app.services.surveys import get_public_survey
from surveyhub.db.session import get_db

router = APIRouter(prefix="/surveys/public", tags=["public"])


@router.get("/{public_id}", response_model=PublicSurveyOut)
def get_survey_by_public_id(public_id: str, db: Session = Depends(get_db)):
    return get_public_survey(db, public_id)


@router.post("/{public_id}/responses", response_model=SubmitResponseOut, status_code=status.HTTP_201_CREATED)
def post_response(public_id: str, payload: SubmitResponseIn, request: Request, db: Session = Depends(get_db)):
    response = submit_response(
        db,
        public_id,
        payload,
        ip_address=resolve_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return SubmitResponseOut(response_id=response.response_id)


@router.get("/{public_id}/check-duplicate", response_model=bool)
def get_duplicate_status(
    public_id: str,
    request: Request,
    session_id: str | None = Query(None),
    db: Session = Depends(get_db),
):
    return check_duplicate(db, public_id, session_id, resolve_client_ip(request))
