"""Creator endpoints: survey CRUD and results.

All routes need a bearer token and only see the caller's own surveys.
"""
# surveyhub/app/routers/surveys.py
from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from surveyhub.app.core.security import get_current_user
from surveyhub.app.schemas.results import SurveyResultsOut
from surveyhub.app.schemas.survey import SurveyCreate, SurveyOut, SurveyUpdate
from surveyhub.app.services import surveys as survey_service
from surveyhub.app.services.export import export_results_to_csv
from surveyhub.app.services.results import aggregate_results
from surveyhub.db.models import User
from surveyhub.db.session import get_db

router = APIRouter(prefix="/surveys", tags=["surveys"])


@router.post("", response_model=SurveyOut, status_code=status.HTTP_201_CREATED)
def create_survey(payload: SurveyCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return survey_service.create_survey(db, payload, user.user_id)


@router.get("", response_model=List[SurveyOut])
def list_surveys(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return survey_service.list_surveys(db, user.user_id)


@router.get("/{survey_id}", response_model=SurveyOut)
def get_survey(survey_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return survey_service.get_owned_survey(db, survey_id, user.user_id)


@router.patch("/{survey_id}", response_model=SurveyOut)
def update_survey(
    survey_id: str,
    patch: SurveyUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return survey_service.update_survey(db, survey_id, patch, user.user_id)


@router.delete("/{survey_id}")
def delete_survey(survey_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    survey_service.delete_survey(db, survey_id, user.user_id)
    return {"ok": True}


@router.get("/{survey_id}/results", response_model=SurveyResultsOut)
def get_results(survey_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return aggregate_results(db, survey_id, user.user_id)


@router.get("/{survey_id}/results/csv")
def get_results_csv(survey_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Download per-option counts and open answers as CSV"""
    results = aggregate_results(db, survey_id, user.user_id)
    return Response(
        content=export_results_to_csv(results),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=survey_{survey_id}_results.csv"},
    )
