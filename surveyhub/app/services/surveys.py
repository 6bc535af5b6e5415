"""Creator-facing survey CRUD and the public access gate.

Every creator operation is scoped by `creator_id`: a survey owned by someone
else behaves exactly like a missing one.
"""
# surveyhub/app/services/surveys.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from surveyhub.app.core.errors import NotFound
from surveyhub.app.core.logging import get_logs_writer_logger
from surveyhub.app.schemas.survey import SurveyCreate, SurveyUpdate
from surveyhub.db.models import Survey, Question, QuestionOption

logger = get_logs_writer_logger()

# columns that cannot be cleared through a patch
_NON_NULLABLE_FIELDS = {"title", "allow_multiple_responses", "is_active"}


def _survey_query():
    return select(Survey).options(
        selectinload(Survey.questions).selectinload(Question.options),
        selectinload(Survey.responses),
    )


def create_survey(db: Session, data: SurveyCreate, creator_id: str) -> Survey:
    survey = Survey(
        title=data.title,
        description=data.description or "",
        allow_multiple_responses=data.allow_multiple_responses,
        creator_id=creator_id,
    )

    for i, question_data in enumerate(data.questions):
        question = Question(
            question_text=question_data.question_text,
            question_type=question_data.question_type,
            is_required=question_data.is_required,
            position=question_data.position if question_data.position is not None else i,
            sequence=i,
        )
        for j, option_data in enumerate(question_data.options or []):
            question.options.append(QuestionOption(
                option_text=option_data.option_text,
                position=option_data.position if option_data.position is not None else j,
                sequence=j,
            ))
        survey.questions.append(question)

    db.add(survey)
    db.commit()
    logger.info("Survey %s created by %s with %d question(s)", survey.survey_id, creator_id, len(data.questions))
    return get_owned_survey(db, survey.survey_id, creator_id)


def list_surveys(db: Session, creator_id: str) -> List[Survey]:
    stmt = _survey_query().where(Survey.creator_id == creator_id).order_by(Survey.created_at.desc())
    return list(db.execute(stmt).scalars().all())


def get_owned_survey(db: Session, survey_id: str, creator_id: str) -> Survey:
    survey = db.execute(
        _survey_query().where(Survey.survey_id == survey_id, Survey.creator_id == creator_id)
    ).scalar_one_or_none()
    if not survey:
        raise NotFound("Survey not found")
    return survey


def update_survey(db: Session, survey_id: str, patch: SurveyUpdate, creator_id: str) -> Survey:
    survey = get_owned_survey(db, survey_id, creator_id)

    for field, value in patch.model_dump(exclude_unset=True).items():
        if value is None and field in _NON_NULLABLE_FIELDS:
            continue
        setattr(survey, field, value)

    db.commit()
    logger.info("Survey %s updated", survey_id)
    return get_owned_survey(db, survey_id, creator_id)


def delete_survey(db: Session, survey_id: str, creator_id: str) -> None:
    survey = get_owned_survey(db, survey_id, creator_id)
    db.delete(survey)
    db.commit()
    logger.info("Survey %s deleted", survey_id)


def get_public_survey(db: Session, public_id: str) -> Survey:
    """Resolve a public identifier to an active survey.

    Inactive and unknown surveys raise the same `NotFound`, so anonymous callers
    cannot tell them apart.
    """
    survey = db.execute(
        select(Survey)
        .options(selectinload(Survey.questions).selectinload(Question.options))
        .where(Survey.public_id == public_id, Survey.is_active.is_(True))
    ).scalar_one_or_none()
    if not survey:
        raise NotFound("Survey not found or inactive")
    return survey
