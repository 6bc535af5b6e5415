"""Recording anonymous survey submissions.

A submission resolves the survey through the public access gate, applies the
duplicate-response rule when the survey allows a single response per
respondent, and persists the response together with its answers in one commit.
"""
# surveyhub/app/services/responses.py
from typing import Iterable, List, Optional

from fastapi import Request
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from surveyhub.app.core.config import settings
from surveyhub.app.core.errors import DuplicateSubmission, ValidationFailure
from surveyhub.app.core.logging import get_logs_writer_logger
from surveyhub.app.schemas.answer import AnswerIn, SubmitResponseIn
from surveyhub.app.services.surveys import get_public_survey
from surveyhub.db.models import Answer, Question, QuestionType, Response, Survey

logger = get_logs_writer_logger()

_GUARD_MARKERS = (
    "uq_responses_survey_session",
    "uq_responses_survey_ip",
    "responses.session_guard",
    "responses.ip_guard",
)


def resolve_client_ip(request: Request) -> Optional[str]:
    if settings.TRUST_FORWARDED_FOR:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip() or None
    return request.client.host if request.client else None


def _is_guard_violation(exc: IntegrityError) -> bool:
    """Tell the duplicate guards apart from other integrity failures.

    PostgreSQL reports the constraint name, SQLite only the guarded columns.
    """
    message = str(exc.orig)
    return any(marker in message for marker in _GUARD_MARKERS)


def find_existing_response(
    db: Session, survey: Survey, session_id: Optional[str], ip_address: Optional[str]
) -> Optional[Response]:
    """Return a previous response matching either the session token or the address."""
    conditions = []
    if session_id:
        conditions.append(Response.session_id == session_id)
    if ip_address:
        conditions.append(Response.ip_address == ip_address)
    if not conditions:
        return None

    return db.execute(
        select(Response)
        .where(Response.survey_id == survey.survey_id, or_(*conditions))
        .limit(1)
    ).scalar_one_or_none()


def check_duplicate(db: Session, public_id: str, session_id: Optional[str], ip_address: Optional[str]) -> bool:
    survey = get_public_survey(db, public_id)
    if survey.allow_multiple_responses:
        return False
    return find_existing_response(db, survey, session_id or None, ip_address) is not None


def validate_answers(questions: Iterable[Question], answers: List[AnswerIn]) -> None:
    """Check answer payloads against question types and required flags.

    Raises:
        ValidationFailure: On the first problem found.
    """
    questions = list(questions)
    by_id = {q.question_id: q for q in questions}
    answered = set()
    seen = set()

    for answer_data in answers:
        question = by_id.get(answer_data.question_id)
        if question is None:
            raise ValidationFailure(f"Question {answer_data.question_id} does not belong to this survey")
        if question.question_id in seen:
            raise ValidationFailure(f"Question {question.question_id} is answered more than once")
        seen.add(question.question_id)

        selected = answer_data.selected_option_ids or []
        if question.question_type == QuestionType.open:
            if selected or not (answer_data.response_text or "").strip():
                raise ValidationFailure(f"Question {question.question_id} expects a text answer")
            answered.add(question.question_id)
            continue

        if answer_data.response_text:
            raise ValidationFailure(f"Question {question.question_id} expects selected options")
        if len(set(selected)) != len(selected):
            raise ValidationFailure(f"Question {question.question_id} has repeated options")
        own_options = {o.option_id for o in question.options}
        if any(option_id not in own_options for option_id in selected):
            raise ValidationFailure(f"Question {question.question_id} got an unknown option")
        if question.question_type == QuestionType.single and len(selected) != 1:
            raise ValidationFailure(f"Question {question.question_id} needs exactly one option")
        if not selected:
            raise ValidationFailure(f"Question {question.question_id} needs at least one option")
        answered.add(question.question_id)

    missing = [q.question_id for q in questions if q.is_required and q.question_id not in answered]
    if missing:
        raise ValidationFailure(f"Required question(s) not answered: {', '.join(missing)}")


def submit_response(
    db: Session,
    public_id: str,
    payload: SubmitResponseIn,
    ip_address: Optional[str],
    user_agent: Optional[str],
    strict: Optional[bool] = None,
) -> Response:
    """Persist one submission.

    Args:
        db: The DB session.
        public_id: Public identifier of the survey.
        payload: Session token and answers.
        ip_address: Address of the submitter.
        user_agent: Client user agent.
        strict: Validate payloads against the questions, defaults to
            `STRICT_ANSWER_VALIDATION`.

    Returns:
        Response: The stored response.

    Errors:
        NotFound: The survey does not exist or is inactive.
        DuplicateSubmission: The respondent already answered a single-response survey.
        ValidationFailure: Strict validation rejected the payload.
    """
    survey = get_public_survey(db, public_id)
    session_id = payload.session_id or None
    if strict is None:
        strict = settings.STRICT_ANSWER_VALIDATION

    if not survey.allow_multiple_responses:
        if find_existing_response(db, survey, session_id, ip_address):
            logger.info("Duplicate submission rejected for survey %s (ip=%s)", survey.survey_id, ip_address)
            raise DuplicateSubmission()

    if strict:
        validate_answers(survey.questions, payload.answers)

    response = Response(
        survey_id=survey.survey_id,
        session_id=session_id,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    if not survey.allow_multiple_responses:
        response.session_guard = session_id
        response.ip_guard = ip_address

    questions = {q.question_id: q for q in survey.questions}
    for answer_data in payload.answers:
        question = questions.get(answer_data.question_id)
        if question is None:
            # Skip answers to nonexistent or unrelated questions
            continue

        new_answer = Answer(question_id=question.question_id)
        if question.question_type == QuestionType.open:
            new_answer.response_text = answer_data.response_text or ""
        else:
            new_answer.selected_option_ids = list(answer_data.selected_option_ids or [])
        response.answers.append(new_answer)

    db.add(response)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if not _is_guard_violation(exc):
            raise
        logger.warning("Concurrent duplicate submission rejected for survey %s (ip=%s)", survey.survey_id, ip_address)
        raise DuplicateSubmission()

    logger.info("Response %s recorded for survey %s", response.response_id, survey.survey_id)
    return response
