"""Per-question statistics for a creator's survey and dashboard totals."""
# surveyhub/app/services/results.py
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from surveyhub.app.core.config import settings
from surveyhub.app.schemas.question import QuestionOut
from surveyhub.app.schemas.results import OptionStatOut, QuestionStatOut, SurveyHeaderOut, SurveyResultsOut
from surveyhub.app.schemas.user import RecentSurveyOut, UserStatsOut
from surveyhub.app.services.surveys import get_owned_survey
from surveyhub.db.models import Answer, Question, QuestionType, Response, Survey


def percentage(count: int, total: int) -> float:
    if not total:
        return 0.0
    # half-up, so exact ties such as 1/16 give 6.3
    share = Decimal(count * 100) / Decimal(total)
    return float(share.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _open_stat(question: Question, answers: Iterable[Answer]) -> QuestionStatOut:
    texts = [a.response_text for a in answers if a.response_text]
    return QuestionStatOut(
        question_id=question.question_id,
        question_text=question.question_text,
        question_type=question.question_type,
        total_responses=len(texts),
        answers=texts,
    )


def _choice_stat(question: Question, answers: Iterable[Answer]) -> QuestionStatOut:
    counts: Dict[str, int] = {o.option_id: 0 for o in question.options}
    contributing = 0

    for answer in answers:
        if not answer.selected_option_ids:
            continue
        contributing += 1
        for option_id in answer.selected_option_ids:
            # options of other questions are ignored
            if option_id in counts:
                counts[option_id] += 1

    return QuestionStatOut(
        question_id=question.question_id,
        question_text=question.question_text,
        question_type=question.question_type,
        total_responses=contributing,
        options=[
            OptionStatOut(
                option_id=o.option_id,
                option_text=o.option_text,
                count=counts[o.option_id],
                percentage=percentage(counts[o.option_id], contributing),
            )
            for o in question.options
        ],
    )


def build_statistics(questions: Iterable[Question], answers: Iterable[Answer]) -> List[QuestionStatOut]:
    by_question = defaultdict(list)
    for answer in answers:
        by_question[answer.question_id].append(answer)

    stats = []
    for question in questions:
        question_answers = by_question.get(question.question_id, [])
        if question.question_type == QuestionType.open:
            stats.append(_open_stat(question, question_answers))
        else:
            stats.append(_choice_stat(question, question_answers))
    return stats


def aggregate_results(db: Session, survey_id: str, creator_id: str) -> SurveyResultsOut:
    survey = get_owned_survey(db, survey_id, creator_id)

    total_responses = db.scalar(
        select(func.count(Response.response_id)).where(Response.survey_id == survey.survey_id)
    )
    answers = db.execute(
        select(Answer)
        .join(Response, Answer.response_id == Response.response_id)
        .where(Response.survey_id == survey.survey_id)
        .order_by(Response.submitted_at)
    ).scalars().all()

    return SurveyResultsOut(
        survey=SurveyHeaderOut(
            survey_id=survey.survey_id,
            public_id=survey.public_id,
            title=survey.title,
            description=survey.description,
            is_active=survey.is_active,
            questions=[QuestionOut.model_validate(q) for q in survey.questions],
        ),
        total_responses=total_responses or 0,
        statistics=build_statistics(survey.questions, answers),
    )


def get_user_stats(db: Session, creator_id: str) -> UserStatsOut:
    rows = db.execute(
        select(Survey, func.count(Response.response_id))
        .outerjoin(Response, Response.survey_id == Survey.survey_id)
        .where(Survey.creator_id == creator_id)
        .group_by(Survey.survey_id)
        .order_by(Survey.created_at.desc())
    ).all()

    recent = [
        RecentSurveyOut(
            survey_id=survey.survey_id,
            public_id=survey.public_id,
            title=survey.title,
            is_active=survey.is_active,
            response_count=count,
            created_at=survey.created_at,
        )
        for survey, count in rows[: settings.RECENT_SURVEYS_LIMIT]
    ]

    return UserStatsOut(
        total_surveys=len(rows),
        active_surveys=sum(1 for survey, _ in rows if survey.is_active),
        total_responses=sum(count for _, count in rows),
        recent_surveys=recent,
    )
