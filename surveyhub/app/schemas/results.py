from pydantic import BaseModel
from typing import List
from surveyhub.app.schemas.question import QuestionOut
from surveyhub.db.models.question import QuestionType


class OptionStatOut(BaseModel):
    option_id: str
    option_text: str
    count: int
    percentage: float


class QuestionStatOut(BaseModel):
    question_id: str
    question_text: str
    question_type: QuestionType
    total_responses: int
    answers: List[str] | None = None  # open
    options: List[OptionStatOut] | None = None  # single/multiple


class SurveyHeaderOut(BaseModel):
    survey_id: str
    public_id: str
    title: str
    description: str | None = None
    is_active: bool
    questions: List[QuestionOut]


class SurveyResultsOut(BaseModel):
    survey: SurveyHeaderOut
    total_responses: int
    statistics: List[QuestionStatOut]
