from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from surveyhub.app.schemas.question import QuestionCreate, QuestionOut


class SurveyCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    allow_multiple_responses: bool = False
    questions: List[QuestionCreate]


class SurveyUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    allow_multiple_responses: bool | None = None
    is_active: bool | None = None


class SurveyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    survey_id: str
    public_id: str
    title: str
    description: str | None = None
    is_active: bool
    allow_multiple_responses: bool
    creator_id: str
    created_at: datetime
    updated_at: datetime
    response_count: int
    questions: List[QuestionOut]


class PublicSurveyOut(BaseModel):
    """Survey shape shown to anonymous respondents"""
    model_config = ConfigDict(from_attributes=True)

    public_id: str
    title: str
    description: str | None = None
    allow_multiple_responses: bool
    questions: List[QuestionOut]
