from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, model_validator
from surveyhub.db.models.question import QuestionType


class QuestionOptionIn(BaseModel):
    option_text: str = Field(min_length=1)
    position: Optional[int] = Field(default=None, ge=0)


class QuestionCreate(BaseModel):
    question_text: str = Field(min_length=1)
    question_type: QuestionType
    is_required: bool = True
    position: Optional[int] = Field(default=None, ge=0)
    options: Optional[List[QuestionOptionIn]] = None

    @model_validator(mode="after")
    def check_options_match_type(self):
        if self.question_type == QuestionType.open:
            if self.options:
                raise ValueError("Open questions cannot have options")
        elif not self.options:
            raise ValueError(f"'{self.question_type.value}' questions need at least one option")
        return self


class QuestionOptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    option_id: str
    option_text: str
    position: int


class QuestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    question_id: str
    question_text: str
    question_type: QuestionType
    is_required: bool
    position: int
    options: List[QuestionOptionOut] = []
