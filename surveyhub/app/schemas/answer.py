from pydantic import BaseModel
from typing import List


class AnswerIn(BaseModel):
    question_id: str
    response_text: str | None = None  # open
    selected_option_ids: List[str] | None = None  # single/multiple


class SubmitResponseIn(BaseModel):
    session_id: str | None = None
    answers: List[AnswerIn]


class SubmitResponseOut(BaseModel):
    ok: bool = True
    response_id: str
