# db/models/answer.py
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, JSON, ForeignKey
from surveyhub.db import Base
import uuid


class Answer(Base):
    __tablename__ = "answers"

    answer_id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    response_id: Mapped[str] = mapped_column(String, ForeignKey("responses.response_id", ondelete="CASCADE"), nullable=False, index=True)
    question_id: Mapped[str] = mapped_column(String, ForeignKey("questions.question_id", ondelete="CASCADE"), nullable=False, index=True)

    # open questions fill response_text, single/multiple fill selected_option_ids
    response_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    selected_option_ids: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    response = relationship("Response", back_populates="answers")
    question = relationship("Question")
