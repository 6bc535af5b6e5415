# db/models/response.py
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint
from surveyhub.db import Base
from surveyhub.db.models.survey import utcnow
import uuid


class Response(Base):
    """One respondent's submission to a survey.

    `session_guard` and `ip_guard` copy the session token and address only when
    the survey disallows multiple responses; the unique constraints on them turn
    a concurrent repeat submission into an IntegrityError. NULL guards never
    collide, so surveys allowing multiple responses are unaffected.
    """
    __tablename__ = "responses"

    response_id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    survey_id: Mapped[str] = mapped_column(String, ForeignKey("surveys.survey_id", ondelete="CASCADE"), nullable=False, index=True)
    session_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    ip_address: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    user_agent: Mapped[str | None] = mapped_column(String, nullable=True)
    session_guard: Mapped[str | None] = mapped_column(String, nullable=True)
    ip_guard: Mapped[str | None] = mapped_column(String, nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("survey_id", "session_guard", name="uq_responses_survey_session"),
        UniqueConstraint("survey_id", "ip_guard", name="uq_responses_survey_ip"),
    )

    survey = relationship("Survey", back_populates="responses")
    answers = relationship("Answer", back_populates="response", cascade="all, delete-orphan")
