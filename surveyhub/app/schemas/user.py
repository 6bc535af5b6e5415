from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import List
from datetime import datetime


class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode()) > 72:
            raise ValueError("Password must be at most 72 bytes long")
        return value


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email: str
    name: str
    created_at: datetime


class RegisterOut(BaseModel):
    message: str
    user: UserOut


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class RecentSurveyOut(BaseModel):
    survey_id: str
    public_id: str
    title: str
    is_active: bool
    response_count: int
    created_at: datetime


class UserStatsOut(BaseModel):
    total_surveys: int
    active_surveys: int
    total_responses: int
    recent_surveys: List[RecentSurveyOut]
