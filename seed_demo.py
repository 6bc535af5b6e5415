#!/usr/bin/env python
from surveyhub.db.session import LocalSession, engine
from surveyhub.db import Base
from surveyhub.db.models import User, Survey
from surveyhub.app.core.security import hash_password
from surveyhub.app.schemas.survey import SurveyCreate
from surveyhub.app.services.surveys import create_survey

DEMO_EMAIL = "demo@surveyhub.io"
DEMO_PASSWORD = "demo-password"

DEMO_SURVEY = {
    "title": "Team lunch",
    "description": "Help us plan the next team lunch",
    "questions": [
        {
            "question_text": "Which cuisine do you prefer?",
            "question_type": "single",
            "options": [{"option_text": "Italian"}, {"option_text": "Mexican"}, {"option_text": "Japanese"}],
        },
        {
            "question_text": "Which days work for you?",
            "question_type": "multiple",
            "is_required": False,
            "options": [{"option_text": "Monday"}, {"option_text": "Wednesday"}, {"option_text": "Friday"}],
        },
        {"question_text": "Anything else?", "question_type": "open", "is_required": False},
    ],
}


def get_or_create(db, email, password, **kwargs):
    obj = db.query(User).filter(User.email == email).first()
    if obj:
        return obj
    obj = User(email=email, password_hash=hash_password(password), **kwargs)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def seed(db):
    creator = get_or_create(db, DEMO_EMAIL, DEMO_PASSWORD, name="Demo Creator")
    survey = db.query(Survey).filter(Survey.creator_id == creator.user_id).first()
    if survey is None:
        survey = create_survey(db, SurveyCreate.model_validate(DEMO_SURVEY), creator.user_id)
    return creator, survey


def main():
    Base.metadata.create_all(bind=engine)
    db = LocalSession()
    try:
        creator, survey = seed(db)
        print("Seeded demo data:")
        print(f"Creator login:    {DEMO_EMAIL} / {DEMO_PASSWORD}")
        print(f"Survey id:        {survey.survey_id}")
        print(f"Public id:        {survey.public_id}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
