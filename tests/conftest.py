import os
import tempfile

_tmp_dir = tempfile.mkdtemp(prefix="surveyhub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'test.db')}"
os.environ["LOG_PATH"] = os.path.join(_tmp_dir, "logs")
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["STRICT_ANSWER_VALIDATION"] = "false"
os.environ["TRUST_FORWARDED_FOR"] = "false"

import pytest
from fastapi.testclient import TestClient

from surveyhub.app.main import app
from surveyhub.app.core.security import hash_password
from surveyhub.app.schemas.survey import SurveyCreate
from surveyhub.app.services.accounts import issue_access_token
from surveyhub.app.services.surveys import create_survey
from surveyhub.db import Base
from surveyhub.db.models import User
from surveyhub.db.session import LocalSession, engine

PASSWORD = "secret123"


def survey_payload(**overrides):
    payload = {
        "title": "Customer feedback",
        "description": "Quarterly survey",
        "allow_multiple_responses": False,
        "questions": [
            {"question_text": "What did you like?", "question_type": "open", "is_required": False},
            {
                "question_text": "Pick one",
                "question_type": "single",
                "options": [{"option_text": "A"}, {"option_text": "B"}, {"option_text": "C"}],
            },
            {
                "question_text": "Pick many",
                "question_type": "multiple",
                "is_required": False,
                "options": [{"option_text": "X"}, {"option_text": "Y"}],
            },
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = LocalSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    with TestClient(app) as c:
        yield c


def _create_user(db, email, name):
    user = User(email=email, name=name, password_hash=hash_password(PASSWORD))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def creator(db):
    return _create_user(db, "ana@encuestas.io", "Ana")


@pytest.fixture()
def other_creator(db):
    return _create_user(db, "bruno@encuestas.io", "Bruno")


@pytest.fixture()
def auth_headers(creator):
    return {"Authorization": f"Bearer {issue_access_token(creator)}"}


@pytest.fixture()
def other_headers(other_creator):
    return {"Authorization": f"Bearer {issue_access_token(other_creator)}"}


@pytest.fixture()
def make_survey(db, creator):
    def _make(owner=None, **overrides):
        owner = owner or creator
        return create_survey(db, SurveyCreate.model_validate(survey_payload(**overrides)), owner.user_id)
    return _make
