import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from surveyhub.app.core.config import settings
from surveyhub.app.core.errors import DuplicateSubmission, NotFound, ValidationFailure
from surveyhub.app.schemas.answer import SubmitResponseIn
from surveyhub.app.services import responses as response_service
from surveyhub.app.services.responses import check_duplicate, submit_response
from surveyhub.db.models import Answer, Response, Survey
from surveyhub.db.session import LocalSession


def _single_choice_answer(survey, option_index=0):
    question = survey.questions[1]
    return {"question_id": question.question_id, "selected_option_ids": [question.options[option_index].option_id]}


def _submit(db, survey, ip="10.0.0.1", session_id=None, answers=None, **kwargs):
    payload = SubmitResponseIn.model_validate({
        "session_id": session_id,
        "answers": answers if answers is not None else [_single_choice_answer(survey)],
    })
    return submit_response(db, survey.public_id, payload, ip_address=ip, user_agent="pytest", **kwargs)


def test_public_survey_hides_owner(client, make_survey):
    survey = make_survey()

    resp = client.get(f"/surveys/public/{survey.public_id}")

    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Customer feedback"
    assert len(body["questions"]) == 3
    assert "creator_id" not in body
    assert "survey_id" not in body


def test_inactive_and_unknown_surveys_look_the_same(client, auth_headers, make_survey):
    survey = make_survey()
    client.patch(f"/surveys/{survey.survey_id}", json={"is_active": False}, headers=auth_headers)

    inactive = client.get(f"/surveys/public/{survey.public_id}")
    unknown = client.get("/surveys/public/no-such-survey")

    assert inactive.status_code == unknown.status_code == 404
    assert inactive.json() == unknown.json()


def test_submit_records_response_and_answers(client, make_survey, db):
    survey = make_survey()
    open_question = survey.questions[0]

    resp = client.post(
        f"/surveys/public/{survey.public_id}/responses",
        json={
            "session_id": "session-1",
            "answers": [
                {"question_id": open_question.question_id, "response_text": "Great service"},
                _single_choice_answer(survey),
            ],
        },
        headers={"User-Agent": "browser/1.0"},
    )

    assert resp.status_code == 201
    stored = db.get(Response, resp.json()["response_id"])
    assert stored.session_id == "session-1"
    assert stored.ip_address == "testclient"
    assert stored.user_agent == "browser/1.0"
    assert len(stored.answers) == 2


def test_second_submission_from_same_client_is_rejected(client, make_survey, db):
    survey = make_survey()
    url = f"/surveys/public/{survey.public_id}/responses"
    body = {"session_id": "session-1", "answers": [_single_choice_answer(survey)]}

    first = client.post(url, json=body)
    second = client.post(url, json=body)

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["code"] == "duplicate_submission"
    assert db.scalar(select(func.count()).select_from(Response)) == 1


def test_same_session_from_another_address_is_rejected(db, make_survey):
    survey = make_survey()
    _submit(db, survey, ip="10.0.0.1", session_id="shared")

    with pytest.raises(DuplicateSubmission):
        _submit(db, survey, ip="10.0.0.2", session_id="shared")


def test_same_address_with_new_session_is_rejected(db, make_survey):
    survey = make_survey()
    _submit(db, survey, ip="10.0.0.1", session_id="first")

    with pytest.raises(DuplicateSubmission):
        _submit(db, survey, ip="10.0.0.1", session_id="second")


def test_missing_session_tokens_never_match_each_other(db, make_survey):
    survey = make_survey()
    _submit(db, survey, ip="10.0.0.1", session_id=None)
    _submit(db, survey, ip="10.0.0.2", session_id="")

    assert db.scalar(select(func.count()).select_from(Response)) == 2


def test_multiple_responses_allowed(client, make_survey, db):
    survey = make_survey(allow_multiple_responses=True)
    url = f"/surveys/public/{survey.public_id}/responses"
    body = {"session_id": "same", "answers": [_single_choice_answer(survey)]}

    statuses = [client.post(url, json=body).status_code for _ in range(3)]

    assert statuses == [201, 201, 201]
    assert db.scalar(select(func.count()).select_from(Response)) == 3


def test_storage_constraint_closes_duplicate_race(db, make_survey, monkeypatch):
    survey = make_survey()
    _submit(db, survey, ip="10.0.0.1", session_id="racer")
    # both requests passed the read check before either committed
    monkeypatch.setattr(response_service, "find_existing_response", lambda *args, **kwargs: None)

    with pytest.raises(DuplicateSubmission):
        _submit(db, survey, ip="10.0.0.9", session_id="racer")

    assert db.scalar(select(func.count()).select_from(Response)) == 1
    assert db.scalar(select(func.count()).select_from(Answer)) == 1


def test_submit_to_inactive_survey_is_not_found(db, make_survey):
    survey = make_survey()
    survey.is_active = False
    db.commit()

    with pytest.raises(NotFound):
        _submit(db, survey)


def test_check_duplicate(client, make_survey):
    survey = make_survey()
    url = f"/surveys/public/{survey.public_id}"

    assert client.get(f"{url}/check-duplicate", params={"session_id": "s"}).json() is False
    client.post(f"{url}/responses", json={"session_id": "s", "answers": [_single_choice_answer(survey)]})
    assert client.get(f"{url}/check-duplicate", params={"session_id": "s"}).json() is True


def test_check_duplicate_is_false_when_multiple_allowed(db, make_survey):
    survey = make_survey(allow_multiple_responses=True)
    _submit(db, survey, ip="10.0.0.1", session_id="s")

    assert check_duplicate(db, survey.public_id, "s", "10.0.0.1") is False


def test_forwarded_address_is_used_when_trusted(client, make_survey, db, monkeypatch):
    monkeypatch.setattr(settings, "TRUST_FORWARDED_FOR", True)
    survey = make_survey()

    resp = client.post(
        f"/surveys/public/{survey.public_id}/responses",
        json={"answers": [_single_choice_answer(survey)]},
        headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
    )

    assert resp.status_code == 201
    assert db.get(Response, resp.json()["response_id"]).ip_address == "203.0.113.7"


def test_payload_is_stored_by_question_type(db, make_survey):
    survey = make_survey()
    open_question, single, _ = survey.questions

    response = _submit(db, survey, answers=[
        {"question_id": open_question.question_id, "selected_option_ids": [single.options[0].option_id]},
        {"question_id": single.question_id, "response_text": "C please"},
        {"question_id": "not-in-this-survey", "response_text": "ignored"},
    ])

    answers = {a.question_id: a for a in response.answers}
    assert set(answers) == {open_question.question_id, single.question_id}
    assert answers[open_question.question_id].response_text == ""
    assert answers[open_question.question_id].selected_option_ids is None
    assert answers[single.question_id].selected_option_ids == []
    assert answers[single.question_id].response_text is None


@pytest.mark.parametrize("answers_for", [
    lambda s: [],
    lambda s: [{"question_id": s.questions[1].question_id,
                "selected_option_ids": [o.option_id for o in s.questions[1].options[:2]]}],
    lambda s: [{"question_id": s.questions[1].question_id, "selected_option_ids": [s.questions[2].options[0].option_id]}],
    lambda s: [{"question_id": s.questions[1].question_id, "response_text": "A"}],
    lambda s: [_single_choice_answer(s), {"question_id": "unknown", "response_text": "x"}],
    lambda s: [_single_choice_answer(s), {"question_id": s.questions[0].question_id,
                                          "selected_option_ids": [s.questions[1].options[0].option_id]}],
    lambda s: [_single_choice_answer(s), {"question_id": s.questions[0].question_id, "response_text": ""}],
    lambda s: [_single_choice_answer(s), {"question_id": s.questions[0].question_id, "response_text": "   "}],
    lambda s: [_single_choice_answer(s), {"question_id": s.questions[2].question_id, "selected_option_ids": []}],
], ids=["required-missing", "two-options-on-single", "foreign-option", "text-on-choice",
        "unknown-question", "options-on-open", "empty-open-text", "blank-open-text", "empty-multiple"])
def test_strict_validation_rejects_bad_payloads(db, make_survey, answers_for):
    survey = make_survey()

    with pytest.raises(ValidationFailure):
        _submit(db, survey, answers=answers_for(survey), strict=True)

    assert db.scalar(select(func.count()).select_from(Response)) == 0


def test_strict_validation_accepts_well_formed_payload(db, make_survey):
    survey = make_survey()
    multiple = survey.questions[2]

    response = _submit(db, survey, strict=True, answers=[
        _single_choice_answer(survey),
        {"question_id": multiple.question_id, "selected_option_ids": [o.option_id for o in multiple.options]},
    ])

    assert len(response.answers) == 2


def test_strict_validation_follows_setting(client, make_survey, monkeypatch):
    monkeypatch.setattr(settings, "STRICT_ANSWER_VALIDATION", True)
    survey = make_survey()

    resp = client.post(f"/surveys/public/{survey.public_id}/responses", json={"answers": []})

    assert resp.status_code == 422
    assert resp.json()["code"] == "validation_failure"


def test_strict_validation_rejects_empty_optional_single(db, make_survey):
    survey = make_survey(questions=[
        {
            "question_text": "Pick one if you like",
            "question_type": "single",
            "is_required": False,
            "options": [{"option_text": "A"}, {"option_text": "B"}],
        },
    ])
    question = survey.questions[0]

    with pytest.raises(ValidationFailure):
        _submit(db, survey, strict=True, answers=[{"question_id": question.question_id, "selected_option_ids": []}])

    # leaving the optional question out is still fine
    response = _submit(db, survey, strict=True, answers=[])
    assert response.answers == []


def test_unrelated_integrity_error_is_not_a_duplicate(db, make_survey, monkeypatch):
    survey = make_survey()

    def delete_survey_meanwhile(*args, **kwargs):
        other = LocalSession()
        try:
            other.execute(delete(Survey).where(Survey.survey_id == survey.survey_id))
            other.commit()
        finally:
            other.close()
        return None

    monkeypatch.setattr(response_service, "find_existing_response", delete_survey_meanwhile)

    with pytest.raises(IntegrityError):
        _submit(db, survey, ip="10.0.0.1", session_id="late")

    assert db.scalar(select(func.count()).select_from(Response)) == 0
