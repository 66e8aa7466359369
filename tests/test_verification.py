from urllib.parse import parse_qs, urlparse

import pytest

import verification
from schemas import ACTION_REQUIRED, PENDING, VERIFIED, QuestionnaireItem, VerificationDetails


def start(store, customer_id="cust2", extra=()):
    invite = verification.open_invite(store, customer_id)
    for question in extra:
        invite.questions.add(question)
    invite.generate_link("https://etimad.crm")
    return invite


def test_submit_then_verify_walks_the_status_sequence(store):
    details = VerificationDetails(
        id_number="784-1990-1234567-1",
        expiry_date="2027-05-01",
        document_url="mock-doc-url",
        questionnaire=[QuestionnaireItem(question="Are you a resident of UAE?", answer="Yes")],
    )
    seen = [store.get_customer("cust2").status]

    store.submit_documents("cust2", details)
    seen.append(store.get_customer("cust2").status)
    after_submit = store.get_customer("cust2").verification_details

    store.verify_customer("cust2")
    seen.append(store.get_customer("cust2").status)

    assert seen == [PENDING, ACTION_REQUIRED, VERIFIED]
    assert after_submit == details
    assert store.get_customer("cust2").verification_details == details


def test_verify_from_pending_is_allowed(store):
    # approve() has no status precondition; a Pending customer goes straight to Verified
    assert store.get_customer("cust2").status == PENDING
    assert verification.approve(store, "cust2") is True
    assert store.get_customer("cust2").status == VERIFIED
    assert store.get_customer("cust2").verification_details is None


def test_questionnaire_pairs_questions_and_answers_positionally():
    questions = ["Q one", "Q two", "Q three"]
    answers = ["A one", "A two", "A three"]
    items = verification.build_questionnaire(questions, answers)

    assert len(items) == 3
    for i, item in enumerate(items):
        assert item.question == questions[i]
        assert item.answer == answers[i]


def test_questionnaire_rejects_wrong_answer_count():
    with pytest.raises(verification.AnswerCountMismatch):
        verification.build_questionnaire(["Q one", "Q two"], ["A one"])


def test_question_set_defaults_and_edits():
    questions = verification.QuestionSet()
    assert questions.questions == list(verification.DEFAULT_QUESTIONS)

    questions.add("  Monthly income?  ")
    questions.add("   ")
    questions.remove(0)
    questions.remove(10)

    assert questions.questions == ["Do you have a valid Emirates ID?", "Monthly income?"]


def test_question_set_frozen_after_link(store):
    invite = start(store)
    with pytest.raises(verification.QuestionSetFrozen):
        invite.questions.add("Too late?")
    with pytest.raises(verification.QuestionSetFrozen):
        invite.questions.remove(0)
    assert len(invite.questions) == 2


def test_link_format_and_fresh_tokens(store):
    invite = verification.open_invite(store, "cust2")
    first = invite.generate_link("https://etimad.crm/")
    first_token = invite.token
    second = invite.generate_link("https://etimad.crm")

    parsed = urlparse(first)
    assert parsed.netloc == "etimad.crm"
    assert parsed.path == "/verify/cust2"
    assert parse_qs(parsed.query)["token"] == [first_token]
    assert first != second


def test_reopening_invite_resets_questions(store):
    invite = verification.open_invite(store, "cust2")
    invite.questions.add("Extra?")
    fresh = verification.open_invite(store, "cust2")

    assert fresh is not invite
    assert fresh.questions.questions == list(verification.DEFAULT_QUESTIONS)
    assert verification.open_invite(store, "missing") is None


def test_portal_submission_stores_frozen_questions_with_answers(store):
    invite = start(store, extra=["Preferred financing bank?"])
    verification.submit_portal(store, "cust2", invite.token, "784-1", "2028-01-31", ["Yes", "Yes", "ENBD"])

    customer = store.get_customer("cust2")
    details = customer.verification_details
    assert customer.status == ACTION_REQUIRED
    assert details.id_number == "784-1"
    assert details.expiry_date == "2028-01-31"
    assert details.document_url == verification.PLACEHOLDER_DOCUMENT_URL
    assert [(i.question, i.answer) for i in details.questionnaire] == [
        ("Are you a resident of UAE?", "Yes"),
        ("Do you have a valid Emirates ID?", "Yes"),
        ("Preferred financing bank?", "ENBD"),
    ]


def test_portal_rejects_bad_token(store):
    start(store)
    with pytest.raises(verification.InvalidToken):
        verification.submit_portal(store, "cust2", "forged", "784-1", "2028-01-31", ["Yes", "Yes"])
    with pytest.raises(verification.InvalidToken):
        verification.submit_portal(store, "cust3", "anything", "784-1", "2028-01-31", ["Yes", "Yes"])
    assert store.get_customer("cust2").status == PENDING


def test_portal_before_link_is_generated(store):
    verification.open_invite(store, "cust2")
    with pytest.raises(verification.InvalidToken):
        verification.submit_portal(store, "cust2", None, "784-1", "2028-01-31", ["Yes", "Yes"])


def test_reject_changes_nothing(store):
    invite = start(store)
    verification.submit_portal(store, "cust2", invite.token, "784-1", "2028-01-31", ["Yes", "No"])
    before = store.get_customer("cust2")

    customer = verification.reject(store, "cust2")

    assert customer == before
    assert store.get_customer("cust2").status == ACTION_REQUIRED
    assert store.get_customer("cust2").verification_details == before.verification_details
    assert verification.reject(store, "missing") is None


def test_resubmission_replaces_details(store):
    invite = start(store)
    verification.submit_portal(store, "cust2", invite.token, "784-1", "2028-01-31", ["Yes", "No"])
    verification.submit_portal(store, "cust2", invite.token, "784-2", "2029-01-31", ["No", "No"])

    assert store.get_customer("cust2").verification_details.id_number == "784-2"
