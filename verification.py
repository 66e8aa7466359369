"""
Customer verification workflow.

    Pending Verification --submit_portal--> Action Required --approve--> Verified

The admin opens an invite for a customer, edits its question set, then
generates a link. Generating the link freezes the questions; the portal
submission must answer exactly those questions, in order.

approve() has no precondition on the current status, so a Pending customer
can be verified directly. reject() changes nothing.
"""
import logging
import secrets
from typing import List, Optional, Sequence

from schemas import Customer, QuestionnaireItem, VerificationDetails

logger = logging.getLogger(__name__)

DEFAULT_QUESTIONS = (
    "Are you a resident of UAE?",
    "Do you have a valid Emirates ID?",
)

# No upload pipeline exists; submissions carry a placeholder reference.
PLACEHOLDER_DOCUMENT_URL = "mock-doc-url"


class VerificationError(Exception):
    pass


class QuestionSetFrozen(VerificationError):
    pass


class AnswerCountMismatch(VerificationError):
    pass


class InvalidToken(VerificationError):
    pass


class QuestionSet:
    def __init__(self, questions: Sequence[str] = DEFAULT_QUESTIONS) -> None:
        self._questions: List[str] = list(questions)
        self.frozen = False

    @property
    def questions(self) -> List[str]:
        return list(self._questions)

    def __len__(self) -> int:
        return len(self._questions)

    def add(self, question: str) -> None:
        self._check_editable()
        question = (question or "").strip()
        if question:
            self._questions.append(question)

    def remove(self, index: int) -> None:
        self._check_editable()
        if 0 <= index < len(self._questions):
            del self._questions[index]

    def freeze(self) -> None:
        self.frozen = True

    def _check_editable(self) -> None:
        if self.frozen:
            raise QuestionSetFrozen("Questions cannot be changed after the link is generated")


class VerificationInvite:
    def __init__(self, customer_id: str, questions: Optional[QuestionSet] = None) -> None:
        self.customer_id = customer_id
        self.questions = questions or QuestionSet()
        self.token: Optional[str] = None
        self.link: Optional[str] = None

    def generate_link(self, base_url: str) -> str:
        """Issue a fresh token and freeze the question set. Tokens never expire."""
        self.token = secrets.token_urlsafe(8)
        self.link = f"{base_url.rstrip('/')}/verify/{self.customer_id}?token={self.token}"
        self.questions.freeze()
        logger.info("Generated verification link for customer %s", self.customer_id)
        return self.link

    def to_dict(self) -> dict:
        return {
            "customer_id": self.customer_id,
            "questions": self.questions.questions,
            "frozen": self.questions.frozen,
            "link": self.link,
        }


def open_invite(state, customer_id: str) -> Optional[VerificationInvite]:
    """Start (or restart) verification for a customer with the default questions."""
    if state.get_customer(customer_id) is None:
        return None
    invite = VerificationInvite(customer_id)
    state.invites[customer_id] = invite
    return invite


def get_invite(state, customer_id: str) -> Optional[VerificationInvite]:
    return state.invites.get(customer_id)


def check_token(invite: Optional[VerificationInvite], token: Optional[str]) -> VerificationInvite:
    if invite is None or invite.token is None or not token:
        raise InvalidToken("No verification link has been issued")
    if not secrets.compare_digest(invite.token.encode(), token.encode()):
        raise InvalidToken("Verification token does not match")
    return invite


def build_questionnaire(questions: Sequence[str], answers: Sequence[str]) -> List[QuestionnaireItem]:
    if len(questions) != len(answers):
        raise AnswerCountMismatch(f"Expected {len(questions)} answers, got {len(answers)}")
    return [QuestionnaireItem(question=q, answer=a) for q, a in zip(questions, answers)]


def submit_portal(state, customer_id: str, token: Optional[str], id_number: str, expiry_date: str,
                  answers: Sequence[str]) -> bool:
    """Customer-side submission through a generated link."""
    invite = check_token(get_invite(state, customer_id), token)
    details = VerificationDetails(
        id_number=id_number,
        expiry_date=expiry_date,
        document_url=PLACEHOLDER_DOCUMENT_URL,
        questionnaire=build_questionnaire(invite.questions.questions, answers),
    )
    return state.submit_documents(customer_id, details)


def review(state, customer_id: str) -> Optional[Customer]:
    return state.get_customer(customer_id)


def approve(state, customer_id: str) -> bool:
    return state.verify_customer(customer_id)


def reject(state, customer_id: str) -> Optional[Customer]:
    """Close the review. Status and submitted details are left untouched."""
    customer = state.get_customer(customer_id)
    if customer is not None:
        logger.info("Review of customer %s closed without verification (status stays %s)",
                    customer_id, customer.status)
    return customer
