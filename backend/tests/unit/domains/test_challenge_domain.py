import pytest

from challengeforge.domains.challenge.domain import (
    Challenge,
    ChallengeEvents,
    ChallengeStatus,
    ChallengeValidationError,
)


def _challenge(**attributes):
    return Challenge.create(
        user_email="ada@example.com",
        title="Prompt design basics",
        focus_area="prompting",
        content={"question": "How would you phrase it?"},
        **attributes,
    )


def test_create_requires_email_and_title():
    with pytest.raises(ChallengeValidationError):
        Challenge.create(user_email="not-an-email", title="x", focus_area="prompting")
    with pytest.raises(ChallengeValidationError):
        Challenge.create(user_email="ada@example.com", title="", focus_area="prompting")


def test_create_leaves_identity_to_the_repository():
    challenge = _challenge(difficulty="advanced")

    assert challenge.id is None
    assert challenge.status is ChallengeStatus.PENDING
    assert challenge.difficulty == "advanced"
    assert challenge.pending_events() == []


def test_submit_responses_moves_to_submitted():
    challenge = _challenge()

    challenge.submit_responses({"answer": "Be specific"})

    assert challenge.status is ChallengeStatus.SUBMITTED
    assert challenge.responses == [{"answer": "Be specific"}]
    assert [event.event_type for event in challenge.pending_events()] == [
        ChallengeEvents.STATUS_CHANGED,
        ChallengeEvents.RESPONSES_SUBMITTED,
    ]


def test_complete_records_score_and_evaluation():
    challenge = _challenge()
    challenge.submit_responses([{"answer": "a"}, {"answer": "b"}])
    challenge.clear_events()

    challenge.complete({"score": 82, "evaluationId": "ev-1"})

    assert challenge.is_completed()
    assert challenge.score == 82.0
    assert challenge.evaluation == {"score": 82, "evaluationId": "ev-1"}
    completed = challenge.pending_events()[-1]
    assert completed.event_type == ChallengeEvents.COMPLETED
    assert completed.payload["score"] == 82.0


def test_status_change_to_same_status_records_nothing():
    challenge = _challenge()

    challenge.update_status("pending")

    assert challenge.pending_events() == []


def test_unknown_status_is_rejected():
    challenge = _challenge()

    with pytest.raises(ChallengeValidationError):
        challenge.update_status("lost")


def test_update_accepts_known_fields_only():
    challenge = _challenge()

    challenge.update(title="Renamed", status="archived")

    assert challenge.title == "Renamed"
    assert challenge.status is ChallengeStatus.ARCHIVED
    with pytest.raises(ChallengeValidationError) as excinfo:
        challenge.update(score=100)
    assert excinfo.value.metadata["fields"] == ["score"]
    assert excinfo.value.code == "CHALLENGE_VALIDATION"
