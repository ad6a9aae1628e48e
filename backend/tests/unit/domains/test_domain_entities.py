import pytest

from challengeforge.domains.evaluation.domain.entities import Evaluation
from challengeforge.domains.evaluation.domain.errors import EvaluationValidationError
from challengeforge.domains.evaluation.domain.events import EvaluationEvents
from challengeforge.domains.focus_area.domain.entities import FocusArea
from challengeforge.domains.focus_area.domain.errors import FocusAreaValidationError
from challengeforge.domains.focus_area.domain.events import FocusAreaEvents
from challengeforge.domains.personality.domain.entities import Personality
from challengeforge.domains.personality.domain.errors import PersonalityValidationError
from challengeforge.domains.personality.domain.events import PersonalityEvents
from challengeforge.domains.user.domain.entities import User
from challengeforge.domains.user.domain.errors import UserValidationError
from challengeforge.domains.user.domain.events import UserEvents


def test_evaluation_from_feedback_reads_provider_document():
    evaluation = Evaluation.from_feedback(
        "ch-1",
        "ada@example.com",
        {
            "score": "78",
            "overallFeedback": "Solid structure",
            "categoryScores": {"clarity": 80},
            "strengths": ["structure"],
            "areasForImprovement": ["examples"],
            "nextSteps": ["add examples"],
        },
    )

    assert evaluation.score == 78.0
    assert evaluation.overall_feedback == "Solid structure"
    assert evaluation.category_scores == {"clarity": 80}
    assert evaluation.next_steps == ["add examples"]


def test_evaluation_rejects_non_numeric_score():
    with pytest.raises(EvaluationValidationError):
        Evaluation.from_feedback("ch-1", "ada@example.com", {"score": "great"})


def test_evaluation_score_adjustment_is_recorded():
    evaluation = Evaluation(challenge_id="ch-1", user_email="ada@example.com", score=50, id="ev-1")

    evaluation.update(score=65, overall_feedback="Revised")
    evaluation.update(overall_feedback="Revised again")

    events = evaluation.pending_events()
    assert [event.event_type for event in events] == [EvaluationEvents.SCORE_ADJUSTED]
    assert events[0].payload == {"evaluationId": "ev-1", "previousScore": 50, "newScore": 65}


def test_focus_area_priority_and_deactivation():
    area = FocusArea(user_id="u-1", name="Prompting", id="fa-1")

    area.update(priority=3, active=False)
    area.update(active=True)

    assert area.priority == 3
    assert area.active is True
    assert [event.event_type for event in area.pending_events()] == [
        FocusAreaEvents.PRIORITY_CHANGED,
        FocusAreaEvents.DEACTIVATED,
    ]
    with pytest.raises(FocusAreaValidationError):
        area.change_priority(0)


def test_user_create_normalizes_email():
    user = User.create("  Ada@Example.COM ", full_name="Ada")

    assert user.email == "ada@example.com"
    with pytest.raises(UserValidationError):
        User.create("nobody")


def test_user_focus_area_and_onboarding_events():
    user = User.create("ada@example.com")

    user.update(focus_area="prompting", skill_level="advanced")
    user.update(focus_area="prompting")
    user.complete_onboarding()
    user.complete_onboarding()
    user.record_activity()

    assert user.skill_level == "advanced"
    assert user.last_active is not None
    assert [event.event_type for event in user.pending_events()] == [
        UserEvents.FOCUS_AREA_SET,
        UserEvents.ONBOARDING_COMPLETED,
    ]


def test_personality_dominant_traits():
    profile = Personality(user_id="u-1")

    profile.update_traits({"openness": 85, "caution": 40})
    profile.update_traits({"curiosity": 70})

    assert profile.dominant_traits == ["curiosity", "openness"]
    assert profile.pending_events()[-1].event_type == PersonalityEvents.TRAITS_UPDATED
    with pytest.raises(PersonalityValidationError):
        profile.update_traits({"openness": 120})


def test_personality_update_routes_insights():
    profile = Personality(user_id="u-1")

    profile.update(insights={"summary": "curious"}, ai_attitudes={"trust": 60})

    assert profile.insights == {"summary": "curious"}
    assert profile.ai_attitudes == {"trust": 60}
    assert profile.pending_events()[0].event_type == PersonalityEvents.INSIGHTS_GENERATED
    with pytest.raises(PersonalityValidationError):
        profile.update(user_id="other")
