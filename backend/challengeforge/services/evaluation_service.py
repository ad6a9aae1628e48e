"""Challenge evaluation through the guarded AI client."""
from __future__ import annotations

import json
from typing import Any, Dict, List

import structlog

from challengeforge.domains.challenge.domain.entities import Challenge
from challengeforge.domains.challenge.domain.errors import ChallengeValidationError
from challengeforge.domains.challenge.infrastructure.repositories import ChallengeRepository
from challengeforge.domains.evaluation.domain.entities import Evaluation
from challengeforge.domains.evaluation.infrastructure.repositories import EvaluationRepository
from challengeforge.shared_kernel.exceptions import DomainException, ExternalServiceError

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = (
    "You evaluate answers to professional challenges. Reply with a JSON object "
    "containing: score (0-100), overallFeedback, categoryScores, strengths, "
    "areasForImprovement and nextSteps."
)


class EvaluationService:
    def __init__(
        self,
        challenge_repository: ChallengeRepository,
        evaluation_repository: EvaluationRepository,
        ai_client: Any,
    ) -> None:
        self.challenge_repository = challenge_repository
        self.evaluation_repository = evaluation_repository
        self.ai_client = ai_client

    async def evaluate_challenge(self, challenge_id: str) -> Evaluation:
        """Load the challenge, ask the provider for feedback and persist the evaluation."""
        challenge = await self.challenge_repository.find_by_id(challenge_id, throw_if_not_found=True)
        if not challenge.responses:
            raise ChallengeValidationError(
                "Challenge has no responses to evaluate", metadata={"id": challenge_id}
            )

        feedback = await self._request_feedback(challenge)
        evaluation = await self.evaluation_repository.save(
            Evaluation.from_feedback(challenge.id, challenge.user_email, feedback)
        )

        challenge.complete({"score": evaluation.score, "evaluationId": evaluation.id})
        await self.challenge_repository.save(challenge)
        logger.info(
            "challenge_evaluated",
            challenge_id=challenge.id,
            evaluation_id=evaluation.id,
            score=evaluation.score,
        )
        return evaluation

    async def _request_feedback(self, challenge: Challenge) -> Dict[str, Any]:
        try:
            return await self.ai_client.chat_json(messages=self._build_messages(challenge))
        except DomainException:
            raise
        except Exception as exc:
            raise ExternalServiceError(
                "AI evaluation failed", cause=exc, metadata={"challengeId": challenge.id}
            ) from exc

    @staticmethod
    def _build_messages(challenge: Challenge) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": json.dumps(
                    {
                        "title": challenge.title,
                        "focusArea": challenge.focus_area,
                        "difficulty": challenge.difficulty,
                        "challenge": challenge.content,
                        "criteria": challenge.evaluation_criteria,
                        "responses": challenge.responses,
                    },
                    default=str,
                ),
            },
        ]
