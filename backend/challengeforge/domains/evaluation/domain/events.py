"""Evaluation event types."""


class EvaluationEvents:
    CREATED = "evaluation.created"
    DELETED = "evaluation.deleted"
    SCORE_ADJUSTED = "evaluation.score_adjusted"
