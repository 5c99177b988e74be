from yaqdah.models.alertness import (
    AlertnessState,
    ClassifierResult,
    Evaluation,
    InterventionKind,
    InterventionRequest,
    SessionContext,
)

__all__ = [
    "AlertnessState",
    "ClassifierResult",
    "Evaluation",
    "InterventionKind",
    "InterventionRequest",
    "SessionContext",
]
