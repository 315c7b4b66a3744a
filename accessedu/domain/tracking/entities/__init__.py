from .learning_session import LearningSession, SessionState, compute_duration_minutes
from .profile import Profile

__all__ = [
    "LearningSession",
    "Profile",
    "SessionState",
    "compute_duration_minutes",
]
