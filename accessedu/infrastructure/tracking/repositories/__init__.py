from .learning_session_repository import LearningSessionRepository
from .profile_repository import ProfileRepository

__all__ = ["LearningSessionRepository", "ProfileRepository"]
