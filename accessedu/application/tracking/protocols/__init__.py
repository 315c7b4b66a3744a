from .learning_session_repository import LearningSessionRepositoryProtocol
from .profile_repository import ProfileRepositoryProtocol

__all__ = [
    "LearningSessionRepositoryProtocol",
    "ProfileRepositoryProtocol",
]
