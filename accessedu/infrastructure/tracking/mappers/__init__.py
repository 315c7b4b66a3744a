from .learning_session_mapper import LearningSessionMapper
from .profile_mapper import ProfileMapper

__all__ = ["LearningSessionMapper", "ProfileMapper"]
