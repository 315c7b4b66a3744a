from .authentication_use_case import AuthenticationUseCase
from .register_user_use_case import RegisterUserUseCase

__all__ = ["AuthenticationUseCase", "RegisterUserUseCase"]
