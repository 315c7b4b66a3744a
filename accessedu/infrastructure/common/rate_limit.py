"""Shared slowapi limiter; disabled when running the test suite."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from accessedu.config import get_settings

limiter = Limiter(
    key_func=get_remote_address,
    enabled=get_settings().ENVIRONMENT != "test",
)
