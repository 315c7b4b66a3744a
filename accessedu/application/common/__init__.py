from .clock import Clock, utc_now
from .unit_of_work import UnitOfWork

__all__ = ["Clock", "UnitOfWork", "utc_now"]
