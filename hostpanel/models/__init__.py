from .user import UserRecord
from .token import IssuedToken, TokenClaims
from .metrics import SystemMetrics, usage_percent
from .process import ProcessSnapshot, rank_processes

__all__ = [
    "UserRecord",
    "IssuedToken",
    "TokenClaims",
    "SystemMetrics",
    "usage_percent",
    "ProcessSnapshot",
    "rank_processes",
]
