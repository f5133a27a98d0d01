from .base import BalanceAdapter, BalanceRecord, BearerAdapter, OutgoingRequest
from .deepseek import DeepSeekAdapter
from .openrouter import OpenRouterAdapter
from .aliyun import AliyunAdapter

__all__ = [
    "BalanceAdapter",
    "BalanceRecord",
    "BearerAdapter",
    "OutgoingRequest",
    "DeepSeekAdapter",
    "OpenRouterAdapter",
    "AliyunAdapter",
]
