"""
DeepSeek 平台适配器
API 文档: https://api-docs.deepseek.com/api/get-user-balance
响应格式: {"is_available": true, "balance_infos": [{"currency": "CNY", "total_balance": "110.00", ...}]}
"""
from typing import Any, List, Optional

import pydantic
from pydantic import BaseModel

from balancewatch.services.providers import currency_symbol
from .base import BalanceRecord, BearerAdapter, to_number


class DeepSeekBalanceInfo(BaseModel):
    currency: Optional[str] = None
    total_balance: Any = None  # 可能是数字或数字字符串


class DeepSeekBalanceResponse(BaseModel):
    balance_infos: Optional[List[DeepSeekBalanceInfo]] = None


class DeepSeekAdapter(BearerAdapter):
    """
    DeepSeek 平台适配器
    只取 balance_infos 中的第一条作为主余额
    """

    def parse(self, body: Any) -> Optional[BalanceRecord]:
        try:
            payload = DeepSeekBalanceResponse.model_validate(body)
        except pydantic.ValidationError:
            return None

        if not payload.balance_infos:
            return None

        main_balance = payload.balance_infos[0]
        if main_balance.total_balance is None:
            return None

        return BalanceRecord(
            provider_id=self.config.id,
            display_name=self.config.display_name,
            amount=to_number(main_balance.total_balance),
            currency=currency_symbol(main_balance.currency or "USD"),
        )
