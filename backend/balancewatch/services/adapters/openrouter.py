"""
OpenRouter 平台适配器
实现 OpenRouter API 的余额查询功能
OpenRouter 返回总额度和已用额度，剩余额度优先使用平台给出的 limit_remaining
"""
from typing import Any, Optional

import pydantic
from pydantic import BaseModel

from balancewatch.services.providers import currency_symbol
from .base import BalanceRecord, BearerAdapter, to_number


class OpenRouterCredits(BaseModel):
    total_credits: Any = None
    total_usage: Any = None
    limit_remaining: Any = None
    is_free_tier: Optional[bool] = None


class OpenRouterCreditsResponse(BaseModel):
    data: Optional[OpenRouterCredits] = None


class OpenRouterAdapter(BearerAdapter):
    """
    OpenRouter 平台适配器
    通过 OpenRouter API 获取账户额度
    API 文档: https://openrouter.ai/docs
    """

    def parse(self, body: Any) -> Optional[BalanceRecord]:
        try:
            payload = OpenRouterCreditsResponse.model_validate(body)
        except pydantic.ValidationError:
            return None

        credits = payload.data
        if credits is None:
            return None

        limit = to_number(credits.total_credits)
        usage = to_number(credits.total_usage)
        if credits.limit_remaining is not None:
            limit_remaining = to_number(credits.limit_remaining)
        else:
            # 平台未给出剩余额度时自行计算，确保不为负数
            limit_remaining = max(0.0, limit - usage)

        return BalanceRecord(
            provider_id=self.config.id,
            display_name=self.config.display_name,
            amount=limit_remaining,
            currency=currency_symbol("USD"),  # OpenRouter 使用美元
            limit=limit,
            usage=usage,
            limit_remaining=limit_remaining,
            is_free_tier=bool(credits.is_free_tier),
        )
