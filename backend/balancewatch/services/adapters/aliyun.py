"""
阿里云平台适配器
通过 BSS OpenAPI 的 QueryAccountBalance 接口查询账户余额
请求需要使用 AccessKey 签名，参见 balancewatch.services.signing
"""
from typing import Any, Optional

import pydantic
from pydantic import BaseModel

from balancewatch.services.providers import currency_symbol
from balancewatch.services.signing import sign_request
from .base import BalanceAdapter, BalanceRecord, OutgoingRequest, to_number


class AliyunBalanceData(BaseModel):
    # 其他返回字段：CreditAmount、MybankCreditAmount、AvailableCashAmount、QuotaLimit
    AvailableAmount: Any = None
    Currency: Optional[str] = None


class AliyunBalanceResponse(BaseModel):
    Success: Any = None
    Code: Any = None
    Message: Optional[str] = None
    Data: Optional[AliyunBalanceData] = None


class AliyunAdapter(BalanceAdapter):
    """
    阿里云平台适配器
    与其他平台不同，阿里云的业务失败总是返回带 error 的记录，而不是 None
    """

    http_error_label = "阿里云API错误"

    def build_request(self, credential) -> OutgoingRequest:
        signed = sign_request(credential)
        return OutgoingRequest(url=signed.url, headers=signed.headers)

    def parse(self, body: Any) -> Optional[BalanceRecord]:
        try:
            payload = AliyunBalanceResponse.model_validate(body)
        except pydantic.ValidationError:
            return self.error_record("阿里云API返回格式无法识别")

        if not payload.Success:
            return self.error_record(payload.Message or "阿里云API返回失败")

        # 检查响应码，非 "200" 也视为错误
        if payload.Code != "200":
            return self.error_record(payload.Message or f"阿里云API错误: {payload.Code}")

        if payload.Data is None:
            return self.error_record("阿里云API返回数据为空")

        amount = to_number(payload.Data.AvailableAmount or "0")
        return BalanceRecord(
            provider_id=self.config.id,
            display_name=self.config.display_name,
            amount=amount,
            currency=currency_symbol(payload.Data.Currency or self.config.default_currency),
        )
