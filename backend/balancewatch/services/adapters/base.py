"""
适配器基类模块
定义余额适配器的抽象接口和统一的余额记录结构
所有平台适配器都必须继承此基类，实现 build_request 和 parse 两个方法
"""
import math
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, computed_field

from balancewatch.services.credentials import Credential
from balancewatch.services.providers import ProviderConfig, currency_symbol


class BalanceRecord(BaseModel):
    """
    统一的余额记录
    error 存在时数值字段不具有参考意义；amount 为 None 且无 error 表示"暂无数据"
    retrieved_at 为 None 表示从未成功获取
    """
    provider_id: str
    display_name: str
    amount: Optional[float] = None  # 可用余额
    currency: Optional[str] = None  # 货币符号（已转换，如 "$"）
    limit: Optional[float] = None  # 总额度
    usage: Optional[float] = None  # 已使用额度
    limit_remaining: Optional[float] = None  # 剩余额度
    is_free_tier: Optional[bool] = None
    error: Optional[str] = None
    retrieved_at: Optional[datetime] = None

    @computed_field
    @property
    def state(self) -> str:
        if self.error is not None:
            return "error"
        if self.amount is None:
            return "no_data"
        return "balance"


class OutgoingRequest(BaseModel):
    """适配器构造的待发送请求"""
    url: str
    method: str = "GET"
    headers: Dict[str, str]


class BalanceAdapter(ABC):
    """
    余额适配器抽象基类
    适配器只负责"怎么发请求"和"怎么解析响应"，发送与错误归类由 BalanceFetcher 统一处理
    """

    # 非 2xx 响应错误信息的前缀
    http_error_label = "API错误"

    def __init__(self, config: ProviderConfig):
        """
        初始化适配器
        :param config: 平台配置
        """
        self.config = config

    @abstractmethod
    def build_request(self, credential: Credential) -> OutgoingRequest:
        """
        构造余额查询请求
        :param credential: 已校验的凭据
        """

    @abstractmethod
    def parse(self, body: Any) -> Optional[BalanceRecord]:
        """
        将平台返回的 JSON 解析为统一的余额记录
        不得抛出异常：无法识别的结构返回 None（视为暂无数据）或带 error 的记录

        :param body: 已解码的 JSON
        :return: 余额记录，没有可用数据时返回 None
        """

    def error_record(self, message: str) -> BalanceRecord:
        return failure_record(self.config, message)


class BearerAdapter(BalanceAdapter):
    """使用 Bearer Token 认证的平台的公共实现"""

    def build_request(self, credential: Credential) -> OutgoingRequest:
        return OutgoingRequest(
            url=self.config.endpoint,
            headers={
                "Authorization": f"Bearer {credential.token}",  # 使用 Bearer token 认证
                "Content-Type": "application/json",
            },
        )


def failure_record(config: ProviderConfig, message: str) -> BalanceRecord:
    """
    构造失败记录（不带时间戳）
    amount 为 0 仅作占位，货币使用平台默认货币
    """
    return BalanceRecord(
        provider_id=config.id,
        display_name=config.display_name,
        amount=0.0,
        currency=currency_symbol(config.default_currency),
        error=message,
    )


def to_number(value: Any, default: float = 0.0) -> float:
    """
    将数字或数字字符串转换为 float，与区域设置无关
    无法解析或非有限值时返回 default
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    return number if math.isfinite(number) else default
