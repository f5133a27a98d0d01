"""
适配器工厂模块
根据平台标识符创建对应的余额适配器实例
使用工厂模式实现适配器的统一创建和管理
"""
from typing import Dict, Optional

from balancewatch.services.adapters import (
    AliyunAdapter,
    BalanceAdapter,
    DeepSeekAdapter,
    OpenRouterAdapter,
)
from balancewatch.services.providers import ProviderConfig


class AdapterFactory:
    """
    适配器工厂类
    维护平台标识符到适配器类的映射关系
    """

    # 适配器注册表：将平台标识符映射到对应的适配器类
    _adapters: Dict[str, type[BalanceAdapter]] = {
        "deepseek": DeepSeekAdapter,  # DeepSeek 平台适配器
        "openrouter": OpenRouterAdapter,  # OpenRouter 平台适配器
        "aliyun": AliyunAdapter,  # 阿里云平台适配器（签名认证）
    }

    @classmethod
    def is_supported(cls, provider_id: str) -> bool:
        return provider_id in cls._adapters

    @classmethod
    def create_adapter(cls, config: ProviderConfig) -> Optional[BalanceAdapter]:
        """
        根据平台配置创建适配器实例
        :param config: 平台配置
        :return: 适配器实例，未注册的平台返回 None
        """
        adapter_class = cls._adapters.get(config.id)
        if adapter_class is None:
            return None
        return adapter_class(config)
