"""
余额服务模块
从凭据存储读取指定平台的凭据并交给 BalanceFetcher 查询
"""
import logging
from typing import Optional

from cryptography.fernet import InvalidToken

from balancewatch.services import providers
from balancewatch.services.adapters.base import BalanceRecord, failure_record
from balancewatch.services.credential_store import CredentialStore
from balancewatch.services.fetcher import BalanceFetcher

logger = logging.getLogger(__name__)

MISSING_CREDENTIAL_MESSAGE = "未设置API密钥"
UNREADABLE_CREDENTIAL_MESSAGE = "凭据无法解密，请重新设置"


class UnknownProviderError(LookupError):
    """未知的平台标识符（配置错误，而非网络错误）"""

    def __init__(self, provider_id: str):
        super().__init__(f"未知的平台标识符: {provider_id}")
        self.provider_id = provider_id


def get_provider_or_raise(provider_id: str) -> providers.ProviderConfig:
    config = providers.lookup(provider_id)
    if config is None:
        raise UnknownProviderError(provider_id)
    return config


async def query_balance(
    provider_id: str,
    store: CredentialStore,
    fetcher: Optional[BalanceFetcher] = None,
) -> BalanceRecord:
    """
    查询已保存凭据的平台余额
    :param provider_id: 平台标识符
    :param store: 凭据存储
    :param fetcher: 余额查询器，默认新建
    :return: 余额记录；未设置凭据时返回带 error 的记录
    :raises UnknownProviderError: 如果平台标识符未知
    """
    config = get_provider_or_raise(provider_id)
    return await _query(config, store, fetcher)


async def query_widget_balance(
    parameter: Optional[str],
    store: CredentialStore,
    fetcher: Optional[BalanceFetcher] = None,
) -> BalanceRecord:
    """按小组件参数（"1"/"2"/"3"）选择平台并查询余额"""
    config = providers.resolve_widget_parameter(parameter)
    logger.debug("小组件参数 %r 对应平台 %s", parameter, config.id)
    return await _query(config, store, fetcher)


async def _query(
    config: providers.ProviderConfig,
    store: CredentialStore,
    fetcher: Optional[BalanceFetcher],
) -> BalanceRecord:
    try:
        raw_credential = store.get(config.storage_key)
    except InvalidToken:
        # 主密钥更换后旧密文无法解密
        logger.warning("%s 的凭据无法解密", config.id)
        return failure_record(config, UNREADABLE_CREDENTIAL_MESSAGE)
    if raw_credential is None:
        return failure_record(config, MISSING_CREDENTIAL_MESSAGE)
    fetcher = fetcher or BalanceFetcher()
    return await fetcher.fetch(config, raw_credential)
