"""
API 依赖项
测试时可通过 app.dependency_overrides 替换
"""
from fastapi import Depends, HTTPException, status
from sqlmodel import Session

from balancewatch.core.database import get_session
from balancewatch.services.balance_service import UnknownProviderError, get_provider_or_raise
from balancewatch.services.credential_store import CredentialStore
from balancewatch.services.fetcher import BalanceFetcher
from balancewatch.services.providers import ProviderConfig


def get_credential_store(session: Session = Depends(get_session)) -> CredentialStore:
    return CredentialStore(session)


def get_balance_fetcher() -> BalanceFetcher:
    return BalanceFetcher()


def get_provider(provider_id: str) -> ProviderConfig:
    """
    从路径参数解析平台配置
    :raises HTTPException: 如果平台不存在
    """
    try:
        return get_provider_or_raise(provider_id)
    except UnknownProviderError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
