"""
余额路由模块
查询已保存凭据的余额、按小组件参数查询，以及不保存凭据的测试查询
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from balancewatch.api.deps import get_balance_fetcher, get_credential_store, get_provider
from balancewatch.api.schemas import CredentialPayload
from balancewatch.services import balance_service
from balancewatch.services.adapters.base import BalanceRecord
from balancewatch.services.credential_store import CredentialStore
from balancewatch.services.fetcher import BalanceFetcher
from balancewatch.services.providers import ProviderConfig

router = APIRouter()


@router.get("/providers/{provider_id}/balance", response_model=BalanceRecord)
async def get_balance(
    config: ProviderConfig = Depends(get_provider),
    store: CredentialStore = Depends(get_credential_store),
    fetcher: BalanceFetcher = Depends(get_balance_fetcher),
):
    """
    使用已保存的凭据查询平台余额
    查询失败不会返回错误状态码，失败原因在记录的 error 字段中
    """
    return await balance_service.query_balance(config.id, store, fetcher)


@router.post("/providers/{provider_id}/balance/test", response_model=BalanceRecord)
async def test_balance(
    payload: CredentialPayload,
    config: ProviderConfig = Depends(get_provider),
    fetcher: BalanceFetcher = Depends(get_balance_fetcher),
):
    """
    测试凭据（不保存）
    用于在保存凭据前验证凭据是否有效
    """
    return await fetcher.fetch(config, payload.to_raw(config))


@router.get("/widget/balance", response_model=BalanceRecord)
async def get_widget_balance(
    parameter: Optional[str] = Query(default=None, description="小组件参数：1=DeepSeek, 2=OpenRouter, 3=阿里云"),
    store: CredentialStore = Depends(get_credential_store),
    fetcher: BalanceFetcher = Depends(get_balance_fetcher),
):
    """按小组件参数选择平台并查询余额，无效参数默认使用 DeepSeek"""
    return await balance_service.query_widget_balance(parameter, store, fetcher)
