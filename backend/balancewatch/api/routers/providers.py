"""
平台与凭据路由模块
提供平台列表、地区列表，以及凭据的保存、清除和状态查询
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from balancewatch.api.deps import get_credential_store, get_provider
from balancewatch.api.schemas import CredentialPayload, CredentialStatusResponse, ProviderResponse
from balancewatch.services import credentials, providers
from balancewatch.services.credential_store import CredentialStore
from balancewatch.services.credentials import CredentialValidationError
from balancewatch.services.providers import ProviderConfig, Region

router = APIRouter()


@router.get("/providers", response_model=List[ProviderResponse])
async def list_providers(store: CredentialStore = Depends(get_credential_store)):
    """
    获取所有支持的平台列表，以及每个平台是否已保存凭据
    :param store: 凭据存储
    :return: 平台列表
    """
    return [
        ProviderResponse(
            id=config.id,
            name=config.name,
            display_name=config.display_name,
            auth_kind=config.auth_kind,
            console_url=config.console_url,
            description=config.description,
            widget_parameter=config.widget_parameter,
            has_credential=store.has(config.storage_key),
        )
        for config in providers.list_providers()
    ]


@router.get("/regions", response_model=List[Region])
async def list_regions():
    """获取阿里云支持的地区列表，用于前端下拉选择框"""
    return list(providers.ALIYUN_REGIONS)


@router.get("/providers/{provider_id}/credential", response_model=CredentialStatusResponse)
async def get_credential_status(
    config: ProviderConfig = Depends(get_provider),
    store: CredentialStore = Depends(get_credential_store),
):
    return CredentialStatusResponse(
        provider_id=config.id,
        has_credential=store.has(config.storage_key),
    )


@router.put("/providers/{provider_id}/credential", response_model=CredentialStatusResponse)
async def save_credential(
    payload: CredentialPayload,
    config: ProviderConfig = Depends(get_provider),
    store: CredentialStore = Depends(get_credential_store),
):
    """
    保存平台凭据
    保存前按平台规则校验，存储的是规范化（去除首尾空白）后的字符串
    :param payload: 凭据数据
    :return: 保存后的凭据状态
    :raises HTTPException: 如果平台不存在或凭据校验失败
    """
    try:
        credential = credentials.decode(config, payload.to_raw(config))
    except CredentialValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    store.set(config.storage_key, credentials.encode(credential))
    return CredentialStatusResponse(provider_id=config.id, has_credential=True)


@router.delete("/providers/{provider_id}/credential", status_code=status.HTTP_204_NO_CONTENT)
async def clear_credential(
    config: ProviderConfig = Depends(get_provider),
    store: CredentialStore = Depends(get_credential_store),
):
    """清除平台凭据"""
    store.remove(config.storage_key)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
