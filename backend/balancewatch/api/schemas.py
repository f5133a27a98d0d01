"""
API 请求/响应模型
"""
from typing import Optional

from pydantic import BaseModel

from balancewatch.services import credentials
from balancewatch.services.credentials import SignedCredential
from balancewatch.services.providers import ALIYUN_DEFAULT_REGION, AuthKind, ProviderConfig


class CredentialPayload(BaseModel):
    """
    凭据请求模型
    Bearer 平台只需要 api_key；阿里云需要 access_key_id、access_key_secret 和 region_id
    """
    api_key: Optional[str] = None  # API 密钥（明文）
    access_key_id: Optional[str] = None
    access_key_secret: Optional[str] = None
    region_id: Optional[str] = ALIYUN_DEFAULT_REGION  # 未填写时使用默认地区

    def to_raw(self, config: ProviderConfig) -> str:
        """转换为存储使用的字符串形式（尚未校验）"""
        if config.auth_kind == AuthKind.ALIYUN_SIGNED:
            return credentials.encode(
                SignedCredential(
                    access_key_id=self.access_key_id or "",
                    access_key_secret=self.access_key_secret or "",
                    region_id=self.region_id or "",
                )
            )
        return self.api_key or ""


class ProviderResponse(BaseModel):
    """平台信息响应模型（不含任何凭据）"""
    id: str
    name: str
    display_name: str
    auth_kind: AuthKind
    console_url: str
    description: str
    widget_parameter: str
    has_credential: bool  # 是否已保存凭据


class CredentialStatusResponse(BaseModel):
    provider_id: str
    has_credential: bool
