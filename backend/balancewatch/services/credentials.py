"""
凭据编解码模块
在存储中保存的字符串与各平台凭据对象之间转换：
- Bearer 平台：存储的就是密钥字符串本身
- 阿里云：存储 JSON 格式的 {accessKeyId, accessKeySecret, regionId}
"""
from enum import Enum
from typing import Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from balancewatch.services.providers import (
    AuthKind,
    BearerKeyRule,
    ProviderConfig,
    SignedKeyRule,
)


class ValidationReason(str, Enum):
    """凭据校验失败原因"""
    EMPTY_CREDENTIAL = "empty_credential"
    PREFIX_MISMATCH = "prefix_mismatch"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    MALFORMED_CREDENTIAL = "malformed_credential"


class CredentialValidationError(Exception):
    """
    凭据校验错误
    属于本地可修正的错误，message 可直接展示给用户
    """

    def __init__(self, reason: ValidationReason, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.field = field  # 出错的字段（仅结构化凭据）


class BearerToken(BaseModel):
    """Bearer 密钥"""
    model_config = ConfigDict(frozen=True)

    token: str


class SignedCredential(BaseModel):
    """阿里云 AccessKey 凭据"""
    model_config = ConfigDict(
        frozen=True,
        strict=True,  # 三个字段都必须是字符串
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    access_key_id: str
    access_key_secret: str
    region_id: str


Credential = Union[BearerToken, SignedCredential]


def decode(config: ProviderConfig, raw: str) -> Credential:
    """
    将存储中的字符串解码为凭据对象并校验
    :param config: 平台配置
    :param raw: 存储中的原始字符串
    :return: 凭据对象
    :raises CredentialValidationError: 如果凭据为空、格式错误或不符合平台规则
    """
    if config.auth_kind == AuthKind.ALIYUN_SIGNED:
        return _decode_signed(config.credential_rule, raw)
    return _decode_bearer(config.credential_rule, raw)


def encode(credential: Credential) -> str:
    """
    将凭据对象编码为存储字符串（decode 的逆操作）
    """
    if isinstance(credential, SignedCredential):
        return credential.model_dump_json(by_alias=True)
    return credential.token


def _decode_bearer(rule: BearerKeyRule, raw: str) -> BearerToken:
    token = (raw or "").strip()

    if not token:
        raise CredentialValidationError(
            ValidationReason.EMPTY_CREDENTIAL, "请输入有效的 API 密钥"
        )

    # 检查密钥前缀
    if rule.prefix and not token.startswith(rule.prefix):
        raise CredentialValidationError(
            ValidationReason.PREFIX_MISMATCH, f'API 密钥应以 "{rule.prefix}" 开头'
        )

    # 检查密钥最小长度
    if rule.min_length and len(token) < rule.min_length:
        raise CredentialValidationError(
            ValidationReason.TOO_SHORT,
            f"API 密钥长度过短，至少需要 {rule.min_length} 个字符",
        )

    # 密钥会原样放入 HTTP 请求头，只允许 ASCII 字符
    if not token.isascii():
        raise CredentialValidationError(
            ValidationReason.MALFORMED_CREDENTIAL, "API 密钥只能包含 ASCII 字符"
        )

    return BearerToken(token=token)


def _decode_signed(rule: SignedKeyRule, raw: str) -> SignedCredential:
    try:
        credential = SignedCredential.model_validate_json(raw or "")
    except pydantic.ValidationError:
        raise CredentialValidationError(
            ValidationReason.MALFORMED_CREDENTIAL, "无效的阿里云凭据格式"
        )

    if not credential.access_key_id:
        raise CredentialValidationError(
            ValidationReason.EMPTY_CREDENTIAL, "请输入有效的 AccessKey ID", field="access_key_id"
        )
    if not credential.access_key_secret:
        raise CredentialValidationError(
            ValidationReason.EMPTY_CREDENTIAL, "请输入有效的 AccessKey Secret", field="access_key_secret"
        )
    # 地区只要求非空，未知地区在请求时回退到默认端点
    if not credential.region_id:
        raise CredentialValidationError(
            ValidationReason.EMPTY_CREDENTIAL, "请选择地区", field="region_id"
        )

    if not credential.access_key_id.startswith(rule.access_key_id_prefix):
        raise CredentialValidationError(
            ValidationReason.PREFIX_MISMATCH,
            f"AccessKey ID 应以 '{rule.access_key_id_prefix}' 开头",
            field="access_key_id",
        )
    _check_length(credential.access_key_id, rule.access_key_id_length, "AccessKey ID", "access_key_id")
    _check_length(
        credential.access_key_secret, rule.access_key_secret_length, "AccessKey Secret", "access_key_secret"
    )

    return credential


def _check_length(value: str, bounds, label: str, field: str) -> None:
    low, high = bounds
    if low <= len(value) <= high:
        return
    reason = ValidationReason.TOO_SHORT if len(value) < low else ValidationReason.TOO_LONG
    raise CredentialValidationError(reason, f"{label} 长度应为{low}-{high}个字符", field=field)
