"""
阿里云 API 签名模块
按照阿里云 RPC 风格签名协议（SignatureVersion 1.0）构造带签名的请求 URL
纯计算，不做任何网络请求；固定 nonce 和 timestamp 时结果完全确定
"""
import base64
import hashlib
import hmac
import secrets
import time
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional
from urllib.parse import quote

from pydantic import BaseModel

from balancewatch.services.credentials import SignedCredential
from balancewatch.services.providers import endpoint_for_region

ALIYUN_API_VERSION = "2017-12-14"
ALIYUN_API_ACTION = "QueryAccountBalance"
ALIYUN_SIGNATURE_METHOD = "HMAC-SHA1"
ALIYUN_SIGNATURE_VERSION = "1.0"

SIGNED_REQUEST_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class SignedRequest(BaseModel):
    """签名后的请求"""
    url: str  # 最终请求 URL（含 Signature 参数）
    headers: Dict[str, str]
    params: Dict[str, str]  # 参与签名的参数（已按规范排序）
    canonical_query: str
    string_to_sign: str
    signature: str


def percent_encode(value: str) -> str:
    """
    签名用的百分号编码，遵循 RFC 3986
    只有 A-Z a-z 0-9 - _ . ~ 不编码，! ' ( ) * 也必须编码
    """
    return quote(value, safe="")


def uri_component_encode(value: str) -> str:
    """最终 URL 使用的编码，与 JavaScript 的 encodeURIComponent 一致"""
    return quote(value, safe="!~*'()")


def make_nonce() -> str:
    """当前毫秒时间戳加 6 位随机数字，保证每次请求唯一"""
    return f"{int(time.time() * 1000)}{secrets.randbelow(10 ** 6):06d}"


def make_timestamp(now: Optional[datetime] = None) -> str:
    """ISO8601 UTC 时间，去掉小数秒"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_canonical_query(params: Mapping[str, str]) -> str:
    """
    构建规范化查询字符串
    参数名按字节序排序，键和值都使用 percent_encode 编码
    """
    ordered = sorted(params, key=lambda key: key.encode("utf-8"))
    return "&".join(f"{percent_encode(key)}={percent_encode(params[key])}" for key in ordered)


def build_string_to_sign(canonical_query: str, method: str = "GET") -> str:
    return f"{method}&{percent_encode('/')}&{percent_encode(canonical_query)}"


def compute_signature(string_to_sign: str, access_key_secret: str) -> str:
    """HMAC-SHA1 签名，密钥为 AccessKeySecret + "&"，结果 Base64 编码"""
    digest = hmac.new(
        f"{access_key_secret}&".encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def sign_request(
    credential: SignedCredential,
    action: str = ALIYUN_API_ACTION,
    nonce: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> SignedRequest:
    """
    生成阿里云 API 签名请求
    :param credential: 阿里云凭据
    :param action: API 名称
    :param nonce: 签名随机数，测试时可固定
    :param timestamp: 请求时间戳，测试时可固定
    :return: 签名后的请求（URL 和请求头）
    """
    # 公共参数
    params = {
        "AccessKeyId": credential.access_key_id,
        "Action": action,
        "Format": "JSON",
        "RegionId": credential.region_id,
        "SignatureMethod": ALIYUN_SIGNATURE_METHOD,
        "SignatureNonce": nonce if nonce is not None else make_nonce(),
        "SignatureVersion": ALIYUN_SIGNATURE_VERSION,
        "Timestamp": timestamp if timestamp is not None else make_timestamp(),
        "Version": ALIYUN_API_VERSION,
    }
    params = {key: params[key] for key in sorted(params, key=lambda key: key.encode("utf-8"))}

    canonical_query = build_canonical_query(params)
    string_to_sign = build_string_to_sign(canonical_query)
    signature = compute_signature(string_to_sign, credential.access_key_secret)

    # 最终 URL：签名参数追加在末尾，使用普通 URI 组件编码
    signed_params = {**params, "Signature": signature}
    query = "&".join(
        f"{uri_component_encode(key)}={uri_component_encode(value)}"
        for key, value in signed_params.items()
    )
    url = f"{endpoint_for_region(credential.region_id)}/?{query}"

    return SignedRequest(
        url=url,
        headers=dict(SIGNED_REQUEST_HEADERS),
        params=params,
        canonical_query=canonical_query,
        string_to_sign=string_to_sign,
        signature=signature,
    )
