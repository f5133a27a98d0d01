"""
HTTP 传输模块
对 httpx 的薄封装：发送一次请求，返回状态码、响应头和响应体
网络层失败（DNS、连接、超时）统一转换为 TransportError
"""
import logging
from typing import Dict, Optional

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

# 请求超时时间（秒）
REQUEST_TIMEOUT = 30.0


class TransportError(Exception):
    """网络层错误，与 HTTP 状态码错误区分"""


class TransportResponse(BaseModel):
    status_code: int
    headers: Dict[str, str]
    text: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport:
    """
    基于 httpx.AsyncClient 的传输实现
    每次请求使用独立的客户端，不在调用之间共享连接
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        :param transport: 可选的 httpx 底层传输（测试时传入 httpx.MockTransport）
        """
        self._transport = transport

    async def send(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> TransportResponse:
        """
        发送请求
        :raises TransportError: 如果请求未能发出或未能得到 HTTP 响应
        """
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.request(method, url, headers=headers, timeout=timeout)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            logger.debug("请求 %s 失败: %r", method, e)
            raise TransportError(str(e) or e.__class__.__name__) from e

        return TransportResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            text=response.text,
        )
