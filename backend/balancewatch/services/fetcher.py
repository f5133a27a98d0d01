"""
余额查询模块
一次查询的完整流程：
1. 解码并校验凭据
2. 由适配器构造请求（Bearer 头或阿里云签名 URL）
3. 在固定超时内发送请求，并对 HTTP 结果分类
4. 交给对应平台的适配器解析响应
任何失败都记录在返回结果的 error 字段中，fetch 本身不会抛出异常
"""
import json
import logging
from datetime import datetime, timezone
from typing import Optional

from balancewatch.services import credentials
from balancewatch.services.adapter_factory import AdapterFactory
from balancewatch.services.adapters.base import BalanceRecord, failure_record
from balancewatch.services.credentials import CredentialValidationError
from balancewatch.services.providers import ProviderConfig
from balancewatch.services.transport import REQUEST_TIMEOUT, HttpTransport, TransportError

logger = logging.getLogger(__name__)

# 错误响应体在错误信息中保留的最大长度
ERROR_BODY_SNIPPET_LENGTH = 50


class BalanceFetcher:
    """
    余额查询器
    不保存任何跨调用的状态，可被多个平台的查询并发使用
    """

    def __init__(self, transport: Optional[HttpTransport] = None, timeout: float = REQUEST_TIMEOUT):
        """
        :param transport: HTTP 传输实现，默认使用 httpx
        :param timeout: 请求超时时间（秒）
        """
        self.transport = transport or HttpTransport()
        self.timeout = timeout

    async def fetch(self, config: ProviderConfig, raw_credential: str) -> BalanceRecord:
        """
        查询指定平台的余额
        :param config: 平台配置
        :param raw_credential: 存储中的原始凭据字符串
        :return: 余额记录（失败时 error 字段有值，且没有 retrieved_at）
        """
        logger.debug("开始查询 %s 余额", config.id)

        try:
            credential = credentials.decode(config, raw_credential)
        except CredentialValidationError as e:
            logger.warning("%s 凭据校验失败: %s", config.id, e.reason.value)
            return failure_record(config, e.message)

        adapter = AdapterFactory.create_adapter(config)
        if adapter is None:
            logger.error("未知API类型: %s", config.id)
            return failure_record(config, f"不支持的API类型: {config.id}")

        request = adapter.build_request(credential)

        try:
            response = await self.transport.send(
                request.url,
                method=request.method,
                headers=request.headers,
                timeout=self.timeout,
            )
        except TransportError as e:
            logger.warning("查询 %s 余额时网络错误: %s", config.id, e)
            return failure_record(config, f"网络错误: {e}")

        if not response.is_success:
            snippet = response.text[:ERROR_BODY_SNIPPET_LENGTH]
            logger.warning("查询 %s 余额时 API 返回 %s", config.id, response.status_code)
            return failure_record(
                config, f"{adapter.http_error_label}: {response.status_code} - {snippet}"
            )

        try:
            body = json.loads(response.text)
        except ValueError:
            # 平台有应答但内容无法解析，视为暂无数据
            logger.warning("%s 返回的响应不是有效的 JSON", config.id)
            body = None

        record = adapter.parse(body) if body is not None else None
        if record is None:
            logger.info("%s 没有可用的余额数据", config.id)
            record = BalanceRecord(provider_id=config.id, display_name=config.display_name)

        if record.error is not None:
            logger.warning("%s 返回业务错误: %s", config.id, record.error)
            return record

        record.retrieved_at = datetime.now(timezone.utc)
        if record.amount is not None:
            logger.info("成功查询 %s 余额: %s%s", config.id, record.currency or "", record.amount)
        return record
