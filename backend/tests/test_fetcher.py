# tests/test_fetcher.py

import json

import httpx
import pytest

from balancewatch.services import credentials
from balancewatch.services.providers import ALIYUN, DEEPSEEK, OPENROUTER
from balancewatch.services.transport import HttpTransport, TransportError

from conftest import ALIYUN_CREDENTIAL, DEEPSEEK_KEY, OPENROUTER_KEY, RecordingHandler, make_fetcher

ALIYUN_RAW = credentials.encode(ALIYUN_CREDENTIAL)


# ==============================================================================
# 1. 成功与暂无数据
# ==============================================================================

async def test_deepseek_balance():
    handler = RecordingHandler(
        httpx.Response(200, json={"balance_infos": [{"total_balance": "12.50", "currency": "USD"}]})
    )
    record = await make_fetcher(handler).fetch(DEEPSEEK, f" {DEEPSEEK_KEY} ")

    assert record.amount == 12.5
    assert record.currency == "$"
    assert record.error is None
    assert record.retrieved_at is not None
    assert record.state == "balance"

    request = handler.requests[0]
    assert request.method == "GET"
    assert str(request.url) == DEEPSEEK.endpoint
    assert request.headers["Authorization"] == f"Bearer {DEEPSEEK_KEY}"


async def test_openrouter_balance():
    handler = RecordingHandler(
        httpx.Response(200, json={"data": {"total_credits": 10, "total_usage": 2.5}})
    )
    record = await make_fetcher(handler).fetch(OPENROUTER, OPENROUTER_KEY)

    assert record.amount == 7.5
    assert record.limit == 10.0
    assert record.retrieved_at is not None


async def test_empty_balance_list_is_no_data_not_error():
    handler = RecordingHandler(httpx.Response(200, json={"balance_infos": []}))
    record = await make_fetcher(handler).fetch(DEEPSEEK, DEEPSEEK_KEY)

    assert record.error is None
    assert record.amount is None
    assert record.retrieved_at is not None
    assert record.state == "no_data"


async def test_invalid_json_is_no_data():
    handler = RecordingHandler(httpx.Response(200, text="<html>maintenance</html>"))
    record = await make_fetcher(handler).fetch(OPENROUTER, OPENROUTER_KEY)

    assert record.state == "no_data"
    assert record.retrieved_at is not None


# ==============================================================================
# 2. 失败
# ==============================================================================

async def test_validation_error_skips_request():
    handler = RecordingHandler()
    record = await make_fetcher(handler).fetch(DEEPSEEK, "   ")

    assert record.error == "请输入有效的 API 密钥"
    assert record.retrieved_at is None
    assert handler.requests == []


async def test_http_error_includes_status_and_truncated_body():
    handler = RecordingHandler(httpx.Response(500, text="x" * 80))
    record = await make_fetcher(handler).fetch(DEEPSEEK, DEEPSEEK_KEY)

    assert record.error == "API错误: 500 - " + "x" * 50
    assert record.retrieved_at is None
    assert record.state == "error"


async def test_timeout_and_http_error_are_distinguishable():
    timeout_handler = RecordingHandler(exception=httpx.ReadTimeout("timed out"))
    server_error_handler = RecordingHandler(httpx.Response(500, text="boom"))

    timed_out = await make_fetcher(timeout_handler).fetch(DEEPSEEK, DEEPSEEK_KEY)
    server_error = await make_fetcher(server_error_handler).fetch(DEEPSEEK, DEEPSEEK_KEY)

    assert timed_out.error.startswith("网络错误")
    assert server_error.error.startswith("API错误: 500")
    assert timed_out.error != server_error.error
    assert timed_out.retrieved_at is None
    assert server_error.retrieved_at is None


async def test_connection_error():
    handler = RecordingHandler(exception=httpx.ConnectError("Name or service not known"))
    record = await make_fetcher(handler).fetch(OPENROUTER, OPENROUTER_KEY)

    assert record.error == "网络错误: Name or service not known"
    assert record.retrieved_at is None


async def test_non_ascii_key_is_rejected_before_sending():
    handler = RecordingHandler()
    record = await make_fetcher(handler).fetch(DEEPSEEK, "sk-密钥密钥密钥0123456789abcdef")

    assert record.error == "API 密钥只能包含 ASCII 字符"
    assert record.state == "error"
    assert record.retrieved_at is None
    assert handler.requests == []


async def test_unencodable_header_is_a_transport_error():
    transport = HttpTransport(transport=httpx.MockTransport(RecordingHandler()))

    with pytest.raises(TransportError):
        await transport.send(DEEPSEEK.endpoint, headers={"Authorization": "Bearer 密钥"})


async def test_error_records_carry_provider_currency():
    handler = RecordingHandler(exception=httpx.ConnectError("refused"))

    deepseek = await make_fetcher(handler).fetch(DEEPSEEK, DEEPSEEK_KEY)
    aliyun = await make_fetcher(handler).fetch(ALIYUN, ALIYUN_RAW)
    invalid = await make_fetcher(handler).fetch(OPENROUTER, "")

    assert deepseek.currency == "$"
    assert aliyun.currency == "¥"
    assert invalid.currency == "$"
    assert deepseek.amount == aliyun.amount == invalid.amount == 0


async def test_unsupported_provider():
    handler = RecordingHandler()
    config = DEEPSEEK.model_copy(update={"id": "mystery"})
    record = await make_fetcher(handler).fetch(config, DEEPSEEK_KEY)

    assert record.error == "不支持的API类型: mystery"
    assert handler.requests == []


# ==============================================================================
# 3. 阿里云
# ==============================================================================

async def test_aliyun_balance_uses_signed_request():
    handler = RecordingHandler(
        httpx.Response(200, json={
            "Success": True,
            "Code": "200",
            "Data": {"AvailableAmount": "88.80", "Currency": "CNY"},
        })
    )
    record = await make_fetcher(handler).fetch(ALIYUN, ALIYUN_RAW)

    assert record.amount == 88.8
    assert record.currency == "¥"
    assert record.retrieved_at is not None

    request = handler.requests[0]
    assert request.url.host == "business.aliyuncs.com"
    assert request.url.params["Action"] == "QueryAccountBalance"
    assert request.url.params["AccessKeyId"] == ALIYUN_CREDENTIAL.access_key_id
    assert request.url.params["Signature"]
    assert "Authorization" not in request.headers


async def test_aliyun_unknown_region_uses_default_endpoint():
    raw = json.dumps({
        "accessKeyId": ALIYUN_CREDENTIAL.access_key_id,
        "accessKeySecret": ALIYUN_CREDENTIAL.access_key_secret,
        "regionId": "mars-north-1",
    })
    handler = RecordingHandler(
        httpx.Response(200, json={"Success": True, "Code": "200", "Data": {"AvailableAmount": "1"}})
    )
    record = await make_fetcher(handler).fetch(ALIYUN, raw)

    assert record.error is None
    assert handler.requests[0].url.host == "business.aliyuncs.com"
    assert handler.requests[0].url.params["RegionId"] == "mars-north-1"


async def test_aliyun_business_failure_is_not_stamped():
    handler = RecordingHandler(
        httpx.Response(200, json={"Success": False, "Code": "NotAuthorized", "Message": "insufficient permission"})
    )
    record = await make_fetcher(handler).fetch(ALIYUN, ALIYUN_RAW)

    assert record.error == "insufficient permission"
    assert record.amount == 0
    assert record.retrieved_at is None
    assert record.currency == "¥"


async def test_aliyun_malformed_credential():
    handler = RecordingHandler()
    record = await make_fetcher(handler).fetch(ALIYUN, "LTAI5tExampleKeyId12")

    assert record.error == "无效的阿里云凭据格式"
    assert record.retrieved_at is None
    assert handler.requests == []


async def test_aliyun_http_error_uses_aliyun_prefix():
    handler = RecordingHandler(httpx.Response(500, text="InternalError"))
    record = await make_fetcher(handler).fetch(ALIYUN, ALIYUN_RAW)

    assert record.error == "阿里云API错误: 500 - InternalError"
    assert record.currency == "¥"
    assert record.retrieved_at is None
