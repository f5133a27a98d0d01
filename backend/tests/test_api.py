# tests/test_api.py

import httpx
from fastapi import status

from conftest import ALIYUN_CREDENTIAL, DEEPSEEK_KEY

ALIYUN_PAYLOAD = {
    "access_key_id": ALIYUN_CREDENTIAL.access_key_id,
    "access_key_secret": ALIYUN_CREDENTIAL.access_key_secret,
    "region_id": ALIYUN_CREDENTIAL.region_id,
}


async def test_root_and_health(client):
    assert (await client.get("/")).json()["message"] == "BalanceWatch API"
    assert (await client.get("/health")).json() == {"status": "healthy"}


async def test_list_providers(client, store):
    store.set("openrouter_api_key", "sk-or-x")

    response = await client.get("/api/providers")
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert [p["id"] for p in body] == ["deepseek", "openrouter", "aliyun"]
    assert {p["id"]: p["has_credential"] for p in body} == {
        "deepseek": False,
        "openrouter": True,
        "aliyun": False,
    }
    assert "storage_key" not in body[0]


async def test_list_regions(client):
    regions = (await client.get("/api/regions")).json()
    assert len(regions) == 21
    assert regions[0] == {"id": "cn-hangzhou", "name": "华东1（杭州）", "endpoint": "business.aliyuncs.com"}


async def test_unknown_provider_is_404(client):
    for response in (
        await client.get("/api/providers/anthropic/balance"),
        await client.get("/api/providers/anthropic/credential"),
        await client.put("/api/providers/anthropic/credential", json={"api_key": "x"}),
    ):
        assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_save_invalid_credential_is_400(client, store):
    response = await client.put("/api/providers/deepseek/credential", json={"api_key": "abc"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == 'API 密钥应以 "sk-" 开头'
    assert store.get("deepseek_api_key") is None


async def test_save_and_clear_bearer_credential(client, store):
    response = await client.put("/api/providers/deepseek/credential", json={"api_key": f"  {DEEPSEEK_KEY}  "})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"provider_id": "deepseek", "has_credential": True}
    assert store.get("deepseek_api_key") == DEEPSEEK_KEY

    response = await client.delete("/api/providers/deepseek/credential")
    assert response.status_code == status.HTTP_204_NO_CONTENT

    status_response = await client.get("/api/providers/deepseek/credential")
    assert status_response.json()["has_credential"] is False


async def test_save_aliyun_credential_stores_json(client, store):
    response = await client.put("/api/providers/aliyun/credential", json=ALIYUN_PAYLOAD)
    assert response.status_code == status.HTTP_200_OK
    assert store.get("aliyun_api_credentials") == (
        '{"accessKeyId":"LTAI5tExampleKeyId12",'
        '"accessKeySecret":"abcdefghijklmnopqrstuvwxyz0123",'
        '"regionId":"cn-hangzhou"}'
    )


async def test_save_aliyun_credential_without_region_is_400(client):
    payload = {**ALIYUN_PAYLOAD, "region_id": ""}
    response = await client.put("/api/providers/aliyun/credential", json=payload)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "请选择地区"


async def test_balance_without_credential(client):
    response = await client.get("/api/providers/openrouter/balance")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["error"] == "未设置API密钥"
    assert body["retrieved_at"] is None
    assert body["state"] == "error"


async def test_balance_with_stored_credential(client, store, handler):
    store.set("deepseek_api_key", DEEPSEEK_KEY)
    handler.response = httpx.Response(200, json={"balance_infos": [{"total_balance": "12.50", "currency": "USD"}]})

    body = (await client.get("/api/providers/deepseek/balance")).json()

    assert body["amount"] == 12.5
    assert body["currency"] == "$"
    assert body["state"] == "balance"
    assert body["retrieved_at"] is not None


async def test_balance_http_error_is_reported_in_record(client, store, handler):
    store.set("deepseek_api_key", DEEPSEEK_KEY)
    handler.response = httpx.Response(401, json={"error": {"message": "Authentication Fails"}})

    response = await client.get("/api/providers/deepseek/balance")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["error"].startswith("API错误: 401 - ")


async def test_test_endpoint_does_not_save(client, store, handler):
    handler.response = httpx.Response(
        200, json={"Success": True, "Code": "200", "Data": {"AvailableAmount": "20", "Currency": "CNY"}}
    )

    response = await client.post("/api/providers/aliyun/balance/test", json=ALIYUN_PAYLOAD)

    assert response.json()["amount"] == 20.0
    assert store.get("aliyun_api_credentials") is None


async def test_widget_balance(client, store, handler):
    store.set("openrouter_api_key", "sk-or-x")
    handler.response = httpx.Response(200, json={"data": {"total_credits": 5, "total_usage": 1}})

    body = (await client.get("/api/widget/balance", params={"parameter": "2"})).json()

    assert body["provider_id"] == "openrouter"
    assert body["amount"] == 4.0

    default = (await client.get("/api/widget/balance")).json()
    assert default["provider_id"] == "deepseek"


async def test_save_aliyun_credential_defaults_region(client, store):
    payload = {k: v for k, v in ALIYUN_PAYLOAD.items() if k != "region_id"}
    response = await client.put("/api/providers/aliyun/credential", json=payload)

    assert response.status_code == status.HTTP_200_OK
    assert '"regionId":"cn-hangzhou"' in store.get("aliyun_api_credentials")
