# tests/conftest.py

import os

from cryptography.fernet import Fernet

# 必须在导入 balancewatch 之前设置，security 模块导入时即读取
os.environ.setdefault("MASTER_ENCRYPTION_KEY", Fernet.generate_key().decode())
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from balancewatch import models  # noqa: F401  注册表结构
from balancewatch.api.deps import get_balance_fetcher
from balancewatch.core.database import get_session
from balancewatch.main import app
from balancewatch.services.credential_store import CredentialStore
from balancewatch.services.credentials import SignedCredential
from balancewatch.services.fetcher import BalanceFetcher
from balancewatch.services.transport import HttpTransport

DEEPSEEK_KEY = "sk-0123456789abcdef0123"
OPENROUTER_KEY = "sk-or-v1-abcdef"
ALIYUN_CREDENTIAL = SignedCredential(
    access_key_id="LTAI5tExampleKeyId12",
    access_key_secret="abcdefghijklmnopqrstuvwxyz0123",
    region_id="cn-hangzhou",
)


def make_fetcher(handler) -> BalanceFetcher:
    """创建一个所有请求都交给 handler 处理的 BalanceFetcher"""
    return BalanceFetcher(transport=HttpTransport(transport=httpx.MockTransport(handler)))


class RecordingHandler:
    """记录收到的请求，并返回预设的响应"""

    def __init__(self, response=None, exception=None):
        self.response = response if response is not None else httpx.Response(200, json={})
        self.exception = exception
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exception is not None:
            raise self.exception
        return self.response


# ==============================================================================
# 数据库 Fixtures
# ==============================================================================

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session) -> CredentialStore:
    return CredentialStore(session)


# ==============================================================================
# API Fixtures
# ==============================================================================

@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
async def client(session, handler):
    """使用内存数据库和模拟 HTTP 传输的 API 客户端"""
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_balance_fetcher] = lambda: make_fetcher(handler)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
