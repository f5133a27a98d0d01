"""
FastAPI 应用主入口文件
负责初始化应用、配置日志和中间件、注册路由
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session

from balancewatch.api.routers import balance, providers as providers_router
from balancewatch.core.database import engine, init_db
from balancewatch.services import providers
from balancewatch.services.credential_store import migrate_shared_credentials

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# 允许的前端地址，逗号分隔
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理
    启动时初始化数据库，并把旧版公共存储中的凭据迁移到私有存储
    """
    init_db()  # 初始化数据库表结构
    with Session(engine) as session:
        migrate_shared_credentials(session, [config.storage_key for config in providers.list_providers()])
    logger.info("BalanceWatch 已启动，支持 %d 个平台", len(providers.list_providers()))
    yield


# 创建 FastAPI 应用实例
app = FastAPI(
    title="BalanceWatch API",
    description="AI API Balance Checker",
    version="1.0.0",
    lifespan=lifespan,
)

# 配置 CORS 中间件，允许跨域请求
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册路由
app.include_router(providers_router.router, prefix="/api", tags=["providers"])  # 平台与凭据
app.include_router(balance.router, prefix="/api", tags=["balance"])  # 余额查询


@app.get("/")
async def root():
    """根路径，返回 API 基本信息"""
    return {"message": "BalanceWatch API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """健康检查端点，用于监控服务状态"""
    return {"status": "healthy"}
