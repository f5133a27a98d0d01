"""
数据库配置模块
提供数据库连接引擎和会话管理
"""
import os

from sqlmodel import SQLModel, create_engine, Session

# 从环境变量获取数据库连接 URL，默认使用本地 SQLite 文件
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./balancewatch.db")

# DATABASE_ECHO=true 时打印所有 SQL 语句（仅用于开发调试）
DATABASE_ECHO = os.getenv("DATABASE_ECHO", "false").lower() in ("1", "true", "yes")

# SQLite 连接需要允许跨线程使用（FastAPI 在线程池中执行同步依赖）
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# 创建数据库引擎
engine = create_engine(DATABASE_URL, echo=DATABASE_ECHO, connect_args=_connect_args)


def init_db():
    """
    初始化数据库表结构
    根据 SQLModel 模型定义创建所有表
    """
    # 导入模型以注册到 SQLModel.metadata
    from balancewatch import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    """
    获取数据库会话的依赖项函数
    用于 FastAPI 的 Depends，确保每个请求都有独立的数据库会话
    :yield: 数据库会话对象
    """
    with Session(engine) as session:
        yield session
