"""
数据模型定义
使用 SQLModel 定义凭据存储表结构
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class StorageScope(str, Enum):
    """凭据存储范围"""
    PRIVATE = "private"  # 当前使用的私有存储
    SHARED = "shared"  # 旧版本使用的公共存储，启动时迁移到私有存储


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoredCredential(SQLModel, table=True):
    """
    存储的凭据
    值使用 Fernet 对称加密后保存，核心逻辑只把它当作不透明字符串
    """
    __table_args__ = (UniqueConstraint("storage_key", "scope"),)

    id: Optional[int] = Field(default=None, primary_key=True)  # 主键
    storage_key: str = Field(index=True)  # 存储键名（如 "deepseek_api_key"）
    scope: StorageScope = Field(default=StorageScope.PRIVATE)  # 存储范围
    value_encrypted: str  # 加密后的凭据字符串
    updated_at: datetime = Field(default_factory=_utcnow)  # 更新时间
