"""
凭据存储模块
以键值方式保存各平台的凭据字符串（get / set / remove），值加密后落库
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from cryptography.fernet import InvalidToken
from sqlmodel import Session, select

from balancewatch.core.security import EncryptionService, encryption_service
from balancewatch.models import StorageScope, StoredCredential

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    凭据存储
    每个实例只操作一个存储范围，调用方负责提交之外的会话生命周期
    """

    def __init__(
        self,
        session: Session,
        scope: StorageScope = StorageScope.PRIVATE,
        encryption: EncryptionService = encryption_service,
    ):
        self.session = session
        self.scope = scope
        self.encryption = encryption

    def _find(self, key: str) -> Optional[StoredCredential]:
        return self.session.exec(
            select(StoredCredential).where(
                StoredCredential.storage_key == key,
                StoredCredential.scope == self.scope,
            )
        ).first()

    def get(self, key: str) -> Optional[str]:
        """
        读取凭据
        :param key: 存储键名
        :return: 明文凭据字符串，不存在时返回 None
        :raises InvalidToken: 如果密文无法用当前主密钥解密
        """
        row = self._find(key)
        if row is None:
            return None
        return self.encryption.decrypt(row.value_encrypted)

    def set(self, key: str, value: str) -> None:
        """保存凭据（覆盖已有值）"""
        row = self._find(key)
        if row is None:
            row = StoredCredential(storage_key=key, scope=self.scope, value_encrypted="")
        row.value_encrypted = self.encryption.encrypt(value)  # 只存储加密后的值
        row.updated_at = datetime.now(timezone.utc)
        self.session.add(row)
        self.session.commit()

    def remove(self, key: str) -> None:
        """删除凭据，不存在时什么也不做"""
        row = self._find(key)
        if row is None:
            return
        self.session.delete(row)
        self.session.commit()

    def has(self, key: str) -> bool:
        return self._find(key) is not None


def migrate_shared_credentials(session: Session, storage_keys: Iterable[str]) -> int:
    """
    将旧版公共存储中的凭据迁移到私有存储
    迁移后删除公共存储中的记录；私有存储中的已有值会被覆盖
    :param session: 数据库会话
    :param storage_keys: 需要检查的存储键名
    :return: 迁移的凭据数量
    """
    shared = CredentialStore(session, scope=StorageScope.SHARED)
    private = CredentialStore(session, scope=StorageScope.PRIVATE)

    migrated_count = 0
    for key in storage_keys:
        try:
            old_value = shared.get(key)
        except InvalidToken:
            logger.warning("%s 的旧存储数据无法解密，跳过迁移", key)
            continue
        if old_value is None:
            continue
        logger.info("检测到 %s 的旧存储数据，正在迁移", key)
        private.set(key, old_value)
        shared.remove(key)
        migrated_count += 1

    if migrated_count:
        logger.info("共完成 %d 个凭据的存储迁移", migrated_count)
    return migrated_count
