"""
安全服务模块
提供凭据加密/解密功能
"""
import logging
import os

from cryptography.fernet import Fernet

logger = logging.getLogger(__name__)

# 从环境变量获取主加密密钥
MASTER_ENCRYPTION_KEY = os.getenv("MASTER_ENCRYPTION_KEY")
if not MASTER_ENCRYPTION_KEY:
    raise ValueError("MASTER_ENCRYPTION_KEY 环境变量必须设置")

# 如果设置为 "generate"，则自动生成密钥（仅用于开发环境，重启后已存储的凭据将无法解密）
if MASTER_ENCRYPTION_KEY == "generate":
    MASTER_ENCRYPTION_KEY = Fernet.generate_key().decode()
    logger.warning("MASTER_ENCRYPTION_KEY=generate，已生成临时加密密钥，请勿用于生产环境")


class EncryptionService:
    """
    加密服务类
    使用 Fernet 对称加密算法对凭据进行加密和解密
    """

    def __init__(self, key: bytes):
        """
        初始化加密服务
        :param key: Fernet 加密密钥（字节格式）
        """
        self.fernet = Fernet(key)

    def encrypt(self, data: str) -> str:
        """
        加密字符串数据
        :param data: 要加密的明文字符串
        :return: 加密后的密文字符串
        """
        return self.fernet.encrypt(data.encode()).decode()

    def decrypt(self, token: str) -> str:
        """
        解密字符串数据
        :param token: 要解密的密文字符串
        :return: 解密后的明文字符串
        :raises cryptography.fernet.InvalidToken: 如果密文无效或密钥不匹配
        """
        return self.fernet.decrypt(token.encode()).decode()


# 初始化加密服务实例（全局单例）
encryption_service = EncryptionService(MASTER_ENCRYPTION_KEY.encode())
