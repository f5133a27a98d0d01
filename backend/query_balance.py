#!/usr/bin/env python3
"""
余额查询脚本
按小组件参数选择平台，读取已保存的凭据并输出一次余额查询结果（JSON）

使用方法：
    python query_balance.py [参数]

参数 1=DeepSeek, 2=OpenRouter, 3=阿里云，省略时默认 DeepSeek
"""
import asyncio
import sys

from sqlmodel import Session

from balancewatch.core.database import engine, init_db
from balancewatch.services.balance_service import query_widget_balance
from balancewatch.services.credential_store import CredentialStore


async def main(parameter=None) -> int:
    init_db()
    with Session(engine) as session:
        record = await query_widget_balance(parameter, CredentialStore(session))
    print(record.model_dump_json(indent=2))
    return 1 if record.error else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None)))
