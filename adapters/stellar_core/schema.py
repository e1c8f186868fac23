"""
stellar-core 소스 저장소 스키마

임포터가 읽는 테이블만 정의 (ledgerheaders, txhistory, txfeehistory).
운영에서는 stellar-core가 직접 만든 DB를 읽기 전용으로 열기 때문에
로컬 개발/테스트용 빈 DB를 만들 때만 사용.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_core_schema(db: "SQLiteAdapter") -> None:
    """소스 저장소 테이블 생성 (IF NOT EXISTS)

    Args:
        db: 쓰기 가능한 SQLiteAdapter
    """
    await db.execute("""
        CREATE TABLE IF NOT EXISTS ledgerheaders (
            ledgerhash       CHARACTER(64) PRIMARY KEY,
            prevhash         CHARACTER(64) NOT NULL,
            bucketlisthash   CHARACTER(64) NOT NULL,
            ledgerseq        INTEGER UNIQUE CHECK (ledgerseq >= 0),
            closetime        BIGINT NOT NULL CHECK (closetime >= 0),
            data             TEXT NOT NULL
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS txhistory (
            txid             CHARACTER(64) NOT NULL,
            ledgerseq        INTEGER NOT NULL CHECK (ledgerseq >= 0),
            txindex          INTEGER NOT NULL,
            txbody           TEXT NOT NULL,
            txresult         TEXT NOT NULL,
            txmeta           TEXT NOT NULL,
            PRIMARY KEY (ledgerseq, txindex)
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS txfeehistory (
            txid             CHARACTER(64) NOT NULL,
            ledgerseq        INTEGER NOT NULL CHECK (ledgerseq >= 0),
            txindex          INTEGER NOT NULL,
            txchanges        TEXT NOT NULL,
            PRIMARY KEY (ledgerseq, txindex)
        )
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_txhistory_txid
        ON txhistory(txid)
    """)

    await db.commit()

    logger.info("소스 저장소 스키마 초기화 완료")
