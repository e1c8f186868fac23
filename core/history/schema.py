"""
히스토리 스키마 초기화

임포터 시작 시 history_* 테이블과 인덱스 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.

id 규칙:
- history_ledgers / history_transactions / history_operations:
  total order id (ledger, tx, op) 로 결정적으로 계산 → 재구축 시 동일한 행
- history_accounts: 최초 관측 시점의 total order id (마스터 계정은 1)
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_history_schema(db: "SQLiteAdapter") -> None:
    """히스토리 스키마 초기화

    Args:
        db: SQLiteAdapter 인스턴스
    """
    await _create_history_tables(db)
    await _create_history_indexes(db)
    await db.commit()
    logger.info("히스토리 스키마 초기화 완료")


async def _create_history_tables(db: "SQLiteAdapter") -> None:
    """히스토리 테이블 생성"""

    # history_ledgers
    await db.execute("""
        CREATE TABLE IF NOT EXISTS history_ledgers (
            id                   INTEGER PRIMARY KEY,
            sequence             INTEGER NOT NULL UNIQUE,
            ledger_hash          TEXT NOT NULL UNIQUE,
            previous_ledger_hash TEXT UNIQUE,
            closed_at            TEXT NOT NULL,
            transaction_count    INTEGER NOT NULL DEFAULT 0,
            operation_count      INTEGER NOT NULL DEFAULT 0,
            total_coins          INTEGER NOT NULL,
            fee_pool             INTEGER NOT NULL,
            base_fee             INTEGER NOT NULL,
            base_reserve         INTEGER NOT NULL,
            max_tx_set_size      INTEGER NOT NULL,
            importer_version     INTEGER NOT NULL,
            imported_at          TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # history_accounts
    await db.execute("""
        CREATE TABLE IF NOT EXISTS history_accounts (
            id               INTEGER PRIMARY KEY,
            address          TEXT NOT NULL UNIQUE
        )
    """)

    # history_transactions
    await db.execute("""
        CREATE TABLE IF NOT EXISTS history_transactions (
            id                 INTEGER PRIMARY KEY,
            transaction_hash   TEXT NOT NULL UNIQUE,
            ledger_sequence    INTEGER NOT NULL
                               REFERENCES history_ledgers(sequence),
            application_order  INTEGER NOT NULL,
            account            TEXT NOT NULL,
            account_sequence   INTEGER NOT NULL,
            fee_paid           INTEGER NOT NULL,
            operation_count    INTEGER NOT NULL,
            tx_envelope        TEXT NOT NULL,
            tx_result          TEXT NOT NULL,
            tx_meta            TEXT NOT NULL,
            tx_fee_meta        TEXT NOT NULL,
            signatures         TEXT NOT NULL DEFAULT '[]',
            time_bounds        TEXT,
            memo_type          TEXT NOT NULL DEFAULT 'none',
            memo               TEXT,
            UNIQUE(ledger_sequence, application_order)
        )
    """)

    # history_transaction_participants
    await db.execute("""
        CREATE TABLE IF NOT EXISTS history_transaction_participants (
            history_transaction_id INTEGER NOT NULL
                                   REFERENCES history_transactions(id),
            history_account_id     INTEGER NOT NULL
                                   REFERENCES history_accounts(id),
            PRIMARY KEY (history_transaction_id, history_account_id)
        )
    """)

    # history_operations
    await db.execute("""
        CREATE TABLE IF NOT EXISTS history_operations (
            id                 INTEGER PRIMARY KEY,
            transaction_id     INTEGER NOT NULL
                               REFERENCES history_transactions(id),
            application_order  INTEGER NOT NULL,
            type               INTEGER NOT NULL,
            source_account     TEXT NOT NULL,
            details            TEXT NOT NULL DEFAULT '{}',
            UNIQUE(transaction_id, application_order)
        )
    """)

    # history_operation_participants
    await db.execute("""
        CREATE TABLE IF NOT EXISTS history_operation_participants (
            history_operation_id INTEGER NOT NULL
                                 REFERENCES history_operations(id),
            history_account_id   INTEGER NOT NULL
                                 REFERENCES history_accounts(id),
            PRIMARY KEY (history_operation_id, history_account_id)
        )
    """)

    # history_effects (order는 예약어이므로 effect_order)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS history_effects (
            history_operation_id INTEGER NOT NULL
                                 REFERENCES history_operations(id),
            effect_order         INTEGER NOT NULL,
            history_account_id   INTEGER NOT NULL
                                 REFERENCES history_accounts(id),
            type                 INTEGER NOT NULL,
            details              TEXT NOT NULL DEFAULT '{}',
            PRIMARY KEY (history_operation_id, effect_order)
        )
    """)


async def _create_history_indexes(db: "SQLiteAdapter") -> None:
    """조회용 인덱스 생성"""

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_history_ledgers_importer_version
        ON history_ledgers(importer_version, sequence)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_history_transactions_account
        ON history_transactions(account, account_sequence)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_history_transaction_participants_account
        ON history_transaction_participants(history_account_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_history_operations_type
        ON history_operations(type)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_history_operation_participants_account
        ON history_operation_participants(history_account_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_history_effects_account
        ON history_effects(history_account_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_history_effects_type
        ON history_effects(type)
    """)
