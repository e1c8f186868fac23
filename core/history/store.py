"""
히스토리 저장소

history_* 테이블 저장 및 조회.

쓰기 메서드는 커밋하지 않음. 원장 1개의 모든 쓰기는
호출 측(LedgerImporter)의 db.transaction() 범위 안에서 수행되어야 함.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Iterable

import aiosqlite

from core.domain.ledger import SourceLedgerHeader, SourceTransaction
from core.errors import ImportConflictError
from core.history.details import DecodedOperation
from core.history.records import (
    HistoryAccount,
    ImportedEffect,
    ImportedLedger,
    ImportedOperation,
    ImportedTransaction,
)
from core.history.types import HISTORY_TABLES
from core.utils.total_order import make_total_order_id

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from core.history.effect_deriver import EffectRecord

logger = logging.getLogger(__name__)


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


class HistoryStore:
    """히스토리 저장소

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # -------------------------------------------------------------------------
    # 원장
    # -------------------------------------------------------------------------

    async def get_ledger(self, sequence: int) -> ImportedLedger | None:
        row = await self.db.fetchone(
            f"SELECT {ImportedLedger.COLUMNS} FROM history_ledgers WHERE sequence = ?",
            (sequence,),
        )
        return ImportedLedger.from_row(row) if row else None

    async def insert_ledger(
        self,
        header: SourceLedgerHeader,
        transaction_count: int,
        operation_count: int,
        importer_version: int,
    ) -> ImportedLedger:
        """원장 행 생성

        Raises:
            ImportConflictError: 같은 시퀀스/해시가 이미 존재 (동시 임포트)
        """
        first_ledger = header.sequence == 1
        ledger = ImportedLedger(
            id=make_total_order_id(header.sequence, 0, 0),
            sequence=header.sequence,
            ledger_hash=header.ledger_hash,
            previous_ledger_hash=None if first_ledger else header.previous_ledger_hash,
            closed_at=header.closed_at,
            transaction_count=transaction_count,
            operation_count=operation_count,
            total_coins=header.total_coins,
            fee_pool=header.fee_pool,
            base_fee=header.base_fee,
            base_reserve=header.base_reserve,
            max_tx_set_size=header.max_tx_set_size,
            importer_version=importer_version,
        )

        try:
            await self.db.execute(
                f"""
                INSERT INTO history_ledgers ({ImportedLedger.COLUMNS})
                VALUES ({_placeholders(13)})
                """,
                (
                    ledger.id,
                    ledger.sequence,
                    ledger.ledger_hash,
                    ledger.previous_ledger_hash,
                    ledger.closed_at.isoformat(),
                    ledger.transaction_count,
                    ledger.operation_count,
                    ledger.total_coins,
                    ledger.fee_pool,
                    ledger.base_fee,
                    ledger.base_reserve,
                    ledger.max_tx_set_size,
                    ledger.importer_version,
                ),
            )
        except aiosqlite.IntegrityError as e:
            raise ImportConflictError(header.sequence) from e

        return ledger

    async def delete_ledger_tree(self, sequence: int) -> None:
        """원장과 소유 하위 레코드 삭제 (계정은 유지)

        삭제 순서: 이펙트 → 오퍼레이션 참여자 → 오퍼레이션
        → 트랜잭션 참여자 → 트랜잭션 → 원장
        """
        tx_ids = "SELECT id FROM history_transactions WHERE ledger_sequence = ?"
        op_ids = f"SELECT id FROM history_operations WHERE transaction_id IN ({tx_ids})"

        await self.db.execute(
            f"DELETE FROM history_effects WHERE history_operation_id IN ({op_ids})",
            (sequence,),
        )
        await self.db.execute(
            f"DELETE FROM history_operation_participants WHERE history_operation_id IN ({op_ids})",
            (sequence,),
        )
        await self.db.execute(
            f"DELETE FROM history_operations WHERE transaction_id IN ({tx_ids})",
            (sequence,),
        )
        await self.db.execute(
            f"DELETE FROM history_transaction_participants WHERE history_transaction_id IN ({tx_ids})",
            (sequence,),
        )
        await self.db.execute(
            "DELETE FROM history_transactions WHERE ledger_sequence = ?",
            (sequence,),
        )
        await self.db.execute(
            "DELETE FROM history_ledgers WHERE sequence = ?",
            (sequence,),
        )

        logger.debug(f"Deleted ledger tree: {sequence}")

    async def get_latest_ledger_sequence(self) -> int | None:
        row = await self.db.fetchone("SELECT MAX(sequence) FROM history_ledgers")
        return row[0] if row else None

    async def get_stale_ledger_sequences(self, current_version: int, limit: int) -> list[int]:
        """importer_version이 현재보다 낮은 원장 시퀀스 (오래된 순)"""
        rows = await self.db.fetchall(
            """
            SELECT sequence FROM history_ledgers
            WHERE importer_version < ?
            ORDER BY sequence ASC
            LIMIT ?
            """,
            (current_version, limit),
        )
        return [row[0] for row in rows]

    # -------------------------------------------------------------------------
    # 계정
    # -------------------------------------------------------------------------

    async def ensure_master_account(self, address: str, account_id: int) -> bool:
        """마스터 계정 생성 (이미 있으면 무시)

        원장 1 임포트 중에만 호출됨.

        Returns:
            새로 생성했으면 True

        Raises:
            ImportConflictError: 다른 워커가 먼저 마스터 계정을 기록함
        """
        row = await self.db.fetchone(
            "SELECT address FROM history_accounts WHERE id = ?",
            (account_id,),
        )
        if row is not None:
            return False

        try:
            await self.db.execute(
                "INSERT INTO history_accounts (id, address) VALUES (?, ?)",
                (account_id, address),
            )
        except aiosqlite.IntegrityError as e:
            raise ImportConflictError(1) from e

        logger.info(f"마스터 계정 생성: {address}")
        return True

    async def create_account_if_absent(self, address: str, account_id: int) -> bool:
        """계정 생성 (주소가 이미 있으면 무시)

        한 주소는 최초 관측 시 한 번만 생성되며 이후 id는 바뀌지 않음.

        Returns:
            새로 생성했으면 True
        """
        existing = await self.get_account_by_address(address)
        if existing is not None:
            return False

        await self.db.execute(
            "INSERT INTO history_accounts (id, address) VALUES (?, ?)",
            (account_id, address),
        )
        return True

    async def get_account_by_address(self, address: str) -> HistoryAccount | None:
        row = await self.db.fetchone(
            "SELECT id, address FROM history_accounts WHERE address = ?",
            (address,),
        )
        return HistoryAccount(id=row[0], address=row[1]) if row else None

    async def resolve_account_ids(self, addresses: Iterable[str]) -> dict[str, int]:
        """주소 → 계정 id (없는 주소는 결과에서 빠짐)"""
        unique = list(dict.fromkeys(addresses))
        if not unique:
            return {}

        rows = await self.db.fetchall(
            f"SELECT id, address FROM history_accounts WHERE address IN ({_placeholders(len(unique))})",
            tuple(unique),
        )
        return {address: account_id for account_id, address in rows}

    # -------------------------------------------------------------------------
    # 트랜잭션
    # -------------------------------------------------------------------------

    async def insert_transaction(self, transaction_id: int, tx: SourceTransaction) -> None:
        time_bounds = None
        if tx.time_bounds is not None:
            time_bounds = json.dumps(
                {"min_time": tx.time_bounds.min_time, "max_time": tx.time_bounds.max_time}
            )

        await self.db.execute(
            """
            INSERT INTO history_transactions (
                id, transaction_hash, ledger_sequence, application_order,
                account, account_sequence, fee_paid, operation_count,
                tx_envelope, tx_result, tx_meta, tx_fee_meta,
                signatures, time_bounds, memo_type, memo
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                transaction_id,
                tx.transaction_hash,
                tx.ledger_sequence,
                tx.tx_index,
                tx.source_account,
                tx.account_sequence,
                tx.fee_paid,
                tx.operation_count,
                tx.tx_envelope,
                tx.tx_result,
                tx.tx_meta,
                tx.tx_fee_meta,
                json.dumps(list(tx.signatures)),
                time_bounds,
                tx.memo.memo_type.name_s,
                tx.memo.value,
            ),
        )

    async def insert_transaction_participants(
        self,
        transaction_id: int,
        account_ids: list[int],
    ) -> None:
        await self.db.executemany(
            """
            INSERT INTO history_transaction_participants (
                history_transaction_id, history_account_id
            ) VALUES (?, ?)
            """,
            [(transaction_id, account_id) for account_id in account_ids],
        )

    async def get_transactions_for_ledger(self, sequence: int) -> list[ImportedTransaction]:
        rows = await self.db.fetchall(
            f"""
            SELECT {ImportedTransaction.COLUMNS} FROM history_transactions
            WHERE ledger_sequence = ?
            ORDER BY application_order ASC
            """,
            (sequence,),
        )
        return [ImportedTransaction.from_row(row) for row in rows]

    async def get_transaction_participants(self, transaction_id: int) -> list[str]:
        rows = await self.db.fetchall(
            """
            SELECT a.address
            FROM history_transaction_participants p
            JOIN history_accounts a ON a.id = p.history_account_id
            WHERE p.history_transaction_id = ?
            ORDER BY a.id ASC
            """,
            (transaction_id,),
        )
        return [row[0] for row in rows]

    # -------------------------------------------------------------------------
    # 오퍼레이션
    # -------------------------------------------------------------------------

    async def insert_operation(
        self,
        operation_id: int,
        transaction_id: int,
        application_order: int,
        decoded: DecodedOperation,
    ) -> None:
        await self.db.execute(
            """
            INSERT INTO history_operations (
                id, transaction_id, application_order, type, source_account, details
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                operation_id,
                transaction_id,
                application_order,
                decoded.type.value,
                decoded.source_account,
                json.dumps(decoded.details_dict()),
            ),
        )

    async def insert_operation_participants(
        self,
        operation_id: int,
        account_ids: list[int],
    ) -> None:
        await self.db.executemany(
            """
            INSERT INTO history_operation_participants (
                history_operation_id, history_account_id
            ) VALUES (?, ?)
            """,
            [(operation_id, account_id) for account_id in account_ids],
        )

    async def get_operations_for_transaction(self, transaction_id: int) -> list[ImportedOperation]:
        rows = await self.db.fetchall(
            f"""
            SELECT {ImportedOperation.COLUMNS} FROM history_operations
            WHERE transaction_id = ?
            ORDER BY application_order ASC
            """,
            (transaction_id,),
        )
        return [ImportedOperation.from_row(row) for row in rows]

    async def get_operation_participants(self, operation_id: int) -> list[str]:
        rows = await self.db.fetchall(
            """
            SELECT a.address
            FROM history_operation_participants p
            JOIN history_accounts a ON a.id = p.history_account_id
            WHERE p.history_operation_id = ?
            ORDER BY a.id ASC
            """,
            (operation_id,),
        )
        return [row[0] for row in rows]

    # -------------------------------------------------------------------------
    # 이펙트
    # -------------------------------------------------------------------------

    async def insert_effects(
        self,
        records: list[EffectRecord],
        account_ids: dict[str, int],
    ) -> None:
        """이펙트 저장

        Args:
            records: EffectSink가 만든 이펙트 (순번 포함)
            account_ids: 주소 → 계정 id (모든 이펙트 대상 주소를 포함해야 함)
        """
        await self.db.executemany(
            """
            INSERT INTO history_effects (
                history_operation_id, effect_order, history_account_id, type, details
            ) VALUES (?, ?, ?, ?, ?)
            """,
            [
                (
                    record.operation_id,
                    record.order,
                    account_ids[record.account],
                    record.type.value,
                    json.dumps(record.details),
                )
                for record in records
            ],
        )

    async def get_effects_for_operation(self, operation_id: int) -> list[ImportedEffect]:
        rows = await self.db.fetchall(
            """
            SELECT e.history_operation_id, e.effect_order, a.address, e.type, e.details
            FROM history_effects e
            JOIN history_accounts a ON a.id = e.history_account_id
            WHERE e.history_operation_id = ?
            ORDER BY e.effect_order ASC
            """,
            (operation_id,),
        )
        return [ImportedEffect.from_row(row) for row in rows]

    # -------------------------------------------------------------------------
    # 통계
    # -------------------------------------------------------------------------

    async def count_rows(self, table: str) -> int:
        """history_* 테이블 행 수

        Raises:
            ValueError: 히스토리 테이블이 아닌 경우
        """
        if table not in HISTORY_TABLES:
            raise ValueError(f"Unknown history table: {table}")

        row = await self.db.fetchone(f"SELECT COUNT(*) FROM {table}")
        return row[0] if row else 0
