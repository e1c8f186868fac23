"""
히스토리 레코드

history_* 테이블 행을 읽어 만든 불변 레코드.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from core.history.types import EffectType
from core.types import OperationType


@dataclass(frozen=True)
class ImportedLedger:
    id: int
    sequence: int
    ledger_hash: str
    previous_ledger_hash: str | None
    closed_at: datetime
    transaction_count: int
    operation_count: int
    total_coins: int
    fee_pool: int
    base_fee: int
    base_reserve: int
    max_tx_set_size: int
    importer_version: int

    COLUMNS = (
        "id, sequence, ledger_hash, previous_ledger_hash, closed_at, "
        "transaction_count, operation_count, total_coins, fee_pool, "
        "base_fee, base_reserve, max_tx_set_size, importer_version"
    )

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> ImportedLedger:
        return cls(
            id=row[0],
            sequence=row[1],
            ledger_hash=row[2],
            previous_ledger_hash=row[3],
            closed_at=datetime.fromisoformat(row[4]),
            transaction_count=row[5],
            operation_count=row[6],
            total_coins=row[7],
            fee_pool=row[8],
            base_fee=row[9],
            base_reserve=row[10],
            max_tx_set_size=row[11],
            importer_version=row[12],
        )


@dataclass(frozen=True)
class ImportedTransaction:
    id: int
    transaction_hash: str
    ledger_sequence: int
    application_order: int
    account: str
    account_sequence: int
    fee_paid: int
    operation_count: int
    memo_type: str
    memo: str | None
    signatures: list[str]

    COLUMNS = (
        "id, transaction_hash, ledger_sequence, application_order, account, "
        "account_sequence, fee_paid, operation_count, memo_type, memo, signatures"
    )

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> ImportedTransaction:
        return cls(
            id=row[0],
            transaction_hash=row[1],
            ledger_sequence=row[2],
            application_order=row[3],
            account=row[4],
            account_sequence=row[5],
            fee_paid=row[6],
            operation_count=row[7],
            memo_type=row[8],
            memo=row[9],
            signatures=json.loads(row[10]),
        )


@dataclass(frozen=True)
class HistoryAccount:
    id: int
    address: str


@dataclass(frozen=True)
class ImportedOperation:
    id: int
    transaction_id: int
    application_order: int
    type: OperationType
    source_account: str
    details: dict[str, Any]

    COLUMNS = "id, transaction_id, application_order, type, source_account, details"

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> ImportedOperation:
        return cls(
            id=row[0],
            transaction_id=row[1],
            application_order=row[2],
            type=OperationType(row[3]),
            source_account=row[4],
            details=json.loads(row[5]),
        )


@dataclass(frozen=True)
class ImportedEffect:
    """저장된 이펙트 (account는 주소로 조인된 값)"""

    history_operation_id: int
    order: int
    account: str
    type: EffectType
    details: dict[str, Any]

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> ImportedEffect:
        return cls(
            history_operation_id=row[0],
            order=row[1],
            account=row[2],
            type=EffectType(row[3]),
            details=json.loads(row[4]),
        )
