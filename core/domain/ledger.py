"""
원장 도메인 모델

소스 저장소(stellar-core)에서 읽어 디코딩한 원장 헤더, 트랜잭션, 메타데이터.
임포터는 이 모델만 보고 동작하며 원시 XDR 블롭은 그대로 복사만 함.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

from core.domain.operations import Asset, OfferEntry, Operation, OperationResult, Signer
from core.types import LedgerEntryChangeType, LedgerEntryType, MemoType, TransactionResultCode


@dataclass(frozen=True)
class SourceLedgerHeader:
    """소스 원장 헤더 (읽기 전용)"""

    sequence: int
    ledger_hash: str
    previous_ledger_hash: str
    closed_at: datetime
    total_coins: int
    fee_pool: int
    base_fee: int
    base_reserve: int
    max_tx_set_size: int


@dataclass(frozen=True)
class Memo:
    """트랜잭션 메모

    value 표현: text는 문자열, id는 10진 문자열, hash/return은 base64.
    """

    memo_type: MemoType = MemoType.NONE
    value: str | None = None


@dataclass(frozen=True)
class TimeBounds:
    min_time: int
    max_time: int


# -------------------------------------------------------------------------
# 원장 엔트리 / 메타데이터
# -------------------------------------------------------------------------


@dataclass(frozen=True)
class AccountEntry:
    account_id: str
    balance: int
    seq_num: int
    num_sub_entries: int
    inflation_dest: str | None
    flags: int
    home_domain: str
    thresholds: bytes
    signers: tuple[Signer, ...] = ()


@dataclass(frozen=True)
class TrustLineEntry:
    account_id: str
    asset: Asset
    balance: int
    limit: int
    flags: int


@dataclass(frozen=True)
class LedgerKey:
    """삭제된 엔트리의 키"""

    entry_type: LedgerEntryType
    account_id: str
    asset: Asset | None = None
    offer_id: int | None = None


LedgerEntryData = Union[AccountEntry, TrustLineEntry, OfferEntry, LedgerKey]


@dataclass(frozen=True)
class LedgerEntryChange:
    """원장 엔트리 변경 1건

    REMOVED는 data가 LedgerKey, 나머지는 엔트리 본문.
    """

    type: LedgerEntryChangeType
    entry_type: LedgerEntryType
    data: LedgerEntryData
    last_modified_ledger_seq: int | None = None


@dataclass(frozen=True)
class OperationMeta:
    changes: tuple[LedgerEntryChange, ...] = ()


@dataclass(frozen=True)
class TransactionMeta:
    operations: tuple[OperationMeta, ...] = ()


# -------------------------------------------------------------------------
# 트랜잭션
# -------------------------------------------------------------------------


@dataclass(frozen=True)
class SourceTransaction:
    """소스 트랜잭션

    operations와 results는 1:1 대응 (같은 인덱스).
    tx_* 필드는 저장용 base64 XDR 원본.
    """

    transaction_hash: str
    ledger_sequence: int
    tx_index: int
    source_account: str
    account_sequence: int
    fee_paid: int
    result_code: int
    operations: tuple[Operation, ...]
    results: tuple[OperationResult, ...]
    meta: TransactionMeta = field(default_factory=TransactionMeta)
    memo: Memo = field(default_factory=Memo)
    time_bounds: TimeBounds | None = None
    signatures: tuple[str, ...] = ()
    tx_envelope: str = ""
    tx_result: str = ""
    tx_meta: str = ""
    tx_fee_meta: str = ""

    @property
    def success(self) -> bool:
        return self.result_code == TransactionResultCode.TX_SUCCESS

    @property
    def operation_count(self) -> int:
        return len(self.operations)

    def operations_with_results(self) -> list[tuple[Operation, OperationResult]]:
        """(오퍼레이션, 결과) 쌍 목록

        Raises:
            ValueError: 개수가 다른 경우 (성공 트랜잭션은 항상 동일해야 함)
        """
        if len(self.operations) != len(self.results):
            raise ValueError(
                f"operation/result 개수 불일치: tx={self.transaction_hash} "
                f"ops={len(self.operations)} results={len(self.results)}"
            )
        return list(zip(self.operations, self.results))

    def operation_meta(self, index: int) -> OperationMeta | None:
        """0부터 시작하는 오퍼레이션 인덱스의 메타 (없으면 None)"""
        if 0 <= index < len(self.meta.operations):
            return self.meta.operations[index]
        return None
