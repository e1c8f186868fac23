"""
stellar-core 원장 저장소 (읽기 전용)

stellar-core SQLite DB에서 원장 헤더와 트랜잭션을 읽어 XDR을 디코딩.
ICoreLedgerSource Protocol 구현.
"""

from __future__ import annotations

import base64
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from adapters.stellar_core.decoder import (
    XdrDecodeError,
    b64decode,
    decode_ledger_header,
    decode_transaction_envelope,
    decode_transaction_meta,
    decode_transaction_result_pair,
)
from core.domain.ledger import SourceLedgerHeader, SourceTransaction

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class CoreLedgerStore:
    """stellar-core 원장 저장소

    Args:
        db: SQLite 어댑터 (readonly=True 권장)

    사용 예시:
    ```python
    core_db = SQLiteAdapter(config.core_db_path, readonly=True)
    await core_db.connect()

    store = CoreLedgerStore(core_db)
    header = await store.get_ledger_header(2)
    transactions = await store.get_transactions(2)
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self._has_fee_history: bool | None = None

    async def get_ledger_header(self, sequence: int) -> SourceLedgerHeader | None:
        """원장 헤더 조회

        Args:
            sequence: 원장 시퀀스

        Returns:
            원장 헤더 또는 None (아직 생성되지 않은 원장)

        Raises:
            XdrDecodeError: 헤더 XDR 형식 오류
        """
        row = await self.db.fetchone(
            """
            SELECT ledgerhash, prevhash, ledgerseq, closetime, data
            FROM ledgerheaders
            WHERE ledgerseq = ?
            """,
            (sequence,),
        )
        if row is None:
            return None

        ledger_hash, prev_hash, ledger_seq, close_time, data = row
        decoded = decode_ledger_header(b64decode(data))

        if decoded.ledger_seq != ledger_seq:
            raise XdrDecodeError(
                f"ledger header data seq {decoded.ledger_seq} does not match row seq {ledger_seq}"
            )

        return SourceLedgerHeader(
            sequence=ledger_seq,
            ledger_hash=ledger_hash,
            previous_ledger_hash=prev_hash,
            closed_at=datetime.fromtimestamp(close_time, tz=timezone.utc),
            total_coins=decoded.total_coins,
            fee_pool=decoded.fee_pool,
            base_fee=decoded.base_fee,
            base_reserve=decoded.base_reserve,
            max_tx_set_size=decoded.max_tx_set_size,
        )

    async def get_transactions(self, sequence: int) -> list[SourceTransaction]:
        """원장의 트랜잭션 목록 (txindex 오름차순)

        실패 트랜잭션도 포함. 필터링은 임포터 책임.

        Raises:
            XdrDecodeError: 트랜잭션 XDR 형식 오류
        """
        rows = await self.db.fetchall(
            """
            SELECT txid, ledgerseq, txindex, txbody, txresult, txmeta
            FROM txhistory
            WHERE ledgerseq = ?
            ORDER BY txindex ASC
            """,
            (sequence,),
        )

        fee_changes = await self._get_fee_changes(sequence)

        transactions = []
        for row in rows:
            transactions.append(self._row_to_transaction(row, fee_changes.get(row[2], "")))

        logger.debug(
            "소스 트랜잭션 조회",
            extra={"ledger_sequence": sequence, "count": len(transactions)},
        )
        return transactions

    async def get_latest_ledger_sequence(self) -> int | None:
        """소스 저장소의 마지막 원장 시퀀스"""
        row = await self.db.fetchone("SELECT MAX(ledgerseq) FROM ledgerheaders")
        return row[0] if row else None

    async def _get_fee_changes(self, sequence: int) -> dict[int, str]:
        """txindex → fee meta (base64)

        구버전 stellar-core DB에는 txfeehistory가 없으므로 빈 dict.
        """
        if self._has_fee_history is None:
            self._has_fee_history = await self.db.table_exists("txfeehistory")

        if not self._has_fee_history:
            return {}

        rows = await self.db.fetchall(
            "SELECT txindex, txchanges FROM txfeehistory WHERE ledgerseq = ?",
            (sequence,),
        )
        return {txindex: txchanges for txindex, txchanges in rows}

    def _row_to_transaction(self, row: tuple[Any, ...], fee_meta: str) -> SourceTransaction:
        txid, ledger_seq, tx_index, tx_body, tx_result, tx_meta = row

        envelope = decode_transaction_envelope(b64decode(tx_body))
        result = decode_transaction_result_pair(b64decode(tx_result))
        meta = decode_transaction_meta(b64decode(tx_meta))

        if result.transaction_hash != txid:
            raise XdrDecodeError(
                f"result pair hash {result.transaction_hash} does not match txid {txid}"
            )

        return SourceTransaction(
            transaction_hash=txid,
            ledger_sequence=ledger_seq,
            tx_index=tx_index,
            source_account=envelope.source_account,
            account_sequence=envelope.seq_num,
            fee_paid=result.fee_charged,
            result_code=result.result_code,
            operations=envelope.operations,
            results=result.results,
            meta=meta,
            memo=envelope.memo,
            time_bounds=envelope.time_bounds,
            signatures=tuple(
                base64.b64encode(signature).decode("ascii") for signature in envelope.signatures
            ),
            tx_envelope=tx_body,
            # 해시를 제외한 TransactionResult만 보관
            tx_result=base64.b64encode(result.result_xdr).decode("ascii"),
            tx_meta=tx_meta,
            tx_fee_meta=fee_meta,
        )
