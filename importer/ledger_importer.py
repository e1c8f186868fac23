"""
원장 임포터

소스 저장소의 원장 1개(헤더 + 트랜잭션)를 히스토리 레코드로 변환해 저장.

흐름:
1. 소스 헤더/트랜잭션 로드 (없으면 LedgerNotFoundError)
2. 이전 원장 해시 검증 (sequence > 1)
3. 기존 원장 처리 (rebuild 아니면 no-op, rebuild면 하위 레코드 삭제)
4. sequence == 1 이면 마스터 계정 생성
5. 성공 트랜잭션마다: 트랜잭션 → 신규 계정 → 참여자 → 오퍼레이션 → 이펙트

2~5는 하나의 DB 트랜잭션 안에서 수행되며 실패 시 전부 롤백.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.constants import IMPORTER_VERSION, StellarConstants
from core.domain.ledger import SourceLedgerHeader, SourceTransaction
from core.domain.operations import CreateAccountOp
from core.errors import (
    ChainDiscontinuityError,
    LedgerNotFoundError,
    ReferentialIntegrityError,
)
from core.history.details import DecodedOperation
from core.history.effect_deriver import EffectDeriver, EffectSink
from core.history.operation_decoder import OperationDecoder
from core.history.records import ImportedLedger
from core.types import OperationType
from core.utils.total_order import make_total_order_id

if TYPE_CHECKING:
    from adapters.interfaces import ICoreLedgerSource
    from core.history.store import HistoryStore

logger = logging.getLogger(__name__)


class LedgerImporter:
    """원장 임포터

    Args:
        source: 소스 원장 저장소 (읽기 전용)
        history: 히스토리 저장소
        master_address: 네트워크 마스터(루트) 계정 주소
        decoder: 오퍼레이션 디코더 (None이면 기본)
        deriver: 이펙트 도출기 (None이면 기본)
        importer_version: 원장 행에 기록할 포맷 버전

    사용 예시:
    ```python
    importer = LedgerImporter(CoreLedgerStore(core_db), HistoryStore(history_db), master)
    ledger = await importer.import_ledger(2)
    ledger = await importer.import_ledger(2, rebuild_allowed=True)
    ```
    """

    def __init__(
        self,
        source: ICoreLedgerSource,
        history: HistoryStore,
        master_address: str,
        decoder: OperationDecoder | None = None,
        deriver: EffectDeriver | None = None,
        importer_version: int = IMPORTER_VERSION,
    ):
        self.source = source
        self.history = history
        self.master_address = master_address
        self.decoder = decoder or OperationDecoder()
        self.deriver = deriver or EffectDeriver()
        self.importer_version = importer_version

    async def import_ledger(self, sequence: int, rebuild_allowed: bool = False) -> ImportedLedger:
        """원장 임포트

        Args:
            sequence: 원장 시퀀스
            rebuild_allowed: 이미 임포트된 원장을 재구축할지 여부

        Returns:
            생성된 원장 레코드 (no-op이면 기존 레코드)

        Raises:
            LedgerNotFoundError: 소스에 원장이 없음 (나중에 재시도)
            ChainDiscontinuityError: 이전 원장 누락 또는 해시 불일치
            ReferentialIntegrityError: 참여자 주소에 해당하는 계정이 없음
            UnsupportedAssetError: 허용되지 않는 자산
            ImportConflictError: 동시 임포트 충돌
        """
        header = await self.source.get_ledger_header(sequence)
        if header is None:
            raise LedgerNotFoundError(sequence)

        transactions = await self.source.get_transactions(sequence)
        first_ledger = header.sequence == 1

        async with self.history.db.transaction():
            if not first_ledger:
                await self._validate_previous_ledger(header)

            existing = await self.history.get_ledger(sequence)
            if existing is not None:
                if not rebuild_allowed:
                    logger.info(
                        f"Ledger {sequence} already imported, skipping",
                        extra={"importer_version": existing.importer_version},
                    )
                    return existing
                await self.history.delete_ledger_tree(sequence)
                logger.info(f"Rebuilding ledger {sequence}")

            if first_ledger:
                await self.history.ensure_master_account(
                    self.master_address, StellarConstants.MASTER_ACCOUNT_ID
                )

            successful = [tx for tx in transactions if tx.success]
            ledger = await self.history.insert_ledger(
                header,
                transaction_count=len(successful),
                operation_count=sum(tx.operation_count for tx in successful),
                importer_version=self.importer_version,
            )

            for tx in successful:
                await self._import_transaction(tx)

        logger.info(
            f"Imported ledger {sequence}",
            extra={
                "transaction_count": ledger.transaction_count,
                "operation_count": ledger.operation_count,
                "skipped_failed": len(transactions) - ledger.transaction_count,
            },
        )
        return ledger

    async def _validate_previous_ledger(self, header: SourceLedgerHeader) -> None:
        previous = await self.history.get_ledger(header.sequence - 1)
        if previous is None:
            raise ChainDiscontinuityError(header.sequence, header.previous_ledger_hash, None)
        if previous.ledger_hash != header.previous_ledger_hash:
            raise ChainDiscontinuityError(
                header.sequence, header.previous_ledger_hash, previous.ledger_hash
            )

    # -------------------------------------------------------------------------
    # 트랜잭션 단위
    # -------------------------------------------------------------------------

    async def _import_transaction(self, tx: SourceTransaction) -> None:
        transaction_id = make_total_order_id(tx.ledger_sequence, tx.tx_index, 0)
        pairs = tx.operations_with_results()

        await self.history.insert_transaction(transaction_id, tx)
        await self._import_accounts(tx)

        # 디코딩은 저장 전에 모두 수행 (참여자 목록 계산에 필요)
        decoded_operations = [
            self.decoder.decode(operation, result, tx.source_account)
            for operation, result in pairs
        ]

        participants = list(dict.fromkeys(
            [tx.source_account]
            + [address for decoded in decoded_operations for address in decoded.participants]
        ))
        account_ids = await self._require_accounts(
            participants, f"transaction {tx.transaction_hash}"
        )
        await self.history.insert_transaction_participants(
            transaction_id, [account_ids[address] for address in participants]
        )

        operation_ids = []
        for index, decoded in enumerate(decoded_operations, start=1):
            operation_id = make_total_order_id(tx.ledger_sequence, tx.tx_index, index)
            await self._import_operation(operation_id, transaction_id, index, decoded)
            operation_ids.append(operation_id)

        for index, ((operation, result), decoded) in enumerate(zip(pairs, decoded_operations)):
            sink = EffectSink(operation_id=operation_ids[index])
            self.deriver.derive(operation, decoded, result, tx.operation_meta(index), sink)

            if sink.records:
                effect_account_ids = await self._require_accounts(
                    sink.accounts, f"effects of operation {operation_ids[index]}"
                )
                await self.history.insert_effects(sink.records, effect_account_ids)

    async def _import_accounts(self, tx: SourceTransaction) -> None:
        """create_account 목적지 계정 생성 (id = 해당 오퍼레이션의 total order id)"""
        for index, operation in enumerate(tx.operations):
            if operation.type != OperationType.CREATE_ACCOUNT:
                continue

            body = operation.body
            assert isinstance(body, CreateAccountOp)

            account_id = make_total_order_id(tx.ledger_sequence, tx.tx_index, index + 1)
            created = await self.history.create_account_if_absent(body.destination, account_id)
            if created:
                logger.debug(
                    "계정 생성",
                    extra={"account_id": account_id, "address": body.destination},
                )

    async def _import_operation(
        self,
        operation_id: int,
        transaction_id: int,
        application_order: int,
        decoded: DecodedOperation,
    ) -> None:
        await self.history.insert_operation(operation_id, transaction_id, application_order, decoded)

        account_ids = await self._require_accounts(
            list(decoded.participants), f"operation {operation_id}"
        )
        await self.history.insert_operation_participants(
            operation_id, [account_ids[address] for address in decoded.participants]
        )

    async def _require_accounts(self, addresses: list[str], context: str) -> dict[str, int]:
        """주소 → 계정 id, 하나라도 없으면 ReferentialIntegrityError"""
        account_ids = await self.history.resolve_account_ids(addresses)

        missing = [address for address in addresses if address not in account_ids]
        if missing:
            raise ReferentialIntegrityError(missing, context)

        return account_ids
