"""
이펙트 도출기

오퍼레이션 실행 결과가 의미하는 상태 변경(이펙트) 목록을 유형별 고정 순서로 생성.
순서는 다운스트림 계약의 일부이므로 바꾸지 말 것.

이펙트 순번은 임포터가 오퍼레이션마다 만드는 EffectSink가 관리.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from core.constants import StellarConstants
from core.domain.ledger import OperationMeta
from core.domain.operations import (
    AccountMergeOp,
    AccountMergeResult,
    AllowTrustOp,
    ChangeTrustOp,
    ClaimOfferAtom,
    CreateAccountOp,
    InflationResult,
    ManageOfferResult,
    Operation,
    OperationResult,
    PathPaymentOp,
    PathPaymentResult,
    PaymentOp,
    SetOptionsOp,
)
from core.errors import OperationResultError
from core.history.amount import format_amount
from core.history.details import AssetDetails, DecodedOperation
from core.history.operation_decoder import success_payload
from core.history.types import EffectType
from core.types import AccountFlag, AssetType, LedgerEntryChangeType, OperationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectRecord:
    """이펙트 1건 (저장 전)

    order: 오퍼레이션 내 1부터 시작하는 순번
    """

    operation_id: int
    order: int
    account: str
    type: EffectType
    details: dict[str, Any]


@dataclass
class EffectSink:
    """오퍼레이션 1개의 이펙트 수집기

    순번 카운터를 명시적으로 소유. 오퍼레이션마다 새로 만들어 전달.
    """

    operation_id: int
    records: list[EffectRecord] = field(default_factory=list)
    _next_order: int = 1

    def add(self, effect_type: EffectType, account: str, details: dict[str, Any]) -> EffectRecord:
        record = EffectRecord(
            operation_id=self.operation_id,
            order=self._next_order,
            account=account,
            type=effect_type,
            details=details,
        )
        self._next_order += 1
        self.records.append(record)
        return record

    @property
    def accounts(self) -> list[str]:
        """이펙트 대상 주소 (중복 제거, 순서 유지)"""
        return list(dict.fromkeys(record.account for record in self.records))

    def __len__(self) -> int:
        return len(self.records)


class EffectDeriver:
    """이펙트 도출기

    알 수 없는 오퍼레이션 유형은 INFO 로그 후 이펙트 0개 (오류 아님).

    사용 예시:
    ```python
    deriver = EffectDeriver()
    sink = EffectSink(operation_id=op_id)
    deriver.derive(operation, decoded, result, tx.operation_meta(i), sink)
    await history.insert_effects(sink.records, account_ids)
    ```
    """

    def __init__(self) -> None:
        self._handlers: dict[
            OperationType,
            Callable[[Operation, DecodedOperation, OperationResult, OperationMeta | None, EffectSink], None],
        ] = {
            OperationType.CREATE_ACCOUNT: self._create_account,
            OperationType.PAYMENT: self._payment,
            OperationType.PATH_PAYMENT: self._path_payment,
            OperationType.MANAGE_OFFER: self._manage_offer,
            OperationType.CREATE_PASSIVE_OFFER: self._manage_offer,
            OperationType.SET_OPTIONS: self._set_options,
            OperationType.CHANGE_TRUST: self._change_trust,
            OperationType.ALLOW_TRUST: self._allow_trust,
            OperationType.ACCOUNT_MERGE: self._account_merge,
            OperationType.INFLATION: self._inflation,
        }

    def derive(
        self,
        operation: Operation,
        decoded: DecodedOperation,
        result: OperationResult,
        op_meta: OperationMeta | None,
        sink: EffectSink,
    ) -> None:
        """이펙트 도출

        Args:
            operation: 원본 오퍼레이션
            decoded: OperationDecoder 결과 (유효 소스 계정 포함)
            result: 실행 결과
            op_meta: 오퍼레이션 메타 (없을 수 있음)
            sink: 이펙트 수집기

        Raises:
            OperationResultError: 필요한 성공 결과 페이로드가 없는 경우
        """
        handler = self._handlers.get(operation.type)
        if handler is None:
            logger.info(
                f"Unknown type: {operation.type}. skipping effects import",
                extra={"operation_id": sink.operation_id},
            )
            return

        handler(operation, decoded, result, op_meta, sink)

    # -------------------------------------------------------------------------
    # 유형별 핸들러
    # -------------------------------------------------------------------------

    def _create_account(
        self,
        operation: Operation,
        decoded: DecodedOperation,
        result: OperationResult,
        op_meta: OperationMeta | None,
        sink: EffectSink,
    ) -> None:
        body = operation.body
        assert isinstance(body, CreateAccountOp)

        amount = format_amount(body.starting_balance)

        sink.add(EffectType.ACCOUNT_CREATED, body.destination, {"starting_balance": amount})
        sink.add(
            EffectType.ACCOUNT_DEBITED,
            decoded.source_account,
            {"asset_type": AssetType.NATIVE.name_s, "amount": amount},
        )
        sink.add(
            EffectType.SIGNER_CREATED,
            body.destination,
            {"public_key": body.destination, "weight": StellarConstants.DEFAULT_SIGNER_WEIGHT},
        )

    def _payment(
        self,
        operation: Operation,
        decoded: DecodedOperation,
        result: OperationResult,
        op_meta: OperationMeta | None,
        sink: EffectSink,
    ) -> None:
        body = operation.body
        assert isinstance(body, PaymentOp)

        details = {"amount": format_amount(body.amount)}
        details.update(AssetDetails.from_asset(body.asset).to_dict())

        sink.add(EffectType.ACCOUNT_CREDITED, body.destination, details)
        sink.add(EffectType.ACCOUNT_DEBITED, decoded.source_account, dict(details))

    def _path_payment(
        self,
        operation: Operation,
        decoded: DecodedOperation,
        result: OperationResult,
        op_meta: OperationMeta | None,
        sink: EffectSink,
    ) -> None:
        body = operation.body
        assert isinstance(body, PathPaymentOp)

        payment_result = success_payload(result, PathPaymentResult, operation.type)

        dest_details = {"amount": format_amount(body.dest_amount)}
        dest_details.update(AssetDetails.from_asset(body.dest_asset).to_dict())

        # 소스는 상한(send_max)이 아니라 실제 지불 금액
        source_details = {"amount": format_amount(payment_result.send_amount)}
        source_details.update(AssetDetails.from_asset(body.send_asset).to_dict())

        sink.add(EffectType.ACCOUNT_CREDITED, body.destination, dest_details)
        sink.add(EffectType.ACCOUNT_DEBITED, decoded.source_account, source_details)

        self._make_trades(sink, decoded.source_account, payment_result.offers)

    def _manage_offer(
        self,
        operation: Operation,
        decoded: DecodedOperation,
        result: OperationResult,
        op_meta: OperationMeta | None,
        sink: EffectSink,
    ) -> None:
        offer_result = success_payload(result, ManageOfferResult, operation.type)
        self._make_trades(sink, decoded.source_account, offer_result.offers_claimed)

    def _set_options(
        self,
        operation: Operation,
        decoded: DecodedOperation,
        result: OperationResult,
        op_meta: OperationMeta | None,
        sink: EffectSink,
    ) -> None:
        body = operation.body
        assert isinstance(body, SetOptionsOp)
        source = decoded.source_account

        if body.home_domain is not None:
            sink.add(EffectType.ACCOUNT_HOME_DOMAIN_UPDATED, source, {"home_domain": body.home_domain})

        thresholds = {
            key: value
            for key, value in (
                ("low_threshold", body.low_threshold),
                ("med_threshold", body.med_threshold),
                ("high_threshold", body.high_threshold),
            )
            if value is not None
        }
        if thresholds:
            sink.add(EffectType.ACCOUNT_THRESHOLDS_UPDATED, source, thresholds)

        flag_changes: dict[str, bool] = {}
        for flag in AccountFlag.parse_mask(body.set_flags):
            flag_changes[flag.name_s] = True
        for flag in AccountFlag.parse_mask(body.clear_flags):
            flag_changes[flag.name_s] = False
        if flag_changes:
            sink.add(EffectType.ACCOUNT_FLAGS_UPDATED, source, flag_changes)

        # 실행 결과로는 최초 추가와 가중치 변경을 구분할 수 없음 (가중치 0 여부만 판단)
        if body.master_weight is not None:
            effect_type = (
                EffectType.SIGNER_REMOVED if body.master_weight == 0 else EffectType.SIGNER_UPDATED
            )
            sink.add(effect_type, source, {"public_key": source, "weight": body.master_weight})

        if body.signer is not None:
            effect_type = (
                EffectType.SIGNER_REMOVED if body.signer.weight == 0 else EffectType.SIGNER_CREATED
            )
            sink.add(
                effect_type,
                source,
                {"public_key": body.signer.pub_key, "weight": body.signer.weight},
            )

    def _change_trust(
        self,
        operation: Operation,
        decoded: DecodedOperation,
        result: OperationResult,
        op_meta: OperationMeta | None,
        sink: EffectSink,
    ) -> None:
        body = operation.body
        assert isinstance(body, ChangeTrustOp)

        if body.limit == 0:
            effect_type = EffectType.TRUSTLINE_REMOVED
        else:
            first_change = op_meta.changes[0] if op_meta and op_meta.changes else None
            if first_change is not None and first_change.type == LedgerEntryChangeType.CREATED:
                effect_type = EffectType.TRUSTLINE_CREATED
            else:
                effect_type = EffectType.TRUSTLINE_UPDATED

        details = AssetDetails.from_asset(body.line).to_dict()
        details["limit"] = format_amount(body.limit)

        sink.add(effect_type, decoded.source_account, details)

    def _allow_trust(
        self,
        operation: Operation,
        decoded: DecodedOperation,
        result: OperationResult,
        op_meta: OperationMeta | None,
        sink: EffectSink,
    ) -> None:
        body = operation.body
        assert isinstance(body, AllowTrustOp)

        effect_type = (
            EffectType.TRUSTLINE_AUTHORIZED if body.authorize else EffectType.TRUSTLINE_DEAUTHORIZED
        )
        # 자산 검증은 OperationDecoder에서 이미 수행됨
        details = {
            "trustor": body.trustor,
            "asset_type": body.asset.asset_type.name_s,
            "asset_code": (body.asset.code or "").strip(),
        }
        sink.add(effect_type, decoded.source_account, details)

    def _account_merge(
        self,
        operation: Operation,
        decoded: DecodedOperation,
        result: OperationResult,
        op_meta: OperationMeta | None,
        sink: EffectSink,
    ) -> None:
        body = operation.body
        assert isinstance(body, AccountMergeOp)

        merge_result = success_payload(result, AccountMergeResult, operation.type)
        if merge_result.source_account_balance is None:
            raise OperationResultError(
                f"account_merge 결과에 잔액이 없습니다: operation_id={sink.operation_id}"
            )

        details = {
            "amount": format_amount(merge_result.source_account_balance),
            "asset_type": AssetType.NATIVE.name_s,
        }

        sink.add(EffectType.ACCOUNT_DEBITED, decoded.source_account, details)
        sink.add(EffectType.ACCOUNT_CREDITED, body.destination, dict(details))
        sink.add(EffectType.ACCOUNT_REMOVED, decoded.source_account, {})

    def _inflation(
        self,
        operation: Operation,
        decoded: DecodedOperation,
        result: OperationResult,
        op_meta: OperationMeta | None,
        sink: EffectSink,
    ) -> None:
        inflation_result = success_payload(result, InflationResult, operation.type)

        for payout in inflation_result.payouts:
            details = {
                "amount": format_amount(payout.amount),
                "asset_type": AssetType.NATIVE.name_s,
            }
            sink.add(EffectType.ACCOUNT_CREDITED, payout.destination, details)

    # -------------------------------------------------------------------------
    # 거래 이펙트
    # -------------------------------------------------------------------------

    def _make_trades(
        self,
        sink: EffectSink,
        buyer: str,
        claimed_offers: tuple[ClaimOfferAtom, ...],
    ) -> None:
        """체결 오퍼마다 trade 이펙트 2개 (매수자 → 매도자 순)"""
        for claimed in claimed_offers:
            self._make_trade(sink, buyer, claimed)

    def _make_trade(self, sink: EffectSink, buyer: str, claimed: ClaimOfferAtom) -> None:
        # 매수자는 오퍼 소유자가 판 것을 삼
        buyer_details: dict[str, Any] = {
            "offer_id": claimed.offer_id,
            "seller": claimed.seller_id,
            "bought_amount": format_amount(claimed.amount_sold),
            "sold_amount": format_amount(claimed.amount_bought),
        }
        buyer_details.update(AssetDetails.from_asset(claimed.asset_sold).to_dict("bought_"))
        buyer_details.update(AssetDetails.from_asset(claimed.asset_bought).to_dict("sold_"))

        seller_details: dict[str, Any] = {
            "offer_id": claimed.offer_id,
            "seller": buyer,
            "bought_amount": format_amount(claimed.amount_bought),
            "sold_amount": format_amount(claimed.amount_sold),
        }
        seller_details.update(AssetDetails.from_asset(claimed.asset_bought).to_dict("bought_"))
        seller_details.update(AssetDetails.from_asset(claimed.asset_sold).to_dict("sold_"))

        sink.add(EffectType.TRADE, buyer, buyer_details)
        sink.add(EffectType.TRADE, claimed.seller_id, seller_details)
