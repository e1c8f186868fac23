"""
오퍼레이션 디코더

오퍼레이션 + 실행 결과 → 유효 소스 계정, 유형별 details, 참여자 주소.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from core.domain.operations import (
    AccountMergeOp,
    AllowTrustOp,
    ChangeTrustOp,
    CreateAccountOp,
    CreatePassiveOfferOp,
    InnerResult,
    ManageOfferOp,
    Operation,
    OperationResult,
    PathPaymentOp,
    PathPaymentResult,
    PaymentOp,
    SetOptionsOp,
)
from core.errors import OperationResultError, UnsupportedAssetError
from core.history.details import (
    AccountMergeDetails,
    AllowTrustDetails,
    AssetDetails,
    ChangeTrustDetails,
    CreateAccountDetails,
    DecodedOperation,
    InflationDetails,
    OfferDetails,
    OperationDetails,
    PathPaymentDetails,
    PaymentDetails,
    SetOptionsDetails,
)
from core.types import AccountFlag, AssetType, OperationType

R = TypeVar("R", bound=InnerResult)


def success_payload(result: OperationResult, expected: type[R], operation_type: OperationType) -> R:
    """성공한 내부 결과 페이로드 추출

    Raises:
        OperationResultError: 결과가 성공이 아니거나 유형이 다른 경우
    """
    if not isinstance(result.tr, expected) or not result.is_success:
        raise OperationResultError(
            f"{operation_type.name_s} 오퍼레이션에 성공 결과가 없습니다: "
            f"code={result.code}, tr={result.tr}"
        )
    return result.tr


def _unique(addresses: list[str]) -> tuple[str, ...]:
    """순서를 유지하며 중복 제거"""
    return tuple(dict.fromkeys(addresses))


class OperationDecoder:
    """오퍼레이션 디코더

    유형별 핸들러는 (오퍼레이션 본문, 소스 주소, 결과) → (details, 추가 참여자).

    사용 예시:
    ```python
    decoder = OperationDecoder()
    decoded = decoder.decode(operation, result, tx.source_account)
    details_json = json.dumps(decoded.details_dict())
    ```
    """

    def __init__(self) -> None:
        self._handlers: dict[
            OperationType,
            Callable[[Operation, str, OperationResult], tuple[OperationDetails, list[str]]],
        ] = {
            OperationType.CREATE_ACCOUNT: self._create_account,
            OperationType.PAYMENT: self._payment,
            OperationType.PATH_PAYMENT: self._path_payment,
            OperationType.MANAGE_OFFER: self._manage_offer,
            OperationType.CREATE_PASSIVE_OFFER: self._create_passive_offer,
            OperationType.SET_OPTIONS: self._set_options,
            OperationType.CHANGE_TRUST: self._change_trust,
            OperationType.ALLOW_TRUST: self._allow_trust,
            OperationType.ACCOUNT_MERGE: self._account_merge,
            OperationType.INFLATION: self._inflation,
        }

    def decode(
        self,
        operation: Operation,
        result: OperationResult,
        tx_source: str,
    ) -> DecodedOperation:
        """오퍼레이션 디코딩

        Args:
            operation: 디코딩된 오퍼레이션
            result: 같은 인덱스의 실행 결과
            tx_source: 트랜잭션 소스 계정 (오퍼레이션 소스가 없을 때 사용)

        Raises:
            UnsupportedAssetError: 허용되지 않는 자산 (change_trust/allow_trust의 native 등)
            OperationResultError: path_payment 성공 결과 누락
        """
        source = operation.source_account or tx_source

        handler = self._handlers.get(operation.type)
        if handler is None:
            raise UnsupportedAssetError(f"지원하지 않는 오퍼레이션 유형입니다: {operation.type}")

        details, others = handler(operation, source, result)

        return DecodedOperation(
            type=operation.type,
            source_account=source,
            details=details,
            participants=_unique([source, *others]),
        )

    # -------------------------------------------------------------------------
    # 유형별 핸들러
    # -------------------------------------------------------------------------

    def _create_account(
        self, operation: Operation, source: str, result: OperationResult
    ) -> tuple[OperationDetails, list[str]]:
        body = operation.body
        assert isinstance(body, CreateAccountOp)

        details = CreateAccountDetails(
            funder=source,
            account=body.destination,
            starting_balance=body.starting_balance,
        )
        return details, [body.destination]

    def _payment(
        self, operation: Operation, source: str, result: OperationResult
    ) -> tuple[OperationDetails, list[str]]:
        body = operation.body
        assert isinstance(body, PaymentOp)

        details = PaymentDetails(
            from_account=source,
            to_account=body.destination,
            amount=body.amount,
            asset=AssetDetails.from_asset(body.asset),
        )
        return details, [body.destination]

    def _path_payment(
        self, operation: Operation, source: str, result: OperationResult
    ) -> tuple[OperationDetails, list[str]]:
        body = operation.body
        assert isinstance(body, PathPaymentOp)

        payment_result = success_payload(result, PathPaymentResult, operation.type)

        details = PathPaymentDetails(
            from_account=source,
            to_account=body.destination,
            amount=body.dest_amount,
            source_amount=payment_result.send_amount,
            source_max=body.send_max,
            asset=AssetDetails.from_asset(body.dest_asset),
            source_asset=AssetDetails.from_asset(body.send_asset),
            path=tuple(AssetDetails.from_asset(asset) for asset in body.path),
        )
        return details, [body.destination]

    def _manage_offer(
        self, operation: Operation, source: str, result: OperationResult
    ) -> tuple[OperationDetails, list[str]]:
        body = operation.body
        assert isinstance(body, ManageOfferOp)

        details = OfferDetails(
            offer_id=body.offer_id,
            amount=body.amount,
            price=body.price,
            selling=AssetDetails.from_asset(body.selling),
            buying=AssetDetails.from_asset(body.buying),
        )
        return details, []

    def _create_passive_offer(
        self, operation: Operation, source: str, result: OperationResult
    ) -> tuple[OperationDetails, list[str]]:
        body = operation.body
        assert isinstance(body, CreatePassiveOfferOp)

        details = OfferDetails(
            amount=body.amount,
            price=body.price,
            selling=AssetDetails.from_asset(body.selling),
            buying=AssetDetails.from_asset(body.buying),
        )
        return details, []

    def _set_options(
        self, operation: Operation, source: str, result: OperationResult
    ) -> tuple[OperationDetails, list[str]]:
        body = operation.body
        assert isinstance(body, SetOptionsOp)

        details = SetOptionsDetails(
            inflation_dest=body.inflation_dest,
            set_flags=tuple(AccountFlag.parse_mask(body.set_flags)),
            clear_flags=tuple(AccountFlag.parse_mask(body.clear_flags)),
            master_key_weight=body.master_weight,
            low_threshold=body.low_threshold,
            med_threshold=body.med_threshold,
            high_threshold=body.high_threshold,
            home_domain=body.home_domain,
            signer_key=body.signer.pub_key if body.signer else None,
            signer_weight=body.signer.weight if body.signer else None,
        )
        return details, []

    def _change_trust(
        self, operation: Operation, source: str, result: OperationResult
    ) -> tuple[OperationDetails, list[str]]:
        body = operation.body
        assert isinstance(body, ChangeTrustOp)

        if body.line.is_native:
            raise UnsupportedAssetError("native asset in change_trust operation")

        details = ChangeTrustDetails(
            trustor=source,
            limit=body.limit,
            asset=AssetDetails.from_asset(body.line),
        )
        return details, []

    def _allow_trust(
        self, operation: Operation, source: str, result: OperationResult
    ) -> tuple[OperationDetails, list[str]]:
        body = operation.body
        assert isinstance(body, AllowTrustOp)

        details = AllowTrustDetails(
            trustee=source,
            trustor=body.trustor,
            authorize=body.authorize,
            asset_type=_allow_trust_asset_type(body),
            asset_code=(body.asset.code or "").strip(),
        )
        return details, [body.trustor]

    def _account_merge(
        self, operation: Operation, source: str, result: OperationResult
    ) -> tuple[OperationDetails, list[str]]:
        body = operation.body
        assert isinstance(body, AccountMergeOp)

        return AccountMergeDetails(account=source, into=body.destination), [body.destination]

    def _inflation(
        self, operation: Operation, source: str, result: OperationResult
    ) -> tuple[OperationDetails, list[str]]:
        return InflationDetails(), []


def _allow_trust_asset_type(body: AllowTrustOp) -> AssetType:
    """allow_trust 자산 유형 검증 (credit_alphanum4/12만 허용)"""
    asset_type = body.asset.asset_type
    if asset_type == AssetType.NATIVE:
        raise UnsupportedAssetError("native asset in allow_trust operation")
    if asset_type not in (AssetType.CREDIT_ALPHANUM4, AssetType.CREDIT_ALPHANUM12):
        raise UnsupportedAssetError(f"Unknown asset type: {asset_type}")
    if not body.asset.code:
        raise UnsupportedAssetError("allow_trust asset has no code")
    return asset_type
