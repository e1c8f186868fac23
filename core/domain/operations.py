"""
오퍼레이션 도메인 모델

XDR에서 디코딩된 오퍼레이션 본문과 실행 결과.
모든 금액은 원시 int64 (stroops) 그대로 보관하고, 문자열 변환은 저장 경계에서 수행.
계정은 이미 StrKey 주소(G...)로 변환된 상태.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from core.types import (
    INNER_RESULT_SUCCESS,
    AssetType,
    ManageOfferEffect,
    OperationResultCode,
    OperationType,
)


# -------------------------------------------------------------------------
# 공통 구조체
# -------------------------------------------------------------------------


@dataclass(frozen=True)
class Asset:
    """자산

    native는 code/issuer가 없음.
    """

    asset_type: AssetType
    code: str | None = None
    issuer: str | None = None

    @staticmethod
    def native() -> Asset:
        return Asset(asset_type=AssetType.NATIVE)

    @staticmethod
    def credit(code: str, issuer: str) -> Asset:
        """코드 길이에 따라 alphanum4 / alphanum12 선택"""
        if not 1 <= len(code) <= 12:
            raise ValueError(f"자산 코드는 1~12자여야 합니다: {code!r}")

        asset_type = (
            AssetType.CREDIT_ALPHANUM4 if len(code) <= 4 else AssetType.CREDIT_ALPHANUM12
        )
        return Asset(asset_type=asset_type, code=code, issuer=issuer)

    @property
    def is_native(self) -> bool:
        return self.asset_type == AssetType.NATIVE

    @property
    def is_credit(self) -> bool:
        return self.asset_type in (AssetType.CREDIT_ALPHANUM4, AssetType.CREDIT_ALPHANUM12)


@dataclass(frozen=True)
class Price:
    """가격 (유리수 n/d)"""

    n: int
    d: int


@dataclass(frozen=True)
class Signer:
    """서명자 (공개키 주소 + 가중치)"""

    pub_key: str
    weight: int


# -------------------------------------------------------------------------
# 오퍼레이션 본문
# -------------------------------------------------------------------------


@dataclass(frozen=True)
class CreateAccountOp:
    destination: str
    starting_balance: int


@dataclass(frozen=True)
class PaymentOp:
    destination: str
    asset: Asset
    amount: int


@dataclass(frozen=True)
class PathPaymentOp:
    send_asset: Asset
    send_max: int
    destination: str
    dest_asset: Asset
    dest_amount: int
    path: tuple[Asset, ...] = ()


@dataclass(frozen=True)
class ManageOfferOp:
    selling: Asset
    buying: Asset
    amount: int
    price: Price
    offer_id: int = 0


@dataclass(frozen=True)
class CreatePassiveOfferOp:
    selling: Asset
    buying: Asset
    amount: int
    price: Price


@dataclass(frozen=True)
class SetOptionsOp:
    """계정 옵션 변경

    모든 필드는 선택적(XDR optional). None = 페이로드에 없음.
    """

    inflation_dest: str | None = None
    clear_flags: int | None = None
    set_flags: int | None = None
    master_weight: int | None = None
    low_threshold: int | None = None
    med_threshold: int | None = None
    high_threshold: int | None = None
    home_domain: str | None = None
    signer: Signer | None = None


@dataclass(frozen=True)
class ChangeTrustOp:
    line: Asset
    limit: int


@dataclass(frozen=True)
class AllowTrustOp:
    """신뢰선 승인

    asset의 issuer는 항상 None (발행자 = 오퍼레이션 소스 계정).
    """

    trustor: str
    asset: Asset
    authorize: bool


@dataclass(frozen=True)
class AccountMergeOp:
    destination: str


@dataclass(frozen=True)
class InflationOp:
    pass


OperationBody = Union[
    CreateAccountOp,
    PaymentOp,
    PathPaymentOp,
    ManageOfferOp,
    CreatePassiveOfferOp,
    SetOptionsOp,
    ChangeTrustOp,
    AllowTrustOp,
    AccountMergeOp,
    InflationOp,
]


@dataclass(frozen=True)
class Operation:
    """오퍼레이션

    source_account가 None이면 트랜잭션 소스 계정을 사용.
    """

    type: OperationType
    body: OperationBody
    source_account: str | None = None


# -------------------------------------------------------------------------
# 실행 결과
# -------------------------------------------------------------------------


@dataclass(frozen=True)
class ClaimOfferAtom:
    """체결된 오퍼 (오더북에서 소진된 항목)

    amount_sold/asset_sold: 오퍼 소유자(seller)가 판 것
    amount_bought/asset_bought: 오퍼 소유자가 받은 것
    """

    seller_id: str
    offer_id: int
    asset_sold: Asset
    amount_sold: int
    asset_bought: Asset
    amount_bought: int


@dataclass(frozen=True)
class OfferEntry:
    seller_id: str
    offer_id: int
    selling: Asset
    buying: Asset
    amount: int
    price: Price
    flags: int = 0


@dataclass(frozen=True)
class SimplePaymentResult:
    destination: str
    asset: Asset
    amount: int


@dataclass(frozen=True)
class InflationPayout:
    destination: str
    amount: int


@dataclass(frozen=True)
class SimpleResult:
    """페이로드 없는 결과 (create_account, payment, set_options 등)"""

    code: int

    @property
    def is_success(self) -> bool:
        return self.code == INNER_RESULT_SUCCESS


@dataclass(frozen=True)
class PathPaymentResult:
    code: int
    offers: tuple[ClaimOfferAtom, ...] = ()
    last: SimplePaymentResult | None = None
    no_issuer: Asset | None = None

    @property
    def is_success(self) -> bool:
        return self.code == INNER_RESULT_SUCCESS

    @property
    def send_amount(self) -> int:
        """실제로 소스 계정에서 빠져나간 금액

        체결 오퍼가 없으면 last.amount (직접 지불).
        있으면 첫 오퍼의 asset_bought 와 같은 자산을 받은
        선두 구간 오퍼들의 amount_bought 합계.
        """
        if not self.is_success or self.last is None:
            raise ValueError(f"성공하지 않은 path payment 결과입니다: code={self.code}")

        if not self.offers:
            return self.last.amount

        source_asset = self.offers[0].asset_bought
        total = 0
        for offer in self.offers:
            if offer.asset_bought != source_asset:
                break
            total += offer.amount_bought
        return total


@dataclass(frozen=True)
class ManageOfferResult:
    code: int
    offers_claimed: tuple[ClaimOfferAtom, ...] = ()
    effect: ManageOfferEffect | None = None
    offer: OfferEntry | None = None

    @property
    def is_success(self) -> bool:
        return self.code == INNER_RESULT_SUCCESS


@dataclass(frozen=True)
class AccountMergeResult:
    code: int
    source_account_balance: int | None = None

    @property
    def is_success(self) -> bool:
        return self.code == INNER_RESULT_SUCCESS


@dataclass(frozen=True)
class InflationResult:
    code: int
    payouts: tuple[InflationPayout, ...] = ()

    @property
    def is_success(self) -> bool:
        return self.code == INNER_RESULT_SUCCESS


InnerResult = Union[
    SimpleResult,
    PathPaymentResult,
    ManageOfferResult,
    AccountMergeResult,
    InflationResult,
]


@dataclass(frozen=True)
class OperationResult:
    """오퍼레이션 결과

    code가 OP_INNER 일 때만 type/tr 존재.
    """

    code: OperationResultCode
    type: OperationType | None = None
    tr: InnerResult | None = None

    @property
    def is_success(self) -> bool:
        return (
            self.code == OperationResultCode.OP_INNER
            and self.tr is not None
            and self.tr.is_success
        )


def success_result(operation_type: OperationType, tr: InnerResult | None = None) -> OperationResult:
    """성공 결과 생성 헬퍼 (Mock 저장소/테스트용)"""
    return OperationResult(
        code=OperationResultCode.OP_INNER,
        type=operation_type,
        tr=tr if tr is not None else SimpleResult(code=INNER_RESULT_SUCCESS),
    )
