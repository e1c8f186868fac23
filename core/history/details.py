"""
오퍼레이션 details 모델

오퍼레이션 유형별 details를 명시적 필드를 가진 dataclass로 표현.
history_operations.details(JSON) 로의 변환은 to_dict()에서만 수행하며,
금액은 이때 금액 코덱으로 문자열화됨.

선택 필드(None)는 dict에서 키 자체를 생략 (기본값으로 채우지 않음).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from core.domain.operations import Asset, Price
from core.errors import UnsupportedAssetError
from core.history.amount import format_amount, format_price
from core.types import AccountFlag, AssetType, OperationType


@dataclass(frozen=True)
class AssetDetails:
    """자산 3필드 투영 (asset_type, asset_code, asset_issuer)

    native는 asset_type만 가짐.
    """

    asset_type: AssetType
    asset_code: str | None = None
    asset_issuer: str | None = None

    @classmethod
    def from_asset(cls, asset: Asset) -> AssetDetails:
        if asset.is_native:
            return cls(asset_type=AssetType.NATIVE)
        if not asset.is_credit or not asset.code or not asset.issuer:
            raise UnsupportedAssetError(f"지원하지 않는 자산 형식입니다: {asset}")
        return cls(
            asset_type=asset.asset_type,
            asset_code=asset.code.strip(),
            asset_issuer=asset.issuer,
        )

    def to_dict(self, prefix: str = "") -> dict[str, Any]:
        result: dict[str, Any] = {f"{prefix}asset_type": self.asset_type.name_s}
        if self.asset_code is not None:
            result[f"{prefix}asset_code"] = self.asset_code
        if self.asset_issuer is not None:
            result[f"{prefix}asset_issuer"] = self.asset_issuer
        return result


# -------------------------------------------------------------------------
# 유형별 details
# -------------------------------------------------------------------------


@dataclass(frozen=True)
class CreateAccountDetails:
    funder: str
    account: str
    starting_balance: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "funder": self.funder,
            "account": self.account,
            "starting_balance": format_amount(self.starting_balance),
        }


@dataclass(frozen=True)
class PaymentDetails:
    from_account: str
    to_account: str
    amount: int
    asset: AssetDetails

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "from": self.from_account,
            "to": self.to_account,
            "amount": format_amount(self.amount),
        }
        result.update(self.asset.to_dict())
        return result


@dataclass(frozen=True)
class PathPaymentDetails:
    """경로 결제

    amount: 목적지가 받은 금액 (요청값)
    source_amount: 실제로 소스에서 빠져나간 금액 (실행 결과)
    source_max: 소스 지불 상한
    """

    from_account: str
    to_account: str
    amount: int
    source_amount: int
    source_max: int
    asset: AssetDetails
    source_asset: AssetDetails
    path: tuple[AssetDetails, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "from": self.from_account,
            "to": self.to_account,
            "amount": format_amount(self.amount),
            "source_amount": format_amount(self.source_amount),
            "source_max": format_amount(self.source_max),
        }
        result.update(self.asset.to_dict())
        result.update(self.source_asset.to_dict("source_"))
        result["path"] = [asset.to_dict() for asset in self.path]
        return result


@dataclass(frozen=True)
class OfferDetails:
    """manage_offer / create_passive_offer

    offer_id가 None이면 passive offer (키 생략).
    """

    amount: int
    price: Price
    selling: AssetDetails
    buying: AssetDetails
    offer_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.offer_id is not None:
            result["offer_id"] = self.offer_id
        result.update({
            "amount": format_amount(self.amount),
            "price": format_price(self.price.n, self.price.d),
            "price_r": {"n": self.price.n, "d": self.price.d},
        })
        result.update(self.selling.to_dict("selling_"))
        result.update(self.buying.to_dict("buying_"))
        return result


@dataclass(frozen=True)
class SetOptionsDetails:
    inflation_dest: str | None = None
    set_flags: tuple[AccountFlag, ...] = ()
    clear_flags: tuple[AccountFlag, ...] = ()
    master_key_weight: int | None = None
    low_threshold: int | None = None
    med_threshold: int | None = None
    high_threshold: int | None = None
    home_domain: str | None = None
    signer_key: str | None = None
    signer_weight: int | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}

        if self.inflation_dest is not None:
            result["inflation_dest"] = self.inflation_dest

        if self.set_flags:
            result["set_flags"] = [flag.value for flag in self.set_flags]
            result["set_flags_s"] = [flag.name_s for flag in self.set_flags]

        if self.clear_flags:
            result["clear_flags"] = [flag.value for flag in self.clear_flags]
            result["clear_flags_s"] = [flag.name_s for flag in self.clear_flags]

        for key in ("master_key_weight", "low_threshold", "med_threshold", "high_threshold"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value

        if self.home_domain is not None:
            result["home_domain"] = self.home_domain

        if self.signer_key is not None:
            result["signer_key"] = self.signer_key
            result["signer_weight"] = self.signer_weight

        return result


@dataclass(frozen=True)
class ChangeTrustDetails:
    """신뢰선 변경

    trustee는 자산 발행자와 동일 (중복 필드).
    """

    trustor: str
    limit: int
    asset: AssetDetails

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "trustor": self.trustor,
            "limit": format_amount(self.limit),
        }
        result.update(self.asset.to_dict())
        result["trustee"] = self.asset.asset_issuer
        return result


@dataclass(frozen=True)
class AllowTrustDetails:
    """신뢰선 승인 (발행자 = trustee 이므로 asset_issuer 생략)"""

    trustee: str
    trustor: str
    authorize: bool
    asset_type: AssetType
    asset_code: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "trustee": self.trustee,
            "trustor": self.trustor,
            "authorize": self.authorize,
            "asset_type": self.asset_type.name_s,
            "asset_code": self.asset_code,
        }


@dataclass(frozen=True)
class AccountMergeDetails:
    account: str
    into: str

    def to_dict(self) -> dict[str, Any]:
        return {"account": self.account, "into": self.into}


@dataclass(frozen=True)
class InflationDetails:
    def to_dict(self) -> dict[str, Any]:
        return {}


OperationDetails = Union[
    CreateAccountDetails,
    PaymentDetails,
    PathPaymentDetails,
    OfferDetails,
    SetOptionsDetails,
    ChangeTrustDetails,
    AllowTrustDetails,
    AccountMergeDetails,
    InflationDetails,
]


@dataclass(frozen=True)
class DecodedOperation:
    """OperationDecoder 결과

    participants: 소스 계정이 항상 첫 번째, 중복 제거됨
    """

    type: OperationType
    source_account: str
    details: OperationDetails
    participants: tuple[str, ...]

    def details_dict(self) -> dict[str, Any]:
        return self.details.to_dict()
