"""
stellar-core XDR → 도메인 모델 변환

txhistory / ledgerheaders 테이블의 base64 XDR 블롭을 stellar_sdk.xdr로 파싱한 뒤
core.domain 모델로 매핑. 지원 범위: credit_alphanum4/12 자산, 오퍼레이션 타입 0~9.

프로토콜 13 이전 엔벨로프는 ENVELOPE_TYPE_TX_V0, 체결 오퍼는
CLAIM_ATOM_TYPE_V0 바이트와 동일하므로 SDK의 현행 union으로 그대로 읽힘.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Callable, TypeVar

from stellar_sdk import xdr as stellar_xdr

from core.domain.ledger import (
    AccountEntry,
    LedgerEntryChange,
    LedgerKey,
    Memo,
    OperationMeta,
    TimeBounds,
    TransactionMeta,
    TrustLineEntry,
)
from core.domain.operations import (
    AccountMergeOp,
    AccountMergeResult,
    AllowTrustOp,
    Asset,
    ChangeTrustOp,
    ClaimOfferAtom,
    CreateAccountOp,
    CreatePassiveOfferOp,
    InflationOp,
    InflationPayout,
    InflationResult,
    InnerResult,
    ManageOfferOp,
    ManageOfferResult,
    OfferEntry,
    Operation,
    OperationBody,
    OperationResult,
    PathPaymentOp,
    PathPaymentResult,
    PaymentOp,
    Price,
    SetOptionsOp,
    Signer,
    SimplePaymentResult,
    SimpleResult,
)
from core.types import (
    INNER_RESULT_SUCCESS,
    PATH_PAYMENT_NO_ISSUER,
    AssetType,
    LedgerEntryChangeType,
    LedgerEntryType,
    ManageOfferEffect,
    MemoType,
    OperationResultCode,
    OperationType,
    TransactionResultCode,
)
from core.utils.strkey import encode_account_id

E = TypeVar("E", bound=Enum)
X = TypeVar("X")

ENVELOPE_TYPE_TX_V0: int = 0
ENVELOPE_TYPE_TX: int = 2
CLAIM_ATOM_TYPE_V0: int = 0
SIGNER_KEY_TYPE_ED25519: int = 0


class XdrDecodeError(Exception):
    """XDR 디코딩 실패 (잘린 데이터, 알 수 없는 판별자 등)"""

    pass


# -------------------------------------------------------------------------
# 디코딩 결과 컨테이너
# -------------------------------------------------------------------------


@dataclass(frozen=True)
class DecodedEnvelope:
    """TransactionEnvelope 디코딩 결과"""

    source_account: str
    fee: int
    seq_num: int
    time_bounds: TimeBounds | None
    memo: Memo
    operations: tuple[Operation, ...]
    signatures: tuple[bytes, ...]


@dataclass(frozen=True)
class DecodedResultPair:
    """TransactionResultPair 디코딩 결과

    result_xdr: 해시를 제외한 TransactionResult 바이트
    """

    transaction_hash: str
    fee_charged: int
    result_code: int
    results: tuple[OperationResult, ...]
    result_xdr: bytes


@dataclass(frozen=True)
class DecodedLedgerHeader:
    ledger_version: int
    previous_ledger_hash: str
    tx_set_hash: str
    close_time: int
    tx_set_result_hash: str
    bucket_list_hash: str
    ledger_seq: int
    total_coins: int
    fee_pool: int
    inflation_seq: int
    id_pool: int
    base_fee: int
    base_reserve: int
    max_tx_set_size: int


def b64decode(value: str) -> bytes:
    """base64 → 바이트 (형식 오류는 XdrDecodeError)"""
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise XdrDecodeError(f"invalid base64 payload: {e}") from e


def _parse(xdr_type: type[X], raw: bytes) -> X:
    """SDK 파서 호출, 실패와 남은 바이트는 XdrDecodeError"""
    name = xdr_type.__name__
    try:
        parsed = xdr_type.from_xdr_bytes(raw)
        consumed = len(parsed.to_xdr_bytes())
    except Exception as e:
        raise XdrDecodeError(f"invalid {name}: {e}") from e

    if consumed != len(raw):
        raise XdrDecodeError(f"{len(raw) - consumed} trailing bytes after {name}")
    return parsed


def _enum(enum_type: type[E], value: int) -> E:
    try:
        return enum_type(value)
    except ValueError as e:
        raise XdrDecodeError(f"unknown {enum_type.__name__} {value}") from e


def _text(raw: bytes, field: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise XdrDecodeError(f"{field} is not valid utf-8: {raw!r}") from e


# -------------------------------------------------------------------------
# 공통 구조체
# -------------------------------------------------------------------------


def decode_account_id(account_id: stellar_xdr.AccountID) -> str:
    return encode_account_id(account_id.account_id.ed25519.uint256)


def decode_muxed_account(muxed: stellar_xdr.MuxedAccount) -> str:
    """MuxedAccount → G 주소 (M 계정은 기반 계정으로)"""
    if muxed.ed25519 is not None:
        return encode_account_id(muxed.ed25519.uint256)
    return encode_account_id(muxed.med25519.ed25519.uint256)


def _decode_asset_code(raw: bytes) -> str:
    try:
        return raw.rstrip(b"\x00").decode("ascii")
    except UnicodeDecodeError as e:
        raise XdrDecodeError(f"asset code is not ascii: {raw!r}") from e


def decode_asset(asset) -> Asset:
    """Asset / ChangeTrustAsset / TrustLineAsset → Asset"""
    asset_type = _enum(AssetType, asset.type.value)

    if asset_type == AssetType.NATIVE:
        return Asset.native()

    if asset_type == AssetType.CREDIT_ALPHANUM4:
        alpha_num = asset.alpha_num4
        code = alpha_num.asset_code.asset_code4
    else:
        alpha_num = asset.alpha_num12
        code = alpha_num.asset_code.asset_code12

    return Asset(
        asset_type=asset_type,
        code=_decode_asset_code(code),
        issuer=decode_account_id(alpha_num.issuer),
    )


def decode_price(price: stellar_xdr.Price) -> Price:
    return Price(n=price.n.int32, d=price.d.int32)


def decode_signer(signer: stellar_xdr.Signer) -> Signer:
    if signer.key.type.value != SIGNER_KEY_TYPE_ED25519:
        raise XdrDecodeError(f"unsupported SignerKeyType {signer.key.type.value}")
    return Signer(
        pub_key=encode_account_id(signer.key.ed25519.uint256),
        weight=signer.weight.uint32,
    )


def _optional(value: X | None, convert: Callable[[X], object]):
    return None if value is None else convert(value)


# -------------------------------------------------------------------------
# 오퍼레이션
# -------------------------------------------------------------------------


def _decode_create_account(body: stellar_xdr.OperationBody) -> CreateAccountOp:
    op = body.create_account_op
    return CreateAccountOp(
        destination=decode_account_id(op.destination),
        starting_balance=op.starting_balance.int64,
    )


def _decode_payment(body: stellar_xdr.OperationBody) -> PaymentOp:
    op = body.payment_op
    return PaymentOp(
        destination=decode_muxed_account(op.destination),
        asset=decode_asset(op.asset),
        amount=op.amount.int64,
    )


def _decode_path_payment(body: stellar_xdr.OperationBody) -> PathPaymentOp:
    op = body.path_payment_strict_receive_op
    return PathPaymentOp(
        send_asset=decode_asset(op.send_asset),
        send_max=op.send_max.int64,
        destination=decode_muxed_account(op.destination),
        dest_asset=decode_asset(op.dest_asset),
        dest_amount=op.dest_amount.int64,
        path=tuple(decode_asset(asset) for asset in op.path),
    )


def _decode_manage_offer(body: stellar_xdr.OperationBody) -> ManageOfferOp:
    op = body.manage_sell_offer_op
    return ManageOfferOp(
        selling=decode_asset(op.selling),
        buying=decode_asset(op.buying),
        amount=op.amount.int64,
        price=decode_price(op.price),
        offer_id=op.offer_id.int64,
    )


def _decode_create_passive_offer(body: stellar_xdr.OperationBody) -> CreatePassiveOfferOp:
    op = body.create_passive_sell_offer_op
    return CreatePassiveOfferOp(
        selling=decode_asset(op.selling),
        buying=decode_asset(op.buying),
        amount=op.amount.int64,
        price=decode_price(op.price),
    )


def _decode_set_options(body: stellar_xdr.OperationBody) -> SetOptionsOp:
    op = body.set_options_op

    def uint32(value: stellar_xdr.Uint32) -> int:
        return value.uint32

    return SetOptionsOp(
        inflation_dest=_optional(op.inflation_dest, decode_account_id),
        clear_flags=_optional(op.clear_flags, uint32),
        set_flags=_optional(op.set_flags, uint32),
        master_weight=_optional(op.master_weight, uint32),
        low_threshold=_optional(op.low_threshold, uint32),
        med_threshold=_optional(op.med_threshold, uint32),
        high_threshold=_optional(op.high_threshold, uint32),
        home_domain=_optional(op.home_domain, lambda d: _text(d.string32, "home_domain")),
        signer=_optional(op.signer, decode_signer),
    )


def _decode_change_trust(body: stellar_xdr.OperationBody) -> ChangeTrustOp:
    op = body.change_trust_op
    return ChangeTrustOp(line=decode_asset(op.line), limit=op.limit.int64)


def _decode_allow_trust(body: stellar_xdr.OperationBody) -> AllowTrustOp:
    op = body.allow_trust_op

    # 발행자 없는 자산 코드 union (발행자 = 오퍼레이션 소스)
    asset_type = _enum(AssetType, op.asset.type.value)
    if asset_type == AssetType.NATIVE:
        asset = Asset.native()
    else:
        if asset_type == AssetType.CREDIT_ALPHANUM4:
            code = op.asset.asset_code4.asset_code4
        else:
            code = op.asset.asset_code12.asset_code12
        asset = Asset(asset_type=asset_type, code=_decode_asset_code(code))

    return AllowTrustOp(
        trustor=decode_account_id(op.trustor),
        asset=asset,
        authorize=bool(op.authorize.uint32),
    )


def _decode_account_merge(body: stellar_xdr.OperationBody) -> AccountMergeOp:
    return AccountMergeOp(destination=decode_muxed_account(body.destination))


def _decode_inflation(body: stellar_xdr.OperationBody) -> InflationOp:
    return InflationOp()


OperationBodyDecoder = Callable[[stellar_xdr.OperationBody], OperationBody]
InnerResultDecoder = Callable[[stellar_xdr.OperationResultTr], InnerResult]

_OPERATION_BODY_DECODERS: dict[OperationType, OperationBodyDecoder] = {
    OperationType.CREATE_ACCOUNT: _decode_create_account,
    OperationType.PAYMENT: _decode_payment,
    OperationType.PATH_PAYMENT: _decode_path_payment,
    OperationType.MANAGE_OFFER: _decode_manage_offer,
    OperationType.CREATE_PASSIVE_OFFER: _decode_create_passive_offer,
    OperationType.SET_OPTIONS: _decode_set_options,
    OperationType.CHANGE_TRUST: _decode_change_trust,
    OperationType.ALLOW_TRUST: _decode_allow_trust,
    OperationType.ACCOUNT_MERGE: _decode_account_merge,
    OperationType.INFLATION: _decode_inflation,
}


def decode_operation(operation: stellar_xdr.Operation) -> Operation:
    op_type = _enum(OperationType, operation.body.type.value)
    return Operation(
        type=op_type,
        body=_OPERATION_BODY_DECODERS[op_type](operation.body),
        source_account=_optional(operation.source_account, decode_muxed_account),
    )


# -------------------------------------------------------------------------
# 트랜잭션 엔벨로프
# -------------------------------------------------------------------------


def decode_memo(memo: stellar_xdr.Memo) -> Memo:
    memo_type = _enum(MemoType, memo.type.value)

    if memo_type == MemoType.NONE:
        return Memo()
    if memo_type == MemoType.TEXT:
        return Memo(memo_type=memo_type, value=_text(memo.text, "memo text"))
    if memo_type == MemoType.ID:
        return Memo(memo_type=memo_type, value=str(memo.id.uint64))

    raw = memo.hash.hash if memo_type == MemoType.HASH else memo.ret_hash.hash
    return Memo(memo_type=memo_type, value=base64.b64encode(raw).decode("ascii"))


def _decode_time_bounds(time_bounds: stellar_xdr.TimeBounds) -> TimeBounds:
    return TimeBounds(
        min_time=time_bounds.min_time.time_point.uint64,
        max_time=time_bounds.max_time.time_point.uint64,
    )


def _v1_time_bounds(cond: stellar_xdr.Preconditions) -> stellar_xdr.TimeBounds | None:
    if cond.time_bounds is not None:
        return cond.time_bounds
    if cond.v2 is not None:
        return cond.v2.time_bounds
    return None


def decode_transaction_envelope(raw: bytes) -> DecodedEnvelope:
    """TransactionEnvelope 디코딩

    Args:
        raw: XDR 바이트 (base64 디코딩 후)

    Raises:
        XdrDecodeError: 형식 오류, 알 수 없는 판별자, fee bump 엔벨로프
    """
    envelope = _parse(stellar_xdr.TransactionEnvelope, raw)
    envelope_type = envelope.type.value

    if envelope_type == ENVELOPE_TYPE_TX_V0:
        tx = envelope.v0.tx
        source_account = encode_account_id(tx.source_account_ed25519.uint256)
        time_bounds = tx.time_bounds
        signatures = envelope.v0.signatures
    elif envelope_type == ENVELOPE_TYPE_TX:
        tx = envelope.v1.tx
        source_account = decode_muxed_account(tx.source_account)
        time_bounds = _v1_time_bounds(tx.cond)
        signatures = envelope.v1.signatures
    else:
        raise XdrDecodeError(f"unsupported EnvelopeType {envelope_type}")

    return DecodedEnvelope(
        source_account=source_account,
        fee=tx.fee.uint32,
        seq_num=tx.seq_num.sequence_number.int64,
        time_bounds=_optional(time_bounds, _decode_time_bounds),
        memo=decode_memo(tx.memo),
        operations=tuple(decode_operation(op) for op in tx.operations),
        signatures=tuple(sig.signature.signature for sig in signatures),
    )


# -------------------------------------------------------------------------
# 트랜잭션 결과
# -------------------------------------------------------------------------


def decode_claim_atom(atom: stellar_xdr.ClaimAtom) -> ClaimOfferAtom:
    if atom.type.value == CLAIM_ATOM_TYPE_V0:
        claimed = atom.v0
        seller_id = encode_account_id(claimed.seller_ed25519.uint256)
    elif atom.order_book is not None:
        claimed = atom.order_book
        seller_id = decode_account_id(claimed.seller_id)
    else:
        raise XdrDecodeError(f"unsupported ClaimAtomType {atom.type.value}")

    return ClaimOfferAtom(
        seller_id=seller_id,
        offer_id=claimed.offer_id.int64,
        asset_sold=decode_asset(claimed.asset_sold),
        amount_sold=claimed.amount_sold.int64,
        asset_bought=decode_asset(claimed.asset_bought),
        amount_bought=claimed.amount_bought.int64,
    )


def decode_offer_entry(entry: stellar_xdr.OfferEntry) -> OfferEntry:
    return OfferEntry(
        seller_id=decode_account_id(entry.seller_id),
        offer_id=entry.offer_id.int64,
        selling=decode_asset(entry.selling),
        buying=decode_asset(entry.buying),
        amount=entry.amount.int64,
        price=decode_price(entry.price),
        flags=entry.flags.uint32,
    )


def _simple_result(arm: str) -> Callable[[stellar_xdr.OperationResultTr], SimpleResult]:
    def decode(tr: stellar_xdr.OperationResultTr) -> SimpleResult:
        return SimpleResult(code=getattr(tr, arm).code.value)

    return decode


def _decode_path_payment_result(tr: stellar_xdr.OperationResultTr) -> PathPaymentResult:
    result = tr.path_payment_strict_receive_result
    code = result.code.value

    if code == INNER_RESULT_SUCCESS:
        last = result.success.last
        return PathPaymentResult(
            code=code,
            offers=tuple(decode_claim_atom(atom) for atom in result.success.offers),
            last=SimplePaymentResult(
                destination=decode_account_id(last.destination),
                asset=decode_asset(last.asset),
                amount=last.amount.int64,
            ),
        )

    if code == PATH_PAYMENT_NO_ISSUER:
        return PathPaymentResult(code=code, no_issuer=decode_asset(result.no_issuer))

    return PathPaymentResult(code=code)


def _manage_offer_result(arm: str) -> Callable[[stellar_xdr.OperationResultTr], ManageOfferResult]:
    def decode(tr: stellar_xdr.OperationResultTr) -> ManageOfferResult:
        result = getattr(tr, arm)
        code = result.code.value
        if code != INNER_RESULT_SUCCESS:
            return ManageOfferResult(code=code)

        success = result.success
        effect = _enum(ManageOfferEffect, success.offer.effect.value)
        return ManageOfferResult(
            code=code,
            offers_claimed=tuple(decode_claim_atom(atom) for atom in success.offers_claimed),
            effect=effect,
            offer=_optional(success.offer.offer, decode_offer_entry),
        )

    return decode


def _decode_account_merge_result(tr: stellar_xdr.OperationResultTr) -> AccountMergeResult:
    result = tr.account_merge_result
    code = result.code.value
    if code != INNER_RESULT_SUCCESS:
        return AccountMergeResult(code=code)
    return AccountMergeResult(
        code=code, source_account_balance=result.source_account_balance.int64
    )


def _decode_inflation_result(tr: stellar_xdr.OperationResultTr) -> InflationResult:
    result = tr.inflation_result
    code = result.code.value
    if code != INNER_RESULT_SUCCESS:
        return InflationResult(code=code)
    return InflationResult(
        code=code,
        payouts=tuple(
            InflationPayout(destination=decode_account_id(p.destination), amount=p.amount.int64)
            for p in result.payouts
        ),
    )


_INNER_RESULT_DECODERS: dict[OperationType, InnerResultDecoder] = {
    OperationType.CREATE_ACCOUNT: _simple_result("create_account_result"),
    OperationType.PAYMENT: _simple_result("payment_result"),
    OperationType.PATH_PAYMENT: _decode_path_payment_result,
    OperationType.MANAGE_OFFER: _manage_offer_result("manage_sell_offer_result"),
    OperationType.CREATE_PASSIVE_OFFER: _manage_offer_result("create_passive_sell_offer_result"),
    OperationType.SET_OPTIONS: _simple_result("set_options_result"),
    OperationType.CHANGE_TRUST: _simple_result("change_trust_result"),
    OperationType.ALLOW_TRUST: _simple_result("allow_trust_result"),
    OperationType.ACCOUNT_MERGE: _decode_account_merge_result,
    OperationType.INFLATION: _decode_inflation_result,
}


def decode_operation_result(result: stellar_xdr.OperationResult) -> OperationResult:
    code = _enum(OperationResultCode, result.code.value)
    if code != OperationResultCode.OP_INNER:
        return OperationResult(code=code)

    op_type = _enum(OperationType, result.tr.type.value)
    return OperationResult(code=code, type=op_type, tr=_INNER_RESULT_DECODERS[op_type](result.tr))


def decode_transaction_result_pair(raw: bytes) -> DecodedResultPair:
    """TransactionResultPair 디코딩

    결과 코드는 Enum으로 강제하지 않음 (알 수 없는 실패 코드도 실패로 취급).
    """
    pair = _parse(stellar_xdr.TransactionResultPair, raw)
    result_code = pair.result.result.code.value

    results: tuple[OperationResult, ...] = ()
    if result_code in (TransactionResultCode.TX_SUCCESS, TransactionResultCode.TX_FAILED):
        results = tuple(decode_operation_result(r) for r in pair.result.result.results)

    return DecodedResultPair(
        transaction_hash=pair.transaction_hash.hash.hex(),
        fee_charged=pair.result.fee_charged.int64,
        result_code=result_code,
        results=results,
        result_xdr=pair.result.to_xdr_bytes(),
    )


# -------------------------------------------------------------------------
# 메타데이터 (LedgerEntryChanges)
# -------------------------------------------------------------------------


def _decode_account_entry(entry: stellar_xdr.AccountEntry) -> AccountEntry:
    return AccountEntry(
        account_id=decode_account_id(entry.account_id),
        balance=entry.balance.int64,
        seq_num=entry.seq_num.sequence_number.int64,
        num_sub_entries=entry.num_sub_entries.uint32,
        inflation_dest=_optional(entry.inflation_dest, decode_account_id),
        flags=entry.flags.uint32,
        home_domain=_text(entry.home_domain.string32, "home_domain"),
        thresholds=entry.thresholds.thresholds,
        signers=tuple(decode_signer(signer) for signer in entry.signers),
    )


def _decode_trust_line_entry(entry: stellar_xdr.TrustLineEntry) -> TrustLineEntry:
    return TrustLineEntry(
        account_id=decode_account_id(entry.account_id),
        asset=decode_asset(entry.asset),
        balance=entry.balance.int64,
        limit=entry.limit.int64,
        flags=entry.flags.uint32,
    )


def _decode_entry_data(data: stellar_xdr.LedgerEntryData):
    entry_type = _enum(LedgerEntryType, data.type.value)
    if entry_type == LedgerEntryType.ACCOUNT:
        return entry_type, _decode_account_entry(data.account)
    if entry_type == LedgerEntryType.TRUSTLINE:
        return entry_type, _decode_trust_line_entry(data.trust_line)
    return entry_type, decode_offer_entry(data.offer)


def decode_ledger_key(key: stellar_xdr.LedgerKey) -> LedgerKey:
    entry_type = _enum(LedgerEntryType, key.type.value)

    if entry_type == LedgerEntryType.TRUSTLINE:
        return LedgerKey(
            entry_type=entry_type,
            account_id=decode_account_id(key.trust_line.account_id),
            asset=decode_asset(key.trust_line.asset),
        )
    if entry_type == LedgerEntryType.OFFER:
        return LedgerKey(
            entry_type=entry_type,
            account_id=decode_account_id(key.offer.seller_id),
            offer_id=key.offer.offer_id.int64,
        )
    return LedgerKey(entry_type=entry_type, account_id=decode_account_id(key.account.account_id))


def decode_ledger_entry_change(change: stellar_xdr.LedgerEntryChange) -> LedgerEntryChange:
    change_type = _enum(LedgerEntryChangeType, change.type.value)

    if change_type == LedgerEntryChangeType.REMOVED:
        key = decode_ledger_key(change.removed)
        return LedgerEntryChange(type=change_type, entry_type=key.entry_type, data=key)

    entry = {
        LedgerEntryChangeType.CREATED: change.created,
        LedgerEntryChangeType.UPDATED: change.updated,
        LedgerEntryChangeType.STATE: change.state,
    }[change_type]
    entry_type, data = _decode_entry_data(entry.data)

    return LedgerEntryChange(
        type=change_type,
        entry_type=entry_type,
        data=data,
        last_modified_ledger_seq=entry.last_modified_ledger_seq.uint32,
    )


def _decode_operation_meta(meta: stellar_xdr.OperationMeta) -> OperationMeta:
    return OperationMeta(
        changes=tuple(decode_ledger_entry_change(c) for c in meta.changes.ledger_entry_changes)
    )


def decode_transaction_meta(raw: bytes) -> TransactionMeta:
    """TransactionMeta 디코딩 (v0 ~ v3의 오퍼레이션별 변경만)"""
    meta = _parse(stellar_xdr.TransactionMeta, raw)

    if meta.v == 0:
        operations = meta.operations
    elif meta.v in (1, 2, 3):
        operations = getattr(meta, f"v{meta.v}").operations
    else:
        raise XdrDecodeError(f"unsupported TransactionMeta version {meta.v}")

    return TransactionMeta(operations=tuple(_decode_operation_meta(m) for m in operations))


# -------------------------------------------------------------------------
# 원장 헤더
# -------------------------------------------------------------------------


def decode_ledger_header(raw: bytes) -> DecodedLedgerHeader:
    header = _parse(stellar_xdr.LedgerHeader, raw)

    return DecodedLedgerHeader(
        ledger_version=header.ledger_version.uint32,
        previous_ledger_hash=header.previous_ledger_hash.hash.hex(),
        tx_set_hash=header.scp_value.tx_set_hash.hash.hex(),
        close_time=header.scp_value.close_time.time_point.uint64,
        tx_set_result_hash=header.tx_set_result_hash.hash.hex(),
        bucket_list_hash=header.bucket_list_hash.hash.hex(),
        ledger_seq=header.ledger_seq.uint32,
        total_coins=header.total_coins.int64,
        fee_pool=header.fee_pool.int64,
        inflation_seq=header.inflation_seq.uint32,
        id_pool=header.id_pool.uint64,
        base_fee=header.base_fee.uint32,
        base_reserve=header.base_reserve.uint32,
        max_tx_set_size=header.max_tx_set_size.uint32,
    )
