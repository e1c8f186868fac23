"""
테스트용 XDR 인코더

도메인 모델 → stellar_sdk.xdr 객체 → XDR 바이트.
stellar-core DB 행(txbody, txresult, txmeta, ledgerheaders.data) 작성에 사용.
엔벨로프는 프로토콜 13 이전 형식(ENVELOPE_TYPE_TX_V0)으로 기록.
"""

import base64

from stellar_sdk import xdr as stellar_xdr

from core.domain.ledger import LedgerEntryChange, Memo, TimeBounds, TrustLineEntry
from core.domain.operations import (
    AccountMergeOp,
    AccountMergeResult,
    AllowTrustOp,
    Asset,
    ChangeTrustOp,
    ClaimOfferAtom,
    CreateAccountOp,
    CreatePassiveOfferOp,
    InflationResult,
    ManageOfferOp,
    ManageOfferResult,
    OfferEntry,
    Operation,
    OperationResult,
    PathPaymentOp,
    PathPaymentResult,
    PaymentOp,
    Price,
    SetOptionsOp,
    Signer,
    SimpleResult,
)
from core.types import (
    AssetType,
    LedgerEntryChangeType,
    LedgerEntryType,
    MemoType,
    OperationResultCode,
    OperationType,
    TransactionResultCode,
)
from core.utils.strkey import decode_account_id

ZERO_HASH = stellar_xdr.Hash(b"\x00" * 32)
SIGNATURE_HINT = stellar_xdr.SignatureHint(b"\x00\x01\x02\x03")


def to_b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


# -------------------------------------------------------------------------
# 공통 구조체
# -------------------------------------------------------------------------


def public_key_xdr(address: str) -> stellar_xdr.Uint256:
    return stellar_xdr.Uint256(decode_account_id(address))


def account_id_xdr(address: str) -> stellar_xdr.AccountID:
    return stellar_xdr.AccountID(
        stellar_xdr.PublicKey(stellar_xdr.PublicKeyType(0), ed25519=public_key_xdr(address))
    )


def muxed_account_xdr(address: str) -> stellar_xdr.MuxedAccount:
    return stellar_xdr.MuxedAccount(stellar_xdr.CryptoKeyType(0), ed25519=public_key_xdr(address))


def _code_bytes(code: str, width: int) -> bytes:
    return code.encode("ascii").ljust(width, b"\x00")


def asset_xdr(asset: Asset, xdr_type=stellar_xdr.Asset):
    """Asset → Asset / ChangeTrustAsset / TrustLineAsset (arm 이름이 같음)"""
    asset_type = stellar_xdr.AssetType(asset.asset_type.value)
    if asset.is_native:
        return xdr_type(asset_type)

    issuer = account_id_xdr(asset.issuer)
    if asset.asset_type == AssetType.CREDIT_ALPHANUM4:
        code = stellar_xdr.AssetCode4(_code_bytes(asset.code, 4))
        return xdr_type(asset_type, alpha_num4=stellar_xdr.AlphaNum4(code, issuer))

    code = stellar_xdr.AssetCode12(_code_bytes(asset.code, 12))
    return xdr_type(asset_type, alpha_num12=stellar_xdr.AlphaNum12(code, issuer))


def price_xdr(price: Price) -> stellar_xdr.Price:
    return stellar_xdr.Price(stellar_xdr.Int32(price.n), stellar_xdr.Int32(price.d))


def signer_xdr(signer: Signer) -> stellar_xdr.Signer:
    key = stellar_xdr.SignerKey(stellar_xdr.SignerKeyType(0), ed25519=public_key_xdr(signer.pub_key))
    return stellar_xdr.Signer(key, stellar_xdr.Uint32(signer.weight))


def claim_xdr(claimed: ClaimOfferAtom) -> stellar_xdr.ClaimAtom:
    """체결 오퍼 (프로토콜 13 이전 레이아웃 = CLAIM_ATOM_TYPE_V0)"""
    return stellar_xdr.ClaimAtom(
        stellar_xdr.ClaimAtomType(0),
        v0=stellar_xdr.ClaimOfferAtomV0(
            public_key_xdr(claimed.seller_id),
            stellar_xdr.Int64(claimed.offer_id),
            asset_xdr(claimed.asset_sold),
            stellar_xdr.Int64(claimed.amount_sold),
            asset_xdr(claimed.asset_bought),
            stellar_xdr.Int64(claimed.amount_bought),
        ),
    )


def offer_entry_xdr(entry: OfferEntry) -> stellar_xdr.OfferEntry:
    return stellar_xdr.OfferEntry(
        account_id_xdr(entry.seller_id),
        stellar_xdr.Int64(entry.offer_id),
        asset_xdr(entry.selling),
        asset_xdr(entry.buying),
        stellar_xdr.Int64(entry.amount),
        price_xdr(entry.price),
        stellar_xdr.Uint32(entry.flags),
        stellar_xdr.OfferEntryExt(0),
    )


# -------------------------------------------------------------------------
# 엔벨로프
# -------------------------------------------------------------------------


def _optional_uint32(value: int | None) -> stellar_xdr.Uint32 | None:
    return None if value is None else stellar_xdr.Uint32(value)


def _set_options_xdr(body: SetOptionsOp) -> stellar_xdr.SetOptionsOp:
    return stellar_xdr.SetOptionsOp(
        inflation_dest=account_id_xdr(body.inflation_dest) if body.inflation_dest else None,
        clear_flags=_optional_uint32(body.clear_flags),
        set_flags=_optional_uint32(body.set_flags),
        master_weight=_optional_uint32(body.master_weight),
        low_threshold=_optional_uint32(body.low_threshold),
        med_threshold=_optional_uint32(body.med_threshold),
        high_threshold=_optional_uint32(body.high_threshold),
        home_domain=(
            stellar_xdr.String32(body.home_domain.encode("utf-8"))
            if body.home_domain is not None
            else None
        ),
        signer=signer_xdr(body.signer) if body.signer else None,
    )


def operation_body_xdr(operation: Operation) -> stellar_xdr.OperationBody:
    op_type = stellar_xdr.OperationType(operation.type.value)
    body = operation.body

    if isinstance(body, CreateAccountOp):
        return stellar_xdr.OperationBody(
            op_type,
            create_account_op=stellar_xdr.CreateAccountOp(
                account_id_xdr(body.destination), stellar_xdr.Int64(body.starting_balance)
            ),
        )
    if isinstance(body, PaymentOp):
        return stellar_xdr.OperationBody(
            op_type,
            payment_op=stellar_xdr.PaymentOp(
                muxed_account_xdr(body.destination),
                asset_xdr(body.asset),
                stellar_xdr.Int64(body.amount),
            ),
        )
    if isinstance(body, PathPaymentOp):
        return stellar_xdr.OperationBody(
            op_type,
            path_payment_strict_receive_op=stellar_xdr.PathPaymentStrictReceiveOp(
                asset_xdr(body.send_asset),
                stellar_xdr.Int64(body.send_max),
                muxed_account_xdr(body.destination),
                asset_xdr(body.dest_asset),
                stellar_xdr.Int64(body.dest_amount),
                [asset_xdr(asset) for asset in body.path],
            ),
        )
    if isinstance(body, ManageOfferOp):
        return stellar_xdr.OperationBody(
            op_type,
            manage_sell_offer_op=stellar_xdr.ManageSellOfferOp(
                asset_xdr(body.selling),
                asset_xdr(body.buying),
                stellar_xdr.Int64(body.amount),
                price_xdr(body.price),
                stellar_xdr.Int64(body.offer_id),
            ),
        )
    if isinstance(body, CreatePassiveOfferOp):
        return stellar_xdr.OperationBody(
            op_type,
            create_passive_sell_offer_op=stellar_xdr.CreatePassiveSellOfferOp(
                asset_xdr(body.selling),
                asset_xdr(body.buying),
                stellar_xdr.Int64(body.amount),
                price_xdr(body.price),
            ),
        )
    if isinstance(body, SetOptionsOp):
        return stellar_xdr.OperationBody(op_type, set_options_op=_set_options_xdr(body))
    if isinstance(body, ChangeTrustOp):
        return stellar_xdr.OperationBody(
            op_type,
            change_trust_op=stellar_xdr.ChangeTrustOp(
                asset_xdr(body.line, stellar_xdr.ChangeTrustAsset), stellar_xdr.Int64(body.limit)
            ),
        )
    if isinstance(body, AllowTrustOp):
        asset_type = stellar_xdr.AssetType(body.asset.asset_type.value)
        if body.asset.asset_type == AssetType.CREDIT_ALPHANUM4:
            code = stellar_xdr.AssetCode(
                asset_type, asset_code4=stellar_xdr.AssetCode4(_code_bytes(body.asset.code, 4))
            )
        else:
            code = stellar_xdr.AssetCode(
                asset_type, asset_code12=stellar_xdr.AssetCode12(_code_bytes(body.asset.code, 12))
            )
        return stellar_xdr.OperationBody(
            op_type,
            allow_trust_op=stellar_xdr.AllowTrustOp(
                account_id_xdr(body.trustor), code, stellar_xdr.Uint32(int(body.authorize))
            ),
        )
    if isinstance(body, AccountMergeOp):
        return stellar_xdr.OperationBody(op_type, destination=muxed_account_xdr(body.destination))
    if operation.type == OperationType.INFLATION:
        return stellar_xdr.OperationBody(op_type)

    raise NotImplementedError(f"test encoder does not support {operation.type}")


def operation_xdr(operation: Operation) -> stellar_xdr.Operation:
    source = operation.source_account
    return stellar_xdr.Operation(
        muxed_account_xdr(source) if source else None,
        operation_body_xdr(operation),
    )


def memo_xdr(memo: Memo) -> stellar_xdr.Memo:
    memo_type = stellar_xdr.MemoType(memo.memo_type.value)

    if memo.memo_type == MemoType.TEXT:
        return stellar_xdr.Memo(memo_type, text=memo.value.encode("utf-8"))
    if memo.memo_type == MemoType.ID:
        return stellar_xdr.Memo(memo_type, id=stellar_xdr.Uint64(int(memo.value)))
    if memo.memo_type == MemoType.HASH:
        return stellar_xdr.Memo(memo_type, hash=stellar_xdr.Hash(base64.b64decode(memo.value)))
    if memo.memo_type == MemoType.RETURN:
        return stellar_xdr.Memo(memo_type, ret_hash=stellar_xdr.Hash(base64.b64decode(memo.value)))
    return stellar_xdr.Memo(memo_type)


def _time_point(value: int) -> stellar_xdr.TimePoint:
    return stellar_xdr.TimePoint(stellar_xdr.Uint64(value))


def envelope_xdr(
    source: str,
    seq_num: int,
    operations: list,
    memo: Memo | None = None,
    time_bounds: TimeBounds | None = None,
    fee: int = 100,
    signatures: tuple[bytes, ...] = (b"\x07" * 64,),
) -> bytes:
    """TransactionEnvelope (v0) 바이트

    Args:
        operations: 도메인 Operation 또는 이미 만든 stellar_sdk.xdr.Operation
    """
    tx = stellar_xdr.TransactionV0(
        public_key_xdr(source),
        stellar_xdr.Uint32(fee),
        stellar_xdr.SequenceNumber(stellar_xdr.Int64(seq_num)),
        (
            stellar_xdr.TimeBounds(_time_point(time_bounds.min_time), _time_point(time_bounds.max_time))
            if time_bounds is not None
            else None
        ),
        memo_xdr(memo or Memo()),
        [op if isinstance(op, stellar_xdr.Operation) else operation_xdr(op) for op in operations],
        stellar_xdr.TransactionV0Ext(0),
    )
    decorated = [
        stellar_xdr.DecoratedSignature(SIGNATURE_HINT, stellar_xdr.Signature(signature))
        for signature in signatures
    ]
    envelope = stellar_xdr.TransactionEnvelope(
        stellar_xdr.EnvelopeType(0),
        v0=stellar_xdr.TransactionV0Envelope(tx, decorated),
    )
    return envelope.to_xdr_bytes()


# -------------------------------------------------------------------------
# 결과
# -------------------------------------------------------------------------


# 페이로드 없는 결과: (union arm, 결과 타입, 결과 코드 타입)
_SIMPLE_RESULTS = {
    OperationType.CREATE_ACCOUNT: (
        "create_account_result",
        stellar_xdr.CreateAccountResult,
        stellar_xdr.CreateAccountResultCode,
    ),
    OperationType.PAYMENT: (
        "payment_result",
        stellar_xdr.PaymentResult,
        stellar_xdr.PaymentResultCode,
    ),
    OperationType.SET_OPTIONS: (
        "set_options_result",
        stellar_xdr.SetOptionsResult,
        stellar_xdr.SetOptionsResultCode,
    ),
    OperationType.CHANGE_TRUST: (
        "change_trust_result",
        stellar_xdr.ChangeTrustResult,
        stellar_xdr.ChangeTrustResultCode,
    ),
    OperationType.ALLOW_TRUST: (
        "allow_trust_result",
        stellar_xdr.AllowTrustResult,
        stellar_xdr.AllowTrustResultCode,
    ),
}


def _inner_result_xdr(op_type: OperationType, tr) -> tuple[str, object]:
    if isinstance(tr, SimpleResult):
        arm, result_type, code_type = _SIMPLE_RESULTS[op_type]
        return arm, result_type(code_type(tr.code))

    if isinstance(tr, PathPaymentResult):
        code = stellar_xdr.PathPaymentStrictReceiveResultCode(tr.code)
        success = None
        if tr.is_success:
            success = stellar_xdr.PathPaymentStrictReceiveResultSuccess(
                [claim_xdr(claimed) for claimed in tr.offers],
                stellar_xdr.SimplePaymentResult(
                    account_id_xdr(tr.last.destination),
                    asset_xdr(tr.last.asset),
                    stellar_xdr.Int64(tr.last.amount),
                ),
            )
        return "path_payment_strict_receive_result", stellar_xdr.PathPaymentStrictReceiveResult(
            code, success=success
        )

    if isinstance(tr, ManageOfferResult):
        arm = (
            "manage_sell_offer_result"
            if op_type == OperationType.MANAGE_OFFER
            else "create_passive_sell_offer_result"
        )
        code = stellar_xdr.ManageSellOfferResultCode(tr.code)
        success = None
        if tr.is_success:
            success = stellar_xdr.ManageOfferSuccessResult(
                [claim_xdr(claimed) for claimed in tr.offers_claimed],
                stellar_xdr.ManageOfferSuccessResultOffer(
                    stellar_xdr.ManageOfferEffect(tr.effect.value),
                    offer=offer_entry_xdr(tr.offer) if tr.offer else None,
                ),
            )
        return arm, stellar_xdr.ManageSellOfferResult(code, success=success)

    if isinstance(tr, AccountMergeResult):
        code = stellar_xdr.AccountMergeResultCode(tr.code)
        balance = None
        if tr.is_success:
            balance = stellar_xdr.Int64(tr.source_account_balance or 0)
        return "account_merge_result", stellar_xdr.AccountMergeResult(
            code, source_account_balance=balance
        )

    if isinstance(tr, InflationResult):
        code = stellar_xdr.InflationResultCode(tr.code)
        payouts = None
        if tr.is_success:
            payouts = [
                stellar_xdr.InflationPayout(
                    account_id_xdr(payout.destination), stellar_xdr.Int64(payout.amount)
                )
                for payout in tr.payouts
            ]
        return "inflation_result", stellar_xdr.InflationResult(code, payouts=payouts)

    raise NotImplementedError(f"test encoder does not support {type(tr).__name__}")


def operation_result_xdr(result: OperationResult) -> stellar_xdr.OperationResult:
    code = stellar_xdr.OperationResultCode(result.code.value)
    if result.code != OperationResultCode.OP_INNER:
        return stellar_xdr.OperationResult(code)

    arm, inner = _inner_result_xdr(result.type, result.tr)
    tr = stellar_xdr.OperationResultTr(stellar_xdr.OperationType(result.type.value), **{arm: inner})
    return stellar_xdr.OperationResult(code, tr=tr)


def result_pair_xdr(
    transaction_hash: str,
    results: list[OperationResult],
    result_code: int = TransactionResultCode.TX_SUCCESS,
    fee_charged: int = 100,
) -> bytes:
    results_xdr = None
    if result_code in (TransactionResultCode.TX_SUCCESS, TransactionResultCode.TX_FAILED):
        results_xdr = [operation_result_xdr(result) for result in results]

    pair = stellar_xdr.TransactionResultPair(
        stellar_xdr.Hash(bytes.fromhex(transaction_hash)),
        stellar_xdr.TransactionResult(
            stellar_xdr.Int64(fee_charged),
            stellar_xdr.TransactionResultResult(
                stellar_xdr.TransactionResultCode(int(result_code)),
                results=results_xdr,
            ),
            stellar_xdr.TransactionResultExt(0),
        ),
    )
    return pair.to_xdr_bytes()


# -------------------------------------------------------------------------
# 메타
# -------------------------------------------------------------------------


_ENTRY_CHANGE_ARMS = {
    LedgerEntryChangeType.CREATED: "created",
    LedgerEntryChangeType.UPDATED: "updated",
    LedgerEntryChangeType.STATE: "state",
}


def ledger_entry_change_xdr(change: LedgerEntryChange) -> stellar_xdr.LedgerEntryChange:
    if change.type == LedgerEntryChangeType.REMOVED:
        raise NotImplementedError("test encoder does not support removed entries")

    entry = change.data
    if not isinstance(entry, TrustLineEntry):
        raise NotImplementedError(f"test encoder does not support {type(entry).__name__}")

    trust_line = stellar_xdr.TrustLineEntry(
        account_id_xdr(entry.account_id),
        asset_xdr(entry.asset, stellar_xdr.TrustLineAsset),
        stellar_xdr.Int64(entry.balance),
        stellar_xdr.Int64(entry.limit),
        stellar_xdr.Uint32(entry.flags),
        stellar_xdr.TrustLineEntryExt(0),
    )
    ledger_entry = stellar_xdr.LedgerEntry(
        stellar_xdr.Uint32(change.last_modified_ledger_seq or 0),
        stellar_xdr.LedgerEntryData(
            stellar_xdr.LedgerEntryType(LedgerEntryType.TRUSTLINE.value), trust_line=trust_line
        ),
        stellar_xdr.LedgerEntryExt(0),
    )
    return stellar_xdr.LedgerEntryChange(
        stellar_xdr.LedgerEntryChangeType(change.type.value),
        **{_ENTRY_CHANGE_ARMS[change.type]: ledger_entry},
    )


def meta_xdr(operation_changes: list[list[LedgerEntryChange]]) -> bytes:
    """TransactionMeta v0 (오퍼레이션별 변경 목록)"""
    meta = stellar_xdr.TransactionMeta(
        0,
        operations=[
            stellar_xdr.OperationMeta(
                stellar_xdr.LedgerEntryChanges([ledger_entry_change_xdr(c) for c in changes])
            )
            for changes in operation_changes
        ],
    )
    return meta.to_xdr_bytes()


# -------------------------------------------------------------------------
# 원장 헤더
# -------------------------------------------------------------------------


def ledger_header_xdr(
    sequence: int,
    previous_ledger_hash: str,
    close_time: int,
    total_coins: int = 1_000_000_000_000_000_000,
    fee_pool: int = 0,
    base_fee: int = 10,
    base_reserve: int = 100_000_000,
    max_tx_set_size: int = 50,
) -> bytes:
    scp_value = stellar_xdr.StellarValue(
        ZERO_HASH,
        _time_point(close_time),
        [],
        stellar_xdr.StellarValueExt(stellar_xdr.StellarValueType(0)),
    )
    header = stellar_xdr.LedgerHeader(
        stellar_xdr.Uint32(1),  # ledgerVersion
        stellar_xdr.Hash(bytes.fromhex(previous_ledger_hash)),
        scp_value,
        ZERO_HASH,  # txSetResultHash
        ZERO_HASH,  # bucketListHash
        stellar_xdr.Uint32(sequence),
        stellar_xdr.Int64(total_coins),
        stellar_xdr.Int64(fee_pool),
        stellar_xdr.Uint32(0),  # inflationSeq
        stellar_xdr.Uint64(0),  # idPool
        stellar_xdr.Uint32(base_fee),
        stellar_xdr.Uint32(base_reserve),
        stellar_xdr.Uint32(max_tx_set_size),
        [ZERO_HASH] * 4,  # skipList
        stellar_xdr.LedgerHeaderExt(0),
    )
    return header.to_xdr_bytes()
