"""
core/history/effect_deriver.py 테스트

유형별 이펙트 종류, 대상 계정, 순서, details
"""

import logging

import pytest

from core.domain.ledger import OperationMeta
from core.domain.operations import Asset, Price, Signer
from core.errors import OperationResultError
from core.history.effect_deriver import EffectDeriver, EffectRecord, EffectSink
from core.history.operation_decoder import OperationDecoder
from core.history.types import EffectType
from core.types import LedgerEntryChangeType, OperationType
from tests.utils.factories import (
    MASTER,
    ONE,
    OpPair,
    account_merge,
    allow_trust,
    change_trust,
    claim,
    create_account,
    credit,
    inflation,
    make_address,
    manage_offer,
    path_payment,
    payment,
    set_options,
    trustline_meta,
)

ALICE = make_address(2)
BOB = make_address(3)
ISSUER = make_address(4)
CAROL = make_address(5)
DAVE = make_address(6)

OPERATION_ID = 12345


def derive(
    pair: OpPair,
    source: str = ALICE,
    meta: OperationMeta | None = None,
    deriver: EffectDeriver | None = None,
) -> list[EffectRecord]:
    operation, result = pair
    decoded = OperationDecoder().decode(operation, result, source)
    sink = EffectSink(operation_id=OPERATION_ID)
    (deriver or EffectDeriver()).derive(operation, decoded, result, meta, sink)
    return sink.records


def kinds(records: list[EffectRecord]) -> list[tuple[EffectType, str]]:
    return [(record.type, record.account) for record in records]


class TestEffectSink:
    """EffectSink 테스트"""

    def test_order_starts_at_one(self) -> None:
        sink = EffectSink(operation_id=7)

        first = sink.add(EffectType.ACCOUNT_CREDITED, ALICE, {})
        second = sink.add(EffectType.ACCOUNT_DEBITED, BOB, {})

        assert (first.order, second.order) == (1, 2)
        assert first.operation_id == 7
        assert len(sink) == 2

    def test_accounts_unique_in_order(self) -> None:
        sink = EffectSink(operation_id=7)
        sink.add(EffectType.TRADE, BOB, {})
        sink.add(EffectType.TRADE, ALICE, {})
        sink.add(EffectType.TRADE, BOB, {})

        assert sink.accounts == [BOB, ALICE]

    def test_sinks_are_independent(self) -> None:
        """오퍼레이션마다 순번이 1부터 다시 시작"""
        first = EffectSink(operation_id=1)
        first.add(EffectType.TRADE, ALICE, {})
        second = EffectSink(operation_id=2)

        assert second.add(EffectType.TRADE, ALICE, {}).order == 1


class TestCreateAccount:
    """create_account 이펙트"""

    def test_three_effects_in_order(self) -> None:
        records = derive(create_account(BOB, 20 * ONE), source=MASTER)

        assert kinds(records) == [
            (EffectType.ACCOUNT_CREATED, BOB),
            (EffectType.ACCOUNT_DEBITED, MASTER),
            (EffectType.SIGNER_CREATED, BOB),
        ]
        assert [record.order for record in records] == [1, 2, 3]

    def test_details(self) -> None:
        records = derive(create_account(BOB, 20 * ONE), source=MASTER)

        assert records[0].details == {"starting_balance": "20.0000000"}
        assert records[1].details == {"asset_type": "native", "amount": "20.0000000"}
        assert records[2].details == {"public_key": BOB, "weight": 1}


class TestPayment:
    """payment 이펙트"""

    def test_credited_then_debited(self) -> None:
        records = derive(payment(BOB, 5 * ONE, asset=credit("USD", ISSUER)))

        assert kinds(records) == [
            (EffectType.ACCOUNT_CREDITED, BOB),
            (EffectType.ACCOUNT_DEBITED, ALICE),
        ]
        expected = {
            "amount": "5.0000000",
            "asset_type": "credit_alphanum4",
            "asset_code": "USD",
            "asset_issuer": ISSUER,
        }
        assert records[0].details == expected
        assert records[1].details == expected

    def test_operation_source_is_debited(self) -> None:
        records = derive(payment(BOB, ONE, source=CAROL), source=ALICE)

        assert records[1].account == CAROL


class TestPathPayment:
    """path_payment 이펙트"""

    def test_effect_count_with_trades(self) -> None:
        """2 + 2 * 체결 오퍼 수"""
        usd = credit("USD", ISSUER)
        eur = credit("EUR", ISSUER)
        offers = (
            claim(CAROL, 1, eur, 10 * ONE, Asset.native(), 4 * ONE),
            claim(DAVE, 2, usd, 8 * ONE, eur, 10 * ONE),
        )
        records = derive(
            path_payment(
                BOB,
                send_asset=Asset.native(),
                send_max=5 * ONE,
                dest_asset=usd,
                dest_amount=8 * ONE,
                offers=offers,
                path=(eur,),
            )
        )

        assert len(records) == 2 + 2 * len(offers)
        assert kinds(records) == [
            (EffectType.ACCOUNT_CREDITED, BOB),
            (EffectType.ACCOUNT_DEBITED, ALICE),
            (EffectType.TRADE, ALICE),
            (EffectType.TRADE, CAROL),
            (EffectType.TRADE, ALICE),
            (EffectType.TRADE, DAVE),
        ]

    def test_debit_uses_actual_amount(self) -> None:
        """소스 차감액은 send_max가 아니라 실제 지불 금액"""
        usd = credit("USD", ISSUER)
        offers = (claim(CAROL, 1, usd, 8 * ONE, Asset.native(), 3 * ONE),)
        records = derive(
            path_payment(
                BOB,
                send_asset=Asset.native(),
                send_max=5 * ONE,
                dest_asset=usd,
                dest_amount=8 * ONE,
                offers=offers,
            )
        )

        assert records[0].details["amount"] == "8.0000000"
        assert records[0].details["asset_code"] == "USD"
        assert records[1].details == {"amount": "3.0000000", "asset_type": "native"}


class TestTrades:
    """trade 이펙트 (매수자/매도자 대칭)"""

    def test_mirrored_details(self) -> None:
        usd = credit("USD", ISSUER)
        offers = (claim(CAROL, 99, usd, 10 * ONE, Asset.native(), 2 * ONE),)
        records = derive(
            manage_offer(
                selling=Asset.native(),
                buying=usd,
                amount=2 * ONE,
                price=Price(1, 5),
                offers_claimed=offers,
            )
        )

        buyer, seller = records
        assert (buyer.account, seller.account) == (ALICE, CAROL)

        assert buyer.details == {
            "offer_id": 99,
            "seller": CAROL,
            "bought_amount": "10.0000000",
            "sold_amount": "2.0000000",
            "bought_asset_type": "credit_alphanum4",
            "bought_asset_code": "USD",
            "bought_asset_issuer": ISSUER,
            "sold_asset_type": "native",
        }
        assert seller.details == {
            "offer_id": 99,
            "seller": ALICE,
            "bought_amount": "2.0000000",
            "sold_amount": "10.0000000",
            "bought_asset_type": "native",
            "sold_asset_type": "credit_alphanum4",
            "sold_asset_code": "USD",
            "sold_asset_issuer": ISSUER,
        }

    def test_offer_without_fills_has_no_effects(self) -> None:
        records = derive(
            manage_offer(
                selling=Asset.native(),
                buying=credit("USD", ISSUER),
                amount=ONE,
                price=Price(1, 1),
            )
        )

        assert records == []


class TestSetOptions:
    """set_options 이펙트"""

    def test_fixed_order(self) -> None:
        """home_domain → thresholds → flags → master signer → signer"""
        records = derive(
            set_options(
                home_domain="example.com",
                low_threshold=1,
                high_threshold=3,
                set_flags=1,
                clear_flags=2,
                master_weight=2,
                signer=Signer(pub_key=CAROL, weight=1),
            )
        )

        assert [record.type for record in records] == [
            EffectType.ACCOUNT_HOME_DOMAIN_UPDATED,
            EffectType.ACCOUNT_THRESHOLDS_UPDATED,
            EffectType.ACCOUNT_FLAGS_UPDATED,
            EffectType.SIGNER_UPDATED,
            EffectType.SIGNER_CREATED,
        ]
        assert all(record.account == ALICE for record in records)

        assert records[0].details == {"home_domain": "example.com"}
        assert records[1].details == {"low_threshold": 1, "high_threshold": 3}
        assert records[2].details == {"auth_required_flag": True, "auth_revocable_flag": False}
        assert records[3].details == {"public_key": ALICE, "weight": 2}
        assert records[4].details == {"public_key": CAROL, "weight": 1}

    def test_zero_weights_remove_signers(self) -> None:
        records = derive(set_options(master_weight=0, signer=Signer(pub_key=CAROL, weight=0)))

        assert [record.type for record in records] == [
            EffectType.SIGNER_REMOVED,
            EffectType.SIGNER_REMOVED,
        ]

    def test_empty_home_domain_is_present(self) -> None:
        """빈 문자열도 명시된 값"""
        records = derive(set_options(home_domain=""))

        assert [record.type for record in records] == [EffectType.ACCOUNT_HOME_DOMAIN_UPDATED]

    def test_no_fields_no_effects(self) -> None:
        assert derive(set_options(inflation_dest=BOB)) == []


class TestChangeTrust:
    """change_trust 이펙트"""

    def test_created(self) -> None:
        usd = credit("USD", ISSUER)
        meta = trustline_meta(ALICE, usd, 100 * ONE, LedgerEntryChangeType.CREATED)

        records = derive(change_trust(usd, 100 * ONE), meta=meta)

        assert kinds(records) == [(EffectType.TRUSTLINE_CREATED, ALICE)]
        assert records[0].details == {
            "asset_type": "credit_alphanum4",
            "asset_code": "USD",
            "asset_issuer": ISSUER,
            "limit": "100.0000000",
        }

    def test_updated(self) -> None:
        usd = credit("USD", ISSUER)
        meta = trustline_meta(ALICE, usd, 50 * ONE, LedgerEntryChangeType.UPDATED)

        records = derive(change_trust(usd, 50 * ONE), meta=meta)

        assert records[0].type == EffectType.TRUSTLINE_UPDATED

    def test_updated_without_meta(self) -> None:
        records = derive(change_trust(credit("USD", ISSUER), 50 * ONE), meta=None)

        assert records[0].type == EffectType.TRUSTLINE_UPDATED

    def test_removed_when_limit_zero(self) -> None:
        usd = credit("USD", ISSUER)
        meta = trustline_meta(ALICE, usd, 0, LedgerEntryChangeType.CREATED)

        records = derive(change_trust(usd, 0), meta=meta)

        assert records[0].type == EffectType.TRUSTLINE_REMOVED
        assert records[0].details["limit"] == "0.0000000"


class TestAllowTrust:
    """allow_trust 이펙트"""

    @pytest.mark.parametrize(
        "authorize, expected",
        [
            (True, EffectType.TRUSTLINE_AUTHORIZED),
            (False, EffectType.TRUSTLINE_DEAUTHORIZED),
        ],
    )
    def test_authorize_flag(self, authorize: bool, expected: EffectType) -> None:
        records = derive(allow_trust(BOB, "USD", authorize=authorize), source=ISSUER)

        assert kinds(records) == [(expected, ISSUER)]
        assert records[0].details == {
            "trustor": BOB,
            "asset_type": "credit_alphanum4",
            "asset_code": "USD",
        }


class TestAccountMerge:
    """account_merge 이펙트"""

    def test_debited_credited_removed(self) -> None:
        records = derive(account_merge(BOB, 42 * ONE))

        assert kinds(records) == [
            (EffectType.ACCOUNT_DEBITED, ALICE),
            (EffectType.ACCOUNT_CREDITED, BOB),
            (EffectType.ACCOUNT_REMOVED, ALICE),
        ]
        assert records[0].details == {"amount": "42.0000000", "asset_type": "native"}
        assert records[1].details == records[0].details
        assert records[2].details == {}

    def test_missing_balance_rejected(self) -> None:
        with pytest.raises(OperationResultError):
            derive(account_merge(BOB, None))


class TestInflation:
    """inflation 이펙트"""

    def test_credit_per_payout(self) -> None:
        records = derive(inflation([(BOB, 3 * ONE), (CAROL, ONE)]))

        assert kinds(records) == [
            (EffectType.ACCOUNT_CREDITED, BOB),
            (EffectType.ACCOUNT_CREDITED, CAROL),
        ]
        assert records[0].details == {"amount": "3.0000000", "asset_type": "native"}

    def test_no_payouts(self) -> None:
        assert derive(inflation([])) == []


class TestUnknownType:
    """핸들러 없는 유형은 이펙트 0개"""

    def test_skipped_with_info_log(self, caplog: pytest.LogCaptureFixture) -> None:
        deriver = EffectDeriver()
        deriver._handlers.pop(OperationType.INFLATION)

        with caplog.at_level(logging.INFO, logger="core.history.effect_deriver"):
            records = derive(inflation([(BOB, ONE)]), deriver=deriver)

        assert records == []
        assert "skipping effects import" in caplog.text
