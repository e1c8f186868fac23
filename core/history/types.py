"""
히스토리 타입 정의

이펙트 유형 Enum. 값은 history_effects.type 컬럼에 저장되는 정수 코드이며
다운스트림 조회 API가 의존하므로 기존 값을 바꾸지 말 것.
"""

from enum import Enum


class EffectType(int, Enum):
    """이펙트 유형

    그룹별로 10 단위 대역 사용 (계정 0~, 서명자 10~, 신뢰선 20~, 거래 30~).
    """

    # 계정
    ACCOUNT_CREATED = 0
    ACCOUNT_REMOVED = 1
    ACCOUNT_CREDITED = 2
    ACCOUNT_DEBITED = 3
    ACCOUNT_THRESHOLDS_UPDATED = 4
    ACCOUNT_HOME_DOMAIN_UPDATED = 5
    ACCOUNT_FLAGS_UPDATED = 6

    # 서명자
    SIGNER_CREATED = 10
    SIGNER_REMOVED = 11
    SIGNER_UPDATED = 12

    # 신뢰선
    TRUSTLINE_CREATED = 20
    TRUSTLINE_REMOVED = 21
    TRUSTLINE_UPDATED = 22
    TRUSTLINE_AUTHORIZED = 23
    TRUSTLINE_DEAUTHORIZED = 24

    # 거래
    TRADE = 33

    @property
    def name_s(self) -> str:
        """snake_case 이름 (예: account_created)"""
        return self.name.lower()


# history_* 테이블 목록 (삭제 순서: 자식 → 부모)
HISTORY_TABLES: tuple[str, ...] = (
    "history_effects",
    "history_operation_participants",
    "history_operations",
    "history_transaction_participants",
    "history_transactions",
    "history_ledgers",
    "history_accounts",
)
