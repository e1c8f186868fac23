"""
타입 정의 모듈

Stellar 프로토콜(XDR)에서 사용하는 판별자(discriminant) Enum 정의.
XDR 값과 1:1 대응하므로 int를 상속하고, 이름은 name_s로 노출.
"""

from enum import Enum


class OperationType(int, Enum):
    """오퍼레이션 유형 (XDR OperationType)"""

    CREATE_ACCOUNT = 0
    PAYMENT = 1
    PATH_PAYMENT = 2
    MANAGE_OFFER = 3
    CREATE_PASSIVE_OFFER = 4
    SET_OPTIONS = 5
    CHANGE_TRUST = 6
    ALLOW_TRUST = 7
    ACCOUNT_MERGE = 8
    INFLATION = 9

    @property
    def name_s(self) -> str:
        """snake_case 이름 (예: create_account)"""
        return self.name.lower()


class AssetType(int, Enum):
    """자산 유형"""

    NATIVE = 0
    CREDIT_ALPHANUM4 = 1
    CREDIT_ALPHANUM12 = 2

    @property
    def name_s(self) -> str:
        return self.name.lower()


class MemoType(int, Enum):
    """메모 유형"""

    NONE = 0
    TEXT = 1
    ID = 2
    HASH = 3
    RETURN = 4

    @property
    def name_s(self) -> str:
        return self.name.lower()


class AccountFlag(int, Enum):
    """계정 플래그 (비트마스크)"""

    AUTH_REQUIRED = 0x1
    AUTH_REVOCABLE = 0x2
    AUTH_IMMUTABLE = 0x4

    @property
    def name_s(self) -> str:
        """플래그 이름 (예: auth_required_flag)"""
        return f"{self.name.lower()}_flag"

    @classmethod
    def parse_mask(cls, mask: int | None) -> list["AccountFlag"]:
        """비트마스크 → 설정된 플래그 목록 (비트 오름차순)

        Example:
            >>> AccountFlag.parse_mask(3)
            [<AccountFlag.AUTH_REQUIRED: 1>, <AccountFlag.AUTH_REVOCABLE: 2>]
        """
        if not mask:
            return []
        return [flag for flag in cls if mask & flag.value]


class LedgerEntryType(int, Enum):
    """원장 엔트리 유형"""

    ACCOUNT = 0
    TRUSTLINE = 1
    OFFER = 2


class LedgerEntryChangeType(int, Enum):
    """원장 엔트리 변경 유형 (TransactionMeta)"""

    CREATED = 0
    UPDATED = 1
    REMOVED = 2
    STATE = 3


class TransactionResultCode(int, Enum):
    """트랜잭션 결과 코드

    txSUCCESS(0)만 임포트 대상.
    """

    TX_SUCCESS = 0
    TX_FAILED = -1
    TX_TOO_EARLY = -2
    TX_TOO_LATE = -3
    TX_MISSING_OPERATION = -4
    TX_BAD_SEQ = -5
    TX_BAD_AUTH = -6
    TX_INSUFFICIENT_BALANCE = -7
    TX_NO_ACCOUNT = -8
    TX_INSUFFICIENT_FEE = -9
    TX_BAD_AUTH_EXTRA = -10
    TX_INTERNAL_ERROR = -11


class OperationResultCode(int, Enum):
    """오퍼레이션 결과 코드 (외곽)"""

    OP_INNER = 0
    OP_BAD_AUTH = -1
    OP_NO_ACCOUNT = -2


class ManageOfferEffect(int, Enum):
    """ManageOffer 결과 시 오퍼 상태"""

    CREATED = 0
    UPDATED = 1
    DELETED = 2


# 오퍼레이션별 내부 결과 코드: 성공은 모두 0, 실패는 음수
INNER_RESULT_SUCCESS: int = 0

# PATH_PAYMENT_NO_ISSUER: 실패 결과지만 Asset 페이로드를 가짐
PATH_PAYMENT_NO_ISSUER: int = -9
