"""
임포터 예외 정의

모든 치명적 오류는 원장 단위 트랜잭션 전체를 롤백시킴.
재시도 정책은 호출 측(스케줄러) 책임이며 여기서는 재시도하지 않음.
"""


class ImporterError(Exception):
    """임포터 예외 기본 클래스"""

    pass


class LedgerNotFoundError(ImporterError):
    """소스 저장소에 원장이 없음

    아직 업스트림에서 생성되지 않은 원장. 나중에 재시도하면 됨.
    """

    def __init__(self, sequence: int):
        self.sequence = sequence
        super().__init__(f"Couldn't find ledger {sequence}")


class ChainDiscontinuityError(ImporterError):
    """이전 원장이 없거나 해시가 불일치

    먼저 누락 구간을 채워야 하므로 치명적.
    """

    def __init__(
        self,
        sequence: int,
        expected_hash: str | None,
        actual_hash: str | None,
    ):
        self.sequence = sequence
        self.expected_hash = expected_hash
        self.actual_hash = actual_hash
        if actual_hash is None:
            message = f"ledger {sequence - 1} has not been imported (required by {sequence})"
        else:
            message = (
                f"previous ledger hash mismatch for {sequence}: "
                f"header says {expected_hash}, imported {sequence - 1} is {actual_hash}"
            )
        super().__init__(message)


class ReferentialIntegrityError(ImporterError):
    """참여자 주소를 history_accounts에서 찾을 수 없음

    디코더 또는 처리 순서 결함을 의미하므로 절대 무시하지 않음.
    """

    def __init__(self, missing_addresses: list[str], context: str = ""):
        self.missing_addresses = missing_addresses
        suffix = f" ({context})" if context else ""
        super().__init__(
            f"Could not find all participants{suffix}: {', '.join(missing_addresses)}"
        )


class UnsupportedAssetError(ImporterError):
    """자산 유형이 해당 오퍼레이션에서 허용되지 않음

    예: change_trust / allow_trust 에 native 자산.
    """

    pass


class OperationResultError(ImporterError):
    """오퍼레이션 결과에 필요한 성공 페이로드가 없음"""

    pass


class ImportConflictError(ImporterError):
    """동일 원장을 동시에 임포트하다 유일성 제약에 걸림

    상태는 변경되지 않았으므로 재시도 가능 (복구 가능한 충돌).
    """

    def __init__(self, sequence: int):
        self.sequence = sequence
        super().__init__(f"ledger {sequence} was imported concurrently by another worker")
