"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from typing import Protocol, runtime_checkable

from core.domain.ledger import SourceLedgerHeader, SourceTransaction


@runtime_checkable
class ICoreLedgerSource(Protocol):
    """소스 원장 저장소 인터페이스

    읽기 전용. 임포터는 이 Protocol로만 소스 데이터에 접근함.
    """

    async def get_ledger_header(self, sequence: int) -> SourceLedgerHeader | None:
        """원장 헤더 조회

        Args:
            sequence: 원장 시퀀스

        Returns:
            원장 헤더 또는 None (아직 생성되지 않음)
        """
        ...

    async def get_transactions(self, sequence: int) -> list[SourceTransaction]:
        """원장의 트랜잭션 목록 조회

        Returns:
            txindex 오름차순 트랜잭션 목록 (실패 트랜잭션 포함)
        """
        ...
