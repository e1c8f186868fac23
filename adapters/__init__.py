"""
어댑터 레이어

외부 저장소(stellar-core DB, 히스토리 DB)와의 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.interfaces import ICoreLedgerSource

__all__ = [
    # Interfaces
    "ICoreLedgerSource",
]
