"""
원장 임포터

소스 저장소의 원장을 히스토리 레코드로 변환하는 오케스트레이터와 CLI.
"""

from importer.ledger_importer import LedgerImporter

__all__ = [
    "LedgerImporter",
]
