"""
stellar-core 어댑터

stellar-core SQLite DB 조회 및 XDR 디코딩 (stellar_sdk.xdr).
"""

from adapters.stellar_core.core_store import CoreLedgerStore
from adapters.stellar_core.decoder import XdrDecodeError
from adapters.stellar_core.schema import init_core_schema

__all__ = [
    "CoreLedgerStore",
    "init_core_schema",
    "XdrDecodeError",
]
