"""
데이터베이스 어댑터
"""

from adapters.db.sqlite_adapter import SQLiteAdapter

__all__ = ["SQLiteAdapter"]
