"""
원장 히스토리 (Ledger History)

stellar-core 원장을 조회 최적화된 history_* 레코드(원장, 트랜잭션, 계정,
오퍼레이션, 참여자, 이펙트)로 변환하는 도메인 로직과 저장소.

사용 예시:
```python
from core.history import EffectDeriver, EffectSink, HistoryStore, OperationDecoder

history = HistoryStore(db)
decoder = OperationDecoder()
deriver = EffectDeriver()

decoded = decoder.decode(operation, result, tx.source_account)
sink = EffectSink(operation_id=op_id)
deriver.derive(operation, decoded, result, tx.operation_meta(0), sink)
```
"""

from core.history.amount import format_amount, format_price
from core.history.details import AssetDetails, DecodedOperation
from core.history.effect_deriver import EffectDeriver, EffectRecord, EffectSink
from core.history.operation_decoder import OperationDecoder
from core.history.records import (
    HistoryAccount,
    ImportedEffect,
    ImportedLedger,
    ImportedOperation,
    ImportedTransaction,
)
from core.history.schema import init_history_schema
from core.history.store import HistoryStore
from core.history.types import HISTORY_TABLES, EffectType

__all__ = [
    # 핵심 클래스
    "HistoryStore",
    "OperationDecoder",
    "EffectDeriver",
    "EffectSink",
    "EffectRecord",
    "DecodedOperation",
    "AssetDetails",
    # 레코드
    "ImportedLedger",
    "ImportedTransaction",
    "ImportedOperation",
    "ImportedEffect",
    "HistoryAccount",
    # Enum / 상수
    "EffectType",
    "HISTORY_TABLES",
    # 함수
    "format_amount",
    "format_price",
    "init_history_schema",
]
