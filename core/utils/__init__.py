"""
유틸리티 패키지

계정 주소(StrKey) 변환, total order id 생성 등 공통 유틸리티
"""

from core.utils.strkey import (
    decode_account_id,
    encode_account_id,
    is_valid_account_id,
)
from core.utils.total_order import (
    make_total_order_id,
    parse_total_order_id,
)

__all__ = [
    "decode_account_id",
    "encode_account_id",
    "is_valid_account_id",
    "make_total_order_id",
    "parse_total_order_id",
]
