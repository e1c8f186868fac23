"""
금액 코덱

int64 stroops(10^-7) → 7자리 고정소수점 문자열.
반올림하지 않고 0 방향으로 절삭.

Example:
    >>> format_amount(12345678)
    '1.2345678'
    >>> format_amount(100000000)
    '10.0000000'
    >>> format_price(1, 3)
    '0.3333333'
"""

from decimal import Decimal

from core.constants import StellarConstants


def to_decimal(raw: int) -> Decimal:
    """stroops → Decimal (정확한 값, 지수 -7)"""
    return Decimal(raw).scaleb(-StellarConstants.AMOUNT_DECIMALS)


def format_amount(raw: int) -> str:
    """stroops → "<정수>.<7자리>" 문자열"""
    return f"{to_decimal(raw):.{StellarConstants.AMOUNT_DECIMALS}f}"


def format_price(n: int, d: int) -> str:
    """유리수 가격 n/d → 7자리 절삭 문자열

    Raises:
        ValueError: 분모가 0인 경우
    """
    if d == 0:
        raise ValueError(f"가격 분모가 0입니다: {n}/{d}")

    # 정수 나눗셈으로 소수 7자리까지 절삭
    scaled = abs(n) * StellarConstants.ONE // abs(d)
    if (n < 0) != (d < 0):
        scaled = -scaled
    return format_amount(scaled)
