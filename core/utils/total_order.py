"""
Total Order ID 유틸리티

(원장 시퀀스, 트랜잭션 인덱스, 오퍼레이션 인덱스) → 단일 64비트 정수.
체인 전체에서 시간순 정렬이 보장되는 대리 키로 사용.

비트 배치: ledger(32) | tx(20) | op(12)
"""

LEDGER_BITS: int = 32
TRANSACTION_BITS: int = 20
OPERATION_BITS: int = 12

# SQLite INTEGER는 부호 있는 64비트이므로 최상위 비트는 사용하지 않음
LEDGER_MAX: int = (1 << (LEDGER_BITS - 1)) - 1
TRANSACTION_MAX: int = (1 << TRANSACTION_BITS) - 1
OPERATION_MAX: int = (1 << OPERATION_BITS) - 1


def make_total_order_id(ledger_sequence: int, tx_index: int, op_index: int) -> int:
    """결정적 total order id 생성

    Args:
        ledger_sequence: 원장 시퀀스
        tx_index: 원장 내 트랜잭션 인덱스 (1부터, 트랜잭션 자체는 0 가능)
        op_index: 트랜잭션 내 오퍼레이션 인덱스 (1부터, 트랜잭션 행은 0)

    Returns:
        ledger → tx → op 순으로 단조 증가하는 정수

    Raises:
        ValueError: 구성요소가 할당된 비트 범위를 벗어난 경우

    Example:
        >>> make_total_order_id(1, 0, 0)
        4294967296
        >>> make_total_order_id(2, 1, 1)
        8589938689
    """
    if not 0 <= ledger_sequence <= LEDGER_MAX:
        raise ValueError(f"ledger_sequence 범위 초과: {ledger_sequence}")
    if not 0 <= tx_index <= TRANSACTION_MAX:
        raise ValueError(f"tx_index 범위 초과: {tx_index}")
    if not 0 <= op_index <= OPERATION_MAX:
        raise ValueError(f"op_index 범위 초과: {op_index}")

    return (
        (ledger_sequence << (TRANSACTION_BITS + OPERATION_BITS))
        | (tx_index << OPERATION_BITS)
        | op_index
    )


def parse_total_order_id(total_order_id: int) -> tuple[int, int, int]:
    """total order id → (ledger_sequence, tx_index, op_index)

    Example:
        >>> parse_total_order_id(8589938689)
        (2, 1, 1)
    """
    if total_order_id < 0:
        raise ValueError(f"total_order_id는 음수일 수 없습니다: {total_order_id}")

    ledger_sequence = total_order_id >> (TRANSACTION_BITS + OPERATION_BITS)
    tx_index = (total_order_id >> OPERATION_BITS) & TRANSACTION_MAX
    op_index = total_order_id & OPERATION_MAX
    return ledger_sequence, tx_index, op_index
