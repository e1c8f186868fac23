"""
Mock 소스 원장 저장소

테스트용 메모리 내 소스 저장소.
ICoreLedgerSource Protocol 준수.
"""

from dataclasses import dataclass, field

from core.domain.ledger import SourceLedgerHeader, SourceTransaction


@dataclass
class MockCoreState:
    """Mock 상태 (메모리 내 저장)"""

    # sequence -> 헤더
    headers: dict[int, SourceLedgerHeader] = field(default_factory=dict)

    # sequence -> 트랜잭션 목록
    transactions: dict[int, list[SourceTransaction]] = field(default_factory=dict)

    # 호출 기록
    header_requests: list[int] = field(default_factory=list)


class MockCoreLedgerStore:
    """Mock 소스 원장 저장소

    사용 예시:
    ```python
    source = MockCoreLedgerStore()
    source.add_ledger(make_header(1), [])
    source.add_ledger(make_header(2, prev=...), [make_payment_tx(...)])

    importer = LedgerImporter(source, history_store, master_address)
    ```
    """

    def __init__(self, state: MockCoreState | None = None):
        self.state = state or MockCoreState()

    def add_ledger(
        self,
        header: SourceLedgerHeader,
        transactions: list[SourceTransaction] | None = None,
    ) -> None:
        """원장 등록 (같은 시퀀스면 덮어씀)"""
        self.state.headers[header.sequence] = header
        self.state.transactions[header.sequence] = list(transactions or [])

    def remove_ledger(self, sequence: int) -> None:
        self.state.headers.pop(sequence, None)
        self.state.transactions.pop(sequence, None)

    async def get_ledger_header(self, sequence: int) -> SourceLedgerHeader | None:
        self.state.header_requests.append(sequence)
        return self.state.headers.get(sequence)

    async def get_transactions(self, sequence: int) -> list[SourceTransaction]:
        transactions = self.state.transactions.get(sequence, [])
        return sorted(transactions, key=lambda tx: tx.tx_index)
