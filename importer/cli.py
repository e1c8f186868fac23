"""
임포터 CLI

실행 방법:
    python -m importer init-db
    python -m importer import 2
    python -m importer import 2 --rebuild
    python -m importer import-range 1 1000
    python -m importer reimport-stale --limit 50

종료 코드:
    0: 성공 (구간 임포트는 아직 생성되지 않은 원장에서 정상 중단)
    1: 임포트 실패
    2: 설정 오류
    3: import 대상 원장이 아직 생성되지 않음 (나중에 재시도)
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.stellar_core.core_store import CoreLedgerStore
from adapters.stellar_core.decoder import XdrDecodeError
from core.config.loader import ConfigLoadError, ImporterConfig, load_config
from core.constants import IMPORTER_VERSION, Defaults
from core.errors import ImporterError, LedgerNotFoundError
from core.history.schema import init_history_schema
from core.history.store import HistoryStore
from core.logging import setup_logging
from importer.ledger_importer import LedgerImporter

logger = logging.getLogger("importer")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_NOT_FOUND = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="importer",
        description="stellar-core 원장을 히스토리 DB로 임포트",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="importer.yaml 경로 (기본: config/importer.yaml)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="히스토리 DB 스키마 생성")

    import_parser = subparsers.add_parser("import", help="원장 1개 임포트")
    import_parser.add_argument("sequence", type=int, help="원장 시퀀스")
    import_parser.add_argument(
        "--rebuild",
        action="store_true",
        help="이미 임포트된 원장을 삭제 후 재구축",
    )

    range_parser = subparsers.add_parser("import-range", help="원장 구간 임포트 (첫 오류에서 중단)")
    range_parser.add_argument("start", type=int, help="시작 시퀀스 (포함)")
    range_parser.add_argument("end", type=int, help="끝 시퀀스 (포함)")
    range_parser.add_argument("--rebuild", action="store_true")

    stale_parser = subparsers.add_parser(
        "reimport-stale",
        help=f"importer_version < {IMPORTER_VERSION} 인 원장 재구축",
    )
    stale_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help=f"최대 재구축 수 (기본: 설정값, {Defaults.REIMPORT_BATCH_SIZE})",
    )

    return parser


async def _import_one(importer: LedgerImporter, sequence: int, rebuild: bool) -> int:
    """원장 1개 임포트

    아직 생성되지 않은 원장은 성공과 구분되는 EXIT_NOT_FOUND.
    """
    try:
        ledger = await importer.import_ledger(sequence, rebuild_allowed=rebuild)
    except LedgerNotFoundError as e:
        logger.warning(str(e))
        return EXIT_NOT_FOUND
    except (ImporterError, XdrDecodeError) as e:
        logger.error(f"Ledger {sequence} import failed: {e}")
        return EXIT_FAILED

    logger.info(f"Ledger {ledger.sequence}: {ledger.transaction_count} transaction(s)")
    return EXIT_OK


async def _import_range(
    importer: LedgerImporter,
    sequences: list[int],
    rebuild: bool,
) -> int:
    """순서대로 임포트, 첫 오류에서 중단"""
    imported = 0
    for sequence in sequences:
        try:
            await importer.import_ledger(sequence, rebuild_allowed=rebuild)
        except LedgerNotFoundError:
            logger.info(f"Ledger {sequence} not yet produced, stopping")
            break
        except (ImporterError, XdrDecodeError) as e:
            logger.error(f"Ledger {sequence} import failed: {e}")
            return EXIT_FAILED
        imported += 1

    logger.info(f"Processed {imported} ledger(s)")
    return EXIT_OK


async def run(args: argparse.Namespace, config: ImporterConfig) -> int:
    history_db = SQLiteAdapter(config.history_db_path)
    await history_db.connect()

    try:
        await init_history_schema(history_db)
        if args.command == "init-db":
            return EXIT_OK

        history = HistoryStore(history_db)

        core_db = SQLiteAdapter(config.core_db_path, readonly=True)
        await core_db.connect()
        try:
            importer = LedgerImporter(
                CoreLedgerStore(core_db),
                history,
                config.master_address,
            )

            if args.command == "import":
                return await _import_one(importer, args.sequence, args.rebuild)

            if args.command == "import-range":
                if args.end < args.start:
                    logger.error(f"잘못된 구간입니다: {args.start} > {args.end}")
                    return EXIT_FAILED
                return await _import_range(
                    importer, list(range(args.start, args.end + 1)), args.rebuild
                )

            # reimport-stale
            limit = args.limit or config.reimport_batch_size
            stale = await history.get_stale_ledger_sequences(IMPORTER_VERSION, limit)
            logger.info(f"Found {len(stale)} stale ledger(s)")
            return await _import_range(importer, stale, rebuild=True)
        finally:
            await core_db.close()
    finally:
        await history_db.close()


async def main(argv: list[str] | None = None) -> int:
    """CLI 진입점

    Returns:
        종료 코드
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigLoadError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"설정 로드 실패: {e}")
        return EXIT_CONFIG_ERROR

    setup_logging(Defaults.PROCESS_NAME, console_level=logging.getLevelName(config.log_level))

    return await run(args, config)
