"""
임포터 로깅 설정

콘솔(stdout) + logs/<process>/<process>.log 일별 롤링 파일.
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler

from core.constants import Paths

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_BACKUP_DAYS = 14

# 쿼리마다 로그를 남기는 로거
QUIET_LOGGERS = ("aiosqlite", "asyncio")


def setup_logging(process_name: str, console_level: int = logging.INFO) -> logging.Logger:
    """루트 로거에 콘솔/파일 핸들러 설치

    기존 핸들러는 제거됨 (같은 프로세스에서 여러 번 호출해도 중복 출력 없음).
    파일은 항상 INFO 이상 기록.
    """
    log_dir = Paths.LOGS_DIR / process_name
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{process_name}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    root.addHandler(console)

    file_handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        backupCount=LOG_BACKUP_DAYS,
        encoding="utf-8",
    )
    file_handler.suffix = "%Y-%m-%d"
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info(f"로깅 초기화: {process_name} -> {log_file}")
    return root
