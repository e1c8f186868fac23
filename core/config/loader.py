"""
설정 로더

importer.yaml 로드 및 임포터 설정 생성
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from core.constants import PROJECT_ROOT, Defaults, Paths, StellarConstants
from core.utils.strkey import is_valid_account_id


@dataclass(frozen=True)
class ImporterConfig:
    """임포터 설정 (importer.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    core_db_path: Path
    history_db_path: Path
    master_address: str
    log_level: str = Defaults.LOG_LEVEL
    reimport_batch_size: int = Defaults.REIMPORT_BATCH_SIZE


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def _resolve_path(value: str | None, default: Path) -> Path:
    """상대 경로는 프로젝트 루트 기준"""
    if not value:
        return default
    path = Path(value)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def load_config(path: Path | None = None) -> ImporterConfig:
    """importer.yaml 파일 로드

    Args:
        path: importer.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        ImporterConfig 인스턴스

    Raises:
        ConfigLoadError: 파일이 없거나 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.CONFIG_FILE

    if not path.exists():
        raise ConfigLoadError(f"importer.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"importer.yaml 파싱 실패: {e}") from e

    if data is None:
        raise ConfigLoadError("importer.yaml이 비어 있습니다")

    if not isinstance(data, dict):
        raise ConfigLoadError("importer.yaml 최상위는 매핑이어야 합니다")

    database = data.get("database") or {}
    network = data.get("network") or {}
    logging_config = data.get("logging") or {}
    reimport = data.get("reimport") or {}

    # 마스터 계정 주소 검증
    master_address = network.get("master_address", StellarConstants.PUBNET_MASTER_ADDRESS)
    if not is_valid_account_id(master_address):
        raise ConfigLoadError(
            f"importer.yaml의 network.master_address가 유효한 계정 주소가 아닙니다: {master_address}"
        )

    # 로그 레벨 검증
    log_level = str(logging_config.get("level", Defaults.LOG_LEVEL)).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigLoadError(f"유효하지 않은 로그 레벨입니다: '{log_level}'")

    batch_size = reimport.get("batch_size", Defaults.REIMPORT_BATCH_SIZE)
    if not isinstance(batch_size, int) or batch_size <= 0:
        raise ConfigLoadError(f"reimport.batch_size는 양의 정수여야 합니다: {batch_size}")

    return ImporterConfig(
        core_db_path=_resolve_path(database.get("core_path"), Paths.CORE_DB),
        history_db_path=_resolve_path(database.get("history_path"), Paths.HISTORY_DB),
        master_address=master_address,
        log_level=log_level,
        reimport_batch_size=batch_size,
    )
