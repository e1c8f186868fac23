"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


# 임포터 포맷 버전
#
# 중요: 임포터의 동작(details/effects 형식 등)을 바꾸면 반드시 올릴 것.
# 이전 버전으로 임포트된 원장은 reimport-stale 명령으로 재구축 대상이 됨.
IMPORTER_VERSION: int = 5


class StellarConstants:
    """Stellar 프로토콜 고정값"""

    # 1 lumen = 10^7 stroops (7자리 고정소수점)
    ONE: int = 10_000_000
    AMOUNT_DECIMALS: int = 7

    # 제네시스 원장의 이전 해시
    EMPTY_HASH: str = "0" * 64

    # create_account 시 새 계정 마스터 키의 기본 가중치
    DEFAULT_SIGNER_WEIGHT: int = 1

    # 마스터(루트) 계정에 예약된 history_accounts.id
    MASTER_ACCOUNT_ID: int = 1

    # 공개 네트워크 루트 계정
    PUBNET_MASTER_ADDRESS: str = "GAAZI4TCR3TY5OJHCTJC2A4QSY6CJWJH5IAJTGKIN2ER7LBNVKOCCWN7"


class Defaults:
    """기본값 상수"""

    PROCESS_NAME: str = "importer"
    LOG_LEVEL: str = "INFO"

    # reimport-stale 한 번에 처리할 최대 원장 수
    REIMPORT_BATCH_SIZE: int = 100


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    CONFIG_FILE: Path = CONFIG_DIR / "importer.yaml"

    # DB 파일
    CORE_DB: Path = DATA_DIR / "stellar_core.db"
    HISTORY_DB: Path = DATA_DIR / "history.db"
