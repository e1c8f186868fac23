"""
pytest 공통 fixture 정의

임시 디렉토리, 테스트용 importer.yaml, 히스토리 DB fixture
"""

import logging
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.history.schema import init_history_schema
from core.history.store import HistoryStore


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """테스트용 importer.yaml 파일 생성"""
    config_content = f"""# 테스트용 importer.yaml
database:
  core_path: {temp_dir / "stellar_core.db"}
  history_path: {temp_dir / "history.db"}

network:
  master_address: GAAZI4TCR3TY5OJHCTJC2A4QSY6CJWJH5IAJTGKIN2ER7LBNVKOCCWN7

logging:
  level: debug

reimport:
  batch_size: 25
"""
    config_path = temp_dir / "importer.yaml"
    config_path.write_text(config_content, encoding="utf-8")
    return config_path


@pytest.fixture
def temp_config_file_invalid_master(temp_dir: Path) -> Path:
    """잘못된 마스터 주소의 importer.yaml 파일 생성"""
    config_content = """network:
  master_address: GNOTAVALIDADDRESS
"""
    config_path = temp_dir / "importer_invalid.yaml"
    config_path.write_text(config_content, encoding="utf-8")
    return config_path


@pytest.fixture
def restore_logging():
    """setup_logging이 바꾼 루트 로거 복원"""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest_asyncio.fixture
async def history_db():
    """스키마가 생성된 임시 히스토리 DB"""
    with tempfile.TemporaryDirectory() as tmpdir:
        adapter = SQLiteAdapter(Path(tmpdir) / "history.db")
        await adapter.connect()
        await init_history_schema(adapter)

        yield adapter

        await adapter.close()


@pytest.fixture
def history(history_db: SQLiteAdapter) -> HistoryStore:
    """HistoryStore 인스턴스"""
    return HistoryStore(history_db)
