from __future__ import annotations

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from kraken_client.config import get_settings  # noqa: E402

_ENV_KEYS = (
    "KRAKEN_API_KEY",
    "KRAKEN_API_SECRET",
    "KRAKEN_BASE_URI",
    "KRAKEN_API_VERSION",
    "KRAKEN_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FILE_NAME",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """테스트마다 .env 값과 캐시된 설정의 영향을 제거한다."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def isolated_logging(monkeypatch: pytest.MonkeyPatch):
    """configure_logging 이 추가한 핸들러를 테스트가 끝나면 제거한다."""
    from kraken_client.utils import logger as logger_module

    monkeypatch.setattr(logger_module, "_LOG_CONFIGURED", False)
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, TimedRotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
