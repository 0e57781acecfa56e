"""환경변수 기반 클라이언트 설정 로더."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr

DEFAULT_BASE_URI = "https://api.kraken.com"
DEFAULT_API_VERSION = 0
DEFAULT_TIMEOUT = 10.0

_logger = logging.getLogger(__name__)


def load_env_file() -> bool:
    """실행 디렉터리(또는 그 상위)에서 .env 파일을 찾아 환경변수로 읽는다.

    이미 설정된 환경변수는 덮어쓰지 않는다.
    """
    return load_dotenv(find_dotenv(usecwd=True))


load_env_file()


def _to_int(value: str | int | None, default: int, minimum: Optional[int] = None) -> int:
    """문자열 값을 정수로 변환한다. 변환 실패나 최솟값 미만이면 기본값을 쓴다."""
    if isinstance(value, int):
        result = value
    elif value is None:
        return default
    else:
        try:
            result = int(value)
        except (TypeError, ValueError):
            return default
    if minimum is not None and result < minimum:
        _logger.warning("허용 범위를 벗어난 설정값 %s 대신 기본값 %s 를 사용합니다.", result, default)
        return default
    return result


def _to_positive_float(value: str | float | None, default: float) -> float:
    """문자열 값을 양의 실수로 변환한다. 변환 실패나 0 이하이면 기본값을 쓴다."""
    if isinstance(value, (int, float)):
        result = float(value)
    elif value is None:
        return default
    else:
        try:
            result = float(value)
        except (TypeError, ValueError):
            return default
    if result <= 0:
        _logger.warning("허용 범위를 벗어난 설정값 %s 대신 기본값 %s 를 사용합니다.", result, default)
        return default
    return result


class LoggingSettings(BaseModel):
    """로깅 관련 설정."""

    model_config = ConfigDict(populate_by_name=True)

    level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))
    file_name: str = Field(default="kraken_client.log")
    rotation_when: str = Field(default="midnight")
    rotation_interval: int = Field(default=1, ge=1)
    backup_count: int = Field(default=7, ge=0)

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        """환경변수에서 로깅 설정을 생성한다."""
        log_dir_value = os.getenv("LOG_DIR", "logs")
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=Path(log_dir_value).expanduser(),
            file_name=os.getenv("LOG_FILE_NAME", "kraken_client.log"),
            rotation_when=os.getenv("LOG_ROTATION_WHEN", "midnight"),
            rotation_interval=_to_int(os.getenv("LOG_ROTATION_INTERVAL"), 1, minimum=1),
            backup_count=_to_int(os.getenv("LOG_BACKUP_COUNT"), 7, minimum=0),
        )

    @property
    def normalized_level(self) -> str:
        """대문자로 정규화된 로그 레벨."""
        return self.level.upper()

    def resolve_log_dir(self, root_dir: Path) -> Path:
        """루트 경로 기준 로그 디렉터리를 반환한다."""
        if self.log_dir.is_absolute():
            return self.log_dir
        return (root_dir / self.log_dir).resolve()

    def resolve_log_path(self, root_dir: Path) -> Path:
        """루트 경로 기준 로그 파일 전체 경로."""
        return self.resolve_log_dir(root_dir) / self.file_name


class KrakenSettings(BaseModel):
    """크라켄 API 관련 설정."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: Optional[SecretStr] = Field(default=None)
    api_secret: Optional[SecretStr] = Field(default=None)
    base_uri: str = Field(default=DEFAULT_BASE_URI)
    version: int = Field(default=DEFAULT_API_VERSION, ge=0)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    @classmethod
    def from_env(cls) -> "KrakenSettings":
        """환경변수에서 크라켄 API 설정을 생성한다."""
        api_key = os.getenv("KRAKEN_API_KEY")
        api_secret = os.getenv("KRAKEN_API_SECRET")
        return cls(
            api_key=SecretStr(api_key) if api_key else None,
            api_secret=SecretStr(api_secret) if api_secret else None,
            base_uri=os.getenv("KRAKEN_BASE_URI", DEFAULT_BASE_URI),
            version=_to_int(os.getenv("KRAKEN_API_VERSION"), DEFAULT_API_VERSION, minimum=0),
            timeout=_to_positive_float(os.getenv("KRAKEN_TIMEOUT"), DEFAULT_TIMEOUT),
        )


class AppSettings(BaseModel):
    """클라이언트 전반에 사용되는 설정 묶음."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # 상대 경로 설정(LOG_DIR 등)의 기준이 되는 실행 디렉터리
    root_dir: Path = Field(default_factory=Path.cwd)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    kraken: KrakenSettings = Field(default_factory=KrakenSettings)

    @classmethod
    def load(cls) -> "AppSettings":
        """환경변수 및 기본값을 반영하여 설정 인스턴스를 생성한다."""
        return cls(
            root_dir=Path.cwd(),
            logging=LoggingSettings.from_env(),
            kraken=KrakenSettings.from_env(),
        )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """전역 설정을 캐시하여 반환한다."""
    return AppSettings.load()


__all__ = [
    "AppSettings",
    "DEFAULT_API_VERSION",
    "DEFAULT_BASE_URI",
    "DEFAULT_TIMEOUT",
    "KrakenSettings",
    "LoggingSettings",
    "get_settings",
    "load_env_file",
]
