"""클라이언트 공통 예외 계층."""

from __future__ import annotations

from typing import Sequence


class AppError(Exception):
    """프로젝트 전반에서 사용하는 기본 예외 클래스."""


class ConfigurationError(AppError):
    """환경 설정이나 필수 값이 누락된 경우 발생."""


class DataValidationError(AppError):
    """데이터 검증 실패를 표현."""


class OrderValidationError(DataValidationError, ValueError):
    """주문 요청에 필수 인자가 빠진 경우 발생."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(missing)
        super().__init__("다음 필수 인자가 누락되었습니다: " + ", ".join(self.missing))


class ExchangeError(AppError):
    """거래소 API 호출 중 발생한 예외."""


__all__ = [
    "AppError",
    "ConfigurationError",
    "DataValidationError",
    "ExchangeError",
    "OrderValidationError",
]
