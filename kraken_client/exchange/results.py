"""API 호출 결과 타입."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union

from ..utils.exceptions import ExchangeError


@dataclass(frozen=True)
class Success:
    """HTTP 200 응답을 JSON으로 파싱한 결과.

    거래소는 ``{"error": [...], "result": ...}`` 형태로 응답한다.
    ``error`` 가 비어 있지 않아도 여기서는 성공으로 취급하므로 호출자가 확인해야 한다.
    """

    data: Any
    ok: ClassVar[bool] = True

    @property
    def errors(self) -> list[str]:
        """응답 본문의 ``error`` 목록 (없으면 빈 목록)."""
        if not isinstance(self.data, dict):
            return []
        errors = self.data.get("error")
        if not errors:
            return []
        if isinstance(errors, (list, tuple)):
            return list(errors)
        return [errors]

    @property
    def result(self) -> Any:
        """응답 본문의 ``result`` 값."""
        if isinstance(self.data, dict):
            return self.data.get("result")
        return None

    def unwrap(self) -> Any:
        return self.data


@dataclass(frozen=True)
class HttpError:
    """200이 아닌 HTTP 상태 코드 응답. 본문은 파싱하지 않는다."""

    status_code: int
    reason: str = ""
    ok: ClassVar[bool] = False

    def __str__(self) -> str:
        return f"HTTP {self.status_code} {self.reason}".rstrip()

    def unwrap(self) -> Any:
        raise ExchangeError(f"크라켄 API 호출 실패: {self}")


@dataclass(frozen=True)
class TransportError:
    """네트워크/프로토콜 오류 또는 응답 디코딩 실패."""

    message: str
    ok: ClassVar[bool] = False

    def __str__(self) -> str:
        return self.message

    def unwrap(self) -> Any:
        raise ExchangeError(f"크라켄 API 호출 중 네트워크 오류가 발생했습니다: {self.message}")


KrakenResult = Union[Success, HttpError, TransportError]

__all__ = ["HttpError", "KrakenResult", "Success", "TransportError"]
