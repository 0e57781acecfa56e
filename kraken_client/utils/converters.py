"""요청 파라미터 변환 관련 헬퍼 함수."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping


def format_param_value(value: Any) -> str:
    """요청 본문에 들어갈 파라미터 값을 문자열로 만든다.

    불리언은 소문자(``true``/``false``), ``None`` 은 빈 문자열,
    Decimal 은 지수 표기 없이 변환한다. 값에 대한 URL 인코딩은 하지 않는다.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def compact_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """값이 ``None`` 인 항목을 제외한 사본을 반환한다."""
    return {key: value for key, value in params.items() if value is not None}


__all__ = [
    "compact_params",
    "format_param_value",
]
