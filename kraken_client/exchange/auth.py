"""크라켄 비공개 API 요청 서명 및 nonce 생성."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
import secrets
import threading
import time
from typing import Any, Callable, Mapping, Optional, Union

from ..utils.converters import format_param_value

# 상위 비트는 1/10000초 단위 시각, 하위 16비트는 난수
NONCE_TICKS_PER_SECOND = 10_000
NONCE_RANDOM_BITS = 16
NONCE_RANDOM_MASK = (1 << NONCE_RANDOM_BITS) - 1
NONCE_MAX = (1 << 64) - 1

Nonce = Union[int, str]

_logger = logging.getLogger(__name__)


class NonceGenerator:
    """항상 증가하는 64비트 부호 없는 nonce를 만든다.

    시각과 난수로 만든 후보 값이 직전 값보다 크지 않으면 직전 값 + 1을 사용하므로
    같은 인스턴스에서 발급된 nonce는 스레드가 달라도 엄격하게 증가한다.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        random_bits: Callable[[int], int] = secrets.randbits,
    ) -> None:
        self._clock = clock
        self._random_bits = random_bits
        self._lock = threading.Lock()
        self._last = 0

    @property
    def last(self) -> int:
        """마지막으로 발급한 nonce (발급 전에는 0)."""
        return self._last

    def _candidate(self) -> int:
        higher = int(self._clock() * NONCE_TICKS_PER_SECOND) << NONCE_RANDOM_BITS
        lower = self._random_bits(NONCE_RANDOM_BITS) & NONCE_RANDOM_MASK
        return (higher | lower) & NONCE_MAX

    def __call__(self) -> int:
        candidate = self._candidate()
        with self._lock:
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate


def serialize_params(params: Mapping[str, Any]) -> str:
    """파라미터를 입력 순서대로 ``key=value`` 형태로 ``&`` 연결한다.

    값은 인코딩하지 않고 그대로 이어 붙인다. 서명 대상과 전송 본문이 같아야 한다.
    """
    return "&".join(f"{key}={format_param_value(value)}" for key, value in params.items())


def decode_secret(api_secret: Optional[str]) -> bytes:
    """base64 시크릿을 HMAC 키 바이트로 변환한다.

    시크릿이 없거나 디코딩할 수 없으면 빈 키를 반환한다.
    이 경우 서명은 만들어지지만 거래소에서 거부된다.
    """
    if not api_secret:
        return b""
    # 패딩이 빠진 시크릿도 받아들인다
    padded = api_secret.strip() + "=" * (-len(api_secret.strip()) % 4)
    try:
        return base64.b64decode(padded)
    except (binascii.Error, ValueError):
        _logger.warning("API 시크릿을 base64로 디코딩할 수 없어 빈 키로 서명합니다.")
        return b""


def build_signature_base(private_path: str, method: str, nonce: Nonce, postdata: str) -> bytes:
    """서명 대상 바이트열: ``private_path + method + SHA256(nonce + postdata)``."""
    digest = hashlib.sha256(f"{nonce}{postdata}".encode("utf-8")).digest()
    return f"{private_path}{method}".encode("utf-8") + digest


def sign_message(secret_key: bytes, message: bytes) -> str:
    """HMAC-SHA512 서명을 줄바꿈 없는 base64 문자열로 반환한다."""
    mac = hmac.new(secret_key, message, hashlib.sha512).digest()
    return base64.b64encode(mac).decode("ascii")


class KrakenAuth:
    """비공개 요청에 붙일 ``API-Key`` / ``API-Sign`` 헤더를 만든다."""

    def __init__(self, api_key: Optional[str], api_secret: Optional[str], private_path: str) -> None:
        if not api_key or not api_secret:
            _logger.warning("API 키/시크릿이 설정되지 않아 비공개 요청 서명이 유효하지 않습니다.")
        self._api_key = api_key or ""
        self._secret_key = decode_secret(api_secret)
        self._private_path = private_path

    @property
    def private_path(self) -> str:
        return self._private_path

    def sign(self, method: str, nonce: Nonce, postdata: str) -> str:
        message = build_signature_base(self._private_path, method, nonce, postdata)
        return sign_message(self._secret_key, message)

    def headers(self, method: str, nonce: Nonce, postdata: str) -> dict[str, str]:
        return {
            "API-Key": self._api_key,
            "API-Sign": self.sign(method, nonce, postdata),
        }


__all__ = [
    "KrakenAuth",
    "NONCE_MAX",
    "NONCE_RANDOM_BITS",
    "NONCE_TICKS_PER_SECOND",
    "NonceGenerator",
    "build_signature_base",
    "decode_secret",
    "serialize_params",
    "sign_message",
]
