"""크라켄 API 연동 클라이언트 패키지."""

from .auth import KrakenAuth, NonceGenerator, serialize_params
from .kraken_client import (
    ADD_ORDER_REQUIRED_ARGS,
    DEFAULT_USER_AGENT,
    ClientCredentials,
    KrakenClient,
    KrakenEndpoint,
)
from .results import HttpError, KrakenResult, Success, TransportError

__all__ = [
    "ADD_ORDER_REQUIRED_ARGS",
    "ClientCredentials",
    "DEFAULT_USER_AGENT",
    "HttpError",
    "KrakenAuth",
    "KrakenClient",
    "KrakenEndpoint",
    "KrakenResult",
    "NonceGenerator",
    "Success",
    "TransportError",
    "serialize_params",
]
