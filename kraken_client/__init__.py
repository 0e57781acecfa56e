"""크라켄 거래소 REST API 클라이언트."""

__version__ = "0.1.0"

from .exchange import (  # noqa: E402
    ClientCredentials,
    HttpError,
    KrakenClient,
    KrakenEndpoint,
    KrakenResult,
    Success,
    TransportError,
)
from .utils.exceptions import (  # noqa: E402
    AppError,
    ConfigurationError,
    DataValidationError,
    ExchangeError,
    OrderValidationError,
)

__all__ = [
    "AppError",
    "ClientCredentials",
    "ConfigurationError",
    "DataValidationError",
    "ExchangeError",
    "HttpError",
    "KrakenClient",
    "KrakenEndpoint",
    "KrakenResult",
    "OrderValidationError",
    "Success",
    "TransportError",
    "__version__",
]
