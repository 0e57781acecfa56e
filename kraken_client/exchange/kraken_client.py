"""크라켄 REST API 클라이언트."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, MutableMapping, Optional, Tuple, Union

import requests
from requests import Response, Session

from .. import __version__
from ..config import get_settings
from ..utils.converters import compact_params
from ..utils.exceptions import OrderValidationError
from .auth import KrakenAuth, NonceGenerator, serialize_params
from .results import HttpError, KrakenResult, Success, TransportError

JsonMapping = Mapping[str, Any]
MutableJsonMapping = MutableMapping[str, Any]
Timeout = Union[float, Tuple[float, float]]

DEFAULT_USER_AGENT = f"kraken-client/{__version__}"
HTTP_SUCCESS = 200
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"
ADD_ORDER_REQUIRED_ARGS: Tuple[str, ...] = ("pair", "type", "volume", "ordertype")
SUPPORTED_OPTIONS = frozenset({"base_uri", "version"})


class KrakenEndpoint(str, Enum):
    """크라켄 REST API 엔드포인트 이름."""

    # Public API
    TIME = "Time"
    ASSETS = "Assets"
    ASSET_PAIRS = "AssetPairs"
    TICKER = "Ticker"
    OHLC = "OHLC"
    DEPTH = "Depth"
    TRADES = "Trades"
    SPREAD = "Spread"

    # Private API
    ADD_ORDER = "AddOrder"
    CANCEL_ORDER = "CancelOrder"
    BALANCE = "Balance"
    TRADE_BALANCE = "TradeBalance"
    OPEN_ORDERS = "OpenOrders"
    CLOSED_ORDERS = "ClosedOrders"

    @property
    def is_private(self) -> bool:
        """인증이 필요한 엔드포인트인지 여부."""
        return self in _PRIVATE_ENDPOINTS


_PRIVATE_ENDPOINTS = frozenset(
    {
        KrakenEndpoint.ADD_ORDER,
        KrakenEndpoint.CANCEL_ORDER,
        KrakenEndpoint.BALANCE,
        KrakenEndpoint.TRADE_BALANCE,
        KrakenEndpoint.OPEN_ORDERS,
        KrakenEndpoint.CLOSED_ORDERS,
    }
)


@dataclass(frozen=True)
class ClientCredentials:
    """크라켄 API 인증 정보를 담는 데이터 구조."""

    api_key: Optional[str]
    api_secret: Optional[str]


def _endpoint_name(endpoint: Union[KrakenEndpoint, str]) -> str:
    if isinstance(endpoint, KrakenEndpoint):
        return endpoint.value
    return str(endpoint)


def _merge_params(params: Optional[JsonMapping], extra: JsonMapping) -> MutableJsonMapping:
    merged: MutableJsonMapping = dict(params or {})
    merged.update(extra)
    return merged


class KrakenClient:
    """크라켄 공개/비공개 REST API 호출을 담당하는 동기 클라이언트.

    모든 호출은 :class:`Success`, :class:`HttpError`, :class:`TransportError` 중 하나를
    반환한다. 네트워크 오류는 예외로 전파하지 않는다.

    예시::

        client = KrakenClient(api_key=KEY, api_secret=SECRET)
        result = client.ticker("XBTEUR")
        if result.ok and not result.errors:
            print(result.result)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        options: Optional[JsonMapping] = None,
        *,
        session: Optional[Session] = None,
        timeout: Optional[Timeout] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        nonce_generator: Optional[Callable[[], int]] = None,
    ) -> None:
        settings = get_settings()
        kraken_settings = settings.kraken
        self._logger = logging.getLogger(__name__)

        resolved_options = dict(options or {})
        unknown = sorted(set(resolved_options) - SUPPORTED_OPTIONS)
        if unknown:
            self._logger.warning("지원하지 않는 옵션을 무시합니다: %s", ", ".join(unknown))

        base_uri = resolved_options.get("base_uri") or kraken_settings.base_uri
        version = resolved_options.get("version")
        if version is None:
            version = kraken_settings.version
        api_version_path = f"/{version}"

        self._base_uri = base_uri.rstrip("/")
        self._api_public_url = f"{self._base_uri}{api_version_path}/public/"
        self._api_private_path = f"{api_version_path}/private/"
        self._api_private_url = f"{self._base_uri}{self._api_private_path}"

        self._timeout: Timeout = timeout if timeout is not None else kraken_settings.timeout
        self._session: Session = session or requests.Session()
        self._owns_session = session is None
        self._default_headers: dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": user_agent,
        }

        resolved_api_key = api_key or (kraken_settings.api_key.get_secret_value() if kraken_settings.api_key else None)
        resolved_api_secret = api_secret or (
            kraken_settings.api_secret.get_secret_value() if kraken_settings.api_secret else None
        )
        self._credentials = ClientCredentials(resolved_api_key, resolved_api_secret)
        self._auth: Optional[KrakenAuth] = None
        self._generate_nonce: Callable[[], int] = nonce_generator or NonceGenerator()

    @property
    def base_uri(self) -> str:
        return self._base_uri

    @property
    def api_public_url(self) -> str:
        """공개 API 기본 URL (예: ``https://api.kraken.com/0/public/``)."""
        return self._api_public_url

    @property
    def api_private_path(self) -> str:
        """서명에 사용하는 비공개 API 경로 (예: ``/0/private/``)."""
        return self._api_private_path

    @property
    def api_private_url(self) -> str:
        """비공개 API 기본 URL."""
        return self._api_private_url

    @property
    def timeout(self) -> Timeout:
        return self._timeout

    @property
    def session(self) -> Session:
        return self._session

    @property
    def credentials(self) -> ClientCredentials:
        return self._credentials

    def close(self) -> None:
        """세션을 종료한다."""

        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "KrakenClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # 내부 유틸리티
    # ------------------------------------------------------------------
    def _get_auth(self) -> KrakenAuth:
        # 자격 증명 경고는 첫 비공개 호출 시점에 한 번만 남긴다
        if self._auth is None:
            self._auth = KrakenAuth(
                self._credentials.api_key,
                self._credentials.api_secret,
                self._api_private_path,
            )
        return self._auth

    def _merge_headers(self, extra_headers: Optional[Mapping[str, str]] = None) -> dict[str, str]:
        merged = dict(self._default_headers)
        if extra_headers:
            merged.update(extra_headers)
        return merged

    def _dispatch(self, method: str, url: str, **kwargs: Any) -> KrakenResult:
        self._logger.debug("%s %s", method, url)
        try:
            response = self._session.request(method=method, url=url, timeout=self._timeout, **kwargs)
            return self._parse_response(response)
        except (requests.RequestException, ValueError) as exc:
            self._logger.warning("크라켄 API 호출 실패 (%s %s): %s", method, url, exc)
            return TransportError(f"Error {exc!r}")

    def _parse_response(self, response: Response) -> KrakenResult:
        if response.status_code == HTTP_SUCCESS:
            return Success(response.json())
        self._logger.debug("크라켄 API 비정상 응답: HTTP %s", response.status_code)
        return HttpError(response.status_code, getattr(response, "reason", "") or "")

    def _get_public(self, method: Union[KrakenEndpoint, str], params: Optional[JsonMapping] = None) -> KrakenResult:
        """공개 API 조회용 HTTP GET 요청."""
        url = f"{self._api_public_url}{_endpoint_name(method)}"
        query = compact_params(params or {})
        return self._dispatch(
            "GET",
            url,
            params=query or None,
            headers=self._merge_headers(),
        )

    def _post_private(self, method: Union[KrakenEndpoint, str], params: Optional[JsonMapping] = None) -> KrakenResult:
        """인증 정보가 필요한 비공개 API용 HTTP POST 요청."""
        name = _endpoint_name(method)
        url = f"{self._api_private_url}{name}"
        payload: MutableJsonMapping = dict(params or {})
        nonce = payload["nonce"] = self._generate_nonce()
        postdata = serialize_params(payload)

        headers = self._merge_headers({"Content-Type": FORM_CONTENT_TYPE})
        headers.update(self._get_auth().headers(name, nonce, postdata))
        return self._dispatch("POST", url, data=postdata, headers=headers)

    # ------------------------------------------------------------------
    # 범용 호출
    # ------------------------------------------------------------------
    def _warn_on_visibility(self, endpoint: Union[KrakenEndpoint, str], private: bool) -> None:
        try:
            known = KrakenEndpoint(_endpoint_name(endpoint))
        except ValueError:
            return
        if known.is_private != private:
            self._logger.warning(
                "%s 엔드포인트는 %s API이지만 %s 경로로 호출합니다.",
                known.value,
                "비공개" if known.is_private else "공개",
                "비공개" if private else "공개",
            )

    def query_public(self, endpoint: Union[KrakenEndpoint, str], params: Optional[JsonMapping] = None) -> KrakenResult:
        """이름으로 임의의 공개 엔드포인트를 호출한다."""
        self._warn_on_visibility(endpoint, private=False)
        return self._get_public(endpoint, params)

    def query_private(self, endpoint: Union[KrakenEndpoint, str], params: Optional[JsonMapping] = None) -> KrakenResult:
        """이름으로 임의의 비공개 엔드포인트를 서명하여 호출한다."""
        self._warn_on_visibility(endpoint, private=True)
        return self._post_private(endpoint, params)

    # ------------------------------------------------------------------
    # 공개 API
    # ------------------------------------------------------------------
    def server_time(self) -> KrakenResult:
        """서버 시각 조회.

        ``result`` 는 ``unixtime`` (유닉스 타임스탬프)과 ``rfc1123`` 형식 문자열을 담는다.
        """
        return self._get_public(KrakenEndpoint.TIME)

    def assets(self, assets: Optional[str] = None, aclass: Optional[str] = None) -> KrakenResult:
        """자산 정보 조회.

        Args:
            assets: 쉼표로 구분한 자산 목록 (예: ``"XBT,ETH"``). 없으면 전체.
            aclass: 자산 분류 (기본값 ``currency``).
        """
        return self._get_public(KrakenEndpoint.ASSETS, {"asset": assets, "aclass": aclass})

    def asset_pairs(self, pairs: Optional[str] = None, info: Optional[str] = None) -> KrakenResult:
        """거래 가능한 자산 쌍 조회.

        Args:
            pairs: 쉼표로 구분한 자산 쌍 목록. 없으면 전체.
            info: ``info``/``leverage``/``fees``/``margin`` 중 하나.
        """
        return self._get_public(KrakenEndpoint.ASSET_PAIRS, {"pair": pairs, "info": info})

    def ticker(self, pairs: Optional[str] = None) -> KrakenResult:
        return self._get_public(KrakenEndpoint.TICKER, {"pair": pairs})

    def ohlc(
        self,
        pair: Optional[str] = None,
        interval: Optional[int] = None,
        since: Optional[Union[int, str]] = None,
    ) -> KrakenResult:
        """OHLC(시가/고가/저가/종가) 데이터 조회. ``interval`` 은 분 단위."""
        return self._get_public(KrakenEndpoint.OHLC, {"pair": pair, "interval": interval, "since": since})

    def order_book(self, pair: Optional[str] = None, count: Optional[int] = None) -> KrakenResult:
        return self._get_public(KrakenEndpoint.DEPTH, {"pair": pair, "count": count})

    def trades(self, pair: str, since: Optional[Union[int, str]] = None) -> KrakenResult:
        return self._get_public(KrakenEndpoint.TRADES, {"pair": pair, "since": since})

    def spread(self, pair: Optional[str] = None, since: Optional[Union[int, str]] = None) -> KrakenResult:
        return self._get_public(KrakenEndpoint.SPREAD, {"pair": pair, "since": since})

    # ------------------------------------------------------------------
    # 비공개 API
    # ------------------------------------------------------------------
    def add_order(self, params: Optional[JsonMapping] = None, **kwargs: Any) -> KrakenResult:
        """신규 주문 (POST).

        필수: ``pair``, ``type`` (buy/sell), ``volume``, ``ordertype``
        (market, limit, stop-loss, take-profit, stop-loss-limit, take-profit-limit,
        trailing-stop, trailing-stop-limit, settle-position 등).
        선택: ``price``, ``price2``, ``leverage`` 등.

        필수 인자가 하나라도 빠지면 요청을 보내지 않고
        :class:`OrderValidationError` 를 발생시킨다.

        예시::

            client.add_order(pair="XBTEUR", type="buy", ordertype="market", volume=0.5)
            client.add_order(pair="XBTUSD", type="buy", ordertype="limit", volume=1.25, price=5000)
        """
        payload = _merge_params(params, kwargs)
        missing = [name for name in ADD_ORDER_REQUIRED_ARGS if name not in payload]
        if missing:
            raise OrderValidationError(missing)
        return self._post_private(KrakenEndpoint.ADD_ORDER, payload)

    def cancel_order(self, txid: str) -> KrakenResult:
        """거래 ID(txid)로 주문을 취소한다."""
        return self._post_private(KrakenEndpoint.CANCEL_ORDER, {"txid": txid})

    def balance(self) -> KrakenResult:
        return self._post_private(KrakenEndpoint.BALANCE)

    def trade_balance(self, params: Optional[JsonMapping] = None, **kwargs: Any) -> KrakenResult:
        """거래 잔고 조회. 선택 인자: ``asset`` (기준 자산, 기본값 ZUSD)."""
        return self._post_private(KrakenEndpoint.TRADE_BALANCE, _merge_params(params, kwargs))

    def open_orders(self, params: Optional[JsonMapping] = None, **kwargs: Any) -> KrakenResult:
        """미체결 주문 조회 (POST).

        선택 인자:
            trades: 체결 내역 포함 여부 (기본값 ``false``)
            userref: 지정한 사용자 참조 ID로 결과 제한

        예시::

            open_orders = client.open_orders().result["open"]
        """
        return self._post_private(KrakenEndpoint.OPEN_ORDERS, _merge_params(params, kwargs))

    def closed_orders(self, params: Optional[JsonMapping] = None, **kwargs: Any) -> KrakenResult:
        """체결/취소된 주문 조회 (POST).

        선택 인자:
            trades: 체결 내역 포함 여부 (기본값 ``false``)
            userref: 지정한 사용자 참조 ID로 결과 제한
            start: 시작 유닉스 타임스탬프 또는 주문 txid (미포함)
            end: 종료 유닉스 타임스탬프 또는 주문 txid (포함)
            ofs: 결과 오프셋
            closetime: ``open``, ``close``, ``both`` (기본값) 중 기준 시각

        txid로 지정한 시각이 유닉스 타임스탬프보다 정확하다.
        """
        return self._post_private(KrakenEndpoint.CLOSED_ORDERS, _merge_params(params, kwargs))


__all__ = [
    "ADD_ORDER_REQUIRED_ARGS",
    "ClientCredentials",
    "DEFAULT_USER_AGENT",
    "HTTP_SUCCESS",
    "KrakenClient",
    "KrakenEndpoint",
]
