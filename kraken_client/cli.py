"""크라켄 API 단건 호출용 명령행 도구."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from .exchange import KrakenClient, Success
from .utils.exceptions import ConfigurationError
from .utils.logger import configure_logging

logger = logging.getLogger(__name__)


def _parse_param(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"key=value 형식이어야 합니다: {raw}")
    return key, value


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kraken-client",
        description="크라켄 REST API 엔드포인트를 호출하고 응답을 JSON으로 출력",
    )
    parser.add_argument("visibility", choices=("public", "private"), help="공개/비공개 API 구분")
    parser.add_argument("endpoint", help="엔드포인트 이름 (예: Time, Ticker, Balance)")
    parser.add_argument(
        "params",
        nargs="*",
        type=_parse_param,
        metavar="key=value",
        help="요청 파라미터",
    )
    parser.add_argument("--base-uri", default=None, help="API 기본 URL (기본값: 설정값)")
    parser.add_argument("--api-version", type=int, default=None, help="API 버전 경로(기본값: 0)")
    return parser.parse_args(argv)


def run(args: argparse.Namespace, client: Optional[KrakenClient] = None) -> int:
    """인자에 맞는 요청을 보내고 종료 코드를 반환한다."""
    if client is None:
        options = {"base_uri": args.base_uri, "version": args.api_version}
        client = KrakenClient(options={key: value for key, value in options.items() if value is not None})

    params = dict(args.params)
    with client:
        if args.visibility == "private":
            if not client.credentials.api_key or not client.credentials.api_secret:
                raise ConfigurationError("KRAKEN_API_KEY / KRAKEN_API_SECRET 환경변수를 설정해야 합니다.")
            result = client.query_private(args.endpoint, params)
        else:
            result = client.query_public(args.endpoint, params)

    if isinstance(result, Success):
        print(json.dumps(result.data, indent=2, ensure_ascii=False))
        return 0 if not result.errors else 1
    print(str(result), file=sys.stderr)
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging()
    try:
        return run(args)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
