"""
Upload client.
Posts stdin to a docdrop server and prints the document name.
"""

import argparse
import sys

import httpx

from docdrop.utils.durations import format_duration, parse_duration

DEFAULT_LIFETIME = 7 * 24 * 3600.0
DEFAULT_NAME_LENGTH = 16
DEFAULT_NAME_CHARSET = "abcdefghijklmnopqrstuvwxyz0123456789"


def upload(
    url: str,
    data: bytes,
    lifetime: float = DEFAULT_LIFETIME,
    charset: str = DEFAULT_NAME_CHARSET,
    length: int = DEFAULT_NAME_LENGTH,
    client: httpx.Client | None = None,
) -> str:
    """
    Upload data and return the name the server assigned.

    Raises:
        httpx.HTTPStatusError: if the server rejects the upload
        httpx.HTTPError: on connection failures
    """
    headers = {
        "Doc-Lifetime": format_duration(lifetime),
        "Doc-Name-Charset": charset,
        "Doc-Name-Length": str(length),
    }
    if client is None:
        with httpx.Client(timeout=30) as c:
            response = c.post(url, content=data, headers=headers)
    else:
        response = client.post(url, content=data, headers=headers)
    response.raise_for_status()
    return response.text


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="pb", description="Upload stdin as an ephemeral document")
    parser.add_argument("-t", dest="lifetime", type=parse_duration, default=DEFAULT_LIFETIME,
                        help='document lifetime (default "168h")')
    parser.add_argument("-n", dest="length", type=int, default=DEFAULT_NAME_LENGTH,
                        help="document name length")
    parser.add_argument("-c", dest="charset", default=DEFAULT_NAME_CHARSET,
                        help="document name charset")
    parser.add_argument("url", help="server URL")
    args = parser.parse_args(argv)

    data = sys.stdin.buffer.read()
    try:
        name = upload(args.url, data, lifetime=args.lifetime, charset=args.charset, length=args.length)
    except httpx.HTTPStatusError as e:
        print(f"pb: {e.response.status_code} {e.response.text}", file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"pb: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
