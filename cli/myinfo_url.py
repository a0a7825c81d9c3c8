#!/usr/bin/env python3
"""
myinfo-url - Print the SingPass login and MyInfo consent URL

Configuration is read from MYINFO_* environment variables (see README).

Usage:
    myinfo-url --state s1 --attributes name,email --purpose "Account opening"
    myinfo-url --variant personal --state s1 --raw
"""

import argparse
import json
import sys

# Exit codes
EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_INVALID_ARGS = 2
EXIT_INVALID_KEY = 4


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="myinfo-url",
        description="Print the SingPass login and MyInfo consent URL",
    )
    parser.add_argument(
        "--variant",
        choices=["business", "personal"],
        default="business",
        help="MyInfo variant (default: business)",
    )
    parser.add_argument(
        "-s",
        "--state",
        default="",
        help="Relay state forwarded to the redirect endpoint",
    )
    parser.add_argument(
        "-a",
        "--attributes",
        help="Comma-separated attributes (default: MYINFO_ATTRIBUTES)",
    )
    parser.add_argument(
        "--purpose",
        help="Purpose shown on the consent page (default: MYINFO_PURPOSE)",
    )
    parser.add_argument(
        "--redirect",
        help="Alternative redirect endpoint (default: MYINFO_REDIRECT_ENDPOINT)",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Output only the URL",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )
    return parser


def main() -> None:
    args = create_parser().parse_args()

    try:
        from myinfo_client import MyInfoConfigurationError, MyInfoConfig, create_client
    except ImportError:
        # Handle direct script execution
        from pathlib import Path

        sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
        from myinfo_client import MyInfoConfigurationError, MyInfoConfig, create_client

    try:
        client = create_client(MyInfoConfig.from_env(), args.variant)
    except MyInfoConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_INVALID_KEY if "key" in e.code.lower() else EXIT_INVALID_ARGS)

    attributes = None
    if args.attributes is not None:
        attributes = [a.strip() for a in args.attributes.split(",") if a.strip()]
        if not attributes:
            print("Error: --attributes must name at least one attribute", file=sys.stderr)
            sys.exit(EXIT_INVALID_ARGS)

    try:
        url = client.create_redirect_url(
            purpose=args.purpose,
            requested_attributes=attributes,
            relay_state=args.state,
            redirect_endpoint=args.redirect,
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_GENERAL_ERROR)

    if args.raw:
        print(url)
    else:
        print(json.dumps({"variant": args.variant, "state": args.state, "url": url}, indent=2))

    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
