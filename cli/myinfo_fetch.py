#!/usr/bin/env python3
"""
myinfo-fetch - Complete a MyInfo login or decode a MyInfo response

Configuration is read from MYINFO_* environment variables (see README).

Usage:
    myinfo-fetch --code 78e0ab02f59464dfaa6b2ec052a66d5b499906a6 --state s1
    myinfo-fetch --envelope response.jwe
    myinfo-fetch --token access_token.jwt --raw
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Exit codes
EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_INVALID_ARGS = 2
EXIT_FILE_ERROR = 3
EXIT_INVALID_KEY = 4
EXIT_DECRYPTION_FAILED = 5
EXIT_SIGNATURE_FAILED = 6
EXIT_NETWORK_ERROR = 8


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="myinfo-fetch",
        description="Complete a MyInfo login or decode a MyInfo response",
    )
    parser.add_argument(
        "--variant",
        choices=["business", "personal"],
        default="business",
        help="MyInfo variant (default: business)",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-c",
        "--code",
        help="Authorization code received on the redirect endpoint",
    )
    source.add_argument(
        "-e",
        "--envelope",
        help='File with an encrypted response (JWE), "-" for stdin',
    )
    source.add_argument(
        "-t",
        "--token",
        help='File with a signed token (JWS) such as an access token, "-" for stdin',
    )
    parser.add_argument(
        "-s",
        "--state",
        help="Relay state used when the login started",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Output only the claims, no metadata",
    )
    parser.add_argument(
        "--ignore-nbf",
        action="store_true",
        dest="ignore_nbf",
        help="Do not enforce the nbf claim (tolerates clock skew)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log requests and verification failures to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )
    return parser


def read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read().strip()
    return Path(path).read_text().strip()


def print_result(args: argparse.Namespace, mode: str, claims: Dict[str, Any]) -> None:
    if args.raw:
        print(json.dumps(claims, indent=2))
        return
    output: Dict[str, Any] = {
        "success": True,
        "variant": args.variant,
        "mode": mode,
        "claims": claims,
    }
    print(json.dumps(output, indent=2))


async def main_async(args: argparse.Namespace) -> int:
    # Import here to avoid import errors when CLI module is loaded
    try:
        import myinfo_client
    except ImportError:
        # Handle direct script execution
        sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
        import myinfo_client

    from myinfo_client import (
        MyInfoConfig,
        MyInfoConfigurationError,
        MyInfoDecryptionError,
        MyInfoError,
        MyInfoNetworkError,
        MyInfoResponseFormatError,
        MyInfoVerificationError,
        create_client,
    )

    logger = None
    if args.verbose:
        myinfo_client.configure_logging("debug")
        logger = myinfo_client.get_logger("myinfo_client.cli")

    overrides = {"verify_not_before": False} if args.ignore_nbf else {}
    try:
        config = MyInfoConfig.from_env(**overrides)
        client = create_client(config, args.variant, logger=logger)
    except MyInfoConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_KEY if "key" in e.code.lower() else EXIT_INVALID_ARGS

    claims: Optional[Dict[str, Any]]
    try:
        if args.code:
            mode = "login"
            claims = await client.complete_login(args.code, args.state)
        else:
            source = args.envelope or args.token
            try:
                content = read_input(source)
            except OSError as e:
                print(f"Error: Cannot read input file: {e}", file=sys.stderr)
                return EXIT_FILE_ERROR
            if not content:
                print("Error: Input is empty", file=sys.stderr)
                return EXIT_INVALID_ARGS

            if args.envelope:
                mode = "envelope"
                claims = await client.decoder.decode(content)
            else:
                mode = "token"
                claims = await client.decoder.verify(content)
    except MyInfoDecryptionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DECRYPTION_FAILED
    except MyInfoVerificationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_SIGNATURE_FAILED
    except (MyInfoNetworkError, MyInfoResponseFormatError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_NETWORK_ERROR
    except MyInfoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_GENERAL_ERROR

    if claims is None:
        print("Error: Signature verification failed", file=sys.stderr)
        return EXIT_SIGNATURE_FAILED

    print_result(args, mode, claims)
    return EXIT_SUCCESS


def main() -> None:
    parser = create_parser()
    args = parser.parse_args()

    try:
        exit_code = asyncio.run(main_async(args))
        sys.exit(exit_code)
    except KeyboardInterrupt:
        sys.exit(EXIT_GENERAL_ERROR)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_GENERAL_ERROR)


if __name__ == "__main__":
    main()
