#!/usr/bin/env python3
"""
Member Portal command line.

Runs the API server, or performs the gateway actions directly against the
configured store for troubleshooting.
"""

import argparse
import json
import logging
import sys
from datetime import datetime

from src.config import load_config
from src.auth import AuthError
from src.services import create_services, ServiceContext
from src.services.gateway_service import ACTION_LOGIN, ACTION_LIST, ACTION_DETAIL


def print_payload(payload: dict) -> int:
    """Print a gateway payload and return the process exit code."""
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if payload.get("success") else 1


def cmd_serve(args, config) -> int:
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=args.host or config.api.host,
        port=args.port or config.api.port,
        reload=args.reload
    )
    return 0


def cmd_login(args, gateway) -> int:
    return print_payload(gateway.handle(ACTION_LOGIN, {"phone": args.phone, "birthday": args.birthday}))


def cmd_list(args, gateway) -> int:
    return print_payload(gateway.handle(ACTION_LIST, {"token": args.token}))


def cmd_detail(args, gateway) -> int:
    return print_payload(gateway.handle(ACTION_DETAIL, {"token": args.token, "phone": args.phone}))


def cmd_decode_token(args, context: ServiceContext) -> int:
    """Show what a token decodes to, without touching the store."""
    try:
        payload = context.tokens.decode(args.token)
    except AuthError as e:
        print(f"❌ {e.code}: {e.message}")
        return 1

    issued = datetime.fromtimestamp(payload.issued_at_ms / 1000)
    age_days = (context.tokens.now_ms() - payload.issued_at_ms) / 86_400_000
    print(f"✓ Identity: {payload.identity}")
    print(f"  Issued:   {issued:%Y-%m-%d %H:%M:%S} ({age_days:.1f} days ago)")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Member Portal - member login and directory backed by spreadsheet tables"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", help="Bind address (default: API_HOST)")
    serve.add_argument("--port", type=int, help="Bind port (default: API_PORT)")
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes")

    login = subparsers.add_parser("login", help="Log in and print the token")
    login.add_argument("phone", help="Mobile phone number")
    login.add_argument("birthday", help="Birthday (password)")

    list_cmd = subparsers.add_parser("list", help="List members")
    list_cmd.add_argument("token", help="Token from login")

    detail = subparsers.add_parser("detail", help="Show one member")
    detail.add_argument("token", help="Token from login")
    detail.add_argument("phone", help="Mobile phone number of the member")

    decode = subparsers.add_parser("decode-token", help="Decode and validate a token")
    decode.add_argument("token", help="Token to inspect")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    config = load_config()

    if args.command == "serve":
        sys.exit(cmd_serve(args, config))

    context, _auth, _members, gateway = create_services(ServiceContext.create(config=config))

    if args.command == "decode-token":
        sys.exit(cmd_decode_token(args, context))

    commands = {
        "login": cmd_login,
        "list": cmd_list,
        "detail": cmd_detail,
    }
    sys.exit(commands[args.command](args, gateway))


if __name__ == "__main__":
    main()
