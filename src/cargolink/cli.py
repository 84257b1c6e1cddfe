"""CargoLink command line front end

Log in, inspect the current session and query the logistics API from a
terminal.
"""

import argparse
import getpass
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from .api import LogisticsGateway, APIError, AuthenticationError, SessionExpiredError
from .api.request_builder import RequestDescriptor
from .core import ConfigManager, ConfigurationError, ErrorHandler, LoggingManager


def _print_json(data: Any):
    print(json.dumps(data, indent=2, default=str))


def _session_expired(descriptor: RequestDescriptor):
    print(f"Session expired while calling {descriptor.path}; please run 'cargolink login' again",
          file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cargolink", description="CargoLink Logistics API client")
    parser.add_argument("--config-dir", help="Directory holding default_config.yaml")
    parser.add_argument("--env", choices=["development", "staging", "production"],
                        help="Deployment mode (overrides CARGOLINK_ENV)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    login_parser = subparsers.add_parser('login', help='Log in and store the session')
    login_parser.add_argument('username', help='Account name')
    login_parser.add_argument('--remember', action='store_true', help='Keep the session across restarts')
    login_parser.add_argument('--otp', help='Two-factor code')

    subparsers.add_parser('logout', help='End the session')
    subparsers.add_parser('whoami', help='Show the logged-in user')

    shipments_parser = subparsers.add_parser('shipments', help='List shipments')
    shipments_parser.add_argument('--search', help='Free text filter')
    shipments_parser.add_argument('--status', help='Status filter')

    request_parser = subparsers.add_parser('request', help='GET any API path')
    request_parser.add_argument('path', help="Path below the API prefix, e.g. /fleet/stats/summary")
    request_parser.add_argument('--param', metavar='KEY=VALUE', action='append', default=[],
                                help='Query parameter')
    request_parser.add_argument('--output', '-o', help='Write the raw response body to this file')

    return parser


def _parse_params(pairs: List[str]) -> dict:
    params = {}
    for pair in pairs:
        key, sep, value = pair.partition('=')
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got '{pair}'")
        params[key] = value
    return params


def run(args: argparse.Namespace, gateway: LogisticsGateway) -> int:
    """Execute one command; returns the process exit code"""
    if args.command == 'login':
        password = getpass.getpass("Password: ")
        result = gateway.auth.login(args.username, password, remember=args.remember,
                                    two_factor_token=args.otp)
        if result.requires_two_factor:
            print("Two-factor code required; retry with --otp")
            return 2
        print(f"Logged in as {result.user.get('username', args.username)}")
        return 0

    if args.command == 'logout':
        gateway.auth.logout()
        print("Logged out")
        return 0

    if args.command == 'whoami':
        if not gateway.is_authenticated:
            print("Not logged in")
            return 1
        _print_json(gateway.auth.refresh_user())
        return 0

    if args.command == 'shipments':
        _print_json(gateway.shipments.list_shipments(search=args.search, status=args.status))
        return 0

    if args.command == 'request':
        params = _parse_params(args.param)
        if args.output:
            body = gateway.client.download(args.path, params=params or None)
            Path(args.output).write_bytes(body)
            print(f"Wrote {len(body)} bytes to {args.output}")
        else:
            _print_json(gateway.client.get(args.path, params=params or None))
        return 0

    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the cargolink command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    error_handler = ErrorHandler()
    try:
        config = ConfigManager(
            config_path=Path(args.config_dir) if args.config_dir else None,
            environment=args.env
        ).load_config()
    except ConfigurationError as e:
        error_handler.handle_error(e, "Loading configuration")
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        config.logging.log_to_console = True
    LoggingManager.from_config(config.logging, console_level="DEBUG" if args.verbose else None)

    with LogisticsGateway.from_config(config, on_session_invalidated=_session_expired) as gateway:
        try:
            return run(args, gateway)
        except SessionExpiredError:
            return 1
        except AuthenticationError as e:
            print(f"Login failed: {e}", file=sys.stderr)
            return 1
        except (APIError, ConfigurationError, ValueError) as e:
            error_handler.handle_error(e, args.command)
            print(f"Error: {e}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
