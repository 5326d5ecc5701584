"""CLI entrypoint for the currency converter.

Единственная точка входа для пользовательских команд. Здесь
только разбор аргументов и вывод. Вся логика — в core.usecases.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from prettytable import PrettyTable

from ..core import usecases as uc
from ..core.exceptions import (
    ConfigError,
    NetworkError,
    PersistenceError,
    RateLimitError,
    RateNotFoundError,
    RemoteError,
)
from ..core.models import DomainError
from ..core.utils import format_money
from ..infra.settings import SettingsLoader
from ..logging_config import configure_logging
from ..rate_service.config import load_client_config
from ..rate_service.storage import clear_store, load_store, save_store

COMMANDS = {"convert", "list", "show-cache", "clear-cache"}

logger = logging.getLogger("currency_converter.cli")


def _print_error(msg: str) -> None:
    """Print a user-facing error message (no stack traces)."""
    print(msg, file=sys.stderr)


def _format_amount(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argparse parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="currency-converter",
        description="Converts currencies and lists exchange rates",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 1.0")
    sub = parser.add_subparsers(dest="command")

    # convert
    p = sub.add_parser("convert", help="Convert an amount between currencies")
    p.add_argument("frm", metavar="FROM_CURRENCY", help="The source currency code")
    p.add_argument("to", metavar="TO_CURRENCY", help="The target currency code")
    p.add_argument("amount", metavar="AMOUNT", help="The amount to convert")

    # list
    default_base = str(SettingsLoader().get("default_list_base", "PLN"))
    p = sub.add_parser("list", help="Lists exchange rates for a base currency")
    p.add_argument(
        "base",
        metavar="BASE_CURRENCY",
        nargs="?",
        default=default_base,
        help=f"The base currency code (default {default_base})",
    )

    # show-cache
    p = sub.add_parser("show-cache", help="Show cached rate tables")
    p.add_argument("--base", help="Only show this base currency")

    # clear-cache
    sub.add_parser("clear-cache", help="Delete the local rate cache file")

    return parser


def _run_convert(ns: argparse.Namespace) -> int:
    cfg = load_client_config()
    store = load_store(cfg.CACHE_FILE_PATH)
    saved = True
    try:
        res = uc.convert(
            ns.frm, ns.to, ns.amount, store=store, resolver=uc.build_resolver(cfg)
        )
        print(
            f"{_format_amount(res['amount'])} {res['from']} is "
            f"{format_money(res['converted'])} {res['to']} at an exchange rate of "
            f"{format_money(res['rate'])}"
        )
    finally:
        # A refetch that missed the target still refreshed the store
        try:
            save_store(store, cfg.CACHE_FILE_PATH)
        except PersistenceError as exc:
            _print_error(str(exc))
            saved = False
    return 0 if saved else 1


def _run_list(ns: argparse.Namespace) -> int:
    res = uc.list_rates(ns.base, resolver=uc.build_resolver())
    table = PrettyTable()
    table.field_names = ["Currency", "Rate"]
    table.align["Currency"] = "l"
    table.align["Rate"] = "r"
    for code, rate in res["rates"]:
        table.add_row([code, f"{rate:.6f}"])
    print(f"Exchange rates for {res['base']} (fetched: {res['timestamp']}):")
    print(table)
    return 0


def _run_show_cache(ns: argparse.Namespace) -> int:
    cfg = load_client_config()
    store = load_store(cfg.CACHE_FILE_PATH)
    rows: list[dict[str, Any]] = uc.show_cache(store, cfg.cache_ttl, base=ns.base)
    if not rows:
        print("Local rate cache is empty. Run 'convert' to populate it.")
        return 1
    table = PrettyTable()
    table.field_names = ["Base", "Rates", "Fetched", "Status"]
    table.align["Base"] = "l"
    table.align["Rates"] = "r"
    for row in rows:
        table.add_row(
            [
                row["base"],
                row["count"],
                row["timestamp"],
                "fresh" if row["fresh"] else "stale",
            ]
        )
    print(f"Cache file: {cfg.CACHE_FILE_PATH} (TTL {cfg.CACHE_TTL_SECONDS}s)")
    print(table)
    return 0


def _run_clear_cache(ns: argparse.Namespace) -> int:
    cfg = load_client_config()
    removed = clear_store(cfg.CACHE_FILE_PATH)
    print(f"Cache cleared: {removed} base currencies removed")
    return 0


_HANDLERS = {
    "convert": _run_convert,
    "list": _run_list,
    "show-cache": _run_show_cache,
    "clear-cache": _run_clear_cache,
}


def _run_once(argv: list[str]) -> int:
    """Execute a single CLI command and return process exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)
    handler = _HANDLERS.get(ns.command)
    if handler is None:
        parser.print_help()
        return 2
    try:
        return handler(ns)
    except ConfigError as exc:
        _print_error(str(exc))
        _print_error("Hint: set API_KEY in the environment or in a .env file")
        return 1
    except RateLimitError as exc:
        _print_error(str(exc))
        _print_error("Hint: try again later")
        return 1
    except NetworkError as exc:
        _print_error(str(exc))
        _print_error("Hint: check your network connection")
        return 1
    except RateNotFoundError as exc:
        _print_error(str(exc))
        _print_error(f"Hint: run 'list {exc.base}' to see available currencies")
        return 1
    except (RemoteError, PersistenceError, DomainError) as exc:
        _print_error(str(exc))
        return 1
    except Exception as exc:  # noqa: BLE001 - last resort at the CLI boundary
        logger.exception("Unexpected error in '%s'", ns.command)
        _print_error(f"Error: {exc}")
        return 1


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint used by the console script and main.py.

    Args:
        argv: Optional explicit argv (without program name). If None, uses sys.argv[1:].
    Returns:
        Exit code integer (0 success, non-zero on error).
    """
    # Ensure logging is configured once per process
    configure_logging()
    args = sys.argv[1:] if argv is None else list(argv)
    # Legacy shape: FROM TO AMOUNT without the subcommand
    if args and args[0] not in COMMANDS and not args[0].startswith("-"):
        args = ["convert", *args]
    return _run_once(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
