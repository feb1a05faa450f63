import argparse
import json
import logging
import sys
from datetime import date
from decimal import Decimal, InvalidOperation

from . import __version__
from .config import Settings, load_settings
from .errors import BuxferError
from .logging_setup import setup_logging
from .session import EnvCredentialProvider, PromptCredentialProvider, Session
from .transactions.query import TransactionQuery
from .transactions.types import TransactionRequest, TransactionStatus, TransactionType
from .types import DryRun

EXIT_OK = 0
EXIT_NO_RESULT = 1
EXIT_ERROR = 2


def mask(value: str | None, show: int = 4) -> str:
    if not value:
        return "None"
    if len(value) <= show:
        return "*" * len(value)
    return value[:show] + "*" * (len(value) - show)


def _amount(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid amount: {value!r}")
    if not amount.is_finite():
        raise argparse.ArgumentTypeError(f"amount must be a finite number: {value!r}")
    return amount


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date (expected YYYY-MM-DD): {value!r}")


def _choice(enum_cls):
    by_name = {m.value.lower(): m for m in enum_cls}

    def parse(value: str):
        try:
            return by_name[value.lower()]
        except KeyError:
            raise argparse.ArgumentTypeError(
                f"invalid choice: {value!r} (choose from {', '.join(m.value for m in enum_cls)})"
            )

    return parse


def _print_json(value: object) -> None:
    print(json.dumps(value, ensure_ascii=False, indent=2, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="buxfer-client")
    parser.add_argument("--version", action="store_true", help="Print version and exit")

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status-env", help="Show configuration (secrets masked)")

    p = sub.add_parser("set-token", help="Persist the default token (needs MASTER_KEY)")
    p.add_argument("token")

    p = sub.add_parser("new-token", help="Log in and print a fresh token")
    p.add_argument("--username", default=None)
    p.add_argument("--save", action="store_true", help="Also persist it as the default token")

    for name in ("list-accounts", "list-tags"):
        p = sub.add_parser(name)
        p.add_argument("--token", default=None)

    p = sub.add_parser("list-transactions")
    p.add_argument("--start", type=_iso_date, default=None, help="Start date, YYYY-MM-DD")
    p.add_argument("--end", type=_iso_date, default=None, help="End date, YYYY-MM-DD")
    p.add_argument("--account", default=None)
    p.add_argument("--tag", default=None)
    p.add_argument("--contact", default=None)
    p.add_argument("--group", default=None)
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--all", action="store_true", help="Fetch every page")
    p.add_argument("--dry-run", action="store_true")
    p.add_argument("--token", default=None)

    p = sub.add_parser("add-transaction")
    p.add_argument("amount", type=_amount)
    p.add_argument("description")
    p.add_argument("--type", type=_choice(TransactionType), default=None)
    p.add_argument("--status", type=_choice(TransactionStatus), default=None)
    p.add_argument(
        "--account",
        action="append",
        default=[],
        help="Account name; give twice (from, to) for a transfer",
    )
    p.add_argument("--tag", action="append", default=[])
    p.add_argument("--date", type=_iso_date, default=None)
    p.add_argument("--with", dest="shared_with", action="append", default=[])
    p.add_argument("--dry-run", action="store_true")
    p.add_argument("--token", default=None)

    return parser


def make_session(settings: Settings) -> Session:
    if settings.password:
        provider = EnvCredentialProvider(settings)
    else:
        provider = PromptCredentialProvider()
    return Session(settings, credential_provider=provider)


def run(args: argparse.Namespace, session: Session) -> int:
    if args.command == "set-token":
        session.set_default_token(args.token, persist=True)
        print("token saved")
        return EXIT_OK

    if args.command == "new-token":
        token = session.new_token(username=args.username, save=args.save)
        print(token)
        return EXIT_OK

    if args.command == "list-accounts":
        accounts = session.list_accounts(token=args.token)
        if accounts is None:
            return EXIT_NO_RESULT
        _print_json([a.model_dump() for a in accounts])
        return EXIT_OK

    if args.command == "list-tags":
        tags = session.list_tags(token=args.token)
        if tags is None:
            return EXIT_NO_RESULT
        _print_json([t.model_dump() for t in tags])
        return EXIT_OK

    if args.command == "list-transactions":
        query = TransactionQuery(
            date_start=args.start,
            date_end=args.end,
            account=args.account,
            tag=args.tag,
            contact=args.contact,
            group=args.group,
            page=args.page,
        )
        res = session.list_transactions(query, token=args.token, exhaustive=args.all, dry_run=args.dry_run)
        if res is None:
            return EXIT_NO_RESULT
        if isinstance(res, DryRun):
            _print_json({"endpoint": res.endpoint, "params": res.params})
            return EXIT_OK

        _print_json([t.model_dump() for t in res.transactions])
        return EXIT_OK

    if args.command == "add-transaction":
        req = TransactionRequest(
            amount=args.amount,
            description=args.description,
            type=args.type,
            status=args.status,
            accounts=list(args.account),
            tags=list(args.tag),
            date=args.date,
            shared_with=list(args.shared_with),
        )
        res = session.add_transaction(req, token=args.token, dry_run=args.dry_run)
        if res is None:
            return EXIT_NO_RESULT
        if isinstance(res, DryRun):
            _print_json({"endpoint": res.endpoint, "params": res.params})
            return EXIT_OK
        _print_json(res)
        return EXIT_OK

    return EXIT_ERROR


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return EXIT_OK

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    settings = load_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)

    if args.command == "status-env":
        print("BUXFER_BASE_URL =", settings.base_url)
        print("BUXFER_USERNAME =", settings.username)
        print("BUXFER_PASSWORD =", mask(settings.password, show=0))
        print("BUXFER_TOKEN =", mask(settings.token))
        print("MASTER_KEY =", mask(settings.master_key))
        print("LOG_LEVEL =", settings.log_level)
        return EXIT_OK

    session = make_session(settings)
    try:
        return run(args, session)
    except (BuxferError, RuntimeError) as e:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR
    finally:
        session.close()


if __name__ == "__main__":
    raise SystemExit(main())
