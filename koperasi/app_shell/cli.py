import argparse
import asyncio
import logging
import sys
from pathlib import Path

from koperasi.adapters.http_client import HttpxApiClient
from koperasi.app_shell.config import configure_logging
from koperasi.app_shell.context import ClientContext
from koperasi.components.performa import PerformaError
from koperasi.components.period import (
    ClockPort,
    InvalidPeriodError,
    available_periods,
    parse_period,
    period_label,
)
from koperasi.rules.loader import load_rules
from koperasi.rules.models import ClientRules

logger = logging.getLogger("cli")

RULES_PATH = "rules.yaml"


def get_rules(path: str) -> ClientRules:
    if not Path(path).exists():
        logger.error(f"Rules file {path} not found.")
        sys.exit(1)
    return load_rules(Path(path))


def _fmt(value: object) -> str:
    return "-" if value is None else str(value)


async def handle_periods(ctx: ClientContext, args: argparse.Namespace) -> None:
    summaries = await ctx.reconciler.list_periods(args.org)
    if not summaries:
        print("No performa periods recorded.")
        return
    for s in summaries:
        label = period_label(parse_period(s.periode, ctx.rules.performa.cadence))
        print(
            f"{s.periode}  {label:<16} cdi={_fmt(s.cdi)} bdi={_fmt(s.bdi)} "
            f"odi={_fmt(s.odi)} kuadrant={_fmt(s.kuadrant)}"
        )


async def handle_show(ctx: ClientContext, args: argparse.Namespace) -> None:
    record = await ctx.reconciler.get(args.org, args.period)
    if record is None:
        print(f"No performa for period {args.period}.")
        return
    print(f"Performa #{record.id} ({record.periode})")
    print(f"  CDI: {_fmt(record.cdi)}")
    print(f"  BDI: {_fmt(record.bdi)}")
    print(f"  ODI: {_fmt(record.odi)}")
    print(f"  Kuadrant: {_fmt(record.kuadrant)}")
    print(f"  Bisnis filled: {'yes' if record.performa_bisnis else 'no'}")
    print(f"  Organisasi filled: {'yes' if record.performa_organisasi else 'no'}")


async def handle_progress(ctx: ClientContext, args: argparse.Namespace) -> None:
    report = await ctx.reconciler.questionnaire_progress(args.org, args.period)
    print(f"Organisasi: {report.organisasi}%")
    print(f"Bisnis: {report.bisnis}%")
    print(f"Total: {report.total}%")


async def handle_options(ctx: ClientContext, args: argparse.Namespace) -> None:
    rules = ctx.rules.performa
    for key in available_periods(rules.cadence, ctx.clock, rules.years_back):
        print(f"{key}  {period_label(key)}")


HANDLERS = {
    "periods": handle_periods,
    "show": handle_show,
    "progress": handle_progress,
    "options": handle_options,
}


async def run(
    rules: ClientRules,
    args: argparse.Namespace,
    *,
    http: HttpxApiClient | None = None,
    clock: ClockPort | None = None,
) -> int:
    async with ClientContext.create(rules, http=http, clock=clock) as ctx:
        try:
            await HANDLERS[args.command](ctx, args)
        except (PerformaError, InvalidPeriodError) as e:
            logger.error(str(e))
            return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Koperasi performa CLI")
    parser.add_argument("--rules", default=RULES_PATH, help="Path to rules.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # periods
    periods_parser = subparsers.add_parser("periods", help="List recorded performa periods")
    periods_parser.add_argument("org", help="Koperasi id")

    # show
    show_parser = subparsers.add_parser("show", help="Show one performa record")
    show_parser.add_argument("org", help="Koperasi id")
    show_parser.add_argument("period", help="Period key (YYYY-MM or YYYY)")

    # progress
    progress_parser = subparsers.add_parser("progress", help="Questionnaire completion")
    progress_parser.add_argument("org", help="Koperasi id")
    progress_parser.add_argument(
        "period", nargs="?", default=None, help="Period key (defaults to current period)"
    )

    # options
    subparsers.add_parser("options", help="List selectable periods")

    return parser


def main() -> None:
    args = build_parser().parse_args()
    rules = get_rules(args.rules)
    configure_logging(rules)
    sys.exit(asyncio.run(run(rules, args)))


if __name__ == "__main__":
    main()
