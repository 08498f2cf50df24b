"""
Final expense call assistant entry point.

Loads the script and carrier reference from the configured paths and
exposes a few agent-facing commands for development and spot checks.

Usage:
    Console walkthrough:  python main.py console --scenario impaired
    Render a section:     python main.py render medical_questions --set diabetes=Yes
    Estimate quotes:      python main.py quote --age 67 --tobacco No --coverage 10000
    Browse carriers:      python main.py carriers --coverage graded
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from src.config import settings
from src.conversation.data_store import CustomerDataStore
from src.conversation.renderer import render_section
from src.schemas.customer_schema import AgentProfile, PlaceholderContext
from src.schemas.quote_schema import QuoteMode
from src.tools.carriers import CoverageFilter, recommend_carriers, search_carriers
from src.tools.documents import ScriptDocumentError, load_carriers, load_script_document
from src.tools.quotes import InsufficientQuoteDataError, compute_quotes

logger = logging.getLogger(__name__)


def _agent_profile() -> AgentProfile:
    return AgentProfile(
        agent_id=settings.agent.agent_id,
        name=settings.agent.name,
        npn=settings.agent.npn,
    )


def _parse_assignments(pairs: Sequence[str]) -> dict[str, object]:
    """Turn ``field=value`` pairs into customer data. ``a|b`` makes a list."""
    data: dict[str, object] = {}
    for pair in pairs:
        field_id, sep, value = pair.partition("=")
        if not sep or not field_id:
            raise ValueError(f"Expected field=value, got {pair!r}")
        data[field_id] = value.split("|") if "|" in value else value
    return data


def _run_console(args: argparse.Namespace) -> int:
    from console_demo import ConsoleWalkthrough

    ConsoleWalkthrough(_agent_profile()).run_scenario(args.scenario)
    return 0


def _run_render(args: argparse.Namespace) -> int:
    document = load_script_document(settings.paths.script_path)
    section = document.get_section(args.section_id)
    if section is None:
        ids = ", ".join(s.id for s in document.ordered_sections())
        print(f"Unknown section '{args.section_id}'. Available: {ids}", file=sys.stderr)
        return 2

    store = CustomerDataStore(_parse_assignments(args.set))
    snapshot = store.snapshot()
    result = render_section(
        section, snapshot, PlaceholderContext.from_customer_data(snapshot, _agent_profile())
    )
    print(f"== {result.title} ==")
    for item in result.items:
        indent = "  " * item.level
        if item.field_id:
            marker = "*" if item.required else " "
            value = item.value if item.answered else "..."
            print(f"{indent}[{marker}] {item.text}: {value}")
        else:
            print(f"{indent}{item.kind.value}: {item.text}")
    answered, total = result.progress()
    print(f"-- {answered}/{total} required answered", end="")
    if result.required_incomplete:
        print(f" (missing: {', '.join(result.required_incomplete)})")
    else:
        print()
    return 0


def _run_quote(args: argparse.Namespace) -> int:
    carriers = load_carriers(settings.paths.carriers_path)
    data: dict[str, object] = {"tobacco_use": args.tobacco}
    if args.age is not None:
        data["customer_age"] = args.age
    for field_id in args.condition:
        data[field_id] = "Yes"

    if args.budget is not None:
        mode, target = QuoteMode.BUDGET_FIRST, args.budget
    else:
        mode, target = QuoteMode.COVERAGE_FIRST, args.coverage

    try:
        options = compute_quotes(
            data, carriers, mode, target, allow_default_age=args.assume_age
        )
    except InsufficientQuoteDataError as exc:
        print(f"Cannot quote: missing {', '.join(exc.missing)}", file=sys.stderr)
        return 1

    for option in options:
        flag = " (age assumed)" if option.age_assumed else ""
        print(
            f"${option.coverage_amount:>7,} coverage  ${option.monthly_premium:>4}/mo  "
            f"${option.daily_cost:.2f}/day  {option.plan_type.value:<10} "
            f"{option.carrier or '-'}{flag}"
        )

    for rec in recommend_carriers(data):
        print(f"  {rec.suitability.value:<9} {rec.carrier}")
    return 0


def _run_carriers(args: argparse.Namespace) -> int:
    carriers = load_carriers(settings.paths.carriers_path)
    for carrier in search_carriers(carriers, args.term, CoverageFilter(args.coverage)):
        types = [name for name, on in carrier.coverage_types.model_dump().items() if on]
        print(f"{carrier.name:<20} {carrier.rating:<4} {', '.join(types)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Final expense call assistant")
    sub = parser.add_subparsers(dest="command", required=True)

    console = sub.add_parser("console", help="Play a scripted call walkthrough")
    console.add_argument("--scenario", default="healthy", choices=["healthy", "impaired"])
    console.set_defaults(func=_run_console)

    render = sub.add_parser("render", help="Render one script section")
    render.add_argument("section_id")
    render.add_argument("--set", action="append", default=[], metavar="FIELD=VALUE")
    render.set_defaults(func=_run_render)

    quote = sub.add_parser("quote", help="Estimate three quote options")
    quote.add_argument("--age", type=int)
    quote.add_argument("--tobacco", default="No", choices=["Yes", "No"])
    quote.add_argument("--condition", action="append", default=[], metavar="FIELD_ID")
    target = quote.add_mutually_exclusive_group()
    target.add_argument("--coverage", type=float, default=10000)
    target.add_argument("--budget", type=float)
    quote.add_argument("--assume-age", action="store_true")
    quote.set_defaults(func=_run_quote)

    carriers = sub.add_parser("carriers", help="Search the carrier reference")
    carriers.add_argument("--term", default="")
    carriers.add_argument(
        "--coverage", default="all", choices=[c.value for c in CoverageFilter]
    )
    carriers.set_defaults(func=_run_carriers)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (ScriptDocumentError, ValueError) as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
