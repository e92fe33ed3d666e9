"""
Command-line front end for the vote runtime.

Usage:
    python -m scripts.votectl submit --candidate cand_1 --region norte
    python -m scripts.votectl results [--json]
    python -m scripts.votectl analyze
    python -m scripts.votectl endpoint set https://script.google.com/macros/s/.../exec
    python -m scripts.votectl endpoint clear | show | script
    python -m scripts.votectl clear --yes
    python -m scripts.votectl share

Every command works against the same local state as the runtime
(VOTODIRECTO_STATE_DIR, default shared/state).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

from core.analysis.report import NO_VOTES_TEXT, ElectionAnalyst
from core.board import render_board
from core.context import AppContext
from core.results.tally import tally_by_candidate, tally_by_region
from core.sync.controller import Notice, TabView
from runtime.version import as_string
from services.gemini.client import GeminiClient
from services.sheets.apps_script import APPS_SCRIPT_SOURCE, DEPLOY_STEPS
from shared.config.catalog import CANDIDATES, DEFAULT_REGION_ID, REGIONS, get_candidate, get_region


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=as_string())
    sub = parser.add_subparsers(dest="command", required=True)

    submit = sub.add_parser("submit", help="Register a vote")
    submit.add_argument(
        "--candidate",
        required=True,
        choices=[c.id for c in CANDIDATES],
    )
    submit.add_argument(
        "--region",
        default=DEFAULT_REGION_ID,
        choices=[r.id for r in REGIONS],
    )

    results = sub.add_parser("results", help="Show live results")
    results.add_argument("--json", action="store_true", help="Emit tallies as JSON")

    sub.add_parser("analyze", help="Generate an AI analysis of the results")

    endpoint = sub.add_parser("endpoint", help="Manage the spreadsheet endpoint")
    endpoint_sub = endpoint.add_subparsers(dest="action", required=True)
    endpoint_set = endpoint_sub.add_parser("set", help="Configure the endpoint URL")
    endpoint_set.add_argument("url")
    endpoint_sub.add_parser("clear", help="Return to local-only mode")
    endpoint_sub.add_parser("show", help="Print the configured endpoint")
    endpoint_sub.add_parser("script", help="Print the Apps Script source")

    clear = sub.add_parser("clear", help="Erase locally stored votes")
    clear.add_argument("--yes", action="store_true", help="Skip confirmation")

    sub.add_parser("share", help="Print the shareable app link")

    return parser.parse_args(argv)


def _print_notice(notice: Notice) -> None:
    stream = sys.stderr if notice.is_error else sys.stdout
    print(notice.message, file=stream)


# ----------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------

async def cmd_submit(ctx: AppContext, args: argparse.Namespace) -> int:
    notice = await ctx.controller.submit(args.candidate, args.region)
    _print_notice(notice)
    if notice.is_error:
        return 1

    candidate = get_candidate(args.candidate)
    region = get_region(args.region)
    print(f"Ballot: {candidate.name} ({candidate.party}), {region.name}")
    return 0


async def cmd_results(ctx: AppContext, args: argparse.Namespace) -> int:
    controller = ctx.controller
    await controller.show_view(TabView.RESULTS)
    votes = controller.votes

    if args.json:
        payload = {
            "mode": controller.mode.value,
            "total": len(votes),
            "candidates": [t.to_document() for t in tally_by_candidate(votes)],
            "regions": tally_by_region(votes),
        }
        print(json.dumps(payload, indent=2))
        return 0

    print(render_board(votes, live=controller.is_cloud))
    return 0


async def cmd_analyze(ctx: AppContext, args: argparse.Namespace) -> int:
    controller = ctx.controller
    await controller.show_view(TabView.ANALYSIS)
    await controller.refresh()

    if not controller.votes:
        print(NO_VOTES_TEXT, file=sys.stderr)
        return 1

    if not ctx.settings.gemini_api_key:
        print("GEMINI_API_KEY is not set", file=sys.stderr)
        return 1

    client = GeminiClient(
        api_key=ctx.settings.gemini_api_key,
        model=ctx.settings.gemini_model,
    )
    result = await ElectionAnalyst(client.summarize).analyze(controller.votes)
    if not result.ok:
        print(result.error, file=sys.stderr)
        return 1

    print(result.text)
    return 0


async def cmd_endpoint(ctx: AppContext, args: argparse.Namespace) -> int:
    controller = ctx.controller

    if args.action == "show":
        url = ctx.endpoint_settings.get_url()
        print(url or "(not configured, local-only mode)")
        return 0

    if args.action == "script":
        print(APPS_SCRIPT_SOURCE)
        for number, step in enumerate(DEPLOY_STEPS, start=1):
            print(f"{number}. {step}")
        return 0

    url = args.url if args.action == "set" else None
    notice = await controller.set_endpoint(url)
    await controller.stop()
    _print_notice(notice)
    return 1 if notice.is_error else 0


async def cmd_clear(ctx: AppContext, args: argparse.Namespace) -> int:
    controller = ctx.controller
    if not args.yes:
        prompt = "Erase LOCAL votes?"
        if controller.is_cloud:
            prompt += " Cloud votes will reappear on the next sync."
        answer = input(f"{prompt} [y/N] ").strip().lower()
        if answer not in {"y", "yes"}:
            print("Aborted")
            return 1

    notice = controller.clear()
    _print_notice(notice)
    return 1 if notice.is_error else 0


async def cmd_share(ctx: AppContext, args: argparse.Namespace) -> int:
    print(ctx.settings.public_url)
    return 0


COMMANDS = {
    "submit": cmd_submit,
    "results": cmd_results,
    "analyze": cmd_analyze,
    "endpoint": cmd_endpoint,
    "clear": cmd_clear,
    "share": cmd_share,
}


async def _dispatch(args: argparse.Namespace) -> int:
    ctx = AppContext.build(on_notice=_print_notice)
    return await COMMANDS[args.command](ctx, args)


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    return asyncio.run(_dispatch(args))


if __name__ == "__main__":
    sys.exit(main())
