"""
permitrack.cli
==============

Command line front end over a JSON roster.

Examples
--------
$ python -m permitrack.cli status
$ python -m permitrack.cli --roster roster.json --lead-time 30 notifications
$ python -m permitrack.cli report
$ python -m permitrack.cli chart
$ python -m permitrack.cli serve
"""

from __future__ import annotations

import argparse
import logging
import textwrap
from datetime import date
from pathlib import Path
from typing import List, Optional

from .models import LEAD_TIMES, NotificationSettings, ProcessType
from .registry import ExpatRegistry
from .seed import demo_roster
from .serialize import load_roster
from .settings import (
    API_HOST,
    API_PORT,
    LOG_FORMAT,
    LOG_LEVEL,
    config,
    default_notification_settings,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m permitrack.cli",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            permitrack utilities
            --------------------
            status         permit status of every expat
            notifications  expiry reminders within the lead time
            report         pipeline, outstanding documents, stage durations
            chart          write status / pipeline PNGs
            serve          run the HTTP API with uvicorn
            """
        ),
    )
    parser.add_argument("--roster", help="JSON list of expats; the demo roster is used if omitted")
    parser.add_argument("--lead-time", type=int, choices=LEAD_TIMES,
                        help="days before expiry that count as 'Expires Soon'")
    parser.add_argument("--today", help="reference date (YYYY-MM-DD), defaults to today")
    parser.add_argument("command", choices=["status", "notifications", "report", "chart", "serve"])
    return parser


def _load_registry(args: argparse.Namespace, today: date) -> ExpatRegistry:
    settings = default_notification_settings(config)
    if args.lead_time:
        settings = NotificationSettings(settings.enabled, settings.channels, args.lead_time,
                                        settings.email_settings)
    if args.roster:
        path = Path(args.roster)
        if not path.exists():
            raise SystemExit(f"⛔  File not found: {path!s}")
        try:
            roster = load_roster(path)
        except ValueError as exc:
            raise SystemExit(f"⛔ invalid roster {path!s}: {exc}")
    else:
        roster = demo_roster(today, settings.lead_time)
    return ExpatRegistry(roster, settings)


def _print_status(reg: ExpatRegistry, today: date) -> None:
    for e in reg.get_expats(today):
        print(f"{e.name:<22} {e.nationality:<12} {e.current_permit.expiry_date:<10}  "
              f"{e.current_permit.status.value:<12} {e.current_stage_label}")
    stats = reg.get_dashboard_stats(today).statuses
    print(", ".join(f"{k}: {v}" for k, v in stats.as_dict().items()))


def _print_notifications(reg: ExpatRegistry, today: date) -> None:
    notes = reg.get_notifications(now=today)
    if not notes:
        print("No upcoming expiries.")
    for n in notes:
        print(f"[{n.days_until_expiry:>3}d] {n.message}")


def _print_report(reg: ExpatRegistry, today: date) -> None:
    m = reg.get_report_metrics(today)
    print(f"In onboarding: {m.in_onboarding}   In renewal: {m.in_renewal}")
    for title, pipeline in (("Onboarding", m.onboarding_pipeline), ("Renewal", m.renewal_pipeline)):
        print(f"\n{title} pipeline")
        for stage, n in pipeline.items():
            print(f"  {stage.value:<22} {n}")
    print("\nAverage stage durations")
    for key, days in m.average_durations.items():
        print(f"  {key:<48} {'N/A' if days is None else f'{days} days'}")
    print("\nOutstanding physical documents")
    for row in m.outstanding_documents:
        docs = ", ".join(f"{d.name.value} ({d.status.value})" for d in row.outstanding)
        print(f"  {row.expat_name} [{row.process.value}]: {docs}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    try:
        today = date.fromisoformat(args.today) if args.today else date.today()
    except ValueError:
        raise SystemExit(f"⛔ invalid --today date: {args.today}")

    if args.command == "serve":
        import uvicorn

        uvicorn.run("api.main:app", host=API_HOST, port=API_PORT)
        return 0

    reg = _load_registry(args, today)
    if args.command == "status":
        _print_status(reg, today)
    elif args.command == "notifications":
        _print_notifications(reg, today)
    elif args.command == "report":
        _print_report(reg, today)
    elif args.command == "chart":
        from . import viz

        expats = reg.get_expats(today)
        for out in (viz.status_summary(expats),
                    viz.pipeline_chart(expats, ProcessType.ONBOARDING),
                    viz.pipeline_chart(expats, ProcessType.RENEWAL)):
            print(f"chart saved to {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
