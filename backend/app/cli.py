"""
CampusSoft command line

Usage:
    campussoft serve                    # Run the API server
    campussoft init-db                  # Create missing tables
    campussoft expire-due               # Expire pending attestations past their period
    campussoft reminders [--window N]   # List attestations due for a reminder
    campussoft campaign 2025            # Create attestations for an academic year

The batch commands are meant for cron; they run the same jobs as the
/attestations endpoints without going through HTTP.
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.table import Table

from app.core.config import settings
from app.core.database import get_session_local, init_db, close_db
from app.core.exceptions import CampusSoftError

console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog="campussoft",
        description="CampusSoft backend - server and attestation batch jobs",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=settings.SERVER_HOST)
    serve.add_argument("--port", type=int, default=settings.SERVER_PORT)

    subparsers.add_parser("init-db", help="Create missing tables")
    subparsers.add_parser("expire-due", help="Expire pending attestations whose period has ended")

    reminders = subparsers.add_parser("reminders", help="List attestations due for a reminder")
    reminders.add_argument(
        "--window",
        type=int,
        default=settings.ATTESTATION_REMINDER_DAYS,
        help=f"Days before the period end (default: {settings.ATTESTATION_REMINDER_DAYS})"
    )

    campaign = subparsers.add_parser("campaign", help="Create attestations for an academic year")
    campaign.add_argument("academic_year", help="Starting year, e.g. 2025")

    return parser


async def _run_job(args: argparse.Namespace) -> int:
    from app.services.attestation_jobs import attestation_jobs
    from app.services.attestation_service import attestation_service

    session_factory = get_session_local()
    try:
        async with session_factory() as db:
            if args.command == "expire-due":
                count = await attestation_jobs.run_expiration(db)
                console.print(f"[green]{count} attestation(s) expired[/green]")
            elif args.command == "reminders":
                due = await attestation_jobs.run_reminder_check(db, args.window)
                table = Table(title=f"Attestations due for a reminder ({len(due)})")
                table.add_column("Attestation")
                table.add_column("Request")
                table.add_column("Period end")
                table.add_column("Last reminder")
                for attestation in due:
                    table.add_row(
                        attestation.id,
                        attestation.request_id,
                        str(attestation.period_end),
                        str(attestation.reminder_sent_date or "-"),
                    )
                console.print(table)
            elif args.command == "campaign":
                count = await attestation_service.create_campaign(db, args.academic_year)
                console.print(f"[green]{count} attestation(s) created for {args.academic_year}[/green]")
    except CampusSoftError as e:
        console.print(f"[red]{e.code}: {e.message}[/red]")
        return 1
    finally:
        await close_db()
    return 0


async def _init_db() -> int:
    import app.models  # noqa: F401 - register tables on the metadata
    await init_db()
    await close_db()
    console.print("[green]Database ready[/green]")
    return 0


def main():
    """Main entry point"""
    args = create_parser().parse_args()

    if args.command == "serve":
        import uvicorn
        uvicorn.run("app.main:app", host=args.host, port=args.port, reload=settings.DEBUG)
        return

    if args.command == "init-db":
        sys.exit(asyncio.run(_init_db()))

    sys.exit(asyncio.run(_run_job(args)))


if __name__ == "__main__":
    main()
