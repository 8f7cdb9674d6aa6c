from __future__ import annotations

import argparse

from rich.panel import Panel

from resourcestore.application.services.vacuum_service import VacuumService
from resourcestore.cli.commands._common import require_initialized_project
from resourcestore.cli.context import CLIContext
from resourcestore.infrastructure.db.repos.resource_repo import ResourceRepo


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("vacuum", help="Remove rows orphaned by deleted users")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    require_initialized_project(ctx)

    resource_repo = ResourceRepo(ctx.paths.db_path)
    service = VacuumService(ctx.paths.db_path, [("resource", resource_repo.vacuum)])
    summary = service.run()

    panel = Panel.fit(
        "\n".join(f"{name}: {count} removed" for name, count in summary.removed.items()),
        title="Vacuum Summary",
    )
    ctx.console.print(panel)
    return 0
