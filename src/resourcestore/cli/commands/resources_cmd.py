from __future__ import annotations

import argparse
from pathlib import Path

from rich.table import Table

from resourcestore.application.services.resource_service import ResourceService
from resourcestore.cli.commands._common import require_initialized_project
from resourcestore.cli.context import CLIContext
from resourcestore.core.errors import ValidationError
from resourcestore.core.time import now_unix
from resourcestore.domain.models.resource import FindResource, Resource, UpdateResource
from resourcestore.infrastructure.db.repos.resource_repo import ResourceRepo


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("resources", help="Manage stored resources")
    resources_subparsers = parser.add_subparsers(dest="resources_command", required=True)

    list_resources = resources_subparsers.add_parser("list", help="List resources, newest first")
    list_resources.add_argument("--id", type=int)
    list_resources.add_argument("--creator-id", type=int)
    list_resources.add_argument("--filename")
    list_resources.add_argument("--memo-id", type=int)
    list_resources.add_argument("--has-memo", action="store_true", help="Only resources attached to a memo")
    list_resources.add_argument("--limit", type=int)
    list_resources.add_argument("--offset", type=int, help="Ignored unless --limit is given")
    list_resources.set_defaults(handler=run_list)

    upload = resources_subparsers.add_parser("upload", help="Store a local file as a resource")
    upload.add_argument("file_path", help="Path to the file")
    upload.add_argument("--creator-id", type=int, required=True)
    upload.add_argument("--memo-id", type=int)
    upload.add_argument("--external-link", help="Record a link instead of storing the bytes")
    upload.set_defaults(handler=run_upload)

    update = resources_subparsers.add_parser("update", help="Change selected fields of a resource")
    update.add_argument("resource_id", type=int)
    update.add_argument("--filename")
    update.add_argument("--internal-path")
    memo_group = update.add_mutually_exclusive_group()
    memo_group.add_argument("--memo-id", type=int)
    memo_group.add_argument("--unbind-memo", action="store_true")
    update.set_defaults(handler=run_update)

    delete = resources_subparsers.add_parser("delete", help="Delete a resource and sweep orphans")
    delete.add_argument("resource_id", type=int)
    delete.set_defaults(handler=run_delete)


def _render(resources: list[Resource], title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Filename")
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Creator", justify="right")
    table.add_column("Memo", justify="right")
    table.add_column("Created", justify="right")
    table.add_column("External link", overflow="fold")

    for r in resources:
        table.add_row(
            str(r.id),
            r.filename,
            r.type,
            str(r.size),
            str(r.creator_id),
            "" if r.memo_id is None else str(r.memo_id),
            str(r.created_ts),
            r.external_link,
        )
    return table


def run_list(args: argparse.Namespace, ctx: CLIContext) -> int:
    require_initialized_project(ctx)
    repo = ResourceRepo(ctx.paths.db_path)

    resources = repo.list(
        FindResource(
            id=args.id,
            creator_id=args.creator_id,
            filename=args.filename,
            memo_id=args.memo_id,
            has_related_memo=args.has_memo,
            limit=args.limit,
            offset=args.offset,
        )
    )
    ctx.console.print(_render(resources, f"Resources ({len(resources)})"))
    return 0


def run_upload(args: argparse.Namespace, ctx: CLIContext) -> int:
    require_initialized_project(ctx)
    service = ResourceService(ResourceRepo(ctx.paths.db_path))

    resource = service.upload_file(
        Path(args.file_path),
        args.creator_id,
        memo_id=args.memo_id,
        external_link=args.external_link,
    )
    ctx.console.print(f"[green]Stored[/green] resource {resource.id} ({resource.filename}, {resource.size} bytes)")
    return 0


def run_update(args: argparse.Namespace, ctx: CLIContext) -> int:
    require_initialized_project(ctx)
    if args.filename is None and args.internal_path is None and args.memo_id is None and not args.unbind_memo:
        raise ValidationError("Nothing to update: pass --filename, --internal-path, --memo-id or --unbind-memo")

    repo = ResourceRepo(ctx.paths.db_path)
    resource = repo.update(
        UpdateResource(
            id=args.resource_id,
            updated_ts=now_unix(),
            filename=args.filename,
            internal_path=args.internal_path,
            memo_id=args.memo_id,
            unbind_memo=args.unbind_memo,
        )
    )
    ctx.console.print(_render([resource], f"Updated resource {resource.id}"))
    return 0


def run_delete(args: argparse.Namespace, ctx: CLIContext) -> int:
    require_initialized_project(ctx)
    service = ResourceService(ResourceRepo(ctx.paths.db_path))

    service.delete(args.resource_id)
    ctx.console.print(f"[green]Deleted[/green] resource {args.resource_id}")
    return 0
