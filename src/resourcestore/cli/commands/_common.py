from __future__ import annotations

from resourcestore.application.services.project_service import ProjectService
from resourcestore.cli.context import CLIContext
from resourcestore.core.errors import ProjectNotInitializedError


def require_initialized_project(ctx: CLIContext) -> None:
    if not ProjectService(ctx.paths).is_initialized():
        raise ProjectNotInitializedError(
            f"Project is not initialized. Run 'resstore init' first in {ctx.paths.project_root}"
        )
