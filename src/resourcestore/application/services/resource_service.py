from __future__ import annotations

import mimetypes
from pathlib import Path

from resourcestore.core.errors import ResourceUploadError
from resourcestore.core.time import now_unix
from resourcestore.domain.models.resource import (
    CreateResource,
    DeleteResource,
    FindResource,
    Resource,
    UpdateResource,
)
from resourcestore.infrastructure.db.repos.resource_repo import ResourceRepo


class ResourceService:
    def __init__(self, resource_repo: ResourceRepo) -> None:
        self.resource_repo = resource_repo

    def upload_file(
        self,
        file_path: Path,
        creator_id: int,
        *,
        memo_id: int | None = None,
        external_link: str | None = None,
    ) -> Resource:
        """Store a local file as a resource.

        With ``external_link`` only metadata is recorded; otherwise the file
        bytes are kept inline as the payload.
        """
        path = file_path.expanduser().resolve()
        if not path.exists() or not path.is_file():
            raise ResourceUploadError(f"File not found: {path}")

        media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        blob = None if external_link else path.read_bytes()

        resource = self.resource_repo.create(
            CreateResource(
                filename=path.name,
                type=media_type,
                size=path.stat().st_size,
                creator_id=creator_id,
                blob=blob,
                external_link=external_link or "",
            )
        )
        if memo_id is not None:
            resource = self.attach_to_memo(resource.id, memo_id)
        return resource

    def get(self, resource_id: int, *, with_blob: bool = False) -> Resource | None:
        return self.resource_repo.get(FindResource(id=resource_id, get_blob=with_blob))

    def list_for_memo(self, memo_id: int) -> list[Resource]:
        return self.resource_repo.list(FindResource(memo_id=memo_id))

    def rename(self, resource_id: int, filename: str) -> Resource:
        return self.resource_repo.update(
            UpdateResource(id=resource_id, updated_ts=now_unix(), filename=filename)
        )

    def attach_to_memo(self, resource_id: int, memo_id: int) -> Resource:
        return self.resource_repo.update(
            UpdateResource(id=resource_id, updated_ts=now_unix(), memo_id=memo_id)
        )

    def detach_from_memo(self, resource_id: int) -> Resource:
        return self.resource_repo.update(
            UpdateResource(id=resource_id, updated_ts=now_unix(), unbind_memo=True)
        )

    def delete(self, resource_id: int) -> None:
        self.resource_repo.delete(DeleteResource(id=resource_id))
