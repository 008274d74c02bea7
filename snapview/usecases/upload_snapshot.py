"""Use case for uploading one snapshot file to the snapshot service."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from snapview.domain.entities import SnapshotFilename
from snapview.domain.errors import SnapshotFilenameError
from snapview.domain.ports import SnapshotPort, UseCaseError
from snapview.domain.snapshot_filename import validate_snapshot_filename
from snapview.usecases.error_mapping import map_api_error

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 25 << 20


@dataclass
class UploadSnapshot:
    """Validate the filename client-side, then send the file to ``POST /snapshot``.

    The filename gate runs before any transport is touched; a rejected name
    never reaches the port.
    """

    snapshot_port: SnapshotPort
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES

    def __call__(self, *, filename: str, data: bytes) -> SnapshotFilename:
        try:
            parsed = validate_snapshot_filename(filename)
        except SnapshotFilenameError as exc:
            raise map_api_error(exc, default_code="INVALID_FILENAME") from exc

        if not data:
            raise UseCaseError("UPLOAD_EMPTY", f"{parsed.filename} is empty.")
        if self.max_bytes and len(data) > self.max_bytes:
            limit_mb = self.max_bytes / (1 << 20)
            raise UseCaseError(
                "UPLOAD_TOO_LARGE",
                f"{parsed.filename} exceeds the {limit_mb:.0f} MB upload limit.",
            )

        try:
            self.snapshot_port.upload_snapshot(parsed.filename, bytes(data))
        except UseCaseError:
            raise
        except Exception as exc:
            LOGGER.warning("Upload of %s failed: %s", parsed.filename, exc)
            raise map_api_error(
                exc,
                default_code="UPLOAD_FAILED",
                default_message="Snapshot upload failed.",
            ) from exc
        return parsed


__all__ = ["DEFAULT_MAX_UPLOAD_BYTES", "UploadSnapshot"]
