"""
CSV export files.

Exports are written to a named temporary file, handed to the client as a
download, and removed once the response has been sent. The removal runs
whether or not sending succeeded; a failure to remove is only logged.
"""

import csv
import logging
import os
import tempfile
from collections.abc import Iterable, Mapping, Sequence

from starlette.responses import FileResponse
from starlette.types import Receive, Scope, Send

from library_api.exceptions import InternalError

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv"


def write_csv_file(
    *,
    rows: Iterable[Mapping[str, str]],
    headings: Sequence[str],
    directory: str,
    prefix: str = "export-",
) -> str:
    """
    Write rows to a new temporary CSV file and return its path.

    The file is created with delete=False; the caller owns it from here on
    and must pass it to TemporaryFileResponse (or remove_file).

    Raises:
        InternalError: If the file cannot be created or written
    """
    path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="",
            suffix=".csv",
            prefix=prefix,
            dir=directory,
            delete=False,
        ) as file:
            path = file.name
            writer = csv.DictWriter(file, fieldnames=list(headings))
            writer.writeheader()
            writer.writerows(rows)
    except OSError as exc:
        logger.error(f"Failed to write export file: {exc}")
        if path is not None:
            remove_file(path)
        raise InternalError("Failed to generate the export file.") from exc

    return path


def remove_file(path: str) -> None:
    """Delete a temporary export, logging instead of raising on failure."""
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning(f"Could not remove temporary export {path}: {exc}")


class TemporaryFileResponse(FileResponse):
    """
    FileResponse that deletes its file after the response is sent.

    A BackgroundTask would be skipped if sending fails half-way, so the
    removal is done in a finally block around the whole send instead.
    """

    def __init__(
        self,
        path: str,
        filename: str,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            path, media_type=CSV_MEDIA_TYPE, filename=filename, headers=headers
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        except Exception:
            logger.error(f"Error sending export {self.filename}", exc_info=True)
            raise
        finally:
            remove_file(str(self.path))
