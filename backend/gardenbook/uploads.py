"""Staging of multipart image uploads on local disk."""
import tempfile
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional
from uuid import uuid4

from fastapi import UploadFile

from gardenbook.core.domain_types import StagedImage
from gardenbook.core.errors import ValidationError

CHUNK_SIZE = 1024 * 1024


def staging_dir(tmp_dir: Optional[str] = None) -> Path:
    directory = Path(tmp_dir or tempfile.gettempdir()) / "mygardenbook-uploads"
    directory.mkdir(parents=True, exist_ok=True)
    return directory


@asynccontextmanager
async def staged_image(
    upload: Optional[UploadFile],
    max_bytes: int,
    tmp_dir: Optional[str] = None,
) -> AsyncIterator[Optional[StagedImage]]:
    """Write ``upload`` to a temp file for the duration of the block.

    The file is removed when the block exits, whether the asset upload
    succeeded or not. Yields None when no file was sent.
    """
    if upload is None or not upload.filename:
        yield None
        return

    path = staging_dir(tmp_dir) / f"{int(time.time() * 1000)}-{uuid4().hex}{Path(upload.filename).suffix}"
    size = 0
    try:
        with path.open("wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise ValidationError(f"Image exceeds {max_bytes} bytes", "image")
                out.write(chunk)
        yield StagedImage(
            path=path,
            content_type=upload.content_type or "application/octet-stream",
            size=size,
            filename=upload.filename,
        )
    finally:
        path.unlink(missing_ok=True)
        await upload.close()
