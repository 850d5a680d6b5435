"""Tests for staging multipart uploads on disk."""

import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from gardenbook.core.errors import ValidationError
from gardenbook.uploads import staged_image, staging_dir


def _upload(data: bytes, filename="fern.png", content_type="image/png") -> UploadFile:
    return UploadFile(
        io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


async def test_file_exists_only_inside_block(tmp_path):
    async with staged_image(_upload(b"leafy"), max_bytes=100, tmp_dir=str(tmp_path)) as staged:
        assert staged.path.read_bytes() == b"leafy"
        assert staged.size == 5
        assert staged.content_type == "image/png"
        assert staged.path.suffix == ".png"

    assert not staged.path.exists()


async def test_file_removed_when_block_fails(tmp_path):
    with pytest.raises(RuntimeError):
        async with staged_image(_upload(b"leafy"), max_bytes=100, tmp_dir=str(tmp_path)) as staged:
            raise RuntimeError("asset store down")

    assert not staged.path.exists()


async def test_oversized_upload(tmp_path):
    with pytest.raises(ValidationError) as exc_info:
        async with staged_image(_upload(b"x" * 50), max_bytes=10, tmp_dir=str(tmp_path)):
            pass

    assert exc_info.value.field == "image"
    assert list(staging_dir(str(tmp_path)).iterdir()) == []


async def test_no_file(tmp_path):
    async with staged_image(None, max_bytes=10, tmp_dir=str(tmp_path)) as staged:
        assert staged is None
    async with staged_image(_upload(b"", filename=""), max_bytes=10, tmp_dir=str(tmp_path)) as staged:
        assert staged is None
