"""Tests for the S3 asset store and the QR encoder."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from gardenbook.config import Settings
from gardenbook.scan_codes import QrScanCodeEncoder
from gardenbook.storage import S3AssetStore, ensure_bucket_exists


@pytest.fixture
def s3_client():
    return MagicMock()


@pytest.fixture
def store(s3_client):
    return S3AssetStore(s3_client, "garden-assets", "https://cdn.test/garden-assets/")


async def test_upload_bytes_with_public_id(store, s3_client):
    ref = await store.upload(b"png-bytes", "mygardenbook/qr", "image/png", public_id="plant-3")

    assert ref.public_id == "mygardenbook/qr/plant-3.png"
    assert ref.url == "https://cdn.test/garden-assets/mygardenbook/qr/plant-3.png"
    s3_client.put_object.assert_called_once_with(
        Bucket="garden-assets", Key="mygardenbook/qr/plant-3.png", Body=b"png-bytes", ContentType="image/png",
    )


async def test_upload_file_gets_generated_key(store, s3_client, tmp_path):
    path = tmp_path / "fern.jpg"
    path.write_bytes(b"jpeg")

    ref = await store.upload(path, "mygardenbook/plants", "image/jpeg")

    assert ref.public_id.startswith("mygardenbook/plants/")
    assert ref.public_id.endswith(".jpg")
    s3_client.upload_file.assert_called_once_with(
        str(path), "garden-assets", ref.public_id, ExtraArgs={"ContentType": "image/jpeg"},
    )


async def test_destroy_deletes_object(store, s3_client):
    await store.destroy("mygardenbook/plants/abc.jpg")

    s3_client.delete_object.assert_called_once_with(Bucket="garden-assets", Key="mygardenbook/plants/abc.jpg")


def test_bucket_created_when_missing():
    client = MagicMock()
    client.head_bucket.side_effect = ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")
    settings = Settings(s3_provider="aws", s3_region="eu-central-1", s3_bucket="garden-assets")

    ensure_bucket_exists(client, settings)

    client.create_bucket.assert_called_once_with(
        Bucket="garden-assets",
        CreateBucketConfiguration={"LocationConstraint": "eu-central-1"},
    )


def test_existing_bucket_left_alone():
    client = MagicMock()
    ensure_bucket_exists(client, Settings(s3_bucket="garden-assets"))
    client.create_bucket.assert_not_called()


def test_public_base_url_defaults():
    assert Settings(s3_provider="aws", s3_bucket="b", s3_region="eu-west-1").asset_public_base_url == (
        "https://b.s3.eu-west-1.amazonaws.com"
    )
    assert Settings(s3_endpoint="http://minio:9000/", s3_bucket="b").asset_public_base_url == "http://minio:9000/b"


def test_qr_encoder_renders_png():
    png = QrScanCodeEncoder().encode("https://front.test/PlantView?id=1")
    assert png.startswith(b"\x89PNG\r\n\x1a\n")
