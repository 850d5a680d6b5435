"""Create the asset bucket if it does not exist yet (local MinIO or AWS)."""
from gardenbook.config import get_settings
from gardenbook.storage import ensure_bucket_exists


def main():
    settings = get_settings()
    ensure_bucket_exists()
    print(f"Bucket '{settings.s3_bucket}' is ready ({settings.s3_provider}).")


if __name__ == "__main__":
    main()
