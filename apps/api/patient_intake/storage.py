# apps/api/patient_intake/storage.py
import hashlib
from typing import Tuple
import boto3
from botocore.client import Config
from botocore.exceptions import ClientError
from .settings import settings

def _s3():
    return boto3.client(
        "s3",
        endpoint_url=settings.s3_endpoint,
        aws_access_key_id=settings.s3_access_key,
        aws_secret_access_key=settings.s3_secret_key,
        config=Config(signature_version="s3v4"),
        region_name=settings.s3_region or "us-east-1",
    )

def is_allowed_content_type(content_type: str | None) -> bool:
    ct = (content_type or "").lower()
    return ct.startswith("image/") or ct == "application/pdf"

def put_document(key: str, data: bytes, content_type: str = "application/octet-stream") -> Tuple[str, str]:
    """Uploads bytes to the configured bucket and returns (s3_url, sha256_hex)."""
    sha256 = hashlib.sha256(data).hexdigest()
    s3 = _s3()
    # Create bucket if it doesn't exist (idempotent in MinIO)
    try:
        s3.create_bucket(Bucket=settings.s3_bucket)
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code")
        if code not in ("BucketAlreadyOwnedByYou", "BucketAlreadyExists"):
            raise

    s3.put_object(
        Bucket=settings.s3_bucket,
        Key=key,
        Body=data,
        ContentType=content_type,
        Metadata={"sha256": sha256},
    )
    return f"s3://{settings.s3_bucket}/{key}", sha256
