"""
S3 client construction for the image bucket.

SeaweedFS exposes an S3 gateway that needs path-style addressing
(`http://host:8333/<bucket>/<key>`) and SigV4 signatures.
"""

from __future__ import annotations

import boto3
from botocore.client import BaseClient
from botocore.config import Config

from core.settings import S3Settings


def create_s3_client(settings: S3Settings) -> BaseClient:
    """
    Create one S3 client for the process.

    botocore clients are safe to share between concurrent callers, so the
    resolver keeps this instance for its whole lifetime.
    """
    return boto3.client(
        "s3",
        endpoint_url=settings.endpoint,
        region_name=settings.region,
        aws_access_key_id=settings.access_key_id,
        aws_secret_access_key=settings.secret_access_key,
        config=Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
        ),
    )
