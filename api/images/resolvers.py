"""
Image URL resolvers.

Two strategies turn a storage key into a URL the browser can fetch:

- `DirectResolver`: plain Filer HTTP URL `<base_url>/<bucket>/<key>`.
- `PresignedResolver`: time-limited SigV4 URL from the S3 gateway.

One of them is built at startup by `build_resolver()` and shared by every
request (see `api/main.py`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from core.settings import ImageSettings

from . import keys, storage

DIRECT_STRATEGIES = {"filer", "direct"}
PRESIGNED_STRATEGIES = {"s3", "presigned"}


# Resolution failures are explicit and separable from other runtime errors.
class ImageResolutionError(RuntimeError):
    pass


class StorageConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class ResolvedImage:
    key: str
    url: str
    expires_at: datetime | None = None


class ImageResolver:
    """
    Base class for both strategies.

    Key derivation lives here so it is identical whichever strategy is active.
    """

    strategy = ""

    def __init__(
        self,
        *,
        default_ttl_s: int = 3600,
        key_prefix_length: int = keys.DEFAULT_PREFIX_LENGTH,
        file_extension: str = keys.DEFAULT_FILE_EXTENSION,
    ) -> None:
        self.default_ttl_s = default_ttl_s
        self.key_prefix_length = key_prefix_length
        self.file_extension = file_extension

    def key_for(self, article_id: int | str) -> str:
        return keys.derive_key(
            article_id,
            prefix_length=self.key_prefix_length,
            file_extension=self.file_extension,
        )

    async def resolve(self, key: str, ttl_seconds: int | None = None) -> ResolvedImage:
        raise NotImplementedError


class DirectResolver(ImageResolver):
    strategy = "filer"

    def __init__(self, *, base_url: str, bucket: str, **kwargs) -> None:
        super().__init__(**kwargs)
        base_url = (base_url or "").strip().rstrip("/")
        if not base_url:
            raise StorageConfigError("FILER_BASE_URL is empty.")
        self._prefix = f"{base_url}/{bucket.strip('/')}" if bucket.strip("/") else base_url

    async def resolve(self, key: str, ttl_seconds: int | None = None) -> ResolvedImage:
        # Direct URLs never expire; ttl_seconds is accepted for a uniform call shape.
        return ResolvedImage(key=key, url=f"{self._prefix}/{key}")


class PresignedResolver(ImageResolver):
    strategy = "s3"

    def __init__(self, *, client: BaseClient, bucket: str, **kwargs) -> None:
        super().__init__(**kwargs)
        if not (bucket or "").strip():
            raise StorageConfigError("S3_BUCKET is empty.")
        self._client = client
        self._bucket = bucket.strip()

    async def resolve(self, key: str, ttl_seconds: int | None = None) -> ResolvedImage:
        ttl = int(ttl_seconds or self.default_ttl_s)
        try:
            url = self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=ttl,
            )
        except (BotoCoreError, ClientError) as exc:
            raise ImageResolutionError(f"Failed to presign image key {key}: {exc}") from exc

        expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl)
        return ResolvedImage(key=key, url=url, expires_at=expires_at)


def build_resolver(settings: ImageSettings, *, client: BaseClient | None = None) -> ImageResolver:
    """
    Build the resolver for the configured strategy.

    `client` lets callers supply a pre-built S3 client; otherwise one is
    created here, once.
    """
    common = {
        "default_ttl_s": settings.url_expiration_s,
        "key_prefix_length": settings.key_prefix_length,
        "file_extension": settings.file_extension,
    }

    if settings.strategy in DIRECT_STRATEGIES:
        return DirectResolver(
            base_url=settings.filer.base_url,
            bucket=settings.filer.bucket,
            **common,
        )

    if settings.strategy in PRESIGNED_STRATEGIES:
        return PresignedResolver(
            client=client if client is not None else storage.create_s3_client(settings.s3),
            bucket=settings.s3.bucket,
            **common,
        )

    allowed = sorted(DIRECT_STRATEGIES | PRESIGNED_STRATEGIES)
    raise StorageConfigError(f"Unsupported IMAGE_STRATEGY '{settings.strategy}'. Allowed: {allowed}")
