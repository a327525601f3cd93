"""
Blob storage backends for consent records.

Two backends share one interface:

  - VercelBlobStore: private objects in Vercel Blob via its HTTP API (httpx).
  - LocalBlobStore:  plain files under a directory — dev / tests / no token.

Both add a random suffix to the requested pathname (before the extension),
so two submissions in the same millisecond never collide. The returned
``pathname`` is what the API hands back to the client as the record id.
"""

from __future__ import annotations

import logging
import os
import tempfile
import uuid
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Protocol

import httpx

from .config import Settings
from .exceptions import StorageError
from .models import PutResult

logger = logging.getLogger(__name__)

BLOB_API_VERSION = "7"


# ─── Helpers ─────────────────────────────────────────────────────────


def submission_pathname(now: datetime) -> str:
    """``submissions/<epoch-ms>.json`` for a timezone-aware ``now``."""
    return f"submissions/{int(now.timestamp() * 1000)}.json"


def with_random_suffix(pathname: str) -> str:
    """``a/b.json`` → ``a/b-<32 hex chars>.json``."""
    path = PurePosixPath(pathname)
    return str(path.with_name(f"{path.stem}-{uuid.uuid4().hex}{path.suffix}"))


# ─── Interface ───────────────────────────────────────────────────────


class BlobStore(Protocol):
    name: str

    def put(self, pathname: str, body: str, content_type: str) -> PutResult: ...

    def close(self) -> None: ...


# ─── Vercel Blob ─────────────────────────────────────────────────────


class VercelBlobStore:
    """Writes private blobs through the Vercel Blob REST API.

    Usage:
        store = VercelBlobStore(token=os.environ["BLOB_READ_WRITE_TOKEN"])
        result = store.put("submissions/1.json", "{}", "application/json")
        result.pathname  # "submissions/1-<suffix>.json"
    """

    name = "vercel-blob"

    def __init__(
        self,
        token: str,
        base_url: str = "https://blob.vercel-storage.com",
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            timeout=timeout_seconds,
            headers={
                "Authorization": f"Bearer {token}",
                "x-api-version": BLOB_API_VERSION,
            },
            transport=transport,
        )

    def put(self, pathname: str, body: str, content_type: str) -> PutResult:
        url = f"{self.base_url}/{pathname}"
        try:
            response = self.client.put(
                url,
                content=body.encode("utf-8"),
                headers={
                    "x-content-type": content_type,
                    "x-add-random-suffix": "1",
                    "x-vercel-blob-access": "private",
                },
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise StorageError(
                f"Blob store rejected write: HTTP {exc.response.status_code}",
                details={"pathname": pathname, "status": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            raise StorageError(
                f"Blob store unreachable: {exc}",
                details={"pathname": pathname},
            ) from exc
        except ValueError as exc:
            raise StorageError(
                "Blob store returned a non-JSON response",
                details={"pathname": pathname},
            ) from exc

        if not isinstance(data, dict):
            raise StorageError(
                "Blob store response is not a JSON object",
                details={"pathname": pathname},
            )

        stored = data.get("pathname")
        if not stored or not isinstance(stored, str):
            raise StorageError(
                "Blob store response has no pathname",
                details={"pathname": pathname},
            )

        logger.info("Stored blob %s", stored)
        return PutResult(pathname=stored, url=str(data.get("url") or ""))

    def close(self) -> None:
        self.client.close()


# ─── Local Filesystem ────────────────────────────────────────────────


class LocalBlobStore:
    """Stores blobs as files under ``root``. Used when no Blob token is set."""

    name = "local"

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def put(self, pathname: str, body: str, content_type: str) -> PutResult:
        """Write ``body`` to a temp file beside the target, then rename it into place.

        A failed write leaves no file behind.
        """
        stored = with_random_suffix(pathname)
        target = self.root / stored
        partial: Path | None = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                partial = Path(handle.name)
                handle.write(body)
            os.replace(partial, target)
        except OSError as exc:
            if partial is not None:
                partial.unlink(missing_ok=True)
            raise StorageError(
                f"Could not write {target}: {exc}",
                details={"pathname": pathname},
            ) from exc

        logger.info("Stored blob %s (%s) under %s", stored, content_type, self.root)
        return PutResult(pathname=stored, url=target.resolve().as_uri())

    def close(self) -> None:
        pass


# ─── Factory ─────────────────────────────────────────────────────────


def build_store(settings: Settings) -> BlobStore:
    """Vercel Blob when a token is configured, local files otherwise."""
    if settings.blob_token:
        return VercelBlobStore(
            token=settings.blob_token,
            base_url=settings.blob_api_url,
            timeout_seconds=settings.blob_timeout_seconds,
        )

    logger.info(
        "No BLOB_READ_WRITE_TOKEN set — storing submissions under %s",
        settings.storage_dir,
    )
    return LocalBlobStore(settings.storage_dir)
