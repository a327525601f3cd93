"""
Submission service — orchestrates one consent write.

Flow:
  ConsentPayload ─► validate_submission ─► ConsentRecord ─► BlobStore.put ─► id

Either every check passes and exactly one record is written, or an
exception is raised and nothing is written.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .models import ClientInfo, ConsentPayload, ConsentRecord
from .storage import BlobStore, submission_pathname
from .validators import validate_submission

logger = logging.getLogger(__name__)

CONTENT_TYPE_JSON = "application/json"


def iso_timestamp(now: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a ``Z`` suffix: ``2024-01-15T10:30:00.000Z``."""
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ConsentService:
    """Validates consent submissions and persists the accepted ones.

    Usage:
        service = ConsentService(LocalBlobStore("data"))
        record_id = service.submit(payload, ClientInfo(ip="1.2.3.4"))
    """

    def __init__(self, store: BlobStore):
        self.store = store

    def build_record(
        self, payload: ConsentPayload, client: ClientInfo, now: datetime
    ) -> ConsentRecord:
        """Validate ``payload`` and assemble the record to persist.

        Raises:
            SubmissionValidationError: any check failed.
        """
        submission = validate_submission(payload)
        return ConsentRecord(
            nombre=submission.nombre,
            rut_empresa=submission.rut_empresa,
            email=submission.email,
            acepta_terminos=True,
            accepted_at=iso_timestamp(now),
            ip=client.ip,
            user_agent=client.user_agent,
        )

    def submit(
        self,
        payload: ConsentPayload,
        client: ClientInfo,
        now: datetime | None = None,
    ) -> str:
        """Validate, write, and return the stored record's pathname.

        Raises:
            SubmissionValidationError: the submission was rejected (nothing written).
            StorageError: the blob write failed.
        """
        now = now or datetime.now(timezone.utc)
        record = self.build_record(payload, client, now)

        result = self.store.put(
            submission_pathname(now),
            record.model_dump_json(by_alias=True),
            CONTENT_TYPE_JSON,
        )
        logger.info("Consent recorded for RUT %s as %s", record.rut_empresa, result.pathname)
        return result.pathname
