"""
Pydantic models for consent submissions.

The inbound payload is lenient (every field optional) so that missing
fields reach our own validators and get the form's error messages. The
persisted record is strict and serializes with the form's camelCase keys.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ─── Inbound ────────────────────────────────────────────────────────


class ConsentPayload(BaseModel):
    """JSON body posted by the consent form."""

    model_config = ConfigDict(populate_by_name=True)

    nombre: Optional[str] = None
    rut_empresa: Optional[str] = Field(default=None, alias="rutEmpresa")
    email: Optional[str] = None
    acepta_terminos: Optional[bool] = Field(default=None, alias="aceptaTerminos")


class ClientInfo(BaseModel):
    """Where the submission came from, as reported by forwarding headers."""

    ip: str = "0.0.0.0"
    user_agent: str = ""


# ─── Validated / Persisted ──────────────────────────────────────────


class ValidatedSubmission(BaseModel):
    """Trimmed form values after every check passed. RUT is normalized."""

    nombre: str
    rut_empresa: str
    email: str


class ConsentRecord(BaseModel):
    """The JSON object written to blob storage."""

    nombre: str
    rut_empresa: str = Field(serialization_alias="rutEmpresa")
    email: str
    acepta_terminos: bool = Field(default=True, serialization_alias="aceptaTerminos")
    accepted_at: str = Field(serialization_alias="acceptedAt")  # ISO-8601 UTC, ms precision
    ip: str
    user_agent: str = Field(serialization_alias="userAgent")


class PutResult(BaseModel):
    """What a blob store reports back after a successful write."""

    pathname: str
    url: str
