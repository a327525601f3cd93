"""
Deterministic submission checks.

validate_submission() trims the form fields and runs the checks in a fixed
order, raising on the first failure:

  1. terms accepted      → MissingFieldError   ("Debe aceptar términos.")
  2. required fields     → MissingFieldError   ("Faltan campos.")
  3. email pattern       → InvalidEmailError   ("Email inválido.")
  4. RUT check digit     → InvalidRutError     ("RUT inválido.")

Acceptance comes first so a form posted without consent is rejected
before any of its data is inspected.
"""

from __future__ import annotations

import re

from . import rut
from .exceptions import InvalidEmailError, InvalidRutError, MissingFieldError
from .models import ConsentPayload, ValidatedSubmission

# ─── Constants ───────────────────────────────────────────────────────

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

MSG_TERMS_NOT_ACCEPTED = "Debe aceptar términos."
MSG_MISSING_FIELDS = "Faltan campos."
MSG_INVALID_EMAIL = "Email inválido."
MSG_INVALID_RUT = "RUT inválido."


# ─── Individual Checks ───────────────────────────────────────────────


def is_valid_email(email: str) -> bool:
    """Basic ``local@domain.tld`` shape check — no whitespace, exactly one ``@``."""
    return EMAIL_RE.fullmatch(email) is not None


# ─── Orchestrator ────────────────────────────────────────────────────


def validate_submission(payload: ConsentPayload) -> ValidatedSubmission:
    """Validate a posted form and return its cleaned values.

    Raises:
        MissingFieldError: terms not accepted, or name/RUT/email empty.
        InvalidEmailError: email fails the pattern check.
        InvalidRutError: RUT is malformed or its check character is wrong.
    """
    nombre = (payload.nombre or "").strip()
    rut_empresa = (payload.rut_empresa or "").strip()
    email = (payload.email or "").strip()

    if not payload.acepta_terminos:
        raise MissingFieldError(
            MSG_TERMS_NOT_ACCEPTED,
            details={"field": "aceptaTerminos"},
            code="TERMS_NOT_ACCEPTED",
        )

    missing = [
        name
        for name, value in (("nombre", nombre), ("rutEmpresa", rut_empresa), ("email", email))
        if not value
    ]
    if missing:
        raise MissingFieldError(MSG_MISSING_FIELDS, details={"fields": missing})

    if not is_valid_email(email):
        raise InvalidEmailError(MSG_INVALID_EMAIL)

    if not rut.is_valid(rut_empresa):
        raise InvalidRutError(MSG_INVALID_RUT)

    return ValidatedSubmission(
        nombre=nombre,
        rut_empresa=rut.normalize(rut_empresa),
        email=email,
    )
