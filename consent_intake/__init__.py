"""
Consent Intake — validate and persist consent-form submissions.

Architecture: Request → Validation (RUT check digit, email) → Record → Blob store
Philosophy:  Reject early with a clear message. Write exactly one record or nothing.
"""

__version__ = "1.0.0"
