"""Master-data and upload validation.

All pattern checks are shape-only (no GSTIN checksum) and case-sensitive.
Anything that is not a non-empty string is invalid.
"""

import mimetypes
from pathlib import Path
from typing import Any, Iterable

from .constants import (
    ACCEPTED_FILE_TYPES,
    EMAIL_RE,
    EXTENSION_MIME_TYPES,
    GSTIN_RE,
    INDIAN_STATES,
    MAX_FILE_SIZE,
    MAX_FILES_PER_UPLOAD,
    MOBILE_RE,
    PAN_RE,
    PINCODE_RE,
)


class UploadValidationError(ValueError):
    """Raised when a batch of files cannot be uploaded as given."""


def _matches(pattern, value: Any) -> bool:
    if not value or not isinstance(value, str):
        return False
    # fullmatch: re's `$` would also accept a trailing newline
    return pattern.fullmatch(value) is not None


def validate_gstin(gstin: Any) -> bool:
    """Check GSTIN shape: state code + PAN + entity digit + 'Z' + check char.

    Example: 29ABCDE1234F1Z5
    """
    return _matches(GSTIN_RE, gstin)


def validate_pan(pan: Any) -> bool:
    """Check PAN shape: 5 letters + 4 digits + 1 letter (ABCDE1234F)."""
    return _matches(PAN_RE, pan)


def validate_pincode(pincode: Any) -> bool:
    """Check an Indian pincode: 6 digits, no leading zero (560001)."""
    return _matches(PINCODE_RE, pincode)


def validate_mobile(mobile: Any) -> bool:
    return _matches(MOBILE_RE, mobile)


def validate_email(email: Any) -> bool:
    return _matches(EMAIL_RE, email)


# ---------------------------------------------------------------------------
# GSTIN helpers
# ---------------------------------------------------------------------------


def get_state_code_from_gstin(gstin: Any) -> str | None:
    if not validate_gstin(gstin):
        return None
    return gstin[:2]


def get_pan_from_gstin(gstin: Any) -> str | None:
    if not validate_gstin(gstin):
        return None
    return gstin[2:12]


def get_state_name(state_code: str | None) -> str | None:
    """Return the state name for a 2-digit GST state code, if known."""
    if not state_code:
        return None
    return INDIAN_STATES.get(state_code)


def is_intra_state_transaction(supplier_gstin: Any, recipient_gstin: Any) -> bool:
    """True when both GSTINs are valid and share a state code.

    Intra-state supplies are taxed as CGST + SGST, everything else as IGST.
    """
    if not validate_gstin(supplier_gstin) or not validate_gstin(recipient_gstin):
        return False
    return supplier_gstin[:2] == recipient_gstin[:2]


# ---------------------------------------------------------------------------
# Vendor form
# ---------------------------------------------------------------------------


def validate_vendor(payload: dict[str, Any]) -> list[str]:
    """Validate a vendor create/update payload before it is sent.

    Returns a list of error messages, empty when the payload is acceptable.
    Optional fields are only checked when present and non-empty.
    """
    errors: list[str] = []

    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("Vendor name is required")

    gstin = payload.get("gstin")
    if gstin and not validate_gstin(gstin):
        errors.append("Invalid GSTIN format")

    pan = payload.get("pan")
    if pan and not validate_pan(pan):
        errors.append("Invalid PAN format")

    email = payload.get("email")
    if email and not validate_email(email):
        errors.append("Invalid email format")

    pincode = payload.get("pincode")
    if pincode and not validate_pincode(pincode):
        errors.append("Invalid pincode format")

    terms = payload.get("paymentTermsDays")
    if terms is not None:
        if isinstance(terms, bool) or not isinstance(terms, int) or terms <= 0:
            errors.append("Payment terms must be a positive number of days")

    return errors


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------


def guess_mime_type(path: Path) -> str | None:
    """MIME type for an accepted upload, or None when the type is not accepted."""
    suffix = path.suffix.lower()
    if suffix in EXTENSION_MIME_TYPES:
        return EXTENSION_MIME_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(path.name)
    if guessed in ACCEPTED_FILE_TYPES:
        return guessed
    return None


def validate_upload_files(
    paths: Iterable[str | Path],
    max_files: int = MAX_FILES_PER_UPLOAD,
    max_size: int = MAX_FILE_SIZE,
) -> list[Path]:
    """Check a batch of files against the upload limits.

    Returns the resolved paths. Raises UploadValidationError on the first
    problem found, with the message the upload screen would show.
    """
    files = [Path(p) for p in paths]
    if not files:
        raise UploadValidationError("No files selected")
    if len(files) > max_files:
        raise UploadValidationError(f"Maximum {max_files} files allowed")

    for path in files:
        if not path.is_file():
            raise UploadValidationError(f"File not found: {path}")
        if guess_mime_type(path) is None:
            raise UploadValidationError(
                f"Unsupported file type: {path.name} "
                "(accepted: PDF, Excel, CSV, JPEG, PNG)"
            )
        if path.stat().st_size > max_size:
            limit_mb = max_size // (1024 * 1024)
            raise UploadValidationError(
                f"One or more files exceed the {limit_mb}MB limit ({path.name})"
            )

    return files
