from __future__ import annotations

from email_validator import EmailNotValidError, validate_email

MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> tuple[str | None, str | None]:
    """Return the normalized address, or an error message for malformed input."""
    candidate = (email or "").strip()
    if not candidate:
        return None, "Please enter your email address"
    try:
        info = validate_email(candidate, check_deliverability=False)
    except EmailNotValidError:
        return None, "Please enter a valid email address"
    return info.normalized.lower(), None


def validate_password_strength(password: str) -> tuple[bool, str | None]:
    if not password:
        return False, "Please enter your password"
    if len(password) < MIN_PASSWORD_LENGTH:
        return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    return True, None
