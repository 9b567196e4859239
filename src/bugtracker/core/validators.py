import re

# Deliberately loose: deliverability is not checked here, only shape.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    """Trim and lowercase an email address for storage and comparison."""
    return email.strip().lower()


def validate_email(email: str) -> str:
    """Normalize an email and check its shape. Raises ValueError if malformed."""
    normalized = normalize_email(email)
    if len(normalized) > 255 or not _EMAIL_RE.match(normalized):
        raise ValueError(f"Invalid email address: {email!r}")
    return normalized
