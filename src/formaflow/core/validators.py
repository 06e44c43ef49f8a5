"""Field validators shared by the pydantic schemas and the CLI.

All of them raise ``ValueError`` so pydantic reports failures as 422s.
"""

import html
import re

TAG_PATTERN = re.compile(r"<[^>]+>")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
SITE_CODE_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9_-]{1,19}$")


def sanitize_html(value: str | None) -> str | None:
    """Drop markup, escape what is left; blank results become ``None``."""
    if not value:
        return None
    text = html.escape(TAG_PATTERN.sub("", value), quote=True).strip()
    return text or None


def validate_text(
    value: str,
    field_name: str = "Field",
    min_length: int = 1,
    max_length: int = 200,
) -> str:
    """Trim, bound-check and sanitize a free-text field such as a title or location."""
    text = (value or "").strip()
    if not text:
        raise ValueError(f"{field_name} cannot be empty")
    if len(text) < min_length:
        raise ValueError(f"{field_name} must be at least {min_length} characters")
    if len(text) > max_length:
        raise ValueError(f"{field_name} cannot exceed {max_length} characters")

    sanitized = sanitize_html(text)
    if sanitized is None:
        raise ValueError(f"{field_name} cannot be empty")
    return sanitized


def validate_email(value: str) -> str:
    email = value.strip()
    if EMAIL_PATTERN.fullmatch(email) is None:
        raise ValueError("Invalid email format")
    return email.lower()


def validate_site_code(value: str) -> str:
    """Codes are stored uppercase, e.g. ``CASA-01``."""
    code = value.strip().upper()
    if SITE_CODE_PATTERN.fullmatch(code) is None:
        raise ValueError(
            "Site code must be 2-20 characters: letters, digits, hyphens or underscores"
        )
    return code
