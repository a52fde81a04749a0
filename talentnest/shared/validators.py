"""Shared validation utilities"""

import re
from typing import Optional

WHATSAPP_NUMBER_PATTERN = re.compile(r"^\+[1-9]\d{9,14}$")
MATRIC_NUMBER_PATTERN = re.compile(r"^\d{2}-\d{2}hl\d{3}$", re.IGNORECASE)
DEFAULT_COUNTRY_CODE = "234"


def clean_phone_number(phone: str) -> str:
    """Strip everything except digits and '+'"""
    return re.sub(r"[^\d+]", "", phone or "")


def is_valid_whatsapp_number(phone: Optional[str]) -> bool:
    """
    Check that a number can be used in a WhatsApp deep link.

    After cleaning, the number must start with '+' followed by 10-15 digits
    (no leading zero in the country code).
    """
    if not phone:
        return False
    return bool(WHATSAPP_NUMBER_PATTERN.match(clean_phone_number(phone)))


def normalize_phone_number(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a Nigerian-style phone number to E.164 format.

    Args:
        phone: Phone number string in various formats ("0803 123 4567",
            "+234 803 123 4567", "2348031234567")

    Returns:
        Normalized phone number in E.164 format (+234XXXXXXXXXX)

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    cleaned = clean_phone_number(phone)

    if cleaned.startswith("+"):
        normalized = cleaned
    elif cleaned.startswith("0"):
        normalized = f"+{DEFAULT_COUNTRY_CODE}{cleaned[1:]}"
    elif cleaned.startswith(DEFAULT_COUNTRY_CODE):
        normalized = f"+{cleaned}"
    else:
        normalized = f"+{DEFAULT_COUNTRY_CODE}{cleaned}"

    if not WHATSAPP_NUMBER_PATTERN.match(normalized):
        raise ValueError("Phone number must include a country code and 10-15 digits")

    return normalized


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_matric_number(matric_number: Optional[str]) -> Optional[str]:
    """Validate a matric number such as 20-52hl077 and return it lowercased"""
    if not matric_number:
        return matric_number

    matric_number = matric_number.strip()
    if not MATRIC_NUMBER_PATTERN.match(matric_number):
        raise ValueError("Invalid matric number format (e.g., 20-52hl077)")

    return matric_number.lower()


def validate_tags(tags: Optional[list[str]], max_tags: int = 10, max_length: int = 50) -> Optional[list[str]]:
    """Trim tags, drop duplicates (case-insensitive) and enforce the limits"""
    if tags is None:
        return tags

    cleaned: list[str] = []
    seen = set()
    for tag in tags:
        tag = (tag or "").strip()
        if not tag:
            raise ValueError("Tags cannot be empty")
        if len(tag) > max_length:
            raise ValueError(f"Tags must be at most {max_length} characters")
        if tag.lower() not in seen:
            seen.add(tag.lower())
            cleaned.append(tag)

    if len(cleaned) > max_tags:
        raise ValueError(f"A service can have at most {max_tags} tags")

    return cleaned
