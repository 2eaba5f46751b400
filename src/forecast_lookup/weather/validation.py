"""Syntactic checks and sanitization for user-supplied locations."""

import re
from enum import Enum
from typing import Any, List, Optional

ZIP_CODE_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")

_SCRIPT_BLOCK = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_MARKUP_TAG = re.compile(r"<[^>]*>")
_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9\s\-.,]")
_WHITESPACE_RUN = re.compile(r"\s+")


class InputError(str, Enum):
    """Reasons a location input is rejected, valued by the user-facing message."""
    MISSING_LOCATION = "Please provide either an address, zip code, or coordinates"
    INVALID_ADDRESS = "Please provide a valid address"
    INVALID_ZIP_CODE = "Please provide a valid zip code"
    INVALID_COORDINATES = "Please provide valid coordinates"

    @property
    def message(self) -> str:
        return self.value


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_location_input(
    address: Optional[str] = None,
    zip_code: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> List[InputError]:
    """Check every location form and report all problems found.

    Args:
        address: Free-text address
        zip_code: US zip code
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees

    Returns:
        List of input errors, empty when the input is usable
    """
    errors: List[InputError] = []
    has_coordinates = latitude is not None and longitude is not None

    if _is_blank(address) and _is_blank(zip_code) and not has_coordinates:
        errors.append(InputError.MISSING_LOCATION)

    if not _is_blank(address) and not is_valid_address(address):
        errors.append(InputError.INVALID_ADDRESS)

    if not _is_blank(zip_code) and not is_valid_zip_code(zip_code):
        errors.append(InputError.INVALID_ZIP_CODE)

    if has_coordinates and not is_valid_coordinates(latitude, longitude):
        errors.append(InputError.INVALID_COORDINATES)

    return errors


def is_valid_address(address: Optional[str]) -> bool:
    """At least 3 characters, not only digits, and containing a letter."""
    if _is_blank(address):
        return False

    text = str(address).strip()
    return (
        len(text) >= 3
        and not text.isdigit()
        and re.search(r"[A-Za-z]", text) is not None
    )


def is_valid_zip_code(zip_code: Optional[str]) -> bool:
    """5 digits, optionally followed by a hyphen and 4 more digits."""
    if _is_blank(zip_code):
        return False
    return ZIP_CODE_PATTERN.match(str(zip_code).strip()) is not None


def is_valid_coordinates(latitude: Optional[float], longitude: Optional[float]) -> bool:
    if latitude is None or longitude is None:
        return False

    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        return False

    return -90 <= lat <= 90 and -180 <= lon <= 180


def sanitize_location_input(value: Optional[str]) -> Optional[str]:
    """Strip markup and unexpected characters from free-text input.

    Returns:
        The cleaned text, or None if nothing is left
    """
    if _is_blank(value):
        return None

    sanitized = str(value).strip()
    sanitized = _SCRIPT_BLOCK.sub("", sanitized)
    sanitized = _MARKUP_TAG.sub("", sanitized)
    sanitized = _DISALLOWED_CHARS.sub("", sanitized)
    sanitized = _WHITESPACE_RUN.sub(" ", sanitized).strip()

    return sanitized or None
