"""Slug helpers - human-readable identifiers for locally managed workflows."""

import re
import secrets
import string

_ALPHABET = string.ascii_lowercase + string.digits
_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def create_slug(text: str) -> str:
    """
    Create a slug from free text.

    Lowercases, drops anything that is not a letter, digit, whitespace,
    underscore or hyphen, turns whitespace/underscore runs into a hyphen,
    collapses repeated hyphens and trims hyphens from both ends.

    Examples:
        "My Cron Job #1 (daily)" -> "my-cron-job-1-daily"
        "" -> ""
    """
    slug = text.lower().strip()
    slug = re.sub(r"[^a-z0-9\s_-]", "", slug)
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _random_id(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def create_unique_slug(text: str) -> str:
    """Create a slug with a random 6-character suffix (36^6 space)."""
    return f"{create_slug(text)}-{_random_id(6)}"


def is_valid_slug(slug: str) -> bool:
    """
    Check slug format: lowercase alphanumeric groups joined by single hyphens.

    Stricter than create_slug's input handling - "my_workflow" or
    "my--workflow" are rejected here even though create_slug would
    normalize them.
    """
    return bool(_SLUG_PATTERN.match(slug))


def generate_slug(length: int = 12) -> str:
    """Generate a random lowercase slug."""
    return _random_id(length)
