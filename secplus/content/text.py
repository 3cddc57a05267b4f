"""
Text helpers shared by the generators.

Slugs, title casing, whitespace normalisation and content-hash ids.
"""

from __future__ import annotations

import hashlib
import re
from typing import Any

# Acronyms restored after title-casing a term
TITLE_ACRONYMS = (
    "IoT", "XSS", "SQL", "DNS", "IP", "VPN", "API", "MFA", "PKI", "AAA", "CIA",
    "NIST", "SCAP", "TOCTOU", "TPM", "DLP", "FIM", "IAM", "NGFW", "NAT", "SAST",
    "BIA", "AD", "SLA", "IOC",
)

_WHITESPACE = re.compile(r"\s+")
_PARENTHESISED = re.compile(r"\s*\([^)]*\)\s*")
_NON_SLUG_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_DASH_RUNS = re.compile(r"-+")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_ACRONYM_PATTERNS = [
    (re.compile(rf"\b{acronym}\b", re.IGNORECASE), acronym) for acronym in TITLE_ACRONYMS
]


def normalize_whitespace(value: Any) -> str:
    """Collapse whitespace runs to single spaces and strip. None becomes ''."""
    if value is None:
        return ""
    return _WHITESPACE.sub(" ", str(value)).strip()


def to_kebab(text: str) -> str:
    """
    Build a concept slug.

    Parenthesised asides are dropped ("Trusted Platform Module (TPM)" ->
    "trusted-platform-module"), punctuation other than dashes is removed and
    the result is lowercase kebab-case.
    """
    slug = _PARENTHESISED.sub(" ", text or "")
    slug = _NON_SLUG_CHARS.sub("", slug).strip()
    slug = _WHITESPACE.sub("-", slug).lower()
    slug = _DASH_RUNS.sub("-", slug)
    return slug.strip("-")


def slugify(text: str, max_len: int = 60) -> str:
    """Tag slug: lowercase alphanumerics joined by single dashes."""
    slug = _NON_ALNUM.sub("-", normalize_whitespace(text).lower()).strip("-")
    return slug[:max_len]


def to_title_case(text: str) -> str:
    """Capitalise every word, keeping well-known acronyms upper case."""
    words = (text or "").split()
    result = " ".join(w[:1].upper() + w[1:].lower() for w in words)
    for pattern, acronym in _ACRONYM_PATTERNS:
        result = pattern.sub(acronym, result)
    return result


def content_id(prefix: str, *parts: str) -> str:
    """Stable id: prefix + first 12 hex chars of sha1 over the joined parts."""
    digest = hashlib.sha1("||".join(parts).encode("utf-8")).hexdigest()
    return f"{prefix}-{digest[:12]}"
