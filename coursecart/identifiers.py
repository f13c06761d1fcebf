"""
identifiers.py - Deterministic identifiers and file names for cartridge resources

Page identifiers are the same for the same (id, title) pair on every run, so
the manifest, module list and wiki metadata can all reference one page
without sharing state. They are not collision-proof; the resource registry
rejects duplicates.
"""

import re

# Contains non-hex letters, so no hashed identifier can ever equal it
FRONT_PAGE_IDENTIFIER = "gfrontpage0000000000000000000001"
FRONT_PAGE_SLUG = "front-page"

IDENTIFIER_PREFIX = "g"
HASH_WIDTH = 32

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_NON_ALNUM_RUN_RE = re.compile(r"[^a-z0-9]+")
_EXTENSION_RE = re.compile(r"\.[^/.]+$")


def _string_hash(text: str) -> int:
    """32-bit signed "hash * 31 + char" string hash."""
    h = 0
    for ch in text:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def page_identifier(page_id: str, title: str) -> str:
    """
    Generate the identifier for a page.

    The lower-cased "{page_id}_{title}" string is stripped to [a-z0-9],
    hashed, and rendered as "g" followed by 32 hex characters.
    """
    base = _NON_ALNUM_RE.sub("", f"{page_id}_{title}".lower())
    digest = format(abs(_string_hash(base)), "x")
    return IDENTIFIER_PREFIX + digest.ljust(HASH_WIDTH, "0")[:HASH_WIDTH]


def document_page_id(document_id: str) -> str:
    """Page id used for pages synthesized from uploaded documents."""
    return f"doc_{document_id}"


def sanitize_filename(name: str) -> str:
    """Lower-case, collapse non-alphanumerics to hyphens, trim hyphens."""
    return _NON_ALNUM_RUN_RE.sub("-", (name or "").lower()).strip("-")


def unique_stem(title: str, identifier: str, taken) -> str:
    """
    File stem for a page: the sanitized title, or the identifier when the
    title has no usable characters. Stems already in taken get -2, -3, ...
    """
    stem = sanitize_filename(title) or identifier
    candidate = stem
    suffix = 2
    while candidate in taken:
        candidate = f"{stem}-{suffix}"
        suffix += 1
    return candidate


def document_title(file_name: str) -> str:
    """File name without its final extension."""
    return _EXTENSION_RE.sub("", file_name or "")


def file_extension(file_name: str) -> str:
    """Final extension without the dot, or '' when there is none."""
    match = _EXTENSION_RE.search(file_name or "")
    return match.group(0)[1:] if match else ""
