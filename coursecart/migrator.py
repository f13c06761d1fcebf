"""
migrator.py - Rewrite relative links in page content to Canvas URLs

Relative page links become Canvas page URLs; relative file and image
references become file download/preview URLs with a FILE_ID placeholder,
since attachments are not embedded in the cartridge. Every rewritten file
produces an issue so the author knows what to upload after import.
Tables get the Canvas data-api attributes of the course. Heading levels
are checked too, but only reported.

Classification is done on the URL string alone: no network access.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import BeautifulSoup

from coursecart.errors import ConfigurationError
from coursecart.identifiers import sanitize_filename

log = logging.getLogger(__name__)

COURSE_PLACEHOLDER = "COURSE_ID"
FILE_PLACEHOLDER = "FILE_ID"

DOCUMENT_EXTENSIONS = {"pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "zip", "txt"}
IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "svg", "webp", "bmp"}
PAGE_EXTENSIONS = {"html", "htm"}

FLAVORS = {
    "canvas": {
        "page": "/courses/{course}/pages/{slug}",
        "download": "/courses/{course}/files/{file}/download?wrap=1",
        "preview": "/courses/{course}/files/{file}/preview",
        "files_api": "/api/v1/courses/{course}/files",
        "course_api": "/api/v1/courses/{course}",
    },
}

_ABSOLUTE_RE = re.compile(r"^(https?:|//|mailto:|tel:|data:|javascript:|#)", re.IGNORECASE)
_HEADING_RE = re.compile(r"^h[1-6]$")


@dataclass
class MigrationResult:
    html: str
    issues: List[str] = field(default_factory=list)
    migrated_count: int = 0


# ============================================================================
# URL predicates
# ============================================================================

def url_path(url: str) -> str:
    """URL without query string or fragment."""
    return re.split(r"[?#]", url.strip(), maxsplit=1)[0]


def url_extension(url: str) -> str:
    last = url_path(url).rstrip("/").rsplit("/", 1)[-1]
    return last.rsplit(".", 1)[1].lower() if "." in last else ""


def is_absolute_url(url: str) -> bool:
    return not url.strip() or bool(_ABSOLUTE_RE.match(url.strip()))


def is_file_reference(url: str) -> bool:
    ext = url_extension(url)
    return ext in DOCUMENT_EXTENSIONS or ext in IMAGE_EXTENSIONS


def is_page_reference(url: str) -> bool:
    path = url_path(url)
    return (
        url_extension(url) in PAGE_EXTENSIONS
        or "/pages/" in path
        or "/" not in path
    )


def file_name(url: str) -> str:
    return url_path(url).rstrip("/").rsplit("/", 1)[-1]


def page_slug(url: str) -> str:
    """Canvas page slug for a relative page link."""
    name = file_name(url)
    if url_extension(url) in PAGE_EXTENSIONS:
        name = name.rsplit(".", 1)[0]
    return sanitize_filename(name)


# ============================================================================
# Migrator
# ============================================================================

class LinkMigrator:
    """Rewrites references in one page's HTML for a target platform."""

    def __init__(self, course_id: Optional[str] = None, flavor: str = "canvas"):
        if flavor not in FLAVORS:
            raise ConfigurationError(
                message=f"Unknown link flavor: {flavor}",
                suggestion=f"Use one of: {', '.join(sorted(FLAVORS))}",
                context={"flavor": flavor},
            )
        self.course_id = str(course_id) if course_id else COURSE_PLACEHOLDER
        self.flavor = flavor
        self.urls = FLAVORS[flavor]

    def _url(self, kind: str, **values) -> str:
        return self.urls[kind].format(course=self.course_id, file=FILE_PLACEHOLDER, **values)

    def migrate(self, html: str) -> MigrationResult:
        soup = BeautifulSoup(html or "", "html.parser")
        result = MigrationResult(html="")

        for anchor in soup.find_all("a", href=True):
            href = anchor["href"]
            if is_absolute_url(href):
                continue
            if is_file_reference(href):
                anchor["href"] = self._url("download")
                result.issues.append(
                    f"File reference found: {file_name(href)} - will need to be uploaded to Canvas files"
                )
            elif is_page_reference(href):
                anchor["href"] = self._url("page", slug=page_slug(href))
            else:
                continue
            result.migrated_count += 1

        for tag in soup.find_all(src=True):
            src = tag["src"]
            if is_absolute_url(src):
                continue
            if tag.name == "img":
                tag["src"] = self._url("preview")
                if not tag.has_attr("data-api-endpoint"):
                    tag["data-api-endpoint"] = self._url("files_api")
                if not tag.has_attr("data-api-returntype"):
                    tag["data-api-returntype"] = "File"
                result.issues.append(
                    f"Image reference found: {file_name(src)} - will need to be uploaded to Canvas files"
                )
            elif is_file_reference(src):
                tag["src"] = self._url("preview")
                result.issues.append(
                    f"File reference found: {file_name(src)} - will need to be uploaded to Canvas files"
                )
            else:
                continue
            result.migrated_count += 1

        # Canvas resolves tables against the course API
        placeholder = self.urls["course_api"].format(course=COURSE_PLACEHOLDER)
        for table in soup.find_all("table"):
            if table.get("data-api-endpoint") in (None, placeholder):
                table["data-api-endpoint"] = self._url("course_api")
            if not table.has_attr("data-api-returntype"):
                table["data-api-returntype"] = "Page"

        result.issues.extend(heading_issues(soup))
        result.html = str(soup)

        if result.migrated_count:
            log.debug("Migrated %d references", result.migrated_count)
        return result


def heading_issues(soup: BeautifulSoup) -> List[str]:
    """Report headings that skip levels (h2 followed by h4, ...)."""
    issues = []
    previous = 1
    for heading in soup.find_all(_HEADING_RE):
        level = int(heading.name[1])
        if level > previous + 1:
            issues.append(f"Heading level {level} follows h{previous} - consider fixing heading hierarchy")
        previous = level
    return issues


def migrate_links(html: str, course_id: Optional[str] = None, flavor: str = "canvas") -> MigrationResult:
    """Convenience wrapper around LinkMigrator.migrate()."""
    return LinkMigrator(course_id=course_id, flavor=flavor).migrate(html)
