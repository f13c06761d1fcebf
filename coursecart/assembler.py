"""
assembler.py - Build a Canvas-flavored Common Cartridge (.imscc) in memory

Pipeline:
1. validate the course (nothing is built from malformed data)
2. register the front page under its fixed identifier
3. register one resource per page, in navigation order
4. register one resource per uploaded document (synthesized page)
5. render imsmanifest.xml and the course_settings/*.xml files
6. render one wiki_content/*.html file per registered page
7. pack every entry into a ZIP archive

Cartridge layout:
    imsmanifest.xml
    course_settings/course_settings.xml
    course_settings/module_meta.xml
    course_settings/wiki_content.xml
    wiki_content/front-page.html
    wiki_content/<page-title>.html

Every assembly owns its registry; nothing is shared between exports.
"""

import asyncio
import io
import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Callable, List, Optional, Tuple

from coursecart.documents import conversion_failed_notice, document_placeholder_content
from coursecart.errors import UnsupportedDocumentFormatError, archive_finalization_error
from coursecart.generators import (
    COURSE_SETTINGS_PATH,
    MANIFEST_PATH,
    MODULE_META_PATH,
    WIKI_CONTENT_PATH,
    generate_course_settings,
    generate_manifest,
    generate_module_meta,
    generate_wiki_content,
)
from coursecart.identifiers import (
    FRONT_PAGE_IDENTIFIER,
    FRONT_PAGE_SLUG,
    document_page_id,
    document_title,
    page_identifier,
    unique_stem,
)
from coursecart.migrator import LinkMigrator
from coursecart.models import CourseData, Resource, UploadedDocument
from coursecart.page_renderer import render_page
from coursecart.registry import RESOURCE_TYPE_WIKI_PAGE, ResourceRegistry
from coursecart.sanitizer import sanitize_html
from coursecart.validation import ensure_valid

log = logging.getLogger(__name__)

WIKI_DIR = "wiki_content"
FRONT_PAGE_HREF = f"{WIKI_DIR}/{FRONT_PAGE_SLUG}.html"

# Fixed entry timestamp so identical courses produce identical bytes
ENTRY_TIMESTAMP = (1980, 1, 1, 0, 0, 0)

DocumentConverter = Callable[[bytes, Optional[str]], str]


@dataclass
class ExportResult:
    """A finished cartridge plus the non-fatal issues found on the way"""
    archive: bytes
    issues: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.archive)

    def write(self, path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.archive)
        return path


class CartridgeAssembler:
    """Turns one CourseData into one cartridge archive."""

    def __init__(
        self,
        course: CourseData,
        course_id: Optional[str] = None,
        flavor: str = "canvas",
        migrate_links: bool = False,
        converter: Optional[DocumentConverter] = None,
    ):
        # Later edits to the caller's course must not leak into this export
        self.course = course.snapshot()
        self.migrator = LinkMigrator(course_id=course_id, flavor=flavor) if migrate_links else None
        self.converter = converter
        self.registry = ResourceRegistry()
        self.issues: List[str] = []

    # ------------------------------------------------------------------
    # Content preparation
    # ------------------------------------------------------------------

    def prepare_content(self, content: str) -> str:
        """Sanitize, then optionally migrate links."""
        html = sanitize_html(content)
        if self.migrator is not None:
            result = self.migrator.migrate(html)
            self.issues.extend(result.issues)
            html = result.html
        return html

    def document_content(self, document: UploadedDocument) -> str:
        content = document_placeholder_content(document)
        if self.converter is None:
            return content

        try:
            converted = self.converter(document.data, document.mime_type)
        except UnsupportedDocumentFormatError as e:
            log.warning("Could not convert %s: %s", document.name, e.message)
            self.issues.append(
                f"Document {document.name} could not be converted - placeholder page created"
            )
            return f"{content}\n{conversion_failed_notice(document)}"

        return f"{content}\n<h2>Document Content</h2>\n{converted}"

    def unique_href(self, title: str, identifier: str) -> str:
        """wiki_content path for a title; -2, -3, ... on collision."""
        taken = {PurePosixPath(r.href).stem for r in self.registry.all()}
        return f"{WIKI_DIR}/{unique_stem(title, identifier, taken)}.html"

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_front_page(self):
        front = self.course.front_page
        self.registry.add(Resource(
            identifier=FRONT_PAGE_IDENTIFIER,
            type=RESOURCE_TYPE_WIKI_PAGE,
            title=front.title,
            href=FRONT_PAGE_HREF,
            published=True,
            content=self.prepare_content(front.content),
        ))

    def register_pages(self):
        for page in self.course.pages:
            identifier = page_identifier(page.id, page.title)
            self.registry.add(Resource(
                identifier=identifier,
                type=RESOURCE_TYPE_WIKI_PAGE,
                title=page.title,
                href=self.unique_href(page.title, identifier),
                published=page.is_published,
                content=self.prepare_content(page.content),
            ))

    def register_documents(self):
        for document in self.course.documents:
            title = document_title(document.name) or document.name
            identifier = page_identifier(document_page_id(document.id), title)
            self.registry.add(Resource(
                identifier=identifier,
                type=RESOURCE_TYPE_WIKI_PAGE,
                title=title,
                href=self.unique_href(title, identifier),
                published=True,
                content=self.prepare_content(self.document_content(document)),
            ))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_entries(self) -> List[Tuple[str, str]]:
        """(archive path, text) pairs in archive order."""
        entries = [
            (MANIFEST_PATH, generate_manifest(self.course, self.registry)),
            (COURSE_SETTINGS_PATH, generate_course_settings(self.course, self.registry)),
            (MODULE_META_PATH, generate_module_meta(self.course, self.registry)),
            (WIKI_CONTENT_PATH, generate_wiki_content(self.course, self.registry)),
        ]
        for resource in self.registry.by_type(RESOURCE_TYPE_WIKI_PAGE):
            html = render_page(resource.title, resource.content, resource.identifier, resource.published)
            entries.append((resource.href, html))
            log.debug("Rendered %s", resource.href)
        return entries

    def finalize(self, entries: List[Tuple[str, str]]) -> bytes:
        """Pack entries into ZIP bytes."""
        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
                for name, text in entries:
                    info = zipfile.ZipInfo(name, date_time=ENTRY_TIMESTAMP)
                    info.compress_type = zipfile.ZIP_DEFLATED
                    info.external_attr = 0o644 << 16
                    zf.writestr(info, text.encode("utf-8"))
        except (OSError, ValueError, MemoryError, zipfile.LargeZipFile) as e:
            raise archive_finalization_error(len(entries), e) from e
        return buffer.getvalue()

    def assemble(self) -> ExportResult:
        """Run the whole pipeline; raises before anything is built on bad data."""
        ensure_valid(self.course)

        self.registry = ResourceRegistry()
        self.issues = []

        log.info("Assembling cartridge: %s (%s)", self.course.title, self.course.code)
        self.register_front_page()
        self.register_pages()
        self.register_documents()
        log.info("Registered %d pages", len(self.registry))

        entries = self.render_entries()
        archive = self.finalize(entries)
        log.info("Packed %d files (%.1f KB)", len(entries), len(archive) / 1024)

        return ExportResult(
            archive=archive,
            issues=list(self.issues),
            files=[name for name, _ in entries],
        )


def export_course(
    course: CourseData,
    course_id: Optional[str] = None,
    flavor: str = "canvas",
    migrate_links: bool = False,
    converter: Optional[DocumentConverter] = None,
) -> ExportResult:
    """Export a course as a Common Cartridge archive."""
    assembler = CartridgeAssembler(
        course,
        course_id=course_id,
        flavor=flavor,
        migrate_links=migrate_links,
        converter=converter,
    )
    return assembler.assemble()


async def export_course_async(course: CourseData, **options) -> ExportResult:
    """Await export_course() running in a worker thread."""
    snapshot = course.snapshot()
    return await asyncio.to_thread(export_course, snapshot, **options)
