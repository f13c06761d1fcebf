"""
models.py - In-memory course representation

CourseData is what the authoring surface edits and what the export pipeline
reads. The page-list operations keep WikiPage.order equal to the 1-based
position of each page after every mutation.
"""

from __future__ import annotations

import html
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from coursecart.identifiers import FRONT_PAGE_SLUG, document_title, page_identifier, unique_stem


@dataclass
class FrontPage:
    """The course home page (exactly one per course)"""
    title: str = "Welcome to the Course"
    content: str = ""
    welcome_message: str = "Welcome to our learning journey!"


@dataclass
class WikiPage:
    """A content page; order is its 1-based position"""
    id: str
    title: str
    content: str = ""
    order: int = 1
    is_published: bool = True


@dataclass
class UploadedDocument:
    """An uploaded file; exported as a synthesized placeholder page"""
    id: str
    name: str
    data: bytes = b""
    mime_type: Optional[str] = None
    url: Optional[str] = None  # display handle only, never exported

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class Resource:
    """A registry entry rendered into the manifest"""
    identifier: str
    type: str
    title: str
    href: str
    dependencies: Tuple[str, ...] = ()
    published: bool = True
    content: str = ""


def new_page_id() -> str:
    """Generate an opaque page id."""
    return uuid.uuid4().hex[:16]


def page_stems(pages: List["WikiPage"]) -> List[str]:
    """
    Archive file stems of pages in navigation order.

    The front page owns front-page; colliding titles are numbered the same
    way the cartridge assembler numbers them, so a stem is also the page's
    Canvas url.
    """
    taken = {FRONT_PAGE_SLUG}
    stems = []
    for page in pages:
        stem = unique_stem(page.title, page_identifier(page.id, page.title), taken)
        taken.add(stem)
        stems.append(stem)
    return stems


def default_front_page_content(course: "CourseData") -> str:
    """
    Welcome page for courses that bring no front page of their own.

    Published pages are linked by their url, relative to the front page, so
    the links resolve inside the imported course.
    """
    front = course.front_page
    esc = html.escape
    lines = [
        f"<h1>{esc(front.title)}</h1>",
        f"<p>{esc(front.welcome_message)}</p>",
        "<h2>Course Information</h2>",
        f"<p><strong>Course:</strong> {esc(course.title)}</p>",
        f"<p><strong>Code:</strong> {esc(course.code)}</p>",
    ]
    if course.term:
        lines.append(f"<p><strong>Term:</strong> {esc(course.term)}</p>")
    if course.description:
        lines.append(f"<p><strong>Description:</strong> {esc(course.description)}</p>")

    published = [
        (page, stem) for page, stem in zip(course.pages, page_stems(course.pages))
        if page.is_published
    ]
    if published:
        lines.append("<h2>Course Pages</h2>")
        lines.append("<ul>")
        for page, stem in published:
            lines.append(f'<li><a href="{stem}">{esc(page.title)}</a></li>')
        lines.append("</ul>")

    lines.append("<h2>Getting Started</h2>")
    lines.append("<p>Please review the course pages and familiarize yourself with the content structure.</p>")
    return "\n".join(lines)


@dataclass
class CourseData:
    """
    Root aggregate for one course.

    A course constructed without a front page gets the generated welcome
    page, built from the pages it was constructed with. A front page that
    is given is kept as is, even when blank.
    """
    title: str = ""
    code: str = ""
    description: str = ""
    term: str = ""
    start_date: str = ""
    end_date: str = ""
    front_page: Optional[FrontPage] = None
    pages: List[WikiPage] = field(default_factory=list)
    documents: List[UploadedDocument] = field(default_factory=list)

    def __post_init__(self):
        if self.front_page is None:
            self.front_page = FrontPage()
            self.front_page.content = default_front_page_content(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CourseData":
        """Build course data from a plain mapping (snake_case keys)."""
        front = data.get("front_page") or {}
        pages = []
        for i, raw in enumerate(data.get("pages") or [], start=1):
            pages.append(WikiPage(
                id=str(raw.get("id") or new_page_id()),
                title=str(raw.get("title", "")),
                content=raw.get("content") or "",
                order=int(raw.get("order") or i),
                is_published=bool(raw.get("is_published", raw.get("published", True))),
            ))
        documents = []
        for raw in data.get("documents") or []:
            payload = raw.get("data") or b""
            if isinstance(payload, str):
                payload = payload.encode("utf-8")
            documents.append(UploadedDocument(
                id=str(raw.get("id") or new_page_id()),
                name=str(raw.get("name", "")),
                data=payload,
                mime_type=raw.get("mime_type"),
            ))

        pages.sort(key=lambda p: p.order)
        front_page = None
        if "front_page" in data:
            front_page = FrontPage(
                title=str(front.get("title") or ""),
                content=front.get("content") or "",
                welcome_message=front.get("welcome_message") or "",
            )

        course = cls(
            title=str(data.get("title") or ""),
            code=str(data.get("code") or ""),
            description=str(data.get("description") or ""),
            term=str(data.get("term") or ""),
            start_date=str(data.get("start_date") or ""),
            end_date=str(data.get("end_date") or ""),
            front_page=front_page,
            pages=pages,
            documents=documents,
        )
        course.renumber_pages()
        return course

    # ------------------------------------------------------------------
    # Page list editing
    # ------------------------------------------------------------------

    def renumber_pages(self) -> None:
        """Reset every page's order to its 1-based position."""
        for i, page in enumerate(self.pages, start=1):
            page.order = i

    def find_page(self, page_id: str) -> Optional[WikiPage]:
        return next((p for p in self.pages if p.id == page_id), None)

    def add_page(
        self,
        title: str,
        content: Optional[str] = None,
        page_id: Optional[str] = None,
        is_published: bool = True,
    ) -> WikiPage:
        """Append a page at the end of the navigation order."""
        if content is None:
            content = f"<h1>{html.escape(title)}</h1>\n<p>Add your content here...</p>"
        page = WikiPage(
            id=page_id or new_page_id(),
            title=title,
            content=content,
            order=len(self.pages) + 1,
            is_published=is_published,
        )
        self.pages.append(page)
        self.renumber_pages()
        return page

    def add_page_from_document(self, document: UploadedDocument) -> WikiPage:
        """Create an editable page describing an uploaded document."""
        title = document_title(document.name)
        name = html.escape(document.name)
        content = (
            f"<h1>{html.escape(title)}</h1>\n"
            f'<div class="document-content">\n'
            f"  <p><strong>Document:</strong> {name}</p>\n"
            f"  <p>This page was created from an uploaded document. "
            f"You can edit the content below or add additional information.</p>\n"
            f"</div>\n"
            f"<h2>Document Content</h2>\n"
            f"<p>Add the document content or description here...</p>"
        )
        return self.add_page(title, content=content)

    def update_page(self, page_id: str, **changes: Any) -> WikiPage:
        """Change title, content or is_published of a page in place."""
        allowed = {"title", "content", "is_published"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Cannot update page fields: {', '.join(sorted(unknown))}")
        page = self.find_page(page_id)
        if page is None:
            raise KeyError(page_id)
        for key, value in changes.items():
            setattr(page, key, value)
        return page

    def delete_page(self, page_id: str) -> bool:
        """Remove a page; returns False when no page has that id."""
        before = len(self.pages)
        self.pages = [p for p in self.pages if p.id != page_id]
        self.renumber_pages()
        return len(self.pages) != before

    def move_page_up(self, index: int) -> None:
        """Swap the page at index with its predecessor."""
        if index <= 0 or index >= len(self.pages):
            return
        self.pages[index - 1], self.pages[index] = self.pages[index], self.pages[index - 1]
        self.renumber_pages()

    def move_page_down(self, index: int) -> None:
        """Swap the page at index with its successor."""
        if index < 0 or index >= len(self.pages) - 1:
            return
        self.pages[index], self.pages[index + 1] = self.pages[index + 1], self.pages[index]
        self.renumber_pages()

    def snapshot(self) -> "CourseData":
        """Copy that later edits to this course cannot affect."""
        return replace(
            self,
            front_page=replace(self.front_page),
            pages=[replace(p) for p in self.pages],
            documents=[replace(d) for d in self.documents],
        )
