"""
loader.py - Read a course directory into CourseData

Layout:
    course.yaml          title, code, description, term, dates, front_page
    pages/*.md|*.html    one page per file; frontmatter: title, id, order, published
    documents/*          uploaded documents, exported as placeholder pages

Markdown pages are converted to HTML. Pages are ordered by their 'order'
field, then by file name.
"""

import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional

import frontmatter
import markdown
import yaml

from coursecart.documents import DOCX_MIME_TYPE
from coursecart.errors import course_load_error
from coursecart.models import CourseData, FrontPage, UploadedDocument, WikiPage

log = logging.getLogger(__name__)

COURSE_FILE = "course.yaml"
PAGES_DIR = "pages"
DOCUMENTS_DIR = "documents"

MARKDOWN_SUFFIXES = {".md", ".markdown"}
HTML_SUFFIXES = {".html", ".htm"}
MARKDOWN_EXTENSIONS = ["tables", "fenced_code"]

# Not in every platform mime table
mimetypes.add_type(DOCX_MIME_TYPE, ".docx")


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


def read_content(path: Path, text: str) -> str:
    """HTML for file text; Markdown files are converted."""
    if path.suffix.lower() in MARKDOWN_SUFFIXES:
        return render_markdown(text)
    return text


def load_course_file(course_dir: Path) -> Dict[str, Any]:
    path = course_dir / COURSE_FILE
    if not path.is_file():
        raise course_load_error(course_dir, f"No {COURSE_FILE} found.")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise course_load_error(path, f"{COURSE_FILE} is not valid YAML.", cause=e) from e
    if not isinstance(data, dict):
        raise course_load_error(path, f"{COURSE_FILE} must be a mapping of course fields.")
    return data


def load_front_page(data: Dict[str, Any], course_dir: Path) -> Optional[FrontPage]:
    """None when course.yaml has no front_page; CourseData then generates one."""
    if "front_page" not in data:
        return None
    front = data.get("front_page") or {}
    if not isinstance(front, dict):
        raise course_load_error(course_dir / COURSE_FILE, "front_page must be a mapping.")

    content = front.get("content") or ""
    content_file = front.get("content_file")
    if content_file:
        path = course_dir / content_file
        if not path.is_file():
            raise course_load_error(path, "front_page.content_file does not exist.")
        content = read_content(path, path.read_text(encoding="utf-8"))

    return FrontPage(
        title=str(front.get("title") or ""),
        content=content,
        welcome_message=str(front.get("welcome_message") or ""),
    )


def load_page(path: Path) -> Optional[WikiPage]:
    """Load one page file; None when the file cannot be parsed."""
    try:
        post = frontmatter.load(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        log.warning("Skipping %s: %s", path.name, e)
        return None

    meta = dict(post.metadata)
    title = meta.get("title") or path.stem.replace("-", " ").replace("_", " ").title()
    order = meta.get("order")
    try:
        order = int(order) if order is not None else 0
    except (TypeError, ValueError) as e:
        raise course_load_error(path, f"order must be a whole number, got {order!r}.", cause=e) from e

    return WikiPage(
        id=str(meta.get("id") or path.stem),
        title=str(title),
        content=read_content(path, post.content),
        order=order,
        is_published=bool(meta.get("published", True)),
    )


def load_pages(course_dir: Path) -> List[WikiPage]:
    pages_dir = course_dir / PAGES_DIR
    if not pages_dir.is_dir():
        return []

    loaded = []
    for path in sorted(pages_dir.iterdir()):
        if not path.is_file() or path.suffix.lower() not in MARKDOWN_SUFFIXES | HTML_SUFFIXES:
            continue
        page = load_page(path)
        if page is not None:
            # Pages without an order go after the ordered ones
            key = page.order if page.order > 0 else float("inf")
            loaded.append((key, path.name, page))
            log.debug("Loaded page %s", path.name)

    loaded.sort(key=lambda entry: (entry[0], entry[1]))
    return [page for _, _, page in loaded]


def load_documents(course_dir: Path) -> List[UploadedDocument]:
    documents_dir = course_dir / DOCUMENTS_DIR
    if not documents_dir.is_dir():
        return []

    documents = []
    for path in sorted(documents_dir.iterdir()):
        if not path.is_file() or path.name.startswith("."):
            continue
        mime_type, _ = mimetypes.guess_type(path.name)
        documents.append(UploadedDocument(
            id=path.stem,
            name=path.name,
            data=path.read_bytes(),
            mime_type=mime_type,
        ))
        log.debug("Loaded document %s (%s)", path.name, mime_type or "unknown type")
    return documents


def load_course(course_dir) -> CourseData:
    """Load a course directory."""
    course_dir = Path(course_dir)
    data = load_course_file(course_dir)

    course = CourseData(
        title=str(data.get("title") or ""),
        code=str(data.get("code") or ""),
        description=str(data.get("description") or ""),
        term=str(data.get("term") or ""),
        start_date=str(data.get("start_date") or ""),
        end_date=str(data.get("end_date") or ""),
        front_page=load_front_page(data, course_dir),
        pages=load_pages(course_dir),
        documents=load_documents(course_dir),
    )
    course.renumber_pages()

    log.info("Loaded %s: %d pages, %d documents", course.title or course_dir.name,
             len(course.pages), len(course.documents))
    return course
