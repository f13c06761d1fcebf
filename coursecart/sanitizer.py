"""
sanitizer.py - Clean authored HTML for Canvas wiki pages

Content comes from a trusted authoring surface; this strips what Canvas
would render badly (scripts, inline styles, foreign classes), not what an
attacker could inject.

Double-escaped input has its entities normalized first, so markup revealed
by unescaping still goes through every rule. The rules then run in order on
the parsed tree:
1. drop <script> and <style> blocks
2. drop style="" attributes
3. keep only allow-listed classes
4. collapse empty <p>/<div>
5. default alt="Image" on images
6. Canvas list, table, quote and code styling
7. wrap in the Canvas content container unless already wrapped
"""

import re

from bs4 import BeautifulSoup
from bs4.element import Tag

CONTAINER_CLASS = "show-content user_content clearfix enhanced"
CONTAINER_MARKERS = ["show-content", "user_content"]

SAFE_CLASS_RE = re.compile(
    r"^(text-|bg-|p-|m-|border-|rounded|flex|grid|col-|row-|w-|h-|max-|min-)"
    r"|^(btn|card|alert|table|list|nav|document-)"
    r"|^(show-content|user_content|clearfix|enhanced)$"
    r"|^(unstyled_list|styled_list|canvas-quote|canvas-code|canvas-inline-code)$"
)

DEFAULT_ALT = "Image"

# Link migration swaps in the real course id
TABLE_API_ENDPOINT = "/api/v1/courses/COURSE_ID"

# Classes Canvas styles these elements with
CANVAS_CLASSES = {
    "ul": "unstyled_list",
    "ol": "styled_list",
    "blockquote": "canvas-quote",
    "pre": "canvas-code",
    "code": "canvas-inline-code",
}

_DOUBLE_ESCAPED = [
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&amp;", "&"),
]


def normalize_entities(text: str) -> str:
    """Undo one level of escaping on content that was escaped twice."""
    for entity, char in _DOUBLE_ESCAPED:
        text = text.replace(entity, char)
    return text


def filter_classes(classes):
    return [c for c in classes if SAFE_CLASS_RE.match(c)]


def _is_empty(tag: Tag) -> bool:
    if any(isinstance(child, Tag) for child in tag.children):
        return False
    return not tag.get_text().strip()


def _remove_empty_blocks(soup: BeautifulSoup) -> None:
    changed = True
    while changed:
        changed = False
        for tag in soup.find_all(["p", "div"]):
            if _is_empty(tag):
                tag.decompose()
                changed = True


def sanitize_html(html: str, double_escaped: bool = False) -> str:
    """
    Sanitize page HTML for Canvas.

    Args:
        html: Authored page content
        double_escaped: Content is known to carry escaped entities that
            should be turned back into characters and markup

    Returns:
        Sanitized HTML wrapped in the content container
    """
    markup = html or ""
    if double_escaped:
        markup = normalize_entities(markup)

    soup = BeautifulSoup(markup, "html.parser")

    for tag in soup.find_all(["script", "style"]):
        tag.decompose()

    for tag in soup.find_all(style=True):
        del tag["style"]

    for tag in soup.find_all(class_=True):
        classes = tag.get("class")
        if isinstance(classes, str):
            classes = classes.split()
        kept = filter_classes(classes)
        if kept:
            tag["class"] = kept
        else:
            del tag["class"]

    _remove_empty_blocks(soup)

    for img in soup.find_all("img"):
        if not img.has_attr("alt"):
            img["alt"] = DEFAULT_ALT

    apply_canvas_styles(soup)

    body = str(soup)
    if soup.find(class_=CONTAINER_MARKERS) is None:
        body = wrap_content(body)
    return body


def add_class(tag: Tag, name: str) -> None:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    if name not in classes:
        tag["class"] = list(classes) + [name]


def apply_canvas_styles(soup: BeautifulSoup) -> None:
    """Give lists, quotes and code their Canvas classes; mark tables for Canvas and screen readers."""
    for tag in soup.find_all(list(CANVAS_CLASSES)):
        add_class(tag, CANVAS_CLASSES[tag.name])

    for table in soup.find_all("table"):
        if not table.has_attr("role"):
            table["role"] = "table"
        if not table.has_attr("data-api-endpoint"):
            table["data-api-endpoint"] = TABLE_API_ENDPOINT
        if not table.has_attr("data-api-returntype"):
            table["data-api-returntype"] = "Page"


def wrap_content(html: str) -> str:
    return f'<div class="{CONTAINER_CLASS}">{html}</div>'


def has_container(html: str) -> bool:
    """True when the markup already holds a Canvas content container."""
    soup = BeautifulSoup(html or "", "html.parser")
    return soup.find(class_=CONTAINER_MARKERS) is not None
