"""
documents.py - Uploaded documents as wiki page content

A document is never embedded in the cartridge as a file. It becomes a page
whose content describes the file and, when conversion is enabled and the
format is supported, carries the converted document text.
"""

import html
import io
import logging
from typing import Optional

import mammoth

from coursecart.errors import unsupported_format_error
from coursecart.identifiers import file_extension
from coursecart.models import UploadedDocument

log = logging.getLogger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]

# Word styles mapped to one heading level below the page title
STYLE_MAP = """
p[style-name='Title'] => h1:fresh
p[style-name='Heading 1'] => h2:fresh
p[style-name='Heading 2'] => h3:fresh
p[style-name='Heading 3'] => h4:fresh
"""


def format_file_size(size: int) -> str:
    """Human readable size, base 1024 with at most two decimals."""
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {SIZE_UNITS[unit]}"


def file_type_label(name: str) -> str:
    ext = file_extension(name)
    return ext.upper() if ext else "Unknown"


def document_placeholder_content(document: UploadedDocument) -> str:
    """Page content describing an uploaded document."""
    return f"""<div class="document-content">
  <h2>Document: {html.escape(document.name)}</h2>
  <p>This page was created from an uploaded document and is now a wiki page in your course.</p>
  <div class="document-info">
    <p><strong>File Type:</strong> {html.escape(file_type_label(document.name))}</p>
    <p><strong>Size:</strong> {format_file_size(document.size)}</p>
  </div>
  <div class="document-actions">
    <p>You can edit this content directly in Canvas or add additional information as needed.</p>
    <p><em>Note: This content is stored as a wiki page, not as a file attachment.</em></p>
  </div>
</div>"""


def conversion_failed_notice(document: UploadedDocument) -> str:
    return (
        '<div class="alert alert-info">'
        f"<p>The contents of {html.escape(document.name)} could not be converted automatically. "
        "Upload the original file to Canvas and link it from this page.</p>"
        "</div>"
    )


def is_docx(mime_type: Optional[str], name: str = "") -> bool:
    if mime_type:
        return mime_type == DOCX_MIME_TYPE
    return file_extension(name).lower() == "docx"


def convert_document(data: bytes, mime_type: Optional[str], name: str = "") -> str:
    """
    Convert a document to HTML.

    Only Word .docx files are supported; everything else raises
    UnsupportedDocumentFormatError.
    """
    if not is_docx(mime_type, name):
        raise unsupported_format_error(name or "document", mime_type)

    try:
        result = mammoth.convert_to_html(io.BytesIO(data), style_map=STYLE_MAP)
    except Exception as e:
        # mammoth raises zipfile/KeyError/ValueError on damaged files
        raise unsupported_format_error(name or "document", mime_type, cause=e) from e

    for message in result.messages:
        log.debug("mammoth: %s", message)
    return result.value
