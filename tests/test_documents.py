# tests/test_documents.py
"""
Tests for document placeholder pages and conversion
"""
import pytest

from coursecart.documents import (
    DOCX_MIME_TYPE,
    STYLE_MAP,
    convert_document,
    document_placeholder_content,
    file_type_label,
    format_file_size,
    is_docx,
)
from coursecart.errors import UnsupportedDocumentFormatError
from coursecart.models import UploadedDocument


class TestFormatFileSize:
    """Tests for format_file_size()"""

    @pytest.mark.parametrize("size,expected", [
        (0, "0 Bytes"),
        (1, "1 Bytes"),
        (1023, "1023 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1048576, "1 MB"),
        (5 * 1024 ** 3, "5 GB"),
        (1234567, "1.18 MB"),
    ])
    def test_sizes(self, size, expected):
        """Should scale by 1024 and round to two decimals"""
        assert format_file_size(size) == expected


class TestPlaceholder:
    """Tests for document_placeholder_content()"""

    def test_describes_document(self):
        """Should show name, type and size"""
        doc = UploadedDocument(id="d", name="Lab 1.docx", data=b"x" * 2048)
        content = document_placeholder_content(doc)
        assert "<h2>Document: Lab 1.docx</h2>" in content
        assert "<strong>File Type:</strong> DOCX" in content
        assert "<strong>Size:</strong> 2 KB" in content
        assert "not as a file attachment" in content

    def test_escapes_name(self):
        """Should escape the file name"""
        doc = UploadedDocument(id="d", name="<b>.pdf")
        assert "Document: &lt;b&gt;.pdf" in document_placeholder_content(doc)

    def test_file_type_label(self):
        """Should fall back to Unknown without an extension"""
        assert file_type_label("notes.pdf") == "PDF"
        assert file_type_label("README") == "Unknown"


class TestConvertDocument:
    """Tests for convert_document()"""

    def test_is_docx(self):
        """Should prefer the MIME type, then the extension"""
        assert is_docx(DOCX_MIME_TYPE)
        assert is_docx(None, "report.DOCX")
        assert not is_docx("application/pdf", "report.docx")
        assert not is_docx(None, "report.pdf")

    def test_unsupported(self):
        """Should refuse formats other than docx"""
        with pytest.raises(UnsupportedDocumentFormatError) as exc_info:
            convert_document(b"%PDF", "application/pdf", "notes.pdf")
        assert "notes.pdf" in exc_info.value.message

    def test_docx(self, mocker):
        """Should return mammoth's HTML"""
        result = mocker.Mock(value="<h2>Intro</h2><p>Text</p>", messages=[])
        convert = mocker.patch("coursecart.documents.mammoth.convert_to_html", return_value=result)

        html = convert_document(b"PK...", DOCX_MIME_TYPE, "lab.docx")

        assert html == "<h2>Intro</h2><p>Text</p>"
        assert convert.call_args.kwargs["style_map"] == STYLE_MAP

    def test_damaged_docx(self, mocker):
        """Should wrap converter failures"""
        mocker.patch("coursecart.documents.mammoth.convert_to_html", side_effect=KeyError("word/document.xml"))
        with pytest.raises(UnsupportedDocumentFormatError) as exc_info:
            convert_document(b"not a zip", DOCX_MIME_TYPE, "broken.docx")
        assert isinstance(exc_info.value.cause, KeyError)

    def test_real_garbage_bytes(self):
        """Should raise for bytes that are not a docx archive"""
        with pytest.raises(UnsupportedDocumentFormatError):
            convert_document(b"definitely not a zip file", DOCX_MIME_TYPE, "fake.docx")
