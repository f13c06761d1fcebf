# tests/conftest.py
"""
Pytest configuration and shared fixtures for Coursecart tests
"""
import io
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Generator

import pytest

from coursecart.models import CourseData, FrontPage, UploadedDocument, WikiPage


@pytest.fixture
def temp_course_dir() -> Generator[Path, None, None]:
    """Create a temporary course directory structure"""
    tmpdir = Path(tempfile.mkdtemp())

    (tmpdir / "pages").mkdir()
    (tmpdir / "documents").mkdir()

    yield tmpdir

    shutil.rmtree(tmpdir)


@pytest.fixture
def clean_env(monkeypatch, tmp_path: Path):
    """Isolate from real environment variables and ~/.coursecart"""
    for name in (
        "COURSE_ID",
        "COURSECART_FLAVOR",
        "COURSECART_MIGRATE_LINKS",
        "COURSECART_CONVERT_DOCUMENTS",
        "COURSECART_OUTPUT",
    ):
        monkeypatch.delenv(name, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def cs101() -> CourseData:
    """The minimal one-page course"""
    return CourseData(
        title="CS 101",
        code="CS101",
        front_page=FrontPage(title="Welcome", content="<p>Start here</p>"),
        pages=[WikiPage(id="1", title="Week 1", content="<p>Hi</p>", order=1, is_published=True)],
    )


@pytest.fixture
def full_course() -> CourseData:
    """A course with dates, several pages and a document"""
    return CourseData(
        title="Intro to Design",
        code="ART110",
        description="Shapes, color & type",
        term="Spring 2026",
        start_date="2026-01-12",
        end_date="2026-05-08",
        front_page=FrontPage(
            title="Welcome to ART110",
            content="<h1>Welcome</h1><p>Read the syllabus first.</p>",
        ),
        pages=[
            WikiPage(id="p1", title="Syllabus", content="<p>Policies</p>", order=1),
            WikiPage(id="p2", title="Week 1: Shapes", content="<h2>Shapes</h2><p>Circles</p>", order=2),
            WikiPage(id="p3", title="Draft Notes", content="<p>Not ready</p>", order=3, is_published=False),
        ],
        documents=[
            UploadedDocument(id="d1", name="Reading List.pdf", data=b"x" * 1536, mime_type="application/pdf"),
        ],
    )


def read_archive(archive: bytes) -> dict:
    """Map of entry name to decoded text"""
    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        return {name: zf.read(name).decode("utf-8") for name in zf.namelist()}


@pytest.fixture
def archive_reader():
    return read_archive
