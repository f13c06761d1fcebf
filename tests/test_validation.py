# tests/test_validation.py
"""
Tests for course validation
"""
import pytest

from coursecart.errors import MalformedCourseDataError
from coursecart.icons import ERROR
from coursecart.models import CourseData, FrontPage, WikiPage
from coursecart.validation import Severity, ensure_valid, parse_date, validate_course


class TestValidateCourse:
    """Tests for validate_course()"""

    def test_valid_course(self, cs101):
        """Should pass a complete course"""
        result = validate_course(cs101)
        assert result.is_valid
        assert result.issues == []
        assert "ready to export" in result.summary()

    def test_required_fields(self):
        """Should report every missing required field"""
        course = CourseData(front_page=FrontPage(title="", content=""))
        result = validate_course(course)
        assert not result.is_valid
        assert [i.field for i in result.errors] == [
            "title", "code", "front_page.title", "front_page.content",
        ]
        assert result.summary() == "Found 4 errors."

    def test_whitespace_is_missing(self, cs101):
        """Should treat whitespace-only values as missing"""
        cs101.title = "   "
        assert [i.message for i in validate_course(cs101).errors] == ["Course title is required"]

    @pytest.mark.parametrize("value", ["2026/01/12", "12-01-2026", "2026-13-01", "tomorrow", "20260112"])
    def test_bad_dates(self, cs101, value):
        """Should only accept YYYY-MM-DD"""
        cs101.start_date = value
        result = validate_course(cs101)
        assert [i.field for i in result.errors] == ["start_date"]

    def test_end_before_start(self, cs101):
        """Should warn, not fail, when dates are reversed"""
        cs101.start_date = "2026-05-01"
        cs101.end_date = "2026-01-01"
        result = validate_course(cs101)
        assert result.is_valid
        assert [i.message for i in result.warnings] == ["Course ends before it starts"]

    def test_page_warnings(self, cs101):
        """Should warn about untitled pages and repeated ids"""
        cs101.pages.append(WikiPage(id="1", title="", order=2))
        result = validate_course(cs101)
        assert result.is_valid
        assert len(result.warnings) == 2
        assert all(i.severity == Severity.WARNING for i in result.warnings)
        assert result.summary() == "Found 2 warnings."

    def test_issue_str(self):
        """Should render icon, field and suggestion"""
        course = CourseData(title="T", front_page=FrontPage(title="H", content="x"))
        issue = validate_course(course).errors[0]
        assert str(issue) == f"  {ERROR} code: Course code is required\n    -> e.g. CS101"


class TestEnsureValid:
    """Tests for ensure_valid()"""

    def test_raises_with_problems(self):
        """Should list every error in the exception"""
        with pytest.raises(MalformedCourseDataError) as exc_info:
            ensure_valid(CourseData(title="T", front_page=FrontPage(title="H", content="x")))
        assert exc_info.value.problems == ["code: Course code is required"]
        assert "nothing was exported" in str(exc_info.value)

    def test_returns_result(self, cs101):
        """Should return the result for a valid course"""
        assert ensure_valid(cs101).is_valid


class TestParseDate:
    """Tests for parse_date()"""

    def test_valid(self):
        """Should parse calendar dates"""
        assert parse_date("2026-02-28").day == 28

    def test_invalid(self):
        """Should return None for impossible dates"""
        assert parse_date("2026-02-30") is None
        assert parse_date("") is None
