"""
validation.py - Check course data before an export starts

Checks:
- Course title and code are present
- Front page has a title and content
- Start/end dates are YYYY-MM-DD and in order
- Pages have titles and distinct ids

Errors stop the export; warnings are reported and the export goes ahead.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional

from coursecart.errors import malformed_course_error
from coursecart.icons import ERROR, INFO, SUCCESS, WARNING
from coursecart.models import CourseData


class Severity(Enum):
    ERROR = "error"      # Export cannot run
    WARNING = "warning"  # Export runs, result may surprise
    INFO = "info"


@dataclass
class Issue:
    """A single validation issue"""
    field: str
    message: str
    severity: Severity = Severity.ERROR
    suggestion: Optional[str] = None

    def __str__(self):
        icon = {"error": ERROR, "warning": WARNING, "info": INFO}[self.severity.value]
        msg = f"  {icon} {self.field}: {self.message}"
        if self.suggestion:
            msg += f"\n    -> {self.suggestion}"
        return msg


@dataclass
class ValidationResult:
    """Results from validating a course"""
    issues: List[Issue] = field(default_factory=list)

    @property
    def errors(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add(self, issue: Issue):
        self.issues.append(issue)

    def summary(self) -> str:
        e = len(self.errors)
        w = len(self.warnings)

        if e == 0 and w == 0:
            return f"{SUCCESS} Course is ready to export"

        parts = []
        if e > 0:
            parts.append(f"{e} error{'s' if e != 1 else ''}")
        if w > 0:
            parts.append(f"{w} warning{'s' if w != 1 else ''}")
        return f"Found {', '.join(parts)}."


def parse_date(value: str) -> Optional[date]:
    """Parse YYYY-MM-DD; None when the value is not such a date."""
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return None
    # fromisoformat accepts other ISO forms on newer Pythons
    if parsed.isoformat() != value:
        return None
    return parsed


def _check_required(result: ValidationResult, course: CourseData):
    if not course.title.strip():
        result.add(Issue("title", "Course title is required"))
    if not course.code.strip():
        result.add(Issue("code", "Course code is required", suggestion="e.g. CS101"))
    if not course.front_page.title.strip():
        result.add(Issue("front_page.title", "Front page title is required"))
    if not course.front_page.content.strip():
        result.add(Issue(
            "front_page.content",
            "Front page content is required",
            suggestion="Add a welcome message or course overview",
        ))


def _check_dates(result: ValidationResult, course: CourseData):
    parsed = {}
    for name in ("start_date", "end_date"):
        value = getattr(course, name)
        if not value:
            continue
        parsed[name] = parse_date(value)
        if parsed[name] is None:
            result.add(Issue(name, f"Not a YYYY-MM-DD date: {value!r}"))

    start, end = parsed.get("start_date"), parsed.get("end_date")
    if start and end and end < start:
        result.add(Issue("end_date", "Course ends before it starts", severity=Severity.WARNING))


def _check_pages(result: ValidationResult, course: CourseData):
    seen = set()
    for page in course.pages:
        label = f"pages[{page.order}]"
        if not page.title.strip():
            result.add(Issue(
                label,
                "Page has no title",
                severity=Severity.WARNING,
                suggestion="Its file will be named after its identifier",
            ))
        if page.id in seen:
            result.add(Issue(
                label,
                f"Page id {page.id!r} is used more than once",
                severity=Severity.WARNING,
                suggestion="Pages with the same id and title cannot both be exported",
            ))
        seen.add(page.id)


def validate_course(course: CourseData) -> ValidationResult:
    """Collect every problem with course data."""
    result = ValidationResult()
    _check_required(result, course)
    _check_dates(result, course)
    _check_pages(result, course)
    return result


def ensure_valid(course: CourseData) -> ValidationResult:
    """Raise MalformedCourseDataError listing all errors; return the result otherwise."""
    result = validate_course(course)
    if not result.is_valid:
        raise malformed_course_error([f"{i.field}: {i.message}" for i in result.errors])
    return result
