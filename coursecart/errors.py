# errors.py
"""
Custom exception classes with improved error messages for Coursecart

All exceptions include:
- Clear error description
- Actionable suggestions
- Relevant context
"""
from pathlib import Path
from typing import Any, Dict, List, Optional


class CoursecartError(Exception):
    """Base exception for all Coursecart errors"""

    def __init__(
        self,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None
    ):
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        self.cause = cause
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error with all details"""
        lines = [
            "",
            "=" * 70,
            f"[x] {self.__class__.__name__}",
            "=" * 70,
            "",
            self.message,
        ]

        if self.context:
            lines.append("")
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.suggestion:
            lines.append("")
            lines.append("Suggestion:")
            lines.append(f"  {self.suggestion}")

        if self.cause:
            lines.append("")
            lines.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")

        lines.append("")
        lines.append("=" * 70)
        lines.append("")

        return "\n".join(lines)


class ConfigurationError(CoursecartError):
    """Configuration is missing or invalid"""
    pass


class MalformedCourseDataError(CoursecartError):
    """Course data is missing required fields at export time"""

    def __init__(self, message: str, problems: Optional[List[str]] = None, **kwargs):
        self.problems = list(problems or [])
        super().__init__(message, **kwargs)


class DuplicateIdentifierError(CoursecartError):
    """Two resources share an identifier or an archive path"""
    pass


class UnsupportedDocumentFormatError(CoursecartError):
    """A document cannot be converted to HTML"""
    pass


class ArchiveFinalizationError(CoursecartError):
    """Serializing the final archive failed"""
    pass


class CourseLoadError(CoursecartError):
    """A course directory could not be read"""
    pass


# Specific error factory functions

def duplicate_identifier_error(identifier: str, existing_title: str, new_title: str) -> DuplicateIdentifierError:
    """Create error for two resources hashing to the same identifier"""
    return DuplicateIdentifierError(
        message=f"Resource identifier already registered: {identifier}",
        suggestion=(
            "Two pages produced the same identifier.\n"
            "  Rename one of them, or give the pages distinct ids:\n"
            f"  - {existing_title}\n"
            f"  - {new_title}"
        ),
        context={
            "identifier": identifier,
            "existing_title": existing_title,
            "new_title": new_title,
        }
    )


def duplicate_href_error(href: str, existing_identifier: str, new_identifier: str) -> DuplicateIdentifierError:
    """Create error for two resources targeting the same archive path"""
    return DuplicateIdentifierError(
        message=f"Archive path already registered: {href}",
        suggestion=(
            "Two resources would be written to the same file.\n"
            "  Rename one of the pages so their titles differ."
        ),
        context={
            "href": href,
            "existing_identifier": existing_identifier,
            "new_identifier": new_identifier,
        }
    )


def malformed_course_error(problems: List[str]) -> MalformedCourseDataError:
    """Create error listing every problem found in course data"""
    return MalformedCourseDataError(
        message="Course data is incomplete; nothing was exported",
        problems=problems,
        suggestion=(
            "Fix the following before exporting:\n" +
            "\n".join(f"  - {problem}" for problem in problems)
        ),
        context={
            "problem_count": len(problems),
        }
    )


def unsupported_format_error(
    name: str,
    mime_type: Optional[str],
    cause: Optional[BaseException] = None
) -> UnsupportedDocumentFormatError:
    """Create error for a document type the converter cannot handle"""
    return UnsupportedDocumentFormatError(
        message=f"Cannot convert {name} to HTML",
        suggestion=(
            "Only Word documents (.docx) are converted automatically.\n"
            "  Paste the content into a page instead, or upload the file to Canvas after import."
        ),
        context={
            "document": name,
            "mime_type": mime_type or "unknown",
        },
        cause=cause
    )


def archive_finalization_error(entry_count: int, cause: BaseException) -> ArchiveFinalizationError:
    """Create error for a failure while writing the cartridge archive"""
    return ArchiveFinalizationError(
        message="Failed to write the cartridge archive",
        suggestion="No partial archive was produced. Check available memory and retry the export.",
        context={
            "entries": entry_count,
        },
        cause=cause
    )


def course_load_error(path: Path, problem: str, cause: Optional[BaseException] = None) -> CourseLoadError:
    """Create error for an unreadable course directory or file"""
    return CourseLoadError(
        message=f"Could not load course from {path}",
        suggestion=(
            f"{problem}\n\n"
            "Run 'coursecart init' to scaffold a course directory."
        ),
        context={
            "path": str(path),
        },
        cause=cause
    )
