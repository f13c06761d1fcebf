# cli.py - Command line interface for Coursecart
"""
Coursecart CLI - Build Canvas Common Cartridge packages from a course folder

COMMANDS:
    coursecart init [--force]                 Scaffold a course directory
    coursecart validate                       Check course data before export
    coursecart pages                          List pages in navigation order
    coursecart export [--output FILE]         Build the .imscc cartridge
    coursecart version                        Show version information

EXAMPLES:
    # Start a new course
    coursecart init

    # Export with links rewritten for Canvas course 12345
    coursecart export --migrate-links --course-id 12345

    # Export a course somewhere else
    coursecart -C ~/courses/cs101 export -o cs101.imscc
"""

import sys
from pathlib import Path
from typing import Optional

import click

from coursecart import __version__
from coursecart.assembler import export_course
from coursecart.config_utils import CONFIG_FILENAME, CoursecartConfig, create_config_template, get_config
from coursecart.documents import convert_document
from coursecart.errors import CoursecartError
from coursecart.identifiers import sanitize_filename
from coursecart.loader import COURSE_FILE, DOCUMENTS_DIR, PAGES_DIR, load_course
from coursecart.log_utils import setup_logging
from coursecart.models import CourseData
from coursecart.validation import validate_course


COURSE_TEMPLATE = """# Course metadata
title: "My Course"
code: "COURSE101"
description: ""
term: ""
# start_date: 2026-01-12
# end_date: 2026-05-08

front_page:
  title: "Welcome to the Course"
  welcome_message: "Welcome to our learning journey!"
  content: |
    <h1>Welcome!</h1>
    <p>Start here for course information and updates.</p>
"""

SAMPLE_PAGE = """---
title: Getting Started
order: 1
published: true
---

# Getting Started

Add your content here...
"""


# ============================================================================
# Configuration & Utilities
# ============================================================================

class CoursecartContext:
    """Shared context for CLI commands"""

    def __init__(self, course_root: Optional[Path] = None):
        self.course_root = Path(course_root) if course_root else Path.cwd()

    def config(self) -> CoursecartConfig:
        try:
            return get_config(self.course_root)
        except CoursecartError as e:
            raise click.ClickException(str(e))

    def course(self) -> CourseData:
        try:
            return load_course(self.course_root)
        except CoursecartError as e:
            raise click.ClickException(str(e))


def default_output_name(course: CourseData) -> str:
    stem = sanitize_filename(course.code) or sanitize_filename(course.title) or "course"
    return f"{stem}.imscc"


# ============================================================================
# Click Group Setup
# ============================================================================

@click.group()
@click.option('--course-dir', '-C', type=click.Path(file_okay=False, path_type=Path),
              help='Course directory (default: current directory)')
@click.pass_context
def cli(ctx, course_dir: Optional[Path]):
    """
    Coursecart - Canvas course packages from local files

    Builds IMS Common Cartridge (.imscc) archives that Canvas imports as a
    course with a front page, wiki pages and a module.
    """
    ctx.obj = CoursecartContext(course_dir)


# ============================================================================
# Export
# ============================================================================

@cli.command()
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Output file (default: <course-code>.imscc in the course directory)')
@click.option('--course-id', help='Canvas course ID used in migrated links')
@click.option('--migrate-links/--no-migrate-links', default=None,
              help='Rewrite relative links to Canvas URLs')
@click.option('--convert-documents/--no-convert-documents', default=None,
              help='Convert .docx documents into page content')
@click.option('--verbose', '-v', count=True, help='Show progress (-vv for debug output)')
@click.pass_obj
def export(ctx: CoursecartContext, output: Optional[Path], course_id: Optional[str],
           migrate_links: Optional[bool], convert_documents: Optional[bool], verbose: int):
    """
    Export the course to a Common Cartridge

    Examples:
        coursecart export                              # course101.imscc
        coursecart export -o build/course.imscc        # Custom output path
        coursecart export --migrate-links --course-id 12345
    """
    setup_logging(verbose)
    config = ctx.config()
    course = ctx.course()

    # Command line beats configuration
    if migrate_links is None:
        migrate_links = config.migrate_links
    if convert_documents is None:
        convert_documents = config.convert_documents
    course_id = course_id or config.course_id

    click.echo(f"[pkg] Exporting course: {course.title}")

    try:
        result = export_course(
            course,
            course_id=course_id,
            flavor=config.flavor,
            migrate_links=migrate_links,
            converter=convert_document if convert_documents else None,
        )
        path = result.write(output or config.output_path(default_output_name(course)))
    except CoursecartError as e:
        raise click.ClickException(str(e))
    except OSError as e:
        raise click.ClickException(f"Could not write cartridge: {e}")

    click.echo(f"  {len(course.pages)} pages, {len(course.documents)} documents, {len(result.files)} files")

    if result.issues:
        click.echo(f"\n[!] {len(result.issues)} item(s) to review after import:")
        for issue in result.issues:
            click.echo(f"  - {issue}")

    click.echo(f"\n[v] Created {path} ({result.size / 1024:.1f} KB)")


# ============================================================================
# Validation and listing
# ============================================================================

@cli.command()
@click.pass_obj
def validate(ctx: CoursecartContext):
    """
    Validate course data before exporting

    Checks for:
    - Missing course title or code
    - Missing front page title or content
    - Dates that are not YYYY-MM-DD
    - Untitled pages and repeated page ids
    """
    click.echo(f"[*] Validating course: {ctx.course_root}\n")

    result = validate_course(ctx.course())
    for issue in result.issues:
        click.echo(str(issue))
    if result.issues:
        click.echo()
    click.echo(result.summary())

    if not result.is_valid:
        sys.exit(1)


@cli.command()
@click.pass_obj
def pages(ctx: CoursecartContext):
    """List pages and documents in navigation order"""
    course = ctx.course()

    click.echo(f"FRONT PAGE: {course.front_page.title or '(untitled)'}")

    click.echo(f"\nPAGES ({len(course.pages)}):")
    for page in course.pages:
        status = "[v]" if page.is_published else "[ ]"
        click.echo(f"  {page.order:>3}. {status} {page.title}")

    if course.documents:
        click.echo(f"\nDOCUMENTS ({len(course.documents)}):")
        for document in course.documents:
            click.echo(f"  - {document.name}")


# ============================================================================
# Setup
# ============================================================================

@cli.command()
@click.option('--force', is_flag=True, help='Overwrite existing template files')
@click.pass_obj
def init(ctx: CoursecartContext, force: bool):
    """
    Initialize a new course directory

    Creates:
    - course.yaml       Course metadata and front page
    - coursecart.yaml   Export settings
    - pages/            One Markdown or HTML file per page
    - documents/        Uploaded documents (exported as pages)
    """
    root = ctx.course_root
    click.echo(f"[*] Initializing course in: {root}")
    root.mkdir(parents=True, exist_ok=True)

    templates = [
        (root / COURSE_FILE, COURSE_TEMPLATE),
        (root / CONFIG_FILENAME, create_config_template()),
        (root / PAGES_DIR / "01-getting-started.md", SAMPLE_PAGE),
    ]
    (root / DOCUMENTS_DIR).mkdir(exist_ok=True)

    for path, content in templates:
        path.parent.mkdir(parents=True, exist_ok=True)
        rel = path.relative_to(root)
        if path.exists() and not force:
            click.echo(f"[!] {rel} already exists (use --force to overwrite)")
            continue
        path.write_text(content, encoding="utf-8")
        click.echo(f"[v] Created {rel}")

    click.echo()
    click.echo("Next steps:")
    click.echo(f"  1. Edit {COURSE_FILE} with your course details")
    click.echo(f"  2. Add pages to {PAGES_DIR}/")
    click.echo("  3. Run: coursecart validate")
    click.echo("  4. Run: coursecart export")


@cli.command()
def version():
    """Show Coursecart version"""
    click.echo(f"Coursecart CLI v{__version__}")
    click.echo("Common Cartridge builder for Canvas LMS")


# ============================================================================
# Entry Point
# ============================================================================

if __name__ == '__main__':
    cli()
