"""
Coursecart - Canvas Common Cartridge builder
"""

__version__ = "1.0.0"

from coursecart.assembler import CartridgeAssembler, ExportResult, export_course, export_course_async
from coursecart.models import CourseData, FrontPage, UploadedDocument, WikiPage

__all__ = [
    "__version__",
    "CartridgeAssembler",
    "CourseData",
    "ExportResult",
    "FrontPage",
    "UploadedDocument",
    "WikiPage",
    "export_course",
    "export_course_async",
]
