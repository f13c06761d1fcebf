"""
generators.py - imsmanifest.xml and the Canvas course_settings/*.xml files

Each generator is a pure function of the course and the resource registry of
one export. Trees are built with lxml so every piece of user text is escaped
by the serializer.
"""

import hashlib
from pathlib import PurePosixPath

from lxml import etree

from coursecart.identifiers import FRONT_PAGE_IDENTIFIER, FRONT_PAGE_SLUG
from coursecart.models import CourseData, Resource
from coursecart.page_renderer import workflow_state
from coursecart.registry import RESOURCE_TYPE_WIKI_PAGE, ResourceRegistry
from coursecart.sanitizer import sanitize_html
from coursecart.xml_utils import (
    CANVAS_NS,
    CANVAS_SCHEMA_LOCATION,
    MANIFEST_SCHEMA_LOCATION,
    NS,
    add_element,
    add_text_element,
    make_root,
    qname,
    serialize_xml,
    xml_bool,
    xml_text,
)

SCHEMA_NAME = "IMS Common Cartridge"
SCHEMA_VERSION = "1.1.0"

MANIFEST_PATH = "imsmanifest.xml"
COURSE_SETTINGS_PATH = "course_settings/course_settings.xml"
MODULE_META_PATH = "course_settings/module_meta.xml"
WIKI_CONTENT_PATH = "course_settings/wiki_content.xml"

# (identifier, href) of the fixed settings resources, in manifest order
SETTINGS_RESOURCES = [
    ("course_settings_resource", COURSE_SETTINGS_PATH),
    ("wiki_content_resource", WIKI_CONTENT_PATH),
    ("module_meta_resource", MODULE_META_PATH),
]

CANVAS_NSMAP = {None: CANVAS_NS, "xsi": NS["xsi"]}
MANIFEST_NSMAP = {
    None: NS["imscc"],
    "lom": NS["lom"],
    "lomimscc": NS["lomimscc"],
    "xsi": NS["xsi"],
}


def manifest_identifier(course: CourseData) -> str:
    digest = hashlib.md5(f"{course.title}|{course.code}".encode("utf-8")).hexdigest()
    return f"cc_{digest[:12]}"


def page_url(resource: Resource) -> str:
    """Canvas page slug; the stem of the resource's file name."""
    if resource.identifier == FRONT_PAGE_IDENTIFIER:
        return FRONT_PAGE_SLUG
    return PurePosixPath(resource.href).stem


def content_pages(registry: ResourceRegistry):
    """Wiki page resources other than the front page, in registry order."""
    return [
        r for r in registry.by_type(RESOURCE_TYPE_WIKI_PAGE)
        if r.identifier != FRONT_PAGE_IDENTIFIER
    ]


def get_resource_type(resource: Resource) -> str:
    """Map registry types to CC resource types."""
    type_map = {
        RESOURCE_TYPE_WIKI_PAGE: "webcontent",
    }
    return type_map.get(resource.type, "webcontent")


# ============================================================================
# course_settings.xml
# ============================================================================

def generate_course_settings(course: CourseData, registry: ResourceRegistry) -> str:
    """Generate course_settings/course_settings.xml."""
    root = make_root(CANVAS_NS, "course", CANVAS_NSMAP, CANVAS_SCHEMA_LOCATION,
                     identifier=manifest_identifier(course))

    add_text_element(root, "title", course.title)
    add_text_element(root, "course_code", course.code)
    add_text_element(root, "description", course.description)
    if course.start_date:
        add_text_element(root, "start_at", f"{course.start_date}T00:00:00Z")
    if course.end_date:
        add_text_element(root, "conclude_at", f"{course.end_date}T23:59:59Z")

    front = registry.get(FRONT_PAGE_IDENTIFIER)
    syllabus = front.content if front else course.front_page.content
    add_text_element(root, "syllabus_body", sanitize_html(syllabus))

    # Land on the front page when the course opens
    add_text_element(root, "default_view", "wiki")
    add_text_element(root, "wiki_has_front_page", "true")
    add_text_element(root, "course_home_sub_navigation_enabled", "true")
    add_text_element(root, "course_home_view", "wiki")

    return serialize_xml(root)


# ============================================================================
# wiki_content.xml
# ============================================================================

def add_wiki_page(pages: etree._Element, resource: Resource, front_page: bool = False):
    page = add_element(pages, "page", identifier=resource.identifier)
    add_text_element(page, "title", resource.title)
    add_text_element(page, "url", page_url(resource))
    add_text_element(page, "body", sanitize_html(resource.content))
    add_text_element(page, "editing_roles", "teachers")
    add_text_element(page, "notify_of_update", "false")
    add_text_element(page, "published", xml_bool(resource.published))
    add_text_element(page, "front_page", xml_bool(front_page))
    add_text_element(page, "workflow_state", workflow_state(resource.published))


def generate_wiki_content(course: CourseData, registry: ResourceRegistry) -> str:
    """Generate course_settings/wiki_content.xml, front page first."""
    root = make_root(CANVAS_NS, "wiki_content", CANVAS_NSMAP, CANVAS_SCHEMA_LOCATION)
    pages = add_element(root, "pages")

    front = registry.get(FRONT_PAGE_IDENTIFIER)
    if front is not None:
        add_wiki_page(pages, front, front_page=True)

    for resource in content_pages(registry):
        add_wiki_page(pages, resource)

    return serialize_xml(root)


# ============================================================================
# module_meta.xml
# ============================================================================

def generate_module_meta(course: CourseData, registry: ResourceRegistry) -> str:
    """Generate course_settings/module_meta.xml with one module of all pages."""
    root = make_root(CANVAS_NS, "modules", CANVAS_NSMAP, CANVAS_SCHEMA_LOCATION)

    module = add_element(root, "module", identifier="wiki_pages_module")
    add_text_element(module, "title", "Course Wiki Pages")
    add_text_element(module, "position", 1)
    add_text_element(module, "require_sequential_progress", "false")
    add_text_element(module, "publish_final_grade", "false")
    add_text_element(module, "workflow_state", "active")

    items = add_element(module, "items")
    for position, resource in enumerate(content_pages(registry), start=1):
        item = add_element(items, "item", identifier=f"module_item_{resource.identifier}")
        add_text_element(item, "title", resource.title)
        add_text_element(item, "position", position)
        add_text_element(item, "content_type", "WikiPage")
        add_text_element(item, "identifierref", resource.identifier)
        add_text_element(item, "published", xml_bool(resource.published))
        add_text_element(item, "workflow_state", workflow_state(resource.published))
        add_text_element(item, "points_possible", 0)
        add_text_element(item, "mastery_paths", "false")

    return serialize_xml(root)


# ============================================================================
# imsmanifest.xml
# ============================================================================

def add_lom_string(parent: etree._Element, tag: str, text: str):
    wrapper = etree.SubElement(parent, qname(NS["lom"], tag))
    string = etree.SubElement(wrapper, qname(NS["lom"], "string"), language="en")
    string.text = text


def add_resource(resources: etree._Element, identifier: str, resource_type: str, href: str, dependencies=()):
    resource = add_element(resources, "resource", identifier=identifier, type=resource_type, href=href)
    add_element(resource, "file", href=href)
    for dependency in dependencies:
        add_element(resource, "file", href=dependency)
    return resource


def generate_manifest(course: CourseData, registry: ResourceRegistry) -> str:
    """Generate the imsmanifest.xml file."""
    manifest = make_root(NS["imscc"], "manifest", MANIFEST_NSMAP, MANIFEST_SCHEMA_LOCATION,
                         identifier=manifest_identifier(course))

    # Package metadata
    metadata = add_element(manifest, "metadata")
    add_text_element(metadata, "schema", SCHEMA_NAME)
    add_text_element(metadata, "schemaversion", SCHEMA_VERSION)
    lom = etree.SubElement(metadata, qname(NS["lom"], "lom"))
    general = etree.SubElement(lom, qname(NS["lom"], "general"))
    add_lom_string(general, "title", xml_text(course.title))
    add_lom_string(general, "description", xml_text(course.description))

    # Navigation: front page, then one group holding every other page
    organizations = add_element(manifest, "organizations", default="org_1")
    organization = add_element(organizations, "organization", identifier="org_1", structure="rooted-hierarchy")
    add_text_element(organization, "title", course.title)

    front = registry.get(FRONT_PAGE_IDENTIFIER)
    if front is not None:
        item = add_element(organization, "item", identifier="front_page_item", identifierref=front.identifier)
        add_text_element(item, "title", "Course Home")

    pages = content_pages(registry)
    if pages:
        group = add_element(organization, "item", identifier="pages_module")
        add_text_element(group, "title", "Wiki Pages")
        for resource in pages:
            item = add_element(group, "item", identifier=f"{resource.identifier}_item",
                               identifierref=resource.identifier)
            add_text_element(item, "title", resource.title)

    # Resources: settings files, then every registered resource
    resources = add_element(manifest, "resources")
    for identifier, href in SETTINGS_RESOURCES:
        add_resource(resources, identifier, "course_settings", href)
    for resource in registry.all():
        add_resource(resources, resource.identifier, get_resource_type(resource),
                     resource.href, resource.dependencies)

    return serialize_xml(manifest)
