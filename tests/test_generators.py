# tests/test_generators.py
"""
Tests for imsmanifest.xml and course_settings/*.xml
"""
import pytest
from lxml import etree

from coursecart.assembler import CartridgeAssembler
from coursecart.generators import (
    SCHEMA_VERSION,
    generate_course_settings,
    generate_manifest,
    generate_module_meta,
    generate_wiki_content,
    manifest_identifier,
)
from coursecart.identifiers import FRONT_PAGE_IDENTIFIER, page_identifier
from coursecart.models import CourseData, FrontPage, WikiPage
from coursecart.xml_utils import CANVAS_NS, NS

CC = {"c": CANVAS_NS}
IMS = {"m": NS["imscc"], "lom": NS["lom"]}


def registry_for(course: CourseData):
    assembler = CartridgeAssembler(course)
    assembler.register_front_page()
    assembler.register_pages()
    assembler.register_documents()
    return assembler.course, assembler.registry


def parse(xml: str):
    return etree.fromstring(xml.encode("utf-8"))


@pytest.fixture
def special_course() -> CourseData:
    return CourseData(
        title="A & B <Test>",
        code="AB&1",
        description='Quotes " and apostrophes \'',
        front_page=FrontPage(title="Home & Away", content="<p>Hi</p>"),
        pages=[WikiPage(id="1", title="Q&A <Week 1>", content="<p>x</p>", order=1)],
    )


class TestManifest:
    """Tests for generate_manifest()"""

    def test_root_and_metadata(self, cs101):
        """Should declare the CC 1.1 namespaces and schema"""
        course, registry = registry_for(cs101)
        xml = generate_manifest(course, registry)
        assert xml.startswith("<?xml version='1.0' encoding='UTF-8'?>")

        root = parse(xml)
        assert root.tag == f"{{{NS['imscc']}}}manifest"
        assert root.get("identifier") == manifest_identifier(course)
        assert root.find("m:metadata/m:schema", IMS).text == "IMS Common Cartridge"
        assert root.find("m:metadata/m:schemaversion", IMS).text == SCHEMA_VERSION
        title = root.find("m:metadata/lom:lom/lom:general/lom:title/lom:string", IMS)
        assert title.text == "CS 101"
        assert title.get("language") == "en"

    def test_organization(self, cs101):
        """Should list the front page, then a group of pages"""
        course, registry = registry_for(cs101)
        root = parse(generate_manifest(course, registry))

        organizations = root.find("m:organizations", IMS)
        assert organizations.get("default") == "org_1"
        org = organizations.find("m:organization", IMS)
        assert org.get("structure") == "rooted-hierarchy"

        items = org.findall("m:item", IMS)
        assert items[0].get("identifierref") == FRONT_PAGE_IDENTIFIER
        assert items[0].find("m:title", IMS).text == "Course Home"
        page_items = items[1].findall("m:item", IMS)
        assert [i.find("m:title", IMS).text for i in page_items] == ["Week 1"]
        assert page_items[0].get("identifierref") == page_identifier("1", "Week 1")

    def test_no_pages_group_without_pages(self):
        """Should omit the pages group for a front-page-only course"""
        course = CourseData(title="T", code="C", front_page=FrontPage(title="H", content="<p>h</p>"))
        course, registry = registry_for(course)
        org = parse(generate_manifest(course, registry)).find("m:organizations/m:organization", IMS)
        assert len(org.findall("m:item", IMS)) == 1

    def test_every_resource_exactly_once(self, full_course):
        """Should list settings files and each registered resource once"""
        course, registry = registry_for(full_course)
        root = parse(generate_manifest(course, registry))
        resources = root.findall("m:resources/m:resource", IMS)
        identifiers = [r.get("identifier") for r in resources]

        assert identifiers[:3] == ["course_settings_resource", "wiki_content_resource", "module_meta_resource"]
        assert identifiers[3:] == [r.identifier for r in registry.all()]
        assert len(identifiers) == len(set(identifiers))

    def test_resource_files(self, cs101):
        """Should reference each resource's own file"""
        course, registry = registry_for(cs101)
        root = parse(generate_manifest(course, registry))
        for resource in root.findall("m:resources/m:resource", IMS):
            files = resource.findall("m:file", IMS)
            assert files[0].get("href") == resource.get("href")

        front = root.find(f"m:resources/m:resource[@identifier='{FRONT_PAGE_IDENTIFIER}']", IMS)
        assert front.get("type") == "webcontent"
        assert front.get("href") == "wiki_content/front-page.html"

    def test_deterministic(self, cs101):
        """Should generate identical XML for identical input"""
        first = generate_manifest(*registry_for(cs101))
        second = generate_manifest(*registry_for(cs101))
        assert first == second


class TestEscaping:
    """Tests that user text survives as text"""

    def test_raw_escaping(self, special_course):
        """Should escape markup characters in course settings"""
        course, registry = registry_for(special_course)
        xml = generate_course_settings(course, registry)
        assert "<title>A &amp; B &lt;Test&gt;</title>" in xml

    def test_round_trip_text(self, special_course):
        """Should parse back to the original strings"""
        course, registry = registry_for(special_course)

        settings = parse(generate_course_settings(course, registry))
        assert settings.find("c:title", CC).text == "A & B <Test>"
        assert settings.find("c:course_code", CC).text == "AB&1"
        assert settings.find("c:description", CC).text == 'Quotes " and apostrophes \''

        manifest = parse(generate_manifest(course, registry))
        titles = [t.text for t in manifest.iter(f"{{{NS['imscc']}}}title")]
        assert "A & B <Test>" in titles
        assert "Q&A <Week 1>" in titles

        wiki = parse(generate_wiki_content(course, registry))
        assert wiki.findall("c:pages/c:page/c:title", CC)[1].text == "Q&A <Week 1>"

        modules = parse(generate_module_meta(course, registry))
        assert modules.find("c:module/c:items/c:item/c:title", CC).text == "Q&A <Week 1>"

    def test_control_characters_dropped(self):
        """Should drop characters XML cannot represent"""
        course = CourseData(title="Bad\x00\x0bTitle", code="C", front_page=FrontPage(title="H", content="<p>h</p>"))
        course, registry = registry_for(course)
        settings = parse(generate_course_settings(course, registry))
        assert settings.find("c:title", CC).text == "BadTitle"


class TestCourseSettings:
    """Tests for generate_course_settings()"""

    def test_fields(self, full_course):
        """Should carry dates and land on the wiki front page"""
        course, registry = registry_for(full_course)
        root = parse(generate_course_settings(course, registry))
        assert root.tag == f"{{{CANVAS_NS}}}course"
        assert root.find("c:start_at", CC).text == "2026-01-12T00:00:00Z"
        assert root.find("c:conclude_at", CC).text == "2026-05-08T23:59:59Z"
        assert root.find("c:default_view", CC).text == "wiki"
        assert root.find("c:wiki_has_front_page", CC).text == "true"
        assert "Read the syllabus first." in root.find("c:syllabus_body", CC).text

    def test_dates_optional(self, cs101):
        """Should omit dates that are not set"""
        course, registry = registry_for(cs101)
        root = parse(generate_course_settings(course, registry))
        assert root.find("c:start_at", CC) is None
        assert root.find("c:conclude_at", CC) is None


class TestWikiContent:
    """Tests for generate_wiki_content()"""

    def test_front_page_first(self, full_course):
        """Should list the front page first and flag it"""
        course, registry = registry_for(full_course)
        pages = parse(generate_wiki_content(course, registry)).findall("c:pages/c:page", CC)
        assert pages[0].get("identifier") == FRONT_PAGE_IDENTIFIER
        assert pages[0].find("c:front_page", CC).text == "true"
        assert pages[0].find("c:url", CC).text == "front-page"
        assert [p.find("c:front_page", CC).text for p in pages[1:]] == ["false"] * (len(pages) - 1)

    def test_unpublished_page(self, full_course):
        """Should carry published and workflow state"""
        course, registry = registry_for(full_course)
        pages = parse(generate_wiki_content(course, registry)).findall("c:pages/c:page", CC)
        draft = next(p for p in pages if p.find("c:title", CC).text == "Draft Notes")
        assert draft.find("c:published", CC).text == "false"
        assert draft.find("c:workflow_state", CC).text == "unpublished"
        assert draft.find("c:url", CC).text == "draft-notes"

    def test_sanitized_body(self):
        """Should sanitize page bodies"""
        course = CourseData(
            title="T", code="C",
            front_page=FrontPage(title="H", content="<p>h</p>"),
            pages=[WikiPage(id="1", title="P", content="<p></p><p>x</p><script>bad()</script>")],
        )
        course, registry = registry_for(course)
        body = parse(generate_wiki_content(course, registry)).findall("c:pages/c:page/c:body", CC)[1].text
        assert "<p>x</p>" in body
        assert "script" not in body


class TestModuleMeta:
    """Tests for generate_module_meta()"""

    def test_items(self, full_course):
        """Should list every non-front page in order"""
        course, registry = registry_for(full_course)
        root = parse(generate_module_meta(course, registry))
        module = root.find("c:module", CC)
        assert module.get("identifier") == "wiki_pages_module"
        assert module.find("c:title", CC).text == "Course Wiki Pages"

        items = module.findall("c:items/c:item", CC)
        assert [i.find("c:title", CC).text for i in items] == [
            "Syllabus", "Week 1: Shapes", "Draft Notes", "Reading List",
        ]
        assert [i.find("c:position", CC).text for i in items] == ["1", "2", "3", "4"]
        first = items[0]
        assert first.get("identifier") == f"module_item_{page_identifier('p1', 'Syllabus')}"
        assert first.find("c:content_type", CC).text == "WikiPage"
        assert first.find("c:identifierref", CC).text == page_identifier("p1", "Syllabus")
        assert items[2].find("c:workflow_state", CC).text == "unpublished"
