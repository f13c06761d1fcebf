# tests/test_page_renderer.py
"""
Tests for wiki page HTML documents
"""
from coursecart.page_renderer import render_page
from coursecart.sanitizer import sanitize_html


class TestRenderPage:
    """Tests for render_page()"""

    def test_metadata(self):
        """Should carry identifier, editing roles and workflow state"""
        html = render_page("Week 1", sanitize_html("<p>Hi</p>"), "gabc", True)
        assert html.startswith("<!DOCTYPE html>")
        assert '<meta http-equiv="Content-Type" content="text/html; charset=utf-8"/>' in html
        assert '<meta name="identifier" content="gabc"/>' in html
        assert '<meta name="editing_roles" content="teachers"/>' in html
        assert '<meta name="workflow_state" content="active"/>' in html
        assert "<title>Week 1</title>" in html

    def test_unpublished(self):
        """Should mark unpublished pages"""
        html = render_page("Draft", "<p>x</p>", "gabc", False)
        assert '<meta name="workflow_state" content="unpublished"/>' in html

    def test_title_escaped(self):
        """Should escape the title"""
        html = render_page("A & B <Test>", "", "gabc")
        assert "<title>A &amp; B &lt;Test&gt;</title>" in html

    def test_sanitized_content_not_wrapped_twice(self):
        """Should keep exactly one content container"""
        html = render_page("T", sanitize_html("<p>x</p>"), "gabc")
        assert html.count("show-content") == 1
        assert "<p>x</p>" in html

    def test_raw_content_wrapped(self):
        """Should wrap content that has no container"""
        html = render_page("T", "<p>x</p>", "gabc")
        assert '<div class="show-content user_content clearfix enhanced"><p>x</p></div>' in html
