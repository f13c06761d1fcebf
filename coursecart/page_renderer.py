"""
page_renderer.py - HTML documents for wiki_content/*.html

Canvas reads the identifier and workflow state of an imported wiki page from
the meta tags of its HTML file.
"""

import html

from coursecart.sanitizer import has_container, wrap_content


def workflow_state(is_published: bool) -> str:
    return "active" if is_published else "unpublished"


def render_page(title: str, content: str, identifier: str, is_published: bool = True) -> str:
    """
    Render a complete wiki page document.

    content is expected to be sanitized already; it is wrapped in the
    content container only when it does not carry one.
    """
    body = content if has_container(content) else wrap_content(content)
    return f"""<!DOCTYPE html>
<html>
<head>
<meta http-equiv="Content-Type" content="text/html; charset=utf-8"/>
<title>{html.escape(title)}</title>
<meta name="identifier" content="{html.escape(identifier)}"/>
<meta name="editing_roles" content="teachers"/>
<meta name="workflow_state" content="{workflow_state(is_published)}"/>
<meta name="wiki_page_menu_tools" content=""/>
</head>
<body>
{body}
</body>
</html>
"""
