"""HTML handler — Markdown pages converted to standalone HTML files."""

import re

import markdown
from jinja2 import Environment, select_autoescape

from api_doc_builder.handler.base import RenderEnvironment, TreeHandler
from api_doc_builder.handler.markup import MarkdownTreeHandler
from api_doc_builder.schema.tree import Tree

MARKDOWN_EXTENSIONS = ["tables", "fenced_code"]

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{{ title }}</title>
{%- if css %}
    <link rel="stylesheet" href="{{ css }}">
{%- else %}
    <style>
        body { font-family: sans-serif; max-width: 960px; margin: 0 auto; padding: 1em; }
        table { border-collapse: collapse; width: 100%; }
        th, td { border: 1px solid #dddddd; text-align: left; padding: 6px; }
        th { background-color: #f2f2f2; }
        pre { background-color: #f6f8fa; padding: 8px; overflow-x: auto; }
    </style>
{%- endif %}
</head>
<body>
{{ body | safe }}
</body>
</html>
"""

_MD_LINK = re.compile(r'href="([^":]+)\.md"')

_jinja = Environment(autoescape=select_autoescape(default_for_string=True))
_page = _jinja.from_string(PAGE_TEMPLATE)


class HtmlTreeHandler(TreeHandler):
    """Renders the same paginated layout as Markdown, one HTML file per page."""

    name = "html"

    def handle(self, tree: Tree, env: RenderEnvironment) -> dict[str, str]:
        # private Markdown pass, independent of any markdown handler in the pipeline
        sources = MarkdownTreeHandler().handle(tree, env)

        pages = {}
        for file_name, text in sources.items():
            body = markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)
            body = _MD_LINK.sub(r'href="\1.html"', body)
            stem = file_name.removesuffix(".md")
            pages[f"{stem}.html"] = _page.render(title=tree.name, css=env.css, body=body)
        return pages
