from pathlib import Path

from api_doc_builder.handler.base import RenderEnvironment
from api_doc_builder.handler.html import HtmlTreeHandler
from api_doc_builder.parser.base import HttpRequestDescriptor, ParameterCell
from api_doc_builder.schema.tree import Group, HttpMessage, Tree

ENV = RenderEnvironment(out=Path("out"))


def _tree() -> Tree:
    node = HttpMessage(
        name="Get user",
        request=HttpRequestDescriptor(
            method="GET",
            uris=["/users/{id}"],
            cells=[ParameterCell(name="id", type="long", description="user id")],
        ),
    )
    tree = Tree(name="Shop <API>")
    tree.bucket.groups.append(Group(id="user", name="User", nodes=[node]))
    return tree


class TestHtmlTreeHandler:
    def test_one_page_per_markdown_file(self):
        files = HtmlTreeHandler().handle(_tree(), ENV)
        assert list(files) == ["user.html", "index.html"]

    def test_page_content(self):
        page = HtmlTreeHandler().handle(_tree(), ENV)["user.html"]
        assert page.startswith("<!DOCTYPE html>")
        assert "<title>Shop &lt;API&gt;</title>" in page
        assert "<h2>User</h2>" in page
        assert "<table>" in page
        assert "<td>user id</td>" in page
        assert "GET /users/{id} HTTP/1.1" in page

    def test_links_point_to_html_pages(self):
        index = HtmlTreeHandler().handle(_tree(), ENV)["index.html"]
        assert 'href="user.html"' in index
        assert ".md" not in index

    def test_css_link(self):
        env = RenderEnvironment(out=Path("out"), css="style.css")
        page = HtmlTreeHandler().handle(_tree(), env)["index.html"]
        assert '<link rel="stylesheet" href="style.css">' in page
        assert "<style>" not in page

    def test_default_style(self):
        page = HtmlTreeHandler().handle(_tree(), ENV)["index.html"]
        assert "<style>" in page

    def test_idempotent(self):
        tree = _tree()
        assert HtmlTreeHandler().handle(tree, ENV) == HtmlTreeHandler().handle(tree, ENV)
