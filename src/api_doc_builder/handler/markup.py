"""Paginated markup handlers (Markdown, AsciiDoc).

Every non-empty group is flushed to its own file named after the group id.
Appendices go to one extra file, and the index file carries the document
front matter plus a contents list linking every flushed file. Each file
starts with the same document header so it reads standalone.
"""

import logging

from api_doc_builder.handler.base import RenderEnvironment, TreeHandler
from api_doc_builder.markup import asciidoc
from api_doc_builder.markup.asciidoc import AsciiDocBuilder
from api_doc_builder.markup.builder import MarkupBuilder
from api_doc_builder.markup.markdown import MarkdownBuilder
from api_doc_builder.parser.base import ParameterCell
from api_doc_builder.schema.table import ALL_FIELDS, SUMMARY_FIELDS, SUMMARY_HEADER, project
from api_doc_builder.schema.tree import Bucket, Group, HttpMessage, Tree

logger = logging.getLogger(__name__)

README_TITLE = "Readme"
CONTENTS_TITLE = "Contents"
APPENDIX_TITLE = "Appendix"
APPENDIX_ID = "appendix"
DEFAULT_BUCKET_TITLE = "Default"


class MarkupTreeHandler(TreeHandler):
    """Walks the tree and emits one markup file per group."""

    builder_class: type[MarkupBuilder]
    attributes: dict[str, str] = {}

    def handle(self, tree: Tree, env: RenderEnvironment) -> dict[str, str]:
        self._title = tree.name
        self._reserved = {env.id}
        self._artifacts: dict[str, str] = {}
        self._contents: list[tuple[int, str, str | None]] = []
        self._builder: MarkupBuilder | None = None

        index = self._new_builder()
        if tree.version:
            index.paragraph(f"version: {tree.version}")
        if tree.description:
            index.paragraph(tree.description)
        if tree.readme:
            index.title(1, README_TITLE)
            index.paragraph(tree.readme)

        # next to named chapters the default bucket becomes a chapter of its own
        if any(not bucket.is_empty() for bucket in tree.buckets.values()):
            self.render_bucket(tree.bucket, DEFAULT_BUCKET_TITLE)
        else:
            for group in tree.bucket.groups:
                self.render_group(group, 1)
        for bucket in tree.buckets.values():
            self.render_bucket(bucket)

        self.render_appendices(tree)

        if self._contents:
            index.title(1, CONTENTS_TITLE)
            index.link_list(self._contents)
        self._artifacts[env.id + index.extension] = index.content

        logger.debug("%s produced %d files", self.name, len(self._artifacts))
        return self._artifacts

    def _new_builder(self) -> MarkupBuilder:
        builder = self.builder_class()
        builder.header(self._title, self.attributes)
        return builder

    def _current(self) -> MarkupBuilder:
        if self._builder is None:
            self._builder = self._new_builder()
        return self._builder

    def _file_name(self, key: str) -> str:
        name, n = key, 1
        while name in self._reserved:
            n += 1
            name = f"{key}_{n}"
        self._reserved.add(name)
        return name + self.builder_class.extension

    def _flush_current(self, key: str) -> str:
        file_name = self._file_name(key)
        self._artifacts[file_name] = self._current().content
        self._builder = None
        return file_name

    # -- tree walk ------------------------------------------------------------

    def render_bucket(self, bucket: Bucket, title: str | None = None) -> None:
        if bucket.is_empty():
            return
        title = title or bucket.name
        self._current().title(1, title)
        self._contents.append((0, title, None))
        for group in bucket.groups:
            self.render_group(group, 2)

    def render_group(self, group: Group, level: int) -> None:
        if group.is_empty():
            return
        builder = self._current()
        builder.title(level, group.name)
        if group.description:
            builder.paragraph(group.description)
        for node in group.nodes:
            self.render_node(builder, node, level + 1)

        file_name = self._flush_current(group.id)
        self._contents.append((level - 1, group.name, file_name))

    def render_node(self, builder: MarkupBuilder, node: HttpMessage, level: int) -> None:
        builder.title(level, node.name)
        if node.description:
            builder.paragraph(node.description)

        request = node.request
        lines = [f"{request.method} {uri}{request.query_string} {node.version}" for uri in request.uris]
        lines.extend(f"{key}: {value}" for key, value in request.header_map().items())
        if request.has_body():
            lines.extend(["", request.body_string()])
        builder.label("Request")
        builder.listing(lines)
        self._summary_table(builder, request.cells)

        response = node.response
        if response.is_empty():
            return
        status = "" if response.status is None else f" {response.status}"
        lines = [f"{node.version}{status}"]
        lines.extend(f"{key}: {value}" for key, value in response.header_map().items())
        if response.has_body():
            lines.extend(["", response.body_string()])
        builder.label("Response")
        builder.listing(lines)
        self._summary_table(builder, response.cells)

    def render_appendices(self, tree: Tree) -> None:
        appendices = [appendix for appendix in tree.appendices if not appendix.is_empty()]
        if not appendices:
            return
        builder = self._current()
        builder.title(1, APPENDIX_TITLE)
        for appendix in appendices:
            builder.title(2, appendix.name)
            builder.table(project(appendix.cells, ALL_FIELDS))

        file_name = self._flush_current(APPENDIX_ID)
        self._contents.append((0, APPENDIX_TITLE, file_name))

    def _summary_table(self, builder: MarkupBuilder, cells: list[ParameterCell]) -> None:
        if cells:
            builder.table(project(cells, SUMMARY_FIELDS), header=SUMMARY_HEADER)


class MarkdownTreeHandler(MarkupTreeHandler):
    name = "markdown"
    builder_class = MarkdownBuilder


class AsciidocTreeHandler(MarkupTreeHandler):
    name = "asciidoc"
    builder_class = AsciiDocBuilder
    attributes = {
        asciidoc.DOCTYPE: "book",
        asciidoc.TOC: "left",
        asciidoc.TOC_LEVELS: "3",
        asciidoc.TOC_TITLE: CONTENTS_TITLE,
        asciidoc.SOURCE_HIGHLIGHTER: "highlightjs",
    }
