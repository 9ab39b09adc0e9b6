"""AsciiDoc builder."""

from collections.abc import Mapping, Sequence

from api_doc_builder.markup.builder import MarkupBuilder

DOCTYPE = "doctype"
TOC = "toc"
TOC_LEVELS = "toclevels"
TOC_TITLE = "toc-title"
SOURCE_HIGHLIGHTER = "source-highlighter"


def _cell(text: str) -> str:
    return text.replace("|", "\\|")


class AsciiDocBuilder(MarkupBuilder):
    extension = ".adoc"

    def header(self, title: str, attributes: Mapping[str, str] | None = None) -> None:
        self._emit(f"= {title}")
        if attributes:
            self._emit(*(f":{key}: {value}" for key, value in attributes.items()))
        self._emit("")

    def title(self, level: int, text: str) -> None:
        self._emit(f"{'=' * (level + 1)} {text}", "")

    def label(self, text: str) -> None:
        self._emit(f".{text}")

    def listing(self, lines: Sequence[str], lang: str = "http") -> None:
        self._emit(f"[source,{lang.upper()}]", "----", *lines, "----", "")

    def table(self, rows: Sequence[Sequence[str]], header: Sequence[str] | None = None) -> None:
        if not rows:
            return
        if header:
            self._emit('[options="header"]', "|===", " ".join(f"|{_cell(v)}" for v in header))
        else:
            self._emit("|===")
        for row in rows:
            self._emit(" ".join(f"|{_cell(v)}" for v in row))
        self._emit("|===", "")

    def link_list(self, items: Sequence[tuple[int, str, str | None]]) -> None:
        for depth, text, target in items:
            entry = f"link:{target}[{text}]" if target else text
            self._emit(f"{'*' * (depth + 1)} {entry}")
        self._emit("")
