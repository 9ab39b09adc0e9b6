"""GitHub-flavored Markdown builder."""

import re
from collections.abc import Mapping, Sequence

from api_doc_builder.markup.builder import MarkupBuilder

_BACKTICKS = re.compile(r"`+")


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", "<br>")


def _row(values: Sequence[str]) -> str:
    return "| " + " | ".join(_cell(v) for v in values) + " |"


class MarkdownBuilder(MarkupBuilder):
    extension = ".md"

    def header(self, title: str, attributes: Mapping[str, str] | None = None) -> None:
        if attributes:
            self._emit("---", *(f"{key}: {value}" for key, value in attributes.items()), "---", "")
        self._emit(f"# {title}", "")

    def title(self, level: int, text: str) -> None:
        self._emit(f"{'#' * (level + 1)} {text}", "")

    def label(self, text: str) -> None:
        self._emit(f"**{text}**", "")

    def listing(self, lines: Sequence[str], lang: str = "http") -> None:
        # the fence must be longer than any backtick run inside the block
        longest = max((len(run) for line in lines for run in _BACKTICKS.findall(line)), default=0)
        fence = "`" * max(3, longest + 1)
        self._emit(f"{fence}{lang}", *lines, fence, "")

    def table(self, rows: Sequence[Sequence[str]], header: Sequence[str] | None = None) -> None:
        if not rows:
            return
        # Markdown tables always need a header row; headerless tables get a blank one
        width = len(header) if header else max(len(row) for row in rows)
        self._emit(_row(header or [""] * width), "|" + "---|" * width)
        self._emit(*(_row(row) for row in rows), "")

    def link_list(self, items: Sequence[tuple[int, str, str | None]]) -> None:
        for depth, text, target in items:
            entry = f"[{text}]({target})" if target else text
            self._emit(f"{'  ' * depth}- {entry}")
        self._emit("")
