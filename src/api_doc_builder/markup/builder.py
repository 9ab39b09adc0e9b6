"""Minimal markup builder interface.

A builder owns exactly one in-progress document buffer. Handlers create a
fresh builder per output file and drop it once its content is taken.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence


class MarkupBuilder(ABC):
    """Line-oriented document buffer for one target markup language."""

    extension: str

    def __init__(self):
        self._lines: list[str] = []

    @property
    def content(self) -> str:
        return "\n".join(self._lines).rstrip("\n") + "\n"

    def _emit(self, *lines: str) -> None:
        self._lines.extend(lines)

    def paragraph(self, text: str) -> None:
        self._emit(text, "")

    @abstractmethod
    def header(self, title: str, attributes: Mapping[str, str] | None = None) -> None:
        """Document title and attributes. Must be the first call on a builder."""

    @abstractmethod
    def title(self, level: int, text: str) -> None:
        """Section title; level 1 is a chapter directly below the document title."""

    @abstractmethod
    def label(self, text: str) -> None: ...

    @abstractmethod
    def listing(self, lines: Sequence[str], lang: str = "http") -> None: ...

    @abstractmethod
    def table(self, rows: Sequence[Sequence[str]], header: Sequence[str] | None = None) -> None: ...

    @abstractmethod
    def link_list(self, items: Sequence[tuple[int, str, str | None]]) -> None:
        """Nested bullet list of ``(depth, text, target)``; ``target`` None means no link."""
