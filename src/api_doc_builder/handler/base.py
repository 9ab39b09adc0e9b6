"""Handler contract shared by every output format."""

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel

from api_doc_builder.schema.tree import Tree

DEFAULT_BASE_URL = "http://localhost:8080"


class RenderEnvironment(BaseModel):
    """Where and under which name a rendering pass writes its artifacts."""

    out: Path
    id: str = "index"  # name of the index artifact
    css: str | None = None
    base_url: str = DEFAULT_BASE_URL


class TreeHandler(ABC):
    """Renders a finished document tree into one output format.

    ``handle`` returns ``{file name: content}`` and leaves writing to the
    pipeline. Handlers read the tree and never modify it; any working state
    is reset at the start of every call.
    """

    name: str

    @abstractmethod
    def handle(self, tree: Tree, env: RenderEnvironment) -> dict[str, str]: ...
