"""What every front-end adapter returns: document metadata plus raw endpoints."""

from typing import Any

from pydantic import BaseModel

from api_doc_builder.schema.tree import Appendix


class DescriptorDocument(BaseModel):
    """Output of source analysis for one project.

    ``endpoints`` may hold raw mappings: validating them is the tree
    builder's job, so one malformed entry is reported and skipped rather
    than failing the whole load.
    """

    title: str | None = None
    version: str | None = None
    description: str | None = None
    readme: str | None = None
    endpoints: list[Any] = []
    appendices: list[Appendix] = []
