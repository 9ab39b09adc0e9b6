"""Document tree: Tree -> Bucket -> Group -> HttpMessage, plus appendices.

The tree is assembled once by the tree builder and read, never modified,
by every handler in the render pipeline.
"""

import logging
from collections.abc import Iterator

from pydantic import BaseModel, Field

from api_doc_builder.parser.base import (
    DEFAULT_VERSION,
    HttpRequestDescriptor,
    HttpResponseDescriptor,
    ParameterCell,
)

logger = logging.getLogger(__name__)


class HttpMessage(BaseModel):
    """One documented operation: a request/response pair."""

    name: str
    description: str | None = None
    version: str = DEFAULT_VERSION
    request: HttpRequestDescriptor = Field(default_factory=HttpRequestDescriptor)
    response: HttpResponseDescriptor = Field(default_factory=HttpResponseDescriptor)


class Group(BaseModel):
    """A documented unit, typically one controller. Flushed to its own file."""

    id: str
    name: str
    description: str | None = None
    nodes: list[HttpMessage] = []

    def is_empty(self) -> bool:
        return not self.nodes


class Bucket(BaseModel):
    """Top-level chapter holding groups; ``name`` is None for the default bucket."""

    name: str | None = None
    groups: list[Group] = []

    def is_empty(self) -> bool:
        return all(group.is_empty() for group in self.groups)

    def find(self, name: str) -> Group | None:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def get_or_create(self, name: str, group_id: str, description: str | None = None) -> Group:
        """Return the group called ``name``, creating it on first sight.

        The first caller decides the group's id and description.
        """
        group = self.find(name)
        if group is None:
            group = Group(id=group_id, name=name, description=description)
            self.groups.append(group)
        elif group.id != group_id:
            logger.debug("Group %r already registered as %r, ignoring id %r", name, group.id, group_id)
        return group


class Appendix(BaseModel):
    """A named table of extra rows (constants, enums, shared models)."""

    name: str
    cells: list[ParameterCell] = []

    def is_empty(self) -> bool:
        return not self.cells


class Tree(BaseModel):
    """The whole document."""

    name: str
    version: str | None = None
    description: str | None = None
    readme: str | None = None
    bucket: Bucket = Field(default_factory=Bucket)
    buckets: dict[str, Bucket] = {}
    appendices: list[Appendix] = []

    def get_bucket(self, name: str | None) -> Bucket:
        """Return the named bucket (created on first use) or the default one.

        A blank name counts as unclassified.
        """
        if not name:
            return self.bucket
        if name not in self.buckets:
            self.buckets[name] = Bucket(name=name)
        return self.buckets[name]

    def iter_buckets(self) -> Iterator[Bucket]:
        yield self.bucket
        yield from self.buckets.values()

    def iter_groups(self) -> Iterator[Group]:
        for bucket in self.iter_buckets():
            yield from bucket.groups

    def endpoint_count(self) -> int:
        return sum(len(group.nodes) for group in self.iter_groups())
