"""Tree builder — assembles the document tree from endpoint descriptors."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from api_doc_builder.classify import Classifier
from api_doc_builder.errors import DescriptorMalformed
from api_doc_builder.parser.base import EndpointDescriptor, ParameterCell
from api_doc_builder.schema.tree import Appendix, HttpMessage, Tree

logger = logging.getLogger(__name__)


class Diagnostic(BaseModel):
    """A descriptor or appendix that was skipped while building the tree."""

    index: int
    name: str = ""
    reason: str
    kind: str = "endpoint"  # or "appendix"


class BuildResult(BaseModel):
    """The built tree plus everything skipped on the way."""

    tree: Tree
    diagnostics: list[Diagnostic] = []
    discovered: int = 0

    @property
    def skipped(self) -> int:
        """Number of endpoint descriptors left out of the tree."""
        return sum(1 for d in self.diagnostics if d.kind == "endpoint")


class TreeBuilder:
    """Builds a :class:`Tree` from a stream of endpoint descriptors.

    ``ignored_type_names`` drops parameter cells of those types (framework
    wrappers such as ``ResponseEntity``). It is configuration of this
    builder instance, so concurrent builds never share it.
    """

    def __init__(self, classifier: Classifier, ignored_type_names: Iterable[str] = ()):
        self.classifier = classifier
        self.ignored_type_names = frozenset(ignored_type_names)

    def build(
        self,
        descriptors: Iterable[EndpointDescriptor | Mapping[str, Any]],
        *,
        name: str,
        version: str | None = None,
        description: str | None = None,
        readme: str | None = None,
        appendices: Iterable[Appendix | Mapping[str, Any]] = (),
    ) -> BuildResult:
        """Build the tree. Bad descriptors are recorded and skipped, never raised."""
        tree = Tree(name=name, version=version, description=description, readme=readme)
        result = BuildResult(tree=tree)

        for index, item in enumerate(descriptors):
            result.discovered += 1
            try:
                descriptor = self._validate(item)
                self._add(tree, descriptor)
            except DescriptorMalformed as e:
                label = _label(item)
                logger.warning("Skipping descriptor #%d %s: %s", index, label, e)
                result.diagnostics.append(Diagnostic(index=index, name=label, reason=str(e)))

        for index, appendix in enumerate(appendices):
            if not isinstance(appendix, Appendix):
                try:
                    appendix = Appendix.model_validate(appendix)
                except ValidationError as e:
                    label = _label(appendix)
                    reason = f"invalid appendix ({e.error_count()} errors): {_first_error(e)}"
                    logger.warning("Skipping appendix #%d %s: %s", index, label, reason)
                    result.diagnostics.append(Diagnostic(index=index, name=label, reason=reason, kind="appendix"))
                    continue
            tree.appendices.append(appendix)

        logger.info(
            "Built tree %r: %d endpoints, %d skipped, %d appendices",
            name, tree.endpoint_count(), result.skipped, len(tree.appendices),
        )
        return result

    def _validate(self, item: EndpointDescriptor | Mapping[str, Any]) -> EndpointDescriptor:
        if isinstance(item, EndpointDescriptor):
            descriptor = item
        else:
            try:
                descriptor = EndpointDescriptor.model_validate(item)
            except ValidationError as e:
                raise DescriptorMalformed(f"invalid descriptor ({e.error_count()} errors): {_first_error(e)}") from e

        if not descriptor.request.method:
            raise DescriptorMalformed("missing HTTP method")
        if not descriptor.request.uris:
            raise DescriptorMalformed("no URIs")
        return descriptor

    def _add(self, tree: Tree, descriptor: EndpointDescriptor) -> None:
        target = self.classifier.classify(descriptor)
        bucket = tree.get_bucket(target.bucket)
        group = bucket.get_or_create(target.group, target.group_id, descriptor.group_description)

        request = descriptor.request.model_copy(
            update={"method": descriptor.request.method.upper(), "cells": self._keep(descriptor.request.cells)},
        )
        response = descriptor.response.model_copy(update={"cells": self._keep(descriptor.response.cells)})
        group.nodes.append(
            HttpMessage(
                name=descriptor.name or f"{request.method} {request.uris[0]}",
                description=descriptor.description,
                version=descriptor.version,
                request=request,
                response=response,
            )
        )

    def _keep(self, cells: list[ParameterCell]) -> list[ParameterCell]:
        if not self.ignored_type_names:
            return list(cells)
        return [cell for cell in cells if cell.type not in self.ignored_type_names]


def _label(item: Any) -> str:
    if isinstance(item, EndpointDescriptor):
        return item.name
    if isinstance(item, Mapping):
        return str(item.get("name", ""))
    return repr(item)


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]
