"""Classification strategies: map a descriptor to its bucket and group."""

import re
from abc import ABC, abstractmethod

from api_doc_builder.errors import ConfigError
from api_doc_builder.parser.base import Classification, EndpointDescriptor

DEFAULT_GROUP = "default"


def slugify(name: str) -> str:
    """File-safe key for a group name: ``User Admin`` -> ``user_admin``."""
    slug = re.sub(r"[^\w-]+", "_", name.strip().lower()).strip("_")
    return slug or DEFAULT_GROUP


def safe_id(group_id: str) -> str:
    """Keep ``group_id`` unless it could leave the output directory."""
    if "/" in group_id or "\\" in group_id or ".." in group_id:
        return slugify(group_id)
    return group_id


class Classifier(ABC):
    """Decides which bucket and group an endpoint descriptor belongs to."""

    name: str

    def __init__(self, use_buckets: bool = True):
        self.use_buckets = use_buckets

    @abstractmethod
    def classify(self, descriptor: EndpointDescriptor) -> Classification: ...


class ControllerClassifier(Classifier):
    """One group per controller, one bucket per package.

    Descriptors without a controller fall back to their first tag, then to
    the ``default`` group.
    """

    name = "controller"

    def classify(self, descriptor: EndpointDescriptor) -> Classification:
        group = descriptor.group or (descriptor.tags[0] if descriptor.tags else DEFAULT_GROUP)
        return Classification(
            bucket=(descriptor.bucket or None) if self.use_buckets else None,
            group=group,
            group_id=safe_id(descriptor.group_id) if descriptor.group_id else slugify(group),
        )


class TagClassifier(Classifier):
    """Group by first tag. Untagged endpoints go to ``default``.

    Tags carry no package information, so buckets are never assigned.
    """

    name = "tag"

    def classify(self, descriptor: EndpointDescriptor) -> Classification:
        tag = descriptor.tags[0] if descriptor.tags else DEFAULT_GROUP
        return Classification(bucket=None, group=tag, group_id=slugify(tag))


CLASSIFIERS: dict[str, type[Classifier]] = {
    ControllerClassifier.name: ControllerClassifier,
    TagClassifier.name: TagClassifier,
}


def get_classifier(name: str, use_buckets: bool = True) -> Classifier:
    """Instantiate the classification strategy registered as ``name``."""
    try:
        cls = CLASSIFIERS[name]
    except KeyError:
        raise ConfigError(f"Unknown classifier {name!r}, expected one of: {', '.join(CLASSIFIERS)}") from None
    return cls(use_buckets=use_buckets)
