"""Exceptions raised while building and rendering API documentation."""

from pathlib import Path


class DocBuilderError(Exception):
    """Base class for all api-doc-builder errors."""


class ConfigError(DocBuilderError):
    """Invalid configuration, or an unknown handler/classifier name."""


class SourceError(DocBuilderError):
    """An input document cannot be read or is not in the expected format."""


class DescriptorMalformed(DocBuilderError):
    """An endpoint descriptor is missing its method or URIs."""


class ArtifactWriteFailed(DocBuilderError):
    """An output file could not be written."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


class PipelineError(DocBuilderError):
    """Every handler in the render pipeline failed."""

    def __init__(self, reports: list):
        self.reports = reports
        names = ", ".join(report.handler for report in reports)
        super().__init__(f"All handlers failed: {names}")
