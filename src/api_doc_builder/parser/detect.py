"""Auto-detect the format of an input document."""

from pathlib import Path

import yaml

from api_doc_builder.errors import SourceError
from api_doc_builder.parser.descriptors import load_descriptors
from api_doc_builder.parser.document import DescriptorDocument
from api_doc_builder.parser.swagger import parse_openapi

FORMATS = ("auto", "openapi", "descriptors")


def detect_format(file_path: Path) -> str:
    """Detect the format of an input file.

    Returns: 'openapi' or 'descriptors'.
    """
    # YAML is a superset of JSON, one parse covers both
    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SourceError(f"Cannot read {file_path}: {e.strerror or e}") from e
    except yaml.YAMLError:
        return "descriptors"

    if isinstance(data, dict) and ("openapi" in data or "swagger" in data):
        return "openapi"
    return "descriptors"


def load_document(file_path: Path, fmt: str = "auto") -> DescriptorDocument:
    """Load ``file_path`` with the front-end for ``fmt``."""
    if fmt == "auto":
        fmt = detect_format(file_path)

    if fmt == "openapi":
        return parse_openapi(file_path)
    elif fmt == "descriptors":
        return load_descriptors(file_path)
    raise SourceError(f"Unknown input format {fmt!r}, expected one of: {', '.join(FORMATS)}")
