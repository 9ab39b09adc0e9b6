"""Loader for endpoint descriptor dumps (YAML or JSON).

The source analysis front-end writes what it discovered as a document of
the form::

    title: Shop API
    version: "1.0"
    endpoints:
      - name: Get user
        group: UserController
        bucket: com.example.user
        request: {method: GET, uris: [/users/{id}]}
    appendices:
      - name: Status codes
        cells: [{name: OK, type: int, default: "200"}]
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from api_doc_builder.errors import SourceError
from api_doc_builder.parser.document import DescriptorDocument


def load_descriptors(file_path: Path) -> DescriptorDocument:
    """Read a descriptor dump. Endpoint entries are returned unvalidated."""
    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SourceError(f"Cannot read {file_path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise SourceError(f"{file_path}: not valid YAML/JSON: {e}") from e

    # a bare list is accepted as the endpoint list
    if isinstance(data, list):
        data = {"endpoints": data}
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SourceError(f"{file_path}: expected a mapping or a list of endpoints")

    try:
        return DescriptorDocument.model_validate(data)
    except ValidationError as e:
        raise SourceError(f"{file_path}: {e}") from e
