"""OpenAPI / Swagger document front-end.

Parses OpenAPI 3.x and Swagger 2.0 documents into endpoint descriptors.
Operations are grouped by their first tag; named schemas become appendices.
"""

from pathlib import Path
from typing import Any

import yaml

from api_doc_builder.errors import SourceError
from api_doc_builder.parser.base import (
    EndpointDescriptor,
    HttpRequestDescriptor,
    HttpResponseDescriptor,
    ParameterCell,
)
from api_doc_builder.parser.document import DescriptorDocument
from api_doc_builder.schema.tree import Appendix

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head", "options")


def parse_openapi(file_path: Path) -> DescriptorDocument:
    """Parse an OpenAPI/Swagger file into a descriptor document."""
    try:
        doc = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SourceError(f"Cannot read {file_path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise SourceError(f"{file_path}: not valid YAML/JSON: {e}") from e
    if not isinstance(doc, dict) or not ("openapi" in doc or "swagger" in doc):
        raise SourceError(f"{file_path}: not an OpenAPI/Swagger document")

    info = doc.get("info", {})
    tag_descriptions = {t["name"]: t.get("description") for t in doc.get("tags", []) if "name" in t}

    endpoints = []
    for path, methods in doc.get("paths", {}).items():
        shared_params = methods.get("parameters", [])
        for method, operation in methods.items():
            if method not in HTTP_METHODS:
                continue
            endpoints.append(_parse_operation(doc, path, method, operation, shared_params, tag_descriptions))

    return DescriptorDocument(
        title=info.get("title"),
        version=_text(info.get("version")) or None,
        description=info.get("description"),
        endpoints=endpoints,
        appendices=_parse_schemas(doc),
    )


def _parse_operation(
    doc: dict,
    path: str,
    method: str,
    operation: dict,
    shared_params: list[dict],
    tag_descriptions: dict[str, str | None],
) -> EndpointDescriptor:
    params = [_resolve(doc, p) for p in shared_params + operation.get("parameters", [])]
    tags = operation.get("tags", [])

    query = {}
    headers = []
    cells = []
    body = None
    for p in params:
        name = p.get("name", "")
        location = p.get("in", "query")
        if location == "body":  # Swagger 2.0
            schema = _resolve(doc, p.get("schema", {}))
            body = _sample(doc, schema)
            cells.extend(_schema_cells(doc, schema))
            continue
        schema = p.get("schema", p)
        cells.append(
            ParameterCell(
                name=name,
                type=schema.get("type", "string"),
                required=_text(p.get("required", location == "path")),
                default=_text(schema.get("default")),
                description=p.get("description", ""),
            )
        )
        example = p.get("example", schema.get("example", schema.get("default")))
        if location == "query" and example is not None:
            query[name] = _text(example)
        elif location == "header":
            headers.append((name, _text(example)))

    request_body = operation.get("requestBody")
    if request_body:
        content_type, schema = _json_schema(doc, _resolve(doc, request_body).get("content", {}))
        if content_type:
            headers.append(("Content-Type", content_type))
        if schema:
            body = _sample(doc, schema)
            cells.extend(_schema_cells(doc, schema))

    return EndpointDescriptor(
        name=operation.get("summary") or operation.get("operationId") or f"{method.upper()} {path}",
        description=operation.get("description"),
        request=HttpRequestDescriptor(method=method.upper(), uris=[path], query=query, headers=headers, body=body, cells=cells),
        response=_parse_response(doc, operation.get("responses", {})),
        group=tags[0] if tags else None,
        group_description=tag_descriptions.get(tags[0]) if tags else None,
        tags=tags,
    )


def _parse_response(doc: dict, responses: dict) -> HttpResponseDescriptor:
    if not responses:
        return HttpResponseDescriptor()
    codes = [str(code) for code in responses]
    code = next((c for c in codes if c.startswith("2")), codes[0])
    resp = _resolve(doc, responses.get(code, responses.get(int(code) if code.isdigit() else code, {})))

    if "content" in resp:
        content_type, schema = _json_schema(doc, resp["content"])
    else:  # Swagger 2.0
        content_type, schema = None, _resolve(doc, resp.get("schema", {}))

    return HttpResponseDescriptor(
        status=int(code) if code.isdigit() else None,
        headers=[("Content-Type", content_type)] if content_type else [],
        body=_sample(doc, schema) if schema else None,
        cells=_schema_cells(doc, schema) if schema else [],
    )


def _parse_schemas(doc: dict) -> list[Appendix]:
    schemas = doc.get("components", {}).get("schemas") or doc.get("definitions") or {}
    appendices = []
    for name, schema in schemas.items():
        schema = _resolve(doc, schema)
        if "enum" in schema:
            cells = [ParameterCell(name=_text(value), type=schema.get("type", "string")) for value in schema["enum"]]
        else:
            cells = _schema_cells(doc, schema)
        appendices.append(Appendix(name=name, cells=cells))
    return appendices


def _json_schema(doc: dict, content: dict) -> tuple[str | None, dict | None]:
    for content_type in ("application/json", "multipart/form-data"):
        if content_type in content:
            return content_type, _resolve(doc, content[content_type].get("schema", {}))
    # Fallback: first available schema
    for content_type, ct_data in content.items():
        return content_type, _resolve(doc, ct_data.get("schema", {}))
    return None, None


def _schema_cells(doc: dict, schema: dict) -> list[ParameterCell]:
    if schema.get("type") == "array":
        schema = _resolve(doc, schema.get("items", {}))
    required = set(schema.get("required", []))
    cells = []
    for name, prop in schema.get("properties", {}).items():
        ref = prop.get("$ref", "")
        prop = _resolve(doc, prop)
        cells.append(
            ParameterCell(
                name=name,
                type=ref.rsplit("/", 1)[-1] if ref else prop.get("type", "object"),
                required=_text(name in required),
                default=_text(prop.get("default")),
                description=prop.get("description", ""),
            )
        )
    return cells


def _sample(doc: dict, schema: dict, depth: int = 0) -> Any:
    """Example value for ``schema``: its example if given, else a typed placeholder."""
    schema = _resolve(doc, schema)
    if "example" in schema:
        return schema["example"]
    if "default" in schema:
        return schema["default"]
    if "enum" in schema:
        return schema["enum"][0]
    kind = schema.get("type", "object" if "properties" in schema else "string")
    if kind == "object":
        if depth > 3:
            return {}
        return {name: _sample(doc, prop, depth + 1) for name, prop in schema.get("properties", {}).items()}
    if kind == "array":
        return [] if depth > 3 else [_sample(doc, schema.get("items", {}), depth + 1)]
    return {"integer": 0, "number": 0.0, "boolean": False}.get(kind, "string")


def _resolve(doc: dict, node: dict) -> dict:
    """Follow local ``$ref`` pointers such as ``#/components/schemas/Pet``."""
    seen = set()
    while isinstance(node, dict) and "$ref" in node:
        ref = node["$ref"]
        if ref in seen or not ref.startswith("#/"):
            return {}
        seen.add(ref)
        target: Any = doc
        for part in ref[2:].split("/"):
            target = target.get(part, {}) if isinstance(target, dict) else {}
        node = target
    return node if isinstance(node, dict) else {}


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
