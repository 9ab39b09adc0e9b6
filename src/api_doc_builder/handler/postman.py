"""Postman Collection v2.1 export of the document tree."""

import json

from api_doc_builder.handler.base import RenderEnvironment, TreeHandler
from api_doc_builder.schema.tree import Group, HttpMessage, Tree

SCHEMA_URL = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"
BASE_URL_VARIABLE = "baseUrl"


class PostmanTreeHandler(TreeHandler):
    """One collection file; folders mirror buckets and groups."""

    name = "postman"

    def handle(self, tree: Tree, env: RenderEnvironment) -> dict[str, str]:
        items = [self._folder(group) for group in tree.bucket.groups if not group.is_empty()]
        for bucket in tree.buckets.values():
            if not bucket.is_empty():
                items.append({
                    "name": bucket.name,
                    "item": [self._folder(group) for group in bucket.groups if not group.is_empty()],
                })

        info = {"name": tree.name, "schema": SCHEMA_URL}
        if tree.description:
            info["description"] = tree.description
        collection = {
            "info": info,
            "item": items,
            "variable": [{"key": BASE_URL_VARIABLE, "value": env.base_url}],
        }
        content = json.dumps(collection, indent=2, ensure_ascii=False) + "\n"
        return {f"{env.id}.postman_collection.json": content}

    def _folder(self, group: Group) -> dict:
        folder = {"name": group.name, "item": []}
        if group.description:
            folder["description"] = group.description
        for node in group.nodes:
            folder["item"].extend(self._requests(node))
        return folder

    def _requests(self, node: HttpMessage) -> list[dict]:
        request = node.request
        items = []
        for uri in request.uris:
            name = node.name if len(request.uris) == 1 else f"{node.name} ({uri})"
            url = {
                "raw": f"{{{{{BASE_URL_VARIABLE}}}}}{uri}{request.query_string}",
                "host": [f"{{{{{BASE_URL_VARIABLE}}}}}"],
                "path": [part for part in uri.split("/") if part],
            }
            if request.query:
                url["query"] = [{"key": k, "value": v} for k, v in request.query.items()]
            entry = {
                "method": request.method,
                "header": [{"key": k, "value": v} for k, v in request.header_map().items()],
                "url": url,
            }
            if request.has_body():
                entry["body"] = {
                    "mode": "raw",
                    "raw": request.body_string(),
                    "options": {"raw": {"language": "json"}},
                }
            if node.description:
                entry["description"] = node.description
            items.append({"name": name, "request": entry, "response": []})
        return items
