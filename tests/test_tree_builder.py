from api_doc_builder.builder import TreeBuilder
from api_doc_builder.classify import ControllerClassifier, TagClassifier
from api_doc_builder.parser.base import (
    EndpointDescriptor,
    HttpRequestDescriptor,
    HttpResponseDescriptor,
    ParameterCell,
)
from api_doc_builder.schema.tree import Appendix


def _make_descriptor(
    name: str,
    method: str | None = "GET",
    uris: list[str] | None = None,
    group: str | None = None,
    bucket: str | None = None,
) -> EndpointDescriptor:
    return EndpointDescriptor(
        name=name,
        group=group,
        bucket=bucket,
        request=HttpRequestDescriptor(method=method, uris=["/" + name] if uris is None else uris),
    )


def _builder() -> TreeBuilder:
    return TreeBuilder(ControllerClassifier())


class TestBuildCounts:
    def test_node_count_excludes_malformed(self):
        descriptors = [
            _make_descriptor("a", group="A"),
            _make_descriptor("b", method=None, group="A"),
            _make_descriptor("c", uris=[], group="B"),
            _make_descriptor("d", group="B"),
        ]
        result = _builder().build(descriptors, name="doc")
        assert result.discovered == 4
        assert result.skipped == 2
        assert result.tree.endpoint_count() == len(descriptors) - result.skipped

    def test_empty_stream(self):
        result = _builder().build([], name="doc")
        assert result.tree.endpoint_count() == 0
        assert result.tree.bucket.groups == []
        assert result.diagnostics == []

    def test_diagnostics_name_the_reason(self):
        result = _builder().build(
            [_make_descriptor("nomethod", method=None), _make_descriptor("nouri", uris=[])],
            name="doc",
        )
        assert [(d.index, d.name, d.reason) for d in result.diagnostics] == [
            (0, "nomethod", "missing HTTP method"),
            (1, "nouri", "no URIs"),
        ]


class TestBuildOrdering:
    def test_groups_and_nodes_keep_first_seen_order(self):
        descriptors = [
            _make_descriptor("a1", group="A"),
            _make_descriptor("b1", group="B"),
            _make_descriptor("a2", group="A"),
            _make_descriptor("c1", group="C"),
        ]
        tree = _builder().build(descriptors, name="doc").tree
        assert [g.name for g in tree.bucket.groups] == ["A", "B", "C"]
        assert [n.name for n in tree.bucket.groups[0].nodes] == ["a1", "a2"]

    def test_buckets_keep_first_seen_order(self):
        descriptors = [
            _make_descriptor("x", group="X", bucket="pkg.z"),
            _make_descriptor("y", group="Y", bucket="pkg.a"),
            _make_descriptor("z", group="Z", bucket="pkg.z"),
        ]
        tree = _builder().build(descriptors, name="doc").tree
        assert list(tree.buckets) == ["pkg.z", "pkg.a"]
        assert [g.name for g in tree.buckets["pkg.z"].groups] == ["X", "Z"]

    def test_duplicates_are_kept(self):
        descriptors = [_make_descriptor("same", group="A"), _make_descriptor("same", group="A")]
        tree = _builder().build(descriptors, name="doc").tree
        assert len(tree.bucket.groups[0].nodes) == 2

    def test_unclassified_go_to_default_bucket(self):
        tree = _builder().build([_make_descriptor("a")], name="doc").tree
        assert tree.buckets == {}
        assert tree.bucket.groups[0].name == "default"

    def test_blank_bucket_goes_to_default_bucket(self):
        raw = [{"name": "a", "group": "User", "bucket": "", "request": {"method": "GET", "uris": ["/a"]}}]
        tree = _builder().build(raw, name="doc").tree
        assert tree.buckets == {}
        assert [g.name for g in tree.bucket.groups] == ["User"]


class TestBuildMerge:
    def test_first_group_id_and_description_win(self):
        first = EndpointDescriptor(
            name="a", group="User", group_id="user", group_description="Users",
            request=HttpRequestDescriptor(method="GET", uris=["/a"]),
        )
        second = EndpointDescriptor(
            name="b", group="User", group_id="people", group_description="People",
            request=HttpRequestDescriptor(method="GET", uris=["/b"]),
        )
        tree = _builder().build([first, second], name="doc").tree
        assert len(tree.bucket.groups) == 1
        group = tree.bucket.groups[0]
        assert (group.id, group.description) == ("user", "Users")
        assert [n.name for n in group.nodes] == ["a", "b"]


class TestBuildNodes:
    def test_node_copies_descriptor_facts(self):
        descriptor = EndpointDescriptor(
            name="Get user",
            description="Load one user",
            version="HTTP/2",
            request=HttpRequestDescriptor(method="get", uris=["/users/{id}"], query={"v": "1"}),
            response=HttpResponseDescriptor(status=200),
        )
        node = _builder().build([descriptor], name="doc").tree.bucket.groups[0].nodes[0]
        assert node.name == "Get user"
        assert node.description == "Load one user"
        assert node.version == "HTTP/2"
        assert node.request.method == "GET"
        assert node.request.query_string == "?v=1"
        assert node.response.status == 200

    def test_unnamed_descriptor_gets_method_and_uri(self):
        node = _builder().build([_make_descriptor("", uris=["/x"])], name="doc").tree.bucket.groups[0].nodes[0]
        assert node.name == "GET /x"

    def test_ignored_types_are_dropped(self):
        descriptor = EndpointDescriptor(
            name="a",
            request=HttpRequestDescriptor(
                method="GET",
                uris=["/a"],
                cells=[ParameterCell(name="id", type="long"), ParameterCell(name="r", type="ResponseEntity")],
            ),
            response=HttpResponseDescriptor(cells=[ParameterCell(name="body", type="ResponseEntity")]),
        )
        builder = TreeBuilder(ControllerClassifier(), ignored_type_names={"ResponseEntity"})
        node = builder.build([descriptor], name="doc").tree.bucket.groups[0].nodes[0]
        assert [c.name for c in node.request.cells] == ["id"]
        assert node.response.cells == []
        # the input descriptor is left alone
        assert len(descriptor.request.cells) == 2

    def test_ignored_types_are_per_builder(self):
        descriptor = EndpointDescriptor(
            name="a",
            request=HttpRequestDescriptor(method="GET", uris=["/a"], cells=[ParameterCell(name="r", type="Secret")]),
        )
        TreeBuilder(ControllerClassifier(), ignored_type_names={"Secret"}).build([descriptor], name="doc")
        node = TreeBuilder(ControllerClassifier()).build([descriptor], name="doc").tree.bucket.groups[0].nodes[0]
        assert len(node.request.cells) == 1


class TestBuildRawInput:
    def test_raw_mappings_are_validated(self):
        raw = [
            {"name": "ok", "group": "A", "request": {"method": "GET", "uris": ["/ok"]}},
            {"name": "bad", "request": {"method": "GET", "uris": "not-a-list"}},
            "not a mapping",
        ]
        result = _builder().build(raw, name="doc")
        assert result.tree.endpoint_count() == 1
        assert result.skipped == 2
        assert result.diagnostics[0].name == "bad"
        assert result.diagnostics[0].reason.startswith("invalid descriptor")

    def test_tag_classifier(self):
        raw = [
            {"name": "a", "tags": ["Pets"], "request": {"method": "GET", "uris": ["/pets"]}},
            {"name": "b", "request": {"method": "GET", "uris": ["/health"]}},
        ]
        tree = TreeBuilder(TagClassifier()).build(raw, name="doc").tree
        assert [g.name for g in tree.bucket.groups] == ["Pets", "default"]
        assert [g.id for g in tree.bucket.groups] == ["pets", "default"]


class TestBuildMetadata:
    def test_metadata_and_appendices(self):
        result = _builder().build(
            [],
            name="Shop",
            version="1.0",
            description="desc",
            readme="read me",
            appendices=[Appendix(name="Codes"), {"name": "Status", "cells": [{"name": "OK", "type": "int"}]}],
        )
        tree = result.tree
        assert (tree.name, tree.version, tree.description, tree.readme) == ("Shop", "1.0", "desc", "read me")
        assert [a.name for a in tree.appendices] == ["Codes", "Status"]
        assert tree.appendices[1].cells[0].type == "int"

    def test_malformed_appendix_is_skipped(self):
        result = _builder().build(
            [_make_descriptor("a")],
            name="Shop",
            appendices=[{"cells": []}, {"name": "Status", "cells": "not-a-list"}, {"name": "Codes"}],
        )
        assert [a.name for a in result.tree.appendices] == ["Codes"]
        assert [(d.kind, d.index, d.name) for d in result.diagnostics] == [("appendix", 0, ""), ("appendix", 1, "Status")]
        assert result.diagnostics[0].reason.startswith("invalid appendix")
        assert result.skipped == 0
