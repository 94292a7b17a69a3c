"""Tests for loading declaration graph documents."""

import json

import pytest

from microapi.core.errors import GraphLoadError
from microapi.core.loader import load_graph, load_graph_data


def test_round_trip_of_sample(sample_graph_file, sample_graph):
    graph = load_graph(sample_graph_file)

    assert [d.identity for d in graph.declarations()] == [
        d.identity for d in sample_graph.declarations()
    ]
    assert graph.get("Shop.Models.UserInfo") == sample_graph.get("Shop.Models.UserInfo")


def test_bare_list_accepted():
    graph = load_graph_data([{"identity": "Shop.User"}, {"identity": "Shop.User"}])

    assert len(graph) == 1
    assert len(graph.fragments()) == 2


def test_missing_file(tmp_path):
    with pytest.raises(GraphLoadError, match="not found"):
        load_graph(tmp_path / "missing.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text('{"declarations": [')

    with pytest.raises(GraphLoadError, match="invalid JSON"):
        load_graph(path)


def test_schema_violation(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({"declarations": [{"identity": "Shop.User", "kind": "struct"}]}))

    with pytest.raises(GraphLoadError, match="Invalid declaration graph"):
        load_graph(path)


def test_unknown_value_kind_rejected():
    data = {
        "declarations": [
            {
                "identity": "Shop.UserInfo",
                "annotations": [{"kind": "Dto", "positional": [{"kind": "tuple", "value": 1}]}],
            }
        ]
    }

    with pytest.raises(GraphLoadError):
        load_graph_data(data)
