"""Tests for graph statistics and invariant checks."""

from equimap.graph import Edge, MapGraph, Node, NodeType, check_invariants, graph_statistics, validate_graph
from equimap.graph.types import EdgeKey


class TestStatistics:
    def test_counts(self, toolkit_graph):
        stats = graph_statistics(toolkit_graph)
        assert stats["node_counts"] == {"Tool": 5, "Discipline": 3, "KnowledgeArea": 2}
        assert stats["total_nodes"] == 10
        assert stats["edge_counts"]["Tool-Discipline"] == 5
        assert stats["edge_counts"]["Discipline-KnowledgeArea"] == 4
        assert stats["total_edges"] == 9
        assert stats["tools_with_content"] == 1
        assert stats["orphan_nodes"] == []

    def test_labelled_edges(self, ai_graph):
        stats = graph_statistics(ai_graph)
        assert stats["labelled_edges"] == 2
        assert stats["distinct_labels"] == 1

    def test_empty_graph(self):
        stats = graph_statistics(MapGraph())
        assert stats["total_nodes"] == 0
        assert stats["node_counts"] == {"Tool": 0, "Discipline": 0, "KnowledgeArea": 0}


class TestInvariants:
    def test_built_graph_passes(self, toolkit_graph):
        result = validate_graph(toolkit_graph)
        assert result["passed"] is True
        assert result["issues"] == []

    def test_level_skip_detected(self):
        tool = Node("t", "Python", NodeType.tool)
        ka = Node("k", "AI", NodeType.knowledge_area)
        graph = MapGraph(nodes=[tool, ka], edges=[Edge("t", "k")])
        issues = check_invariants(graph)
        assert any("skips levels" in i for i in issues)
        assert any("0 discipline neighbours" in i for i in issues)

    def test_self_loop_and_missing_node(self):
        disc = Node("d", "Law", NodeType.discipline)
        graph = MapGraph(nodes=[disc], edges=[Edge("d", "d"), Edge("d", "ghost")])
        issues = check_invariants(graph)
        assert any("self-loop" in i for i in issues)
        assert any("missing node" in i for i in issues)

    def test_label_on_unknown_edge(self):
        graph = MapGraph(labels={EdgeKey.of("x", "y"): "Access"})
        assert check_invariants(graph) == ["label attached to unknown edge x--y"]

    def test_verbose_logs_issues(self, caplog):
        graph = MapGraph(labels={EdgeKey.of("x", "y"): "Access"})
        result = validate_graph(graph, verbose=True)
        assert result["passed"] is False
        assert "Invariant violated" in caplog.text
