"""Tests for MapSession: rebuilds, observers and the render view."""

import logging

import pytest

from equimap.interaction import Phase
from equimap.session import MapSession


@pytest.fixture
def session(settings):
    return MapSession(settings=settings)


class TestRebuild:
    def test_rebuild_builds_graph_and_layout(self, session, ai_records):
        view = session.rebuild(ai_records, canvas=(1000, 700))
        assert len(view.graph.nodes) == 4
        assert len(view.layout.positions) == 4
        assert view.layout.canvas.width == 1000
        assert view.highlight.is_idle

    def test_default_canvas_from_settings(self, session, ai_records, settings):
        view = session.rebuild(ai_records)
        assert view.layout.canvas.width == settings.canvas_width
        assert view.layout.canvas.height == settings.canvas_height

    def test_rebuild_is_deterministic(self, settings, toolkit_records):
        v1 = MapSession(settings=settings).rebuild(toolkit_records)
        v2 = MapSession(settings=settings).rebuild(toolkit_records)
        assert v1.to_dict() == v2.to_dict()

    def test_rebuild_drops_vanished_focus(self, session, ai_records, node_named):
        session.rebuild(ai_records)
        tensorflow = node_named(session.graph, "TensorFlow")
        session.click(tensorflow.id)
        session.rebuild(ai_records[:1])
        assert session.snapshot.phase == Phase.idle

    def test_rebuild_keeps_surviving_focus(self, session, ai_records, node_named):
        session.rebuild(ai_records)
        python = node_named(session.graph, "Python")
        session.click(python.id)
        session.rebuild(ai_records + [dict(ai_records[0], toolTechnology="R")])
        assert session.snapshot.phase == Phase.selected
        assert session.snapshot.focus_node_id == python.id

    def test_resize_keeps_graph_and_focus(self, session, ai_records, node_named):
        session.rebuild(ai_records)
        python = node_named(session.graph, "Python")
        session.hover(python.id)
        graph = session.graph
        view = session.resize({"width": 400, "height": 300})
        assert view.graph is graph
        assert view.layout.canvas.width == 400
        assert view.highlight.focus_node_id == python.id

    def test_layer_descriptions_reused(self, session, toolkit_records, node_named):
        session.rebuild(
            toolkit_records,
            layer_descriptions=[{"layer": "Discipline", "entry": "Law", "description": "Rules."}],
        )
        session.rebuild(toolkit_records)
        law = node_named(session.graph, "Law")
        assert session.node_detail(law.id).description == "Rules."


class TestObservers:
    def test_notified_after_rebuild(self, session, ai_records):
        seen = []
        session.subscribe(seen.append)
        view = session.rebuild(ai_records)
        assert seen == [view]

    def test_notified_only_on_change(self, session, ai_records, node_named):
        session.rebuild(ai_records)
        python = node_named(session.graph, "Python")
        seen = []
        session.subscribe(seen.append)
        session.hover(python.id)
        session.hover(python.id)
        session.hover("ghost")
        session.leave("ghost")
        assert len(seen) == 1
        assert seen[0].highlight.focus_node_id == python.id

    def test_unsubscribe(self, session, ai_records):
        seen = []
        unsubscribe = session.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        session.rebuild(ai_records)
        assert seen == []

    def test_failing_listener_does_not_block_others(self, session, ai_records, caplog):
        def broken(view):
            raise RuntimeError("render failed")

        seen = []
        session.subscribe(broken)
        session.subscribe(seen.append)
        with caplog.at_level(logging.ERROR, logger="equimap.session"):
            session.rebuild(ai_records)
        assert len(seen) == 1
        assert "render failed" in caplog.text

    def test_listener_sees_consistent_view(self, session, ai_records):
        pairs = []
        session.subscribe(
            lambda view: pairs.append(
                ({p.id for p in view.layout.positions}, {n.id for n in view.graph.nodes})
            )
        )
        session.rebuild(ai_records)
        session.rebuild(ai_records[:1])
        assert len(pairs) == 2
        for positioned, nodes in pairs:
            assert positioned == nodes


class TestView:
    def test_to_dict_flags(self, session, ai_records, node_named):
        session.rebuild(ai_records)
        python = node_named(session.graph, "Python")
        session.hover(python.id)
        data = session.view.to_dict()

        highlighted = {n["name"] for n in data["nodes"] if n["highlighted"]}
        assert highlighted == {"Python", "CompSci"}
        visible = [e for e in data["edges"] if e["labelVisible"]]
        assert len(visible) == 1
        assert visible[0]["label"] == "Surveillance"
        assert sum(e["active"] for e in data["edges"]) == 1
        assert data["highlight"]["phase"] == "hovering"

    def test_node_detail(self, session, toolkit_records, node_named):
        session.rebuild(toolkit_records)
        tool = node_named(session.graph, "Facial Recognition")
        detail = session.node_detail(tool.id).to_dict()
        assert detail["voiceHook"] == "Who is watching?"
        assert detail["relatedContent"][0]["id"] == "c1"
        assert session.node_detail("ghost") is None
