"""Graph construction from flat map records.

Single pass over the records. Each record contributes one knowledge-area
node, one discipline node and one tool node (insert-if-absent by identity
key), plus the tool-discipline and discipline-knowledge-area edges. A
non-empty inequality is written as the label of both edges; later records
overwrite earlier labels on the same edge.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from equimap.graph.types import (
    DisciplineKey,
    Edge,
    EdgeKey,
    IdentityKey,
    KnowledgeAreaKey,
    MapGraph,
    Node,
    NodeDetail,
    NodeType,
    ToolKey,
)
from equimap.models import LayerDescription, MapRecord, RelatedContent, parse_record
from equimap.utils import InvalidRecordError

logger = logging.getLogger(__name__)

_SUMMARY_NOUNS = {
    NodeType.discipline: "discipline",
    NodeType.knowledge_area: "knowledge area",
}


@dataclass
class _NodeDraft:
    """Mutable per-node accumulator used while a build is in progress."""

    node_id: str
    name: str
    node_type: NodeType
    description: str = ""
    voice_hook: str | None = None
    content: dict[str, RelatedContent] = field(default_factory=dict)
    tool_ids: set[str] = field(default_factory=set)


class GraphBuilder:
    """Build a MapGraph from records supplied by the record source.

    Knowledge areas and disciplines merge by name; tools merge by the
    (tool, discipline, knowledge area) triple. Malformed records are
    skipped and counted rather than raised.
    """

    def __init__(
        self,
        layer_descriptions: Iterable[LayerDescription | Mapping[str, Any]] | None = None,
    ) -> None:
        self._layer_descriptions = self._index_layer_descriptions(layer_descriptions or [])

    def build(self, records: Iterable[MapRecord | Mapping[str, Any]]) -> MapGraph:
        """Build the graph from scratch.

        Args:
            records: Ordered records (MapRecord instances or raw dicts with
                camelCase keys). Order matters only for label overwrites.

        Returns:
            A MapGraph. Empty input yields an empty graph.
        """
        drafts: dict[IdentityKey, _NodeDraft] = {}
        edges: dict[EdgeKey, Edge] = {}
        labels: dict[EdgeKey, str] = {}
        skipped = 0
        inactive = 0

        for index, raw in enumerate(records):
            try:
                record = parse_record(raw)
            except InvalidRecordError as e:
                skipped += 1
                logger.warning("Skipping record %d: %s", index, e)
                continue

            if not record.is_active:
                inactive += 1
                continue

            ka = self._ensure(drafts, KnowledgeAreaKey(record.knowledge_area), record.knowledge_area)
            disc = self._ensure(drafts, DisciplineKey(record.discipline), record.discipline)
            tool = self._ensure(
                drafts,
                ToolKey(record.tool_technology, record.discipline, record.knowledge_area),
                record.tool_technology,
            )

            tool.description = record.description
            if record.voice_hook:
                tool.voice_hook = record.voice_hook
            for item in record.approved_content:
                tool.content[item.id] = item

            disc.tool_ids.add(tool.node_id)
            ka.tool_ids.add(tool.node_id)

            for inner, outer in ((tool, disc), (disc, ka)):
                key = EdgeKey.of(inner.node_id, outer.node_id)
                edges.setdefault(key, Edge(inner.node_id, outer.node_id))
                if record.inequality:
                    labels[key] = record.inequality

        graph = self._finalize(drafts, edges, labels, skipped)
        logger.info(
            "Built map graph: %d nodes, %d edges, %d labels (%d skipped, %d inactive)",
            len(graph.nodes),
            len(graph.edges),
            len(graph.labels),
            skipped,
            inactive,
        )
        return graph

    def _ensure(
        self,
        drafts: dict[IdentityKey, _NodeDraft],
        key: IdentityKey,
        name: str,
    ) -> _NodeDraft:
        """Return the draft for ``key``, creating it on first sight."""
        draft = drafts.get(key)
        if draft is None:
            draft = _NodeDraft(node_id=key.node_id(), name=name, node_type=key.node_type)
            drafts[key] = draft
        return draft

    def _finalize(
        self,
        drafts: dict[IdentityKey, _NodeDraft],
        edges: dict[EdgeKey, Edge],
        labels: dict[EdgeKey, str],
        skipped: int,
    ) -> MapGraph:
        nodes: list[Node] = []
        details: dict[str, NodeDetail] = {}

        for draft in drafts.values():
            is_tool = draft.node_type == NodeType.tool
            nodes.append(Node(
                id=draft.node_id,
                name=draft.name,
                type=draft.node_type,
                has_content=is_tool and bool(draft.content),
            ))
            details[draft.node_id] = NodeDetail(
                node_id=draft.node_id,
                name=draft.name,
                type=draft.node_type,
                description=draft.description if is_tool else self._describe(draft),
                voice_hook=draft.voice_hook,
                related_content=list(draft.content.values()),
            )

        return MapGraph(
            nodes=nodes,
            edges=list(edges.values()),
            labels=labels,
            details=details,
            skipped_records=skipped,
        )

    def _describe(self, draft: _NodeDraft) -> str:
        """Curated layer description, or a generated tool-count summary."""
        curated = self._layer_descriptions.get((draft.node_type, draft.name.lower()))
        if curated:
            return curated
        count = len(draft.tool_ids)
        noun = "tool" if count == 1 else "tools"
        return f"{draft.name} {_SUMMARY_NOUNS[draft.node_type]} ({count} {noun})"

    @staticmethod
    def _index_layer_descriptions(
        entries: Iterable[LayerDescription | Mapping[str, Any]],
    ) -> dict[tuple[NodeType, str], str]:
        index: dict[tuple[NodeType, str], str] = {}
        for entry in entries:
            if not isinstance(entry, LayerDescription):
                if not isinstance(entry, Mapping):
                    logger.warning("Ignoring invalid layer description: %r", entry)
                    continue
                try:
                    entry = LayerDescription.model_validate(dict(entry))
                except ValidationError as e:
                    logger.warning("Ignoring invalid layer description: %s", e)
                    continue
            node_type = NodeType.from_layer_name(entry.layer)
            if node_type is None:
                logger.debug("Ignoring description for unknown layer %r", entry.layer)
                continue
            index[(node_type, entry.entry.lower())] = entry.description
        return index


def build_graph(
    records: Iterable[MapRecord | Mapping[str, Any]],
    layer_descriptions: Iterable[LayerDescription | Mapping[str, Any]] | None = None,
) -> MapGraph:
    """Convenience wrapper around GraphBuilder.build."""
    return GraphBuilder(layer_descriptions).build(records)
