"""Tests for record models and parsing."""

import pytest

from equimap.models import LayerDescription, MapRecord, parse_record
from equimap.utils import InvalidRecordError


class TestMapRecord:
    def test_camel_case_fields(self, ai_records):
        record = parse_record(ai_records[0])
        assert record.knowledge_area == "AI"
        assert record.discipline == "CompSci"
        assert record.tool_technology == "Python"
        assert record.inequality == "Surveillance"

    def test_snake_case_fields_accepted(self):
        record = MapRecord(
            knowledge_area="AI",
            discipline="CompSci",
            tool_technology="Python",
            inequality="",
            description="x",
        )
        assert record.tool_technology == "Python"

    def test_whitespace_trimmed(self):
        record = parse_record({
            "knowledgeArea": "  AI ",
            "discipline": "CompSci\n",
            "toolTechnology": "\tPython",
            "inequality": " Surveillance ",
            "description": " desc ",
        })
        assert record.knowledge_area == "AI"
        assert record.discipline == "CompSci"
        assert record.tool_technology == "Python"
        assert record.inequality == "Surveillance"

    def test_blank_inequality_allowed(self, ai_records):
        record = parse_record(ai_records[1])
        assert record.inequality == ""

    def test_blank_voice_hook_becomes_none(self, ai_records):
        raw = dict(ai_records[0], voiceHook="   ")
        assert parse_record(raw).voice_hook is None

    def test_is_active_defaults_true(self, ai_records):
        assert parse_record(ai_records[0]).is_active is True
        assert parse_record(dict(ai_records[0], isActive=False)).is_active is False

    def test_extra_fields_ignored(self, ai_records):
        record = parse_record(dict(ai_records[0], createdAt="2024-01-01"))
        assert not hasattr(record, "createdAt")


class TestRelatedContent:
    def test_only_approved_counted(self, toolkit_records):
        record = parse_record(toolkit_records[0])
        assert len(record.related_content) == 2
        assert [c.id for c in record.approved_content] == ["c1"]

    def test_bare_refs_are_pending(self, ai_records):
        record = parse_record(dict(ai_records[0], relatedContentRefs=["abc", "def"]))
        assert [c.id for c in record.related_content] == ["abc", "def"]
        assert record.approved_content == []

    def test_unusable_entries_dropped(self, ai_records):
        record = parse_record(dict(ai_records[0], relatedContent=[None, {"title": "x"}, {"_id": 7}, {"id": "  "}]))
        assert [c.id for c in record.related_content] == ["7"]

    def test_null_related_content(self, ai_records):
        record = parse_record(dict(ai_records[0], relatedContent=None))
        assert record.related_content == []


class TestParseRecordErrors:
    @pytest.mark.parametrize("field", ["knowledgeArea", "discipline", "toolTechnology", "description"])
    def test_blank_required_field(self, ai_records, field):
        raw = dict(ai_records[0], **{field: "   "})
        with pytest.raises(InvalidRecordError):
            parse_record(raw)

    def test_missing_inequality(self, ai_records):
        raw = dict(ai_records[0])
        del raw["inequality"]
        with pytest.raises(InvalidRecordError, match="inequality"):
            parse_record(raw)

    def test_non_mapping(self):
        with pytest.raises(InvalidRecordError, match="mapping"):
            parse_record(["AI", "CompSci"])

    def test_model_instance_passthrough(self, ai_records):
        record = parse_record(ai_records[0])
        assert parse_record(record) is record


class TestLayerDescription:
    def test_fields_trimmed(self):
        entry = LayerDescription(layer=" Discipline ", entry=" Law ", description=" Rules. ")
        assert entry.layer == "Discipline"
        assert entry.entry == "Law"
        assert entry.description == "Rules."
