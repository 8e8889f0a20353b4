"""Pydantic v2 models for records supplied by the record source.

Records arrive with the camelCase field names used by the content store
(``knowledgeArea``, ``toolTechnology``, ...). Snake-case names are accepted
as well. String fields are whitespace-trimmed so identity keys stay stable
across re-imports of hand-edited spreadsheets.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from equimap.utils import InvalidRecordError

logger = logging.getLogger(__name__)

APPROVED = "approved"
_FALSE_FLAGS = {"false", "0", "no", "off", "n", "f"}


class RelatedContent(BaseModel):
    """A content module linked to a record (video, document, ...)."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="ignore")

    id: str = Field(min_length=1, validation_alias=AliasChoices("id", "_id"))
    title: str = ""
    content_type: str = Field(
        default="document",
        validation_alias=AliasChoices("contentType", "content_type"),
    )
    moderation_status: str = Field(
        default="pending",
        validation_alias=AliasChoices("moderationStatus", "moderation_status"),
    )

    @property
    def is_approved(self) -> bool:
        return self.moderation_status == APPROVED


class MapRecord(BaseModel):
    """One flat row of the visual map: knowledge area, discipline, tool, inequality."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="ignore")

    knowledge_area: str = Field(
        min_length=1,
        validation_alias=AliasChoices("knowledgeArea", "knowledge_area"),
    )
    discipline: str = Field(min_length=1)
    tool_technology: str = Field(
        min_length=1,
        validation_alias=AliasChoices("toolTechnology", "tool_technology"),
    )
    # Required, but may be blank: a blank inequality yields unlabelled edges.
    inequality: str
    description: str = Field(min_length=1)
    voice_hook: str | None = Field(
        default=None,
        validation_alias=AliasChoices("voiceHook", "voice_hook"),
    )
    related_content: list[RelatedContent] = Field(
        default_factory=list,
        validation_alias=AliasChoices("relatedContent", "relatedContentRefs", "related_content"),
    )
    is_active: bool = Field(
        default=True,
        validation_alias=AliasChoices("isActive", "is_active"),
    )

    @field_validator("voice_hook", mode="before")
    @classmethod
    def blank_hook_to_none(cls, v: Any) -> Any:
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("is_active", mode="before")
    @classmethod
    def missing_flag_is_active(cls, v: Any) -> Any:
        if v is None:
            return True
        if isinstance(v, str):
            return v.strip().lower() not in _FALSE_FLAGS
        if isinstance(v, (bool, int, float)):
            return bool(v)
        return True

    @field_validator("related_content", mode="before")
    @classmethod
    def coerce_bare_refs(cls, v: Any) -> Any:
        # Unresolved references are bare ids with no moderation status.
        if isinstance(v, (str, Mapping)):
            v = [v]
        if not isinstance(v, list):
            return []
        items: list[RelatedContent] = []
        for item in v:
            if isinstance(item, (str, int)) and not isinstance(item, bool):
                item = {"id": str(item)}
            if not isinstance(item, Mapping):
                logger.debug("Dropping related content entry %r", item)
                continue
            item = dict(item)
            for key in ("id", "_id"):
                if isinstance(item.get(key), int) and not isinstance(item[key], bool):
                    item[key] = str(item[key])
            try:
                items.append(RelatedContent.model_validate(item))
            except ValidationError as e:
                logger.debug("Dropping related content entry %r: %s", item, e)
        return items

    @property
    def approved_content(self) -> list[RelatedContent]:
        return [c for c in self.related_content if c.is_approved]


class LayerDescription(BaseModel):
    """Curated description for one entry of one map layer."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    layer: str = Field(min_length=1)
    entry: str = Field(min_length=1)
    description: str = Field(min_length=1)


def parse_record(raw: MapRecord | Mapping[str, Any]) -> MapRecord:
    """Validate a raw record into a MapRecord.

    Raises InvalidRecordError when a required field is missing or blank,
    or when ``raw`` is not a mapping at all.
    """
    if isinstance(raw, MapRecord):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidRecordError(f"Record must be a mapping, got {type(raw).__name__}")
    try:
        return MapRecord.model_validate(dict(raw))
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise InvalidRecordError(f"Invalid record fields: {', '.join(fields)}") from e
