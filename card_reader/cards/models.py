"""
Character Card Data Models
=========================

Pydantic models for the card reading pipeline: located payloads, the
schema-tagged card, the rendered document and the export bundle.
"""

from enum import Enum
from typing import Optional, Dict, List, Any, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


CCV3_KEYWORD = "ccv3"
CHARA_KEYWORD = "chara"


class CardFormat(str, Enum):
    """SillyTavern card specification versions."""
    SILLYTAVERN_V2 = "chara_card_v2"
    SILLYTAVERN_V3 = "chara_card_v3"

    @property
    def keyword(self) -> str:
        """PNG text chunk keyword carrying this format."""
        return CCV3_KEYWORD if self is CardFormat.SILLYTAVERN_V3 else CHARA_KEYWORD

    @classmethod
    def from_keyword(cls, keyword: str) -> "CardFormat":
        if keyword.lower() == CCV3_KEYWORD:
            return cls.SILLYTAVERN_V3
        if keyword.lower() == CHARA_KEYWORD:
            return cls.SILLYTAVERN_V2
        raise ValueError(f"Unknown card keyword: {keyword}")


class LocatedPayload(BaseModel):
    """Text value of the selected metadata chunk."""
    model_config = ConfigDict(frozen=True)

    keyword: str  # ccv3 or chara, lower-cased
    chunk_type: str  # tEXt, zTXt or iTXt
    text: str

    @property
    def format(self) -> CardFormat:
        return CardFormat.from_keyword(self.keyword)


class CardData(BaseModel):
    """
    Character fields shared by the V2 and V3 schemas.

    All fields are optional. Keys not declared here are kept in the model's
    extra map so the raw export stays faithful. ``first_message`` is only
    populated from the ``first_mes`` key; a literal ``first_message`` key is
    an unknown field like any other.
    """
    model_config = ConfigDict(extra='allow')

    name: Optional[str] = None
    spec: Optional[str] = None
    spec_version: Optional[str] = None
    creator: Optional[str] = None
    character_version: Optional[str] = None
    tags: Optional[List[str]] = None
    description: Optional[str] = None
    first_message: Optional[str] = Field(default=None, alias="first_mes")
    personality: Optional[str] = None
    scenario: Optional[str] = None
    system_prompt: Optional[str] = None
    creator_notes: Optional[str] = None

    @field_validator('spec_version', 'character_version', mode='before')
    @classmethod
    def coerce_version(cls, v: Any) -> Any:
        """Some exporters write versions as JSON numbers."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('tags', mode='before')
    @classmethod
    def coerce_tags(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v

    @property
    def extra_fields(self) -> Dict[str, Any]:
        """Fields preserved verbatim but not rendered."""
        return dict(self.model_extra or {})

    def to_json_dict(self) -> Dict[str, Any]:
        """Dump the fields present in the source, under their original JSON keys."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class CharacterCard(BaseModel):
    """
    A decoded card: exactly one of the V2 (flat) or V3 (enveloped) shapes.

    For V3 cards ``data`` is the nested ``data`` object exactly as written and
    ``envelope`` keeps every other top-level key, ``spec`` and
    ``spec_version`` included.
    """
    format: CardFormat
    data: CardData
    envelope: Dict[str, Any] = Field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        return self.data.name

    @property
    def spec(self) -> Optional[str]:
        """Card spec name; the V3 envelope wins over the nested data."""
        return self._spec_field("spec")

    @property
    def spec_version(self) -> Optional[str]:
        return self._spec_field("spec_version")

    def _spec_field(self, key: str) -> Optional[str]:
        value = self.envelope.get(key) if self.format is CardFormat.SILLYTAVERN_V3 else None
        if value is None:
            return getattr(self.data, key)
        return value if isinstance(value, str) else str(value)

    def to_raw(self) -> Dict[str, Any]:
        """Rebuild the card in its original JSON shape."""
        if self.format is CardFormat.SILLYTAVERN_V2:
            return self.data.to_json_dict()

        raw = dict(self.envelope)
        raw["data"] = self.data.to_json_dict()
        return raw


class DocumentSection(BaseModel):
    """One labeled section of the readable document."""
    model_config = ConfigDict(frozen=True)

    label: str
    value: str
    inline: bool = False


class RenderedDocument(BaseModel):
    """Ordered labeled sections plus their flattened text."""
    model_config = ConfigDict(frozen=True)

    sections: Tuple[DocumentSection, ...] = ()
    text: str = ""

    @property
    def labels(self) -> List[str]:
        return [section.label for section in self.sections]


class ExportBundle(BaseModel):
    """Raw JSON export and readable text export of one card."""
    model_config = ConfigDict(frozen=True)

    card: CharacterCard
    document: RenderedDocument
    raw_json: str
    readable_text: str

    @property
    def card_name(self) -> str:
        return self.card.name or ""
