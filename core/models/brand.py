# =============================================================================
# core/models/brand.py - Brand Payload Schemas
# =============================================================================
# These models are the typed contract for everything a brand generation
# produces:
# - StyleProfile: writing-style analysis of the user's corpus
# - VisualIdentity: palette, font pairing and logo concept
# - BrandDocument: the assembled one-page Brand Rider (markdown)
# - BrandRecord: the row written to the `brands` table
# - BrandResponse: a brand row returned to API clients
#
# AI responses are loosely shaped JSON. They are validated against these
# models at the boundary, so a missing or mistyped field fails there with
# a clear error instead of surfacing later as a None deep in the workflow.
# =============================================================================

from __future__ import annotations

import json
import re
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


class PresentationFormat(str, Enum):
    """
    Presentation style applied when assembling documents.

    Each format has its own tone overlay (see agents/prompts/overlays.py).
    Unknown values fall back to CUSTOM via PresentationFormat.parse().
    """
    UFC = "ufc"
    TEAM = "team"
    SOLO = "solo"
    MILITARY = "military"
    NFL = "nfl"
    INFLUENCER = "influencer"
    EXECUTIVE = "executive"
    ARTIST = "artist"
    HUMANITARIAN = "humanitarian"
    CREATOR = "creator"
    FASHION = "fashion"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: str | PresentationFormat | None) -> PresentationFormat:
        """Lenient conversion: case-insensitive, unknown -> CUSTOM."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.CUSTOM


# =============================================================================
# Style Analysis
# =============================================================================

class ToneProfile(BaseModel):
    """
    Voice and tone guidance.

    Example:
        {
            "adjectives": ["action-oriented", "witty", "concise"],
            "dos": ["Use active voice"],
            "donts": ["Avoid jargon"]
        }
    """

    adjectives: list[str] = Field(
        default_factory=list,
        description="Words describing the voice"
    )

    dos: list[str] = Field(
        default_factory=list,
        description="Writing habits to keep"
    )

    donts: list[str] = Field(
        default_factory=list,
        description="Writing habits to avoid"
    )


class StyleProfile(BaseModel):
    """
    Result of the style analysis stage.

    tagline and bio are required; everything else may be empty.
    """

    model_config = ConfigDict(populate_by_name=True)

    tone: ToneProfile = Field(
        default_factory=ToneProfile,
        description="Voice and tone guidance"
    )

    signature_phrases: list[str] = Field(
        default_factory=list,
        alias="signaturePhrases",
        description="Phrases that define the voice"
    )

    strengths: list[str] = Field(
        default_factory=list,
        description="What the writing does well"
    )

    weaknesses: list[str] = Field(
        default_factory=list,
        description="Potential watch-outs"
    )

    tagline: str = Field(
        ...,
        min_length=1,
        description="Memorable one-liner"
    )

    bio: str = Field(
        ...,
        min_length=1,
        description="Short bio capturing the essence (80-120 words)"
    )

    @property
    def keywords(self) -> list[str]:
        """Keywords handed to the visual stage."""
        return list(self.tone.adjectives)


# =============================================================================
# Visual Identity
# =============================================================================

class Swatch(BaseModel):
    """A named palette color."""

    name: str = Field(..., min_length=1)

    hex: str = Field(
        ...,
        description="Color as #RRGGBB"
    )

    @field_validator("hex")
    @classmethod
    def validate_hex(cls, v: str) -> str:
        """Accept #RRGGBB (any case, optional leading '#'), store lowercase."""
        value = v.strip()
        if not value.startswith("#"):
            value = f"#{value}"
        if not HEX_COLOR_PATTERN.match(value):
            raise ValueError(f"Invalid hex color: {v!r}")
        return value.lower()


class FontPairing(BaseModel):
    """Heading/body font pairing (Google Fonts family names)."""

    heading: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)


class VisualIdentity(BaseModel):
    """
    Result of the visual synthesis stage.

    Example:
        {
            "palette": [{"name": "Primary", "hex": "#ff4f00"}, ...],
            "fonts": {"heading": "Poppins", "body": "Inter"},
            "logo_prompt": "A minimal, scalable logo mark..."
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    palette: list[Swatch] = Field(
        ...,
        min_length=1,
        description="Brand colors"
    )

    fonts: FontPairing = Field(
        ...,
        description="Font pairing"
    )

    logo_prompt: str = Field(
        ...,
        min_length=1,
        alias="logoPrompt",
        description="Prompt for logo generation"
    )


# =============================================================================
# Document Assembly
# =============================================================================

class BrandDocument(BaseModel):
    """The assembled Brand Rider."""

    markdown: str = Field(
        ...,
        min_length=1,
        description="Brand Rider as Markdown"
    )

    format: PresentationFormat = Field(
        default=PresentationFormat.CUSTOM,
        description="Presentation format used"
    )


# =============================================================================
# Persistence
# =============================================================================

class BrandRecord(BaseModel):
    """
    Row inserted into the `brands` table.

    Built from the outputs of every stage with BrandRecord.from_generation().
    """

    user_id: UUID
    title: str
    tagline: str | None = None
    tone_notes: str | None = None
    signature_phrases: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    bio: str | None = None
    color_palette: list[dict[str, str]] = Field(default_factory=list)
    fonts: dict[str, str] = Field(default_factory=dict)
    format_preset: PresentationFormat = PresentationFormat.CUSTOM
    logo_url: str | None = None
    raw_context: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_generation(
        cls,
        user_id: UUID | str,
        style: StyleProfile,
        visual: VisualIdentity,
        document: BrandDocument,
        upload_ids: list[str] | None = None,
        logo_url: str | None = None,
    ) -> BrandRecord:
        """Assemble the row from the stage outputs."""
        return cls(
            user_id=user_id,
            title=style.tagline or "My Brand",
            tagline=style.tagline,
            tone_notes=json.dumps(style.tone.model_dump()),
            signature_phrases=style.signature_phrases,
            strengths=style.strengths,
            weaknesses=style.weaknesses,
            bio=style.bio,
            color_palette=[s.model_dump() for s in visual.palette],
            fonts=visual.fonts.model_dump(),
            format_preset=document.format,
            logo_url=logo_url,
            raw_context={
                "uploadIds": list(upload_ids or []),
                "markdown": document.markdown,
                "logoPrompt": visual.logo_prompt,
            },
        )

    def to_row(self) -> dict[str, Any]:
        """JSON-ready dict for Supabase insert."""
        return self.model_dump(mode="json")


class BrandResponse(BaseModel):
    """
    A brand as returned by GET /brands/{id}.

    Only the fields clients display; raw_context is kept server-side
    except for the markdown document.
    """

    id: UUID
    user_id: UUID
    title: str
    tagline: str | None = None
    bio: str | None = None
    signature_phrases: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    color_palette: list[dict[str, str]] = Field(default_factory=list)
    fonts: dict[str, str] = Field(default_factory=dict)
    format_preset: str = PresentationFormat.CUSTOM.value
    logo_url: str | None = None
    markdown: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> BrandResponse:
        """Build from a `brands` row."""
        raw_context = row.get("raw_context") or {}
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            title=row.get("title") or "My Brand",
            tagline=row.get("tagline"),
            bio=row.get("bio"),
            signature_phrases=row.get("signature_phrases") or [],
            strengths=row.get("strengths") or [],
            weaknesses=row.get("weaknesses") or [],
            color_palette=row.get("color_palette") or [],
            fonts=row.get("fonts") or {},
            format_preset=row.get("format_preset") or PresentationFormat.CUSTOM.value,
            logo_url=row.get("logo_url"),
            markdown=raw_context.get("markdown"),
            created_at=row.get("created_at"),
        )
