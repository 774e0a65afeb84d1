# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the Pydantic models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Models serialize to JSON properly
# - Default values work as expected
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from uuid import UUID

import pytest
from pydantic import ValidationError

from core.models import (
    BrandRecord,
    BrandResponse,
    GenerateBrandRequest,
    GenerationOutcome,
    Phase,
    PresentationFormat,
    ProgressSnapshot,
    Step,
    StepStatus,
    StyleProfile,
    Swatch,
    VisualIdentity,
)


# =============================================================================
# Progress Models
# =============================================================================

class TestProgressModels:
    """Tests for Step and ProgressSnapshot."""

    def test_step_defaults(self):
        step = Step(id="style", label="Style analysis")

        assert step.status == StepStatus.PENDING
        assert step.message is None

    def test_snapshot_progress_bounds(self):
        with pytest.raises(ValidationError):
            ProgressSnapshot(progress=101)

    def test_snapshot_is_immutable(self):
        snapshot = ProgressSnapshot()

        with pytest.raises(ValidationError):
            snapshot.progress = 50

    def test_snapshot_serializes_enums_as_strings(self):
        snapshot = ProgressSnapshot(
            phase=Phase.LOADING,
            steps=[Step(id="style", label="Style", status=StepStatus.LOADING)],
        )

        data = snapshot.model_dump(mode="json")

        assert data["phase"] == "loading"
        assert data["steps"][0]["status"] == "loading"


# =============================================================================
# Brand Models
# =============================================================================

class TestPresentationFormat:
    """Tests for lenient format parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("ufc", PresentationFormat.UFC),
        ("  Executive ", PresentationFormat.EXECUTIVE),
        ("NFL", PresentationFormat.NFL),
        ("podcast", PresentationFormat.CUSTOM),
        (None, PresentationFormat.CUSTOM),
        ("", PresentationFormat.CUSTOM),
    ])
    def test_parse(self, raw, expected):
        assert PresentationFormat.parse(raw) == expected

    def test_twelve_formats(self):
        assert len(PresentationFormat) == 12


class TestStageModels:
    """Tests for style and visual payloads."""

    def test_style_accepts_camel_case(self, style_dict):
        style = StyleProfile.model_validate(style_dict)

        assert style.signature_phrases == ["Ship it", "No fluff"]
        assert style.keywords == ["action-oriented", "witty", "concise"]

    def test_style_requires_tagline_and_bio(self):
        with pytest.raises(ValidationError):
            StyleProfile.model_validate({"tagline": "x"})

    def test_style_optional_lists_default_empty(self):
        style = StyleProfile(tagline="x", bio="y")

        assert style.tone.adjectives == []
        assert style.keywords == []

    @pytest.mark.parametrize("raw,expected", [
        ("#FF4F00", "#ff4f00"),
        ("ff4f00", "#ff4f00"),
        (" #1a1a1a ", "#1a1a1a"),
    ])
    def test_swatch_hex_normalized(self, raw, expected):
        assert Swatch(name="c", hex=raw).hex == expected

    @pytest.mark.parametrize("raw", ["orange", "#fff", "#gggggg"])
    def test_swatch_hex_rejected(self, raw):
        with pytest.raises(ValidationError):
            Swatch(name="c", hex=raw)

    def test_visual_requires_palette(self, visual_dict):
        visual_dict["palette"] = []

        with pytest.raises(ValidationError):
            VisualIdentity.model_validate(visual_dict)


class TestBrandRecord:
    """Tests for assembling and reading brand rows."""

    def test_from_generation(self, user_id, style_profile, visual_identity, brand_document):
        record = BrandRecord.from_generation(
            user_id=user_id,
            style=style_profile,
            visual=visual_identity,
            document=brand_document,
            upload_ids=["u1"],
            logo_url="https://cdn/logo.png",
        )

        row = record.to_row()
        assert row["user_id"] == user_id
        assert row["title"] == style_profile.tagline
        assert row["color_palette"][0] == {"name": "Primary", "hex": "#ff4f00"}
        assert row["fonts"] == {"heading": "Poppins", "body": "Inter"}
        assert row["format_preset"] == "executive"
        assert row["raw_context"]["uploadIds"] == ["u1"]
        assert row["raw_context"]["logoPrompt"] == visual_identity.logo_prompt
        assert row["logo_url"] == "https://cdn/logo.png"

    def test_response_from_row(self, brand_row):
        brand = BrandResponse.from_row(brand_row)

        assert isinstance(brand.id, UUID)
        assert brand.markdown == "# Builder"
        assert brand.format_preset == "executive"

    def test_response_from_sparse_row(self, brand_row):
        sparse = {"id": brand_row["id"], "user_id": brand_row["user_id"]}

        brand = BrandResponse.from_row(sparse)

        assert brand.title == "My Brand"
        assert brand.color_palette == []
        assert brand.markdown is None


# =============================================================================
# Generation Models
# =============================================================================

class TestGenerationModels:
    """Tests for the request and outcome."""

    def test_request_defaults(self, sample_corpus):
        request = GenerateBrandRequest(corpus=sample_corpus)

        assert request.format == PresentationFormat.CUSTOM
        assert request.generate_logo is False
        assert request.role_tags == []

    def test_request_unknown_format(self, sample_corpus):
        request = GenerateBrandRequest(corpus=sample_corpus, format="Podcast")

        assert request.format == PresentationFormat.CUSTOM

    def test_request_requires_corpus(self):
        with pytest.raises(ValidationError):
            GenerateBrandRequest(corpus="")

    def test_outcome_from_failed_snapshot(self):
        snapshot = ProgressSnapshot(
            phase=Phase.ERROR,
            steps=[
                Step(id="style", label="Style", status=StepStatus.COMPLETE),
                Step(id="visual", label="Visual", status=StepStatus.ERROR, message="Rate limited"),
            ],
        )

        outcome = GenerationOutcome.from_snapshot(
            snapshot,
            success=False,
            brand_id="0d9f8e7c-6b5a-4c3d-8e2f-1a0b9c8d7e6f",
            cancelled=True,
        )

        assert outcome.failed_step == "visual"
        assert outcome.error == "Rate limited"
        assert outcome.brand_id is None
        assert outcome.cancelled is True

    def test_successful_outcome_is_never_cancelled(self):
        outcome = GenerationOutcome.from_snapshot(ProgressSnapshot(), success=True, cancelled=True)

        assert outcome.cancelled is False
