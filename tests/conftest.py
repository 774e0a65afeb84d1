# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides sample stage outputs (style, visual, document) and requests
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest


TEST_USER_ID = "550e8400-e29b-41d4-a716-446655440000"
OTHER_USER_ID = "6f1c2a9e-3b7d-4e8f-9a0b-1c2d3e4f5a6b"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def user_id():
    """Owner used across generation tests."""
    return TEST_USER_ID


@pytest.fixture
def sample_corpus():
    """A corpus comfortably over the minimum length."""
    return (
        "I build products that ship. Every week I write about what worked, "
        "what broke, and what I would do differently. No fluff, just the "
        "lessons from running a small team that moves fast."
    )


@pytest.fixture
def style_dict():
    """Style analysis payload as the model returns it."""
    return {
        "tone": {
            "adjectives": ["action-oriented", "witty", "concise"],
            "dos": ["Use active voice", "Lead with the outcome"],
            "donts": ["Avoid jargon"],
        },
        "signaturePhrases": ["Ship it", "No fluff"],
        "strengths": ["Clear", "Practical"],
        "weaknesses": ["Can sound abrupt"],
        "tagline": "Builder of things that ship",
        "bio": "A founder who writes weekly about building small, fast teams.",
    }


@pytest.fixture
def visual_dict():
    """Visual identity payload as the model returns it."""
    return {
        "palette": [
            {"name": "Primary", "hex": "#ff4f00"},
            {"name": "Ink", "hex": "#1a1a1a"},
            {"name": "Paper", "hex": "#fafafa"},
        ],
        "fonts": {"heading": "Poppins", "body": "Inter"},
        "logoPrompt": "A minimal, scalable logo mark built from a forward arrow",
    }


@pytest.fixture
def style_profile(style_dict):
    from core.models.brand import StyleProfile
    return StyleProfile.model_validate(style_dict)


@pytest.fixture
def visual_identity(visual_dict):
    from core.models.brand import VisualIdentity
    return VisualIdentity.model_validate(visual_dict)


@pytest.fixture
def brand_document():
    from core.models.brand import BrandDocument, PresentationFormat
    return BrandDocument(
        markdown="# Builder of things that ship\n\n## Voice\n- Action-oriented",
        format=PresentationFormat.EXECUTIVE,
    )


@pytest.fixture
def generate_request(sample_corpus):
    from core.models.generation import GenerateBrandRequest
    return GenerateBrandRequest(
        corpus=sample_corpus,
        format="executive",
        role_tags=["founder"],
    )


@pytest.fixture
def brand_row(user_id):
    """A `brands` row as Supabase returns it."""
    return {
        "id": "0d9f8e7c-6b5a-4c3d-8e2f-1a0b9c8d7e6f",
        "user_id": user_id,
        "title": "Builder of things that ship",
        "tagline": "Builder of things that ship",
        "bio": "A founder who writes weekly about building small, fast teams.",
        "signature_phrases": ["Ship it"],
        "strengths": ["Clear"],
        "weaknesses": [],
        "color_palette": [{"name": "Primary", "hex": "#ff4f00"}],
        "fonts": {"heading": "Poppins", "body": "Inter"},
        "format_preset": "executive",
        "logo_url": None,
        "raw_context": {"markdown": "# Builder", "uploadIds": []},
        "created_at": "2026-01-15T10:30:00+00:00",
    }
