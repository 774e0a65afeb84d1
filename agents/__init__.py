# =============================================================================
# agents/ - AI Agent Definitions
# =============================================================================
# This package contains the agents behind each brand generation stage:
# - style_analyst.py: Writing corpus -> StyleProfile
# - visual_designer.py: Keywords, roles, bio -> VisualIdentity
# - document_writer.py: Style + visual -> Brand Rider markdown
# - logo_designer.py: Logo concept -> PNG bytes
#
# The workflow runs them in sequence: Style -> Visual -> Document -> Logo
#
# Shared plumbing:
# - base.py: OpenAI client, JSON parsing, error mapping
#
# Prompts:
# - prompts/: System and user prompts per stage
# =============================================================================

from agents.base import (
    AgentError,
    BaseAgent,
    MalformedResponseError,
    create_openai_resource,
    strip_code_fences,
)
from agents.style_analyst import InsufficientCorpusError, StyleAnalystAgent, prepare_corpus
from agents.visual_designer import VisualDesignerAgent
from agents.document_writer import DocumentWriterAgent
from agents.logo_designer import LogoDesignerAgent

__all__ = [
    # Base
    "AgentError",
    "BaseAgent",
    "MalformedResponseError",
    "create_openai_resource",
    "strip_code_fences",
    # Agents
    "StyleAnalystAgent",
    "InsufficientCorpusError",
    "prepare_corpus",
    "VisualDesignerAgent",
    "DocumentWriterAgent",
    "LogoDesignerAgent",
]
