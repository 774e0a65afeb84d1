# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the BrandRider API:
# - test_loading_state.py / test_multi_step.py: Progress primitives
# - test_agents.py: Generation agents with a mocked OpenAI client
# - test_workflow.py: The full generation pipeline
# - test_api.py: HTTP endpoints
#
# Run tests with: pytest
# =============================================================================
