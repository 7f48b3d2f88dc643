"""Shared test fixtures."""

import pytest

from stepflow.config.settings import Settings


SAMPLE_PLAN = """Step 1: Start
Step 2a: Resume Upload
Step 2b: Skills/Interests Input
Step 3: AI matches jobs/domains
Step 4: AI suggests roadmaps and courses
Step 5: Company search and interview prep
Step 6: Receive insights"""


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def sample_plan() -> str:
    return SAMPLE_PLAN
