"""Shared fixtures for the followings gateway tests."""

import os
from unittest.mock import patch

import pytest

from tests.upstream_stub import ScriptedUpstream

TEST_CREDENTIAL = "test-upstream-key"


@pytest.fixture
def upstream():
    """A fresh scripted upstream with no routes."""
    return ScriptedUpstream()


@pytest.fixture
def upstream_env():
    """Environment with a configured credential and the default adapter."""
    env = {
        "UPSTREAM_API_KEY": TEST_CREDENTIAL,
        "SOCIALDATA_API_KEY": "",
        "UPSTREAM_ADAPTER": "",
        "UPSTREAM_BASE_URL": "",
        "UPSTREAM_TIMEOUT_SECONDS": "",
    }
    with patch.dict(os.environ, env):
        yield env
