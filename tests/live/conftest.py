"""Skip guards for live tests.

Every live test that talks to AWS is guarded by a pytest.mark.skipif that
checks for the required environment variables. Tests silently skip when
configuration is absent; they never fail due to missing config.

Required environment variables:
  CLINICAL_ASSISTANT_BUCKET_NAME   Bucket the assistant reads and writes
  AWS_ACCESS_KEY_ID                Standard boto3 credentials (or a profile)
  CLINICAL_ASSISTANT_REGION        Optional, defaults to ap-southeast-2
  CLINICAL_ASSISTANT_LIVE_JOB      Name of an already COMPLETED job to load

Set them in your shell before running:
  export CLINICAL_ASSISTANT_BUCKET_NAME=my-bucket
  pytest tests/live -v -m live
"""

from __future__ import annotations

import os

import pytest

from clinical_assistant.config import AssistantConfig


def _skip_unless(env_var: str, reason: str | None = None):
    """Return a pytest.mark.skipif that skips when env_var is not set."""
    msg = reason or f"Set {env_var} to run this test"
    return pytest.mark.skipif(not os.environ.get(env_var), reason=msg)


skip_no_bucket = _skip_unless("CLINICAL_ASSISTANT_BUCKET_NAME", "Set CLINICAL_ASSISTANT_BUCKET_NAME to run live AWS tests")
skip_no_job = _skip_unless("CLINICAL_ASSISTANT_LIVE_JOB", "Set CLINICAL_ASSISTANT_LIVE_JOB to load a real conversation")


@pytest.fixture(scope="session")
def live_config() -> AssistantConfig:
    if not os.environ.get("CLINICAL_ASSISTANT_BUCKET_NAME"):
        pytest.skip("CLINICAL_ASSISTANT_BUCKET_NAME not set")
    return AssistantConfig()


@pytest.fixture(scope="session")
def live_job_name() -> str:
    name = os.environ.get("CLINICAL_ASSISTANT_LIVE_JOB", "")
    if not name:
        pytest.skip("CLINICAL_ASSISTANT_LIVE_JOB not set")
    return name
