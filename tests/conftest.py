# tests/conftest.py
import argparse
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure the app package is findable by pytest by adding the project root to the path
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

from llm_renamer.prompts import (  # noqa: E402
    BATCH_FORMAT_SYSTEM, CLASSIFY_SYSTEM, EPISODE_SYSTEM, SEASON_SYSTEM, SERIES_SYSTEM,
)


class StubGenerator:
    """
    Stands in for the text client stack. Answers are looked up by (prompt kind,
    user input); `responses[kind]` may also be a callable taking the user input.
    An answer that is an exception instance is raised.
    """

    KINDS = {
        CLASSIFY_SYSTEM: 'classify',
        EPISODE_SYSTEM: 'episode',
        SERIES_SYSTEM: 'series',
        SEASON_SYSTEM: 'season',
        BATCH_FORMAT_SYSTEM: 'batch',
    }

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []

    async def request(self, request):
        kind = self.KINDS[request.system]
        self.calls.append((kind, request.user_input))
        answer = self.responses.get(kind)
        if callable(answer):
            answer = answer(request.user_input)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def count(self, kind):
        return sum(1 for k, _ in self.calls if k == kind)


@pytest.fixture
def stub_generator():
    return StubGenerator()


@pytest.fixture
def mock_cfg_helper():
    mock_args = argparse.Namespace(profile='default')
    mock_config_manager = MagicMock()

    class MockConfigHelper:
        def __init__(self, manager, args): self.manager = manager; self.args = args; self.profile = getattr(args, 'profile', 'default') or 'default'
        def __call__(self, key, default_value=None, arg_value=None):
            if arg_value is not None: return arg_value
            if key in self.manager._mock_values: return self.manager._mock_values[key]
            return default_value

    mock_config_manager._mock_values = {}
    return MockConfigHelper(mock_config_manager, mock_args)
