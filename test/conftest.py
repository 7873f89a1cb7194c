"""
Test configuration for Forklet tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from concurrency import stop_all_tasks


@pytest.fixture(autouse=True)
def stop_leftover_tasks():
  """Stop any task actor a test left running"""
  yield
  stop_all_tasks(block=True, timeout=5)
