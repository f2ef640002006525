"""emulate-runner - spec/e2e test orchestration with emulation profiles."""

from .runner.classifier import include_test_file, is_e2e_path
from .runner.orchestrator import MultiplexRunner, current_emulate, multiplexed
from .profiles.selector import select_profiles
from .session import run_session

__version__ = "0.1.0"

__all__ = [
    "MultiplexRunner",
    "current_emulate",
    "include_test_file",
    "is_e2e_path",
    "multiplexed",
    "run_session",
    "select_profiles",
]
