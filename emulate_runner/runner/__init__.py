"""Runner module - test classification and multiplexed execution."""

from .classifier import include_test_file, is_e2e_path
from .orchestrator import MultiplexRunner, current_emulate, multiplexed
from .result_collector import CollectedResult, CollectedTest, ResultCollector

__all__ = [
    "CollectedResult",
    "CollectedTest",
    "MultiplexRunner",
    "ResultCollector",
    "current_emulate",
    "include_test_file",
    "is_e2e_path",
    "multiplexed",
]
