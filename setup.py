"""Setup configuration for emulate-runner."""

from setuptools import setup, find_packages

setup(
    name="emulate-runner",
    version="0.1.0",
    description="Test orchestration with per-profile e2e multiplexing",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.1.0",
        "pytest>=8.0",
    ],
    extras_require={
        "test": [
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "emulate-runner=emulate_runner.cli:main",
        ],
    },
)
