"""Global test configuration for textcascade tests."""

from pathlib import Path

import pytest
import structlog

SAMPLES = Path(__file__).parent / "samples"


@pytest.fixture(scope="session")
def sample_sol() -> str:
    """Structured source sample with line and block comments."""
    return (SAMPLES / "sample.sol").read_text(encoding="utf-8")


@pytest.fixture(scope="session")
def sample_md() -> str:
    """Markdown sample covering every heading level, fences and rules."""
    return (SAMPLES / "sample.md").read_text(encoding="utf-8")


@pytest.fixture
def uniform_lines() -> list[str]:
    """Fifty 9-character lines: 'line 0001' .. 'line 0050'."""
    return [f"line {i:04d}" for i in range(1, 51)]


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch, tmp_path):
    """Keep host environment and config files out of Settings()."""
    for name in [
        "CHUNK_SIZE",
        "CHUNK_OVERLAP",
        "COUNT_WHITESPACE",
        "CONTENT_TYPE",
        "CUSTOM_SEPARATORS",
        "SPLIT_DEBUG",
        "LOG_FORMAT",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # CLI runs bind the logger to a captured stderr that is closed afterwards
    structlog.reset_defaults()
