import os
from pathlib import Path

import pytest

# Subprocess coverage startup
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()


SAMPLE_PROGRAM = "loop: while true\nx = x + 1\nendwhile\n$$\n"


@pytest.fixture
def sample_program(tmp_path: Path) -> Path:
    path = tmp_path / "sample.lb"
    path.write_text(SAMPLE_PROGRAM, encoding="utf-8")
    return path
