"""Fixtures for integration tests using a fake framework process."""

import json
import sys
from pathlib import Path
from typing import Any, Protocol

import pytest

from suite_runner.config import RunnerConfig

FAKE_FRAMEWORK = '''
import json
import os
import re
import sys
from pathlib import Path

target = sys.argv[-1]
match = re.fullmatch(r"(.*?)(?:\\[([0-9,]+)\\])?", target)
path = Path(match.group(1))
scope = {int(line) for line in match.group(2).split(",")} if match.group(2) else None

plan = json.loads(path.read_text())
counter = path.with_suffix(".attempts")
attempt = int(counter.read_text()) if counter.exists() else 0
counter.write_text(str(attempt + 1))

with path.with_suffix(".calls").open("a") as calls:
    calls.write(json.dumps({"argv": sys.argv[1:], "ci": os.environ.get("CI")}) + "\\n")

print("Randomized with seed 4242")
mode = plan.get("mode", "report")
if mode == "empty":
    sys.exit(1)
if mode == "garbage":
    print("Finished in 0.01 seconds")
    sys.exit(1)

examples = []
for line, outcomes in sorted(plan["cases"].items()):
    line = int(line)
    if scope is not None and line not in scope:
        continue
    status = outcomes[min(attempt, len(outcomes) - 1)]
    example = {"status": status, "line_number": line,
               "full_description": f"{path.stem} case at line {line}"}
    if status == "failed":
        example["exception"] = {"class": "ExpectationNotMetError",
                                "message": f"line {line} attempt {attempt}"}
    examples.append(example)

print(json.dumps({"duration": plan.get("duration", 0.01), "examples": examples}))
sys.exit(1 if any(e["status"] == "failed" for e in examples) else 0)
'''


class WriteSpecFn(Protocol):
    """Protocol for writing a planned test file."""

    def __call__(self, name: str, plan: dict[str, Any]) -> Path:
        """Write a test file whose content plans the fake framework's output."""


class ReadCallsFn(Protocol):
    """Protocol for reading recorded framework invocations."""

    def __call__(self, spec: Path) -> list[dict[str, Any]]:
        """Return the invocations recorded for a test file."""


@pytest.fixture
def framework_script(tmp_path: Path) -> Path:
    """Write the fake framework script."""
    script = tmp_path / "fake_framework.py"
    script.write_text(FAKE_FRAMEWORK)
    return script


@pytest.fixture
def runner_config(framework_script: Path) -> RunnerConfig:
    """Configuration that runs the fake framework with this interpreter."""
    return RunnerConfig(
        command=[sys.executable, str(framework_script)],
        workers=2,
        pattern="**/*_spec.json",
    )


@pytest.fixture
def spec_dir(tmp_path: Path) -> Path:
    """Directory holding planned test files."""
    directory = tmp_path / "spec"
    directory.mkdir()
    return directory


@pytest.fixture
def write_spec(spec_dir: Path) -> WriteSpecFn:
    """Return a function that writes planned test files.

    ``plan["cases"]`` maps line numbers to per-attempt statuses; the last
    status repeats for later attempts.
    """

    def _write(name: str, plan: dict[str, Any]) -> Path:
        spec = spec_dir / f"{name}_spec.json"
        spec.write_text(json.dumps(plan))
        return spec

    return _write


@pytest.fixture
def read_calls() -> ReadCallsFn:
    """Return a function that reads recorded invocations for a test file."""

    def _read(spec: Path) -> list[dict[str, Any]]:
        calls = spec.with_suffix(".calls")
        if not calls.exists():
            return []
        return [json.loads(line) for line in calls.read_text().splitlines()]

    return _read
