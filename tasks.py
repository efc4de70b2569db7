"""Developer tasks powered by Invoke."""

from __future__ import annotations

import os
import pathlib
import subprocess
from typing import List

from invoke import task

ROOT = pathlib.Path(__file__).parent.resolve()
RESULTS_DIR = ROOT / "results"


def _run(command: List[str], env: dict | None = None) -> None:
    RESULTS_DIR.mkdir(exist_ok=True)
    subprocess.run(
        " ".join(["uv", "run", *command]),
        shell=True,
        check=True,
        cwd=ROOT,
        env={**os.environ, **(env or {})},
    )


@task(help={"match": "Only run tests whose names match this expression"})
def tests(_context, match=None):
    """Run the unit tests (no browser needed)."""
    command = ["pytest", "tests/"]
    if match:
        command += ["-k", f'"{match}"']
    _run(command)


@task
def coverage(_context):
    """Run the unit tests under coverage and write reports to results/."""
    _run(["coverage", "erase"])
    _run(["coverage", "run", "-m", "pytest", "tests/", "--junitxml=results/pytest.xml"])
    _run(["coverage", "combine"])
    _run(["coverage", "report"])
    _run(["coverage", "html", "-d", "results/htmlcov"])
    _run(["coverage", "xml", "-o", "results/coverage.xml"])


@task
def lint(_context):
    """Check formatting and types."""
    _run(["black", "--check", "src", "tests", "tasks.py"])
    _run(["mypy", "src"])


@task(help={"driver": "chrome, firefox, edge, safari or remote", "include": "Tag to run"})
def atest(_context, driver="chrome", include=None):
    """Run the Robot Framework suites against SQUASH_WEBSITE_BASE_URL."""
    if not os.environ.get("SQUASH_WEBSITE_BASE_URL"):
        raise SystemExit("SQUASH_WEBSITE_BASE_URL must point at a deployed booking site")
    command = ["robot", "--outputdir", "results/atest"]
    if include:
        command += ["--include", include]
    _run(command + ["atest/"], env={"WEBDRIVER_TYPE": driver})
