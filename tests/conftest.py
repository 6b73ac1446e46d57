"""Pytest configuration for tests.

No sys.path hacks - tests should import from installed promptseg package.
"""

import subprocess

import pytest

from promptseg.kernel import oracle


class FakeNode:
    """Stands in for `subprocess.run` so tests never depend on a real node binary."""

    def __init__(self, stdout="v12.0.0\n", returncode=0, exc=None):
        self.stdout = stdout
        self.returncode = returncode
        self.exc = exc
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append((list(args), kwargs))
        if self.exc is not None:
            raise self.exc
        return subprocess.CompletedProcess(args, self.returncode, stdout=self.stdout, stderr=None)


@pytest.fixture
def fake_node(monkeypatch):
    """Patch the runtime command; returns the fake so tests can reconfigure it."""
    fake = FakeNode()
    monkeypatch.setattr(oracle.subprocess, "run", fake)
    return fake


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Point config discovery at a path that does not exist."""
    monkeypatch.setenv("PROMPTSEG_CONFIG", str(tmp_path / "no-such-config.toml"))
