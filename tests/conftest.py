"""Pytest configuration and shared fixtures."""

import datetime

import pytest


@pytest.fixture
def today():
    """A fixed date so date blocks are predictable."""
    return datetime.date(2026, 10, 19)


@pytest.fixture
def no_git(monkeypatch):
    """Pretend the working directory is not a git checkout."""
    monkeypatch.setattr("tether.hook.injector.branch_block", lambda cwd: None)


@pytest.fixture
def on_branch(monkeypatch):
    """Pretend the working directory is on branch 'feature/retry'."""
    monkeypatch.setattr(
        "tether.hook.injector.branch_block",
        lambda cwd: "Current git branch: feature/retry",
    )
