"""Computed context blocks — date, git branch, project ecosystems."""

import datetime
import logging
import os
import subprocess
from typing import Optional

logger = logging.getLogger("tether.hook.context")

GIT_TIMEOUT = 2  # seconds

# Marker file → ecosystem label (first match per label wins)
ECOSYSTEM_MARKERS: list[tuple[str, str]] = [
    ("pyproject.toml", "Python"),
    ("setup.py", "Python"),
    ("requirements.txt", "Python"),
    ("package.json", "Node.js"),
    ("tsconfig.json", "TypeScript"),
    ("Cargo.toml", "Rust"),
    ("go.mod", "Go"),
    ("pom.xml", "Java (Maven)"),
    ("build.gradle", "Java/Kotlin (Gradle)"),
    ("build.gradle.kts", "Java/Kotlin (Gradle)"),
    ("Gemfile", "Ruby"),
    ("composer.json", "PHP"),
    ("mix.exs", "Elixir"),
    ("pubspec.yaml", "Dart/Flutter"),
    ("CMakeLists.txt", "C/C++ (CMake)"),
    ("Dockerfile", "Docker"),
    ("docker-compose.yml", "Docker Compose"),
    ("Makefile", "Make"),
]

# Lockfile → package manager, reported alongside Node.js
NODE_LOCKFILES: list[tuple[str, str]] = [
    ("bun.lockb", "bun"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
]


def date_block(today: Optional[datetime.date] = None) -> str:
    today = today or datetime.date.today()
    return f"Current date: {today.isoformat()} ({today.strftime('%A')})"


def git_branch(cwd: str) -> Optional[str]:
    """Current branch name, or None outside a repo, on detached HEAD or on error."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"git branch lookup failed: {e}")
        return None

    if result.returncode != 0:
        return None
    branch = result.stdout.strip()
    if not branch or branch == "HEAD":
        return None
    return branch


def branch_block(cwd: str) -> Optional[str]:
    branch = git_branch(cwd)
    return f"Current git branch: {branch}" if branch else None


def detect_ecosystems(cwd: str) -> list[str]:
    """Labels for every ecosystem whose marker file exists in ``cwd``."""
    found: list[str] = []
    for marker, label in ECOSYSTEM_MARKERS:
        if label not in found and os.path.isfile(os.path.join(cwd, marker)):
            found.append(label)

    if "Node.js" in found:
        for lockfile, manager in NODE_LOCKFILES:
            if os.path.isfile(os.path.join(cwd, lockfile)):
                found[found.index("Node.js")] = f"Node.js ({manager})"
                break
    return found


def project_context_block(cwd: str) -> str:
    ecosystems = detect_ecosystems(cwd)
    if not ecosystems:
        return (
            "[PROJECT CONTEXT]\n"
            f"Working directory: {cwd}\n"
            "No recognized project markers detected. Inspect the tree before "
            "assuming a language or toolchain."
        )
    return (
        "[PROJECT CONTEXT]\n"
        f"Working directory: {cwd}\n"
        f"Detected ecosystems: {', '.join(ecosystems)}\n"
        "Follow the conventions, tooling and dependency manager already used here."
    )
