"""Flag registry — what each prompt flag injects.

Every flag maps to one block of directive text. Aliases share a block,
lookup is case-insensitive and unknown flags resolve to nothing.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from .context import project_context_block


# ============================================================
# STATIC BLOCKS
# ============================================================

ULTRATHINK = (
    "[THINKING: MAXIMUM]\n"
    "ultrathink. Use the maximum reasoning budget before answering. Explore "
    "alternative approaches, check edge cases and failure modes, and verify "
    "each conclusion before acting on it."
)

THINK = (
    "[THINKING: EXTENDED]\n"
    "Think carefully step by step before answering. Consider at least one "
    "alternative approach before committing."
)

DEBUG = (
    "[DEBUG MODE]\n"
    "Debug systematically:\n"
    "1. Reproduce the failure and read the full error output.\n"
    "2. Form hypotheses ranked by likelihood.\n"
    "3. Confirm the root cause with evidence (logs, prints, a failing test) before changing code.\n"
    "4. Fix the cause, not the symptom, and verify the fix."
)

PLAN = (
    "[PLAN FIRST]\n"
    "Before writing any code, present a short plan: files to touch, the "
    "approach, and risks. Wait for confirmation when the change is large "
    "or destructive."
)

VERIFY = (
    "[VERIFY]\n"
    "After making changes, prove they work: run the relevant tests, linters "
    "or the program itself and report the actual output. Do not claim "
    "success without evidence."
)

REVIEW = (
    "[CODE REVIEW]\n"
    "Review the code like a senior engineer: correctness, edge cases, error "
    "handling, security, naming and test coverage. List findings by severity "
    "with file:line references."
)

TDD = (
    "[TEST FIRST]\n"
    "Write a failing test that captures the requirement, make it pass with "
    "the smallest change, then refactor with the tests green."
)

SECURITY = (
    "[SECURITY]\n"
    "Treat all input as untrusted. Check for injection, path traversal, "
    "secrets in code or logs, unsafe deserialization and missing "
    "authorization. Prefer safe library defaults over hand-rolled checks."
)

CONCISE = (
    "[CONCISE]\n"
    "Answer briefly. No preamble, no recap, no filler. Code and facts only."
)

EXPLAIN = (
    "[EXPLAIN]\n"
    "Explain the reasoning behind the answer: what the code does, why it is "
    "shaped this way, and what trade-offs were made."
)

STANDARDS = (
    "[ENGINEERING STANDARDS]\n"
    "- Match the existing code style, structure and libraries of the project.\n"
    "- Keep changes minimal and focused on the request; no drive-by refactors.\n"
    "- Handle errors explicitly; never swallow exceptions silently.\n"
    "- Add or update tests for behavior you change.\n"
    "- No placeholder code, no TODO stubs in place of an implementation.\n"
    "- Verify the change works before reporting it done."
)


# ============================================================
# REGISTRY
# ============================================================

@dataclass(frozen=True)
class Flag:
    """One selectable behavior. ``render`` receives the working directory."""

    name: str
    summary: str
    render: Callable[[str], str]
    aliases: tuple[str, ...] = field(default=())

    @property
    def identifiers(self) -> tuple[str, ...]:
        return (self.name,) + self.aliases


def _static(text: str) -> Callable[[str], str]:
    return lambda cwd: text


def _help(cwd: str) -> str:
    return HELP


FLAGS: list[Flag] = [
    Flag("ultrathink", "Maximum thinking budget", _static(ULTRATHINK), ("u",)),
    Flag("think", "Extended step-by-step thinking", _static(THINK), ("t",)),
    Flag("debug", "Systematic root-cause debugging", _static(DEBUG), ("d",)),
    Flag("plan", "Plan before writing code", _static(PLAN), ("p",)),
    Flag("verify", "Prove changes work before reporting", _static(VERIFY), ("v",)),
    Flag("review", "Senior-level code review", _static(REVIEW), ("r",)),
    Flag("tdd", "Test-first workflow", _static(TDD), ("test",)),
    Flag("security", "Security-focused pass", _static(SECURITY), ("sec",)),
    Flag("concise", "Short answers, no filler", _static(CONCISE), ("c",)),
    Flag("explain", "Explain the reasoning", _static(EXPLAIN), ("e",)),
    Flag("standards", "Engineering standards (explicit)", _static(STANDARDS), ("s", "std")),
    Flag("context", "Detected project ecosystems", project_context_block, ("ctx",)),
    Flag("help", "This reference", _help, ("h",)),
]

_BY_IDENTIFIER: dict[str, Flag] = {
    ident: flag for flag in FLAGS for ident in flag.identifiers
}

STANDARDS_FLAG = _BY_IDENTIFIER["standards"]


def _build_help() -> str:
    lines = [
        "[PROMPT FLAGS]",
        "Add flags at the start or end of a prompt, e.g. 'fix the login bug -d -v'.",
        "Type 'hh' alone to show this reference.",
        "",
    ]
    for flag in FLAGS:
        idents = ", ".join(f"-{i}" for i in sorted(flag.identifiers, key=len))
        lines.append(f"  {idents:<24} {flag.summary}")
    lines.append("")
    lines.append(
        "Engineering standards are added automatically unless the prompt is "
        "trivial (ls, greetings, '?', show/list/get ...)."
    )
    return "\n".join(lines)


HELP = _build_help()


def resolve(identifier: str) -> Optional[Flag]:
    """Look up a flag by any of its identifiers, ignoring case."""
    return _BY_IDENTIFIER.get(identifier.lower())
