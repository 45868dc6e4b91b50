"""
virtual_lab/labs/sequencer.py
Fixed, linear curriculum every experiment follows.
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from virtual_lab.errors import UnknownSection

# ── Curriculum ────────────────────────────────────────────────────────────────
# Learners may move backward freely. Moving forward from a gated section only
# needs local completion (every question answered / every rating chosen); a
# failed quiz does not block the next section.

SECTIONS: Tuple[str, ...] = (
    "aim",
    "theory",
    "pretest",
    "procedure",
    "simulation",
    "posttest",
    "feedback",
)

SECTION_META: Dict[str, Dict[str, str]] = {
    "aim":        {"label": "Aim",        "subtitle": "Understand the objective of this experiment"},
    "theory":     {"label": "Theory",     "subtitle": "Learn the concepts behind the experiment"},
    "pretest":    {"label": "Pretest",    "subtitle": "Test your understanding before starting the experiment"},
    "procedure":  {"label": "Procedure",  "subtitle": "Follow the steps to carry out the experiment"},
    "simulation": {"label": "Simulation", "subtitle": "Try it out in the interactive simulation"},
    "posttest":   {"label": "Posttest",   "subtitle": "Check what you have learned"},
    "feedback":   {"label": "Feedback",   "subtitle": "Tell us how this experiment went"},
}

INITIAL_SECTION = SECTIONS[0]
TERMINAL_SECTION = SECTIONS[-1]

QUIZ_SECTIONS = frozenset({"pretest", "posttest"})
_COMPLETION_GATED = QUIZ_SECTIONS | {"feedback"}


def _index(section: str) -> int:
    try:
        return SECTIONS.index(section)
    except ValueError:
        raise UnknownSection(section) from None


def is_section(section) -> bool:
    return section in SECTIONS


def ensure_section(section: str) -> str:
    _index(section)
    return section


def next_section(section: str) -> Optional[str]:
    """Section after `section`, or None when it is the last one."""
    i = _index(section)
    return SECTIONS[i + 1] if i + 1 < len(SECTIONS) else None


def previous_section(section: str) -> Optional[str]:
    """Section before `section`, or None when it is the first one."""
    i = _index(section)
    return SECTIONS[i - 1] if i > 0 else None


def requires_completion(section: str) -> bool:
    """True when the Next control waits for the learner to finish the section."""
    _index(section)
    return section in _COMPLETION_GATED


def section_label(section: str) -> str:
    _index(section)
    return SECTION_META[section]["label"]


def section_from_path(path: str) -> Optional[str]:
    """
    Active section for a /labs/<category>/<experiment>/<section> path.
    Anything else (including the experiment root) yields None.
    """
    parts = [p for p in (path or "").split("?")[0].split("/") if p]
    if len(parts) != 4 or parts[0] != "labs":
        return None
    return parts[3] if parts[3] in SECTIONS else None


def order_sections(sections) -> list:
    """Deduplicate known sections and sort them into curriculum order."""
    return sorted({s for s in sections if s in SECTIONS}, key=SECTIONS.index)
