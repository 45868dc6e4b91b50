"""
virtual_lab/labs/content.py
Typed views over the JSON content blocks stored on an Experiment.

Each section stores its own shape:
  aim        : {objectives: [str], outcomes: [str], description?: str}
  theory     : {sections: [{title, content}]}
  procedure  : {steps: [{title, description?, instructions: [str]}], safety_notes?: [str]}
  simulation : {gpio_pins: [int], instructions: [str], code_example?: str,
                learning_points: [str]}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from virtual_lab.errors import InvalidContentBlock

DEFAULT_GPIO_PINS = [17, 18, 27, 22]


def _str_list(raw: Dict[str, Any], key: str, section: str) -> List[str]:
    value = raw.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InvalidContentBlock(f"{section}.{key} must be a list of strings")
    return list(value)


def _opt_str(raw: Dict[str, Any], key: str, section: str) -> Optional[str]:
    value = raw.get(key)
    if value is not None and not isinstance(value, str):
        raise InvalidContentBlock(f"{section}.{key} must be a string")
    return value


def _req_str(raw: Dict[str, Any], key: str, section: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidContentBlock(f"{section}.{key} is required")
    return value


@dataclass
class AimContent:
    objectives: List[str] = field(default_factory=list)
    outcomes: List[str] = field(default_factory=list)
    description: Optional[str] = None

    kind = "aim"

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "AimContent":
        return cls(
            objectives=_str_list(raw, "objectives", "aim"),
            outcomes=_str_list(raw, "outcomes", "aim"),
            description=_opt_str(raw, "description", "aim"),
        )


@dataclass
class TheorySection:
    title: str
    content: str


@dataclass
class TheoryContent:
    sections: List[TheorySection] = field(default_factory=list)

    kind = "theory"

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "TheoryContent":
        items = raw.get("sections") or []
        if not isinstance(items, list):
            raise InvalidContentBlock("theory.sections must be a list")
        sections = []
        for item in items:
            if not isinstance(item, dict):
                raise InvalidContentBlock("theory.sections entries must be objects")
            sections.append(TheorySection(
                title=_req_str(item, "title", "theory.sections"),
                content=_req_str(item, "content", "theory.sections"),
            ))
        return cls(sections=sections)


@dataclass
class ProcedureStep:
    title: str
    description: Optional[str] = None
    instructions: List[str] = field(default_factory=list)


@dataclass
class ProcedureContent:
    steps: List[ProcedureStep] = field(default_factory=list)
    safety_notes: List[str] = field(default_factory=list)

    kind = "procedure"

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "ProcedureContent":
        items = raw.get("steps") or []
        if not isinstance(items, list):
            raise InvalidContentBlock("procedure.steps must be a list")
        steps = []
        for item in items:
            if not isinstance(item, dict):
                raise InvalidContentBlock("procedure.steps entries must be objects")
            steps.append(ProcedureStep(
                title=_req_str(item, "title", "procedure.steps"),
                description=_opt_str(item, "description", "procedure.steps"),
                instructions=_str_list(item, "instructions", "procedure.steps"),
            ))
        return cls(
            steps=steps,
            safety_notes=_str_list(raw, "safety_notes", "procedure"),
        )


@dataclass
class SimulationContent:
    gpio_pins: List[int] = field(default_factory=lambda: list(DEFAULT_GPIO_PINS))
    instructions: List[str] = field(default_factory=list)
    code_example: Optional[str] = None
    learning_points: List[str] = field(default_factory=list)

    kind = "simulation"

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "SimulationContent":
        pins = raw.get("gpio_pins") or list(DEFAULT_GPIO_PINS)
        if not isinstance(pins, list) or not all(
            isinstance(p, int) and not isinstance(p, bool) for p in pins
        ):
            raise InvalidContentBlock("simulation.gpio_pins must be a list of integers")
        return cls(
            gpio_pins=list(pins),
            instructions=_str_list(raw, "instructions", "simulation"),
            code_example=_opt_str(raw, "code_example", "simulation"),
            learning_points=_str_list(raw, "learning_points", "simulation"),
        )

    def initial_pin_states(self) -> Dict[int, str]:
        """Every simulated pin starts LOW."""
        return {pin: "low" for pin in self.gpio_pins}


BLOCK_TYPES = {
    "aim":        AimContent,
    "theory":     TheoryContent,
    "procedure":  ProcedureContent,
    "simulation": SimulationContent,
}


def parse_block(section: str, raw: Any):
    """
    Validate one stored block. Returns None when the experiment has no
    content for the section, or when the section carries no block at all
    (quizzes and feedback live in their own tables).
    """
    block_type = BLOCK_TYPES.get(section)
    if block_type is None or raw is None:
        return None
    if not isinstance(raw, dict):
        raise InvalidContentBlock(f"{section} content must be an object")
    return block_type.from_json(raw)
