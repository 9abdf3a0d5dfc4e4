from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

IMPACT_LEVELS = ("CRITICAL", "HIGH", "MEDIUM-HIGH", "MEDIUM", "LOW-MEDIUM", "LOW")


@dataclass
class CodeExample:
    label: str  # "Incorrect" | "Correct" | "Example" ...
    description: str = ""
    lead: str = ""
    code: str = ""
    language: str = ""
    additional_text: str = ""
    has_code: bool = False
    fence: str = "```"


@dataclass
class Rule:
    filename: str
    prefix: str
    title: str
    impact: str
    impact_description: str = ""
    explanation: str = ""
    examples: List[CodeExample] = field(default_factory=list)
    references: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    section: int = 0
    id: str = ""


@dataclass
class Section:
    number: int
    prefix: str
    title: str
    impact: str = "MEDIUM"
    description: str = ""
    rules: List[Rule] = field(default_factory=list)


@dataclass
class GuidelinesDocument:
    title: str
    description: str
    version: str
    organization: str
    date: str
    abstract: str
    sections: List[Section] = field(default_factory=list)
    references: List[str] = field(default_factory=list)

    @property
    def rule_count(self) -> int:
        return sum(len(s.rules) for s in self.sections)

    def find_rule(self, rule_id: str) -> Optional[Rule]:
        for s in self.sections:
            for r in s.rules:
                if r.id == rule_id:
                    return r
        return None
