"""Skill configuration: built-in skill table plus optional skills.yaml overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from .errors import ConfigError, UnknownSkillError
from .loader import load_yaml

SKILLS_DIR = "skills"
DEFAULT_CONFIG = "skills.yaml"
DEFAULT_SKILL = "redis-best-practices"

SKILLS: Dict[str, Dict[str, Any]] = {
    "redis-best-practices": {
        "title": "Redis Best Practices",
        "description": "Redis applications",
        "section_map": {
            "ds": 1,
            "key": 2,
            "cmd": 3,
            "conn": 4,
            "cache": 5,
            "use": 6,
            "msg": 7,
            "stack": 8,
            "memory": 9,
            "resilience": 10,
        },
    },
    "redis-ai-patterns": {
        "title": "Redis AI Patterns",
        "description": "AI applications using Redis",
        "section_map": {
            "vec": 1,
            "search": 2,
            "rag": 3,
            "semcache": 4,
            "llm": 5,
            "agent": 6,
            "embed": 7,
            "integrate": 8,
            "perf": 9,
        },
    },
    "redis-infrastructure": {
        "title": "Redis Infrastructure",
        "description": "Redis infrastructure and operations",
        "section_map": {
            "deploy": 1,
            "config": 2,
            "security": 3,
            "ha": 4,
            "cluster": 5,
            "replication": 6,
            "persist": 7,
            "monitor": 8,
            "backup": 9,
            "rdi": 10,
        },
    },
}


@dataclass
class SkillConfig:
    name: str
    title: str
    description: str
    skill_dir: Path
    section_map: Dict[str, int] = field(default_factory=dict)
    output_name: str = "AGENTS.md"

    @property
    def rules_dir(self) -> Path:
        return self.skill_dir / "rules"

    @property
    def metadata_file(self) -> Path:
        return self.skill_dir / "metadata.json"

    @property
    def sections_file(self) -> Path:
        return self.rules_dir / "_sections.md"

    @property
    def output_file(self) -> Path:
        return self.skill_dir / self.output_name


def _merge_skill(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    s = dict(base)
    s.update({k: v for k, v in override.items() if k != "section_map"})
    if "section_map" in override:
        m = dict(s.get("section_map") or {})
        m.update(override["section_map"] or {})
        s["section_map"] = m
    return s


def load_skill_table(config_path: Path | str | None = None) -> Dict[str, Dict[str, Any]]:
    """Built-in skills merged with the optional YAML config file.

    The file looks like::

        skills:
          redis-best-practices:
            section_map:
              stream: 11
          my-skill:
            title: My Skill
            description: my apps
            section_map: {a: 1}
    """
    table = {name: dict(s) for name, s in SKILLS.items()}
    p = Path(config_path or DEFAULT_CONFIG)
    if not p.exists():
        return table

    skills = load_yaml(p).get("skills") or {}
    if not isinstance(skills, dict):
        raise ConfigError(f"{p}: `skills` must be a mapping")

    for name, override in skills.items():
        if override is not None and not isinstance(override, dict):
            raise ConfigError(f"{p}: skills.{name} must be a mapping")
        table[name] = _merge_skill(table.get(name, {}), override or {})
    return table


def resolve_skills_dir(skills_dir: Path | str | None = None) -> Path:
    return Path(skills_dir or os.environ.get("SKILLS_DIR") or SKILLS_DIR)


def get_skill(
    name: str,
    skills_dir: Path | str | None = None,
    config_path: Path | str | None = None,
) -> SkillConfig:
    table = load_skill_table(config_path)
    if name not in table:
        raise UnknownSkillError(name)
    return _to_config(name, table[name], resolve_skills_dir(skills_dir))


def all_skills(
    skills_dir: Path | str | None = None,
    config_path: Path | str | None = None,
) -> list[SkillConfig]:
    base = resolve_skills_dir(skills_dir)
    table = load_skill_table(config_path)
    return [_to_config(name, table[name], base) for name in sorted(table)]


def _to_config(name: str, s: Dict[str, Any], base: Path) -> SkillConfig:
    return SkillConfig(
        name=name,
        title=s.get("title") or name,
        description=s.get("description") or "",
        skill_dir=base / s.get("dir", name),
        section_map={str(k): int(v) for k, v in (s.get("section_map") or {}).items()},
        output_name=s.get("output") or "AGENTS.md",
    )
