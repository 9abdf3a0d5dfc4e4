from pathlib import Path

SECTIONS = """\
# Sections

## 1. Data Structures (ds)

**Impact:** HIGH
**Description:** Pick the right type.

## 2. Key Design (key)

**Impact:** CRITICAL
**Description:** Name keys consistently.
"""


def rule_text(
    title: str | None = "Some Rule",
    impact: str | None = "HIGH",
    impact_description: str | None = "faster",
    tags: str | None = "redis, test",
    correct: bool = True,
    incorrect: bool = True,
    language: str = "python",
) -> str:
    fm = ["---"]
    if title is not None:
        fm.append(f"title: {title}")
    if impact is not None:
        fm.append(f"impact: {impact}")
    if impact_description is not None:
        fm.append(f"impactDescription: {impact_description}")
    if tags is not None:
        fm.append(f"tags: {tags}")
    fm.append("---")

    body = ["", f"## {title or 'Untitled'}", "", "Why this matters.", ""]
    if incorrect:
        body += ["**Incorrect (slow):**", "", f"```{language}", "r.keys('*')", "```", ""]
    if correct:
        body += ["**Correct (fast):**", "", f"```{language}", "r.scan_iter()", "```", ""]
    body += ["Reference: [SCAN](https://redis.io/docs/latest/commands/scan/)", ""]
    return "\n".join(fm + body)


def write_rule(rules_dir: Path, filename: str, **kwargs) -> Path:
    rules_dir.mkdir(parents=True, exist_ok=True)
    p = rules_dir / filename
    p.write_text(rule_text(**kwargs), encoding="utf-8")
    return p


def make_skill(base: Path, name: str = "demo", section_map: dict | None = None) -> tuple[Path, Path]:
    """Create skills.yaml + skill dir under base. Returns (skills_dir, config_path)."""
    section_map = section_map or {"ds": 1, "key": 2}
    skills_dir = base / "skills"
    rules_dir = skills_dir / name / "rules"
    rules_dir.mkdir(parents=True, exist_ok=True)
    (rules_dir / "_sections.md").write_text(SECTIONS, encoding="utf-8")
    (skills_dir / name / "metadata.json").write_text(
        '{"version": "2.0.0", "organization": "Test Org", "date": "March 2026",'
        ' "abstract": "Demo abstract."}',
        encoding="utf-8",
    )

    lines = ["skills:", f"  {name}:", "    title: Demo Skill", "    description: demo apps", "    section_map:"]
    lines += [f"      {k}: {v}" for k, v in section_map.items()]
    config_path = base / "skills.yaml"
    config_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return skills_dir, config_path
