from __future__ import annotations
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Dict, List

from .config import SkillConfig
from .errors import RULES, FrontmatterError, SkillBuilderError
from .loader import list_rule_files, read_sections_text, split_frontmatter
from .models import IMPACT_LEVELS
from .parser import parse_rule_body, parse_sections_file, rule_prefix

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "impact")
REQUIRED_EXAMPLES = ("Correct", "Incorrect")


@dataclass
class Finding:
    code: str
    severity: str  # "ERROR" | "WARN"
    message: str
    path: str = ""
    detail: str = ""

    def line(self) -> str:
        detail = f" ({self.detail})" if self.detail else ""
        return f"[{self.severity}] {self.code} {self.path}: {self.message}{detail}"


def _add(findings: List[Finding], code: str, path: str = "", detail: str = "") -> None:
    r = RULES[code]
    findings.append(
        Finding(
            code=code,
            severity=r["severity"],
            message=r["message"],
            path=path,
            detail=detail,
        )
    )


def validate_rule_text(text: str, filename: str, section_map: Dict[str, int]) -> List[Finding]:
    findings: List[Finding] = []

    try:
        meta, body = split_frontmatter(text)
    except FrontmatterError as e:
        _add(findings, "R001", path=filename, detail=str(e))
        return findings

    # Required fields
    for name in REQUIRED_FIELDS:
        value = meta.get(name)
        if value is None or not str(value).strip():
            _add(findings, "R002", path=filename, detail=name)

    impact = meta.get("impact")
    if impact is not None and str(impact).strip():
        if str(impact).strip().upper() not in IMPACT_LEVELS:
            _add(findings, "R003", path=filename, detail=str(impact))

    # Examples
    _, examples, _ = parse_rule_body(body)
    labels = {ex.label.split()[0].capitalize() for ex in examples}
    for label in REQUIRED_EXAMPLES:
        if label not in labels:
            _add(findings, "R004", path=filename, detail=label)

    # Section membership
    prefix = rule_prefix(filename, section_map)
    if prefix not in section_map:
        _add(findings, "R005", path=filename, detail=prefix)

    # Soft checks
    if not str(meta.get("impactDescription") or "").strip():
        _add(findings, "R006", path=filename, detail="impactDescription")
    if not meta.get("tags"):
        _add(findings, "R007", path=filename, detail="tags")
    for ex in examples:
        if ex.has_code and not ex.language:
            _add(findings, "R008", path=filename, detail=ex.label)

    return findings


def validate_rule_file(path: Path, section_map: Dict[str, int]) -> List[Finding]:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        findings: List[Finding] = []
        _add(findings, "R001", path=path.name, detail="not UTF-8")
        return findings
    return validate_rule_text(text, path.name, section_map)


def validate_report(config: SkillConfig) -> Dict[str, Any]:
    findings: List[Finding] = []

    files = list_rule_files(config.rules_dir)
    if not files:
        _add(findings, "R010", path=str(config.rules_dir), detail="no *.md rule files")

    for p in files:
        logger.debug("validating %s", p)
        findings.extend(validate_rule_file(p, config.section_map))

    # Sections actually used must be described in _sections.md
    used = sorted({rule_prefix(p.name, config.section_map) for p in files} & set(config.section_map))
    described: Dict[str, Any] = {}
    if config.sections_file.exists():
        described = parse_sections_file(read_sections_text(config.sections_file))
    for prefix in used:
        if prefix not in described:
            _add(findings, "R009", path=config.sections_file.name, detail=prefix)

    errors = [f for f in findings if f.severity == "ERROR"]
    warnings = [f for f in findings if f.severity == "WARN"]

    return {
        "ok": len(errors) == 0,
        "skill": config.name,
        "rules": len(files),
        "summary": {"errors": len(errors), "warnings": len(warnings)},
        "errors": [f.__dict__ for f in errors],
        "warnings": [f.__dict__ for f in warnings],
    }


class ValidationError(SkillBuilderError):
    def __init__(self, report: Dict[str, Any]):
        super().__init__(f"Skill validation failed: {report.get('skill')}")
        self.report = report


def validate(config: SkillConfig) -> bool:
    rep = validate_report(config)
    if not rep["ok"]:
        raise ValidationError(rep)
    return True
