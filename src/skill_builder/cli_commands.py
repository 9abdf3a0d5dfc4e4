from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List

from .builder import build_document
from .config import SkillConfig, all_skills, get_skill
from .errors import BuildError
from .loader import list_rule_files
from .renderer import render_document
from .validator import Finding, validate_report

logger = logging.getLogger(__name__)


def _emit_json(obj: dict, json_out: bool, out_path: str | None) -> None:
    s = json.dumps(obj, ensure_ascii=False, indent=2)

    if json_out:
        print(s)

    if out_path:
        p = Path(out_path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(s, encoding="utf-8")


def _select(
    skill: str | None, skills_dir: str | None, config_path: str | None
) -> List[SkillConfig]:
    if skill:
        return [get_skill(skill, skills_dir=skills_dir, config_path=config_path)]
    return all_skills(skills_dir=skills_dir, config_path=config_path)


def _print_findings(rep: Dict[str, Any]) -> None:
    for f in rep["errors"] + rep["warnings"]:
        print(f"  {Finding(**f).line()}")


def cmd_validate(
    skill: str | None,
    strict: bool,
    json_out: bool,
    out_path: str | None,
    skills_dir: str | None = None,
    config_path: str | None = None,
) -> int:
    reports = []
    ok = True

    for cfg in _select(skill, skills_dir, config_path):
        # build-all tolerates configured skills that have no content yet
        if skill is None and not cfg.rules_dir.is_dir():
            if not json_out:
                print(f"SKIP: {cfg.name} (no rules directory)")
            continue

        rep = validate_report(cfg)
        reports.append(rep)
        failed = not rep["ok"] or (strict and rep["summary"]["warnings"] > 0)
        ok = ok and not failed

        if json_out:
            continue
        if failed:
            print(
                f"FAIL: {cfg.name}: {rep['summary']['errors']} errors, "
                f"{rep['summary']['warnings']} warnings"
            )
        else:
            print(f"OK: {cfg.name} ({rep['rules']} rules)")
        _print_findings(rep)

    _emit_json({"ok": ok, "strict": strict, "reports": reports}, json_out=json_out, out_path=out_path)
    return 0 if ok else 2


def _build_one(cfg: SkillConfig, strict: bool, check: bool, dry_run: bool) -> Dict[str, Any]:
    result: Dict[str, Any] = {
        "skill": cfg.name,
        "output": str(cfg.output_file),
        "status": None,
        "rules": 0,
        "changed": False,
    }

    # 0) validator ERROR blocks the build
    rep = validate_report(cfg)
    result["validation"] = rep
    if not rep["ok"]:
        print(f"BUILD BLOCKED: {cfg.name}: {rep['summary']['errors']} errors present")
        _print_findings(rep)
        result["status"] = "blocked"
        return result

    # 1) strict: WARN blocks too
    if strict and rep["summary"]["warnings"] > 0:
        print(f"BUILD BLOCKED: {cfg.name}: strict mode and validator warnings present")
        _print_findings(rep)
        result["status"] = "blocked"
        return result

    # 2) compile
    try:
        doc = build_document(cfg)
    except BuildError as e:
        print(f"BUILD FAILED: {cfg.name}: {e}")
        result["status"] = "failed"
        return result

    text = render_document(doc)
    existing = cfg.output_file.read_text(encoding="utf-8") if cfg.output_file.exists() else None
    result["rules"] = doc.rule_count
    result["changed"] = existing != text

    # 3) check: compare only
    if check:
        if result["changed"]:
            print(f"STALE: {cfg.output_file} is out of date; run build {cfg.name}")
            result["status"] = "stale"
        else:
            print(f"UP-TO-DATE: {cfg.name}")
            result["status"] = "ok"
        return result

    # 4) dry-run: nothing written
    if dry_run:
        print(f"DRY-RUN OK: {cfg.name} ({doc.rule_count} rules, changed={result['changed']})")
        result["status"] = "ok"
        return result

    # 5) write
    if result["changed"]:
        cfg.output_file.parent.mkdir(parents=True, exist_ok=True)
        cfg.output_file.write_text(text, encoding="utf-8", newline="\n")
        print(f"BUILT: {cfg.name} -> {cfg.output_file} ({doc.rule_count} rules)")
    else:
        print(f"UNCHANGED: {cfg.name} -> {cfg.output_file}")
    logger.info("%s: %d sections, %d rules", cfg.name, len(doc.sections), doc.rule_count)
    result["status"] = "ok"
    return result


def cmd_build(
    skill: str | None,
    strict: bool,
    json_out: bool,
    out_path: str | None,
    check: bool = False,
    dry_run: bool = False,
    skills_dir: str | None = None,
    config_path: str | None = None,
) -> int:
    results = []

    for cfg in _select(skill, skills_dir, config_path):
        if skill is None and not cfg.rules_dir.is_dir():
            print(f"SKIP: {cfg.name} (no rules directory)")
            continue
        results.append(_build_one(cfg, strict=strict, check=check, dry_run=dry_run))

    ok = all(r["status"] == "ok" for r in results)
    _emit_json(
        {"ok": ok, "check": check, "dry_run": dry_run, "results": results},
        json_out=json_out,
        out_path=out_path,
    )
    return 0 if ok else 2


def cmd_export(
    skill: str,
    out_path: str | None,
    skills_dir: str | None = None,
    config_path: str | None = None,
) -> int:
    cfg = get_skill(skill, skills_dir=skills_dir, config_path=config_path)
    try:
        doc = build_document(cfg)
    except BuildError as e:
        print(f"EXPORT FAILED: {cfg.name}: {e}")
        return 2

    data = asdict(doc)
    data["skill"] = cfg.name
    _emit_json(data, json_out=out_path is None, out_path=out_path)
    if out_path:
        print(f"EXPORTED: {cfg.name} -> {out_path} ({doc.rule_count} rules)")
    return 0


def cmd_list(skills_dir: str | None = None, config_path: str | None = None) -> int:
    for cfg in all_skills(skills_dir=skills_dir, config_path=config_path):
        n = len(list_rule_files(cfg.rules_dir))
        state = "present" if cfg.output_file.exists() else "missing"
        print(f"{cfg.name}: {n} rules, {len(cfg.section_map)} sections, {cfg.output_name} {state}")
    return 0
