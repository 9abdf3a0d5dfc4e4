from __future__ import annotations
import argparse
import logging

from .cli_commands import (
    _emit_json,
    cmd_build,
    cmd_export,
    cmd_list,
    cmd_validate,
)
from .config import DEFAULT_CONFIG, DEFAULT_SKILL
from .errors import SkillBuilderError

__all__ = [
    "_emit_json",
    "cmd_build",
    "cmd_export",
    "cmd_list",
    "cmd_validate",
    "main",
    "main_entry",
]


def main_entry() -> None:
    raise SystemExit(main())


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="sb", description="Build and validate skill AGENTS.md documents")
    p.add_argument("--skills-dir", default=None, help="Skills root (default: $SKILLS_DIR or ./skills)")
    p.add_argument("--config", default=DEFAULT_CONFIG, help="Skill config overrides (YAML)")
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    v = sub.add_parser("validate", help="Check rule files against the rule schema")
    v.add_argument("skill", nargs="?", default=None, help="Skill name (default: all)")
    v.add_argument("--strict", action="store_true", help="Treat warnings as failures")
    v.add_argument("--json", action="store_true", help="Print JSON report")
    v.add_argument("--out", default=None, help="Write JSON report to a file")

    b = sub.add_parser("build", help="Compile rule files into AGENTS.md")
    b.add_argument("skill", nargs="?", default=None, help="Skill name (default: all)")
    b.add_argument("--strict", action="store_true", help="Block build if warnings exist")
    b.add_argument("--check", action="store_true", help="Fail if AGENTS.md is out of date")
    b.add_argument("--dry-run", action="store_true", help="Render without writing files")
    b.add_argument("--json", action="store_true", help="Print JSON report")
    b.add_argument("--out", default=None, help="Write JSON report to a file")

    e = sub.add_parser("export", help="Write the compiled rule model as JSON")
    e.add_argument("skill", nargs="?", default=DEFAULT_SKILL)
    e.add_argument("--out", default=None, help="Output file (default: stdout)")

    sub.add_parser("list", help="Show configured skills")

    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    common = {"skills_dir": args.skills_dir, "config_path": args.config}
    try:
        if args.cmd == "validate":
            return cmd_validate(args.skill, args.strict, args.json, args.out, **common)
        if args.cmd == "build":
            return cmd_build(
                args.skill,
                strict=args.strict,
                json_out=args.json,
                out_path=args.out,
                check=args.check,
                dry_run=args.dry_run,
                **common,
            )
        if args.cmd == "export":
            return cmd_export(args.skill, args.out, **common)
        if args.cmd == "list":
            return cmd_list(**common)
    except SkillBuilderError as exc:
        print(f"FAILED: {exc}")
        return 2
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
