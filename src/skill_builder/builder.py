from __future__ import annotations

import logging
from typing import Dict

from .config import SkillConfig
from .errors import BuildError, FrontmatterError
from .loader import list_rule_files, load_metadata, read_sections_text
from .models import GuidelinesDocument, Section
from .parser import parse_rule_file, parse_sections_file

logger = logging.getLogger(__name__)


def load_sections(config: SkillConfig) -> Dict[str, Section]:
    described = {}
    if config.sections_file.exists():
        described = parse_sections_file(read_sections_text(config.sections_file))

    sections: Dict[str, Section] = {}
    for prefix, number in config.section_map.items():
        d = described.get(prefix) or {}
        sections[prefix] = Section(
            number=number,
            prefix=prefix,
            title=d.get("title") or prefix.replace("-", " ").title(),
            impact=(d.get("impact") or "MEDIUM").upper(),
            description=d.get("description") or "",
        )
    return sections


def build_document(config: SkillConfig) -> GuidelinesDocument:
    files = list_rule_files(config.rules_dir)
    if not files:
        raise BuildError(f"no rule files in {config.rules_dir}")

    sections = load_sections(config)

    for p in files:
        try:
            rule = parse_rule_file(p, config.section_map)
        except FrontmatterError as e:
            raise BuildError(f"{p.name}: {e}") from e
        except UnicodeDecodeError as e:
            raise BuildError(f"{p.name}: not UTF-8 ({e.reason} at byte {e.start})") from e

        section = sections.get(rule.prefix)
        if section is None:
            raise BuildError(f"{p.name}: prefix '{rule.prefix}' not in section map")

        rule.section = section.number
        section.rules.append(rule)

    # files are already in filename order; ids follow that order
    ordered = sorted((s for s in sections.values() if s.rules), key=lambda s: (s.number, s.prefix))
    for s in ordered:
        for i, r in enumerate(s.rules, 1):
            r.id = f"{s.number}.{i}"
        logger.debug("section %s %s: %d rules", s.number, s.title, len(s.rules))

    meta = load_metadata(config.metadata_file)
    return GuidelinesDocument(
        title=config.title,
        description=config.description,
        version=str(meta.get("version") or ""),
        organization=str(meta.get("organization") or ""),
        date=str(meta.get("date") or ""),
        abstract=str(meta.get("abstract") or "").strip(),
        sections=ordered,
        references=[str(r) for r in (meta.get("references") or [])],
    )
