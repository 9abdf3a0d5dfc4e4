from __future__ import annotations

import re
from typing import List

from .models import CodeExample, GuidelinesDocument, Rule, Section

NOTE = (
    "> **Note:**  \n"
    "> This document is mainly for agents and LLMs to follow when maintaining,  \n"
    "> generating, or refactoring {description}. Humans may also find it  \n"
    "> useful, but guidance here is optimized for automation and consistency  \n"
    "> by AI-assisted workflows."
)


def slugify(heading: str) -> str:
    """GitHub-style heading anchor."""
    s = heading.strip().lower()
    s = re.sub(r"[^\w\- ]", "", s)
    return s.replace(" ", "-")


def _impact(level: str, description: str = "") -> str:
    if description:
        return f"**Impact: {level} ({description})**"
    return f"**Impact: {level}**"


def render_toc(doc: GuidelinesDocument) -> str:
    lines = ["## Table of Contents", ""]
    for s in doc.sections:
        heading = f"{s.number}. {s.title}"
        lines.append(f"{s.number}. [{s.title}](#{slugify(heading)}) - **{s.impact}**")
        for r in s.rules:
            lines.append(f"   - {r.id} [{r.title}](#{slugify(f'{r.id} {r.title}')})")
    return "\n".join(lines)


def render_example(ex: CodeExample) -> List[str]:
    label = f"{ex.label} ({ex.description})" if ex.description else ex.label
    blocks = [f"**{label}:**"]
    if ex.lead:
        blocks.append(ex.lead)
    if ex.has_code:
        blocks.append(f"{ex.fence}{ex.language}\n{ex.code}\n{ex.fence}")
    if ex.additional_text:
        blocks.append(ex.additional_text)
    return blocks


def render_rule(rule: Rule) -> str:
    blocks = [f"### {rule.id} {rule.title}", _impact(rule.impact, rule.impact_description)]
    if rule.explanation:
        blocks.append(rule.explanation)
    for ex in rule.examples:
        blocks.extend(render_example(ex))
    if len(rule.references) == 1:
        blocks.append(f"Reference: {rule.references[0]}")
    elif rule.references:
        blocks.append("References:\n" + "\n".join(f"- {r}" for r in rule.references))
    return "\n\n".join(blocks)


def render_section(section: Section) -> str:
    blocks = [f"## {section.number}. {section.title}", _impact(section.impact)]
    if section.description:
        blocks.append(section.description)
    blocks.extend(render_rule(r) for r in section.rules)
    return "\n\n".join(blocks)


def render_document(doc: GuidelinesDocument) -> str:
    header = [f"**Version {doc.version}**"]
    header.extend(x for x in (doc.organization, doc.date) if x)

    blocks = [
        f"# {doc.title}",
        "  \n".join(header),
        NOTE.format(description=doc.description or doc.title),
        "---",
    ]
    if doc.abstract:
        blocks.extend(["## Abstract", doc.abstract, "---"])

    blocks.extend([render_toc(doc), "---"])

    for s in doc.sections:
        blocks.extend([render_section(s), "---"])

    if doc.references:
        refs = "\n".join(f"{i}. {r}" for i, r in enumerate(doc.references, 1))
        blocks.extend(["## References", refs])
    else:
        blocks.pop()

    return "\n\n".join(blocks) + "\n"
