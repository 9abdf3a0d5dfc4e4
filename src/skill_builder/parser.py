"""Rule body parsing.

A rule file body looks like::

    ## Use hashes for small objects

    Explanation prose...

    **Incorrect (one key per field):**

    ```python
    r.set("user:1:name", "Ada")
    ```

    **Correct (HSET):**

    ```python
    r.hset("user:1", mapping={"name": "Ada"})
    ```

    Reference: [Hashes](https://redis.io/docs/latest/develop/data-types/hashes/)

Labels are only recognized outside fenced code, and only when the first
word is one of EXAMPLE_LABELS.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .loader import split_frontmatter
from .models import CodeExample, Rule

EXAMPLE_LABELS = {"Correct", "Incorrect", "Example", "Alternative", "Good", "Bad"}

LABEL_RE = re.compile(r"^\*\*([A-Za-z][^*():]*?)(?:\s*\((.*)\))?:\*\*\s*(.*)$")
FENCE_RE = re.compile(r"^(`{3,}|~{3,})(.*)$")
REFERENCE_RE = re.compile(r"^References?:\s*(.*)$")
LINK_RE = re.compile(r"\[[^\]]+\]\([^)\s]+\)")
BULLET_RE = re.compile(r"^[-*]\s+(.*)$")
SECTION_HEADING_RE = re.compile(r"^##\s+(\d+)\.\s+(.+?)\s+\(([\w-]+)\)\s*$")
SECTION_FIELD_RE = re.compile(r"^\*\*(Impact|Description):\*\*\s*(.*)$")


@dataclass
class _Block:
    label: str
    description: str = ""
    lead: List[str] = field(default_factory=list)
    code: List[str] = field(default_factory=list)
    after: List[str] = field(default_factory=list)
    language: str = ""
    has_code: bool = False
    fence: str = "```"
    phase: str = "lead"  # "lead" until the first fence closes, then "after"

    def to_example(self) -> CodeExample:
        return CodeExample(
            label=self.label,
            description=self.description,
            lead=_join(self.lead),
            code="\n".join(self.code),
            language=self.language,
            additional_text=_join(self.after),
            has_code=self.has_code,
            fence=self.fence,
        )


def _join(lines: List[str]) -> str:
    return "\n".join(lines).strip("\n").rstrip()


def _closes(line: str, fence: str) -> bool:
    s = line.strip()
    return s.startswith(fence) and not s.lstrip(fence[0])


def _references_from(text: str) -> List[str]:
    links = LINK_RE.findall(text)
    if links:
        return links
    text = text.strip()
    return [text] if text else []


def parse_rule_body(body: str) -> Tuple[str, List[CodeExample], List[str]]:
    """Split a rule body into (explanation, examples, references)."""
    lines = body.strip("\n").splitlines()

    i = 0
    while i < len(lines) and not lines[i].strip():
        i += 1
    if i < len(lines) and lines[i].startswith("## "):
        lines = lines[i + 1:]

    explanation: List[str] = []
    blocks: List[_Block] = []
    references: List[str] = []
    cur: Optional[_Block] = None
    fence: Optional[str] = None
    capturing = False
    in_refs = False

    def target() -> List[str]:
        if cur is None:
            return explanation
        return cur.lead if cur.phase == "lead" else cur.after

    for line in lines:
        s = line.strip()

        if fence is not None:
            if _closes(line, fence):
                fence = None
                if capturing:
                    capturing = False
                    cur.phase = "after"
                    continue
                target().append(line)
                continue
            if capturing:
                cur.code.append(line)
            else:
                target().append(line)
            continue

        if in_refs:
            if not s:
                continue
            bullet = BULLET_RE.match(s)
            if bullet:
                references.extend(_references_from(bullet.group(1)))
                continue
            in_refs = False

        m = FENCE_RE.match(s)
        if m:
            fence = m.group(1)
            if cur is not None and cur.phase == "lead":
                capturing = True
                cur.has_code = True
                cur.fence = fence
                cur.language = m.group(2).strip()
                continue
            target().append(line)
            continue

        ref = REFERENCE_RE.match(s)
        if ref:
            if ref.group(1).strip():
                references.extend(_references_from(ref.group(1)))
            else:
                in_refs = True
            continue

        lab = LABEL_RE.match(s)
        if lab and lab.group(1).split()[0].capitalize() in EXAMPLE_LABELS:
            cur = _Block(label=lab.group(1).strip(), description=(lab.group(2) or "").strip())
            if lab.group(3):
                cur.lead.append(lab.group(3))
            blocks.append(cur)
            continue

        target().append(line)

    return _join(explanation).strip(), [b.to_example() for b in blocks], references


def parse_tags(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(t).strip() for t in value if str(t).strip()]
    return [t.strip() for t in str(value).split(",") if t.strip()]


def rule_prefix(filename: str, section_map: Dict[str, int]) -> str:
    """Longest section-map key the filename starts with (as `key-`)."""
    stem = Path(filename).stem
    matches = [k for k in section_map if stem.startswith(f"{k}-")]
    if matches:
        return max(matches, key=len)
    return stem.split("-", 1)[0]


def parse_rule_text(text: str, filename: str, section_map: Dict[str, int]) -> Rule:
    meta, body = split_frontmatter(text)
    explanation, examples, references = parse_rule_body(body)
    extra = meta.get("references")
    if extra:
        references = parse_tags(extra) + references
    return Rule(
        filename=filename,
        prefix=rule_prefix(filename, section_map),
        title=str(meta.get("title") or "").strip(),
        impact=str(meta.get("impact") or "").strip().upper(),
        impact_description=str(meta.get("impactDescription") or "").strip(),
        explanation=explanation,
        examples=examples,
        references=references,
        tags=parse_tags(meta.get("tags")),
    )


def parse_rule_file(path: Path, section_map: Dict[str, int]) -> Rule:
    return parse_rule_text(path.read_text(encoding="utf-8"), path.name, section_map)


def parse_sections_file(text: str) -> Dict[str, Dict[str, Any]]:
    """Parse `_sections.md` into {prefix: {number, title, impact, description}}."""
    out: Dict[str, Dict[str, Any]] = {}
    cur: Optional[Dict[str, Any]] = None
    for line in text.splitlines():
        s = line.strip()
        h = SECTION_HEADING_RE.match(s)
        if h:
            cur = {
                "number": int(h.group(1)),
                "title": h.group(2).strip(),
                "impact": "",
                "description": "",
            }
            out[h.group(3)] = cur
            continue
        if cur is None:
            continue
        f = SECTION_FIELD_RE.match(s)
        if f:
            cur[f.group(1).lower()] = f.group(2).strip()
    return out
