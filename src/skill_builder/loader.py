from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from .errors import ConfigError, FrontmatterError

FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

DEFAULT_METADATA = {
    "version": "1.0.0",
    "organization": "",
    "date": "",
    "abstract": "",
    "references": [],
}


def load_yaml(path: Path | str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping, got {type(data).__name__}")
    return data


def load_json(path: Path | str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"{path}: invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected an object, got {type(data).__name__}")
    return data


def split_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    m = FRONTMATTER_RE.match(text)
    if not m:
        raise FrontmatterError("no frontmatter block at top of file")
    try:
        data = yaml.safe_load(m.group(1) or "")
    except yaml.YAMLError as e:
        raise FrontmatterError(f"invalid YAML: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError("frontmatter is not a mapping")
    return data, text[m.end():]


def load_metadata(path: Path | str) -> Dict[str, Any]:
    meta = dict(DEFAULT_METADATA)
    p = Path(path)
    if p.exists():
        meta.update(load_json(p))
    return meta


def list_rule_files(rules_dir: Path | str) -> List[Path]:
    base = Path(rules_dir)
    if not base.is_dir():
        return []
    files = [p for p in base.glob("*.md") if p.is_file() and not p.name.startswith("_")]
    return sorted(files, key=lambda p: p.name)


def read_sections_text(path: Path | str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path}: not UTF-8 ({e.reason} at byte {e.start})") from e
