import pytest

from skill_builder.errors import ConfigError, FrontmatterError
from skill_builder.loader import list_rule_files, load_metadata, load_yaml, split_frontmatter


def test_split_frontmatter():
    meta, body = split_frontmatter("---\ntitle: A\nimpact: HIGH\n---\n\nBody text\n")
    assert meta == {"title": "A", "impact": "HIGH"}
    assert body.strip() == "Body text"


def test_missing_frontmatter():
    with pytest.raises(FrontmatterError):
        split_frontmatter("# Just a heading\n")


def test_frontmatter_must_be_mapping():
    with pytest.raises(FrontmatterError):
        split_frontmatter("---\n- a\n- b\n---\nbody\n")


def test_frontmatter_invalid_yaml():
    with pytest.raises(FrontmatterError):
        split_frontmatter("---\ntitle: [unclosed\n---\nbody\n")


def test_list_rule_files_sorted_and_skips_underscore(tmp_path):
    for name in ("key-b.md", "ds-z.md", "ds-a.md", "_sections.md", "_template.md", "notes.txt"):
        (tmp_path / name).write_text("x", encoding="utf-8")
    assert [p.name for p in list_rule_files(tmp_path)] == ["ds-a.md", "ds-z.md", "key-b.md"]


def test_list_rule_files_missing_dir(tmp_path):
    assert list_rule_files(tmp_path / "nope") == []


def test_load_metadata_defaults(tmp_path):
    meta = load_metadata(tmp_path / "metadata.json")
    assert meta["version"] == "1.0.0"
    assert meta["date"] == ""


def test_load_metadata_merges(tmp_path):
    p = tmp_path / "metadata.json"
    p.write_text('{"version": "3.1.0", "organization": "Redis"}', encoding="utf-8")
    meta = load_metadata(p)
    assert meta["version"] == "3.1.0"
    assert meta["organization"] == "Redis"
    assert meta["abstract"] == ""


def test_empty_frontmatter_block():
    meta, body = split_frontmatter("---\n---\nBody\n")
    assert meta == {}
    assert body == "Body\n"


def test_load_metadata_invalid_json(tmp_path):
    p = tmp_path / "metadata.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid JSON"):
        load_metadata(p)


def test_load_metadata_not_an_object(tmp_path):
    p = tmp_path / "metadata.json"
    p.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_metadata(p)


def test_load_yaml_not_a_mapping(tmp_path):
    p = tmp_path / "skills.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="expected a mapping"):
        load_yaml(p)
