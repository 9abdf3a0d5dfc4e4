import textwrap

import pytest

from skill_builder.config import DEFAULT_SKILL, all_skills, get_skill, load_skill_table
from skill_builder.errors import ConfigError, UnknownSkillError


def test_builtin_table_without_config(tmp_path):
    table = load_skill_table(tmp_path / "missing.yaml")
    assert set(table) == {"redis-best-practices", "redis-ai-patterns", "redis-infrastructure"}
    assert table[DEFAULT_SKILL]["section_map"]["ds"] == 1
    assert table["redis-infrastructure"]["section_map"]["rdi"] == 10


def test_config_paths(tmp_path):
    cfg = get_skill("redis-ai-patterns", skills_dir=tmp_path, config_path=tmp_path / "none.yaml")
    assert cfg.skill_dir == tmp_path / "redis-ai-patterns"
    assert cfg.rules_dir == tmp_path / "redis-ai-patterns" / "rules"
    assert cfg.metadata_file.name == "metadata.json"
    assert cfg.output_file == tmp_path / "redis-ai-patterns" / "AGENTS.md"
    assert cfg.section_map["vec"] == 1


def test_yaml_overrides_merge(tmp_path):
    p = tmp_path / "skills.yaml"
    p.write_text(
        textwrap.dedent(
            """
            skills:
              redis-best-practices:
                title: Redis Rules
                section_map:
                  stream: 11
              extra:
                description: extra apps
                section_map: {x: 1}
            """
        ),
        encoding="utf-8",
    )

    cfg = get_skill("redis-best-practices", skills_dir=tmp_path, config_path=p)
    assert cfg.title == "Redis Rules"
    assert cfg.description == "Redis applications"
    assert cfg.section_map["ds"] == 1
    assert cfg.section_map["stream"] == 11

    names = [c.name for c in all_skills(skills_dir=tmp_path, config_path=p)]
    assert names == sorted(names)
    assert "extra" in names


def test_skills_dir_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("SKILLS_DIR", str(tmp_path / "content"))
    cfg = get_skill(DEFAULT_SKILL, config_path=tmp_path / "none.yaml")
    assert cfg.skill_dir == tmp_path / "content" / DEFAULT_SKILL


def test_unknown_skill(tmp_path):
    with pytest.raises(UnknownSkillError) as e:
        get_skill("nope", skills_dir=tmp_path, config_path=tmp_path / "none.yaml")
    assert "nope" in str(e.value)


def test_malformed_config(tmp_path):
    p = tmp_path / "skills.yaml"
    p.write_text("skills: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_skill_table(p)


def test_skill_entry_must_be_mapping(tmp_path):
    p = tmp_path / "skills.yaml"
    p.write_text("skills:\n  demo: just-a-string\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="skills.demo"):
        load_skill_table(p)
