RULES = {
    "R001": {"severity": "ERROR", "message": "Frontmatter block missing or unparsable"},
    "R002": {"severity": "ERROR", "message": "Required frontmatter field missing"},
    "R003": {"severity": "ERROR", "message": "Impact level not recognized"},
    "R004": {"severity": "ERROR", "message": "Required example block missing"},
    "R005": {"severity": "ERROR", "message": "Filename prefix not in section map"},
    "R006": {"severity": "WARN", "message": "impactDescription missing"},
    "R007": {"severity": "WARN", "message": "Tags missing or empty"},
    "R008": {"severity": "WARN", "message": "Code block has no language"},
    "R009": {"severity": "WARN", "message": "Section has no _sections.md entry"},
    "R010": {"severity": "ERROR", "message": "No rule files found"},
}


class SkillBuilderError(Exception):
    """Base class for build tool failures."""


class FrontmatterError(SkillBuilderError):
    pass


class BuildError(SkillBuilderError):
    pass


class UnknownSkillError(SkillBuilderError, KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown skill: {self.name}"


class ConfigError(SkillBuilderError):
    pass
