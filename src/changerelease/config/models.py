"""Configuration models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from changerelease.core.commits import ClassifierConfig

_SAMPLE_VARS = {"version": "1.0.0", "prev_version": "0.9.0"}


def _check_placeholders(template: str) -> str:
    try:
        template.format(**_SAMPLE_VARS)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
        raise ValueError(
            f"invalid placeholder in {template!r}, use {{version}} or {{prev_version}}: {e}"
        ) from e
    return template


class ChangeReleaseConfig(BaseModel):
    """Settings read from ``.git_changerelease.yaml`` files."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    disable_signed_tags: bool = False

    match_major: list[str] = Field(default_factory=list)
    match_patch: list[str] = Field(default_factory=list)
    ignore_messages: list[str] = Field(default_factory=list)

    release_commit_message: str = "prepared release {version}"
    pre_commit_commands: list[str] = Field(default_factory=list)

    tag_prefix: str = "v"

    @field_validator("release_commit_message")
    @classmethod
    def validate_commit_message(cls, v: str) -> str:
        return _check_placeholders(v)

    @field_validator("pre_commit_commands")
    @classmethod
    def validate_pre_commit_commands(cls, v: list[str]) -> list[str]:
        return [_check_placeholders(cmd) for cmd in v]

    def classifier(self) -> ClassifierConfig:
        """Compile the classification rules for one run.

        Raises:
            RuleCompilationError: If any pattern is not a valid regex
        """
        return ClassifierConfig.from_patterns(
            match_major=self.match_major,
            match_patch=self.match_patch,
            ignore_messages=self.ignore_messages,
        )

    def tag_name(self, version: object) -> str:
        return f"{self.tag_prefix}{version}"

    def commit_message(self, version: object, prev_version: object = "") -> str:
        return self.release_commit_message.format(version=version, prev_version=prev_version)
