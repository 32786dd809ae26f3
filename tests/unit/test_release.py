"""Tests for the release decision flow."""

from __future__ import annotations

from datetime import date
from functools import partial

import pytest

from changerelease.core.changelog import render_changelog
from changerelease.core.commits import ClassifiedCommit, ClassifierConfig
from changerelease.core.release import (
    ReleaseStatus,
    confirm_release,
    decide_release,
    propose_release,
)
from changerelease.core.version import BumpType, Version
from changerelease.exceptions import (
    EmptyArtifactError,
    InvalidIdentifierError,
    MalformedLogLineError,
    MalformedVersionError,
    NoCommitsError,
)
from changerelease.vcs.git import Commit

render = partial(render_changelog, today=date(2024, 1, 2))


@pytest.fixture
def scenario_config() -> ClassifierConfig:
    """Rules with fix as patch and chore ignored."""
    return ClassifierConfig.from_patterns(match_patch=["^fix"], ignore_messages=["^chore"])


@pytest.fixture
def scenario_lines(make_log_line) -> list[str]:
    """A fix, a feature and an ignored chore as log lines."""
    return [
        make_log_line("a1", "fix: null pointer"),
        make_log_line("b2", "feat: new export"),
        make_log_line("c3", "chore: ignored via rule '^chore'"),
    ]


class TestProposeRelease:
    """Tests for propose_release()."""

    def test_bumps_base_version(self, feat_commit: Commit):
        """The proposal bumps the base by the selected bump."""
        proposal = propose_release(Version(1, 2, 3), [ClassifiedCommit(feat_commit, BumpType.MINOR)])

        assert proposal.bump == BumpType.MINOR
        assert proposal.version == Version(1, 3, 0)
        assert proposal.base_version == Version(1, 2, 3)

    def test_applies_prerelease_and_metadata(self, fix_commit: Commit):
        """Prerelease and metadata are applied after the bump."""
        proposal = propose_release(
            Version(1, 2, 3),
            [ClassifiedCommit(fix_commit, BumpType.PATCH)],
            prerelease="beta.1",
            metadata="exp.sha.5114f85",
        )

        assert str(proposal.version) == "1.2.4-beta.1+exp.sha.5114f85"

    def test_invalid_prerelease_aborts(self, fix_commit: Commit):
        """An invalid prerelease aborts the proposal."""
        with pytest.raises(InvalidIdentifierError):
            propose_release(
                Version(1, 2, 3),
                [ClassifiedCommit(fix_commit, BumpType.PATCH)],
                prerelease="01",
            )

    def test_no_commits_raises(self):
        """Proposing with no commits raises NoCommitsError."""
        with pytest.raises(NoCommitsError):
            propose_release(Version(1, 2, 3), [])


class TestConfirmRelease:
    """Tests for confirm_release()."""

    def test_reads_second_token(self):
        """The version is the second token of the first line."""
        assert confirm_release("# 1.4.0 / 2024-01-02\n\n  * feat: x\n") == Version(1, 4, 0)

    def test_v_prefix_accepted(self):
        """A v-prefixed version on the first line is accepted."""
        assert confirm_release("# v2.0.0-rc.1 / 2024-01-02") == Version(2, 0, 0, ("rc", "1"))

    def test_any_whitespace_separates(self):
        """Tokens are separated by any run of whitespace."""
        assert confirm_release("#\t1.0.1   / today") == Version(1, 0, 1)

    @pytest.mark.parametrize("artifact", ["", "\n", "   \n# 1.0.0 / x"])
    def test_empty_artifact(self, artifact: str):
        """An empty or blank first line is an empty artifact."""
        with pytest.raises(EmptyArtifactError):
            confirm_release(artifact)

    def test_missing_version_token(self):
        """A first line with a single token has no version."""
        with pytest.raises(MalformedVersionError):
            confirm_release("#\n")

    def test_invalid_version_token(self):
        """An unparseable version token is reported with its text."""
        with pytest.raises(MalformedVersionError, match="one.two"):
            confirm_release("# one.two / 2024-01-02")


class TestDecideRelease:
    """Tests for decide_release()."""

    def test_end_to_end(self, scenario_lines: list[str], scenario_config: ClassifierConfig):
        """Chore is ignored, fix is patch, feat is minor: 0.4.0 becomes 0.5.0."""
        outcome = decide_release("0.4.0", scenario_lines, scenario_config, render=render)

        assert outcome.status is ReleaseStatus.RELEASE
        assert [(c.subject, c.bump) for c in outcome.commits] == [
            ("fix: null pointer", BumpType.PATCH),
            ("feat: new export", BumpType.MINOR),
        ]
        assert outcome.ignored_count == 1
        assert outcome.decision.bump == BumpType.MINOR
        assert outcome.decision.proposed_version == Version(0, 5, 0)
        assert outcome.decision.confirmed_version == Version(0, 5, 0)
        assert outcome.artifact.splitlines()[0] == "# 0.5.0 / 2024-01-02"

    def test_no_tag_starts_from_zero(self, scenario_lines: list[str], scenario_config: ClassifierConfig):
        """Without a tag the base version is 0.0.0."""
        outcome = decide_release(None, scenario_lines, scenario_config, render=render)

        assert outcome.decision.base_version == Version(0, 0, 0)
        assert outcome.decision.proposed_version == Version(0, 1, 0)

    def test_v_prefixed_tag(self, scenario_lines: list[str], scenario_config: ClassifierConfig):
        """A v-prefixed tag is a valid base version."""
        outcome = decide_release("v0.4.0", scenario_lines, scenario_config, render=render)
        assert outcome.decision.proposed_version == Version(0, 5, 0)

    def test_no_commits_is_not_an_error(self, scenario_config: ClassifierConfig):
        """An empty history is a no-release outcome."""
        outcome = decide_release("1.0.0", [], scenario_config, render=render)

        assert outcome.status is ReleaseStatus.NO_RELEASE
        assert not outcome.should_release
        assert outcome.decision is None
        assert outcome.ignored_count == 0

    def test_all_ignored_is_reported(self, make_log_line, scenario_config: ClassifierConfig):
        """Ignore-only history is a no-release with a distinct reason."""
        lines = [make_log_line("a1", "chore: one"), make_log_line("b2", "chore: two")]

        outcome = decide_release("1.0.0", lines, scenario_config, render=render)

        assert outcome.status is ReleaseStatus.NO_RELEASE
        assert outcome.ignored_count == 2
        assert "ignored" in outcome.reason

    def test_edit_can_override_version(self, scenario_lines: list[str], scenario_config: ClassifierConfig):
        """The version on the edited first line is authoritative."""
        seen = []

        def edit(artifact: str) -> str:
            seen.append(artifact)
            return artifact.replace("# 0.5.0", "# v1.0.0", 1)

        outcome = decide_release("0.4.0", scenario_lines, scenario_config, render=render, edit=edit)

        assert seen[0].startswith("# 0.5.0 ")
        assert outcome.decision.proposed_version == Version(0, 5, 0)
        assert outcome.decision.confirmed_version == Version(1, 0, 0)
        assert outcome.decision.was_overridden
        assert outcome.artifact.startswith("# v1.0.0 ")

    def test_edit_keeping_version(self, scenario_lines: list[str], scenario_config: ClassifierConfig):
        """An unchanged first line is not an override."""
        outcome = decide_release(
            "0.4.0", scenario_lines, scenario_config, render=render, edit=lambda a: a
        )
        assert not outcome.decision.was_overridden

    def test_edit_emptying_artifact(self, scenario_lines: list[str], scenario_config: ClassifierConfig):
        """Emptying the changelog in the editor aborts."""
        with pytest.raises(EmptyArtifactError):
            decide_release("0.4.0", scenario_lines, scenario_config, render=render, edit=lambda a: "")

    def test_edit_breaking_version(self, scenario_lines: list[str], scenario_config: ClassifierConfig):
        """An unparseable edited version aborts."""
        with pytest.raises(MalformedVersionError):
            decide_release(
                "0.4.0",
                scenario_lines,
                scenario_config,
                render=render,
                edit=lambda a: "# next / today",
            )

    def test_prerelease_and_metadata(self, scenario_lines: list[str], scenario_config: ClassifierConfig):
        """Prerelease and metadata reach the confirmed version."""
        outcome = decide_release(
            "0.4.0",
            scenario_lines,
            scenario_config,
            render=render,
            prerelease="rc.1",
            metadata="20240102",
        )
        assert str(outcome.decision.confirmed_version) == "0.5.0-rc.1+20240102"

    def test_invalid_base_tag(self, scenario_lines: list[str], scenario_config: ClassifierConfig):
        """A base tag that is not a version aborts."""
        with pytest.raises(MalformedVersionError):
            decide_release("release-7", scenario_lines, scenario_config, render=render)

    def test_malformed_log_line(self, scenario_config: ClassifierConfig):
        """A log line with the wrong field count aborts."""
        with pytest.raises(MalformedLogLineError):
            decide_release("1.0.0", ["abc\tonly two fields"], scenario_config, render=render)

    def test_render_not_called_without_release(self, scenario_config: ClassifierConfig):
        """No changelog is rendered when there is nothing to release."""
        def fail_render(*args, **kwargs):
            raise AssertionError("render must not be called")

        outcome = decide_release("1.0.0", [], scenario_config, render=fail_render)
        assert outcome.status is ReleaseStatus.NO_RELEASE
