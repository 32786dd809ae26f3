"""Release decision flow.

The flow is linear: classify commits, aggregate a bump, bump the last
released version, render the changelog, let a human edit it, then read the
(possibly changed) version back from the first changelog line.

Rendering and editing are injected so the decision itself never touches the
filesystem or spawns a process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from changerelease.core.commits import classify_commits, select_bump
from changerelease.core.version import BumpType, Version
from changerelease.exceptions import EmptyArtifactError, MalformedVersionError, NoCommitsError
from changerelease.vcs.git import parse_log_lines

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from changerelease.core.commits import ClassifiedCommit, ClassifierConfig

    Renderer = Callable[[Version, Sequence[ClassifiedCommit]], str]
    Editor = Callable[[str], str]

logger = logging.getLogger(__name__)

INITIAL_VERSION = "0.0.0"


class ReleaseStatus(Enum):
    RELEASE = "release"
    NO_RELEASE = "no-release"


@dataclass(frozen=True)
class Proposal:
    """The computed, not yet confirmed, next version."""

    base_version: Version
    bump: BumpType
    version: Version
    commits: tuple[ClassifiedCommit, ...]


@dataclass(frozen=True)
class ReleaseDecision:
    """Final decision; ``confirmed_version`` is authoritative for tagging."""

    base_version: Version
    bump: BumpType
    proposed_version: Version
    confirmed_version: Version

    @property
    def was_overridden(self) -> bool:
        return self.confirmed_version != self.proposed_version


@dataclass(frozen=True)
class ReleaseOutcome:
    """Result of :func:`decide_release`.

    Either a release (``decision`` and ``artifact`` set) or an explicit
    "nothing to release" with a reason. Errors are raised, never returned.
    """

    status: ReleaseStatus
    decision: ReleaseDecision | None = None
    artifact: str = ""
    commits: tuple[ClassifiedCommit, ...] = ()
    ignored_count: int = 0
    reason: str = ""

    @property
    def should_release(self) -> bool:
        return self.status is ReleaseStatus.RELEASE


def propose_release(
    base_version: Version,
    commits: Sequence[ClassifiedCommit],
    *,
    prerelease: str = "",
    metadata: str = "",
) -> Proposal:
    """Compute the next version from classified commits.

    Args:
        base_version: Last released version
        commits: Classified, ignore-filtered commits
        prerelease: Prerelease identifiers to apply ("" for none)
        metadata: Build metadata identifiers to apply ("" for none)

    Raises:
        NoCommitsError: If there are no commits to release
        InvalidIdentifierError: If prerelease or metadata is invalid
    """
    bump = select_bump(commits)
    version = base_version.bump(bump).with_prerelease(prerelease).with_metadata(metadata)
    logger.debug("Proposing %s (%s bump from %s)", version, bump, base_version)
    return Proposal(
        base_version=base_version,
        bump=bump,
        version=version,
        commits=tuple(commits),
    )


def confirm_release(artifact: str) -> Version:
    """Read the confirmed version from the first line of the artifact.

    The version is the second whitespace-separated token of the first line,
    optionally prefixed with ``v``.

    Raises:
        EmptyArtifactError: If the artifact has no readable first line
        MalformedVersionError: If the version token is missing or invalid
    """
    lines = artifact.splitlines()
    if not lines or not lines[0].strip():
        raise EmptyArtifactError("Changelog is empty, no way to read back the version")

    tokens = lines[0].split()
    if len(tokens) < 2:
        raise MalformedVersionError(lines[0], "no version found on the first changelog line")
    return Version.parse(tokens[1])


def decide_release(
    base_tag: str | None,
    log_lines: Sequence[str],
    config: ClassifierConfig,
    *,
    render: Renderer,
    edit: Editor | None = None,
    prerelease: str = "",
    metadata: str = "",
) -> ReleaseOutcome:
    """Run the whole decision flow.

    Args:
        base_tag: Last release tag, None when the repository has no tags
        log_lines: Raw ``git log`` lines since that tag
        config: Classification rules for this run
        render: Builds the changelog artifact for the proposed version
        edit: Lets a human edit the artifact; None skips confirmation
        prerelease: Prerelease override
        metadata: Build metadata override

    Returns:
        A release outcome, or a no-release outcome when nothing is left to
        release after ignore filtering
    """
    base_version = Version.parse(base_tag or INITIAL_VERSION)

    raw_commits = parse_log_lines(list(log_lines))
    classified = classify_commits(raw_commits, config)
    ignored_count = len(raw_commits) - len(classified)

    try:
        proposal = propose_release(
            base_version,
            classified,
            prerelease=prerelease,
            metadata=metadata,
        )
    except NoCommitsError:
        if ignored_count:
            reason = f"All {ignored_count} commits since the last release are ignored"
        else:
            reason = "Found no changes since the last release"
        return ReleaseOutcome(
            status=ReleaseStatus.NO_RELEASE,
            ignored_count=ignored_count,
            reason=reason,
        )

    artifact = render(proposal.version, proposal.commits)

    if edit is None:
        confirmed = proposal.version
    else:
        artifact = edit(artifact)
        confirmed = confirm_release(artifact)
        if confirmed != proposal.version:
            logger.info("Version changed during edit: %s -> %s", proposal.version, confirmed)

    return ReleaseOutcome(
        status=ReleaseStatus.RELEASE,
        decision=ReleaseDecision(
            base_version=base_version,
            bump=proposal.bump,
            proposed_version=proposal.version,
            confirmed_version=confirmed,
        ),
        artifact=artifact,
        commits=proposal.commits,
        ignored_count=ignored_count,
    )
