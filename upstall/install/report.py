"""Run outcome and state tracking."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path

from upstall.install.integrity import ChecksumStatus
from upstall.install.signature import SignatureStatus
from upstall.release.model import AssetDescriptor

__all__ = ["Outcome", "RunState", "RunReport"]


class Outcome(Enum):
    INSTALLED = auto()
    ALREADY_CURRENT = auto()
    DRY_RUN = auto()
    UNINSTALLED = auto()
    NOTHING_TO_UNINSTALL = auto()

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")


class RunState(Enum):
    IDLE = auto()
    RESOLVING = auto()
    SKIP_UP_TO_DATE = auto()
    DOWNLOADING = auto()
    VERIFYING = auto()
    INSTALLING = auto()
    VERIFYING_INSTALLED = auto()
    UNINSTALLING = auto()
    DONE = auto()
    FAILED = auto()


def _initial_states() -> list[RunState]:
    return [RunState.IDLE]


@dataclass
class RunReport:
    """What one run did.

    Attributes:
        outcome: Final outcome (None until the run finishes)
        states: Every state entered, in order
        tag: Resolved release tag
        asset: Selected artifact
        artifact: Downloaded artifact path
        kept_artifact: Set when the artifact was left on disk for the caller
        installed_before: Version reported before the run
        installed_after: Version reported after installing
        checksum: Checksum verification status
        signature: Publisher signature status
    """

    outcome: Outcome | None = None
    states: list[RunState] = field(default_factory=_initial_states)
    tag: str | None = None
    asset: AssetDescriptor | None = None
    artifact: Path | None = None
    kept_artifact: Path | None = None
    installed_before: str | None = None
    installed_after: str | None = None
    checksum: ChecksumStatus | None = None
    signature: SignatureStatus | None = None

    @property
    def state(self) -> RunState:
        return self.states[-1]

    def enter(self, state: RunState) -> None:
        if self.states[-1] is not state:
            self.states.append(state)

    def finish(self, outcome: Outcome) -> RunReport:
        self.outcome = outcome
        self.enter(RunState.DONE)
        return self
