from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deploy_interactions.errors import HTTPException
    from deploy_interactions.types import Snowflake

    from .command import ApplicationCommand, RemoteApplicationCommand


__all__ = (
    'DeployResponse',
    'ErroredCommand',
    'SingleDeployResponse',
    'SkippedCommand',
)


@dataclass(frozen=True, slots=True)
class SkippedCommand:
    """A command that was not deployed, either already up to date or skipped by a dry run"""

    command: ApplicationCommand
    existing: RemoteApplicationCommand | None = None
    """The matching command on discord, `None` on a dry run"""

    @property
    def name(self) -> str:
        return self.command.name

    @property
    def id(self) -> Snowflake | None:
        return self.existing.id if self.existing is not None else None


@dataclass(frozen=True, slots=True)
class ErroredCommand:
    """A command whose create call failed without stopping the rest of the destination"""

    command: ApplicationCommand
    error: HTTPException

    @property
    def name(self) -> str:
        return self.command.name


@dataclass(frozen=True, slots=True)
class SingleDeployResponse:
    """The outcome of deploying to one destination, global or a single guild"""

    commands: list[RemoteApplicationCommand] = field(default_factory=list)
    """Commands as returned by discord after being created"""
    skipped: list[SkippedCommand] = field(default_factory=list)
    errored: list[ErroredCommand] = field(default_factory=list)
    bulk_error: HTTPException | None = None
    """Set when the whole destination was abandoned, every other list is then empty"""

    @classmethod
    def failed(cls, error: HTTPException) -> SingleDeployResponse:
        return cls(bulk_error=error)

    @property
    def ok(self) -> bool:
        return self.bulk_error is None and not self.errored


@dataclass(frozen=True, slots=True)
class DeployResponse:
    """The outcome of a full deploy across every destination"""

    global_result: SingleDeployResponse | None = None
    guilds: dict[Snowflake, SingleDeployResponse] = field(default_factory=dict)
    dev: Snowflake | None = None
    """The guild every command was deployed to when running in dev mode"""
    error: HTTPException | None = None
    """Set when the run was halted, destinations after the failure were never attempted"""

    @property
    def results(self) -> list[tuple[str, SingleDeployResponse]]:
        results = []

        if self.global_result is not None:
            results.append(('global', self.global_result))

        results.extend(self.guilds.items())

        return results
