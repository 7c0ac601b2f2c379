from __future__ import annotations

from dataclasses import dataclass

from pydantic import ConfigDict, Field

from deploy_interactions.missing import MISSING, Optional, or_default
from deploy_interactions.types import Snowflake

from .enums import ApplicationCommandType
from .command import ApplicationCommand
from .base import RawBaseModel


__all__ = (
    'GLOBAL',
    'ApplicationCommandConfig',
    'DeployTarget',
    'DestinationCommand',
    'PathDestinations',
)


@dataclass(frozen=True, slots=True)
class DeployTarget:
    guild_id: Snowflake | None = None
    dev: bool = False

    @property
    def is_global(self) -> bool:
        return self.guild_id is None

    def __str__(self) -> str:
        if self.guild_id is None:
            return 'global'

        return f'guild {self.guild_id}' + (' (dev)' if self.dev else '')


GLOBAL = DeployTarget()


class ApplicationCommandConfig(RawBaseModel):
    """A command along with every destination it should be deployed to"""
    model_config = ConfigDict(populate_by_name=True)

    command: ApplicationCommand
    global_: bool = Field(False, alias='global')
    """Whether to deploy the command globally"""
    guild_ids: list[Snowflake] = Field(default_factory=list)
    """The guilds the command should be deployed to as a guild command"""


class DestinationCommand(RawBaseModel):
    """The name and type of a command in a destination table, effectively an id before one exists"""
    name: str
    type: Optional[ApplicationCommandType] = MISSING
    """Names are unique per type, defaults to `CHAT_INPUT`"""

    def matches(self, command: ApplicationCommand) -> bool:
        return (
            self.name == command.name and
            or_default(self.type, ApplicationCommandType.CHAT_INPUT) == command.effective_type
        )


class PathDestinations(RawBaseModel):
    """Destinations applied to every command found under a path"""
    model_config = ConfigDict(populate_by_name=True)

    global_: bool = Field(True, alias='global')
    guild_ids: list[Snowflake] = Field(default_factory=list)
