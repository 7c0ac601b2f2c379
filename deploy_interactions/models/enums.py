from __future__ import annotations

from typing import Any, TYPE_CHECKING
from enum import Enum

from pydantic_core.core_schema import CoreSchema, enum_schema

if TYPE_CHECKING:
    from pydantic import GetCoreSchemaHandler


__all__ = (
    'ApplicationCommandOptionType',
    'ApplicationCommandType',
    'ChannelType',
    'OpenEnum',
    'OptionKind',
)


class OpenEnum(Enum):
    """Integer enum that keeps values it does not know about.

    Discord adds channel, option and command types over time, an unknown
    value becomes an `UNKNOWN_<value>` member instead of failing validation.
    """

    @classmethod
    def _missing_(cls, value: object) -> Any:  # noqa: ANN401
        if not isinstance(value, int) or isinstance(value, bool):
            return None

        member = object.__new__(cls)
        member._name_ = f'UNKNOWN_{value}'
        member._value_ = value

        # ? cached so repeated lookups return the same member
        return cls._value2member_map_.setdefault(value, member)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        _source_type: type[Any] | None,
        _handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        return enum_schema(
            cls,
            list(cls.__members__.values()),
            sub_type='int',
            missing=cls._missing_
        )


# ? library enum, groups option types by the fields they carry
class OptionKind(Enum):
    SUBCOMMAND = 'subcommand'
    """Subcommands and subcommand groups, carry nested options"""
    CHOICES = 'choices'
    """String options, carry choices or autocomplete"""
    NUMERIC = 'numeric'
    """Integer and number options, carry choices or autocomplete and bounds"""
    CHANNEL = 'channel'
    """Channel options, carry permitted channel types"""
    BASIC = 'basic'
    """Everything else, equal by their common fields only"""


class ChannelType(OpenEnum):
    GUILD_TEXT = 0
    """a text channel within a server"""
    DM = 1
    """a direct message between users"""
    GUILD_VOICE = 2
    """a voice channel within a server"""
    GROUP_DM = 3
    """a direct message between multiple users"""
    GUILD_CATEGORY = 4
    """an organizational category that contains up to 50 channels"""
    GUILD_ANNOUNCEMENT = 5
    """a channel that users can follow and crosspost into their own server (formerly news channels)"""
    ANNOUNCEMENT_THREAD = 10
    """a temporary sub-channel within a GUILD_ANNOUNCEMENT channel"""
    PUBLIC_THREAD = 11
    """a temporary sub-channel within a GUILD_TEXT or GUILD_FORUM channel"""
    PRIVATE_THREAD = 12
    """a temporary sub-channel within a GUILD_TEXT channel that is only viewable by those invited and those with the MANAGE_THREADS permission"""
    GUILD_STAGE_VOICE = 13
    """a stage channel for live audio streaming"""
    GUILD_DIRECTORY = 14
    """the channel in a hub containing the listed servers"""
    GUILD_FORUM = 15
    """Channel that can only contain threads"""
    GUILD_MEDIA = 16
    """Channel that can only contain threads, similar to GUILD_FORUM channels"""


class ApplicationCommandOptionType(OpenEnum):
    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3
    INTEGER = 4
    """Any integer between -2^53 and 2^53"""
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    """Includes all channel types + categories"""
    ROLE = 8
    MENTIONABLE = 9
    """Includes users and roles"""
    NUMBER = 10
    """Any double between -2^53 and 2^53"""
    ATTACHMENT = 11
    """attachment object"""

    @property
    def kind(self) -> OptionKind:
        match self:
            case (
                ApplicationCommandOptionType.SUB_COMMAND |
                ApplicationCommandOptionType.SUB_COMMAND_GROUP
            ):
                return OptionKind.SUBCOMMAND
            case ApplicationCommandOptionType.STRING:
                return OptionKind.CHOICES
            case (
                ApplicationCommandOptionType.INTEGER |
                ApplicationCommandOptionType.NUMBER
            ):
                return OptionKind.NUMERIC
            case ApplicationCommandOptionType.CHANNEL:
                return OptionKind.CHANNEL
            case _:
                return OptionKind.BASIC


class ApplicationCommandType(OpenEnum):
    CHAT_INPUT = 1
    """Slash commands; a text-based command that shows up when a user types `/`"""
    USER = 2
    """A UI-based command that shows up when you right click or tap on a user"""
    MESSAGE = 3
    """A UI-based command that shows up when you right click or tap on a message"""
    PRIMARY_ENTRY_POINT = 4
    """A UI-based command that represents the primary way to invoke an app's Activity"""

    def __str__(self) -> str:
        match self:
            case ApplicationCommandType.CHAT_INPUT:
                return 'Chat Input'
            case ApplicationCommandType.USER:
                return 'User'
            case ApplicationCommandType.MESSAGE:
                return 'Message'
            case ApplicationCommandType.PRIMARY_ENTRY_POINT:
                return 'Entry Point'
            case _:
                return super().__str__()
