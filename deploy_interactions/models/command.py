from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import Discriminator, Field, Tag, field_validator

from deploy_interactions.missing import MISSING, Optional, Nullable, is_not_missing, or_default
from deploy_interactions.types import Snowflake

from .base import RawBaseModel
from .enums import (
    ApplicationCommandOptionType,
    ApplicationCommandType,
    ChannelType,
    OptionKind
)


__all__ = (
    'ApplicationCommand',
    'BasicOption',
    'ChannelOption',
    'Choice',
    'ChoicesOption',
    'NumericOption',
    'Option',
    'RemoteApplicationCommand',
    'SubcommandOption',
)


class Choice(RawBaseModel):
    name: str
    """1-100 character choice name"""
    name_localizations: Optional[Nullable[dict[str, str]]] = MISSING
    """Localization dictionary for the `name` field"""
    value: str | int | float
    """Value for the choice, up to 100 characters if string"""


class BaseOption(RawBaseModel):
    type: ApplicationCommandOptionType
    """Type of option"""
    name: str
    """1-32 character name"""
    name_localizations: Optional[Nullable[dict[str, str]]] = MISSING
    """Localization dictionary for `name` field. Values follow the same restrictions as `name`"""
    description: str
    """1-100 character description"""
    description_localizations: Optional[Nullable[dict[str, str]]] = MISSING
    """Localization dictionary for `description` field. Values follow the same restrictions as `description`"""
    required: Optional[Nullable[bool]] = MISSING
    """Whether the parameter is required or optional, default `false`"""

    @property
    def kind(self) -> OptionKind:
        return self.type.kind


class BasicOption(BaseOption):
    ...


class ChoicesOption(BaseOption):
    choices: Optional[Nullable[list[Choice]]] = MISSING
    """Choices for the user to pick from, max 25"""
    autocomplete: Optional[Nullable[bool]] = MISSING
    """If autocomplete interactions are enabled for this option, exclusive with `choices`"""
    min_length: Optional[int] = MISSING
    """The minimum allowed length (minimum of `0`, maximum of `6000`)"""
    max_length: Optional[int] = MISSING
    """The maximum allowed length (minimum of `1`, maximum of `6000`)"""


class NumericOption(ChoicesOption):
    min_value: Optional[Nullable[int | float]] = MISSING
    """The minimum value permitted"""
    max_value: Optional[Nullable[int | float]] = MISSING
    """The maximum value permitted"""


class ChannelOption(BaseOption):
    channel_types: Optional[Nullable[list[ChannelType]]] = MISSING
    """The channels shown will be restricted to these types"""


class SubcommandOption(BaseOption):
    options: Optional[Nullable[list[Option]]] = MISSING
    """Parameters of a subcommand, or the subcommands of a group; up to 25"""


def _option_kind(value: Any) -> str | None:  # noqa: ANN401
    raw = (
        value.get('type')
        if isinstance(value, dict) else
        getattr(value, 'type', None)
    )

    try:
        return ApplicationCommandOptionType(raw).kind.value
    except ValueError:
        return None


Option = Annotated[
    Union[
        Annotated[SubcommandOption, Tag(OptionKind.SUBCOMMAND.value)],
        Annotated[ChoicesOption, Tag(OptionKind.CHOICES.value)],
        Annotated[NumericOption, Tag(OptionKind.NUMERIC.value)],
        Annotated[ChannelOption, Tag(OptionKind.CHANNEL.value)],
        Annotated[BasicOption, Tag(OptionKind.BASIC.value)]
    ],
    Discriminator(_option_kind)
]

SubcommandOption.model_rebuild()


class ApplicationCommand(RawBaseModel):
    """A command definition as it is sent to discord"""
    type: Optional[ApplicationCommandType] = MISSING
    """Type of command, defaults to `1` (ApplicationCommandType.CHAT_INPUT)"""
    name: str = Field(min_length=1, max_length=32)
    """Name of command, 1-32 characters"""
    name_localizations: Optional[Nullable[dict[str, str]]] = MISSING
    """Localization dictionary for `name` field. Values follow the same restrictions as `name`"""
    description: Optional[str] = MISSING
    """Description for `CHAT_INPUT` commands, 1-100 characters. Omitted or empty for `USER` and `MESSAGE` commands"""
    description_localizations: Optional[Nullable[dict[str, str]]] = MISSING
    """Localization dictionary for `description` field. Values follow the same restrictions as `description`"""
    options: Optional[Nullable[list[Option]]] = MISSING
    """Parameters for the command, max of 25"""
    default_member_permissions: Optional[Nullable[str]] = MISSING
    """Set of permissions represented as a bit set"""
    dm_permission: Optional[Nullable[bool]] = MISSING
    """Whether the command is available in DMs, only for globally-scoped commands. Defaults to `true`"""
    nsfw: Optional[bool] = MISSING
    """Indicates whether the command is age-restricted, defaults to `false`"""

    @field_validator('default_member_permissions', mode='before')
    @classmethod
    def _permissions_as_string(cls, value: Any) -> Any:  # noqa: ANN401
        # ? discord always sends the bit set as a string
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)

        return value

    @property
    def effective_type(self) -> ApplicationCommandType:
        return or_default(self.type, ApplicationCommandType.CHAT_INPUT)

    @property
    def key(self) -> tuple[ApplicationCommandType, str]:
        """Names are unique per command type within a scope"""
        return (self.effective_type, self.name)

    def __str__(self) -> str:
        return f'{self.effective_type} {self.name}'


class RemoteApplicationCommand(ApplicationCommand):
    """A command as registered on discord"""
    id: Snowflake
    """Unique ID of command"""
    type: ApplicationCommandType = ApplicationCommandType.CHAT_INPUT
    """Type of command, always present on registered commands"""
    application_id: Snowflake
    """ID of the parent application"""
    guild_id: Optional[Nullable[Snowflake]] = MISSING
    """Guild ID of the command, if not global"""
    version: Snowflake
    """Autoincrementing version identifier updated during substantial record changes"""

    @property
    def is_global(self) -> bool:
        return not (is_not_missing(self.guild_id) and self.guild_id is not None)
