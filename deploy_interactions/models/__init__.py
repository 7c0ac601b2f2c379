from .base import RawBaseModel, filter_missing
from .enums import (
    ApplicationCommandOptionType,
    ApplicationCommandType,
    ChannelType,
    OptionKind
)
from .command import (
    ApplicationCommand,
    BasicOption,
    ChannelOption,
    Choice,
    ChoicesOption,
    NumericOption,
    Option,
    RemoteApplicationCommand,
    SubcommandOption
)
from .destination import (
    GLOBAL,
    ApplicationCommandConfig,
    DeployTarget,
    DestinationCommand,
    PathDestinations
)
from .results import (
    DeployResponse,
    ErroredCommand,
    SingleDeployResponse,
    SkippedCommand
)


__all__ = (
    'GLOBAL',
    'ApplicationCommand',
    'ApplicationCommandConfig',
    'ApplicationCommandOptionType',
    'ApplicationCommandType',
    'BasicOption',
    'ChannelOption',
    'ChannelType',
    'Choice',
    'ChoicesOption',
    'DeployResponse',
    'DeployTarget',
    'DestinationCommand',
    'ErroredCommand',
    'NumericOption',
    'Option',
    'OptionKind',
    'PathDestinations',
    'RawBaseModel',
    'RemoteApplicationCommand',
    'SingleDeployResponse',
    'SkippedCommand',
    'SubcommandOption',
    'filter_missing',
)
