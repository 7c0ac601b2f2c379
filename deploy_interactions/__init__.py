from .config import DeployConfig, resolve_config, store_config
from .deploy import deploy, deploy_single_destination, separate_destinations
from .equality import command_equals, option_equals, options_equal
from .errors import (
    BaseDeployException,
    CommandLoadError,
    ConfigError,
    DeployException,
    ErrorSeverity,
    HTTPException,
    classify_error
)
from .http import DiscordClient
from .loader import get_command, get_folder_commands, group_by_type, load_commands, resolve_destinations
from .missing import MISSING
from .protocols import CommandClient
from .report import render_report
from .types import Snowflake
from .version import VERSION
from .models import (
    ApplicationCommand,
    ApplicationCommandConfig,
    ApplicationCommandType,
    DeployResponse,
    RemoteApplicationCommand,
    SingleDeployResponse
)


__all__ = (
    'MISSING',
    'VERSION',
    'ApplicationCommand',
    'ApplicationCommandConfig',
    'ApplicationCommandType',
    'BaseDeployException',
    'CommandClient',
    'CommandLoadError',
    'ConfigError',
    'DeployConfig',
    'DeployException',
    'DeployResponse',
    'DiscordClient',
    'ErrorSeverity',
    'HTTPException',
    'RemoteApplicationCommand',
    'SingleDeployResponse',
    'Snowflake',
    'classify_error',
    'command_equals',
    'deploy',
    'deploy_single_destination',
    'get_command',
    'get_folder_commands',
    'group_by_type',
    'load_commands',
    'option_equals',
    'options_equal',
    'render_report',
    'resolve_config',
    'resolve_destinations',
    'separate_destinations',
    'store_config',
)
