"""
systemctl-openrc - Traduction des commandes systemctl vers OpenRC.

Modules disponibles:
- unit: Fichiers unit systemd (noms, spécificateurs, lecture)
- openrc: Conversion en scripts OpenRC, installation, rc-update/rc-service
- manager: Orchestration des verbes systemctl (ServiceManager)
- cli: Interface en ligne de commande ``systemctl`` (click)
- logging: Gestion des logs (Logger, FileLogger)
- config: Réglages TOML/JSON validés par pydantic
- errors: Exceptions et chaîne de gestion des erreurs
- commands: Exécution de commandes système (CommandBuilder,
  LinuxCommandExecutor)
"""

__version__ = "1.0.0"

from systemctl_openrc.logging import Logger, FileLogger, NullLogger
from systemctl_openrc.config import (
    ConfigLoader,
    FileConfigLoader,
    Settings,
    load_settings,
)
from systemctl_openrc.errors import (
    ApplicationError,
    ConfigurationError,
    FileConfigurationError,
    ValidationError,
    InvalidServiceNameError,
    ServiceNotFoundError,
    UnitParseError,
    ConversionError,
    InstallationError,
    ConflictError,
    ExternalToolError,
    ErrorHandler,
    ErrorHandlerChain,
    ConsoleErrorHandler,
    LoggerErrorHandler,
)
from systemctl_openrc.commands import (
    CommandResult,
    CommandExecutor,
    CommandBuilder,
    LinuxCommandExecutor,
)
from systemctl_openrc.unit import (
    ServiceConfig,
    ServiceName,
    ServiceState,
    SpecifierResolver,
    UnitFileParser,
    UnitLocator,
    parse_unit_file,
)
from systemctl_openrc.openrc import (
    InitSystem,
    OpenRCInitSystem,
    OpenRCConverter,
    OpenRCScriptInstaller,
    ScriptDirectory,
    ServiceAction,
    StatusResult,
    TemplateData,
    convert_to_openrc,
)
from systemctl_openrc.manager import ServiceManager

__all__ = [
    "__version__",
    # Logging
    "Logger",
    "FileLogger",
    "NullLogger",
    # Config
    "ConfigLoader",
    "FileConfigLoader",
    "Settings",
    "load_settings",
    # Erreurs
    "ApplicationError",
    "ConfigurationError",
    "FileConfigurationError",
    "ValidationError",
    "InvalidServiceNameError",
    "ServiceNotFoundError",
    "UnitParseError",
    "ConversionError",
    "InstallationError",
    "ConflictError",
    "ExternalToolError",
    "ErrorHandler",
    "ErrorHandlerChain",
    "ConsoleErrorHandler",
    "LoggerErrorHandler",
    # Commandes
    "CommandResult",
    "CommandExecutor",
    "CommandBuilder",
    "LinuxCommandExecutor",
    # Fichiers unit
    "ServiceConfig",
    "ServiceName",
    "ServiceState",
    "SpecifierResolver",
    "UnitFileParser",
    "UnitLocator",
    "parse_unit_file",
    # OpenRC
    "InitSystem",
    "OpenRCInitSystem",
    "OpenRCConverter",
    "OpenRCScriptInstaller",
    "ScriptDirectory",
    "ServiceAction",
    "StatusResult",
    "TemplateData",
    "convert_to_openrc",
    # Orchestration
    "ServiceManager",
]
