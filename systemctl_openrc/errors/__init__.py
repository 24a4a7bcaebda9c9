"""Module de gestion des erreurs."""

from systemctl_openrc.errors.base import ErrorHandler, ErrorHandlerChain
from systemctl_openrc.errors.exceptions import (ApplicationError,
                                                ConfigurationError,
                                                FileConfigurationError,
                                                ValidationError,
                                                InvalidServiceNameError,
                                                ServiceNotFoundError,
                                                UnitParseError,
                                                ConversionError,
                                                InstallationError,
                                                ConflictError,
                                                ExternalToolError)
from systemctl_openrc.errors.console_handler import ConsoleErrorHandler
from systemctl_openrc.errors.logger_handler import LoggerErrorHandler


__all__ = [
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
    "ConsoleErrorHandler",
    "LoggerErrorHandler",
    "ErrorHandlerChain",
]
