"""
Exceptions personnalisées de systemctl_openrc.

Toutes les erreurs métier dérivent d'ApplicationError afin que la CLI
puisse distinguer les erreurs connues des erreurs inattendues.
"""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from systemctl_openrc.commands.base import CommandResult


class ApplicationError(Exception):
    """Exception de base pour toute l'application."""
    pass


class ConfigurationError(ApplicationError):
    """Exception de base pour les erreurs de configuration."""
    pass


class FileConfigurationError(ConfigurationError):
    """Fichier de configuration illisible ou invalide."""
    pass


class ValidationError(ApplicationError):
    """Exception de base pour les validations."""
    pass


class InvalidServiceNameError(ValidationError, ValueError):
    """Nom de service refusé (caractères interdits, traversée)."""
    pass


class ServiceNotFoundError(ApplicationError):
    """Ni fichier unit systemd ni script OpenRC pour ce service."""
    pass


class UnitParseError(ApplicationError):
    """Fichier unit illisible (ouverture ou lecture impossible)."""
    pass


class ConversionError(ApplicationError):
    """Configuration impossible à convertir en script OpenRC."""
    pass


class InstallationError(ApplicationError):
    """Écriture du script OpenRC impossible."""
    pass


class ConflictError(ApplicationError):
    """Script installé modifié manuellement, écrasement non demandé."""
    pass


class ExternalToolError(ApplicationError):
    """Échec d'un outil OpenRC (rc-update, rc-service).

    Attributes:
        result: Résultat de la commande en échec, si disponible.
    """

    def __init__(
        self,
        message: str,
        result: "CommandResult | None" = None
    ) -> None:
        """Initialise l'erreur avec le résultat de la commande.

        Args:
            message: Message décrivant l'échec.
            result: Résultat de la commande ayant échoué.
        """
        super().__init__(message)
        self.result = result

    @property
    def exit_code(self) -> int:
        """Code retour de la commande (1 si inconnu)."""
        if self.result is None or self.result.return_code <= 0:
            return 1
        return self.result.return_code
