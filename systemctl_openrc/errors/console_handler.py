"""
    ConsoleErrorHandler (messages utilisateur sur stderr)
"""
import sys

from systemctl_openrc.errors.base import ErrorHandler
from systemctl_openrc.errors.exceptions import (ApplicationError,
                                                ConfigurationError,
                                                ConflictError,
                                                ConversionError,
                                                ExternalToolError,
                                                InstallationError,
                                                ServiceNotFoundError,
                                                UnitParseError)


DEFAULT_SOLUTIONS: dict[type[Exception], str] = {
    ServiceNotFoundError: (
        "Vérifiez le nom du service ou installez son fichier unit."
    ),
    UnitParseError: "Vérifiez que le fichier unit est lisible.",
    ConversionError: "Vérifiez la directive ExecStart du fichier unit.",
    InstallationError: (
        "Exécutez avec sudo ou vérifiez les permissions de /etc/init.d."
    ),
    ConflictError: "Utilisez --force pour écraser le script modifié.",
    ExternalToolError: "Consultez les logs pour plus de détails.",
    ConfigurationError: "Vérifiez votre fichier de configuration.",
}


class ConsoleErrorHandler(ErrorHandler):
    """Handler pour afficher les erreurs dans la console.

    Distingue les erreurs connues (ApplicationError) des erreurs
    inattendues, et affiche une solution adaptée au type d'erreur.
    Tout est écrit sur stderr pour ne pas polluer la sortie des
    commandes scriptables (is-active, show --value...).
    """

    def __init__(
        self,
        base_error_type: type[Exception] = ApplicationError,
        solutions: dict[type[Exception], str] | None = None,
        stream=None
    ) -> None:
        """Initialise le handler console.

        Args:
            base_error_type: Classe de base des erreurs connues
                (défaut: ApplicationError).
            solutions: Dictionnaire {TypeException: "message solution"}.
                Par défaut DEFAULT_SOLUTIONS.
            stream: Flux de sortie (défaut: sys.stderr à l'appel).
        """
        self.base_error_type = base_error_type
        self.solutions = DEFAULT_SOLUTIONS if solutions is None else solutions
        self.stream = stream

    def _print(self, message: str) -> None:
        print(message, file=self.stream or sys.stderr)

    def handle(self, error: Exception) -> None:
        """Affiche l'erreur dans la console avec des messages utilisateur.

        Args:
            error: L'exception à afficher.
        """
        if isinstance(error, self.base_error_type):
            self._handle_known_error(error)
        else:
            self._handle_unknown_error(error)

    def _solution_for(self, error: Exception) -> str | None:
        """Cherche la solution du type le plus proche dans le MRO."""
        for error_type in type(error).__mro__:
            if error_type in self.solutions:
                return self.solutions[error_type]
        return None

    def _handle_known_error(self, error: Exception) -> None:
        """Gère les erreurs connues du projet.

        Args:
            error: L'exception métier à traiter.
        """
        self._print(f"🛑 {type(error).__name__}: {str(error)}")

        solution = self._solution_for(error)
        if solution:
            self._print(f"🔧 Solution : {solution}")

    def _handle_unknown_error(self, error: Exception) -> None:
        """Gère les erreurs inattendues.

        Args:
            error: L'exception non prévue à afficher.
        """
        self._print(f"💥 Erreur inattendue: {str(error)}")
        self._print(f"Type: {type(error).__name__}")
        self._print(
            "📋 Cela peut être un bug. "
            "Veuillez ouvrir une issue avec ces informations."
        )
