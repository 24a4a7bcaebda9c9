"""Interface abstraite pour le logging."""

from abc import ABC, abstractmethod


class Logger(ABC):
    """Interface pour le système de logging.

    Tous les composants (exécuteur OpenRC, installateur, gestionnaire
    de services) reçoivent un Logger par injection.
    """

    @abstractmethod
    def log_info(self, message: str) -> None:
        """Log un message d'information."""
        pass

    @abstractmethod
    def log_warning(self, message: str) -> None:
        """Log un avertissement."""
        pass

    @abstractmethod
    def log_error(self, message: str) -> None:
        """Log une erreur."""
        pass


class NullLogger(Logger):
    """Logger muet, utilisé quand aucun fichier de log n'est configuré."""

    def log_info(self, message: str) -> None:
        pass

    def log_warning(self, message: str) -> None:
        pass

    def log_error(self, message: str) -> None:
        pass
