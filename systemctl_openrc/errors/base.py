""" Interfaces abstraites pour la gestion des erreurs"""

import sys
from abc import ABC, abstractmethod


class ErrorHandler(ABC):
    """Interface de base pour les handlers d'erreurs.

    Chaque implémentation concrète définit une stratégie
    de traitement des erreurs (affichage console, logging, etc.).
    """

    @abstractmethod
    def handle(self, error: Exception) -> None:
        """Traite une erreur.

        Args:
            error: L'exception à traiter.
        """
        pass


class ErrorHandlerChain():
    """Diffuse les erreurs à tous les handlers enregistrés.

    Chaque erreur est transmise à tous les handlers dans l'ordre
    d'ajout (ex: console puis logger). La CLI s'en sert aussi pour
    les commandes en lot : chaque service en échec est signalé sans
    interrompre le traitement des suivants.
    """

    def __init__(self, handlers: list[ErrorHandler] | None = None):
        """Initialise la chaîne.

        Args:
            handlers: Handlers initiaux (défaut: aucun).
        """
        self.handlers: list[ErrorHandler] = list(handlers or [])

    def add_handler(self, handler: ErrorHandler) -> None:
        """Ajoute un handler à la chaîne.

        Args:
            handler: Le handler d'erreurs à ajouter.
        """
        self.handlers.append(handler)

    def handle(self, error: Exception) -> None:
        """Fait passer l'erreur à travers tous les handlers.

        Args:
            error: L'exception à diffuser.
        """
        for handler in self.handlers:
            handler.handle(error)

    @staticmethod
    def exit_code_for(error: Exception) -> int:
        """Code de sortie associé à une erreur.

        Les erreurs d'outils externes exposent le code retour de la
        commande OpenRC ; toutes les autres sortent avec 1.
        """
        code = getattr(error, "exit_code", 1)
        return code if isinstance(code, int) and code > 0 else 1

    def handle_and_exit(
        self, error: Exception, exit_code: int | None = None
    ) -> None:
        """Gère l'erreur et termine le programme.

        Args:
            error: L'exception à traiter avant la sortie.
            exit_code: Code de sortie forcé. Si None, déduit de
                l'erreur via exit_code_for().
        """
        self.handle(error)
        sys.exit(exit_code if exit_code is not None
                 else self.exit_code_for(error))
