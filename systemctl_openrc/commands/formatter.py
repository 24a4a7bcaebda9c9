"""Formateurs pour l'affichage des commandes OpenRC exécutées.

Classes :
    CommandFormatter : Interface abstraite de formatage.
    PlainCommandFormatter : Texte brut avec préfixes [ROOT]/[user].
    AnsiCommandFormatter : Codes ANSI colorés pour la console
        (option --verbose de la CLI).

Note :
    AnsiCommandFormatter vérifie si stderr est un terminal (TTY)
    avant d'émettre des codes ANSI.
"""

import sys
from abc import ABC, abstractmethod
from typing import List


class CommandFormatter(ABC):
    """Interface abstraite pour formater les messages de commande."""

    @abstractmethod
    def format_start(
        self, command: List[str], is_root: bool
    ) -> str:
        """Formate le message de début d'exécution.

        Args:
            command: Commande sous forme de liste.
            is_root: True si la commande est exécutée en root.

        Returns:
            Message formaté prêt à l'affichage.
        """
        pass

    @abstractmethod
    def format_failure(
        self, command: List[str], return_code: int, is_root: bool
    ) -> str:
        """Formate le message d'échec (code retour non nul)."""
        pass


class PlainCommandFormatter(CommandFormatter):
    """Formateur texte brut pour les logs fichier.

    Example :
        [ROOT] Exécution : rc-update add nginx default
    """

    _ROOT_PREFIX = "[ROOT]"
    _USER_PREFIX = "[user]"

    def _prefix(self, is_root: bool) -> str:
        return self._ROOT_PREFIX if is_root else self._USER_PREFIX

    def format_start(
        self, command: List[str], is_root: bool
    ) -> str:
        """Formate le début d'exécution avec préfixe textuel."""
        return f"{self._prefix(is_root)} Exécution : {' '.join(command)}"

    def format_failure(
        self, command: List[str], return_code: int, is_root: bool
    ) -> str:
        """Formate l'échec avec préfixe textuel."""
        return (
            f"{self._prefix(is_root)} Code retour {return_code} : "
            f"{' '.join(command)}"
        )


class AnsiCommandFormatter(PlainCommandFormatter):
    """Formateur ANSI coloré pour la console.

    Styles ANSI :
        ROOT    → \\033[1;33m (jaune-or gras)
        user    → \\033[0;32m (vert normal)
        échec   → \\033[0;31m (rouge)
    """

    RESET = "\033[0m"
    ROOT_STYLE = "\033[1;33m"
    USER_STYLE = "\033[0;32m"
    FAILURE_STYLE = "\033[0;31m"

    def _is_tty(self) -> bool:
        return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()

    def _style(self, text: str, style: str) -> str:
        if not self._is_tty():
            return text
        return f"{style}{text}{self.RESET}"

    def format_start(
        self, command: List[str], is_root: bool
    ) -> str:
        """Formate le début d'exécution avec style ANSI."""
        style = self.ROOT_STYLE if is_root else self.USER_STYLE
        return self._style(super().format_start(command, is_root), style)

    def format_failure(
        self, command: List[str], return_code: int, is_root: bool
    ) -> str:
        """Formate l'échec en rouge."""
        return self._style(
            super().format_failure(command, return_code, is_root),
            self.FAILURE_STYLE,
        )
