"""Module d'exécution de commandes système.

Classes disponibles :
    CommandResult : Résultat immuable d'une exécution.
    CommandExecutor : Interface abstraite pour les exécuteurs.
    CommandBuilder : Constructeur fluent de commandes.
    LinuxCommandExecutor : Exécuteur concret via subprocess.
    CommandFormatter : Interface abstraite de formatage.
    PlainCommandFormatter : Formatage texte brut (logs fichier).
    AnsiCommandFormatter : Formatage ANSI coloré (console).
"""

from systemctl_openrc.commands.base import (
    CommandResult,
    CommandExecutor,
)
from systemctl_openrc.commands.builder import CommandBuilder
from systemctl_openrc.commands.formatter import (
    CommandFormatter,
    PlainCommandFormatter,
    AnsiCommandFormatter,
)
from systemctl_openrc.commands.runner import LinuxCommandExecutor

__all__ = [
    # Structures de données
    "CommandResult",
    # Interface abstraite
    "CommandExecutor",
    # Constructeur
    "CommandBuilder",
    # Formateurs
    "CommandFormatter",
    "PlainCommandFormatter",
    "AnsiCommandFormatter",
    # Implémentation Linux
    "LinuxCommandExecutor",
]
