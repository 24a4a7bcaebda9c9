"""Constructeur fluent pour assembler des commandes système.

Example:
    Ajout d'un service au runlevel par défaut :

        from systemctl_openrc.commands import CommandBuilder

        cmd = (
            CommandBuilder("rc-update")
            .with_args(["add", "nginx", "default"])
            .build()
        )
        # Résultat : ["rc-update", "add", "nginx", "default"]
"""

from typing import List


class CommandBuilder:
    """Constructeur fluent pour assembler des commandes système."""

    def __init__(self, program: str) -> None:
        """Initialise le constructeur avec le programme.

        Args:
            program: Nom ou chemin du programme à exécuter.

        Raises:
            ValueError: Si program est vide.
        """
        if not program or not program.strip():
            raise ValueError("Le programme est requis.")
        self._program: str = program
        self._args: List[str] = []

    def with_args(
        self, args: List[str]
    ) -> "CommandBuilder":
        """Ajoute les arguments positionnels finaux.

        Args:
            args: Liste d'arguments positionnels.

        Returns:
            L'instance courante pour le chaînage.
        """
        self._args.extend(args)
        return self

    def build(self) -> List[str]:
        """Construit et retourne la commande sous forme de liste.

        Returns:
            Liste de chaînes représentant la commande complète.
        """
        return [self._program] + self._args
