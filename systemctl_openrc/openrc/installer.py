"""Installation des scripts OpenRC générés.

Example:
    Installation d'un script converti :

        from systemctl_openrc.openrc import OpenRCScriptInstaller

        installer = OpenRCScriptInstaller(logger, init_system)
        installer.install("nginx", script)
"""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from systemctl_openrc.errors.exceptions import (
    ConflictError,
    InstallationError,
)
from systemctl_openrc.logging.base import Logger
from systemctl_openrc.openrc.base import InitSystem
from systemctl_openrc.openrc.scripts import ScriptDirectory


class ScriptInstaller(ABC):
    """Interface abstraite pour l'installation de scripts de service."""

    @abstractmethod
    def install(self, name: str, content: str, force: bool = False) -> Path:
        """Écrit le script puis l'inscrit dans le système d'init.

        Args:
            name: Nom du service.
            content: Texte du script.
            force: Écraser un script modifié à la main.

        Returns:
            Chemin du script installé.
        """
        pass

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Vérifie si un script existe déjà pour ce service."""
        pass


class OpenRCScriptInstaller(ScriptInstaller):
    """Installateur de scripts dans /etc/init.d.

    L'écriture passe par un fichier temporaire du même répertoire,
    renommé sur le chemin final : un script partiel n'est jamais
    visible par OpenRC.

    Attributes:
        logger: Instance de Logger pour la journalisation.
        init_system: Système d'init où inscrire le service.
        scripts: Répertoire des scripts.
        mode: Permissions des scripts (0o755).
    """

    def __init__(
        self,
        logger: Logger,
        init_system: InitSystem,
        script_dir: Union[str, Path, ScriptDirectory] = "/etc/init.d",
        mode: int = 0o755
    ) -> None:
        """Initialise l'installateur avec ses dépendances.

        Args:
            logger: Instance de Logger pour la journalisation.
            init_system: Système d'init (rc-update).
            script_dir: Répertoire des scripts.
            mode: Permissions des scripts installés.
        """
        self.logger = logger
        self.init_system = init_system
        self.scripts = (
            script_dir if isinstance(script_dir, ScriptDirectory)
            else ScriptDirectory(script_dir)
        )
        self.mode = mode

    def exists(self, name: str) -> bool:
        return self.scripts.exists(name)

    def check_conflict(self, name: str, force: bool = False) -> None:
        """Refuse d'écraser un script modifié via ``systemctl edit``.

        Raises:
            ConflictError: Si le script porte le marqueur d'édition et
                que force est False.
        """
        if not force and self.scripts.is_modified(name):
            raise ConflictError(
                f"Service {name} : le script "
                f"{self.scripts.script_path(name)} a été modifié "
                "manuellement (utiliser --force pour l'écraser)"
            )

    def install(self, name: str, content: str, force: bool = False) -> Path:
        """Écrit le script puis l'inscrit dans le runlevel.

        Raises:
            ConflictError: Si le script installé porte le marqueur
                d'édition et que force est False.
            InstallationError: Si l'écriture échoue.
            ExternalToolError: Si l'inscription échoue.
        """
        path = self.write(name, content, force=force)
        self.init_system.add(name)
        return path

    def write(self, name: str, content: str, force: bool = False) -> Path:
        """Écrit le script de façon atomique, sans l'inscrire.

        Raises:
            ConflictError: Si le script a été modifié à la main.
            InstallationError: Si l'écriture échoue.
        """
        path = self.scripts.script_path(name)
        self.check_conflict(name, force)

        try:
            self.scripts.path.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as e:
            raise InstallationError(
                f"Service {name} : impossible de créer "
                f"{self.scripts.path} : {e}"
            ) from e

        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.scripts.path, prefix=f".{name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(tmp_path, self.mode)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            raise InstallationError(
                f"Service {name} : impossible d'écrire {path} : {e}"
            ) from e

        self.logger.log_info(f"Script {path} installé avec succès.")
        return path
