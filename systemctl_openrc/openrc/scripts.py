"""Scripts OpenRC installés : lecture, marquage et édition.

Un script modifié à la main par ``systemctl edit`` porte la ligne
``# Modified by systemctl edit on <horodatage>``. Ce marqueur protège
le script contre une régénération par ``enable`` sans ``--force``.
"""

import os
import re
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional, Union

from systemctl_openrc.errors.exceptions import ServiceNotFoundError
from systemctl_openrc.logging.base import Logger
from systemctl_openrc.unit.names import (
    is_valid_service_name,
    validate_service_name,
)

MODIFICATION_MARKER = "# Modified by systemctl edit"
FALLBACK_EDITORS = ("vi", "nano", "ed")

_ASSIGNMENT_RE = re.compile(r"^(\w+)=(.*)$")

_DQ_ESCAPE_RE = re.compile(r'\\(["\\$`])')


def _unquote(value: str) -> str:
    """Retire les guillemets englobants et leurs échappements."""
    if len(value) < 2 or value[0] != value[-1]:
        return value
    if value[0] == '"':
        return _DQ_ESCAPE_RE.sub(r"\1", value[1:-1])
    if value[0] == "'":
        return value[1:-1].replace("'\\''", "'")
    return value


@dataclass(frozen=True)
class ScriptInfo:
    """Variables lues dans un script OpenRC installé."""

    description: str = ""
    command: str = ""
    command_args: str = ""
    command_user: str = ""
    directory: str = ""
    pidfile: str = ""
    command_background: bool = False

    @property
    def exec_start(self) -> str:
        """Ligne de commande complète, à la manière d'ExecStart=."""
        return " ".join(p for p in (self.command, self.command_args) if p)

    @property
    def user(self) -> str:
        """Utilisateur de command_user, sans le groupe."""
        return self.command_user.split(":", 1)[0]


def parse_openrc_script(content: str) -> ScriptInfo:
    """Extrait les affectations de premier niveau d'un script OpenRC.

    Seules les lignes ``variable=valeur`` sont lues, les guillemets
    englobants sont retirés.

    Args:
        content: Texte du script.

    Returns:
        Variables reconnues.
    """
    values = {}
    for line in content.splitlines():
        match = _ASSIGNMENT_RE.match(line.strip())
        if match:
            values[match.group(1)] = _unquote(match.group(2).strip())
    return ScriptInfo(
        description=values.get("description", ""),
        command=values.get("command", ""),
        command_args=values.get("command_args", ""),
        command_user=values.get("command_user", ""),
        directory=values.get("directory", ""),
        pidfile=values.get("pidfile", ""),
        command_background=values.get("command_background") in (
            "true", "yes", "1"
        ),
    )


def has_modification_marker(content: str) -> bool:
    """True si le script a été modifié via ``systemctl edit``."""
    return MODIFICATION_MARKER in content


def stamp_modification(content: str, timestamp: datetime) -> str:
    """Ajoute ou rafraîchit le marqueur de modification.

    Args:
        content: Texte du script après édition.
        timestamp: Date de la modification.

    Returns:
        Texte du script marqué.
    """
    iso = timestamp.isoformat(timespec="seconds")
    stamp = f"{MODIFICATION_MARKER} on {iso}"
    if not has_modification_marker(content):
        return f"{content}\n{stamp}\n"
    lines = [
        stamp if f"{MODIFICATION_MARKER} on " in line else line
        for line in content.split("\n")
    ]
    return "\n".join(lines)


def find_editor(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Cherche un éditeur disponible.

    ``$EDITOR`` est retenu s'il est trouvé dans le PATH, sinon le
    premier de vi, nano ou ed.

    Args:
        environ: Environnement à consulter (défaut: os.environ).

    Returns:
        Commande de l'éditeur, ou None si aucun n'est installé.
    """
    environ = os.environ if environ is None else environ
    editor = environ.get("EDITOR", "")
    if editor and shutil.which(editor):
        return editor
    for candidate in FALLBACK_EDITORS:
        path = shutil.which(candidate)
        if path:
            return path
    return None


class ScriptDirectory:
    """Répertoire des scripts OpenRC (/etc/init.d par défaut).

    Attributes:
        path: Répertoire des scripts.
        logger: Logger optionnel, averti des fichiers ignorés.
    """

    def __init__(
        self,
        path: Union[str, Path] = "/etc/init.d",
        logger: Optional[Logger] = None,
    ) -> None:
        self.path = Path(path)
        self.logger = logger

    def script_path(self, name: str) -> Path:
        """Chemin du script d'un service (nom validé)."""
        return self.path / validate_service_name(name)

    def exists(self, name: str) -> bool:
        return self.script_path(name).is_file()

    def require(self, name: str) -> Path:
        """Chemin d'un script qui doit exister.

        Raises:
            ServiceNotFoundError: Si le script est absent.
        """
        path = self.script_path(name)
        if not path.is_file():
            raise ServiceNotFoundError(f"Le service {name} n'existe pas")
        return path

    def info(self, name: str) -> ScriptInfo:
        """Variables du script installé, vides s'il est illisible."""
        try:
            return parse_openrc_script(
                self.script_path(name).read_text(encoding="utf-8")
            )
        except (OSError, UnicodeDecodeError):
            return ScriptInfo()

    def is_modified(self, name: str) -> bool:
        """True si le script existe et porte le marqueur d'édition."""
        try:
            content = self.script_path(name).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return False
        return has_modification_marker(content)

    def names(self) -> list[str]:
        """Noms des scripts installés, triés.

        Les fichiers cachés et ceux dont le nom n'est pas un nom de
        service valide (``nginx~``, ``foo.bak#``) sont ignorés.
        """
        if not self.path.is_dir():
            return []
        names = []
        for entry in self.path.iterdir():
            if not entry.is_file() or entry.name.startswith("."):
                continue
            if not is_valid_service_name(entry.name):
                if self.logger:
                    self.logger.log_warning(
                        f"Script {entry.name} ignoré : "
                        "nom de service invalide"
                    )
                continue
            names.append(entry.name)
        return sorted(names)
