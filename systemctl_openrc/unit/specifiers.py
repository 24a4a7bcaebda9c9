"""Résolution des spécificateurs ``%x`` des fichiers unit.

Les spécificateurs ne sont substitués que pour les instances de
modèles (``app@worker1``). La substitution se fait en une seule passe
de gauche à droite : un ``%%`` devenu ``%`` n'est jamais réinterprété.

Example:

        resolver = SpecifierResolver("app@worker1.service", "worker1")
        resolver.resolve("/var/lib/%p/%i")
        # "/var/lib/app/worker1"
"""

import platform
import re
import socket
from functools import cached_property
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from systemctl_openrc.unit.names import SERVICE_SUFFIX

MACHINE_ID_PATH = "/etc/machine-id"
OS_RELEASE_PATH = "/etc/os-release"

_SPECIFIER_RE = re.compile(r"%(.)", re.DOTALL)

# Noms d'architecture façon Go vers les noms systemd
_ARCH_ALIASES = {
    "arm64": "aarch64",
    "amd64": "x86_64",
    "386": "x86",
}


def normalize_architecture(arch: str) -> str:
    """Normalise un nom d'architecture (arm64 → aarch64, ...)."""
    return _ARCH_ALIASES.get(arch, arch)


def unescape_name(value: str) -> str:
    """Décode un nom échappé systemd.

    Les ``-`` deviennent des ``/``, puis les séquences littérales
    ``\\x2d`` deviennent des ``-``.

    Args:
        value: Nom échappé (instance ou préfixe).

    Returns:
        Nom décodé.
    """
    return value.replace("-", "/").replace("\\x2d", "-")


class HostFacts:
    """Informations sur la machine, lues à la demande puis mémorisées.

    Attributes:
        machine_id_path: Fichier contenant l'identifiant machine.
        os_release_path: Fichier os-release à lire pour ID=.
    """

    def __init__(
        self,
        machine_id_path: Union[str, Path] = MACHINE_ID_PATH,
        os_release_path: Union[str, Path] = OS_RELEASE_PATH,
    ) -> None:
        self.machine_id_path = Path(machine_id_path)
        self.os_release_path = Path(os_release_path)

    @cached_property
    def architecture(self) -> str:
        return normalize_architecture(platform.machine())

    @cached_property
    def short_hostname(self) -> str:
        return socket.gethostname().split(".", 1)[0]

    @cached_property
    def machine_id(self) -> str:
        try:
            return self.machine_id_path.read_text(encoding="utf-8").strip()
        except OSError:
            return ""

    @cached_property
    def os_id(self) -> str:
        try:
            content = self.os_release_path.read_text(encoding="utf-8")
        except OSError:
            return ""
        for line in content.splitlines():
            key, sep, value = line.strip().partition("=")
            if sep and key == "ID":
                return value.strip().strip('"').strip("'")
        return ""


class SpecifierResolver:
    """Substitue les spécificateurs ``%x`` d'une instance de modèle.

    Attributes:
        unit_name: Nom complet de l'unité instanciée
            (ex: ``app@worker1.service``).
        instance_name: Nom d'instance brut (ex: ``worker1``).
    """

    def __init__(
        self,
        unit_name: str,
        instance_name: str,
        host: Optional[HostFacts] = None,
    ) -> None:
        """Initialise le résolveur.

        Args:
            unit_name: Nom complet de l'unité instanciée.
            instance_name: Nom d'instance, vide hors modèle.
            host: Source des informations machine (défaut: HostFacts()).
        """
        self.unit_name = unit_name
        self.instance_name = instance_name
        self._host = host or HostFacts()
        self._specifiers: Dict[str, Callable[[], str]] = {
            "a": lambda: self._host.architecture,
            "i": lambda: self.instance_name,
            "I": lambda: unescape_name(self.instance_name),
            "l": lambda: self._host.short_hostname,
            "m": lambda: self._host.machine_id,
            "n": lambda: self.unit_name,
            "N": lambda: self.unit_name.removesuffix(SERVICE_SUFFIX),
            "o": lambda: self._host.os_id,
            "p": lambda: self.prefix,
            "P": lambda: unescape_name(self.prefix),
            "%": lambda: "%",
        }

    @property
    def prefix(self) -> str:
        """Partie du nom avant ``@`` (nom entier sans ``@``)."""
        name = self.unit_name.removesuffix(SERVICE_SUFFIX)
        return name.split("@", 1)[0]

    def _substitute(self, match: re.Match) -> str:
        resolver = self._specifiers.get(match.group(1))
        if resolver is None:
            return match.group(0)
        return resolver()

    def resolve(self, value: str) -> str:
        """Substitue tous les spécificateurs reconnus de value.

        Sans nom d'instance, la valeur est retournée telle quelle.
        Les séquences inconnues et un ``%`` final isolé sont conservés.

        Args:
            value: Valeur brute lue dans le fichier unit.

        Returns:
            Valeur substituée.
        """
        if not self.instance_name or "%" not in value:
            return value
        return _SPECIFIER_RE.sub(self._substitute, value)
