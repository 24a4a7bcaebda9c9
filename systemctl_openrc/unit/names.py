"""Noms de services : normalisation, validation et instances.

Un argument de la CLI peut prendre les formes ``nginx``,
``nginx.service``, ``app@worker1`` ou ``app@worker1.service``.
Le nom du script OpenRC est toujours le nom sans suffixe, et une
instance est cherchée dans le fichier unit du modèle
(``app@.service``).
"""

import re
from dataclasses import dataclass

from systemctl_openrc.errors.exceptions import InvalidServiceNameError

SERVICE_SUFFIX = ".service"

# Lettres, chiffres, '.', ':', '_', '-', '@' et '\' (échappements \x2d)
_SERVICE_NAME_RE = re.compile(r'^[a-zA-Z0-9][a-zA-Z0-9:._@\\-]*$')


def normalize_service_name(name: str) -> str:
    """Retire le suffixe ``.service`` et les espaces superflus.

    Args:
        name: Nom tel que saisi.

    Returns:
        Nom du service OpenRC correspondant.
    """
    return name.strip().removesuffix(SERVICE_SUFFIX).strip()


def validate_service_name(name: str) -> str:
    """Valide un nom de service avant de l'utiliser comme chemin.

    Le nom sert de nom de fichier dans /etc/init.d : les séparateurs
    de chemin et les séquences de traversée sont refusés.

    Args:
        name: Nom de service normalisé.

    Returns:
        Le nom validé.

    Raises:
        InvalidServiceNameError: Si le nom est invalide.
    """
    if not name:
        raise InvalidServiceNameError(
            "Le nom de service ne peut pas être vide"
        )
    if '..' in name or '/' in name:
        raise InvalidServiceNameError(
            f"Nom de service invalide (traversée interdite) : {name!r}"
        )
    if not _SERVICE_NAME_RE.match(name):
        raise InvalidServiceNameError(
            f"Nom de service invalide : {name!r}"
        )
    return name


def is_valid_service_name(name: str) -> bool:
    """True si le nom est accepté par validate_service_name."""
    try:
        validate_service_name(name)
    except InvalidServiceNameError:
        return False
    return True


def instantiate_unit_name(unit_file_name: str, instance_name: str) -> str:
    """Construit le nom d'unité d'une instance de modèle.

    Exemple: ``app@.service`` + ``worker1`` → ``app@worker1.service``.
    Les fichiers qui ne sont pas des modèles sont retournés tels quels.

    Args:
        unit_file_name: Nom de base du fichier unit.
        instance_name: Nom d'instance (peut être vide).

    Returns:
        Nom complet de l'unité.
    """
    if instance_name and "@." in unit_file_name:
        return unit_file_name.replace("@.", f"@{instance_name}.", 1)
    return unit_file_name


@dataclass(frozen=True)
class ServiceName:
    """Nom de service décomposé.

    Attributes:
        script_name: Nom du script OpenRC (ex: ``app@worker1``).
        unit_file_name: Fichier unit à chercher (ex: ``app@.service``).
        instance_name: Instance du modèle, vide hors modèle.
    """

    script_name: str
    unit_file_name: str
    instance_name: str = ""

    @property
    def unit_name(self) -> str:
        """Nom systemd complet (ex: ``app@worker1.service``)."""
        return f"{self.script_name}{SERVICE_SUFFIX}"

    @classmethod
    def parse(cls, raw: str) -> "ServiceName":
        """Analyse un argument de la CLI.

        Args:
            raw: Nom saisi par l'utilisateur.

        Returns:
            Nom décomposé et validé.

        Raises:
            InvalidServiceNameError: Si le nom est invalide.
        """
        script_name = validate_service_name(normalize_service_name(raw))
        if "@" in script_name:
            prefix, instance = script_name.split("@", 1)
            return cls(
                script_name=script_name,
                unit_file_name=f"{prefix}@{SERVICE_SUFFIX}",
                instance_name=instance,
            )
        return cls(
            script_name=script_name,
            unit_file_name=f"{script_name}{SERVICE_SUFFIX}",
        )
