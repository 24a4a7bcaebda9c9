"""Structures de données des fichiers unit systemd."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional


class Section(StrEnum):
    """Sections reconnues d'un fichier unit .service."""

    UNIT = "Unit"
    SERVICE = "Service"
    INSTALL = "Install"


class ServiceType(StrEnum):
    """Valeurs usuelles de Type= dans la section [Service]."""

    SIMPLE = "simple"
    FORKING = "forking"
    NOTIFY = "notify"


class ServiceState(StrEnum):
    """État d'un service déduit du code retour de rc-service."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @property
    def sub_state(self) -> str:
        """Sous-état systemd correspondant (running, dead, ...)."""
        return {
            ServiceState.ACTIVE: "running",
            ServiceState.INACTIVE: "dead",
            ServiceState.FAILED: "failed",
        }.get(self, "unknown")


@dataclass(frozen=True)
class ServiceConfig:
    """Contenu utile d'un fichier unit .service.

    Les champs absents du fichier restent vides. Seul exec_start est
    obligatoire, et il n'est vérifié qu'à la conversion.

    Attributes:
        description: Description=, section [Unit].
        user: Utilisateur du processus (User=).
        group: Groupe du processus (Group=).
        working_directory: Répertoire de travail.
        environment_file: Fichier d'environnement, sans le préfixe '-'.
        environment: Affectations KEY=VALUE dans l'ordre du fichier.
        exec_start_pre: Commandes de pré-démarrage, préfixe '-' conservé.
        exec_start: Commande principale.
        exec_stop: Commande d'arrêt explicite (None si absente).
        restart: Politique Restart= (informative).
        restart_sec: Délai RestartSec= (informatif).
        wanted_by: Cible WantedBy= (informative).
        ambient_capabilities: Capacités séparées par des espaces.
        type: Type= du service (vide si absent).
        source_path: Fichier d'origine.
    """

    description: str = ""
    user: str = ""
    group: str = ""
    working_directory: str = ""
    environment_file: str = ""
    environment: tuple[str, ...] = ()
    exec_start_pre: tuple[str, ...] = ()
    exec_start: str = ""
    exec_stop: Optional[str] = None
    restart: str = ""
    restart_sec: str = ""
    wanted_by: str = ""
    ambient_capabilities: str = ""
    type: str = ""
    source_path: str = ""

    @property
    def is_forking(self) -> bool:
        """True si le service se met lui-même en arrière-plan."""
        return self.type == ServiceType.FORKING
