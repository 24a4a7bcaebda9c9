"""Interface abstraite du système d'init piloté."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum

from systemctl_openrc.commands.base import CommandResult
from systemctl_openrc.unit.models import ServiceState


class ServiceAction(StrEnum):
    """Actions transmises à rc-service."""

    START = "start"
    STOP = "stop"
    RESTART = "restart"
    RELOAD = "reload"
    STATUS = "status"


@dataclass(frozen=True)
class StatusResult:
    """État d'un service obtenu via ``rc-service <name> status``.

    Attributes:
        state: État déduit du code retour.
        exit_code: Code retour brut de rc-service.
        output: Sortie capturée (stdout puis stderr).
    """

    state: ServiceState
    exit_code: int
    output: str = ""

    @property
    def sub_state(self) -> str:
        return self.state.sub_state


class InitSystem(ABC):
    """Contrat minimal attendu d'un système d'init.

    Les implémentations ne conservent aucun état : chaque appel
    interroge les outils du système.
    """

    @abstractmethod
    def list_enabled(self) -> set[str]:
        """Services inscrits dans le runlevel configuré.

        Raises:
            ExternalToolError: Si la liste ne peut pas être obtenue.
        """
        pass

    @abstractmethod
    def add(self, name: str) -> None:
        """Inscrit un service dans le runlevel configuré.

        Raises:
            ExternalToolError: En cas d'échec de l'outil.
        """
        pass

    @abstractmethod
    def remove(self, name: str) -> None:
        """Retire un service du runlevel configuré.

        Raises:
            ExternalToolError: En cas d'échec de l'outil.
        """
        pass

    @abstractmethod
    def control(self, name: str, action: ServiceAction) -> CommandResult:
        """Démarre, arrête, redémarre ou recharge un service.

        Raises:
            ExternalToolError: Si l'action échoue.
        """
        pass

    @abstractmethod
    def query_status(self, name: str) -> StatusResult:
        """Interroge l'état d'un service sans jamais lever d'erreur."""
        pass

    @abstractmethod
    def is_enabled(self, name: str) -> bool:
        """True si le service est inscrit dans le runlevel configuré."""
        pass
