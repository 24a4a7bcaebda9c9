"""Pilotage d'OpenRC via rc-update et rc-service."""

from typing import Optional

from systemctl_openrc.commands.base import CommandExecutor, CommandResult
from systemctl_openrc.commands.builder import CommandBuilder
from systemctl_openrc.config.settings import OpenRCSettings
from systemctl_openrc.errors.exceptions import ExternalToolError
from systemctl_openrc.logging.base import Logger
from systemctl_openrc.openrc.base import (
    InitSystem,
    ServiceAction,
    StatusResult,
)
from systemctl_openrc.unit.models import ServiceState
from systemctl_openrc.unit.names import validate_service_name

# Codes retour de rc-service status
_STATUS_BY_EXIT_CODE = {
    0: ServiceState.ACTIVE,
    1: ServiceState.FAILED,
    2: ServiceState.FAILED,
    3: ServiceState.INACTIVE,
}


def state_from_exit_code(code: int) -> ServiceState:
    """Traduit un code retour de ``rc-service status`` en état."""
    return _STATUS_BY_EXIT_CODE.get(code, ServiceState.UNKNOWN)


def parse_runlevel_listing(output: str, runlevel: str) -> set[str]:
    """Extrait les services d'une sortie ``rc-update show``.

    Chaque ligne utile a la forme ``nginx | default``, les runlevels
    étant séparés par des espaces.

    Args:
        output: Sortie de rc-update.
        runlevel: Runlevel recherché.

    Returns:
        Noms des services inscrits dans ce runlevel.
    """
    services = set()
    for line in output.splitlines():
        name, sep, runlevels = line.partition("|")
        if sep and runlevel in runlevels.split():
            services.add(name.strip())
    return services


class OpenRCInitSystem(InitSystem):
    """Implémentation d'InitSystem pour OpenRC.

    Attributes:
        logger: Instance de Logger pour le logging.
        executor: Exécuteur des commandes rc-update et rc-service.
        settings: Noms des outils, runlevel et timeout.
    """

    def __init__(
        self,
        logger: Logger,
        executor: CommandExecutor,
        settings: Optional[OpenRCSettings] = None,
    ) -> None:
        """Initialise le pilote OpenRC.

        Args:
            logger: Instance de Logger pour le logging.
            executor: Exécuteur de commandes.
            settings: Réglages OpenRC (défaut: OpenRCSettings()).
        """
        self.logger = logger
        self.executor = executor
        self.settings = settings or OpenRCSettings()

    @property
    def runlevel(self) -> str:
        return self.settings.runlevel

    def _rc_update(self, *args: str) -> CommandResult:
        cmd = CommandBuilder(self.settings.rc_update).with_args(
            list(args)
        ).build()
        return self.executor.run(cmd, timeout=self.settings.command_timeout)

    def _rc_service(self, name: str, action: ServiceAction) -> list[str]:
        return CommandBuilder(self.settings.rc_service).with_args(
            [name, str(action)]
        ).build()

    def list_enabled(self) -> set[str]:
        result = self._rc_update("show", self.runlevel)
        if not result.success:
            raise ExternalToolError(
                f"Impossible de lister le runlevel {self.runlevel} : "
                f"{result.output.strip()}",
                result,
            )
        return parse_runlevel_listing(result.stdout, self.runlevel)

    def add(self, name: str) -> None:
        validate_service_name(name)
        result = self._rc_update("add", name, self.runlevel)
        if not result.success:
            raise ExternalToolError(
                f"Service {name} : échec de l'inscription dans le "
                f"runlevel {self.runlevel} : {result.output.strip()}",
                result,
            )
        self.logger.log_info(
            f"Service {name} inscrit dans le runlevel {self.runlevel}."
        )

    def remove(self, name: str) -> None:
        validate_service_name(name)
        result = self._rc_update("del", name, self.runlevel)
        if not result.success:
            raise ExternalToolError(
                f"Service {name} : échec du retrait du runlevel "
                f"{self.runlevel} : {result.output.strip()}",
                result,
            )
        self.logger.log_info(
            f"Service {name} retiré du runlevel {self.runlevel}."
        )

    def control(self, name: str, action: ServiceAction) -> CommandResult:
        """Exécute l'action, la sortie de rc-service allant au terminal."""
        validate_service_name(name)
        result = self.executor.run_interactive(
            self._rc_service(name, action),
            timeout=self.settings.command_timeout,
        )
        if not result.success:
            raise ExternalToolError(
                f"Service {name} : échec de l'action {action} "
                f"(code {result.return_code})",
                result,
            )
        self.logger.log_info(f"Service {name} : action {action} réussie.")
        return result

    def query_status(self, name: str) -> StatusResult:
        validate_service_name(name)
        result = self.executor.run(
            self._rc_service(name, ServiceAction.STATUS),
            timeout=self.settings.command_timeout,
        )
        return StatusResult(
            state=state_from_exit_code(result.return_code),
            exit_code=result.return_code,
            output=result.output,
        )

    def is_enabled(self, name: str) -> bool:
        return name in self.list_enabled()
