"""Orchestration des verbes systemctl au-dessus d'OpenRC.

ServiceManager relie la recherche des fichiers unit, la conversion,
l'installation des scripts et le pilotage d'OpenRC. Il ne produit
aucun affichage : chaque opération retourne des données que la CLI
met en forme.

Example:

        from systemctl_openrc.config import load_settings
        from systemctl_openrc.manager import ServiceManager

        manager = ServiceManager.from_settings(load_settings(), logger)
        result = manager.enable("nginx", now=True)
"""

from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from systemctl_openrc.commands.base import CommandExecutor, CommandResult
from systemctl_openrc.commands.runner import LinuxCommandExecutor
from systemctl_openrc.config.settings import Settings
from systemctl_openrc.errors.exceptions import (
    ConflictError,
    ExternalToolError,
    InstallationError,
    ServiceNotFoundError,
    UnitParseError,
)
from systemctl_openrc.logging.base import Logger
from systemctl_openrc.openrc.base import (
    InitSystem,
    ServiceAction,
    StatusResult,
)
from systemctl_openrc.openrc.converter import OpenRCConverter
from systemctl_openrc.openrc.executor import OpenRCInitSystem
from systemctl_openrc.openrc.installer import OpenRCScriptInstaller
from systemctl_openrc.openrc.scripts import (
    ScriptDirectory,
    find_editor,
    has_modification_marker,
    stamp_modification,
)
from systemctl_openrc.unit.locator import UnitLocator
from systemctl_openrc.unit.models import ServiceState
from systemctl_openrc.unit.names import (
    SERVICE_SUFFIX,
    ServiceName,
    instantiate_unit_name,
)
from systemctl_openrc.unit.parser import UnitFileParser
from systemctl_openrc.unit.specifiers import HostFacts

# Version systemd annoncée par ``show`` sans service
SYSTEMD_COMPAT_VERSION = "230"

SERVICE_UNIT_TYPE = "service"


@dataclass(frozen=True)
class EnableResult:
    """Bilan de l'activation d'un service.

    Attributes:
        name: Nom du service OpenRC.
        converted: True si le script a été (re)généré.
        conflict: True si un script modifié à la main a été conservé.
        source_path: Fichier unit converti, None sans conversion.
        started: True si le service a été démarré (--now).
    """

    name: str
    converted: bool
    conflict: bool = False
    source_path: Optional[Path] = None
    started: bool = False


@dataclass(frozen=True)
class EditResult:
    """Bilan d'une édition : modified est False si rien n'a changé."""

    name: str
    path: Path
    modified: bool
    restamped: bool = False


@dataclass(frozen=True)
class ServiceListing:
    """Ligne de ``list`` : service, activation et provenance."""

    name: str
    enabled: bool
    converted: bool
    unit_path: Optional[Path] = None

    @property
    def status(self) -> str:
        return "enabled" if self.enabled else "disabled"


@dataclass(frozen=True)
class UnitListing:
    """Ligne de ``list-units``."""

    unit: str
    load: str
    active: str
    sub: str
    description: str


@dataclass(frozen=True)
class UnitFileListing:
    """Ligne de ``list-unit-files`` (enabled, disabled ou static)."""

    unit_file: str
    state: str


def state_matches(state: ServiceState, sub_state: str, wanted: str) -> bool:
    """Filtre ``--state`` : accepte un état ou un sous-état."""
    return wanted in (str(state), sub_state)


class ServiceManager:
    """Point d'entrée des opérations de la CLI.

    Attributes:
        logger: Instance de Logger pour le logging.
        init_system: Système d'init piloté.
        installer: Installateur des scripts générés.
        scripts: Répertoire des scripts installés.
        locator: Recherche des fichiers unit.
        parser: Lecteur des fichiers unit.
        converter: Convertisseur vers OpenRC.
        executor: Exécuteur utilisé pour l'éditeur.
    """

    def __init__(
        self,
        logger: Logger,
        init_system: InitSystem,
        installer: OpenRCScriptInstaller,
        scripts: ScriptDirectory,
        locator: UnitLocator,
        executor: CommandExecutor,
        parser: Optional[UnitFileParser] = None,
        converter: Optional[OpenRCConverter] = None,
        host: Optional[HostFacts] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.logger = logger
        self.init_system = init_system
        self.installer = installer
        self.scripts = scripts
        self.locator = locator
        self.executor = executor
        self.host = host or HostFacts()
        self.parser = parser or UnitFileParser(self.host)
        self.converter = converter or OpenRCConverter()
        self._clock = clock or (lambda: datetime.now().astimezone())

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        logger: Logger,
        executor: Optional[CommandExecutor] = None,
    ) -> "ServiceManager":
        """Assemble un gestionnaire à partir des réglages.

        Args:
            settings: Réglages validés.
            logger: Logger partagé par tous les composants.
            executor: Exécuteur de commandes (défaut:
                LinuxCommandExecutor).
        """
        executor = executor or LinuxCommandExecutor(
            logger=logger, default_timeout=settings.openrc.command_timeout
        )
        init_system = OpenRCInitSystem(logger, executor, settings.openrc)
        scripts = ScriptDirectory(settings.paths.script_dir, logger)
        return cls(
            logger=logger,
            init_system=init_system,
            installer=OpenRCScriptInstaller(logger, init_system, scripts),
            scripts=scripts,
            locator=UnitLocator(settings.paths.unit_search_paths),
            executor=executor,
        )

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------

    def enable(
        self, raw_name: str, now: bool = False, force: bool = False
    ) -> EnableResult:
        """Convertit et inscrit un service, puis le démarre si demandé.

        Sans fichier unit, un script existant est simplement inscrit.
        Un script modifié via ``edit`` n'est pas régénéré sans force :
        il est inscrit tel quel.

        Args:
            raw_name: Nom saisi (``nginx``, ``app@worker1.service``...).
            now: Démarrer le service après l'inscription.
            force: Écraser un script modifié à la main.

        Raises:
            ServiceNotFoundError: Ni fichier unit ni script installé.
            UnitParseError: Fichier unit illisible.
            ConversionError: Fichier unit inconvertible.
            InstallationError: Écriture du script impossible.
            ExternalToolError: Échec de rc-update ou rc-service.
        """
        service = ServiceName.parse(raw_name)
        name = service.script_name
        unit_path = self.locator.find(service.unit_file_name)

        if unit_path is not None:
            result = self._convert_and_install(service, unit_path, force)
        elif self.scripts.exists(name):
            self.logger.log_info(
                f"Service {name} : aucun fichier unit, inscription "
                "du script existant."
            )
            self.init_system.add(name)
            result = EnableResult(name=name, converted=False)
        else:
            raise ServiceNotFoundError(
                f"Service {name} : aucun fichier {service.unit_file_name} "
                f"ni script dans {self.scripts.path}"
            )

        if now:
            self.init_system.control(name, ServiceAction.START)
            result = replace(result, started=True)
        return result

    def _convert_and_install(
        self, service: ServiceName, unit_path: Path, force: bool
    ) -> EnableResult:
        name = service.script_name
        try:
            self.installer.check_conflict(name, force)
        except ConflictError as e:
            self.logger.log_warning(f"{e}. Script conservé.")
            self.init_system.add(name)
            return EnableResult(name=name, converted=False, conflict=True)

        unit_name = None
        if service.instance_name:
            unit_name = instantiate_unit_name(
                service.unit_file_name, service.instance_name
            )
        config = self.parser.parse(
            unit_path, service.instance_name, unit_name
        )
        script = self.converter.convert(config, name, service.instance_name)
        self.logger.log_info(f"Service {name} : {unit_path} converti.")
        self.installer.install(name, script, force=force)
        return EnableResult(name=name, converted=True, source_path=unit_path)

    def disable(self, raw_name: str, now: bool = False) -> str:
        """Retire un service du runlevel, après l'avoir arrêté si demandé.

        Returns:
            Nom du service OpenRC.
        """
        name = self._require_script(raw_name)
        if now:
            self.init_system.control(name, ServiceAction.STOP)
        self.init_system.remove(name)
        return name

    # ------------------------------------------------------------------
    # Contrôle et état
    # ------------------------------------------------------------------

    def control(self, raw_name: str, action: ServiceAction) -> CommandResult:
        """start, stop, restart ou reload d'un service installé."""
        name = self._require_script(raw_name)
        return self.init_system.control(name, action)

    def status(self, raw_name: str) -> StatusResult:
        """État d'un service installé, sans erreur sur code non nul."""
        return self.init_system.query_status(self._require_script(raw_name))

    def is_enabled(self, raw_name: str) -> bool:
        return self.init_system.is_enabled(self._require_script(raw_name))

    def _require_script(self, raw_name: str) -> str:
        name = ServiceName.parse(raw_name).script_name
        self.scripts.require(name)
        return name

    # ------------------------------------------------------------------
    # show
    # ------------------------------------------------------------------

    def service_properties(self, raw_name: str) -> Dict[str, str]:
        """Propriétés ``show`` d'un service installé."""
        name = self._require_script(raw_name)
        info = self.scripts.info(name)
        status = self.init_system.query_status(name)
        enabled = self.init_system.is_enabled(name)

        properties = {
            "Id": f"{name}{SERVICE_SUFFIX}",
            "LoadState": "loaded",
            "Description": info.description,
            "ActiveState": str(status.state),
            "SubState": status.sub_state,
            "UnitFileState": "enabled" if enabled else "disabled",
            "Type": "simple" if info.command_background else "forking",
        }
        optional = {
            "ExecStart": info.exec_start,
            "User": info.user,
            "WorkingDirectory": info.directory,
            "PIDFile": info.pidfile,
        }
        properties.update({k: v for k, v in optional.items() if v})
        return properties

    def manager_properties(self) -> Dict[str, str]:
        """Propriétés ``show`` sans service (le gestionnaire lui-même)."""
        return {
            "Version": SYSTEMD_COMPAT_VERSION,
            "Architecture": self.host.architecture,
            "DefaultStandardOutput": "stdout",
            "DefaultStandardError": "inherit",
        }

    # ------------------------------------------------------------------
    # Listes
    # ------------------------------------------------------------------

    def list_services(self, show_all: bool = False) -> List[ServiceListing]:
        """Services systemd et OpenRC connus, triés par nom.

        Sans show_all, les scripts OpenRC sans fichier unit ne sont
        listés que s'ils sont inscrits dans le runlevel.
        """
        enabled = self.init_system.list_enabled()
        unit_files = self.locator.service_files()
        installed = set(self.scripts.names())

        names = set(unit_files)
        names.update(
            n for n in installed if show_all or n in enabled
        )
        return [
            ServiceListing(
                name=n,
                enabled=n in enabled,
                converted=n in installed,
                unit_path=unit_files.get(n),
            )
            for n in sorted(names)
        ]

    def list_units(
        self,
        show_all: bool = False,
        unit_type: Optional[str] = None,
        state: Optional[str] = None,
    ) -> List[UnitListing]:
        """Unités avec leur état, à la manière de ``list-units``.

        Sans show_all, seules les unités inscrites ou actives sont
        retenues. Les unités sans script ne sont pas interrogées et
        apparaissent ``not-found``/``inactive``.
        """
        if unit_type and unit_type != SERVICE_UNIT_TYPE:
            return []

        enabled = self.init_system.list_enabled()
        unit_files = self.locator.service_files()
        installed = set(self.scripts.names())

        rows = []
        for name in sorted(set(unit_files) | installed):
            if name in installed:
                load = "loaded"
                active = self.init_system.query_status(name).state
            else:
                load = "not-found"
                active = ServiceState.INACTIVE
            if not show_all and name not in enabled and \
                    active != ServiceState.ACTIVE:
                continue
            if state and not state_matches(active, active.sub_state, state):
                continue
            rows.append(UnitListing(
                unit=f"{name}{SERVICE_SUFFIX}",
                load=load,
                active=str(active),
                sub=active.sub_state,
                description=self._description(name, unit_files),
            ))
        return rows

    def list_unit_files(
        self,
        unit_type: Optional[str] = None,
        state: Optional[str] = None,
    ) -> List[UnitFileListing]:
        """Fichiers unit et scripts OpenRC avec leur état d'activation.

        Un script sans fichier unit est ``static``.
        """
        if unit_type and unit_type != SERVICE_UNIT_TYPE:
            return []

        enabled = self.init_system.list_enabled()
        unit_files = self.locator.service_files()

        states = {
            name: "enabled" if name in enabled else "disabled"
            for name in unit_files
        }
        for name in self.scripts.names():
            states.setdefault(name, "static")

        return [
            UnitFileListing(unit_file=f"{name}{SERVICE_SUFFIX}", state=s)
            for name, s in sorted(states.items())
            if not state or s == state
        ]

    def _description(self, name: str, unit_files: Dict[str, Path]) -> str:
        """Description du script installé, sinon celle du fichier unit."""
        description = self.scripts.info(name).description
        if description or name not in unit_files:
            return description
        try:
            return self.parser.parse(unit_files[name]).description
        except UnitParseError as e:
            self.logger.log_warning(
                f"Service {name} : description illisible : {e}"
            )
            return ""

    # ------------------------------------------------------------------
    # edit
    # ------------------------------------------------------------------

    def edit(
        self,
        raw_name: str,
        environ: Optional[Dict[str, str]] = None,
    ) -> EditResult:
        """Ouvre le script dans un éditeur et marque la modification.

        Raises:
            ServiceNotFoundError: Script absent.
            ExternalToolError: Aucun éditeur, ou éditeur en échec.
            InstallationError: Marquage du script impossible.
        """
        name = self._require_script(raw_name)
        path = self.scripts.script_path(name)
        editor = find_editor(environ)
        if editor is None:
            raise ExternalToolError(
                "Aucun éditeur trouvé : installer vi, nano ou ed"
            )

        before = path.read_text(encoding="utf-8")
        result = self.executor.run_interactive([editor, str(path)])
        if not result.success:
            raise ExternalToolError(
                f"Service {name} : l'éditeur {editor} a échoué "
                f"(code {result.return_code})",
                result,
            )

        after = path.read_text(encoding="utf-8")
        if after == before:
            return EditResult(name=name, path=path, modified=False)

        restamped = has_modification_marker(after)
        try:
            path.write_text(
                stamp_modification(after, self._clock()), encoding="utf-8"
            )
        except OSError as e:
            raise InstallationError(
                f"Service {name} : marquage de {path} impossible : {e}"
            ) from e
        self.logger.log_info(f"Service {name} : script {path} modifié.")
        return EditResult(
            name=name, path=path, modified=True, restamped=restamped
        )
