"""Lecture des fichiers unit systemd (.service).

Le parseur ne retient que les clés utiles à la conversion OpenRC.
Chaque clé est associée à un champ de ServiceConfig par la table
_FIELDS, indexée par (section, clé).
"""

from pathlib import Path
from typing import Any, Callable, Dict, NamedTuple, Optional, Union

from systemctl_openrc.errors.exceptions import UnitParseError
from systemctl_openrc.unit.models import Section, ServiceConfig
from systemctl_openrc.unit.specifiers import HostFacts, SpecifierResolver


def strip_ignore_marker(value: str) -> str:
    """Retire un préfixe ``-`` (fichier optionnel)."""
    return value[1:] if value.startswith("-") else value


def unquote(value: str) -> str:
    """Retire une paire de guillemets doubles englobant toute la valeur."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


class _Field(NamedTuple):
    name: str
    transform: Callable[[str], str] = str
    accumulate: bool = False


_FIELDS: Dict[tuple[Section, str], _Field] = {
    (Section.UNIT, "Description"): _Field("description"),
    (Section.SERVICE, "User"): _Field("user"),
    (Section.SERVICE, "Group"): _Field("group"),
    (Section.SERVICE, "WorkingDirectory"): _Field("working_directory"),
    (Section.SERVICE, "EnvironmentFile"): _Field(
        "environment_file", strip_ignore_marker
    ),
    (Section.SERVICE, "Environment"): _Field(
        "environment", unquote, accumulate=True
    ),
    (Section.SERVICE, "ExecStartPre"): _Field(
        "exec_start_pre", accumulate=True
    ),
    (Section.SERVICE, "ExecStart"): _Field("exec_start"),
    (Section.SERVICE, "ExecStop"): _Field("exec_stop"),
    (Section.SERVICE, "Restart"): _Field("restart"),
    (Section.SERVICE, "RestartSec"): _Field("restart_sec"),
    (Section.SERVICE, "AmbientCapabilities"): _Field("ambient_capabilities"),
    (Section.SERVICE, "Type"): _Field("type"),
    (Section.INSTALL, "WantedBy"): _Field("wanted_by"),
}


class UnitFileParser:
    """Analyse un fichier .service en ServiceConfig.

    Pour une instance de modèle, chaque valeur passe par le
    SpecifierResolver avant d'être stockée.
    """

    def __init__(self, host: Optional[HostFacts] = None) -> None:
        """Initialise le parseur.

        Args:
            host: Informations machine pour %a, %l, %m et %o
                (défaut: lues sur le système à la demande).
        """
        self._host = host

    def parse(
        self,
        path: Union[str, Path],
        instance_name: str = "",
        unit_name: Optional[str] = None,
    ) -> ServiceConfig:
        """Lit un fichier unit.

        Args:
            path: Chemin du fichier .service.
            instance_name: Nom d'instance pour un modèle (``app@.service``).
            unit_name: Nom complet de l'unité instanciée, utilisé par %n,
                %N et %p (défaut: nom du fichier).

        Returns:
            Configuration du service.

        Raises:
            UnitParseError: Si le fichier ne peut pas être ouvert ou lu.
        """
        path = Path(path)
        resolver = SpecifierResolver(
            unit_name or path.name, instance_name, self._host
        )
        values: Dict[str, Any] = {}
        section: Optional[Section] = None

        try:
            with open(path, "r", encoding="utf-8") as f:
                for raw_line in f:
                    line = raw_line.strip()
                    if not line or line.startswith(("#", ";")):
                        continue
                    if line.startswith("[") and line.endswith("]"):
                        section = _section_from_header(line)
                        continue
                    key, sep, value = line.partition("=")
                    if not sep or section is None:
                        continue
                    field = _FIELDS.get((section, key.strip()))
                    if field is None:
                        continue
                    value = resolver.resolve(field.transform(value.strip()))
                    if field.accumulate:
                        values.setdefault(field.name, []).append(value)
                    else:
                        values[field.name] = value
        except (OSError, UnicodeDecodeError) as e:
            raise UnitParseError(
                f"Impossible de lire le fichier unit {path} : {e}"
            ) from e

        for name, value in values.items():
            if isinstance(value, list):
                values[name] = tuple(value)
        return ServiceConfig(source_path=str(path), **values)


def _section_from_header(line: str) -> Optional[Section]:
    """Section correspondant à un en-tête, None si non gérée."""
    try:
        return Section(line[1:-1].strip())
    except ValueError:
        return None


def parse_unit_file(
    path: Union[str, Path],
    instance_name: str = "",
    unit_name: Optional[str] = None,
) -> ServiceConfig:
    """Raccourci pour UnitFileParser().parse()."""
    return UnitFileParser().parse(path, instance_name, unit_name)
