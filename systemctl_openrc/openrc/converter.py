"""Conversion d'un ServiceConfig en script OpenRC.

La conversion est une fonction pure : la même configuration produit
toujours le même texte, octet pour octet.

Example:

        from systemctl_openrc.unit import parse_unit_file
        from systemctl_openrc.openrc import convert_to_openrc

        config = parse_unit_file("/etc/systemd/system/nginx.service")
        script = convert_to_openrc(config, "nginx")
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict

from jinja2 import TemplateError

from systemctl_openrc.errors.exceptions import ConversionError
from systemctl_openrc.openrc.template import (
    IGNORE_FAILURE_SUFFIX,
    render_template,
)
from systemctl_openrc.unit.models import ServiceConfig


@dataclass(frozen=True)
class TemplateData:
    """Données aplaties transmises au modèle Jinja2.

    Attributes:
        name: Nom du service OpenRC.
        description: Description du service.
        user: Utilisateur du processus.
        group: Groupe du processus.
        working_directory: Répertoire de travail.
        environment_file: Fichier d'environnement à sourcer.
        environment: Affectations KEY=VALUE à exporter.
        exec_start_pre_commands: Commandes de pré-démarrage, celles
            dont l'échec est toléré suffixées par ``|| true``.
        command: Exécutable principal.
        command_args: Arguments de l'exécutable (chaîne vide si aucun).
        stop_command: Commande d'arrêt explicite (vide si absente).
        capabilities: Capacités au format OpenRC (``^cap_a,^cap_b``).
        command_background: True si OpenRC doit démoniser la commande.
        source_path: Fichier unit d'origine.
        instance_name: Instance du modèle, vide hors modèle.
    """

    name: str
    description: str
    user: str
    group: str
    working_directory: str
    environment_file: str
    environment: tuple[str, ...]
    exec_start_pre_commands: tuple[str, ...]
    command: str
    command_args: str
    stop_command: str
    capabilities: str
    command_background: bool
    source_path: str
    instance_name: str

    def to_context(self) -> Dict[str, Any]:
        return asdict(self)


def split_exec_start(exec_start: str) -> tuple[str, str]:
    """Sépare ExecStart en exécutable et arguments.

    Args:
        exec_start: Ligne de commande complète.

    Returns:
        Tuple (commande, arguments), arguments vide si absents.

    Raises:
        ConversionError: Si la ligne de commande est vide.
    """
    parts = exec_start.split()
    if not parts:
        raise ConversionError("ExecStart est vide")
    return parts[0], " ".join(parts[1:])


def rewrite_pre_commands(commands: tuple[str, ...]) -> tuple[str, ...]:
    """Traduit le préfixe ``-`` d'ExecStartPre en ``|| true``."""
    rewritten = []
    for cmd in commands:
        if cmd.startswith("-"):
            rewritten.append(cmd[1:] + IGNORE_FAILURE_SUFFIX)
        else:
            rewritten.append(cmd)
    return tuple(rewritten)


def format_capabilities(ambient_capabilities: str) -> str:
    """Convertit AmbientCapabilities= au format OpenRC.

    Exemple: ``CAP_NET_RAW CAP_SYS_TIME`` → ``^cap_net_raw,^cap_sys_time``.
    """
    return ",".join(
        "^" + cap.lower() for cap in ambient_capabilities.split()
    )


def collapse_blank_lines(text: str) -> str:
    """Réduit les suites de lignes vides à une seule.

    Les lignes ne contenant que des espaces comptent comme vides. Le
    résultat est débarrassé des blancs de début et de fin et se termine
    par exactement un saut de ligne.
    """
    lines = []
    previous_blank = False
    for line in text.split("\n"):
        blank = not line.strip()
        if not (blank and previous_blank):
            lines.append("" if blank else line)
        previous_blank = blank
    return "\n".join(lines).strip() + "\n"


def build_template_data(
    config: ServiceConfig,
    service_name: str,
    instance_name: str = "",
) -> TemplateData:
    """Projette un ServiceConfig vers les données du modèle.

    Raises:
        ConversionError: Si ExecStart est vide.
    """
    command, command_args = split_exec_start(config.exec_start)
    return TemplateData(
        name=service_name,
        description=config.description,
        user=config.user,
        group=config.group,
        working_directory=config.working_directory,
        environment_file=config.environment_file,
        environment=tuple(config.environment),
        exec_start_pre_commands=rewrite_pre_commands(
            tuple(config.exec_start_pre)
        ),
        command=command,
        command_args=command_args,
        stop_command=config.exec_stop or "",
        capabilities=format_capabilities(config.ambient_capabilities),
        command_background=not config.is_forking,
        source_path=config.source_path,
        instance_name=instance_name,
    )


def convert_to_openrc(
    config: ServiceConfig,
    service_name: str,
    instance_name: str = "",
) -> str:
    """Génère le texte du script OpenRC.

    Args:
        config: Configuration lue dans le fichier unit.
        service_name: Nom du script OpenRC cible.
        instance_name: Instance du modèle, vide hors modèle.

    Returns:
        Script complet terminé par un saut de ligne.

    Raises:
        ConversionError: Si ExecStart est vide ou si le rendu échoue.
    """
    data = build_template_data(config, service_name, instance_name)
    try:
        rendered = render_template(data.to_context())
    except TemplateError as e:
        raise ConversionError(
            f"Service {service_name} : échec du rendu du script : {e}"
        ) from e
    return collapse_blank_lines(rendered)


class OpenRCConverter:
    """Convertisseur injectable, utilisé par le gestionnaire de services."""

    def convert(
        self,
        config: ServiceConfig,
        service_name: str,
        instance_name: str = "",
    ) -> str:
        """Voir convert_to_openrc()."""
        return convert_to_openrc(config, service_name, instance_name)
