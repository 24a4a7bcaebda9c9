"""Génération, installation et pilotage des services OpenRC.

Classes disponibles :
    InitSystem : Interface abstraite du système d'init.
    OpenRCInitSystem : Pilote rc-update et rc-service.
    OpenRCConverter : Conversion ServiceConfig → script OpenRC.
    OpenRCScriptInstaller : Écriture atomique et inscription.
    ScriptDirectory : Scripts installés dans /etc/init.d.
"""

from systemctl_openrc.openrc.base import (
    InitSystem,
    ServiceAction,
    StatusResult,
)
from systemctl_openrc.openrc.executor import (
    OpenRCInitSystem,
    parse_runlevel_listing,
    state_from_exit_code,
)
from systemctl_openrc.openrc.template import (
    IGNORE_FAILURE_SUFFIX,
    OPENRC_TEMPLATE,
)
from systemctl_openrc.openrc.converter import (
    OpenRCConverter,
    TemplateData,
    build_template_data,
    collapse_blank_lines,
    convert_to_openrc,
    format_capabilities,
    split_exec_start,
)
from systemctl_openrc.openrc.scripts import (
    MODIFICATION_MARKER,
    ScriptDirectory,
    ScriptInfo,
    find_editor,
    has_modification_marker,
    parse_openrc_script,
    stamp_modification,
)
from systemctl_openrc.openrc.installer import (
    OpenRCScriptInstaller,
    ScriptInstaller,
)

__all__ = [
    # Système d'init
    "InitSystem",
    "ServiceAction",
    "StatusResult",
    "OpenRCInitSystem",
    "parse_runlevel_listing",
    "state_from_exit_code",
    # Conversion
    "IGNORE_FAILURE_SUFFIX",
    "OPENRC_TEMPLATE",
    "OpenRCConverter",
    "TemplateData",
    "build_template_data",
    "collapse_blank_lines",
    "convert_to_openrc",
    "format_capabilities",
    "split_exec_start",
    # Scripts installés
    "MODIFICATION_MARKER",
    "ScriptDirectory",
    "ScriptInfo",
    "find_editor",
    "has_modification_marker",
    "parse_openrc_script",
    "stamp_modification",
    # Installation
    "OpenRCScriptInstaller",
    "ScriptInstaller",
]
