"""Fichiers unit systemd : noms, spécificateurs, lecture et recherche.

Classes disponibles :
    ServiceConfig : Configuration immuable d'un fichier .service.
    ServiceName : Argument de la CLI décomposé (script, modèle, instance).
    SpecifierResolver : Substitution des spécificateurs %x.
    UnitFileParser : Lecture d'un fichier .service.
    UnitLocator : Recherche dans les répertoires systemd.
"""

from systemctl_openrc.unit.models import (
    Section,
    ServiceConfig,
    ServiceState,
    ServiceType,
)
from systemctl_openrc.unit.names import (
    SERVICE_SUFFIX,
    ServiceName,
    instantiate_unit_name,
    is_valid_service_name,
    normalize_service_name,
    validate_service_name,
)
from systemctl_openrc.unit.specifiers import (
    HostFacts,
    SpecifierResolver,
    normalize_architecture,
    unescape_name,
)
from systemctl_openrc.unit.parser import UnitFileParser, parse_unit_file
from systemctl_openrc.unit.locator import UnitLocator

__all__ = [
    # Modèle
    "Section",
    "ServiceConfig",
    "ServiceState",
    "ServiceType",
    # Noms
    "SERVICE_SUFFIX",
    "ServiceName",
    "instantiate_unit_name",
    "is_valid_service_name",
    "normalize_service_name",
    "validate_service_name",
    # Spécificateurs
    "HostFacts",
    "SpecifierResolver",
    "normalize_architecture",
    "unescape_name",
    # Lecture
    "UnitFileParser",
    "parse_unit_file",
    "UnitLocator",
]
