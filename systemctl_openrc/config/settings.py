"""Réglages de systemctl_openrc.

Les réglages sont optionnels : sans fichier, les valeurs par défaut
correspondent à une installation Alpine/OpenRC standard.

Fichier attendu (TOML):

    [paths]
    unit_search_paths = ["/etc/systemd/system", "/lib/systemd/system"]
    script_dir = "/etc/init.d"

    [openrc]
    runlevel = "default"
    command_timeout = 30

    [logging]
    file = "/var/log/systemctl-openrc.log"
    level = "INFO"
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from systemctl_openrc.config.loader import ConfigLoader, FileConfigLoader
from systemctl_openrc.errors.exceptions import FileConfigurationError

CONFIG_ENV_VAR = "SYSTEMCTL_OPENRC_CONFIG"

DEFAULT_SEARCH_PATHS: List[str] = [
    "/etc/systemctl-openrc.toml",
    "/etc/systemctl-openrc.json",
]


class PathsSettings(BaseModel):
    """Emplacements des fichiers unit et des scripts OpenRC."""

    model_config = {"extra": "forbid"}

    # Ordre de priorité : le premier répertoire contenant l'unité gagne
    unit_search_paths: List[str] = Field(default_factory=lambda: [
        "/etc/systemd/system",
        "/run/systemd/system",
        "/lib/systemd/system",
        "/usr/lib/systemd/system",
    ])
    script_dir: str = "/etc/init.d"

    @field_validator("script_dir")
    @classmethod
    def must_be_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("Le répertoire des scripts doit être absolu")
        return v


class OpenRCSettings(BaseModel):
    """Outils OpenRC pilotés et runlevel cible."""

    model_config = {"extra": "forbid"}

    runlevel: str = "default"
    rc_update: str = "rc-update"
    rc_service: str = "rc-service"
    command_timeout: Optional[int] = Field(default=None, gt=0)


class LoggingSettings(BaseModel):
    """Fichier et niveau de log. Un fichier vide désactive le log."""

    model_config = {"extra": "forbid"}

    file: str = "~/.local/state/systemctl-openrc/systemctl.log"
    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"


class Settings(BaseModel):
    """Réglages complets de l'application."""

    model_config = {"extra": "forbid"}

    paths: PathsSettings = Field(default_factory=PathsSettings)
    openrc: OpenRCSettings = Field(default_factory=OpenRCSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def logging_config(self) -> Dict[str, Any]:
        """Configuration au format attendu par FileLogger."""
        return {"logging": self.logging.model_dump()}


def find_settings_file(
    search_paths: Optional[List[Union[str, Path]]] = None
) -> Optional[Path]:
    """Cherche le fichier de réglages.

    La variable d'environnement SYSTEMCTL_OPENRC_CONFIG est prioritaire
    sur les emplacements de recherche.

    Args:
        search_paths: Emplacements candidats (défaut:
            DEFAULT_SEARCH_PATHS).

    Returns:
        Chemin du premier fichier existant ou None.
    """
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser()

    for path in search_paths or DEFAULT_SEARCH_PATHS:
        path = Path(path).expanduser()
        if path.exists():
            return path
    return None


def load_settings(
    config_path: Optional[Union[str, Path]] = None,
    loader: Optional[ConfigLoader] = None,
    search_paths: Optional[List[Union[str, Path]]] = None
) -> Settings:
    """Charge et valide les réglages.

    Args:
        config_path: Fichier explicite (option --config). Si None,
            recherche via find_settings_file().
        loader: Chargeur injectable (défaut: FileConfigLoader).
        search_paths: Emplacements de recherche.

    Returns:
        Réglages validés, ou les valeurs par défaut sans fichier.

    Raises:
        FileConfigurationError: Si le fichier est absent (chemin
            explicite), illisible ou invalide.
    """
    path = Path(config_path).expanduser() if config_path else \
        find_settings_file(search_paths)
    if path is None:
        return Settings()

    loader = loader or FileConfigLoader()
    try:
        return loader.load(path, schema=Settings)
    except ValidationError as e:
        raise FileConfigurationError(
            f"Réglages invalides dans {path}: {e}"
        ) from e
    except (OSError, ValueError) as e:
        raise FileConfigurationError(
            f"Impossible de charger {path}: {e}"
        ) from e
