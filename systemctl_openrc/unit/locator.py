"""Recherche des fichiers unit dans les répertoires systemd."""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from systemctl_openrc.unit.names import SERVICE_SUFFIX


class UnitLocator:
    """Localise les fichiers .service par ordre de priorité.

    Le premier répertoire contenant un fichier donné gagne, comme
    pour systemd (/etc masque /lib).

    Attributes:
        search_paths: Répertoires parcourus, du plus prioritaire au
            moins prioritaire.
    """

    def __init__(self, search_paths: Iterable[Union[str, Path]]) -> None:
        self.search_paths: List[Path] = [Path(p) for p in search_paths]

    def find(self, unit_file_name: str) -> Optional[Path]:
        """Retourne le chemin du fichier unit, ou None s'il est absent.

        Args:
            unit_file_name: Nom de fichier (ex: ``nginx.service``).
        """
        for directory in self.search_paths:
            candidate = directory / unit_file_name
            if candidate.is_file():
                return candidate
        return None

    def service_files(self) -> Dict[str, Path]:
        """Inventorie les fichiers .service visibles.

        Les modèles (``app@.service``) ne sont pas des services
        utilisables tels quels et sont ignorés.

        Returns:
            Dictionnaire nom de service (sans suffixe) → chemin.
        """
        found: Dict[str, Path] = {}
        for directory in self.search_paths:
            if not directory.is_dir():
                continue
            for path in sorted(directory.glob(f"*{SERVICE_SUFFIX}")):
                name = path.name.removesuffix(SERVICE_SUFFIX)
                if name.endswith("@") or not path.is_file():
                    continue
                found.setdefault(name, path)
        return found
