"""Exécuteur de commandes Linux via subprocess.

Ce module fournit LinuxCommandExecutor, l'implémentation concrète
de CommandExecutor utilisée pour piloter rc-update, rc-service et
l'éditeur de la commande ``edit``.

Les commandes exécutées par root sont distinguées des commandes
utilisateur dans les logs (préfixe [ROOT] ou [user]).

Example :

        from systemctl_openrc.commands import LinuxCommandExecutor

        executor = LinuxCommandExecutor(logger=logger)
        result = executor.run(["rc-service", "nginx", "status"])
        print(result.return_code)
"""

import os
import subprocess  # nosec B404
import sys
import time
from typing import Dict, List, Optional

from systemctl_openrc.commands.base import (
    CommandExecutor,
    CommandResult,
)
from systemctl_openrc.commands.formatter import (
    CommandFormatter,
    PlainCommandFormatter,
)
from systemctl_openrc.logging.base import Logger


class LinuxCommandExecutor(CommandExecutor):
    """Exécuteur de commandes Linux via subprocess.

    Un échec de lancement (binaire absent, timeout) ne lève pas
    d'exception : il est converti en CommandResult avec return_code
    -1, à charge de l'appelant de le signaler.

    Attributes:
        _logger: Logger optionnel pour les logs fichier.
        _default_env: Variables d'environnement par défaut.
        _default_timeout: Timeout par défaut en secondes (None = aucun).
        _is_root: True si le processus courant est root (uid 0).
        _plain: Formateur texte brut pour les logs fichier.
        _console_formatter: Formateur optionnel pour stderr.
    """

    def __init__(
        self,
        logger: Optional[Logger] = None,
        default_env: Optional[Dict[str, str]] = None,
        default_timeout: Optional[int] = None,
        console_formatter: Optional[CommandFormatter] = None,
    ) -> None:
        """Initialise l'exécuteur de commandes.

        Args:
            logger: Logger optionnel pour les sorties fichier.
            default_env: Variables d'environnement par défaut
                (fusionnées avec os.environ).
            default_timeout: Timeout par défaut en secondes.
            console_formatter: Formateur optionnel pour afficher les
                commandes exécutées sur stderr (ex: AnsiCommandFormatter).
        """
        self._logger = logger
        self._default_env = default_env
        self._default_timeout = default_timeout
        self._is_root: bool = os.getuid() == 0
        self._plain = PlainCommandFormatter()
        self._console_formatter = console_formatter

    def _build_env(
        self,
        env: Optional[Dict[str, str]] = None,
    ) -> Optional[Dict[str, str]]:
        """Fusionne os.environ, default_env et env spécifique.

        Retourne None si aucun environnement personnalisé
        (subprocess utilisera os.environ par défaut).
        """
        if self._default_env is None and env is None:
            return None
        merged = os.environ.copy()
        if self._default_env:
            merged.update(self._default_env)
        if env:
            merged.update(env)
        return merged

    def _log_start(self, command: List[str]) -> None:
        if self._logger:
            self._logger.log_info(
                self._plain.format_start(command, self._is_root)
            )
        if self._console_formatter:
            print(
                self._console_formatter.format_start(
                    command, self._is_root
                ),
                file=sys.stderr,
            )

    def _log_failure(self, command: List[str], return_code: int) -> None:
        if self._logger:
            self._logger.log_error(
                self._plain.format_failure(
                    command, return_code, self._is_root
                )
            )
        if self._console_formatter:
            print(
                self._console_formatter.format_failure(
                    command, return_code, self._is_root
                ),
                file=sys.stderr,
            )

    def _failed(
        self,
        command: List[str],
        start: float,
        stdout: str = "",
        stderr: str = "",
    ) -> CommandResult:
        """Construit le résultat d'une commande non aboutie."""
        return CommandResult(
            command=command,
            return_code=-1,
            stdout=stdout,
            stderr=stderr,
            success=False,
            duration=time.monotonic() - start,
            executed_as_root=self._is_root,
        )

    def run(
        self,
        command: List[str],
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> CommandResult:
        """Exécute une commande et capture stdout et stderr.

        Args:
            command: Commande sous forme de liste.
            env: Variables d'environnement supplémentaires.
            cwd: Répertoire de travail.
            timeout: Timeout en secondes (prioritaire sur le défaut).

        Returns:
            CommandResult avec les sorties capturées.
        """
        effective_timeout = (
            timeout if timeout is not None else self._default_timeout
        )
        self._log_start(command)

        start = time.monotonic()
        try:
            proc = subprocess.run(  # nosec B603
                command,
                capture_output=True,
                text=True,
                env=self._build_env(env),
                cwd=cwd,
                timeout=effective_timeout,
            )
        except subprocess.TimeoutExpired as e:
            if self._logger:
                self._logger.log_error(
                    f"Timeout après {effective_timeout}s : "
                    f"{' '.join(command)}"
                )
            return self._failed(
                command, start,
                stdout=_as_text(e.stdout), stderr=_as_text(e.stderr),
            )
        except OSError as e:
            if self._logger:
                self._logger.log_error(f"Erreur système : {e}")
            return self._failed(command, start, stderr=str(e))

        if proc.returncode != 0:
            self._log_failure(command, proc.returncode)
        return CommandResult(
            command=command,
            return_code=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
            success=proc.returncode == 0,
            duration=time.monotonic() - start,
            executed_as_root=self._is_root,
        )

    def run_interactive(
        self,
        command: List[str],
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> CommandResult:
        """Exécute une commande reliée au terminal courant.

        Args:
            command: Commande sous forme de liste.
            env: Variables d'environnement supplémentaires.
            cwd: Répertoire de travail.
            timeout: Timeout explicite en secondes, sans défaut.

        Returns:
            CommandResult sans sortie capturée.
        """
        self._log_start(command)

        start = time.monotonic()
        try:
            proc = subprocess.run(  # nosec B603
                command, env=self._build_env(env), cwd=cwd, timeout=timeout
            )
        except subprocess.TimeoutExpired:
            if self._logger:
                self._logger.log_error(
                    f"Timeout après {timeout}s : {' '.join(command)}"
                )
            return self._failed(command, start)
        except OSError as e:
            if self._logger:
                self._logger.log_error(f"Erreur système : {e}")
            return self._failed(command, start, stderr=str(e))

        if proc.returncode != 0:
            self._log_failure(command, proc.returncode)
        return CommandResult(
            command=command,
            return_code=proc.returncode,
            stdout="",
            stderr="",
            success=proc.returncode == 0,
            duration=time.monotonic() - start,
            executed_as_root=self._is_root,
        )


def _as_text(data: bytes | str | None) -> str:
    """Normalise une sortie partielle de TimeoutExpired."""
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
