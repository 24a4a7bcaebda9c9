"""Tests pour le module commands."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from systemctl_openrc.commands import (
    AnsiCommandFormatter,
    CommandBuilder,
    CommandFormatter,
    CommandResult,
    LinuxCommandExecutor,
    PlainCommandFormatter,
)
from systemctl_openrc.logging.base import Logger


# --- Tests CommandResult ---


class TestCommandResult:
    """Tests pour la dataclass CommandResult."""

    def _result(self, **overrides) -> CommandResult:
        fields = dict(
            command=["rc-service", "nginx", "status"],
            return_code=0,
            stdout="",
            stderr="",
            success=True,
            duration=0.0,
        )
        fields.update(overrides)
        return CommandResult(**fields)

    def test_frozen(self):
        """Test que la dataclass est immuable."""
        result = self._result()
        with pytest.raises(AttributeError):
            result.return_code = 1

    def test_executed_as_root_defaut_faux(self):
        assert self._result().executed_as_root is False

    def test_output_concatene_stdout_et_stderr(self):
        result = self._result(stdout=" * status: started\n",
                              stderr="WARNING\n")
        assert result.output == " * status: started\nWARNING\n"

    def test_output_vide(self):
        assert self._result().output == ""


# --- Tests CommandBuilder ---


class TestCommandBuilder:
    """Tests pour le constructeur fluent CommandBuilder."""

    def test_build_programme_seul(self):
        assert CommandBuilder("rc-status").build() == ["rc-status"]

    def test_with_args(self):
        cmd = (
            CommandBuilder("rc-update")
            .with_args(["add", "nginx", "default"])
            .build()
        )
        assert cmd == ["rc-update", "add", "nginx", "default"]

    def test_with_args_cumulatif(self):
        cmd = (
            CommandBuilder("rc-service")
            .with_args(["nginx"])
            .with_args(["start"])
            .build()
        )
        assert cmd == ["rc-service", "nginx", "start"]

    def test_programme_vide_leve_erreur(self):
        with pytest.raises(ValueError):
            CommandBuilder("")

    def test_programme_espaces_leve_erreur(self):
        with pytest.raises(ValueError):
            CommandBuilder("   ")


# --- Tests LinuxCommandExecutor.run ---


class TestLinuxCommandExecutorRun:
    """Tests pour la méthode run() de LinuxCommandExecutor."""

    def setup_method(self):
        """Initialise les mocks pour chaque test."""
        self.mock_logger = MagicMock(spec=Logger)
        self.executor = LinuxCommandExecutor(logger=self.mock_logger)

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_run_commande_reussie(self, mock_run):
        """Test d'une commande réussie."""
        mock_run.return_value = MagicMock(
            returncode=0, stdout=" * status: started", stderr="",
        )
        result = self.executor.run(["rc-service", "nginx", "status"])

        assert result.success is True
        assert result.return_code == 0
        assert result.stdout == " * status: started"
        assert result.command == ["rc-service", "nginx", "status"]
        assert result.duration >= 0
        self.mock_logger.log_error.assert_not_called()

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_run_commande_echouee(self, mock_run):
        """Un code non nul est loggé en erreur."""
        mock_run.return_value = MagicMock(
            returncode=3, stdout="", stderr=" * status: stopped",
        )
        result = self.executor.run(["rc-service", "nginx", "status"])

        assert result.success is False
        assert result.return_code == 3
        log_msg = self.mock_logger.log_error.call_args[0][0]
        assert "Code retour 3" in log_msg

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_run_timeout(self, mock_run):
        """Test du timeout lors de l'exécution."""
        mock_run.side_effect = subprocess.TimeoutExpired(
            cmd=["rc-service", "nginx", "status"], timeout=5,
            output=b"partiel",
        )
        result = self.executor.run(["rc-service", "nginx", "status"],
                                   timeout=5)

        assert result.success is False
        assert result.return_code == -1
        assert result.stdout == "partiel"
        self.mock_logger.log_error.assert_called_once()

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_run_commande_introuvable(self, mock_run):
        """Test avec une commande introuvable."""
        mock_run.side_effect = FileNotFoundError(
            "No such file or directory: 'rc-update'"
        )
        result = self.executor.run(["rc-update", "show"])

        assert result.success is False
        assert result.return_code == -1
        assert "rc-update" in result.stderr
        self.mock_logger.log_error.assert_called_once()

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_run_log_commande(self, mock_run):
        """Test que la commande est loguée."""
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        self.executor.run(["rc-update", "show", "default"])

        self.mock_logger.log_info.assert_called_once()
        assert "rc-update show default" in (
            self.mock_logger.log_info.call_args[0][0]
        )

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_timeout_par_defaut(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        executor = LinuxCommandExecutor(default_timeout=30)

        executor.run(["rc-update", "show"])
        assert mock_run.call_args[1]["timeout"] == 30

        executor.run(["rc-update", "show"], timeout=5)
        assert mock_run.call_args[1]["timeout"] == 5

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_run_sans_logger(self, mock_run):
        """Test de l'exécution sans logger."""
        mock_run.return_value = MagicMock(returncode=0, stdout="ok",
                                          stderr="")
        result = LinuxCommandExecutor().run(["echo", "test"])

        assert result.success is True
        assert result.stdout == "ok"


class TestLinuxCommandExecutorInteractive:
    """Tests pour run_interactive() (sortie reliée au terminal)."""

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_sortie_non_capturee(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0)
        result = LinuxCommandExecutor().run_interactive(
            ["rc-service", "nginx", "start"]
        )

        assert result.success is True
        assert result.stdout == ""
        assert "capture_output" not in mock_run.call_args[1]

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_echec(self, mock_run):
        mock_run.return_value = MagicMock(returncode=1)
        logger = MagicMock(spec=Logger)

        result = LinuxCommandExecutor(logger=logger).run_interactive(
            ["vi", "/etc/init.d/nginx"]
        )

        assert result.success is False
        assert result.return_code == 1
        logger.log_error.assert_called_once()

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_binaire_absent(self, mock_run):
        mock_run.side_effect = FileNotFoundError("vi")

        result = LinuxCommandExecutor().run_interactive(["vi", "x"])

        assert result.return_code == -1

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_sans_timeout_par_defaut(self, mock_run):
        """Le timeout par défaut de l'exécuteur ne borne pas l'éditeur."""
        mock_run.return_value = MagicMock(returncode=0)

        LinuxCommandExecutor(default_timeout=5).run_interactive(["vi", "x"])

        assert mock_run.call_args[1]["timeout"] is None

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_timeout_explicite(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(
            cmd="rc-service", timeout=10
        )
        logger = MagicMock(spec=Logger)

        result = LinuxCommandExecutor(logger=logger).run_interactive(
            ["rc-service", "nginx", "start"], timeout=10
        )

        assert mock_run.call_args[1]["timeout"] == 10
        assert result.success is False
        assert result.return_code == -1
        assert "Timeout après 10s" in logger.log_error.call_args[0][0]


class TestLinuxCommandExecutorEnv:
    """Tests de la fusion des variables d'environnement."""

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_default_env_fusionne(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        executor = LinuxCommandExecutor(default_env={"LC_ALL": "C"})

        executor.run(["rc-status"], env={"RC_SVCNAME": "nginx"})

        env = mock_run.call_args[1]["env"]
        assert env["LC_ALL"] == "C"
        assert env["RC_SVCNAME"] == "nginx"

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_aucun_env_passe_none(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")

        LinuxCommandExecutor().run(["rc-status"])

        assert mock_run.call_args[1]["env"] is None


# --- Tests des formateurs ---


class TestPlainCommandFormatter:
    """Tests pour le formateur texte brut PlainCommandFormatter."""

    @pytest.fixture
    def formatter(self) -> PlainCommandFormatter:
        return PlainCommandFormatter()

    def test_format_start_root_contient_prefixe_root(self, formatter):
        msg = formatter.format_start(["rc-update", "show"], is_root=True)
        assert msg.startswith("[ROOT]")
        assert "rc-update show" in msg

    def test_format_start_user_contient_prefixe_user(self, formatter):
        msg = formatter.format_start(["rc-update", "show"], is_root=False)
        assert msg.startswith("[user]")

    def test_format_failure_contient_code(self, formatter):
        msg = formatter.format_failure(["rc-service", "x", "start"], 1,
                                       is_root=True)
        assert msg == "[ROOT] Code retour 1 : rc-service x start"

    def test_pas_de_codes_ansi(self, formatter):
        assert "\033[" not in formatter.format_start(["ls"], is_root=True)


class TestAnsiCommandFormatter:
    """Tests pour le formateur ANSI coloré AnsiCommandFormatter."""

    @pytest.fixture
    def formatter(self) -> AnsiCommandFormatter:
        return AnsiCommandFormatter()

    def test_format_start_root_avec_tty_contient_style_jaune(
        self, formatter
    ):
        with patch.object(formatter, "_is_tty", return_value=True):
            msg = formatter.format_start(["ls"], is_root=True)
        assert AnsiCommandFormatter.ROOT_STYLE in msg
        assert AnsiCommandFormatter.RESET in msg
        assert "[ROOT]" in msg

    def test_format_failure_avec_tty_en_rouge(self, formatter):
        with patch.object(formatter, "_is_tty", return_value=True):
            msg = formatter.format_failure(["ls"], 2, is_root=False)
        assert msg.startswith(AnsiCommandFormatter.FAILURE_STYLE)

    def test_format_start_sans_tty_pas_de_codes_ansi(self, formatter):
        with patch.object(formatter, "_is_tty", return_value=False):
            msg = formatter.format_start(["ls"], is_root=True)
        assert "\033[" not in msg

    def test_est_une_sous_classe_de_command_formatter(self):
        assert issubclass(AnsiCommandFormatter, CommandFormatter)


class TestLinuxCommandExecutorPrefixeLogs:
    """Tests des préfixes [ROOT]/[user] dans les messages de log."""

    @patch("systemctl_openrc.commands.runner.os.getuid", return_value=1000)
    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_log_contient_prefixe_user_quand_non_root(
        self, mock_run, mock_getuid
    ):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        logger = MagicMock(spec=Logger)

        LinuxCommandExecutor(logger=logger).run(["rc-status"])

        assert "[user]" in logger.log_info.call_args[0][0]

    @patch("systemctl_openrc.commands.runner.os.getuid", return_value=0)
    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_log_contient_prefixe_root_quand_root(
        self, mock_run, mock_getuid
    ):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        logger = MagicMock(spec=Logger)

        LinuxCommandExecutor(logger=logger).run(["rc-status"])

        assert "[ROOT]" in logger.log_info.call_args[0][0]

    @patch("systemctl_openrc.commands.runner.subprocess.run")
    def test_console_formatter_appele(self, mock_run, capsys):
        """Avec --verbose, la commande est affichée sur stderr."""
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        mock_formatter = MagicMock(spec=CommandFormatter)
        mock_formatter.format_start.return_value = "rc-status lancé"

        executor = LinuxCommandExecutor(console_formatter=mock_formatter)
        executor.run(["rc-status"])

        mock_formatter.format_start.assert_called_once_with(
            ["rc-status"], executor._is_root
        )
        assert "rc-status lancé" in capsys.readouterr().err
