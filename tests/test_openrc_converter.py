"""Tests pour la conversion fichier unit → script OpenRC."""

import shutil
import subprocess
from unittest.mock import patch

import pytest
from jinja2 import UndefinedError

from systemctl_openrc.errors.exceptions import ConversionError
from systemctl_openrc.openrc import (
    OpenRCConverter,
    build_template_data,
    collapse_blank_lines,
    convert_to_openrc,
    format_capabilities,
    split_exec_start,
)
from systemctl_openrc.openrc.converter import rewrite_pre_commands
from systemctl_openrc.openrc.template import (
    double_quote_escape,
    is_tolerant,
    render_template,
    single_quote,
)
from systemctl_openrc.unit.models import ServiceConfig

NGINX = ServiceConfig(
    description="The NGINX HTTP and reverse proxy server",
    user="www-data",
    group="www-data",
    working_directory="/var/www",
    environment_file="/etc/default/nginx",
    environment=("LANG=C", 'GREETING=say "hi"'),
    exec_start_pre=("-/bin/mkdir -p /run/nginx", "/usr/sbin/nginx -t"),
    exec_start="/usr/sbin/nginx -g daemon off;",
    exec_stop="/usr/sbin/nginx -s quit",
    ambient_capabilities="CAP_NET_BIND_SERVICE",
    source_path="/etc/systemd/system/nginx.service",
)


class TestHelpers:
    """Tests des fonctions de préparation des données."""

    def test_split_exec_start(self):
        assert split_exec_start("/usr/bin/app  --port   80") == (
            "/usr/bin/app", "--port 80"
        )

    def test_split_exec_start_sans_arguments(self):
        assert split_exec_start("/usr/bin/app") == ("/usr/bin/app", "")

    @pytest.mark.parametrize("value", ["", "   "])
    def test_split_exec_start_vide(self, value):
        with pytest.raises(ConversionError, match="ExecStart est vide"):
            split_exec_start(value)

    def test_rewrite_pre_commands(self):
        commands = ("-/bin/mkdir -p /run/x", "/bin/true")
        assert rewrite_pre_commands(commands) == (
            "/bin/mkdir -p /run/x || true",
            "/bin/true",
        )

    def test_format_capabilities(self):
        assert format_capabilities("CAP_NET_RAW CAP_SYS_TIME") == (
            "^cap_net_raw,^cap_sys_time"
        )
        assert format_capabilities("") == ""

    def test_double_quote_escape(self):
        assert double_quote_escape('a "b" \\c') == 'a \\"b\\" \\\\c'

    def test_single_quote(self):
        assert single_quote("a $b `c`") == "'a $b `c`'"
        assert single_quote("it's") == "'it'\\''s'"

    def test_is_tolerant(self):
        assert is_tolerant("/bin/mkdir -p /x || true") is True
        assert is_tolerant("/bin/mkdir -p /x") is False

    def test_collapse_blank_lines(self):
        text = "\n\na\n\n  \n\t\nb\n\n\n"
        assert collapse_blank_lines(text) == "a\n\nb\n"

    def test_collapse_blank_lines_idempotent(self):
        text = "#!/bin/sh\n\n\n\nx=1\n   \n\ny=2\n"
        once = collapse_blank_lines(text)
        assert collapse_blank_lines(once) == once

    def test_build_template_data(self):
        data = build_template_data(NGINX, "nginx")

        assert data.command == "/usr/sbin/nginx"
        assert data.command_args == "-g daemon off;"
        assert data.command_background is True
        assert data.stop_command == "/usr/sbin/nginx -s quit"
        assert data.capabilities == "^cap_net_bind_service"
        assert data.exec_start_pre_commands[0].endswith(" || true")
        assert set(data.to_context()) >= {"name", "environment"}


class TestConvertToOpenrc:
    """Tests du script généré."""

    def test_script_minimal_complet(self):
        config = ServiceConfig(
            description="Test", exec_start="/usr/bin/app --port 80"
        )

        assert convert_to_openrc(config, "app") == (
            "#!/sbin/openrc-run\n"
            "\n"
            'name="app"\n'
            "description='Test'\n"
            'command="/usr/bin/app"\n'
            'command_args="--port 80"\n'
            "command_background=true\n"
            'pidfile="/run/app.pid"\n'
            "\n"
            "depend() {\n"
            "\tuse net logger\n"
            "}\n"
        )

    def test_nginx(self):
        script = convert_to_openrc(NGINX, "nginx")

        assert script.startswith("#!/sbin/openrc-run\n")
        assert (
            "# Generated by systemctl-openrc from "
            "/etc/systemd/system/nginx.service" in script
        )
        assert 'name="nginx"' in script
        assert 'command="/usr/sbin/nginx"' in script
        assert 'command_args="-g daemon off;"' in script
        assert 'command_user="www-data:www-data"' in script
        assert 'directory="/var/www"' in script
        assert 'capabilities="^cap_net_bind_service"' in script
        assert (
            '\tif [ -f "/etc/default/nginx" ]; then\n'
            "\t\tset -a\n"
            '\t\t. "/etc/default/nginx"\n'
            "\t\tset +a\n"
            "\tfi\n"
            in script
        )
        assert "\texport LANG='C'\n" in script
        assert "\texport GREETING='say \"hi\"'\n" in script
        assert (
            "description='The NGINX HTTP and reverse proxy server'"
            in script
        )
        assert "\t/bin/mkdir -p /run/nginx || true\n" in script
        assert "\t/usr/sbin/nginx -t || return 1\n" in script
        assert "stop() {" in script
        assert "\t/usr/sbin/nginx -s quit\n" in script
        assert "\teend $?" in script

    def test_aucune_valeur_vide(self):
        config = ServiceConfig(exec_start="/usr/bin/app")

        script = convert_to_openrc(config, "app")

        assert '=""' not in script
        assert "command_args" not in script
        assert "command_user" not in script
        assert "description" not in script
        assert "start_pre" not in script
        assert "stop()" not in script
        assert "# Generated" not in script

    def test_forking_sans_demonisation(self):
        config = ServiceConfig(
            exec_start="/usr/sbin/sshd", type="forking"
        )

        script = convert_to_openrc(config, "sshd")

        assert "command_background" not in script
        assert "pidfile" not in script

    def test_groupe_sans_utilisateur_ignore(self):
        config = ServiceConfig(exec_start="/bin/app", group="staff")

        assert "command_user" not in convert_to_openrc(config, "app")

    def test_utilisateur_sans_groupe(self):
        config = ServiceConfig(exec_start="/bin/app", user="nobody")

        assert 'command_user="nobody"\n' in convert_to_openrc(config, "app")

    def test_instance(self):
        config = ServiceConfig(exec_start="/bin/app worker1")

        script = convert_to_openrc(config, "app@worker1", "worker1")

        assert "# Instance: worker1\n" in script
        assert 'name="app@worker1"' in script

    def test_exec_start_vide(self):
        with pytest.raises(ConversionError):
            convert_to_openrc(ServiceConfig(), "app")

    def test_deterministe(self):
        assert convert_to_openrc(NGINX, "nginx") == (
            convert_to_openrc(NGINX, "nginx")
        )

    def test_pas_de_lignes_vides_consecutives(self):
        script = convert_to_openrc(NGINX, "nginx")

        assert "\n\n\n" not in script
        assert script.endswith("}\n")
        assert not script.endswith("\n\n")

    def test_erreur_de_rendu_convertie(self):
        with patch(
            "systemctl_openrc.openrc.converter.render_template",
            side_effect=UndefinedError("'x' is undefined"),
        ):
            with pytest.raises(ConversionError, match="rendu"):
                convert_to_openrc(NGINX, "nginx")

    def test_contexte_incomplet_refuse(self):
        with pytest.raises(UndefinedError):
            render_template({"name": "x"})

    def test_converter_injectable(self):
        assert OpenRCConverter().convert(NGINX, "nginx") == (
            convert_to_openrc(NGINX, "nginx")
        )


@pytest.mark.skipif(shutil.which("sh") is None, reason="sh absent")
class TestStartPreExecute:
    """start_pre() exécuté par sh, comme le ferait openrc-run."""

    CHILD = "sh -c 'printf \"%s|%s\" \"$TOKEN\" \"$PASS\"'"

    def _run(self, config, after):
        script = convert_to_openrc(config, "app")
        return subprocess.run(
            ["sh", "-c", f"{script}\nstart_pre\necho \"rc=$?\"\n{after}\n"],
            capture_output=True,
            text=True,
            check=False,
        )

    def test_fichier_env_absent_sans_echec(self, tmp_path):
        config = ServiceConfig(
            exec_start="/bin/true",
            environment_file=str(tmp_path / "absent"),
        )

        proc = self._run(config, "")

        assert proc.stdout == "rc=0\n"

    def test_fichier_env_exporte(self, tmp_path):
        env_file = tmp_path / "app.env"
        env_file.write_text("TOKEN=secret\n")
        config = ServiceConfig(
            exec_start="/bin/true", environment_file=str(env_file)
        )

        proc = self._run(config, self.CHILD)

        assert proc.stdout == "rc=0\nsecret|"

    def test_valeur_environment_litterale(self):
        value = "ab$HOMEcd`id -u`'q"
        config = ServiceConfig(
            exec_start="/bin/true", environment=(f"PASS={value}",)
        )

        proc = self._run(config, self.CHILD)

        assert proc.stdout == f"rc=0\n|{value}"
