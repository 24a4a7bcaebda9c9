"""Tests pour le module config."""

import json
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from systemctl_openrc.config import (
    CONFIG_ENV_VAR,
    FileConfigLoader,
    Settings,
    find_settings_file,
    load_settings,
)
from systemctl_openrc.errors.exceptions import FileConfigurationError


class TestFileConfigLoader:
    """Tests pour FileConfigLoader."""

    def setup_method(self):
        """Initialise le loader avant chaque test."""
        self.loader = FileConfigLoader()

    def test_load_json(self, tmp_path):
        """Test du chargement d'un fichier JSON."""
        config_file = tmp_path / "config.json"
        config_data = {"openrc": {"runlevel": "boot"}}
        config_file.write_text(json.dumps(config_data))

        assert self.loader.load(config_file) == config_data

    def test_load_toml(self, tmp_path):
        """Test du chargement d'un fichier TOML."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('[paths]\nscript_dir = "/tmp/init.d"\n')

        result = self.loader.load(config_file)

        assert result["paths"]["script_dir"] == "/tmp/init.d"

    def test_file_not_found(self):
        """Test avec fichier inexistant."""
        with pytest.raises(FileNotFoundError):
            self.loader.load("/nonexistent/config.toml")

    def test_unsupported_extension(self, tmp_path):
        """Test avec extension non supportée."""
        config_file = tmp_path / "config.xml"
        config_file.write_text("<config></config>")

        with pytest.raises(ValueError, match="Extension non supportée"):
            self.loader.load(config_file)

    def test_load_avec_schema(self, tmp_path):
        """Avec un schema, une instance du modèle est retournée."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('[openrc]\nrunlevel = "boot"\n')

        settings = self.loader.load(config_file, schema=Settings)

        assert isinstance(settings, Settings)
        assert settings.openrc.runlevel == "boot"

    def test_schema_non_pydantic_rejete(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("{}")

        with pytest.raises(TypeError, match="BaseModel"):
            self.loader.load(config_file, schema=dict)


class TestSettings:
    """Tests pour les valeurs par défaut et la validation."""

    def test_valeurs_par_defaut(self):
        settings = Settings()

        assert settings.paths.unit_search_paths[0] == "/etc/systemd/system"
        assert settings.paths.script_dir == "/etc/init.d"
        assert settings.openrc.runlevel == "default"
        assert settings.openrc.rc_update == "rc-update"
        assert settings.openrc.command_timeout is None
        assert settings.logging.level == "INFO"

    def test_cle_inconnue_refusee(self):
        with pytest.raises(Exception):
            Settings.model_validate({"paths": {"inconnu": 1}})

    def test_script_dir_relatif_refuse(self):
        with pytest.raises(Exception, match="absolu"):
            Settings.model_validate({"paths": {"script_dir": "init.d"}})

    def test_timeout_positif(self):
        with pytest.raises(Exception):
            Settings.model_validate({"openrc": {"command_timeout": 0}})

    def test_logging_config(self):
        settings = Settings.model_validate(
            {"logging": {"level": "DEBUG"}}
        )
        config = settings.logging_config()

        assert config["logging"]["level"] == "DEBUG"
        assert "format" in config["logging"]

    def test_est_un_modele_pydantic(self):
        assert issubclass(Settings, BaseModel)


class TestLoadSettings:
    """Tests pour find_settings_file() et load_settings()."""

    def test_sans_fichier_valeurs_par_defaut(self, tmp_path, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

        settings = load_settings(search_paths=[tmp_path / "absent.toml"])

        assert settings == Settings()

    def test_chemin_explicite(self, tmp_path):
        config_file = tmp_path / "systemctl.toml"
        config_file.write_text(
            '[paths]\nunit_search_paths = ["/srv/units"]\n'
        )

        settings = load_settings(config_file)

        assert settings.paths.unit_search_paths == ["/srv/units"]

    def test_variable_environnement_prioritaire(self, tmp_path, monkeypatch):
        from_env = tmp_path / "env.json"
        from_env.write_text('{"openrc": {"runlevel": "boot"}}')
        other = tmp_path / "other.toml"
        other.write_text('[openrc]\nrunlevel = "nonetwork"\n')
        monkeypatch.setenv(CONFIG_ENV_VAR, str(from_env))

        assert find_settings_file([other]) == from_env
        assert load_settings(search_paths=[other]).openrc.runlevel == "boot"

    def test_premier_fichier_existant(self, tmp_path, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        second = tmp_path / "second.json"
        second.write_text("{}")

        found = find_settings_file([tmp_path / "first.toml", second])

        assert found == second

    def test_contenu_invalide(self, tmp_path):
        config_file = tmp_path / "bad.toml"
        config_file.write_text('[openrc]\ncommand_timeout = -5\n')

        with pytest.raises(FileConfigurationError, match="invalides"):
            load_settings(config_file)

    def test_fichier_explicite_absent(self, tmp_path):
        with pytest.raises(FileConfigurationError, match="Impossible"):
            load_settings(tmp_path / "absent.toml")

    def test_toml_malforme(self, tmp_path):
        config_file = tmp_path / "broken.toml"
        config_file.write_text("[paths\n")

        with pytest.raises(FileConfigurationError):
            load_settings(config_file)

    def test_loader_injecte(self, tmp_path):
        loader = MagicMock()
        loader.load.return_value = Settings()
        config_file = tmp_path / "config.toml"

        load_settings(config_file, loader=loader)

        loader.load.assert_called_once_with(config_file, schema=Settings)
