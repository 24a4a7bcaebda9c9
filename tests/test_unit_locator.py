"""Tests pour UnitLocator."""

from systemctl_openrc.unit import UnitLocator


def _unit(directory, name, content="[Service]\nExecStart=/bin/true\n"):
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(content)
    return path


class TestUnitLocator:
    """Tests pour find() et service_files()."""

    def test_find_premier_repertoire_gagne(self, tmp_path):
        etc = tmp_path / "etc"
        lib = tmp_path / "lib"
        expected = _unit(etc, "nginx.service")
        _unit(lib, "nginx.service")

        locator = UnitLocator([etc, lib])

        assert locator.find("nginx.service") == expected

    def test_find_repertoire_suivant(self, tmp_path):
        lib = tmp_path / "lib"
        expected = _unit(lib, "sshd.service")

        locator = UnitLocator([tmp_path / "etc", lib])

        assert locator.find("sshd.service") == expected

    def test_find_absent(self, tmp_path):
        assert UnitLocator([tmp_path]).find("absent.service") is None

    def test_find_ignore_les_repertoires(self, tmp_path):
        (tmp_path / "weird.service").mkdir()

        assert UnitLocator([tmp_path]).find("weird.service") is None

    def test_chemins_convertis_en_path(self):
        locator = UnitLocator(["/etc/systemd/system"])

        assert str(locator.search_paths[0]) == "/etc/systemd/system"

    def test_service_files(self, tmp_path):
        etc = tmp_path / "etc"
        lib = tmp_path / "lib"
        nginx = _unit(etc, "nginx.service")
        _unit(lib, "nginx.service")
        sshd = _unit(lib, "sshd.service")
        _unit(lib, "getty@.service")
        _unit(lib, "sshd.socket")

        found = UnitLocator([etc, lib, tmp_path / "absent"]).service_files()

        assert found == {"nginx": nginx, "sshd": sshd}
