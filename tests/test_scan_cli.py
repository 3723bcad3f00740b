"""Tests for the wolscan command line."""

import json
from unittest.mock import patch

import pytest

import scan
from device import ScannedDevice


@pytest.fixture
def settings(tmp_path):
    path = tmp_path / "settings.toml"
    path.write_text(
        f"[general]\ndevices_file = '{(tmp_path / 'devices.json').as_posix()}'\n"
        "[probe]\nstatus_timeout = 2.0\nmax_in_flight = 10\nsettle_delay = 0\n",
        encoding="utf-8",
    )
    return str(path)


def run_cli(capsys, *argv):
    code = scan.main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestCli:
    def test_add_list_show_remove(self, settings, capsys):
        code, out, _ = run_cli(capsys, "--settings", settings, "add", "--name", "nas",
                               "--mac", "aa-bb-cc-dd-ee-01", "--ip", "192.168.1.10")
        assert code == 0
        added = json.loads(out)
        assert added["mac"] == "AA:BB:CC:DD:EE:01"
        assert added["port"] == "9"

        code, out, _ = run_cli(capsys, "--settings", settings, "list")
        assert code == 0
        assert [d["id"] for d in json.loads(out)] == [added["id"]]

        code, out, _ = run_cli(capsys, "--settings", settings, "show", added["id"])
        assert json.loads(out)["name"] == "nas"

        code, _, _ = run_cli(capsys, "--settings", settings, "remove", added["id"])
        assert code == 0
        _, out, _ = run_cli(capsys, "--settings", settings, "list")
        assert json.loads(out) == []

    def test_duplicate_add_fails(self, settings, capsys):
        run_cli(capsys, "--settings", settings, "add", "--name", "a", "--mac", "AA:BB:CC:DD:EE:01")
        code, _, err = run_cli(capsys, "--settings", settings, "add", "--name", "b",
                               "--mac", "AA:BB:CC:DD:EE:01")
        assert code == 1
        assert "already exists" in err

    def test_invalid_mac_fails(self, settings, capsys):
        code, _, err = run_cli(capsys, "--settings", settings, "add", "--name", "a", "--mac", "zz")
        assert code == 1
        assert "Invalid MAC" in err

    def test_remove_unknown_fails(self, settings, capsys):
        code, _, err = run_cli(capsys, "--settings", settings, "remove", "missing")
        assert code == 1
        assert "not found" in err

    def test_list_refresh_runs_prober(self, settings, capsys):
        run_cli(capsys, "--settings", settings, "add", "--name", "a",
                "--mac", "AA:BB:CC:DD:EE:01", "--ip", "192.168.1.10")
        with patch("scan.LivenessProber.update_statuses", autospec=True) as sweep:
            code, out, _ = run_cli(capsys, "--settings", settings, "list", "--refresh")
        assert code == 0
        assert len(json.loads(out)) == 1
        sweep.assert_called_once()
        assert sweep.call_args[0][0].timeout == 2.0

    def test_discover_prints_candidates(self, settings, capsys):
        found = [ScannedDevice("192.168.1.20", "AA:BB:CC:DD:EE:FF")]
        with patch("scan.NetworkScanner.scan", return_value=found):
            code, out, _ = run_cli(capsys, "--settings", settings, "discover")
        assert code == 0
        assert json.loads(out) == [{"ip": "192.168.1.20", "mac": "AA:BB:CC:DD:EE:FF", "vendor": None}]

    def test_build_scanner_uses_settings(self, settings):
        scanner = scan.build_scanner(scan.load_config([settings]))
        assert scanner.max_in_flight == 10
        assert scanner.max_hosts == 512
        assert scanner.settle_delay == 0
        assert scanner.vendor_lookup is None

    def test_unknown_neighbor_source_fails(self, settings, capsys):
        with open(settings, "a", encoding="utf-8") as handle:
            handle.write("[neighbors]\nsource = 'snmp'\n")
        code, _, err = run_cli(capsys, "--settings", settings, "discover")
        assert code == 1
        assert "Unsupported neighbor source" in err
