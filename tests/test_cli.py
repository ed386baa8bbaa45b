"""Tests for the Click CLI interface.

These tests verify that:
1. Options are parsed and help/version work
2. The license table goes to stdout (or --output) in the chosen format
3. Fatal errors exit non-zero
"""

import json
import unittest
from unittest.mock import MagicMock, patch

import requests
from click.testing import CliRunner

from yalich import __version__
from yalich.cli.main import cli


def _session(routes):
    session = MagicMock(spec=requests.Session)
    session.__enter__.return_value = session
    session.__exit__.return_value = False

    def get(url, timeout=None, headers=None):
        response = MagicMock()
        if url in routes:
            response.status_code = 200
            response.json.return_value = routes[url]
        else:
            response.status_code = 404
            response.json.return_value = {}
        return response

    session.get.side_effect = get
    return session


ROUTES = {
    "https://pypi.org/pypi/requests/json": {
        "info": {"name": "requests", "license": "Apache 2.0", "project_url": "https://pypi.org/project/requests"}
    },
}


class TestCLIHelp(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()

    def test_help_option(self):
        result = self.runner.invoke(cli, ["--help"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("Collect license metadata", result.output)
        self.assertIn("--config", result.output)
        self.assertIn("--format", result.output)

    def test_short_help_option(self):
        result = self.runner.invoke(cli, ["-h"])
        self.assertEqual(result.exit_code, 0)

    def test_version_option(self):
        result = self.runner.invoke(cli, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)

    def test_config_is_required(self):
        result = self.runner.invoke(cli, [])
        self.assertEqual(result.exit_code, 2)
        self.assertIn("--config", result.output)

    def test_invalid_format(self):
        result = self.runner.invoke(cli, ["--config", "x.toml", "--format", "xml"])
        self.assertEqual(result.exit_code, 2)


class TestCLIRun:
    def _write_project(self, tmp_path, extra=""):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[tool.poetry.dependencies]\npython = "^3.11"\nrequests = "^2.0"\n')
        config = tmp_path / "yalich.toml"
        config.write_text(
            f'user_agent = "yalich-tests"\n\n[languages.python]\nmanifests = ["{pyproject.as_posix()}"]\n{extra}'
        )
        return config

    def test_csv_to_stdout(self, tmp_path):
        config = self._write_project(tmp_path)
        session = _session(ROUTES)

        with patch("yalich.cli.main.create_session", return_value=session) as mock_create:
            result = CliRunner().invoke(cli, ["--config", str(config), "--quiet"])

        assert result.exit_code == 0, result.output
        assert result.stdout == (
            "category,name,url,license\npython,requests,https://pypi.org/project/requests,Apache 2.0\n"
        )
        mock_create.assert_called_once_with("yalich-tests")

    def test_json_format(self, tmp_path):
        config = self._write_project(tmp_path)

        with patch("yalich.cli.main.create_session", return_value=_session(ROUTES)):
            result = CliRunner().invoke(cli, ["--config", str(config), "--format", "json", "--quiet"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [
            {
                "category": "python",
                "name": "requests",
                "url": "https://pypi.org/project/requests",
                "license": "Apache 2.0",
                "purl": "pkg:pypi/requests",
            }
        ]

    def test_output_file(self, tmp_path):
        config = self._write_project(tmp_path)
        output = tmp_path / "licenses.csv"

        with patch("yalich.cli.main.create_session", return_value=_session(ROUTES)):
            result = CliRunner().invoke(cli, ["--config", str(config), "-o", str(output), "--quiet"])

        assert result.exit_code == 0, result.output
        assert "requests" in output.read_text()
        assert result.stdout == ""

    def test_override_from_config(self, tmp_path):
        extra = '\n[languages.python.overrides.requests]\nlicense = "Apache-2.0"\n'
        config = self._write_project(tmp_path, extra=extra)

        with patch("yalich.cli.main.create_session", return_value=_session(ROUTES)):
            result = CliRunner().invoke(cli, ["--config", str(config), "--quiet"])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines()[1].endswith(",Apache-2.0")

    def test_registry_failure_exits_non_zero(self, tmp_path):
        config = self._write_project(tmp_path)

        with patch("yalich.cli.main.create_session", return_value=_session({})):
            result = CliRunner().invoke(cli, ["--config", str(config), "--quiet"])

        assert result.exit_code == 1
        assert result.stdout == ""

    def test_missing_config_exits_non_zero(self, tmp_path):
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "missing.toml")])
        assert result.exit_code == 1

    def test_summary_is_not_on_stdout(self, tmp_path):
        config = self._write_project(tmp_path)

        with patch("yalich.cli.main.create_session", return_value=_session(ROUTES)):
            result = CliRunner().invoke(cli, ["--config", str(config)])

        assert result.exit_code == 0, result.output
        assert "License Summary" not in result.stdout

    def test_malformed_manifest_is_a_logged_error(self, tmp_path):
        config = self._write_project(tmp_path)
        (tmp_path / "pyproject.toml").write_text('project = "x"\n')

        with patch("yalich.cli.main.create_session", return_value=_session(ROUTES)):
            result = CliRunner().invoke(cli, ["--config", str(config), "--quiet"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert result.stdout == ""
