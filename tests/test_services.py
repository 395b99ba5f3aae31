"""
Unit Tests — Services
=====================
Smoke test probe, size report rendering and docker-compose invocation.
"""
import subprocess
import pytest
from unittest.mock import patch, MagicMock

import httpx

from shipyard.core.errors import ComposeError
from shipyard.models.variant import BuildVariant
from shipyard.services.compose_service import build_compose_command, compose_up
from shipyard.services.image_report import (
    collect_image_rows,
    format_size,
    render_disk_usage,
    render_image_sizes,
    show_image_sizes,
    summarize_disk_usage,
)
from shipyard.services.smoke_test import SmokeTester, is_ok_status, probe_http


# ---------------------------------------------------------------------------
# 1. HTTP probe
# ---------------------------------------------------------------------------
class TestProbe:

    @patch("shipyard.services.smoke_test.httpx.get")
    def test_returns_status(self, mock_get):
        mock_get.return_value = MagicMock(status_code=200)
        assert probe_http("http://localhost:8080") == 200
        assert mock_get.call_args.kwargs["follow_redirects"] is True

    @patch("shipyard.services.smoke_test.httpx.get")
    def test_connection_refused_returns_none(self, mock_get):
        mock_get.side_effect = httpx.ConnectError("Connection refused")
        assert probe_http("http://localhost:8080") is None

    @patch("shipyard.services.smoke_test.httpx.get")
    def test_timeout_returns_none(self, mock_get):
        mock_get.side_effect = httpx.ReadTimeout("timed out")
        assert probe_http("http://localhost:8080", timeout=0.1) is None

    def test_curl_fail_semantics(self):
        assert is_ok_status(200)
        assert is_ok_status(304)
        assert not is_ok_status(404)
        assert not is_ok_status(500)
        assert not is_ok_status(None)


class TestSmokeTester:

    def _variant(self, probe):
        return BuildVariant(
            name="production", target="production", image="react-app-prod",
            container_name="react-app-prod-test", host_port=8080, container_port=80,
            probe_http=probe,
        )

    def test_not_running_skips_probe(self):
        runner = MagicMock()
        runner.is_running.return_value = False
        with patch("shipyard.services.smoke_test.httpx.get") as mock_get:
            result = SmokeTester(runner).check(self._variant(True))
        mock_get.assert_not_called()
        assert result.running is False
        assert result.passed is False
        assert "not running" in result.message

    def test_process_check_only(self):
        runner = MagicMock()
        runner.is_running.return_value = True
        result = SmokeTester(runner).check(self._variant(False))
        assert result.passed is True
        assert result.http_status is None


# ---------------------------------------------------------------------------
# 2. Size report
# ---------------------------------------------------------------------------
class TestImageReport:

    def test_format_size(self):
        assert format_size(0) == "0B"
        assert format_size(999) == "999B"
        assert format_size(52_400_000) == "52.4MB"
        assert format_size(1_500_000_000) == "1.5GB"
        assert format_size(None) == "0B"

    def test_collect_filters_by_prefix(self):
        prod = MagicMock(tags=["react-app-prod:latest", "react-app-prod:42"], attrs={"Size": 48_000_000})
        dev = MagicMock(tags=["react-app-dev:latest"], attrs={"Size": 410_000_000})
        other = MagicMock(tags=["nginx:alpine"], attrs={"Size": 43_000_000})
        dangling = MagicMock(tags=[], attrs={"Size": 1000})
        client = MagicMock()
        client.images.list.return_value = [prod, dev, other, dangling]

        rows = collect_image_rows(client, "react-app")

        assert rows == [
            ("react-app-dev:latest", 410_000_000),
            ("react-app-prod:42", 48_000_000),
            ("react-app-prod:latest", 48_000_000),
        ]

    def test_render_no_images(self):
        assert render_image_sizes([], "react-app") == "No react-app images found"

    def test_render_rows(self):
        text = render_image_sizes([("react-app-prod:latest", 48_000_000)], "react-app")
        assert text == "react-app-prod:latest - 48.0MB"

    def test_summarize_disk_usage(self):
        df = {
            "LayersSize": 2_000_000_000,
            "Images": [{"Containers": 1, "Size": 1}, {"Containers": 0, "Size": 1}],
            "Containers": [{"State": "running", "SizeRw": 100}, {"State": "exited", "SizeRw": 50}],
            "Volumes": [{"UsageData": {"RefCount": 1, "Size": 1000}},
                        {"UsageData": {"RefCount": 0, "Size": -1}}],
            "BuildCache": [{"InUse": False, "Size": 5000}],
        }
        summary = summarize_disk_usage(df)
        assert summary == [
            ("Images", 2, 1, 2_000_000_000),
            ("Containers", 2, 1, 150),
            ("Local Volumes", 2, 1, 1000),
            ("Build Cache", 1, 0, 5000),
        ]
        table = render_disk_usage(summary)
        assert table.splitlines()[0].startswith("TYPE")
        assert "Build Cache" in table

    def test_summarize_empty_payload(self):
        summary = summarize_disk_usage({})
        assert [row[1] for row in summary] == [0, 0, 0, 0]

    def test_show_image_sizes_prints_report(self, capsys):
        client = MagicMock()
        client.images.list.return_value = []
        client.df.return_value = {}

        show_image_sizes(client, "react-app")

        out = capsys.readouterr().out
        assert "No react-app images found" in out
        assert "TYPE" in out


# ---------------------------------------------------------------------------
# 3. docker compose
# ---------------------------------------------------------------------------
class TestCompose:

    def test_default_command(self):
        assert build_compose_command("react-app-dev") == [
            "docker", "compose", "up", "-d", "react-app-dev",
        ]

    def test_standalone_binary(self):
        assert build_compose_command("react-app-prod", "docker-compose") == [
            "docker-compose", "up", "-d", "react-app-prod",
        ]

    @patch("shipyard.services.compose_service.subprocess.run")
    def test_failure_raises(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess([], 1, "", "no such service: react-app-dev")
        with pytest.raises(ComposeError) as exc:
            compose_up("react-app-dev")
        assert "no such service" in str(exc.value)

    @patch("shipyard.services.compose_service.subprocess.run")
    def test_missing_binary_raises(self, mock_run):
        mock_run.side_effect = FileNotFoundError("docker-compose")
        with pytest.raises(ComposeError):
            compose_up("react-app-dev", compose_command="docker-compose")

    @patch("shipyard.services.compose_service.subprocess.run")
    def test_success(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess([], 0, "", "")
        compose_up("react-app-prod", cwd="/ctx")
        assert mock_run.call_args.kwargs["cwd"] == "/ctx"
