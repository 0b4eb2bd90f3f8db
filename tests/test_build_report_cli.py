"""Tests for the build_report CLI script."""

import argparse
import importlib.util
import json
from pathlib import Path

import pytest

from farm_reports.common.config import AppConfig

SCRIPT = Path(__file__).parent.parent / "scripts" / "build_report.py"
SNAPSHOT = Path(__file__).parent.parent / "data" / "farm_snapshot.json"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("build_report_cli", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def make_args(**overrides) -> argparse.Namespace:
    args = {
        "snapshot": str(SNAPSHOT),
        "kind": "yield",
        "format": "json",
        "start": "2024-01-01",
        "end": "2024-12-31",
        "output": None,
    }
    args.update(overrides)
    return argparse.Namespace(**args)


class TestResolveWindow:
    def test_end_date_covers_whole_day(self, cli):
        start, end = cli.resolve_window("2024-01-01", "2024-01-31")

        assert start.isoformat() == "2024-01-01T00:00:00+00:00"
        assert (end.hour, end.minute, end.second) == (23, 59, 59)

    def test_default_start_is_thirty_days_back(self, cli):
        start, end = cli.resolve_window(None, "2024-03-31T00:00:00Z")

        assert (end - start).days == 30

    def test_start_after_end(self, cli):
        with pytest.raises(ValueError):
            cli.resolve_window("2024-02-01", "2024-01-01")

    def test_malformed_date(self, cli):
        with pytest.raises(ValueError, match="Invalid start date"):
            cli.resolve_window("yesterday", None)


class TestRun:
    @pytest.mark.asyncio
    async def test_json_from_snapshot(self, cli):
        content = await cli.run(make_args(), AppConfig())
        payload = json.loads(content)

        assert payload["summary"]["totalFields"] == 4

    @pytest.mark.asyncio
    async def test_every_kind_as_json(self, cli):
        payload = json.loads(await cli.run(make_args(kind="every"), AppConfig()))

        assert set(payload) == {"yield", "financial", "seasonal", "performance", "resources", "custom"}

    @pytest.mark.asyncio
    async def test_csv_written_to_output(self, cli, tmp_path):
        message = await cli.run(
            make_args(kind="financial", format="csv", output=str(tmp_path)), AppConfig()
        )

        written = list(tmp_path.glob("farm_financial_report_*.csv"))
        assert len(written) == 1
        assert message == f"Report written: {written[0]}"
        assert written[0].read_text().startswith("Category,Amount,Percentage")
