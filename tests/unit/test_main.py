"""Unit tests for the command-line entry point."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from recentnotes.__main__ import FAILURE_MESSAGE, main, parse_args
from recentnotes.models import Record
from recentnotes.services.aggregator import AggregationResult, Aggregator


@pytest.fixture(autouse=True)
def no_root_handlers():
    with patch("recentnotes.__main__.setup_logging"):
        yield


@pytest.fixture
def missing_config(tmp_path: Path) -> str:
    return str(tmp_path / "missing.yaml")


class TestParseArgs:
    """Argument parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert args.config == Path("config/recentnotes.yaml")
        assert args.relays is None
        assert args.count is None
        assert args.timeout is None
        assert args.json is False
        assert args.log_level == "WARNING"

    def test_repeated_relay(self):
        args = parse_args(["--relay", "wss://a.example.com", "--relay", "wss://b.example.com"])
        assert args.relays == ["wss://a.example.com", "wss://b.example.com"]


class TestMain:
    """Running one aggregation from the command line."""

    async def test_prints_empty_message(self, missing_config, capsys):
        with patch.object(Aggregator, "run", AsyncMock(return_value=AggregationResult())):
            code = await main(["--config", missing_config])

        assert code == 0
        assert capsys.readouterr().out.strip() == "No notes yet."

    async def test_prints_notes(self, missing_config, capsys, make_record):
        note: Record = make_record(1, content="Nice spot for a tent")
        result = AggregationResult(notes=(note,))

        with patch.object(Aggregator, "run", AsyncMock(return_value=result)):
            code = await main(["--config", missing_config])

        assert code == 0
        assert "Nice spot for a tent" in capsys.readouterr().out

    async def test_json_output(self, missing_config, capsys, make_record):
        result = AggregationResult(notes=(make_record(1),), received=1)

        with patch.object(Aggregator, "run", AsyncMock(return_value=result)):
            code = await main(["--config", missing_config, "--json"])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["received"] == 1
        assert len(data["notes"]) == 1

    async def test_overrides_applied(self, missing_config):
        captured = {}
        original = Aggregator.from_dict

        def spy(data, **kwargs):
            captured.update(data)
            return original(data, **kwargs)

        with (
            patch.object(Aggregator, "from_dict", side_effect=spy),
            patch.object(Aggregator, "run", AsyncMock(return_value=AggregationResult())),
        ):
            await main(
                [
                    "--config",
                    missing_config,
                    "--relay",
                    "wss://a.example.com",
                    "--count",
                    "3",
                    "--timeout",
                    "2.5",
                ]
            )

        assert captured == {"relays": ["wss://a.example.com"], "show_count": 3, "timeout": 2.5}

    async def test_reads_config_file(self, tmp_path: Path):
        path = tmp_path / "recentnotes.yaml"
        path.write_text("show_count: 2\n")
        seen = []

        async def fake_run(self):
            seen.append(self.config.show_count)
            return AggregationResult()

        with patch.object(Aggregator, "run", fake_run):
            code = await main(["--config", str(path)])

        assert code == 0
        assert seen == [2]

    async def test_invalid_config_prints_generic_message(self, missing_config, capsys):
        code = await main(["--config", missing_config, "--count", "0"])

        assert code == 1
        assert FAILURE_MESSAGE in capsys.readouterr().err

    async def test_unreadable_config(self, tmp_path: Path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("relays: [unclosed\n")

        code = await main(["--config", str(path)])

        assert code == 1
        assert FAILURE_MESSAGE in capsys.readouterr().err

    async def test_unexpected_failure_prints_generic_message(self, missing_config, capsys):
        with patch.object(Aggregator, "run", AsyncMock(side_effect=RuntimeError("boom"))):
            code = await main(["--config", missing_config])

        assert code == 1
        captured = capsys.readouterr()
        assert FAILURE_MESSAGE in captured.err
        assert captured.out == ""
