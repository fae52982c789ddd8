"""End-to-end tests for the typer CLI (provider stubbed, no network)."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from aniposter.cli.common.context import clear_cli_context
from aniposter.cli.typer_app import app
from aniposter.services.card_service import CardService
from aniposter.services.image_cache import PersistentImageCache
from aniposter.shared.constants import CLIDefaults

NARUTO_URL = "https://cdn.myanimelist.net/images/anime/13/17405.jpg"
BLEACH_URL = "https://cdn.myanimelist.net/images/anime/3/40451.jpg"
DEATH_NOTE_URL = "https://cdn.myanimelist.net/images/anime/9/9453.jpg"

runner = CliRunner()


def _json_lines(output: str) -> list[dict]:
    """JSON objects written to stdout; log lines are skipped."""
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


@pytest.fixture(autouse=True)
def cli_env(monkeypatch: pytest.MonkeyPatch, cache_path: Path) -> None:
    monkeypatch.setenv("ANIPOSTER_CACHE__PATH", str(cache_path))
    monkeypatch.setenv("ANIPOSTER_PIPELINE__RATE_LIMIT_DELAY", "0")
    clear_cli_context()


@pytest.fixture
def stub_service(mocker, provider_factory, result_factory):
    provider = provider_factory(
        {
            "Naruto": [result_factory("Naruto", NARUTO_URL)],
            "Bleach": [result_factory("Bleach", BLEACH_URL)],
            "Death Note": [result_factory("Death Note", DEATH_NOTE_URL)],
        }
    )
    mocker.patch(
        "aniposter.cli.resolve_handler.CardService",
        side_effect=lambda settings: CardService(settings, provider=provider),
    )
    return provider


@pytest.fixture
def payload_file(temp_dir: Path) -> Path:
    path = temp_dir / "recommendations.json"
    path.write_text(
        json.dumps(
            {
                "recommendations": [
                    {"name": "Naruto", "genre": "Action, Adventure", "rating": 8.1},
                    {"name": "Bleach", "genre": "Action", "rating": 7.9},
                    {"name": "One Piece", "genre": "Adventure", "rating": 8.7},
                    {"name": "Death Note", "genre": "Mystery", "rating": 8.6},
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


class TestGlobalOptions:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "AniPoster v0.1.0" in result.stdout

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])

        assert "resolve" in result.output

    def test_short_version_flag(self) -> None:
        result = runner.invoke(app, ["-V"])

        assert result.exit_code == 0
        assert "AniPoster v0.1.0" in result.stdout

    def test_json_flag_is_spelled_json(self) -> None:
        result = runner.invoke(app, ["--json", "variations", "Naruto"])

        assert result.exit_code == 0
        assert _json_lines(result.stdout)[-1]["command"] == "variations"

    def test_verbose_flag_counts_repeats(self, mocker) -> None:
        set_context = mocker.patch("aniposter.cli.typer_app.set_cli_context")

        result = runner.invoke(app, ["-vv", "variations", "Naruto"])

        assert result.exit_code == 0
        context = set_context.call_args.args[0]
        assert context.verbose == 2
        assert context.get_effective_log_level() == "DEBUG"

    def test_help_lists_global_options(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COLUMNS", "200")
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for flag in ("--json", "--verbose", "--version", "--log-level"):
            assert flag in result.stdout
        assert "--json-output" not in result.stdout


class TestResolveCommand:
    def test_resolve_json_stream(self, stub_service, payload_file: Path, cache_path: Path) -> None:
        # When
        result = runner.invoke(app, ["--json", "--log-level", "ERROR", "resolve", str(payload_file)])

        # Then
        assert result.exit_code == CLIDefaults.EXIT_SUCCESS
        lines = _json_lines(result.stdout)
        events = [line for line in lines if "event" in line]
        summary = lines[-1]

        assert sorted(e["name"] for e in events if e["event"] == "card_ready") == [
            "Bleach",
            "Death Note",
            "Naruto",
        ]
        assert [e["event"] for e in events].count("first_batch_done") == 1
        assert summary["success"] is True
        assert summary["data"]["resolved"] == 3
        cards = summary["data"]["cards"]
        assert [(c["name"], c["image_url"]) for c in cards] == [
            ("Naruto", NARUTO_URL),
            ("Bleach", BLEACH_URL),
            ("One Piece", None),
            ("Death Note", DEATH_NOTE_URL),
        ]
        assert cards[0]["search_url"] == "https://www.google.com/search?q=Naruto+anime"
        assert cards[2]["search_url"] is None
        assert cache_path.exists()

    def test_resolve_human_output(
        self, stub_service, payload_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("COLUMNS", "200")
        result = runner.invoke(app, ["--log-level", "ERROR", "resolve", str(payload_file)])

        assert result.exit_code == CLIDefaults.EXIT_SUCCESS
        assert "Resolved 3 of 4 titles" in result.stdout
        assert CLIDefaults.PLACEHOLDER in result.stdout

    def test_resolve_from_stdin(self, stub_service) -> None:
        result = runner.invoke(
            app,
            ["--json", "--log-level", "ERROR", "resolve", "-"],
            input=json.dumps([{"name": "Bleach"}]),
        )

        assert result.exit_code == CLIDefaults.EXIT_SUCCESS
        assert _json_lines(result.stdout)[-1]["data"]["resolved"] == 1

    def test_nothing_resolved_exit_code(self, stub_service) -> None:
        result = runner.invoke(
            app,
            ["--json", "--log-level", "ERROR", "resolve", "-"],
            input=json.dumps([{"name": "One Piece"}]),
        )

        assert result.exit_code == CLIDefaults.EXIT_NO_RESULTS

    def test_message_only_payload(self, stub_service) -> None:
        result = runner.invoke(
            app,
            ["--json", "--log-level", "ERROR", "resolve", "-"],
            input=json.dumps({"message": "No anime matched your filters"}),
        )

        assert result.exit_code == CLIDefaults.EXIT_NO_RESULTS
        envelope = _json_lines(result.stdout)[-1]
        assert envelope["success"] is False
        assert envelope["errors"] == ["No anime matched your filters"]

    def test_missing_payload_file(self, stub_service, temp_dir: Path) -> None:
        result = runner.invoke(app, ["--json", "--log-level", "ERROR", "resolve", str(temp_dir / "absent.json")])

        assert result.exit_code == CLIDefaults.EXIT_ERROR
        assert _json_lines(result.stdout)[-1]["data"]["error_code"] == "FILE_READ_ERROR"

    def test_invalid_json_payload(self, stub_service) -> None:
        result = runner.invoke(app, ["--json", "--log-level", "ERROR", "resolve", "-"], input="{oops")

        assert result.exit_code == CLIDefaults.EXIT_ERROR
        assert _json_lines(result.stdout)[-1]["data"]["error_code"] == "INVALID_PAYLOAD"

    def test_no_cache_flag(self, stub_service, payload_file: Path, cache_path: Path) -> None:
        result = runner.invoke(app, ["--json", "--log-level", "ERROR", "resolve", "--no-cache", str(payload_file)])

        assert result.exit_code == CLIDefaults.EXIT_SUCCESS
        assert not cache_path.exists()


class TestCacheCommand:
    def _seed(self, cache_path: Path) -> None:
        cache = PersistentImageCache(cache_path)
        cache.merge("Naruto", NARUTO_URL)
        cache.flush()

    def test_stats_on_empty_cache(self) -> None:
        result = runner.invoke(app, ["--json", "--log-level", "ERROR", "cache", "--stats"])

        assert result.exit_code == 0
        assert _json_lines(result.stdout)[-1]["data"]["entries"] == 0

    def test_show_lists_entries(self, cache_path: Path) -> None:
        self._seed(cache_path)

        result = runner.invoke(app, ["--json", "--log-level", "ERROR", "cache", "--show"])

        assert _json_lines(result.stdout)[-1]["data"]["images"] == {"Naruto": NARUTO_URL}

    def test_human_stats(self, cache_path: Path) -> None:
        self._seed(cache_path)

        result = runner.invoke(app, ["--log-level", "ERROR", "cache"])

        assert result.exit_code == 0
        assert "Entries" in result.stdout

    def test_clear(self, cache_path: Path) -> None:
        self._seed(cache_path)

        result = runner.invoke(app, ["--log-level", "ERROR", "cache", "--clear"])

        assert result.exit_code == 0
        assert not cache_path.exists()

    def test_cache_file_override(self, temp_dir: Path) -> None:
        other = temp_dir / "other.json"
        self._seed(other)

        result = runner.invoke(
            app, ["--json", "--log-level", "ERROR", "cache", "--show", "--cache-file", str(other)]
        )

        assert _json_lines(result.stdout)[-1]["data"]["entries"] == 1


class TestVariationsCommand:
    def test_json(self) -> None:
        result = runner.invoke(app, ["--json", "variations", "Attack on Titan: Season 2"])

        assert result.exit_code == 0
        data = _json_lines(result.stdout)[-1]["data"]
        assert data["normalized"] == "Attack on Titan"
        assert data["variations"] == [
            "Attack on Titan: Season 2",
            "Attack on Titan",
            "Attack on Titan",
            "Attack",
        ]

    def test_human(self) -> None:
        result = runner.invoke(app, ["variations", "Naruto"])

        assert result.exit_code == 0
        assert "Normalized: Naruto" in result.stdout
