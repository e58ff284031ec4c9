"""Tests for the import and extract-handles command-line entry points."""

from __future__ import annotations

import csv
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from influencer_crm.importer.cli import build_extract_parser, build_import_parser, main

CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "import_fields.yaml"


def _write_csv(path: Path, header: list[str], rows: list[list[str]]) -> Path:
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(header)
        writer.writerows(rows)
    return path


class TestParsers:
    def test_import_defaults(self) -> None:
        args = build_import_parser().parse_args(["people.csv"])
        assert args.csv_path == Path("people.csv")
        assert args.dry_run is False
        assert args.delay == 1.0
        assert args.config is None

    def test_import_flags(self) -> None:
        args = build_import_parser().parse_args(
            ["people.csv", "--dry-run", "--delay", "0.5", "--config", "alt.yaml"]
        )
        assert args.dry_run is True
        assert args.delay == 0.5
        assert args.config == Path("alt.yaml")

    def test_extract_defaults(self) -> None:
        args = build_extract_parser().parse_args(["posts.csv", "out.csv"])
        assert args.output_path == Path("out.csv")
        assert args.apify_export is None
        assert args.delay == 2.0


class TestMain:
    def test_dry_run_import(self, tmp_path, fake_db, settings, capsys) -> None:
        sheet = _write_csv(
            tmp_path / "people.csv",
            ["Name", "IG", "Campaign"],
            [["Jane", "@jane", "NOV25"], ["Sam", "", ""]],
        )
        settings = settings.model_copy(update={"import_fields_path": CONFIG_PATH})

        with (
            patch("influencer_crm.importer.cli.get_settings", return_value=settings),
            patch("influencer_crm.importer.cli.create_supabase_client", return_value=fake_db),
        ):
            exit_code = main([str(sheet), "--dry-run", "--delay", "0"])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "Found 2 rows" in out
        assert "Dry run complete: 1 created, 1 skipped, 1 campaign links, 0 errors" in out
        assert fake_db.tables["influencers"] == []

    def test_missing_config_raises(self, tmp_path, settings) -> None:
        sheet = _write_csv(tmp_path / "people.csv", ["Name"], [["Jane"]])
        with (
            patch("influencer_crm.importer.cli.get_settings", return_value=settings),
            pytest.raises(FileNotFoundError),
        ):
            main([str(sheet), "--config", str(tmp_path / "nope.yaml")])

    def test_extract_handles_uses_scraper_export(self, tmp_path, settings, capsys) -> None:
        sheet = _write_csv(
            tmp_path / "posts.csv",
            ["Name", "IG"],
            [
                ["Jane", "https://www.instagram.com/p/AAA/"],
                ["Sam", "https://www.instagram.com/p/ZZZ/"],
            ],
        )
        export = _write_csv(
            tmp_path / "dataset.csv",
            ["shortCode", "url", "ownerUsername"],
            [["AAA", "https://www.instagram.com/p/AAA/", "jane.doe"]],
        )
        output = tmp_path / "handles.csv"

        async def no_author(http: httpx.AsyncClient, post_url: str) -> None:
            return None

        with (
            patch("influencer_crm.importer.cli.get_settings", return_value=settings),
            patch("influencer_crm.instagram.matching.fetch_oembed_author", no_author),
        ):
            exit_code = main(
                [
                    "extract-handles",
                    str(sheet),
                    str(output),
                    "--apify-export",
                    str(export),
                    "--delay",
                    "0",
                    "--config",
                    str(CONFIG_PATH),
                ]
            )

        assert exit_code == 0
        with output.open(newline="", encoding="utf-8") as fh:
            rows = list(csv.DictReader(fh))
        assert [(r["name"], r["handle"], r["status"]) for r in rows] == [
            ("Jane", "jane.doe", "found"),
            ("Sam", "", "not_found"),
        ]
        assert "Summary: 1 handles found, 1 not found" in capsys.readouterr().out
