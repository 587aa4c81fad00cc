from __future__ import annotations

import json
from pathlib import Path

import pytest

from gutencat.cli.dump_catalog import main as dump_cli_main
from gutencat.cli.query_catalog import main as query_cli_main
from gutencat.cli.sync_catalog import main as sync_cli_main

_RDF = """<?xml version="1.0" encoding="utf-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
  xmlns:dcterms="http://purl.org/dc/terms/"
  xmlns:pgterms="http://www.gutenberg.org/2009/pgterms/">
  <pgterms:ebook rdf:about="ebooks/{book_id}">
    <dcterms:title>{title}</dcterms:title>
    <dcterms:creator><pgterms:agent><pgterms:name>{author}</pgterms:name></pgterms:agent></dcterms:creator>
    <dcterms:language><rdf:Description><rdf:value>en</rdf:value></rdf:Description></dcterms:language>
  </pgterms:ebook>
</rdf:RDF>
"""


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in (
        "GUTENCAT_DB_BACKEND",
        "GUTENCAT_DB_PATH",
        "GUTENCAT_DB_URL",
        "GUTENCAT_DOC_PREFIX",
        "GUTENCAT_DOC_EXTENSION",
        "GUTENCAT_EXCLUDE_MARKER",
        "GUTENCAT_PRELOAD_IDS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def _write_record(root: Path, book_id: str, *, title: str, author: str) -> None:
    folder = root / book_id
    folder.mkdir(parents=True)
    (folder / f"pg{book_id}.rdf").write_text(_RDF.format(book_id=book_id, title=title, author=author), encoding="utf-8")


def _library(tmp_path: Path) -> Path:
    root = tmp_path / "epub"
    _write_record(root, "1", title="Hamlet", author="Shakespeare, William")
    _write_record(root, "2", title="Emma", author="Austen, Jane")
    return root


def test_sync_cli_prints_stats_and_is_idempotent(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = _library(tmp_path)
    db_path = tmp_path / "catalog.db"

    first_exit = sync_cli_main(["--root", str(root), "--db-path", str(db_path)])
    first_payload = json.loads(capsys.readouterr().out)

    second_exit = sync_cli_main(["--root", str(root), "--db-path", str(db_path), "--preload-ids"])
    second_payload = json.loads(capsys.readouterr().out)

    assert first_exit == 0
    assert second_exit == 0
    assert first_payload["state"] == "committed"
    assert first_payload["inserted"] == 2
    assert second_payload["inserted"] == 0
    assert second_payload["skipped_existing"] == 2


def test_sync_cli_returns_one_when_records_fail(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = _library(tmp_path)
    (root / "3").mkdir()

    exit_code = sync_cli_main(["--root", str(root), "--db-path", str(tmp_path / "catalog.db")])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["inserted"] == 2
    assert payload["skipped_failed"] == 1
    assert payload["error_details"][0]["id"] == "3"


def test_sync_cli_rejects_missing_root(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = sync_cli_main(["--root", str(tmp_path / "absent"), "--db-path", str(tmp_path / "catalog.db")])

    assert exit_code == 2
    assert capsys.readouterr().out == ""


def test_sync_cli_honours_layout_from_environment(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    root = _library(tmp_path)
    monkeypatch.setenv("GUTENCAT_EXCLUDE_MARKER", "2")

    exit_code = sync_cli_main(["--root", str(root), "--db-path", str(tmp_path / "catalog.db")])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["inserted"] == 1


def test_query_cli_reports_found_and_missing_ids(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = _library(tmp_path)
    db_path = tmp_path / "catalog.db"
    sync_cli_main(["--root", str(root), "--db-path", str(db_path)])
    capsys.readouterr()

    exit_code = query_cli_main(["--id", "2,99", "--db-path", str(db_path)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["books"] == [{"id": "2", "title": "Emma", "author": "Austen, Jane", "language": "en"}]
    assert payload["missing"] == ["99"]

    all_exit = query_cli_main(["--all", "--db-path", str(db_path)])
    all_payload = json.loads(capsys.readouterr().out)

    assert all_exit == 0
    assert all_payload["count"] == 2


def test_dump_cli_writes_file_once(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = _library(tmp_path)
    db_path = tmp_path / "catalog.db"
    output = tmp_path / "catalog.txt"
    sync_cli_main(["--root", str(root), "--db-path", str(db_path)])
    capsys.readouterr()

    first_exit = dump_cli_main(["--output", str(output), "--db-path", str(db_path)])
    second_exit = dump_cli_main(["--output", str(output), "--db-path", str(db_path)])

    assert first_exit == 0
    assert second_exit == 1
    assert output.read_text(encoding="utf-8").splitlines() == [
        "1 en Hamlet Shakespeare, William",
        "2 en Emma Austen, Jane",
    ]


def test_dump_cli_on_empty_store_writes_nothing(tmp_path: Path) -> None:
    output = tmp_path / "catalog.txt"

    exit_code = dump_cli_main(["--output", str(output), "--db-path", str(tmp_path / "catalog.db")])

    assert exit_code == 1
    assert not output.exists()


def test_command_line_backend_overrides_environment(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    root = _library(tmp_path)
    monkeypatch.setenv("GUTENCAT_DB_BACKEND", "postgresql")

    exit_code = sync_cli_main(["--root", str(root), "--backend", "sqlite", "--db-path", str(tmp_path / "catalog.db")])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["inserted"] == 2
