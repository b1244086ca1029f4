import logging
import os

import pytest

from src_catalog import cli


def test_main_writes_default_output(tmp_path, monkeypatch, capsys):
    (tmp_path / "index.ts").write_text("export const x = 1;\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert cli.main([]) == 0

    out = tmp_path / "src-catalog.md"
    assert out.exists()
    assert "### index.ts" in out.read_text(encoding="utf-8")
    assert capsys.readouterr().out == "Wrote src-catalog.md with 1 files.\n"


def test_main_uses_explicit_output(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)

    assert cli.main(["catalog.md"]) == 0

    assert (tmp_path / "catalog.md").exists()
    assert not (tmp_path / "src-catalog.md").exists()
    assert capsys.readouterr().out == "Wrote catalog.md with 0 files.\n"


def test_main_missing_root_exits_nonzero(tmp_path, caplog, capsys):
    missing = tmp_path / "missing"

    with caplog.at_level(logging.WARNING):
        assert cli.main([], root=missing) == 1

    assert "No source directory found at:" in caplog.text
    assert not missing.exists()
    assert capsys.readouterr().out == ""


def test_main_reports_failures(tmp_path, monkeypatch, caplog):
    def boom(root, output):
        raise PermissionError("denied")

    monkeypatch.setattr(cli, "write_catalog", boom)

    with caplog.at_level(logging.ERROR):
        assert cli.main([], root=tmp_path) == 1

    assert "Failed to write source catalog" in caplog.text
    assert "PermissionError: denied" in caplog.text


def test_main_write_failure_on_directory_output(tmp_path):
    (tmp_path / "a.ts").write_text("a", encoding="utf-8")
    (tmp_path / "out.md").mkdir()
    assert cli.main(["out.md"], root=tmp_path) == 1


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_main_read_failure_leaves_existing_output_untouched(tmp_path):
    (tmp_path / "a.ts").write_text("a", encoding="utf-8")
    os.symlink(tmp_path / "gone.ts", tmp_path / "b.ts")
    out = tmp_path / "src-catalog.md"
    out.write_text("old", encoding="utf-8")

    assert cli.main([], root=tmp_path) == 1

    assert out.read_text(encoding="utf-8") == "old"
