"""Tests for the sync-folders command-line entry point."""

import io
import json
import textwrap

import pytest

from sync_folders import __version__
from sync_folders.cli import main, run
from sync_folders.sync.progress import TqdmProgress


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Keep config discovery and env overrides away from the real machine."""
    for key in (
        "SYNC_FOLDERS_CONFIG",
        "SYNC_FOLDERS_PROGRESS",
        "SYNC_FOLDERS_DRY_RUN",
        "SYNC_FOLDERS_DEBUG",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


class TestUsage:
    def test_no_arguments_is_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run([])
        assert exc_info.value.code == 2
        assert "usage:" in capsys.readouterr().err

    def test_one_argument_is_usage_error(self, src_dir, dest_dir):
        with pytest.raises(SystemExit) as exc_info:
            run([str(src_dir)])
        assert exc_info.value.code == 2
        # Nothing was touched
        assert list(dest_dir.iterdir()) == []

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestRun:
    def test_sync_and_report(self, make_file, src_dir, dest_dir, capsys):
        make_file(src_dir, "a.txt", "alpha", mtime=100)
        make_file(dest_dir, "stale.txt", "old")

        run([str(src_dir), str(dest_dir), "--progress", "none"])

        assert (dest_dir / "a.txt").read_text() == "alpha"
        assert not (dest_dir / "stale.txt").exists()
        out = capsys.readouterr().out
        assert "Processed 2 files: 1 copied, 1 deleted" in out

    def test_relative_paths_resolved(self, make_file, tmp_path, capsys):
        make_file(tmp_path, "rel-src/a.txt", "1")

        run(["rel-src", "rel-dest", "--progress", "none"])

        assert (tmp_path / "rel-dest" / "a.txt").read_text() == "1"
        assert str(tmp_path.resolve() / "rel-dest") in capsys.readouterr().out

    def test_json_output(self, make_file, src_dir, dest_dir, capsys):
        make_file(src_dir, "a.txt", "1")

        run([str(src_dir), str(dest_dir), "--progress", "none", "--json"])

        data = json.loads(capsys.readouterr().out)
        assert data["counts"]["copied_new"] == 1
        assert data["results"] == [
            {"path": "a.txt", "action": "copy_new", "success": True}
        ]

    def test_dry_run_prints_preview(self, make_file, src_dir, dest_dir, capsys):
        make_file(src_dir, "a.txt", "1")
        make_file(dest_dir, "b.txt", "2")

        run([str(src_dir), str(dest_dir), "--progress", "none", "--dry-run"])

        out = capsys.readouterr().out
        assert "DRY RUN" in out
        assert "[COPY NEW]\n  a.txt" in out
        assert "[DELETE]\n  b.txt" in out
        assert not (dest_dir / "a.txt").exists()
        assert (dest_dir / "b.txt").exists()

    def test_percent_progress_on_stderr(self, make_file, src_dir, dest_dir, capsys):
        make_file(src_dir, "a.txt", "1")

        run([str(src_dir), str(dest_dir), "--progress", "percent"])

        assert "Progress: 100%" in capsys.readouterr().err

    def test_yaml_config_applies(self, make_file, src_dir, dest_dir, tmp_path, capsys):
        make_file(src_dir, "a.txt", "1")
        config_file = tmp_path / ".sync_folders" / "config.yml"
        config_file.parent.mkdir()
        config_file.write_text(
            textwrap.dedent("""\
            sync:
              dry_run: true
              progress: none
            """)
        )

        run([str(src_dir), str(dest_dir)])

        assert "DRY RUN" in capsys.readouterr().out
        assert not (dest_dir / "a.txt").exists()


class TestErrors:
    def test_enumeration_error_exits_nonzero(self, make_file, tmp_path, dest_dir):
        not_a_dir = make_file(tmp_path, "file.txt", "x")
        make_file(dest_dir, "keep.txt", "k")

        with pytest.raises(SystemExit) as exc_info:
            run([str(not_a_dir), str(dest_dir), "--progress", "none"])

        assert exc_info.value.code == 1
        assert (dest_dir / "keep.txt").exists()

    def test_invalid_yaml_exits_nonzero(self, tmp_path, src_dir, dest_dir, capsys):
        config_file = tmp_path / ".sync_folders" / "config.yml"
        config_file.parent.mkdir()
        config_file.write_text("sync: [unclosed\n")

        with pytest.raises(SystemExit) as exc_info:
            run([str(src_dir), str(dest_dir)])

        assert exc_info.value.code == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_missing_explicit_config_exits_nonzero(
        self, tmp_path, src_dir, dest_dir, monkeypatch, capsys
    ):
        monkeypatch.setenv("SYNC_FOLDERS_CONFIG", str(tmp_path / "gone.yml"))

        with pytest.raises(SystemExit) as exc_info:
            run([str(src_dir), str(dest_dir)])

        assert exc_info.value.code == 1
        assert "gone.yml" in capsys.readouterr().err

    def test_invalid_env_progress_exits_nonzero(
        self, src_dir, dest_dir, monkeypatch, capsys
    ):
        monkeypatch.setenv("SYNC_FOLDERS_PROGRESS", "sparkles")

        with pytest.raises(SystemExit) as exc_info:
            run([str(src_dir), str(dest_dir)])

        assert exc_info.value.code == 1
        assert "Invalid progress mode" in capsys.readouterr().err

    def test_per_file_errors_do_not_change_exit(
        self, make_file, src_dir, dest_dir, capsys
    ):
        make_file(src_dir, "x.txt", "x", mtime=100)
        make_file(dest_dir, "x.txt/blocker", "b")

        run([str(src_dir), str(dest_dir), "--progress", "none"])

        assert "Errors:\n  x.txt (copy_changed)" in capsys.readouterr().out


async def test_main_with_tqdm_bar(make_config, make_file, src_dir, dest_dir):
    make_file(src_dir, "a.txt", "1")
    make_file(src_dir, "b.txt", "2")
    stream = io.StringIO()

    report = await main(make_config(progress="bar"), progress=TqdmProgress(stream))

    assert len(report.copied_new) == 2
    assert "Syncing" in stream.getvalue()
