import logging
import pytest
from pathlib import Path

from media_organizer import main as cli


def test_once_defaults(tmp_path):
    args = cli.parse_args(["once", "-s", str(tmp_path / "in"), "-d", str(tmp_path / "out")])
    opts = cli.build_options(args)

    assert args.command == "once"
    assert opts.destination_root == (tmp_path / "out").resolve()
    assert opts.enable_camera_grouping
    assert not opts.camera_grouping_is_prefix
    assert not opts.copy_instead_of_move
    assert not opts.prefer_modified_time
    assert opts.manual_camera_override is None


def test_monitor_flags(tmp_path):
    args = cli.parse_args([
        "-v", "monitor", "-s", "in", "-d", str(tmp_path),
        "-u", "--no-camera-model", "--camera-model-prefix",
        "--manual-camera-model", "GoPro", "--copy", "--keep-names", "--dry-run",
    ])
    opts = cli.build_options(args)

    assert args.verbose
    assert args.command == "monitor"
    assert opts.prefer_modified_time
    assert not opts.enable_camera_grouping
    assert opts.camera_grouping_is_prefix
    assert opts.manual_camera_override == "GoPro"
    assert opts.copy_instead_of_move
    assert opts.keep_original_filenames
    assert opts.dry_run


def test_subcommand_required():
    with pytest.raises(SystemExit):
        cli.parse_args([])


def test_main_runs_once(tmp_path, monkeypatch):
    src = tmp_path / "in"
    src.mkdir()
    (src / "notes.txt").write_text("x")
    dest = tmp_path / "out"

    # basicConfig is a no-op once pytest has handlers installed; force a clean slate
    monkeypatch.setattr(logging.getLogger(), "handlers", [])
    cli.main(["once", "-s", str(src), "-d", str(dest)])

    assert (dest / "unknown" / "notes.txt").exists()
    assert (dest / "organizer.log").exists()


def test_main_rejects_missing_source(tmp_path, monkeypatch):
    monkeypatch.setattr(logging.getLogger(), "handlers", [])
    with pytest.raises(SystemExit):
        cli.main(["once", "-s", str(tmp_path / "nope"), "-d", str(tmp_path / "out")])


def test_main_rejects_destination_equal_to_source(tmp_path, monkeypatch):
    src = tmp_path / "in"
    src.mkdir()
    (src / "a.txt").write_text("x")

    monkeypatch.setattr(logging.getLogger(), "handlers", [])
    with pytest.raises(SystemExit) as exc:
        cli.main(["once", "-s", str(src), "-d", str(src / ".." / "in")])

    assert exc.value.code == 1
    assert sorted(p.name for p in src.iterdir()) == ["a.txt"]


def test_use_modified_help_mentions_inode_change_time(capsys):
    with pytest.raises(SystemExit):
        cli.parse_args(["once", "-h"])

    out = " ".join(capsys.readouterr().out.split())
    assert "inode change time" in out
