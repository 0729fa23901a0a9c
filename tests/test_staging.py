import pytest

from releasesmith.exceptions import BuildError
from releasesmith.staging import StagingArea, refresh_directory


def test_refresh_creates_missing_directory(tmp_path):
    target = tmp_path / "staging"
    refresh_directory(target)
    assert target.is_dir()


def test_refresh_wipes_previous_contents(tmp_path):
    staging = StagingArea(tmp_path / "staging")
    nested = staging.path("old", "deep")
    nested.mkdir(parents=True)
    (nested / "file.dll").write_bytes(b"x")
    (staging.root / "stale.exe").write_bytes(b"x")

    staging.refresh()

    assert list(staging.root.iterdir()) == []


def test_refresh_fails_when_parent_is_a_file(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(BuildError) as exc_info:
        refresh_directory(blocker / "staging")

    assert exc_info.value.path == str(blocker / "staging")


def test_copy_template_files_copies_only_top_level_files(tmp_path):
    template = tmp_path / "template"
    (template / "sub").mkdir(parents=True)
    (template / "AppRun").write_text("run", encoding="utf-8")
    (template / "sub" / "ignored.txt").write_text("no", encoding="utf-8")
    staging = StagingArea(tmp_path / "staging")
    staging.refresh()

    target = staging.copy_template_files(template, "App.AppDir")

    assert sorted(p.name for p in target.iterdir()) == ["AppRun"]


def test_copy_template_files_missing_template(tmp_path):
    staging = StagingArea(tmp_path / "staging")
    staging.refresh()

    with pytest.raises(BuildError, match="Cannot copy template"):
        staging.copy_template_files(tmp_path / "absent", "App.AppDir")


def test_copy_template_tree_replaces_existing(tmp_path):
    template = tmp_path / "bundle"
    (template / "Contents").mkdir(parents=True)
    (template / "Contents" / "Info.plist").write_text("plist", encoding="utf-8")
    staging = StagingArea(tmp_path / "staging")
    staging.refresh()
    leftover = staging.path("App.app", "leftover")
    leftover.parent.mkdir(parents=True)
    leftover.write_text("old", encoding="utf-8")

    target = staging.copy_template_tree(template, "App.app")

    assert (target / "Contents" / "Info.plist").read_text(encoding="utf-8") == "plist"
    assert not leftover.exists()


def test_copy_template_tree_missing_template(tmp_path):
    staging = StagingArea(tmp_path / "staging")
    staging.refresh()

    with pytest.raises(BuildError) as exc_info:
        staging.copy_template_tree(tmp_path / "absent", "App.app")

    assert exc_info.value.path == str(tmp_path / "absent")
