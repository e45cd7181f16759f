"""Tests for the sync engine."""

import os
import stat

import pytest

from assetsync.catalog import ICON_FONT_PACKAGE, AssetCatalog, AssetGroup, PackageAssetSpec, default_catalog
from assetsync.errors import ConfigurationError, UnsupportedPackageError
from assetsync.sync import file_ops
from assetsync.sync.engine import GroupSummary, SyncEngine


def snapshot(root):
    """Map every file under root to its bytes and mode."""
    files = {}
    for directory, _, names in os.walk(root):
        for name in names:
            path = os.path.join(directory, name)
            with open(path, "rb") as file_handle:
                files[os.path.relpath(path, root)] = (file_handle.read(), stat.S_IMODE(os.stat(path).st_mode))
    return files


def test_sync_copies_package(engine, reporter, tmp_path):
    """Test that a supported package lands in the webroot with the configured mask."""
    summaries = engine.process_package("pkg/a")

    copied = tmp_path / "web" / "css" / "a.css"
    assert copied.read_text() == "body{}"
    assert stat.S_IMODE(copied.stat().st_mode) == 0o644
    assert summaries == [GroupSummary(package_id="pkg/a", group="css", copied=1, total=1)]
    assert reporter.groups == summaries
    assert summaries[0].complete is True


def test_summary_message():
    summary = GroupSummary(package_id="twbs/bootstrap", group="css", copied=1, total=2)

    assert str(summary) == "twbs/bootstrap (css) - 1/2 files copied"
    assert summary.complete is False


def test_sync_missing_source(engine, reporter, source_root, tmp_path, read_log):
    """Test that a missing source file is tallied, logged once at ERROR, and not created."""
    (source_root / "css" / "a.css").unlink()

    summaries = engine.process_package("pkg/a")

    assert not (tmp_path / "web" / "css" / "a.css").exists()
    assert summaries[0].copied == 0
    assert summaries[0].total == 1
    assert reporter.groups[0].complete is False
    errors = [line for line in read_log() if "[ERROR]" in line]
    assert len(errors) == 1
    assert "a.css" in errors[0]


def test_unsupported_package(engine, tmp_path, read_log):
    """Test that an unknown package raises without touching the filesystem."""
    before = snapshot(tmp_path)

    with pytest.raises(UnsupportedPackageError) as excinfo:
        engine.process_package("pkg/z")

    error = excinfo.value
    assert isinstance(error, ConfigurationError)
    assert error.supported == ["pkg/a", "pkg/b"]
    assert "pkg/a, pkg/b" in str(error)
    assert "pkg/z" in str(error)
    assert snapshot(tmp_path) == before
    assert not (tmp_path / "web").exists()


def test_empty_groups_are_skipped(engine, reporter):
    """Test that groups without files produce no summary."""
    summaries = engine.process_package("pkg/b")

    assert [summary.group for summary in summaries] == ["js"]
    assert summaries[0].copied == 2
    assert summaries[0].total == 2


def test_sync_twice_is_idempotent(engine, tmp_path):
    """Test that a second run leaves the same files, contents and modes."""
    engine.process_package("pkg/a")
    engine.process_package("pkg/b")
    first = snapshot(tmp_path / "web")

    engine.process_package("pkg/a")
    engine.process_package("pkg/b")

    assert snapshot(tmp_path / "web") == first


def test_stale_destination_file_is_replaced(engine, tmp_path):
    """Test that delete-then-copy overwrites an older published file, even a read-only one."""
    stale = tmp_path / "web" / "css" / "a.css"
    stale.parent.mkdir(parents=True)
    stale.write_text("old{}")
    os.chmod(stale, 0o400)

    engine.process_package("pkg/a")

    assert stale.read_text() == "body{}"
    assert stat.S_IMODE(stale.stat().st_mode) == 0o644


def test_deletes_finish_before_copies(engine, monkeypatch):
    """Test that every delete of a group happens before its first copy."""
    calls = []
    real_delete = file_ops.delete_file
    real_copy = file_ops.copy_file

    def recording_delete(path):
        calls.append(("delete", os.path.basename(path)))
        return real_delete(path)

    def recording_copy(source, destination, permissions=file_ops.DEFAULT_PERMISSIONS):
        calls.append(("copy", os.path.basename(destination)))
        return real_copy(source, destination, permissions)

    monkeypatch.setattr(file_ops, "delete_file", recording_delete)
    monkeypatch.setattr(file_ops, "copy_file", recording_copy)

    engine.process_package("pkg/b")

    assert calls == [("delete", "a.js"), ("delete", "b.js"), ("copy", "a.js"), ("copy", "b.js")]


def test_failed_delete_keeps_old_file(engine, tmp_path, monkeypatch):
    """Test that a file which cannot be deleted is left in place and the copy still runs."""
    published = tmp_path / "web" / "js" / "a.js"
    published.parent.mkdir(parents=True)
    published.write_text("old")

    def refuse_delete(path):
        raise PermissionError("locked")

    def refuse_copy(source, destination):
        raise OSError("locked")

    monkeypatch.setattr(file_ops.os, "remove", refuse_delete)
    monkeypatch.setattr(file_ops.shutil, "copyfile", refuse_copy)

    summaries = engine.process_package("pkg/b")

    assert published.read_text() == "old"
    assert summaries[0].copied == 0


def test_process_packages_isolates_failures(engine, reporter, tmp_path):
    """Test that an unsupported package in a batch does not stop the others."""
    results = engine.process_packages(["pkg/z", "pkg/a"])

    assert [result.package_id for result in results] == ["pkg/z", "pkg/a"]
    assert results[0].ok is False
    assert "not supported" in results[0].error
    assert results[1].ok is True
    assert results[1].complete is True
    assert (tmp_path / "web" / "css" / "a.css").exists()
    assert len(reporter.errors) == 1
    assert reporter.errors[0][0] == "pkg/z"
    assert isinstance(reporter.errors[0][1], UnsupportedPackageError)


def test_process_packages_defaults_to_all(engine, tmp_path):
    """Test that an empty batch processes every supported package."""
    results = engine.process_packages()

    assert [result.package_id for result in results] == ["pkg/a", "pkg/b"]
    assert (tmp_path / "web" / "css" / "a.css").exists()
    assert (tmp_path / "web" / "js" / "b.js").exists()


def test_partial_result_is_not_complete(engine, source_root):
    (source_root / "js" / "b.js").unlink()

    results = engine.process_packages(["pkg/b"])

    assert results[0].ok is True
    assert results[0].complete is False


def test_relative_paths_resolve_against_project_root(tmp_path, reporter):
    """Test that relative catalog paths are anchored at the project root."""
    project = tmp_path / "project"
    (project / "vendor" / "acme" / "dist").mkdir(parents=True)
    (project / "vendor" / "acme" / "dist" / "acme.js").write_text("acme();")
    catalog = AssetCatalog.from_specs([
        PackageAssetSpec(
            package_id="acme/lib",
            groups={"js": AssetGroup(source_dir="vendor/acme/dist", destination_dir="js", files=("acme.js",))},
        ),
    ])

    engine = SyncEngine(catalog, project_root=project, reporter=reporter)
    engine.process_package("acme/lib")

    assert (project / "webroot" / "js" / "acme.js").read_text() == "acme();"


def test_custom_post_processor(catalog, reporter, tmp_path):
    """Test that registered post-processors run once after all groups."""
    seen = []

    def record(webroot):
        seen.append(webroot)
        return True

    engine = SyncEngine(catalog, reporter=reporter, post_processors={"pkg/b": record})
    engine.process_package("pkg/b")
    engine.process_package("pkg/a")

    assert seen == [str(tmp_path / "web")]
    assert len(reporter.infos) == 1


@pytest.fixture
def bootstrap_project(tmp_path):
    """Lay out vendor/ the way Composer installs the Bootstrap packages."""
    dist = tmp_path / "vendor" / "twbs" / "bootstrap" / "dist"
    font = tmp_path / "vendor" / "twbs" / "bootstrap-icons" / "font"
    popper = tmp_path / "vendor" / "popperjs" / "core" / "dist" / "umd"
    for directory in (dist / "css", dist / "js", font / "fonts", popper):
        directory.mkdir(parents=True)
    for name in ("bootstrap.min.css", "bootstrap.min.css.map"):
        (dist / "css" / name).write_text(name)
    for name in ("bootstrap.min.js", "bootstrap.min.js.map"):
        (dist / "js" / name).write_text(name)
    (font / "bootstrap-icons.min.css").write_text(
        '@font-face{src:url("fonts/bootstrap-icons.woff2?x") format("woff2"),'
        'url("fonts/bootstrap-icons.woff?x") format("woff")}'
    )
    (font / "fonts" / "bootstrap-icons.woff").write_bytes(b"wOFF")
    (font / "fonts" / "bootstrap-icons.woff2").write_bytes(b"wOF2")
    (popper / "popper.min.js").write_text("popper")
    return tmp_path


def test_default_catalog_end_to_end(bootstrap_project, reporter):
    """Test publishing every default package and fixing the icon font paths."""
    engine = SyncEngine(default_catalog(), project_root=bootstrap_project, reporter=reporter)

    results = engine.process_packages()

    assert all(result.complete for result in results)
    webroot = bootstrap_project / "webroot"
    assert sorted(os.listdir(webroot / "css")) == ["bootstrap-icons.min.css", "bootstrap.min.css", "bootstrap.min.css.map"]
    assert sorted(os.listdir(webroot / "js")) == ["bootstrap.min.js", "bootstrap.min.js.map", "popper.min.js"]
    assert (webroot / "fonts" / "bootstrap-icons.woff2").read_bytes() == b"wOF2"

    css = (webroot / "css" / "bootstrap-icons.min.css").read_text()
    assert 'url("../fonts/bootstrap-icons.woff2?x")' in css
    assert 'url("../fonts/bootstrap-icons.woff?x")' in css
    assert reporter.infos == [f"✓ {ICON_FONT_PACKAGE} stylesheet font paths corrected"]

    engine.process_package(ICON_FONT_PACKAGE)
    assert (webroot / "css" / "bootstrap-icons.min.css").read_text() == css


def test_empty_paths_resolve_to_project_root(tmp_path):
    engine = SyncEngine(AssetCatalog(), project_root=tmp_path)

    assert engine.resolve("") == str(tmp_path)
    assert SyncEngine(AssetCatalog()).resolve("") == os.curdir


def test_empty_source_dir_never_reads_filesystem_root(tmp_path, reporter):
    """Test that a group with an empty source directory reads from the project root, not /."""
    project = tmp_path / "project"
    project.mkdir()
    group = AssetGroup.model_construct(source_dir="", destination_dir="out", files=("etc/hostname",))
    catalog = AssetCatalog.from_specs(
        [PackageAssetSpec(package_id="acme/etc", groups={"etc": group})],
        webroot=str(tmp_path / "web"),
    )

    summaries = SyncEngine(catalog, project_root=project, reporter=reporter).process_package("acme/etc")

    assert summaries[0].copied == 0
    assert not (tmp_path / "web" / "out" / "etc" / "hostname").exists()


def test_empty_webroot_publishes_under_project_root(tmp_path, source_root, reporter):
    catalog = AssetCatalog.from_specs([
        PackageAssetSpec(
            package_id="pkg/a",
            groups={"css": AssetGroup(source_dir=str(source_root / "css"), destination_dir="", files=("a.css",))},
        ),
    ]).with_webroot("")
    project = tmp_path / "project"
    project.mkdir()

    SyncEngine(catalog, project_root=project, reporter=reporter).process_package("pkg/a")

    assert (project / "a.css").read_text() == "body{}"


def test_duplicate_file_names_count_once(tmp_path, source_root, reporter):
    """Test that a group naming a file twice is still reported as complete."""
    group = AssetGroup.model_construct(
        source_dir=str(source_root / "css"), destination_dir="css", files=("a.css", "a.css")
    )
    catalog = AssetCatalog.from_specs(
        [PackageAssetSpec(package_id="pkg/a", groups={"css": group})],
        webroot=str(tmp_path / "web"),
    )

    summaries = SyncEngine(catalog, reporter=reporter).process_package("pkg/a")

    assert summaries == [GroupSummary(package_id="pkg/a", group="css", copied=1, total=1)]
