"""Unit tests for file-system primitives (create_velocity.composer.fs)."""

from __future__ import annotations

from pathlib import Path

import pytest

from create_velocity.composer.fs import (
    copy_overlay,
    ensure_placeholder_dirs,
    is_empty_dir,
    keep_only_files,
    remove_items,
    remove_path,
    walk_files_relative,
)


def _touch(root: Path, rel: str, content: str = "") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestCopyOverlay:
    @pytest.mark.unit
    def test_overwrites_by_default(self, tmp_path):
        src, dest = tmp_path / "overlay", tmp_path / "project"
        _touch(src, "a/b.txt", "new")
        _touch(src, "c.txt", "c")
        _touch(dest, "a/b.txt", "old")
        _touch(dest, "keep.txt", "keep")

        written = copy_overlay(src, dest)

        assert sorted(p.relative_to(dest).as_posix() for p in written) == ["a/b.txt", "c.txt"]
        assert (dest / "a/b.txt").read_text() == "new"
        assert (dest / "keep.txt").read_text() == "keep"

    @pytest.mark.unit
    def test_no_overwrite(self, tmp_path):
        src, dest = tmp_path / "overlay", tmp_path / "project"
        _touch(src, "a.txt", "new")
        _touch(dest, "a.txt", "old")
        assert copy_overlay(src, dest, overwrite=False) == []
        assert (dest / "a.txt").read_text() == "old"

    @pytest.mark.unit
    def test_missing_source(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            copy_overlay(tmp_path / "nope", tmp_path / "dest")


class TestRemoval:
    @pytest.mark.unit
    def test_remove_items_skips_missing(self, tmp_path):
        _touch(tmp_path, "yarn.lock")
        _touch(tmp_path, ".git/HEAD")
        removed = remove_items(tmp_path, ["yarn.lock", ".git", "bun.lockb"])
        assert removed == ["yarn.lock", ".git"]
        assert not (tmp_path / ".git").exists()

    @pytest.mark.unit
    def test_remove_path_missing_is_gone(self, tmp_path):
        assert remove_path(tmp_path / "ghost") is True


class TestKeepOnlyFiles:
    @pytest.mark.unit
    def test_prunes_and_removes_empty_dirs(self, tmp_path):
        _touch(tmp_path, "src/components/ui/Button.astro")
        _touch(tmp_path, "src/components/ui/Card.astro")
        _touch(tmp_path, "src/components/ui/forms/Input.astro")
        _touch(tmp_path, "src/components/patterns/Faq.astro")
        _touch(tmp_path, "src/components/layout/Header.astro")

        deleted = keep_only_files(
            tmp_path,
            ["src/components/ui", "src/components/patterns", "src/components/hero"],
            {"src/components/ui/Button.astro"},
        )

        assert sorted(deleted) == [
            "src/components/patterns/Faq.astro",
            "src/components/ui/Card.astro",
            "src/components/ui/forms/Input.astro",
        ]
        assert walk_files_relative(tmp_path, "src/components/ui") == ["src/components/ui/Button.astro"]
        assert not (tmp_path / "src/components/ui/forms").exists()
        assert not (tmp_path / "src/components/patterns").exists()
        # directories outside the filter are untouched
        assert (tmp_path / "src/components/layout/Header.astro").exists()

    @pytest.mark.unit
    def test_walk_missing_dir(self, tmp_path):
        assert walk_files_relative(tmp_path, "src/none") == []


class TestPlaceholders:
    @pytest.mark.unit
    def test_creates_missing_only(self, tmp_path):
        _touch(tmp_path, "src/content/faqs/a.md")
        created = ensure_placeholder_dirs(tmp_path, ["src/content/blog", "src/content/faqs"])
        assert created == ["src/content/blog"]
        assert (tmp_path / "src/content/blog/.gitkeep").is_file()
        assert not (tmp_path / "src/content/faqs/.gitkeep").exists()


class TestIsEmptyDir:
    @pytest.mark.unit
    def test_cases(self, tmp_path):
        assert is_empty_dir(tmp_path / "missing")
        assert is_empty_dir(tmp_path)
        (tmp_path / ".git").mkdir()
        assert is_empty_dir(tmp_path)
        _touch(tmp_path, "README.md")
        assert not is_empty_dir(tmp_path)
