import os
from datetime import datetime

import pytest

from patternhub.core.locale import LocaleContext
from patternhub.models.pattern import Pattern
from patternhub.repositories.content_repository import ContentRepository


def _pattern(**overrides) -> Pattern:
    values = dict(
        id=7,
        category_id=1,
        slug="singleton",
        is_published=True,
        sort_order=0,
        created_at=datetime(2024, 1, 1),
        updated_at=datetime(2024, 1, 1),
        name={"zh": "单例模式", "en": "Singleton"},
    )
    values.update(overrides)
    return Pattern(**values)


@pytest.fixture
def repo(tmp_path):
    return ContentRepository(tmp_path)


def test_save_derives_path_and_writes_atomically(repo, tmp_path):
    pattern = _pattern()

    relative = repo.save_content(pattern, "# Singleton\n", "en")

    assert relative == "singleton-7.en.md"
    assert (tmp_path / relative).read_text(encoding="utf-8") == "# Singleton\n"
    assert [p.name for p in tmp_path.iterdir()] == ["singleton-7.en.md"]


def test_save_overwrites_existing_path(repo, tmp_path):
    pattern = _pattern(content_paths={"zh": "nested/custom.md"})

    relative = repo.save_content(pattern, "第一版", "zh")
    repo.save_content(pattern, "第二版", "zh")

    assert relative == "nested/custom.md"
    assert (tmp_path / "nested" / "custom.md").read_text(encoding="utf-8") == "第二版"
    assert sorted(os.listdir(tmp_path / "nested")) == ["custom.md"]


def test_requested_locale_is_served(repo):
    pattern = _pattern()
    pattern.content_paths = {
        "zh": repo.save_content(pattern, "中文", "zh"),
        "en": repo.save_content(pattern, "English", "en"),
    }

    resolved = repo.resolve(pattern, LocaleContext("en"))

    assert resolved.text == "English"
    assert resolved.locale == "en"
    assert not resolved.is_placeholder


def test_falls_back_to_default_locale(repo):
    pattern = _pattern()
    pattern.content_paths = {"zh": repo.save_content(pattern, "中文", "zh")}

    resolved = repo.resolve(pattern, LocaleContext("en"))

    assert resolved.text == "中文"
    assert resolved.locale == "zh"
    assert repo.get_content(pattern, "en") == "中文"


def test_placeholder_when_nothing_exists(repo):
    pattern = _pattern(content_paths={"en": "missing.en.md"})

    assert repo.get_content(pattern, "en") == "# Singleton\n\nContent is being written...\n"
    resolved = repo.resolve(pattern, LocaleContext("zh"))
    assert resolved.is_placeholder
    assert resolved.text == "# 单例模式\n\n内容正在编写中...\n"


def test_paths_outside_the_root_are_ignored(repo, tmp_path):
    outside = tmp_path.parent / "outside.md"
    outside.write_text("secret", encoding="utf-8")
    pattern = _pattern(content_paths={"zh": "../outside.md"})

    resolved = repo.resolve(pattern, LocaleContext("zh"))

    assert resolved.is_placeholder
    assert "secret" not in resolved.text


def test_delete_content_removes_files(repo, tmp_path):
    pattern = _pattern()
    pattern.content_paths = {
        "zh": repo.save_content(pattern, "中文", "zh"),
        "en": repo.save_content(pattern, "English", "en"),
    }

    assert repo.delete_content(pattern) == 2
    assert list(tmp_path.iterdir()) == []
