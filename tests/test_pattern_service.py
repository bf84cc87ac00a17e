from patternhub.core.cache import cache
from patternhub.core.cache_keys import CacheKeys
from patternhub.services.pattern_service import PatternService


def test_get_headings_defaults_to_default_locale(conn, make_category, make_pattern):
    pattern = make_pattern(
        make_category(),
        content={"zh": "# 单例模式\n\n## 结构\n", "en": "# Singleton\n\n## Structure\n"},
    )
    service = PatternService(conn)

    headings = service.get_headings(pattern)

    assert [(h.level, h.text, h.anchor) for h in headings] == [
        (1, "单例模式", "单例模式"),
        (2, "结构", "结构"),
    ]
    assert cache.has(CacheKeys.pattern_headings(pattern.id, "zh"))
    assert [h.text for h in service.get_headings(pattern, "en")] == ["Singleton", "Structure"]


def test_get_headings_is_served_from_cache(conn, content_repo, make_category, make_pattern):
    pattern = make_pattern(make_category(), content={"zh": "# 旧标题\n"})
    service = PatternService(conn)
    service.get_headings(pattern)

    # Change the file behind the cache's back
    content_repo.save_content(pattern, "# 新标题\n", "zh")

    assert [h.text for h in service.get_headings(pattern)] == ["旧标题"]
