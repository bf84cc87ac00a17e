from patternhub.core.cache import cache
from patternhub.core.cache_keys import CacheKeys


def test_home_lists_categories_with_published_patterns(client, make_category, make_pattern):
    creational = make_category(sort_order=1)
    empty = make_category(slug="structural-patterns", name={"en": "Structural"}, sort_order=2)
    make_pattern(creational, slug="singleton")
    make_pattern(empty, slug="adapter", is_published=False)

    response = client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["locale"] == "zh"
    assert [c["slug"] for c in body["categories"]] == ["creational-patterns"]
    assert body["categories"][0]["name"] == "创建型模式"
    assert [p["slug"] for p in body["categories"][0]["patterns"]] == ["singleton"]
    assert cache.has(CacheKeys.home_categories("zh"))


def test_pattern_index_includes_empty_categories_in_sort_order(client, make_category, make_pattern):
    second = make_category(slug="behavioral-patterns", name={"en": "Behavioral"}, sort_order=2)
    first = make_category(sort_order=1)
    make_pattern(first, slug="singleton")
    make_pattern(first, slug="builder", is_published=False)

    body = client.get("/patterns", params={"lang": "en"}).json()

    assert body["locale"] == "en"
    assert [c["slug"] for c in body["categories"]] == ["creational-patterns", "behavioral-patterns"]
    assert [p["slug"] for p in body["categories"][0]["patterns"]] == ["singleton"]
    assert body["categories"][1]["patterns"] == []
    assert second.id != first.id


def test_locale_cookie_selects_language(client, make_category, make_pattern):
    make_pattern(make_category(), slug="singleton")
    body = client.get("/", headers={"cookie": "locale=en"}).json()

    assert body["locale"] == "en"
    assert body["categories"][0]["name"] == "Creational Patterns"
    assert body["categories"][0]["patterns"][0]["name"] == "Singleton"


def test_unknown_lang_falls_back_to_default(client, make_category):
    make_category()
    assert client.get("/patterns", params={"lang": "fr"}).json()["locale"] == "zh"


def test_missing_translation_falls_back_to_default_locale(client, make_category, make_pattern):
    category = make_category(name={"zh": "创建型模式"})
    make_pattern(category, name={"zh": "单例模式"})

    body = client.get("/patterns", params={"lang": "en"}).json()

    assert body["categories"][0]["name"] == "创建型模式"
    assert body["categories"][0]["patterns"][0]["name"] == "单例模式"


def test_pattern_page(client, make_category, make_pattern):
    category = make_category()
    source = "# Singleton\n\n## Structure\n\n```mermaid\ngraph TD\n    A --> B\n```\n\n## Usage\n"
    make_pattern(category, slug="singleton", content={"en": source}, sort_order=1)
    for n in range(4):
        make_pattern(category, slug=f"other-{n}", name={"en": f"Other {n}"}, sort_order=n + 2)
    make_pattern(category, slug="draft", is_published=False, sort_order=0)

    response = client.get("/patterns/singleton", params={"lang": "en"})

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Singleton"
    assert body["content_locale"] == "en"
    assert body["content_pending"] is False
    assert '<div class="mermaid">graph TD\n    A --> B</div>' in body["html"]
    assert [h["anchor"] for h in body["table_of_contents"]] == ["singleton", "structure", "usage"]
    assert body["category"]["slug"] == "creational-patterns"
    assert [p["slug"] for p in body["related_patterns"]] == ["other-0", "other-1", "other-2"]
    assert body["available_locales"] == ["en", "zh"]


def test_pattern_page_falls_back_to_default_content(client, make_category, make_pattern):
    make_pattern(make_category(), slug="singleton", content={"zh": "# 单例\n"})

    body = client.get("/patterns/singleton", params={"lang": "en"}).json()

    assert body["content_locale"] == "zh"
    assert body["content_pending"] is False
    assert "单例" in body["html"]


def test_pattern_page_placeholder_when_content_missing(client, make_category, make_pattern):
    make_pattern(make_category(), slug="singleton")

    body = client.get("/patterns/singleton", params={"lang": "en"}).json()

    assert body["content_pending"] is True
    assert "Content is being written..." in body["html"]
    assert body["table_of_contents"][0]["text"] == "Singleton"


def test_unpublished_and_unknown_patterns_are_not_found(client, make_category, make_pattern):
    make_pattern(make_category(), slug="draft", is_published=False)

    assert client.get("/patterns/draft").status_code == 404
    assert client.get("/patterns/nope").status_code == 404


def test_category_page(client, make_category, make_pattern):
    category = make_category()
    make_pattern(category, slug="singleton")
    make_pattern(category, slug="draft", is_published=False)

    response = client.get("/patterns/category/creational-patterns", params={"lang": "en"})

    assert response.status_code == 200
    body = response.json()
    assert body["category"]["name"] == "Creational Patterns"
    assert [p["slug"] for p in body["category"]["patterns"]] == ["singleton"]
    assert cache.has(CacheKeys.category_show("creational-patterns", "en"))
    assert client.get("/patterns/category/missing").status_code == 404


def test_legacy_category_routes_redirect(client):
    response = client.get("/categories", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "/patterns"

    response = client.get("/categories/creational-patterns", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "/patterns/category/creational-patterns"


def test_change_locale_sets_cookie_and_returns_to_referer(client):
    response = client.get(
        "/change-locale/en",
        headers={"referer": "http://testserver/patterns"},
        follow_redirects=False,
    )

    assert response.status_code == 302
    assert response.headers["location"] == "http://testserver/patterns"
    assert "locale=en" in response.headers["set-cookie"]


def test_change_locale_ignores_foreign_referer(client):
    response = client.get(
        "/change-locale/zh",
        headers={"referer": "https://elsewhere.example/"},
        follow_redirects=False,
    )
    assert response.headers["location"] == "/"


def test_change_locale_rejects_unsupported_locale(client):
    assert client.get("/change-locale/fr", follow_redirects=False).status_code == 400


def test_markdown_preview_requires_admin(client, auth_headers):
    assert client.post("/markdown/preview", json={"content": "# Hi"}).status_code == 401

    response = client.post("/markdown/preview", json={"content": "~~x~~"}, headers=auth_headers)
    assert response.status_code == 200
    assert "<s>x</s>" in response.json()["html"]


def test_public_pages_are_browser_cacheable(client, make_category, make_pattern):
    make_pattern(make_category())

    for path in ("/", "/patterns", "/patterns/singleton", "/patterns/category/creational-patterns"):
        response = client.get(path)
        assert response.status_code == 200
        assert response.headers["cache-control"] == "public, max-age=3600"
        assert response.headers["vary"] == "Cookie"
        assert "pragma" not in response.headers
        assert "expires" not in response.headers


def test_cache_headers_skip_errors_and_admin(client, auth_headers):
    assert "cache-control" not in client.get("/patterns/missing").headers
    admin = client.get("/admin/categories", headers=auth_headers)
    assert admin.status_code == 200
    assert "cache-control" not in admin.headers
