import pytest

from patternhub.core.locale import LocaleContext, dump_localized, parse_localized
from patternhub.core.text import slug_from_names, slugify, unique_slug


def test_resolve_picks_first_supported_candidate():
    assert LocaleContext.resolve(None, "fr", "en").locale == "en"
    assert LocaleContext.resolve("zh", "en").locale == "zh"
    assert LocaleContext.resolve().locale == "zh"


def test_pick_prefers_locale_then_fallback_then_anything():
    ctx = LocaleContext("en")
    assert ctx.pick({"en": "Singleton", "zh": "单例"}) == "Singleton"
    assert ctx.pick({"zh": "单例"}) == "单例"
    assert ctx.pick({"fr": "Singleton (fr)"}) == "Singleton (fr)"
    assert ctx.pick({}, default="n/a") == "n/a"


def test_localized_columns_round_trip_and_tolerate_garbage():
    raw = dump_localized({"zh": "单例", "en": "", "de": None})
    assert raw == '{"zh": "单例"}'
    assert parse_localized(raw) == {"zh": "单例"}
    assert parse_localized("not json") == {}
    assert parse_localized("[1, 2]") == {}
    assert parse_localized(None) == {}


@pytest.mark.parametrize(
    "text, slug",
    [
        ("Factory Method", "factory-method"),
        ("  Chain of Responsibility!! ", "chain-of-responsibility"),
        ("Café Décor", "cafe-decor"),
        ("单例模式", ""),
    ],
)
def test_slugify(text, slug):
    assert slugify(text) == slug


def test_slug_from_names_follows_locale_order():
    names = {"zh": "单例模式", "en": "Singleton", "de": "Einzelstück"}
    assert slug_from_names(names, ["zh", "en"]) == "singleton"
    assert slug_from_names({"zh": "单例模式"}, ["zh", "en"]) == ""


def test_unique_slug_appends_counter():
    taken = {"singleton", "singleton-2"}
    assert unique_slug("singleton", taken.__contains__) == "singleton-3"
    assert unique_slug("builder", taken.__contains__) == "builder"
