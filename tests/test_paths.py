from resourceloader.core.paths import (
    DEFAULT_KEY,
    AttributedPath,
    PlainPath,
    collate_by_option,
    prefix_path_list,
    try_for_key,
    unique,
)


def test_try_for_key_hit():
    variants = {"vector": [PlainPath("a.js")], "default": [PlainPath("d.js")]}
    assert try_for_key(variants, "vector", DEFAULT_KEY) == [PlainPath("a.js")]


def test_try_for_key_without_default_returns_empty():
    assert try_for_key({"vector": ["a.js"]}, "monobook", "default") == []


def test_try_for_key_uses_fallback():
    assert try_for_key({"default": ["d.js"]}, "monobook", "default") == ["d.js"]


def test_try_for_key_no_fallback_for_language():
    assert try_for_key({"default": ["d.js"]}, "fr") == []


def test_try_for_key_ignores_non_list_value():
    assert try_for_key({"vector": "a.js", "default": ["d.js"]}, "vector", "default") == ["d.js"]


def test_collate_plain_and_attributed():
    entries = [PlainPath("a.css"), AttributedPath("b.css", {"media": "print"})]
    assert collate_by_option(entries, "media", "all") == {"all": ["a.css"], "print": ["b.css"]}


def test_collate_bucket_order_is_first_seen():
    entries = [
        AttributedPath("p.css", {"media": "print"}),
        PlainPath("a.css"),
        AttributedPath("s.css", {"media": "screen"}),
        AttributedPath("p2.css", {"media": "print"}),
        AttributedPath("x.css", {"other": 1}),
    ]
    collated = collate_by_option(entries, "media", "all")
    assert list(collated.keys()) == ["print", "all", "screen"]
    assert collated["print"] == ["p.css", "p2.css"]
    assert collated["all"] == ["a.css", "x.css"]


def test_prefix_preserves_variant_and_order():
    entries = [PlainPath("a.js"), AttributedPath("b.css", {"media": "print"}), PlainPath("c.js")]
    out = prefix_path_list(entries, "ext/")
    assert out == [
        PlainPath("ext/a.js"),
        AttributedPath("ext/b.css", {"media": "print"}),
        PlainPath("ext/c.js"),
    ]


def test_prefix_none_is_identity():
    assert prefix_path_list([PlainPath("a.js")], None) == [PlainPath("a.js")]


def test_unique_keeps_first_occurrence():
    assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
