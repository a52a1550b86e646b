from resourceloader.observability.metrics import snapshot_named


def test_styles_merge_general_then_skin(make_module, write_file, ctx):
    write_file("general.css", "X")
    write_file("vector.css", "Y")
    module = make_module({"styles": ["general.css"], "skinStyles": {"vector": ["vector.css"]}})

    assert module.get_styles(ctx(skin="vector")) == {"all": "XY"}


def test_styles_collated_by_media(make_module, write_file, ctx):
    write_file("a.css", "A")
    write_file("b.css", "B")
    write_file("p.css", "P")
    write_file("skin.css", "S")
    module = make_module({
        "styles": ["a.css", {"p.css": {"media": "print"}}, "b.css", "a.css"],
        "skinStyles": {"default": {"skin.css": {"media": "screen"}}},
    })

    styles = module.get_styles(ctx(skin="monobook"))
    assert styles == {"all": "A\nB", "print": "P", "screen": "S"}
    assert list(styles.keys()) == ["all", "print", "screen"]


def test_styles_empty_module(make_module, ctx):
    assert make_module({}).get_styles(ctx()) == {}


def test_style_urls_remapped_to_public_path(make_module, write_file, ctx):
    write_file("skins/vector/main.css", "body { background: url(images/bg.png); }")
    module = make_module({"styles": "skins/vector/main.css"})

    styles = module.get_styles(ctx())
    assert styles["all"] == "body { background: url(/w/skins/vector/images/bg.png); }"


def test_dependencies_recorded_on_first_observation(make_module, write_file, ctx, deps_store):
    write_file("skins/vector/main.css", "a { background: url(images/bg.png) } b { background: url('images/bg.png') }")
    write_file("skins/vector/images/bg.png", "png")
    module = make_module({"styles": "skins/vector/main.css"}, name="skins.vector")

    module.get_styles(ctx(skin="vector"))

    assert deps_store.get("skins.vector", "vector") == ["skins/vector/images/bg.png"]
    assert deps_store.writes == 1
    assert snapshot_named().get("deps_written") == 1


def test_empty_reference_list_is_still_recorded_once(make_module, write_file, ctx, deps_store):
    write_file("a.css", "a { color: red }")
    module = make_module({"styles": "a.css"})

    module.get_styles(ctx())
    module.get_styles(ctx())

    assert deps_store.get("test.module", "vector") == []
    assert deps_store.writes == 1


def test_unchanged_dependencies_do_not_write(make_module, write_file, ctx, deps_store):
    write_file("skins/vector/main.css", "a { background: url(bg.png) }")
    write_file("skins/vector/bg.png", "png")
    module = make_module({"styles": "skins/vector/main.css"})

    module.get_styles(ctx())
    module.get_styles(ctx())
    module.get_styles(ctx())

    assert deps_store.writes == 1
    assert snapshot_named().get("deps_unchanged") == 2


def test_changed_dependencies_replace_record(make_module, write_file, ctx, deps_store):
    css = write_file("skins/vector/main.css", "a { background: url(one.png) }")
    write_file("skins/vector/one.png", "1")
    write_file("skins/vector/two.png", "2")
    module = make_module({"styles": "skins/vector/main.css"})

    module.get_styles(ctx())
    css.write_text("a { background: url(two.png) }", encoding="utf-8")
    module.get_styles(ctx())

    assert deps_store.get("test.module", "vector") == ["skins/vector/two.png"]
    assert deps_store.writes == 2


def test_dependencies_keyed_per_skin(make_module, write_file, ctx, deps_store):
    write_file("s/main.css", "a { background: url(x.png) }")
    write_file("s/x.png", "x")
    module = make_module({"skinStyles": {"default": "s/main.css"}})

    module.get_styles(ctx(skin="vector"))
    module.get_styles(ctx(skin="monobook"))

    assert deps_store.get("test.module", "vector") == ["s/x.png"]
    assert deps_store.get("test.module", "monobook") == ["s/x.png"]
    assert deps_store.writes == 2


def test_missing_referenced_files_are_not_recorded(make_module, write_file, ctx, deps_store):
    write_file("s/main.css", "a { background: url(gone.png) } b { background: url(http://example.org/x.png) }")
    module = make_module({"styles": "s/main.css"})

    module.get_styles(ctx())

    assert deps_store.get("test.module", "vector") == []


class _FailingStore:
    def __init__(self, *, raise_error: bool):
        self.raise_error = raise_error
        self.attempts = 0

    def get(self, module, skin):
        return None

    def put(self, module, skin, files):
        self.attempts += 1
        if self.raise_error:
            raise OSError("disk full")
        return False


def test_store_failure_does_not_fail_styles(make_module, write_file, ctx):
    write_file("a.css", "A")
    for raise_error in (True, False):
        store = _FailingStore(raise_error=raise_error)
        module = make_module({"styles": "a.css"}, dependency_store=store)

        assert module.get_styles(ctx()) == {"all": "A"}
        assert store.attempts == 1

    assert snapshot_named().get("deps_failed") == 2


def test_custom_remap_and_extractor_are_used(make_module, write_file, ctx, deps_store):
    write_file("dir/a.css", "A")
    calls = []

    def remap(source, local_dir, remote_dir, absolute):
        calls.append((local_dir, remote_dir, absolute))
        return source.lower()

    module = make_module(
        {"styles": "dir/a.css"},
        remap=remap,
        extract_references=lambda style: ["dir/a.css"],
    )

    assert module.get_styles(ctx()) == {"all": "a"}
    assert calls == [("dir", "/w/dir", True)]
    assert deps_store.get("test.module", "vector") == ["dir/a.css"]
