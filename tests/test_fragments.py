from sergey.fragments import FragmentStore, key_for


def test_key_for_appends_extension_once():
    assert key_for("nav", ".html", "_imports") == "_imports/nav.html"
    assert key_for("nav.html", ".html", "_imports") == "_imports/nav.html"
    assert key_for("/blog/list", ".html", "_imports/") == "_imports/blog/list.html"
    assert key_for("post", ".md", "./content") == "content/post.md"


def test_resolve_picks_base_by_mode():
    store = FragmentStore("_imports", "_content")
    store.put("_imports/a.html", "<b>a</b>")
    store.put("./_content/a.md", "*a*")
    assert store.resolve("a") == "<b>a</b>"
    assert store.resolve("a", markdown=True) == "*a*"
    assert store.resolve("missing") is None
    assert "_content/a.md" in store
    assert len(store) == 2


def test_load_directory(tmp_path):
    (tmp_path / "blog").mkdir()
    (tmp_path / "nav.html").write_text("<nav></nav>", encoding="utf-8")
    (tmp_path / "blog" / "card.html").write_text("<div></div>", encoding="utf-8")
    store = FragmentStore()
    assert store.load_directory(tmp_path, "_imports") == 2
    assert store.resolve("blog/card") == "<div></div>"
    assert store.get("_imports/nav.html") == "<nav></nav>"
