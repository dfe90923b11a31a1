from pathlib import Path

import pytest

from sergey.build import build, excluded_folders, excluded_names, load_fragments
from sergey.cli import main, parse_args
from sergey.config import Config
from sergey.errors import ConfigError
from sergey.postprocess import hoist_styles


def write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture()
def site(tmp_path):
    write(
        tmp_path / "_imports" / "nav.html",
        '<nav><sergey-link to="/">Home</sergey-link><sergey-link to="/blog/">Blog</sergey-link></nav>',
    )
    write(tmp_path / "_imports" / "loop.html", '<sergey-import src="loop" />')
    write(tmp_path / "_imports" / "hello.md", "Hello *world*")
    write(
        tmp_path / "index.html",
        "<html><head><title>Home</title></head><body>"
        '<sergey-import src="nav" /><sergey-import src="hello" as="markdown" />'
        "</body></html>",
    )
    write(tmp_path / "blog" / "post-1.html", '<sergey-import src="nav" /><p>post</p>')
    write(tmp_path / "broken.html", '<sergey-import src="loop" />')
    write(tmp_path / "css" / "site.css", "body { margin: 0 }")
    write(tmp_path / "drafts" / "wip.html", "<p>wip</p>")
    write(tmp_path / ".gitignore", "/drafts/\n# comment\n")
    return tmp_path


def test_build_compiles_pages_and_copies_assets(site):
    report = build(Config(root=site, max_depth=8))
    public = site / "public"

    index = (public / "index.html").read_text(encoding="utf-8")
    assert '<a href="/" class="active" aria-current="page">Home</a>' in index
    assert '<a href="/blog/">Blog</a>' in index
    assert "<p>Hello <em>world</em></p>" in index

    post = (public / "blog" / "post-1.html").read_text(encoding="utf-8")
    assert '<a href="/blog/" class="active">Blog</a>' in post
    # every page sits under "/"
    assert '<a href="/" class="active">Home</a>' in post

    assert (public / "css" / "site.css").read_text(encoding="utf-8") == "body { margin: 0 }"
    assert not (public / "_imports").exists()
    assert not (public / "drafts").exists()
    assert report.copied == ["css/site.css"]
    assert report.pages == ["blog/post-1.html", "index.html"]


def test_failing_page_does_not_stop_the_build(site):
    report = build(Config(root=site, max_depth=8, workers=2))
    assert list(report.failures) == ["broken.html"]
    assert not (site / "public" / "broken.html").exists()
    assert (site / "public" / "index.html").exists()
    assert main(["--root", str(site), "--max-depth", "8"]) == 1


def test_missing_imports_folder_is_fatal(tmp_path):
    write(tmp_path / "index.html", "<p>x</p>")
    write(tmp_path / "public" / "old.html", "keep")
    with pytest.raises(ConfigError):
        build(Config(root=tmp_path))
    assert (tmp_path / "public" / "old.html").exists()
    with pytest.raises(SystemExit):
        main(["--root", str(tmp_path)])


def test_output_must_be_inside_root(tmp_path):
    with pytest.raises(ConfigError):
        Config(root=tmp_path, output=".").validate()
    with pytest.raises(ConfigError):
        Config(root=tmp_path, output="../elsewhere").validate()


def test_separate_content_folder_is_loaded_and_excluded(tmp_path):
    write(tmp_path / "_imports" / "a.html", "<b>a</b>")
    write(tmp_path / "_content" / "post.md", "post")
    config = Config(root=tmp_path, content="_content", exclude=["notes"])
    store = load_fragments(config)
    assert store.get("_imports/a.html") == "<b>a</b>"
    assert store.resolve("post", markdown=True) == "post"
    assert {"notes", ".git"} <= set(excluded_names(config))
    assert excluded_folders(config) == ["_imports", "_content", "public"]


def test_hoist_styles_moves_styles_into_head():
    html = "<html><head><title>t</title></head><body><style>.a{}</style><p>x</p><style>.b{}</style></body></html>"
    assert hoist_styles(html) == (
        "<html><head><title>t</title><style>.b{}\n.a{}</style></head><body><p>x</p></body></html>"
    )


def test_hoist_styles_appends_without_head():
    assert hoist_styles("<p>x</p><style>.a{}</style>") == "<p>x</p><style>.a{}</style>"
    assert hoist_styles("<p>x</p>") == "<p>x</p>"


def test_nested_imports_folder_only_excludes_itself(tmp_path):
    write(tmp_path / "site" / "_imports" / "a.html", "<b>a</b>")
    write(tmp_path / "site" / "index.html", '<sergey-import src="a" />')
    write(tmp_path / "site" / "logo.svg", "<svg></svg>")
    report = build(Config(root=tmp_path, imports="site/_imports"))
    assert report.pages == ["site/index.html"]
    assert report.copied == ["site/logo.svg"]
    assert (tmp_path / "public" / "site" / "index.html").read_text(encoding="utf-8") == "<b>a</b>"
    assert not (tmp_path / "public" / "site" / "_imports").exists()


def test_exclude_env_is_split_into_names(monkeypatch):
    monkeypatch.setenv("SERGEY_EXCLUDE", " drafts, notes ,,")
    assert Config.from_args(parse_args([])).exclude == ["drafts", "notes"]
    assert Config.from_args(parse_args(["--exclude", "tmp"])).exclude == ["tmp"]
