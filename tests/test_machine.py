import pytest

from gazette.errors import ConversionFailure, NetworkFailure
from gazette.feed import Entry
from gazette.tui.machine import Mode, Model, update, view
from gazette.tui.messages import (
    ContentFetchFailed,
    ContentFetchSucceeded,
    FetchContent,
    FetchList,
    Key,
    ListFetchFailed,
    ListFetchSucceeded,
    Quit,
    Resize,
    ScheduleTick,
    Start,
    TimerTick,
)


ENTRIES = (
    Entry(id=1, title="Alpha", score=5, url="https://a.example/"),
    Entry(id=2, title="Beta", score=7, url="https://b.example/"),
    Entry(id=3, title="Ask HN: Gamma?", score=9, url="", by="dang", descendants=4, time=0),
)


def fake_convert(raw: bytes) -> str:
    return "converted:" + raw.decode()


def run(model, *events):
    commands = []
    for event in events:
        model, out = update(model, event)
        commands.extend(out)
    return model, commands


@pytest.fixture
def listing():
    model = Model(converter=fake_convert)
    model, _ = run(model, Start(), Resize(80, 40), ListFetchSucceeded(ENTRIES))
    return model


def test_start_fetches_list_and_starts_spinner():
    model, commands = update(Model(), Start())
    assert model.mode is Mode.LOADING
    assert commands == [FetchList(), ScheduleTick(0.1)]


def test_loading_view_shows_spinner_and_status():
    model = Model()
    out = view(model)
    assert "Welcome to Gazette!" in out
    assert "Fetching stories..." in out


def test_ticks_only_reschedule_while_loading():
    model = Model()
    frame = model.spinner.frame
    model, commands = update(model, TimerTick())
    assert commands == [ScheduleTick(0.1)]
    assert model.spinner.frame == frame + 1
    model, _ = update(model, ListFetchSucceeded(ENTRIES))
    model, commands = update(model, TimerTick())
    assert commands == []
    assert model.spinner.frame == frame + 1


def test_list_fetch_populates_rows_in_order(listing):
    assert listing.mode is Mode.LISTING
    assert [e.title for e in listing.list.visible_items()] == ["Alpha", "Beta", "Ask HN: Gamma?"]
    out = view(listing)
    assert out.index("Alpha") < out.index("Beta") < out.index("Gamma")


def test_empty_batch_is_still_listing():
    model, _ = run(Model(), Start(), ListFetchSucceeded(()))
    assert model.mode is Mode.LISTING
    assert "No items." in view(model)


def test_list_fetch_failure_is_terminal():
    error = NetworkFailure("timed out fetching https://hacker-news.firebaseio.com/v0/topstories.json")
    model, _ = run(Model(), Start(), ListFetchFailed(error))
    assert model.mode is Mode.FAILED
    out = view(model)
    assert "timed out fetching" in out
    assert "Top Stories" not in out
    # keys other than quit are ignored; quit exits non-zero
    model, commands = run(model, Key("enter"), Key("down"))
    assert commands == []
    assert update(model, Key("q"))[1] == [Quit(1)]


def test_navigation_never_changes_mode_or_selection(listing):
    for key in ["down", "down", "up", "pagedown", "j", "k", "home", "end", "/", "a", "escape", "g"]:
        listing, commands = update(listing, Key(key))
        assert listing.mode is Mode.LISTING
        assert listing.selection is None
        assert commands == []


def test_select_issues_one_content_fetch(listing):
    listing, commands = update(listing, Key("down"))
    listing, commands = update(listing, Key("enter"))
    assert commands == [FetchContent("https://b.example/", 1)]
    assert listing.mode is Mode.LISTING
    assert listing.fetching
    assert "Fetching https://b.example/" in view(listing)
    # no second fetch while one is outstanding
    listing, commands = run(listing, Key("up"), Key("enter"))
    assert commands == []


def test_content_success_switches_to_viewing(listing):
    listing, commands = update(listing, Key("enter"))
    listing.viewport.y_offset = 3
    listing, _ = update(listing, ContentFetchSucceeded("https://a.example/", 1, b"<p>hi</p>"))
    assert listing.mode is Mode.VIEWING
    assert listing.display_text == fake_convert(b"<p>hi</p>")
    assert listing.viewport.y_offset == 0
    out = view(listing)
    assert "converted:<p>hi</p>" in out
    assert "Press q to return to list" in out
    assert "100%" in out


def test_exit_from_viewing_restores_list(listing):
    listing, _ = run(listing, Key("down"), Key("enter"))
    listing, _ = update(listing, ContentFetchSucceeded("https://b.example/", 1, b"x"))
    assert listing.mode is Mode.VIEWING
    listing, commands = update(listing, Key("q"))
    assert commands == []
    assert listing.mode is Mode.LISTING
    assert listing.selection is None
    assert listing.display_text is None
    assert listing.list.cursor == 1


def test_viewing_forwards_scroll_keys_to_viewport(listing):
    listing, _ = run(listing, Resize(80, 10), Key("enter"))
    body = "\n".join(str(i) for i in range(50)).encode()
    listing, _ = update(listing, ContentFetchSucceeded("https://a.example/", 1, body))
    listing, _ = run(listing, Key("down"), Key("down"))
    assert listing.viewport.y_offset == 2
    assert listing.list.cursor == 0


def test_quit_in_listing_exits_cleanly(listing):
    assert update(listing, Key("q"))[1] == [Quit(0)]
    assert update(listing, Key("ctrl+c"))[1] == [Quit(0)]


def test_quit_while_loading_exits_cleanly():
    assert update(Model(), Key("q"))[1] == [Quit(0)]


def test_quit_while_filtering_is_typed_into_filter(listing):
    listing, commands = run(listing, Key("/"), Key("q"))
    assert commands == []
    assert listing.list.filter_text == "q"
    assert listing.mode is Mode.LISTING


def test_enter_while_filtering_applies_filter(listing):
    listing, commands = run(listing, Key("/"), Key("b"), Key("e"), Key("enter"))
    assert commands == []
    assert not listing.list.is_filtering()
    listing, commands = update(listing, Key("enter"))
    assert commands == [FetchContent("https://b.example/", 1)]


def test_quit_during_fetch_abandons_it_and_drops_stale_result(listing):
    listing, _ = update(listing, Key("enter"))
    listing, commands = update(listing, Key("q"))
    assert commands == []
    assert listing.selection is None
    listing, _ = update(listing, ContentFetchSucceeded("https://a.example/", 1, b"late"))
    assert listing.mode is Mode.LISTING
    assert listing.display_text is None


def test_stale_result_from_earlier_generation_is_ignored(listing):
    listing, _ = run(listing, Key("enter"), Key("q"), Key("down"), Key("enter"))
    assert listing.selection.generation == 2
    listing, _ = update(listing, ContentFetchFailed("https://a.example/", 1, NetworkFailure("old")))
    assert listing.mode is Mode.LISTING
    listing, _ = update(listing, ContentFetchSucceeded("https://b.example/", 2, b"new"))
    assert listing.display_text == "converted:new"


def test_content_fetch_failure_is_terminal(listing):
    listing, _ = update(listing, Key("enter"))
    listing, _ = update(listing, ContentFetchFailed("https://a.example/", 1, NetworkFailure("https://a.example/ returned HTTP 500")))
    assert listing.mode is Mode.FAILED
    assert "HTTP 500" in view(listing)


def test_conversion_failure_is_terminal(listing):
    def broken(raw):
        raise ConversionFailure("could not convert page: bad")

    listing.converter = broken
    listing, _ = update(listing, Key("enter"))
    listing, _ = update(listing, ContentFetchSucceeded("https://a.example/", 1, b"x"))
    assert listing.mode is Mode.FAILED
    assert "could not convert page" in view(listing)


def test_entry_without_url_shows_placeholder_without_fetching(listing):
    listing, commands = run(listing, Key("end"), Key("enter"))
    assert commands == []
    assert listing.mode is Mode.VIEWING
    out = view(listing)
    assert "no linked page" in out
    assert "news.ycombinator.com/item?id=3" in out
    listing, _ = update(listing, Key("q"))
    assert listing.mode is Mode.LISTING
    assert listing.list.cursor == 2


def test_resize_sets_widget_sizes_without_changing_mode(listing):
    listing, commands = update(listing, Resize(100, 30))
    assert commands == []
    assert listing.mode is Mode.LISTING
    assert (listing.list.width, listing.list.height) == (100, 28)
    assert (listing.viewport.width, listing.viewport.height) == (100, 26)


@pytest.mark.parametrize("keys", [[], ["down"], ["enter"], ["/", "b"]])
def test_view_is_idempotent(listing, keys):
    listing, _ = run(listing, *[Key(k) for k in keys])
    assert view(listing) == view(listing)


def test_default_converter_renders_markup():
    model, _ = run(Model(), Start(), ListFetchSucceeded(ENTRIES[:1]), Key("enter"))
    model, _ = update(model, ContentFetchSucceeded("https://a.example/", 1, b"<h2>Title here</h2><p>Body</p>"))
    assert model.mode is Mode.VIEWING
    assert "Title here" in model.display_text
