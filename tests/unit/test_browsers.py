import pytest

from todo_e2e.core.config import BrowserProfile, EnvironmentProfile, Viewport
from todo_e2e.core.errors import ConfigurationError
from todo_e2e.runner.browsers import CHROME_ARGS, BrowserKind, resolve_kind

ENV = EnvironmentProfile(name="Local", base_url="http://localhost", timeout=1000, slow_mo=25)
VIEWPORT = Viewport(width=800, height=600)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, BrowserKind.CHROMIUM),
        ("", BrowserKind.CHROMIUM),
        ("firefox", BrowserKind.FIREFOX),
        (" WebKit ", BrowserKind.WEBKIT),
        (BrowserKind.FIREFOX, BrowserKind.FIREFOX),
    ],
)
def test_parse(value, expected):
    assert BrowserKind.parse(value) is expected


def test_parse_rejects_unknown_kind():
    with pytest.raises(ConfigurationError, match='Unknown browser kind "edge". Supported kinds: chromium, firefox, webkit'):
        BrowserKind.parse("edge")


def test_resolve_kind_prefers_explicit_argument():
    assert resolve_kind("webkit", "firefox") is BrowserKind.WEBKIT
    assert resolve_kind(None, "firefox") is BrowserKind.FIREFOX
    assert resolve_kind(None, None) is BrowserKind.CHROMIUM


def test_chromium_launch_uses_channel_and_args(fake_playwright, recorder):
    profile = BrowserProfile(channel="chromium", headless=True, viewport=VIEWPORT)

    BrowserKind.CHROMIUM.launch(fake_playwright, profile, ENV, headless=False)

    assert recorder.kwargs("chromium.launch") == {
        "headless": False,
        "channel": "chromium",
        "args": CHROME_ARGS,
        "slow_mo": 25,
    }


def test_chromium_channel_defaults_to_chrome(fake_playwright, recorder):
    BrowserKind.CHROMIUM.launch(fake_playwright, BrowserProfile(viewport=VIEWPORT), ENV, headless=True)

    assert recorder.kwargs("chromium.launch")["channel"] == "chrome"


@pytest.mark.parametrize("kind", [BrowserKind.FIREFOX, BrowserKind.WEBKIT])
def test_plain_launch_ignores_channel(fake_playwright, recorder, kind):
    profile = BrowserProfile(channel="chrome", viewport=VIEWPORT)

    kind.launch(fake_playwright, profile, ENV, headless=True)

    assert recorder.names() == [f"{kind.value}.launch"]
    assert recorder.kwargs(f"{kind.value}.launch") == {"headless": True, "slow_mo": 25}


def test_context_options_per_kind():
    chromium = BrowserKind.CHROMIUM.context_options()

    assert chromium["permissions"] == []
    assert chromium["extra_http_headers"]["Accept-Language"].startswith("en-US")
    assert BrowserKind.FIREFOX.context_options() == {}
    assert BrowserKind.WEBKIT.context_options() == {}


def test_context_options_are_copies():
    BrowserKind.CHROMIUM.context_options()["permissions"] = ["geolocation"]

    assert BrowserKind.CHROMIUM.context_options()["permissions"] == []
