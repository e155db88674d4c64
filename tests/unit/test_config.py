import pytest
from pydantic import ValidationError

from todo_e2e.core.config import BrowserProfile, ConfigLoader, Viewport
from todo_e2e.core.errors import ConfigurationError, ProfileNotFoundError


def test_default_profiles_are_selected(loader):
    env = loader.get_environment()
    browser = loader.get_browser()

    assert env.name == "Local"
    assert env.base_url == "http://localhost:8080/todomvc/"
    assert env.timeout == 15000
    assert env.slow_mo is None
    assert browser.channel == "chromium"
    assert browser.viewport.as_dict() == {"width": 1280, "height": 720}


def test_lookup_returns_the_stored_object(loader):
    assert loader.get_environment("staging") is loader.full_config().environments["staging"]
    assert loader.get_environment("staging") is loader.get_environment("staging")
    assert loader.get_browser("headed") is loader.full_config().browsers["headed"]


def test_explicit_name_wins_over_override_and_default(config_file, make_settings):
    loader = ConfigLoader(config_file, make_settings(TEST_ENV="staging", BROWSER="headed"))

    assert loader.get_environment().name == "Staging"
    assert loader.get_environment().slow_mo == 50
    assert loader.get_environment("local").name == "Local"
    assert loader.selected_browser_name() == "headed"
    assert loader.selected_browser_name("chromium") == "chromium"


def test_override_read_from_process_environment(config_file, monkeypatch):
    monkeypatch.setenv("TEST_ENV", "staging")
    monkeypatch.setenv("TEST_CONFIG", str(config_file))

    loader = ConfigLoader()

    assert loader.path == config_file
    assert loader.get_environment().name == "Staging"


def test_unknown_environment_lists_alternatives(loader):
    with pytest.raises(ProfileNotFoundError) as excinfo:
        loader.get_environment("qa")

    assert str(excinfo.value) == 'Environment "qa" not found. Available environments: local, staging'
    assert isinstance(excinfo.value, ConfigurationError)


def test_unknown_browser_lists_alternatives(loader):
    with pytest.raises(ProfileNotFoundError, match='Browser "edge" not found. Available browsers: chromium, headed'):
        loader.get_browser("edge")


def test_available_names(loader):
    assert loader.available_environments() == ["local", "staging"]
    assert loader.available_browsers() == ["chromium", "headed"]


def test_yaml_profile_file(tmp_path, make_settings):
    path = tmp_path / "profiles.yaml"
    path.write_text(
        "environments:\n"
        "  ci:\n"
        "    name: CI\n"
        "    baseUrl: https://ci.example.test\n"
        "    timeout: 20000\n"
        "browsers:\n"
        "  firefox:\n"
        "    headless: true\n"
        "    viewport: {width: 800, height: 600}\n"
        "default:\n"
        "  environment: ci\n"
        "  browser: firefox\n",
        encoding="utf-8",
    )

    loader = ConfigLoader(path, make_settings())

    assert loader.get_environment().base_url == "https://ci.example.test"
    assert loader.get_browser().channel is None


def test_missing_file_is_a_configuration_error(tmp_path, make_settings):
    missing = tmp_path / "nope.json"

    with pytest.raises(ConfigurationError, match="Could not load configuration file"):
        ConfigLoader(missing, make_settings())


def test_malformed_json_is_a_configuration_error(tmp_path, make_settings):
    path = tmp_path / "broken.json"
    path.write_text("{ not json", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Could not parse configuration file"):
        ConfigLoader(path, make_settings())


def test_missing_keys_are_a_configuration_error(tmp_path, make_settings):
    path = tmp_path / "partial.json"
    path.write_text('{"environments": {}, "browsers": {}}', encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid configuration file"):
        ConfigLoader(path, make_settings())


def test_profiles_are_read_only(loader):
    env = loader.get_environment()

    with pytest.raises(ValidationError):
        env.timeout = 1


@pytest.mark.parametrize(
    "override, profile_headless, expected",
    [
        (None, True, True),
        (None, False, False),
        ("false", True, False),
        ("true", False, False),
        ("yes", True, True),
    ],
)
def test_headless_rule(make_settings, override, profile_headless, expected):
    settings = make_settings(HEADLESS=override)
    profile = BrowserProfile(headless=profile_headless, viewport=Viewport(width=10, height=10))

    assert settings.resolve_headless(profile) is expected


def test_record_video_only_for_literal_true(make_settings):
    assert make_settings(RECORD_VIDEO="true").record_video is True
    assert make_settings(RECORD_VIDEO="1").record_video is False
    assert make_settings().record_video is False


def test_describe_mentions_slow_motion_only_when_set(config_file, make_settings):
    local = ConfigLoader(config_file, make_settings()).describe()
    staging = ConfigLoader(config_file, make_settings(TEST_ENV="staging")).describe()

    assert "Environment: Local" in local
    assert "   Viewport: 1280x720" in local
    assert not any("Slow Motion" in line for line in local)
    assert "   Slow Motion: 50ms" in staging
