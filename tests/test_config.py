import pytest

from flight_browser.config import DEFAULT_API_BASE_URL, REPO_ROOT, load_config, resolve_root

CONFIG_KEYS = [
    "FLIGHT_API_BASE_URL",
    "REQUEST_TIMEOUT",
    "ROSTER_PAGE_SIZE",
    "LOG_DIR",
    "LOG_LEVEL",
    "APP_NAME",
]


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_load_config_reads_env_file(tmp_path):
    env_file = tmp_path / "test.env"
    env_file.write_text(
        "\n".join(
            [
                "FLIGHT_API_BASE_URL=https://flights.example/",
                "REQUEST_TIMEOUT=2.5",
                "ROSTER_PAGE_SIZE=25",
                "LOG_DIR=logs/testing",
                "LOG_LEVEL=debug",
                "APP_NAME=browser-test",
            ]
        ),
        encoding="utf-8",
    )

    config = load_config(env_file)

    assert config.api_base_url == "https://flights.example"
    assert config.request_timeout == 2.5
    assert config.roster_page_size == 25
    assert config.log_directory == REPO_ROOT / "logs/testing"
    assert config.log_level == "DEBUG"
    assert config.app_name == "browser-test"


def test_load_config_prefers_environment_variables(tmp_path, monkeypatch):
    env_file = tmp_path / "test.env"
    env_file.write_text(
        "\n".join(
            [
                "FLIGHT_API_BASE_URL=http://from-file:3000",
                f"LOG_DIR={tmp_path/'from_env_file'}",
            ]
        ),
        encoding="utf-8",
    )

    env_log_dir = tmp_path / "from_env"
    monkeypatch.setenv("FLIGHT_API_BASE_URL", "http://override:4000")
    monkeypatch.setenv("LOG_DIR", str(env_log_dir))
    monkeypatch.setenv("LOG_LEVEL", "warning")

    config = load_config(env_file)

    assert config.api_base_url == "http://override:4000"
    assert config.log_directory == env_log_dir
    assert config.log_level == "WARNING"


def test_load_config_defaults(tmp_path):
    config = load_config(tmp_path / "missing.env")

    assert config.api_base_url == DEFAULT_API_BASE_URL
    assert config.request_timeout == 10.0
    assert config.roster_page_size == 10
    assert config.log_directory == REPO_ROOT / "logs"
    assert config.log_level == "INFO"
    assert config.app_name == "flight-browser"


@pytest.mark.parametrize(
    "key,value",
    [
        ("FLIGHT_API_BASE_URL", "ftp://flights.example"),
        ("REQUEST_TIMEOUT", "soon"),
        ("REQUEST_TIMEOUT", "0"),
        ("ROSTER_PAGE_SIZE", "-3"),
        ("ROSTER_PAGE_SIZE", "ten"),
    ],
)
def test_load_config_rejects_invalid_values(tmp_path, monkeypatch, key, value):
    monkeypatch.setenv(key, value)

    with pytest.raises(ValueError, match=key):
        load_config(tmp_path / "missing.env")


def test_resolve_root_keeps_source_checkout(tmp_path):
    (tmp_path / "pyproject.toml").write_text("[project]\n", encoding="utf-8")

    assert resolve_root(tmp_path) == tmp_path


def test_resolve_root_uses_working_directory_when_installed(tmp_path, monkeypatch):
    site_packages = tmp_path / "site-packages"
    site_packages.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    assert resolve_root(site_packages).resolve() == workdir.resolve()
