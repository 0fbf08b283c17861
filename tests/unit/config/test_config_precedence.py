import pytest

from supervisor_listener.config.settings import (
    ConfigurationError,
    Settings,
    find_toml_config_file,
)


@pytest.mark.unit
def test_defaults(isolated_environment):
    settings = Settings.from_config()
    assert settings.listener.process_tag == "Supervisord Event"
    assert settings.listener.handlers == []
    assert settings.listener.raise_handler_faults is False
    assert settings.logging.level == "INFO"
    assert settings.logging.format == "plain"


@pytest.mark.unit
def test_toml_values_loaded(isolated_environment):
    cfg = isolated_environment / "config.toml"
    cfg.write_text(
        """
    [listener]
    process_tag = "crashmail"
    handlers = ["mypkg.handlers:on_exit"]

    [logging]
    level = "debug"
    """,
        encoding="utf-8",
    )

    settings = Settings.from_config(config_path=cfg)
    assert settings.listener.process_tag == "crashmail"
    assert settings.listener.handlers == ["mypkg.handlers:on_exit"]
    assert settings.logging.level == "DEBUG"


@pytest.mark.unit
def test_env_overrides_toml(isolated_environment, monkeypatch):
    cfg = isolated_environment / "config.toml"
    cfg.write_text(
        """
    [listener]
    process_tag = "from-toml"
    raise_handler_faults = false
    """,
        encoding="utf-8",
    )

    monkeypatch.setenv("LISTENER__PROCESS_TAG", "from-env")

    settings = Settings.from_config(config_path=cfg)
    assert settings.listener.process_tag == "from-env"  # env > toml
    assert settings.listener.raise_handler_faults is False


@pytest.mark.unit
def test_cli_overrides_env(isolated_environment, monkeypatch):
    monkeypatch.setenv("LOGGING__LEVEL", "INFO")

    settings = Settings.from_config(config_path=None, logging={"level": "DEBUG"})
    assert settings.logging.level == "DEBUG"  # cli > env


@pytest.mark.unit
def test_cli_overrides_toml(isolated_environment):
    cfg = isolated_environment / "config.toml"
    cfg.write_text(
        """
    [listener]
    process_tag = "from-toml"
    """,
        encoding="utf-8",
    )

    settings = Settings.from_config(
        config_path=cfg, listener={"process_tag": "from-cli"}
    )
    assert settings.listener.process_tag == "from-cli"  # cli > toml


@pytest.mark.unit
def test_config_file_env_variable(isolated_environment, monkeypatch):
    cfg = isolated_environment / "custom.toml"
    cfg.write_text('[logging]\nformat = "json"\n', encoding="utf-8")
    monkeypatch.setenv("CONFIG_FILE", str(cfg))

    settings = Settings.from_config()
    assert settings.logging.json_logs is True


@pytest.mark.unit
def test_local_config_discovered(isolated_environment):
    cfg = isolated_environment / ".supervisor-listener.toml"
    cfg.write_text('[listener]\nprocess_tag = "local"\n', encoding="utf-8")

    assert find_toml_config_file() == cfg
    assert Settings.from_config().listener.process_tag == "local"


@pytest.mark.unit
def test_xdg_config_discovered(isolated_environment):
    xdg_dir = isolated_environment / "config" / "supervisor-listener"
    xdg_dir.mkdir(parents=True)
    cfg = xdg_dir / "config.toml"
    cfg.write_text('[listener]\nprocess_tag = "xdg"\n', encoding="utf-8")

    assert find_toml_config_file() == cfg


@pytest.mark.unit
def test_no_config_found(isolated_environment):
    assert find_toml_config_file() is None


@pytest.mark.unit
def test_missing_config_file(isolated_environment):
    with pytest.raises(ConfigurationError):
        Settings.from_config(config_path=isolated_environment / "absent.toml")


@pytest.mark.unit
def test_invalid_toml(isolated_environment):
    cfg = isolated_environment / "config.toml"
    cfg.write_text("[listener\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid TOML"):
        Settings.from_config(config_path=cfg)


@pytest.mark.unit
def test_invalid_log_level(isolated_environment):
    with pytest.raises(ConfigurationError):
        Settings.from_config(logging={"level": "LOUD"})


@pytest.mark.unit
def test_invalid_handler_path(isolated_environment):
    with pytest.raises(ConfigurationError):
        Settings.from_config(listener={"handlers": ["no_colon_here"]})
