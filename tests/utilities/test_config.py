"""
Tests for configuration loading.
"""

import pytest

from books_api.config import APIConfig
from books_api.errors import ConfigurationError
from utilities.config import load_database_config


def set_db_env(monkeypatch, **overrides):
    values = {
        "DB_HOST": "db.internal",
        "DB_PORT": "3306",
        "DB_USER": "books",
        "DB_PASSWORD": "s3cret",
        "DB_NAME": "library",
    }
    values.update(overrides)
    for name, value in values.items():
        monkeypatch.setenv(name, value)


def test_load_database_config_from_env(clean_db_env):
    set_db_env(clean_db_env)

    db_config = load_database_config()

    assert db_config.db_host == "db.internal"
    assert db_config.db_port == 3306
    assert db_config.db_user == "books"
    assert db_config.db_name == "library"
    assert db_config.db_driver == "mysql+aiomysql"


def test_missing_variables_raise_configuration_error(clean_db_env):
    clean_db_env.setenv("DB_HOST", "db.internal")

    with pytest.raises(ConfigurationError) as exc_info:
        load_database_config()

    message = str(exc_info.value)
    for name in ("DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME"):
        assert name in message
    assert "DB_HOST" not in message


def test_invalid_port_raises_configuration_error(clean_db_env):
    set_db_env(clean_db_env, DB_PORT="not-a-port")

    with pytest.raises(ConfigurationError):
        load_database_config()


def test_out_of_range_port(clean_db_env):
    set_db_env(clean_db_env, DB_PORT="70000")

    with pytest.raises(ConfigurationError):
        load_database_config()


def test_env_file_is_read(clean_db_env, tmp_path):
    (tmp_path / ".env").write_text(
        "DB_HOST=filehost\nDB_PORT=3307\nDB_USER=u\nDB_PASSWORD=p\nDB_NAME=n\n"
    )

    db_config = load_database_config()

    assert db_config.db_host == "filehost"
    assert db_config.db_port == 3307


def test_url_escapes_credentials(clean_db_env):
    set_db_env(clean_db_env, DB_PASSWORD="p@ss:word/1")

    url = load_database_config().get_url()

    assert url.drivername == "mysql+aiomysql"
    assert url.password == "p@ss:word/1"
    assert url.host == "db.internal"
    assert url.port == 3306
    assert url.database == "library"
    assert "p%40ss%3Aword%2F1" in url.render_as_string(hide_password=False)


def test_describe_hides_password(clean_db_env):
    set_db_env(clean_db_env)

    description = load_database_config().describe()

    assert "s3cret" not in str(description)
    assert description["host"] == "db.internal"


def test_api_config_defaults(clean_db_env):
    api_config = APIConfig()

    assert api_config.api_port == 3000
    assert api_config.get_base_url() == "http://localhost:3000"


def test_api_config_validates_log_settings(clean_db_env):
    api_config = APIConfig(log_level="debug", log_format="CONSOLE")
    assert api_config.log_level == "DEBUG"
    assert api_config.log_format == "console"

    with pytest.raises(ValueError):
        APIConfig(log_level="verbose")
