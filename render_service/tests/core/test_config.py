import pytest
import os
import yaml

from render_service.core.config import (
    ConfigurationManager,
    ConfigFileNotFoundError,
    InvalidYamlError,
    DEFAULT_ENV,
    get_config,
)


@pytest.fixture(scope="function")
def temp_config_dir(tmp_path):
    """
    Writes throwaway YAML files and points the ConfigurationManager singleton at them.
    The original directory and configuration are restored afterwards.
    """
    original_config_dir = ConfigurationManager.config_dir
    original_env = ConfigurationManager().current_environment

    dev_config_content = {
        "server": {"host": "localhost_dev", "port": 8000},
        "browser": {"browser_type": "chromium", "launch_args": ["--no-sandbox"]},
    }
    prod_config_content = {
        "server": {"host": "0.0.0.0", "port": 80},
        "browser": {"headless": False},
    }
    with open(tmp_path / "development.yaml", "w") as f:
        yaml.dump(dev_config_content, f)
    with open(tmp_path / "production.yaml", "w") as f:
        yaml.dump(prod_config_content, f)
    with open(tmp_path / "invalid.yaml", "w") as f:
        f.write("server: {host: 'bad_host', port: 1000")  # Missing closing brace
    with open(tmp_path / "not_dict.yaml", "w") as f:
        yaml.dump(["list", "instead", "of", "dict"], f)

    ConfigurationManager.config_dir = str(tmp_path)
    yield tmp_path

    ConfigurationManager.config_dir = original_config_dir
    ConfigurationManager().load_config(original_env)


def test_load_development_config_default(temp_config_dir, monkeypatch):
    """Loads the development config when APP_ENV is not set."""
    monkeypatch.delenv("APP_ENV", raising=False)

    config_manager = ConfigurationManager()
    config_manager.load_config()

    assert config_manager.current_environment == DEFAULT_ENV == "development"
    assert config_manager.get("server.host") == "localhost_dev"
    assert config_manager.get("server.port") == 8000
    assert config_manager.get("non_existent_key") is None
    assert config_manager.get("non_existent_key", "default_val") == "default_val"


def test_load_production_config_env_var(temp_config_dir, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")

    config_manager = ConfigurationManager()
    config_manager.load_config()

    assert config_manager.current_environment == "production"
    assert config_manager.get("server.port") == 80
    assert config_manager.get("browser.headless") is False


def test_explicit_env_param_beats_env_var(temp_config_dir, monkeypatch):
    monkeypatch.setenv("APP_ENV", "development")

    config_manager = ConfigurationManager()
    config_manager.load_config(env="production")

    assert config_manager.current_environment == "production"


def test_get_nested_and_non_dict_paths(temp_config_dir):
    config_manager = ConfigurationManager()
    config_manager.load_config("development")

    assert config_manager.get("browser.launch_args") == ["--no-sandbox"]
    assert config_manager.get("browser") == {"browser_type": "chromium", "launch_args": ["--no-sandbox"]}
    # Traversing into a scalar yields the default rather than raising.
    assert config_manager.get("server.port.value", "fallback") == "fallback"


def test_missing_config_file(temp_config_dir):
    with pytest.raises(ConfigFileNotFoundError) as excinfo:
        ConfigurationManager().load_config("staging")
    assert "staging.yaml" in str(excinfo.value)


def test_invalid_yaml(temp_config_dir):
    with pytest.raises(InvalidYamlError):
        ConfigurationManager().load_config("invalid")


def test_yaml_not_a_dictionary(temp_config_dir):
    with pytest.raises(InvalidYamlError) as excinfo:
        ConfigurationManager().load_config("not_dict")
    assert "does not contain a valid YAML dictionary" in str(excinfo.value)


def test_singleton_instance():
    assert ConfigurationManager() is ConfigurationManager()


def test_reload_config_switches_environment(temp_config_dir):
    config_manager = ConfigurationManager()
    config_manager.load_config("development")
    config_manager.reload_config("production")
    assert config_manager.current_environment == "production"
    assert get_config("server.host") == "0.0.0.0"


def test_shipped_configs_are_loadable():
    """Every YAML file shipped with the package parses and carries the sections the service reads."""
    shipped_dir = ConfigurationManager.config_dir
    names = sorted(f[:-len(".yaml")] for f in os.listdir(shipped_dir) if f.endswith(".yaml"))
    assert {"development", "production", "testing"} <= set(names)
    for name in names:
        with open(os.path.join(shipped_dir, f"{name}.yaml")) as f:
            data = yaml.safe_load(f)
        for section in ("server", "browser", "renderer", "logging"):
            assert section in data, f"{name}.yaml lacks '{section}'"
