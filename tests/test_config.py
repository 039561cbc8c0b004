from pathlib import Path

import pytest

from devbox.config import ProvisionConfig, config_from_dict, load_config_file, resolve_config
from devbox.errors import ConfigError
from devbox.util.paths import load_template


def test_defaults_match_stock_layout(tmp_path):
    cfg = ProvisionConfig()
    assert cfg.repo_categories == ["projects", "learning", "archived", "forks"]
    assert cfg.pattern_categories == ["payments", "auth", "email", "database", "api", "files"]
    assert cfg.resolve_base(tmp_path) == tmp_path
    assert cfg.profile_path(tmp_path) == tmp_path / ".bashrc"


def test_load_partial_file(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text("base_dir: workspace\nupgrade_system: false\ndatabase_packages: [sqlite3]\n")
    cfg = load_config_file(p)

    assert cfg.upgrade_system is False
    assert cfg.database_packages == ["sqlite3"]
    assert cfg.resolve_base(tmp_path) == tmp_path / "workspace"
    assert cfg.essential_packages == ProvisionConfig().essential_packages


def test_bundled_template_is_valid(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text(load_template("config.yaml"))
    assert load_config_file(p) == ProvisionConfig()


def test_unknown_key_rejected():
    with pytest.raises(ConfigError, match="Invalid config schema"):
        config_from_dict({"pakages": ["git"]})


def test_wrong_type_rejected():
    with pytest.raises(ConfigError):
        config_from_dict({"upgrade_system": "yes"})


def test_bad_category_rejected():
    with pytest.raises(ConfigError, match="Invalid repo category"):
        config_from_dict({"repo_categories": ["../etc"]})


def test_non_mapping_rejected(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError, match="mapping"):
        load_config_file(p)


def test_invalid_yaml_rejected(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text("base_dir: [unclosed\n")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config_file(p)


def test_resolve_config_precedence(tmp_path):
    home = tmp_path / "home"
    assert resolve_config(None, home) == ProvisionConfig()

    user_cfg = home / ".config" / "devbox" / "config.yaml"
    user_cfg.parent.mkdir(parents=True)
    user_cfg.write_text("default_branch: trunk\n")
    assert resolve_config(None, home).default_branch == "trunk"

    explicit = tmp_path / "other.yaml"
    explicit.write_text("default_branch: develop\n")
    assert resolve_config(explicit, home).default_branch == "develop"

    with pytest.raises(ConfigError, match="not found"):
        resolve_config(tmp_path / "missing.yaml", home)


def test_alias_categories_required():
    with pytest.raises(ConfigError, match=r"\['learning', 'archived'\]"):
        config_from_dict({"repo_categories": ["projects", "forks"]})


def test_extra_categories_allowed():
    cfg = config_from_dict({"repo_categories": ["projects", "learning", "archived", "clients"]})
    assert cfg.repo_categories[-1] == "clients"
