from devbox.config import load_config_file, ProvisionConfig
from devbox.init import write_default_config


def test_write_default_config(tmp_path):
    target, written = write_default_config(tmp_path / "a" / "config.yaml")
    assert written and target.exists()
    assert load_config_file(target) == ProvisionConfig()

    target.write_text("upgrade_system: false\n")
    _, written = write_default_config(target)
    assert not written
    assert load_config_file(target).upgrade_system is False

    _, written = write_default_config(target, force=True)
    assert written
    assert load_config_file(target).upgrade_system is True
