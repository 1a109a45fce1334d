"""
Configuration Tests
"""

import json

from interpolice.config import ConfigManager, get_config


class TestConfigManager:

    def test_defaults_without_config_dir(self, tmp_path):
        config = ConfigManager(str(tmp_path / "missing"))

        assert config.get('interpolice.jurisdiction.defaultLocationId') == 1
        assert config.get('interpolice.auth.algorithm') == 'HS256'
        assert config.get('interpolice.nothing.here', 'fallback') == 'fallback'

    def test_yaml_overrides_defaults(self, tmp_path):
        (tmp_path / "interpolice.yaml").write_text(
            "jurisdiction:\n"
            "  defaultLocationId: 2\n"
        )

        config = ConfigManager(str(tmp_path))

        assert config.get_jurisdiction_config()['defaultLocationId'] == 2
        assert config.get_jurisdiction_config()['autoRecordCrimeType'] == 'Accumulated minor citations'

    def test_json_files_are_loaded(self, tmp_path):
        (tmp_path / "extra.json").write_text(json.dumps({"feature": {"enabled": True}}))

        config = ConfigManager(str(tmp_path))

        assert config.get('extra.feature.enabled') is True

    def test_set_and_reload(self, tmp_path):
        config = ConfigManager(str(tmp_path))
        config.set('interpolice.auth.tokenExpiryHours', 1)

        assert config.get_auth_config()['tokenExpiryHours'] == 1

        config.reload()
        assert config.get_auth_config()['tokenExpiryHours'] == 24

    def test_environment_config_dir(self, tmp_path, monkeypatch):
        (tmp_path / "interpolice.yaml").write_text("database:\n  echo: true\n")
        monkeypatch.setenv("INTERPOLICE_CONFIG_DIR", str(tmp_path))

        config = ConfigManager()

        assert config.get_database_config()['echo'] is True

    def test_shipped_config(self):
        config = get_config()

        assert config.get('interpolice.jurisdiction.manualRecordCrimeType') == 'Minor offense'
        assert config.get('interpolice.pagination.maxLimit') == 500
