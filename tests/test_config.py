"""
Configuration Tests
"""
import pytest

from config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, get_config
from pdfdrop import create_app


class TestConfigClasses:
    """Test configuration defaults"""

    def test_defaults(self):
        assert Config.UPLOAD_MODE == 'proxy'
        assert Config.MAX_FILE_SIZE == 10 * 1024 * 1024
        assert Config.CLIENT_TIMEOUT == 30
        assert Config.MAX_CONTENT_LENGTH is None
        assert Config.UPLOAD_DIR.endswith('pdfdrop_uploads')

    def test_testing_config(self):
        assert TestingConfig.TESTING is True
        assert TestingConfig.WTF_CSRF_ENABLED is False
        assert TestingConfig.UPLOAD_MODE == 'local'

    def test_get_config(self):
        assert get_config('production') is ProductionConfig
        assert get_config('testing') is TestingConfig
        assert get_config('nonsense') is DevelopmentConfig


class TestCreateApp:
    """Test the application factory"""

    def test_local_mode_creates_upload_dir(self, app, upload_dir):
        assert app.config['UPLOAD_MODE'] == 'local'
        assert upload_dir.is_dir()

    def test_mode_is_normalised(self, monkeypatch, tmp_path):
        monkeypatch.setattr(TestingConfig, 'UPLOAD_DIR', str(tmp_path))
        monkeypatch.setattr(TestingConfig, 'UPLOAD_MODE', ' Proxy ')
        app = create_app('testing')
        assert app.config['UPLOAD_MODE'] == 'proxy'

    def test_unknown_mode_rejected(self, monkeypatch):
        monkeypatch.setattr(TestingConfig, 'UPLOAD_MODE', 'ftp')
        with pytest.raises(ValueError, match='UPLOAD_MODE'):
            create_app('testing')

    def test_routes_registered(self, app):
        rules = {rule.rule for rule in app.url_map.iter_rules()}
        assert {'/', '/api/upload'} <= rules
