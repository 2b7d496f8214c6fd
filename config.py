"""
pdfdrop Configuration
"""
import os
import tempfile
from functools import lru_cache


def _int_env(name: str, default):
    """Read an integer environment variable; empty or missing gives default"""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return int(raw)


class Config:
    """Base configuration"""
    # Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-in-production")

    # Security
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600

    # Upload route: "proxy" forwards to the processor, "local" stores in UPLOAD_DIR
    UPLOAD_MODE = os.environ.get("UPLOAD_MODE", "proxy").strip().lower()
    UPLOAD_DIR = os.environ.get("UPLOAD_DIR") or os.path.join(tempfile.gettempdir(), "pdfdrop_uploads")

    # External PDF processor (proxy mode)
    PROCESSOR_URL = os.environ.get("PROCESSOR_URL", "https://nngg2zrdpm.ap-northeast-1.awsapprunner.com/")
    PROCESSOR_TIMEOUT = _int_env("PROCESSOR_TIMEOUT", 60)

    # Server-side body limit; None means unlimited
    MAX_CONTENT_LENGTH = _int_env("MAX_CONTENT_LENGTH", None)

    # Passed to the upload page script
    MAX_FILE_SIZE = _int_env("MAX_FILE_SIZE", 10 * 1024 * 1024)
    CLIENT_TIMEOUT = _int_env("CLIENT_TIMEOUT", 30)

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # App Version
    APP_VERSION = os.environ.get("APP_VERSION", "0.1.0")


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    WTF_CSRF_ENABLED = False
    UPLOAD_MODE = "local"
    PROCESSOR_URL = "http://processor.test/"
    PROCESSOR_TIMEOUT = 5


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig,
}


@lru_cache()
def get_config(env: str = None):
    """Get configuration by environment name"""
    env = env or os.environ.get("FLASK_ENV", "development")
    return config.get(env, config['default'])
