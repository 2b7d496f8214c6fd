"""
pdfdrop Application Factory
"""
import os
from flask import Flask
from flask_wtf.csrf import CSRFProtect
from config import config

csrf = CSRFProtect()

UPLOAD_MODES = ("proxy", "local")


def create_app(config_name='default'):
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    mode = (app.config.get("UPLOAD_MODE") or "").strip().lower()
    if mode not in UPLOAD_MODES:
        raise ValueError(f"UPLOAD_MODE must be one of {UPLOAD_MODES}, got {mode!r}")
    app.config["UPLOAD_MODE"] = mode

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    csrf.init_app(app)

    # Register blueprints
    from pdfdrop.api import api_bp
    from pdfdrop.web import web_bp

    app.register_blueprint(web_bp)
    app.register_blueprint(api_bp, url_prefix='/api')

    # Exempt API routes from CSRF (the page script posts multipart without a token)
    csrf.exempt(api_bp)

    if mode == "local":
        os.makedirs(app.config["UPLOAD_DIR"], exist_ok=True)

    app.logger.info('pdfdrop %s started in %s mode', app.config.get("APP_VERSION"), mode)
    return app
