"""
WSGI entry point, e.g. gunicorn wsgi:app
"""
import os

from pdfdrop import create_app

app = create_app(os.getenv('FLASK_ENV', 'production'))
