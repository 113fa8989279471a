from __future__ import annotations

from whitenoise import WhiteNoise

from studio.app_factory import create_app

# Expose a module-level WSGI application for Gunicorn
flask_app = create_app()

# WhiteNoise serves the static pages in production; Flask handles the rest
app = WhiteNoise(flask_app, root=flask_app.static_folder)
