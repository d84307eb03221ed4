"""
WSGI entry point for production deployment.

This module provides the WSGI application object that production servers
(like Gunicorn or uWSGI) can use to serve the Flask application.
"""

import os

from dotenv import load_dotenv

# In production, environment variables are typically set by the platform
if os.path.exists(".env"):
    load_dotenv()

from libraryapp import create_app

application = create_app()

# For compatibility with some WSGI servers that expect 'app'
app = application

if __name__ == "__main__":
    port = int(os.environ.get("FLASK_PORT", 8080))
    application.run(host="0.0.0.0", port=port)
