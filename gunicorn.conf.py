"""
Gunicorn configuration for the Advokat expiry service.

Usage:
    gunicorn app.main:app -c gunicorn.conf.py
"""

import os

# Bind address; PORT is set by most container platforms
bind = f"0.0.0.0:{os.getenv('PORT', '8000')}"

# Traffic is one scheduler call per hour plus the alert feed; a few workers suffice
workers = int(os.getenv("WEB_CONCURRENCY", "2"))

# Use Uvicorn's ASGI worker for FastAPI
worker_class = "uvicorn.workers.UvicornWorker"

# A sweep is a handful of statements per expired request
timeout = 60

keepalive = 5

# Logging
accesslog = "-"  # stdout
errorlog = "-"   # stderr
loglevel = os.getenv("LOG_LEVEL", "info")
