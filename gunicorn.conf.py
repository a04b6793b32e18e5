"""Gunicorn config for container deployment."""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Each worker holds its own record set; uploads land on one worker only,
# so keep a single worker unless the inbox is the source of truth.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "1"))

timeout = 120
graceful_timeout = 30
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
