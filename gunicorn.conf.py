"""
Gunicorn configuration for the console server.

Env vars that override defaults:
  PORT     TCP port to bind
  WORKERS  number of worker processes (default: 1)
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Form and screen sessions live in process memory, so one worker unless the
# shell pins each browser session to a worker.
workers = int(os.environ.get("WORKERS", "1"))

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# Upstream API calls time out at API_TIMEOUT (30 s by default) well before this.
timeout = 60

loglevel = "info"
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30
