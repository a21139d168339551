"""
Gunicorn configuration for the Cadence API.

Log level comes from the application settings (LOG_LEVEL), so gunicorn and
the app agree on verbosity and share one line format.

Env vars that override defaults:
  PORT            - TCP port to bind (default: 8000)
  WEB_CONCURRENCY - number of worker processes (default: 2 per CPU, max 8)
  MAX_REQUESTS    - recycle a worker after this many requests (0 disables)
  FORWARDED_ALLOW_IPS - proxies trusted for X-Forwarded-* headers
"""
import multiprocessing
import os

from cadence.core.config import settings
from cadence.core.logging import LOG_FORMAT

wsgi_app = "cadence.main:app"
worker_class = "uvicorn.workers.UvicornWorker"

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"
workers = int(os.environ.get("WEB_CONCURRENCY", min(2 * multiprocessing.cpu_count(), 8)))

# Every scoring request loads a fresh StoreView; recycling bounds worker memory.
max_requests = int(os.environ.get("MAX_REQUESTS", "1000"))
max_requests_jitter = max_requests // 10

forwarded_allow_ips = os.environ.get("FORWARDED_ALLOW_IPS", "127.0.0.1")

keepalive = 5
# Long windows over a long history are the slowest requests.
timeout = 60
graceful_timeout = 30

loglevel = settings.LOG_LEVEL.lower()
logconfig_dict = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {"cadence": {"format": LOG_FORMAT}},
    "handlers": {
        "stdout": {
            "class": "logging.StreamHandler",
            "formatter": "cadence",
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        "gunicorn.error": {"level": settings.LOG_LEVEL.upper(), "handlers": ["stdout"], "propagate": False},
        "gunicorn.access": {"level": "INFO", "handlers": ["stdout"], "propagate": False},
    },
}
accesslog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(M)sms'


def on_starting(server):
    server.log.info(
        "Starting Cadence (%s) with %d workers on %s",
        settings.APP_ENV, workers, bind,
    )
