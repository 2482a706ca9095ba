"""
Gunicorn configuration for the Moodlog API.
Every setting can be overridden from the environment for container deployment.
"""

from __future__ import annotations

import logging
import multiprocessing
import os

# ===== Binding =====
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
wsgi_app = "moodlog.wsgi:app"

# ===== Workers =====
# Annotation calls block on the model API, so threads keep workers responsive.
worker_class = os.environ.get("GUNICORN_WORKER_CLASS", "gthread")
workers = int(os.environ.get("GUNICORN_WORKERS", str(multiprocessing.cpu_count() + 1)))
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
max_requests = int(os.environ.get("GUNICORN_MAX_REQUESTS", "5000"))
max_requests_jitter = int(os.environ.get("GUNICORN_MAX_REQUESTS_JITTER", "500"))

# ===== Timeouts =====
# A request may wait on one model call, so stay above the client timeout.
_annotation_timeout = int(os.environ.get("ANNOTATION_TIMEOUT_SECONDS", "30"))
timeout = int(os.environ.get("GUNICORN_TIMEOUT", str(_annotation_timeout * 2)))
graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.environ.get("GUNICORN_KEEPALIVE", "5"))

# ===== Logging =====
accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")
errorlog = os.environ.get("GUNICORN_ERRORLOG", "-")
loglevel = os.environ.get("GUNICORN_LOGLEVEL", os.environ.get("LOG_LEVEL", "info")).lower()
capture_output = True
access_log_format = os.environ.get(
    "GUNICORN_ACCESS_LOG_FORMAT",
    '{"timestamp": "%(t)s", "remote": "%(h)s", "request": "%(r)s", '
    '"status": %(s)s, "response_time": %(D)s, "pid": %(p)s}',
)

# ===== Limits =====
limit_request_line = int(os.environ.get("GUNICORN_LIMIT_REQUEST_LINE", "8190"))
limit_request_fields = int(os.environ.get("GUNICORN_LIMIT_REQUEST_FIELDS", "100"))
forwarded_allow_ips = os.environ.get("GUNICORN_FORWARDED_ALLOW_IPS", "127.0.0.1")
preload_app = os.environ.get("GUNICORN_PRELOAD", "false").lower() in ("1", "true", "yes")

proc_name = os.environ.get("GUNICORN_PROC_NAME", "moodlog")

statsd_host = os.environ.get("STATSD_HOST")
if statsd_host:
    statsd_prefix = os.environ.get("STATSD_PREFIX", "moodlog")


# ===== Hooks =====
def when_ready(server):
    logging.getLogger(__name__).info(
        "Moodlog serving on %s (workers=%s, threads=%s, timeout=%ss)", bind, workers, threads, timeout
    )


def worker_abort(worker):
    """Called when a worker exceeded the timeout, usually a hung model call."""
    logging.getLogger(__name__).warning("Worker %s timed out after %ss", worker.pid, timeout)
