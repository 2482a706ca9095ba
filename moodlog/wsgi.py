"""WSGI entrypoint: ``gunicorn -c deploy/gunicorn.conf.py`` or ``python -m moodlog.wsgi``."""

from __future__ import annotations

import logging
import os

from moodlog import create_app

# Module loggers propagate to the root handler; gunicorn captures stderr.
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = create_app()

if __name__ == "__main__":
    host = os.environ.get("FLASK_RUN_HOST", "127.0.0.1")
    port = int(os.environ.get("FLASK_RUN_PORT", "5001"))
    app.run(host=host, port=port)
