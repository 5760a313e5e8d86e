"""Production entry point: serve the notification hub with Gunicorn.

Pub/sub listener threads live inside each worker process, so workers use the
threaded worker class and the listener shares the worker's Redis pool.
"""

import os
import sys

from gunicorn.app.wsgiapp import run


def build_argv() -> list[str]:
    """Assemble Gunicorn arguments from the environment.

    Environment Variables:
    - PORT: Port to bind on 0.0.0.0 (default: 8000)
    - GUNICORN_WORKERS: Worker processes (default: 4)
    - GUNICORN_THREADS: Threads per worker (default: 4)
    - GUNICORN_TIMEOUT: Worker timeout in seconds (default: 60)
    """
    return [
        "gunicorn",
        "notification_hub.wsgi:application",
        "--bind",
        f"0.0.0.0:{os.getenv('PORT', '8000')}",
        "--worker-class",
        "gthread",
        "--workers",
        os.getenv("GUNICORN_WORKERS", "4"),
        "--threads",
        os.getenv("GUNICORN_THREADS", "4"),
        "--timeout",
        os.getenv("GUNICORN_TIMEOUT", "60"),
        "--access-logfile",
        "-",
        "--error-logfile",
        "-",
    ]


def main():
    """Replace argv with the Gunicorn command line and start serving."""
    sys.argv = build_argv()
    run()


if __name__ == "__main__":
    main()
