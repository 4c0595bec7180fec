from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from flask import Flask, jsonify

logger = logging.getLogger(__name__)

# =========================================================
# Flask keep-alive (Render / UptimeRobot)
# =========================================================
app = Flask("gangcheck")


@app.get("/")
def home():
    return "OK", 200, {"Content-Type": "text/plain; charset=utf-8"}


@app.get("/health")
def health():
    return jsonify(ok=True, date=datetime.now(timezone.utc).isoformat())


def _run_flask(port: int):
    logger.info("Health server listening on %s", port)
    app.run(host="0.0.0.0", port=port)


def start_keepalive(port: int) -> threading.Thread:
    thread = threading.Thread(target=_run_flask, args=(port,), daemon=True, name="keepalive")
    thread.start()
    return thread
