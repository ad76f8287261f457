# web/api.py
import logging
import threading

from flask import Flask, Response, jsonify

logger = logging.getLogger("forzadata")


def build_app(store) -> Flask:
    app = Flask(__name__)

    @app.get("/forza")
    def forza():
        resp = Response(store.get(), mimetype="application/json")
        resp.headers["Access-Control-Allow-Origin"] = "*"
        return resp

    @app.get("/healthz")
    def healthz():
        return jsonify({"ok": True, "frames": store.count})

    return app


def serve_in_background(app: Flask, host: str, port: int) -> threading.Thread:
    t = threading.Thread(
        target=app.run,
        kwargs={"host": host, "port": port, "debug": False, "use_reloader": False},
        name="forzadata-http",
        daemon=True,
    )
    t.start()
    logger.info("JSON server listening on http://%s:%d/forza", host, port)
    return t
