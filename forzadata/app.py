import logging
import os
import signal
import sys
from logging.handlers import RotatingFileHandler

from .config import load_config
from .core.console import ConsoleView
from .core.errors import SchemaError
from .core.logger import CSVLogger, JSONLogger
from .core.schema import load_schema, schema_length
from .core.snapshot import SnapshotSink, SnapshotStore
from .core.stats import calc_stats, log_stats
from .core.utils import get_outbound_ip
from .receiver import TelemetryReceiver
from .web.api import build_app, serve_in_background

logger = logging.getLogger("forzadata")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


class _SkipConsoleView(logging.Filter):
    def filter(self, record):
        return record.name != "forzadata.console"


def setup_logging(log_dir: str, debug: bool = False):
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if logger.handlers:
        return logger
    fmt = logging.Formatter(LOG_FORMAT)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        h = RotatingFileHandler(os.path.join(log_dir, "forzadata.log"), maxBytes=1_000_000, backupCount=5)
        h.setFormatter(fmt)
        h.addFilter(_SkipConsoleView())
        logger.addHandler(h)
    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    logger.addHandler(sh)
    return logger


def build_sinks(cfg, fields, store=None) -> list:
    sinks = []
    if cfg.console:
        sinks.append(ConsoleView())
    else:
        logger.info("Realtime terminal data output disabled")
    if cfg.csv_path:
        sinks.append(CSVLogger(cfg.csv_path, fields))
    else:
        logger.info("CSV Logging disabled")
    if cfg.json_path:
        sinks.append(JSONLogger(cfg.json_path))
    else:
        logger.info("JSON Logging disabled")
    if store is not None:
        sinks.append(SnapshotSink(store))
    return sinks


def install_close_handler(cfg, receiver):
    """Ctrl+C / SIGTERM: summarise the CSV log if there is one, then exit 0."""
    def _handler(signum, frame):
        receiver.close()
        if cfg.csv_path:
            try:
                log_stats(calc_stats(cfg.csv_path))
            except OSError as e:
                logger.error("Could not read %s for stats: %s", cfg.csv_path, e)
        logger.info("Stopped (%d frames, %d skipped)", receiver.frames, receiver.skipped)
        sys.exit(0)

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)


def main(argv=None) -> int:
    try:
        cfg = load_config(argv)
    except (OSError, ValueError) as e:
        print(f"forzadata: {e}", file=sys.stderr)
        return 1
    setup_logging(cfg.log_dir, cfg.debug)
    logger.info("Started Forza Data Tools")
    if cfg.debug:
        logger.info("Debug mode enabled")
    if cfg.horizon:
        logger.info("Forza Horizon mode selected")
    elif cfg.schema.lower() == "fm7":
        logger.info("Forza Motorsport mode selected")
    else:
        logger.info("Custom packet format: %s", cfg.schema)

    try:
        path = cfg.schema_path
        logger.info("Processing %s...", path)
        fields = load_schema(path)
    except SchemaError as e:
        logger.error("%s", e)
        return 1
    logger.info("Processed %d Telemetry types OK! (%d bytes per packet)", len(fields), schema_length(fields))

    store = SnapshotStore() if cfg.http else None
    try:
        sinks = build_sinks(cfg, fields, store)
    except OSError:
        logger.exception("Could not open log file")
        return 1
    receiver = TelemetryReceiver(fields, sinks, cfg.bind_ip, cfg.udp_port)
    try:
        receiver.bind()
    except OSError:
        logger.exception("Could not bind UDP %s:%d", cfg.bind_ip, cfg.udp_port)
        receiver.close()
        return 1

    if store is not None:
        serve_in_background(build_app(store), cfg.http_host, cfg.http_port)

    install_close_handler(cfg, receiver)
    logger.info("Forza data out server listening on %s:%d, waiting for Forza data...",
                get_outbound_ip(), receiver.port)
    try:
        receiver.serve_forever()
    except OSError:
        logger.exception("Error reading UDP data")
        receiver.close()
        return 1
    return 0

