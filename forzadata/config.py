import argparse
import os
from dataclasses import dataclass, fields
from typing import Optional

from .core.schema import BUNDLED, bundled_schema
from .core.utils import load_yaml


@dataclass
class Config:
    schema: str = "fm7"             # bundled format key or path to a .dat file
    bind_ip: str = "0.0.0.0"
    udp_port: int = 9999
    csv_path: Optional[str] = None
    json_path: Optional[str] = None
    http: bool = False
    http_host: str = "0.0.0.0"
    http_port: int = 8080
    console: bool = True
    debug: bool = False
    log_dir: str = "logs"

    @property
    def schema_path(self) -> str:
        if self.schema.lower() in BUNDLED:
            return bundled_schema(self.schema)
        return self.schema

    @property
    def horizon(self) -> bool:
        return self.schema.lower() == "fh4"


ENV = {
    "bind_ip": ("FORZA_BIND_IP", str),
    "udp_port": ("FORZA_UDP_PORT", int),
    "http_port": ("FORZA_HTTP_PORT", int),
    "log_dir": ("FORZA_LOG_DIR", str),
}

_FIELD_TYPES = {
    "schema": str, "bind_ip": str, "udp_port": int, "csv_path": str, "json_path": str,
    "http": bool, "http_host": str, "http_port": int, "console": bool, "debug": bool,
    "log_dir": str,
}


def _env_overrides(environ) -> dict:
    out = {}
    for key, (var, cast) in ENV.items():
        raw = environ.get(var)
        if raw not in (None, ""):
            try:
                out[key] = cast(raw)
            except ValueError:
                raise ValueError(f"{var}={raw!r} is not a valid {cast.__name__}") from None
    return out


def _file_overrides(path: str) -> dict:
    data = load_yaml(path)
    known = {f.name for f in fields(Config)}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        raise ValueError(f"Unknown config key(s) in {path}: {', '.join(unknown)}")
    out = {}
    for key, val in data.items():
        cast = _FIELD_TYPES[key]
        if val is None or (cast is bool and isinstance(val, bool)):
            out[key] = val
        elif cast is bool:
            raise ValueError(f"Config key '{key}' in {path} must be true or false")
        else:
            out[key] = cast(val)
    return out


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="forzadata", description="Decode Forza Data Out UDP telemetry")
    ap.add_argument("--config", help="YAML file with defaults for any option below")
    ap.add_argument("-c", dest="csv_path", metavar="CSV", help="Log data to given file in CSV format")
    ap.add_argument("-j", dest="json_path", metavar="JSON", help="Log data to given file in JSON format")
    ap.add_argument("-z", dest="horizon", action="store_true", default=None,
                    help="Forza Horizon 4 format (Forza Motorsport 7 if unset)")
    ap.add_argument("--schema", help="Custom packet format file (overrides -z)")
    ap.add_argument("-s", dest="http", action="store_true", default=None, help="Serve JSON snapshot over HTTP")
    ap.add_argument("--http-port", dest="http_port", type=int, help="HTTP port for -s (default 8080)")
    ap.add_argument("-q", dest="quiet", action="store_true", help="Disable realtime terminal output")
    ap.add_argument("-d", dest="debug", action="store_true", default=None, help="Extra debug information")
    ap.add_argument("-u", dest="udp_port", type=int, help="UDP port to listen on (default 9999)")
    ap.add_argument("-i", dest="bind_ip", help="Local IP address to bind to (default 0.0.0.0)")
    ap.add_argument("--log-dir", dest="log_dir", help="Directory for forzadata.log")
    return ap


def load_config(argv=None, environ=None) -> Config:
    """Defaults < environment < YAML file < command line."""
    args = build_parser().parse_args(argv)
    values = _env_overrides(os.environ if environ is None else environ)
    if args.config:
        values.update(_file_overrides(args.config))

    for key in ("csv_path", "json_path", "http", "http_port", "debug", "udp_port", "bind_ip", "log_dir"):
        val = getattr(args, key)
        if val is not None:
            values[key] = val
    if args.horizon:
        values["schema"] = "fh4"
    if args.schema:
        values["schema"] = args.schema
    if args.quiet:
        values["console"] = False
    return Config(**values)
