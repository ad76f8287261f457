# core/stats.py
import csv
import logging
from typing import Optional

from .console import MPS_TO_MPH, WATTS_PER_BHP

logger = logging.getLogger("forzadata")

MPS_TO_KMH = 3.6


def _num(v) -> Optional[float]:
    if v in (None, "", "None"):
        return None
    try:
        return float(v)
    except ValueError:
        return None


def _column(rows, name):
    return [x for x in (_num(r.get(name)) for r in rows) if x is not None]


def calc_stats(csv_path: str) -> dict:
    """
    Summarise a CSV session log.

    Keys are only present when the matching column exists and holds numbers:
    samples, top_speed_mph, top_speed_kmh, avg_speed_mph, max_rpm, max_bhp,
    max_torque, best_lap.
    """
    with open(csv_path, "r", newline="") as f:
        rows = list(csv.DictReader(f))

    out = {"samples": len(rows)}
    speed = _column(rows, "Speed")
    if speed:
        out["top_speed_mph"] = round(max(speed) * MPS_TO_MPH, 1)
        out["top_speed_kmh"] = round(max(speed) * MPS_TO_KMH, 1)
        out["avg_speed_mph"] = round(sum(speed) / len(speed) * MPS_TO_MPH, 1)
    rpm = _column(rows, "CurrentEngineRpm")
    if rpm:
        out["max_rpm"] = round(max(rpm))
    power = _column(rows, "Power")
    if power:
        out["max_bhp"] = round(max(power) / WATTS_PER_BHP)
    torque = _column(rows, "Torque")
    if torque:
        out["max_torque"] = round(max(torque), 1)
    laps = [x for x in _column(rows, "BestLap") if x > 0]
    if laps:
        out["best_lap"] = round(min(laps), 3)
    return out


def log_stats(stats: dict):
    logger.info("Session stats (%d samples)", stats.get("samples", 0))
    labels = [
        ("top_speed_mph", "Top speed (mph)"),
        ("top_speed_kmh", "Top speed (km/h)"),
        ("avg_speed_mph", "Average speed (mph)"),
        ("max_rpm", "Highest RPM"),
        ("max_bhp", "Peak power (bhp)"),
        ("max_torque", "Peak torque (Nm)"),
        ("best_lap", "Best lap (s)"),
    ]
    for key, label in labels:
        if key in stats:
            logger.info("  %s: %s", label, stats[key])
