# core/console.py
import logging

# per-frame lines; app.setup_logging keeps them out of the log file
logger = logging.getLogger("forzadata.console")

WATTS_PER_BHP = 745.7
MPS_TO_MPH = 2.237


def check_attitude(total_slip_front: int, total_slip_rear: int) -> str:
    """Balance of the car from front vs rear combined tyre slip."""
    if total_slip_rear > total_slip_front:
        return "Oversteer"
    if total_slip_front > total_slip_rear:
        return "Understeer"
    return "Neutral"


class ConsoleView:
    def __init__(self, log=None):
        self.log = log or logger

    def emit(self, frame):
        f32 = frame.f32
        slip_rear = f32.get("TireCombinedSlipRearLeft", 0.0) + f32.get("TireCombinedSlipRearRight", 0.0)
        slip_front = f32.get("TireCombinedSlipFrontLeft", 0.0) + f32.get("TireCombinedSlipFrontRight", 0.0)
        # float slip is rarely exactly equal, compare whole units
        total_rear, total_front = int(slip_rear), int(slip_front)
        attitude = check_attitude(total_front, total_rear)

        self.log.info(
            "RPM: %.0f \t Gear: %d \t BHP: %.0f \t Speed: %.0f \t Total slip: %.0f \t Attitude: %s",
            f32.get("CurrentEngineRpm", 0.0), frame.u8.get("Gear", 0),
            f32.get("Power", 0.0) / WATTS_PER_BHP, f32.get("Speed", 0.0) * MPS_TO_MPH,
            slip_rear, attitude,
        )
        if (total_rear + total_front) > 2 and attitude == "Oversteer":
            self.log.info("TRACTION LOST!")

    def close(self):
        pass
