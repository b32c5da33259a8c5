"""Frame rendering: wire payload and the human-readable console block"""
import json

from core.state import AxisMapping, ControlFrame

DISPLAY_PRECISION = 3


def _r(value: float, precision: int) -> float:
    # + 0.0 folds -0.0 into 0.0
    return round(value, precision) + 0.0


def payload(frame: ControlFrame, precision: int = DISPLAY_PRECISION) -> dict:
    return {
        "device": {
            "name": frame.device_name,
            "index": frame.device_index,
            "guid": frame.guid,
            "timestamp": frame.timestamp,
        },
        "left_stick": {
            "yaw": _r(frame.yaw, precision),
            "throttle": _r(frame.throttle, precision),
        },
        "right_stick": {
            "pitch": _r(frame.pitch, precision),
            "roll": _r(frame.roll, precision),
        },
    }


def render_json(frame: ControlFrame, precision: int = DISPLAY_PRECISION) -> str:
    return json.dumps(payload(frame, precision), indent=2, ensure_ascii=False)


def render_human(frame: ControlFrame, mapping: AxisMapping, precision: int = DISPLAY_PRECISION) -> str:
    fmt = f"{{:.{precision}f}}"
    lines = [
        "LEFT STICK:",
        f"  Yaw (axis {mapping.left_x}): " + fmt.format(frame.yaw),
        f"  Throttle (axis {mapping.left_y}): mapped=[0..1] = " + fmt.format(frame.throttle),
        "",
        "RIGHT STICK:",
        f"  Pitch (axis {mapping.right_y}): " + fmt.format(frame.pitch),
        f"  Roll (axis {mapping.right_x}): " + fmt.format(frame.roll),
    ]
    return "\n".join(lines) + "\n"
