"""Mapping engine: load YAML profiles and map raw axis samples -> ControlFrame"""
import copy
import datetime
import logging
from typing import Optional, Sequence

import yaml

from core.framing import DISPLAY_PRECISION
from core.normalize import axis_value, throttle_value
from core.state import AxisMapping, ControlFrame, DeviceDescriptor
from devices.matcher import DEFAULT_ALIASES, DEFAULT_TARGET
from transport.stream import DEFAULT_HOST, DEFAULT_PORT

LOG = logging.getLogger("txbridge.mapper")

DEFAULT_PROFILE = {
    "device": {
        "name": DEFAULT_TARGET,
        "aliases": list(DEFAULT_ALIASES),
    },
    "stream": {
        "host": DEFAULT_HOST,
        "port": DEFAULT_PORT,
    },
    # Physical layout of the RadioMaster Pocket in joystick mode: left stick
    # reports on axes 2/3, right stick on 0/1.
    "axes": {
        "left_x": 3,
        "left_y": 2,
        "right_x": 0,
        "right_y": 1,
    },
    "display_precision": DISPLAY_PRECISION,
}


def _merge(base: dict, override: dict) -> dict:
    out = copy.deepcopy(base)
    for key, val in (override or {}).items():
        if isinstance(val, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], val)
        else:
            out[key] = val
    return out


def local_timestamp(now: Optional[datetime.datetime] = None) -> str:
    """ISO-8601 with the local UTC offset, second precision."""
    now = now or datetime.datetime.now()
    return now.astimezone().isoformat(timespec="seconds")


class Mapper:
    def __init__(self, profile: Optional[dict] = None):
        self.profile = _merge(DEFAULT_PROFILE, profile or {})
        axes = self.profile["axes"]
        self.mapping = AxisMapping(
            left_x=int(axes["left_x"]),
            left_y=int(axes["left_y"]),
            right_x=int(axes["right_x"]),
            right_y=int(axes["right_y"]),
        )
        self.precision = int(self.profile.get("display_precision", DISPLAY_PRECISION))
        LOG.debug("axis mapping: %s", self.mapping)

    @classmethod
    def load_profile(cls, path: str):
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"profile {path} must be a mapping, got {type(data).__name__}")
        return cls(data)

    @property
    def target_name(self) -> str:
        return self.profile["device"]["name"]

    @property
    def aliases(self):
        return tuple(self.profile["device"].get("aliases") or ())

    @property
    def stream_host(self) -> str:
        return self.profile["stream"]["host"]

    @property
    def stream_port(self) -> int:
        return int(self.profile["stream"]["port"])

    def build_frame(self, sample: Sequence[int], device: DeviceDescriptor,
                    timestamp: Optional[str] = None) -> ControlFrame:
        m = self.mapping
        return ControlFrame(
            yaw=axis_value(sample, m.left_x),
            throttle=throttle_value(sample, m.left_y),
            pitch=axis_value(sample, m.right_y),
            roll=axis_value(sample, m.right_x),
            device_name=device.display_name,
            device_index=device.index,
            guid=device.guid,
            timestamp=timestamp or local_timestamp(),
        )
