"""State models and lightweight DTOs"""
from dataclasses import dataclass
from typing import List, Optional

EVENT_ADDED = "added"
EVENT_REMOVED = "removed"
EVENT_QUIT = "quit"

# One raw axis reading per physical axis, signed 16-bit range
AxisSample = List[int]


@dataclass(frozen=True)
class DeviceInfo:
    index: int
    name: str


@dataclass(frozen=True)
class DeviceDescriptor:
    index: int
    instance_id: int
    display_name: str
    guid: str


@dataclass(frozen=True)
class DeviceEvent:
    kind: str  # added / removed / quit
    which: Optional[int] = None  # device index for added, instance id for removed


@dataclass(frozen=True)
class AxisMapping:
    left_x: int = 3  # yaw
    left_y: int = 2  # throttle
    right_x: int = 0  # roll
    right_y: int = 1  # pitch


@dataclass(frozen=True)
class ControlFrame:
    yaw: float  # -1..1
    throttle: float  # 0..1
    pitch: float  # -1..1
    roll: float  # -1..1
    device_name: str
    device_index: int
    guid: str
    timestamp: str
