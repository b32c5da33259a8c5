"""Device lifecycle: owns at most one open joystick handle

States are `NoDevice` and `Open`. Discovery is driven from outside (startup,
hot-plug added events, periodic retry); removal is keyed on the SDL instance
id so churn on other devices never disturbs the active session.
"""
import enum
import logging
from typing import Optional

from core.reader import DeviceOpenError, DeviceReadError, JoystickBackend
from core.state import AxisSample, DeviceDescriptor
from devices.matcher import DeviceMatcher

LOG = logging.getLogger("txbridge.lifecycle")


class DeviceState(enum.Enum):
    NO_DEVICE = "NoDevice"
    OPEN = "Open"


class DeviceLifecycleManager:
    def __init__(self, backend: JoystickBackend, matcher: DeviceMatcher):
        self._backend = backend
        self._matcher = matcher
        self._handle = None
        self.current: Optional[DeviceDescriptor] = None

    @property
    def state(self) -> DeviceState:
        return DeviceState.OPEN if self._handle is not None else DeviceState.NO_DEVICE

    @property
    def target(self) -> str:
        return self._matcher.target

    @property
    def handle(self):
        return self._handle

    def try_open(self) -> bool:
        idx = self._matcher.find_candidate(self._backend.list_devices())
        if idx is None:
            LOG.info("'%s' not found in current device list", self._matcher.target)
            return False

        if self._handle is not None and self.current.index == idx:
            return True

        LOG.info("Attempting to open joystick at device index %d", idx)
        if self._handle is not None:
            LOG.info("Closing previously opened joystick (index %d)", self.current.index)
            self.close()

        try:
            opened = self._open_descriptor(idx)
        except DeviceOpenError as e:
            LOG.error("Failed to open joystick at index %d: %s", idx, e)
            return False

        self._handle, self.current = opened
        LOG.info("Opened joystick instance id %d name='%s' guid=%s",
                 self.current.instance_id, self.current.display_name, self.current.guid)
        return True

    def _open_descriptor(self, idx: int):
        """Open `idx` and query its identity; returns (handle, descriptor).

        Any failure after the handle is open releases it again, so a handle
        never exists without a descriptor.
        """
        handle = self._backend.open(idx)
        try:
            desc = DeviceDescriptor(
                index=idx,
                instance_id=self._backend.instance_id(handle),
                display_name=self._backend.device_name(handle),
                guid=self._backend.guid(handle),
            )
        except Exception as e:
            self._backend.close(handle)
            raise DeviceOpenError(f"joystick {idx}: identity query failed: {e}") from e
        return handle, desc

    def on_device_added(self, device_index: int) -> bool:
        if self._handle is not None:
            LOG.debug("device %s added while open; ignoring", device_index)
            return True
        return self.try_open()

    def on_device_removed(self, instance_id: int) -> bool:
        if self._handle is None or instance_id != self.current.instance_id:
            return False
        LOG.info("Active joystick (instance id %d) was removed", instance_id)
        self.close()
        return True

    def read_axes(self) -> AxisSample:
        if self._handle is None:
            return []
        try:
            return self._backend.read_axes(self._handle)
        except DeviceReadError as e:
            LOG.error("error reading joystick %s; closing: %s", self.current.display_name, e)
            self.close()
            return []

    def close(self):
        if self._handle is None:
            return
        handle, desc = self._handle, self.current
        self._handle = None
        self.current = None
        try:
            self._backend.close(handle)
        finally:
            LOG.info("Closed joystick index %d instance id %d name='%s'",
                     desc.index, desc.instance_id, desc.display_name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
