"""Base joystick backend abstraction

The core only talks to input hardware through this interface, so the
lifecycle manager and publish loop can be driven by a fake in tests.
"""
import abc
from typing import Any, List

from core.state import AxisSample, DeviceEvent, DeviceInfo


class BackendInitError(RuntimeError):
    """The input subsystem could not be started."""


class DeviceOpenError(RuntimeError):
    """A matched device could not be opened."""


class DeviceReadError(RuntimeError):
    """Reading from an open handle failed."""


class JoystickBackend(abc.ABC):
    @abc.abstractmethod
    def init(self):
        raise NotImplementedError

    @abc.abstractmethod
    def shutdown(self):
        raise NotImplementedError

    @abc.abstractmethod
    def poll_events(self) -> List[DeviceEvent]:
        """Drain every pending event without blocking."""
        raise NotImplementedError

    @abc.abstractmethod
    def list_devices(self) -> List[DeviceInfo]:
        raise NotImplementedError

    @abc.abstractmethod
    def open(self, index: int) -> Any:
        raise NotImplementedError

    @abc.abstractmethod
    def close(self, handle: Any):
        raise NotImplementedError

    @abc.abstractmethod
    def instance_id(self, handle: Any) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    def device_name(self, handle: Any) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    def guid(self, handle: Any) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    def read_axes(self, handle: Any) -> AxisSample:
        raise NotImplementedError
