import pytest

from core.reader import DeviceOpenError, DeviceReadError, JoystickBackend
from core.state import EVENT_ADDED, EVENT_QUIT, EVENT_REMOVED, DeviceEvent, DeviceInfo


class FakeJoystick:
    def __init__(self, name, instance_id, guid, axes=None):
        self.name = name
        self.instance_id = instance_id
        self.guid = guid
        self.axes = list(axes or [0, 0, 0, 0])


class FakeBackend(JoystickBackend):
    """In-memory stand-in for the SDL joystick layer."""

    def __init__(self):
        self.devices = []  # enumeration order
        self.events = []
        self.opened = []  # every open() call, by index
        self.closed = []  # every close() call, by instance id
        self.fail_open = set()
        self.fail_read = False
        self.initialized = False
        self._next_instance = 0

    # test helpers
    def plug(self, name, axes=None, guid=None, emit=True):
        js = FakeJoystick(name, self._next_instance, guid or f"guid-{self._next_instance:04d}", axes)
        self._next_instance += 1
        self.devices.append(js)
        if emit:
            self.events.append(DeviceEvent(EVENT_ADDED, len(self.devices) - 1))
        return js

    def unplug(self, js, emit=True):
        self.devices.remove(js)
        if emit:
            self.events.append(DeviceEvent(EVENT_REMOVED, js.instance_id))

    def quit(self):
        self.events.append(DeviceEvent(EVENT_QUIT))

    # JoystickBackend
    def init(self):
        self.initialized = True

    def shutdown(self):
        self.initialized = False

    def poll_events(self):
        events, self.events = self.events, []
        return events

    def list_devices(self):
        return [DeviceInfo(i, js.name) for i, js in enumerate(self.devices)]

    def open(self, index):
        if index in self.fail_open or index >= len(self.devices):
            raise DeviceOpenError(f"joystick {index}: cannot open")
        self.opened.append(index)
        return self.devices[index]

    def close(self, handle):
        self.closed.append(handle.instance_id)

    def instance_id(self, handle):
        return handle.instance_id

    def device_name(self, handle):
        return handle.name

    def guid(self, handle):
        return handle.guid

    def read_axes(self, handle):
        if self.fail_read:
            raise DeviceReadError("device gone")
        return list(handle.axes)


class FakeClock:
    """Virtual monotonic clock in integer nanoseconds; sleep() advances it."""

    def __init__(self):
        self.ns = 0
        self.sleeps = []

    def __call__(self):
        return self.ns

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.ns += int(round(seconds * 1000)) * 1_000_000

    @property
    def ms(self):
        return self.ns // 1_000_000


class RecordingTransport:
    def __init__(self, connected=True, fail_on=None):
        self._connected = connected
        self.fail_on = fail_on  # 1-based send attempt that fails
        self.attempts = 0
        self.sent = []

    @property
    def connected(self):
        return self._connected

    def send(self, payload):
        if not self._connected:
            return False
        self.attempts += 1
        if self.fail_on is not None and self.attempts == self.fail_on:
            self._connected = False
            return False
        self.sent.append(payload)
        return True


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def clock():
    return FakeClock()
