"""Joystick backend using SDL2 via pygame.joystick

Provides `PygameJoystickBackend`, the capability the lifecycle manager and the
publish loop use for enumeration, hot-plug events and axis reads. Runs
headless: no window is ever created.
"""
import logging
import os

try:
    import pygame
except Exception:
    pygame = None

from core.normalize import to_raw
from core.reader import (
    BackendInitError,
    DeviceOpenError,
    DeviceReadError,
    JoystickBackend,
)
from core.state import EVENT_ADDED, EVENT_QUIT, EVENT_REMOVED, DeviceEvent, DeviceInfo

LOG = logging.getLogger("txbridge.pygame")


class PygameJoystickBackend(JoystickBackend):
    """Reads joysticks through pygame 2 (SDL2 joystick API).

    Handles returned by `open` are `pygame.joystick.JoystickType` objects.
    """

    def __init__(self):
        self._initialized = False

    def init(self):
        if pygame is None:
            raise BackendInitError("pygame not available")
        # headless, and keep receiving joystick events without window focus
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
        os.environ.setdefault("SDL_JOYSTICK_ALLOW_BACKGROUND_EVENTS", "1")
        try:
            pygame.display.init()
            pygame.joystick.init()
        except pygame.error as e:
            raise BackendInitError(str(e)) from e
        self._initialized = True
        LOG.info("SDL joystick subsystem ready (pygame %s, SDL %s)",
                 pygame.version.ver, ".".join(str(p) for p in pygame.get_sdl_version()))

    def shutdown(self):
        if not self._initialized:
            return
        self._initialized = False
        pygame.joystick.quit()
        pygame.quit()

    def poll_events(self):
        events = []
        for ev in pygame.event.get():
            if ev.type == pygame.QUIT:
                events.append(DeviceEvent(EVENT_QUIT))
            elif ev.type == pygame.JOYDEVICEADDED:
                LOG.info("SDL event: JOYDEVICEADDED device index=%s", ev.device_index)
                events.append(DeviceEvent(EVENT_ADDED, ev.device_index))
            elif ev.type == pygame.JOYDEVICEREMOVED:
                LOG.info("SDL event: JOYDEVICEREMOVED instance_id=%s", ev.instance_id)
                events.append(DeviceEvent(EVENT_REMOVED, ev.instance_id))
        return events

    def list_devices(self):
        devices = []
        for i in range(pygame.joystick.get_count()):
            try:
                name = pygame.joystick.Joystick(i).get_name() or "(unknown)"
            except pygame.error:
                LOG.debug("could not query joystick %d", i, exc_info=True)
                name = "(unknown)"
            devices.append(DeviceInfo(i, name))
        return devices

    def open(self, index):
        try:
            js = pygame.joystick.Joystick(index)
            js.init()
        except pygame.error as e:
            raise DeviceOpenError(f"joystick {index}: {e}") from e
        LOG.debug("opened %s (axes=%d, buttons=%d, hats=%d)",
                  js.get_name(), js.get_numaxes(), js.get_numbuttons(), js.get_numhats())
        return js

    def close(self, handle):
        try:
            handle.quit()
        except pygame.error:
            LOG.debug("joystick already gone on close", exc_info=True)

    def instance_id(self, handle):
        return handle.get_instance_id()

    def device_name(self, handle):
        return handle.get_name() or "(unknown)"

    def guid(self, handle):
        return handle.get_guid()

    def read_axes(self, handle):
        try:
            return [to_raw(handle.get_axis(a)) for a in range(handle.get_numaxes())]
        except pygame.error as e:
            raise DeviceReadError(str(e)) from e
