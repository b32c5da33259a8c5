"""Sampling & publish loop

Single-threaded and cooperative: every tick drains pending events, then
either retries discovery (no device) or samples and publishes on the 100 ms
gate. The only suspension points are the two sleeps.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from core.console import ConsoleMirror
from core.framing import render_human, render_json
from core.reader import JoystickBackend
from core.state import EVENT_ADDED, EVENT_QUIT, EVENT_REMOVED, ControlFrame
from devices.lifecycle import DeviceLifecycleManager, DeviceState
from mapper import Mapper
from transport.stream import StreamTransport, encode_line

LOG = logging.getLogger("txbridge.loop")

_NS_PER_MS = 1_000_000


@dataclass(frozen=True)
class LoopTiming:
    publish_interval_ms: int = 100
    tick_sleep_ms: int = 50
    idle_sleep_ms: int = 200
    retry_every: int = 10  # idle iterations between discovery retries


class PublishLoop:
    def __init__(self, backend: JoystickBackend, lifecycle: DeviceLifecycleManager,
                 transport: StreamTransport, mapper: Mapper,
                 console: Optional[ConsoleMirror] = None,
                 timing: LoopTiming = LoopTiming(),
                 clock: Callable[[], int] = time.monotonic_ns,
                 sleep: Callable[[float], None] = time.sleep):
        self.backend = backend
        self.lifecycle = lifecycle
        self.transport = transport
        self.mapper = mapper
        self.console = console
        self.timing = timing
        self._clock = clock
        self._sleep = sleep
        self.running = False
        self.idle_iterations = 0
        self.frames_published = 0
        self._last_publish_ms = None

    def _now_ms(self) -> int:
        return self._clock() // _NS_PER_MS

    def request_stop(self):
        self.running = False

    def start(self):
        self.running = True
        self.idle_iterations = 0
        # first open tick publishes immediately
        self._last_publish_ms = self._now_ms() - self.timing.publish_interval_ms
        self.lifecycle.try_open()

    def run(self):
        self.start()
        try:
            while self.running:
                self.step()
        finally:
            self.lifecycle.close()
            LOG.info("loop stopped after %d frames", self.frames_published)

    def step(self):
        self._drain_events()
        if not self.running:
            return

        if self.lifecycle.state is DeviceState.NO_DEVICE:
            self.idle_iterations += 1
            if self.idle_iterations % self.timing.retry_every == 0:
                if not self.lifecycle.try_open() and self.console is not None:
                    self.console.show_status(DeviceState.NO_DEVICE.value,
                                             f"waiting for '{self.lifecycle.target}'")
            self._sleep(self.timing.idle_sleep_ms / 1000.0)
            return

        now = self._now_ms()
        if now - self._last_publish_ms >= self.timing.publish_interval_ms:
            self._last_publish_ms = now
            self.publish()

        self._sleep(self.timing.tick_sleep_ms / 1000.0)

    def _drain_events(self):
        for ev in self.backend.poll_events():
            if ev.kind == EVENT_QUIT:
                LOG.info("quit event received")
                self.running = False
            elif ev.kind == EVENT_ADDED:
                self.lifecycle.on_device_added(ev.which)
            elif ev.kind == EVENT_REMOVED:
                self.lifecycle.on_device_removed(ev.which)

    def publish(self) -> Optional[ControlFrame]:
        sample = self.lifecycle.read_axes()
        device = self.lifecycle.current
        if device is None:
            # read failure closed the device
            return None
        frame = self.mapper.build_frame(sample, device)
        json_text = render_json(frame, self.mapper.precision)
        if self.console is not None:
            self.console.show_frame(json_text, render_human(frame, self.mapper.mapping, self.mapper.precision))
        self.transport.send(encode_line(json_text))
        self.frames_published += 1
        LOG.debug("published frame %d: %s", self.frames_published, frame)
        return frame
