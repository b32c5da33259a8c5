"""Entry point for txbridge

Finds the RC transmitter joystick, samples its sticks and streams
newline-delimited JSON frames over TCP, surviving hot-plug and peer loss.
"""
import argparse
import logging
import signal
import sys

from core.console import ConsoleMirror
from core.loop import PublishLoop
from core.reader import BackendInitError
from devices.lifecycle import DeviceLifecycleManager
from devices.matcher import DeviceMatcher
from devices.pygame_joystick import PygameJoystickBackend
from mapper import Mapper
from transport.stream import StreamTransport

LOG = logging.getLogger("txbridge")


def build_parser():
    parser = argparse.ArgumentParser(description="txbridge: RC transmitter joystick → TCP JSON stream")
    parser.add_argument("--name", default=None,
                        help="Case-insensitive target device name (default: profile or 'radiomaster pocket joystick')")
    parser.add_argument("--profile", default=None, help="Optional YAML profile")
    parser.add_argument("--host", default=None, help="Stream host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Stream TCP port (default: 9000)")
    parser.add_argument("--no-clear", action="store_true", help="Do not clear the terminal on each frame")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level (default: INFO)")
    parser.add_argument("--log-format", default="%(levelname)s:%(name)s:%(message)s",
                        help="Logging format string (default: %(levelname)s:%(name)s:%(message)s)")
    parser.add_argument("--debug-modules", nargs="*", default=[],
                        help="Modules to set to DEBUG level (e.g., 'lifecycle', 'stream', 'loop', 'mapper')")
    return parser


def configure_logging(args):
    logging.basicConfig(level=getattr(logging, args.log_level), format=args.log_format, stream=sys.stderr)

    # Set DEBUG level for specific modules if requested
    module_map = {
        "lifecycle": "txbridge.lifecycle",
        "matcher": "txbridge.matcher",
        "stream": "txbridge.stream",
        "loop": "txbridge.loop",
        "mapper": "txbridge.mapper",
        "pygame": "txbridge.pygame",
    }
    for module in args.debug_modules:
        logger_name = module_map.get(module, f"txbridge.{module}")
        logging.getLogger(logger_name).setLevel(logging.DEBUG)


def load_mapper(args) -> Mapper:
    overrides = {}
    if args.name:
        overrides["device"] = {"name": args.name.lower()}
    stream = {}
    if args.host:
        stream["host"] = args.host
    if args.port is not None:
        stream["port"] = args.port
    if stream:
        overrides["stream"] = stream

    if args.profile:
        base = Mapper.load_profile(args.profile).profile
    else:
        base = {}
    for key, val in overrides.items():
        base.setdefault(key, {}).update(val)
    return Mapper(base)


def main(argv=None, backend=None):
    args = build_parser().parse_args(argv)
    configure_logging(args)

    mapper = load_mapper(args)
    if args.name:
        LOG.info("Target device name set to: '%s'", mapper.target_name)
    LOG.info("Starting RC transmitter joystick scanner")

    backend = backend or PygameJoystickBackend()
    try:
        backend.init()
    except BackendInitError as e:
        LOG.error("input subsystem init failed: %s", e)
        return 1

    transport = StreamTransport(mapper.stream_host, mapper.stream_port)
    lifecycle = DeviceLifecycleManager(backend, DeviceMatcher(mapper.target_name, mapper.aliases))
    loop = PublishLoop(backend, lifecycle, transport, mapper, ConsoleMirror(clear=not args.no_clear))

    def on_sigterm(signum, frame):
        LOG.info("signal %d received", signum)
        loop.request_stop()

    prev_sigterm = signal.signal(signal.SIGTERM, on_sigterm)

    try:
        with transport, lifecycle:
            transport.connect()
            loop.run()
    except KeyboardInterrupt:
        LOG.info("shutdown requested")
    finally:
        if prev_sigterm is not None:
            signal.signal(signal.SIGTERM, prev_sigterm)
        backend.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
