"""Diagnostic: list every HID device and flag likely RC transmitters.

Independent of the streaming app. Run this when the transmitter is not
picked up, to see:
1. All HID devices connected (VID/PID, strings, usage page/usage)
2. Which ones look like a joystick or a radio, and why
"""
import logging
import sys

try:
    import hid
except Exception:
    hid = None

from devices.matcher import MatchRule, match_reasons

LOG = logging.getLogger("txbridge.hid")

GENERIC_DESKTOP_PAGE = 0x01
# Joystick, Gamepad, Multi-axis Controller
JOYSTICK_USAGES = (0x04, 0x05, 0x08)

KEYWORDS = (
    "radiomaster", "tx16s", "opentx", "er9x", "jumper", "tx16", "transmitter", "radi", "radio",
    "joystick", "gamepad", "controller",
)

KEYWORD_RULES = [
    MatchRule(field, kw)
    for kw in KEYWORDS
    for field in ("product_string", "manufacturer_string", "path")
]

SUGGESTIONS = (
    "Ensure your radio is in 'Joystick' or 'PC' mode (not storage/bootloader).",
    "Use a data USB cable and try other USB ports.",
    "Check the OS device manager for unknown devices or missing drivers.",
    "If the radio exposes a CDC/serial interface or custom driver it may not appear as a HID "
    "joystick; consider serial/CDC or libusb instead.",
)


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def is_joystick_usage(info: dict) -> bool:
    return info.get("usage_page") == GENERIC_DESKTOP_PAGE and info.get("usage") in JOYSTICK_USAGES


def classify(info: dict):
    """Return (is_match, reasons) for one hidapi enumeration record."""
    reasons = []
    if is_joystick_usage(info):
        reasons.append("usage indicates joystick/gamepad")
    record = {k: _text(info.get(k)) for k in ("product_string", "manufacturer_string", "path")}
    reasons.extend(match_reasons(KEYWORD_RULES, record))
    return bool(reasons), reasons


def survey(devices):
    """Classify every record; returns a summary dict used by `format_report`."""
    entries = []
    matches = []
    joystick_like = 0
    for idx, info in enumerate(devices):
        is_match, reasons = classify(info)
        if is_joystick_usage(info):
            joystick_like += 1
        if is_match:
            matches.append(idx)
        entries.append((idx, info, reasons))
    return {
        "entries": entries,
        "total": len(entries),
        "joystick_like": joystick_like,
        "matches": matches,
    }


def format_device(idx: int, info: dict, reasons) -> str:
    lines = [f"Device {idx}:"]
    lines.append(f"  Path:         {_text(info.get('path')) or '(null)'}")
    lines.append(f"  VID:PID:      0x{info.get('vendor_id', 0):04X}:0x{info.get('product_id', 0):04X}")
    for label, key in (("Serial", "serial_number"), ("Manufacturer", "manufacturer_string"),
                       ("Product", "product_string")):
        val = _text(info.get(key))
        if val:
            lines.append(f"  {label + ':':<14}{val}")
    lines.append(f"  Interface:    {info.get('interface_number', -1)}")
    lines.append(f"  Usage Page:   0x{info.get('usage_page', 0):X}")
    lines.append(f"  Usage:        0x{info.get('usage', 0):X}")
    if reasons:
        lines.append("  MATCHED: " + ", ".join(reasons))
    lines.append("  ---")
    return "\n".join(lines)


def format_report(result: dict) -> str:
    out = ["Enumerating HID devices (via hidapi)"]
    for idx, info, reasons in result["entries"]:
        out.append(format_device(idx, info, reasons))
    out.append("Summary:")
    out.append(f"  Total HID devices: {result['total']}")
    out.append(f"  Joystick-like (by usage): {result['joystick_like']}")
    out.append(f"  Devices matched by heuristics: {len(result['matches'])}")
    if result["matches"]:
        out.append("  Matched device indices: " + ", ".join(str(i) for i in result["matches"]))
    else:
        out.append("  No obvious RadioMaster or transmitter device found using simple heuristics.")
        out.append("  Suggestions:")
        out.extend(f"  - {s}" for s in SUGGESTIONS)
    return "\n".join(out)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
    if hid is None:
        LOG.error("hidapi not installed. Install with: pip install hidapi")
        return 1
    try:
        devices = hid.enumerate()
    except OSError as e:
        LOG.error("Failed to enumerate HID devices: %s", e)
        return 1
    print(format_report(survey(devices)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
