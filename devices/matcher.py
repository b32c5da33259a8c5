"""Device matching rules

A rule is a declarative (field, needle) pair; `match_reasons` evaluates an
ordered rule list against one record. Used for picking the transmitter out of
the joystick list and by the HID survey.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from core.state import DeviceInfo

LOG = logging.getLogger("txbridge.matcher")

DEFAULT_TARGET = "radiomaster pocket joystick"
# Vendor firmware reports different names per platform/mode
DEFAULT_ALIASES = ("radiomaster", "edgetx")


@dataclass(frozen=True)
class MatchRule:
    field: str
    needle: str
    casefold: bool = True
    substring: bool = True

    def matches(self, value) -> bool:
        if not value or not self.needle:
            return False
        value = str(value)
        needle = self.needle
        if self.casefold:
            value = value.casefold()
            needle = needle.casefold()
        if self.substring:
            return needle in value
        return needle == value

    def describe(self) -> str:
        return f"{self.field} contains '{self.needle}'" if self.substring else f"{self.field} is '{self.needle}'"


def _field(record, name):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def match_reasons(rules: Iterable[MatchRule], record) -> List[str]:
    """Return a description of every rule that matches `record`, in rule order."""
    return [rule.describe() for rule in rules if rule.matches(_field(record, rule.field))]


class DeviceMatcher:
    def __init__(self, target: str = DEFAULT_TARGET, aliases: Sequence[str] = DEFAULT_ALIASES):
        self.target = target
        self.aliases = tuple(aliases)
        self.rules = [MatchRule("name", n) for n in (target, *self.aliases) if n]

    def find_candidate(self, devices: Iterable[DeviceInfo]) -> Optional[int]:
        for dev in devices:
            reasons = match_reasons(self.rules, dev)
            if reasons:
                LOG.info("Found candidate joystick index=%d name='%s' (%s)",
                         dev.index, dev.name, reasons[0])
                return dev.index
        return None


def find_candidate(devices: Iterable[DeviceInfo], target: str = DEFAULT_TARGET,
                   aliases: Sequence[str] = DEFAULT_ALIASES) -> Optional[int]:
    return DeviceMatcher(target, aliases).find_candidate(devices)
