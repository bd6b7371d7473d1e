"""Parameter state and MIDI CC output for the Elfin controller."""

from __future__ import annotations

import logging
import math
import random
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .configuration import ElfinControl, ElfinDescription, build_configuration

log = logging.getLogger(__name__)

PLUGIN_NAME = "The Elfin Controller"
SYSEX_SIZE = 108
ALL_NOTES_OFF_CC = 123
_CONTROL_STATUS = 0xB0
_INTERVAL_STEPS = 1000


class PatchError(ValueError):
    """Raised when patch data cannot be loaded."""


def _round_half_away(x: float) -> int:
    return int(math.floor(x + 0.5)) if x >= 0 else -int(math.floor(-x + 0.5))


def _clamp(x, lo, hi):
    return max(lo, min(hi, x))


def float_for_cc(cc: int) -> float:
    """Map a CC value 0..127 to a normalised float, clamped to 0..1."""
    return _clamp(cc / 127.0, 0.0, 1.0)


@dataclass(frozen=True)
class MidiEvent:
    """A control-change message at a sample offset within a block."""

    time: int
    channel: int
    controller: int
    value: int

    def to_bytes(self) -> bytes:
        return bytes([_CONTROL_STATUS | (self.channel - 1), self.controller, self.value])


class ElfinParam:
    """One host parameter in 0..1 tied to a synthesizer control."""

    def __init__(self, control: ElfinControl, desc: ElfinDescription):
        self.control = control
        self.desc = desc
        self.value = self._snap(float_for_cc(desc.midi_cc_default))
        self.invalid = False
        self.listener: Optional[Callable[["ElfinParam"], None]] = None

    @staticmethod
    def _snap(value: float) -> float:
        value = _clamp(value, 0.0, 1.0)
        return math.floor(value * _INTERVAL_STEPS + 0.5) / _INTERVAL_STEPS

    def cc_for_float(self, f: float) -> int:
        return _clamp(_round_half_away(_clamp(f, 0.0, 1.0) * 127), 0, 127)

    @property
    def cc(self) -> int:
        return self.cc_for_float(self.value)

    def set_value(self, value: float) -> None:
        """Set the normalised value, mark it for sending and notify the listener."""
        self.value = self._snap(value)
        self.invalid = True
        if self.listener is not None:
            self.listener(self)

    def __repr__(self) -> str:
        return f"ElfinParam({self.control.name}, cc={self.cc})"


def _leading_int(text: Optional[str], default: int) -> int:
    if text is None:
        return default
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else default


class ElfinProcessor:
    """Holds all parameters and turns changes into MIDI CC messages."""

    MAX_MESSAGES_PER_SAMPLE = 3

    def __init__(self, standalone: bool = False):
        self.config = build_configuration()
        self.is_playing = False
        self.refresh_ui = False
        self.rebuild_ui = False
        self.send_all_notes_off = False
        self.sample_gap = 0
        self.midi_gap_multiplier = 2

        self.params: list[ElfinParam] = []
        self.params_by_cc: dict[int, ElfinParam] = {}
        for control in ElfinControl:
            param = ElfinParam(control, self.config[control])
            param.listener = self._parameter_changed
            if standalone:
                param.invalid = True
            self.params.append(param)
            self.params_by_cc[param.desc.midi_cc] = param

        if standalone:
            self.send_all_notes_off = True

    def __getitem__(self, control: ElfinControl) -> ElfinParam:
        return self.params[control]

    def _parameter_changed(self, param: ElfinParam) -> None:
        self.refresh_ui = True

    def prepare_to_play(self, sample_rate: float, samples_per_block: int) -> None:
        self.is_playing = True
        self.sample_gap = math.ceil(sample_rate / 48000 * 4)

    def release_resources(self) -> None:
        self.is_playing = False

    def process_block(self, num_samples: int) -> list[MidiEvent]:
        """Emit pending CC messages, spaced out across the block."""
        events: list[MidiEvent] = []
        midi_time = 0

        if self.send_all_notes_off:
            self.send_all_notes_off = False
            midi_time = min(self.sample_gap, num_samples - 1)
            events.append(MidiEvent(0, 1, ALL_NOTES_OFF_CC, 0))

        count = 0
        for param in self.params:
            if not param.invalid:
                continue
            param.invalid = False
            events.append(MidiEvent(midi_time, 1, param.desc.midi_cc, param.cc))
            if count == self.MAX_MESSAGES_PER_SAMPLE:
                count = 0
                midi_time += self.midi_gap_multiplier * self.sample_gap
            count += 1
            if midi_time >= num_samples:
                break

        return events

    def to_xml(self) -> str:
        root = ET.Element("elfin", {"version": "1"})
        for param in self.params:
            ET.SubElement(
                root,
                "param",
                {
                    "id": param.desc.streaming_name,
                    "cc": str(param.desc.midi_cc),
                    "ccval": str(param.cc),
                },
            )
        ET.indent(root, space="  ")
        body = ET.tostring(root, encoding="unicode")
        return f'<?xml version="1.0" encoding="UTF-8"?>\n\n{body}\n'

    def from_xml(self, text: str) -> None:
        """Load a patch from its XML form. Raises PatchError if it is not one."""
        self.send_all_notes_off = True
        try:
            root = ET.fromstring(text)
        except ET.ParseError as exc:
            raise PatchError(f"malformed patch XML: {exc}") from exc

        if root.tag != "elfin":
            raise PatchError(f"not an elfin patch: <{root.tag}>")
        if _leading_int(root.get("version"), -1) != 1:
            raise PatchError("unsupported patch version")

        values = {
            child.get("id", ""): _leading_int(child.get("ccval"), 0)
            for child in root
            if child.tag == "param"
        }
        for param in self.params:
            cc = values.get(param.desc.streaming_name)
            if cc is not None:
                param.set_value(float_for_cc(cc))

    def from_syx(self, data: bytes) -> None:
        """Load a patch from a dump of control-change triples."""
        data = bytes(data)
        if len(data) != SYSEX_SIZE:
            raise PatchError(f"sysex data must be {SYSEX_SIZE} bytes, got {len(data)}")
        self.send_all_notes_off = True
        for offset in range(0, len(data), 3):
            status, cc, value = data[offset:offset + 3]
            if status != _CONTROL_STATUS:
                raise PatchError(f"non-control byte at {offset}")
            param = self.params_by_cc.get(cc)
            if param is None:
                log.warning("unable to map param %d val=%d", cc, value)
            else:
                param.set_value(float_for_cc(value))

    def randomize_patch(self, rng: Optional[random.Random] = None) -> None:
        rng = rng or random.Random()
        for param in self.params:
            param.set_value(float_for_cc(rng.randrange(128)))

    def get_state(self) -> bytes:
        return self.to_xml().encode("utf-8") + b"\0"

    def set_state(self, data: bytes) -> None:
        text = bytes(data).decode("utf-8").rstrip("\0")
        if text:
            self.from_xml(text)

    def init_patch(self) -> None:
        for param in self.params:
            param.set_value(float_for_cc(param.desc.midi_cc_default))

    def resend_all(self) -> None:
        for param in self._iter_params():
            param.invalid = True

    def _iter_params(self) -> Iterable[ElfinParam]:
        return iter(self.params)