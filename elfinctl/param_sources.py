"""Data sources that bind editor widgets to Elfin parameters."""

from __future__ import annotations

from typing import Callable, Optional

from .processor import ElfinParam, ElfinProcessor, float_for_cc

POLY_UNI_STREAMING_NAME = "poly_uni"


class ParamSource:
    """A continuous 0..1 source over one parameter, limited to its CC range."""

    def __init__(self, param: ElfinParam):
        self.param = param
        self.on_change: Optional[Callable[[ElfinParam], None]] = None

    @property
    def label(self) -> str:
        return self.param.desc.label

    @property
    def is_bipolar(self) -> bool:
        return self.param.desc.is_bipolar

    @property
    def min_value(self) -> float:
        return float_for_cc(self.param.desc.midi_cc_start)

    @property
    def max_value(self) -> float:
        return float_for_cc(self.param.desc.midi_cc_end)

    @property
    def default_value(self) -> float:
        return float_for_cc(self.param.desc.midi_cc_default)

    @property
    def value(self) -> float:
        return max(self.min_value, min(self.max_value, self.param.value))

    def set_value_from_gui(self, f: float) -> None:
        """Set the parameter, but only when the new value maps to a different CC."""
        if self.param.cc != self.param.cc_for_float(f):
            self.param.set_value(f)
            if self.on_change is not None:
                self.on_change(self.param)


class DiscreteParamSource:
    """A stepped source choosing among a parameter's labelled CC ranges."""

    default_value = 2
    min_value = 0

    def __init__(self, param: ElfinParam, processor: Optional[ElfinProcessor] = None):
        self.param = param
        self.processor = processor
        self.and_then_on_gui: Optional[Callable[[int], None]] = None

    @property
    def label(self) -> str:
        return self.param.desc.label

    @property
    def max_value(self) -> int:
        return len(self.param.desc.discrete_ranges) - 1

    @property
    def value(self) -> int:
        cc = self.param.cc
        for index, rng in enumerate(self.param.desc.discrete_ranges):
            if cc in rng:
                return index
        return 0

    def _range(self, i: int):
        ranges = self.param.desc.discrete_ranges
        if not 0 <= i < len(ranges):
            raise IndexError(f"no range {i} for {self.param.desc.streaming_name}")
        return ranges[i]

    def set_value_from_gui(self, i: int) -> None:
        """Move the parameter to the middle of range i."""
        rng = self._range(i)
        # Switching poly/unison needs all notes off so the device's voice manager does not wedge.
        if (
            self.param.desc.streaming_name == POLY_UNI_STREAMING_NAME
            and self.processor is not None
        ):
            self.processor.send_all_notes_off = True
        mid = (rng.low + rng.high) // 2
        self.param.set_value(float_for_cc(mid))
        if self.and_then_on_gui is not None:
            self.and_then_on_gui(i)

    def value_as_string_for(self, i: int) -> str:
        return self._range(i).label


_OSC12_CC = {
    (0, 0): 7,
    (0, 1): (39 + 16) // 2,
    (0, 2): (40 + 63) // 2,
    (1, 0): (88 + 111) // 2,
    (1, 1): (112 + 127) // 2,
    (1, 2): (64 + 87) // 2,
}


class Osc12Selector:
    """One of a linked pair of selectors that split the combined oscillator type."""

    default_value = 0
    min_value = 0

    def __init__(self, param: ElfinParam, which: int):
        self.param = param
        self.which = which
        self.other: Optional[Osc12Selector] = None

    @property
    def label(self) -> str:
        return f"Osc {self.which + 1}"

    @property
    def max_value(self) -> int:
        return 1 if self.which == 0 else 2

    @property
    def value(self) -> int:
        cc = self.param.cc
        if self.which == 0:
            return 0 if cc < 64 else 1
        if cc < 64:
            if cc < 16:
                return 0
            if cc < 40:
                return 1
            return 2
        if cc < 88:
            return 2
        if cc < 111:
            return 0
        return 1

    def reset_from_both_params(self, iv1: int, iv2: int) -> None:
        """Set the combined parameter from oscillator 1 and oscillator 2 choices."""
        osc1 = 0 if iv1 == 0 else 1
        cc = _OSC12_CC.get((osc1, iv2), 7)
        self.param.set_value(float_for_cc(cc))

    def set_value_from_gui(self, v: int) -> None:
        if self.other is None:
            raise RuntimeError("oscillator selector is not linked to its partner")
        if self.which == 0:
            self.reset_from_both_params(v, self.other.value)
        else:
            self.reset_from_both_params(self.other.value, v)

    def value_as_string_for(self, i: int) -> str:
        if self.which == 0:
            return "Saw" if i == 0 else "Sqr"
        return {0: "Saw", 1: "Sqr", 2: "Noise"}.get(i, "Err")


def tooltip_for(param: ElfinParam) -> tuple[str, str]:
    """Return the tooltip title and value line for a parameter."""
    desc = param.desc
    title = f"{desc.name} (cc={desc.midi_cc})"
    cc = param.cc
    text = f"value={cc}"
    if cc == desc.midi_cc_start and desc.midi_cc_start_label:
        text += f" ({desc.midi_cc_start_label})"
    if cc == desc.midi_cc_end and desc.midi_cc_end_label:
        text += f" ({desc.midi_cc_end_label})"
    return title, text