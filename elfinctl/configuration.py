"""Control definitions and MIDI CC mapping for the Elfin 04 synthesizer."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

RIGHT_ARROW = "\u21E8 "


class ElfinControl(enum.IntEnum):
    """Every controllable parameter of the synthesizer, in parameter order."""

    OSC12_TYPE = 0
    OSC12_MIX = 1
    OSC2_COARSE = 2
    OSC2_FINE = 3

    SUB_TYPE = 4
    SUB_LEVEL = 5

    EG_TO_PITCH = 6
    EG_TO_PITCH_TARGET = 7

    FILT_CUTOFF = 8
    FILT_RESONANCE = 9
    EG_TO_CUTOFF = 10

    EG_ON_OFF = 11
    EG_A = 12
    EG_D = 13
    EG_S = 14
    EG_R = 15

    LFO_TYPE = 16
    LFO_RATE = 17
    LFO_TO_PITCH = 18
    LFO_TO_CUTOFF = 19

    LFO_DEPTH = 20
    EG_TO_LFORATE = 21
    LFO_TO_PITCH_TARGET = 22
    LFO_FADE_TIME = 23

    PBEND_RANGE = 24
    PITCH_TO_CUTOFF = 25
    EXP_TO_CUTOFF = 26
    EXP_TO_AMP_LEVEL = 27

    PORTA = 28
    LEGATO = 29
    KEY_ASSIGN_MODE = 30

    OSC_LEVEL = 31
    UNI_DETUNE = 32
    POLY_UNI_MODE = 33
    DAMP_AND_ATTACK = 34


N_ELFIN_PARAMS = len(ElfinControl)


@dataclass
class LabeledMidiRange:
    """An inclusive range of CC values carrying a display label."""

    low: int = -1
    high: int = -1
    label: str = "err"

    def __contains__(self, cc: int) -> bool:
        return self.low <= cc <= self.high


@dataclass
class ElfinDescription:
    """Static description of one control: names, CC number, default and ranges."""

    streaming_name: str = ""
    name: str = ""
    label: str = ""
    midi_cc: int = -1
    midi_cc_default: int = 0
    is_bipolar: bool = False
    midi_cc_start: int = 0
    midi_cc_end: int = 127
    midi_cc_start_label: str = ""
    midi_cc_end_label: str = ""
    discrete_ranges: list[LabeledMidiRange] = field(default_factory=list)

    def has_discrete_ranges(self) -> bool:
        return bool(self.discrete_ranges)

    def set_as_two_stage(self, lo: str, hi: str) -> None:
        """Split the CC range into a lower and an upper half."""
        self.discrete_ranges = [
            LabeledMidiRange(0, 63, lo),
            LabeledMidiRange(64, 127, hi),
        ]


def build_configuration() -> dict[ElfinControl, ElfinDescription]:
    """Build a fresh mapping of every control to its description.

    Raises ValueError if a control is missing or a streaming name repeats.
    """
    C = ElfinControl
    D = ElfinDescription
    config: dict[ElfinControl, ElfinDescription] = {
        C.OSC12_TYPE: D("osc12_type", "OSC 1/2 Type", "Type", 24, 7),
        C.OSC12_MIX: D("osc12_mix", "OSC 1/2 Mix", "1/2 Mix", 25, 64, True),
        C.OSC2_COARSE: D("osc2_coarse", "OSC2 Coarse", "2 Coarse", 20, 64, True),
        C.OSC2_FINE: D("osc2_fine", "OSC2 Fine", "2 Fine", 21, 64, True),
        C.FILT_CUTOFF: D("filt_cutoff", "Filter Cutoff", "Cutoff", 16, 127),
        C.FILT_RESONANCE: D("filt_resonance", "Filter Resonance", "Res", 17, 0),
        C.EG_TO_CUTOFF: D("eg_to_cutoff", "Filter EG to Cutoff", "EG>CO", 18, 64, True),
        C.SUB_TYPE: D("sub_type", "Sub Type", "SubType", 29, 15),
        C.SUB_LEVEL: D("sub_level", "Sub Level", "SubLev", 26, 0),
        C.EG_TO_PITCH: D("eg_to_pitch", "EG to Pitch", "EG>Pitch", 104, 64, True),
        C.EG_TO_PITCH_TARGET: D("eg_to_pitch_target", "EG Pitch Target", "EGPTgt", 105, 31),
        C.EG_ON_OFF: D("eg_onoff", "AEG Active", "OnOff", 31, 31),
        C.EG_A: D("eg_a", "EG Attack", "A", 23, 0),
        C.EG_D: D("eg_d", "EG Decay", "D", 19, 0),
        C.EG_S: D("eg_s", "EG Sustain", "S", 27, 127),
        C.EG_R: D("eg_r", "EG Release", "R", 28, 31),
        C.LFO_TYPE: D("lfo_type", "LFO Type", "Type", 14, 7),
        C.LFO_RATE: D("lfo_rate", "LFO Rate", "Rate", 80, 64),
        C.LFO_DEPTH: D("lfo_depth", "LFO Depth", "Depth", 81, 127),
        C.LFO_TO_PITCH: D("lfo_to_pitch", "LFO To Pitch", "> Pitch", 82, 64, True),
        C.LFO_TO_CUTOFF: D("lfo_to_cutoff", "LFO To Cutoff", "> Cutoff", 83, 64, True),
        C.LFO_TO_PITCH_TARGET: D("lfo_to_pitch_tgt", "LFO To Pitch Target", "Target", 9, 31),
        C.LFO_FADE_TIME: D("lfo_fade_time", "LFO Fade Time", "Fade T", 15, 0),
        C.EG_TO_LFORATE: D("eg_to_rate", "EG to LFO Rate", "EG > Rate", 3, 64, True),
        C.PBEND_RANGE: D("pbend_range", "Pitch Bend Range", "PB", 85, 2),
        C.PITCH_TO_CUTOFF: D("pitch_to_cut", "Pitch to Cutoff", "KeyTrk", 86, 16),
        C.EXP_TO_CUTOFF: D("exp_to_cut", "Exp to Cutoff", "Exp>CO", 106, 0),
        C.EXP_TO_AMP_LEVEL: D("exp_to_amp", "Exp to Amp", "Exp>Amp", 107, 0),
        C.PORTA: D("portamento", "Portamento", "Porta", 22, 1),
        C.LEGATO: D("legato", "Legato", "Legato", 30, 31),
        C.KEY_ASSIGN_MODE: D("key_assign", "Key Assign", "KAsn", 87, 119),
        C.OSC_LEVEL: D("osc_level", "OSC Level", "OscLev", 108, 127),
        C.UNI_DETUNE: D("uni_detune", "Unison Detune", "UniDt", 109, 0),
        C.POLY_UNI_MODE: D("poly_uni", "Poly Unison Mode", "Mode", 110, 31),
        C.DAMP_AND_ATTACK: D("damp_and_attack", "Damp and Attack", "Dmp/Atk", 111, 63),
    }

    R = LabeledMidiRange
    config[C.OSC12_TYPE].discrete_ranges = [
        R(0, 15, "Saw/Saw"),
        R(16, 39, "Saw/Sqr"),
        R(40, 63, "Saw/Noise"),
        R(64, 87, "Sqr/Noise"),
        R(88, 111, "Sqr/Saw"),
        R(112, 127, "Sqr/Sqr"),
    ]
    config[C.SUB_TYPE].discrete_ranges = [
        R(0, 31, "Sin"),
        R(32, 95, "Noise"),
        R(96, 127, "Square"),
    ]
    config[C.LFO_TYPE].discrete_ranges = [
        R(0, 15, "Tri NoKT"),
        R(16, 47, "Tri"),
        R(48, 79, "Saw Dn"),
        R(80, 111, "Rand"),
        R(112, 127, "Square"),
    ]

    config[C.EG_ON_OFF].set_as_two_stage("Off", "On")
    config[C.EG_R].set_as_two_stage("Off", "On")
    config[C.LFO_TO_PITCH_TARGET].set_as_two_stage("1+2", "2")
    config[C.EG_TO_PITCH_TARGET].set_as_two_stage("1+2", "2")
    config[C.LEGATO].set_as_two_stage("Off", "On")
    config[C.POLY_UNI_MODE].set_as_two_stage("Poly", "Unison")

    config[C.PBEND_RANGE].midi_cc_end = 30
    config[C.DAMP_AND_ATTACK].midi_cc_start = 63
    config[C.DAMP_AND_ATTACK].midi_cc_start_label = "Off"

    config[C.KEY_ASSIGN_MODE].discrete_ranges = [
        R(0, 47, "Low ST"),
        R(48, 79, "Duo ST"),
        R(80, 111, "Highest ST"),
        R(112, 127, "Last MT"),
    ]
    config[C.PITCH_TO_CUTOFF].discrete_ranges = [
        R(0, 32, "Off"),
        R(33, 96, "Half"),
        R(97, 127, "On"),
    ]

    seen: set[str] = set()
    for control in ElfinControl:
        if control not in config:
            raise ValueError(f"unmapped control: {control.name}")
        name = config[control].streaming_name
        if name in seen:
            raise ValueError(f"duplicate streaming name: {name}")
        seen.add(name)

    return config