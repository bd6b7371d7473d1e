"""Parameter model, patch files, presets and MIDI CC output for the Elfin 04 polysynth."""

__version__ = "0.2.0"

__all__ = ["configuration", "processor", "presets", "param_sources", "controller"]