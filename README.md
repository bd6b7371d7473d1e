# elfinctl

Tools for the Elfin 04 polysynth. The package models each synth parameter as
a MIDI CC. It loads and saves patches in the `.elfin` XML format. It reads
108-byte `.syx` dumps of control-change messages. It lists factory and user
preset libraries. It also works out the timed control-change messages that
send a patch to the synth.

## Install

```
pip install elfinctl
```

To run the tests:

```
pip install "elfinctl[test]"
pytest
```

## Library use

```python
from elfinctl.processor import ElfinProcessor

proc = ElfinProcessor(standalone=True)   # every parameter marked for sending
proc.prepare_to_play(48000, 512)

# All-notes-off (CC 123) first, then each pending parameter's CC.
for event in proc.process_block(512):
    print(event.time, event.to_bytes().hex(" "))

xml = proc.to_xml()          # the current patch as XML
proc.from_xml(xml)           # load it back
proc.randomize_patch(None)   # a random CC value for every control
```

### Modules

- `elfinctl.configuration` holds the parameter table. `ElfinControl` lists
  every control. `build_configuration()` returns one `ElfinDescription` for
  each control. A description gives the streaming name, the display name and
  label, the MIDI CC number, the default value, the CC range and any
  `LabeledMidiRange` discrete ranges.
- `elfinctl.processor` contains `ElfinParam`, one normalised 0..1 value with
  its `cc`. It also contains `ElfinProcessor` and `MidiEvent`.
  - `ElfinProcessor` loads patches with `from_xml` and `from_syx`, and writes
    them with `to_xml`.
  - `get_state` and `set_state` give a byte form of the patch.
  - `init_patch` and `randomize_patch` set every parameter at once.
    `resend_all` marks every parameter to be sent again.
  - `process_block(num_samples)` returns the pending CC messages. They are
    spaced out by a sample gap that `prepare_to_play` works out from the
    sample rate.
  - Bad patch data raises `PatchError`, a subclass of `ValueError`.
- `elfinctl.presets` contains `PresetManager`. It reads a factory library,
  with one sub-folder per category. It also scans a user folder, recursively,
  for `.elfin` and `.syx` files. `PresetDataBinding` numbers every choice in
  one list: 0 is Init, then the factory patches, then the user patches.
  `natural_key` and `natcasecmp` give the case-insensitive natural ordering
  that the lists use.
- `elfinctl.param_sources` binds editing controls to parameters:
  - `ParamSource` for continuous values.
  - `DiscreteParamSource` for labelled ranges.
  - `Osc12Selector`, a linked pair of selectors that splits the combined
    oscillator 1/2 type into two choices.
  - `tooltip_for(param)`, which returns a title and a value line.
- `elfinctl.controller` contains `ElfinController`. It ties a processor to a
  `PresetManager` and a `PresetDataBinding`. It loads patch files with
  `load_from_file` and `files_dropped`. It saves them with `save_patch`, where
  relative paths go under the user folder. `preset_menu()` returns the preset
  choices. `accepts_dropped_files` is true for exactly one `.elfin` or `.syx`
  file.

## Command line

```
elfinctl --help
```

Global options:

- `--user-path DIR`: the user patch folder. The default is
  `~/Documents/ElfinController`.
- `--factory-path DIR`: the factory library. If it is not given, no factory
  presets are listed.

Commands:

- `elfinctl list` prints every preset with its index. Init is 0.
- `elfinctl show FILE` loads a `.elfin` or `.syx` file and prints it as XML.
- `elfinctl midi FILE [--sample-rate RATE]` loads a patch and prints the
  control-change messages it would send. Each line gives the sample offset
  and the message bytes in hex.
- `elfinctl random [--seed N] [--save FILE]` prints a random patch as XML.
  With `--save`, it also writes the patch to FILE.

The command exits with status 1 and a message on stderr if a patch cannot be
read or parsed.

## What it does not do

- It has no graphical editor.
- It opens no MIDI ports. `process_block` and `elfinctl midi` only produce
  the messages; sending them to the synth is up to the caller.
- It ships no factory patch library. Point `factory_path` or `--factory-path`
  at a folder of patches.