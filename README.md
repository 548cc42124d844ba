# midimap

`midimap` turns incoming MIDI controller messages into actions on a
simulator, and turns simulator state into outgoing MIDI messages. Mappings
are described as plain dictionaries, for example tables loaded from a TOML
profile with `tomllib`.

## Installation

```
pip install midimap
```

To run the tests:

```
pip install "midimap[test]"
pytest
```

## Common mapping settings

Every mapping (`midimap.core.Mapping`) reads these keys:

- `ch`: the MIDI channel, 1 to 16.
- One data 1 key: `cc`, `note`, `pitch_bend` or `program_change`, holding a
  value from 0 to 127.
- `sl`: an optional sublayer. If it is set, the mapping only acts when the
  sublayer value passed in with the message is the same.

`Mapping.get_key()` returns the lookup key of a mapping, such as
`"11_cc_48"`. `Mapping.check(log)` validates the settings. It writes the
problems it finds to the log and returns `False`.
`Mapping.mapping_text(short)` describes the mapping as text.

## Environment

`midimap.core.Environment` bundles what mappings act on:

- `drf`: a `MemoryDatarefs` store, holding dataref values in a dictionary.
  Reading or writing a missing dataref raises `DatarefError`.
- `cmd`: a `RecordingCommands` recorder. It appends `("begin" | "end" |
  "execute", command)` pairs to `history`.
- `show_info_message(id, text)`: stores label texts in `info_messages`.

`Logger` collects `(level, text)` pairs in `entries`. You can replace any of
these with objects that have the same methods.

## Inbound mappings

Each inbound mapping reacts to an `InboundParam` that wraps a `MidiMessage`.
Calling `execute` returns a `MapResult`, whose `completed` flag tells
whether the mapping is done with the message. These are the type codes and
the classes they select:

| `type` | Class | What it does |
|--------|-------|--------------|
| `cmd` | `command.CommandMapping` | Begins the command when data 2 ≥ `data_2_on` (default 127). Ends it when data 2 ≤ `data_2_off` (default 0). |
| `cbv` | `command_by_value.CommandByValueMapping` | Runs the command listed under `values` for the dataref's current value. |
| `drf` | `dataref.DatarefMapping` | In `toggle` mode, steps the dataref through `values` (or `value_on`/`value_off`). In `momentary` mode, writes the first value on 127 and the second otherwise. |
| `enc` | `encoder.EncoderMapping` | Adds modifiers to a dataref, or runs up/down commands. Works in `relative`, `range` or `fixed` mode. |
| `snl` / `pnp` | `short_long.ShortLongMapping` | Runs one action on a short press and another on a long press. `pnp` is the older push/pull spelling. |
| `sld` | `slider.SliderMapping` | Scales the position onto `value_min`..`value_max` of a dataref, or runs down/middle/up commands. |

`ShortLongMapping` needs to be told when the key goes down and when it comes
up. Call `set_time_received()` on press and `set_time_released()` on release.
Then call `execute` repeatedly until the result is completed. A press held
longer than 0.5 s counts as long.

The dataref, encoder, slider and short/long mappings can show a
`label.Label` after acting. The `label` key (or `label_short`/`label_long`)
names a section of the configuration. That section holds `text`, an optional
`dataref` and a `values` array of `{value, text}` tables.

### Loading a profile

`inbound_list.InboundMappingList.create_mappings` reads a list of mapping
tables and picks each class from its `type`. It reads and checks every entry
and keeps only the valid ones. Encoder mappings are refused for virtual
devices.

```python
import tomllib

from midimap.core import DeviceSettings, Environment, InboundParam, Logger, MidiMessage
from midimap.inbound_list import InboundMappingList

config = tomllib.loads("""
[[mapping_in]]
ch = 11
cc = 48
type = "cmd"
command = "sim/autopilot/heading"
""")

log = Logger()
env = Environment()
mappings = InboundMappingList()
mappings.create_mappings(log, config["mapping_in"], env, False, DeviceSettings(), "", config)

(mapping,) = mappings.find("11_cc_48")
mapping.execute(InboundParam(MidiMessage(data_2=127)))
print(env.cmd.history)   # [('begin', 'sim/autopilot/heading')]
```

`len(mappings)` counts the stored mappings. Iterating over the list yields
them in the order they were added.

## Outbound mappings

`outbound.DatarefOutMapping` watches one or more datarefs. Its `execute`
builds a `MapResult` that describes the MIDI message to send: its type,
channel, data 1 and data 2. The message depends on whether the current
values match `value_on` or `value_off`. Use `send_on`/`send_off` (`one` or
`all`) to choose how many datarefs must match. `OutboundParam.send_mode`
chooses whether a message is produced on every call (`PERMANENT`) or only
when a value changed (`ON_CHANGE`).

```python
from midimap.core import Environment, Logger, MemoryDatarefs
from midimap.outbound import DatarefOutMapping, OutboundParam

env = Environment(drf=MemoryDatarefs({"sim/lights/beacon": 1}))
log = Logger()
mapping = DatarefOutMapping(env)
mapping.read_config(log, {"ch": 11, "note": 20, "dataref": "sim/lights/beacon", "value_on": "1"})
assert mapping.check(log)

result = mapping.execute(OutboundParam())
print(result.type, result.data_2)   # MidiMsgType.NOTE_ON 127
```

## What the package does not do

- It does not open MIDI ports or talk to a simulator. It only decides what
  to do with messages and values that you hand to it.
- Dataref mappings are the only outbound kind. `MapOutType` names constant
  and slider types, but the package has no classes for them. It also has no
  list that builds outbound mappings from a profile.
- It has no command-line program.