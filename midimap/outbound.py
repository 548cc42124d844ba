"""Outbound mappings: send MIDI messages that reflect the state of datarefs."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .core import (
    MIDI_DATA_2_MAX,
    MIDI_DATA_2_MIN,
    MIDI_NONE,
    ConfigError,
    Data1Type,
    DatarefError,
    Environment,
    Logger,
    MapResult,
    Mapping,
    is_array,
    read_midi_value,
    read_str_list,
    read_string,
)

_CFG_DATAREF = "dataref"
_CFG_DATA_2_ON = "data_2_on"
_CFG_DATA_2_OFF = "data_2_off"
_CFG_SEND_ON = "send_on"
_CFG_SEND_OFF = "send_off"
_CFG_VALUE_ON = "value_on"
_CFG_VALUE_OFF = "value_off"


class MapOutType(enum.Enum):
    """Outbound mapping types."""

    NONE = enum.auto()
    CONSTANT = enum.auto()
    DATAREF = enum.auto()
    SLIDER = enum.auto()


class MidiMsgType(enum.Enum):
    """Kind of MIDI message to send."""

    NONE = enum.auto()
    CONTROL_CHANGE = enum.auto()
    NOTE_ON = enum.auto()
    NOTE_OFF = enum.auto()
    PITCH_BEND = enum.auto()
    PROGRAM_CHANGE = enum.auto()


class SendMode(enum.Enum):
    """Whether one or all datarefs must match before a message is sent."""

    ONE = "one"
    ALL = "all"


class OutboundSendMode(enum.Enum):
    """When outbound messages are sent."""

    ON_CHANGE = enum.auto()
    PERMANENT = enum.auto()


@dataclass
class OutboundParam:
    """Parameters handed to an outbound mapping."""

    log: Logger = field(default_factory=Logger)
    send_mode: OutboundSendMode = OutboundSendMode.ON_CHANGE
    sl_value: str = ""


def _value_text(value) -> str:
    """Turn a dataref value into the text used for comparisons."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _read_value(data: dict, key: str) -> str:
    """Read a single value given as a string or a number."""
    value = data.get(key, "")
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigError(f"Parameter '{key}' has type {type(value).__name__}")
    return _value_text(value)


def _message_type(data_1_type: Data1Type, note_on: bool) -> MidiMsgType:
    match data_1_type:
        case Data1Type.CONTROL_CHANGE:
            return MidiMsgType.CONTROL_CHANGE
        case Data1Type.NOTE:
            return MidiMsgType.NOTE_ON if note_on else MidiMsgType.NOTE_OFF
        case Data1Type.PITCH_BEND:
            return MidiMsgType.PITCH_BEND
        case Data1Type.PROGRAM_CHANGE:
            return MidiMsgType.PROGRAM_CHANGE
        case _:
            return MidiMsgType.NONE


class OutboundMapping(Mapping):
    """Base class of mappings that produce outgoing MIDI messages."""

    def __init__(self, env: Environment):
        super().__init__()
        self.env = env

    def type(self) -> MapOutType:
        return MapOutType.NONE

    def read_config(self, log, data):
        self.read_common_config(log, data)

    def execute(self, param) -> MapResult:
        return MapResult()

    def map_text_drf(self) -> str:
        return ""

    def map_text_parameter(self) -> str:
        return ""

    @staticmethod
    def _outbound_param(param) -> OutboundParam | None:
        return param if isinstance(param, OutboundParam) else None


class DatarefOutMapping(OutboundMapping):
    """Send 'data 2 on' or 'data 2 off' depending on the values of datarefs."""

    def __init__(self, env: Environment):
        super().__init__(env)
        self.datarefs: list[str] = []
        self._xp_values: dict[str, str] = {}
        self.values_on: set[str] = set()
        self.values_off: set[str] = set()
        self.send_on = SendMode.ONE
        self.send_off = SendMode.ALL
        self.data_2_on = MIDI_DATA_2_MAX
        self.data_2_off = MIDI_DATA_2_MIN
        self._previous_data_2 = MIDI_NONE

    def type(self) -> MapOutType:
        return MapOutType.DATAREF

    def set_dataref(self, dataref):
        """Set one dataref (a string) or several (a list of strings)."""
        if isinstance(dataref, str):
            self.datarefs = [dataref]
        else:
            self.datarefs = list(dataref)

    def set_data_2_on(self, data_2_on):
        self.data_2_on = data_2_on if data_2_on <= MIDI_DATA_2_MAX else MIDI_DATA_2_MAX

    def set_data_2_off(self, data_2_off):
        self.data_2_off = data_2_off if data_2_off <= MIDI_DATA_2_MAX else MIDI_DATA_2_MIN

    def _read_values(self, data, key) -> set[str]:
        if is_array(data, key):
            return set(read_str_list(data, key))
        value = _read_value(data, key)
        return {value} if value else set()

    def read_config(self, log, data):
        log.debug("Read settings for type 'drf'")
        self.read_common_config(log, data)

        if _CFG_DATAREF in data:
            if is_array(data, _CFG_DATAREF):
                self.set_dataref(read_str_list(data, _CFG_DATAREF))
            else:
                self.set_dataref(read_string(data, _CFG_DATAREF))

        self.values_on = self._read_values(data, _CFG_VALUE_ON)
        self.values_off = self._read_values(data, _CFG_VALUE_OFF)

        self.set_data_2_on(read_midi_value(data, _CFG_DATA_2_ON, MIDI_DATA_2_MAX))
        self.set_data_2_off(read_midi_value(data, _CFG_DATA_2_OFF, MIDI_DATA_2_MIN))

        if _CFG_SEND_ON in data and read_string(data, _CFG_SEND_ON) == "all":
            self.send_on = SendMode.ALL
        if _CFG_SEND_OFF in data and read_string(data, _CFG_SEND_OFF) == "one":
            self.send_off = SendMode.ONE

    def check(self, log) -> bool:
        result = super().check(log)

        if not self.datarefs:
            log.error(self.source_line)
            log.error(f" --> Parameter '{_CFG_DATAREF}' is not defined")
            result = False

        if not self.values_on and not self.values_off:
            log.error(self.source_line)
            log.error(f" --> Parameters '{_CFG_VALUE_ON}' and '{_CFG_VALUE_OFF}' are not defined")
            result = False

        for dataref in self.datarefs:
            if not self.env.drf.check(dataref):
                log.error(self.source_line)
                log.error(f" --> Dataref '{dataref}' not found")
                result = False

        for name, value in ((_CFG_DATA_2_ON, self.data_2_on), (_CFG_DATA_2_OFF, self.data_2_off)):
            if not MIDI_DATA_2_MIN <= value <= MIDI_DATA_2_MAX:
                log.error(self.source_line)
                log.error(
                    f" --> Invalid value for parameter '{name}', it has to be between "
                    f"{MIDI_DATA_2_MIN} and {MIDI_DATA_2_MAX}"
                )
                result = False

        return result

    def execute(self, param) -> MapResult:
        result = MapResult()

        param_out = self._outbound_param(param)
        if param_out is None or not self.check_sublayer(param_out.sl_value):
            return result

        log = param_out.log
        changed = False
        send_msg = False

        for dataref in self.datarefs:
            try:
                current = _value_text(self.env.drf.read(log, dataref))
            except DatarefError:
                continue

            previous = self._xp_values.get(dataref, "")
            self._xp_values[dataref] = current

            if current != previous:
                changed = True

            if param_out.send_mode is OutboundSendMode.ON_CHANGE:
                if changed:
                    send_msg = True
            elif param_out.send_mode is OutboundSendMode.PERMANENT:
                send_msg = True

        if not send_msg:
            return result

        send_on_cnt = 0
        send_off_cnt = 0
        for dataref in self.datarefs:
            current = self._xp_values.get(dataref, "")
            if self.values_on:
                if current in self.values_on:
                    send_on_cnt += 1
                elif current in self.values_off or not self.values_off:
                    send_off_cnt += 1
            elif current in self.values_off:
                send_off_cnt += 1
            elif current in self.values_on or not self.values_on:
                send_on_cnt += 1

        count = len(self.datarefs)
        on_ok = (self.send_on is SendMode.ALL and send_on_cnt == count) or (
            self.send_on is SendMode.ONE and send_on_cnt > 0
        )
        off_ok = (self.send_off is SendMode.ALL and send_off_cnt == count) or (
            self.send_off is SendMode.ONE and send_off_cnt > 0
        )

        if not (on_ok or off_ok):
            return result

        result.data_changed = changed
        result.type = _message_type(self.data_1_type, on_ok)
        result.channel = self.channel
        result.data_1 = self.data_1
        result.data_2 = self.data_2_on if on_ok else self.data_2_off

        # some datarefs change slightly, especially annunciators
        if self._previous_data_2 != MIDI_NONE and self._previous_data_2 != result.data_2:
            result.data_changed = False

        self._previous_data_2 = result.data_2
        return result

    def map_text_drf(self) -> str:
        return "\n".join(self.datarefs)

    @staticmethod
    def _values_text(values, single, plural, assign) -> str:
        if len(values) == 1:
            return f"{single}{assign}{next(iter(values))}"
        if len(values) > 1:
            return f"{plural}{assign}" + ", ".join(sorted(values))
        return ""

    def map_text_parameter(self) -> str:
        text = self._values_text(self.values_on, "Value on", "Values on", " = ")

        if text and self.values_off:
            text += "   |   "

        text += self._values_text(self.values_off, "Value off", "Values off", " = ")

        if len(self.datarefs) > 1:
            text += "\n"
            text += f"Send on = {self.send_on.value}"
            text += "   |   "
            text += f"Send off = {self.send_off.value}"

        if self.data_2_on != MIDI_DATA_2_MAX:
            text += f"   |   Data 2 on = {self.data_2_on}"
        if self.data_2_off != MIDI_DATA_2_MIN:
            text += f"   |   Data 2 off = {self.data_2_off}"

        return text

    def build_mapping_text(self, short) -> str:
        sep = "\n"
        text = ""
        if not short:
            text = " ====== Dataref ======" + sep

        if len(self.datarefs) == 1:
            if not short:
                text += "Dataref: "
            text += self.datarefs[0]
        else:
            if not short:
                text += "Datarefs: "
            text += " | ".join(self.datarefs)

        values_on = self._values_text(self.values_on, "Value on", "Values on", ": ")
        if values_on:
            text += sep + values_on
        values_off = self._values_text(self.values_off, "Value off", "Values off", ": ")
        if values_off:
            text += sep + values_off

        if self.data_2_on != MIDI_DATA_2_MAX:
            text += f"{sep}Data 2 on: {self.data_2_on}"
        if self.data_2_off != MIDI_DATA_2_MIN:
            text += f"{sep}Data 2 off: {self.data_2_off}"

        if len(self.datarefs) > 1:
            text += f"{sep}Send on: '{self.send_on.value}'"
            text += f"{sep}Send off: '{self.send_off.value}'"

        return text