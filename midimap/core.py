"""Shared types, simulator stand-ins and the base classes for mappings."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

MIDI_DATA_2_MIN = 0
MIDI_DATA_2_MAX = 127
MIDI_NONE = -1

CHANNEL_MIN = 1
CHANNEL_MAX = 16

NEWLINE = "\n"


class ConfigError(ValueError):
    """A configuration value has the wrong type."""


class DatarefError(LookupError):
    """A dataref does not exist."""


class MapInType(enum.Enum):
    """Inbound mapping types."""

    NONE = enum.auto()
    COMMAND = enum.auto()
    COMMAND_BY_VALUE = enum.auto()
    DATAREF = enum.auto()
    ENCODER = enum.auto()
    PUSH_PULL = enum.auto()
    SHORT_AND_LONG = enum.auto()
    SLIDER = enum.auto()


class EncoderMode(enum.Enum):
    """How an encoder reports its movement."""

    RELATIVE = enum.auto()
    RANGE = enum.auto()
    FIXED = enum.auto()


class Data1Type(enum.Enum):
    """Kind of MIDI data 1; the value is the configuration key."""

    NONE = "none"
    CONTROL_CHANGE = "cc"
    NOTE = "note"
    PITCH_BEND = "pitch_bend"
    PROGRAM_CHANGE = "program_change"


# --------------------------------------------------------------------------
#   Configuration readers
# --------------------------------------------------------------------------

_MISSING = object()


def _lookup(data: dict, key: str, kinds: tuple[type, ...], default: Any) -> Any:
    value = data.get(key, _MISSING)
    if value is _MISSING:
        return default
    if isinstance(value, bool) and bool not in kinds:
        raise ConfigError(f"Parameter '{key}' has type bool")
    if not isinstance(value, kinds):
        raise ConfigError(f"Parameter '{key}' has type {type(value).__name__}")
    return value


def read_string(data: dict, key: str, default: str = "") -> str:
    """Read a string parameter."""
    return _lookup(data, key, (str,), default)


def read_bool(data: dict, key: str, default: bool = False) -> bool:
    """Read a boolean parameter."""
    return _lookup(data, key, (bool,), default)


def read_int(data: dict, key: str, default: int = 0) -> int:
    """Read an integer parameter."""
    return _lookup(data, key, (int,), default)


def read_float(data: dict, key: str, default: float = 0.0) -> float:
    """Read a numeric parameter as float."""
    return float(_lookup(data, key, (int, float), default))


def read_midi_value(data: dict, key: str, default: int = 0) -> int:
    """Read a MIDI value (range checks are left to the caller)."""
    return read_int(data, key, default)


def is_array(data: dict, key: str) -> bool:
    """Return whether the parameter holds an array."""
    return isinstance(data.get(key), list)


def read_str_list(data: dict, key: str) -> list[str]:
    """Read an array of strings; numbers are turned into text."""
    values = _lookup(data, key, (list,), [])
    result = []
    for value in values:
        if isinstance(value, str):
            result.append(value)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            result.append(str(value))
        else:
            raise ConfigError(f"Parameter '{key}' holds a {type(value).__name__}")
    return result


def read_str_map_array(data: dict, key: str, key_name: str, value_name: str) -> dict[str, str]:
    """Read an array of tables into a mapping of key_name to value_name."""
    entries = _lookup(data, key, (list,), [])
    result: dict[str, str] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            raise ConfigError(f"Parameter '{key}' has to hold tables")
        result.setdefault(read_string(entry, key_name), read_string(entry, value_name))
    return result


# --------------------------------------------------------------------------
#   Environment
# --------------------------------------------------------------------------


@dataclass
class Logger:
    """Collects log lines as (level, text) pairs."""

    entries: list[tuple[str, str]] = field(default_factory=list)

    def debug(self, text):
        self.entries.append(("debug", str(text)))

    def info(self, text):
        self.entries.append(("info", str(text)))

    def warn(self, text):
        self.entries.append(("warn", str(text)))

    def error(self, text):
        self.entries.append(("error", str(text)))


class MemoryDatarefs:
    """Datarefs kept in a dictionary."""

    def __init__(self, values: dict[str, Any] | None = None):
        self.values: dict[str, Any] = dict(values or {})

    def _require(self, log, name):
        if name not in self.values:
            log.error(f"Dataref '{name}' not found")
            raise DatarefError(name)

    def check(self, name) -> bool:
        return bool(name) and name in self.values

    def read(self, log, name):
        self._require(log, name)
        return self.values[name]

    def write(self, log, name, value):
        self._require(log, name)
        self.values[name] = value

    def toggle(self, log, name, value_on, value_off) -> str:
        """Switch between two values and return the one written."""
        current = str(self.read(log, name))
        new_value = value_off if current == value_on else value_on
        self.write(log, name, new_value)
        return new_value


@dataclass
class RecordingCommands:
    """Records command actions as (action, command) pairs."""

    history: list[tuple[str, str]] = field(default_factory=list)

    def begin(self, log, command):
        self.history.append(("begin", command))

    def end(self, log, command):
        self.history.append(("end", command))

    def execute(self, log, command):
        self.history.append(("execute", command))


@dataclass
class Environment:
    """Access to datarefs, commands and on-screen messages."""

    drf: MemoryDatarefs = field(default_factory=MemoryDatarefs)
    cmd: RecordingCommands = field(default_factory=RecordingCommands)
    info_messages: dict[str, str] = field(default_factory=dict)

    def show_info_message(self, message_id, text):
        self.info_messages[message_id] = text


@dataclass
class DeviceSettings:
    """Settings of a MIDI device."""

    device_no: int = 0
    default_enc_mode: EncoderMode = EncoderMode.RELATIVE


@dataclass
class MidiMessage:
    """An incoming MIDI message together with its log."""

    log: Logger = field(default_factory=Logger)
    channel: int = 1
    data_1: int = 0
    data_2: int = 0


@dataclass
class InboundParam:
    """Parameters handed to an inbound mapping."""

    msg: MidiMessage
    sl_value: str = ""


@dataclass
class MapResult:
    """Outcome of executing a mapping."""

    completed: bool = False
    data_changed: bool = False
    type: Any = None
    channel: int = 0
    data_1: int = 0
    data_2: int = 0


# --------------------------------------------------------------------------
#   Mappings
# --------------------------------------------------------------------------


class Mapping:
    """Common settings of every mapping: channel, data 1 and sublayer."""

    def __init__(self):
        self.no = 0
        self.include_name = ""
        self.channel = 0
        self.data_1 = 0
        self.data_1_type = Data1Type.NONE
        self.sl = ""
        self.source_line = ""

    def read_common_config(self, log, data):
        self.source_line = "Mapping :: " + ", ".join(f"{key} = {value!r}" for key, value in data.items())
        self.channel = read_int(data, "ch", 0)
        self.data_1_type = Data1Type.NONE
        self.data_1 = 0
        for kind in Data1Type:
            if kind is not Data1Type.NONE and kind.value in data:
                self.data_1_type = kind
                self.data_1 = read_int(data, kind.value)
                break
        self.sl = read_string(data, "sl")

    def _fail(self, log, message) -> bool:
        """Log the source line and a message; always returns False."""
        log.error(self.source_line)
        log.error(message)
        return False

    def _check_midi_range(self, log, name, value) -> bool:
        if MIDI_DATA_2_MIN <= value <= MIDI_DATA_2_MAX:
            return True
        return self._fail(
            log,
            f" --> Invalid value for parameter '{name}', it has to be between "
            f"{MIDI_DATA_2_MIN} and {MIDI_DATA_2_MAX}",
        )

    def check(self, log) -> bool:
        result = True
        if not CHANNEL_MIN <= self.channel <= CHANNEL_MAX:
            result = self._fail(
                log,
                f" --> Invalid value for parameter 'ch', it has to be between {CHANNEL_MIN} and {CHANNEL_MAX}",
            )
        if self.data_1_type is Data1Type.NONE:
            result = self._fail(log, " --> No MIDI data 1 parameter defined")
        elif not self._check_midi_range(log, self.data_1_type.value, self.data_1):
            result = False
        return result

    def check_sublayer(self, sl_value) -> bool:
        return not self.sl or self.sl == sl_value

    def get_key(self) -> str:
        return f"{self.channel}_{self.data_1_type.value}_{self.data_1}"

    def mapping_text(self, short=False) -> str:
        return self.build_mapping_text(short)

    def _text_header(self, short, title) -> tuple[str, str]:
        """Return the title block and the separator for a mapping text."""
        if short:
            return "", ", "
        text = f" ====== {title} ======\n"
        if self.sl:
            text += f"Sublayer = '{self.sl}'\n"
        return text, "\n"

    def build_mapping_text(self, short) -> str:
        """Describe the common MIDI settings of the mapping."""
        sep = ", " if short else "\n"
        return f"Channel = {self.channel}{sep}{self.data_1_type.value} = {self.data_1}"


class InboundMapping(Mapping):
    """Base class of mappings triggered by incoming MIDI messages."""

    def __init__(self, env: Environment):
        super().__init__()
        self.env = env

    def type(self) -> MapInType:
        return MapInType.NONE

    def read_config(self, log, data, config):
        self.read_common_config(log, data)

    def execute(self, param) -> MapResult:
        return MapResult(completed=True)

    @staticmethod
    def _inbound_param(param) -> InboundParam | None:
        return param if isinstance(param, InboundParam) else None

    def _accepted_param(self, param) -> InboundParam | None:
        """Return the inbound parameter if it belongs to this mapping's sublayer."""
        param_in = self._inbound_param(param)
        if param_in is None or not self.check_sublayer(param_in.sl_value):
            return None
        return param_in

    def _read_dataref(self, log, name) -> str | None:
        try:
            return str(self.env.drf.read(log, name))
        except DatarefError:
            return None

    def toggle_dataref(self, log, dataref, values, wrap) -> str:
        """Move the dataref to the next value of the list and return it."""
        drf = self.env.drf
        if len(values) == 2:
            try:
                return drf.toggle(log, dataref, values[0], values[1])
            except DatarefError:
                return ""

        current = self._read_dataref(log, dataref)
        if current is None:
            current = ""

        if current in values:
            idx = values.index(current)
            if idx < len(values) - 1:
                idx += 1
            elif wrap:
                idx = 0
            new_value = values[idx]
        else:
            new_value = values[0] if wrap and values else current

        log.debug(f" --> Change dataref '{dataref}' to value '{new_value}'")
        try:
            drf.write(log, dataref, new_value)
        except DatarefError:
            pass
        return new_value