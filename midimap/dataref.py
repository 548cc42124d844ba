"""Mapping that sets or toggles a dataref."""

from __future__ import annotations

import enum

from .core import (
    MIDI_DATA_2_MAX,
    NEWLINE,
    DatarefError,
    InboundMapping,
    MapInType,
    MapResult,
    read_bool,
    read_str_list,
    read_string,
)
from .label import Label

_CFG_DATAREF = "dataref"
_CFG_MODE = "mode"
_CFG_VALUES = "values"
_CFG_VALUE_ON = "value_on"
_CFG_VALUE_OFF = "value_off"
_CFG_VALUES_WRAP = "values_wrap"


class DatarefMode(enum.Enum):
    """How a dataref mapping reacts to key presses."""

    TOGGLE = "toggle"
    MOMENTARY = "momentary"


def dataref_mode_from_code(mode) -> DatarefMode:
    """Return the mode for a config string; anything unknown means toggle."""
    return DatarefMode.MOMENTARY if mode == "momentary" else DatarefMode.TOGGLE


class DatarefMapping(InboundMapping):
    """Toggle a dataref through a list of values, or hold it while pressed."""

    def __init__(self, env):
        super().__init__(env)
        self.mode = DatarefMode.TOGGLE
        self.dataref = ""
        self.values: list[str] = []
        self.values_wrap = True
        self.label = Label(env)

    def type(self) -> MapInType:
        return MapInType.DATAREF

    def read_config(self, log, data, config):
        log.debug(" --> Read settings for type 'drf'")
        super().read_config(log, data, config)

        self.mode = dataref_mode_from_code(read_string(data, _CFG_MODE))
        self.dataref = read_string(data, _CFG_DATAREF)
        self.values = read_str_list(data, _CFG_VALUES)

        if not self.values:
            value = read_string(data, _CFG_VALUE_ON)
            if value:
                self.values.append(value)

            if _CFG_VALUE_OFF in data:
                value = read_string(data, _CFG_VALUE_OFF)
            if value:
                self.values.append(value)

        self.values_wrap = read_bool(data, _CFG_VALUES_WRAP, True)
        self.label.read_config(log, data, config, self.dataref)

    def check(self, log) -> bool:
        result = super().check(log)

        if not self.dataref:
            log.error(self.source_line)
            log.error(f" --> Parameter '{_CFG_DATAREF}' is empty")
            result = False
        elif not self.env.drf.check(self.dataref):
            log.error(self.source_line)
            log.error(f" --> Dataref '{self.dataref}' not found")
            result = False

        if not self.values:
            log.error(self.source_line)
            log.error(" --> No values defined")
            result = False

        if self.mode is DatarefMode.MOMENTARY and len(self.values) != 2:
            log.error(self.source_line)
            log.error(
                f" --> When parameter '{_CFG_MODE}' is 'momentary', two values (on/off) are expected"
            )
            result = False

        if not self.label.check(log, self.source_line):
            result = False

        return result

    def execute(self, param) -> MapResult:
        result = MapResult(completed=True)

        param_in = self._inbound_param(param)
        if param_in is None or not self.check_sublayer(param_in.sl_value):
            return result

        msg = param_in.msg
        log = msg.log

        if self.mode is DatarefMode.TOGGLE and msg.data_2 != MIDI_DATA_2_MAX:
            return result

        if len(self.values) == 2 and self.mode is DatarefMode.MOMENTARY:
            value = self.values[0] if msg.data_2 == MIDI_DATA_2_MAX else self.values[1]
            log.debug(f" --> Change dataref '{self.dataref}' to value '{value}'")
            try:
                self.env.drf.write(log, self.dataref, value)
            except DatarefError:
                pass
        else:
            self.toggle_dataref(log, self.dataref, self.values, self.values_wrap)

        self.label.display_label(log)
        return result

    def map_text_label(self) -> str:
        return self.label.id

    def map_text_cmd_drf(self) -> str:
        return self.dataref

    def _mode_text(self) -> str:
        return "Mode = 'toggle'" if self.mode is DatarefMode.TOGGLE else "Mode = 'momentary'"

    def map_text_parameter(self) -> str:
        if len(self.values) == 1:
            text = "Value = " + self.values[0]
        else:
            text = "Values = " + ", ".join(f"'{value}'" for value in self.values)
        return text + NEWLINE + self._mode_text()

    def build_mapping_text(self, short) -> str:
        sep = ", "
        text = ""
        if not short:
            sep = "\n"
            text = " ====== Dataref ======" + sep
            if self.sl:
                text += f"Sublayer = '{self.sl}'{sep}"

        text += f"Dataref = '{self.dataref}'{sep}"
        text += "Values = ["
        text += "".join(f" '{value}', " for value in self.values)
        text += "]" + sep
        text += self._mode_text()
        return text