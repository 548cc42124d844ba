"""Mapping for sliders and faders that set a dataref or run commands."""

from __future__ import annotations

import math

from .core import (
    MIDI_DATA_2_MAX,
    MIDI_DATA_2_MIN,
    DatarefError,
    InboundMapping,
    MapInType,
    MapResult,
    read_float,
    read_midi_value,
    read_string,
)
from .label import Label

_CFG_COMMAND_UP = "command_up"
_CFG_COMMAND_MIDDLE = "command_middle"
_CFG_COMMAND_DOWN = "command_down"
_CFG_DATAREF = "dataref"
_CFG_DATA_2_MIN = "data_2_min"
_CFG_DATA_2_MAX = "data_2_max"
_CFG_DATA_2_MARGIN = "data_2_margin"
_CFG_VALUE_MIN = "value_min"
_CFG_VALUE_MAX = "value_max"

_DEFAULT_MARGIN = 10
_MAX_MARGIN = 25


def _fmt_number(value) -> str:
    """Format a number the short way: integral values without a fraction."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


class SliderMapping(InboundMapping):
    """Map a slider position onto a dataref range, or onto up/middle/down commands."""

    def __init__(self, env):
        super().__init__(env)
        self.dataref = ""
        self.value_min = 0.0
        self.value_max = 1.0

        self.data_2_min = MIDI_DATA_2_MIN
        self.data_2_max = MIDI_DATA_2_MAX
        self.data_2_margin = _DEFAULT_MARGIN

        self._command_up_prev = ""
        self._command_middle_prev = ""
        self._command_down_prev = ""

        self.command_up = ""
        self.command_middle = ""
        self.command_down = ""

        self.label = Label(env)

    def type(self) -> MapInType:
        return MapInType.SLIDER

    def read_config(self, log, data, config):
        log.debug("Read settings for type 'sld'")
        super().read_config(log, data, config)

        if _CFG_DATAREF in data:
            log.debug("Use 'dataref' mode for slider mapping")
            self.dataref = read_string(data, _CFG_DATAREF)
            self.value_min = read_float(data, _CFG_VALUE_MIN, 0.0)
            self.value_max = read_float(data, _CFG_VALUE_MAX, 1.0)
        else:
            log.debug("Use 'command' mode for slider mapping")
            self.command_up = read_string(data, _CFG_COMMAND_UP)
            self.command_middle = read_string(data, _CFG_COMMAND_MIDDLE)
            self.command_down = read_string(data, _CFG_COMMAND_DOWN)

        self.data_2_min = read_midi_value(data, _CFG_DATA_2_MIN, MIDI_DATA_2_MIN)
        self.data_2_max = read_midi_value(data, _CFG_DATA_2_MAX, MIDI_DATA_2_MAX)
        self.data_2_margin = read_midi_value(data, _CFG_DATA_2_MARGIN, _DEFAULT_MARGIN)

        self.label.read_config(log, data, config, self.dataref)

    def check(self, log) -> bool:
        result = super().check(log)

        if self.dataref:
            if not self.env.drf.check(self.dataref):
                log.error(self.source_line)
                log.error(f" --> Dataref '{self.dataref}' not found")
                result = False

            if self.value_min == self.value_max:
                log.error(self.source_line)
                log.error(f" --> Parameter '{_CFG_VALUE_MIN}' is equal to parameter '{_CFG_VALUE_MAX}")
                result = False
        elif not self.command_up and not self.command_down:
            log.error(self.source_line)
            log.error(f" --> Parameters '{_CFG_COMMAND_UP}' and '{_CFG_COMMAND_DOWN}' are not defined")
            result = False

        if self.data_2_min >= self.data_2_max:
            log.error(self.source_line)
            log.error(
                f" --> Parameter '{_CFG_DATA_2_MIN}' ({self.data_2_min}) has to be smaller than "
                f"parameter '{_CFG_DATA_2_MAX}' ({self.data_2_max})"
            )
            result = False

        if not 0 <= self.data_2_margin <= _MAX_MARGIN:
            log.error(self.source_line)
            log.error(f" --> Parameter '{_CFG_DATA_2_MARGIN}' has to be between 0 and {_MAX_MARGIN}")
            result = False

        if not self.label.check(log, self.source_line):
            result = False

        return result

    def execute(self, param) -> MapResult:
        result = MapResult(completed=True)

        param_in = self._inbound_param(param)
        if param_in is None or not self.check_sublayer(param_in.sl_value):
            return result

        if self.dataref:
            self._execute_dataref(param_in.msg)
        else:
            self._execute_command(param_in.msg)

        return result

    def _execute_dataref(self, msg):
        log = msg.log
        if msg.data_2 == self.data_2_min:
            value = self.value_min
        elif msg.data_2 == self.data_2_max:
            value = self.value_max
        else:
            value = (self.value_max - self.value_min) * (msg.data_2 / 127.0) + self.value_min

        log.debug(f" --> Set dataref '{self.dataref}' to value '{value:f}'")

        try:
            self.env.drf.write(log, self.dataref, value)
        except DatarefError:
            return
        self.label.display_label(log)

    def _run(self, log, command):
        log.debug(f" --> Execute command '{command}'")
        self.env.cmd.execute(log, command)
        self.label.display_label(log)

    def _execute_command(self, msg):
        log = msg.log
        data_2 = msg.data_2
        margin = self.data_2_margin
        middle = (self.data_2_max - self.data_2_min) // 2

        if data_2 <= self.data_2_min + margin:
            if self.command_down != self._command_down_prev:
                self._run(log, self.command_down)
                self._command_down_prev = self.command_down
                self._command_middle_prev = ""
                self._command_up_prev = ""
        elif data_2 >= self.data_2_max - margin:
            if self.command_up != self._command_up_prev:
                self._run(log, self.command_up)
                self._command_up_prev = self.command_up
                self._command_middle_prev = ""
                self._command_down_prev = ""
        elif middle - margin <= data_2 <= middle + margin:
            if self.command_middle and self.command_middle != self._command_middle_prev:
                self._run(log, self.command_middle)
                self._command_middle_prev = self.command_middle
                self._command_down_prev = ""
                self._command_up_prev = ""
        else:
            self._command_up_prev = ""
            self._command_middle_prev = ""
            self._command_down_prev = ""

    def map_text_label(self) -> str:
        return self.label.id

    def map_text_cmd_drf(self) -> str:
        if self.dataref:
            return self.dataref

        text = f"{self.command_up} (up)"
        if self.command_middle:
            text += f"\n{self.command_middle} (middle)"
        text += f"\n{self.command_down} (down)"
        return text

    def map_text_parameter(self) -> str:
        if not self.dataref:
            return ""
        return (
            f"Value min = {_fmt_number(self.value_min)}"
            "   |   "
            f"Value max = {_fmt_number(self.value_max)}"
        )

    def build_mapping_text(self, short) -> str:
        sep = ", "
        text = ""
        if not short:
            sep = "\n"
            text = " ====== Slider ======" + sep

        if self.dataref:
            text += f"Dataref = '{self.dataref}'{sep}"
            text += f"Value min = {_fmt_number(self.value_min)}{sep}"
            text += f"Value max = {_fmt_number(self.value_max)}"
        elif self.command_middle:
            text += (
                f"Command down = '{self.command_down}'{sep}"
                f"Command middle = '{self.command_middle}'{sep}"
                f"Command up = '{self.command_up}'"
            )
        else:
            text += f"Command down = '{self.command_down}'{sep}Command up = '{self.command_up}'"

        return text