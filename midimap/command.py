"""Mapping that begins and ends a command on MIDI data 2 values."""

from __future__ import annotations

from .core import (
    MIDI_DATA_2_MAX,
    MIDI_DATA_2_MIN,
    NEWLINE,
    InboundMapping,
    MapInType,
    MapResult,
    read_midi_value,
    read_string,
)

_CFG_COMMAND = "command"
_CFG_DATA_2_ON = "data_2_on"
_CFG_DATA_2_OFF = "data_2_off"


class CommandMapping(InboundMapping):
    """Begin a command on 'data 2 on' and end it on 'data 2 off'."""

    def __init__(self, env):
        super().__init__(env)
        self.command = ""
        self.data_2_on = MIDI_DATA_2_MAX
        self.data_2_off = MIDI_DATA_2_MIN

    def type(self) -> MapInType:
        return MapInType.COMMAND

    def read_config(self, log, data, config):
        log.debug("Read settings for type 'cmd'")
        super().read_config(log, data, config)
        self.command = read_string(data, _CFG_COMMAND)
        self.data_2_on = read_midi_value(data, _CFG_DATA_2_ON, MIDI_DATA_2_MAX)
        self.data_2_off = read_midi_value(data, _CFG_DATA_2_OFF, MIDI_DATA_2_MIN)

    def check(self, log) -> bool:
        if not super().check(log):
            return False
        if not self.command:
            return self._fail(log, f" --> Parameter '{_CFG_COMMAND}' is empty")
        return self._check_midi_range(log, _CFG_DATA_2_ON, self.data_2_on) and self._check_midi_range(
            log, _CFG_DATA_2_OFF, self.data_2_off
        )

    def execute(self, param) -> MapResult:
        result = MapResult(completed=True)

        param_in = self._accepted_param(param)
        if param_in is None:
            return result

        msg = param_in.msg
        log = msg.log
        if msg.data_2 >= self.data_2_on:
            log.debug(f" --> Begin execution of command '{self.command}'")
            self.env.cmd.begin(log, self.command)
        elif msg.data_2 <= self.data_2_off:
            log.debug(f" --> End execution of command '{self.command}'")
            self.env.cmd.end(log, self.command)
        else:
            log.error(f"Invalid MIDI Data 2 value '{msg.data_2}'")
            log.error(
                f" --> Supported values for the current mapping are '{self.data_2_on}' and '{self.data_2_off}'"
            )

        return result

    def map_text_label(self) -> str:
        return ""

    def map_text_cmd_drf(self) -> str:
        return self.command

    def _data_2_parts(self, on_label, off_label) -> list[str]:
        parts = []
        if self.data_2_on != MIDI_DATA_2_MAX:
            parts.append(f"{on_label}{self.data_2_on}")
        if self.data_2_off != MIDI_DATA_2_MIN:
            parts.append(f"{off_label}{self.data_2_off}")
        return parts

    def map_text_parameter(self) -> str:
        return NEWLINE.join(self._data_2_parts("Data 2 on = ", "Data 2 off = "))

    def build_mapping_text(self, short) -> str:
        text, sep = self._text_header(short, "Command")
        if not short:
            text += "Command: "
        return sep.join([text + self.command, *self._data_2_parts("Data 2: ", "Data 2: ")])