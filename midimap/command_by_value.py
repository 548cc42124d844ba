"""Mapping that runs a command chosen by the current value of a dataref."""

from __future__ import annotations

from .core import InboundMapping, MapInType, MapResult, read_str_map_array, read_string

_CFG_DATAREF = "dataref"
_CFG_VALUES = "values"
_CFG_VALUE = "value"
_CFG_COMMAND = "command"


class CommandByValueMapping(InboundMapping):
    """Execute the command assigned to the dataref's current value."""

    def __init__(self, env):
        super().__init__(env)
        self.dataref = ""
        self.values: dict[str, str] = {}

    def type(self) -> MapInType:
        return MapInType.COMMAND_BY_VALUE

    def read_config(self, log, data, config):
        log.debug(" --> Read settings for type 'cbv'")
        super().read_config(log, data, config)
        self.dataref = read_string(data, _CFG_DATAREF)
        self.values = read_str_map_array(data, _CFG_VALUES, _CFG_VALUE, _CFG_COMMAND)
        log.debug(f"Values found: {len(self.values)}")

    def check(self, log) -> bool:
        result = super().check(log)
        if not self.dataref:
            result = self._fail(log, f" --> Parameter '{_CFG_DATAREF}' is empty")
        if not self.env.drf.check(self.dataref):
            result = self._fail(log, f" --> Dataref '{self.dataref}' not found")
        if not self.values:
            result = self._fail(log, " --> No values defined")
        return result

    def execute(self, param) -> MapResult:
        result = MapResult(completed=True)

        param_in = self._accepted_param(param)
        if param_in is None:
            return result

        log = param_in.msg.log
        value = self._read_dataref(log, self.dataref)
        if value is None:
            return result

        log.debug(f" --> Search for dataref value '{value}' in values list")

        command = self.values.get(value)
        if command is not None:
            log.debug(f" --> Command '{command}' found for value '{value}'")
            self.env.cmd.execute(log, command)

        return result

    def map_text_label(self) -> str:
        return ""

    def map_text_cmd_drf(self) -> str:
        return self.dataref

    def map_text_parameter(self) -> str:
        entries = ", ".join(
            f"Value = '{value}' --> Command = '{command}''"
            for value, command in sorted(self.values.items())
        )
        return "Values = " + entries

    def build_mapping_text(self, short) -> str:
        text, sep = self._text_header(short, "Command by Value")
        return text + f"Dataref = '{self.dataref}'{sep}Values = []{sep}"