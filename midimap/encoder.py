"""Mapping for rotary encoders that change a dataref or run commands."""

from __future__ import annotations

import enum
import math

from .core import (
    MIDI_DATA_2_MAX,
    MIDI_DATA_2_MIN,
    MIDI_NONE,
    NEWLINE,
    DatarefError,
    EncoderMode,
    InboundMapping,
    MapInType,
    MapResult,
    read_bool,
    read_float,
    read_int,
    read_midi_value,
    read_string,
)
from .label import Label

_CFG_COMMAND_DOWN = "command_down"
_CFG_COMMAND_FAST_DOWN = "command_fast_down"
_CFG_COMMAND_UP = "command_up"
_CFG_COMMAND_FAST_UP = "command_fast_up"
_CFG_DATAREF = "dataref"
_CFG_DATA_2_UP = "data_2_up"
_CFG_DATA_2_DOWN = "data_2_down"
_CFG_DATA_2_MIN = "data_2_min"
_CFG_DATA_2_MAX = "data_2_max"
_CFG_DELAY = "delay"
_CFG_MODE = "mode"
_CFG_MODIFIER_DOWN = "modifier_down"
_CFG_MODIFIER_FAST_DOWN = "modifier_fast_down"
_CFG_MODIFIER_UP = "modifier_up"
_CFG_MODIFIER_FAST_UP = "modifier_fest_up"
_CFG_VALUE_MIN = "value_min"
_CFG_VALUE_MAX = "value_max"
_CFG_VALUE_WRAP = "value_wrap"


class _EncoderMapType(enum.Enum):
    DATAREF = enum.auto()
    COMMAND = enum.auto()


def _fmt_number(value: float) -> str:
    """Format a number the short way: integral values without a fraction."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


class EncoderMapping(InboundMapping):
    """Turn an encoder into dataref changes or up/down commands."""

    def __init__(self, env, default_enc_mode=EncoderMode.RELATIVE):
        super().__init__(env)
        self.enc_mode = default_enc_mode
        self.enc_map_type = _EncoderMapType.DATAREF

        self.delay = -1
        self._delay_counter = 0

        self._data_2_prev_set = False
        self._data_2_prev = 0

        self.data_2_up = 0
        self.data_2_down = 0
        self.data_2_min = MIDI_DATA_2_MIN
        self.data_2_max = MIDI_DATA_2_MAX

        self.dataref = ""
        self.modifier_up = 0.0
        self.modifier_down = 0.0
        self.modifier_fast_up = 0.0
        self.modifier_fast_down = 0.0

        self.value_min_defined = False
        self.value_max_defined = False
        self.value_min = 0.0
        self.value_max = 0.0
        self.value_wrap = False

        self.command_up = ""
        self.command_down = ""
        self.command_fast_up = ""
        self.command_fast_down = ""

        self.label = Label(env)

    def type(self) -> MapInType:
        return MapInType.ENCODER

    @staticmethod
    def encoder_mode_from_code(mode) -> EncoderMode:
        """Return the encoder mode for a config string; unknown means relative."""
        if mode == "range":
            return EncoderMode.RANGE
        if mode == "fixed":
            return EncoderMode.FIXED
        return EncoderMode.RELATIVE

    def read_config(self, log, data, config):
        log.debug("Read settings for type 'enc'")
        super().read_config(log, data, config)

        if _CFG_MODE in data:
            self.enc_mode = self.encoder_mode_from_code(read_string(data, _CFG_MODE))

        if _CFG_DELAY in data:
            self.delay = read_int(data, _CFG_DELAY)

        if _CFG_DATAREF in data:
            log.debug("Use 'dataref' mode for encoder mapping")
            self.enc_map_type = _EncoderMapType.DATAREF

            self.dataref = read_string(data, _CFG_DATAREF)
            self.modifier_up = read_float(data, _CFG_MODIFIER_UP)
            self.modifier_down = read_float(data, _CFG_MODIFIER_DOWN)

            if _CFG_MODIFIER_FAST_UP in data:
                self.modifier_fast_up = read_float(data, _CFG_MODIFIER_FAST_UP)
            else:
                self.modifier_fast_up = self.modifier_up

            if _CFG_MODIFIER_FAST_DOWN in data:
                self.modifier_fast_down = read_float(data, _CFG_MODIFIER_FAST_DOWN)
            else:
                self.modifier_fast_down = self.modifier_down

            if _CFG_VALUE_MIN in data:
                self.value_min = read_float(data, _CFG_VALUE_MIN)
                self.value_min_defined = True

            if _CFG_VALUE_MAX in data:
                self.value_max = read_float(data, _CFG_VALUE_MAX)
                self.value_max_defined = True

            if _CFG_VALUE_WRAP in data:
                self.value_wrap = read_bool(data, _CFG_VALUE_WRAP)
        else:
            log.debug("Use 'command' mode for encoder mapping")
            self.enc_map_type = _EncoderMapType.COMMAND

            self.command_up = read_string(data, _CFG_COMMAND_UP)
            self.command_down = read_string(data, _CFG_COMMAND_DOWN)

            if _CFG_COMMAND_FAST_UP in data:
                self.command_fast_up = read_string(data, _CFG_COMMAND_FAST_UP)
            else:
                self.command_fast_up = self.command_up

            if _CFG_COMMAND_FAST_DOWN in data:
                self.command_fast_down = read_string(data, _CFG_COMMAND_FAST_DOWN)
            else:
                self.command_fast_down = self.command_down

        if self.enc_mode is EncoderMode.RANGE:
            self.data_2_min = read_midi_value(data, _CFG_DATA_2_MIN, MIDI_DATA_2_MIN)
            self.data_2_max = read_midi_value(data, _CFG_DATA_2_MAX, MIDI_DATA_2_MAX)
        elif self.enc_mode is EncoderMode.FIXED:
            self.data_2_up = read_midi_value(data, _CFG_DATA_2_UP, MIDI_NONE)
            self.data_2_down = read_midi_value(data, _CFG_DATA_2_DOWN, MIDI_NONE)

        self.label.read_config(log, data, config, self.dataref)

    def check(self, log) -> bool:
        result = super().check(log)

        if self.enc_map_type is _EncoderMapType.DATAREF:
            if not self.env.drf.check(self.dataref):
                log.error(self.source_line)
                log.error(f" --> Dataref '{self.dataref}' not found")
                result = False

            if (
                self.modifier_up == 0.0
                and self.modifier_down == 0.0
                and self.modifier_fast_up == 0.0
                and self.modifier_fast_down == 0.0
            ):
                log.error(self.source_line)
                log.error(" --> Modifiers (up/down) are not defined")
                result = False

            if self.value_min_defined and self.value_max_defined and self.value_min >= self.value_max:
                log.error(self.source_line)
                log.error(
                    f" --> Parameter '{_CFG_VALUE_MIN}' needs to be less than Parameter '{_CFG_VALUE_MAX}'"
                )
                result = False

            if self.value_wrap and not (self.value_min_defined and self.value_max_defined):
                log.error(self.source_line)
                log.error(" --> Wrapping requires both minimum and maximum values to be defined")
                result = False
        else:
            if not (self.command_up or self.command_down or self.command_fast_up or self.command_fast_down):
                log.error(self.source_line)
                log.error(" --> Commands (up/down) are not defined")
                result = False

        if self.enc_mode is EncoderMode.RANGE:
            if self.data_2_min >= self.data_2_max:
                log.error(self.source_line)
                log.error(
                    f" --> Parameter '{self.data_2_min}' needs to be less than parameter '{self.data_2_max}'"
                )
                result = False
        elif self.enc_mode is EncoderMode.FIXED:
            if self.data_2_up == self.data_2_down:
                log.error(self.source_line)
                log.error(
                    f" --> Parameter '{self.data_2_up}' needs to be different than parameter '{self.data_2_down}'"
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

        if self.delay > -1:
            if self._delay_counter < self.delay:
                self._delay_counter += 1
                return result
            self._delay_counter = 0

        msg = param_in.msg
        if self.enc_mode is EncoderMode.RELATIVE:
            self._execute_relative(msg)
        elif self.enc_mode is EncoderMode.RANGE:
            self._execute_range(msg)
        else:
            self._execute_fixed(msg)

        return result

    def map_text_label(self) -> str:
        return self.label.id

    def map_text_cmd_drf(self) -> str:
        if self.dataref:
            return self.dataref

        text = f"{self.command_up}   (up)"
        text += f"{NEWLINE}{self.command_down}   (down)"
        if self.command_fast_up and self.command_up != self.command_fast_up:
            text += f"{NEWLINE}{self.command_fast_up}   (fast up)"
        if self.command_fast_down and self.command_down != self.command_fast_down:
            text += f"{NEWLINE}{self.command_fast_down}   (fast down)"
        return text

    def map_text_parameter(self) -> str:
        text = ""
        if self.dataref:
            text += f"Modifier up = {_fmt_number(self.modifier_up)}" + NEWLINE
            if self.modifier_fast_up != 0 and self.modifier_fast_up != self.modifier_up:
                text += f"Modifier up (fast) = {_fmt_number(self.modifier_fast_up)}" + NEWLINE
            text += f"Modifier down = {_fmt_number(self.modifier_down)}" + NEWLINE
            if self.modifier_fast_down != 0 and self.modifier_fast_down != self.modifier_down:
                text += "Modifier down (fast) = " + NEWLINE

        if self.enc_mode is EncoderMode.RELATIVE:
            text += "Mode = relative"
        else:
            text += "Mode = range"
        return text

    def build_mapping_text(self, short) -> str:
        sep = ", "
        text = ""
        if not short:
            sep = "\n"
            text = " ====== Encoder ======" + sep
            if self.sl:
                text += f"Sublayer = '{self.sl}'{sep}"

        if self.dataref:
            text += f"Dataref = '{self.dataref}'{sep}"
            text += f"Modifier up = {_fmt_number(self.modifier_up)}"
            if self.modifier_fast_up != 0:
                text += sep + f"Modifier up (fast) = {_fmt_number(self.modifier_fast_up)}"
            text += sep + f"Modifier down = {_fmt_number(self.modifier_down)}"
            if self.modifier_fast_down != 0:
                text += sep + f"Modifier down (fast) = {_fmt_number(self.modifier_fast_down)}"
        else:
            text += f"Command up = '{self.command_up}'{sep}"
            if self.command_fast_up:
                text += f"Command up (fast) = '{self.command_fast_up}'{sep}"
            text += f"Command down = '{self.command_down}'"
            if self.command_fast_down:
                text += f"{sep}Command down (fast) = '{self.command_fast_down}'"

        if self.enc_mode is EncoderMode.RELATIVE:
            text += sep + "Mode = 'relative'"
        else:
            text += sep + "Mode = 'range'"
        return text

    # ------------------------------------------------------------------
    #   Execution helpers
    # ------------------------------------------------------------------

    def _execute_relative(self, msg):
        if msg.data_2 < 64:
            self._modify(msg, up=False, fast=msg.data_2 < 61)
        elif msg.data_2 > 64:
            self._modify(msg, up=True, fast=msg.data_2 > 68)

    def _execute_range(self, msg):
        if not self._data_2_prev_set:
            # the direction of the first movement is unknown
            self._data_2_prev_set = True
            return

        if msg.data_2 == self.data_2_min:
            self._modify(msg, up=False, fast=False)
        elif msg.data_2 == self.data_2_max:
            self._modify(msg, up=True, fast=False)
        elif msg.data_2 - self._data_2_prev > 0:
            self._modify(msg, up=True, fast=False)
        else:
            self._modify(msg, up=False, fast=False)

        self._data_2_prev = msg.data_2

    def _execute_fixed(self, msg):
        if msg.data_2 == self.data_2_down:
            self._modify(msg, up=False, fast=False)
        elif msg.data_2 == self.data_2_up:
            self._modify(msg, up=True, fast=False)

    def _modify(self, msg, up, fast):
        log = msg.log

        if self.enc_map_type is _EncoderMapType.COMMAND:
            if up:
                command = self.command_fast_up if fast else self.command_up
            else:
                command = self.command_fast_down if fast else self.command_down
            log.debug(f" --> Execute command '{command}'")
            self.env.cmd.execute(log, command)
            self.label.display_label(log)
            return

        try:
            value = float(self.env.drf.read(log, self.dataref))
        except (DatarefError, TypeError, ValueError):
            return

        if up:
            modifier = self.modifier_fast_up if fast else self.modifier_up
        else:
            modifier = self.modifier_fast_down if fast else self.modifier_down

        log.debug(f" --> Modify dataref '{self.dataref}' by value '{_fmt_number(modifier)}'")

        value += modifier
        if self.value_wrap:
            span = self.value_max - self.value_min
            if span == 0:
                value = math.nan
            else:
                value = math.fmod(value - self.value_min + span, span) + self.value_min
        else:
            value = self._check_value_min_max(value, modifier)

        try:
            self.env.drf.write(log, self.dataref, value)
        except DatarefError:
            log.error(f"Error changing dataref '{self.dataref}' to value '{_fmt_number(value)}'")
            return

        self.label.display_label(log)

    def _check_value_min_max(self, value, modifier):
        if modifier < 0:
            if self.value_min_defined and value < self.value_min:
                return self.value_min
        elif self.value_max_defined and value > self.value_max:
            return self.value_max
        return value