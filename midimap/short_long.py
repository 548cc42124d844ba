"""Mapping that tells a short press from a long press of the same key."""

from __future__ import annotations

import enum
import threading
import time
from typing import Callable

from .core import (
    InboundMapping,
    MapInType,
    MapResult,
    read_str_list,
    read_string,
)
from .label import Label

_CFG_COMMAND_PUSH = "command_push"
_CFG_COMMAND_PULL = "command_pull"
_CFG_DATAREF_PUSH = "dataref_push"
_CFG_DATAREF_PULL = "dataref_pull"
_CFG_VALUES_PUSH = "values_push"
_CFG_VALUES_PULL = "values_pull"

_CFG_COMMAND_SHORT = "command_short"
_CFG_COMMAND_LONG = "command_long"
_CFG_DATAREF_SHORT = "dataref_short"
_CFG_DATAREF_LONG = "dataref_long"
_CFG_VALUES_SHORT = "values_short"
_CFG_VALUES_LONG = "values_long"

_CFG_LABEL_SHORT = "label_short"
_CFG_LABEL_LONG = "label_long"

# seconds a command is held before it is ended
_COMMAND_HOLD = 0.3
# seconds that separate a short press from a long one
_LONG_PRESS = 0.5


class _CommandType(enum.Enum):
    NONE = enum.auto()
    SHORT = enum.auto()
    LONG = enum.auto()


class ShortLongMapping(InboundMapping):
    """Run one action on a short press and another on a long press.

    In legacy mode the configuration uses the push/pull parameter names.
    """

    def __init__(self, env, legacy_mode=False, clock: Callable[[], float] = time.monotonic):
        super().__init__(env)
        self.legacy_mode = legacy_mode
        self._clock = clock
        self._lock = threading.Lock()

        self._command_type = _CommandType.NONE
        self._time_command: float | None = None
        self._time_received: float | None = None
        self._time_released: float | None = None

        self.dataref_short = ""
        self.dataref_long = ""
        self.values_short: list[str] = []
        self.values_long: list[str] = []
        self.command_short = ""
        self.command_long = ""

        self.label_short = Label(env)
        self.label_long = Label(env)

    def type(self) -> MapInType:
        return MapInType.PUSH_PULL if self.legacy_mode else MapInType.SHORT_AND_LONG

    def set_time_received(self):
        """Note the moment the key was pressed."""
        self._reset()
        with self._lock:
            self._time_received = self._clock()

    def set_time_released(self):
        """Note the moment the key was released, if a press was noted."""
        with self._lock:
            if self._time_received is not None:
                self._time_released = self._clock()

    def read_config(self, log, data, config):
        if self.legacy_mode:
            log.debug("Read settings for type 'pnp'")
            log.warn("Obsolete mapping type, please use 'snl' instead!")
            keys_short = (_CFG_DATAREF_PUSH, _CFG_VALUES_PUSH, _CFG_COMMAND_PUSH)
            keys_long = (_CFG_DATAREF_PULL, _CFG_VALUES_PULL, _CFG_COMMAND_PULL)
        else:
            log.debug("Read settings for type 'snl'")
            keys_short = (_CFG_DATAREF_SHORT, _CFG_VALUES_SHORT, _CFG_COMMAND_SHORT)
            keys_long = (_CFG_DATAREF_LONG, _CFG_VALUES_LONG, _CFG_COMMAND_LONG)

        super().read_config(log, data, config)

        dataref_key, values_key, command_key = keys_short
        if dataref_key in data:
            self.dataref_short = read_string(data, dataref_key)
            self.values_short = read_str_list(data, values_key)
        else:
            self.command_short = read_string(data, command_key)

        dataref_key, values_key, command_key = keys_long
        if dataref_key in data:
            self.dataref_long = read_string(data, dataref_key)
            self.values_long = read_str_list(data, values_key)
        else:
            self.command_long = read_string(data, command_key)

        self.label_short.read_config(log, data, config, self.dataref_short, _CFG_LABEL_SHORT)
        self.label_long.read_config(log, data, config, self.dataref_long, _CFG_LABEL_LONG)

    def _check_side(self, log, dataref, values, command, values_key, command_key) -> bool:
        result = True
        if dataref:
            if not self.env.drf.check(dataref):
                log.error(self.source_line)
                log.error(f" --> Dataref '{dataref}' not found")
                result = False
            if not values:
                log.error(self.source_line)
                log.error(f" --> Parameter '{values_key}' is not defined")
                result = False
        elif not command:
            log.error(self.source_line)
            log.error(f" --> Parameter '{command_key}' is empty")
            result = False
        return result

    def check(self, log) -> bool:
        result = super().check(log)

        if self.legacy_mode:
            short_keys = (_CFG_VALUES_PUSH, _CFG_COMMAND_PUSH)
            long_keys = (_CFG_VALUES_PULL, _CFG_COMMAND_PULL)
        else:
            short_keys = (_CFG_VALUES_SHORT, _CFG_COMMAND_SHORT)
            long_keys = (_CFG_VALUES_LONG, _CFG_COMMAND_LONG)

        if not self._check_side(log, self.dataref_short, self.values_short, self.command_short, *short_keys):
            result = False
        if not self._check_side(log, self.dataref_long, self.values_long, self.command_long, *long_keys):
            result = False

        if not self.label_short.check(log, self.source_line):
            result = False
        if not self.label_long.check(log, self.source_line):
            result = False

        return result

    def execute(self, param) -> MapResult:
        result = MapResult()

        param_in = self._inbound_param(param)
        if param_in is None:
            return result

        log = param_in.msg.log

        with self._lock:
            received = self._time_received
            released = self._time_released

        if not self.check_sublayer(param_in.sl_value) or received is None:
            self._reset()
            result.completed = True
            return result

        short_name = "push" if self.legacy_mode else "short"
        long_name = "pull" if self.legacy_mode else "long"

        # a command has been started already: end it after a while
        if self._time_command is not None:
            if self._clock() - self._time_command > _COMMAND_HOLD:
                if self._command_type is _CommandType.SHORT and self.command_short:
                    log.debug(f" --> End {short_name} command '{self.command_short}'")
                    self.env.cmd.end(log, self.command_short)
                    self.label_short.display_label(log)
                elif self._command_type is _CommandType.LONG and self.command_long:
                    log.debug(f" --> End {long_name} command '{self.command_long}'")
                    self.env.cmd.end(log, self.command_long)
                    self.label_long.display_label(log)

                self._reset()
                result.completed = True
            else:
                result.completed = False
            return result

        if released is None and self._clock() - received < _LONG_PRESS:
            # still pressed, but not long enough yet
            result.completed = False
            return result

        self._time_command = self._clock()

        if released is None or released - received > _LONG_PRESS:
            if self.dataref_long:
                self.toggle_dataref(log, self.dataref_long, self.values_long, True)
            elif self.command_long:
                log.debug(f" --> Begin {long_name} command '{self.command_long}'")
                self._command_type = _CommandType.LONG
                self.env.cmd.begin(log, self.command_long)
                result.completed = False
                return result
        else:
            if self.dataref_short:
                self.toggle_dataref(log, self.dataref_short, self.values_short, True)
            elif self.command_short:
                log.debug(f" --> Begin {short_name} command '{self.command_short}'")
                self._command_type = _CommandType.SHORT
                self.env.cmd.begin(log, self.command_short)
                result.completed = False
                return result

        result.completed = True
        return result

    def map_text_label(self) -> str:
        return ""

    def map_text_cmd_drf(self) -> str:
        short_name = "push" if self.legacy_mode else "short"
        long_name = "pull" if self.legacy_mode else "long"

        if self.dataref_short:
            text = f"{self.dataref_short}   (dataref {short_name})"
        else:
            text = f"{self.command_short}   (command {short_name})"

        if self.dataref_long:
            text += f"\n{self.dataref_long}   (dataref {long_name})"
        else:
            text += f"\n{self.command_long}   (command {long_name})"

        return text

    def map_text_parameter(self) -> str:
        return ""

    def build_mapping_text(self, short) -> str:
        text = ""
        if not short:
            if self.legacy_mode:
                text = " ====== Push & Pull ======\n"
            else:
                text = " ====== Short & Long ======\n"
            if self.sl:
                text += f"Sublayer = '{self.sl}'\n"
        return text

    def _reset(self):
        with self._lock:
            self._command_type = _CommandType.NONE
            self._time_command = None
            self._time_received = None
            self._time_released = None