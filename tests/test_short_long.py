import pytest

from midimap.core import (
    Environment,
    InboundParam,
    Logger,
    MapInType,
    MemoryDatarefs,
    MidiMessage,
)
from midimap.short_long import ShortLongMapping


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make(data, legacy=False, datarefs=None, config=None):
    env = Environment(drf=MemoryDatarefs(datarefs or {}))
    clock = FakeClock()
    mapping = ShortLongMapping(env, legacy, clock=clock)
    log = Logger()
    base = {"ch": 1, "cc": 10}
    base.update(data)
    mapping.read_config(log, base, config or {})
    return mapping, env, clock, log


def param(sl=""):
    return InboundParam(msg=MidiMessage(), sl_value=sl)


def errors(log):
    return [text for level, text in log.entries if level == "error"]


@pytest.mark.parametrize("legacy, expected", [(True, MapInType.PUSH_PULL), (False, MapInType.SHORT_AND_LONG)])
def test_type(legacy, expected):
    mapping, *_ = make({}, legacy=legacy)
    assert mapping.type() is expected


def test_read_config_commands():
    mapping, *_ = make({"command_short": "a/short", "command_long": "a/long"})
    assert mapping.command_short == "a/short"
    assert mapping.command_long == "a/long"
    assert mapping.dataref_short == ""


def test_read_config_legacy_warns_and_uses_push_pull_keys():
    mapping, _, _, log = make({"command_push": "p", "command_pull": "q"}, legacy=True)
    assert (mapping.command_short, mapping.command_long) == ("p", "q")
    assert ("warn", "Obsolete mapping type, please use 'snl' instead!") in log.entries


def test_check_passes_with_commands():
    mapping, *_ = make({"command_short": "a", "command_long": "b"})
    log = Logger()
    assert mapping.check(log) is True
    assert errors(log) == []


def test_check_missing_commands():
    mapping, *_ = make({})
    log = Logger()
    assert mapping.check(log) is False
    assert " --> Parameter 'command_short' is empty" in errors(log)
    assert " --> Parameter 'command_long' is empty" in errors(log)


def test_check_legacy_names_in_errors():
    mapping, *_ = make({}, legacy=True)
    log = Logger()
    assert mapping.check(log) is False
    assert " --> Parameter 'command_push' is empty" in errors(log)


def test_check_dataref_not_found_and_no_values():
    mapping, *_ = make({"dataref_short": "sim/missing", "command_long": "b"})
    log = Logger()
    assert mapping.check(log) is False
    assert " --> Dataref 'sim/missing' not found" in errors(log)
    assert " --> Parameter 'values_short' is not defined" in errors(log)


def test_execute_without_press_completes():
    mapping, env, _, _ = make({"command_short": "a", "command_long": "b"})
    result = mapping.execute(param())
    assert result.completed is True
    assert env.cmd.history == []


def test_execute_with_wrong_param_is_not_completed():
    mapping, *_ = make({"command_short": "a", "command_long": "b"})
    assert mapping.execute(None).completed is False


def test_short_press_begins_and_ends_short_command():
    mapping, env, clock, _ = make({"command_short": "a", "command_long": "b"})
    mapping.set_time_received()
    clock.now = 0.1
    mapping.set_time_released()

    assert mapping.execute(param()).completed is False
    assert env.cmd.history == [("begin", "a")]

    clock.now = 0.2
    assert mapping.execute(param()).completed is False

    clock.now = 0.5
    assert mapping.execute(param()).completed is True
    assert env.cmd.history == [("begin", "a"), ("end", "a")]


def test_long_hold_begins_long_command():
    mapping, env, clock, _ = make({"command_short": "a", "command_long": "b"})
    mapping.set_time_received()
    clock.now = 0.2
    assert mapping.execute(param()).completed is False
    assert env.cmd.history == []

    clock.now = 0.6
    assert mapping.execute(param()).completed is False
    assert env.cmd.history == [("begin", "b")]

    clock.now = 1.0
    assert mapping.execute(param()).completed is True
    assert env.cmd.history == [("begin", "b"), ("end", "b")]


def test_long_press_released_late_runs_long_command():
    mapping, env, clock, _ = make({"command_short": "a", "command_long": "b"})
    mapping.set_time_received()
    clock.now = 0.8
    mapping.set_time_released()
    mapping.execute(param())
    assert env.cmd.history == [("begin", "b")]


def test_short_press_toggles_dataref():
    mapping, env, clock, _ = make(
        {"dataref_short": "sim/x", "values_short": ["0", "1", "2"], "command_long": "b"},
        datarefs={"sim/x": "0"},
    )
    mapping.set_time_received()
    clock.now = 0.1
    mapping.set_time_released()
    assert mapping.execute(param()).completed is True
    assert env.drf.values["sim/x"] == "1"


def test_dataref_toggle_wraps():
    mapping, env, clock, _ = make(
        {"dataref_long": "sim/x", "values_long": ["0", "1", "2"], "command_short": "a"},
        datarefs={"sim/x": "2"},
    )
    mapping.set_time_received()
    clock.now = 0.7
    mapping.execute(param())
    assert env.drf.values["sim/x"] == "0"


def test_wrong_sublayer_resets():
    mapping, env, clock, _ = make({"command_short": "a", "command_long": "b", "sl": "1"})
    mapping.set_time_received()
    clock.now = 0.1
    mapping.set_time_released()
    assert mapping.execute(param("2")).completed is True
    assert env.cmd.history == []
    assert mapping.execute(param("1")).completed is True
    assert env.cmd.history == []


def test_release_without_press_is_ignored():
    mapping, env, clock, _ = make({"command_short": "a", "command_long": "b"})
    mapping.set_time_released()
    assert mapping.execute(param()).completed is True
    assert env.cmd.history == []


def test_label_shown_after_short_command_ends():
    config = {"lbl": {"dataref": "sim/gear", "text": "Gear", "values": [{"value": "1", "text": "down"}]}}
    mapping, env, clock, _ = make(
        {"command_short": "a", "command_long": "b", "label_short": "lbl"},
        datarefs={"sim/gear": "1"},
        config=config,
    )
    mapping.set_time_received()
    clock.now = 0.1
    mapping.set_time_released()
    mapping.execute(param())
    clock.now = 0.5
    mapping.execute(param())
    assert env.info_messages == {"lbl": "Gear down"}


def test_map_text_cmd_drf():
    mapping, *_ = make({"command_short": "a", "dataref_long": "sim/x", "values_long": ["0", "1"]})
    assert mapping.map_text_cmd_drf() == "a   (command short)\nsim/x   (dataref long)"
    assert mapping.map_text_parameter() == ""
    assert mapping.map_text_label() == ""


def test_map_text_cmd_drf_legacy():
    mapping, *_ = make({"command_push": "p", "command_pull": "q"}, legacy=True)
    assert mapping.map_text_cmd_drf() == "p   (command push)\nq   (command pull)"


def test_build_mapping_text():
    mapping, *_ = make({"command_short": "a", "command_long": "b", "sl": "2"})
    assert mapping.build_mapping_text(False) == " ====== Short & Long ======\nSublayer = '2'\n"
    assert mapping.build_mapping_text(True) == ""
    legacy, *_ = make({}, legacy=True)
    assert legacy.mapping_text(False) == " ====== Push & Pull ======\n"