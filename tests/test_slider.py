import pytest

from midimap.core import (
    Environment,
    InboundParam,
    Logger,
    MapInType,
    MemoryDatarefs,
    MidiMessage,
)
from midimap.slider import SliderMapping


def _env():
    return Environment(drf=MemoryDatarefs({"sim/flaps": 0.0}))


def _dataref_mapping(env, **extra):
    data = {"ch": 1, "cc": 5, "dataref": "sim/flaps", "value_min": 0, "value_max": 10}
    data.update(extra)
    mapping = SliderMapping(env)
    mapping.read_config(Logger(), data, {})
    return mapping


def _command_mapping(env, **extra):
    data = {
        "ch": 1,
        "cc": 5,
        "command_up": "cmd/up",
        "command_middle": "cmd/middle",
        "command_down": "cmd/down",
    }
    data.update(extra)
    mapping = SliderMapping(env)
    mapping.read_config(Logger(), data, {})
    return mapping


def _param(data_2, sl=""):
    return InboundParam(msg=MidiMessage(data_2=data_2), sl_value=sl)


def test_type_is_slider():
    assert SliderMapping(_env()).type() is MapInType.SLIDER


def test_dataref_limits_at_ends():
    env = _env()
    mapping = _dataref_mapping(env)
    assert mapping.check(Logger())

    mapping.execute(_param(0))
    assert env.drf.values["sim/flaps"] == 0.0
    mapping.execute(_param(127))
    assert env.drf.values["sim/flaps"] == 10.0


def test_dataref_values_between_are_monotone_and_in_range():
    env = _env()
    mapping = _dataref_mapping(env)
    seen = []
    for data_2 in (10, 40, 80, 120):
        result = mapping.execute(_param(data_2))
        assert result.completed
        seen.append(env.drf.values["sim/flaps"])
    assert seen == sorted(seen)
    assert all(0.0 < value < 10.0 for value in seen)


def test_dataref_defaults_to_unit_range():
    env = _env()
    mapping = SliderMapping(env)
    mapping.read_config(Logger(), {"ch": 1, "cc": 5, "dataref": "sim/flaps"}, {})
    mapping.execute(_param(127))
    assert env.drf.values["sim/flaps"] == 1.0


def test_label_shown_after_write():
    env = _env()
    config = {"flaps_label": {"text": "Flaps"}}
    mapping = SliderMapping(env)
    mapping.read_config(
        Logger(),
        {"ch": 1, "cc": 5, "dataref": "sim/flaps", "value_max": 10, "label": "flaps_label"},
        config,
    )
    assert mapping.map_text_label() == "flaps_label"
    mapping.execute(_param(127))
    assert env.info_messages["flaps_label"].startswith("Flaps ")


def test_other_sublayer_ignored():
    env = _env()
    mapping = _dataref_mapping(env, sl="1")
    env.drf.values["sim/flaps"] = 3.0
    mapping.execute(_param(127, sl="2"))
    assert env.drf.values["sim/flaps"] == 3.0


def test_non_inbound_param_ignored():
    env = _env()
    mapping = _dataref_mapping(env)
    result = mapping.execute(object())
    assert result.completed
    assert env.drf.values["sim/flaps"] == 0.0


def test_command_down_runs_once_until_position_changes():
    env = _env()
    mapping = _command_mapping(env)
    assert mapping.check(Logger())

    mapping.execute(_param(2))
    mapping.execute(_param(5))
    assert env.cmd.history == [("execute", "cmd/down")]


def test_command_up_middle_down_sequence():
    env = _env()
    mapping = _command_mapping(env)
    for data_2 in (0, 63, 127, 63, 0):
        mapping.execute(_param(data_2))
    assert [command for _, command in env.cmd.history] == [
        "cmd/down",
        "cmd/middle",
        "cmd/up",
        "cmd/middle",
        "cmd/down",
    ]


def test_neutral_zone_clears_previous_command():
    env = _env()
    mapping = _command_mapping(env)
    mapping.execute(_param(0))
    mapping.execute(_param(30))
    mapping.execute(_param(0))
    assert env.cmd.history == [("execute", "cmd/down"), ("execute", "cmd/down")]


def test_check_fails_on_equal_values():
    mapping = _dataref_mapping(_env(), value_min=5, value_max=5)
    log = Logger()
    assert not mapping.check(log)
    assert any("is equal to parameter" in text for level, text in log.entries if level == "error")


def test_check_fails_on_unknown_dataref():
    mapping = _dataref_mapping(_env(), dataref="sim/missing")
    log = Logger()
    assert not mapping.check(log)
    assert ("error", " --> Dataref 'sim/missing' not found") in log.entries


def test_check_fails_without_commands():
    mapping = SliderMapping(_env())
    mapping.read_config(Logger(), {"ch": 1, "cc": 5}, {})
    assert not mapping.check(Logger())


@pytest.mark.parametrize("extra", [{"data_2_min": 100, "data_2_max": 50}, {"data_2_margin": 26}])
def test_check_fails_on_bad_data_2(extra):
    mapping = _command_mapping(_env(), **extra)
    assert not mapping.check(Logger())


def test_map_texts():
    env = _env()
    mapping = _command_mapping(env)
    assert mapping.map_text_cmd_drf() == "cmd/up (up)\ncmd/middle (middle)\ncmd/down (down)"
    assert mapping.map_text_parameter() == ""

    drf = _dataref_mapping(env)
    assert drf.map_text_cmd_drf() == "sim/flaps"
    assert drf.map_text_parameter() == "Value min = 0   |   Value max = 10"


def test_build_mapping_text_short_and_long():
    mapping = _command_mapping(_env())
    short = mapping.build_mapping_text(True)
    assert short == "Command down = 'cmd/down', Command middle = 'cmd/middle', Command up = 'cmd/up'"
    full = mapping.build_mapping_text(False)
    assert full.startswith(" ====== Slider ======\n")