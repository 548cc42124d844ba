import pytest

from midimap.core import Environment, Logger, MemoryDatarefs
from midimap.label import Label

CONFIG = {
    "lbl_mode": {
        "text": "Mode:",
        "values": [{"value": "0", "text": "Off"}, {"value": "1", "text": "On"}],
    },
    "lbl_own": {"text": "Own ", "dataref": "sim/own"},
}


def _label(values):
    env = Environment(drf=MemoryDatarefs(values))
    return env, Label(env)


@pytest.mark.parametrize(
    "stored, shown",
    [("1", "Mode: On"), ("0", "Mode: Off"), ("7", "Mode: 7")],
)
def test_display_uses_value_text_or_raw_value(stored, shown):
    env, label = _label({"sim/mode": stored})
    log = Logger()
    label.read_config(log, {"label": "lbl_mode"}, CONFIG, "sim/mode")
    assert (label.id, label.dataref) == ("lbl_mode", "sim/mode")
    label.display_label(log)
    assert env.info_messages["lbl_mode"] == shown


def test_label_dataref_overrides_mapping_dataref():
    _, label = _label({"sim/own": "x"})
    label.read_config(Logger(), {"label": "lbl_own"}, CONFIG, "sim/mode")
    assert label.dataref == "sim/own"
    assert label.text == "Own "


@pytest.mark.parametrize(
    "data, message",
    [
        ({"label": "nope"}, " --> Definition for label 'nope' not found"),
        ({"label": ""}, " --> Parameter 'label' is empty"),
        ({"label": 5}, "Error reading mapping"),
    ],
)
def test_bad_label_reference_is_reported(data, message):
    _, label = _label({})
    log = Logger()
    label.read_config(log, data, CONFIG, "sim/mode")
    assert label.id == ""
    assert ("error", message) in log.entries


def test_no_label_key_leaves_label_unset_and_valid():
    env, label = _label({})
    log = Logger()
    label.read_config(log, {}, CONFIG)
    assert label.id == ""
    assert label.check(log, "line")
    label.display_label(log)
    assert env.info_messages == {}


def test_custom_label_key():
    _, label = _label({"sim/mode": "0"})
    label.read_config(Logger(), {"label_short": "lbl_mode"}, CONFIG, "sim/mode", "label_short")
    assert label.id == "lbl_mode"


@pytest.mark.parametrize(
    "dataref, message",
    [
        ("sim/mode", " --> Dataref 'sim/mode' not found"),
        ("", " --> Parameter 'dataref' is empty"),
    ],
)
def test_check_fails_for_bad_dataref(dataref, message):
    _, label = _label({})
    log = Logger()
    label.read_config(log, {"label": "lbl_mode"}, CONFIG, dataref)
    assert not label.check(log, "line")
    assert ("error", message) in log.entries