from midimap.command import CommandMapping
from midimap.core import (
    DeviceSettings,
    EncoderMode,
    Environment,
    Logger,
    MapInType,
    MemoryDatarefs,
)
from midimap.dataref import DatarefMapping
from midimap.encoder import EncoderMapping
from midimap.inbound_list import InboundMappingList, translate_map_type
from midimap.short_long import ShortLongMapping
from midimap.slider import SliderMapping


def _env():
    return Environment(drf=MemoryDatarefs({"sim/light": "0"}))


CMD = {"type": "cmd", "ch": 1, "cc": 10, "command": "sim/cmd"}
DRF = {"type": "drf", "ch": 2, "note": 20, "dataref": "sim/light", "values": ["0", "1"]}


def test_translate_map_type_codes():
    assert translate_map_type("cmd") is MapInType.COMMAND
    assert translate_map_type("cbv") is MapInType.COMMAND_BY_VALUE
    assert translate_map_type("drf") is MapInType.DATAREF
    assert translate_map_type("enc") is MapInType.ENCODER
    assert translate_map_type("pnp") is MapInType.PUSH_PULL
    assert translate_map_type("snl") is MapInType.SHORT_AND_LONG
    assert translate_map_type("sld") is MapInType.SLIDER
    assert translate_map_type("bogus") is MapInType.NONE


def test_create_and_find():
    mappings = InboundMappingList()
    log = Logger()
    mappings.create_mappings(log, [CMD, DRF], _env(), False, DeviceSettings(device_no=3), "inc", {})

    assert len(mappings) == 2
    assert ("info", "Device 3 :: 2 inbound mapping(s) found") in log.entries

    items = list(mappings)
    assert isinstance(items[0], CommandMapping)
    assert isinstance(items[1], DatarefMapping)
    assert [item.no for item in items] == [1, 2]
    assert all(item.include_name == "inc" for item in items)

    found = mappings.find(items[0].get_key())
    assert found == [items[0]]
    assert mappings.find("nothing") == []


def test_same_key_keeps_all_mappings():
    mappings = InboundMappingList()
    second = dict(CMD, command="sim/other")
    mappings.create_mappings(Logger(), [CMD, second], _env(), False, DeviceSettings(), "", {})
    items = list(mappings)
    assert len(mappings.find(items[0].get_key())) == 2


def test_invalid_entries_are_skipped_with_errors():
    mappings = InboundMappingList()
    log = Logger()
    profile = [
        {"ch": 1, "cc": 1},
        {"type": "xyz", "ch": 1, "cc": 1},
        {"type": 5, "ch": 1, "cc": 1},
        {"type": "cmd", "ch": 1, "cc": 1},
        CMD,
    ]
    mappings.create_mappings(log, profile, _env(), False, DeviceSettings(), "", {})
    assert len(mappings) == 1
    errors = [text for level, text in log.entries if level == "error"]
    assert " --> Parameter 'type' is missing" in errors
    assert " --> Parameters incomplete or incorrect" in errors


def test_encoder_not_allowed_on_virtual_device():
    enc = {"type": "enc", "ch": 1, "cc": 3, "command_up": "up", "command_down": "down"}
    mappings = InboundMappingList()
    log = Logger()
    mappings.create_mappings(log, [enc], _env(), True, DeviceSettings(), "", {})
    assert len(mappings) == 0
    assert ("info", "Virtual Device :: 1 inbound mapping(s) found") in log.entries


def test_encoder_uses_device_default_mode():
    enc = {"type": "enc", "ch": 1, "cc": 3, "command_up": "up", "command_down": "down"}
    mappings = InboundMappingList()
    settings = DeviceSettings(default_enc_mode=EncoderMode.RANGE)
    mappings.create_mappings(Logger(), [enc], _env(), False, settings, "", {})
    (mapping,) = list(mappings)
    assert isinstance(mapping, EncoderMapping)
    assert mapping.enc_mode is EncoderMode.RANGE


def test_push_pull_and_short_long_types():
    pnp = {"type": "pnp", "ch": 1, "cc": 4, "command_push": "a", "command_pull": "b"}
    snl = {"type": "snl", "ch": 1, "cc": 5, "command_short": "a", "command_long": "b"}
    sld = {"type": "sld", "ch": 1, "cc": 6, "command_up": "u", "command_down": "d"}
    mappings = InboundMappingList()
    mappings.create_mappings(Logger(), [pnp, snl, sld], _env(), False, DeviceSettings(), "", {})
    items = list(mappings)
    assert [item.type() for item in items] == [
        MapInType.PUSH_PULL,
        MapInType.SHORT_AND_LONG,
        MapInType.SLIDER,
    ]
    assert isinstance(items[0], ShortLongMapping)
    assert isinstance(items[2], SliderMapping)


def test_config_type_error_is_logged():
    bad = {"type": "cmd", "ch": 1, "cc": 1, "command": 42}
    mappings = InboundMappingList()
    log = Logger()
    mappings.create_mappings(log, [bad], _env(), False, DeviceSettings(), "", {})
    assert len(mappings) == 0
    assert ("error", " --> Error reading config") in log.entries