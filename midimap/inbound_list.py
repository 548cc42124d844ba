"""Collection of the inbound mappings of a device."""

from __future__ import annotations

from collections.abc import Iterator

from .command import CommandMapping
from .command_by_value import CommandByValueMapping
from .core import ConfigError, InboundMapping, MapInType, read_string
from .dataref import DatarefMapping
from .encoder import EncoderMapping
from .short_long import ShortLongMapping
from .slider import SliderMapping

_CFG_TYPE = "type"

_TYPE_CODES = {
    "cmd": MapInType.COMMAND,
    "cbv": MapInType.COMMAND_BY_VALUE,
    "sld": MapInType.SLIDER,
    "drf": MapInType.DATAREF,
    "pnp": MapInType.PUSH_PULL,
    "snl": MapInType.SHORT_AND_LONG,
    "enc": MapInType.ENCODER,
}


def translate_map_type(type_str) -> MapInType:
    """Return the inbound mapping type for a config code; unknown codes give NONE."""
    return _TYPE_CODES.get(type_str, MapInType.NONE)


class InboundMappingList:
    """Inbound mappings, looked up by MIDI key and iterated in creation order."""

    def __init__(self):
        self._last_map_no = 0
        self._by_key: dict[str, list[InboundMapping]] = {}
        self._by_no: dict[int, InboundMapping] = {}

    def create_mappings(self, log, profile, env, is_virtual, dev_settings, inc_name, config):
        """Create, check and store a mapping for each entry of the profile."""
        if is_virtual:
            prefix = "Virtual Device :: "
        else:
            prefix = f"Device {dev_settings.device_no} :: "

        log.info(f"{prefix}{len(profile)} inbound mapping(s) found")

        for map_no, params in enumerate(profile):
            log.debug(f"{prefix}Read settings for mapping {map_no}")

            mapping = self._create(log, params, env, is_virtual, dev_settings, prefix, map_no)
            if mapping is None:
                log.error(f"{prefix}Mapping {map_no} :: {params!r}")
                log.error(" --> Error reading mapping")
                continue

            try:
                mapping.read_config(log, params, config)
            except ConfigError as error:
                log.error(f"{prefix}Mapping {map_no} :: {params!r}")
                log.error(" --> Error reading config")
                log.error(str(error))
                continue

            mapping.include_name = inc_name

            if mapping.check(log):
                self._add(mapping)
                log.debug(f"{prefix}Mapping {map_no} :: Mapping added")
            else:
                log.error(f"{prefix}Mapping {map_no} :: {params!r}")
                log.error(" --> Parameters incomplete or incorrect")

    def _create(self, log, params, env, is_virtual, dev_settings, prefix, map_no):
        map_type = self._read_map_type(log, params, prefix, map_no)

        match map_type:
            case MapInType.COMMAND:
                return CommandMapping(env)
            case MapInType.COMMAND_BY_VALUE:
                return CommandByValueMapping(env)
            case MapInType.DATAREF:
                return DatarefMapping(env)
            case MapInType.PUSH_PULL:
                return ShortLongMapping(env, True)
            case MapInType.SHORT_AND_LONG:
                return ShortLongMapping(env, False)
            case MapInType.ENCODER:
                if is_virtual:
                    log.error(f"{prefix}Mapping {map_no} :: mapping type not supported for virtual devices")
                    return None
                return EncoderMapping(env, dev_settings.default_enc_mode)
            case MapInType.SLIDER:
                return SliderMapping(env)
            case _:
                log.error(f"{prefix}Mapping {map_no} :: Invalid mapping type")
                return None

    @staticmethod
    def _read_map_type(log, params, prefix, map_no) -> MapInType:
        if not isinstance(params, dict):
            log.error(f"{prefix}Mapping {map_no} :: Error reading mapping")
            log.error(" --> Mapping has to be a table")
            return MapInType.NONE

        if _CFG_TYPE not in params:
            log.error(f"{prefix}Mapping {map_no} :: {params!r}")
            log.error(f" --> Parameter '{_CFG_TYPE}' is missing")
            return MapInType.NONE

        try:
            type_str = read_string(params, _CFG_TYPE)
        except ConfigError as error:
            log.error(f"{prefix}Mapping {map_no} :: {params!r}")
            log.error(f"{prefix}Mapping {map_no} :: Error reading mapping")
            log.error(str(error))
            return MapInType.NONE

        log.debug(f"{prefix}Mapping {map_no} :: Parameter type = '{type_str}'")
        return translate_map_type(type_str)

    def _add(self, mapping):
        self._last_map_no += 1
        mapping.no = self._last_map_no
        self._by_key.setdefault(mapping.get_key(), []).append(mapping)
        self._by_no[mapping.no] = mapping

    def find(self, key) -> list[InboundMapping]:
        """Return all mappings for a MIDI key."""
        return list(self._by_key.get(key, []))

    def __len__(self) -> int:
        return len(self._by_no)

    def __iter__(self) -> Iterator[InboundMapping]:
        return iter(self._by_no[no] for no in sorted(self._by_no))