"""Labels that show the state of a dataref on screen."""

from __future__ import annotations

from .core import ConfigError, DatarefError, Environment, read_str_map_array, read_string

CFG_LABEL = "label"

_CFG_DATAREF = "dataref"
_CFG_TEXT = "text"
_CFG_VALUE = "value"
_CFG_VALUES = "values"


class Label:
    """A label definition referenced by a mapping."""

    def __init__(self, env: Environment):
        self.env = env
        self.id = ""
        self.dataref = ""
        self.text = ""
        self.values: dict[str, str] = {}

    def read_config(self, log, data, config, dataref="", cfg_label=CFG_LABEL):
        """Read the label named by data[cfg_label] from the config sections."""
        if cfg_label not in data:
            return

        problem = None
        try:
            label_id = read_string(data, cfg_label)
            if not label_id:
                problem = f" --> Parameter '{cfg_label}' is empty"
            elif label_id not in config:
                problem = f" --> Definition for label '{label_id}' not found"
            else:
                self._read_section(label_id, config[label_id], dataref)
        except ConfigError as error:
            problem = str(error)

        if problem is not None:
            log.error("Error reading mapping")
            log.error(problem)

    def _read_section(self, label_id, section, dataref):
        if not isinstance(section, dict):
            raise ConfigError(f"Label '{label_id}' has to be a table")

        self.id = label_id
        self.dataref = read_string(section, _CFG_DATAREF) if _CFG_DATAREF in section else dataref

        text = read_string(section, _CFG_TEXT)
        self.text = text if text.endswith(" ") else text + " "

        for value, value_text in read_str_map_array(section, _CFG_VALUES, _CFG_VALUE, _CFG_TEXT).items():
            self.values.setdefault(value, value_text)

    def check(self, log, source_line) -> bool:
        if not self.id:
            return True

        if not self.dataref:
            problem = f" --> Parameter '{_CFG_DATAREF}' is empty"
        elif not self.env.drf.check(self.dataref):
            problem = f" --> Dataref '{self.dataref}' not found"
        else:
            return True

        log.error(source_line)
        log.error(problem)
        return False

    def display_label(self, log):
        """Show the label text with the current dataref value."""
        if not self.id:
            log.debug(" --> No label defined")
            return

        try:
            value = str(self.env.drf.read(log, self.dataref))
        except DatarefError:
            return

        value_text = self.values.get(value)
        if value_text is None:
            self.env.show_info_message(self.id, self.text + value)
        else:
            log.debug(f" --> Found text '{value_text}' for value '{value}'")
            self.env.show_info_message(self.id, self.text + value_text)