"""Inbound and outbound MIDI controller mappings acting on datarefs and commands."""

__version__ = "0.1.0"