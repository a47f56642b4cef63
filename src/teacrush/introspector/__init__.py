"""Introspector module for teacrush.

- MediaProber: Protocol defining the inspection interface
- FFprobeIntrospector: Production implementation using ffprobe
- parse_probe_output: Pure parser for ffprobe JSON documents
"""

from teacrush.introspector.ffprobe import FFprobeIntrospector
from teacrush.introspector.interface import MediaProber
from teacrush.introspector.parsers import parse_duration, parse_probe_output

__all__ = [
    "FFprobeIntrospector",
    "MediaProber",
    "parse_duration",
    "parse_probe_output",
]
