# otbeat_snippet.py

import re
from typing import List

from pattern_extractor import CompiledSchema, FieldSpec, compile_schema, field, sep

# Grammar of the OTbeat summary email snippet, e.g.
#
#   STUDIO WORKOUT SUMMARY Bothell, WA 06/13/2021 12:15 PM Tiffany 15 0 0 0 0
#   MINUTES / ZONE 55 CALORIES BURNED 0 SPLAT POINTS 75 AVG. HEART-RATE Peak HR: 80
#
# Gmail puts a zero-width non-joiner (U+200C) in front of the time colon.
SNIPPET_SCHEMA: List[FieldSpec] = [
    sep(r"STUDIO WORKOUT SUMMARY "),
    field("City", r"\w+"),
    sep(r", "),
    field("State", r"\w+"),
    sep(r" "),
    field("Month", r"\d+"),
    sep(r"/"),
    field("Day", r"\d+"),
    sep(r"/"),
    field("Year", r"\d+"),
    sep(r" "),
    field("Hour", r"\d+"),
    sep(r"\u200c?:"),
    field("Minute", r"\d+"),
    sep(r" "),
    field("AMPM", r"\w{2}"),
    sep(r" "),
    field("Instructor", r"\w+"),
    sep(r" "),
    field("Zone1", r"\d+"),
    sep(r" "),
    field("Zone2", r"\d+"),
    sep(r" "),
    field("Zone3", r"\d+"),
    sep(r" "),
    field("Zone4", r"\d+"),
    sep(r" "),
    field("Zone5", r"\d+"),
    sep(r" MINUTES / ZONE "),
    field("Calories", r"\d+"),
    sep(r" CALORIES BURNED "),
    field("SplatPoints", r"\d+"),
    sep(r" SPLAT POINTS "),
    field("AverageHeartRate", r"\d+"),
    sep(r" AVG. HEART-RATE Peak HR: "),
    field("PeakHeartRate", r"\d+"),
]


def compile_snippet_parser() -> CompiledSchema:
    """Build the matcher for OTbeat snippets. \\w and \\d are ASCII-only."""
    return compile_schema(SNIPPET_SCHEMA, flags=re.ASCII)
