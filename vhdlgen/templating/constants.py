"""Tag names and default templates for generated file boilerplate."""

from __future__ import annotations

EMBEDDED_TAGS: tuple[str, ...] = ("copyright", "license")

# Resolved by the line formatter once the rest of the line is known.
FLOWER_FILL_TAG = "flowerfill"
FLOWER_FILL = "<%flowerfill%>"

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"

DEFAULT_FILE_HEADER: tuple[str, ...] = (
    "--<%flowerfill%>",
    "-- Filename:    <%filename%>",
    "-- Owner:       <%developer%>",
    "-- Description: <%description%>",
    "-- Generated using <%appname%> version <%appversion%> with <%libraryname%> version <%libraryversion%>.",
    "--<%flowerfill%>",
)

DEFAULT_COPYRIGHT = "Copyright © <%developer%> <%year%>"

DEFAULT_LICENSE: tuple[str, ...] = (
    "You can add a license of your choice here by setting license_template in .vhdlgen.yml.",
    "Here is a list of template tags (names written between <% and %>) for the license, file header and copyright templates:",
    "",
    "    year - Replaced with the current year.",
    "    date - Replaced with the current date.",
    "    time - Replaced with the current time.",
    "    datetime - Replaced with the current date and time.",
    "    developer - Replaced with the developer's name.",
    "    company - Replaced with the company name.",
    "    appversion - Replaced with the calling application's version.",
    "    appname - Replaced with the calling application's name.",
    "    libraryversion - Replaced with the vhdlgen library version.",
    "    libraryname - Replaced with the vhdlgen library name.",
    "    flowerfill - Filled with flower box characters up to the line width.",
    "    copyright - Replaced with the copyright statement (cannot be cyclic).",
    "    license - Replaced with the license statement (cannot be cyclic).",
    "    filename - Replaced with the file name being generated.",
    "    description - Replaced with a description of the file being generated.",
)

DEFAULT_SECTION_START = "--<%flowerfill%> <%param%> <%flowerfill%>"

DEFAULT_SECTION_END = "-- End of <%param%>"


__all__ = [
    "DATE_FORMAT",
    "DEFAULT_COPYRIGHT",
    "DEFAULT_FILE_HEADER",
    "DEFAULT_LICENSE",
    "DEFAULT_SECTION_END",
    "DEFAULT_SECTION_START",
    "EMBEDDED_TAGS",
    "FLOWER_FILL",
    "FLOWER_FILL_TAG",
    "TIME_FORMAT",
]
