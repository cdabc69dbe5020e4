"""Operator-facing message templates."""

RUN_HEADER = """Running command: {command}
Datetime: {started_at}
--------------------------------------------------------------------------------"""

REQUIREMENTS_HEADER = """
Checking for required commands.
----------------------------------------------------------------"""

REQUIREMENTS_DONE = "Done checking required commands."

RELEASE_INFO = """
Release information:
---
{record}"""

COUNTDOWN_BANNER = """
The data about to be collected may take a while.

To cancel this command, press CTRL + C

This will begin in {seconds} seconds."""

NO_NOT_RUNNING_PODS = "No non-running {marker} pods found.\n"
