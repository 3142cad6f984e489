"""Step outputs for the calling workflow."""

from __future__ import annotations

import os
import sys
import uuid
from typing import Optional, TextIO

from workflow_dispatch.core.logging import escape_command_data


def set_output(
    name: str,
    value: object,
    *,
    output_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Expose ``name`` to later steps.

    Appends to the ``GITHUB_OUTPUT`` file when one is available, otherwise
    falls back to the legacy ``::set-output`` command on stdout.
    """

    text = str(value)
    output_file = output_file or os.environ.get("GITHUB_OUTPUT")

    if output_file:
        if "\n" in text or "\r" in text:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            entry = f"{name}<<{delimiter}\n{text}\n{delimiter}\n"
        else:
            entry = f"{name}={text}\n"
        with open(output_file, "a", encoding="utf-8") as handle:
            handle.write(entry)
        return

    stream = stream or sys.stdout
    escaped = escape_command_data(text)
    stream.write(f"::set-output name={name}::{escaped}\n")
