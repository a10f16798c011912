"""Loader for recorded feed sessions."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from volatility_index.domain.errors import MalformedMessageError


class FeedRecordingLoader:
    """Loads recorded feed messages from JSON Lines files.

    Each non-blank line holds one raw message exactly as received from the
    feed, seed response first.
    """

    def load_messages(self, file_path: str | Path) -> Iterator[Any]:
        """Yield decoded messages from a recording.

        Uses an iterator to avoid loading the entire file into memory.

        Args:
            file_path: Path to the recording

        Yields:
            Decoded JSON messages

        Raises:
            MalformedMessageError: If a line is not valid JSON
        """
        with open(file_path) as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    yield json.loads(line)
                except json.JSONDecodeError as e:
                    raise MalformedMessageError(
                        f"Invalid JSON in recording: {e.msg}",
                        context={"file": str(file_path), "line": line_number},
                    ) from e
