"""Recover JSON from package manager output.

Composer sometimes prints banners or deprecation warnings on stdout ahead of
the JSON document. :func:`recover` first tries a strict parse, then retries
from the first ``{``. Trailing junk and truncated documents are not repaired.
"""

import json
from dataclasses import dataclass
from typing import Any, Union

from ..errors import OutputRecoveryFailure


@dataclass(frozen=True)
class Parsed:
    """Output parsed as JSON."""
    value: Any
    recovery_applied: bool = False

    @property
    def ok(self) -> bool:
        return True

    def raise_for_failure(self) -> "Parsed":
        return self


@dataclass(frozen=True)
class Unrecoverable:
    """Output that is not JSON; the raw text is kept for inspection."""
    raw_text: str

    value = None
    recovery_applied = True

    @property
    def ok(self) -> bool:
        return False

    def raise_for_failure(self):
        raise OutputRecoveryFailure(self.raw_text)


RecoveryResult = Union[Parsed, Unrecoverable]


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return None


def recover(raw_text: str) -> RecoveryResult:
    """Parse *raw_text* as JSON, stripping any preamble before the first ``{``."""
    value = _loads(raw_text)
    if value is not None:
        return Parsed(value)

    start = raw_text.find("{")
    if start == -1:
        return Unrecoverable(raw_text)

    value = _loads(raw_text[start:])
    if value is None:
        return Unrecoverable(raw_text)
    return Parsed(value, recovery_applied=True)
