"""Package manager invocation and output recovery."""

from .composer import Composer
from .output_repair import Parsed, Unrecoverable, recover
from .process import ProcessResult, SubprocessRunner

__all__ = [
    "Composer",
    "Parsed",
    "ProcessResult",
    "SubprocessRunner",
    "Unrecoverable",
    "recover",
]
