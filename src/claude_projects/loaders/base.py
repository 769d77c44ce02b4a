# ABOUTME: Base classes and types for project log stores.
# ABOUTME: Defines the LogFile record and the abstract LogStore interface.

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class LogFile:
    """A log file belonging to one project."""

    path: Path
    modified: float  # st_mtime


class LogStore(ABC):
    """Abstract access to per-project append-only log files."""

    @abstractmethod
    def project_names(self) -> list[str]:
        """List projects that have a log directory, in directory order."""
        ...

    @abstractmethod
    def has_project(self, project_name: str) -> bool:
        """Whether a log directory exists for the project."""
        ...

    @abstractmethod
    def log_files(self, project_name: str) -> list[LogFile]:
        """List the project's log files, newest first.

        Raises OSError when the project directory cannot be read.
        """
        ...

    @abstractmethod
    def iter_lines(self, log_file: LogFile) -> Iterator[str]:
        """Stream raw text lines from one log file."""
        ...

    @abstractmethod
    def remove_lines(self, log_file: LogFile, matches: Callable[[str], bool]) -> int:
        """Drop every line for which matches() is true, keeping the rest intact.

        Returns the number of lines removed; the file is left untouched when
        nothing matched.
        """
        ...

    @abstractmethod
    def remove_project(self, project_name: str) -> None:
        """Delete the project's log directory recursively."""
        ...
