"""
Output sink for generated artifacts.

Artifacts arrive in generation order and are written sequentially. Every
target file is opened once per run (truncating any earlier content) and
kept open while later artifacts routed to the same file are appended, so
the on-disk byte order of a shared file is the order artifacts were
emitted in.
"""

from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, TextIO, Union

from ...logging_config import get_logger
from .config import OutputMode

logger = get_logger(__name__)

# All SQL lands here in single-file mode
SHARED_SQL_FILE = "StoredProcedures.sql"


class OutputError(Exception):
    """Raised when a generated file cannot be created or written."""

    pass


class ArtifactKind(Enum):
    """Kinds of generated files."""

    SQL = "sql"
    TRANSFER = "transfer"
    ACCESS = "access"
    MANIFEST = "manifest"


@dataclass(frozen=True)
class Artifact:
    """One rendered piece of output and the path it would occupy on its own."""

    kind: ArtifactKind
    path: str
    content: str


class OutputSink:
    """Sequential writer routing artifacts to their target files.

    Use as a context manager; all open files are flushed and closed on
    exit, including when an error aborts the run.
    """

    def __init__(
        self,
        root: Union[str, Path],
        mode: OutputMode = OutputMode.MULTI_FILE,
        encoding: str = "utf-8",
    ):
        self.root = Path(root)
        self.mode = mode
        self.encoding = encoding
        self._stack = None
        self._handles: Dict[Path, TextIO] = {}
        self.written: List[Path] = []

    def __enter__(self) -> "OutputSink":
        self._stack = ExitStack()
        return self

    def __exit__(self, exc_type, exc, tb):
        stack, self._stack = self._stack, None
        self._handles.clear()
        stack.close()
        return False

    def target_for(self, artifact: Artifact) -> Path:
        """Resolve the file an artifact is written to."""
        if self._shares_target(artifact):
            return self.root / SHARED_SQL_FILE
        return self.root / artifact.path

    def _shares_target(self, artifact: Artifact) -> bool:
        return artifact.kind == ArtifactKind.SQL and self.mode == OutputMode.SINGLE_FILE

    def write(self, artifact: Artifact) -> Path:
        """
        Write one artifact.

        Raises:
            OutputError: If the target cannot be created or written
        """
        if self._stack is None:
            raise OutputError("OutputSink must be used as a context manager")

        target = self.target_for(artifact)
        handle = self._handles.get(target)

        try:
            if handle is None:
                target.parent.mkdir(parents=True, exist_ok=True)
                handle = self._stack.enter_context(
                    open(target, "w", encoding=self.encoding, newline="\n")
                )
                self._handles[target] = handle
                self.written.append(target)
                logger.info("Writing %s", target)
            elif not self._shares_target(artifact):
                logger.warning(
                    "%s artifact %s collides with an earlier artifact in %s",
                    artifact.kind.value,
                    artifact.path,
                    target,
                )
            handle.write(artifact.content)
        except OSError as e:
            logger.error("Failed to write %s: %s", target, e)
            raise OutputError(f"Failed to write {target}: {e}") from e

        logger.debug("Wrote %s artifact %s -> %s", artifact.kind.value, artifact.path, target)
        return target

    def write_all(self, artifacts: Iterable[Artifact]) -> List[Path]:
        for artifact in artifacts:
            self.write(artifact)
        return list(self.written)


def write_artifacts(
    artifacts: Iterable[Artifact],
    root: Union[str, Path],
    mode: OutputMode = OutputMode.MULTI_FILE,
) -> List[Path]:
    """
    Write artifacts in order and return the files created.

    A failure aborts the remaining writes; files already written are left
    in place.
    """
    with OutputSink(root, mode) as sink:
        return sink.write_all(artifacts)
