"""Local workflow templates and the auxiliary files shipped with them.

Layout of the template root::

    templates/
      ci.yml                      -> .github/workflows/ci.yml
      review.yml                  -> .github/workflows/review.yml
      .github/commands/fix.md     -> .github/commands/fix.md

Each workflow-template identifier maps to one ``<identifier>.yml`` file.
Everything below ``.github/commands`` is auxiliary content deployed with every
workflow, keeping its path relative to the template root.
"""

from __future__ import annotations

import dataclasses
import typing as typ
from pathlib import Path, PurePosixPath

from fleetsync.sync.models import DesiredArtifact

WORKFLOWS_DESTINATION = PurePosixPath(".github/workflows")
AUXILIARY_SUBDIR = PurePosixPath(".github/commands")
TEMPLATE_SUFFIX = ".yml"


def workflow_destination(identifier: str) -> str:
    """Return the repository path a workflow template is deployed to."""
    return str(WORKFLOWS_DESTINATION / f"{identifier}{TEMPLATE_SUFFIX}")


@dataclasses.dataclass(frozen=True, slots=True)
class AuxiliaryFile:
    """One auxiliary file, read lazily from disk."""

    source: Path
    destination: str

    def load(self) -> DesiredArtifact:
        """Read the file and return it as a desired artefact."""
        return DesiredArtifact(path=self.destination, content=self.source.read_bytes())


class AuxiliaryFiles:
    """Restartable, lexically ordered view over the auxiliary directory tree.

    Iterating walks the tree afresh each time; a missing directory yields
    nothing. File contents are only read when :meth:`AuxiliaryFile.load` is
    called.
    """

    def __init__(self, root: Path) -> None:
        """Bind the view to the template root directory."""
        self._root = root
        self._directory = root / AUXILIARY_SUBDIR

    def __iter__(self) -> typ.Iterator[AuxiliaryFile]:
        """Yield auxiliary files sorted by destination path."""
        if not self._directory.is_dir():
            return
        entries = [
            (path.relative_to(self._root).as_posix(), path)
            for path in self._directory.rglob("*")
            if path.is_file()
        ]
        for destination, source in sorted(entries):
            yield AuxiliaryFile(source=source, destination=destination)


class TemplateLibrary:
    """Resolve workflow-template identifiers to desired artefacts."""

    def __init__(self, root: Path | str) -> None:
        """Use ``root`` as the template directory."""
        self.root = Path(root)

    def workflow_path(self, identifier: str) -> Path:
        """Return the local template file for ``identifier``."""
        return self.root / f"{identifier}{TEMPLATE_SUFFIX}"

    def destination(self, identifier: str) -> str:
        """Return the repository path the template for ``identifier`` lands at."""
        return workflow_destination(identifier)

    def workflow_artifact(self, identifier: str) -> DesiredArtifact:
        """Read the template for ``identifier``.

        Raises
        ------
        OSError
            If the template file cannot be read.

        """
        return DesiredArtifact(
            path=workflow_destination(identifier),
            content=self.workflow_path(identifier).read_bytes(),
        )

    def auxiliary_files(self) -> AuxiliaryFiles:
        """Return the auxiliary files deployed alongside every workflow."""
        return AuxiliaryFiles(self.root)
