from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Protocol


class VcsGateway(Protocol):
    """What the executor needs from a version-control tool.

    Implementations raise StageError, CommitError and TagError respectively.
    """

    def stage(self, paths: Iterable[Path]) -> None: ...

    def commit(self, message: str) -> None: ...

    def tag(self, name: str, message: Optional[str] = None) -> None: ...
