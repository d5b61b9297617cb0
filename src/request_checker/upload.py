"""FileMetadata — descriptor of one uploaded file, as produced by the upload parser."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, PrivateAttr


class FileMetadata(BaseModel):
    """Temporary upload on disk.

    Attributes:
        path:     Where the upload parser stored the file.
        name:     Client-supplied file name.
        type:     MIME type reported by the client.
        size:     Size in bytes.
        new_path: Set by ``FileChecker.copy`` / ``move`` to the destination.
    """

    model_config = ConfigDict(validate_assignment=True)

    path: str
    name: str = ""
    type: str = ""
    size: int = 0
    new_path: str | None = None

    # shared "failed" state for every checker bound to this upload
    _rejected: bool = PrivateAttr(default=False)

    @property
    def rejected(self) -> bool:
        return self._rejected

    def reject(self) -> None:
        self._rejected = True
