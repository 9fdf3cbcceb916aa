"""Generated asset model."""

import base64
import mimetypes
from enum import Enum
from pathlib import Path
from pydantic import BaseModel, Field


# Content types whose extension mimetypes gets wrong or doesn't know on every Python
EXTENSIONS = {
    "image/jpeg": ".jpg",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/wave": ".wav",
}


class AssetKind(str, Enum):
    """Type of generated artifact."""
    IMAGE = "image"
    AUDIO = "audio"


class Asset(BaseModel):
    """An immutable generated (or uploaded) artifact.

    Regenerating a slot replaces the asset object; assets are never
    edited in place.
    """

    kind: AssetKind = Field(..., description="Image or audio")
    mime_type: str = Field(..., description="Content type of data")
    data: bytes = Field(..., description="Raw encoded bytes", repr=False)

    class Config:
        """Pydantic config."""
        frozen = True

    @classmethod
    def image(cls, data: bytes, mime_type: str = "image/jpeg") -> "Asset":
        return cls(kind=AssetKind.IMAGE, mime_type=mime_type, data=data)

    @classmethod
    def audio(cls, data: bytes, mime_type: str = "audio/wav") -> "Asset":
        return cls(kind=AssetKind.AUDIO, mime_type=mime_type, data=data)

    @classmethod
    def from_file(cls, path: Path) -> "Asset":
        """Load an asset from disk, guessing its type from the extension.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the extension is neither an image nor audio type.
        """
        if not path.exists():
            raise FileNotFoundError(f"Asset file not found: {path}")

        mime_type, _ = mimetypes.guess_type(path.name)
        if not mime_type or mime_type.split("/")[0] not in ("image", "audio"):
            raise ValueError(f"Unsupported asset type: {path}")

        if EXTENSIONS.get(mime_type) == ".wav":
            mime_type = "audio/wav"
        kind = AssetKind.IMAGE if mime_type.startswith("image/") else AssetKind.AUDIO
        return cls(kind=kind, mime_type=mime_type, data=path.read_bytes())

    @property
    def b64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.b64}"

    @property
    def extension(self) -> str:
        """File extension for this asset's content type, with leading dot."""
        if self.mime_type in EXTENSIONS:
            return EXTENSIONS[self.mime_type]
        return mimetypes.guess_extension(self.mime_type) or ".bin"
