"""Data models for cache storage."""

import base64
import binascii
import json
from dataclasses import dataclass


@dataclass(frozen=True)
class CacheEntry:
    """Cached synthesis result stored under a fingerprint.

    Serialized as a single JSON document with the audio base64 encoded, so
    an entry is always written and replaced as a whole.

    Attributes:
        audio: Synthesized audio bytes
        extension: Container extension ("mp3", "r8", "wav")
        sample_rate: Audio sample rate in Hz
    """

    audio: bytes
    extension: str
    sample_rate: int

    def serialize(self) -> str:
        """Encode the entry as a text-safe string."""
        return json.dumps(
            {
                "audio": base64.b64encode(self.audio).decode("ascii"),
                "extension": self.extension,
                "sample_rate": self.sample_rate,
            }
        )

    @classmethod
    def deserialize(cls, value: str) -> "CacheEntry":
        """Decode an entry written by serialize().

        Raises:
            ValueError: If the value is not a well-formed entry
        """
        try:
            data = json.loads(value)
            return cls(
                audio=base64.b64decode(data["audio"], validate=True),
                extension=str(data["extension"]),
                sample_rate=int(data["sample_rate"]),
            )
        except (json.JSONDecodeError, KeyError, TypeError, binascii.Error) as e:
            raise ValueError(f"Malformed cache entry: {e}") from e
