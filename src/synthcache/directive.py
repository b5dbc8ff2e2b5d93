"""Streaming directives handed to a downstream real-time audio engine.

A directive replaces rendered audio when a provider can stream with low
latency: the engine reads the parameters, opens its own provider stream and
(when ``write_cache_file=1``) persists what it produced under ``key``.

Wire format::

    say:{name=value,name=value}text

Parameter order is preserved. Inside values, ``\\``, ``,``, ``=``, ``{`` and
``}`` are escaped with a backslash. The text follows the closing brace
verbatim.
"""

import re
from dataclasses import dataclass, field

SCHEME = "say"

_NAME_RE = re.compile(r"^[A-Za-z0-9_]+$")
_SPECIAL = frozenset("\\,={}")


def _escape(value: str) -> str:
    return "".join(f"\\{ch}" if ch in _SPECIAL else ch for ch in value)


@dataclass
class StreamingDirective:
    """Ordered parameter list plus the text to speak."""

    text: str
    params: list[tuple[str, str]] = field(default_factory=list)

    def add(self, name: str, value: object) -> "StreamingDirective":
        """Append a parameter; ``None`` values are skipped.

        Raises:
            ValueError: If the parameter name is not alphanumeric/underscore
        """
        if not _NAME_RE.match(name):
            raise ValueError(f"Invalid directive parameter name: {name!r}")
        if value is None:
            return self
        if isinstance(value, bool):
            value = int(value)
        self.params.append((name, str(value)))
        return self

    def get(self, name: str) -> str | None:
        for key, value in self.params:
            if key == name:
                return value
        return None

    def encode(self) -> str:
        """Serialize to the ``say:{...}text`` wire format."""
        body = ",".join(f"{name}={_escape(value)}" for name, value in self.params)
        return f"{SCHEME}:{{{body}}}{self.text}"

    @classmethod
    def decode(cls, encoded: str) -> "StreamingDirective":
        """Parse the wire format back into a directive.

        Raises:
            ValueError: If the string is not a well-formed directive
        """
        prefix = f"{SCHEME}:{{"
        if not encoded.startswith(prefix):
            raise ValueError("Not a streaming directive")

        params: list[tuple[str, str]] = []
        name: list[str] = []
        value: list[str] = []
        in_value = False
        i = len(prefix)
        while i < len(encoded):
            ch = encoded[i]
            if ch == "\\" and in_value:
                if i + 1 >= len(encoded):
                    raise ValueError("Dangling escape in directive")
                value.append(encoded[i + 1])
                i += 2
                continue
            if ch == "=" and not in_value:
                in_value = True
            elif ch in ",}":
                if name or in_value:
                    if not in_value:
                        raise ValueError(f"Parameter without value: {''.join(name)}")
                    params.append(("".join(name), "".join(value)))
                name, value, in_value = [], [], False
                if ch == "}":
                    return cls(text=encoded[i + 1 :], params=params)
            elif in_value:
                value.append(ch)
            else:
                name.append(ch)
            i += 1
        raise ValueError("Unterminated directive parameters")
