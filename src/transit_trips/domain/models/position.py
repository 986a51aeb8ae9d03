"""Platform/track position domain model."""

import re
from dataclasses import dataclass

_NAME_SECTION = re.compile(r"(\d{1,5})\s*([A-Z](?:\s*-?\s*[A-Z])?)?", re.IGNORECASE)
_NAME_CARDINAL = re.compile(r"(\d{1,5})\s*(Nord|Süd|Ost|West)", re.IGNORECASE)


@dataclass(frozen=True)
class Position:
    """A platform or track, optionally narrowed to a section (e.g. "5", "A-C")."""

    name: str
    section: str | None = None

    @classmethod
    def parse(cls, text: str | None) -> "Position | None":
        """Normalize backend platform text such as "05 A - C" or "3 Nord"."""
        if text is None:
            return None

        m = _NAME_SECTION.fullmatch(text)
        if m:
            name = str(int(m.group(1)))
            if m.group(2) is not None:
                return cls(name, re.sub(r"\s+", "", m.group(2)))
            return cls(name)

        m = _NAME_CARDINAL.fullmatch(text)
        if m:
            return cls(str(int(m.group(1))), m.group(2)[0])

        return cls(text)

    def __str__(self) -> str:
        if self.section:
            return f"{self.name} {self.section}"
        return self.name
