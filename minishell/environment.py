"""The shell's environment variables and the state shared by its parts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Union

EnvSource = Union[Mapping[str, str], Iterable[str]]


class Environment:
    """An ordered list of ``NAME=value`` entries, as handed to programs."""

    def __init__(self, entries: EnvSource = ()) -> None:
        if isinstance(entries, Mapping):
            self._entries = [f"{key}={value}" for key, value in entries.items()]
        else:
            self._entries = [str(entry) for entry in entries]

    @staticmethod
    def _key(entry: str) -> str:
        return entry.partition("=")[0]

    def _index(self, name: str) -> Optional[int]:
        return next(
            (pos for pos, entry in enumerate(self._entries) if self._key(entry) == name),
            None,
        )

    def get(self, name: str) -> Optional[str]:
        """Return the value bound to ``name``, or None if it has none."""
        for entry in self._entries:
            key, sep, value = entry.partition("=")
            if sep and key == name:
                return value
        return None

    def set(self, name: str, value: str) -> None:
        """Bind ``name`` to ``value``, in place if it exists, else at the end."""
        entry = f"{name}={value}"
        pos = self._index(name)
        if pos is None:
            self._entries.append(entry)
        else:
            self._entries[pos] = entry

    def add(self, entry: str) -> None:
        """Append a raw entry to the end of the environment."""
        self._entries.append(entry)

    def remove(self, name: str) -> None:
        """Remove the first entry for ``name``; raise KeyError if there is none."""
        pos = self._index(name)
        if pos is None:
            raise KeyError(name)
        del self._entries[pos]

    def to_list(self) -> List[str]:
        """Return a copy of the entries in order."""
        return list(self._entries)

    def to_dict(self) -> Dict[str, str]:
        """Return the entries that carry a value as a name-to-value mapping."""
        result: Dict[str, str] = {}
        for entry in self._entries:
            key, sep, value = entry.partition("=")
            if sep and key not in result:
                result[key] = value
        return result

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._index(name) is not None

    def __repr__(self) -> str:
        return f"Environment({self._entries!r})"


@dataclass
class ShellContext:
    """State shared by the parser, the builtins and the executor."""

    env: Environment = field(default_factory=Environment)
    status: int = 0