"""Bounded, newest-first history of dice roll traces."""

from dataclasses import dataclass, replace

from ..config import AppConfig, get_config


@dataclass(frozen=True)
class RollHistory:
    """Immutable roll history, newest entry first."""

    entries: tuple[str, ...] = ()
    limit: int = 20

    @classmethod
    def from_config(cls, config: AppConfig | None = None) -> "RollHistory":
        if config is None:
            config = get_config()
        return cls(limit=config.dice.history_length)

    def record(self, text: str) -> "RollHistory":
        """Return a new history with ``text`` prepended, dropping the oldest."""
        entries = (text,) + self.entries
        return replace(self, entries=entries[: max(1, self.limit)])

    def clear(self) -> "RollHistory":
        return replace(self, entries=())

    @property
    def latest(self) -> str | None:
        return self.entries[0] if self.entries else None

    def __len__(self) -> int:
        return len(self.entries)
