"""Player-facing text rendering of the initiative order."""

from dataclasses import dataclass

from ..config import AppConfig, get_config
from .state import InitiativeTrackerState

ACTIVE_MARKER = "▶ "
INACTIVE_MARKER = "  "


@dataclass(frozen=True)
class FormatterOptions:
    """What the portal shows."""

    show_round: bool = True
    show_initiative_values: bool = True
    include_hidden: bool = False
    max_entries: int = 12  # <= 0 means unlimited

    @classmethod
    def from_config(cls, config: AppConfig | None = None) -> "FormatterOptions":
        if config is None:
            config = get_config()
        portal = config.portal
        return cls(
            show_round=portal.show_round,
            show_initiative_values=portal.show_initiative_values,
            include_hidden=portal.include_hidden,
            max_entries=portal.max_entries,
        )


def to_portal_text(state: InitiativeTrackerState, options: FormatterOptions | None = None) -> str:
    """Render the turn order as a block of text for a player display.

    Args:
        state: Tracker state to render
        options: Display options, defaults to FormatterOptions()

    Returns:
        Multi-line text, e.g. "Round 2\\n  20  Goblin\\n▶ 15  Alice"
    """
    if state is None:
        raise ValueError("state is required")
    options = options or FormatterOptions()

    lines = []
    if options.show_round:
        lines.append(f"Round {max(1, state.round)}")

    entries = [e for e in state.entries if options.include_hidden or not e.is_hidden]
    if not entries:
        lines.append("No combatants")
        return "\n".join(lines)

    shown = len(entries) if options.max_entries <= 0 else min(options.max_entries, len(entries))

    for entry in entries[:shown]:
        marker = ACTIVE_MARKER if entry.id == state.active_id else INACTIVE_MARKER
        value = f"{entry.initiative}  " if options.show_initiative_values else ""
        lines.append(f"{marker}{value}{entry.name}")

    if shown < len(entries):
        lines.append(f"+{len(entries) - shown} more")

    return "\n".join(lines)
