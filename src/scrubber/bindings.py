"""Key chord bindings and the resolver that maps chords to actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from scrubber.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from scrubber.config import KeyConfig

_log = get_logger("bindings")


class Modifier(Enum):
    """Modifier keys that can be part of a chord."""

    CTRL = "ctrl"
    ALT = "alt"
    SHIFT = "shift"
    SUPER = "super"


_MODIFIER_NAMES: dict[str, Modifier] = {
    "ctrl": Modifier.CTRL,
    "control": Modifier.CTRL,
    "alt": Modifier.ALT,
    "shift": Modifier.SHIFT,
    "super": Modifier.SUPER,
    "meta": Modifier.SUPER,
}


class Action(Enum):
    """Abstract actions a key chord can trigger."""

    SEEK_BACKWARD = "seek_backward"
    SEEK_FORWARD = "seek_forward"
    TOGGLE_PAUSE = "toggle_pause"
    TOGGLE_LOOP = "toggle_loop"

    @property
    def label(self) -> str:
        """Get human-readable label for the action."""
        return self.value.replace("_", " ").capitalize()


@dataclass(frozen=True)
class KeyChord:
    """Zero or more modifier keys plus one primary key."""

    key: str
    modifiers: frozenset[Modifier] = field(default_factory=frozenset)

    @classmethod
    def parse(cls, text: str) -> KeyChord:
        """Parse a chord from its textual form.

        Args:
            text: Chord string such as "left", "ctrl+left" or "ctrl+shift+s".

        Returns:
            The parsed chord.

        Raises:
            ValueError: If a modifier is unknown or the key is missing.
        """
        *prefixes, key = text.strip().split("+")
        if not key:
            raise ValueError(f"Chord has no key: {text!r}")
        modifiers = set()
        for prefix in prefixes:
            modifier = _MODIFIER_NAMES.get(prefix.strip().lower())
            if modifier is None:
                raise ValueError(f"Unknown modifier {prefix!r} in chord {text!r}")
            modifiers.add(modifier)
        return cls(key=key.strip(), modifiers=frozenset(modifiers))

    def __str__(self) -> str:
        names = [m.value for m in Modifier if m in self.modifiers]
        return "+".join([*names, self.key])


@dataclass(frozen=True)
class Binding:
    """A chord bound to an action."""

    chord: KeyChord
    action: Action


DEFAULT_KEYS: dict[Action, tuple[str, ...]] = {
    Action.SEEK_BACKWARD: ("left",),
    Action.SEEK_FORWARD: ("right",),
    Action.TOGGLE_PAUSE: ("space",),
    Action.TOGGLE_LOOP: ("l",),
}


def default_bindings() -> list[Binding]:
    """Get the built-in bindings in declaration order."""
    return [
        Binding(KeyChord.parse(text), action)
        for action, keys in DEFAULT_KEYS.items()
        for text in keys
    ]


class BindingResolver:
    """Ordered chord to action mapping.

    Declaration order is precedence: when several bindings share a chord,
    the first one wins. Instances are never mutated; reloading the
    configuration builds a new resolver.
    """

    def __init__(self, bindings: Iterable[Binding] = ()) -> None:
        """Initialize the resolver.

        Args:
            bindings: Bindings in precedence order.
        """
        self._bindings: tuple[Binding, ...] = tuple(bindings)

    @property
    def bindings(self) -> tuple[Binding, ...]:
        """All bindings in precedence order."""
        return self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def resolve(self, chord: KeyChord) -> Action | None:
        """Find the action bound to a chord.

        Modifier sets must match exactly; a chord carrying an extra modifier
        does not match a binding without it.

        Args:
            chord: The chord captured from an input event.

        Returns:
            The first matching action, or None if nothing is bound.
        """
        for binding in self._bindings:
            if binding.chord == chord:
                return binding.action
        return None

    def keys_for(self, action: Action) -> list[KeyChord]:
        """Get every chord bound to an action."""
        return [b.chord for b in self._bindings if b.action is action]

    @classmethod
    def default(cls) -> BindingResolver:
        """Create a resolver with the built-in bindings."""
        return cls(default_bindings())

    @classmethod
    def from_config(
        cls, keys: KeyConfig, *, reserved: Iterable[KeyChord] = ()
    ) -> BindingResolver:
        """Create a resolver from the [keys] config section.

        Configured chords replace the defaults of their action. An action
        with any malformed chord keeps its defaults.

        Args:
            keys: Key configuration snapshot.
            reserved: Chords the application handles before the resolver
                sees them. Bindings on them are kept but logged as
                unreachable.

        Returns:
            A new resolver.
        """
        bindings: list[Binding] = []
        for action, defaults in DEFAULT_KEYS.items():
            texts = keys.get_keys(action.value)
            try:
                chords = [KeyChord.parse(text) for text in texts]
            except ValueError as e:
                _log.warning(
                    "Invalid key binding for %s, using defaults: %s", action.value, e
                )
                chords = [KeyChord.parse(text) for text in defaults]
            if not chords:
                chords = [KeyChord.parse(text) for text in defaults]
            bindings.extend(Binding(chord, action) for chord in chords)
        taken = frozenset(reserved)
        for binding in bindings:
            if binding.chord in taken:
                _log.warning(
                    "Key %s for %s is taken by the application and will never fire",
                    binding.chord,
                    binding.action.value,
                )
        return cls(bindings)
