"""
Mini-C Runtime Environment
==========================

Variable storage for the evaluator: a slot arena plus a stack of call
frames, each holding a stack of block scopes.

Storage Model
-------------
Every variable lives in a Slot: one typed storage cell holding exactly
one Value. Slots are kept in a SlotArena and identified by a
SlotHandle(index, generation). A pointer value carries a handle, never
an address.

When a scope closes its slots are freed. A freed index may be reused
for a new slot, but with a bumped generation, so an old handle can
never reach the new slot. Any access through a stale handle raises
DanglingPointerError.

Visibility
----------
Name lookup searches the scopes of the current frame only, innermost
first. A callee cannot see its caller's locals (but may reach them
through pointers it was given).

    frame: main                frame: fact
    ┌──────────────────┐       ┌──────────────────┐
    │ scope 0: x, p    │       │ scope 0: n, r    │  <- lookup
    │ scope 1: i       │       └──────────────────┘
    └──────────────────┘
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional
import difflib

from c4py.errors import SourceLocation
from c4py.minic.types import CType
from c4py.minic.values import Value, zero_value
from c4py.minic.errors import (
    DanglingPointerError,
    RedeclarationError,
    UndefinedSymbolError,
)


# =============================================================================
# Slots
# =============================================================================

@dataclass(frozen=True)
class SlotHandle:
    """
    Stable reference to a slot.

    Attributes:
        index: Position in the arena
        generation: Arena generation of the index when allocated
    """
    index: int
    generation: int


@dataclass
class Slot:
    """
    A single typed storage location.

    Attributes:
        name: The variable name (for diagnostics)
        ctype: The declared type; every stored value has this type
        value: The current value
        generation: Matches the handle generation while the slot is live
        live: False once the owning scope has exited
        location: Where the variable was declared
    """
    name: str
    ctype: CType
    value: Value
    generation: int = 0
    live: bool = True
    location: Optional[SourceLocation] = None


class SlotArena:
    """
    Generation-checked storage for all slots of a run.

    Usage:
        arena = SlotArena()
        handle = arena.allocate("x", TYPE_INT, Value.of_int(0))
        arena.write(handle, Value.of_int(42))
        arena.free(handle)
        arena.read(handle)        # raises DanglingPointerError
    """

    def __init__(self):
        self._slots: list[Slot] = []
        self._free: list[int] = []

    def allocate(
        self,
        name: str,
        ctype: CType,
        value: Value,
        location: Optional[SourceLocation] = None,
    ) -> SlotHandle:
        """Create a live slot and return its handle."""
        if self._free:
            index = self._free.pop()
            slot = self._slots[index]
            slot.name = name
            slot.ctype = ctype
            slot.value = value
            slot.live = True
            slot.location = location
        else:
            index = len(self._slots)
            slot = Slot(name, ctype, value, location=location)
            self._slots.append(slot)
        return SlotHandle(index, slot.generation)

    def free(self, handle: SlotHandle) -> None:
        """Release a slot; its handle (and every copy) becomes stale."""
        slot = self.get(handle)
        slot.live = False
        slot.generation += 1
        self._free.append(handle.index)

    def get(self, handle: SlotHandle) -> Slot:
        """
        Return the live slot for a handle.

        Raises:
            DanglingPointerError: If the slot has been freed
        """
        if 0 <= handle.index < len(self._slots):
            slot = self._slots[handle.index]
            if slot.live and slot.generation == handle.generation:
                return slot
        raise DanglingPointerError(
            "dereference of a dangling pointer",
            hint="the variable it pointed to went out of scope",
        )

    def read(self, handle: SlotHandle) -> Value:
        return self.get(handle).value

    def write(self, handle: SlotHandle, value: Value) -> None:
        self.get(handle).value = value

    @property
    def live_count(self) -> int:
        """Number of slots currently live."""
        return len(self._slots) - len(self._free)


# =============================================================================
# Frames and Scopes
# =============================================================================

class Frame:
    """
    Call frame: the scopes of one function activation.

    Attributes:
        function_name: Name of the running function
        scopes: Innermost scope last; each maps name -> handle
    """

    def __init__(self, function_name: str):
        self.function_name = function_name
        self.scopes: list[dict[str, SlotHandle]] = []

    def lookup(self, name: str) -> Optional[SlotHandle]:
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        return None

    def visible_names(self) -> list[str]:
        names = []
        for scope in self.scopes:
            names.extend(scope)
        return names


class Environment:
    """
    Scoped variable storage for the evaluator.

    Usage:
        env = Environment()
        with env.frame("main"):
            with env.scope():
                handle = env.declare("x", TYPE_INT)
                env.write(handle, Value.of_int(1))
    """

    def __init__(self, arena: Optional[SlotArena] = None):
        self.arena = arena or SlotArena()
        self._frames: list[Frame] = []

    @property
    def call_depth(self) -> int:
        """Number of active call frames."""
        return len(self._frames)

    @property
    def current_frame(self) -> Frame:
        if not self._frames:
            raise RuntimeError("no active call frame")
        return self._frames[-1]

    # =========================================================================
    # Frame and Scope Lifetime
    # =========================================================================

    def push_frame(self, function_name: str) -> Frame:
        frame = Frame(function_name)
        self._frames.append(frame)
        return frame

    def pop_frame(self) -> None:
        """Leave the current function, closing any scopes it still has open."""
        frame = self.current_frame
        while frame.scopes:
            self.pop_scope()
        self._frames.pop()

    def push_scope(self) -> None:
        self.current_frame.scopes.append({})

    def pop_scope(self) -> None:
        """Close the innermost scope and free its slots."""
        scope = self.current_frame.scopes.pop()
        for handle in scope.values():
            self.arena.free(handle)

    @contextmanager
    def frame(self, function_name: str) -> Iterator[Frame]:
        """Run a function activation with its own outermost scope."""
        frame = self.push_frame(function_name)
        self.push_scope()
        try:
            yield frame
        finally:
            self.pop_frame()

    @contextmanager
    def scope(self) -> Iterator[None]:
        """Run a block in a nested scope."""
        self.push_scope()
        try:
            yield
        finally:
            self.pop_scope()

    # =========================================================================
    # Variables
    # =========================================================================

    def declare(
        self,
        name: str,
        ctype: CType,
        location: Optional[SourceLocation] = None,
        value: Optional[Value] = None,
    ) -> SlotHandle:
        """
        Create a variable in the innermost scope.

        Args:
            name: Variable name
            ctype: Declared type
            location: Declaration site (for diagnostics)
            value: Initial value (default: zero of the type)

        Raises:
            RedeclarationError: If the name already exists in this scope
        """
        scope = self.current_frame.scopes[-1]
        if name in scope:
            original = self.arena.get(scope[name]).location
            raise RedeclarationError(name, location=location, original_location=original)

        if value is None:
            value = zero_value(ctype)
        handle = self.arena.allocate(name, ctype, value, location)
        scope[name] = handle
        return handle

    def lookup(self, name: str) -> Optional[SlotHandle]:
        """Find a visible variable, or None."""
        return self.current_frame.lookup(name)

    def resolve(self, name: str, location: Optional[SourceLocation] = None) -> SlotHandle:
        """
        Find a visible variable.

        Raises:
            UndefinedSymbolError: If no visible variable has this name
        """
        handle = self.lookup(name)
        if handle is None:
            similar = difflib.get_close_matches(name, self.current_frame.visible_names())
            raise UndefinedSymbolError(
                name,
                kind="variable",
                location=location,
                similar_identifiers=similar,
            )
        return handle

    def slot(self, handle: SlotHandle) -> Slot:
        """Return the live slot for a handle (DanglingPointerError if stale)."""
        return self.arena.get(handle)

    def read(self, handle: SlotHandle) -> Value:
        return self.arena.read(handle)

    def write(self, handle: SlotHandle, value: Value) -> None:
        self.arena.write(handle, value)
