"""Common contract for the fixed-step explicit steppers.

A system is a callable `system(x, dxdt, t)` that writes the time derivative of
the state `x` at time `t` into `dxdt`. It must not resize either argument.

A stepper owns its scratch buffers exclusively. Copying one would either waste
the scratch allocation or let two integrations alias the same buffers, so
`copy.copy`, `copy.deepcopy` and pickling all raise `TypeError`; build a new
stepper instead.
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Generic, Protocol, TypeVar

from .state import DynamicState, StateVector, has_resize

StateT = TypeVar("StateT", bound=StateVector[Any])
TimeT = TypeVar("TimeT")

# Derivative function: system(x, dxdt, t) fills dxdt in place.
System = Callable[[Any, Any, Any], None]
# Zero-argument factory producing an empty or pre-sized scratch buffer.
StateFactory = Callable[[], Any]


class Stepper(Protocol):
    """Interface expected by `odestep.simulate.integrate_const`."""

    is_adaptive_stepper: bool

    def order_step(self) -> int:
        ...

    def adjust_size(self, reference: Any) -> None:
        ...

    def do_step(self, system: System, x: Any, t: Any, dt: Any) -> None:
        ...


def _no_resize(reference: Any) -> None:
    return None


class StepperBase(Generic[StateT, TimeT]):
    """Non-copyable owner of scratch buffers built from a state type.

    Subclasses create their buffers with `_new_buffer()` and then call
    `_bind_adjust_size(...)` once with all of them.
    """

    is_adaptive_stepper: ClassVar[bool] = False
    _order: ClassVar[int]

    def __init__(self, state_type: Callable[[], StateT] = DynamicState):
        self._state_type = state_type
        self._adjust_size: Callable[[Any], None] = _no_resize

    def _new_buffer(self) -> StateT:
        return self._state_type()

    def _bind_adjust_size(self, *buffers: StateT) -> None:
        # Resize capability is a property of the buffer type; decide it once.
        if not buffers or not has_resize(type(buffers[0])):
            self._adjust_size = _no_resize
            return

        def resize_all(reference: Any) -> None:
            n = len(reference)
            for buf in buffers:
                buf.resize(n)

        self._adjust_size = resize_all

    def order_step(self) -> int:
        """Order of the local truncation error as reported by this stepper."""
        return self._order

    def adjust_size(self, reference: StateT) -> None:
        """Resize the scratch buffers to len(reference).

        No-op when the state type has no `resize`; the caller is then
        responsible for scratch buffers that already match the state length.
        """
        self._adjust_size(reference)

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} cannot be copied; construct a new stepper")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} cannot be copied; construct a new stepper")

    def __reduce_ex__(self, protocol):
        raise TypeError(f"{type(self).__name__} cannot be pickled; construct a new stepper")
