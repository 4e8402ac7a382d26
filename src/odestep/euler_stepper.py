"""Forward Euler stepper.

    x(t + dt) = x(t) + dt * f(x, t)

First order, explicit, fixed step. The derivative is evaluated into a private
scratch buffer that is reused by every step.
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, overload

from .algebra import increment
from .state import DynamicState
from .stepper_base import StateT, StepperBase, System, TimeT


class EulerStepper(StepperBase[StateT, TimeT]):
    """Forward Euler (order 1, non-adaptive)."""

    is_adaptive_stepper: ClassVar[bool] = False
    _order: ClassVar[int] = 1

    def __init__(self, state_type: Callable[[], StateT] = DynamicState):
        super().__init__(state_type)
        self._dxdt = self._new_buffer()
        self._bind_adjust_size(self._dxdt)

    @property
    def dxdt(self) -> StateT:
        """Most recent derivative evaluated by `do_step(system, x, t, dt)`."""
        return self._dxdt

    @overload
    def do_step(self, system: System, x: StateT, t: TimeT, dt: TimeT) -> None:
        ...

    @overload
    def do_step(self, system: System, x: StateT, dxdt: StateT, t: TimeT, dt: TimeT) -> None:
        ...

    def do_step(self, system: System, x: StateT, *args: Any) -> None:
        """Advance x in place by one step.

        Called as `do_step(system, x, t, dt)` the derivative is evaluated with
        `system(x, dxdt, t)`. Called as `do_step(system, x, dxdt, t, dt)` the
        given derivative is used and the system is not called.
        """
        if len(args) == 2:
            t, dt = args
            system(x, self._dxdt, t)
            dxdt = self._dxdt
        elif len(args) == 3:
            dxdt, _t, dt = args
        else:
            raise TypeError(
                "do_step expects (system, x, t, dt) or (system, x, dxdt, t, dt)"
            )
        increment(x, dxdt, dt)
