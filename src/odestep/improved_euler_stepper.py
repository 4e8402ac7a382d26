"""Improved Euler (Heun) stepper.

Two-stage predictor-corrector using the trapezoidal average of the slopes at
both ends of the step:

    k1     = f(x, t)
    x_pred = x + dt * k1
    k2     = f(x_pred, t + dt)
    x      = x + dt/2 * (k1 + k2)

Every step is accepted; there is no error estimate and no step-size control.
"""

from __future__ import annotations

from typing import Callable, ClassVar

from .algebra import scale_two_sum, scale_two_sum_accumulate
from .state import DynamicState
from .stepper_base import StateT, StepperBase, System, TimeT


class ImprovedEulerStepper(StepperBase[StateT, TimeT]):
    """Heun's method with a step counter.

    `order_step()` reports 1, although the averaged two-stage update has a
    local error of order 2 (observable with `odestep.convergence`).
    """

    is_adaptive_stepper: ClassVar[bool] = False
    _order: ClassVar[int] = 1

    def __init__(self, state_type: Callable[[], StateT] = DynamicState):
        super().__init__(state_type)
        self._dxdt1 = self._new_buffer()
        self._dxdt2 = self._new_buffer()
        self._x_pred = self._new_buffer()
        self._steps = 0
        self._bind_adjust_size(self._dxdt1, self._dxdt2, self._x_pred)

    def steps(self) -> int:
        """Number of steps completed by this stepper."""
        return self._steps

    def do_step(self, system: System, x: StateT, t: TimeT, dt: TimeT) -> None:
        """Advance x in place by one Heun step from t to t + dt."""
        # Slope at the start of the step.
        system(x, self._dxdt1, t)

        # Predictor: x_pred = x + dt * k1
        scale_two_sum(self._x_pred, 1, x, dt, self._dxdt1)

        # Slope at the predicted end point.
        system(self._x_pred, self._dxdt2, t + dt)

        # Corrector: x += dt/2 * k1 + dt/2 * k2
        half = dt / 2
        scale_two_sum_accumulate(x, half, self._dxdt1, half, self._dxdt2)

        self._steps += 1
