"""Stepper facade.

This module re-exports the steppers from their submodules so the rest of the
project can depend on a stable import path:

    from odestep import steppers

and look steppers up by name with `get_stepper`.
"""

from __future__ import annotations

from typing import Dict, List

from .euler_stepper import EulerStepper
from .improved_euler_stepper import ImprovedEulerStepper
from .state import DynamicState
from .stepper_base import StateFactory, Stepper, StepperBase, System

_STEPPERS: Dict[str, type] = {
    "euler": EulerStepper,
    "improved_euler": ImprovedEulerStepper,
}


def list_steppers() -> List[str]:
    """Names accepted by `get_stepper`."""
    return sorted(_STEPPERS)


def get_stepper(name: str, state_type: StateFactory = DynamicState) -> StepperBase:
    """Build a new stepper by name.

    Args:
        name: 'euler' or 'improved_euler'.
        state_type: Factory for the stepper's scratch buffers.

    Returns:
        A freshly constructed stepper (never shared, never copied).

    Example:
        >>> stepper = get_stepper("improved_euler")
        >>> stepper.adjust_size(x)
        >>> stepper.do_step(system, x, 0.0, 0.01)
    """
    if name not in _STEPPERS:
        raise ValueError(f"Unknown stepper: {name}. Choose from {list_steppers()}")
    return _STEPPERS[name](state_type)


__all__ = [
    "System",
    "Stepper",
    "StepperBase",
    "EulerStepper",
    "ImprovedEulerStepper",
    "get_stepper",
    "list_steppers",
]
