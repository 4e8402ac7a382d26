"""Reference initial value problems with closed-form solutions.

Each problem bundles an in-place system `system(x, dxdt, t)`, an initial
state, a default time span and the exact solution, so steppers can be checked
against ground truth:

    exponential_decay     x' = -k x                 x(t) = x0 exp(-k t)
    harmonic_oscillator   q' = p, p' = -w^2 q       rotation in phase space
    logistic              x' = r x (1 - x / K)      sigmoid

`from_vector_field` adapts a returning vector field f(t, y) -> dy/dt to the
in-place system contract used by the steppers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .stepper_base import System

# Returning vector field f(t, y) -> dy/dt
VectorField = Callable[[float, np.ndarray], np.ndarray]


def from_vector_field(f: VectorField) -> System:
    """Wrap f(t, y) -> dy/dt as system(x, dxdt, t) writing into dxdt.

    The state is passed to f as a float numpy array; f must not modify it.
    """

    def system(x: Any, dxdt: Any, t: float) -> None:
        d = np.asarray(f(t, np.asarray(x, dtype=float)), dtype=float)
        if d.shape != (len(dxdt),):
            raise ValueError(f"Vector field returned shape {d.shape}, expected ({len(dxdt)},)")
        for i in range(len(dxdt)):
            dxdt[i] = d[i]

    return system


@dataclass(frozen=True)
class ReferenceProblem:
    """An IVP together with its exact solution."""

    name: str
    system: System
    y0: np.ndarray
    t_span: Tuple[float, float]
    exact: Callable[[float], np.ndarray]
    energy: Optional[Callable[[np.ndarray], float]] = None
    description: str | None = None
    params: Dict[str, float] = field(default_factory=dict)

    @property
    def dim(self) -> int:
        return int(self.y0.shape[0])


def exponential_decay(rate: float = 1.0, x0: float = 1.0, t_end: float = 1.0) -> ReferenceProblem:
    """x' = -rate * x, x(0) = x0."""
    rate = float(rate)
    x0 = float(x0)

    def system(x, dxdt, t):
        dxdt[0] = -rate * x[0]

    def exact(t: float) -> np.ndarray:
        return np.array([x0 * np.exp(-rate * t)], dtype=float)

    return ReferenceProblem(
        name="exponential_decay",
        system=system,
        y0=np.array([x0], dtype=float),
        t_span=(0.0, float(t_end)),
        exact=exact,
        description="Linear decay x' = -k x",
        params={"rate": rate, "x0": x0},
    )


def harmonic_oscillator(
    omega: float = 1.0, q0: float = 1.0, p0: float = 0.0, t_end: float = 2.0 * np.pi
) -> ReferenceProblem:
    """Undamped oscillator with state [q, p] and energy (p^2 + w^2 q^2) / 2."""
    omega = float(omega)
    if omega <= 0.0:
        raise ValueError("omega must be positive")
    q0 = float(q0)
    p0 = float(p0)
    w2 = omega * omega

    def system(x, dxdt, t):
        dxdt[0] = x[1]
        dxdt[1] = -w2 * x[0]

    def exact(t: float) -> np.ndarray:
        c = np.cos(omega * t)
        s = np.sin(omega * t)
        return np.array([q0 * c + p0 / omega * s, -q0 * omega * s + p0 * c], dtype=float)

    def energy(y: np.ndarray) -> float:
        y = np.asarray(y, dtype=float)
        return float(0.5 * (y[1] * y[1] + w2 * y[0] * y[0]))

    return ReferenceProblem(
        name="harmonic_oscillator",
        system=system,
        y0=np.array([q0, p0], dtype=float),
        t_span=(0.0, float(t_end)),
        exact=exact,
        energy=energy,
        description="Harmonic oscillator q' = p, p' = -w^2 q",
        params={"omega": omega, "q0": q0, "p0": p0},
    )


def logistic(rate: float = 1.0, capacity: float = 1.0, x0: float = 0.1, t_end: float = 5.0) -> ReferenceProblem:
    """x' = rate * x * (1 - x / capacity)."""
    rate = float(rate)
    capacity = float(capacity)
    x0 = float(x0)
    if x0 <= 0.0 or capacity <= 0.0:
        raise ValueError("x0 and capacity must be positive")

    def system(x, dxdt, t):
        dxdt[0] = rate * x[0] * (1.0 - x[0] / capacity)

    def exact(t: float) -> np.ndarray:
        return np.array([capacity / (1.0 + (capacity / x0 - 1.0) * np.exp(-rate * t))], dtype=float)

    return ReferenceProblem(
        name="logistic",
        system=system,
        y0=np.array([x0], dtype=float),
        t_span=(0.0, float(t_end)),
        exact=exact,
        description="Logistic growth x' = r x (1 - x/K)",
        params={"rate": rate, "capacity": capacity, "x0": x0},
    )


_PROBLEMS: Dict[str, Callable[..., ReferenceProblem]] = {
    "exponential_decay": exponential_decay,
    "harmonic_oscillator": harmonic_oscillator,
    "logistic": logistic,
}


def list_problems() -> List[str]:
    """List available reference problem names."""
    return sorted(_PROBLEMS)


def load_problem(name: str, **params: float) -> ReferenceProblem:
    """Build a reference problem by name, forwarding keyword parameters."""
    if not isinstance(name, str) or not name:
        raise ValueError("name must be a non-empty string")
    if name not in _PROBLEMS:
        available = ", ".join(list_problems())
        raise ValueError(f"Problem '{name}' not found. Available: {available}")
    return _PROBLEMS[name](**params)
