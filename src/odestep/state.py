"""State-vector containers and the capabilities the steppers rely on.

A state vector is anything with `len()` and indexed read/write access to
numeric elements (see `StateVector`). Steppers additionally need to create
their own scratch buffers of the same kind, so they are handed a zero-argument
factory ("state type", usually a class) and default-construct their buffers
from it.

Two numpy-backed containers are provided:
    DynamicState   growable vector with `resize(n)`, starts empty
    FixedState     fixed-length vector without `resize`, built with `fixed_state(n)`

Whether a state type can be resized is decided once per type by `has_resize`;
steppers bind the answer at construction so `adjust_size` never inspects the
state again. Plain Python lists work as state vectors too, but have no
`resize`, so scratch buffers must come pre-sized (e.g. `lambda: [0.0] * n`).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterable, Iterator, Protocol, TypeVar, runtime_checkable

import numpy as np

ValueT = TypeVar("ValueT")


class StateVector(Protocol[ValueT]):
    """Minimal interface a state container must expose."""

    def __len__(self) -> int:
        ...

    def __getitem__(self, i: int) -> ValueT:
        ...

    def __setitem__(self, i: int, value: ValueT) -> None:
        ...


@runtime_checkable
class ResizableState(Protocol):
    """State container that can change its length in place."""

    def resize(self, n: int) -> None:
        ...


@lru_cache(maxsize=None)
def has_resize(state_type: type) -> bool:
    """Return True if instances of `state_type` advertise a `resize(n)` method."""
    return callable(getattr(state_type, "resize", None))


class _ArrayState:
    """Shared element access for the numpy-backed containers."""

    dtype: Any = np.float64

    __slots__ = ("_data",)

    def __len__(self) -> int:
        return self._data.shape[0]

    def __getitem__(self, i):
        return self._data[i]

    def __setitem__(self, i, value) -> None:
        self._data[i] = value

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        if copy:
            return np.array(self._data, dtype=dtype)
        if copy is False and dtype is not None and np.dtype(dtype) != self._data.dtype:
            raise ValueError(f"Cannot view {self._data.dtype} data as {np.dtype(dtype)} without copying")
        return np.asarray(self._data, dtype=dtype)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data.tolist()!r})"

    def to_numpy(self) -> np.ndarray:
        """Return a copy of the elements as a 1D numpy array."""
        return self._data.copy()


def _as_1d(values: Iterable[Any], dtype: Any) -> np.ndarray:
    arr = np.array(values, dtype=dtype)
    if arr.ndim != 1:
        raise ValueError(f"state values must be 1D, got shape {arr.shape}")
    return arr


class DynamicState(_ArrayState):
    """Resizable state vector, the analogue of a growable array.

    Default construction gives an empty vector, so steppers using this type
    must be sized with `adjust_size` before the first step.
    """

    __slots__ = ()

    def __init__(self, values: Iterable[Any] = ()):
        self._data = _as_1d(values, self.dtype)

    def resize(self, n: int) -> None:
        """Change the length to n, keeping the leading elements and zero-filling the rest."""
        n = int(n)
        if n < 0:
            raise ValueError("n must be non-negative")
        if n == self._data.shape[0]:
            return
        data = np.zeros(n, dtype=self.dtype)
        m = min(n, self._data.shape[0])
        data[:m] = self._data[:m]
        self._data = data

    @classmethod
    def with_dtype(cls, dtype: Any) -> type[DynamicState]:
        """Return a DynamicState subclass storing elements as `dtype`."""
        return _dynamic_state_type(np.dtype(dtype).type)


@lru_cache(maxsize=None)
def _dynamic_state_type(scalar_type: type) -> type[DynamicState]:
    name = f"DynamicState_{np.dtype(scalar_type).name}"
    return type(name, (DynamicState,), {"__slots__": (), "dtype": scalar_type})


class FixedState(_ArrayState):
    """State vector whose length is a property of the type.

    Use `fixed_state(n)` to obtain a concrete subclass. Default construction
    yields n zeros, so stepper scratch buffers are sized correctly from the
    start and `adjust_size` has nothing to do.
    """

    size: int = 0

    __slots__ = ()

    def __init__(self, values: Iterable[Any] | None = None):
        if values is None:
            self._data = np.zeros(self.size, dtype=self.dtype)
            return
        data = _as_1d(values, self.dtype)
        if data.shape != (self.size,):
            raise ValueError(f"Expected {self.size} values, got {data.shape[0]}")
        self._data = data


@lru_cache(maxsize=None)
def _fixed_state_type(size: int, scalar_type: type) -> type[FixedState]:
    name = f"FixedState{size}_{np.dtype(scalar_type).name}"
    return type(name, (FixedState,), {"__slots__": (), "size": size, "dtype": scalar_type})


def fixed_state(size: int, dtype: Any = np.float64) -> type[FixedState]:
    """Return the FixedState subclass holding `size` elements of `dtype`.

    Repeated calls with the same arguments return the same class.
    """
    size = int(size)
    if size < 0:
        raise ValueError("size must be non-negative")
    return _fixed_state_type(size, np.dtype(dtype).type)
