import sys
from pathlib import Path
# Go up to the parent directory (..), then down into "src"
# This adds "../src" to the python search path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import copy
import pickle
import unittest
from fractions import Fraction

import numpy as np

from odestep.euler_stepper import EulerStepper
from odestep.state import DynamicState, fixed_state


def decay(x, dxdt, t):
    dxdt[0] = -x[0]


class TestEulerStepper(unittest.TestCase):

    def test_contract_constants(self):
        stepper = EulerStepper()
        self.assertEqual(stepper.order_step(), 1)
        self.assertFalse(stepper.is_adaptive_stepper)
        self.assertFalse(EulerStepper.is_adaptive_stepper)
        self.assertFalse(hasattr(stepper, "steps"))

    def test_single_step_decay(self):
        """x' = -x from x=1 with dt=0.1 gives 0.9 after one step."""
        x = DynamicState([1.0])
        stepper = EulerStepper()
        stepper.adjust_size(x)
        stepper.do_step(decay, x, 0.0, 0.1)
        self.assertAlmostEqual(x[0], 0.9, places=15)
        # Scratch buffer keeps the last evaluation.
        self.assertEqual(stepper.dxdt[0], -1.0)

    def test_precomputed_derivative_skips_system(self):
        def fail(x, dxdt, t):
            raise AssertionError("system must not be called")

        x = DynamicState([1.0, 2.0])
        stepper = EulerStepper()
        stepper.adjust_size(x)
        stepper.do_step(fail, x, DynamicState([-2.0, 1.0]), 0.0, 0.1)
        np.testing.assert_allclose(np.asarray(x), [0.8, 2.1])

    def test_bad_argument_count(self):
        stepper = EulerStepper()
        with self.assertRaises(TypeError):
            stepper.do_step(decay, DynamicState([1.0]), 0.1)

    def test_system_errors_propagate(self):
        def boom(x, dxdt, t):
            raise ZeroDivisionError("bad rhs")

        x = DynamicState([1.0])
        stepper = EulerStepper()
        stepper.adjust_size(x)
        with self.assertRaises(ZeroDivisionError):
            stepper.do_step(boom, x, 0.0, 0.1)

    def test_time_is_passed_to_system(self):
        seen = []

        def forcing(x, dxdt, t):
            seen.append(t)
            dxdt[0] = t

        x = DynamicState([0.0])
        stepper = EulerStepper()
        stepper.adjust_size(x)
        stepper.do_step(forcing, x, 2.0, 0.5)
        self.assertEqual(seen, [2.0])
        self.assertEqual(x[0], 1.0)

    def test_adjust_size_resizable(self):
        stepper = EulerStepper()
        self.assertEqual(len(stepper.dxdt), 0)
        stepper.adjust_size(DynamicState([1.0, 2.0, 3.0]))
        self.assertEqual(len(stepper.dxdt), 3)

    def test_adjust_size_fixed_is_noop(self):
        State2 = fixed_state(2)
        stepper = EulerStepper(State2)
        self.assertEqual(len(stepper.dxdt), 2)
        stepper.adjust_size(DynamicState([1.0, 2.0, 3.0, 4.0]))
        self.assertEqual(len(stepper.dxdt), 2)

    def test_plain_lists_with_presized_factory(self):
        x = [Fraction(1)]
        stepper = EulerStepper(lambda: [Fraction(0)])
        stepper.adjust_size(x)
        stepper.do_step(decay, x, Fraction(0), Fraction(1, 10))
        self.assertEqual(x, [Fraction(9, 10)])

    def test_scratch_buffer_is_reused(self):
        x = DynamicState([1.0])
        stepper = EulerStepper()
        stepper.adjust_size(x)
        buf = stepper.dxdt
        for k in range(5):
            stepper.do_step(decay, x, 0.1 * k, 0.1)
        self.assertIs(stepper.dxdt, buf)
        self.assertEqual(len(buf), 1)
        self.assertAlmostEqual(x[0], 0.9 ** 5, places=14)

    def test_copy_is_rejected(self):
        stepper = EulerStepper()
        with self.assertRaises(TypeError):
            copy.copy(stepper)
        with self.assertRaises(TypeError):
            copy.deepcopy(stepper)
        with self.assertRaises(TypeError):
            pickle.dumps(stepper)


if __name__ == '__main__':
    unittest.main()
