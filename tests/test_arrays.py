import math
import unittest

import numpy as np

from fixedrational import (
    AbortOnZero,
    DivisionByZero,
    Rational,
    as_rational_array,
    to_float_array,
    zeros,
    zeros_like,
)

R16 = Rational[np.int16]


class NumpyInteropTests(unittest.TestCase):
    def test_numpy_integer_operands(self):
        self.assertEqual(Rational(1, 2) + np.int16(1), Rational(3, 2))
        self.assertEqual(Rational(1, 2) * np.uint8(4), Rational(2))
        self.assertTrue(Rational(1, 2) < np.int32(1))

    def test_array_operations_with_scalar(self):
        vector = np.array([1, 2, 3])
        result = Rational(1, 4) + vector
        self.assertEqual(result.dtype, object)
        self.assertTrue(all(isinstance(item, Rational) for item in result))
        self.assertEqual(list(result), [Rational(5, 4), Rational(9, 4), Rational(13, 4)])

    def test_numpy_array_operations_with_object_array(self):
        vector = np.array([Rational(1, 2), Rational(1, 3)], dtype=object)
        result = vector + Rational(1, 6)
        self.assertEqual(list(result), [Rational(2, 3), Rational(1, 2)])

        result = np.array([1, 2]) / Rational(2, 3)
        self.assertEqual(list(result), [Rational(3, 2), Rational(3)])

    def test_numpy_ufunc_support(self):
        vector = np.array([Rational(1, 2), Rational(3, 4)], dtype=object)
        result = np.add(vector, Rational(1, 4))
        np.testing.assert_allclose([float(item) for item in result], [0.75, 1.0])
        self.assertEqual(np.negative(Rational(1, 2)), Rational(-1, 2))

    def test_numpy_comparisons(self):
        vector = np.array([Rational(1, 2), Rational(3, 4)], dtype=object)
        self.assertEqual(list(vector < Rational(2, 3)), [True, False])
        self.assertEqual(list(vector == Rational(3, 4)), [False, True])

    def test_numpy_comparison_with_out_of_range_integer(self):
        self.assertFalse(np.equal(R16(7), 70000))
        self.assertTrue(np.not_equal(R16(7), 70000))
        vector = np.array([R16(7), R16(1, 2)], dtype=object)
        self.assertEqual(list(np.equal(vector, 70000)), [False, False])
        self.assertEqual(list(np.equal(vector, np.int64(7))), [True, False])

    def test_ufunc_out_is_rejected(self):
        vector = as_rational_array([1, 2])
        with self.assertRaises(NotImplementedError):
            np.add(vector, Rational(1), out=vector)

    def test_policy_applies_elementwise(self):
        Strict = Rational[np.int32, AbortOnZero]
        with self.assertRaises(DivisionByZero):
            Strict(1) / np.array([1, 0])


class RationalArrayHelperTests(unittest.TestCase):
    def test_as_rational_array(self):
        arr = as_rational_array([Rational(1, 2), 3, np.int64(-4)])
        self.assertEqual(arr.shape, (3,))
        self.assertTrue(all(type(item) is Rational for item in arr))
        self.assertEqual(list(arr), [Rational(1, 2), Rational(3), Rational(-4)])

    def test_as_rational_array_specialised(self):
        arr = as_rational_array(np.arange(6).reshape(2, 3), R16)
        self.assertEqual(arr.shape, (2, 3))
        self.assertTrue(all(type(item) is R16 for item in arr.flat))
        with self.assertRaises(TypeError):
            as_rational_array([Rational(1, 2)], R16)
        with self.assertRaises(TypeError):
            as_rational_array([0.5])

    def test_as_rational_array_copy(self):
        original = as_rational_array([Rational(1, 2)])
        self.assertIs(as_rational_array(original, copy=False), original)
        copied = as_rational_array(original)
        self.assertIsNot(copied[0], original[0])
        copied[0] += 1
        self.assertEqual(original[0], Rational(1, 2))

    def test_zeros(self):
        arr = zeros(4)
        self.assertEqual(arr.shape, (4,))
        self.assertTrue(all(item == 0 for item in arr))
        arr[0] += 1
        self.assertEqual(arr[1], Rational(0))

        grid = zeros((2, 2), R16)
        self.assertTrue(all(type(item) is R16 for item in grid.flat))

    def test_zeros_like(self):
        base = as_rational_array([1, 2, 3], R16)
        arr = zeros_like(base)
        self.assertEqual(arr.shape, base.shape)
        self.assertTrue(all(type(item) is R16 for item in arr))
        self.assertTrue(all(float(item) == 0.0 for item in arr))
        self.assertTrue(all(type(item) is Rational for item in zeros_like([1, 2])))

    def test_to_float_array(self):
        values = as_rational_array([Rational(1, 2), Rational(-1, 4), Rational(1, 0)])
        result = to_float_array(values)
        self.assertEqual(result.dtype, np.float64)
        np.testing.assert_array_equal(result, [0.5, -0.25, math.inf])
        self.assertTrue(np.isnan(to_float_array([Rational(0, 0)], np.float32)[0]))


if __name__ == "__main__":  # pragma: no cover - direct execution helper
    unittest.main()
