import numpy as np
import unittest

from discadj.model import NodeArray, SnapshotPair, IndexOutOfRange, ShapeMismatch


class NodeArrayTest(unittest.TestCase):
    def test_zero_initialized(self):
        array = NodeArray("sensitivity", 4, 3)
        self.assertEqual(array.shape, (4, 3))
        for node in range(4):
            np.testing.assert_array_equal(array.get_row(node), np.zeros(3))
        return

    def test_round_trip(self):
        array = NodeArray("cross_term", 3, 2)
        for node in range(3):
            for comp in range(2):
                value = 1.0 + 10.0 * node + comp
                array.set(node, comp, value)
                self.assertEqual(array.get(node, comp), value)
        return

    def test_contiguous_row_major(self):
        array = NodeArray("solution", 3, 4)
        array.set(2, 1, 5.0)
        self.assertTrue(array._buffer.flags.c_contiguous)
        self.assertEqual(array._buffer[2 * 4 + 1], 5.0)
        self.assertEqual(array.nbytes, 3 * 4 * 8)
        return

    def test_out_of_range(self):
        array = NodeArray("solution", 3, 2)
        array.set(1, 1, 2.5)
        for node, comp in [(3, 0), (-1, 0), (0, 2), (0, -1)]:
            with self.assertRaises(IndexOutOfRange):
                array.get(node, comp)
            with self.assertRaises(IndexOutOfRange):
                array.set(node, comp, 1.0)
        with self.assertRaises(IndexOutOfRange):
            array.get_row(3)
        with self.assertRaises(IndexOutOfRange):
            array.get(0.5, 0)

        # failed calls leave every value unmodified
        expected = np.zeros((3, 2))
        expected[1, 1] = 2.5
        np.testing.assert_array_equal(array.view(), expected)
        return

    def test_boolean_index(self):
        array = NodeArray("solution", 3, 2)
        with self.assertRaises(IndexOutOfRange):
            array.get(True, 0)
        with self.assertRaises(IndexOutOfRange):
            array.set(0, np.bool_(True), 1.0)
        with self.assertRaises(IndexOutOfRange):
            array.get_row(False)
        np.testing.assert_array_equal(array.view(), np.zeros((3, 2)))
        return

    def test_set_rejects_vector(self):
        array = NodeArray("solution", 3, 2)
        array.set(0, 0, 1.5)
        with self.assertRaises(ShapeMismatch):
            array.set(0, 0, [1.0, 2.0])
        with self.assertRaises(ShapeMismatch):
            array.set(1, 1, np.ones((1, 1)))

        expected = np.zeros((3, 2))
        expected[0, 0] = 1.5
        np.testing.assert_array_equal(array.view(), expected)
        return

    def test_index_error_subclass(self):
        array = NodeArray("solution", 1, 1)
        with self.assertRaises(IndexError):
            array.get(1, 0)
        return

    def test_shape_mismatch(self):
        array = NodeArray("geometry", 2, 3)
        with self.assertRaises(ShapeMismatch):
            array.set_row(0, [1.0, 2.0])
        with self.assertRaises(ShapeMismatch):
            array.assign(np.ones((3, 3)))
        with self.assertRaises(ShapeMismatch):
            array.copy_from(NodeArray("other", 2, 2))
        with self.assertRaises(ValueError):
            array.set_row(1, np.ones(4))
        np.testing.assert_array_equal(array.view(), np.zeros((2, 3)))
        return

    def test_row_copies(self):
        array = NodeArray("solution_direct", 2, 3)
        array.set_row(0, [1.0, 2.0, 3.0])
        row = array.get_row(0)
        row[0] = 99.0
        self.assertEqual(array.get(0, 0), 1.0)
        return

    def test_read_only_view(self):
        array = NodeArray("geometry_direct", 2, 2)
        view = array.view()
        with self.assertRaises(ValueError):
            view[0, 0] = 1.0
        array.set(0, 0, 4.0)
        self.assertEqual(view[0, 0], 4.0)
        return

    def test_complex_dtype(self):
        array = NodeArray("solution", 2, 1, dtype=complex)
        array.set(1, 0, 1.0 + 1e-30j)
        self.assertEqual(array.get(1, 0).imag, 1e-30)
        return


class SnapshotPairTest(unittest.TestCase):
    def test_snapshot_isolation(self):
        pair = SnapshotPair("solution", 2, 3, snapshots=("old", "bgs_k"), fill=0.5)
        pair.snapshot("bgs_k", 0)
        pair.set(0, 0, 9.0)

        self.assertEqual(pair.get_snapshot("bgs_k", 0, 0), 0.5)
        self.assertEqual(pair.get(0, 0), 9.0)

        # only the requested snapshot and node are written
        self.assertEqual(pair.get_snapshot("old", 0, 0), 0.0)
        self.assertEqual(pair.get_snapshot("bgs_k", 1, 0), 0.0)
        return

    def test_snapshot_idempotent(self):
        pair = SnapshotPair("solution", 3, 2, snapshots=("bgs_k",), fill=1.5)
        pair.snapshot("bgs_k")
        first = np.array(pair.snapshots["bgs_k"].view())
        pair.snapshot("bgs_k")
        np.testing.assert_array_equal(pair.snapshots["bgs_k"].view(), first)
        return

    def test_vectorized_snapshot_matches_per_node(self):
        values = np.arange(12, dtype=float).reshape(4, 3)
        a = SnapshotPair("a", 4, 3, snapshots=("old",))
        b = SnapshotPair("b", 4, 3, snapshots=("old",))
        a.current.assign(values)
        b.current.assign(values)

        a.snapshot("old")
        for node in range(4):
            b.snapshot("old", node)
        np.testing.assert_array_equal(a.snapshots["old"].view(), b.snapshots["old"].view())
        return

    def test_duplicate_snapshot(self):
        pair = SnapshotPair("solution", 1, 1, snapshots=("old",))
        with self.assertRaises(ValueError):
            pair.add_snapshot("old")
        return

    def test_nbytes(self):
        pair = SnapshotPair("solution", 5, 2, snapshots=("old", "bgs_k"))
        self.assertEqual(pair.nbytes, 3 * 5 * 2 * 8)
        return


if __name__ == "__main__":
    unittest.main()
