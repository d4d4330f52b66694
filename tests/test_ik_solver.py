"""
求解调度与求解参数测试
"""
import math
import unittest

import numpy as np

from ccd_ik.model import Chain
from ccd_ik.solver import IKConfig, IKSolver

from .fixtures import make_arm


class TestIKConfig(unittest.TestCase):

    def test_defaults(self):
        config = IKConfig()
        self.assertEqual(config.tolerance, 0.01)
        self.assertEqual(config.max_iterations, 10)
        self.assertFalse(config.update_source)

    def test_invalid_values(self):
        for kwargs in ({'tolerance': 0.0}, {'tolerance': -1.0}, {'max_iterations': 0},
                       {'max_iterations': 2.5}, {'max_iterations': True},
                       {'tolerance': '0.1'}, {'tolerance': None}, {'max_iterations': '10'},
                       {'max_iterations': float('inf')}):
            with self.assertRaises(ValueError):
                IKConfig(**kwargs)

    def test_from_dict(self):
        config = IKConfig.from_dict({'tolerance': 1e-4, 'update_source': True, 'unrelated': 1})
        self.assertEqual(config.tolerance, 1e-4)
        self.assertEqual(config.max_iterations, 10)
        self.assertTrue(config.update_source)


class TestIKSolver(unittest.TestCase):

    def setUp(self):
        self.description = make_arm([1.0, 1.0], limits=[(-math.pi, math.pi), (-math.pi, math.pi)])
        self.chain = Chain.build(self.description)
        self.target = np.array([1.0, 0.0, 1.0])

    def test_missing_chain_is_noop(self):
        solver = IKSolver()
        solver.target = self.target
        solver.update()
        self.assertIsNone(solver.last_distance)
        self.assertEqual(solver.last_iterations, 0)

    def test_missing_target_is_noop(self):
        solver = IKSolver()
        solver.chain = self.chain
        before = [joint.quaternion.copy() for joint in self.chain.joints]
        solver.update()
        for q, joint in zip(before, self.chain.joints):
            self.assertTrue(np.array_equal(q, joint.quaternion))

    def test_overrides(self):
        solver = IKSolver(IKConfig(tolerance=0.5), max_iterations=3)
        self.assertEqual(solver.config.tolerance, 0.5)
        self.assertEqual(solver.config.max_iterations, 3)
        self.assertEqual(IKSolver(tolerance=1e-3).config.tolerance, 1e-3)

    def test_update_solves_and_records_diagnostics(self):
        solver = IKSolver(tolerance=1e-3, max_iterations=100)
        solver.chain = self.chain
        solver.target = self.target
        solver.update()
        self.assertLessEqual(solver.last_distance, 1e-3)
        self.assertGreaterEqual(solver.last_iterations, 1)
        self.assertLessEqual(solver.last_iterations, 100)

    def test_diagnostics_when_already_at_target(self):
        solver = IKSolver()
        solver.chain = self.chain
        solver.target = self.chain.world_position(self.chain.end_effector)
        solver.update()
        self.assertEqual(solver.last_iterations, 0)
        self.assertEqual(solver.last_distance, 0.0)

    def test_follows_target_moved_in_place(self):
        solver = IKSolver(tolerance=1e-3, max_iterations=100)
        solver.chain = self.chain
        solver.target = self.target
        solver.update()
        self.target[:] = [0.0, 0.0, -1.5]
        solver.update()
        np.testing.assert_allclose(self.chain.world_position(self.chain.end_effector), self.target, atol=1e-3)

    def test_no_write_back_by_default(self):
        solver = IKSolver()
        solver.chain = self.chain
        solver.target = self.target
        solver.update()
        for robot_joint in (self.description.joints[0], self.description.joints[0].child.joints[0]):
            np.testing.assert_array_equal(robot_joint.quaternion, [1.0, 0.0, 0.0, 0.0])

    def test_write_back_when_enabled(self):
        solver = IKSolver(update_source=True)
        solver.chain = self.chain
        solver.target = self.target
        solver.update()
        for joint in self.chain.joints[1:]:
            np.testing.assert_array_equal(joint.source.quaternion, joint.quaternion)
        self.assertFalse(np.array_equal(self.chain.joints[1].quaternion, [1.0, 0.0, 0.0, 0.0]))


if __name__ == '__main__':
    unittest.main()
