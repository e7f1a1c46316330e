import dataclasses
import json
import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gridmaze.core.trace import Trace
from gridmaze.algo.generate import generate
from gridmaze.algo.solvers import solve

class TestTrace(unittest.TestCase):
    def test_properties(self):
        trace = Trace("BFS", (0, 0), (0, 2), visited=((0, 0), (0, 1), (0, 2)), path=((0, 0), (0, 1), (0, 2)))
        self.assertTrue(trace.found)
        self.assertEqual(trace.steps, 2)
        self.assertEqual(trace.explored, 3)

        empty = Trace("DFS", (0, 0), (1, 1), visited=((0, 0),))
        self.assertFalse(empty.found)
        self.assertEqual(empty.steps, 0)

    def test_immutable(self):
        trace = Trace("BFS", (0, 0), (0, 0))
        with self.assertRaises(dataclasses.FrozenInstanceError):
            trace.path = ((0, 0),)

    def test_dict_round_trip(self):
        grid = generate("DFS", 7, 7, seed=12)
        trace = solve("Dijkstra", grid, (3, 3), (6, 0))
        data = json.loads(json.dumps(trace.to_dict()))
        self.assertEqual(Trace.from_dict(data), trace)

if __name__ == '__main__':
    unittest.main()
