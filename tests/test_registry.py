from __future__ import annotations

import unittest

import noise_lang
from noise_lang import ModuleKind, ModuleNode, ModuleRegistry
from noise_lang.modules import Add, Perlin


def _declare(graph, identifier, kind, instance):
    node = ModuleNode(identifier, kind, instance)
    graph.add(node)
    return node


class ModuleRegistryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = ModuleRegistry()
        with self.registry.transaction() as graph:
            a = _declare(graph, "a", ModuleKind.PERLIN, Perlin())
            b = _declare(graph, "b", ModuleKind.PERLIN, Perlin())
            add = Add()
            add.set_source_module(0, a.instance)
            add.set_source_module(1, b.instance)
            _declare(graph, "c", ModuleKind.ADD, add)

    def test_transaction_publishes_a_new_revision(self) -> None:
        rev = self.registry.revision
        self.assertEqual(rev.identifiers(), ("a", "b", "c"))
        self.assertEqual(rev.generation, 1)
        self.assertEqual(rev.wiring("c"), ("a", "b"))

    def test_failed_transaction_is_dropped(self) -> None:
        before = self.registry.revision
        with self.assertRaises(noise_lang.DuplicateIdentifier):
            with self.registry.transaction() as graph:
                _declare(graph, "d", ModuleKind.PERLIN, Perlin())
                _declare(graph, "a", ModuleKind.PERLIN, Perlin())
        self.assertIs(self.registry.revision, before)
        self.assertNotIn("d", self.registry.revision)

    def test_deep_stage_leaves_published_instances_alone(self) -> None:
        before = self.registry.revision
        with self.registry.transaction(deep=True) as graph:
            graph.require("a").instance.set_seed(42)
            graph.require("c").instance.set_source_module(0, graph.require("b").instance)
        after = self.registry.revision
        self.assertEqual(before.require("a").instance.seed, 0)
        self.assertEqual(after.require("a").instance.seed, 42)
        self.assertEqual(before.wiring("c"), ("a", "b"))
        self.assertEqual(after.wiring("c"), ("b", "b"))

    def test_deep_stage_keeps_shared_instances_shared(self) -> None:
        with self.registry.transaction(deep=True) as graph:
            a = graph.require("a").instance
            self.assertIs(graph.require("c").instance.sources[0], a)

    def test_require_unknown(self) -> None:
        with self.assertRaises(noise_lang.UnknownIdentifierReference):
            self.registry.revision.require("zz")

    def test_reaches(self) -> None:
        rev = self.registry.revision
        self.assertTrue(rev.reaches("c", "a"))
        self.assertTrue(rev.reaches("a", "a"))
        self.assertFalse(rev.reaches("a", "c"))

    def test_output_binding_travels_with_the_revision(self) -> None:
        with self.registry.transaction() as graph:
            graph.output = "c"
        self.assertEqual(self.registry.revision.output, "c")

    def test_reset(self) -> None:
        generation = self.registry.revision.generation
        self.registry.reset()
        rev = self.registry.snapshot()
        self.assertEqual(len(rev), 0)
        self.assertIsNone(rev.output)
        self.assertGreater(rev.generation, generation)


if __name__ == "__main__":
    unittest.main(verbosity=2)
