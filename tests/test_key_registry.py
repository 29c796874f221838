from __future__ import annotations

import unittest

from csvcols.key_registry import KeyComboBinding, KeyComboRegistry


class KeyComboRegistryTests(unittest.TestCase):
    def test_dispatch_and_later_bindings_win(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("a", "b"), lambda: calls.append("first")),
            KeyComboBinding(("b",), lambda: True),
        )

        self.assertIsNone(registry.dispatch("a"))
        self.assertTrue(registry.dispatch("b"))
        self.assertIsNone(registry.dispatch("z"))
        self.assertEqual(calls, ["first"])
        self.assertIn("a", registry)
        self.assertNotIn("z", registry)


if __name__ == "__main__":
    unittest.main()
