from __future__ import annotations

import unittest

from csvcols.errors import SurfaceError
from csvcols.surfaces import CLEAN_ZINDEX, HEADER_ZINDEX, Geometry, SurfaceHost


class SurfaceHostTests(unittest.TestCase):
    def setUp(self) -> None:
        self.host = SurfaceHost()
        self.host.attach_window(1, 20, 5)

    def test_open_requires_attached_window(self) -> None:
        with self.assertRaises(SurfaceError):
            self.host.open(2, "header", Geometry(0, 0, 5, 1, HEADER_ZINDEX))

    def test_geometry_must_fit_window(self) -> None:
        for geometry in (
            Geometry(0, 0, 21, 1, HEADER_ZINDEX),
            Geometry(0, 0, 5, 6, HEADER_ZINDEX),
            Geometry(0, 0, 0, 1, HEADER_ZINDEX),
            Geometry(-1, 0, 5, 1, HEADER_ZINDEX),
        ):
            with self.subTest(geometry=geometry), self.assertRaises(SurfaceError):
                self.host.open(1, "header", geometry)

    def test_surfaces_are_listed_back_to_front(self) -> None:
        header = self.host.open(1, "header", Geometry(0, 0, 20, 1, HEADER_ZINDEX))
        clean = self.host.open(1, "clean", Geometry(0, 0, 20, 5, CLEAN_ZINDEX))

        self.assertEqual(self.host.surfaces_for(1), [clean, header])

    def test_closed_surface_rejects_updates(self) -> None:
        surface = self.host.open(1, "clean", Geometry(0, 0, 20, 5, CLEAN_ZINDEX))
        self.host.close(surface)

        self.assertFalse(self.host.is_valid(surface))
        with self.assertRaises(SurfaceError):
            self.host.set_content(surface, ["x"], [])
        with self.assertRaises(SurfaceError):
            self.host.configure(surface, Geometry(0, 0, 20, 5, CLEAN_ZINDEX))

    def test_cursor_row_must_be_inside_content(self) -> None:
        surface = self.host.open(1, "clean", Geometry(0, 0, 20, 5, CLEAN_ZINDEX))
        self.host.set_content(surface, ["a", "b"], [])

        self.host.set_cursor(surface, 1, 3)
        self.assertEqual(surface.cursor, (1, 3))
        with self.assertRaises(SurfaceError):
            self.host.set_cursor(surface, 2, 0)

    def test_detach_closes_window_surfaces(self) -> None:
        surface = self.host.open(1, "clean", Geometry(0, 0, 20, 5, CLEAN_ZINDEX))
        self.host.detach_window(1)

        self.assertFalse(self.host.is_valid(surface))
        self.assertEqual(self.host.surfaces_for(1), [])


if __name__ == "__main__":
    unittest.main()
