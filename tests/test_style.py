import dataclasses
import unittest

from reportlab.lib import colors

from flatpdf.style import Style, to_rgb


class TestStyle(unittest.TestCase):
    def test_defaults_geometry(self):
        s = Style()
        self.assertEqual((s.page_width, s.page_height), (612, 792))
        self.assertEqual(s.content_width, 512)
        self.assertEqual(s.content_height, 672)
        self.assertEqual(s.top_y, 732)
        self.assertEqual(s.bottom_y, 60)

    def test_default_values(self):
        s = Style()
        self.assertEqual(s.font_family, "Helvetica")
        self.assertEqual(s.font_size, 9)
        self.assertEqual(s.line_height, 1.4)
        self.assertEqual(s.table_header_bg, (0.22, 0.40, 0.65))
        self.assertEqual(s.page_number_format, "Page {page} of {pages}")
        self.assertTrue(s.compress)
        self.assertTrue(s.table_striped)
        self.assertTrue(s.table_repeat_header)

    def test_compact(self):
        s = Style.compact()
        self.assertEqual(s.font_size, 8)
        self.assertEqual(s.line_height, 1.3)
        self.assertEqual((s.margin_top, s.margin_bottom, s.margin_left, s.margin_right), (45, 45, 36, 36))
        self.assertEqual(s.table_font_size, 7)
        self.assertEqual(s.table_cell_padding, 3)
        self.assertEqual((s.h1_size, s.h2_size, s.h3_size), (16, 12, 10))

    def test_a4(self):
        s = Style.a4()
        self.assertAlmostEqual(s.page_width, 595.28, places=1)
        self.assertAlmostEqual(s.page_height, 841.89, places=1)

    def test_landscape(self):
        s = Style.landscape()
        self.assertEqual((s.page_width, s.page_height), (792, 612))
        self.assertEqual(s.content_width, 692)

    def test_landscape_compact(self):
        s = Style.landscape_compact()
        self.assertEqual((s.page_width, s.page_height), (792, 612))
        self.assertEqual(s.margin_top, 40)
        self.assertEqual(s.content_width, 720)

    def test_preset_overrides(self):
        s = Style.compact(font_size=10, header_text="Report")
        self.assertEqual(s.font_size, 10)
        self.assertEqual(s.header_text, "Report")
        self.assertEqual(s.table_font_size, 7)
        self.assertEqual(Style.make(margin_left=20).content_width, 542)

    def test_unknown_option_rejected(self):
        with self.assertRaises(TypeError):
            Style(font_sise=9)
        with self.assertRaises(TypeError):
            Style.compact(colour=(0, 0, 0))

    def test_frozen(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            Style().font_size = 12

    def test_colors_are_normalized(self):
        s = Style(text_color="#ff0000", heading_color=colors.blue, table_row_bg=[1, 1, 1])
        self.assertEqual(s.text_color, (1.0, 0.0, 0.0))
        self.assertEqual(s.heading_color, (0.0, 0.0, 1.0))
        self.assertEqual(s.table_row_bg, (1.0, 1.0, 1.0))

    def test_to_rgb_rejects_wrong_length(self):
        with self.assertRaises(ValueError):
            to_rgb((1, 0))


if __name__ == "__main__":
    unittest.main()
