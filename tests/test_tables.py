import datetime
import enum
import unittest
from decimal import Decimal

from flatpdf import FlatPdf, Style, TableOptions
from flatpdf.document import format_number
from flatpdf.metrics import string_width
from flatpdf.models import cell_to_text
from flatpdf.tables import aligned_x, auto_column_widths, calc_row_height, headers_from_columns

from helpers import all_content


class TestAutoColumnWidths(unittest.TestCase):
    def widths(self, headers, rows, available=512.0, **kwargs):
        return auto_column_widths(headers, rows, available, 8, "Helvetica-Bold", "Helvetica", 5, **kwargs)

    def test_fitting_columns_fill_available_width(self):
        widths = self.widths(["Name", "Qty"], [["Widget", "1"], ["Gadget", "20"]])
        self.assertAlmostEqual(sum(widths), 512.0)
        self.assertGreater(widths[0], widths[1])

    def test_overflowing_columns_are_scaled(self):
        headers = [f"Column number {i}" for i in range(12)]
        rows = [["some fairly long cell content here"] * 12]
        widths = self.widths(headers, rows)
        self.assertEqual(len(widths), 12)
        self.assertAlmostEqual(sum(widths), 512.0)

    def test_minimum_widths_applied_before_rescale(self):
        headers = ["A", "B", "C"]
        rows = [["x" * 200, "y" * 200, "z"]]
        widths = self.widths(headers, rows, available=60.0, min_widths=[10, 10, 40])
        self.assertAlmostEqual(sum(widths), 60.0)
        self.assertGreater(widths[2], widths[0])

    def test_max_column_width_caps_natural_width(self):
        widths = self.widths(["A", "B", "C"], [["word " * 200, "b", "c"]], max_column_width=100)
        self.assertAlmostEqual(sum(widths), 512.0)
        natural_b = string_width("B", "Helvetica-Bold", 8) + 10
        natural_c = string_width("C", "Helvetica-Bold", 8) + 10
        total = 100 + natural_b + natural_c
        self.assertAlmostEqual(widths[0], 100 + 100 / total * (512 - total))

    def test_short_rows_count_as_empty(self):
        widths = self.widths(["A", "B"], [["only one"]])
        self.assertAlmostEqual(sum(widths), 512.0)

    def test_no_columns(self):
        self.assertEqual(self.widths([], []), [])


class TestRowHelpers(unittest.TestCase):
    def test_single_line_row_height(self):
        self.assertAlmostEqual(calc_row_height(["a", "b"], [100, 100], "Helvetica", 8, 5, 11.2), 21.2)

    def test_wrapped_row_height(self):
        cells = ["one two three four five six seven eight nine ten", "b"]
        height = calc_row_height(cells, [50, 100], "Helvetica", 8, 5, 11.2)
        self.assertGreater(height, 2 * 11.2 + 10)

    def test_aligned_x(self):
        tw = string_width("abc", "Helvetica", 8)
        self.assertEqual(aligned_x(10, 100, 5, "abc", "Helvetica", 8, "left"), 15)
        self.assertAlmostEqual(aligned_x(10, 100, 5, "abc", "Helvetica", 8, "right"), 10 + 100 - 5 - tw)
        self.assertAlmostEqual(aligned_x(10, 100, 5, "abc", "Helvetica", 8, "center"), 10 + (100 - tw) / 2)

    def test_headers_from_columns(self):
        self.assertEqual(headers_from_columns(["first_name", "id"]), ["First name", "Id"])
        self.assertEqual(headers_from_columns(["first_name"], {"first_name": "Given"}), ["Given"])


class Color(enum.Enum):
    RED = "red"


class TestCellToText(unittest.TestCase):
    def test_supported_types(self):
        self.assertEqual(cell_to_text(None), "")
        self.assertEqual(cell_to_text("x"), "x")
        self.assertEqual(cell_to_text(True), "true")
        self.assertEqual(cell_to_text(42), "42")
        self.assertEqual(cell_to_text(1.5), "1.5")
        self.assertEqual(cell_to_text(Decimal("9.90")), "9.90")
        self.assertEqual(cell_to_text(datetime.date(2025, 1, 31)), "2025-01-31")
        self.assertEqual(cell_to_text(Color.RED), "red")
        self.assertEqual(cell_to_text("é".encode("utf-8")), "é")

    def test_unsupported_type(self):
        with self.assertRaises(TypeError):
            cell_to_text(object())
        with self.assertRaises(TypeError):
            cell_to_text([1, 2])


class TestTableRendering(unittest.TestCase):
    def make_pdf(self, **style):
        return FlatPdf(Style(compress=False, **style))

    def test_empty_table_has_header_only(self):
        pdf = self.make_pdf()
        widths = pdf.table(["Col"], [])
        blob = pdf.output()
        self.assertTrue(blob.startswith(b"%PDF-1.4"))
        self.assertIn(b"(Col) Tj", blob)
        self.assertEqual(len(widths), 1)
        self.assertAlmostEqual(widths[0], 512.0)

    def test_widths_returned_sum_to_content_width(self):
        pdf = self.make_pdf()
        widths = pdf.table(["A", "B", "C"], [["1", "2", "3"]])
        self.assertAlmostEqual(sum(widths), pdf.style.content_width)

    def test_header_repeats_across_pages(self):
        pdf = self.make_pdf()
        pdf.table(["Name", "Value"], [["Item", "10"]] * 200)
        self.assertGreater(pdf.current_page(), 1)
        content = all_content(pdf.output())
        self.assertGreater(content.count(b"(Name) Tj"), 1)
        self.assertEqual(content.count(b"(Name) Tj"), pdf.current_page())

    def test_header_not_repeated_when_disabled(self):
        pdf = self.make_pdf()
        pdf.table(["Name", "Value"], [["Item", "10"]] * 200, repeat_header=False)
        self.assertGreater(pdf.current_page(), 1)
        self.assertEqual(all_content(pdf.output()).count(b"(Name) Tj"), 1)

    def test_style_can_disable_repeat(self):
        pdf = self.make_pdf(table_repeat_header=False)
        pdf.table(["Name"], [["x"]] * 200)
        self.assertEqual(all_content(pdf.output()).count(b"(Name) Tj"), 1)

    def test_rows_padded_and_truncated(self):
        pdf = self.make_pdf()
        pdf.table(["A", "B"], [["short"], ["1", "2", "extra"]])
        content = all_content(pdf.output())
        self.assertIn(b"(short) Tj", content)
        self.assertIn(b"(2) Tj", content)
        self.assertNotIn(b"(extra) Tj", content)

    def test_striping(self):
        pdf = self.make_pdf()
        pdf.table(["A"], [["1"], ["2"], ["3"]])
        self.assertIn(b"0.95 0.96 0.98 rg", all_content(pdf.output()))

        pdf = self.make_pdf()
        pdf.table(["A"], [["1"], ["2"], ["3"]], striped=False)
        self.assertNotIn(b"0.95 0.96 0.98 rg", all_content(pdf.output()))

    def test_text_color_reemitted_after_background(self):
        pdf = self.make_pdf()
        pdf.table(["A"], [["1"], ["2"], ["3"], ["4"]])
        content = all_content(pdf.output())
        self.assertEqual(content.count(b"0.2 0.2 0.2 rg\n"), 4)

    def test_borders(self):
        pdf = self.make_pdf()
        pdf.table(["A", "B"], [])
        content = all_content(pdf.output())
        self.assertIn(b"0.78 0.8 0.83 RG 0.5 w\n", content)
        # top, bottom and three vertical lines
        self.assertEqual(content.count(b" l S\n"), 5)

    def test_column_alignment(self):
        pdf = self.make_pdf()
        widths = pdf.table(["Amount"], [["12"]], column_aligns=["right"])
        tw = string_width("12", "Helvetica", 8)
        x = 50 + widths[0] - 5 - tw
        self.assertIn(b"BT " + format_number(x) + b" ", all_content(pdf.output()))

    def test_explicit_column_widths(self):
        pdf = self.make_pdf()
        widths = pdf.table(["A", "B"], [["1", "2"]], TableOptions(column_widths=[100, 50]))
        self.assertEqual(widths, [100.0, 50.0])
        with self.assertRaises(ValueError):
            pdf.table(["A", "B"], [["1", "2"]], column_widths=[100])

    def test_unknown_option(self):
        pdf = self.make_pdf()
        with self.assertRaises(TypeError):
            pdf.table(["A"], [], colour="red")

    def test_unknown_alignment_falls_back_to_left(self):
        pdf = self.make_pdf()
        with self.assertLogs("flatpdf.tables", level="WARNING"):
            pdf.table(["A"], [["1"]], column_aligns=["middle"])

    def test_cell_values_converted(self):
        pdf = self.make_pdf()
        pdf.table(["N", "Flag", "Missing"], [[3, False, None]])
        content = all_content(pdf.output())
        self.assertIn(b"(3) Tj", content)
        self.assertIn(b"(false) Tj", content)


class TestDataTable(unittest.TestCase):
    def test_empty_data_is_noop(self):
        pdf = FlatPdf(Style(compress=False))
        before = pdf.doc.object_count
        cursor = pdf.cursor_y
        self.assertEqual(pdf.data_table([]), [])
        self.assertEqual(pdf.doc.object_count, before)
        self.assertEqual(pdf.cursor_y, cursor)

    def test_headers_from_keys(self):
        pdf = FlatPdf(Style(compress=False))
        pdf.data_table([{"first_name": "Ann", "total_amount": 3}])
        content = all_content(pdf.output())
        self.assertIn(b"(First name) Tj", content)
        self.assertIn(b"(Total amount) Tj", content)
        self.assertIn(b"(Ann) Tj", content)

    def test_columns_labels_and_formatters(self):
        pdf = FlatPdf(Style(compress=False))
        pdf.data_table(
            [{"id": 1, "price": 9.5, "secret": "x"}, {"id": 2}],
            columns=["id", "price"],
            column_labels={"id": "#"},
            formatters={"price": lambda v: f"${v:.2f}" if v != "" else "n/a"},
        )
        content = all_content(pdf.output())
        self.assertIn(b"(#) Tj", content)
        self.assertIn(b"(Price) Tj", content)
        self.assertIn(b"($9.50) Tj", content)
        self.assertIn(b"(n/a) Tj", content)
        self.assertNotIn(b"(x) Tj", content)


class TestSummaryRow(unittest.TestCase):
    def test_summary_row_after_table(self):
        pdf = FlatPdf(Style(compress=False))
        widths = pdf.table(["Item", "Total"], [["a", "1"], ["b", "2"]])
        y = pdf.cursor_y
        pdf.summary_row(["Total", "", "ignored"], widths)
        self.assertAlmostEqual(pdf.cursor_y, y - (8 * 1.4 + 10))
        content = all_content(pdf.output())
        self.assertIn(b"0.9 0.92 0.95 rg", content)
        self.assertIn(b"(Total) Tj", content)
        self.assertNotIn(b"(ignored) Tj", content)
        # bold body face is /F2
        self.assertIn(b"BT /F2 8 Tf ET", content)

    def test_summary_row_custom_background(self):
        pdf = FlatPdf(Style(compress=False))
        pdf.summary_row(["x"], [512], background=(1, 0, 0))
        self.assertIn(b"1 0 0 rg", all_content(pdf.output()))


if __name__ == "__main__":
    unittest.main()
