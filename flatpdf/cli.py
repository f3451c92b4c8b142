import argparse
import csv
import json
import logging
import random
import sys
from pathlib import Path

from .errors import FlatPdfError
from .style import Style
from .version import __version__
from .writer import FlatPdf


log = logging.getLogger(__name__)

PRESETS = {
    "default": Style,
    "compact": Style.compact,
    "a4": Style.a4,
    "landscape": Style.landscape,
    "landscape-compact": Style.landscape_compact,
}


def _build_common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-o", "--output", required=True,
        help="Output PDF path (parent directories are created)",
    )
    common.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="default",
        help="Page/style preset (default: default)",
    )
    common.add_argument(
        "--no-compress", action="store_true",
        help="Write content streams uncompressed",
    )
    common.add_argument("--header", default="", metavar="TEXT", help="Running header text")
    common.add_argument("--footer", default="", metavar="TEXT", help="Running footer text")
    common.add_argument(
        "--no-page-numbers", action="store_true",
        help="Do not print 'Page N of M'",
    )
    common.add_argument(
        "--log-level",
        default="INFO",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging level (default: INFO)",
    )
    return common


def build_parser() -> tuple[argparse.ArgumentParser, dict[str, argparse.ArgumentParser]]:
    parser = argparse.ArgumentParser(
        prog="flatpdf",
        description="Render CSV, JSON, JPEG or plain text files to PDF without a layout engine",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog="""
Examples:
  flatpdf render sales.csv -o out/sales.pdf --preset landscape
  flatpdf render people.json -o people.pdf --header "Staff list"
  flatpdf render notes.md -o notes.pdf
  flatpdf demo -o demo.pdf --rows 300
        """,
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"flatpdf {__version__}"
    )

    common = _build_common_parser()
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    render_parser = subparsers.add_parser(
        "render",
        parents=[common],
        help="Render one input file (.csv, .json, .jpg or text)",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    render_parser.add_argument("input", help="Input file")

    demo_parser = subparsers.add_parser(
        "demo",
        parents=[common],
        help="Build a sample multi-section report",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    demo_parser.add_argument(
        "--rows", type=int, default=100, metavar="N",
        help="Rows in the long compensation table (default: 100)",
    )
    demo_parser.add_argument(
        "--seed", type=int, default=2025,
        help="Random seed for the sample figures (default: 2025)",
    )

    return parser, {"render": render_parser, "demo": demo_parser}


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stdout,
    )
    # Keep reportlab quiet unless explicitly debugging.
    logging.getLogger("reportlab").setLevel(logging.WARNING)


def _style_from_args(args: argparse.Namespace) -> Style:
    return PRESETS[args.preset](
        compress=not args.no_compress,
        header_text=args.header,
        footer_text=args.footer,
        show_page_numbers=not args.no_page_numbers,
    )


def _render_csv(pdf: FlatPdf, path: Path) -> None:
    with path.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    if not rows:
        log.warning("%s is empty", path)
        return
    pdf.h2(path.stem)
    pdf.table(rows[0], rows[1:])


def _render_json(pdf: FlatPdf, path: Path) -> None:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError(f"{path}: expected a JSON object or a list of objects")
    pdf.h2(path.stem)
    # Nested values are shown as compact JSON.
    formatters = {}
    for record in data:
        for key, value in record.items():
            if isinstance(value, (dict, list)):
                formatters[key] = _json_cell
    pdf.data_table(data, formatters=formatters)


def _json_cell(value) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return value


def _money(value) -> str:
    return f"${value:,}"


def _render_markup(pdf: FlatPdf, path: Path) -> None:
    """Very small markup: '#' headings, '---' rules, blank lines, paragraphs."""
    paragraph: list[str] = []

    def flush() -> None:
        if paragraph:
            pdf.text(" ".join(paragraph))
            paragraph.clear()

    for raw in path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw.rstrip()
        if line.startswith("### "):
            flush()
            pdf.h3(line[4:])
        elif line.startswith("## "):
            flush()
            pdf.h2(line[3:])
        elif line.startswith("# "):
            flush()
            pdf.h1(line[2:])
        elif line.strip() == "---":
            flush()
            pdf.hr()
        elif line.startswith("    "):
            flush()
            pdf.code(line[4:])
        elif not line.strip():
            flush()
            pdf.space(pdf.style.paragraph_spacing)
        else:
            paragraph.append(line.strip())
    flush()


def _run_render(args: argparse.Namespace) -> int:
    in_path = Path(args.input)
    if not in_path.is_file():
        log.error("Error: '%s' is not a file", args.input)
        return 1

    pdf = FlatPdf(_style_from_args(args))
    suffix = in_path.suffix.lower()
    try:
        if suffix == ".csv":
            _render_csv(pdf, in_path)
        elif suffix == ".json":
            _render_json(pdf, in_path)
        elif suffix in {".jpg", ".jpeg"}:
            pdf.h2(in_path.name)
            pdf.image(in_path, align="center")
        else:
            _render_markup(pdf, in_path)
        out_path = pdf.save(args.output)
    except (FlatPdfError, OSError, ValueError, csv.Error) as exc:
        log.error("Error: %s", exc)
        return 1

    log.info("PDF: %s (%d pages)", out_path.resolve(), pdf.current_page())
    return 0


def build_demo(pdf: FlatPdf, rows: int = 100, seed: int = 2025) -> None:
    """Fill ``pdf`` with a sample quarterly report."""
    rng = random.Random(seed)

    pdf.space(180)
    pdf.h1("Q4 2025 Financial Report")
    pdf.space(10)
    pdf.text("Prepared by the Finance Department – January 2026")
    pdf.text("Acme Corporation | Internal Use Only")
    pdf.space(40)
    pdf.text(
        "This report contains quarterly financial data including revenue breakdowns by region, "
        "department operating expenses, employee compensation and product-level profitability. "
        "All figures are in thousands of USD unless otherwise noted."
    )

    pdf.page_break()
    pdf.h1("1. Revenue by Region")
    pdf.text("Revenue by geographic region for each month of Q4.")
    pdf.space(8)
    regions = ["North America", "Europe (EMEA)", "Asia Pacific", "Latin America", "Middle East & Africa"]
    region_rows = []
    totals = [0, 0, 0, 0]
    for region in regions:
        months = [rng.randint(800, 5000), rng.randint(800, 5200), rng.randint(900, 5500)]
        q4 = sum(months)
        for i, value in enumerate(months + [q4]):
            totals[i] += value
        yoy = rng.randint(-5, 25)
        region_rows.append([region, *(f"${v:,}" for v in months), f"${q4:,}", f"{yoy:+d}%"])
    widths = pdf.table(
        ["Region", "October", "November", "December", "Q4 Total", "YoY Change"],
        region_rows,
        column_aligns=["left", "right", "right", "right", "right", "right"],
    )
    pdf.summary_row(
        ["Total", *(f"${v:,}" for v in totals), ""],
        widths,
        column_aligns=["left", "right", "right", "right", "right", "right"],
    )
    pdf.space(pdf.style.paragraph_spacing)

    pdf.h1("2. Employee Compensation")
    pdf.text(f"Compensation data for the top {rows} employees; the header repeats on every page.")
    pdf.space(8)
    first_names = ["James", "Mary", "Robert", "Patricia", "John", "Jennifer", "Michael", "Linda", "Zoë", "René"]
    last_names = ["Smith", "Johnson", "García", "Brown", "Müller", "Davis", "Nakamura", "Wilson", "Łukasz", "Taylor"]
    titles = ["Engineer", "Sr. Engineer", "Manager", "Director", "VP"]
    records = []
    for i in range(1, rows + 1):
        base = rng.randint(85, 250) * 1000
        bonus = int(base * rng.randint(10, 30) / 100)
        records.append({
            "id": i,
            "name": f"{rng.choice(first_names)} {rng.choice(last_names)}",
            "title": rng.choice(titles),
            "base_salary": base,
            "bonus": bonus,
            "total_comp": base + bonus,
        })
    pdf.data_table(
        records,
        column_labels={"id": "#"},
        formatters={"base_salary": _money, "bonus": _money, "total_comp": _money},
        column_aligns=["right", "left", "left", "right", "right", "right"],
        font_size=7,
    )

    pdf.h1("3. Notes")
    pdf.h2("Methodology")
    pdf.text(
        "Figures were generated at random for demonstration purposes.\n"
        "Non-Latin-1 characters such as “smart quotes”, → arrows and ≤ signs "
        "are converted to their closest WinAnsi equivalent."
    )
    pdf.hr()
    pdf.h3("Code sample")
    pdf.code("pdf = FlatPdf(Style.compact())\npdf.table(headers, rows)\npdf.save('report.pdf')")
    pdf.italic("End of report.")


def _run_demo(args: argparse.Namespace) -> int:
    pdf = FlatPdf(_style_from_args(args))
    try:
        build_demo(pdf, rows=args.rows, seed=args.seed)
        out_path = pdf.save(args.output)
    except (FlatPdfError, OSError) as exc:
        log.error("Error: %s", exc)
        return 1
    log.info("PDF: %s (%d pages)", out_path.resolve(), pdf.current_page())
    return 0


def main(argv: list[str] | None = None) -> int:
    parser, _commands = build_parser()
    raw_args = sys.argv[1:] if argv is None else argv
    if not raw_args:
        parser.print_help()
        return 2

    args = parser.parse_args(raw_args)
    _configure_logging(getattr(args, "log_level", "INFO"))

    if args.command == "render":
        return _run_render(args)
    if args.command == "demo":
        return _run_demo(args)
    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
