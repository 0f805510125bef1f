"""
Entry point for the UK salary calculator.

Usage:
    python main.py                  # launches the web app at localhost:5000
    python main.py --cli            # runs the terminal interface
    python main.py --cli --pdf r.pdf
"""

import argparse


def main() -> None:
    parser = argparse.ArgumentParser(
        description="UK Salary Calculator: salary <-> hourly with income tax",
    )
    parser.add_argument(
        "--cli",
        action="store_true",
        help="Run in terminal mode instead of launching the web app",
    )
    parser.add_argument(
        "--pdf",
        metavar="PATH",
        help="(terminal mode) save a PDF report to PATH",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Web app host")
    parser.add_argument("--port", type=int, default=5000, help="Web app port")
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Do not open a browser window when the web app starts",
    )
    args = parser.parse_args()

    if args.cli:
        from cli import run_cli
        run_cli(pdf_path=args.pdf)
    else:
        from app import run_web
        run_web(host=args.host, port=args.port, open_browser=not args.no_browser)


if __name__ == "__main__":
    main()
