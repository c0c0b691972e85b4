#!/usr/bin/env python3
"""
Document Preview - Paginate documents and extract selected pages.

Main entry point for the page-selection tool.
Decodes PDF, DOCX, EPUB, image and text files, splits them into
selectable pages and writes the plain text of the chosen pages.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ingestion import handle_from_path
from ingestion.logging_config import setup_logging
from pagination import PaginationResult, PaginationService, PaginationServiceConfig, PreviewSession

logger = logging.getLogger("pagination.cli")

ROOT = Path(__file__).resolve().parent


def parse_page_list(value: str) -> list[int]:
    """
    Parse a page list like "1,3,5-7" into page numbers.

    Raises:
        argparse.ArgumentTypeError: For malformed entries or ranges.
    """
    pages: list[int] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                start, end = (int(x) for x in part.split("-", 1))
                if start > end:
                    raise ValueError(part)
                pages.extend(range(start, end + 1))
            else:
                pages.append(int(part))
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"Invalid page list entry: '{part}'") from exc
    return pages


def print_summary(session: PreviewSession, result: PaginationResult, term: Optional[str]) -> None:
    """Print a summary of the pagination and selection."""
    stats = result.stats
    selection_stats = session.stats(term)

    print("\n" + "=" * 60)
    print("PREVIEW SUMMARY")
    print("=" * 60)
    print(f"File: {result.source_file}")
    print(f"Format: {result.format.value}" + (" (plain-text fallback)" if result.fallback_used else ""))
    print(f"Pages: {stats.total_pages} (budget {result.char_budget} chars)")
    print(f"Characters: {stats.total_chars}")
    print(f"Tokens: {stats.total_tokens}")
    if stats.oversized_pages:
        print(f"Oversized pages: {stats.oversized_pages}")
    print(
        f"Selected: {selection_stats.selected} of {selection_stats.total} "
        f"({selection_stats.percentage}%)"
    )
    if term:
        print(
            f"Matching '{term}': {selection_stats.filtered_total} "
            f"({selection_stats.selected_in_filter} selected)"
        )

    pages = session.search(term) if term else session.pages
    print("\nPages:")
    for page in pages:
        marker = "x" if session.selection and session.selection.is_selected(page.index) else " "
        preview = page.text_content[:50].replace("\n", " ")
        if len(page.text_content) > 50:
            preview += "..."
        flags = " [oversized]" if page.oversized else ""
        print(f"  [{marker}] {page.index:>4}  {page.kind.value:<6} {preview}{flags}")

    for warning in result.warnings:
        print(f"\nWarning: {warning}")


async def run_preview(args: argparse.Namespace) -> int:
    service = PaginationService(PaginationServiceConfig.from_env())
    handle = handle_from_path(args.file, args.media_type)

    with service.new_session() as session:
        result = await session.load(handle)
        if result is None:
            logger.error("Preview was superseded before it finished")
            return 1

        if args.pages is not None:
            session.select_all(args.pages)
        if args.select_matches:
            session.select_matching(args.search or "")

        if args.save_pages:
            paths = service.storage.save(result)
            logger.info(f"Pages saved to {paths.page_file}")

        if not args.quiet:
            print_summary(session, result, args.search)

        if args.export_selection:
            target = service.storage.save_selection(session.export_selection(), str(args.export_selection))
            logger.info(f"Selection saved to {target}")

        outcome = session.confirm()
        if not outcome.ok:
            logger.error(outcome.error)
            return 1

        if args.output:
            args.output.write_text(outcome.output.selected_content, encoding="utf-8")
            logger.info(
                f"Wrote {len(outcome.output.selected_content)} characters "
                f"from {len(outcome.output.selected_page_numbers)} page(s) to {args.output}"
            )
        elif not args.quiet:
            print("\n" + "=" * 60)
            print(outcome.output.selected_content)

        if args.submit:
            response = service.submit(
                outcome.output,
                source_file=result.source_file,
                difficulty=args.difficulty,
            )
            print(f"\nQuiz generation: {response.get('status', 'submitted')} {response.get('jobId', '')}".rstrip())

    return 0


def main() -> int:
    """Main entry point."""
    load_dotenv(ROOT / ".env")

    parser = argparse.ArgumentParser(
        description="Paginate documents and extract the text of selected pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s preview skript.pdf
  %(prog)s preview buch.epub --pages 1,3,5-7 -o auswahl.txt
  %(prog)s preview notes.docx --search kapitel --select-matches
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed output"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress summary output"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    preview = subparsers.add_parser("preview", help="Paginate a document and extract selected pages")
    preview.add_argument(
        "file",
        type=Path,
        help="Path to the document"
    )
    preview.add_argument(
        "--media-type",
        default=None,
        help="Declared media type (default: guessed from the file name)"
    )
    preview.add_argument(
        "--pages",
        type=parse_page_list,
        default=None,
        help="Pages to select, e.g. 1,3,5-7 (default: all)"
    )
    preview.add_argument(
        "--search",
        default=None,
        help="Filter pages by number or text"
    )
    preview.add_argument(
        "--select-matches",
        action="store_true",
        help="Select exactly the pages matching --search"
    )
    preview.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the selected text to this file"
    )
    preview.add_argument(
        "--export-selection",
        type=Path,
        default=None,
        help="Write selection metadata as JSON"
    )
    preview.add_argument(
        "--save-pages",
        action="store_true",
        help="Save the pagination result under PAGINATION_DATA_DIR"
    )
    preview.add_argument(
        "--submit",
        action="store_true",
        help="Send the selected text to QUIZ_API_BASE_URL for quiz generation"
    )
    preview.add_argument(
        "--difficulty",
        choices=["EASY", "MEDIUM", "HARD"],
        default="MEDIUM",
        help="Quiz difficulty for --submit (default: MEDIUM)"
    )

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else (logging.WARNING if args.quiet else logging.INFO)
    setup_logging(level=log_level)

    if args.select_matches and not args.search:
        parser.error("--select-matches requires --search")

    try:
        return asyncio.run(run_preview(args))
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
