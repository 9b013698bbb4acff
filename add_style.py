#!/usr/bin/env python3
"""
Add a new portrait style to the app.

Usage:
    python add_style.py <category> <style-name> <description>
    python add_style.py lifestyle "With Supercar" "Luxury portrait with Lamborghini"
"""
import sys
import logging
import argparse
from pathlib import Path

from style_adder import config
from style_adder.errors import StyleAdderError, TemplateNotFoundError, UsageError
from style_adder.preview_generator import BackendPreviewGenerator, ReplicatePreviewGenerator
from style_adder.source_patcher import PatchStatus
from style_adder.templates import KNOWN_CATEGORIES, build_template_table
from style_adder.workflow import ProjectLayout, add_style, auto_approve, console_confirm

logger = logging.getLogger('add_style')

EXAMPLE = 'Example: add-style lifestyle "With Supercar" "Luxury portrait with Lamborghini"'
GENERATORS = {
    'backend': BackendPreviewGenerator,
    'replicate': ReplicatePreviewGenerator,
}


def setup_logging(verbose: bool = False, log_file: Path = config.LOG_FILE_PATH):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file), # Log to file
            logging.StreamHandler() # Also log to console
        ]
    )


class StyleArgumentParser(argparse.ArgumentParser):
    """Reports malformed arguments as a UsageError (exit 1) instead of exiting 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = StyleArgumentParser(
        description="Generate a preview for a new portrait style and register it in the app sources.",
        epilog=EXAMPLE,
    )
    # Optional at the argparse level so missing inputs exit with code 1 and our usage text
    parser.add_argument("category", nargs='?', help="Category id the style belongs to (e.g. lifestyle).")
    parser.add_argument("style_name", nargs='?', help="Display name of the style (e.g. \"With Supercar\").")
    parser.add_argument("description", nargs='?', help="Short description shown on the style card.")
    parser.add_argument(
        "--project-root",
        type=Path,
        default=config.PROJECT_ROOT,
        help="Root of the app checkout containing mobile/ and backend/ (default: STYLE_PROJECT_ROOT or cwd)."
    )
    parser.add_argument(
        "--generator",
        choices=sorted(GENERATORS),
        default='backend',
        help="Service used to generate the preview image (default: backend)."
    )
    parser.add_argument(
        "--templates-file",
        type=Path,
        default=config.TEMPLATES_FILE,
        help="JSON file with extra style templates (default: STYLE_TEMPLATES_FILE)."
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Do not wait for approval after the preview is generated."
    )
    parser.add_argument(
        "--allow-duplicates",
        action="store_true",
        help="Insert the import, preset and prompt entries even if the style key is already present."
    )
    parser.add_argument(
        "--list-templates",
        action="store_true",
        help="List known categories and style templates, then exit."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging."
    )
    return parser


def list_templates(templates) -> None:
    print("Categories:")
    for category_id, name in KNOWN_CATEGORIES.items():
        print(f"  {category_id} - {name}")
    print("\nStyle templates:")
    for key in sorted(templates):
        print(f"  {key}")


def print_summary(result, layout: ProjectLayout) -> None:
    print("\nFiles:")
    for patch in result.patches:
        try:
            shown = patch.path.relative_to(layout.root)
        except ValueError:
            shown = patch.path
        if patch.status is PatchStatus.APPLIED:
            print(f"  Updated {shown}")
        else:
            print(f"  Skipped {shown} ({patch.status.value}): {patch.detail}")

    print("\nStyle added successfully!\n")
    print("Next steps:")
    print("  1. Review the changes in your code editor")
    print("  2. Rebuild the app: cd mobile && npx expo run:android")
    print("  3. Test the new style")
    print("  4. Deploy backend if needed\n")


def main(argv=None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        # logging is not configured yet
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        print(EXAMPLE, file=sys.stderr)
        return 1
    setup_logging(args.verbose)

    templates = build_template_table(args.templates_file)
    if args.list_templates:
        list_templates(templates)
        return 0

    if not (args.category and args.style_name and args.description):
        print(parser.format_usage().rstrip(), file=sys.stderr)
        print(EXAMPLE, file=sys.stderr)
        return 1

    layout = ProjectLayout.from_root(args.project_root)
    print("Adding new style...\n")
    try:
        result = add_style(
            args.category,
            args.style_name,
            args.description,
            layout=layout,
            templates=templates,
            generator=GENERATORS[args.generator](),
            confirm=auto_approve if args.yes else console_confirm,
            allow_duplicates=args.allow_duplicates,
        )
    except TemplateNotFoundError as e:
        logger.error(f"No prompt template found for style key '{e.key}' ({args.style_name}).")
        logger.error("Please add a prompt template to STYLE_TEMPLATES or to a templates file (--templates-file).")
        return 1
    except UsageError as e:
        logger.error(str(e))
        print(parser.format_usage().rstrip(), file=sys.stderr)
        return 1
    except StyleAdderError as e:
        logger.error(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nCancelled.")
        return 130

    if not result.approved:
        print("Cancelled. No files were changed.")
        return 0

    print_summary(result, layout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
