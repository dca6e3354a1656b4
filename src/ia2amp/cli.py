"""Command-line interface for ia2amp."""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from ia2amp.exceptions import ConversionError
from ia2amp.transformers import AMPTransformer
from schemas.article import Article
from schemas.properties import ConversionProperties


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def load_properties(args: argparse.Namespace) -> ConversionProperties:
    """Build conversion properties from a properties file and CLI overrides.

    Args:
        args: Parsed command-line arguments

    Returns:
        Validated ConversionProperties
    """
    data = {}
    if args.properties is not None:
        data = json.loads(args.properties.read_text(encoding="utf-8"))
    # Field names from here on, so the file's dashed aliases cannot win
    data = ConversionProperties.model_validate(data).model_dump()

    overrides = {
        "lang": args.lang,
        "css_prefix": args.prefix,
        "media_cache_folder": args.media_cache,
        "google_maps_api_key": args.maps_api_key,
    }
    for name, value in overrides.items():
        if value is not None:
            data[name] = value
    if args.download_media_sizes:
        data["enable_download_for_media_sizing"] = True
    if args.style_file is not None:
        data["override_styles"] = json.loads(args.style_file.read_text(encoding="utf-8"))

    return ConversionProperties.model_validate(data)


def convert(args: argparse.Namespace) -> int:
    """Execute the convert command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    article_path = args.article.resolve()
    if not article_path.exists():
        logger.error(f"Article file not found: {article_path}")
        return 1

    try:
        properties = load_properties(args)
        article = Article.model_validate_json(article_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Failed to load conversion input: {e}")
        return 1

    try:
        result = AMPTransformer(properties).transform(article)
    except ConversionError as e:
        logger.error(f"Failed to convert article: {e.message}")
        return 1

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(result.html, encoding="utf-8")
        logger.info(f"Wrote AMP document: {args.output}")
    else:
        sys.stdout.write(result.html)
        sys.stdout.write("\n")

    if args.css_output is not None:
        args.css_output.parent.mkdir(parents=True, exist_ok=True)
        args.css_output.write_text(result.css, encoding="utf-8")
        logger.info(f"Wrote custom CSS: {args.css_output}")

    if result.warnings:
        logger.warning(f"Conversion finished with {len(result.warnings)} warning(s):")
        for warning in result.warnings:
            logger.warning(f"  - {warning}")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="ia2amp",
        description="Convert Instant Articles into AMP HTML documents",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert an article JSON file into an AMP document",
        description="Convert an Instant Article, given as JSON, into an AMP HTML document.",
    )
    convert_parser.add_argument(
        "--article",
        type=Path,
        required=True,
        help="Path to the article JSON file",
    )
    convert_parser.add_argument(
        "--properties",
        type=Path,
        default=None,
        help="Path to a JSON file with conversion properties",
    )
    convert_parser.add_argument(
        "--style-file",
        type=Path,
        default=None,
        help="Path to a style JSON file, used instead of the styles folder",
    )
    convert_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output file for the AMP document (default: stdout)",
    )
    convert_parser.add_argument(
        "--css-output",
        type=Path,
        default=None,
        help="Also write the custom CSS to this file",
    )
    convert_parser.add_argument(
        "--lang",
        type=str,
        default=None,
        help="Language of the document (lang attribute of <html>)",
    )
    convert_parser.add_argument(
        "--prefix",
        type=str,
        default=None,
        help="CSS class prefix (default: ia2amp-)",
    )
    convert_parser.add_argument(
        "--media-cache",
        type=Path,
        default=None,
        help="Folder with local copies of the article media, used for sizing",
    )
    convert_parser.add_argument(
        "--download-media-sizes",
        action="store_true",
        help="Download images to read their size when it is not known",
    )
    convert_parser.add_argument(
        "--maps-api-key",
        type=str,
        default=None,
        help="Google Maps API key for map embeds",
    )
    convert_parser.set_defaults(func=convert)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
