#!/usr/bin/env python3
"""
boxswap - Annotation Format Converter - Main Entry Point

Converts object-detection datasets between annotation formats, adding
the coordinate, class, and image transforms the two formats need.

Usage:
    python main.py --source-format yolo5obb --target-format cocojson \\
        --source labels/ --target annotations.json \\
        --image-directory images/ --class-mapping classes.yaml

    python main.py --config configs/convert.yaml [--verbose]

Features:
    - YOLOv5/v8 OBB, YOLO TXT, YOLO Darknet, COCO JSON and TF CSV
    - Automatic normalize/denormalize using image dimensions
    - Image lookup for formats that don't store image names
    - Class name <-> id mapping from a YAML, JSON or text table
"""

import sys
import argparse
from pathlib import Path
from typing import Optional

from boxswap import __version__
from boxswap.core import (
    BoxswapError,
    Config,
    ConfigurationError,
    UnknownFormatError,
    load_class_map,
    load_config,
    setup_logger,
)
from boxswap.pipeline import ConversionPipeline
from boxswap.registry import get_format, list_formats


class ConversionApp:
    """
    Command-line conversion orchestrator.

    Merges the YAML configuration with command-line overrides, builds the
    pipeline and maps its outcome to an exit code.
    """

    def __init__(self, args: argparse.Namespace):
        """
        Initialize the application.

        Args:
            args: Parsed command-line arguments
        """
        self.args = args
        level = "DEBUG" if args.verbose else "INFO"
        self.logger = setup_logger(level=level, log_file=args.log_file, console=True)

    def build_config(self) -> Config:
        """
        Load the config file when given and apply command-line overrides.

        Returns:
            Validated Config

        Raises:
            ConfigurationError: If the merged configuration is incomplete
        """
        config = load_config(str(self.args.config)) if self.args.config else Config()
        conversion = config.conversion

        overrides = {
            'source_format': self.args.source_format,
            'target_format': self.args.target_format,
            'source': self.args.source,
            'target': self.args.target,
            'image_directory': self.args.image_directory,
            'class_mapping': self.args.class_mapping,
        }
        for key, value in overrides.items():
            if value is not None:
                setattr(conversion, key, value)

        if self.args.verbose:
            config.logging.level = "DEBUG"
        if self.args.log_file is not None:
            config.logging.log_file = self.args.log_file
        if self.args.no_progress:
            config.show_progress = False

        config.validate()
        return config

    def build_pipeline(self, config: Config) -> ConversionPipeline:
        conversion = config.conversion
        class_map = None
        if conversion.class_mapping is not None:
            class_map = load_class_map(conversion.class_mapping)

        return ConversionPipeline(
            source_format=get_format(conversion.source_format),
            target_format=get_format(conversion.target_format),
            source=conversion.source,
            target=conversion.target,
            image_directory=conversion.image_directory,
            class_map=class_map,
            missing_class_placeholder=conversion.missing_class_placeholder,
            show_progress=config.show_progress,
        )

    def run(self) -> int:
        """
        Run the conversion.

        Returns:
            Exit code (0 success, 1 conversion failure, 2 bad configuration,
            130 interrupted)
        """
        try:
            config = self.build_config()
            # Reconfigure now that the config file may have set level or log file
            self.logger = setup_logger(
                level=config.logging.level,
                log_file=config.logging.log_file,
                console=True
            )

            pipeline = self.build_pipeline(config)
            pipeline.configure()

            self.logger.info("Starting conversion")
            self.logger.info("=" * 70)
            summary = pipeline.convert()

            self.logger.info("=" * 70)
            self.logger.info(f"[SUCCESS] {summary}")
            self.logger.info(f"Output: {Path(config.conversion.target).absolute()}")
            return 0

        except KeyboardInterrupt:
            self.logger.warning("Conversion interrupted by user (Ctrl+C)")
            self.logger.warning("The target may contain partially written output")
            return 130
        except (ConfigurationError, UnknownFormatError) as e:
            self.logger.error(f"Configuration error: {e}")
            return 2
        except BoxswapError as e:
            self.logger.error(f"Conversion failed: {e}")
            return 1
        except Exception as e:
            self.logger.error(f"Fatal error: {e}", exc_info=True)
            return 1


def print_formats() -> None:
    """Print the registered formats as a table."""
    print(f"{'ID':<14}{'NAME':<36}{'COORDS':<12}{'CLASSES':<10}SOURCE")
    for fmt in list_formats():
        coords = "normalized" if fmt.is_normalized else "pixels"
        source = fmt.source_type.value
        if fmt.file_extension:
            source = f"{source} ({fmt.file_extension})"
        print(f"{fmt.id:<14}{fmt.name:<36}{coords:<12}{fmt.class_format.value:<10}{source}")


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Annotation dataset format converter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Oriented boxes to COCO, looking up images and mapping names to ids
  python main.py --source-format yolo5obb --target-format cocojson \\
      --source labels/ --target out/annotations.json \\
      --image-directory images/ --class-mapping classes.yaml

  # COCO to YOLO Darknet
  python main.py --source-format cocojson --target-format yolodarknet \\
      --source annotations.json --target labels/ --image-directory images/

  # Use a configuration file, overriding the target
  python main.py --config configs/convert.yaml --target other/

  # List supported formats
  python main.py --list-formats
        """
    )

    parser.add_argument('--source-format', '-f', help="Format id of the source dataset")
    parser.add_argument('--target-format', '-t', help="Format id to write")
    parser.add_argument('--source', '-s', type=Path, help="Source file or directory")
    parser.add_argument('--target', '-o', type=Path, help="Target file or directory")

    parser.add_argument(
        '--image-directory', '-i',
        type=Path,
        help="Directory with the dataset images (needed to normalize or look up images)"
    )
    parser.add_argument(
        '--class-mapping', '-m',
        type=Path,
        help="Class table: YAML/JSON {name: id} or list of names, or a text file with one name per line"
    )

    parser.add_argument(
        '--config', '-c',
        type=Path,
        default=None,
        help="Path to a YAML configuration file; command-line options override it"
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help="Enable verbose (DEBUG level) logging"
    )
    parser.add_argument('--log-file', type=Path, default=None, help="Also write logs to this file")
    parser.add_argument('--no-progress', action='store_true', help="Hide the progress bar")

    parser.add_argument(
        '--list-formats',
        action='store_true',
        help="List supported formats and exit"
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'boxswap v{__version__}'
    )

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    if args.list_formats:
        print_formats()
        return 0

    app = ConversionApp(args)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
