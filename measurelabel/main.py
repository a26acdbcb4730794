"""
MeasureLabel - measure a line on an image and label it with its length

Usage:
    measurelabel [image]                       # open an image straight away
    measurelabel --config site.env image.tif   # settings from a .env file
    measurelabel --fixed-size image.tif        # fixed line width / font size
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from measurelabel.utils.config import load_config
from measurelabel.utils.logging_setup import setup_logging

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='measurelabel',
        description='Label line selections with their calibrated length'
    )
    parser.add_argument('image', nargs='?', type=Path,
                        help='Image to open on start-up')
    parser.add_argument('--config', type=Path, default=None,
                        help='.env file with MeasureLabel settings')
    parser.add_argument('--log-level', choices=LOG_LEVELS, type=str.upper, default=None,
                        help='Override LOG_LEVEL')
    parser.add_argument('--fixed-size', action='store_true',
                        help='Use DEFAULT_LINE_WIDTH / DEFAULT_FONT_SIZE instead of '
                             'sizing from the image height')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the MeasureLabel application

    Args:
        argv: Command line arguments (sys.argv[1:] when None)

    Returns:
        Exit code: 0 on a clean close, 1 if start-up failed. Bad arguments
        exit through argparse with status 2.
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        if args.log_level:
            config['log_level'] = args.log_level
        if args.fixed_size:
            config['smart_sizing'] = False

        setup_logging(level=config['log_level'], log_file=config['log_file'],
                      debug=config.get('debug', False))
        logger = logging.getLogger(__name__)
        logger.info("Starting MeasureLabel")

        # GUI stack imported here so its failures are logged like any other
        from measurelabel.gui.main_window import MeasureLabelApp

        app = MeasureLabelApp(config=config)
        if args.image is not None:
            app.open_image(args.image)
        app.run()

        logger.info("MeasureLabel closed")
        return 0

    except Exception as e:
        logging.basicConfig(level=logging.ERROR)
        logging.error(f"MeasureLabel failed to start: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
