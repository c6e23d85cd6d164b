import logging
from argparse import ArgumentParser, Namespace


def add_common_args(parser: ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        help="Verbose mode",
        action="store_true",
    )


def setup_logging(args: Namespace) -> None:
    logging.basicConfig(
        level=logging.DEBUG if args.v else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
