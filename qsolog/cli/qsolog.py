"""
Browse, verify, edit, and re-export an ADIF log.

Callsigns are checked against QRZ.com when a QRZ username is given. The password is
taken from the QRZ_PASSWORD environment variable, or prompted for.
"""

import asyncio
import locale
import logging
import os
from argparse import ArgumentParser, Namespace
from getpass import getpass
from pathlib import Path
from typing import Optional, Sequence

from colorama import Fore, Style
from tqdm import tqdm

from qsolog.adif.record import AdifRecord
from qsolog.cli.common import add_common_args, setup_logging
from qsolog.constants import DEFAULT_COLUMNS, EXPORT_FILENAME, QRZ_PASSWORD_ENV
from qsolog.edit import set_field
from qsolog.enums import Validity
from qsolog.qrz import QrzClient
from qsolog.session import Session

logger = logging.getLogger(__name__)

VALIDITY_COLORS = {
    Validity.VALID: Fore.GREEN,
    Validity.INVALID: Fore.RED,
}


def main() -> None:
    args = parse_args()
    setup_logging(args)

    # Sort the way the user's locale does
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning(f"Can't use the locale for sorting: {e}")

    try:
        asyncio.run(run(args))
    except Exception as e:
        if not args.v:
            print(e)
        else:
            raise


def parse_args(argv: Optional[Sequence[str]] = None) -> Namespace:
    parser = ArgumentParser(description=__doc__)
    add_common_args(parser)

    parser.add_argument("logfile", help="ADIF (.adi) file to load")
    parser.add_argument(
        "-k", "--keyword", default="", help="Only show QSOs matching this text"
    )
    parser.add_argument("--band", default="", help="Only show QSOs on this band")
    parser.add_argument("--mode", default="", help="Only show QSOs in this mode")
    parser.add_argument(
        "-s",
        "--sort",
        action="append",
        metavar="FIELD",
        help="Sort by this field. Give the same field twice to sort descending",
    )
    parser.add_argument(
        "--set",
        action="append",
        nargs=3,
        metavar=("INDEX", "FIELD", "VALUE"),
        help="Set a field on the QSO at INDEX in the displayed list",
    )
    parser.add_argument("-u", "--qrz-user", help="QRZ.com username")
    parser.add_argument(
        "--choices",
        action="store_true",
        help="Print the bands and modes in the log",
    )
    parser.add_argument(
        "-o",
        "--output",
        nargs="?",
        const=EXPORT_FILENAME,
        help=f"Write the log out to this file, default: {EXPORT_FILENAME}",
    )
    return parser.parse_args(argv)


async def run(args: Namespace) -> None:
    path = Path(args.logfile)
    try:
        text = path.read_text()
    except OSError as e:
        raise RuntimeError(f"Could not read {path}: {e}")

    session = Session(QrzClient())
    session.load_text(text)

    if args.qrz_user:
        password = os.environ.get(QRZ_PASSWORD_ENV) or getpass("QRZ password: ")
        if await session.login(args.qrz_user, password):
            await verify(session)
        else:
            print(Fore.RED + session.login_error + Style.RESET_ALL)

    if args.choices:
        print(f"Bands: {' '.join(session.view.bands())}")
        print(f"Modes: {' '.join(session.view.modes())}")

    if args.keyword or args.band or args.mode:
        session.view.set_filter(args.keyword, args.band, args.mode)
    for field_name in args.sort or []:
        session.view.sort_by(field_name.lower())

    view = session.view.records()
    for index, field_name, value in args.set or []:
        apply_edit(view, index, field_name, value)

    print_table(view)

    if args.output:
        out, _ = session.export()
        Path(args.output).write_text(out)
        print(f"Wrote {len(session.store)} QSOs to {args.output}")


async def verify(session: Session) -> None:
    """
    Wait for the verification run started by logging in, with a progress bar
    """
    assert session.verification is not None
    total = sum(1 for r in session.store if r.call.strip())
    with tqdm(total=total, unit="call", desc="Checking calls") as bar:
        session.listeners.append(lambda _: bar.update())
        summary = await session.verification

    print(
        f"{summary.valid} valid, {summary.invalid} not found, "
        f"{summary.unknown} unknown"
    )


def apply_edit(
    view: list[AdifRecord], index: str, field_name: str, value: str
) -> None:
    try:
        record = view[int(index)]
    except (ValueError, IndexError):
        raise ValueError(f"No QSO at index {index}, there are {len(view)}")
    set_field(record, field_name.lower(), value)


def print_table(view: list[AdifRecord]) -> None:
    rows = [
        [str(i)] + [r.get(c).strip() for c in DEFAULT_COLUMNS]
        for i, r in enumerate(view)
    ]
    header = ["#"] + [c.upper() for c in DEFAULT_COLUMNS]
    widths = [max(len(row[i]) for row in rows + [header]) for i in range(len(header))]

    print("  ".join(h.ljust(w) for h, w in zip(header, widths)))
    for record, row in zip(view, rows):
        line = "  ".join(v.ljust(w) for v, w in zip(row, widths))
        color = VALIDITY_COLORS.get(record.validity)
        if color:
            line = color + line + Style.RESET_ALL
        print(line)


if __name__ == "__main__":
    main()
