import os
import sys
import logging

from pathlib import Path

from . import (
    const,
    driver,
    logger,
    options,
    parser,
    vt100,
)


def loadTable() -> options.OptionTable:
    """The builtin options, extended with the user's option manifest if any."""
    table = options.OptionTable.default()

    path = os.environ.get(const.OPTIONS_ENV, const.GLOBAL_OPTIONS_FILE)
    if os.path.exists(path):
        table.extend(options.loadManifest(Path(path)))

    return table


def main() -> int:
    extra = os.environ.get(const.EXTRA_ARGS_ENV, None)
    args = (extra.split(" ") if extra else []) + sys.argv[1:]

    logger.setup(options.VERBOSE.spelling in args)

    try:
        d = driver.Driver(args, loadTable())
        return d.run()

    except parser.OptionParseError as e:
        logging.exception(e)
        e.message.emit()
        return 1

    except (RuntimeError, ValueError) as e:
        logging.exception(e)
        vt100.error(str(e))
        return 1

    except KeyboardInterrupt:
        print()
        return 1
