import os
import logging

from . import const, vt100


def setup(verbose: bool):
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format=f"{vt100.CYAN}%(asctime)s{vt100.RESET} {vt100.YELLOW}%(levelname)s{vt100.RESET} %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        os.makedirs(os.path.dirname(const.GLOBAL_LOG_FILE), exist_ok=True)

        logging.basicConfig(
            level=logging.INFO,
            filename=const.GLOBAL_LOG_FILE,
            filemode="w",
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
