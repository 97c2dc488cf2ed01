import logging
import sys
from typing import Callable

import requests

from config import Settings, load_settings
from errors import OrderlyError

log = logging.getLogger("orderly")


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                        format="%(asctime)s [%(levelname)s] %(message)s")


def optional_number(arg):
    """argparse type: '', 'undefined' and 'null' mean "not given"."""
    if arg is None or arg.strip().lower() in ("", "undefined", "null", "none"):
        return None
    return float(arg)


def run(main: Callable[[Settings], int]) -> None:
    """Load settings, configure logging and turn failures into exit status 1."""
    try:
        settings = load_settings()
        setup_logging(settings.log_level)
        code = main(settings)
    except (OrderlyError, ValueError, requests.RequestException) as e:
        setup_logging()
        log.error(f"{e}")
        sys.exit(1)
    sys.exit(code or 0)
