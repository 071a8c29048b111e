from __future__ import annotations

import logging

TRACE = 15
PROTOCOL = 18
logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(PROTOCOL, "PROTOCOL")

FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def configure(verbose: bool = False) -> None:
    """Log verification outcomes, or flags and mode decisions with *verbose*.

    Key material and decrypted data are never logged at any level.
    """
    logging.basicConfig(level=TRACE if verbose else PROTOCOL, format=FORMAT)
