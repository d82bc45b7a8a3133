"""Content types advertised on every API declaration."""

from typing import List

CONSUMES = (
    "application/json",
    "application/x-www-form-urlencoded",
    "application/xml",
    "text/xml",
)

PRODUCES = (
    "application/json",
    "application/xml",
    "text/xml",
    # JSONP
    "application/javascript",
    "text/javascript",
)


def consumes() -> List[str]:
    return list(CONSUMES)


def produces() -> List[str]:
    return list(PRODUCES)
