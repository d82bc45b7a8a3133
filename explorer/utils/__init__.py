import re
from typing import List

PATH_FRAGMENT_RE = re.compile(r":(\w+)")


def url_join(*parts: str) -> str:
    """Join URL path segments with exactly one slash between them.

    Empty segments are skipped; a leading slash on the first segment and a
    trailing slash on the last one are preserved.
    """
    segments = [part for part in parts if part]
    if not segments:
        return ""
    joined = "/".join(segment.strip("/") for segment in segments)
    joined = re.sub(r"/{2,}", "/", joined)
    if segments[0].startswith("/") and not joined.startswith("/"):
        joined = "/" + joined
    if segments[-1].endswith("/") and not joined.endswith("/"):
        joined += "/"
    return joined


def convert_path_fragments(path: str) -> str:
    """Rewrite ``:param`` route fragments into Swagger's ``{param}`` form."""
    return PATH_FRAGMENT_RE.sub(r"{\1}", path)


def path_parameter_names(path: str) -> List[str]:
    """Names of the ``:param`` fragments in a route path."""
    return PATH_FRAGMENT_RE.findall(path)
