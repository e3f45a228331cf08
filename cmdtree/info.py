"""
Build information of the running application.

build_info("my-app") reads the installed distribution's metadata: its
version, and the VCS commit it was installed from when pip recorded one
(PEP 610 direct_url.json). Handy for Config(version=str(build_info(...))).
"""
import collections
import json
import platform
from importlib import metadata

from loguru import logger

SNAPSHOT = "SNAPSHOT"
DEVEL = "(devel)"


class BuildInfo(collections.namedtuple("BuildInfo", ("python", "version", "revision"))):
    """
    Fields
    - python: interpreter version, e.g. "3.12.4".
    - version: distribution version, "(devel)" when it is not installed.
    - revision: VCS commit id, "SNAPSHOT" when unknown.
    """

    __slots__ = ()

    def __str__(self):
        return "%s-%s" % (self.version, self.revision)


def _revision(distribution):
    text = distribution.read_text("direct_url.json")
    if not text:
        return SNAPSHOT
    try:
        origin = json.loads(text)
    except ValueError as error:
        logger.debug("unreadable direct_url.json: {}", error)
        return SNAPSHOT
    return origin.get("vcs_info", {}).get("commit_id") or SNAPSHOT


def build_info(name, /):
    """
    BuildInfo of the distribution called name.
    """
    if not isinstance(name, str):
        raise TypeError("build_info() argument must be a string")
    try:
        distribution = metadata.distribution(name)
    except metadata.PackageNotFoundError:
        logger.debug("distribution {!r} is not installed", name)
        return BuildInfo(platform.python_version(), DEVEL, SNAPSHOT)
    return BuildInfo(platform.python_version(), distribution.version, _revision(distribution))


__all__ = (
    "BuildInfo",
    "build_info",
)
