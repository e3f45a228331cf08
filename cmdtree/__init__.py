__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'cmdtree'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from loguru import logger

from .commands import *
from .config import *
from .context import *
from .fuzzy import *
from .info import *
from .faults import *
from .runner import *
from .usage import *
from .validation import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

# Library logging stays silent until the application opts in with
# logger.enable("cmdtree").
logger.disable(__name__)

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the config
__all__ += config.__all__  # type: ignore[attr-defined]
# Load the exposed API of the context
__all__ += context.__all__  # type: ignore[attr-defined]
# Load the exposed API of the fuzzy matcher
__all__ += fuzzy.__all__  # type: ignore[attr-defined]
# Load the exposed API of the build information
__all__ += info.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the runner
__all__ += runner.__all__  # type: ignore[attr-defined]
# Load the exposed API of the usage renderer
__all__ += usage.__all__  # type: ignore[attr-defined]
# Load the exposed API of the validation
__all__ += validation.__all__  # type: ignore[attr-defined]
