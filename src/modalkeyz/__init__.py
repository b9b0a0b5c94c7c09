from .models.binding import HIDDEN
from .version import __version__

__all__ = ["HIDDEN", "__version__"]
