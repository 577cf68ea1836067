from .build import KeyboardBuild, build
from .config import KeyboardConfig, resolve_config
from .errors import ConfigurationError, FlatboardError, OutlineError
from .layout import get_layout
from .model import Bounds, KeyPlacement, Point2D, RowLayoutItem, ThumbClusterSpec
from .organic_case import create_organic_outline_2d

__version__ = "0.1.0"
