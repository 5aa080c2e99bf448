"""shoji: typed attribute extraction and form synthesis."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("shoji")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from shoji.api import build_form, open_form, describe_error
from shoji.codes import ErrorCode
from shoji.contracts import ErrorReport
from shoji.config import ShojiConfig
from shoji.kernel.form import Form
from shoji.kernel.render import FieldDescriptor, WidgetKind

__all__ = [
    "__version__",
    "build_form",
    "open_form",
    "describe_error",
    "ErrorCode",
    "ErrorReport",
    "ShojiConfig",
    "Form",
    "FieldDescriptor",
    "WidgetKind",
]
