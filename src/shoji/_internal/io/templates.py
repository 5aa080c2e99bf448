"""Template directory loader (internal).

A templates directory holds one JSON layout template per type, named
after the type with ``/`` replaced by ``__``::

    templates/
      text__x-email.json
      text.json            # supertype template
"""

import errno
from pathlib import Path
from typing import Union

from shoji.kernel.errors import TemplateNotFound
from shoji.kernel.mime import is_valid_type

# Longest file name most filesystems accept.
MAX_FILENAME_LENGTH = 255


def template_filename(type_identifier: str) -> str:
    """File name holding the template for a type."""
    return type_identifier.lower().replace("/", "__") + ".json"


class DirectoryTemplateLoader:
    """Loads layout template bytes from a directory.

    Types that cannot have a template file (invalid identifiers, names too
    long for the filesystem) are reported as not found.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def __call__(self, type_identifier: str) -> bytes:
        if not is_valid_type(type_identifier):
            raise TemplateNotFound(type_identifier)
        filename = template_filename(type_identifier)
        if len(filename.encode("utf-8")) > MAX_FILENAME_LENGTH:
            raise TemplateNotFound(type_identifier)
        try:
            return (self.directory / filename).read_bytes()
        except FileNotFoundError:
            raise TemplateNotFound(type_identifier)
        except OSError as e:
            if e.errno == errno.ENAMETOOLONG:
                raise TemplateNotFound(type_identifier) from e
            raise
