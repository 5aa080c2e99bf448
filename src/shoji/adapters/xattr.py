"""Attribute source backed by Linux extended attributes.

Typed attributes are stored the way Haiku's build tools emulate them on
other filesystems: attribute ``X`` lives in xattr ``user.haiku.X`` and its
value is a 4-byte type code followed by the payload.
"""

from __future__ import annotations

import errno
import logging
import os
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from shoji.kernel.attributes import AttrInfo
from shoji.kernel.type_codes import B_MIME_STRING_TYPE, B_STRING_TYPE, ByteOrder, decode_string

logger = logging.getLogger(__name__)

HAIKU_NAMESPACE = "user.haiku."
TYPE_HEADER_SIZE = 4
TYPE_ATTRIBUTE = "BEOS:TYPE"


def xattrs_supported() -> bool:
    """Check whether this platform exposes the xattr calls."""
    return hasattr(os, "listxattr") and hasattr(os, "getxattr")


def encode_xattr_value(type_code: int, data: bytes, byte_order: ByteOrder = "little") -> bytes:
    """Prefix a payload with its type code header."""
    return type_code.to_bytes(TYPE_HEADER_SIZE, byte_order) + data


class XattrSource:
    """Typed attributes of one filesystem node.

    Must be used as a context manager; the node stays open while the
    source is in use and is closed on every exit path::

        with XattrSource(path) as source:
            record = extract(source, schema)

    Args:
        path: Filesystem node to read
        byte_order: Byte order of the type header and numeric payloads
        include_foreign: Also expose other ``user.*`` xattrs, as strings
            named by their full xattr name
    """

    def __init__(
        self,
        path: Union[str, Path],
        byte_order: ByteOrder = "little",
        include_foreign: bool = False,
    ):
        self.path = Path(path)
        self.byte_order = byte_order
        self.include_foreign = include_foreign
        self._fd: Optional[int] = None
        self._xattr_names: Dict[str, str] = {}  # attribute name -> xattr name
        self._foreign = set()

    def open(self) -> None:
        """Open the node; raises OSError when it is missing or xattrs are unsupported."""
        if not xattrs_supported():
            raise OSError(errno.ENOTSUP, "Extended attributes are not supported on this platform", str(self.path))
        if self._fd is None:
            self._fd = os.open(self.path, os.O_RDONLY)

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def __enter__(self) -> "XattrSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def fd(self) -> int:
        if self._fd is None:
            raise OSError(errno.EBADF, "Attribute source is not open", str(self.path))
        return self._fd

    def iter_names(self) -> Iterator[str]:
        for xattr_name in os.listxattr(self.fd):
            if xattr_name.startswith(HAIKU_NAMESPACE):
                name = xattr_name[len(HAIKU_NAMESPACE):]
            elif self.include_foreign and xattr_name.startswith("user."):
                name = xattr_name
                self._foreign.add(name)
            else:
                logger.debug("Ignoring xattr %r", xattr_name)
                continue
            self._xattr_names[name] = xattr_name
            yield name

    def stat_attr(self, name: str) -> AttrInfo:
        raw = os.getxattr(self.fd, self._xattr_name(name))
        if name in self._foreign:
            return AttrInfo(type_code=B_STRING_TYPE, size=len(raw))
        if len(raw) < TYPE_HEADER_SIZE:
            raise ValueError(f"xattr value of '{name}' is shorter than its type header")
        type_code = int.from_bytes(raw[:TYPE_HEADER_SIZE], self.byte_order)
        return AttrInfo(type_code=type_code, size=len(raw) - TYPE_HEADER_SIZE)

    def read_attr(self, name: str, info: AttrInfo) -> bytes:
        raw = os.getxattr(self.fd, self._xattr_name(name))
        if name in self._foreign:
            return raw
        return raw[TYPE_HEADER_SIZE:]

    def read_type(self) -> Optional[str]:
        """Read the node's MIME type from its ``BEOS:TYPE`` attribute, if set."""
        try:
            raw = os.getxattr(self.fd, HAIKU_NAMESPACE + TYPE_ATTRIBUTE)
        except OSError as e:
            if e.errno in (errno.ENODATA, errno.ENOTSUP, getattr(errno, "ENOATTR", errno.ENODATA)):
                return None
            raise
        if len(raw) < TYPE_HEADER_SIZE:
            return None
        type_code = int.from_bytes(raw[:TYPE_HEADER_SIZE], self.byte_order)
        if type_code not in (B_MIME_STRING_TYPE, B_STRING_TYPE):
            logger.debug("Ignoring %s of type 0x%08x", TYPE_ATTRIBUTE, type_code)
            return None
        return decode_string(raw[TYPE_HEADER_SIZE:]) or None

    def _xattr_name(self, name: str) -> str:
        return self._xattr_names.get(name, HAIKU_NAMESPACE + name)
