# Sidebarctl Archive Module
# Keyed archive (NSKeyedArchiver) codec with a restricted class allow-list

from sidebarctl.archive.codec import (
    ALLOWED_CLASSES,
    ARCHIVER_NAME,
    COCOA_EPOCH,
    decode,
    encode,
)

__all__ = [
    "ALLOWED_CLASSES",
    "ARCHIVER_NAME",
    "COCOA_EPOCH",
    "decode",
    "encode",
]
