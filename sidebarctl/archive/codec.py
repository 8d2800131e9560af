# Sidebarctl Archive Codec
# NSKeyedArchiver containers decoded to and encoded from plain Python values

import plistlib
import uuid
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from sidebarctl.errors import DecodeError

ARCHIVER_NAME = "NSKeyedArchiver"
ARCHIVER_VERSION = 100000
NULL_OBJECT = "$null"

# Deepest container nesting accepted while decoding
MAX_DEPTH = 64

# NSDate stores seconds relative to 2001-01-01 00:00:00 UTC
COCOA_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)

# Only these classes may appear in a store archive
ALLOWED_CLASSES: frozenset[str] = frozenset(
    {
        "NSDictionary",
        "NSMutableDictionary",
        "NSArray",
        "NSMutableArray",
        "NSString",
        "NSMutableString",
        "NSData",
        "NSMutableData",
        "NSNumber",
        "NSUUID",
        "NSDate",
    }
)

DICTIONARY_CLASSES = frozenset({"NSDictionary", "NSMutableDictionary"})
ARRAY_CLASSES = frozenset({"NSArray", "NSMutableArray"})
STRING_CLASSES = frozenset({"NSString", "NSMutableString"})
DATA_CLASSES = frozenset({"NSData", "NSMutableData"})

# Class hierarchies as written by the OS archiver
CLASS_CHAINS: dict[str, list[str]] = {
    "NSMutableDictionary": ["NSMutableDictionary", "NSDictionary", "NSObject"],
    "NSMutableArray": ["NSMutableArray", "NSArray", "NSObject"],
    "NSUUID": ["NSUUID", "NSObject"],
    "NSDate": ["NSDate", "NSObject"],
}

_SCALAR_TYPES = (bool, int, float, str, bytes)


def decode(data: bytes) -> dict[str, Any]:
    """
    Decode a keyed archive into a mutable object graph.

    Dictionaries become ``dict``, arrays ``list``, strings ``str``, data
    ``bytes``, numbers ``int``/``float``/``bool``, NSUUID ``uuid.UUID`` and
    NSDate timezone-aware ``datetime``.

    Args:
        data: Raw archive bytes (binary plist, or XML as written by plutil).

    Returns:
        The root dictionary.

    Raises:
        DecodeError: If the data is not a keyed archive, the root is not a
            dictionary, or a class outside the allow-list is referenced.
    """
    try:
        container = plistlib.loads(data)
    except Exception as e:
        raise DecodeError(f"Not a property list: {e}") from e

    if not isinstance(container, dict):
        raise DecodeError("Archive container is not a dictionary")
    if container.get("$archiver") != ARCHIVER_NAME:
        raise DecodeError(f"Unsupported archiver: {container.get('$archiver')!r}")

    objects = container.get("$objects")
    top = container.get("$top")
    if not isinstance(objects, list) or not objects:
        raise DecodeError("Archive has no $objects table")
    if not isinstance(top, dict) or not top:
        raise DecodeError("Archive has no $top entry")

    root_ref = top.get("root", next(iter(top.values())))
    root = _Decoder(objects).decode_ref(root_ref)

    if not isinstance(root, dict):
        raise DecodeError("Root object is not a dictionary")
    return root


def encode(graph: Mapping[str, Any]) -> bytes:
    """
    Encode an object graph as a binary keyed archive.

    Args:
        graph: Root dictionary.

    Returns:
        Binary plist bytes in NSKeyedArchiver layout.

    Raises:
        TypeError: If the graph contains a value with no archive representation.
    """
    encoder = _Encoder()
    root = encoder.encode_value(graph)
    container = {
        "$version": ARCHIVER_VERSION,
        "$archiver": ARCHIVER_NAME,
        "$top": {"root": root},
        "$objects": encoder.objects,
    }
    return plistlib.dumps(container, fmt=plistlib.FMT_BINARY, sort_keys=False)


def _ref_index(ref: Any) -> Optional[int]:
    # Binary archives hold UIDs; plutil XML renders them as {"CF$UID": n}
    if isinstance(ref, plistlib.UID):
        return ref.data
    if isinstance(ref, dict) and len(ref) == 1 and type(ref.get("CF$UID")) is int:
        return ref["CF$UID"]
    return None


class _Decoder:
    """Resolves UID references against the $objects table."""

    def __init__(self, objects: list[Any]):
        self.objects = objects
        self._active: set[int] = set()

    def decode_ref(self, ref: Any) -> Any:
        index = _ref_index(ref)
        if index is None:
            raise DecodeError(f"Expected object reference, got {type(ref).__name__}")
        if index == 0:
            return None
        if not 0 <= index < len(self.objects):
            raise DecodeError(f"Object reference {index} out of range")
        if index in self._active:
            raise DecodeError(f"Reference cycle at object {index}")
        if len(self._active) >= MAX_DEPTH:
            raise DecodeError("Archive nested too deeply")

        self._active.add(index)
        try:
            return self._decode_object(self.objects[index])
        finally:
            self._active.discard(index)

    def _decode_object(self, obj: Any) -> Any:
        if isinstance(obj, _SCALAR_TYPES):
            return obj
        if not isinstance(obj, dict):
            raise DecodeError(f"Unsupported archived value of type {type(obj).__name__}")

        class_name = self._class_name(obj.get("$class"))
        if class_name not in ALLOWED_CLASSES:
            raise DecodeError(f"Class not allowed in store archive: {class_name}")

        if class_name in DICTIONARY_CLASSES:
            keys = self._ref_list(obj, "NS.keys")
            values = self._ref_list(obj, "NS.objects")
            if len(keys) != len(values):
                raise DecodeError("Dictionary key/value counts differ")
            result: dict[str, Any] = {}
            for key_ref, value_ref in zip(keys, values):
                key = self.decode_ref(key_ref)
                if not isinstance(key, str):
                    raise DecodeError(f"Dictionary key is not a string: {key!r}")
                result[key] = self.decode_ref(value_ref)
            return result

        if class_name in ARRAY_CLASSES:
            return [self.decode_ref(ref) for ref in self._ref_list(obj, "NS.objects")]

        if class_name in STRING_CLASSES:
            value = obj.get("NS.string")
            if not isinstance(value, str):
                raise DecodeError("String object has no NS.string")
            return value

        if class_name in DATA_CLASSES:
            value = obj.get("NS.data")
            if _ref_index(value) is not None:
                value = self.decode_ref(value)
            if not isinstance(value, bytes):
                raise DecodeError("Data object has no NS.data")
            return value

        if class_name == "NSUUID":
            raw = obj.get("NS.uuidbytes")
            if not isinstance(raw, bytes) or len(raw) != 16:
                raise DecodeError("UUID object has invalid NS.uuidbytes")
            return uuid.UUID(bytes=raw)

        if class_name == "NSDate":
            seconds = obj.get("NS.time")
            if not isinstance(seconds, (int, float)) or isinstance(seconds, bool):
                raise DecodeError("Date object has invalid NS.time")
            try:
                return COCOA_EPOCH + timedelta(seconds=seconds)
            except (OverflowError, ValueError) as e:
                raise DecodeError(f"Date object out of range: {seconds!r}") from e

        # NSNumber only ever appears inline
        raise DecodeError(f"Unexpected object form for {class_name}")

    def _class_name(self, ref: Any) -> str:
        index = _ref_index(ref)
        if index is None or not 0 < index < len(self.objects):
            raise DecodeError("Object has no valid $class reference")
        descriptor = self.objects[index]
        if not isinstance(descriptor, dict) or not isinstance(descriptor.get("$classname"), str):
            raise DecodeError("Invalid class descriptor")
        return descriptor["$classname"]

    @staticmethod
    def _ref_list(obj: dict, key: str) -> list[Any]:
        refs = obj.get(key, [])
        if not isinstance(refs, list):
            raise DecodeError(f"{key} is not an array")
        return refs


class _Encoder:
    """Builds the $objects table, uniquing scalars and class descriptors."""

    def __init__(self) -> None:
        self.objects: list[Any] = [NULL_OBJECT]
        self._scalars: dict[tuple[type, Any], plistlib.UID] = {}
        self._classes: dict[str, plistlib.UID] = {}

    def encode_value(self, value: Any) -> plistlib.UID:
        if value is None:
            return plistlib.UID(0)

        if isinstance(value, _SCALAR_TYPES):
            key = (type(value), value)
            if key not in self._scalars:
                self._scalars[key] = self._append(value)
            return self._scalars[key]

        if isinstance(value, Mapping):
            uid, index = self._reserve()
            keys = []
            for key in value:
                if not isinstance(key, str):
                    raise TypeError(f"Dictionary keys must be strings, got {type(key).__name__}")
                keys.append(self.encode_value(key))
            objects = [self.encode_value(v) for v in value.values()]
            self.objects[index] = {
                "NS.keys": keys,
                "NS.objects": objects,
                "$class": self._class_ref("NSMutableDictionary"),
            }
            return uid

        if isinstance(value, (list, tuple)):
            uid, index = self._reserve()
            objects = [self.encode_value(v) for v in value]
            self.objects[index] = {
                "NS.objects": objects,
                "$class": self._class_ref("NSMutableArray"),
            }
            return uid

        if isinstance(value, uuid.UUID):
            return self._append({"NS.uuidbytes": value.bytes, "$class": self._class_ref("NSUUID")})

        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            seconds = (value - COCOA_EPOCH).total_seconds()
            return self._append({"NS.time": seconds, "$class": self._class_ref("NSDate")})

        raise TypeError(f"Cannot archive value of type {type(value).__name__}")

    def _append(self, obj: Any) -> plistlib.UID:
        self.objects.append(obj)
        return plistlib.UID(len(self.objects) - 1)

    def _reserve(self) -> tuple[plistlib.UID, int]:
        uid = self._append(None)
        return uid, uid.data

    def _class_ref(self, name: str) -> plistlib.UID:
        if name not in self._classes:
            self._classes[name] = self._append({"$classname": name, "$classes": CLASS_CHAINS[name]})
        return self._classes[name]
