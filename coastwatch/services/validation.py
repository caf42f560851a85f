from typing import Optional, Type, TypeVar

from coastwatch.core.errors import BadRequest

E = TypeVar("E")


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_enum(enum_cls: Type[E], value: str, label: str) -> E:
    """Case-insensitive lookup of ``value`` in ``enum_cls``; BadRequest names the bad value."""
    try:
        return enum_cls(value.strip().upper())
    except (ValueError, AttributeError):
        raise BadRequest(f"Invalid {label}: {value}")


def parse_optional_enum(enum_cls: Type[E], value: Optional[str], label: str) -> Optional[E]:
    if is_blank(value):
        return None
    return parse_enum(enum_cls, value, label)


def parse_id(raw, label: str = "report") -> int:
    """Accept only positive integers, as ints or digit strings."""
    if isinstance(raw, bool):
        raise BadRequest(f"Invalid {label} ID")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and raw.strip().isascii() and raw.strip().isdigit():
        value = int(raw.strip())
    else:
        raise BadRequest(f"Invalid {label} ID")
    if value <= 0:
        raise BadRequest(f"Invalid {label} ID")
    return value


def check_coordinates(lat: float, lng: float) -> None:
    if not -90.0 <= lat <= 90.0:
        raise BadRequest(f"Invalid latitude: {lat}")
    if not -180.0 <= lng <= 180.0:
        raise BadRequest(f"Invalid longitude: {lng}")
