"""Per-label normalization: case folding, IDNA conversion and address detection."""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass, field

import idna

from .exceptions import InvalidDomain

IP_RE = re.compile(
    r"^(([0-9]|[1-9][0-9]|1[0-9]{2}|2[0-4][0-9]|25[0-5])\.)"
    r"{3}([0-9]|[1-9][0-9]|1[0-9]{2}|2[0-4][0-9]|25[0-5])$"
)

LABEL_RE = re.compile(r"^(?!-)[a-z0-9_-]{1,63}(?<!-)$")
STD3_LABEL_RE = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$")

ACE_PREFIX = "xn--"

IDEOGRAPHIC_FULL_STOPS = ("。", "．", "｡")

# UTS #46 deviation characters and their transitional mapping.
DEVIATIONS = str.maketrans(
    {"ß": "ss", "ẞ": "ss", "ς": "σ", "\u200c": None, "\u200d": None}
)


@dataclass(frozen=True)
class IdnaMode:
    """IDNA processing flags for one conversion direction."""

    transitional: bool = False
    """Map deviation characters, like "ß" to "ss", the IDNA 2003 way."""

    std3_rules: bool = False
    """Restrict labels to letters, digits and hyphens."""


@dataclass(frozen=True)
class IdnaOptions:
    """The pair of IDNA modes used to convert a domain to ASCII and back."""

    to_ascii: IdnaMode = field(default_factory=IdnaMode)
    to_unicode: IdnaMode = field(default_factory=IdnaMode)


IDNA2008 = IdnaOptions()
IDNA2003 = IdnaOptions(
    to_ascii=IdnaMode(transitional=True), to_unicode=IdnaMode(transitional=True)
)


def replace_ideographic_full_stops(value: str) -> str:
    """Swap the full stops IDNA treats as label separators for plain dots.

    >>> replace_ideographic_full_stops("www。example．com")
    'www.example.com'
    """
    for full_stop in IDEOGRAPHIC_FULL_STOPS:
        value = value.replace(full_stop, ".")
    return value


def map_deviations(label: str) -> str:
    """Apply the transitional mapping of UTS #46 deviation characters.

    >>> map_deviations("faß")
    'fass'
    >>> map_deviations("ς")
    'σ'
    >>> map_deviations("a\\u200db")
    'ab'
    """
    return label.translate(DEVIATIONS)


def normalize_label(label: str, mode: IdnaMode = IdnaMode()) -> str:
    """Return the lowercase ASCII form of a single label.

    The empty label is returned as is; deciding whether it is acceptable is up
    to the caller.

    >>> normalize_label("Example")
    'example'
    >>> normalize_label("食狮")
    'xn--85x722f'
    >>> normalize_label("faß", IdnaMode(transitional=True))
    'fass'

    Raises `InvalidDomain` when the label cannot be converted.
    """
    if not label:
        return label

    if mode.transitional:
        label = map_deviations(label)

    if label.isascii():
        ascii_label = label.lower()
        pattern = STD3_LABEL_RE if mode.std3_rules else LABEL_RE
        if not pattern.match(ascii_label):
            raise InvalidDomain.due_to_invalid_label(label)
        if ascii_label.startswith(ACE_PREFIX):
            _check_ace_label(ascii_label)
        return ascii_label

    try:
        ascii_label = idna.encode(
            label,
            uts46=True,
            std3_rules=mode.std3_rules,
        ).decode("ascii")
    except UnicodeError as exc:
        raise InvalidDomain.due_to_invalid_label(label, exc) from exc

    if "." in ascii_label or not ascii_label:
        raise InvalidDomain.due_to_invalid_label(label, "maps to more than one label")
    return ascii_label


def _check_ace_label(label: str) -> None:
    try:
        round_trip = idna.encode(idna.decode(label)).decode("ascii")
    except (UnicodeError, IndexError) as exc:
        raise InvalidDomain.due_to_invalid_label(label, exc) from exc
    if round_trip != label:
        raise InvalidDomain.due_to_invalid_label(label, "not in canonical form")


def label_to_unicode(label: str, mode: IdnaMode = IdnaMode()) -> str:
    """Decode an already normalized ASCII label to its Unicode form.

    >>> label_to_unicode("xn--85x722f")
    '食狮'
    >>> label_to_unicode("example")
    'example'
    """
    if not label.startswith(ACE_PREFIX):
        return label

    try:
        decoded = idna.decode(label)
    except (UnicodeError, IndexError) as exc:
        raise InvalidDomain.due_to_invalid_label(label, exc) from exc
    return map_deviations(decoded) if mode.transitional else decoded


def looks_like_ip(maybe_ip: str) -> bool:
    """Check whether the given str looks like an IPv4 address.

    >>> looks_like_ip("127.0.0.1")
    True
    >>> looks_like_ip("256.1.1.1")
    False
    """
    if not maybe_ip or not maybe_ip[0].isdigit():
        return False

    return bool(IP_RE.match(maybe_ip))


def looks_like_ipv6(maybe_ip: str) -> bool:
    """Check whether the given str looks like an IPv6 address.

    A zone index, like `%eth0`, is accepted.

    >>> looks_like_ipv6("fe80::1%eth0")
    True
    >>> looks_like_ipv6("example.com")
    False
    """
    if ":" not in maybe_ip:
        return False

    try:
        ipaddress.IPv6Address(maybe_ip)
    except ValueError:
        return False
    return True
