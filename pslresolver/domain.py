"""The `Domain` value: a sequence of labels kept in presentation and ASCII form."""

from __future__ import annotations

import urllib.parse
from collections.abc import Iterator, Sequence
from typing import overload

from .exceptions import InvalidDomain
from .labels import (
    IDNA2008,
    IdnaOptions,
    label_to_unicode,
    looks_like_ip,
    looks_like_ipv6,
    normalize_label,
    replace_ideographic_full_stops,
)

MAX_DOMAIN_LENGTH = 253


class Domain:
    """An immutable domain name.

    Labels are stored twice: as given (case and script preserved) for display,
    and lowercased ASCII for comparison. Equality and hashing only look at the
    ASCII form.

    >>> domain = Domain.from_string("WWW.食狮.公司.cn")
    >>> str(domain)
    'WWW.食狮.公司.cn'
    >>> str(domain.to_ascii())
    'www.xn--85x722f.xn--55qx5d.cn'
    >>> domain == Domain.from_string("www.xn--85x722f.xn--55qx5d.cn")
    True
    """

    def __init__(
        self,
        labels: Sequence[str],
        ascii_labels: Sequence[str],
        is_ip: bool = False,
        idna_options: IdnaOptions = IDNA2008,
    ) -> None:
        if len(labels) != len(ascii_labels):
            raise ValueError("labels and ascii_labels must have the same length")

        self._labels = tuple(labels)
        self._ascii_labels = tuple(ascii_labels)
        self._is_ip = is_ip
        self._idna_options = idna_options

        if len(".".join(self._ascii_labels)) > MAX_DOMAIN_LENGTH:
            raise InvalidDomain.due_to_domain_too_long(".".join(self._labels))

    @classmethod
    def from_string(
        cls, value: str | None, idna_options: IdnaOptions = IDNA2008
    ) -> Domain:
        """Parse and normalize a domain name.

        `None` gives the empty domain, with no labels at all. IP address
        literals are kept whole, as a single opaque label.
        """
        if value is None:
            return cls((), (), idna_options=idna_options)

        value = replace_ideographic_full_stops(urllib.parse.unquote(value))
        if value.endswith("."):
            value = value[:-1]

        if _is_ip_literal(value):
            return cls((value,), (value.lower(),), True, idna_options)

        labels = value.split(".")
        try:
            ascii_labels = [
                normalize_label(label, idna_options.to_ascii) for label in labels
            ]
        except InvalidDomain as exc:
            raise InvalidDomain(
                f"The domain `{value}` is invalid: {exc}", domain=value
            ) from exc
        return cls(labels, ascii_labels, idna_options=idna_options)

    @classmethod
    def from_labels(
        cls, labels: Sequence[str], idna_options: IdnaOptions = IDNA2008
    ) -> Domain:
        """Build a domain from left-to-right labels."""
        return cls.from_string(".".join(labels), idna_options)

    @property
    def labels(self) -> tuple[str, ...]:
        """The labels as given, left to right."""
        return self._labels

    @property
    def ascii_labels(self) -> tuple[str, ...]:
        """The lowercase ASCII labels, left to right."""
        return self._ascii_labels

    @property
    def idna_options(self) -> IdnaOptions:
        return self._idna_options

    @property
    def value(self) -> str | None:
        """The domain as a string, or `None` for the empty domain."""
        if not self._labels:
            return None
        return ".".join(self._labels)

    @property
    def is_ip(self) -> bool:
        return self._is_ip

    @property
    def is_ascii(self) -> bool:
        return all(label.isascii() for label in self._labels)

    @property
    def is_resolvable(self) -> bool:
        """Whether a public suffix can be looked up for this domain.

        That takes at least two labels, none of them empty, and not an IP.

        >>> Domain.from_string("example.com").is_resolvable
        True
        >>> Domain.from_string("localhost").is_resolvable
        False
        >>> Domain.from_string("[::1]").is_resolvable
        False
        """
        return (
            not self._is_ip
            and len(self._ascii_labels) > 1
            and all(self._ascii_labels)
        )

    def to_ascii(self) -> Domain:
        if self._is_ip:
            return self
        return Domain(
            self._ascii_labels, self._ascii_labels, idna_options=self._idna_options
        )

    def to_unicode(self) -> Domain:
        if self._is_ip:
            return self
        mode = self._idna_options.to_unicode
        return Domain(
            [label_to_unicode(label, mode) for label in self._ascii_labels],
            self._ascii_labels,
            idna_options=self._idna_options,
        )

    def join(self, other: Domain) -> Domain:
        """Concatenate two domains, this one on the left."""
        return Domain(
            self._labels + other.labels,
            self._ascii_labels + other.ascii_labels,
            idna_options=self._idna_options,
        )

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> Domain: ...

    def __getitem__(self, index: int | slice) -> str | Domain:
        """Index a label, or slice out a sub-domain.

        >>> domain = Domain.from_string("forums.bbc.co.uk")
        >>> domain[0]
        'forums'
        >>> str(domain[-2:])
        'co.uk'
        """
        if isinstance(index, slice):
            return Domain(
                self._labels[index],
                self._ascii_labels[index],
                idna_options=self._idna_options,
            )
        return self._labels[index]

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __str__(self) -> str:
        return ".".join(self._labels)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Domain):
            return NotImplemented
        return (self._ascii_labels, self._is_ip) == (other._ascii_labels, other._is_ip)

    def __hash__(self) -> int:
        return hash((self._ascii_labels, self._is_ip))


def _is_ip_literal(value: str) -> bool:
    min_num_ipv6_chars = 4
    if (
        len(value) >= min_num_ipv6_chars
        and value[0] == "["
        and value[-1] == "]"
        and looks_like_ipv6(value[1:-1])
    ):
        return True
    return looks_like_ip(value) or looks_like_ipv6(value)
