"""Parsing of Public Suffix List text into rules."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .exceptions import InvalidDomain, UnableToLoadRules
from .labels import IDNA2008, IdnaOptions, label_to_unicode, normalize_label
from .resolved import Section

LOG = logging.getLogger("pslresolver")

SECTION_RE = re.compile(
    r"^// ===(?P<marker>BEGIN|END) (?P<section>ICANN|PRIVATE) DOMAINS==="
)
VERSION_RE = re.compile(r"^// VERSION: (?P<version>\S+)")
VERSION_DATE_FORMAT = "%Y-%m-%d_%H-%M-%S_UTC"

WILDCARD = "*"
EXCEPTION_PREFIX = "!"


class RuleKind(enum.Enum):
    """How a rule's leftmost label matches."""

    PLAIN = "plain"
    WILDCARD = "wildcard"
    EXCEPTION = "exception"


@dataclass(frozen=True)
class Rule:
    """One Public Suffix List entry."""

    labels: tuple[str, ...]
    """The rule's ASCII labels, TLD first, without any `!` prefix."""

    kind: RuleKind = RuleKind.PLAIN
    section: Section = Section.ICANN
    idna_options: IdnaOptions = field(default=IDNA2008, repr=False, compare=False)

    @property
    def ascii(self) -> str:
        """The rule as it would appear in the list, in ASCII.

        >>> parse_rule("!city.kobe.jp").ascii
        '!city.kobe.jp'
        """
        return self._render(self.labels)

    @property
    def unicode(self) -> str:
        """The rule as it would appear in the list, in Unicode.

        >>> parse_rule("xn--85x722f.cn").unicode
        '食狮.cn'
        """
        mode = self.idna_options.to_unicode
        return self._render(
            [
                label if label == WILDCARD else label_to_unicode(label, mode)
                for label in self.labels
            ]
        )

    def _render(self, labels: list[str] | tuple[str, ...]) -> str:
        prefix = EXCEPTION_PREFIX if self.kind is RuleKind.EXCEPTION else ""
        return prefix + ".".join(reversed(labels))

    def __str__(self) -> str:
        return self.ascii


@dataclass(frozen=True)
class SuffixList:
    """The rules of a Public Suffix List, by section, and the list's version."""

    icann: tuple[Rule, ...] = ()
    private: tuple[Rule, ...] = ()
    version: str | None = None
    last_modified: datetime | None = None


def parse_rule(
    rule: str,
    section: Section = Section.ICANN,
    idna_options: IdnaOptions = IDNA2008,
) -> Rule:
    """Convert one rule line to a `Rule`.

    Raises `InvalidDomain` for anything which is not a well formed rule.
    """
    is_exception = rule.startswith(EXCEPTION_PREFIX)
    body = rule[1:] if is_exception else rule

    labels = []
    for label in reversed(body.split(".")):
        if label == WILDCARD and not is_exception:
            labels.append(label)
            continue
        ascii_label = normalize_label(label, idna_options.to_ascii)
        if not ascii_label:
            raise InvalidDomain(f"The rule `{rule}` has an empty label", domain=rule)
        labels.append(ascii_label)

    if is_exception:
        kind = RuleKind.EXCEPTION
    elif WILDCARD in labels:
        kind = RuleKind.WILDCARD
    else:
        kind = RuleKind.PLAIN
    return Rule(tuple(labels), kind, section, idna_options)


def parse_suffix_list(text: str, idna_options: IdnaOptions = IDNA2008) -> SuffixList:
    """Parse the raw suffix list text for its different designations of suffixes.

    Only rules between the `===BEGIN ...===` and `===END ...===` markers are
    read. Text without any markers gives an empty list.

    >>> suffix_list = parse_suffix_list(
    ...     "// ===BEGIN ICANN DOMAINS===\\ncom\\n*.ck\\n!www.ck\\n"
    ...     "// ===END ICANN DOMAINS===\\n"
    ... )
    >>> [rule.ascii for rule in suffix_list.icann]
    ['com', '*.ck', '!www.ck']
    """
    rules: dict[Section, list[Rule]] = {Section.ICANN: [], Section.PRIVATE: []}
    section: Section | None = None
    version = None

    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()

        match = SECTION_RE.match(line)
        if match:
            is_begin = match.group("marker") == "BEGIN"
            section = Section(match.group("section")) if is_begin else None
            continue

        if version is None:
            version_match = VERSION_RE.match(line)
            if version_match:
                version = version_match.group("version")
                continue

        if section is None or not line or line.startswith("//"):
            continue

        rule = line.split()[0]
        try:
            rules[section].append(parse_rule(rule, section, idna_options))
        except InvalidDomain as exc:
            raise UnableToLoadRules.due_to_invalid_rule(rule, line_number) from exc

    LOG.debug(
        "Parsed %s ICANN rules and %s PRIVATE rules (version %s)",
        len(rules[Section.ICANN]),
        len(rules[Section.PRIVATE]),
        version,
    )
    return SuffixList(
        icann=tuple(rules[Section.ICANN]),
        private=tuple(rules[Section.PRIVATE]),
        version=version,
        last_modified=_parse_version_date(version),
    )


def _parse_version_date(version: str | None) -> datetime | None:
    if version is None:
        return None
    try:
        return datetime.strptime(version, VERSION_DATE_FORMAT).replace(
            tzinfo=timezone.utc
        )
    except ValueError:
        LOG.debug("Suffix list version %s is not a timestamp", version)
        return None
