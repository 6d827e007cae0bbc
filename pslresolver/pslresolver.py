"""`pslresolver` splits a domain name into its public suffix, registrable domain, and subdomain.

It does this via the Public Suffix List (PSL), loaded from text the caller
supplies.

    >>> rules = Rules.from_string(
    ...     "// ===BEGIN ICANN DOMAINS===\\ncom\\nuk\\nco.uk\\nio\\n"
    ...     "// ===END ICANN DOMAINS===\\n"
    ...     "// ===BEGIN PRIVATE DOMAINS===\\ngithub.io\\n"
    ...     "// ===END PRIVATE DOMAINS===\\n"
    ... )

    >>> rules.resolve("forums.bbc.co.uk")
    ResolvedDomain(domain='forums.bbc.co.uk', public_suffix='co.uk', suffix_type='ICANN')

    >>> rules.resolve("pages.github.io")
    ResolvedDomain(domain='pages.github.io', public_suffix='github.io', suffix_type='PRIVATE')

    >>> rules.resolve("pages.github.io", Section.ICANN)
    ResolvedDomain(domain='pages.github.io', public_suffix='io', suffix_type='ICANN')

Domains no rule covers fall back to the implicit `*` rule: their last label
is the public suffix, of unknown provenance.

    >>> rules.resolve("google.notavalidsuffix")
    ResolvedDomain(domain='google.notavalidsuffix', public_suffix='notavalidsuffix', suffix_type='UNKNOWN')

    >>> rules.resolve("127.0.0.1")
    ResolvedDomain(domain='127.0.0.1', public_suffix=None, suffix_type='NOT_APPLICABLE')
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import datetime
from types import MappingProxyType
from typing import Any

from .domain import Domain
from .exceptions import InvalidDomain, UnableToLoadRules, UnableToResolveDomain
from .labels import IDNA2008, IdnaOptions
from .resolved import DomainLike, ResolvedDomain, Section, SuffixType, as_domain
from .suffix_list import (
    WILDCARD,
    Rule,
    RuleKind,
    SuffixList,
    parse_suffix_list,
)

LOG = logging.getLogger("pslresolver")

ICANN_DOMAINS = "ICANN_DOMAINS"
PRIVATE_DOMAINS = "PRIVATE_DOMAINS"

EXCEPTION_KEY = "!"
END_KEY = "$"


class Trie:
    """Trie for storing public suffix rules with their labels in reverse-order."""

    def __init__(
        self,
        matches: dict[str, Trie] | None = None,
        end: bool = False,
        is_exception: bool = False,
    ) -> None:
        self.matches: Mapping[str, Trie] = matches if matches else {}
        self.end = end
        self.is_exception = is_exception

    @staticmethod
    def from_rules(rules: Iterable[Rule]) -> Trie:
        """Create a frozen Trie from parsed rules and return its root node."""
        root_node = Trie()

        for rule in rules:
            root_node.add_labels(rule.labels, rule.kind is RuleKind.EXCEPTION)

        return root_node.freeze()

    @property
    def is_frozen(self) -> bool:
        return isinstance(self.matches, MappingProxyType)

    def add_labels(self, labels: Sequence[str], is_exception: bool = False) -> None:
        """Append TLD-first labels to this Trie node.

        Raises `TypeError` once the node is frozen.
        """
        if self.is_frozen:
            raise TypeError("A frozen Trie cannot be changed")

        node = self
        for label in labels:
            if label not in node.matches:
                node.matches[label] = Trie()  # type: ignore[index]
            node = node.matches[label]

        if is_exception:
            node.is_exception = True
        else:
            node.end = True

    def freeze(self) -> Trie:
        """Make this node and every node under it read-only."""
        for child in self.matches.values():
            child.freeze()
        if not self.is_frozen:
            self.matches = MappingProxyType(dict(self.matches))
        return self

    def suffix_length(self, labels: Sequence[str]) -> int:
        """Return how many of the TLD-first labels the prevailing rule covers.

        The longest matching rule wins, whether it matched through plain or
        wildcard labels. A matching exception rule beats every other rule and
        covers one label less than itself. Returns 0 when nothing matches.
        """
        longest = exception = 0
        stack: list[tuple[Trie, int]] = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            if node.end:
                longest = max(longest, depth)
            if node.is_exception:
                exception = max(exception, depth - 1)
            if depth == len(labels):
                continue

            for key in (labels[depth], WILDCARD):
                child = node.matches.get(key)
                if child is not None:
                    stack.append((child, depth + 1))

        return exception or longest

    def iter_rules(
        self, prefix: tuple[str, ...] = ()
    ) -> Iterator[tuple[tuple[str, ...], bool]]:
        """Yield each stored rule as its TLD-first labels and exception flag."""
        if self.end:
            yield prefix, False
        if self.is_exception:
            yield prefix, True
        for label in sorted(self.matches):
            yield from self.matches[label].iter_rules(prefix + (label,))

    def to_dict(self) -> dict[str, Any]:
        tree: dict[str, Any] = {
            label: child.to_dict() for label, child in sorted(self.matches.items())
        }
        if self.is_exception:
            tree[EXCEPTION_KEY] = ""
        if self.end:
            tree[END_KEY] = ""
        return tree

    @staticmethod
    def from_dict(tree: Mapping[str, Any] | list[Any]) -> Trie:
        """Rebuild a frozen Trie from `to_dict` output.

        Trees without any `"$"` key use the older layout, where every node
        which is not an exception ends a rule. An empty JSON array stands
        for an empty tree.
        """
        implicit_ends = not Trie._has_end_key(tree)
        return Trie._from_dict(tree, implicit_ends).freeze()

    @staticmethod
    def _has_end_key(tree: Any) -> bool:
        if not isinstance(tree, Mapping):
            return False
        return END_KEY in tree or any(
            Trie._has_end_key(child) for child in tree.values()
        )

    @staticmethod
    def _from_dict(tree: Mapping[str, Any] | list[Any], implicit_ends: bool) -> Trie:
        if isinstance(tree, list) and not tree:
            return Trie()
        if not isinstance(tree, Mapping):
            raise TypeError(f"expected a mapping, got {type(tree).__name__}")

        node = Trie()
        for label, subtree in tree.items():
            if label == EXCEPTION_KEY:
                node.is_exception = True
            elif label == END_KEY:
                node.end = True
            else:
                child = Trie._from_dict(subtree, implicit_ends)
                if implicit_ends and not child.is_exception:
                    child.end = True
                node.matches[str(label)] = child  # type: ignore[index]
        return node


class Rules:
    """An immutable Public Suffix List rule set, split in ICANN and PRIVATE sections."""

    def __init__(
        self,
        icann: Trie,
        private: Trie,
        version: str | None = None,
        last_modified: datetime | None = None,
        idna_options: IdnaOptions = IDNA2008,
    ) -> None:
        self._icann = icann.freeze()
        self._private = private.freeze()
        self.version = version
        self.last_modified = last_modified
        self.idna_options = idna_options

    @classmethod
    def from_suffix_list(
        cls, suffix_list: SuffixList, idna_options: IdnaOptions = IDNA2008
    ) -> Rules:
        return cls(
            Trie.from_rules(suffix_list.icann),
            Trie.from_rules(suffix_list.private),
            version=suffix_list.version,
            last_modified=suffix_list.last_modified,
            idna_options=idna_options,
        )

    @classmethod
    def from_string(cls, text: str, idna_options: IdnaOptions = IDNA2008) -> Rules:
        """Load rules from Public Suffix List text.

        Raises `UnableToLoadRules` if a rule line is malformed.
        """
        return cls.from_suffix_list(parse_suffix_list(text, idna_options), idna_options)

    @classmethod
    def from_path(
        cls,
        path: str | os.PathLike[str],
        encoding: str = "utf-8",
        idna_options: IdnaOptions = IDNA2008,
    ) -> Rules:
        """Load rules from a Public Suffix List file on disk."""
        try:
            with open(path, encoding=encoding) as suffix_list_file:
                text = suffix_list_file.read()
        except (OSError, UnicodeError) as exc:
            raise UnableToLoadRules.due_to_unreadable_path(path) from exc

        rules = cls.from_string(text, idna_options)
        if rules.is_empty:
            LOG.warning("No Public Suffix List rules found in %s", path)
        return rules

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], idna_options: IdnaOptions = IDNA2008
    ) -> Rules:
        """Load rules serialized by `to_dict`."""
        tries = []
        for section in (ICANN_DOMAINS, PRIVATE_DOMAINS):
            try:
                tries.append(Trie.from_dict(data.get(section, {})))
            except (TypeError, AttributeError) as exc:
                raise UnableToLoadRules.due_to_invalid_tree(section) from exc

        last_modified = data.get("last_modified")
        try:
            modified_at = datetime.fromisoformat(last_modified) if last_modified else None
        except (TypeError, ValueError) as exc:
            raise UnableToLoadRules(
                f"The serialized last modified date `{last_modified}` is invalid"
            ) from exc

        return cls(
            *tries,
            version=data.get("version"),
            last_modified=modified_at,
            idna_options=idna_options,
        )

    @classmethod
    def from_json(cls, text: str, idna_options: IdnaOptions = IDNA2008) -> Rules:
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise UnableToLoadRules("The serialized rules are not valid JSON") from exc
        if not isinstance(data, Mapping):
            raise UnableToLoadRules("The serialized rules are not a JSON object")
        return cls.from_dict(data, idna_options)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible primitives.

        Each section is a tree keyed by ASCII label. The `"!"` key marks an
        exception rule and the `"$"` key marks where a plain or wildcard rule
        ends.
        """
        return {
            ICANN_DOMAINS: self._icann.to_dict(),
            PRIVATE_DOMAINS: self._private.to_dict(),
            "version": self.version,
            "last_modified": (
                self.last_modified.isoformat() if self.last_modified else None
            ),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, ensure_ascii=False)

    @property
    def is_empty(self) -> bool:
        return not (self._icann.matches or self._private.matches)

    def iter_rules(self, section: Section | str = Section.ANY) -> Iterator[Rule]:
        """Yield the stored rules, ICANN ones first."""
        section = Section.coerce(section)
        for trie_section, trie in (
            (Section.ICANN, self._icann),
            (Section.PRIVATE, self._private),
        ):
            if section not in (Section.ANY, trie_section):
                continue
            for labels, is_exception in trie.iter_rules():
                if is_exception:
                    kind = RuleKind.EXCEPTION
                elif WILDCARD in labels:
                    kind = RuleKind.WILDCARD
                else:
                    kind = RuleKind.PLAIN
                yield Rule(labels, kind, trie_section, self.idna_options)

    def resolve(
        self, domain: DomainLike, section: Section | str = Section.ANY
    ) -> ResolvedDomain:
        """Resolve a domain's public suffix.

        Never raises for a bad domain. Malformed input gives a
        `SuffixType.INVALID` result carrying the error, and domains which
        cannot carry a suffix give `SuffixType.NOT_APPLICABLE`.

        Raises `UnableToResolveDomain` only for an unknown `section`.
        """
        section = Section.coerce(section)
        try:
            parsed = as_domain(domain, self.idna_options)
        except InvalidDomain as exc:
            LOG.debug("Unable to resolve %r: %s", domain, exc)
            return ResolvedDomain.invalid(domain, exc, self.idna_options)

        if not parsed.is_resolvable:
            return ResolvedDomain.not_applicable(parsed, self.idna_options)
        return self._resolve(parsed, section)

    def get_cookie_domain(self, domain: DomainLike) -> ResolvedDomain:
        """Resolve against every rule, as browsers do to scope cookies.

        Raises `InvalidDomain` for malformed input and `UnableToResolveDomain`
        for domains which cannot carry a suffix.
        """
        return self._resolve(self._resolvable_domain(domain), Section.ANY)

    def get_icann_domain(self, domain: DomainLike) -> ResolvedDomain:
        """Resolve against ICANN rules only, failing if none match."""
        return self._strict_resolve(domain, Section.ICANN)

    def get_private_domain(self, domain: DomainLike) -> ResolvedDomain:
        """Resolve against PRIVATE rules only, failing if none match."""
        return self._strict_resolve(domain, Section.PRIVATE)

    def _strict_resolve(self, domain: DomainLike, section: Section) -> ResolvedDomain:
        parsed = self._resolvable_domain(domain)
        resolved = self._resolve(parsed, section)
        if not resolved.is_known:
            raise UnableToResolveDomain.due_to_missing_suffix(parsed, section.value)
        return resolved

    def _resolvable_domain(self, domain: DomainLike) -> Domain:
        parsed = as_domain(domain, self.idna_options)
        if not parsed.is_resolvable:
            raise UnableToResolveDomain.due_to_unresolvable_domain(parsed)
        return parsed

    def _resolve(self, domain: Domain, section: Section) -> ResolvedDomain:
        labels = domain.ascii_labels[::-1]

        icann_length = self._icann.suffix_length(labels)
        if section is Section.ICANN:
            if icann_length:
                return ResolvedDomain(domain, icann_length, SuffixType.ICANN)
            return ResolvedDomain(domain, 1, SuffixType.UNKNOWN)

        private_length = self._private.suffix_length(labels)
        if private_length > icann_length:
            return ResolvedDomain(domain, private_length, SuffixType.PRIVATE)
        if section is Section.ANY and icann_length:
            return ResolvedDomain(domain, icann_length, SuffixType.ICANN)
        return ResolvedDomain(domain, 1, SuffixType.UNKNOWN)


class SuffixResolver:
    """A callable resolving domains against the current rule set.

    The rule set can be replaced at any time. Calls already running keep the
    rule set they started with.
    """

    def __init__(self, rules: Rules, section: Section | str = Section.ANY) -> None:
        self.section = Section.coerce(section)
        self._rules = rules

    @property
    def rules(self) -> Rules:
        return self._rules

    def __call__(
        self, domain: DomainLike, section: Section | str | None = None
    ) -> ResolvedDomain:
        """Alias for `resolve`."""
        return self.resolve(domain, section)

    def resolve(
        self, domain: DomainLike, section: Section | str | None = None
    ) -> ResolvedDomain:
        rules = self._rules
        return rules.resolve(domain, self.section if section is None else section)

    def update(self, rules: Rules) -> None:
        """Swap in a fully built rule set."""
        self._rules = rules
        LOG.info("Public Suffix List rules updated to version %s", rules.version)

    def update_from_string(self, text: str) -> Rules:
        """Parse Public Suffix List text, then swap it in.

        On a parse error the current rules stay in place.
        """
        rules = Rules.from_string(text, self._rules.idna_options)
        self.update(rules)
        return rules
