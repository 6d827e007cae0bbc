"""Test resolving in parallel while the rule set is swapped out."""

from __future__ import annotations

import logging
from multiprocessing.pool import ThreadPool

import pytest
import pytest_mock

from pslresolver import Rules, Section, SuffixResolver, SuffixType, UnableToLoadRules

OLD_LIST = """\
// VERSION: 2024-01-01_00-00-00_UTC
// ===BEGIN ICANN DOMAINS===
uk
// ===END ICANN DOMAINS===
"""

NEW_LIST = """\
// VERSION: 2024-02-01_00-00-00_UTC
// ===BEGIN ICANN DOMAINS===
uk
co.uk
// ===END ICANN DOMAINS===
"""


def test_concurrent_resolution_during_update() -> None:
    """Ensure every result comes from one whole rule set, old or new."""
    resolver = SuffixResolver(Rules.from_string(OLD_LIST))
    new_rules = Rules.from_string(NEW_LIST)

    def resolve(index: int) -> int:
        if index == 50:
            resolver.update(new_rules)
        return resolver("www.example.co.uk").suffix_length

    with ThreadPool(processes=4) as pool:
        suffix_lengths = pool.map(resolve, range(200))

    assert set(suffix_lengths) <= {1, 2}
    assert resolver.rules is new_rules
    assert resolver("www.example.co.uk").suffix_length == 2


def test_default_section() -> None:
    """Test the resolver's section applies unless a call overrides it."""
    rules = Rules.from_string(
        "// ===BEGIN ICANN DOMAINS===\nio\n// ===END ICANN DOMAINS===\n"
        "// ===BEGIN PRIVATE DOMAINS===\ngithub.io\n// ===END PRIVATE DOMAINS===\n"
    )
    resolver = SuffixResolver(rules, section="icann")

    assert resolver.section is Section.ICANN
    assert resolver("a.github.io").suffix_type is SuffixType.ICANN
    assert resolver("a.github.io", Section.ANY).suffix_type is SuffixType.PRIVATE


def test_update_from_string_logs(mocker: pytest_mock.MockerFixture) -> None:
    """Test a successful swap is logged with the new version."""
    mock_info = mocker.patch.object(logging.getLogger("pslresolver"), "info")
    resolver = SuffixResolver(Rules.from_string(OLD_LIST))

    rules = resolver.update_from_string(NEW_LIST)

    assert resolver.rules is rules
    mock_info.assert_called_once()
    assert "2024-02-01_00-00-00_UTC" in mock_info.call_args.args


def test_failed_update_keeps_rules() -> None:
    """Test a list which fails to parse leaves the current rules in place."""
    old_rules = Rules.from_string(OLD_LIST)
    resolver = SuffixResolver(old_rules)

    with pytest.raises(UnableToLoadRules):
        resolver.update_from_string(
            "// ===BEGIN ICANN DOMAINS===\nc*o.uk\n// ===END ICANN DOMAINS===\n"
        )
    assert resolver.rules is old_rules
