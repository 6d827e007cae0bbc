"""Trie tests."""

from itertools import permutations

import pytest

from pslresolver.pslresolver import Trie
from pslresolver.suffix_list import parse_rule


def make_trie(*rules: str) -> Trie:
    return Trie.from_rules(parse_rule(rule) for rule in rules)


def test_nested_dict() -> None:
    """Test Trie class, built from a list of dot-delimited strings."""
    suffixes = ["a", "d.a", "b.a", "c.b.a", "c", "b.c", "f.d"]
    for suffixes_sequence in permutations(suffixes):
        trie = Trie()
        for suffix in suffixes_sequence:
            trie.add_labels(parse_rule(suffix).labels)
        # check each nested value
        # Top level c
        assert "c" in trie.matches
        top_c = trie.matches["c"]
        assert len(top_c.matches) == 1
        assert "b" in top_c.matches
        assert top_c.end
        # Top level a
        assert "a" in trie.matches
        top_a = trie.matches["a"]
        assert len(top_a.matches) == 2
        #  a -> d
        assert "d" in top_a.matches
        a_to_d = top_a.matches["d"]
        assert not a_to_d.matches
        #  a -> b
        assert "b" in top_a.matches
        a_to_b = top_a.matches["b"]
        assert a_to_b.end
        assert len(a_to_b.matches) == 1
        #  a -> b -> c
        assert "c" in a_to_b.matches
        a_to_b_to_c = a_to_b.matches["c"]
        assert not a_to_b_to_c.matches
        assert top_a.end
        #  d -> f
        assert "d" in trie.matches
        top_d = trie.matches["d"]
        assert not top_d.end
        assert "f" in top_d.matches
        d_to_f = top_d.matches["f"]
        assert d_to_f.end
        assert not d_to_f.matches


def test_exception_rules() -> None:
    """Test exception rules mark their node without ending a rule there."""
    trie = make_trie("*.ck", "!www.ck")
    top_ck = trie.matches["ck"]
    assert not top_ck.end
    assert top_ck.matches["*"].end
    www = top_ck.matches["www"]
    assert www.is_exception
    assert not www.end


def test_frozen_trie_is_read_only() -> None:
    """Test a built Trie cannot be changed afterwards."""
    trie = make_trie("com")
    with pytest.raises(TypeError):
        trie.add_labels(["net"])
    with pytest.raises(TypeError):
        trie.matches["com"].add_labels(["example"])
    with pytest.raises(TypeError):
        trie.add_labels(["com"], is_exception=True)
    assert not trie.matches["com"].is_exception
    assert trie.is_frozen


def test_from_dict_converter_layout() -> None:
    """Test trees without rule end keys treat every non exception node as a rule."""
    trie = Trie.from_dict({"ck": {"*": [], "www": {"!": ""}}, "uk": {"co": []}})

    assert trie.matches["uk"].end
    assert trie.matches["uk"].matches["co"].end
    assert not trie.matches["ck"].matches["www"].end
    assert trie.suffix_length(["uk", "co", "example"]) == 2
    assert trie.suffix_length(["ck", "www"]) == 1
    assert trie.suffix_length(["ck", "test", "a"]) == 2


def test_suffix_length() -> None:
    """Test the longest rule wins, wildcards included, and exceptions win outright."""
    trie = make_trie("jp", "kyoto.jp", "ide.kyoto.jp", "*.kobe.jp", "!city.kobe.jp")

    assert trie.suffix_length(["jp", "kyoto", "ide", "b"]) == 3
    assert trie.suffix_length(["jp", "kyoto", "other"]) == 2
    assert trie.suffix_length(["jp", "kobe", "c", "b"]) == 3
    assert trie.suffix_length(["jp", "kobe", "city", "www"]) == 2
    assert trie.suffix_length(["jp"]) == 1
    assert trie.suffix_length(["com", "example"]) == 0


def test_suffix_length_prefers_longest_branch() -> None:
    """Test a deeper plain rule beside a wildcard still wins."""
    trie = make_trie("test", "*.wild.test", "deep.a.wild.test")

    assert trie.suffix_length(["test", "wild", "a", "deep", "x"]) == 4
    assert trie.suffix_length(["test", "wild", "b", "x"]) == 3
    assert trie.suffix_length(["test", "other"]) == 1


def test_dict_round_trip() -> None:
    """Test serialized tries keep their rule ends and exceptions."""
    trie = make_trie("uk", "co.uk", "*.ck", "!www.ck")
    tree = trie.to_dict()

    assert tree == {
        "ck": {"*": {"$": ""}, "www": {"!": ""}},
        "uk": {"$": "", "co": {"$": ""}},
    }
    assert Trie.from_dict(tree).to_dict() == tree
    assert Trie.from_dict([]).to_dict() == {}


def test_iter_rules() -> None:
    """Test stored rules come back out, TLD first."""
    trie = make_trie("uk", "co.uk", "!www.ck")

    assert sorted(trie.iter_rules()) == [
        (("ck", "www"), True),
        (("uk",), False),
        (("uk", "co"), False),
    ]
