import random

import pytest

import huffman as huff
from errors import CorruptedDataError, EmptyInputError


def _codes(text):
    return dict(huff.generate_huffman_codes(huff.build_huffman_tree(huff.frequency_table(text))).by_symbol)


def test_frequency_table_first_occurrence_order():
    ft = huff.frequency_table("banana")
    assert ft == {"b": 1, "a": 3, "n": 2}
    assert list(ft) == ["b", "a", "n"]


def test_frequency_table_empty_input():
    with pytest.raises(EmptyInputError):
        huff.frequency_table("")


def test_build_tree_empty_table():
    with pytest.raises(EmptyInputError):
        huff.build_huffman_tree({})


def test_build_tree_weights_and_shape():
    root = huff.build_huffman_tree({"a": 3, "b": 2})
    assert root.frequency == 5
    assert root.symbol is None
    assert root.left.symbol == "b" and root.left.frequency == 2
    assert root.right.symbol == "a" and root.right.frequency == 3


def test_build_tree_single_symbol_is_leaf():
    root = huff.build_huffman_tree({"x": 7})
    assert root.is_leaf
    assert root.symbol == "x"
    assert root.frequency == 7


def test_nodes_are_immutable():
    root = huff.build_huffman_tree({"a": 1, "b": 1})
    with pytest.raises(AttributeError):
        root.left = None
    with pytest.raises(AttributeError):
        root.frequency = 10


def test_leaf_rejects_non_positive_weight():
    with pytest.raises(ValueError):
        huff.HuffmanNode.leaf("a", 0, 0)


def test_tie_break_prefers_earlier_insertion():
    assert _codes("ab") == {"a": "0", "b": "1"}
    assert _codes("ba") == {"b": "0", "a": "1"}


def test_codes_aaabb():
    assert _codes("aaabb") == {"b": "0", "a": "1"}


def test_codes_abracadabra():
    assert _codes("abracadabra") == {"a": "0", "c": "100", "d": "101", "b": "110", "r": "111"}


def test_code_table_order_is_depth_first():
    table = huff.generate_huffman_codes(huff.build_huffman_tree(huff.frequency_table("abracadabra")))
    assert [code for code, _ in table] == ["0", "100", "101", "110", "111"]


def test_single_symbol_gets_one_bit_code():
    assert _codes("xxxx") == {"x": "0"}


def test_codes_are_prefix_free_and_bijective():
    rng = random.Random(7)
    for _ in range(20):
        text = "".join(rng.choice("abcdefghijklmnopqrstuvwxyz0123456789") for _ in range(rng.randint(1, 300)))
        table = huff.generate_huffman_codes(huff.build_huffman_tree(huff.frequency_table(text)))
        codes = list(table.by_symbol.values())
        assert len(set(codes)) == len(codes) == len(set(text))
        for a in codes:
            assert a
            for b in codes:
                if a != b:
                    assert not b.startswith(a)
        for symbol, code in table.by_symbol.items():
            assert table.by_code[code] == symbol


def test_deep_skewed_tree_does_not_recurse():
    # Fibonacci weights build a maximally skewed tree
    weights = [1, 1]
    while len(weights) < 60:
        weights.append(weights[-1] + weights[-2])
    ft = {chr(0x100 + i): w for i, w in enumerate(weights)}
    table = huff.generate_huffman_codes(huff.build_huffman_tree(ft))
    assert len(table) == 60
    assert max(len(code) for code in table.by_symbol.values()) == 59


def test_code_table_is_read_only():
    table = huff.CodeTable([("0", "a"), ("1", "b")])
    with pytest.raises(TypeError):
        table.by_code["00"] = "c"
    with pytest.raises(TypeError):
        table.by_symbol["c"] = "00"


def test_encode_aaabb():
    table = huff.CodeTable([("0", "b"), ("1", "a")])
    assert huff.huffman_encode("aaabb", table) == "11100"


def test_decode_greedy():
    table = huff.CodeTable([("0", "a"), ("100", "c"), ("101", "d"), ("110", "b"), ("111", "r")])
    assert huff.huffman_decode("01101110100010101101110", table) == "abracadabra"


def test_decode_empty_bitstring():
    table = huff.CodeTable([("0", "a")])
    assert huff.huffman_decode("", table) == ""


def test_decode_dangling_suffix():
    table = huff.CodeTable([("0", "a"), ("10", "b"), ("11", "c")])
    with pytest.raises(CorruptedDataError):
        huff.huffman_decode("0101", table)


def test_decode_stops_once_window_exceeds_longest_code():
    table = huff.CodeTable([("00", "a"), ("01", "b")])
    with pytest.raises(CorruptedDataError) as excinfo:
        huff.huffman_decode("00" + "1" * 10000, table)
    assert "offset 2" in str(excinfo.value)
