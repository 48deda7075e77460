"""
Textual container for Huffman-encoded text

Layout, one item per line:

    <entry_count>
    <code_1>=<symbol_1>
    ...
    <code_n>=<symbol_n>
    <encoded_bit_string>

Parsing and validation are separate steps: parse_container only checks the
line structure, validate_table enforces the code table invariants before
anything is decoded
"""

import logging
import re
from typing import List, Tuple

import huffman as huff
from errors import (
    CorruptedDataError,
    MalformedContainerError,
    ResourceExhaustionError,
    UnsupportedSymbolError,
)

logger = logging.getLogger(__name__)

OUTPUT_FILENAME = "encoded.dat"
SEPARATOR = "="
LINE_BREAKS = frozenset("\r\n") # universal newlines would fold these into line ends

_COUNT_RE = re.compile(r"[0-9]+")
_BINARY_RE = re.compile(r"[01]*")


# Serializer

def write_container(text: str, code_table: huff.CodeTable) -> str:
    lines = [str(len(code_table))]
    for code, symbol in code_table:
        lines.append(f"{code}{SEPARATOR}{symbol}")
    lines.append(huff.huffman_encode(text, code_table))
    return "\n".join(lines) + "\n"


def parse_container(data: str) -> Tuple[List[Tuple[str, str]], str]:
    """
    Split container text into raw (code, symbol) pairs and the raw bit-string
    No semantic checks happen here, see validate_table
    """
    if data.endswith("\n"):
        data = data[:-1] # terminator of the bit-string line
    lines = data.split("\n")

    count_line = lines[0]
    if not _COUNT_RE.fullmatch(count_line):
        raise MalformedContainerError(f"entry count is not a non-negative integer: {count_line!r}")
    count = int(count_line)

    if len(lines) < count + 2:
        raise MalformedContainerError(
            f"container announces {count} entries but is missing lines")

    pairs: List[Tuple[str, str]] = []
    for lineno, line in enumerate(lines[1:count + 1], start=2):
        # split on the first separator only, '=' is itself a valid symbol
        code, sep, symbol = line.partition(SEPARATOR)
        if not sep:
            raise MalformedContainerError(f"line {lineno}: missing {SEPARATOR!r} separator")
        if len(symbol) != 1:
            raise MalformedContainerError(
                f"line {lineno}: symbol field must be exactly one character, got {symbol!r}")
        pairs.append((code, symbol))

    bitstring = lines[count + 1]
    if any(rest for rest in lines[count + 2:]):
        raise MalformedContainerError("unexpected data after the encoded bit-string")

    return pairs, bitstring


# Validator

def _ensure_binary_string(value: str, what: str) -> None:
    if not _BINARY_RE.fullmatch(value):
        raise CorruptedDataError(f"{what} is not a binary string: {value!r}")


def validate_table(pairs: List[Tuple[str, str]], bitstring: str) -> huff.CodeTable:
    seen_codes = set()
    seen_symbols = set()
    for code, symbol in pairs:
        if not code:
            raise CorruptedDataError(f"empty code for symbol {symbol!r}")
        _ensure_binary_string(code, "code")
        if code in seen_codes:
            raise CorruptedDataError(f"duplicate code {code!r}")
        if symbol in seen_symbols:
            raise CorruptedDataError(f"symbol {symbol!r} is bound to more than one code")
        seen_codes.add(code)
        seen_symbols.add(symbol)
    _ensure_binary_string(bitstring, "encoded bit-string")

    # After sorting, a code that prefixes any other code also prefixes its successor
    ordered = sorted(seen_codes)
    for shorter, longer in zip(ordered, ordered[1:]):
        if longer.startswith(shorter):
            raise CorruptedDataError(f"code {shorter!r} is a prefix of code {longer!r}")

    return huff.CodeTable(pairs)


# High level encode / decode

def build_code_table(text: str) -> huff.CodeTable:
    bad = LINE_BREAKS.intersection(text)
    if bad:
        raise UnsupportedSymbolError(
            f"line-break symbols cannot be stored in the container: {sorted(bad)!r}")
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        # lone surrogates, e.g. from input() under surrogateescape
        raise UnsupportedSymbolError(
            f"symbol {text[exc.start]!r} cannot be stored as UTF-8") from exc

    ft = huff.frequency_table(text)
    try:
        root = huff.build_huffman_tree(ft)
        code_table = huff.generate_huffman_codes(root)
    except (MemoryError, RecursionError) as exc:
        raise ResourceExhaustionError(
            f"ran out of resources building codes for {len(ft)} symbols") from exc
    logger.debug("derived %d codes for %d input symbols", len(code_table), len(text))
    return code_table


def encode_text(text: str) -> str:
    code_table = build_code_table(text)
    try:
        return write_container(text, code_table)
    except MemoryError as exc:
        raise ResourceExhaustionError(
            f"ran out of memory encoding {len(text)} symbols") from exc


def decode_text(data: str) -> str:
    pairs, bitstring = parse_container(data)
    code_table = validate_table(pairs, bitstring)
    return huff.huffman_decode(bitstring, code_table)


def save_container(data: str, path=OUTPUT_FILENAME) -> None:
    # encode before opening so a failure leaves an existing artifact untouched
    try:
        payload = data.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise UnsupportedSymbolError(f"container text is not encodable as UTF-8: {exc}") from exc
    with open(path, "wb") as f:
        f.write(payload)


def load_container(path=OUTPUT_FILENAME) -> str:
    with open(path, "r", encoding="utf-8") as f:
        try:
            return f.read()
        except UnicodeDecodeError as exc:
            raise MalformedContainerError(f"container is not valid UTF-8: {exc}") from exc


def encode_to_file(text: str, path=OUTPUT_FILENAME) -> None:
    data = encode_text(text)
    save_container(data, path)
    logger.info("wrote %d characters of container to %s", len(data), path)


def decode_from_file(path=OUTPUT_FILENAME) -> str:
    return decode_text(load_container(path))
