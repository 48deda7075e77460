import heapq
import logging
from types import MappingProxyType

from errors import CorruptedDataError, EmptyInputError

logger = logging.getLogger(__name__)


class HuffmanNode: # Node for Huffman tree, immutable once built
    __slots__ = ("symbol", "frequency", "order", "left", "right")

    def __init__(self, symbol, frequency, order, left=None, right=None):
        object.__setattr__(self, "symbol", symbol)       # str for leaves, None for internal nodes
        object.__setattr__(self, "frequency", frequency)
        object.__setattr__(self, "order", order)         # insertion number, breaks weight ties
        object.__setattr__(self, "left", left)
        object.__setattr__(self, "right", right)

    def __setattr__(self, name, value):
        raise AttributeError(f"HuffmanNode is immutable, cannot set {name!r}")

    def __lt__(self, other):
        return (self.frequency, self.order) < (other.frequency, other.order) # heapq pops lowest weight, then oldest

    @property
    def is_leaf(self):
        return self.left is None

    @classmethod
    def leaf(cls, symbol, frequency, order):
        if frequency < 1:
            raise ValueError(f"leaf frequency must be positive, got {frequency}")
        return cls(symbol, frequency, order)

    @classmethod
    def merge(cls, left, right, order):
        return cls(None, left.frequency + right.frequency, order, left, right)


class CodeTable:
    """
    Bijective, read-only mapping between symbols and their binary codes

    Built either from a freshly derived tree or from a validated container,
    lookups go both ways and neither side can be modified afterwards
    """

    __slots__ = ("_by_symbol", "_by_code")

    def __init__(self, pairs):
        by_symbol = {}
        by_code = {}
        for code, symbol in pairs:
            by_symbol[symbol] = code
            by_code[code] = symbol
        self._by_symbol = MappingProxyType(by_symbol)
        self._by_code = MappingProxyType(by_code)

    @property
    def by_symbol(self):
        return self._by_symbol

    @property
    def by_code(self):
        return self._by_code

    def __len__(self):
        return len(self._by_code)

    def __iter__(self): # yields (code, symbol) in table order
        return iter(self._by_code.items())

    def __eq__(self, other):
        if not isinstance(other, CodeTable):
            return NotImplemented
        return dict(self._by_code) == dict(other._by_code)

    def __repr__(self):
        return f"CodeTable({dict(self._by_symbol)!r})"


def frequency_table(text): # text: input symbols, returns dict of symbol -> frequency in first-occurrence order
    if not text:
        raise EmptyInputError("cannot build a frequency table from empty input")
    ft = {}
    for symbol in text:
        ft[symbol] = ft.get(symbol, 0) + 1
    return ft


def build_huffman_tree(frequency_table): # frequency_table: dict of symbol -> frequency
    if not frequency_table:
        raise EmptyInputError("cannot build a Huffman tree without symbols")

    priority_queue = [HuffmanNode.leaf(symbol, frequency, order)
                      for order, (symbol, frequency) in enumerate(frequency_table.items())]
    heapq.heapify(priority_queue)
    next_order = len(priority_queue)

    # Build the tree, first popped node goes left
    while len(priority_queue) > 1:
        left = heapq.heappop(priority_queue)
        right = heapq.heappop(priority_queue)
        heapq.heappush(priority_queue, HuffmanNode.merge(left, right, next_order))
        next_order += 1

    logger.debug("built Huffman tree: %d leaves, %d nodes", len(frequency_table), next_order)
    return priority_queue[0] # root of the tree


def generate_huffman_codes(root): # root: root of the Huffman tree, returns a CodeTable
    # Single symbol alphabet -> the root is a leaf and would get an empty code
    if root.is_leaf:
        return CodeTable([("0", root.symbol)])

    pairs = []
    stack = [(root, "")]
    while stack:
        node, current_code = stack.pop()
        if node.is_leaf:
            pairs.append((current_code, node.symbol))
            continue
        # right is pushed first so the left subtree is emitted first
        stack.append((node.right, current_code + "1"))
        stack.append((node.left, current_code + "0"))

    return CodeTable(pairs)


def huffman_encode(text, code_table): # text: input symbols, code_table: CodeTable
    codes = code_table.by_symbol
    return "".join(codes[symbol] for symbol in text)


def huffman_decode(bitstring, code_table): # bitstring: the encoded string of '0's and '1's, code_table: validated CodeTable
    symbols = code_table.by_code
    longest = max((len(code) for code in symbols), default=0)
    decoded = []
    start = 0
    for end in range(1, len(bitstring) + 1):
        symbol = symbols.get(bitstring[start:end])
        if symbol is not None: # a prefix-free table matches at most one code per boundary
            decoded.append(symbol)
            start = end
        elif end - start >= longest:
            raise CorruptedDataError(
                f"no code matches the bits at offset {start}")

    if start != len(bitstring):
        raise CorruptedDataError(
            f"encoded bit-string has {len(bitstring) - start} unmatched trailing bits")

    logger.debug("decoded %d symbols from %d bits", len(decoded), len(bitstring))
    return "".join(decoded)
