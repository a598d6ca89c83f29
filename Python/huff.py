#Brad Arrington
import heapq
import io
from typing import List, Optional

from bitio import CompressorBitio

BITS_PER_WORD = 8
BITS_PER_INT = 32
ALPH_SIZE = 1 << BITS_PER_WORD
END_OF_STREAM = ALPH_SIZE
SYMBOL_BITS = BITS_PER_WORD + 1
HUFF_NUMBER = 0xFACE8200
HUFF_TREE = HUFF_NUMBER | 1
# Deepest leaf possible in a tree of ALPH_SIZE + 1 leaves
MAX_TREE_DEPTH = ALPH_SIZE
COMPRESSION_NAME = "static order 0 model with Huffman coding and tree header"
USAGE = "infile outfile [-d]\n\nSpecifying -d will dump the modeling data\n"


class HuffException(Exception):
    pass


class InvalidMagicNumber(HuffException):
    pass


class MalformedHeader(HuffException):
    pass


class TruncatedStream(HuffException):
    pass


class Node:
    def __init__(self, count: int = 0):
        self.count = count
        self.child_0 = 0
        self.child_1 = 0


class Code:
    def __init__(self):
        self.code = 0
        self.code_bits = 0

    def __str__(self):
        return f"{self.code:0{self.code_bits}b}" if self.code_bits else ""


def new_nodes() -> List[Node]:
    """Leaf slots for every symbol; internal nodes are appended after them."""
    return [Node() for _ in range(END_OF_STREAM + 1)]


def is_leaf(node: int) -> bool:
    return node <= END_OF_STREAM


def dump_requested(args) -> bool:
    dump = False
    for arg in args:
        if arg == "-d":
            dump = True
        else:
            print(f"Unused argument: {arg}")
    return dump


def compress_file(input_bit_file: 'CompressorBitio.BitFile', output_bit_file: 'CompressorBitio.BitFile',
                  args=()):
    try:
        counts = count_bytes(input_bit_file)
        nodes = new_nodes()
        for symbol, count in enumerate(counts):
            nodes[symbol].count = count
        root_node = build_tree(nodes)
        codes = make_codes(nodes, root_node)

        if dump_requested(args):
            print_model(nodes, codes, root_node)

        output_bit_file.output_bits(HUFF_TREE, BITS_PER_INT)
        write_header(output_bit_file, nodes, root_node)

        input_bit_file.rewind()
        compress_data(input_bit_file, output_bit_file, codes)
    finally:
        output_bit_file.close_bit_file()


def expand_file(input_bit_file: 'CompressorBitio.BitFile', output_bit_file: 'CompressorBitio.BitFile',
                args=()):
    try:
        try:
            magic = input_bit_file.input_bits(BITS_PER_INT)
        except EOFError as e:
            raise InvalidMagicNumber("input too short to hold a magic number") from e
        if magic != HUFF_TREE:
            raise InvalidMagicNumber(f"invalid magic number {magic:#010x}")

        nodes = new_nodes()
        root_node = read_header(input_bit_file, nodes)

        if dump_requested(args):
            print_model(nodes, None, root_node)

        expand_data(input_bit_file, output_bit_file, nodes, root_node)
    finally:
        output_bit_file.close_bit_file()


def compress_bytes(data: bytes) -> bytes:
    output = io.BytesIO()
    compress_file(CompressorBitio.BitFile(io.BytesIO(data), True, pacifier=False),
                  CompressorBitio.BitFile(output, False, pacifier=False))
    return output.getvalue()


def expand_bytes(data: bytes) -> bytes:
    output = io.BytesIO()
    expand_file(CompressorBitio.BitFile(io.BytesIO(data), True, pacifier=False),
                CompressorBitio.BitFile(output, False, pacifier=False))
    return output.getvalue()


def count_bytes(input_bit_file) -> List[int]:
    counts = [0] * (END_OF_STREAM + 1)
    while True:
        try:
            c = input_bit_file.input_bits(BITS_PER_WORD)
        except EOFError:
            break
        counts[c] += 1

    # Never read from the input, always coded once at the end
    counts[END_OF_STREAM] = 1
    return counts


def build_tree(nodes: List[Node]) -> int:
    """Merge the two lightest nodes until one is left and return its index.

    Equal weights are broken by the lower node index: leaves in symbol
    order come first, then internal nodes in the order they were made.
    The first node popped becomes child_0.
    """
    heap = [(nodes[i].count, i) for i in range(END_OF_STREAM + 1) if nodes[i].count > 0]
    if not heap:
        raise HuffException("no symbols with a positive count")
    heapq.heapify(heap)

    while len(heap) > 1:
        count_0, min_1 = heapq.heappop(heap)
        count_1, min_2 = heapq.heappop(heap)

        node = Node(count_0 + count_1)
        node.child_0 = min_1
        node.child_1 = min_2
        nodes.append(node)
        heapq.heappush(heap, (node.count, len(nodes) - 1))

    return heap[0][1]


def convert_tree_to_code(nodes, codes, code_so_far, bits, node):
    if is_leaf(node):
        codes[node].code = code_so_far
        codes[node].code_bits = bits
        return

    code_so_far <<= 1
    bits = bits + 1
    convert_tree_to_code(nodes, codes, code_so_far, bits, nodes[node].child_0)
    convert_tree_to_code(nodes, codes, code_so_far | 1, bits, nodes[node].child_1)


def make_codes(nodes: List[Node], root_node: int) -> List[Code]:
    codes = [Code() for _ in range(END_OF_STREAM + 1)]
    convert_tree_to_code(nodes, codes, 0, 0, root_node)
    if is_leaf(root_node):
        # A lone leaf still needs one bit per symbol: code "0"
        codes[root_node].code_bits = 1
    return codes


def write_header(output_bit_file, nodes, node):
    if is_leaf(node):
        output_bit_file.output_bit(1)
        output_bit_file.output_bits(node, SYMBOL_BITS)
        return

    output_bit_file.output_bit(0)
    write_header(output_bit_file, nodes, nodes[node].child_0)
    write_header(output_bit_file, nodes, nodes[node].child_1)


def read_header(input_bit_file, nodes: List[Node], depth: int = 0) -> int:
    try:
        bit = input_bit_file.input_bit()
        if bit:
            value = input_bit_file.input_bits(SYMBOL_BITS)
    except EOFError as e:
        raise MalformedHeader("end of input inside the tree header") from e

    if bit:
        if value > END_OF_STREAM:
            raise MalformedHeader(f"leaf symbol {value} out of range")
        return value

    if depth >= MAX_TREE_DEPTH:
        raise MalformedHeader("tree header nests deeper than any Huffman tree")

    node = Node()
    node.child_0 = read_header(input_bit_file, nodes, depth + 1)
    node.child_1 = read_header(input_bit_file, nodes, depth + 1)
    nodes.append(node)
    return len(nodes) - 1


def compress_data(input_bit_file, output_bit_file, codes):
    while True:
        try:
            c = input_bit_file.input_bits(BITS_PER_WORD)
        except EOFError:
            break
        output_bit_file.output_bits(codes[c].code, codes[c].code_bits)

    output_bit_file.output_bits(codes[END_OF_STREAM].code, codes[END_OF_STREAM].code_bits)


def expand_data(input_bit_file, output_bit_file, nodes, root_node):
    while True:
        node = root_node

        try:
            if is_leaf(node):
                input_bit_file.input_bit()
            while not is_leaf(node):
                if input_bit_file.input_bit():
                    node = nodes[node].child_1
                else:
                    node = nodes[node].child_0
        except EOFError as e:
            raise TruncatedStream("bad input, no end of stream code") from e

        if node == END_OF_STREAM:
            break

        output_bit_file.output_bits(node, BITS_PER_WORD)


def print_char(c):
    if 0x20 <= c < 127:
        print(f"'{chr(c)}'", end="")
    else:
        print(f"{c:3d}", end="")


def print_model(nodes: List[Node], codes: Optional[List[Code]], root_node: int):
    stack = [root_node]
    while stack:
        node = stack.pop()
        print("node=", end="")
        print_char(node)
        print(f"  count={nodes[node].count:3d}", end="")

        if is_leaf(node):
            if codes is not None:
                print(f"  Huffman code={codes[node]}", end="")
        else:
            print("  child_0=", end="")
            print_char(nodes[node].child_0)
            print("  child_1=", end="")
            print_char(nodes[node].child_1)
            stack.append(nodes[node].child_1)
            stack.append(nodes[node].child_0)

        print()
