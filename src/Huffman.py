from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from heapq import heappush, heappop
from typing import Dict, Optional, Tuple

from Huff_Formats import *
from BitStream import BitInputStream, BitOutputStream
from Huff_Utils import bits_to_int, format_code

"""Кодек Хаффмана с деревом в заголовке.

Поддерживает:
    - подсчёт частот байтов входного потока (+ PSEUDO_EOF)
    - построение дерева Хаффмана с детерминированным разрешением равенств
    - генерацию таблицы кодов обходом дерева
    - запись/чтение дерева в заголовке (preorder)
    - кодирование и декодирование тела до листа PSEUDO_EOF

Атрибуты (результаты последнего вызова, между вызовами не используются):
    freqs (Dict[int,int]): Частоты символов.
    root (HuffNode): Корень дерева.
    codes (Dict[int, Tuple[int, ...]]): Коды символов (путь от корня, 0 - влево, 1 - вправо).
    last_stats (dict): Прочитано/записано бит, число листьев.

API:
    - HuffmanCodec(): compress/decompress над битовыми потоками, pack/unpack над bytes.
"""

log = logging.getLogger(__name__)

Code = Tuple[int, ...]

# -------------------------------------------------------------------------------------------------

@dataclass
class HuffNode:
    """Узел дерева Хаффмана.

    Лист хранит символ (value), внутренний узел - ровно двух потомков и value=None.
    Вес при сравнении деревьев не учитывается: у прочитанного из заголовка дерева он 0.
    """
    value: Optional[int] = None
    weight: int = field(default=0, compare=False)
    left: Optional[HuffNode] = None
    right: Optional[HuffNode] = None

    def is_leaf(self) -> bool:
        return self.value is not None

# -------------------------------------------------------------------------------------------------

class HuffmanCodec:
# -------------------------------------------------------------------------------------------------

    def __init__(self, debug: int = DEBUG_NONE):
        """Инициализирует локальные СД

        Args:
            debug (int): Уровень отладочного вывода (DEBUG_NONE, DEBUG_LOW, DEBUG_HIGH).
        """
        self.debug = debug
        self.freqs: Dict[int, int] = dict()
        self.root: Optional[HuffNode] = None
        self.codes: Dict[int, Code] = dict()
        self.last_stats: dict = dict()

# -------------------------------------------------------------------------------------------------

    def compress(self, bit_in: BitInputStream, bit_out: BitOutputStream) -> None:
        """Сжимает поток. Вход читается дважды, поэтому должен поддерживать reset().

        Args:
            bit_in (BitInputStream): Исходные данные.
            bit_out (BitOutputStream): Приёмник; закрывается при любом исходе.
        """
        try:
            self.freqs = self._count_frequencies(bit_in)
            self.root = self._build_tree(self.freqs)
            self.codes = self.build_code_table(self.root)

            bit_out.write_bits(BITS_PER_INT, HUFF_TREE)
            self._write_tree_header(self.root, bit_out)

            bit_in.reset()
            self._encode_symbols(bit_in, self.codes, bit_out)
        finally:
            bit_out.close()

        self.last_stats = {
            "bits_read": bit_in.bits_read,
            "bits_written": bit_out.bits_written,
            "leaves": len(self.codes),
        }
        self._trace("compress")

    def decompress(self, bit_in: BitInputStream, bit_out: BitOutputStream) -> None:
        """Восстанавливает исходные данные.

        Декодированные байты копятся в памяти и пишутся в bit_out только после
        чтения PSEUDO_EOF, так что при ошибке в приёмник ничего не попадает.

        Raises:
            HuffFormatError: Неверная сигнатура.
            HuffTruncationError: Поток оборвался.
            HuffCorruptionError: Тело не согласуется с деревом.
        """
        try:
            self.root = self.read_header(bit_in)
            decoded = self._decode_symbols(self.root, bit_in)
            for byte in decoded:
                bit_out.write_bits(BITS_PER_WORD, byte)
        finally:
            bit_out.close()

        self.last_stats = {
            "bits_read": bit_in.bits_read,
            "bits_written": bit_out.bits_written,
            "leaves": _count_leaves(self.root),
        }
        self._trace("decompress")

    def read_header(self, bit_in: BitInputStream) -> HuffNode:
        """Проверяет сигнатуру и читает дерево из заголовка."""
        magic = bit_in.read_bits(BITS_PER_INT)
        if magic == EOF_BITS:
            raise HuffTruncationError("Stream too short to hold the magic number")
        if magic != HUFF_TREE:
            raise HuffFormatError(f"Illegal header starts with {magic:#010x}")

        seen: set = set()
        return self._read_tree_header(bit_in, seen, 0)

    def pack(self, data: bytes) -> bytes:
        """Сжимает массив байтов в памяти."""
        sink = io.BytesIO()
        self.compress(BitInputStream(io.BytesIO(data)), BitOutputStream(sink))
        return sink.getvalue()

    def unpack(self, blob: bytes) -> bytes:
        """Распаковывает массив байтов, полученный из pack()."""
        sink = io.BytesIO()
        self.decompress(BitInputStream(io.BytesIO(blob)), BitOutputStream(sink))
        return sink.getvalue()

# -------------------------------------------------------------------------------------------------

    def _count_frequencies(self, bit_in: BitInputStream) -> Dict[int, int]:
        """Первый проход: частоты всех 8-битных символов до конца потока.

        PSEUDO_EOF всегда получает частоту 1, даже для пустого входа.
        """
        freqs: Dict[int, int] = {}

        word = bit_in.read_bits(BITS_PER_WORD)
        while word != EOF_BITS:
            freqs[word] = freqs.get(word, 0) + 1
            word = bit_in.read_bits(BITS_PER_WORD)

        freqs[PSEUDO_EOF] = 1
        return freqs

    def _build_tree(self, freqs: Dict[int, int]) -> HuffNode:
        """Строит дерево Хаффмана на минимальной куче.

        Элемент кучи - (вес, порядковый_номер, узел). Листья кладутся по возрастанию
        символа, каждый новый узел получает следующий номер, поэтому при равных весах
        раньше извлекается меньший символ, а среди узлов - созданный раньше.
        Первый извлечённый узел становится левым потомком, второй - правым.
        """
        heap = []
        order = 0

        for sym in sorted(freqs):
            w = freqs[sym]
            if w > 0:
                heappush(heap, (w, order, HuffNode(sym, w)))
                order += 1

        if not heap:
            raise HuffException("Nothing to build a tree from")

        # Единственный лист не получил бы непустой код: оборачиваем его
        # во внутренний узел, справа - лист-заполнитель с весом 0
        if len(heap) == 1:
            w, _, leaf = heap[0]
            filler = 0 if leaf.value != 0 else 1
            return HuffNode(None, w, leaf, HuffNode(filler, 0))

        while len(heap) > 1:
            w1, _, n1 = heappop(heap)
            w2, _, n2 = heappop(heap)

            heappush(heap, (w1 + w2, order, HuffNode(None, w1 + w2, n1, n2)))
            order += 1

        _, _, root = heap[0]
        return root

    def build_code_table(self, root: HuffNode) -> Dict[int, Code]:
        """Обходит дерево с явным стеком и собирает путь до каждого листа."""
        if root.is_leaf():
            raise HuffException("Tree root is a leaf: its code would be empty")

        codes: Dict[int, Code] = {}
        stack = [(root, ())]

        while stack:
            node, path = stack.pop()
            if node.is_leaf():
                codes[node.value] = path
                continue
            if node.left is None or node.right is None:
                raise HuffException("Internal node without two children")

            stack.append((node.right, path + (1,)))
            stack.append((node.left, path + (0,)))

        return codes

# -------------------------------------------------------------------------------------------------

    def _write_tree_header(self, node: HuffNode, bit_out: BitOutputStream) -> None:
        if node.is_leaf():
            bit_out.write_bits(1, 1)
            bit_out.write_bits(HEADER_VALUE_BITS, node.value)
            return

        bit_out.write_bits(1, 0)
        self._write_tree_header(node.left, bit_out)
        self._write_tree_header(node.right, bit_out)

    def _read_tree_header(self, bit_in: BitInputStream, seen: set, depth: int) -> HuffNode:
        """Зеркало _write_tree_header. Веса восстановленных узлов - 0.

        Args:
            seen (set): Уже прочитанные символы листьев.
            depth (int): Глубина текущего узла.
        """
        # у дерева из ALPH_SIZE + 1 листьев глубина не больше ALPH_SIZE
        if depth > ALPH_SIZE:
            raise HuffCorruptionError("Tree header is deeper than the alphabet allows")

        bit = bit_in.read_bits(1)
        if bit == EOF_BITS:
            raise HuffTruncationError("Stream ended inside the tree header")

        if bit == 0:
            left = self._read_tree_header(bit_in, seen, depth + 1)
            right = self._read_tree_header(bit_in, seen, depth + 1)
            return HuffNode(None, 0, left, right)

        value = bit_in.read_bits(HEADER_VALUE_BITS)
        if value == EOF_BITS:
            raise HuffTruncationError("Stream ended inside a tree header leaf")
        if value > PSEUDO_EOF:
            raise HuffCorruptionError(f"Leaf symbol {value} is out of range")
        if value in seen:
            raise HuffCorruptionError(f"Leaf symbol {value} appears twice")
        seen.add(value)

        return HuffNode(value, 0)

# -------------------------------------------------------------------------------------------------

    def _encode_symbols(self, bit_in: BitInputStream, codes: Dict[int, Code],
                        bit_out: BitOutputStream) -> None:
        """Второй проход: заменяет каждый символ его кодом, в конце - код PSEUDO_EOF."""

        # (длина, код) заранее, чтобы писать код одним вызовом
        packed = {sym: (len(code), bits_to_int(code)) for sym, code in codes.items()}

        word = bit_in.read_bits(BITS_PER_WORD)
        while word != EOF_BITS:
            if word not in packed:
                raise HuffException(f"No code for symbol {word}: input changed between passes?")
            length, code = packed[word]
            bit_out.write_bits(length, code)
            word = bit_in.read_bits(BITS_PER_WORD)

        length, code = packed[PSEUDO_EOF]
        bit_out.write_bits(length, code)

    def _decode_symbols(self, root: HuffNode, bit_in: BitInputStream) -> bytes:
        """Проход по дереву бит за битом до листа PSEUDO_EOF.

        Returns:
            bytes: Раскодированные данные.
        """
        out = bytearray()
        current = root

        while True:
            bit = bit_in.read_bits(1)
            if bit == EOF_BITS:
                raise HuffTruncationError("Stream ended before PSEUDO_EOF")

            current = current.right if bit else current.left
            if current is None:
                raise HuffCorruptionError("Bit stream leads outside of the tree")

            if current.is_leaf():
                if current.value == PSEUDO_EOF:
                    break
                out.append(current.value)
                current = root

        return bytes(out)

# -------------------------------------------------------------------------------------------------

    def _trace(self, operation: str) -> None:
        if self.debug >= DEBUG_LOW:
            log.debug("%s: read %d bits, wrote %d bits, %d leaves", operation,
                      self.last_stats["bits_read"], self.last_stats["bits_written"],
                      self.last_stats["leaves"])
        if self.debug >= DEBUG_HIGH and operation == "compress":
            for sym in sorted(self.codes):
                log.debug("code %3d (freq %d) -> %s", sym, self.freqs.get(sym, 0),
                          format_code(self.codes[sym]))

# -------------------------------------------------------------------------------------------------

def _count_leaves(root: Optional[HuffNode]) -> int:
    if root is None:
        return 0
    count = 0
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_leaf():
            count += 1
        else:
            stack.extend(child for child in (node.left, node.right) if child is not None)
    return count

def tree_depth(root: HuffNode) -> int:
    """Глубина дерева: длина самого длинного пути от корня до листа."""
    depth = 0
    stack = [(root, 0)]
    while stack:
        node, d = stack.pop()
        depth = max(depth, d)
        for child in (node.left, node.right):
            if child is not None:
                stack.append((child, d + 1))
    return depth
