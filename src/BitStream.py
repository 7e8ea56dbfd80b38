# BitStream.py

# =================================================================================================================

from __future__ import annotations
from typing import BinaryIO

from Huff_Formats import BITS_PER_WORD, EOF_BITS

# =================================================================================================================

_CHUNK_SIZE = 2 << 15       # 64 KiB

# =================================================================================================================

class BitInputStream:
    """
    BitInputStream: побитовое чтение из байтового потока (старшие биты первыми).
    - read_bits(n) возвращает число из n бит или EOF_BITS, если бит не хватило
    - reset() перематывает поток к позиции, с которой он был передан (нужен seekable поток)
    - bits_read: счётчик прочитанных бит
    """
    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.bits_read = 0
        self._start = stream.tell() if stream.seekable() else 0
        self._buffer = b""
        self._pos = 0           # индекс следующего байта в _buffer
        self._rack = 0          # накопитель бит
        self._rack_len = 0      # сколько бит в накопителе

    def _next_byte(self) -> int:
        if self._pos >= len(self._buffer):
            self._buffer = self.stream.read(_CHUNK_SIZE)
            self._pos = 0
            if not self._buffer:
                return EOF_BITS
        byte = self._buffer[self._pos]
        self._pos += 1
        return byte

    def read_bits(self, n: int) -> int:
        """Читает n бит.

        Args:
            n (int): Количество бит, n >= 1.

        Returns:
            int: Значение в [0, 2^n) или EOF_BITS, если поток кончился.
        """
        while self._rack_len < n:
            byte = self._next_byte()
            if byte == EOF_BITS:
                return EOF_BITS
            self._rack = (self._rack << BITS_PER_WORD) | byte
            self._rack_len += BITS_PER_WORD

        self._rack_len -= n
        value = self._rack >> self._rack_len
        self._rack &= (1 << self._rack_len) - 1
        self.bits_read += n
        return value

    def reset(self) -> None:
        """Перематывает поток к исходной позиции для повторного прохода."""
        if not self.stream.seekable():
            raise OSError("Input stream is not rewindable")
        self.stream.seek(self._start)
        self._buffer = b""
        self._pos = 0
        self._rack = 0
        self._rack_len = 0

    def close(self) -> None:
        """Сбрасывает буферы. Файл закрывает его владелец."""
        self._buffer = b""
        self._pos = 0
        self._rack = 0
        self._rack_len = 0

    def __enter__(self) -> BitInputStream:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

# =================================================================================================================

class BitOutputStream:
    """
    BitOutputStream: побитовая запись в байтовый поток (старшие биты первыми).
    - write_bits(n, value) пишет младшие n бит value
    - close() дописывает неполный последний байт, добивая его нулями
    - bits_written: счётчик записанных бит (без учёта добивки)
    """
    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.bits_written = 0
        self._out = bytearray()
        self._rack = 0
        self._rack_len = 0
        self._closed = False

    def write_bits(self, n: int, value: int) -> None:
        if self._closed:
            raise ValueError("write to closed BitOutputStream")

        self._rack = (self._rack << n) | (value & ((1 << n) - 1))
        self._rack_len += n
        self.bits_written += n

        while self._rack_len >= BITS_PER_WORD:
            self._rack_len -= BITS_PER_WORD
            self._out.append((self._rack >> self._rack_len) & 0xFF)
        self._rack &= (1 << self._rack_len) - 1

        if len(self._out) >= _CHUNK_SIZE:
            self._drain()

    def _drain(self) -> None:
        self.stream.write(bytes(self._out))
        self._out.clear()

    def flush(self) -> None:
        """Записывает полные байты в поток. Неполный байт остаётся в накопителе."""
        self._drain()
        self.stream.flush()

    def close(self) -> None:
        """Дописывает неполный байт и сбрасывает буфер. Файл закрывает его владелец."""
        if self._closed:
            return
        if self._rack_len > 0:
            self._out.append((self._rack << (BITS_PER_WORD - self._rack_len)) & 0xFF)
            self._rack = 0
            self._rack_len = 0
        self.flush()
        self._closed = True

    def __enter__(self) -> BitOutputStream:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
