# Processor.py

# =================================================================================================================

from __future__ import annotations
import os
import tempfile
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from Huff_Formats import *
from BitStream import BitInputStream, BitOutputStream
from Huffman import HuffmanCodec, tree_depth

# =================================================================================================================

def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask

@contextmanager
def _atomic_output(path: str) -> Iterator[BinaryIO]:
    """Пишет во временный файл рядом с path и подменяет path только при успехе.
    При исключении временный файл удаляется, path не трогается.
    """
    dir_path = os.path.dirname(os.path.abspath(path))  # Обрезка названия файла
    name = os.path.basename(path)                       # Выделение названия файла
    os.makedirs(dir_path, exist_ok=True)                # Создать директорию, если нет.

    fd, tmp = tempfile.mkstemp(dir=dir_path, prefix=name + ".tmp_")
    try:
        with os.fdopen(fd, "wb") as f:
            yield f
        # mkstemp создаёт файл с правами 0600, результат должен следовать umask
        os.chmod(tmp, 0o666 & ~_current_umask())
        os.replace(tmp, path)
    except BaseException:
        os.unlink(tmp)
        raise

# =================================================================================================================

def compress_file(src: str, dst: str, debug: int = DEBUG_NONE) -> dict:
    """Сжимает файл src в dst.

    Args:
        src (str): путь к исходному файлу
        dst (str): путь к сжатому файлу
        debug (int): уровень отладки кодека

    Returns:
        dict:
        - original_size (int): размер исходного файла в байтах
        - compressed_size (int): размер сжатого файла в байтах
        - bits_read (int), bits_written (int), leaves (int): статистика кодека
    """
    codec = HuffmanCodec(debug)

    with open(src, "rb") as f, _atomic_output(dst) as out:
        codec.compress(BitInputStream(f), BitOutputStream(out))

    return _stats(src, dst, codec)

def decompress_file(src: str, dst: str, debug: int = DEBUG_NONE) -> dict:
    """Распаковывает src в dst. При ошибке dst не создаётся и не перезаписывается."""
    codec = HuffmanCodec(debug)

    with open(src, "rb") as f, _atomic_output(dst) as out:
        codec.decompress(BitInputStream(f), BitOutputStream(out))

    return _stats(dst, src, codec)

def describe_file(path: str) -> dict:
    """Читает сигнатуру и дерево сжатого файла, не декодируя тело.

    Returns:
        dict:
        - magic (int): сигнатура
        - leaves (int): число листьев
        - depth (int): глубина дерева
        - header_bits (int): размер сигнатуры и заголовка в битах
        - code_lengths (Dict[int,int]): длины кодов по символам
    """
    codec = HuffmanCodec()

    with open(path, "rb") as f:
        bit_in = BitInputStream(f)
        root = codec.read_header(bit_in)

    codes = codec.build_code_table(root)
    return {
        "magic": HUFF_TREE,
        "leaves": len(codes),
        "depth": tree_depth(root),
        "header_bits": bit_in.bits_read,
        "code_lengths": {sym: len(code) for sym, code in sorted(codes.items())},
    }

# =================================================================================================================

def _stats(original: str, compressed: str, codec: HuffmanCodec) -> dict:
    stats = {
        "original_size": os.path.getsize(original),
        "compressed_size": os.path.getsize(compressed),
    }
    stats.update(codec.last_stats)
    return stats
