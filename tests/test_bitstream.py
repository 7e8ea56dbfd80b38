# tests/test_bitstream.py

import sys, os
# Добавляем src/ в путь
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))
sys.path.insert(0, os.path.dirname(__file__))

import io
import unittest

from BitStream import *
from Huff_Formats import EOF_BITS
from Huff_Utils import *
from bit_helpers import push_bits, pack_bits

# ======================================================================
#                        UNIT TESTS FOR BIT OUTPUT
# ======================================================================

class TestBitOutputStream(unittest.TestCase):

    def test_write_and_pad(self):
        sink = io.BytesIO()
        out = BitOutputStream(sink)
        out.write_bits(3, 0b101)
        out.write_bits(8, 0xFF)
        out.close()

        # 101 11111111 + 00000
        self.assertEqual(sink.getvalue(), b"\xbf\xe0")
        self.assertEqual(out.bits_written, 11)

    def test_value_is_masked(self):
        sink = io.BytesIO()
        with BitOutputStream(sink) as out:
            out.write_bits(4, 0x1F)
            out.write_bits(4, 0)
        self.assertEqual(sink.getvalue(), b"\xf0")

    def test_nothing_written(self):
        sink = io.BytesIO()
        BitOutputStream(sink).close()
        self.assertEqual(sink.getvalue(), b"")

    def test_close_is_idempotent(self):
        sink = io.BytesIO()
        out = BitOutputStream(sink)
        out.write_bits(1, 1)
        out.close()
        out.close()
        self.assertEqual(sink.getvalue(), b"\x80")

    def test_write_after_close(self):
        out = BitOutputStream(io.BytesIO())
        out.close()
        with self.assertRaises(ValueError):
            out.write_bits(1, 0)

    def test_wide_values(self):
        sink = io.BytesIO()
        with BitOutputStream(sink) as out:
            out.write_bits(32, 0xFACE8201)
            out.write_bits(9, 256)
        self.assertEqual(sink.getvalue(), b"\xfa\xce\x82\x01\x80\x00")

    def test_large_output_is_drained(self):
        sink = io.BytesIO()
        with BitOutputStream(sink) as out:
            for _ in range(200000):
                out.write_bits(8, 0xAB)
        self.assertEqual(sink.getvalue(), b"\xab" * 200000)

# ======================================================================
#                        UNIT TESTS FOR BIT INPUT
# ======================================================================

class TestBitInputStream(unittest.TestCase):

    def test_read_bits(self):
        bit_in = BitInputStream(io.BytesIO(b"\xbf\xe0"))
        self.assertEqual(bit_in.read_bits(3), 0b101)
        self.assertEqual(bit_in.read_bits(8), 0xFF)
        self.assertEqual(bit_in.read_bits(5), 0)
        self.assertEqual(bit_in.read_bits(1), EOF_BITS)
        self.assertEqual(bit_in.bits_read, 16)

    def test_not_enough_bits(self):
        bit_in = BitInputStream(io.BytesIO(b"\x01\x02\x03"))
        self.assertEqual(bit_in.read_bits(32), EOF_BITS)

    def test_empty(self):
        self.assertEqual(BitInputStream(io.BytesIO(b"")).read_bits(8), EOF_BITS)

    def test_reset(self):
        bit_in = BitInputStream(io.BytesIO(b"\x5a\xa5"))
        self.assertEqual(bit_in.read_bits(8), 0x5A)
        self.assertEqual(bit_in.read_bits(4), 0xA)
        bit_in.reset()
        self.assertEqual(bit_in.read_bits(8), 0x5A)
        self.assertEqual(bit_in.read_bits(8), 0xA5)
        self.assertEqual(bit_in.read_bits(8), EOF_BITS)

    def test_reset_returns_to_initial_position(self):
        stream = io.BytesIO(b"XYZ\x5a\xa5")
        stream.seek(3)
        bit_in = BitInputStream(stream)
        self.assertEqual(bit_in.read_bits(16), 0x5AA5)
        self.assertEqual(bit_in.read_bits(8), EOF_BITS)
        bit_in.reset()
        self.assertEqual(bit_in.read_bits(8), 0x5A)

    def test_reset_requires_seekable(self):
        class Pipe(io.BytesIO):
            def seekable(self):
                return False

        bit_in = BitInputStream(Pipe(b"abc"))
        with self.assertRaises(OSError):
            bit_in.reset()

    def test_roundtrip_with_utils(self):
        bits = [1, 0, 1, 1, 0, 0, 1, 0, 1, 1, 1]
        bit_in = BitInputStream(io.BytesIO(pack_bits(bits)))
        read = [bit_in.read_bits(1) for _ in range(len(bits))]
        self.assertEqual(read, bits)

# ======================================================================
#                        UNIT TESTS FOR UTILS
# ======================================================================

class TestUtils(unittest.TestCase):

    def test_bit_conversion(self):
        bits = []
        push_bits(bits, 0b10101100, 8)
        self.assertEqual(bits, [1,0,1,0,1,1,0,0])

        out = pack_bits(bits)
        self.assertEqual(out, b'\xac')

    def test_bits_to_int(self):
        self.assertEqual(bits_to_int((1, 0, 1)), 5)
        self.assertEqual(bits_to_int((0, 0, 1, 1)), 3)
        self.assertEqual(bits_to_int(()), 0)

    def test_format_code(self):
        self.assertEqual(format_code((0, 1, 1)), "011")


if __name__ == "__main__":
    unittest.main()
