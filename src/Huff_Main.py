"""
CLI Huffman compressor:
Usage example:
  py src/Huff_Main.py compress -i book.txt -o book.huf --stats --verbose
  py src/Huff_Main.py decompress -i book.huf -o book.txt
  py src/Huff_Main.py info -i book.huf --codes

debug: 0 - off, 1 - totals (bits read/written), 4 - totals and every code.
"""

# =================================================================================================================

import os
import sys

import Huff_Cli as cli

from Huff_Formats import HuffException
from Processor import compress_file, decompress_file

# =================================================================================================================

def compress_mode(args):
    """Сжимает файл."""
    if args.verbose:
        print("[compress] Reading:", args.input)

    stats = compress_file(args.input, args.output, args.debug)

    if args.verbose:
        print("[compress] Saved to", args.output)
    if args.stats:
        print_stats(args.input, stats)

def decompress_mode(args):
    """Распаковывает файл."""
    if args.verbose:
        print("[decompress] Reading:", args.input)

    stats = decompress_file(args.input, args.output, args.debug)

    if args.verbose:
        print("[decompress] Saved to", args.output)
    if args.stats:
        print_stats(args.input, stats)

def print_stats(name: str, stats: dict):
    original = stats["original_size"]
    compressed = stats["compressed_size"]
    ratio = compressed / original * 100 if original else 0

    print("\n=== Statistics ===")
    print(f"• {os.path.basename(name)}: {original} bytes ↔ {compressed} bytes ({ratio:.2f}%)")
    print(f"   Bits read:     {stats['bits_read']}")
    print(f"   Bits written:  {stats['bits_written']}")
    print(f"   Tree leaves:   {stats['leaves']}")

# =================================================================================================================

def main(argv=None) -> int:

    parser = cli.init()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return 0

    cli.configure_logging(args)

    try:
        args.func(args)
    except (HuffException, OSError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    return 0

# =================================================================================================================

if __name__ == "__main__":
    sys.exit(main())
