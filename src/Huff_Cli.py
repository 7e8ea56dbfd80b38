import argparse
import logging

import Huff_Main as main
from Huff_Formats import DEBUG_NONE, DEBUG_LOW, DEBUG_HIGH
from Processor import describe_file

# =================================================================================================================

def init() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Huffman compressor with the code tree stored in the file header"
    )
    sub = parser.add_subparsers(dest="cmd")

    # ------------------------------------------------------------
    # compress
    # ------------------------------------------------------------
    c = sub.add_parser("compress", help="Сжать файл")
    c.add_argument("-i", "--input", required=True)
    c.add_argument("-o", "--output", required=True)
    c.add_argument("--verbose", action="store_true")
    c.add_argument("--stats", action="store_true")
    c.add_argument("--debug", type=int, default=DEBUG_NONE, choices=[DEBUG_NONE, DEBUG_LOW, DEBUG_HIGH],
                   help="Уровень отладки кодека: 0, 1 или 4")
    c.set_defaults(func=main.compress_mode)

    # ------------------------------------------------------------
    # decompress
    # ------------------------------------------------------------
    d = sub.add_parser("decompress", help="Распаковать файл")
    d.add_argument("-i", "--input", required=True)
    d.add_argument("-o", "--output", required=True)
    d.add_argument("--verbose", action="store_true")
    d.add_argument("--stats", action="store_true")
    d.add_argument("--debug", type=int, default=DEBUG_NONE, choices=[DEBUG_NONE, DEBUG_LOW, DEBUG_HIGH])
    d.set_defaults(func=main.decompress_mode)

    # ------------------------------------------------------------
    # info
    # ------------------------------------------------------------
    t = sub.add_parser("info", help="Показать дерево из заголовка сжатого файла")
    t.add_argument("-i", "--input", required=True)
    t.add_argument("--codes", action="store_true", help="Напечатать длины кодов всех символов")
    t.set_defaults(func=info_mode, debug=DEBUG_NONE)

    return parser

# =================================================================================================================

def info_mode(args):
    """Печатает сведения о дереве из заголовка."""
    print("[info] Analyzing:", args.input)
    info = describe_file(args.input)

    print(f"Magic:        {info['magic']:#010x}")
    print(f"Leaves:       {info['leaves']}")
    print(f"Tree depth:   {info['depth']}")
    print(f"Header bits:  {info['header_bits']}")

    if args.codes:
        print("\nCode lengths:")
        for sym, length in info["code_lengths"].items():
            print(f" • {sym:3d}: {length}")

# =================================================================================================================

def configure_logging(args) -> None:
    """Включает вывод логов кодека, если запрошена отладка."""
    if getattr(args, "debug", DEBUG_NONE) > DEBUG_NONE:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
