# Huff_Formats.py
"""
Формат сжатого файла и константы кодека Хаффмана.

Структура потока (биты, старшие первыми):
0..31      Magic (32 bits)              HUFF_TREE = 0xFACE8201
32..       TreeHeader (variable)        дерево в прямом порядке обхода (preorder)
...        Body (variable)              коды символов + код PSEUDO_EOF
...        Padding (0..7 bits)          нули до границы байта

Заголовок дерева:
    - внутренний узел: бит 0, затем левое и правое поддерево
    - лист:            бит 1, затем 9 бит значения символа

Примечания:
- Поля длины и контрольной суммы нет: конец тела определяется листом PSEUDO_EOF.
- 9 бит на символ, потому что PSEUDO_EOF = 256 не помещается в байт.
"""
# =================================================================================================================

# Alphabet
BITS_PER_WORD           = 8
BITS_PER_INT            = 32
ALPH_SIZE               = 1 << BITS_PER_WORD        # 256
PSEUDO_EOF              = ALPH_SIZE                 # sentinel symbol
HEADER_VALUE_BITS       = BITS_PER_WORD + 1         # 9

# Magic
HUFF_NUMBER             = 0xFACE8200
HUFF_TREE               = HUFF_NUMBER | 1

# End of bit stream marker returned by BitInputStream.read_bits
EOF_BITS                = -1

# Debug levels
DEBUG_NONE              = 0
DEBUG_LOW               = 1
DEBUG_HIGH              = 4

# =================================================================================================================

class HuffException(ValueError):
    """Базовая ошибка кодека. Любая из них прерывает операцию целиком."""

class HuffFormatError(HuffException):
    """Поток не начинается с HUFF_TREE."""

class HuffTruncationError(HuffException, EOFError):
    """Биты закончились раньше, чем был прочитан лист PSEUDO_EOF."""

class HuffCorruptionError(HuffException):
    """Тело потока не согласуется с заголовком дерева."""
