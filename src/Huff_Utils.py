from typing import Sequence

def bits_to_int(bits: Sequence[int]) -> int:
    """Собирает число из последовательности битов (первый бит - старший).

    Пример:
        Вход: (1, 0, 1)
        Выход: 5
    """
    value = 0
    for bit in bits:
        value = (value << 1) | bit
    return value

def format_code(bits: Sequence[int]) -> str:
    """Код в виде строки '0101' для отладочного вывода."""
    return "".join(str(b) for b in bits)
