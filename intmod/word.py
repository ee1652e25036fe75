from typing import Any


class Word:
    """An unsigned register of a fixed number of bits, used for modular intermediates.

    ``Word(size, value)`` holds ``value`` in ``size`` bits and rejects values that do not
    fit. ``+`` and ``*`` between words of one size wrap modulo ``2 ** size``; the kernel
    in :py:mod:`intmod.numtheory` picks sizes (``width`` for sums, ``2 * width`` for
    products) where they never do.
    """
    __size  : int
    __value : int

    def __init__(self, size : int, value : int) -> None:
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ValueError(f'A word needs a positive bit width, but was given {size!r}.')
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f'A word holds an integer, but was given {value!r}.')
        if value < 0 or value.bit_length() > size:
            raise ValueError(f'{value!r} does not fit in an unsigned {size!r}-bit word.')
        self.__size = size
        self.__value = value

    def __repr__(self) -> str:
        return f"Word({self.__size!r}, {self.__value:#x})"

    def size(self) -> int:
        return self.__size

    def value(self) -> int:
        return self.__value

    def widen(self, n : int) -> 'Word':
        """The same value in a word ``n`` bits wider."""
        if not isinstance(n, int) or n < 0:
            raise ValueError(f'Cannot widen {self!r} by {n!r} bits.')
        return Word(self.__size + n, self.__value)

    def __eq__(self, other : Any) -> bool:
        if isinstance(other, Word):
            return self.__size == other.__size and self.__value == other.__value
        else:
            return False

    def __add__(self, other : 'Word') -> 'Word':
        return Word(self.__size, self.__truncate(self.__operand("+", other) + self.__value))

    def __mul__(self, other : 'Word') -> 'Word':
        return Word(self.__size, self.__truncate(self.__operand("*", other) * self.__value))

    def __operand(self, op : str, other : Any) -> int:
        if not isinstance(other, Word) or other.__size != self.__size:
            raise ValueError(f'Operator `{op}` needs two words of {self.__size!r} bits, but got {self!r} and {other!r}.')
        return other.__value

    def __truncate(self, v : int) -> int:
        return v & ((1 << self.__size) - 1)
