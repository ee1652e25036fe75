from __future__ import annotations
import re
from typing import Any, List, Optional, TextIO, Union

from .numtheory import ModulusMismatchError, ZeroModulusError, check_modulus, \
                       standard_modulo, inverse_of, mod_pow, add_mod, sub_mod, mul_mod

_DECIMAL = re.compile(r'[+-]?[0-9]+')


class IntMod:
    """A class representing an integer modulo ``n`` (i.e. an element of ``Z/nZ``).

    ``IntMod(value : int, n : int)`` will create a modular integer with modulus ``n`` and value
    ``value`` reduced into ``[0, n - 1]``. Any integer is accepted, including negative ones and ones
    larger than ``n``. ``n`` must satisfy ``2 <= n < 2 ** (width - 1)`` for the configured word width.

    N.B., the ``n`` and ``value`` arguments can be passed positionally or by name, and ``value``
    defaults to ``0``:

    ``IntMod(-1,12) == IntMod(value=-1, n=12) == IntMod(n=12, value=11)``

    ``IntMod(other : IntMod)`` creates a copy of ``other``.

    Unlike ``int``, an ``IntMod`` is mutable: ``+=``, ``-=``, ``*=``, ``/=`` and ``%=`` update it in
    place, and :py:meth:`increment` / :py:meth:`decrement` step it around the ring. For that reason
    it is not hashable.
    """
    __modulus : int
    __value   : int

    def __init__(self, value : Union[int, IntMod] = 0, n : Optional[int] = None) -> None:
        """Initialize a modular integer from a value and modulus."""
        if isinstance(value, IntMod):
            if n is None:
                n = value.__modulus
            elif n != value.__modulus:
                raise ModulusMismatchError(f'Cannot create a modular integer modulo {n!r} from {value!r}.')
            value = value.__value
        if n is None:
            raise ValueError(f'`IntMod` expects a modulus `n`, but none was given for value {value!r}.')
        self.__modulus = check_modulus(n)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f'`IntMod` expects `value` to be an integer, but got {value!r}')
        self.__value = standard_modulo(value, self.__modulus)

    def __repr__(self) -> str:
        return f"IntMod({self.__value!r}, {self.__modulus!r})"

    def __str__(self) -> str:
        return self.to_text()

    def modulus(self) -> int:
        """Modulus of the modular integer."""
        return self.__modulus

    def value(self) -> int:
        """Canonical value of the modular integer, in ``[0, modulus - 1]``."""
        return self.__value

    def inverse(self) -> int:
        """The multiplicative inverse of ``self.value()`` modulo ``self.modulus()``.

        :raises NotInvertibleError: if ``gcd(self.value(), self.modulus()) != 1``.
        """
        return inverse_of(self.__value, self.__modulus)

    def copy(self) -> IntMod:
        return IntMod(self.__value, self.__modulus)

    __copy__ = copy

    def __deepcopy__(self, memo : Any) -> IntMod:
        return self.copy()

    # Operand handling

    def __operand(self, op : str, other : Any) -> int:
        """Canonical value of ``other`` for a binary operation with ``self``."""
        if isinstance(other, IntMod):
            if self.__modulus != other.__modulus:
                raise ModulusMismatchError(
                    f'Operator `{op}` cannot be called on modular integers of unequal moduli {self!r} and {other!r}.')
            return other.__value
        elif isinstance(other, int) and not isinstance(other, bool):
            return standard_modulo(other, self.__modulus)
        else:
            raise ValueError(f'Operator `{op}` cannot be called on {self!r} and {other!r}.')

    def __lift(self, op : str, other : Any) -> IntMod:
        """``other`` as a modular integer with the modulus of ``self`` (for reflected operators)."""
        return IntMod(self.__operand(op, other), self.__modulus)

    # Assignment and increment/decrement

    def assign(self, other : Union[int, IntMod]) -> IntMod:
        """Replace the value of ``self`` with ``other`` (reduced), returning ``self``."""
        self.__value = self.__operand("=", other)
        return self

    def increment(self) -> IntMod:
        """Add one in place, wrapping ``modulus - 1`` to ``0``, and return ``self``."""
        if self.__value == self.__modulus - 1:
            self.__value = 0
        else:
            self.__value += 1
        return self

    def decrement(self) -> IntMod:
        """Subtract one in place, wrapping ``0`` to ``modulus - 1``, and return ``self``."""
        if self.__value == 0:
            self.__value = self.__modulus - 1
        else:
            self.__value -= 1
        return self

    def post_increment(self) -> IntMod:
        """Add one in place and return a copy of the value from before the increment."""
        old = self.copy()
        self.increment()
        return old

    def post_decrement(self) -> IntMod:
        """Subtract one in place and return a copy of the value from before the decrement."""
        old = self.copy()
        self.decrement()
        return old

    # Unary operators

    def __pos__(self) -> IntMod:
        return self.copy()

    def __neg__(self) -> IntMod:
        """Additive inverse, ``modulus - value`` (or ``0`` when ``value == 0``)."""
        if self.__value == 0:
            return IntMod(0, self.__modulus)
        return IntMod(self.__modulus - self.__value, self.__modulus)

    # Compound assignment

    def __iadd__(self, other : Union[int, IntMod]) -> IntMod:
        self.__value = add_mod(self.__value, self.__operand("+=", other), self.__modulus)
        return self

    def __isub__(self, other : Union[int, IntMod]) -> IntMod:
        self.__value = sub_mod(self.__value, self.__operand("-=", other), self.__modulus)
        return self

    def __imul__(self, other : Union[int, IntMod]) -> IntMod:
        self.__value = mul_mod(self.__value, self.__operand("*=", other), self.__modulus)
        return self

    def __itruediv__(self, other : Union[int, IntMod]) -> IntMod:
        """Multiply in place by the inverse of ``other``.

        :raises NotInvertibleError: if ``other`` is not invertible modulo ``self.modulus()``.
        """
        inv = inverse_of(self.__operand("/=", other), self.__modulus)
        self.__value = mul_mod(self.__value, inv, self.__modulus)
        return self

    def __imod__(self, other : Union[int, IntMod]) -> IntMod:
        """Replace ``self`` with the remainder of its value divided by the canonical value of ``other``.

        :raises ZeroModulusError: if ``other`` is congruent to ``0``.
        """
        rhs = self.__operand("%=", other)
        if rhs == 0:
            raise ZeroModulusError()
        self.__value %= rhs
        return self

    # Binary operators, each defined as copy-then-compound-assign

    def __add__(self, other : Union[int, IntMod]) -> IntMod:
        """Addition between ``IntMod``s of the same modulus or between an ``IntMod`` and an integer."""
        result = self.copy()
        result += other
        return result

    def __radd__(self, other : int) -> IntMod:
        result = self.__lift("+", other)
        result += self
        return result

    def __sub__(self, other : Union[int, IntMod]) -> IntMod:
        """Subtraction between ``IntMod``s of the same modulus or between an ``IntMod`` and an integer."""
        result = self.copy()
        result -= other
        return result

    def __rsub__(self, other : int) -> IntMod:
        result = self.__lift("-", other)
        result -= self
        return result

    def __mul__(self, other : Union[int, IntMod]) -> IntMod:
        """Multiplication between ``IntMod``s of the same modulus or between an ``IntMod`` and an integer."""
        result = self.copy()
        result *= other
        return result

    def __rmul__(self, other : int) -> IntMod:
        result = self.__lift("*", other)
        result *= self
        return result

    def __truediv__(self, other : Union[int, IntMod]) -> IntMod:
        """Modular division, i.e. multiplication by the inverse of ``other``."""
        result = self.copy()
        result /= other
        return result

    def __rtruediv__(self, other : int) -> IntMod:
        result = self.__lift("/", other)
        result /= self
        return result

    def __mod__(self, other : Union[int, IntMod]) -> IntMod:
        result = self.copy()
        result %= other
        return result

    def __rmod__(self, other : int) -> IntMod:
        result = self.__lift("%", other)
        result %= self
        return result

    def __pow__(self, other : int) -> IntMod:
        """Raising a modular integer to an integer power.

        Negative exponents raise the inverse of ``self`` to ``-other`` and so fail with
        ``NotInvertibleError`` when ``self`` has no inverse."""
        if isinstance(other, bool) or not isinstance(other, int):
            raise ValueError(f'Cannot raise {self!r} to the power of {other!r}.')
        if other < 0:
            return IntMod(mod_pow(self.inverse(), -other, self.__modulus), self.__modulus)
        return IntMod(mod_pow(self.__value, other, self.__modulus), self.__modulus)

    # Comparison and conversion

    def __eq__(self, other : Any) -> bool:
        """Returns ``True`` if ``other`` is an ``IntMod`` with the same value, or an integer
        congruent to ``self.value()``, else returns ``False``.

        :raises ModulusMismatchError: if ``other`` is an ``IntMod`` with a different modulus.
        """
        if isinstance(other, (IntMod, int)) and not isinstance(other, bool):
            return self.__value == self.__operand("==", other)
        else:
            return False

    def __ne__(self, other : Any) -> bool:
        return not self.__eq__(other)

    __hash__ = None # type: ignore

    def __bool__(self) -> bool:
        return self.__value != 0

    def __int__(self) -> int:
        """Equivalent to ``self.value()``."""
        return self.__value

    def __index__(self) -> int:
        """Equivalent to ``self.value()``."""
        return self.__value

    # Text I/O

    def to_text(self) -> str:
        """The canonical value as a base-10 literal, e.g. ``IntMod(-1, 15).to_text() == '14'``."""
        return str(self.__value)

    @staticmethod
    def from_text(text : str, n : int) -> IntMod:
        """Parse a (possibly signed) base-10 integer and reduce it modulo ``n``.

        ``IntMod.from_text('-1', 15) == IntMod(14, 15)``
        """
        token = text.strip()
        if not _DECIMAL.fullmatch(token):
            raise ValueError(f'{text!r} is not a base-10 integer literal.')
        return IntMod(int(token), n)

    def write(self, stream : TextIO) -> TextIO:
        """Write ``self.to_text()`` to ``stream`` and return ``stream``."""
        stream.write(self.to_text())
        return stream

    def read_from(self, stream : TextIO) -> IntMod:
        """Read the next integer from ``stream`` into ``self``.

        Leading whitespace is skipped and reading stops at the first character that is
        not part of a signed base-10 integer, which a seekable stream leaves unread."""
        self.__value = IntMod.from_text(_read_token(stream), self.__modulus).__value
        return self

    @staticmethod
    def read(stream : TextIO, n : int) -> IntMod:
        """Read the next integer from ``stream`` as an ``IntMod`` modulo ``n`` (see :py:meth:`read_from`)."""
        return IntMod(n=n).read_from(stream)


def _read_token(stream : TextIO) -> str:
    """Read an optionally signed run of decimal digits, skipping leading whitespace.

    Reading stops at the first character that cannot continue the number. A seekable
    stream is left positioned on that character, so ``"12abc"`` yields ``"12"`` and
    ``"abc"`` stays unread; other streams consume it."""
    seekable = stream.seekable()
    chars : List[str] = []
    while True:
        pos = stream.tell() if seekable else 0
        c = stream.read(1)
        if not c:
            break
        if c.isspace() and not chars:
            continue
        if c in '0123456789' or (c in '+-' and not chars):
            chars.append(c)
            continue
        if seekable:
            stream.seek(pos)
        break
    token = ''.join(chars)
    if not _DECIMAL.fullmatch(token):
        raise ValueError(f'Expected a base-10 integer in {stream!r}, but read {token!r}.')
    return token


def ring(n : int) -> 'IntModRing':
    """Returns a constructor for modular integers modulo ``n``.

    ``Z13 = ring(13); Z13(20) == IntMod(7, 13)``
    """
    return IntModRing(n)


class IntModRing:
    """Constructor for ``IntMod`` values sharing one modulus (a stand-in for the type ``Z n``)."""
    __modulus : int

    def __init__(self, n : int) -> None:
        self.__modulus = check_modulus(n)

    def __repr__(self) -> str:
        return f"IntModRing({self.__modulus!r})"

    def __call__(self, value : Union[int, IntMod] = 0) -> IntMod:
        return IntMod(value, self.__modulus)

    def __eq__(self, other : Any) -> bool:
        return isinstance(other, IntModRing) and self.__modulus == other.__modulus

    def __hash__(self) -> int:
        return hash(self.__modulus)

    def modulus(self) -> int:
        return self.__modulus

    def __contains__(self, x : Any) -> bool:
        """``True`` for ``IntMod`` values with this ring's modulus."""
        return isinstance(x, IntMod) and x.modulus() == self.__modulus

    def zero(self) -> IntMod:
        return IntMod(0, self.__modulus)

    def one(self) -> IntMod:
        return IntMod(1, self.__modulus)

    def from_text(self, text : str) -> IntMod:
        return IntMod.from_text(text, self.__modulus)
