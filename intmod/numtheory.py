"""Reduction and number-theory kernel underlying :py:class:`intmod.intmod.IntMod`.

Every function here is pure except for the per-modulus totient cache, which is
filled at most once per modulus under a lock. Arithmetic helpers (``add_mod``,
``sub_mod``, ``mul_mod``) expect canonical operands (``0 <= a, b < n``) and
evaluate inside fixed-width :py:class:`intmod.word.Word` values so no
intermediate ever exceeds its word.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Dict, List, Mapping, Optional, Set

from .word import Word

__all__ = ['IntModError', 'NotInvertibleError', 'ZeroModulusError', 'ModulusMismatchError',
           'TotientCache', 'default_width', 'width_from_env', 'check_modulus',
           'gcd', 'euler_phi', 'prime_factors', 'mod_pow', 'standard_modulo', 'inverse_of',
           'add_mod', 'sub_mod', 'mul_mod']

_logger = logging.getLogger(__name__)


def width_from_env(environ : Mapping[str, str] = os.environ) -> int:
    """Word width configured by ``INTMOD_WORD_WIDTH`` in ``environ`` (64 when unset).

    The width must be an integer of at least 3, the narrowest word with room for
    a modulus."""
    raw = environ.get('INTMOD_WORD_WIDTH', '64')
    try:
        width = int(raw)
    except ValueError:
        raise ValueError(f'INTMOD_WORD_WIDTH must be an integer number of bits, but is {raw!r}.') from None
    if width < 3:
        raise ValueError(f'INTMOD_WORD_WIDTH must be at least 3, but is {width!r}.')
    return width

_DEFAULT_WIDTH = width_from_env()


class IntModError(ValueError):
    pass

class NotInvertibleError(IntModError):
    """Raised when a value shares a nontrivial factor with the modulus.

    ``n`` is the reduced value, ``modulus`` the modulus and ``gcd`` their
    greatest common divisor."""
    def __init__(self, n : int, modulus : int, gcd : int) -> None:
        self.n = n
        self.modulus = modulus
        self.gcd = gcd
        super().__init__(f'{n} is not invertible modulo {modulus} because gcd({n}, {modulus}) = {gcd}, which is not 1.\n')

class ZeroModulusError(IntModError, ZeroDivisionError):
    def __init__(self) -> None:
        super().__init__("Cannot mod by zero.")

class ModulusMismatchError(IntModError):
    pass


def default_width() -> int:
    """Bit width of the backing machine word (``INTMOD_WORD_WIDTH``, default 64)."""
    return _DEFAULT_WIDTH

def check_modulus(n : int, width : Optional[int] = None) -> int:
    """Return ``n`` if it is a usable modulus for ``width``-bit words, else raise ``ValueError``.

    A modulus must be at least 2 and a positive signed ``width``-bit value, i.e.
    ``2 <= n < 2 ** (width - 1)``. Products are formed in ``2 * width`` bits, so
    no further headroom is needed.

    Every such modulus also supports inverses and division: the totient behind
    them comes from :py:func:`prime_factors`, which handles any modulus below
    ``2 ** 64`` quickly. Wider words accept larger moduli, but a modulus that is a
    product of two primes above ``2 ** 50`` or so can then take minutes to factor."""
    width = default_width() if width is None else width
    if isinstance(n, bool) or not isinstance(n, int) or n < 2:
        raise ValueError(f'Expected the modulus to be an integer of at least 2, but was given {n!r}.')
    if n.bit_length() > width - 1:
        raise ValueError(f'Modulus {n!r} does not fit in a signed {width!r}-bit word.')
    return n


class TotientCache:
    """Memoizes ``euler_phi`` per modulus.

    The first lookup for a modulus computes the totient while holding the lock;
    later lookups are plain dictionary reads."""
    __values : Dict[int, int]

    def __init__(self) -> None:
        self.__values = {}
        self.__lock = threading.Lock()

    def totient(self, n : int) -> int:
        phi = self.__values.get(n)
        if phi is not None:
            return phi
        with self.__lock:
            phi = self.__values.get(n)
            if phi is None:
                phi = euler_phi(n)
                _logger.debug("computed euler_phi(%d) = %d", n, phi)
                self.__values[n] = phi
            return phi

    def __contains__(self, n : object) -> bool:
        return n in self.__values

    def __len__(self) -> int:
        return len(self.__values)

    def clear(self) -> None:
        with self.__lock:
            self.__values.clear()

_totients = TotientCache()


def gcd(a : int, b : int) -> int:
    """Greatest common divisor by the Euclidean algorithm, always nonnegative.

    >>> gcd(-7, 14)
    7
    >>> gcd(0, -5)
    5
    """
    a, b = abs(a), abs(b)
    while b != 0:
        a, b = b, a % b
    return a

def euler_phi(n : int) -> int:
    """Number of integers in ``[1, n]`` coprime to ``n``.

    ``phi(n) = n * prod(1 - 1/p)`` over the distinct primes ``p`` dividing ``n``,
    found by :py:func:`prime_factors`."""
    if n < 1:
        raise ValueError(f'euler_phi expects a positive integer, but got {n!r}.')
    res = n
    for p in prime_factors(n):
        res -= res // p
    return res

# Trial division stops here; larger cofactors go to Miller-Rabin and Pollard's rho.
_TRIAL_LIMIT = 1000

# Miller-Rabin witnesses, deterministic for every n < 3 * 10 ** 23 (Sorenson & Webster).
_WITNESSES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)

def prime_factors(n : int) -> Set[int]:
    """The distinct prime factors of ``n >= 1``.

    Small factors come from trial division by 2 and odd ``p`` up to 1000. Whatever
    is left has only large prime factors and is split with Pollard's rho, so a
    modulus of a 64-bit word factors in well under a second even when it is a
    large prime or a product of two large primes."""
    factors : Set[int] = set()
    p = 2
    while p <= _TRIAL_LIMIT and p * p <= n:
        if n % p == 0:
            factors.add(p)
            while n % p == 0:
                n //= p
        p += 1 if p == 2 else 2
    pending : List[int] = [n] if n > 1 else []
    while pending:
        m = pending.pop()
        if m < p * p or _is_prime(m):
            factors.add(m)
        else:
            d = _pollard_rho(m)
            pending.extend([d, m // d])
    return factors

def _is_prime(n : int) -> bool:
    """Miller-Rabin with fixed witnesses, for odd ``n`` with no factor below the trial limit."""
    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    for a in _WITNESSES:
        if a % n == 0:
            continue
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(s - 1):
            x = (x * x) % n
            if x == n - 1:
                break
        else:
            return False
    return True

def _pollard_rho(n : int) -> int:
    """A nontrivial factor of the odd composite ``n``."""
    c = 1
    while True:
        x = y = 2
        d = 1
        while d == 1:
            x = (x * x + c) % n
            y = (y * y + c) % n
            y = (y * y + c) % n
            d = gcd(x - y, n)
        if d != n:
            return d
        c += 1

def standard_modulo(x : int, n : int) -> int:
    """Return the unique ``r`` with ``0 <= r < n`` and ``r`` congruent to ``x`` modulo ``n``."""
    if x < 0:
        # -(x // n) is ceil(-x / n)
        return x + n * -(x // n)
    elif x >= n:
        return x % n
    else:
        return x

def add_mod(a : int, b : int, n : int, *, width : Optional[int] = None) -> int:
    """``(a + b) mod n`` for canonical ``a`` and ``b``."""
    width = default_width() if width is None else width
    return (Word(width, a) + Word(width, b)).value() % n

def sub_mod(a : int, b : int, n : int) -> int:
    """``(a - b) mod n`` for canonical ``a`` and ``b``, without going negative."""
    if b > a:
        return n - (b - a)
    else:
        return a - b

def mul_mod(a : int, b : int, n : int, *, width : Optional[int] = None) -> int:
    """``(a * b) mod n`` for canonical ``a`` and ``b``, using a double-width product."""
    width = default_width() if width is None else width
    product = Word(width, a).widen(width) * Word(width, b).widen(width)
    return product.value() % n

def mod_pow(base : int, exponent : int, n : int, *, width : Optional[int] = None) -> int:
    """Compute ``base ** exponent mod n`` by repeated squaring.

    The base is reduced before any multiplication and every product goes through
    :py:func:`mul_mod`. By convention any base to the power 0 is 1.

    :param base: Any integer.
    :param exponent: Nonnegative exponent.
    :param n: Modulus.
    """
    if exponent < 0:
        raise ValueError("Exponent must be non-negative.")
    if exponent == 0:
        return 1
    base = standard_modulo(base, n)
    if base == 0:
        return 0
    result = 1
    for bit in bin(exponent)[2:]:
        result = mul_mod(result, result, n, width=width)
        if bit == '1':
            result = mul_mod(base, result, n, width=width)
    return result

def inverse_of(x : int, n : int, *, width : Optional[int] = None) -> int:
    """Return the inverse of ``x`` modulo ``n``.

    By Euler's theorem ``a ** phi(n) == 1 (mod n)`` whenever ``gcd(a, n) == 1``, so
    the inverse is ``a ** (phi(n) - 1) mod n``. ``phi(n)`` is computed once per
    modulus and cached.

    :raises NotInvertibleError: if the reduced ``x`` shares a factor with ``n``.
    """
    r = standard_modulo(x, n)
    d = gcd(r, n)
    if d != 1:
        raise NotInvertibleError(r, n, d)
    return mod_pow(r, _totients.totient(n) - 1, n, width=width)
