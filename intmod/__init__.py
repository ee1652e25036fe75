"""Integers modulo a fixed modulus. Use :py:class:`intmod.IntMod` or :py:func:`intmod.ring`."""

from .word import Word
from .numtheory import IntModError, NotInvertibleError, ZeroModulusError, ModulusMismatchError, \
                       gcd, euler_phi, mod_pow, standard_modulo, inverse_of
from .intmod import IntMod, IntModRing, ring

__all__ = ['intmod', 'numtheory', 'word',
           'IntMod', 'IntModRing', 'ring', 'Word',
           'IntModError', 'NotInvertibleError', 'ZeroModulusError', 'ModulusMismatchError',
           'gcd', 'euler_phi', 'mod_pow', 'standard_modulo', 'inverse_of']
