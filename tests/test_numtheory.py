import unittest
import random
import threading
from intmod.numtheory import gcd, euler_phi, mod_pow, standard_modulo, inverse_of, \
                             add_mod, sub_mod, mul_mod, check_modulus, default_width, \
                             prime_factors, width_from_env, TotientCache, NotInvertibleError, IntModError


def brute_force_phi(n):
    return sum(1 for k in range(1, n + 1) if gcd(k, n) == 1)


def trial_division_phi(n):
    res = n
    p = 2
    while p * p <= n:
        if n % p == 0:
            while n % p == 0:
                n //= p
            res -= res // p
        p += 1
    if n > 1:
        res -= res // n
    return res


class GcdTests(unittest.TestCase):
    def test_gcd_with_one(self):
        self.assertEqual(gcd(1, 1234), 1)
        self.assertEqual(gcd(1, 1), 1)
        self.assertEqual(gcd(777, 1), 1)

    def test_gcd_with_prime(self):
        self.assertEqual(gcd(2, 1234), 2)
        self.assertEqual(gcd(1234, 2), 2)
        self.assertEqual(gcd(7, 14), 7)
        self.assertEqual(gcd(7, 8), 1)

    def test_gcd_multiple_factors(self):
        self.assertEqual(gcd(40320, 3456), 1152)
        self.assertEqual(gcd(210, 308), 14)

    def test_gcd_negatives(self):
        self.assertEqual(gcd(40320, -3456), 1152)
        self.assertEqual(gcd(-7, 14), 7)
        self.assertEqual(gcd(-9, 3), 3)
        self.assertEqual(gcd(-7, -14), 7)

    def test_gcd_zero(self):
        self.assertEqual(gcd(0, 12), 12)
        self.assertEqual(gcd(0, -12), 12)
        self.assertEqual(gcd(12, 0), 12)
        self.assertEqual(gcd(0, 0), 0)


class EulerPhiTests(unittest.TestCase):
    def test_primes(self):
        self.assertEqual(euler_phi(7), 6)
        self.assertEqual(euler_phi(13), 12)
        self.assertEqual(euler_phi(101), 100)
        self.assertEqual(euler_phi(983083), 983082)

    def test_square_free(self):
        self.assertEqual(euler_phi(6), 2)
        self.assertEqual(euler_phi(102), 32)
        self.assertEqual(euler_phi(95), 72)
        self.assertEqual(euler_phi(111), 72)

    def test_prime_powers_and_composites(self):
        self.assertEqual(euler_phi(4), 2)
        self.assertEqual(euler_phi(144), 48)
        self.assertEqual(euler_phi(12), 4)
        self.assertEqual(euler_phi(123456), 41088)
        self.assertEqual(euler_phi(1337), 1140)
        self.assertEqual(euler_phi(1000000000), 400000000)

    def test_matches_brute_force(self):
        for n in range(1, 300):
            self.assertEqual((n, euler_phi(n)), (n, brute_force_phi(n)))

    def test_nonpositive(self):
        with self.assertRaises(ValueError):
            euler_phi(0)

    def test_large_moduli(self):
        self.assertEqual(euler_phi(2 ** 61 - 1), 2 ** 61 - 2)
        self.assertEqual(euler_phi(2 ** 63 - 25), 2 ** 63 - 26)
        self.assertEqual(euler_phi(2 ** 62), 2 ** 61)
        self.assertEqual(euler_phi(1000000007 * 998244353), 1000000006 * 998244352)
        self.assertEqual(euler_phi(1000000007 ** 2), 1000000007 * 1000000006)
        self.assertEqual(euler_phi(3 * 1009 * 1000000007), 2 * 1008 * 1000000006)

    def test_matches_trial_division(self):
        for i in range(0, 20):
            n = random.randint(1, 10 ** 10)
            self.assertEqual((n, euler_phi(n)), (n, trial_division_phi(n)))


class PrimeFactorsTests(unittest.TestCase):
    def test_small(self):
        self.assertEqual(prime_factors(1), set())
        self.assertEqual(prime_factors(2), {2})
        self.assertEqual(prime_factors(12), {2, 3})
        self.assertEqual(prime_factors(1337), {7, 191})
        self.assertEqual(prime_factors(1000000000), {2, 5})

    def test_large(self):
        self.assertEqual(prime_factors(2 ** 61 - 1), {2 ** 61 - 1})
        self.assertEqual(prime_factors(1000000007 * 998244353), {1000000007, 998244353})
        self.assertEqual(prime_factors(1009 * 1013), {1009, 1013})
        self.assertEqual(prime_factors(1009 ** 3 * 2), {2, 1009})


class StandardModuloTests(unittest.TestCase):
    def test_multiples_reduce_to_zero(self):
        self.assertEqual(standard_modulo(13, 13), 0)
        self.assertEqual(standard_modulo(34, 17), 0)
        self.assertEqual(standard_modulo(1787569, 1337), 0)

    def test_in_range_is_identity(self):
        self.assertEqual(standard_modulo(12, 41), 12)
        self.assertEqual(standard_modulo(0, 83), 0)
        self.assertEqual(standard_modulo(999, 1000), 999)

    def test_above_modulus(self):
        self.assertEqual(standard_modulo(15, 2), 1)
        self.assertEqual(standard_modulo(74, 9), 2)
        self.assertEqual(standard_modulo(188, 88), 12)

    def test_negatives(self):
        self.assertEqual(standard_modulo(-1, 15), 14)
        self.assertEqual(standard_modulo(-123456, 2), 0)
        self.assertEqual(standard_modulo(-3, 73), 70)
        self.assertEqual(standard_modulo(-6, 21), 15)
        self.assertEqual(standard_modulo(-77, 11), 0)

    def test_canonical_and_idempotent(self):
        for i in range(0, 2000):
            n = random.randint(2, 2 ** 63 - 1)
            x = random.randint(-(2 ** 100), 2 ** 100)
            r = standard_modulo(x, n)
            self.assertTrue(0 <= r < n)
            self.assertEqual((x - r) % n, 0)
            self.assertEqual(standard_modulo(r, n), r)


class ModPowTests(unittest.TestCase):
    def test_powers_of_one(self):
        self.assertEqual(mod_pow(13, 24, 2), 1)
        self.assertEqual(mod_pow(13, 89, 12), 1)
        self.assertEqual(mod_pow(1, 919293, 999), 1)

    def test_powers_of_zero(self):
        self.assertEqual(mod_pow(13, 24, 13), 0)
        self.assertEqual(mod_pow(12, 89, 2), 0)
        self.assertEqual(mod_pow(0, 919293, 999), 0)

    def test_zero_exponent(self):
        self.assertEqual(mod_pow(0, 0, 7), 1)
        self.assertEqual(mod_pow(5, 0, 7), 1)

    def test_general(self):
        self.assertEqual(mod_pow(3, 8, 5), 1)
        self.assertEqual(mod_pow(7, 81, 17), 7)
        self.assertEqual(mod_pow(420, 69, 1337), 567)
        self.assertEqual(mod_pow(-2, 3, 11), 3)

    def test_agrees_with_builtin_pow(self):
        for i in range(0, 500):
            n = random.randint(2, 2 ** 63 - 1)
            b = random.randint(-(2 ** 70), 2 ** 70)
            e = random.randint(0, 2 ** 64)
            self.assertEqual(mod_pow(b, e, n), pow(b, e, n) if e > 0 else 1)

    def test_narrow_width(self):
        self.assertEqual(mod_pow(12345, 6789, 65521, width=17), pow(12345, 6789, 65521))

    def test_negative_exponent(self):
        with self.assertRaises(ValueError):
            mod_pow(2, -1, 7)


class InverseTests(unittest.TestCase):
    def test_inverses_exist(self):
        self.assertEqual(inverse_of(12, 13), 12)
        self.assertEqual(inverse_of(11, 14), 9)
        self.assertEqual(inverse_of(1337, 69), 8)
        self.assertEqual(inverse_of(1337, 1000000000), 325355273)

    def test_inverse_is_inverse(self):
        for n in [2, 3, 14, 15, 97, 1000, 65537, 1000000007]:
            for i in range(0, 50):
                x = random.randint(-10 ** 12, 10 ** 12)
                if gcd(x, n) != 1:
                    continue
                self.assertEqual((x * inverse_of(x, n)) % n, 1)

    def test_not_invertible_message(self):
        with self.assertRaises(NotInvertibleError) as cm:
            inverse_of(2, 1234)
        self.assertEqual(str(cm.exception), "2 is not invertible modulo 1234 because gcd(2, 1234) = 2, which is not 1.\n")
        with self.assertRaises(NotInvertibleError) as cm:
            inverse_of(22, 12)
        self.assertEqual(str(cm.exception), "10 is not invertible modulo 12 because gcd(10, 12) = 2, which is not 1.\n")
        with self.assertRaises(NotInvertibleError) as cm:
            inverse_of(49, 7)
        self.assertEqual(str(cm.exception), "0 is not invertible modulo 7 because gcd(0, 7) = 7, which is not 1.\n")

    def test_not_invertible_payload(self):
        with self.assertRaises(NotInvertibleError) as cm:
            inverse_of(-3, 15)
        self.assertEqual((cm.exception.n, cm.exception.modulus, cm.exception.gcd), (12, 15, 3))

    def test_not_invertible_is_value_error(self):
        with self.assertRaises(ValueError):
            inverse_of(6, 9)
        with self.assertRaises(IntModError):
            inverse_of(6, 9)


class ArithmeticKernelTests(unittest.TestCase):
    def test_add_mod(self):
        self.assertEqual(add_mod(12, 7, 17), 2)
        n = 2 ** 63 - 1
        self.assertEqual(add_mod(n - 1, n - 1, n), n - 2)

    def test_sub_mod(self):
        self.assertEqual(sub_mod(7, 5, 13), 2)
        self.assertEqual(sub_mod(5, 7, 13), 11)
        self.assertEqual(sub_mod(0, 12, 13), 1)
        self.assertEqual(sub_mod(4, 4, 13), 0)

    def test_mul_mod(self):
        self.assertEqual(mul_mod(12, 7, 13), 6)
        for i in range(0, 500):
            n = random.randint(2, 2 ** 63 - 1)
            a = random.randint(0, n - 1)
            b = random.randint(0, n - 1)
            self.assertEqual(mul_mod(a, b, n), (a * b) % n)

    def test_operands_must_fit_word(self):
        with self.assertRaises(ValueError):
            mul_mod(2 ** 64, 1, 2 ** 65)


class ModulusTests(unittest.TestCase):
    def test_default_width(self):
        self.assertGreaterEqual(default_width(), 3)

    def test_width_from_env(self):
        self.assertEqual(width_from_env({}), 64)
        self.assertEqual(width_from_env({'INTMOD_WORD_WIDTH': '32'}), 32)
        self.assertEqual(width_from_env({'INTMOD_WORD_WIDTH': ' 3 '}), 3)
        for bad in ['', 'sixty-four', '64.0', '2', '0', '-64']:
            with self.assertRaises(ValueError) as cm:
                width_from_env({'INTMOD_WORD_WIDTH': bad})
            self.assertIn('INTMOD_WORD_WIDTH', str(cm.exception))

    def test_check_modulus(self):
        self.assertEqual(check_modulus(2, 64), 2)
        self.assertEqual(check_modulus(2 ** 63 - 1, 64), 2 ** 63 - 1)
        for bad in [0, 1, -5, 2 ** 63, True, 3.0, "7"]:
            with self.assertRaises(ValueError):
                check_modulus(bad, 64)
        self.assertEqual(check_modulus(127, 8), 127)
        with self.assertRaises(ValueError):
            check_modulus(128, 8)


class TotientCacheTests(unittest.TestCase):
    def test_caches_per_modulus(self):
        cache = TotientCache()
        self.assertNotIn(1337, cache)
        self.assertEqual(cache.totient(1337), 1140)
        self.assertIn(1337, cache)
        self.assertEqual(cache.totient(14), 6)
        self.assertEqual(cache.totient(1337), 1140)
        self.assertEqual(len(cache), 2)
        cache.clear()
        self.assertEqual(len(cache), 0)

    def test_logs_first_computation_only(self):
        cache = TotientCache()
        with self.assertLogs('intmod.numtheory', level='DEBUG') as cm:
            cache.totient(1000000000)
            cache.totient(1000000000)
        self.assertEqual(len(cm.records), 1)
        self.assertIn("euler_phi(1000000000) = 400000000", cm.output[0])

    def test_concurrent_first_use(self):
        cache = TotientCache()
        results = []
        def work():
            results.append(cache.totient(983083))
        threads = [threading.Thread(target=work) for i in range(0, 8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(results, [983082] * 8)
        self.assertEqual(len(cache), 1)


if __name__ == "__main__":
    unittest.main()
