"""
Tests for the miscellaneous helpers and the cache adapters.
"""

import os

import pytest
import numpy as np

from lasernoise.ln_misc import save_mat, load_mat, dbm2w, w2dbm, power_to_w, param_key
from lasernoise.ln_cache import DictCache, MatFileCache


class TestPower:
    """Tests for the power conversions."""

    def test_dbm(self):
        """dBm to W and back."""
        assert dbm2w(0.0) == pytest.approx(1e-3)
        assert dbm2w(30.0) == pytest.approx(1.0)
        assert w2dbm(1e-3) == pytest.approx(0.0)
        assert w2dbm(0.0) == -np.inf

    @pytest.mark.parametrize("power, p_w", [
        (0.0, 1e-3),
        (10, 1e-2),
        ((5.0, 'mW'), 5e-3),
        ((1.0, 'W'), 1.0),
        ((3.0, 'dBm'), 1e-3 * 10**0.3),
    ])
    def test_power_to_w(self, power, p_w):
        """Powers with explicit units."""
        status, value = power_to_w(power)
        assert status
        assert value == pytest.approx(p_w)

    @pytest.mark.parametrize("power", [
        (1.0, 'dBW'),
        ('x', 'W'),
        (-1.0, 'W'),
        (1.0, 'W', 'extra'),
        None,
    ])
    def test_invalid(self, power):
        """Unknown units or values fail."""
        assert power_to_w(power) == (False, None)


class TestParamKey:
    """Tests for the canonical parameter key."""

    def test_order_and_type(self):
        """Key does not depend on the order or int/float type."""
        k1 = param_key({'linewidth': 1e5, 'Lnoise': 1024, 'mode': 'lorentzian'})
        k2 = param_key({'mode': 'lorentzian', 'Lnoise': 1024.0, 'linewidth': 100000})
        assert k1 == k2

    def test_different(self):
        """Different values give different keys."""
        k1 = param_key({'linewidth': 1e5, 'Lnoise': 1024})
        k2 = param_key({'linewidth': 1e5, 'Lnoise': 1025})
        assert k1 != k2


class TestMat:
    """Tests for the Matlab file I/O."""

    def test_save_load(self, tmp_path):
        """Arrays and lists are stored as Matlab variables."""
        file_name = str(tmp_path / 'data')

        assert save_mat({'fn': np.arange(5.0), 'pn': [1, 2, 3]}, file_name)
        data = load_mat(file_name + '.mat')

        assert sorted(data) == ['fn', 'pn']
        np.testing.assert_array_equal(data['fn'], np.arange(5.0))
        np.testing.assert_array_equal(data['pn'], [1, 2, 3])

    def test_save_not_dict(self, tmp_path):
        """Only dictionaries are saved."""
        assert save_mat([1, 2], str(tmp_path / 'x.mat')) is False


class TestCache:
    """Tests for the cache adapters."""

    def test_dict_cache(self):
        """Stored copies are returned."""
        cache = DictCache()
        fn = np.arange(3.0)

        assert cache.get('k') is None
        cache.put('k', (fn, 2 * fn))
        fn[0] = 10.0

        fn_c, pn_c = cache.get('k')
        np.testing.assert_array_equal(fn_c, [0, 1, 2])
        np.testing.assert_array_equal(pn_c, [0, 2, 4])

    def test_mat_file_cache(self, tmp_path):
        """Realizations are stored in one file per key."""
        folder = str(tmp_path / 'cache')
        cache = MatFileCache(folder)

        assert cache.get('abc') is None
        cache.put('abc', (np.arange(4.0), np.ones(4)))

        assert os.path.exists(os.path.join(folder, 'abc.mat'))
        fn, pn = MatFileCache(folder).get('abc')
        np.testing.assert_array_equal(fn, np.arange(4.0))
        np.testing.assert_array_equal(pn, np.ones(4))

    def test_mat_file_cache_single_sample(self, tmp_path):
        """Single-sample realizations keep their shape."""
        cache = MatFileCache(str(tmp_path))
        cache.put('one', (np.array([1.5]), np.array([0.5])))

        fn, pn = cache.get('one')
        assert fn.shape == (1,)
        assert pn.shape == (1,)
