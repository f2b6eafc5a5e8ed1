"""Save/read data to/from Matlab files, units and parameter keys."""
#############################################################################
#  Copyright (c) 2023 by Paul Scherrer Institute, Switzerland
#  All rights reserved.
#  Authors: Zheqiao Geng
#############################################################################
'''
#########################################################################
Here collects routines for various functions

Implemented:
    - save_mat        : save a dictionary into a Matlab .mat file
    - load_mat        : load a Matlab .mat file into a dictionary
    - dbm2w           : convert a power from dBm to W
    - w2dbm           : convert a power from W to dBm
    - power_to_w      : interpret a power with explicit units, return W
    - param_key       : canonical hash of a parameter dictionary
#########################################################################
'''
import json
import hashlib
import logging
import numpy as np
import scipy.io as spio

logger = logging.getLogger(__name__)

def save_mat(data_dict, file_name):
    '''
    Save a dictionary of arrays into a Matlab file, one variable per key.
    1-D arrays are stored as columns.

    Parameters:
        data_dict: dict, variable name to array (or list)
        file_name: full file name including path, '.mat' is appended if missing

    Returns:
        status:    boolean, success (True) or fail (False)
    '''
    if not isinstance(data_dict, dict):
        return False
    if not file_name.endswith('.mat'):
        file_name += '.mat'

    try:
        spio.savemat(file_name, {k: np.asarray(v) for k, v in data_dict.items()},
                     oned_as = "column")
        return True
    except OSError as exc:
        logger.warning('Cannot write %s: %s', file_name, exc)
        return False

def load_mat(file_name):
    '''
    Load the variables of a Matlab file into a dict, dropping the file header
    entries. Singleton dimensions are squeezed.
    '''
    data = spio.loadmat(file_name, squeeze_me = True)
    return {k: v for k, v in data.items() if not k.startswith('__')}

def dbm2w(p_dbm):
    '''
    Convert power from dBm to W.
    '''
    return 1e-3 * 10.0**(p_dbm / 10.0)

def w2dbm(p_w):
    '''
    Convert power from W to dBm (``-inf`` for zero power).
    '''
    with np.errstate(divide = 'ignore'):
        return 10.0 * np.log10(p_w / 1e-3)

def power_to_w(power):
    '''
    Interpret a power value with explicit units.

    Parameters:
        power:  float, power in dBm; or tuple ``(value, unit)`` with unit
                 in ``'dBm'``, ``'mW'`` or ``'W'``

    Returns:
        status: boolean, success (True) or fail (False)
        p_w:    float, power in W
    '''
    if isinstance(power, (tuple, list)):
        if len(power) != 2:
            return False, None
        value, unit = power
    else:
        value, unit = power, 'dBm'

    try:
        value = float(value)
    except (TypeError, ValueError):
        return False, None

    if   unit == 'dBm': p_w = dbm2w(value)
    elif unit == 'mW':  p_w = value * 1e-3
    elif unit == 'W':   p_w = value
    else:               return False, None

    if not np.isfinite(p_w) or p_w < 0:
        return False, None
    return True, p_w

def param_key(params):
    '''
    Canonical key of a parameter dictionary, used to index cached noise
    realizations. Numbers are normalized to float so that ``1`` and ``1.0``
    give the same key.

    Parameters:
        params: dict, flat dictionary of str/int/float/None values

    Returns:
        key:    str, SHA-1 hex digest of the sorted JSON representation
    '''
    canon = {}
    for name, value in params.items():
        if isinstance(value, (bool, np.bool_)) or value is None or isinstance(value, str):
            canon[name] = value
        else:
            canon[name] = float(value)
    text = json.dumps(canon, sort_keys = True, separators = (',', ':'))
    return hashlib.sha1(text.encode('utf-8')).hexdigest()
