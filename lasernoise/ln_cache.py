"""Cache the synthesized noise realizations."""
#############################################################################
#  Copyright (c) 2023 by Paul Scherrer Institute, Switzerland
#  All rights reserved.
#  Authors: Zheqiao Geng
#############################################################################
'''
#########################################################################
Here collects the cache adapters for the noise realizations. A cache is
any object with the methods

    get(key)              -> (fn, pn) or None
    put(key, (fn, pn))

where ``key`` is a string produced by ``ln_misc.param_key``.

Implemented:
    - DictCache    : keeps the realizations in memory
    - MatFileCache : one Matlab .mat file per realization in a folder
#########################################################################
'''
import os
import logging
import numpy as np

from lasernoise.ln_misc import save_mat, load_mat

logger = logging.getLogger(__name__)

class DictCache:
    '''
    In-memory cache of noise realizations.
    '''
    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def put(self, key, value):
        fn, pn = value
        self.data[key] = (np.array(fn), np.array(pn))

    def __len__(self):
        return len(self.data)

class MatFileCache:
    '''
    File-backed cache, storing ``fn`` and ``pn`` in ``<folder>/<key>.mat``.

    Parameters:
        folder: string, folder of the cache files, created if not existing
    '''
    def __init__(self, folder):
        self.folder = folder
        os.makedirs(folder, exist_ok = True)

    def file_name(self, key):
        return os.path.join(self.folder, key + '.mat')

    def get(self, key):
        file_name = self.file_name(key)
        if not os.path.exists(file_name):
            return None
        data = load_mat(file_name)
        return np.atleast_1d(data['fn']), np.atleast_1d(data['pn'])

    def put(self, key, value):
        fn, pn = value
        if not save_mat({'fn': np.asarray(fn), 'pn': np.asarray(pn)}, self.file_name(key)):
            logger.warning('Noise realization %s not cached', key)
