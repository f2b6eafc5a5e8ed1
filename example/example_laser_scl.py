###################################################################################
#  Copyright (c) 2023 by Paul Scherrer Institute, Switzerland
#  All rights reserved.
#  Authors: Zheqiao Geng
###################################################################################
'''
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Example code to generate the phase noise of a semiconductor laser (SCL) and
cache the realization in a Matlab file
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
'''
import numpy as np

from lasernoise.ln_laser import Laser
from lasernoise.ln_cache import MatFileCache

# semiconductor laser, the draw option plots desired and obtained PSDs
param = {'Power':    (5, 'dBm'),
         'Fs':       64e9,
         'Lnoise':   2**16,
         'L':        2**10,
         'alpha':    3,
         'fr':       1e9,
         'K':        .3e-9,
         'LFLW1GHZ': 1e6,
         'HFLW':     1e5,
         'draw':     True}

laser = Laser(param, cache = MatFileCache('tmp/laser'))
sig   = laser.traverse(rng = np.random.default_rng(1))

print('RMS phase noise = {:.3e} rad'.format(np.std(sig.pn)))
print('RMS frequency noise = {:.3e} Hz'.format(np.std(sig.fn)))
