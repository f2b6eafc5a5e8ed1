###################################################################################
#  Copyright (c) 2023 by Paul Scherrer Institute, Switzerland
#  All rights reserved.
#  Authors: Zheqiao Geng
###################################################################################
'''
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Example code to generate the optical field of a Lorentzian laser: a transmitter
laser with low-frequency noise suppression and a local oscillator taking its
parameters from the transmitted signal (random walk phase)
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
'''
import logging
import numpy as np
import matplotlib.pyplot as plt

from lasernoise.ln_laser import Laser
from lasernoise.ln_noise import calc_psd_welch, calc_phase_var

logging.basicConfig(level = logging.INFO)

# parameters
Rs    = 28e9                                # symbol rate, Hz
US    = 8                                   # up-sampling factor
fs    = Rs * US                             # sampling frequency, Hz
N     = 2**16                               # number of samples
lw    = 1e5                                 # linewidth, Hz
rng   = np.random.default_rng(2023)         # random number generator

# transmitter laser (source) and local oscillator (takes Fs, Rs, length from Tx)
tx = Laser({'Power': (5, 'dBm'), 'linewidth': lw, 'L': 2**7,
            'Fs': fs, 'Rs': Rs, 'Lnoise': N})
lo = Laser({'Power': (5, 'dBm'), 'linewidth': lw, 'L': 1})

sig_tx = tx.traverse(rng = rng)
sig_lo = lo.traverse(sig_tx, rng = rng)

# verify the PSD of the Tx frequency noise
result = calc_psd_welch(sig_tx.fn, fs, nperseg = 2**12)

# phase increments of the LO (random walk)
lags = np.arange(1, 200)
status, var = calc_phase_var(sig_lo.pn, lags)

plt.figure(figsize = (10, 5))
plt.subplot(1,2,1)
plt.loglog(result['freq'][1:], result['psd'][1:], label = 'PSD of Generated Time Series')
plt.axhline(lw / np.pi, ls = '--', color = 'k',   label = 'Desired PSD')
plt.xlim([tx.min_freq, tx.max_freq])
plt.grid()
plt.legend()
plt.xlabel('Frequency (Hz)')
plt.ylabel(r'FM noise PSD $(Hz^2/Hz)$')
plt.subplot(1,2,2)
plt.plot(np.arange(N) / fs * 1e9, sig_tx.pn, label = 'Tx')
plt.plot(np.arange(N) / fs * 1e9, sig_lo.pn, label = 'LO')
plt.grid()
plt.legend()
plt.xlabel('Time (ns)')
plt.ylabel('Phase noise (rad)')
plt.show(block = False)

plt.figure()
plt.plot(lags, var)
plt.xlabel('Lag (samples)')
plt.ylabel(r'Var. of phase increments $(rad^2)$')
plt.grid()
plt.show(block = False)
