"""Plotting functions for internal use."""
#############################################################################
#  Copyright (c) 2023 by Paul Scherrer Institute, Switzerland
#  All rights reserved.
#  Authors: Zheqiao Geng
#############################################################################
'''
#########################################################################
Here collects all plotting functions. The goal is to avoid importing the
"matplotlib" module in the algorithm codes to enable running the synthesis
where the "matplotlib" is not installed
#########################################################################
'''
import numpy as np
import matplotlib.pyplot as plt

from lasernoise.ln_psd import gen_psd
from lasernoise.ln_noise import calc_psd_welch

def plot_calc_psd(result):
    '''
    Plot the spectrum, used in function ``calc_psd_welch`` of the
    ``ln_noise`` module.
    '''
    plt.figure()
    plt.loglog(result['freq'][1:], result['psd'][1:])
    plt.xlabel('Frequency (Hz)')
    plt.ylabel('PSD (unit$^2$/Hz)')
    plt.grid()
    plt.show(block = False)

def plot_laser_noise(sig, model, nperseg = 4096):
    '''
    Plot the desired and obtained FM/PM noise PSDs and the noise series of a
    laser output, used in ``Laser.traverse`` of the ``ln_laser`` module.
    '''
    psd    = gen_psd(model, sig.fs)
    res_fn = calc_psd_welch(sig.fn, sig.fs, nperseg = nperseg)
    res_pn = calc_psd_welch(sig.pn, sig.fs, nperseg = nperseg)
    t_ns   = np.arange(sig.L) / sig.fs * 1e9

    plt.figure(figsize = (12, 6))
    plt.subplot(2,2,1)
    plt.loglog(psd['freq'], psd['fm_psd'], label = 'Desired')
    if res_fn['status']:
        plt.loglog(res_fn['freq'][1:], res_fn['psd'][1:], label = 'Obtained')
    plt.xlim([psd['min_freq'], psd['max_freq']])
    plt.grid()
    plt.legend()
    plt.xlabel('Frequency (Hz)')
    plt.ylabel('FM noise PSD (Hz$^2$/Hz)')
    plt.subplot(2,2,2)
    plt.loglog(psd['freq'], psd['pm_psd'], label = 'Desired')
    if res_pn['status']:
        plt.loglog(res_pn['freq'][1:], res_pn['psd'][1:], label = 'Obtained')
    plt.xlim([psd['min_freq'], psd['max_freq']])
    plt.grid()
    plt.legend()
    plt.xlabel('Frequency (Hz)')
    plt.ylabel('PM noise PSD (rad$^2$/Hz)')
    plt.subplot(2,2,3)
    plt.plot(t_ns, sig.fn * 1e-6)
    plt.grid()
    plt.xlabel('Time (ns)')
    plt.ylabel('Frequency noise (MHz)')
    plt.subplot(2,2,4)
    plt.plot(t_ns, sig.pn)
    plt.grid()
    plt.xlabel('Time (ns)')
    plt.ylabel('Phase noise (rad)')
    plt.suptitle('Laser Noise ({})'.format(model.mode))
    plt.show(block = False)
