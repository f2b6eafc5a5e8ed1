"""Generate the frequency noise PSD of lasers."""
#############################################################################
#  Copyright (c) 2023 by Paul Scherrer Institute, Switzerland
#  All rights reserved.
#  Authors: Zheqiao Geng
#############################################################################
'''
#########################################################################
Here collects routines for the laser frequency noise PSD models

Implemented:
    - gen_freq_grid   : generate the one-sided frequency grid of the PSD
    - lorentzian_psd  : FM noise PSD of a Lorentzian laser
    - scl_psd         : FM noise PSD of a semiconductor laser (SCL)
    - gen_psd         : generate the FM and PM noise PSDs of a noise model

The SCL model follows:
M. Iglesias Olmedo et al., "Impact of Carrier Induced Frequency Noise from
the Transmitter Laser on 28 and 56 Gbaud DP-QPSK Metro Links," ACP 2014,
paper ATh1E.1.
#########################################################################
'''
import logging
import numpy as np

logger = logging.getLogger(__name__)

def gen_freq_grid(lpsd, min_freq, max_freq):
    '''
    Generate the uniform positive frequency grid where the PSD is evaluated.
    The trapezoid quadrature of the impulse response follows the PSD within
    a few percent on this grid. Use ``ln_noise.idft`` directly for other
    grids.

    Parameters:
        lpsd:     int, number of frequency points
        min_freq: float, lowest frequency, Hz
        max_freq: float, highest frequency, Hz

    Returns:
        status:   boolean, success (True) or fail (False)
        freq:     numpy array, ascending frequencies, Hz
    '''
    # check the input
    if (int(lpsd) != lpsd) or (lpsd < 1) or (max_freq <= 0):
        return False, None

    lpsd = int(lpsd)

    # a single bin represents the whole band up to Nyquist
    if lpsd == 1:
        return True, np.array([float(max_freq)])

    if (min_freq <= 0) or (max_freq < min_freq):
        return False, None

    return True, np.linspace(min_freq, max_freq, lpsd)

def lorentzian_psd(freq, linewidth):
    '''
    Flat FM noise PSD (Hz^2/Hz) giving a Lorentzian optical line with FWHM
    equal to ``linewidth``.
    '''
    return np.full(np.shape(freq), linewidth / np.pi)

def scl_psd(freq, LFLW1GHZ, HFLW, fr, K, alpha):
    '''
    FM noise PSD of a semiconductor laser.

    Parameters:
        freq:     numpy array, frequencies, Hz
        LFLW1GHZ: float, equivalent linewidth of the 1/f noise at 1 GHz, Hz
        HFLW:     float, high-frequency (Lorentzian-equivalent) linewidth, Hz
        fr:       float, relaxation resonance frequency, Hz
        K:        float, damping K-factor, s
        alpha:    float, linewidth enhancement factor

    Returns:
        psd:      numpy array, one-sided FM noise PSD, Hz^2/Hz
    '''
    freq  = np.asarray(freq, dtype = float)
    gamma = K * fr**2                                       # damping rate, 1/s
    h_ro  = fr**4 / ((fr**2 - freq**2)**2 + (gamma * freq / (2.0 * np.pi))**2)

    flicker = LFLW1GHZ / np.pi * (1e9 / freq)               # 1/f term referenced at 1 GHz
    white   = HFLW / np.pi * (1.0 + alpha**2 * h_ro)        # carrier induced noise
    return flicker + white

def gen_psd(model, fs):
    '''
    Generate the FM and PM noise PSDs of a laser noise model. The band goes
    from ``fs / Lpsd`` to the Nyquist frequency.

    Parameters:
        model:  object with the fields ``mode``, ``Lpsd`` and the
                 mode parameters (``linewidth`` or ``LFLW1GHZ``, ``HFLW``,
                 ``fr``, ``K``, ``alpha``)
        fs:     float, sampling frequency, Hz

    Returns:
        result: dict with the keys
                 freq:     numpy array, FMfreq, Hz
                 fm_psd:   numpy array, one-sided FM noise PSD, Hz^2/Hz
                 pm_psd:   numpy array, one-sided PM noise PSD, rad^2/Hz
                 min_freq: float, Hz
                 max_freq: float, Hz
                 lpsd:     int
                 status:   boolean, success (True) or fail (False)
    '''
    # results
    result = {'status': False}

    # check the input
    lpsd = model.Lpsd
    if (lpsd is None) or (lpsd < 1) or (fs is None) or (fs <= 0):
        return result

    min_freq = fs / lpsd
    max_freq = fs / 2.0

    status, freq = gen_freq_grid(lpsd, min_freq, max_freq)
    if not status:
        return result

    # evaluate the model
    if model.mode == 'lorentzian':
        if model.linewidth is None:
            return result
        fm_psd = lorentzian_psd(freq, model.linewidth)

    elif model.mode == 'semiconductor':
        pars = (model.LFLW1GHZ, model.HFLW, model.fr, model.K, model.alpha)
        if any(p is None for p in pars):
            return result
        fm_psd = scl_psd(freq, *pars)

    else:
        return result

    logger.debug('Generated %s PSD on %d grid points in [%g, %g] Hz',
                 model.mode, lpsd, min_freq, max_freq)

    # collect the results
    result['freq']     = freq
    result['fm_psd']   = fm_psd
    result['pm_psd']   = fm_psd / freq**2                   # phase is the integral of frequency
    result['min_freq'] = min_freq
    result['max_freq'] = max_freq
    result['lpsd']     = int(lpsd)
    result['status']   = True
    return result
