"""Synthesize, clip and analyze laser frequency/phase noise."""
#############################################################################
#  Copyright (c) 2023 by Paul Scherrer Institute, Switzerland
#  All rights reserved.
#  Authors: Zheqiao Geng
#############################################################################
'''
#########################################################################
Here collects routines for laser phase noise synthesis

Implemented:
    - build_sym_spectrum  : build the two-sided spectrum from a one-sided PSD
    - idft                : inverse DFT at arbitrary times for a non-uniform
                            frequency grid
    - gen_impulse_resp    : time-domain filter matching a one-sided PSD
    - gen_white_noise     : generate white Gaussian noise
    - gen_fm_pm_noise     : generate frequency and phase noise series from
                            a one-sided FM noise PSD
    - clip_phase_noise    : fold the phase noise back into a range
    - calc_psd_welch      : calculate the PSD of a noise series (Welch)
    - calc_phase_var      : variance of the phase increments vs. lag

Basic algorithm of the synthesis:
    1. the one-sided FM noise PSD is mirrored into a two-sided spectrum with
       the DC bin forced to zero (unless there is a single bin)
    2. the amplitude spectrum is converted to an impulse response with IDFT
    3. white Gaussian noise is filtered with the impulse response
    4. the phase noise is the integral of the frequency noise
#########################################################################
'''
import logging
import numpy as np
from scipy import signal

logger = logging.getLogger(__name__)

def build_sym_spectrum(freq, fm_psd):
    '''
    Build the two-sided spectrum from the one-sided FM noise PSD.

    Parameters:
        freq:    numpy array, ascending positive frequencies (length L), Hz
        fm_psd:  numpy array, one-sided FM noise PSD (length L), Hz^2/Hz

    Returns:
        status:  boolean, success (True) or fail (False)
        freqs:   numpy array, ``[-freq[::-1], 0, freq]`` (length 2L+1), Hz
        H:       numpy array, two-sided PSD (length 2L+1), Hz^2/Hz

    Note:
        The DC bin is zero if L > 1, so the synthesized phase noise does not
        contain a random walk. If L = 1, the DC bin takes the same level as
        the single bin and the phase behaves like a random walk.
    '''
    freq   = np.asarray(freq,   dtype = float).ravel()
    fm_psd = np.asarray(fm_psd, dtype = float).ravel()

    # check the input
    if (freq.shape != fm_psd.shape) or (freq.shape[0] < 1) or \
       np.any(np.isnan(fm_psd)) or np.any(fm_psd < 0):
        return False, None, None

    L = freq.shape[0]

    # mirror the spectrum and halve the power for the two sides
    freqs = np.concatenate([-freq[::-1], [0.0], freq])
    H     = np.concatenate([fm_psd[::-1], [0.0], fm_psd]) / 2.0

    if L == 1: H[L] = fm_psd[0] / 2.0
    else:      H[L] = 0.0

    return True, freqs, H

def idft(f, X, t, block = 256):
    '''
    Compute the IDFT at times ``t``, given frequency terms ``X`` taken at
    frequencies ``f``, which do not need to be uniformly spaced::

        x(t) = sum_k { X(k) * w(k) * exp(2*pi*j*t*f(k)) }

    where ``w`` are the trapezoid quadrature weights of the frequency grid.
    The spacing between the last negative frequency and DC is zeroed, which
    avoids counting the seam of the mirrored spectrum twice.

    Parameters:
        f:       numpy array, ascending frequencies, Hz
        X:       numpy array, real or complex frequency terms
        t:       numpy array, times, s (any shape)
        block:   int, number of time samples evaluated at once

    Returns:
        x:       numpy array (complex), time series with the shape of ``t``
    '''
    shape = np.shape(t)
    f     = np.asarray(f, dtype = float).ravel()
    X     = np.asarray(X).ravel()
    t     = np.asarray(t, dtype = float).ravel()

    # quadrature weights
    df = np.diff(f)
    if df.shape[0] > 1:
        df[df.shape[0] // 2 - 1] = 0.0
    w  = (np.concatenate([[0.0], df]) + np.concatenate([df, [0.0]])) / 2.0
    Xw = X * w

    # direct sum, evaluated in blocks of times to limit the memory
    x = np.zeros(t.shape[0], dtype = complex)
    for i in range(0, t.shape[0], block):
        tb = t[i:i + block]
        x[i:i + block] = np.exp(2.0 * np.pi * 1j * np.outer(tb, f)) @ Xw

    return x.reshape(shape)

def gen_impulse_resp(freq, fm_psd, fs):
    '''
    Generate the real time-domain filter whose output has the given FM
    noise PSD when driven by white noise of PSD ``1/fs``.

    Parameters:
        freq:    numpy array, ascending positive frequencies (length L), Hz
        fm_psd:  numpy array, one-sided FM noise PSD (length L), Hz^2/Hz
        fs:      float, sampling frequency, Hz

    Returns:
        status:  boolean, success (True) or fail (False)
        h:       numpy array, impulse response (length 2L+1)
        t:       numpy array, time of the filter taps, s
    '''
    if fs <= 0:
        return False, None, None

    status, freqs, H = build_sym_spectrum(freq, fm_psd)
    if not status:
        return False, None, None

    L = (freqs.shape[0] - 1) // 2
    t = np.linspace(-L, L, 2 * L + 1) / fs
    h = np.real(idft(freqs, np.sqrt(H), t))
    return True, h, t

def gen_white_noise(n, fs, rng):
    '''
    Generate unit-variance white Gaussian noise, scaled by ``1/sqrt(fs)``
    (continuous to discrete PSD normalization).

    Parameters:
        n:       int, number of samples
        fs:      float, sampling frequency, Hz
        rng:     numpy.random.Generator, random number generator

    Returns:
        noise:   numpy array, white noise series
    '''
    return rng.standard_normal(int(n)) / np.sqrt(fs)

def gen_fm_pm_noise(freq, fm_psd, fs, lnoise, rng = None, limit_pn = 0.0):
    '''
    Generate the frequency and phase noise series with the given FM noise
    PSD. The white noise is longer than the requested series by the filter
    length, so that the valid part of the convolution has exactly
    ``lnoise`` samples.

    Parameters:
        freq:     numpy array, ascending positive frequencies (length L), Hz
        fm_psd:   numpy array, one-sided FM noise PSD (length L), Hz^2/Hz
        fs:       float, sampling frequency, Hz
        lnoise:   int, number of samples of the output series
        rng:      numpy.random.Generator, a new one is created if None
        limit_pn: float, phase noise folding limit (rad), 0 for no folding

    Returns:
        status:   boolean, success (True) or fail (False)
        fn:       numpy array, frequency noise series, Hz
        pn:       numpy array, phase noise series, rad
    '''
    # check the input
    if (fs <= 0) or (lnoise < 1) or (limit_pn < 0):
        return False, None, None

    status, h, _ = gen_impulse_resp(freq, fm_psd, fs)
    if not status:
        return False, None, None

    if rng is None:
        rng = np.random.default_rng()

    # inflate the working length to compensate the valid convolution
    lpsd = (h.shape[0] - 1) // 2
    lw   = (lnoise + 2 * lpsd) / 2.0
    logger.debug('Working length %g for %d samples and PSD length %d', lw, lnoise, lpsd)

    # filter the noise and integrate it
    noise = gen_white_noise(round(2 * lw), fs, rng)
    fn    = signal.convolve(noise, h, mode = 'valid')
    pn    = np.cumsum(2.0 * np.pi * fn / fs)

    if limit_pn > 0:
        status, pn = clip_phase_noise(pn, limit_pn)

    # deflate the working length back
    lfinal = int(round(2 * (lw - lpsd)))
    return True, fn[:lfinal], pn[:lfinal]

def clip_phase_noise(pn, limit_pn):
    '''
    Remove the mean of the phase noise and fold the samples beyond
    ``[-limit_pn, limit_pn]`` back into the range (reflection at the
    boundary, not saturation). Apply it once: samples beyond three times the
    limit are not brought back into the range.

    Parameters:
        pn:        numpy array, phase noise series, rad
        limit_pn:  float, folding limit, rad

    Returns:
        status:    boolean, success (True) or fail (False)
        pn_c:      numpy array, folded phase noise series, rad
    '''
    if (pn is None) or (limit_pn <= 0):
        return False, None

    pn_c = np.asarray(pn, dtype = float) - np.mean(pn)

    ids = pn_c > limit_pn
    pn_c[ids] = -pn_c[ids] + 2.0 * limit_pn
    ids = pn_c < -limit_pn
    pn_c[ids] = -pn_c[ids] - 2.0 * limit_pn

    return True, pn_c

def calc_psd_welch(data, fs, nperseg = 4096, plot = False):
    '''
    Calculate the one-sided PSD of a noise series with Welch's method
    (Hamming window, 50% overlap).

    Parameters:
        data:    numpy array, 1-D noise series
        fs:      float, sampling frequency, Hz
        nperseg: int, segment length, reduced to the data length if larger
        plot:    boolean, True for plot the spectrum

    Returns:
        result:  dict with the keys
                  freq:     numpy array, frequency, Hz
                  psd:      numpy array, one-sided PSD, unit^2/Hz
                  amp_resp: numpy array, PSD in dB/Hz
                  status:   boolean, success (True) or fail (False)
    '''
    # results
    result = {'status': False}

    data = np.asarray(data)
    if (data.ndim != 1) or (data.shape[0] < 3) or (fs <= 0) or (nperseg < 3):
        return result

    nseg = min(int(nperseg), data.shape[0])
    freq, psd = signal.welch(data, fs = fs, window = 'hamming',
                             nperseg = nseg, noverlap = nseg // 2)

    # collect the results
    result['freq']     = freq
    result['psd']      = psd
    with np.errstate(divide = 'ignore'):
        result['amp_resp'] = 10.0 * np.log10(psd)
    result['status']   = True

    # make the plot
    if plot:
        from lasernoise.ln_plot import plot_calc_psd
        plot_calc_psd(result)

    return result

def calc_phase_var(pn, lags):
    '''
    Calculate the variance of the phase increments ``pn[n+lag] - pn[n]``.
    It grows linearly with the lag for a random walk (Lorentzian laser).

    Parameters:
        pn:      numpy array, phase noise series, rad
        lags:    list or numpy array of int, lags in samples

    Returns:
        status:  boolean, success (True) or fail (False)
        var:     numpy array, variance for each lag, rad^2
    '''
    pn   = np.asarray(pn, dtype = float)
    lags = np.atleast_1d(lags).astype(int)

    if (pn.ndim != 1) or np.any(lags < 1) or np.any(lags >= pn.shape[0] - 1):
        return False, None

    var = np.array([np.var(pn[lag:] - pn[:-lag]) for lag in lags])
    return True, var
