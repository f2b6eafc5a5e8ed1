"""Laser model: optical field with frequency/phase noise of a given PSD."""
#############################################################################
#  Copyright (c) 2023 by Paul Scherrer Institute, Switzerland
#  All rights reserved.
#  Authors: Zheqiao Geng
#############################################################################
'''
#########################################################################
Here collects the laser model

Implemented:
    - select_noise_model : choose the Lorentzian or semiconductor noise model
                           from a parameter dictionary
    - sampling_context   : validate and pack the sampling parameters
    - synthesize         : generate the noisy optical field of a laser
    - assemble_field     : build the complex baseband optical field
    - Laser              : laser block, either a source (Fs and Lnoise given)
                           or taking Fs, Rs and length from an input signal

Two types of operation:
    - lorentzian:    specify ``linewidth``. The FM noise PSD is flat at
                     linewidth/pi, i.e. a Lorentzian optical line with a FWHM
                     of linewidth
    - semiconductor: specify ``LFLW1GHZ``, ``HFLW``, ``fr``, ``K`` and
                     ``alpha``. ``linewidth`` takes precedence if also given

The PSD length ``L`` (or ``Lir``) sets the filter length. The DC component
of the frequency noise is removed if L > 1, otherwise the phase is a
random walk. Example of a Lorentzian laser of 100 kHz linewidth::

    laser = Laser({'Fs': 80e9, 'Lnoise': 2**10, 'linewidth': 1e5,
                   'Power': (5, 'dBm')})
    sig   = laser.traverse(rng = np.random.default_rng(1))
#########################################################################
'''
import logging
import threading
from dataclasses import dataclass, asdict

import numpy as np
from scipy import constants

from lasernoise.ln_psd import gen_psd
from lasernoise.ln_noise import gen_fm_pm_noise
from lasernoise.ln_misc import power_to_w, w2dbm, param_key

logger = logging.getLogger(__name__)

FC_DEFAULT        = constants.c / 1550e-9       # carrier frequency, Hz
LINEWIDTH_DEFAULT = 100e3                       # Hz
LPSD_SCL_DEFAULT  = 2**11
SCL_PARAMS        = ('LFLW1GHZ', 'HFLW', 'fr', 'K', 'alpha')
KNOWN_PARAMS      = {'Fs', 'Rs', 'Lnoise', 'Fc', 'Power', 'linewidth', 'limitPn',
                     'L', 'Lir', 'draw'} | set(SCL_PARAMS)

class LaserError(Exception):
    '''Base class of the laser model errors.'''

class LaserConfigError(LaserError, ValueError):
    '''Inconsistent configuration of the laser (modes, missing inputs).'''

class LaserParamError(LaserError, ValueError):
    '''Invalid parameter value.'''

class SynthesisError(LaserError, RuntimeError):
    '''The noise synthesis did not produce a valid phase noise.'''

@dataclass(frozen = True)
class NoiseModelSpec:
    '''Parameters of the frequency noise PSD.'''
    mode:      str
    Lpsd:      int   = 1
    linewidth: float = None
    LFLW1GHZ:  float = None
    HFLW:      float = None
    fr:        float = None
    K:         float = None
    alpha:     float = None

    def cache_params(self):
        pars = {'mode': self.mode, 'Lpsd': self.Lpsd}
        if self.mode == 'lorentzian':
            pars['linewidth'] = self.linewidth
        else:
            pars.update({name: getattr(self, name) for name in SCL_PARAMS})
        return pars

@dataclass(frozen = True)
class SamplingContext:
    '''Sampling parameters of the generated field.'''
    Fs:     float
    Lnoise: int
    Rs:     float = 1.0
    Fc:     float = FC_DEFAULT
    Power:  float = 1e-3                        # W

@dataclass
class Signal:
    '''Complex baseband optical field with its metadata.'''
    x:     np.ndarray
    fs:    float
    rs:    float      = 1.0
    power: float      = 1e-3                    # W
    fc:    float      = FC_DEFAULT
    fn:    np.ndarray = None                    # frequency noise, Hz
    pn:    np.ndarray = None                    # phase noise, rad

    @property
    def L(self):
        return self.x.shape[0]

    @property
    def power_dbm(self):
        return w2dbm(self.power)

def _check_lpsd(lpsd):
    if isinstance(lpsd, (bool, np.bool_)) or not isinstance(lpsd, (int, np.integer)) or lpsd < 1:
        raise LaserParamError('PSD length must be a positive integer, got {!r}'.format(lpsd))
    return int(lpsd)

def select_noise_model(param):
    '''
    Select the noise model from the laser parameters. The Lorentzian mode
    is used if ``linewidth`` is given or ``LFLW1GHZ`` is missing, even if
    other semiconductor parameters are given.

    Parameters:
        param:  dict, laser parameters

    Returns:
        model:  NoiseModelSpec
    '''
    lpsd = param.get('L', param.get('Lir'))

    if ('linewidth' in param) or ('LFLW1GHZ' not in param):
        logger.info('Using Lorentzian mode.')
        linewidth = param.get('linewidth', LINEWIDTH_DEFAULT)
        if (linewidth is None) or not np.isfinite(linewidth) or (linewidth < 0):
            raise LaserParamError('Linewidth must be finite and non-negative, got {!r}'.format(linewidth))
        return NoiseModelSpec(mode      = 'lorentzian',
                              Lpsd      = _check_lpsd(1 if lpsd is None else lpsd),
                              linewidth = float(linewidth))

    logger.info('Using SCL mode.')
    missing = [name for name in SCL_PARAMS if param.get(name) is None]
    if missing:
        raise LaserConfigError('Semiconductor mode requires {}'.format(', '.join(missing)))
    bad = [name for name in SCL_PARAMS if not np.isfinite(param[name])]
    if bad:
        raise LaserParamError('Semiconductor parameters must be finite: {}'.format(', '.join(bad)))

    return NoiseModelSpec(mode = 'semiconductor',
                          Lpsd = _check_lpsd(LPSD_SCL_DEFAULT if lpsd is None else lpsd),
                          **{name: float(param[name]) for name in SCL_PARAMS})

def sampling_context(Fs, Lnoise, Rs = 1.0, Fc = FC_DEFAULT, Power = 1e-3):
    '''
    Validate the sampling parameters (``Power`` in W) and pack them.
    '''
    if (Fs is None) or not np.isfinite(Fs) or (Fs <= 0):
        raise LaserParamError('Sampling frequency must be positive, got {!r}'.format(Fs))
    if isinstance(Lnoise, (bool, np.bool_)) or not isinstance(Lnoise, (int, np.integer)) or Lnoise < 1:
        raise LaserParamError('Noise length must be a positive integer, got {!r}'.format(Lnoise))
    return SamplingContext(Fs = float(Fs), Lnoise = int(Lnoise), Rs = float(Rs),
                           Fc = float(Fc), Power = float(Power))

def assemble_field(pn, context, fn = None):
    '''
    Build the optical field ``sqrt(P) * exp(j*pn)`` of ``context.Lnoise``
    samples.

    Parameters:
        pn:       numpy array, phase noise series, rad
        context:  SamplingContext
        fn:       numpy array, frequency noise series kept with the field

    Returns:
        sig:      Signal
    '''
    L = context.Lnoise
    x = np.sqrt(context.Power) * np.exp(1j * pn[:L])
    return Signal(x     = x,
                  fs    = context.Fs,
                  rs    = context.Rs,
                  power = context.Power,
                  fc    = context.Fc,
                  fn    = None if fn is None else fn[:L],
                  pn    = pn[:L])

def synthesize(model, context, rng = None, limit_pn = 0.0, cache = None, psd_source = gen_psd):
    '''
    Generate the optical field of a laser with the frequency noise PSD given
    by the noise model.

    Parameters:
        model:      NoiseModelSpec
        context:    SamplingContext
        rng:        numpy.random.Generator, a new one is created if None
        limit_pn:   float, phase noise folding limit (rad), 0 for no folding
        cache:      object with ``get(key)`` and ``put(key, (fn, pn))``, or None
        psd_source: function ``(model, fs) -> dict`` with the keys ``status``,
                     ``freq`` and ``fm_psd`` (see ``ln_psd.gen_psd``)

    Returns:
        sig:        Signal
    '''
    _check_lpsd(model.Lpsd)
    if limit_pn < 0:
        raise LaserParamError('Phase noise limit must be non-negative, got {!r}'.format(limit_pn))

    # look up the cache
    key = None
    hit = None
    if cache is not None:
        key = param_key(dict(model.cache_params(),
                             Fs      = context.Fs,
                             Lnoise  = context.Lnoise,
                             limitPn = limit_pn))
        hit = cache.get(key)

    if hit is not None:
        logger.info('Noise realization %s loaded from cache', key)
        fn, pn = hit
    else:
        fn, pn = _gen_noise(model, context, rng, limit_pn, psd_source)

    # never skip the output silently
    if (pn is None) or (pn.shape[0] != context.Lnoise) or not np.all(np.isfinite(pn)):
        raise SynthesisError('Phase noise is undefined, no optical field generated')

    # only valid realizations are cached
    if (hit is None) and (cache is not None):
        cache.put(key, (fn, pn))

    return assemble_field(pn, context, fn = fn)

def _gen_noise(model, context, rng, limit_pn, psd_source):
    psd = psd_source(model, context.Fs)
    if not psd.get('status', False):
        raise SynthesisError('PSD source failed for the {} model'.format(model.mode))

    freq   = np.asarray(psd['freq'],   dtype = float).ravel()
    fm_psd = np.asarray(psd['fm_psd'], dtype = float).ravel()

    if (fm_psd.shape[0] == 0) or np.all(np.isnan(fm_psd)):
        raise SynthesisError('PSD source returned no valid samples')
    if (freq.shape != fm_psd.shape) or (fm_psd.shape[0] != model.Lpsd):
        raise LaserParamError('PSD length {} does not match Lpsd = {}'.format(
                              fm_psd.shape[0], model.Lpsd))
    if np.any(fm_psd < 0):
        raise LaserParamError('FM noise PSD has negative values')

    status, fn, pn = gen_fm_pm_noise(freq, fm_psd, context.Fs, context.Lnoise,
                                     rng = rng, limit_pn = limit_pn)
    if not status:
        raise SynthesisError('Frequency noise synthesis failed')
    return fn, pn

class Laser:
    '''
    Laser block. It works as a source if ``Fs`` and ``Lnoise`` are given,
    otherwise it copies ``Fs``, ``Rs`` and the length from the first input
    signal of ``traverse``.

    Parameters:
        param:  dict, laser parameters ``Fs``, ``Rs`` (default 1), ``Lnoise``,
                 ``Fc`` (default 193.41 THz), ``Power`` (dBm or (value, unit),
                 default 0 dBm), ``linewidth``, ``LFLW1GHZ``, ``HFLW``, ``fr``,
                 ``K``, ``alpha``, ``L``/``Lir`` (PSD length, linear grid),
                 ``limitPn`` (phase noise folding limit, rad), ``draw``
        cache:  optional cache of the noise realizations (see ``ln_cache``)
    '''
    def __init__(self, param = None, cache = None):
        param = dict(param or {})
        for name in sorted(set(param) - KNOWN_PARAMS):
            logger.warning('Unknown laser parameter %s ignored', name)

        self.model    = select_noise_model(param)
        self.limit_pn = float(param.get('limitPn', 0.0))
        self.draw     = bool(param.get('draw', False))
        self.cache    = cache
        self.Rs       = param.get('Rs', 1.0)
        self.Fc       = param.get('Fc', FC_DEFAULT)

        if self.limit_pn < 0:
            raise LaserParamError('Phase noise limit must be non-negative, got {!r}'.format(self.limit_pn))

        status, self.power = power_to_w(param.get('Power', 0.0))
        if not status:
            raise LaserConfigError('Invalid power {!r}'.format(param.get('Power')))

        self._lock = threading.Lock()
        if ('Fs' in param) and ('Lnoise' in param):
            self.n_inputs = 0
            self.context  = sampling_context(param['Fs'], param['Lnoise'], self.Rs, self.Fc, self.power)
        else:
            logger.info('Either one among Fs, Lnoise has not been specified. '
                        'Parameters will be copied from the input signal.')
            self.n_inputs = 1
            self.context  = None

    def traverse(self, sig = None, rng = None):
        '''
        Generate the optical field.

        Parameters:
            sig:   input signal with attributes ``fs``, ``rs`` and ``x`` (only
                    in the traversal mode)
            rng:   numpy.random.Generator

        Returns:
            out:   Signal
        '''
        if self.n_inputs == 1 and sig is None:
            raise LaserConfigError('Missing input signal from where to copy parameters')
        if self.n_inputs == 0 and sig is not None:
            raise LaserConfigError('Too many input arguments. Laser parameters are already set.')

        if self.n_inputs == 1:
            self._copy_context(sig)

        out = synthesize(self.model, self.context,
                         rng      = rng,
                         limit_pn = self.limit_pn,
                         cache    = self.cache)
        if self.draw:
            from lasernoise.ln_plot import plot_laser_noise
            plot_laser_noise(out, self.model)
        return out

    def _copy_context(self, sig):
        try:
            fs, rs, L = sig.fs, sig.rs, len(sig.x)
        except (AttributeError, TypeError) as exc:
            raise LaserConfigError('Input signal must provide fs, rs and x') from exc

        context = sampling_context(fs, L, rs, self.Fc, self.power)
        with self._lock:
            if self.context is None:
                self.context = context
                logger.info('Laser parameters copied from input signal: %s', asdict(context))
            elif self.context != context:
                raise LaserConfigError('Laser parameters are already set from another input signal')

    @property
    def min_freq(self):
        return None if self.context is None else self.context.Fs / self.model.Lpsd

    @property
    def max_freq(self):
        return None if self.context is None else self.context.Fs / 2.0
