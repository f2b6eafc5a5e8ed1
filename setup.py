from setuptools import setup

setup(name              = "lasernoise",
      version           = "0.0.1",
      description       = "Laser frequency and phase noise synthesis libraries in Python.",
      license           = "BSD 3-Clause",
      packages          = ['lasernoise'],
      python_requires   = ">=3.8",
      install_requires  = ['numpy', 'scipy'],
      extras_require    = {'plot': ['matplotlib'],
                           'test': ['pytest']},
      zip_safe          = False)
