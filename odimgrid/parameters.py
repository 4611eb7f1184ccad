# Name:         parameters.py
# Purpose:      Catalog of grid parameters and mapping from ODIM product/quantity
# Authors:      ODIMGRID Developers
# Licence:      This file is part of ODIMGRID. You can redistribute it or modify
#               under the terms of GNU General Public License, v.3
#               http://www.gnu.org/licenses/gpl-3.0.html
from collections import namedtuple

from odimgrid.exceptions import UnsupportedParameterError

Parameter = namedtuple('Parameter', ['ident', 'name', 'units'])

REFLECTIVITY = Parameter(1, 'Reflectivity', 'dBZ')
CORRECTED_REFLECTIVITY = Parameter(2, 'CorrectedReflectivity', 'dBZ')
RADIAL_VELOCITY = Parameter(3, 'RadialVelocity', 'm s-1')
SPECTRAL_WIDTH = Parameter(4, 'SpectralWidth', 'm s-1')
DIFFERENTIAL_REFLECTIVITY = Parameter(5, 'DifferentialReflectivity', 'dB')
SPECIFIC_DIFFERENTIAL_PHASE = Parameter(6, 'SpecificDifferentialPhase', 'degree km-1')
DIFFERENTIAL_PHASE = Parameter(7, 'DifferentialPhase', 'degree')
SIGNAL_QUALITY_INDEX = Parameter(8, 'SignalQualityIndex', '1')
REFLECTIVITY_CORRELATION = Parameter(9, 'ReflectivityCorrelation', '1')
ECHO_TOP = Parameter(10, 'EchoTop', 'km')
PRECIPITATION_AMOUNT = Parameter(11, 'PrecipitationAmount', 'mm')
PRECIPITATION_RATE = Parameter(12, 'PrecipitationRate', 'mm h-1')
RADAR_BORDER = Parameter(13, 'RadarBorder', '1')
# threshold_id 0..10
PROBABILITY_OF_PRECIPITATION = tuple(
    [Parameter(20, 'ProbabilityOfPrec', '%')] +
    [Parameter(20 + i, 'ProbabilityOfPrecLimit%d' % i, '%') for i in range(1, 11)])

# placeholder in the table for parameters selected by threshold_id
THRESHOLD_DEPENDENT = 'threshold_id'

_REFLECTIVITY_PRODUCTS = {
    'TH': REFLECTIVITY,
    'DBZ': REFLECTIVITY,
    'DBZH': CORRECTED_REFLECTIVITY,
    'VRAD': RADIAL_VELOCITY,
    'WRAD': SPECTRAL_WIDTH,
    'W': SPECTRAL_WIDTH,
}

PARAMETER_TABLE = {
    'PPI': _REFLECTIVITY_PRODUCTS,
    'CAPPI': _REFLECTIVITY_PRODUCTS,
    'PCAPPI': _REFLECTIVITY_PRODUCTS,
    'ETOP': {'HGHT': ECHO_TOP},
    'MAX': {'TH': REFLECTIVITY,
            'DBZH': CORRECTED_REFLECTIVITY},
    'RR': {'ACRR': PRECIPITATION_AMOUNT},
    'VIL': {'ACRR': PRECIPITATION_AMOUNT},
    'SCAN': {'TH': REFLECTIVITY,
             'DBZH': CORRECTED_REFLECTIVITY,
             'VRAD': RADIAL_VELOCITY,
             'WRAD': SPECTRAL_WIDTH,
             'W': SPECTRAL_WIDTH,
             'ZDR': DIFFERENTIAL_REFLECTIVITY,
             'KDP': SPECIFIC_DIFFERENTIAL_PHASE,
             'PHIDP': DIFFERENTIAL_PHASE,
             'SQI': SIGNAL_QUALITY_INDEX,
             'RHOHV': REFLECTIVITY_CORRELATION},
    'COMP': {'RATE': PRECIPITATION_RATE,
             'BRDR': RADAR_BORDER,
             'TH': REFLECTIVITY,
             'DBZH': CORRECTED_REFLECTIVITY,
             'PROB': THRESHOLD_DEPENDENT},
}

# known ODIM products without any mapping
UNSUPPORTED_PRODUCTS = ('VP', 'RHI', 'XSEC', 'VSP', 'HSP', 'RAY', 'AZIM', 'QUAL')


def map_parameter(product, quantity, threshold_lookup=None):
    """Find grid parameter for ODIM product and quantity

    Parameters
    ----------
    product : str
        ODIM what/product, e.g. 'PPI' or 'COMP'
    quantity : str
        ODIM what/quantity, e.g. 'DBZH'
    threshold_lookup : callable
        called without arguments to get integer threshold_id, only for
        products whose parameter depends on it (COMP/PROB)

    Returns
    -------
    Parameter

    Raises
    ------
    UnsupportedParameterError

    """
    message = 'Unable to handle parameters of type %s with quantity %s' % (product, quantity)
    if product in UNSUPPORTED_PRODUCTS:
        raise UnsupportedParameterError(message)
    parameter = PARAMETER_TABLE.get(product, {}).get(quantity)
    if parameter is None:
        raise UnsupportedParameterError(message)
    if parameter == THRESHOLD_DEPENDENT:
        if threshold_lookup is None:
            raise UnsupportedParameterError(message + ' without threshold_id')
        threshold = threshold_lookup()
        if not 0 <= threshold < len(PROBABILITY_OF_PRECIPITATION):
            raise UnsupportedParameterError(message + ' with threshold_id outside range 0-10')
        parameter = PROBABILITY_OF_PRECIPITATION[threshold]
    return parameter
