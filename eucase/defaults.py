# -*- coding: utf-8 -*-

"""
EU case study - default values for the model input tables

---

MIT License

Copyright (c) <year> <copyright holders>

Permission is hereby granted, free of charge, to any person obtaining a copy of this software and
associated documentation files (the "Software"), to deal in the Software without restriction, including
without limitation the rights to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is furnished to do so, subject to the
following conditions:

The above copyright notice and this permission notice shall be included in all copies or substantial
portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED, INCLUDING BUT NOT
LIMITED TO THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO
EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER
IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE
USE OR OTHER DEALINGS IN THE SOFTWARE.

"""

import pandas as pd

# sentinel for "no default": distinct from 0, False and ''
MISSING = pd.NA


def is_missing(
        value,
    ) -> bool:
    """
    Check if a value is the missing sentinel (or any other pandas null).

    Parameters
    ----------
    value:
        Scalar to check.

    Returns
    -------
    True | False: bool
        True if the value is not set.
    """
    #
    if isinstance(value, (list, tuple, dict)):
        return False
    #
    return bool(pd.isna(value))


def get_default_values(
        default_year: int = 2050,
    ) -> dict:
    """
    Get the fallback value of every model input field which may be left
    empty in the user files.

    Fields not listed here are never filled. Fields listed with `MISSING`
    are known to the model but have no sensible fallback; they stay empty
    and the model decides how to treat them.

    Parameters
    ----------
    default_year: int = 2050
        Year used for all year-like fields (year, milestone and commission
        year).

    Returns
    -------
    default_values: dict
        Field name -> default value.
    """
    #
    return {
        'active': True,
        'capacity': 0.0,
        'capacity_storage_energy': 0.0,
        'carrier': 'electricity',
        'milestone_year': default_year,
        'commission_year': default_year,
        'consumer_balance_sense': MISSING,
        'decommissionable': False,
        'discount_rate': 0.0,
        'economic_lifetime': 1,
        'efficiency': 1.0,
        'energy_to_power_ratio': 0.0,
        'fixed_cost': 0.0,
        'fixed_cost_storage_energy': 0.0,
        'group': MISSING,
        'initial_export_units': 0.0,
        'initial_import_units': 0.0,
        'initial_storage_level': MISSING,
        'initial_storage_units': 0.0,
        'initial_units': 0.0,
        'investment_cost': 0.0,
        'investment_cost_storage_energy': 0.0,
        'investment_integer': False,
        'investment_integer_storage_energy': False,
        'investment_limit': MISSING,
        'investment_limit_storage_energy': MISSING,
        'investment_method': 'none',
        'investable': False,
        'is_milestone': True,
        'is_seasonal': False,
        'is_transport': False,
        'max_energy_timeframe_partition': MISSING,
        'max_ramp_down': MISSING,
        'max_ramp_up': MISSING,
        'min_energy_timeframe_partition': MISSING,
        'min_operating_point': 0.0,
        'num_timesteps': 8760,
        'partition': 1,
        'peak_demand': 0.0,
        'period': 1,
        'rep_period': 1,
        'resolution': 1.0,
        'ramping': False,
        'specification': 'uniform',
        'storage_inflows': 0.0,
        'storage_method_energy': False,
        'technical_lifetime': 1,
        'unit_commitment': False,
        'unit_commitment_integer': False,
        'unit_commitment_method': MISSING,
        'units_on_cost': 0.0,
        'use_binary_storage_method': MISSING,
        'variable_cost': 0.0,
        'weight': 1.0,
        'year': default_year,
        'country': MISSING,
        'technology': MISSING,
        'lat': 0.0,
        'lon': 0.0,
        'length': 8760,
    }
