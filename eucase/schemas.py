# -*- coding: utf-8 -*-

"""
EU case study - schema contracts of the model input tables

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

import numpy as np
import pandas as pd

from .defaults import is_missing
from .errors import SchemaMismatchError

# declared type -> pandas (nullable) dtype
PANDAS_DTYPES = {
    'VARCHAR': 'string',
    'DOUBLE': 'Float64',
    'INTEGER': 'Int64',
    'BOOLEAN': 'boolean',
}

TRUE_STRINGS = ('true', 't', 'yes', '1')
FALSE_STRINGS = ('false', 'f', 'no', '0')

# ASSETS ----------------------------------------------------------------------

GRAPH_ASSETS_DATA = (
    ('name', 'VARCHAR'),
    ('type', 'VARCHAR'),
    ('group', 'VARCHAR'),
    ('capacity', 'DOUBLE'),
    ('min_operating_point', 'DOUBLE'),
    ('investment_method', 'VARCHAR'),
    ('investment_integer', 'BOOLEAN'),
    ('technical_lifetime', 'INTEGER'),
    ('economic_lifetime', 'INTEGER'),
    ('discount_rate', 'DOUBLE'),
    ('consumer_balance_sense', 'VARCHAR'),
    ('capacity_storage_energy', 'DOUBLE'),
    ('use_binary_storage_method', 'VARCHAR'),
    ('unit_commitment', 'BOOLEAN'),
    ('unit_commitment_method', 'VARCHAR'),
    ('unit_commitment_integer', 'BOOLEAN'),
    ('ramping', 'BOOLEAN'),
    ('storage_method_energy', 'BOOLEAN'),
    ('energy_to_power_ratio', 'DOUBLE'),
    ('investment_integer_storage_energy', 'BOOLEAN'),
    ('max_ramp_up', 'DOUBLE'),
    ('max_ramp_down', 'DOUBLE'),
)

ASSETS_DATA = (
    ('name', 'VARCHAR'),
    ('year', 'INTEGER'),
    ('commission_year', 'INTEGER'),
    ('active', 'BOOLEAN'),
    ('investable', 'BOOLEAN'),
    ('investment_limit', 'DOUBLE'),
    ('initial_units', 'DOUBLE'),
    ('peak_demand', 'DOUBLE'),
    ('is_seasonal', 'BOOLEAN'),
    ('storage_inflows', 'DOUBLE'),
    ('initial_storage_units', 'DOUBLE'),
    ('initial_storage_level', 'DOUBLE'),
    ('min_energy_timeframe_partition', 'DOUBLE'),
    ('max_energy_timeframe_partition', 'DOUBLE'),
    ('units_on_cost', 'DOUBLE'),
    ('investment_limit_storage_energy', 'DOUBLE'),
    ('decommissionable', 'BOOLEAN'),
)

ASSETS_PROFILES = (
    ('asset', 'VARCHAR'),
    ('commission_year', 'INTEGER'),
    ('profile_type', 'VARCHAR'),
    ('profile_name', 'VARCHAR'),
)

ASSETS_REP_PERIODS_PARTITIONS = (
    ('asset', 'VARCHAR'),
    ('year', 'INTEGER'),
    ('rep_period', 'INTEGER'),
    ('specification', 'VARCHAR'),
    ('partition', 'INTEGER'),
)

VINTAGE_ASSETS_DATA = (
    ('name', 'VARCHAR'),
    ('commission_year', 'INTEGER'),
    ('fixed_cost', 'DOUBLE'),
    ('investment_cost', 'DOUBLE'),
    ('fixed_cost_storage_energy', 'DOUBLE'),
    ('investment_cost_storage_energy', 'DOUBLE'),
)

ASSETS_BASIC_INFO = (
    ('name', 'VARCHAR'),
    ('type', 'VARCHAR'),
    ('country', 'VARCHAR'),
    ('technology', 'VARCHAR'),
    ('lat', 'DOUBLE'),
    ('lon', 'DOUBLE'),
)

# FLOWS -----------------------------------------------------------------------

GRAPH_FLOWS_DATA = (
    ('carrier', 'VARCHAR'),
    ('from_asset', 'VARCHAR'),
    ('to_asset', 'VARCHAR'),
    ('is_transport', 'BOOLEAN'),
    ('capacity', 'DOUBLE'),
    ('technical_lifetime', 'INTEGER'),
    ('economic_lifetime', 'INTEGER'),
    ('discount_rate', 'DOUBLE'),
    ('investment_integer', 'BOOLEAN'),
)

FLOWS_DATA = (
    ('from_asset', 'VARCHAR'),
    ('to_asset', 'VARCHAR'),
    ('year', 'INTEGER'),
    ('commission_year', 'INTEGER'),
    ('active', 'BOOLEAN'),
    ('investable', 'BOOLEAN'),
    ('investment_limit', 'DOUBLE'),
    ('variable_cost', 'DOUBLE'),
    ('efficiency', 'DOUBLE'),
    ('initial_export_units', 'DOUBLE'),
    ('initial_import_units', 'DOUBLE'),
)

FLOWS_PROFILES = (
    ('from_asset', 'VARCHAR'),
    ('to_asset', 'VARCHAR'),
    ('year', 'INTEGER'),
    ('profile_type', 'VARCHAR'),
    ('profile_name', 'VARCHAR'),
)

FLOWS_REP_PERIODS_PARTITIONS = (
    ('from_asset', 'VARCHAR'),
    ('to_asset', 'VARCHAR'),
    ('year', 'INTEGER'),
    ('rep_period', 'INTEGER'),
    ('specification', 'VARCHAR'),
    ('partition', 'INTEGER'),
)

VINTAGE_FLOWS_DATA = (
    ('from_asset', 'VARCHAR'),
    ('to_asset', 'VARCHAR'),
    ('commission_year', 'INTEGER'),
    ('fixed_cost', 'DOUBLE'),
    ('investment_cost', 'DOUBLE'),
)

# TIME ------------------------------------------------------------------------

YEAR_DATA = (
    ('year', 'INTEGER'),
    ('length', 'INTEGER'),
    ('is_milestone', 'BOOLEAN'),
)

PROFILES_REP_PERIODS = (
    ('profile_name', 'VARCHAR'),
    ('year', 'INTEGER'),
    ('rep_period', 'INTEGER'),
    ('timestep', 'INTEGER'),
    ('value', 'DOUBLE'),
)

REP_PERIODS_MAPPING = (
    ('year', 'INTEGER'),
    ('period', 'INTEGER'),
    ('rep_period', 'INTEGER'),
    ('weight', 'DOUBLE'),
)

REP_PERIODS_DATA = (
    ('year', 'INTEGER'),
    ('rep_period', 'INTEGER'),
    ('num_timesteps', 'INTEGER'),
    ('resolution', 'DOUBLE'),
)

PROFILES_TIMEFRAME = (
    ('profile_name', 'VARCHAR'),
    ('year', 'INTEGER'),
    ('period', 'INTEGER'),
    ('value', 'DOUBLE'),
)

TIMEFRAME_DATA = (
    ('year', 'INTEGER'),
    ('period', 'INTEGER'),
    ('num_timesteps', 'INTEGER'),
)

# table name (file stem with '-' replaced by '_') -> schema
SCHEMA_PER_TABLE_NAME = {
    'graph_assets_data': GRAPH_ASSETS_DATA,
    'assets_data': ASSETS_DATA,
    'assets_profiles': ASSETS_PROFILES,
    'assets_timeframe_profiles': ASSETS_PROFILES,
    'assets_rep_periods_partitions': ASSETS_REP_PERIODS_PARTITIONS,
    'vintage_assets_data': VINTAGE_ASSETS_DATA,
    'graph_flows_data': GRAPH_FLOWS_DATA,
    'flows_data': FLOWS_DATA,
    'flows_profiles': FLOWS_PROFILES,
    'flows_rep_periods_partitions': FLOWS_REP_PERIODS_PARTITIONS,
    'vintage_flows_data': VINTAGE_FLOWS_DATA,
    'year_data': YEAR_DATA,
    'profiles_rep_periods': PROFILES_REP_PERIODS,
    'rep_periods_mapping': REP_PERIODS_MAPPING,
    'rep_periods_data': REP_PERIODS_DATA,
    'profiles_timeframe': PROFILES_TIMEFRAME,
    'timeframe_data': TIMEFRAME_DATA,
}


def schema_items(
        schema,
    ) -> list:
    """(field, type) pairs of a schema given as tuple of pairs or mapping."""
    #
    if hasattr(schema, 'items'):
        return list(schema.items())
    #
    return [(name, declared) for name, declared in schema]


def schema_columns(
        schema,
    ) -> list:
    """Field names of a schema in schema order."""
    return [name for name, _ in schema_items(schema)]


def has_field(
        schema,
        name: str,
    ) -> bool:
    """Check if an optional field is part of a schema contract."""
    return name in schema_columns(schema)


def check_value_type(
        field: str,
        value,
        declared: str,
    ) -> None:
    """
    Raise if a scalar cannot be stored in a column of the declared type.
    Missing values fit every type.

    Parameters
    ----------
    field: str
        Field name (only used in the error message).

    value:
        Scalar to check.

    declared: str
        Declared schema type (VARCHAR, DOUBLE, INTEGER or BOOLEAN).

    Returns
    -------
    None
    """
    #
    if declared not in PANDAS_DTYPES:
        raise SchemaMismatchError(
            f'field "{field}" declares unknown type "{declared}"')
    #
    if is_missing(value):
        return None
    #
    is_bool = isinstance(value, (bool, np.bool_))
    is_int = isinstance(value, (int, np.integer)) and not is_bool
    is_float = isinstance(value, (float, np.floating))
    #
    if declared == 'BOOLEAN':
        valid = is_bool
    #
    elif declared == 'INTEGER':
        valid = is_int or (is_float and float(value).is_integer())
    #
    elif declared == 'DOUBLE':
        valid = is_int or is_float
    #
    else:
        valid = isinstance(value, str)
    #
    if not valid:
        raise SchemaMismatchError(
            f'value {value!r} ({type(value).__name__}) of field "{field}" '
            f'is not compatible with the declared type {declared}')
    #
    return None


def validate_defaults(
        schema,
        defaults: dict,
    ) -> None:
    """
    Check every default value of a schema field against the declared type.

    Parameters
    ----------
    schema:
        Ordered (field, type) pairs.

    defaults: dict
        Field name -> default value.

    Returns
    -------
    None
    """
    #
    for name, declared in schema_items(schema):
        if name in defaults:
            check_value_type(name, defaults[name], declared)
    #
    return None


def _to_boolean(
        series: pd.Series,
        name: str,
    ) -> pd.Series:
    #
    def convert(value):
        if is_missing(value):
            return pd.NA
        #
        if isinstance(value, (bool, np.bool_)):
            return bool(value)
        #
        if isinstance(value, str):
            key = value.strip().lower()
            if key in TRUE_STRINGS:
                return True
            #
            if key in FALSE_STRINGS:
                return False
        #
        elif isinstance(value, (int, float, np.integer, np.floating)) and \
             value in (0, 1):
            return bool(value)
        #
        raise SchemaMismatchError(
            f'value {value!r} of field "{name}" is not a boolean')
    #
    return series.astype(object).map(convert).astype('boolean')


def coerce_column(
        series: pd.Series,
        declared: str,
        name: str = None,
    ) -> pd.Series:
    """
    Cast a column to the pandas nullable dtype of its declared type.

    Parameters
    ----------
    series: pd.Series
        Column to cast.

    declared: str
        Declared schema type.

    name: str = None
        Field name for error messages (defaults to the series name).

    Returns
    -------
    series: pd.Series
        Cast column.
    """
    #
    name = name or series.name
    if declared not in PANDAS_DTYPES:
        raise SchemaMismatchError(
            f'field "{name}" declares unknown type "{declared}"')
    #
    if declared == 'BOOLEAN':
        return _to_boolean(series, name)
    #
    if declared == 'VARCHAR':
        return series.astype('string')
    #
    # numeric types: strings like 'abc' must not slip through
    values = series.astype(object).where(series.notna(), np.nan)
    try:
        numeric = pd.to_numeric(values, errors='raise')
        return numeric.astype(PANDAS_DTYPES[declared])
    #
    except (TypeError, ValueError) as err:
        raise SchemaMismatchError(
            f'column "{name}" cannot be cast to {declared}: {err}') from err


def coerce_to_schema(
        df: pd.core.frame.DataFrame,
        schema,
    ) -> pd.core.frame.DataFrame:
    """
    Cast all schema columns of a table to their declared types. Columns not
    declared in the schema are left untouched.

    Parameters
    ----------
    df: pd.core.frame.DataFrame
        Table to cast.

    schema:
        Ordered (field, type) pairs.

    Returns
    -------
    df: pd.core.frame.DataFrame
        Copy of the table with cast columns.
    """
    #
    df = df.copy()
    for name, declared in schema_items(schema):
        if name in df.columns:
            df[name] = coerce_column(df[name], declared, name)
    #
    return df
