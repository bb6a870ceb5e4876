# -*- coding: utf-8 -*-

"""
EU case study - result tables

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

import logging
import os

import numpy as np
import pandas as pd

from .errors import SchemaMismatchError
from .tables import write_table

logger = logging.getLogger(__name__)

BALANCE_COLUMNS = ['country', 'technology', 'year', 'rep_period', 'time', 'solution']

# category: (side of the asset, sign, technology label or suffix)
BALANCE_CATEGORIES = {
    'inflow': ('from', 1.0, None),
    'outflow': ('to', -1.0, None),
    'storage_discharge': ('from', 1.0, '_discharge'),
    'storage_charge': ('to', -1.0, '_charge'),
    'demand_to': ('to', 1.0, None),
    'demand_from': ('from', 1.0, None),
    }


def add_block_duration(
        df: pd.core.frame.DataFrame,
    ) -> pd.core.frame.DataFrame:
    """Add the block length `time_block_end - time_block_start + 1`."""
    #
    df = df.copy()
    df['duration'] = (df['time_block_end'] - df['time_block_start'] + 1).astype(int)
    #
    return df


def unroll_dataframe(
        df: pd.core.frame.DataFrame,
        group_columns: list,
    ) -> pd.core.frame.DataFrame:
    """
    Expand block rows into one row per timestep.

    Every row is repeated `duration` times; the new column `time` numbers the
    rows of each group 1, 2, ... in input order. Blocks have to be ordered
    chronologically within each group.

    Parameters
    ----------
    df: pd.core.frame.DataFrame
        Block table with the column `duration`.

    group_columns: list
        Columns identifying a series (e.g. asset, year, rep_period).

    Returns
    -------
    df: pd.core.frame.DataFrame
        Per-timestep table with the additional column `time`.
    """
    #
    if 'duration' not in df.columns:
        raise SchemaMismatchError('block table needs the column "duration"')
    #
    df = df.reset_index(drop=True)
    durations = df['duration'].astype(int)
    if (durations < 0).any():
        raise ValueError('block durations must not be negative')
    #
    df = df.loc[df.index.repeat(durations)].reset_index(drop=True)
    df['time'] = df.groupby(list(group_columns), sort=False, dropna=False).cumcount() + 1
    #
    return df


def _equals(
        series: pd.core.series.Series,
        value: str,
    ) -> pd.core.series.Series:
    # missing values never match
    return series.astype(object).eq(value)


def classify_flows(
        df: pd.core.frame.DataFrame,
    ) -> pd.core.series.Series:
    """
    Assign each flow row (with the columns type_from, type_to, country_from
    and country_to) to exactly one balance category.

    The categories are checked in this order: cross_border, storage_discharge,
    storage_charge, demand_to, demand_from, inflow and outflow. Rows matching
    none (e.g. hub to hub flows) get a missing category.
    """
    #
    country_from = df['country_from'].astype(object).fillna('')
    country_to = df['country_to'].astype(object).fillna('')
    type_from = df['type_from'].astype(object)
    type_to = df['type_to'].astype(object)
    not_hub_or_storage_from = ~type_from.isin(['hub', 'storage'])
    #
    conditions = [
        country_from != country_to,
        _equals(type_from, 'storage'),
        _equals(type_to, 'storage'),
        _equals(type_to, 'consumer'),
        _equals(type_from, 'consumer'),
        not_hub_or_storage_from & ~_equals(type_to, 'storage'),
        ~type_to.isin(['hub', 'storage', 'consumer']) & ~_equals(type_from, 'storage'),
        ]
    choices = [
        'cross_border',
        'storage_discharge',
        'storage_charge',
        'demand_to',
        'demand_from',
        'inflow',
        'outflow',
        ]
    category = np.select(
        [c.fillna(False).astype(bool).values for c in conditions],
        choices,
        default='')
    #
    return pd.Series(category, index=df.index, name='category').replace('', np.nan)


def _sum_per_country(
        df: pd.core.frame.DataFrame,
        side: str,
        sign: float = 1.0,
        technology: str = None,
        suffix: str = None,
    ) -> pd.core.frame.DataFrame:
    #
    out = df.rename(columns={
        f'country_{side}': 'country',
        f'technology_{side}': 'technology'})
    out = out[['country', 'technology', 'year', 'rep_period', 'time', 'solution']].copy()
    out['technology'] = out['technology'].astype(object)
    if technology is not None:
        out['technology'] = technology
    #
    elif suffix is not None:
        out['technology'] = out['technology'].astype(str) + suffix
    #
    out['solution'] = sign * out['solution'].astype(float)
    #
    return out.groupby(
        ['country', 'technology', 'year', 'rep_period', 'time'],
        as_index=False, sort=False, dropna=False)['solution'].sum()


def get_balance_per_country(
        flow_solution: pd.core.frame.DataFrame,
        assets: pd.core.frame.DataFrame,
    ) -> pd.core.frame.DataFrame:
    """
    Calculate the energy balance per country from the solved flows.

    Flows touching a hub are expanded to timesteps and classified by the
    types and countries of their two assets (see `classify_flows`). Every
    category is summed per country, technology and timestep:
        - inflows into hubs (positive),
        - outflows from hubs to other assets (negative),
        - storage discharge (`<technology>_discharge`, positive),
        - storage charge (`<technology>_charge`, negative),
        - demand of consumers (positive), and
        - cross-border flows, once for the origin as `OutgoingTransportFlow`
          and once for the destination as `IncomingTransportFlow`.

    Parameters
    ----------
    flow_solution: pd.core.frame.DataFrame
        Block-compressed flows (from_asset, to_asset, year, rep_period,
        time_block_start, time_block_end, solution).

    assets: pd.core.frame.DataFrame
        Asset metadata (name, type, country, technology, ...).

    Returns
    -------
    df: pd.core.frame.DataFrame
        Columns country, technology, year, rep_period, time and solution.
    """
    #
    meta = assets.drop(columns=['lat', 'lon'], errors='ignore')\
        [['name', 'type', 'country', 'technology']]
    types = meta.set_index('name')['type'].astype(object)
    #
    touches_hub = _equals(flow_solution['from_asset'].map(types), 'hub') | \
        _equals(flow_solution['to_asset'].map(types), 'hub')
    df = flow_solution[touches_hub.values]
    if df.empty:
        return pd.DataFrame(columns=BALANCE_COLUMNS)
    #
    df = unroll_dataframe(
        add_block_duration(df),
        ['from_asset', 'to_asset', 'year', 'rep_period'])
    df = df[['from_asset', 'to_asset', 'year', 'rep_period', 'time', 'solution']]
    #
    for side in ('from', 'to'):
        df = df.merge(
            meta.rename(columns={
                'name': f'{side}_asset',
                'type': f'type_{side}',
                'country': f'country_{side}',
                'technology': f'technology_{side}'}),
            on=f'{side}_asset',
            how='left')
    #
    df['category'] = classify_flows(df)
    #
    balances = []
    for category, (side, sign, suffix) in BALANCE_CATEGORIES.items():
        balances.append(_sum_per_country(
            df[df['category'] == category], side, sign, suffix=suffix))
    #
    cross_border = df[df['category'] == 'cross_border']
    balances.append(_sum_per_country(
        cross_border, 'from', technology='OutgoingTransportFlow'))
    balances.append(_sum_per_country(
        cross_border, 'to', technology='IncomingTransportFlow'))
    #
    dropped = df['category'].isna().sum()
    if dropped:
        logger.debug('%d flow timesteps between hubs are not part of the balance', dropped)
    #
    balances = [b for b in balances if not b.empty]
    if not balances:
        return pd.DataFrame(columns=BALANCE_COLUMNS)
    #
    return pd.concat(balances, ignore_index=True)[BALANCE_COLUMNS]


def _rep_period_resolution(solved) -> pd.core.frame.DataFrame:
    rp = solved.rep_periods_data[['year', 'rep_period', 'resolution']].copy()
    rp['year'] = rp['year'].astype(int)
    rp['rep_period'] = rp['rep_period'].astype(int)
    rp['resolution'] = rp['resolution'].astype(float)
    return rp


def get_prices_dataframe(
        solved,
        price_factor: float = 1.0,
    ) -> pd.core.frame.DataFrame:
    """
    Calculate the prices of hubs and consumers from the duals of their
    balance constraints: `dual * price_factor / resolution / duration`.

    Parameters
    ----------
    solved: SolvedModel
        Solved model (see `model.solve`).

    price_factor: float = 1.0
        Scaling of the duals, e.g. 1e3 for duals in k€/MWh.

    Returns
    -------
    prices: pd.core.frame.DataFrame
        Columns asset, year, rep_period, time and price.
    """
    #
    columns = ['asset', 'year', 'rep_period', 'time', 'price']
    duals = pd.concat(
        [solved.cons_balance_hub, solved.cons_balance_consumer],
        ignore_index=True)
    if duals.empty:
        return pd.DataFrame(columns=columns)
    #
    duals['year'] = duals['year'].astype(int)
    duals['rep_period'] = duals['rep_period'].astype(int)
    df = add_block_duration(duals.merge(
        _rep_period_resolution(solved), on=['year', 'rep_period'], how='left'))
    df['price'] = df['dual'].astype(float) * price_factor / df['resolution'] / df['duration']
    #
    df = unroll_dataframe(df, ['asset', 'year', 'rep_period'])
    #
    return df[columns]


def _storage_capacity(solved) -> pd.core.series.Series:
    # levels are normalised by the energy capacity; 1 when it is zero
    capacity = solved.asset.set_index('name')['capacity_storage_energy']
    capacity = pd.to_numeric(capacity, errors='coerce').astype(float).fillna(0.0)
    return capacity.where(capacity != 0.0, 1.0)


def get_intra_storage_levels_dataframe(
        solved,
    ) -> pd.core.frame.DataFrame:
    """
    Get the storage levels within the representative periods as state of
    charge (level / capacity_storage_energy, or the level itself when the
    energy capacity is zero).
    """
    #
    columns = ['asset', 'year', 'rep_period', 'time', 'SoC']
    df = solved.var_storage_level_rep_period
    if df.empty:
        return pd.DataFrame(columns=columns)
    #
    df = add_block_duration(df)
    capacity = df['asset'].map(_storage_capacity(solved)).fillna(1.0)
    df['SoC'] = df['solution'].astype(float) / capacity
    df = unroll_dataframe(df, ['asset', 'year', 'rep_period'])
    #
    return df[columns]


def get_inter_storage_levels_dataframe(
        solved,
    ) -> pd.core.frame.DataFrame:
    """Get the storage levels of seasonal storages per period as state of charge."""
    #
    columns = ['asset', 'year', 'period', 'SoC']
    df = solved.var_storage_level_over_clustered_year
    if df.empty:
        return pd.DataFrame(columns=columns)
    #
    df = df.copy()
    df['duration'] = (df['period_block_end'] - df['period_block_start'] + 1).astype(int)
    capacity = df['asset'].map(_storage_capacity(solved)).fillna(1.0)
    df['SoC'] = df['solution'].astype(float) / capacity
    df = unroll_dataframe(df, ['asset', 'year']).rename(columns={'time': 'period'})
    #
    return df[columns]


def get_flow_dataframe(
        solved,
        from_asset: str,
        to_asset: str,
        year: int = None,
        rep_period: int = None,
    ) -> pd.core.frame.DataFrame:
    """Get the per-timestep solution of one flow."""
    #
    df = solved.var_flow
    mask = (df['from_asset'] == from_asset) & (df['to_asset'] == to_asset)
    if year is not None:
        mask &= df['year'] == year
    #
    if rep_period is not None:
        mask &= df['rep_period'] == rep_period
    #
    df = unroll_dataframe(
        add_block_duration(df[mask]),
        ['from_asset', 'to_asset', 'year', 'rep_period'])
    #
    return df[['from_asset', 'to_asset', 'year', 'rep_period', 'time', 'solution']]


def export_solution_to_csv_files(
        output_dir: str,
        solved,
    ) -> None:
    """
    Write the solution tables of a solved model as CSV files.

    Parameters
    ----------
    output_dir: str
        Folder to write into.

    solved: SolvedModel
        Solved model (see `model.solve`).

    Returns
    -------
    None
    """
    #
    logger.info('export the solution to %s ...', output_dir)
    for table_name in (
            'var_flow',
            'var_storage_level_rep_period',
            'var_storage_level_over_clustered_year',
            'cons_balance_hub',
            'cons_balance_consumer'):
        write_table(
            getattr(solved, table_name),
            os.path.join(output_dir, f'{table_name}.csv'))
    #
    return None


def write_unstacked(
        df: pd.core.frame.DataFrame,
        file_name: str,
        columns: str,
        values: str,
        fill_value: float = None,
    ) -> pd.core.frame.DataFrame:
    """
    Write a long table in wide format: one column per value of `columns`,
    all other columns stay as row keys.

    Parameters
    ----------
    df: pd.core.frame.DataFrame
        Long table.

    file_name: str
        CSV file to write.

    columns: str
        Column whose values become the new columns (e.g. 'asset').

    values: str
        Column holding the values (e.g. 'price').

    fill_value: float = None
        Value of missing combinations; None keeps them empty.

    Returns
    -------
    df: pd.core.frame.DataFrame
        The wide table that was written.
    """
    #
    if df.empty:
        write_table(df, file_name)
        return df
    #
    index = [col for col in df.columns if col not in (columns, values)]
    wide = df.pivot_table(
        index=index,
        columns=columns,
        values=values,
        aggfunc='sum',
        fill_value=fill_value,
        sort=False)
    wide.columns = [str(col) for col in wide.columns]
    wide = wide.reset_index()
    #
    write_table(wide, file_name)
    #
    return wide
