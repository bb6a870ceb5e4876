# -*- coding: utf-8 -*-

"""
EU case study - profile reshaping and representative periods

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
from dataclasses import dataclass

import pandas as pd
import tsam.timeseriesaggregation as tsam

from .errors import NotFoundError, SchemaMismatchError
from .schemas import (
    PROFILES_REP_PERIODS,
    PROFILES_TIMEFRAME,
    REP_PERIODS_DATA,
    REP_PERIODS_MAPPING,
    TIMEFRAME_DATA,
    coerce_to_schema,
    schema_columns,
)
from .tables import write_table

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = ['profile_name', 'year', 'rep_period', 'timestep', 'value']


@dataclass
class ClusteringResult:
    """Representative periods of one clustering run."""
    profiles: pd.DataFrame
    mapping: pd.DataFrame
    rep_periods_data: pd.DataFrame


def read_profiles_file(
        file_name: str,
        default_year: int = None,
    ) -> pd.core.frame.DataFrame:
    """Read a wide profile file (header on the first line)."""
    #
    if not os.path.isfile(file_name):
        raise NotFoundError(f'profile file "{file_name}" does not exist')
    #
    df = pd.read_csv(file_name)
    if 'year' not in df.columns and default_year is not None:
        df.insert(0, 'year', default_year)
    #
    return df


def wide_to_long(
        df: pd.core.frame.DataFrame,
        id_columns: tuple = ('year', 'timestep'),
        rep_period: int = 1,
    ) -> pd.core.frame.DataFrame:
    """
    Transform a wide profile table (one column per profile) into the long
    format of the model.

    Parameters
    ----------
    df: pd.core.frame.DataFrame
        Wide table with the id columns and one column per profile.

    id_columns: tuple = ('year', 'timestep')
        Columns identifying a row; all other columns are profiles.

    rep_period: int = 1
        Representative period assigned to all rows.

    Returns
    -------
    df: pd.core.frame.DataFrame
        Table with columns profile_name, year, rep_period, timestep and value;
        one row per input row and profile.
    """
    #
    id_columns = list(id_columns)
    missing = [col for col in id_columns if col not in df.columns]
    if missing:
        raise SchemaMismatchError(f'profile table misses the id column(s) {missing}')
    #
    profiles = [col for col in df.columns if col not in id_columns]
    long_df = df.melt(
        id_vars=id_columns,
        value_vars=profiles,
        var_name='profile_name',
        value_name='value')
    long_df['rep_period'] = rep_period
    #
    return long_df[PROFILE_COLUMNS]


def split_into_periods(
        df: pd.core.frame.DataFrame,
        period_duration: int,
    ) -> pd.core.frame.DataFrame:
    """
    Split the timesteps of a long profile table into periods of
    `period_duration` timesteps. Adds the column `period` and restarts
    `timestep` at 1 in every period.
    """
    #
    df = df.copy()
    timestep = df['timestep'].astype(int) - 1
    df['period'] = timestep // period_duration + 1
    df['timestep'] = timestep % period_duration + 1
    #
    return df


def _rep_periods_data(
        profiles: pd.core.frame.DataFrame,
    ) -> pd.core.frame.DataFrame:
    # the timesteps of the first profile define the representative periods
    first = profiles[profiles.profile_name == profiles.profile_name.iloc[0]]
    rp_data = first.groupby(['year', 'rep_period'], as_index=False)\
        .agg(num_timesteps=('timestep', 'size'))
    rp_data['resolution'] = 1.0
    #
    return rp_data


def _cluster_year(
        df: pd.core.frame.DataFrame,
        year: int,
        n_rp: int,
        method: str,
    ) -> tuple [pd.core.frame.DataFrame,
                pd.core.frame.DataFrame]:
    #
    wide = df.pivot_table(
        index=['period', 'timestep'],
        columns='profile_name',
        values='value',
        aggfunc='first').sort_index()
    periods = wide.index.get_level_values('period').unique()
    period_duration = int(wide.index.get_level_values('timestep').max())
    #
    # nothing to cluster: each period represents itself
    if len(periods) <= n_rp:
        profiles = df.rename(columns={'period': 'rep_period'})
        mapping = pd.DataFrame({
            'year': year,
            'period': list(periods),
            'rep_period': list(periods),
            'weight': 1.0})
        return profiles, mapping
    #
    if len(wide) != len(periods) * period_duration:
        raise SchemaMismatchError(
            f'profiles of year {year} do not fill {len(periods)} complete '
            f'periods of {period_duration} timesteps')
    #
    logger.info('cluster %d periods of year %d into %d representative periods (%s) ...',
                len(periods), year, n_rp, method)
    data = wide.reset_index(drop=True)
    data.index = pd.date_range(f'{year}-01-01', periods=len(data), freq='h')
    #
    agg = tsam.TimeSeriesAggregation(
        data,
        noTypicalPeriods=n_rp,
        hoursPerPeriod=period_duration,
        clusterMethod=method,
        resolution=1.0)
    typical = agg.createTypicalPeriods()
    typical.index = typical.index.set_names(['rep_period', 'timestep'])
    #
    profiles = typical.reset_index().melt(
        id_vars=['rep_period', 'timestep'],
        var_name='profile_name',
        value_name='value')
    profiles['rep_period'] = profiles['rep_period'] + 1
    profiles['timestep'] = profiles['timestep'] + 1
    profiles['year'] = year
    #
    mapping = pd.DataFrame({
        'year': year,
        'period': list(periods),
        'rep_period': [int(rp) + 1 for rp in agg.clusterOrder],
        'weight': 1.0})
    #
    return profiles, mapping


def find_representative_periods(
        df: pd.core.frame.DataFrame,
        n_rp: int,
        method: str = 'k_means',
    ) -> ClusteringResult:
    """
    Find `n_rp` representative periods per year and map every period to
    one of them.

    Parameters
    ----------
    df: pd.core.frame.DataFrame
        Long profiles split into periods (columns profile_name, year, period,
        timestep, value).

    n_rp: int
        Number of representative periods.

    method: str = 'k_means'
        Clustering method of `tsam` (e.g. 'k_means', 'k_medoids',
        'hierarchical').

    Returns
    -------
    result: ClusteringResult
        Clustered profiles, period mapping and representative period data.
    """
    #
    if n_rp < 1:
        raise ValueError(f'number of representative periods must be positive, got {n_rp}')
    #
    all_profiles = []
    all_mappings = []
    for year in sorted(df['year'].unique()):
        profiles, mapping = _cluster_year(
            df[df['year'] == year], int(year), n_rp, method)
        all_profiles.append(profiles)
        all_mappings.append(mapping)
    #
    profiles = pd.concat(all_profiles, ignore_index=True)
    profiles = coerce_to_schema(
        profiles[schema_columns(PROFILES_REP_PERIODS)], PROFILES_REP_PERIODS)
    mapping = coerce_to_schema(
        pd.concat(all_mappings, ignore_index=True), REP_PERIODS_MAPPING)
    rp_data = coerce_to_schema(_rep_periods_data(profiles), REP_PERIODS_DATA)
    #
    return ClusteringResult(profiles, mapping, rp_data)


def preprocess_profiles(
        user_input_dir: str,
        model_dir: str,
        n_rp: int = 1,
        period_duration: int = 8760,
        method: str = 'k_means',
        default_year: int = None,
    ) -> ClusteringResult:
    """
    Create the profile and representative period tables of the model from
    the user profile files.

    Parameters
    ----------
    user_input_dir: str
        Folder holding `profiles.csv` and, optionally,
        `min-max-reservoir-levels.csv`.

    model_dir: str
        Folder to write the model input tables into.

    n_rp: int = 1
        Number of representative periods.

    period_duration: int = 8760
        Timesteps per period.

    method: str = 'k_means'
        Clustering method.

    default_year: int = None
        Year assigned to profile files without a `year` column.

    Returns
    -------
    result: ClusteringResult
        Clustered profiles, period mapping and representative period data.
    """
    #
    logger.info('create profile tables from %s ...', user_input_dir)
    profiles = wide_to_long(read_profiles_file(
        os.path.join(user_input_dir, 'profiles.csv'), default_year))
    #
    reservoir_file = os.path.join(user_input_dir, 'min-max-reservoir-levels.csv')
    if os.path.isfile(reservoir_file):
        reservoir = wide_to_long(read_profiles_file(reservoir_file, default_year))
    #
    else:
        reservoir = None
    #
    # a full-year optimization uses the reservoir levels as ordinary profiles
    if n_rp == 1 and reservoir is not None:
        profiles = pd.concat([profiles, reservoir], ignore_index=True)
    #
    profiles = split_into_periods(profiles.drop(columns='rep_period'), period_duration)
    result = find_representative_periods(profiles, n_rp, method)
    #
    write_table(
        result.profiles,
        os.path.join(model_dir, 'profiles-rep-periods.csv'),
        units={'value': 'p.u.'})
    write_table(
        result.mapping,
        os.path.join(model_dir, 'rep-periods-mapping.csv'),
        units={'weight': 'p.u.'})
    write_table(
        result.rep_periods_data,
        os.path.join(model_dir, 'rep-periods-data.csv'))
    #
    if n_rp > 1 and reservoir is not None:
        reservoir = split_into_periods(reservoir.drop(columns='rep_period'), period_duration)
        timeframe = reservoir.groupby(
            ['profile_name', 'year', 'period'], as_index=False, sort=False)['value'].mean()
        write_table(
            coerce_to_schema(timeframe, PROFILES_TIMEFRAME),
            os.path.join(model_dir, 'profiles-timeframe.csv'),
            units={'value': 'p.u.'})
        #
        first = profiles[profiles.profile_name == profiles.profile_name.iloc[0]]
        timeframe_data = first.groupby(['year', 'period'], as_index=False)\
            .agg(num_timesteps=('timestep', 'size'))
        write_table(
            coerce_to_schema(timeframe_data, TIMEFRAME_DATA),
            os.path.join(model_dir, 'timeframe-data.csv'))
    #
    return result
