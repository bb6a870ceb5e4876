# -*- coding: utf-8 -*-

"""
EU case study - conversion of the user input files into model input tables

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
import warnings

import numpy as np
import pandas as pd

from .defaults import is_missing
from .errors import PartialDataWarning, SchemaMismatchError
from .schemas import (
    ASSETS_BASIC_INFO,
    ASSETS_DATA,
    ASSETS_PROFILES,
    ASSETS_REP_PERIODS_PARTITIONS,
    FLOWS_DATA,
    FLOWS_PROFILES,
    FLOWS_REP_PERIODS_PARTITIONS,
    GRAPH_ASSETS_DATA,
    GRAPH_FLOWS_DATA,
    PANDAS_DTYPES,
    VINTAGE_ASSETS_DATA,
    VINTAGE_FLOWS_DATA,
    YEAR_DATA,
    coerce_to_schema,
    has_field,
    schema_columns,
    schema_items,
    validate_defaults,
)
from .tables import list_user_files, read_table, read_user_file, write_table

logger = logging.getLogger(__name__)

# model input file, schema, user file prefix, user file suffix
USER_INPUT_TABLES = (
    ('graph-assets-data.csv', GRAPH_ASSETS_DATA, 'assets', 'basic-data.csv'),
    ('assets-data.csv', ASSETS_DATA, 'assets', 'yearly-data.csv'),
    ('assets-profiles.csv', ASSETS_PROFILES, 'assets', 'profiles.csv'),
    ('assets-timeframe-profiles.csv', ASSETS_PROFILES, 'assets',
     'min-max-reservoir-level-profiles.csv'),
    ('graph-flows-data.csv', GRAPH_FLOWS_DATA, 'flows', 'basic-data.csv'),
    ('flows-data.csv', FLOWS_DATA, 'flows', 'yearly-data.csv'),
    ('flows-profiles.csv', FLOWS_PROFILES, 'flows', 'profiles.csv'),
    ('vintage-assets-data.csv', VINTAGE_ASSETS_DATA, 'assets', 'basic-data.csv'),
    ('vintage-flows-data.csv', VINTAGE_FLOWS_DATA, 'flows-transport', 'basic-data.csv'),
    ('year-data.csv', YEAR_DATA, 'year-data', '.csv'),
)


def _empty_table(
        schema,
    ) -> pd.core.frame.DataFrame:
    return pd.DataFrame({
        name: pd.Series(dtype=PANDAS_DTYPES[declared])
        for name, declared in schema_items(schema)})


def fill_defaults(
        df: pd.core.frame.DataFrame,
        defaults: dict,
        columns: list = None,
    ) -> pd.core.frame.DataFrame:
    """
    Fill the missing cells of the given columns with their default value.
    Present values are never overwritten; columns without a default (or with
    the missing sentinel as default) stay as they are.

    Parameters
    ----------
    df: pd.core.frame.DataFrame
        Table to complete.

    defaults: dict
        Field name -> default value.

    columns: list = None
        Columns to consider; all columns of the table if None.

    Returns
    -------
    df: pd.core.frame.DataFrame
        Completed copy of the table.
    """
    #
    df = df.copy()
    for col in (df.columns if columns is None else columns):
        if col in defaults and \
           not is_missing(defaults[col]):
            df[col] = df[col].fillna(defaults[col])
    #
    return df


def replicate_rep_periods(
        df: pd.core.frame.DataFrame,
        number_of_rep_periods: int,
        schema = None,
    ) -> pd.core.frame.DataFrame:
    """
    Repeat a table once per representative period, setting `rep_period` to
    1..number_of_rep_periods on the copies.

    Parameters
    ----------
    df: pd.core.frame.DataFrame
        Table holding a `rep_period` column.

    number_of_rep_periods: int
        Number of copies; 1 (or less) returns the table unchanged.

    schema = None
        Schema of the table, used to check for the `rep_period` field.

    Returns
    -------
    df: pd.core.frame.DataFrame
        Replicated table.
    """
    #
    if number_of_rep_periods <= 1:
        return df
    #
    if (schema is not None and not has_field(schema, 'rep_period')) or \
       'rep_period' not in df.columns:
        raise SchemaMismatchError(
            'cannot replicate a table without a "rep_period" field')
    #
    copies = [df.assign(rep_period=rp) for rp in range(1, number_of_rep_periods + 1)]
    df = pd.concat(copies, ignore_index=True)
    df['rep_period'] = df['rep_period'].astype('Int64')
    #
    return df


def process_user_files(
        input_folder: str,
        output_file: str,
        schema,
        name_prefix: str,
        name_suffix: str,
        defaults: dict,
        rename_map: dict = None,
        number_of_rep_periods: int = 1,
    ) -> pd.core.frame.DataFrame:
    """
    Combine all user files of one category into a single table following a
    schema of the model.

    Parameters
    ----------
    input_folder: str
        Folder holding the user files.

    output_file: str
        Model input file to write; nothing is written if None.

    schema:
        Ordered (field, type) pairs the table must follow.

    name_prefix: str
        Start of the user file names to consider (e.g. 'assets').

    name_suffix: str
        End of the user file names to consider (e.g. 'basic-data.csv').

    defaults: dict
        Field name -> default value used for missing cells.

    rename_map: dict = None
        User column name -> schema field name.

    number_of_rep_periods: int = 1
        If larger than 1 the table is repeated once per representative
        period.

    Returns
    -------
    df: pd.core.frame.DataFrame
        Table with exactly the schema columns in schema order.
    """
    #
    columns = schema_columns(schema)
    rename_map = rename_map or {}
    validate_defaults(schema, defaults)
    #
    frames = []
    for file in list_user_files(input_folder, name_prefix, name_suffix):
        df = read_user_file(os.path.join(input_folder, file))
        df = df.rename(columns={
            key: value for key, value in rename_map.items() if key in df.columns})
        #
        # columns not provided by this file are missing for all its rows
        for col in columns:
            if col not in df.columns:
                df[col] = pd.NA
        #
        frames.append(coerce_to_schema(df[columns], schema))
    #
    if frames:
        df = pd.concat(frames, ignore_index=True)
    #
    else:
        logger.info('info! no user files match %s*%s in %s',
                    name_prefix, name_suffix, input_folder)
        df = _empty_table(schema)
    #
    df = fill_defaults(df, defaults, columns)
    df = coerce_to_schema(df[columns], schema)
    df = replicate_rep_periods(df, number_of_rep_periods, schema)
    #
    if output_file:
        write_table(df, output_file)
    #
    return df


def _partition_lookup(
        asset_partitions,
    ) -> dict:
    # the first row of an asset wins
    if isinstance(asset_partitions, pd.DataFrame):
        df = asset_partitions.dropna(subset=['partition'])
        df = df.drop_duplicates(subset='asset', keep='first')
        asset_partitions = dict(zip(df['asset'], df['partition']))
    #
    return {
        asset: int(partition) for asset, partition in asset_partitions.items()
        if not is_missing(partition)}


def reconcile_partitions(
        asset_partitions,
        flow_records: pd.core.frame.DataFrame,
        schema,
        defaults: dict,
    ) -> pd.core.frame.DataFrame:
    """
    Assign each flow the partition of its assets. A flow can't be resolved
    finer than the coarser of its two assets, therefore the larger partition
    wins if both assets have one. Flows without a partition for either asset
    keep the default partition.

    Parameters
    ----------
    asset_partitions:
        Mapping asset -> partition, or a table with `asset` and `partition`
        columns.

    flow_records: pd.core.frame.DataFrame
        Flows with at least `from_asset` and `to_asset`.

    schema:
        Ordered (field, type) pairs of the flow partitions table.

    defaults: dict
        Field name -> default value used for missing cells.

    Returns
    -------
    df: pd.core.frame.DataFrame
        Flow partitions with exactly the schema columns.
    """
    #
    columns = schema_columns(schema)
    validate_defaults(schema, defaults)
    partitions = _partition_lookup(asset_partitions)
    #
    df = flow_records.copy()
    for col in columns:
        if col not in df.columns:
            df[col] = pd.NA
    #
    df = fill_defaults(df, defaults)
    #
    from_partition = df['from_asset'].map(partitions).astype(float)
    to_partition = df['to_asset'].map(partitions).astype(float)
    resolved = pd.concat([from_partition, to_partition], axis=1).max(axis=1)
    #
    unresolved = resolved.isna()
    if unresolved.any():
        for _, row in df[unresolved].iterrows():
            logger.debug('no partition for %s -> %s, keep %s',
                         row['from_asset'], row['to_asset'], row['partition'])
        #
        warnings.warn(
            f'{int(unresolved.sum())} flow(s) without a partition for either '
            'asset keep the default partition',
            PartialDataWarning,
            stacklevel=2)
    #
    current = df['partition'].astype(object).where(df['partition'].notna(), np.nan)
    df['partition'] = resolved.where(~unresolved, pd.to_numeric(current))
    #
    return coerce_to_schema(df[columns], schema).reset_index(drop=True)


def process_flows_rep_period_partition_file(
        assets_partition_file: str,
        flows_data_file: str,
        output_file: str,
        schema,
        defaults: dict,
        number_of_rep_periods: int = 1,
    ) -> pd.core.frame.DataFrame:
    """
    Create the flow partitions file from the asset partitions and the flow
    data files.

    Parameters
    ----------
    assets_partition_file: str
        Model input file with the asset partitions.

    flows_data_file: str
        Model input file with the flow data.

    output_file: str
        Flow partitions file to write; nothing is written if None.

    schema:
        Ordered (field, type) pairs of the flow partitions table.

    defaults: dict
        Field name -> default value used for missing cells.

    number_of_rep_periods: int = 1
        If larger than 1 the table is repeated once per representative
        period.

    Returns
    -------
    df: pd.core.frame.DataFrame
        Flow partitions table.
    """
    #
    df_assets_partition = read_table(assets_partition_file)
    df_flows = read_table(flows_data_file)
    #
    df = reconcile_partitions(df_assets_partition, df_flows, schema, defaults)
    df = replicate_rep_periods(df, number_of_rep_periods, schema)
    #
    if output_file:
        write_table(df, output_file)
    #
    return df


def create_one_file_for_assets_basic_info(
        file_name: str,
        user_input_dir: str,
        output_dir: str,
        defaults: dict,
    ) -> pd.core.frame.DataFrame:
    """
    Create a single file with name, type, country, technology and location
    of all assets. The table is used to aggregate results per country.

    Parameters
    ----------
    file_name: str
        Name of the file to create.

    user_input_dir: str
        Folder holding the user files.

    output_dir: str
        Folder to write the file into.

    defaults: dict
        Field name -> default value used for missing cells.

    Returns
    -------
    df: pd.core.frame.DataFrame
        Asset metadata table.
    """
    #
    return process_user_files(
        user_input_dir,
        os.path.join(output_dir, file_name),
        ASSETS_BASIC_INFO,
        'assets',
        'basic-data.csv',
        defaults)


def preprocess_user_inputs(
        user_input_dir: str,
        model_dir: str,
        defaults: dict,
        n_rp: int = 1,
    ) -> dict:
    """
    Write all model input tables derived from the user files (everything
    except the profiles and representative period tables).

    Parameters
    ----------
    user_input_dir: str
        Folder holding the user files.

    model_dir: str
        Folder to write the model input tables into.

    defaults: dict
        Field name -> default value used for missing cells.

    n_rp: int = 1
        Number of representative periods.

    Returns
    -------
    tables: dict
        Table name -> written table.
    """
    #
    logger.info('create model input tables from %s ...', user_input_dir)
    tables = {}
    #
    for file, schema, prefix, suffix in USER_INPUT_TABLES:
        output_file = os.path.join(model_dir, file)
        df = process_user_files(
            user_input_dir,
            None,
            schema,
            prefix,
            suffix,
            defaults)
        #
        # a full-year optimization has no seasonal storage
        if file == 'assets-data.csv' and n_rp == 1:
            df['is_seasonal'] = pd.array([False] * len(df), dtype='boolean')
        #
        write_table(df, output_file)
        tables[file[:-len('.csv')].replace('-', '_')] = df
    #
    file = 'assets-rep-periods-partitions.csv'
    tables['assets_rep_periods_partitions'] = process_user_files(
        user_input_dir,
        os.path.join(model_dir, file),
        ASSETS_REP_PERIODS_PARTITIONS,
        'assets',
        'yearly-data.csv',
        defaults,
        rename_map={'name': 'asset'},
        number_of_rep_periods=n_rp)
    #
    file = 'flows-rep-periods-partitions.csv'
    tables['flows_rep_periods_partitions'] = process_flows_rep_period_partition_file(
        os.path.join(model_dir, 'assets-rep-periods-partitions.csv'),
        os.path.join(model_dir, 'flows-data.csv'),
        os.path.join(model_dir, file),
        FLOWS_REP_PERIODS_PARTITIONS,
        defaults,
        number_of_rep_periods=n_rp)
    #
    return tables
