# -*- coding: utf-8 -*-

"""
EU case study - tests of the table builder and partition reconciliation

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

import os

import pandas as pd
import pytest

from conftest import write_user_file
from eucase.errors import NotFoundError, PartialDataWarning, SchemaMismatchError
from eucase.preprocess import (
    create_one_file_for_assets_basic_info,
    preprocess_user_inputs,
    process_user_files,
    reconcile_partitions,
)
from eucase.schemas import (
    FLOWS_REP_PERIODS_PARTITIONS,
    GRAPH_ASSETS_DATA,
    schema_columns,
)
from eucase.tables import read_table

SIMPLE_SCHEMA = (
    ('name', 'VARCHAR'),
    ('type', 'VARCHAR'),
    ('capacity', 'DOUBLE'),
)


@pytest.fixture
def hub_and_gas(tmp_path):
    folder = str(tmp_path / 'inputs')
    write_user_file(folder, 'assets-hub-basic-data.csv', pd.DataFrame({'name': ['NL_Hub']}))
    write_user_file(folder, 'assets-producer-basic-data.csv', pd.DataFrame({
        'name': ['NL_Gas'],
        'capacity': [100]}))
    return folder


def test_columns_are_combined_across_files(hub_and_gas):
    df = process_user_files(
        hub_and_gas, None, SIMPLE_SCHEMA, 'assets', 'basic-data.csv', {'capacity': 0.0})
    #
    assert list(df.columns) == ['name', 'type', 'capacity']
    assert list(df['name']) == ['NL_Hub', 'NL_Gas']
    assert list(df['capacity']) == [0.0, 100.0]
    assert df['type'].isna().all()


def test_output_file_has_units_row(hub_and_gas, tmp_path):
    output_file = str(tmp_path / 'model' / 'graph-assets-data.csv')
    process_user_files(
        hub_and_gas, output_file, SIMPLE_SCHEMA, 'assets', 'basic-data.csv', {'capacity': 0.0})
    #
    with open(output_file) as f:
        lines = f.read().splitlines()
    #
    assert lines[0] == ',,'
    assert lines[1] == 'name,type,capacity'
    assert len(read_table(output_file)) == 2


def test_schema_conformance_ignores_extra_columns(tmp_path):
    folder = str(tmp_path / 'inputs')
    write_user_file(folder, 'assets-a-basic-data.csv', pd.DataFrame({
        'remark': ['x'],
        'capacity': [1.0],
        'name': ['A']}))
    #
    df = process_user_files(
        folder, None, GRAPH_ASSETS_DATA, 'assets', 'basic-data.csv', {})
    #
    assert list(df.columns) == schema_columns(GRAPH_ASSETS_DATA)


def test_defaults_do_not_override_present_values(tmp_path):
    folder = str(tmp_path / 'inputs')
    write_user_file(folder, 'assets-a-basic-data.csv', pd.DataFrame({
        'name': ['A', 'B', 'C'],
        'capacity': [5.0, None, 0.0]}))
    #
    df = process_user_files(
        folder, None, SIMPLE_SCHEMA, 'assets', 'basic-data.csv', {'capacity': 7.0})
    #
    assert list(df['capacity']) == [5.0, 7.0, 0.0]


def test_missing_default_leaves_cells_empty(hub_and_gas):
    df = process_user_files(
        hub_and_gas, None, SIMPLE_SCHEMA, 'assets', 'basic-data.csv',
        {'capacity': 0.0, 'type': pd.NA})
    assert df['type'].isna().all()


def test_files_are_read_in_name_order(tmp_path):
    folder = str(tmp_path / 'inputs')
    write_user_file(folder, 'assets-b-basic-data.csv', pd.DataFrame({'name': ['B']}))
    write_user_file(folder, 'assets-a-basic-data.csv', pd.DataFrame({'name': ['A']}))
    #
    df = process_user_files(folder, None, SIMPLE_SCHEMA, 'assets', 'basic-data.csv', {})
    #
    assert list(df['name']) == ['A', 'B']


def test_rename_and_replication(tmp_path):
    folder = str(tmp_path / 'inputs')
    write_user_file(folder, 'assets-yearly-data.csv', pd.DataFrame({
        'name': ['A', 'B'],
        'partition': [2, None]}))
    schema = (
        ('asset', 'VARCHAR'),
        ('rep_period', 'INTEGER'),
        ('partition', 'INTEGER'))
    #
    df = process_user_files(
        folder, None, schema, 'assets', 'yearly-data.csv',
        {'partition': 1, 'rep_period': 1},
        rename_map={'name': 'asset'},
        number_of_rep_periods=3)
    #
    assert len(df) == 6
    assert list(df['asset']) == ['A', 'B'] * 3
    assert list(df['rep_period']) == [1, 1, 2, 2, 3, 3]
    assert list(df['partition']) == [2, 1] * 3


def test_replication_needs_rep_period_field(hub_and_gas):
    with pytest.raises(SchemaMismatchError):
        process_user_files(
            hub_and_gas, None, SIMPLE_SCHEMA, 'assets', 'basic-data.csv',
            {'capacity': 0.0}, number_of_rep_periods=2)


def test_incompatible_default_fails_before_reading(tmp_path):
    with pytest.raises(SchemaMismatchError):
        process_user_files(
            str(tmp_path / 'does-not-exist'), None, SIMPLE_SCHEMA,
            'assets', 'basic-data.csv', {'capacity': 'none'})


def test_missing_input_folder(tmp_path):
    with pytest.raises(NotFoundError):
        process_user_files(
            str(tmp_path / 'does-not-exist'), None, SIMPLE_SCHEMA,
            'assets', 'basic-data.csv', {})


def test_no_matching_files_gives_empty_table(hub_and_gas):
    df = process_user_files(hub_and_gas, None, SIMPLE_SCHEMA, 'flows', 'basic-data.csv', {})
    assert df.empty
    assert list(df.columns) == ['name', 'type', 'capacity']


def test_partition_is_the_coarser_of_both_assets(defaults):
    flows = pd.DataFrame({
        'from_asset': ['A', 'B'],
        'to_asset': ['B', 'A']})
    #
    df = reconcile_partitions({'A': 2, 'B': 5}, flows, FLOWS_REP_PERIODS_PARTITIONS, defaults)
    #
    assert list(df.columns) == schema_columns(FLOWS_REP_PERIODS_PARTITIONS)
    assert list(df['partition']) == [5, 5]
    assert list(df['specification']) == ['uniform', 'uniform']
    assert list(df['year']) == [2050, 2050]


def test_partition_of_the_known_asset_is_used(defaults):
    flows = pd.DataFrame({'from_asset': ['A', 'C'], 'to_asset': ['C', 'A']})
    df = reconcile_partitions({'A': 2}, flows, FLOWS_REP_PERIODS_PARTITIONS, defaults)
    assert list(df['partition']) == [2, 2]


def test_unknown_assets_keep_default_partition(defaults):
    flows = pd.DataFrame({'from_asset': ['C'], 'to_asset': ['D']})
    #
    with pytest.warns(PartialDataWarning):
        df = reconcile_partitions({'A': 2}, flows, FLOWS_REP_PERIODS_PARTITIONS, defaults)
    #
    assert list(df['partition']) == [1]


def test_partition_table_first_row_wins(defaults):
    assets = pd.DataFrame({'asset': ['A', 'A'], 'partition': [3, 4]})
    flows = pd.DataFrame({'from_asset': ['A'], 'to_asset': ['B']})
    #
    with pytest.warns(PartialDataWarning):
        df = reconcile_partitions(
            assets, pd.concat([flows, pd.DataFrame({'from_asset': ['X'], 'to_asset': ['Y']})],
                      ignore_index=True),
            FLOWS_REP_PERIODS_PARTITIONS, defaults)
    #
    assert list(df['partition']) == [3, 1]


def test_reconciliation_does_not_change_the_input(defaults):
    flows = pd.DataFrame({'from_asset': ['A'], 'to_asset': ['B']})
    reconcile_partitions({'A': 2, 'B': 3}, flows, FLOWS_REP_PERIODS_PARTITIONS, defaults)
    assert list(flows.columns) == ['from_asset', 'to_asset']


def test_assets_basic_info(user_input_dir, tmp_path, defaults):
    output_dir = str(tmp_path / 'outputs')
    df = create_one_file_for_assets_basic_info(
        'assets-country-technology-data.csv', user_input_dir, output_dir, defaults)
    #
    assert list(df.columns) == ['name', 'type', 'country', 'technology', 'lat', 'lon']
    assert set(df['country']) == {'NL'}
    assert (df['lat'] == 0.0).all()
    assert os.path.isfile(os.path.join(output_dir, 'assets-country-technology-data.csv'))


def test_preprocess_user_inputs(user_input_dir, tmp_path, defaults):
    model_dir = str(tmp_path / 'model')
    #
    tables = preprocess_user_inputs(user_input_dir, model_dir, defaults, n_rp=1)
    #
    for name in (
            'graph-assets-data', 'assets-data', 'assets-profiles', 'graph-flows-data',
            'flows-data', 'year-data', 'assets-rep-periods-partitions',
            'flows-rep-periods-partitions'):
        assert os.path.isfile(os.path.join(model_dir, f'{name}.csv'))
    #
    assert not tables['assets_data']['is_seasonal'].any()
    partitions = tables['flows_rep_periods_partitions'].set_index(['from_asset', 'to_asset'])
    assert partitions.loc[('NL_Gas', 'NL_Hub'), 'partition'] == 2
    assert partitions.loc[('NL_Hub', 'NL_Demand'), 'partition'] == 1


def test_preprocess_user_inputs_replicates_partitions(user_input_dir, tmp_path, defaults):
    tables = preprocess_user_inputs(user_input_dir, str(tmp_path / 'model'), defaults, n_rp=2)
    #
    assert len(tables['assets_rep_periods_partitions']) == 8
    assert len(tables['flows_rep_periods_partitions']) == 8
    assert set(tables['flows_rep_periods_partitions']['rep_period']) == {1, 2}
