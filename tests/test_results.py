# -*- coding: utf-8 -*-

"""
EU case study - tests of the result tables

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

from types import SimpleNamespace

import numpy as np
import pandas as pd
import pytest

from eucase.errors import SchemaMismatchError
from eucase.model import compress_blocks
from eucase.results import (
    add_block_duration,
    classify_flows,
    get_balance_per_country,
    get_flow_dataframe,
    get_inter_storage_levels_dataframe,
    get_intra_storage_levels_dataframe,
    get_prices_dataframe,
    unroll_dataframe,
    write_unstacked,
)
from eucase.tables import read_table


ASSETS = pd.DataFrame({
    'name': ['NL_Hub', 'NL_Hub2', 'BE_Hub', 'NL_Gas', 'NL_Electrolyser',
             'NL_Battery', 'NL_Demand', 'BE_Gas', 'BE_Solar'],
    'type': ['hub', 'hub', 'hub', 'producer', 'conversion',
             'storage', 'consumer', 'producer', 'producer'],
    'country': ['NL', 'NL', 'BE', 'NL', 'NL', 'NL', 'NL', 'BE', 'BE'],
    'technology': ['Hub', 'Hub', 'Hub', 'Gas', 'Electrolyser',
                   'Battery', 'Demand', 'Gas', 'Solar'],
    'lat': 0.0,
    'lon': 0.0})


def _blocks(rows):
    return pd.DataFrame(rows, columns=[
        'from_asset', 'to_asset', 'year', 'rep_period',
        'time_block_start', 'time_block_end', 'solution'])


def _random_partition(rng, total):
    # random block lengths summing up to total
    cuts = sorted(rng.choice(np.arange(1, total), size=rng.integers(0, total - 1), replace=False))
    bounds = [0] + list(cuts) + [total]
    return [b - a for a, b in zip(bounds[:-1], bounds[1:])]


def test_unroll_completeness_for_random_partitions():
    rng = np.random.default_rng(42)
    for _ in range(20):
        rows = []
        totals = {}
        for asset in ('A', 'B', 'C'):
            totals[asset] = int(rng.integers(2, 30))
            for block, duration in enumerate(_random_partition(rng, totals[asset])):
                rows.append((asset, 2050, 1, duration, f'{asset}{block}'))
        df = pd.DataFrame(rows, columns=['asset', 'year', 'rep_period', 'duration', 'value'])
        #
        out = unroll_dataframe(df, ['asset', 'year', 'rep_period'])
        #
        for asset, group in out.groupby('asset'):
            assert list(group['time']) == list(range(1, totals[asset] + 1))
            assert len(group) == df[df['asset'] == asset]['duration'].sum()
        #
        expected = df.loc[df.index.repeat(df['duration']), 'value'].tolist()
        assert out['value'].tolist() == expected


def test_unroll_keeps_input_order_within_groups():
    df = pd.DataFrame({
        'asset': ['A', 'B', 'A'],
        'duration': [2, 1, 1],
        'value': [1.0, 5.0, 2.0]})
    #
    out = unroll_dataframe(df, ['asset'])
    #
    a = out[out['asset'] == 'A']
    assert list(a['time']) == [1, 2, 3]
    assert list(a['value']) == [1.0, 1.0, 2.0]


def test_unroll_needs_duration():
    with pytest.raises(SchemaMismatchError):
        unroll_dataframe(pd.DataFrame({'asset': ['A']}), ['asset'])


def test_compress_blocks_round_trip():
    df = pd.DataFrame({
        'asset': ['A'] * 6 + ['B'] * 2,
        'timestep': [1, 2, 3, 4, 5, 6, 1, 2],
        'solution': [1.0, 1.0, 2.0, 2.0, 2.0, 1.0, 3.0, 3.0]})
    #
    blocks = compress_blocks(df, ['asset'])
    #
    assert list(blocks['time_block_start']) == [1, 3, 6, 1]
    assert list(blocks['time_block_end']) == [2, 5, 6, 2]
    assert list(blocks['solution']) == [1.0, 2.0, 1.0, 3.0]
    #
    out = unroll_dataframe(add_block_duration(blocks), ['asset'])
    assert list(out['solution']) == list(df['solution'])
    assert list(out['time']) == list(df['timestep'])


def test_classify_flows():
    df = pd.DataFrame({
        'type_from': ['producer', 'hub', 'storage', 'hub', 'hub', 'hub', 'hub', 'consumer'],
        'type_to': ['hub', 'conversion', 'hub', 'storage', 'consumer', 'hub', 'hub', 'hub'],
        'country_from': ['NL'] * 5 + ['NL', 'NL', 'NL'],
        'country_to': ['NL'] * 5 + ['BE', 'NL', 'NL']})
    #
    category = classify_flows(df)
    #
    assert list(category.iloc[:6]) == [
        'inflow', 'outflow', 'storage_discharge', 'storage_charge', 'demand_to', 'cross_border']
    assert pd.isna(category.iloc[6])
    assert category.iloc[7] == 'demand_from'


def test_balance_covers_every_category_once():
    flows = _blocks([
        ('NL_Gas', 'NL_Hub', 2050, 1, 1, 2, 10.0),
        ('NL_Hub', 'NL_Electrolyser', 2050, 1, 1, 2, 20.0),
        ('NL_Battery', 'NL_Hub', 2050, 1, 1, 2, 3.0),
        ('NL_Hub', 'NL_Battery', 2050, 1, 1, 2, 4.0),
        ('NL_Hub', 'NL_Demand', 2050, 1, 1, 2, 5.0),
        ('NL_Hub', 'BE_Hub', 2050, 1, 1, 2, 6.0),
        ('NL_Hub', 'NL_Hub2', 2050, 1, 1, 2, 7.0),
        ('BE_Gas', 'BE_Solar', 2050, 1, 1, 2, 8.0),
        ])
    #
    df = get_balance_per_country(flows, ASSETS)
    #
    assert list(df.columns) == ['country', 'technology', 'year', 'rep_period', 'time', 'solution']
    assert len(df) == 7 * 2
    balance = df.groupby(['country', 'technology'])['solution'].apply(list).to_dict()
    assert balance == {
        ('NL', 'Gas'): [10.0, 10.0],
        ('NL', 'Electrolyser'): [-20.0, -20.0],
        ('NL', 'Battery_discharge'): [3.0, 3.0],
        ('NL', 'Battery_charge'): [-4.0, -4.0],
        ('NL', 'Demand'): [5.0, 5.0],
        ('NL', 'OutgoingTransportFlow'): [6.0, 6.0],
        ('BE', 'IncomingTransportFlow'): [6.0, 6.0],
        }


def test_balance_sums_flows_of_a_technology():
    flows = _blocks([
        ('NL_Gas', 'NL_Hub', 2050, 1, 1, 1, 10.0),
        ('NL_Gas', 'NL_Hub2', 2050, 1, 1, 1, 5.0),
        ])
    df = get_balance_per_country(flows, ASSETS)
    assert df['solution'].tolist() == [15.0]


def test_balance_of_flows_without_hub_is_empty():
    flows = _blocks([('BE_Gas', 'BE_Solar', 2050, 1, 1, 2, 8.0)])
    assert get_balance_per_country(flows, ASSETS).empty


def _solved(**tables):
    empty = pd.DataFrame(columns=['asset', 'year', 'rep_period',
                                  'time_block_start', 'time_block_end', 'dual'])
    values = {
        'cons_balance_hub': empty,
        'cons_balance_consumer': empty,
        'var_storage_level_rep_period': pd.DataFrame(),
        'var_storage_level_over_clustered_year': pd.DataFrame(),
        'var_flow': _blocks([]),
        'rep_periods_data': pd.DataFrame({
            'year': [2050, 2050],
            'rep_period': [1, 2],
            'num_timesteps': [4, 2],
            'resolution': [1.0, 2.0]}),
        'asset': pd.DataFrame({
            'name': ['Battery', 'Tank'],
            'type': ['storage', 'storage'],
            'capacity_storage_energy': [40.0, 0.0]}),
        }
    values.update(tables)
    return SimpleNamespace(**values)


def test_prices_from_duals():
    solved = _solved(cons_balance_hub=pd.DataFrame({
        'asset': ['Hub', 'Hub', 'Hub'],
        'year': [2050, 2050, 2050],
        'rep_period': [1, 1, 2],
        'time_block_start': [1, 4, 1],
        'time_block_end': [3, 4, 2],
        'dual': [30.0, 7.0, 8.0]}))
    #
    prices = get_prices_dataframe(solved)
    #
    assert list(prices.columns) == ['asset', 'year', 'rep_period', 'time', 'price']
    rp1 = prices[prices['rep_period'] == 1]
    assert list(rp1['time']) == [1, 2, 3, 4]
    assert list(rp1['price']) == pytest.approx([10.0, 10.0, 10.0, 7.0])
    rp2 = prices[prices['rep_period'] == 2]
    assert list(rp2['price']) == pytest.approx([2.0, 2.0])
    #
    scaled = get_prices_dataframe(solved, price_factor=1e3)
    assert scaled['price'].iloc[0] == pytest.approx(10000.0)


def test_storage_levels_as_state_of_charge():
    solved = _solved(var_storage_level_rep_period=pd.DataFrame({
        'asset': ['Battery', 'Battery', 'Tank'],
        'year': [2050, 2050, 2050],
        'rep_period': [1, 1, 1],
        'time_block_start': [1, 3, 1],
        'time_block_end': [2, 4, 4],
        'solution': [20.0, 40.0, 5.0]}))
    #
    df = get_intra_storage_levels_dataframe(solved)
    #
    battery = df[df['asset'] == 'Battery']
    assert list(battery['SoC']) == pytest.approx([0.5, 0.5, 1.0, 1.0])
    assert list(df[df['asset'] == 'Tank']['SoC']) == pytest.approx([5.0] * 4)


def test_inter_storage_levels_per_period():
    solved = _solved(var_storage_level_over_clustered_year=pd.DataFrame({
        'asset': ['Battery', 'Battery'],
        'year': [2050, 2050],
        'period_block_start': [1, 2],
        'period_block_end': [1, 3],
        'solution': [10.0, 20.0]}))
    #
    df = get_inter_storage_levels_dataframe(solved)
    #
    assert list(df.columns) == ['asset', 'year', 'period', 'SoC']
    assert list(df['period']) == [1, 2, 3]
    assert list(df['SoC']) == pytest.approx([0.25, 0.5, 0.5])


def test_flow_dataframe():
    solved = _solved(var_flow=_blocks([
        ('A', 'B', 2050, 1, 1, 2, 1.0),
        ('A', 'B', 2050, 1, 3, 3, 2.0),
        ('B', 'A', 2050, 1, 1, 3, 9.0),
        ]))
    #
    df = get_flow_dataframe(solved, 'A', 'B', 2050, 1)
    #
    assert list(df['time']) == [1, 2, 3]
    assert list(df['solution']) == [1.0, 1.0, 2.0]


def test_write_unstacked(tmp_path):
    df = pd.DataFrame({
        'country': ['NL', 'NL', 'NL'],
        'technology': ['Gas', 'Demand', 'Gas'],
        'time': [1, 1, 2],
        'solution': [1.0, 2.0, 3.0]})
    file_name = str(tmp_path / 'balance.csv')
    #
    wide = write_unstacked(df, file_name, 'technology', 'solution', fill_value=0.0)
    #
    assert list(wide.columns[:2]) == ['country', 'time']
    assert set(wide.columns[2:]) == {'Gas', 'Demand'}
    wide = wide.sort_values('time')
    assert list(wide['Demand']) == [2.0, 0.0]
    assert list(wide['Gas']) == [1.0, 3.0]
    assert len(read_table(file_name)) == 2
