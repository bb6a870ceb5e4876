# -*- coding: utf-8 -*-

"""
EU case study - optimization model built on PyPSA

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

import functools
import logging
import os
from dataclasses import dataclass, field

import networkx as nx
import numpy as np
import pandas as pd
import pypsa

from .errors import InfeasibleModelError, SchemaMismatchError, SolverError
from .config import get_solver_setting

logger = logging.getLogger(__name__)

INFEASIBLE_CONDITIONS = ('infeasible', 'infeasible_or_unbounded')


@dataclass
class ModelInput:
    """PyPSA network of one milestone year and the tables it was built from."""
    network: pypsa.Network
    year: int
    snapshot_map: pd.DataFrame
    asset: pd.DataFrame
    flows: pd.DataFrame
    flow_partitions: pd.DataFrame
    tables: dict = field(default_factory=dict)


@dataclass
class SolvedModel:
    """Solution of a `ModelInput` in block-compressed tables."""
    termination_status: str
    objective: float
    graph: nx.DiGraph
    var_flow: pd.DataFrame
    var_storage_level_rep_period: pd.DataFrame
    var_storage_level_over_clustered_year: pd.DataFrame
    cons_balance_hub: pd.DataFrame
    cons_balance_consumer: pd.DataFrame
    asset: pd.DataFrame
    rep_periods_data: pd.DataFrame
    network: pypsa.Network = None


def _value(row, column, default=0.0):
    value = row.get(column, default)
    if value is None or pd.isna(value):
        return default
    #
    return value


def _for_year(df, year, column='year'):
    if df is None or df.empty or column not in df.columns:
        return df
    #
    return df[df[column] == year]


def link_name(from_asset, to_asset):
    """Name of the PyPSA link of a flow."""
    return f'{from_asset}->{to_asset}'


def milestone_year(tables: dict) -> int:
    """First milestone year of the table `year_data`."""
    #
    year_data = tables['year_data']
    years = year_data[year_data['is_milestone'].fillna(False).astype(bool)]['year']
    if years.empty:
        raise SchemaMismatchError('year_data defines no milestone year')
    #
    return int(years.min())


def build_graph(
        asset: pd.core.frame.DataFrame,
        flows: pd.core.frame.DataFrame,
    ) -> nx.DiGraph:
    """
    Create the directed asset graph: assets are nodes (with their table
    columns as attributes), flows are edges.
    """
    #
    G = nx.DiGraph()
    for _, row in asset.iterrows():
        G.add_node(row['name'], **{
            key: value for key, value in row.items() if key != 'name'})
    #
    for _, row in flows.iterrows():
        G.add_edge(row['from_asset'], row['to_asset'], **{
            key: value for key, value in row.items()
            if key not in ('from_asset', 'to_asset')})
    #
    return G


def _snapshot_map(
        rep_periods_data: pd.core.frame.DataFrame,
        rep_periods_mapping: pd.core.frame.DataFrame,
    ) -> pd.core.frame.DataFrame:
    #
    weights = rep_periods_mapping.groupby('rep_period')['weight'].sum()\
        if rep_periods_mapping is not None and not rep_periods_mapping.empty \
        else pd.Series(dtype=float)
    #
    rows = []
    for _, rp in rep_periods_data.sort_values('rep_period').iterrows():
        weight = float(weights.get(rp['rep_period'], 1.0))
        resolution = float(_value(rp, 'resolution', 1.0))
        for timestep in range(1, int(rp['num_timesteps']) + 1):
            rows.append((int(rp['rep_period']), timestep, resolution, weight))
    #
    df = pd.DataFrame(rows, columns=['rep_period', 'timestep', 'resolution', 'weight'])
    df.index.name = 'snapshot'
    #
    return df


def _profiles_per_snapshot(
        profiles: pd.core.frame.DataFrame,
        snapshot_map: pd.core.frame.DataFrame,
    ) -> pd.core.frame.DataFrame:
    # one column per profile, one row per snapshot
    if profiles is None or profiles.empty:
        return pd.DataFrame(index=snapshot_map.index)
    #
    wide = profiles.pivot_table(
        index=['rep_period', 'timestep'],
        columns='profile_name',
        values='value',
        aggfunc='first')
    keys = pd.MultiIndex.from_frame(snapshot_map[['rep_period', 'timestep']].astype(int))
    wide.index = pd.MultiIndex.from_arrays([
        wide.index.get_level_values(0).astype(int),
        wide.index.get_level_values(1).astype(int)])
    wide = wide.reindex(keys)
    wide.index = snapshot_map.index
    #
    return wide.astype(float)


def _profile(
        profile_table: pd.core.frame.DataFrame,
        profiles: pd.core.frame.DataFrame,
        keys: dict,
        profile_type: str,
    ):
    # time series of a profile or None when the element has none
    if profile_table is None or profile_table.empty:
        return None
    #
    mask = profile_table['profile_type'] == profile_type
    for column, value in keys.items():
        mask &= profile_table[column] == value
    #
    names = profile_table[mask.fillna(False)]['profile_name']
    if names.empty:
        return None
    #
    name = names.iloc[0]
    if name not in profiles.columns or profiles[name].isna().any():
        raise SchemaMismatchError(
            f'profile "{name}" does not cover all timesteps of the model')
    #
    return profiles[name]


def _asset_table(
        tables: dict,
        year: int,
    ) -> pd.core.frame.DataFrame:
    # graph data joined with the data of the milestone year
    asset = tables['graph_assets_data'].merge(
        _for_year(tables['assets_data'], year),
        on='name',
        how='left',
        suffixes=('', '_year'))
    #
    vintage = tables.get('vintage_assets_data')
    if vintage is not None and not vintage.empty:
        asset = asset.merge(
            _for_year(vintage, year, 'commission_year').drop(columns='commission_year'),
            on='name',
            how='left')
    #
    if 'active' in asset.columns:
        asset = asset[asset['active'].fillna(True).astype(bool)]
    #
    return asset.reset_index(drop=True)


def _flow_table(
        tables: dict,
        year: int,
        asset_names: set,
    ) -> pd.core.frame.DataFrame:
    #
    flows = tables['graph_flows_data'].merge(
        _for_year(tables['flows_data'], year),
        on=['from_asset', 'to_asset'],
        how='left')
    #
    vintage = tables.get('vintage_flows_data')
    if vintage is not None and not vintage.empty:
        flows = flows.merge(
            _for_year(vintage, year, 'commission_year').drop(columns='commission_year'),
            on=['from_asset', 'to_asset'],
            how='left')
    #
    if 'active' in flows.columns:
        flows = flows[flows['active'].fillna(True).astype(bool)]
    #
    flows = flows[flows['from_asset'].isin(asset_names) & flows['to_asset'].isin(asset_names)]
    flows = flows.reset_index(drop=True)
    flows['name'] = [link_name(f, t) for f, t in zip(flows['from_asset'], flows['to_asset'])]
    #
    return flows


def _flow_partitions(
        tables: dict,
        year: int,
        snapshot_map: pd.core.frame.DataFrame,
    ) -> pd.core.frame.DataFrame:
    # snapshots that have to repeat the flow of their predecessor
    partitions = _for_year(tables.get('flows_rep_periods_partitions'), year)
    columns = ['link', 'snapshot']
    if partitions is None or partitions.empty:
        return pd.DataFrame(columns=columns)
    #
    rows = []
    for _, row in partitions.iterrows():
        partition = int(_value(row, 'partition', 1))
        if partition <= 1:
            continue
        #
        timesteps = snapshot_map[snapshot_map['rep_period'] == int(row['rep_period'])]
        non_start = timesteps[(timesteps['timestep'] - 1) % partition != 0]
        name = link_name(row['from_asset'], row['to_asset'])
        rows.extend((name, snapshot) for snapshot in non_start.index)
    #
    return pd.DataFrame(rows, columns=columns)


def _add_assets(
        n: pypsa.Network,
        asset: pd.core.frame.DataFrame,
        tables: dict,
        profiles: pd.core.frame.DataFrame,
    ) -> None:
    #
    profile_table = tables.get('assets_profiles')
    for _, row in asset.iterrows():
        name = row['name']
        asset_type = row['type']
        n.add('Bus', name)
        #
        capacity = float(_value(row, 'capacity')) * float(_value(row, 'initial_units'))
        extendable = bool(_value(row, 'investable', False)) and \
            _value(row, 'investment_method', 'none') != 'none'
        capital_cost = float(_value(row, 'investment_cost')) + float(_value(row, 'fixed_cost'))
        p_nom_max = float(_value(row, 'investment_limit', np.inf))
        keys = {'asset': name}
        #
        if asset_type == 'producer':
            availability = _profile(profile_table, profiles, keys, 'availability')
            n.add(
                'Generator',
                name,
                bus=name,
                p_nom=capacity,
                p_nom_min=capacity,
                p_nom_max=max(p_nom_max, capacity),
                p_nom_extendable=extendable,
                capital_cost=capital_cost,
                p_max_pu=1.0 if availability is None else availability)
        #
        elif asset_type == 'consumer':
            demand = _profile(profile_table, profiles, keys, 'demand')
            peak_demand = float(_value(row, 'peak_demand'))
            n.add(
                'Load',
                name,
                bus=name,
                p_set=peak_demand if demand is None else peak_demand * demand)
        #
        elif asset_type == 'storage':
            inflows = _profile(profile_table, profiles, keys, 'inflows')
            storage_inflows = float(_value(row, 'storage_inflows'))
            energy = float(_value(row, 'capacity_storage_energy')) * \
                float(_value(row, 'initial_storage_units'))
            max_hours = float(_value(row, 'energy_to_power_ratio'))
            if max_hours <= 0:
                max_hours = energy / capacity if capacity > 0 and energy > 0 else 1.0
            #
            initial_level = _value(row, 'initial_storage_level', None)
            n.add(
                'StorageUnit',
                name,
                bus=name,
                p_nom=capacity,
                p_nom_min=capacity,
                p_nom_max=max(p_nom_max, capacity),
                p_nom_extendable=extendable,
                capital_cost=capital_cost,
                max_hours=max_hours,
                cyclic_state_of_charge=initial_level is None,
                state_of_charge_initial=0.0 if initial_level is None else float(initial_level),
                inflow=storage_inflows if inflows is None else storage_inflows * inflows)
        #
        elif asset_type not in ('hub', 'conversion'):
            raise SchemaMismatchError(f'asset "{name}" has the unknown type "{asset_type}"')
    #
    return None


def _add_flows(
        n: pypsa.Network,
        flows: pd.core.frame.DataFrame,
        asset: pd.core.frame.DataFrame,
        tables: dict,
        profiles: pd.core.frame.DataFrame,
    ) -> None:
    #
    asset = asset.set_index('name')
    profile_table = tables.get('flows_profiles')
    for _, row in flows.iterrows():
        source = asset.loc[row['from_asset']]
        availability = _profile(
            profile_table, profiles,
            {'from_asset': row['from_asset'], 'to_asset': row['to_asset']},
            'availability')
        attrs = {
            'bus0': row['from_asset'],
            'bus1': row['to_asset'],
            'carrier': _value(row, 'carrier', 'electricity'),
            'efficiency': float(_value(row, 'efficiency', 1.0)),
            'marginal_cost': float(_value(row, 'variable_cost')),
            'p_max_pu': 1.0 if availability is None else availability,
            }
        #
        if bool(_value(row, 'is_transport', False)):
            capacity = float(_value(row, 'capacity'))
            export_capacity = capacity * float(_value(row, 'initial_export_units'))
            import_capacity = capacity * float(_value(row, 'initial_import_units'))
            p_nom = max(export_capacity, import_capacity)
            attrs.update({
                'efficiency': 1.0,
                'p_nom': p_nom,
                'p_nom_min': p_nom,
                'p_max_pu': export_capacity / p_nom if p_nom > 0 else 1.0,
                'p_min_pu': -import_capacity / p_nom if p_nom > 0 else -1.0,
                'p_nom_extendable': bool(_value(row, 'investable', False)),
                'p_nom_max': max(float(_value(row, 'investment_limit', np.inf)), p_nom),
                'capital_cost': float(_value(row, 'investment_cost')) + float(_value(row, 'fixed_cost')),
                })
        #
        elif source['type'] == 'conversion':
            # the conversion capacity limits each of its outflows
            capacity = float(_value(source, 'capacity')) * float(_value(source, 'initial_units'))
            attrs.update({
                'p_nom': capacity,
                'p_nom_min': capacity,
                'p_nom_extendable': bool(_value(source, 'investable', False)) and \
                    _value(source, 'investment_method', 'none') != 'none',
                'capital_cost': float(_value(source, 'investment_cost')) + float(_value(source, 'fixed_cost')),
                })
        #
        else:
            # limited by the connected assets only
            attrs.update({
                'p_nom_extendable': True,
                'capital_cost': 0.0,
                })
        #
        n.add('Link', row['name'], **attrs)
    #
    return None


def build_network(
        tables: dict,
        year: int = None,
    ) -> ModelInput:
    """
    Create the PyPSA network of a milestone year from the model input tables.

    Assets become buses; producers add a generator, consumers a load and
    storage assets a storage unit at their bus. Every flow becomes a link
    named `from->to`. The snapshots are the timesteps of all representative
    periods in order, weighted by the representative period weight times
    the resolution.

    Parameters
    ----------
    tables: dict
        Model input tables keyed by table name (see `read_csv_folder`).

    year: int = None
        Milestone year to model; None takes the first milestone year.

    Returns
    -------
    model_input: ModelInput
        Network and the tables it was built from.
    """
    #
    if year is None:
        year = milestone_year(tables)
    #
    logger.info('build the PyPSA network of year %d ...', year)
    rep_periods_data = _for_year(tables['rep_periods_data'], year)
    snapshot_map = _snapshot_map(
        rep_periods_data,
        _for_year(tables.get('rep_periods_mapping'), year))
    profiles = _profiles_per_snapshot(
        _for_year(tables.get('profiles_rep_periods'), year), snapshot_map)
    #
    n = pypsa.Network()
    n.set_snapshots(snapshot_map.index)
    n.snapshot_weightings['objective'] = (snapshot_map['weight'] * snapshot_map['resolution']).values
    n.snapshot_weightings['generators'] = (snapshot_map['weight'] * snapshot_map['resolution']).values
    n.snapshot_weightings['stores'] = snapshot_map['resolution'].values
    #
    asset = _asset_table(tables, year)
    flows = _flow_table(tables, year, set(asset['name']))
    _add_assets(n, asset, tables, profiles)
    _add_flows(n, flows, asset, tables, profiles)
    #
    flow_partitions = _flow_partitions(tables, year, snapshot_map)
    flow_partitions = flow_partitions[flow_partitions['link'].isin(flows['name'])]
    logger.info('x) %d buses, %d links, %d snapshots',
                len(n.c['Bus'].static), len(n.c['Link'].static), len(n.snapshots))
    #
    return ModelInput(n, year, snapshot_map, asset, flows, flow_partitions, tables)


def flow_partition_constraints(
        n: pypsa.Network,
        snapshots: pd.Index,
        flow_partitions: pd.core.frame.DataFrame,
    ) -> None:
    """
    Keep the flow of a link constant within the blocks of its partition:
    every listed snapshot repeats the flow of the previous snapshot.

    Parameters
    ----------
    n: pypsa.Network
        PyPSA network to get the details from.

    snapshots: pd.Index
        Snapshots being considered in the current PyPSA model.

    flow_partitions: pd.core.frame.DataFrame
        Columns `link` and `snapshot`.

    Returns
    -------
    None
    """
    #
    m = n.model
    flow = m.variables['Link-p']
    #
    for link, df in flow_partitions.groupby('link', sort=False):
        link_flow = flow.loc[:, link]
        non_start = [s for s in df['snapshot'] if s in snapshots]
        if not non_start:
            continue
        #
        con = (link_flow - link_flow.shift(snapshot=1)).sel(snapshot=non_start) == 0
        m.add_constraints(con, name=f'Link-partition-{link}')
        logger.debug('added partition constraints of %s (%d snapshots)', link, len(non_start))
    #
    return None


def extra_functionalities(
        n: pypsa.Network,
        snapshots: pd.Index,
        flow_partitions: pd.core.frame.DataFrame = None,
    ) -> None:
    """Add the constraints PyPSA does not provide out of the shelf."""
    #
    if flow_partitions is not None and not flow_partitions.empty:
        flow_partition_constraints(n, snapshots, flow_partitions)
    #
    return None


def compress_blocks(
        df: pd.core.frame.DataFrame,
        group_columns: list,
        value_column: str = 'solution',
        time_column: str = 'timestep',
        tolerance: float = 1e-9,
    ) -> pd.core.frame.DataFrame:
    """
    Run-length encode per-timestep values into blocks.

    Consecutive timesteps of a group with equal values (within `tolerance`)
    form one block `(time_block_start, time_block_end)`.

    Parameters
    ----------
    df: pd.core.frame.DataFrame
        Per-timestep table; timesteps are ordered within each group.

    group_columns: list
        Columns identifying a series.

    value_column: str = 'solution'
        Column holding the values.

    time_column: str = 'timestep'
        Column holding the timesteps.

    tolerance: float = 1e-9
        Maximum difference of values in one block.

    Returns
    -------
    df: pd.core.frame.DataFrame
        Columns group_columns, time_block_start, time_block_end and
        value_column.
    """
    #
    columns = list(group_columns) + ['time_block_start', 'time_block_end', value_column]
    if df.empty:
        return pd.DataFrame(columns=columns)
    #
    df = df.reset_index(drop=True)
    grouped = df.groupby(list(group_columns), sort=False, dropna=False)
    values = df[value_column].astype(float)
    previous = grouped[value_column].shift().astype(float)
    time = df[time_column].astype(int)
    previous_time = grouped[time_column].shift()
    #
    new_block = pd.Series(
        ~np.isclose(values, previous, rtol=0.0, atol=tolerance), index=df.index) | \
        (time != previous_time + 1)
    df['_block'] = new_block.cumsum()
    #
    out = df.groupby(list(group_columns) + ['_block'], sort=False, dropna=False).agg(
        time_block_start=(time_column, 'min'),
        time_block_end=(time_column, 'max'),
        **{value_column: (value_column, 'first')})
    #
    return out.reset_index().drop(columns='_block')[columns]


def _per_snapshot(
        df: pd.core.frame.DataFrame,
        snapshot_map: pd.core.frame.DataFrame,
        id_name: str,
        value_name: str,
    ) -> pd.core.frame.DataFrame:
    # long table of a snapshot x element result
    if df.shape[1] == 0:
        return pd.DataFrame(columns=[id_name, value_name, 'rep_period', 'timestep'])
    #
    df = df.copy()
    df.index = snapshot_map.index
    df.columns.name = id_name
    long_df = df.stack().rename(value_name).reset_index()
    long_df = long_df.merge(
        snapshot_map[['rep_period', 'timestep']], left_on='snapshot', right_index=True)
    #
    return long_df.sort_values([id_name, 'snapshot'], kind='stable').drop(columns='snapshot')


def _balance_duals(
        n: pypsa.Network,
        model_input: ModelInput,
        asset_type: str,
    ) -> pd.core.frame.DataFrame:
    # the dual of a block is its price times its length in hours
    names = model_input.asset[model_input.asset['type'] == asset_type]['name']
    prices = n.c['Bus'].dynamic['marginal_price'].reindex(columns=names, fill_value=np.nan)
    df = _per_snapshot(prices, model_input.snapshot_map, 'asset', 'price')
    df = compress_blocks(df, ['asset', 'rep_period'], 'price')
    df = df.merge(
        model_input.snapshot_map.groupby('rep_period')['resolution'].first().reset_index(),
        on='rep_period')
    duration = df['time_block_end'] - df['time_block_start'] + 1
    df['dual'] = df['price'] * df['resolution'] * duration
    df['year'] = model_input.year
    #
    return df[['asset', 'year', 'rep_period', 'time_block_start', 'time_block_end', 'dual']]


def _inter_storage_levels(
        n: pypsa.Network,
        model_input: ModelInput,
    ) -> pd.core.frame.DataFrame:
    #
    columns = ['asset', 'year', 'period_block_start', 'period_block_end', 'solution']
    asset = model_input.asset
    if 'is_seasonal' not in asset.columns:
        return pd.DataFrame(columns=columns)
    #
    seasonal = asset[(asset['type'] == 'storage') & asset['is_seasonal'].fillna(False).astype(bool)]
    mapping = _for_year(model_input.tables.get('rep_periods_mapping'), model_input.year)
    if seasonal.empty or mapping is None or mapping.empty:
        return pd.DataFrame(columns=columns)
    #
    names = list(seasonal['name'])
    p = n.c['StorageUnit'].dynamic['p'].reindex(columns=names, fill_value=0.0)
    spill = n.c['StorageUnit'].dynamic['spill'].reindex(columns=names, fill_value=0.0)
    inflow = n.get_switchable_as_dense('StorageUnit', 'inflow')[names]
    resolution = model_input.snapshot_map['resolution'].values
    change = (inflow - spill - p).mul(resolution, axis=0)
    change.index = model_input.snapshot_map.index
    # change of the level over each representative period
    delta = change.groupby(model_input.snapshot_map['rep_period']).sum()
    #
    rows = []
    mapping = mapping.sort_values('period')
    for _, row in seasonal.iterrows():
        level = float(_value(row, 'initial_storage_level'))
        for _, period in mapping.iterrows():
            level += float(period['weight']) * float(delta.loc[int(period['rep_period']), row['name']])
            rows.append((row['name'], model_input.year,
                         int(period['period']), int(period['period']), level))
    #
    return pd.DataFrame(rows, columns=columns)


def _solution_tables(
        n: pypsa.Network,
        model_input: ModelInput,
    ) -> dict:
    #
    year = model_input.year
    snapshot_map = model_input.snapshot_map
    #
    flows = _per_snapshot(n.c['Link'].dynamic['p0'][model_input.flows['name']],
                          snapshot_map, 'name', 'solution')
    flows = flows.merge(model_input.flows[['name', 'from_asset', 'to_asset']], on='name')
    flows['year'] = year
    var_flow = compress_blocks(flows, ['from_asset', 'to_asset', 'year', 'rep_period'])
    #
    storage_names = list(n.c['StorageUnit'].static.index)
    levels = _per_snapshot(n.c['StorageUnit'].dynamic['state_of_charge'][storage_names],
                           snapshot_map, 'asset', 'solution')
    levels['year'] = year
    var_storage = compress_blocks(levels, ['asset', 'year', 'rep_period'])
    #
    return {
        'var_flow': var_flow,
        'var_storage_level_rep_period': var_storage,
        'var_storage_level_over_clustered_year': _inter_storage_levels(n, model_input),
        'cons_balance_hub': _balance_duals(n, model_input, 'hub'),
        'cons_balance_consumer': _balance_duals(n, model_input, 'consumer'),
        }


def solve(
        model_input: ModelInput,
        params: dict,
    ) -> SolvedModel:
    """
    Optimize the network and collect the solution tables.

    Parameters
    ----------
    model_input: ModelInput
        Network to optimize (see `build_network`).

    params: dict
        Run settings (see `read_all_params`).

    Returns
    -------
    solved: SolvedModel
        Termination status, objective and solution tables.
    """
    #
    n = model_input.network
    solver_name = params['solver_name']
    logger.info('optimize with %s ...', solver_name)
    #
    status, tc = n.optimize(
        solver_name=solver_name,
        extra_functionality=functools.partial(
            extra_functionalities,
            flow_partitions=model_input.flow_partitions),
        solver_options=get_solver_setting(params))
    #
    if tc in INFEASIBLE_CONDITIONS:
        if solver_name == 'gurobi':
            labels = n.model.compute_infeasibilities()
            logger.error('irreducible infeasible set: %s',
                         [n.model.constraints.get_label_position(label) for label in labels])
        #
        else:
            logger.error('model is %s; an irreducible infeasible set needs gurobi', tc)
        #
        raise InfeasibleModelError(status, tc)
    #
    if status != 'ok':
        raise SolverError(status, tc)
    #
    logger.info('x) objective %.4g (%s)', n.objective, tc)
    #
    return SolvedModel(
        termination_status=str(tc),
        objective=float(n.objective),
        graph=build_graph(model_input.asset, model_input.flows),
        asset=model_input.asset,
        rep_periods_data=_for_year(model_input.tables['rep_periods_data'], model_input.year),
        network=n,
        **_solution_tables(n, model_input))


def save_network(
        n: pypsa.Network,
        file_name: str,
    ) -> None:
    """
    Save a given PyPSA network as NetCDF file.

    Parameters
    ----------
    n: pypsa.Network
        PyPSA network to save into the NetCDF file.

    file_name: str
        File name to save the PyPSA network into.

    Returns
    -------
    None
    """
    #
    logger.info('save PyPSA network as "%s"', file_name)
    # delete target file if exists
    if os.path.exists(file_name):
        os.remove(file_name)
    #
    n.export_to_netcdf(file_name)
    #
    return None
