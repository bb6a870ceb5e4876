# -*- coding: utf-8 -*-

"""
EU case study - shared test fixtures

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

import matplotlib
import pandas as pd
import pytest

from eucase.defaults import get_default_values

matplotlib.use('Agg')


def write_user_file(folder, file_name, df, units=None):
    """Write a user file: units row on line 1, header on line 2."""
    #
    os.makedirs(folder, exist_ok=True)
    path = os.path.join(folder, file_name)
    units = units or {}
    with open(path, 'w', newline='') as f:
        f.write(','.join(units.get(col, '') for col in df.columns) + '\n')
        df.to_csv(f, index=False)
    #
    return path


@pytest.fixture
def defaults():
    return get_default_values(2050)


@pytest.fixture
def user_input_dir(tmp_path):
    """Minimal user input folder of a one-country case with four timesteps."""
    #
    folder = str(tmp_path / 'user-input-files')
    #
    write_user_file(folder, 'assets-hub-basic-data.csv', pd.DataFrame({
        'name': ['NL_Hub'],
        'type': ['hub'],
        'country': ['NL'],
        'technology': ['Hub']}))
    write_user_file(folder, 'assets-producer-basic-data.csv', pd.DataFrame({
        'name': ['NL_Gas'],
        'type': ['producer'],
        'country': ['NL'],
        'technology': ['Gas'],
        'capacity': [100.0]}))
    write_user_file(folder, 'assets-consumer-basic-data.csv', pd.DataFrame({
        'name': ['NL_Demand'],
        'type': ['consumer'],
        'country': ['NL'],
        'technology': ['Demand']}))
    write_user_file(folder, 'assets-storage-basic-data.csv', pd.DataFrame({
        'name': ['NL_Battery'],
        'type': ['storage'],
        'country': ['NL'],
        'technology': ['Battery'],
        'capacity': [20.0],
        'capacity_storage_energy': [40.0],
        'energy_to_power_ratio': [2.0]}))
    #
    write_user_file(folder, 'assets-yearly-data.csv', pd.DataFrame({
        'name': ['NL_Hub', 'NL_Gas', 'NL_Demand', 'NL_Battery'],
        'initial_units': [0.0, 1.0, 0.0, 1.0],
        'initial_storage_units': [0.0, 0.0, 0.0, 1.0],
        'peak_demand': [0.0, 0.0, 50.0, 0.0],
        'partition': [1, 2, 1, 1]}))
    write_user_file(folder, 'assets-consumer-profiles.csv', pd.DataFrame({
        'asset': ['NL_Demand'],
        'profile_type': ['demand'],
        'profile_name': ['NL_Demand_profile']}))
    #
    write_user_file(folder, 'flows-basic-data.csv', pd.DataFrame({
        'from_asset': ['NL_Gas', 'NL_Hub', 'NL_Battery', 'NL_Hub'],
        'to_asset': ['NL_Hub', 'NL_Demand', 'NL_Hub', 'NL_Battery']}))
    write_user_file(folder, 'flows-yearly-data.csv', pd.DataFrame({
        'from_asset': ['NL_Gas', 'NL_Hub', 'NL_Battery', 'NL_Hub'],
        'to_asset': ['NL_Hub', 'NL_Demand', 'NL_Hub', 'NL_Battery'],
        'variable_cost': [10.0, 0.0, 0.0, 0.0]}))
    #
    write_user_file(folder, 'year-data.csv', pd.DataFrame({
        'year': [2050],
        'length': [4],
        'is_milestone': [True]}))
    #
    # profiles have their header on the first line
    pd.DataFrame({
        'year': [2050] * 4,
        'timestep': [1, 2, 3, 4],
        'NL_Demand_profile': [0.5, 1.0, 1.0, 0.5]}).to_csv(
            os.path.join(folder, 'profiles.csv'), index=False)
    #
    return folder
