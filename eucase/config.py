# -*- coding: utf-8 -*-

"""
EU case study - run parameters and solver settings

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

import ast
import copy
import logging
import os

import pandas as pd

from .errors import NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_PARAMS = {
    # case settings
    'case_name': 'eu-case',
    'default_year': 2050,
    'user_input_dir': 'user-input-files',
    'model_files_dir': 'model-input-files',
    'output_dir': 'outputs',
    'log_level': 'INFO',
    # representative periods
    'n_rp': 1,
    'period_duration': 8760,
    'clustering_method': 'k_means',
    # general solver settings
    'solver_name': 'highs',
    'mipgap': 0.0,
    'feasibility_tol': 0.00001,
    'timelimit': 3600,
    'log_to_console': 1,
    'output_flag': 1,
    # result settings
    'price_factor': 1.0,
    'price_assets': None,
    'battery_assets': None,
    'hydro_assets': None,
    'balance_country': None,
    'flow_from_asset': None,
    'flow_to_asset': None,
    'plot_window': None,
}


def _parse_value(value):
    # keep plain strings (e.g. 'highs') when they are no Python literal
    if not isinstance(value, str):
        return value
    #
    try:
        return ast.literal_eval(value.strip())
    #
    except (ValueError, SyntaxError):
        return value.strip()


def _read_params_table(
        params_file: str,
    ) -> pd.core.frame.DataFrame:
    #
    if params_file.endswith(('.xlsx', '.xls')):
        df = pd.read_excel(params_file, sheet_name='opt_params')
    #
    else:
        df = pd.read_csv(params_file, skiprows=1)
    #
    df.columns = [str(col).strip() for col in df.columns]
    if not {'variable', 'value'}.issubset(df.columns):
        df = df.rename(columns={
            df.columns[0]: 'variable',
            df.columns[1]: 'value'})
    #
    return df.dropna(subset=['variable'])


def read_all_params(
        params_file: str = None,
    ) -> dict:
    """
    Read the run settings of the case study.

    The defaults of `DEFAULT_PARAMS` are overridden by the rows of the
    parameter file; an Excel file is read from its sheet `opt_params`, a CSV
    file carries a units / comment line before its header. Both need the
    columns `variable` and `value`.

    Parameters
    ----------
    params_file: str = None
        Name of the parameter file; None returns the defaults.

    Returns
    -------
    params: dict
        Settings to be considered.
    """
    #
    params = copy.deepcopy(DEFAULT_PARAMS)
    if params_file is None:
        return params
    #
    if not os.path.isfile(params_file):
        raise NotFoundError(f'parameter file "{params_file}" does not exist')
    #
    logger.info('read optimization settings from %s ...', params_file)
    df = _read_params_table(params_file)
    #
    for _, row in df.iterrows():
        variable = str(row['variable']).strip()
        if variable not in params:
            logger.warning('unknown parameter "%s" is ignored', variable)
            continue
        #
        if pd.isna(row['value']):
            continue
        #
        params[variable] = _parse_value(row['value'])
        logger.debug('x) %s = %s', variable, params[variable])
    #
    return params


def get_solver_setting(
        params: dict,
    ) -> dict:
    """
    Set the solver settings to control its behaviour during optimization.

    Parameters
    ----------
    params: dict
        Run settings (see `read_all_params`).

    Returns
    -------
    solver_options: dict
        Options to control the chosen optimization solver.
    """
    #
    if params['solver_name'] == 'gurobi':
        solver_options = {
            # general solver settings
            'mipgap': params['mipgap'],
            'feasibilitytol': params['feasibility_tol'],
            'outputflag': params['output_flag'],
            'logtoconsole': params['log_to_console'],
            'timelimit': params['timelimit'],
            #
            # individual settings
            'threads': 0,
            'presolve': 1,
            'method': 2,
            'crossover': -1,
            }
    #
    elif params['solver_name'] == 'highs':
        solver_options = {
            # general solver settings
            'mip_rel_gap': params['mipgap'],
            'primal_feasibility_tolerance': params['feasibility_tol'],
            'output_flag': bool(params['output_flag']),
            'log_to_console': bool(params['log_to_console']),
            'time_limit': float(params['timelimit']),
            #
            # individual settings
            'threads': 0,
            'presolve': 'choose', # "off", "choose" or "on"
            'solver': 'choose', # "simplex", "choose" or "ipm"
            'run_crossover': 'on',
            }
    #
    elif params['solver_name'] == 'cplex':
        solver_options = {
            # general solver settings
            'mip.tolerances.mipgap': params['mipgap'],
            'simplex.tolerances.feasibility': params['feasibility_tol'],
            'timelimit': params['timelimit'],
            #
            # individual settings
            'threads': 0,
            'lpmethod': 2,
            }
    #
    else:
        solver_options = {}
    #
    return solver_options
