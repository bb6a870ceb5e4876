# -*- coding: utf-8 -*-

"""
EU case study - end-to-end workflow

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
import shutil
import sys

from packaging import version
import pypsa

from . import __version__
from .config import read_all_params
from .defaults import get_default_values
from .errors import CaseStudyError
from .model import build_network, save_network, solve
from .plots import (
    plot_country_balance,
    plot_electricity_prices,
    plot_flow,
    plot_inter_storage_levels,
    plot_intra_storage_levels,
    save_figure,
)
from .preprocess import create_one_file_for_assets_basic_info, preprocess_user_inputs
from .profiles import preprocess_profiles
from .results import (
    export_solution_to_csv_files,
    get_balance_per_country,
    get_flow_dataframe,
    get_inter_storage_levels_dataframe,
    get_intra_storage_levels_dataframe,
    get_prices_dataframe,
    write_unstacked,
)
from .tables import read_csv_folder

logger = logging.getLogger(__name__)

ASSETS_BASIC_INFO_FILE = 'assets-country-technology-data.csv'


def setup_logging(
        level: str = 'INFO',
    ) -> None:
    """Configure the root logger; PyPSA and linopy only report errors."""
    #
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    # surpress PyPSA's logging messages
    logging.getLogger('pypsa').setLevel(logging.ERROR)
    logging.getLogger('linopy').setLevel(logging.ERROR)
    #
    return None


def check_versions() -> None:
    """Stop if the installed PyPSA version is not supported."""
    #
    if version.parse(pypsa.__version__) < version.parse('1.0.0'):
        raise CaseStudyError(
            f'installed PyPSA version ({pypsa.__version__}) not supported! need at least v1.0.0')
    #
    return None


def clean_folder(
        folder: str,
    ) -> None:
    """Remove a folder with all its content and create it again."""
    #
    if os.path.isdir(folder):
        shutil.rmtree(folder)
    #
    os.makedirs(folder)
    #
    return None


def write_charts(
        output_dir: str,
        params: dict,
        prices,
        intra_storage_levels,
        inter_storage_levels,
        balances,
        solved,
    ) -> None:
    """Create the PNG charts of a solved case."""
    #
    logger.info('create charts in %s ...', output_dir)
    case_name = params['case_name']
    window = {'xlim': params['plot_window']} if params['plot_window'] else {}
    #
    save_figure(
        plot_electricity_prices(prices, assets=params['price_assets'], plots_args={'ylim': (0, None)}),
        os.path.join(output_dir, f'{case_name}-price-duration-curve.png'))
    save_figure(
        plot_intra_storage_levels(
            intra_storage_levels, assets=params['battery_assets'], plots_args=window),
        os.path.join(output_dir, f'{case_name}-batteries-storage-levels.png'))
    #
    if params['hydro_assets']:
        if params['n_rp'] > 1:
            fig = plot_inter_storage_levels(inter_storage_levels, assets=params['hydro_assets'])
        #
        else:
            fig = plot_intra_storage_levels(intra_storage_levels, assets=params['hydro_assets'])
        #
        save_figure(fig, os.path.join(output_dir, f'{case_name}-hydro-storage-levels.png'))
    #
    if not balances.empty:
        country = params['balance_country'] or balances['country'].dropna().iloc[0]
        first = balances[balances['country'] == country].iloc[0]
        save_figure(
            plot_country_balance(
                balances, country, first['year'], first['rep_period'], plots_args=window),
            os.path.join(output_dir, f'{case_name}-balance-{country}.png'))
    #
    from_asset = params['flow_from_asset']
    to_asset = params['flow_to_asset']
    if from_asset and to_asset:
        flow = get_flow_dataframe(solved, from_asset, to_asset)
        save_figure(
            plot_flow(flow, plots_args=window),
            os.path.join(output_dir, f'flows-{from_asset}-{to_asset}.png'))
    #
    return None


def main(
        case_dir: str = '.',
        params_file: str = None,
    ):
    """
    Run the case study: create the model input tables from the user files,
    optimize the model and write results and charts.

    Parameters
    ----------
    case_dir: str = '.'
        Folder of the case; the input and output folders of the parameters
        are relative to it.

    params_file: str = None
        Parameter file (xlsx or csv); None uses the defaults.

    Returns
    -------
    solved: SolvedModel
        Solved model of the case.
    """
    #
    params = read_all_params(params_file)
    setup_logging(params['log_level'])
    logger.info('EU case study v%s (PyPSA v%s)', __version__, pypsa.__version__)
    check_versions()
    #
    user_input_dir = os.path.join(case_dir, params['user_input_dir'])
    model_dir = os.path.join(case_dir, params['model_files_dir'])
    output_dir = os.path.join(case_dir, params['output_dir'])
    #
    # create the model input tables
    clean_folder(model_dir)
    defaults = get_default_values(params['default_year'])
    preprocess_profiles(
        user_input_dir,
        model_dir,
        n_rp=params['n_rp'],
        period_duration=params['period_duration'],
        method=params['clustering_method'],
        default_year=params['default_year'])
    preprocess_user_inputs(user_input_dir, model_dir, defaults, n_rp=params['n_rp'])
    #
    # optimize
    tables = read_csv_folder(model_dir)
    solved = solve(build_network(tables), params)
    #
    # results
    os.makedirs(output_dir, exist_ok=True)
    assets = create_one_file_for_assets_basic_info(
        ASSETS_BASIC_INFO_FILE,
        user_input_dir,
        output_dir,
        defaults)
    save_network(solved.network, os.path.join(output_dir, f'{params["case_name"]}.nc'))
    export_solution_to_csv_files(output_dir, solved)
    #
    case_name = params['case_name']
    prices = get_prices_dataframe(solved, params['price_factor'])
    intra_storage_levels = get_intra_storage_levels_dataframe(solved)
    inter_storage_levels = get_inter_storage_levels_dataframe(solved)
    balances = get_balance_per_country(solved.var_flow, assets)
    #
    write_unstacked(
        prices, os.path.join(output_dir, f'{case_name}-prices.csv'), 'asset', 'price')
    write_unstacked(
        intra_storage_levels, os.path.join(output_dir, f'{case_name}-intra-storage-levels.csv'),
        'asset', 'SoC')
    write_unstacked(
        balances, os.path.join(output_dir, f'{case_name}-balance-per-country.csv'),
        'technology', 'solution', fill_value=0.0)
    #
    write_charts(
        output_dir,
        params,
        prices,
        intra_storage_levels,
        inter_storage_levels,
        balances,
        solved)
    #
    logger.info('done.')
    #
    return solved


def cli() -> None:
    """Command line entry: `eucase [case_dir] [params_file]`."""
    #
    args = sys.argv[1:]
    try:
        main(*args[:2])
    #
    except CaseStudyError as e:
        logger.error('error! %s', e)
        sys.exit(1)
