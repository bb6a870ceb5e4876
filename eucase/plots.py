# -*- coding: utf-8 -*-

"""
EU case study - charts of the results

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

import matplotlib.pyplot as plt
import pandas as pd

logger = logging.getLogger(__name__)


def _filter(df, **filters):
    # empty or None filters keep all rows
    for column, values in filters.items():
        if values:
            df = df[df[column].isin(list(values))]
    #
    return df


def _apply_args(axes, plots_args):
    for ax in axes:
        ax.set(**(plots_args or {}))


def _rep_period_axes(df, figsize=(12, 4)):
    rep_periods = sorted(df['rep_period'].unique()) if not df.empty else [1]
    fig, axes = plt.subplots(
        len(rep_periods), 1,
        squeeze=False,
        figsize=(figsize[0], figsize[1] * len(rep_periods)),
        dpi=150)
    #
    return fig, list(axes[:, 0]), rep_periods


def plot_electricity_prices(
        prices: pd.core.frame.DataFrame,
        assets: list = None,
        years: list = None,
        rep_periods: list = None,
        plots_args: dict = None,
        duration_curve: bool = True,
    ) -> plt.Figure:
    """
    Plot the prices of the selected assets, one subplot per representative
    period.

    Parameters
    ----------
    prices: pd.core.frame.DataFrame
        Columns asset, year, rep_period, time and price.

    assets: list = None
        Assets to show; None shows all.

    years: list = None
        Years to show; None shows all.

    rep_periods: list = None
        Representative periods to show; None shows all.

    plots_args: dict = None
        Settings applied to every axis (e.g. {'ylim': (0, 100)}).

    duration_curve: bool = True
        Sort the prices descending (price duration curve).

    Returns
    -------
    fig: plt.Figure
        Figure with the prices.
    """
    #
    df = _filter(prices, asset=assets, year=years, rep_period=rep_periods)
    fig, axes, rps = _rep_period_axes(df)
    #
    for i, (ax, rp) in enumerate(zip(axes, rps)):
        for (asset, year), group in df[df['rep_period'] == rp].groupby(['asset', 'year'], sort=False):
            price = group['price'].values
            if duration_curve:
                price = sorted(price, reverse=True)
            #
            ax.plot(group['time'].values, price, linewidth=2, label=f'{asset} ({year})')
        #
        ax.set_xlabel(f'Hour - rep. period {rp}')
        ax.set_ylabel('Price [€/MWh]')
        if i == 0 and ax.lines:
            ax.legend()
    #
    _apply_args(axes, plots_args)
    fig.tight_layout()
    #
    return fig


def plot_intra_storage_levels(
        intra_storage_levels: pd.core.frame.DataFrame,
        assets: list = None,
        years: list = None,
        rep_periods: list = None,
        plots_args: dict = None,
    ) -> plt.Figure:
    """Plot the state of charge within the representative periods."""
    #
    df = _filter(intra_storage_levels, asset=assets, year=years, rep_period=rep_periods)
    fig, axes, rps = _rep_period_axes(df)
    #
    for i, (ax, rp) in enumerate(zip(axes, rps)):
        for (asset, year), group in df[df['rep_period'] == rp].groupby(['asset', 'year'], sort=False):
            ax.plot(group['time'].values, group['SoC'].values, linewidth=3, label=f'{asset} ({year})')
        #
        ax.set_xlabel(f'Hour - rep. period {rp}')
        ax.set_ylabel('Storage level [p.u.]')
        if i == 0 and ax.lines:
            ax.legend()
    #
    _apply_args(axes, plots_args)
    fig.tight_layout()
    #
    return fig


def plot_inter_storage_levels(
        inter_storage_levels: pd.core.frame.DataFrame,
        assets: list = None,
        plots_args: dict = None,
    ) -> plt.Figure:
    """Plot the state of charge of seasonal storages per period."""
    #
    df = _filter(inter_storage_levels, asset=assets)
    fig, ax = plt.subplots(figsize=(12, 4), dpi=150)
    #
    for asset, group in df.groupby('asset', sort=False):
        ax.plot(group['period'].values, group['SoC'].values, linewidth=3, label=asset)
    #
    ax.set_xlabel('Period')
    ax.set_ylabel('Storage level [p.u.]')
    if ax.lines:
        ax.legend()
    #
    _apply_args([ax], plots_args)
    fig.tight_layout()
    #
    return fig


def plot_country_balance(
        balances: pd.core.frame.DataFrame,
        country: str,
        year: int,
        rep_period: int,
        plots_args: dict = None,
    ) -> plt.Figure:
    """
    Plot the hourly balance of a country as stacked bars (in GWh) with the
    demand as dashed line. Imports and exports are shown as their difference
    `NetExchange`.

    Parameters
    ----------
    balances: pd.core.frame.DataFrame
        Columns country, technology, year, rep_period, time and solution.

    country: str
        Country to show.

    year: int
        Year to show.

    rep_period: int
        Representative period to show.

    plots_args: dict = None
        Settings applied to the axis.

    Returns
    -------
    fig: plt.Figure
        Figure with the balance.
    """
    #
    df = balances[
        (balances['country'] == country) &
        (balances['year'] == year) &
        (balances['rep_period'] == rep_period)]
    if df.empty:
        wide = pd.DataFrame(index=pd.Index([], name='time'))
    #
    else:
        wide = df.pivot_table(
            index='time',
            columns='technology',
            values='solution',
            aggfunc='sum',
            fill_value=0.0).sort_index()
    #
    for column in ('IncomingTransportFlow', 'OutgoingTransportFlow', 'Demand'):
        if column not in wide.columns:
            wide[column] = 0.0
    #
    wide['NetExchange'] = wide['IncomingTransportFlow'] - wide['OutgoingTransportFlow']
    demand = wide['Demand']
    technologies = [col for col in wide.columns if col not in (
        'Demand', 'IncomingTransportFlow', 'OutgoingTransportFlow')]
    #
    fig, ax = plt.subplots(figsize=(12, 6), dpi=150)
    colors = plt.get_cmap('Paired').colors
    positive = pd.Series(0.0, index=wide.index)
    negative = pd.Series(0.0, index=wide.index)
    #
    for i, technology in enumerate(technologies):
        values = wide[technology] / 1000
        bottom = positive.where(values >= 0, negative)
        ax.bar(wide.index, values, bottom=bottom, width=1.0,
               label=technology, color=colors[i % len(colors)])
        positive += values.clip(lower=0)
        negative += values.clip(upper=0)
    #
    ax.plot(wide.index, demand / 1000, label='Demand', color='black', linewidth=3, linestyle='--')
    ax.set_xlabel('Hour')
    ax.set_ylabel('[GWh]')
    ax.legend(ncol=min(len(technologies) + 1, 4))
    #
    _apply_args([ax], plots_args)
    fig.tight_layout()
    #
    return fig


def plot_flow(
        flow: pd.core.frame.DataFrame,
        plots_args: dict = None,
    ) -> plt.Figure:
    """Plot the per-timestep solution of one flow (see `get_flow_dataframe`) in GWh."""
    #
    fig, axes, rps = _rep_period_axes(flow)
    #
    for i, (ax, rp) in enumerate(zip(axes, rps)):
        for (from_asset, to_asset), group in flow[flow['rep_period'] == rp]\
                .groupby(['from_asset', 'to_asset'], sort=False):
            ax.plot(group['time'].values, group['solution'].values / 1000,
                    label=f'{from_asset} -> {to_asset}')
        #
        ax.set_xlabel('Hour')
        ax.set_ylabel('[GWh]')
        if i == 0 and ax.lines:
            ax.legend()
    #
    _apply_args(axes, plots_args)
    fig.tight_layout()
    #
    return fig


def save_figure(
        fig: plt.Figure,
        file_name: str,
    ) -> None:
    """Save a figure as PNG file and release it."""
    #
    logger.info('x) %s', file_name)
    fig.savefig(file_name, dpi=300)
    plt.close(fig)
    #
    return None
