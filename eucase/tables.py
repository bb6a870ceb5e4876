# -*- coding: utf-8 -*-

"""
EU case study - reading and writing of table files

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

import pandas as pd

from .errors import NotFoundError
from .schemas import SCHEMA_PER_TABLE_NAME, coerce_to_schema

logger = logging.getLogger(__name__)


def list_user_files(
        input_folder: str,
        name_prefix: str,
        name_suffix: str,
    ) -> list:
    """
    List the files of a folder starting with `name_prefix` and ending with
    `name_suffix`, sorted by name so the concatenation order is stable.

    Parameters
    ----------
    input_folder: str
        Folder to search in.

    name_prefix: str
        Required start of the file name (e.g. 'assets').

    name_suffix: str
        Required end of the file name (e.g. 'basic-data.csv').

    Returns
    -------
    files: list
        Matching file names (without folder).
    """
    #
    if not os.path.isdir(input_folder):
        raise NotFoundError(f'input folder "{input_folder}" does not exist')
    #
    return sorted(
        file for file in os.listdir(input_folder)
        if file.startswith(name_prefix) and file.endswith(name_suffix))


def read_user_file(
        file_name: str,
    ) -> pd.core.frame.DataFrame:
    """
    Read a CSV file whose first line is a units / comment row and whose
    header is on the second line.
    """
    #
    if not os.path.isfile(file_name):
        raise NotFoundError(f'file "{file_name}" does not exist')
    #
    logger.debug('read %s', file_name)
    df = pd.read_csv(file_name, skiprows=1)
    df.columns = [str(col).strip() for col in df.columns]
    #
    return df


# generated tables follow the same convention as the user files
read_table = read_user_file


def write_table(
        df: pd.core.frame.DataFrame,
        file_name: str,
        units: dict = None,
    ) -> None:
    """
    Write a table as CSV preceded by a units row with one entry per column.

    Parameters
    ----------
    df: pd.core.frame.DataFrame
        Table to write.

    file_name: str
        Target file; an existing file is replaced.

    units: dict = None
        Optional column -> unit label for the units row (e.g. 'p.u.').
        Columns without a unit get an empty entry.

    Returns
    -------
    None
    """
    #
    directory = os.path.dirname(file_name)
    if directory:
        os.makedirs(directory, exist_ok=True)
    #
    units = units or {}
    units_row = ','.join(str(units.get(col, '')) for col in df.columns)
    #
    with open(file_name, 'w', newline='') as f:
        f.write(units_row + '\n')
        df.to_csv(f, index=False)
    #
    logger.info('x) %s (%d rows)', os.path.basename(file_name), len(df))
    #
    return None


def read_csv_folder(
        folder: str,
        schemas: dict = None,
    ) -> dict:
    """
    Read all generated tables of a folder. Tables with a known schema are
    cast to their declared column types.

    Parameters
    ----------
    folder: str
        Folder holding the model input tables.

    schemas: dict = None
        Table name -> schema; defaults to the model input contract.

    Returns
    -------
    tables: dict
        Table name (file stem, '-' replaced by '_') -> DataFrame.
    """
    #
    if not os.path.isdir(folder):
        raise NotFoundError(f'model input folder "{folder}" does not exist')
    #
    if schemas is None:
        schemas = SCHEMA_PER_TABLE_NAME
    #
    tables = {}
    for file in sorted(os.listdir(folder)):
        if not file.endswith('.csv'):
            continue
        #
        name = file[:-len('.csv')].replace('-', '_')
        df = read_table(os.path.join(folder, file))
        if name in schemas:
            df = coerce_to_schema(df, schemas[name])
        #
        tables[name] = df
    #
    logger.info('read %d tables from %s', len(tables), folder)
    #
    return tables
