# -*- coding: utf-8 -*-

"""
EU case study - error taxonomy

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


class CaseStudyError(Exception):
    """Base class of all errors raised by the case study pipeline."""


class NotFoundError(CaseStudyError, FileNotFoundError):
    """An input folder or a required input file does not exist."""


class SchemaMismatchError(CaseStudyError, ValueError):
    """A value cannot be represented by the type declared in a schema."""


class SolverError(CaseStudyError, RuntimeError):
    """The optimization did not end with an optimal solution."""

    def __init__(
            self,
            status: str,
            termination_condition: str,
            message: str = None,
        ) -> None:
        self.status = status
        self.termination_condition = termination_condition
        if message is None:
            message = (f'optimization ended with status "{status}" and '
                       f'termination condition "{termination_condition}"')
        super().__init__(message)


class InfeasibleModelError(SolverError):
    """The solver proved the model infeasible."""


class PartialDataWarning(UserWarning):
    """
    Non-fatal: a record could only be completed from defaults (e.g. a flow
    without a partition for either of its assets).
    """
