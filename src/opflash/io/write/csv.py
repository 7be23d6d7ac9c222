"""Module to write flash tables to CSV."""

import os

import numpy as np

__all__ = ["CSVWriter"]


class CSVWriter:
    """Writes rows of scalars to a CSV file.

    It can only be used to store relatively basic quantities (scalars,
    strings, etc.). Missing values (`None`) are written as empty fields.

    Typical configuration should look like:

    .. code-block:: yaml

        io:
          ...
          writer:
            name: csv
            file_name: flashes.csv
    """

    name = "csv"

    def __init__(
        self,
        file_name="flashes.csv",
        overwrite=False,
        append=False,
        accept_missing=False,
    ):
        """Initialize the basics of the output file.

        Parameters
        ----------
        file_name : str, default 'flashes.csv'
            Name of the output CSV file
        overwrite : bool, default False
            If True, overwrite the output file if it already exists
        append : bool, default False
            If True, add more rows to an existing CSV file
        accept_missing : bool, default False
            Tolerate missing keys (written as empty fields)
        """
        # Check that the output file does not already exist, if requested
        if not overwrite and not append and os.path.isfile(file_name):
            raise FileExistsError(f"File with name {file_name} already exists.")

        self.file_name = file_name
        self.accept_missing = accept_missing
        self.keys = None
        if append:
            if not os.path.isfile(file_name):
                raise FileNotFoundError(
                    f"File not found at path: {file_name}. When using "
                    "`append=True` in CSVWriter, the file must exist at "
                    "the prescribed path before data is written to it."
                )

            with open(self.file_name, "r", encoding="utf-8") as out_file:
                self.keys = out_file.readline().rstrip("\n").split(",")

    def __call__(self, rows):
        """Alias for :meth:`write`."""
        self.write(rows)

    def create(self, row):
        """Initialize the header of the CSV file, record the keys to be stored.

        Parameters
        ----------
        row : dict
            First row to be written to the file
        """
        self.keys = list(row.keys())
        with open(self.file_name, "w", encoding="utf-8") as out_file:
            out_file.write(",".join(self.keys) + "\n")

    def write(self, rows):
        """Append a list of rows to the CSV file.

        Parameters
        ----------
        rows : List[dict]
            List of rows, each a dictionary of scalars
        """
        for row in rows:
            self.append(row)

    def append(self, row):
        """Append one row to the CSV file.

        Parameters
        ----------
        row : dict
            Dictionary of scalars
        """
        if self.keys is None:
            # If this function has never been called, initialize the CSV file
            self.create(row)

        elif list(row.keys()) != self.keys:
            # Check that the list of keys is compatible with the header
            excess = self.array_diff(row.keys(), self.keys)
            if excess:
                raise KeyError(
                    "There are keys in this row which were not present when "
                    f"the CSV file was initialized. New keys: {sorted(excess)}"
                )

            missing = self.array_diff(self.keys, row.keys())
            if missing and not self.accept_missing:
                raise KeyError(
                    "There are keys missing in this row which were present "
                    f"when the CSV file was initialized. Missing keys: "
                    f"{sorted(missing)}"
                )

        with open(self.file_name, "a", encoding="utf-8") as out_file:
            values = [self.format(row.get(k)) for k in self.keys]
            out_file.write(",".join(values) + "\n")

    @staticmethod
    def format(value):
        """Converts one value to its CSV representation.

        Parameters
        ----------
        value : object
            Scalar value

        Returns
        -------
        str
            String representation (empty for missing values)
        """
        if value is None:
            return ""
        if isinstance(value, (bool, np.bool_)):
            return str(int(value))

        return str(value)

    @staticmethod
    def array_diff(array_x, array_y):
        """Returns the elements of the first array missing from the second.

        Parameters
        ----------
        array_x : List[str]
            First array of strings
        array_y : List[str]
            Second array of strings

        Returns
        -------
        Set[str]
            Set of keys that appear in `array_x` but not in `array_y`.
        """
        return set(array_x).difference(set(array_y))
