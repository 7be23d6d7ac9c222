"""Contains a reader class dedicated to loading optical hits from CSV files."""

from typing import List

import numpy as np
import pandas as pd

from opflash.data import Hit

from .base import ReaderBase

__all__ = ["HitCSVReader"]


class HitCSVReader(ReaderBase):
    """Class which reads reconstructed optical hits stored in CSV files.

    Each row of the files describes one hit. Rows are grouped into entries
    by the value of their `entry` column. The files must provide one column
    per :class:`Hit` attribute, `id` and `fast_to_total` excepted.

    Typical configuration should look like:

    .. code-block:: yaml

        io:
          reader:
            name: hit_csv
            file_keys: hits.csv
    """

    name = "hit_csv"

    # Columns which must appear in the input files
    required_columns = (
        "entry",
        "channel",
        "peak_time",
        "peak_time_abs",
        "frame",
        "width",
        "area",
        "amplitude",
        "pe",
    )

    def __init__(
        self,
        file_keys,
        limit_num_files=None,
        max_print_files=10,
        n_entry=None,
        n_skip=None,
        entry_list=None,
        skip_entry_list=None,
    ):
        """Initalize the CSV hit reader.

        Parameters
        ----------
        file_keys : Union[str, List[str]]
            Path or list of paths to the CSV files to be read
        limit_num_files : int, optional
            Integer limiting number of files to be loaded
        max_print_files : int, default 10
            Maximum number of loaded file names to be printed
        n_entry : int, optional
            Maximum number of entries to load
        n_skip : int, optional
            Number of entries to skip at the beginning
        entry_list : list, optional
            List of integer entry IDs to add to the index
        skip_entry_list : list, optional
            List of integer entry IDs to skip from the index
        """
        # Process the list of files
        self.process_file_paths(file_keys, limit_num_files, max_print_files)

        # Load the hit tables, split them into entries
        self.tables: List[pd.DataFrame] = []
        self.entries: List[np.ndarray] = []
        for path in self.file_paths:
            table = pd.read_csv(path)
            missing = set(self.required_columns).difference(table.columns)
            if missing:
                raise KeyError(
                    f"The hit file {path} is missing column(s): {sorted(missing)}"
                )

            self.tables.append(table)
            self.entries.append(np.unique(table["entry"].to_numpy()))

        self.process_file_entries([len(e) for e in self.entries])

        # Process the entry list
        self.process_entry_list(n_entry, n_skip, entry_list, skip_entry_list)

    def get(self, idx):
        """Returns the hits of a specific entry.

        Parameters
        ----------
        idx : int
            Integer entry ID to access

        Returns
        -------
        dict
            Dictionary with the `entry` number, the `file_index` and the
            list of `hits` of the entry
        """
        file_idx = self.get_file_index(idx)
        entry = self.entries[file_idx][self.get_file_entry_index(idx)]

        table = self.tables[file_idx]
        rows = table[table["entry"] == entry]

        has_fast = "fast_to_total" in rows.columns
        hits = []
        for i, row in enumerate(rows.itertuples(index=False)):
            hits.append(
                Hit(
                    id=i,
                    channel=int(row.channel),
                    peak_time=float(row.peak_time),
                    peak_time_abs=float(row.peak_time_abs),
                    frame=int(row.frame),
                    width=float(row.width),
                    area=float(row.area),
                    amplitude=float(row.amplitude),
                    pe=float(row.pe),
                    fast_to_total=float(row.fast_to_total) if has_fast else 0.0,
                )
            )

        return {"entry": int(entry), "file_index": file_idx, "hits": hits}
