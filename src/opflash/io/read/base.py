"""Contains the data reader base class.

Data readers are used to extract specific entries from files and return the
optical data products (waveforms or hits) of each entry as a dictionary.
"""

import glob
import os

import numpy as np

from opflash.utils.logger import logger

__all__ = ["ReaderBase"]


class ReaderBase:
    """Parent reader class which provides common functions between all readers.

    This class provides these basic functions:
    1. Method to parse the requested file list or file list file into a list of
       paths to existing files (throws if nothing is found)
    2. Method to produce a list of entries in the file(s) as selected by the
       provided parameters, checks that they exist (throws if they do not)
    3. Essential `__len__` and `__getitem__` methods. Must define the
       `get` function in the inheriting class for both of them to work.

    Attributes
    ----------
    name : str
        Name of the reader, as requested in the configuration
    num_entries : int
        Total number of entries in the files provided
    entry_index : np.ndarray
        List of global indexes to cycle through
    file_paths : List[str]
        List of files to read data from
    file_offsets : np.ndarray
        Offsets between the global index and each individual file start index
    file_index : np.ndarray
        Index of the file each global entry lives in
    """

    name = ""
    num_entries = None
    entry_index = None
    file_paths = None
    file_offsets = None
    file_index = None

    def __len__(self):
        """Returns the number of selected entries in the file(s).

        Returns
        -------
        int
            Number of entries
        """
        return len(self.entry_index)

    def __getitem__(self, idx):
        """Returns a specific entry in the file(s).

        Parameters
        ----------
        idx : int
            Integer entry ID to access

        Returns
        -------
        dict
            One entry-worth of data from the loaded files
        """
        return self.get(idx)

    def __iter__(self):
        """Iterates over the selected entries."""
        for idx in range(len(self)):
            yield self.get(idx)

    def get(self, idx):
        """Placeholder to be defined by the daughter class."""
        raise NotImplementedError

    def process_file_paths(self, file_keys, limit_num_files=None, max_print_files=10):
        """Process list of files.

        Parameters
        ----------
        file_keys : Union[str, List[str]]
            Path or list of paths (glob patterns allowed) to the files to read,
            or path to a `.txt` file which lists them
        limit_num_files : int, optional
            Integer limiting number of files to be loaded
        max_print_files : int, default 10
            Maximum number of loaded file names to be printed
        """
        if file_keys is None:
            raise ValueError("No input `file_keys` provided, abort.")
        if limit_num_files is not None and limit_num_files < 1:
            raise ValueError(
                "If `limit_num_files` is provided, it must be larger than 0."
            )

        # A single text file is a list of file paths, one per line
        if isinstance(file_keys, str) and os.path.splitext(file_keys)[-1] == ".txt":
            if not os.path.isfile(file_keys):
                raise FileNotFoundError(f"File list not found at: {file_keys}")
            with open(file_keys, "r", encoding="utf-8") as f:
                file_keys = [l for l in f.read().splitlines() if l.strip()]

        # Expand the file keys to a list of file paths with glob
        if isinstance(file_keys, str):
            file_keys = [file_keys]
        self.file_paths = []
        for file_key in file_keys:
            file_paths = sorted(glob.glob(file_key))
            if not file_paths:
                raise FileNotFoundError(
                    f"File key {file_key} yielded no compatible path."
                )
            self.file_paths.extend(file_paths)

        self.file_paths = sorted(self.file_paths)
        if limit_num_files is not None:
            self.file_paths = self.file_paths[:limit_num_files]

        # Print out the list of loaded files
        num_files = len(self.file_paths)
        file_list = " - " + "\n - ".join(self.file_paths[:max_print_files])
        file_list += "\n ... \n" if num_files > max_print_files else "\n"
        logger.info("Will load %d file(s):\n%s", num_files, file_list)

    def process_file_entries(self, entries_per_file):
        """Builds the map from global entry index to file.

        Parameters
        ----------
        entries_per_file : List[int]
            Number of entries in each of the files
        """
        counts = np.asarray(entries_per_file, dtype=np.int64)
        self.num_entries = int(np.sum(counts))
        self.file_offsets = np.concatenate([[0], np.cumsum(counts)[:-1]]).astype(
            np.int64
        )
        self.file_index = np.repeat(np.arange(len(counts), dtype=np.int64), counts)

        logger.info("Total number of entries in the file(s): %d", self.num_entries)

    def process_entry_list(
        self, n_entry=None, n_skip=None, entry_list=None, skip_entry_list=None
    ):
        """Create a list of entries that can be accessed by :meth:`__getitem__`.

        Parameters
        ----------
        n_entry : int, optional
            Maximum number of entries to load
        n_skip : int, optional
            Number of entries to skip at the beginning
        entry_list : list, optional
            List of integer entry IDs to add to the index
        skip_entry_list : list, optional
            List of integer entry IDs to skip from the index
        """
        # Make sure the parameters are sensible
        use_range = n_entry is not None or n_skip is not None
        use_list = entry_list is not None or skip_entry_list is not None
        if use_range and use_list:
            raise ValueError(
                "Cannot specify `n_entry` or `n_skip` at the same time "
                "as `entry_list` or `skip_entry_list`."
            )
        if entry_list is not None and skip_entry_list is not None:
            raise ValueError(
                "Cannot specify both `entry_list` and `skip_entry_list`."
            )

        entry_index = np.arange(self.num_entries, dtype=np.int64)
        if use_range:
            n_skip = n_skip or 0
            n_entry = n_entry if n_entry is not None else self.num_entries - n_skip
            if n_skip + n_entry > self.num_entries:
                raise ValueError(
                    f"Mismatch between `n_entry` ({n_entry}), `n_skip` "
                    f"({n_skip}) and the number of entries in the files "
                    f"({self.num_entries})."
                )
            entry_index = entry_index[n_skip : n_skip + n_entry]

        elif entry_list is not None:
            entry_list = self.parse_entry_list(entry_list)
            if np.any(entry_list >= self.num_entries) or np.any(entry_list < 0):
                raise IndexError("Values in `entry_list` outside of bounds.")
            entry_index = entry_index[entry_list]

        elif skip_entry_list is not None:
            skip_entry_list = self.parse_entry_list(skip_entry_list)
            if np.any(skip_entry_list >= self.num_entries):
                raise IndexError("Values in `skip_entry_list` outside of bounds.")
            mask = np.ones(self.num_entries, dtype=bool)
            mask[skip_entry_list] = False
            entry_index = entry_index[mask]

        logger.info("Total number of entries selected: %d\n", len(entry_index))

        self.entry_index = entry_index

    def get_file_index(self, idx):
        """Returns the index of the file corresponding to a specific entry.

        Parameters
        ----------
        idx : int
            Integer entry ID to access

        Returns
        -------
        int
            Index of the file in the file list
        """
        return int(self.file_index[self.entry_index[idx]])

    def get_file_entry_index(self, idx):
        """Returns the index of an entry within the file it lives in,
        provided a global index over the list of files.

        Parameters
        ----------
        idx : int
            Integer entry ID to access

        Returns
        -------
        int
            Index of the entry in the file
        """
        file_idx = self.get_file_index(idx)
        return int(self.entry_index[idx] - self.file_offsets[file_idx])

    @staticmethod
    def parse_entry_list(list_source):
        """Parses a list into an np.ndarray.

        The list can be passed as a simple python list or a path to a file
        which contains space or comma separated numbers (can be on multiple
        lines or not).

        Parameters
        ----------
        list_source : Union[list, str]
            List as a python list or a text file path

        Returns
        -------
        np.ndarray
            List as a numpy array
        """
        if not np.isscalar(list_source):
            return np.asarray(list_source, dtype=np.int64)

        if isinstance(list_source, str):
            if not os.path.isfile(list_source):
                raise FileNotFoundError("The list source file does not exist.")
            with open(list_source, "r", encoding="utf-8") as f:
                words = f.read().replace(",", " ").split()

            return np.array([int(w) for w in words], dtype=np.int64)

        raise ValueError("List format not recognized.")
