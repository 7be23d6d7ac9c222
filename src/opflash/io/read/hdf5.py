"""Contains a reader class dedicated to loading optical waveforms from HDF5 files."""

import h5py
import numpy as np

from opflash.data import Waveform

from .base import ReaderBase

__all__ = ["WaveformHDF5Reader"]


class WaveformHDF5Reader(ReaderBase):
    """Class which reads raw optical waveforms stored in HDF5 files.

    The files must contain the following datasets, with one row per waveform:
      - `entry`: entry the waveform belongs to
      - `channel`: device channel number
      - `time_slice`: tick at which the waveform starts within its frame
      - `frame`: frame number
      - `adcs`: (N, S) ADC samples, kept in the integer type of the dataset

    Typical configuration should look like:

    .. code-block:: yaml

        io:
          reader:
            name: waveform_hdf5
            file_keys: waveforms.h5
    """

    name = "waveform_hdf5"

    # Datasets which must appear in the input files
    required_keys = ("entry", "channel", "time_slice", "frame", "adcs")

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
        """Initalize the HDF5 waveform reader.

        Parameters
        ----------
        file_keys : Union[str, List[str]]
            Path or list of paths to the HDF5 files to be read
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

        # Only load the entry column of each file, the rest is read lazily
        self.entry_rows = []
        self.entries = []
        for path in self.file_paths:
            with h5py.File(path, "r") as in_file:
                for key in self.required_keys:
                    if key not in in_file:
                        raise KeyError(
                            f"The waveform file {path} does not contain "
                            f"a `{key}` dataset."
                        )
                rows = in_file["entry"][:]

            self.entry_rows.append(rows)
            self.entries.append(np.unique(rows))

        self.process_file_entries([len(e) for e in self.entries])

        # Process the entry list
        self.process_entry_list(n_entry, n_skip, entry_list, skip_entry_list)

    def get(self, idx):
        """Returns the waveforms of a specific entry.

        Parameters
        ----------
        idx : int
            Integer entry ID to access

        Returns
        -------
        dict
            Dictionary with the `entry` number, the `file_index` and the
            list of `waveforms` of the entry
        """
        file_idx = self.get_file_index(idx)
        entry = self.entries[file_idx][self.get_file_entry_index(idx)]
        index = np.where(self.entry_rows[file_idx] == entry)[0]

        with h5py.File(self.file_paths[file_idx], "r") as in_file:
            channels = in_file["channel"][index]
            time_slices = in_file["time_slice"][index]
            frames = in_file["frame"][index]
            adcs = in_file["adcs"][index]

        waveforms = [
            Waveform(
                channel=int(channels[i]),
                time_slice=int(time_slices[i]),
                frame=int(frames[i]),
                adcs=np.asarray(adcs[i]),
            )
            for i in range(len(index))
        ]

        return {"entry": int(entry), "file_index": file_idx, "waveforms": waveforms}
