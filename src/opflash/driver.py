"""Contains the flash finder driver class.

The driver is the only object which reads the full configuration. It builds
the geometry, clock, pulse reconstruction, flash finder, reader and writer,
then loops over the entries of the input files.
"""

import time

import yaml

from .clock import OpticalClock
from .config import validate_config
from .flash import FlashFinder
from .geo import geo_factory
from .io import reader_factory, writer_factory
from .reco import pulse_reco_factory
from .utils.logger import logger
from .version import __version__

__all__ = ["Driver"]


class Driver:
    """Central flash finder driver.

    Processes global configuration and runs the appropriate modules:
      1. Load the optical data products of an entry (waveforms or hits)
      2. Run the flash finder frame by frame
      3. Store one row per flash to the output file

    Typical configuration should look like:

    .. code-block:: yaml

        base:
          <Base driver configuration>
        geo:
          <Optical geometry>
        clock:
          <Optical clock>
        reco:
          <Pulse reconstruction algorithm>
        flash:
          <Flash finder parameters>
        io:
          <Input/output configuration>
    """

    def __init__(self, cfg):
        """Initializes the class attributes.

        Parameters
        ----------
        cfg : dict
            Global configuration dictionary
        """
        # Process the full configuration dictionary and store it
        base, io, geo, clock, reco, flash = self.process_config(**cfg)

        # Initialize the base driver configuration parameters
        self.initialize_base(**base)

        # Initialize the detector description
        self.geometry = geo_factory(**geo, parent_path=self.parent_path)
        self.clock = OpticalClock(**clock)

        # Initialize the flash finder
        pulse_reco = pulse_reco_factory(reco) if reco is not None else None
        self.finder = FlashFinder(
            self.geometry, self.clock, pulse_reco=pulse_reco, **flash
        )

        # Initialize the input/output
        self.initialize_io(**io)

    def process_config(
        self, io=None, geo=None, base=None, clock=None, reco=None, flash=None
    ):
        """Reads the configuration and dumps it to the logger.

        Parameters
        ----------
        io : dict, optional
            I/O configuration dictionary (required)
        geo : dict, optional
            Geometry configuration dictionary (required)
        base : dict, optional
            Base driver configuration dictionary
        clock : dict, optional
            Optical clock configuration dictionary
        reco : dict, optional
            Pulse reconstruction configuration dictionary
        flash : dict, optional
            Flash finder configuration dictionary

        Returns
        -------
        dict
            Processed configuration
        """
        # Give empty blocks to the components which use their defaults
        base = base or {}
        clock = clock or {}
        flash = flash or {}

        # Set the verbosity of the logger
        verbosity = base.get("verbosity", "info")
        logger.setLevel(verbosity.upper())

        # Rebuild the global configuration dictionary, check it
        self.cfg = {"base": base, "geo": geo, "clock": clock, "flash": flash}
        if reco is not None:
            self.cfg["reco"] = reco
        self.cfg["io"] = io
        validate_config(self.cfg)

        # Log the release and the configuration
        logger.info("Release version: %s\n", __version__)
        logger.info(yaml.dump(self.cfg, default_flow_style=None, sort_keys=False))

        return base, io, geo, clock, reco, flash

    def initialize_base(
        self, verbosity="info", parent_path=None, iterations=None, log_step=1
    ):
        """Initialize the basic driver parameters.

        Parameters
        ----------
        verbosity : str, default 'info'
            Verbosity level of the logger (already applied)
        parent_path : str, optional
            Path to the parent directory of the main configuration file,
            used to resolve relative geometry paths
        iterations : int, optional
            Number of entries to process. If not specified (or -1), process
            every entry selected by the reader.
        log_step : int, default 1
            Number of entries between two progress messages
        """
        self.parent_path = parent_path
        self.iterations = iterations
        self.log_step = log_step

    def initialize_io(self, reader, writer=None, hit_writer=None):
        """Initializes the input reader and the output writers.

        Parameters
        ----------
        reader : dict
            Input reader configuration
        writer : dict, optional
            Flash writer configuration
        hit_writer : dict, optional
            Hit writer configuration. The `hit_ids` of each stored flash
            refer to the `id` column of this table.
        """
        self.reader = reader_factory(reader)

        self.writer = None
        if writer is not None:
            self.writer = writer_factory(writer)

        self.hit_writer = None
        if hit_writer is not None:
            self.hit_writer = writer_factory(hit_writer)

        # Resolve the number of entries to process
        if self.iterations is None or self.iterations < 0:
            self.iterations = len(self.reader)
        elif self.iterations > len(self.reader):
            raise ValueError(
                f"Requested {self.iterations} iterations, but only "
                f"{len(self.reader)} entries are available."
            )

    def __len__(self):
        """Returns the number of entries to process.

        Returns
        -------
        int
            Number of entries
        """
        return self.iterations

    def run(self):
        """Loop over the requested number of entries and process them."""
        for iteration in range(self.iterations):
            self.process(iteration)

    def process(self, iteration):
        """Process one entry.

        Parameters
        ----------
        iteration : int
            Index of the entry in the reader

        Returns
        -------
        dict
            Input data of the entry, along with the `result` of the finder
        """
        start = time.time()

        # Load the input, run the flash finder on it
        data = self.reader[iteration]
        if "waveforms" in data:
            result = self.finder.run(data["waveforms"])
        else:
            result = self.finder.run_hits(data["hits"])
        data["result"] = result

        # Store the flashes and the hits they point to
        if self.writer is not None:
            self.writer.write(self.flash_rows(data["entry"], result))
        if self.hit_writer is not None:
            self.hit_writer.write(self.hit_rows(data["entry"], result))

        if iteration % self.log_step == 0:
            logger.info(
                "Entry %d: %d hit(s), %d flash(es) (%.3f s)",
                data["entry"],
                len(result.hits),
                len(result.flashes),
                time.time() - start,
            )

        return data

    def flash_rows(self, entry, result):
        """Converts the flashes of one entry to rows of scalars.

        Parameters
        ----------
        entry : int
            Entry number
        result : FlashFinderResult
            Output of the flash finder for this entry

        Returns
        -------
        List[dict]
            One dictionary of scalars per flash
        """
        lengths = {
            "pe_per_ch": self.geometry.num_channels,
            "wire_centers": self.geometry.num_planes,
            "wire_widths": self.geometry.num_planes,
        }

        rows = []
        for flash, hit_ids in zip(result.flashes, result.assoc):
            row = {"entry": entry, "num_hits": len(hit_ids)}
            row.update(flash.scalar_dict(lengths=lengths))
            row["hit_ids"] = " ".join(str(i) for i in hit_ids)
            rows.append(row)

        return rows

    @staticmethod
    def hit_rows(entry, result):
        """Converts the hits of one entry to rows of scalars.

        Parameters
        ----------
        entry : int
            Entry number
        result : FlashFinderResult
            Output of the flash finder for this entry

        Returns
        -------
        List[dict]
            One dictionary of scalars per hit
        """
        rows = []
        for hit in result.hits:
            row = {"entry": entry}
            row.update(hit.scalar_dict())
            rows.append(row)

        return rows
