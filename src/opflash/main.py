"""Main functions that call the Driver class.

This is the first module called when launching the `opflash` command. It
takes care of setting up the environment and the `Driver` object used to
find flashes in the input files and store them.
"""

from .driver import Driver
from .utils.logger import logger


def run(cfg):
    """Find the flashes in every requested entry.

    Parameters
    ----------
    cfg : dict
        Full driver configuration
    """
    driver = Driver(cfg)
    driver.run()

    logger.info("Processed %d entries.", len(driver))
