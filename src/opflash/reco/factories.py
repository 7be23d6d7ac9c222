"""Functions that instantiate pulse reconstruction algorithms from configuration."""

from opflash.utils.factory import instantiate, module_dict

from . import threshold

RECO_DICT = module_dict(threshold)

__all__ = ["pulse_reco_factory"]


def pulse_reco_factory(reco_cfg):
    """Instantiates a pulse reconstruction algorithm from its configuration.

    Parameters
    ----------
    reco_cfg : Union[str, dict]
        Pulse reconstruction configuration (the `name` selects the algorithm)

    Returns
    -------
    PulseRecoBase
        Pulse reconstruction algorithm
    """
    return instantiate(RECO_DICT, reco_cfg)
