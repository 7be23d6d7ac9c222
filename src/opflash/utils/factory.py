"""Contains functions needed to instantiate a class from a dictionary.

This allows to generically convert a YAML block into an instantiated class
(pulse reconstruction algorithm, reader, writer) with all the appropriate
checks that the class exists and is provided with appropriate arguments.
"""

from copy import deepcopy

from .logger import logger

__all__ = ["module_dict", "instantiate"]


def module_dict(module):
    """Converts module into a dictionary which maps class names onto classes.

    Each class is registered under its Python name and, if it defines a
    non-empty `name` class attribute, under that configuration name too.

    Parameters
    ----------
    module : module
        Module from which to fetch the classes

    Returns
    -------
    dict
        Dictionary which maps acceptable class names to classes themselves
    """
    classes = {}
    for cls_name in getattr(module, "__all__", dir(module)):
        # Skip private objects
        if cls_name[0] == "_":
            continue

        # Only consider classes which belong to the module of interest
        cls = getattr(module, cls_name)
        if not isinstance(cls, type) or module.__name__ not in cls.__module__:
            continue

        classes[cls_name] = cls
        if getattr(cls, "name", ""):
            classes[cls.name] = cls

    return classes


def instantiate(classes, cfg, **kwargs):
    """Instantiates a class based on a configuration dictionary.

    The configuration is expected to look like:

    .. code-block:: yaml

        reader:
          name: hit_csv
          kwarg_1: value_1
          kwarg_2: value_2

    A plain string is interpreted as a class name with no parameters.

    Parameters
    ----------
    classes : dict
        Dictionary which maps a class name onto an object class
    cfg : Union[str, dict]
        Configuration dictionary
    **kwargs : dict, optional
        Additional parameters to pass to the class constructor

    Returns
    -------
    object
        Instantiated object
    """
    if isinstance(cfg, str):
        cfg = {"name": cfg}

    # Get the name of the class, check that it exists
    config = deepcopy(cfg)
    if "name" not in config:
        raise KeyError("Could not find the name of the class under `name`.")

    class_name = config.pop("name")
    if class_name not in classes:
        raise ValueError(
            f"Could not find '{class_name}' in the dictionary which maps "
            f"names to classes. Available names: {list(classes.keys())}"
        )

    # Top-level keys and explicit keyword arguments must not collide
    for key in config:
        if key in kwargs:
            raise ValueError(
                f"The keyword argument {key} is provided both in the "
                "configuration and by the caller. Ambiguous."
            )
    kwargs.update(config)

    cls = classes[class_name]
    try:
        return cls(**kwargs)

    except Exception as err:
        logger.error(
            "Failed to instantiate %s with these arguments:\n  - kwargs: %s",
            cls.__name__,
            kwargs,
        )

        raise err
