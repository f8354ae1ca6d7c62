import logging

from forkgen.adapters.rust import parse_module

logger = logging.getLogger("forkgen.engine.collector")

OverrideSet = tuple[str, ...]


def collect_overrides(override_source: str | None, label: str = "<override>") -> OverrideSet:
    """Names of the top-level functions an override module defines, in source order.

    Imports, constants, impl blocks and anything nested inside a declaration
    are ignored. No override module means no overrides.
    """
    if override_source is None:
        return ()
    module = parse_module(override_source, label)
    names = tuple(dict.fromkeys(function.name for function in module.functions()))
    logger.debug(f"Collected {len(names)} overrides from {label}: {', '.join(names)}")
    return names
