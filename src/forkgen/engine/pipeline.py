"""Composition of the collector and the passes into one derivation."""

import logging
from collections.abc import Callable, Sequence

from forkgen.adapters.rust import parse_module
from forkgen.config import GenSpecConfig
from forkgen.engine.collector import collect_overrides
from forkgen.engine.passes import PipelineState, finalize, fix_generics, import_overrides, remove_overrides
from forkgen.model import Module

logger = logging.getLogger("forkgen.engine.pipeline")

Pass = Callable[[Module, PipelineState], Module]

# Order matters: imports are spliced into the tree the generic fix produced,
# and the sentinel is replaced last.
PASSES: tuple[Pass, ...] = (remove_overrides, fix_generics, import_overrides, finalize)
SIMPLE_PASSES: tuple[Pass, ...] = (remove_overrides, import_overrides, finalize)


def run_passes(base: Module, state: PipelineState, passes: Sequence[Pass] = PASSES) -> Module:
    module = base
    for pass_ in passes:
        module = pass_(module, state)
    return module


def assemble(
    base_source: str,
    override_source: str | None,
    *,
    fork: str,
    source_module: str,
    config: GenSpecConfig,
    base_label: str = "<base>",
    override_label: str = "<override>",
) -> Module:
    """Derive the ``fork`` version of ``source_module`` from its base source."""
    overrides = collect_overrides(override_source, override_label)
    base = parse_module(base_source, base_label)
    state = PipelineState.for_module(base, overrides, fork=fork, source_module=source_module, config=config)
    passes = PASSES if config.generic_rule is not None else SIMPLE_PASSES
    return run_passes(base, state, passes)
