from forkgen.engine.collector import OverrideSet, collect_overrides
from forkgen.engine.passes import PipelineState, finalize, fix_generics, import_overrides, remove_overrides
from forkgen.engine.pipeline import PASSES, SIMPLE_PASSES, assemble, run_passes

__all__ = [
    "OverrideSet",
    "collect_overrides",
    "PipelineState",
    "remove_overrides",
    "fix_generics",
    "import_overrides",
    "finalize",
    "PASSES",
    "SIMPLE_PASSES",
    "assemble",
    "run_passes",
]
