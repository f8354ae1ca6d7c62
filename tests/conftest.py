"""Shared Rust fixtures for the forkgen tests."""

from pathlib import Path

import pytest

from forkgen.config import GenSpecConfig, get_config

BANNER = "// WARNING: This file was derived by the `gen-spec` utility. DO NOT EDIT MANUALLY."

BASE_SOURCE = """//! Helpers shared by every fork.
use crate::phase0 as spec;
use crate::primitives::{Epoch, Gwei};

pub const MAX_EFFECTIVE_BALANCE: u64 = 32;

/// Sum of effective balances.
pub fn get_total_balance(indices: &[u64]) -> Gwei {
    indices.iter().sum()
}

pub fn get_matching_source_attestations(epoch: Epoch) -> Vec<u8> {
    Vec::new()
}

pub fn is_valid_block<const A: usize, const B: usize, const C: usize>(
    block: &spec::BeaconBlock<A, B, C>,
) -> bool {
    true
}

pub type Attestations<const PENDING_ATTESTATIONS_BOUND: usize> = List<u8, PENDING_ATTESTATIONS_BOUND>;

pub fn get_current_epoch(slot: u64) -> Epoch {
    slot / 32
}
"""

OVERRIDE_SOURCE = """use crate::altair as spec;

pub fn get_total_balance(indices: &[u64]) -> u64 {
    fn nested_helper() -> u64 {
        0
    }
    nested_helper()
}

pub const EXTRA_CONSTANT: u64 = 1;

pub fn get_base_reward(index: usize) -> u64 {
    index as u64
}

impl Participation {
    pub fn get_flags(&self) -> u8 {
        0
    }
}
"""

MINIMAL_BASE_SOURCE = """use crate::phase0 as spec;

pub fn process(state: &mut spec::BeaconState) {}
"""


@pytest.fixture
def config() -> GenSpecConfig:
    return get_config()


@pytest.fixture
def source_root(tmp_path: Path, config: GenSpecConfig) -> Path:
    """A source tree with every base module and one altair override module."""
    root = tmp_path / "src"
    (root / config.base_fork).mkdir(parents=True)
    for fork in config.forks:
        (root / fork).mkdir()
    for source_module in config.source_modules:
        source = BASE_SOURCE if source_module == "helpers" else MINIMAL_BASE_SOURCE
        (root / config.base_fork / f"{source_module}.rs").write_text(source)
    (root / "altair" / "helpers_altair.rs").write_text(OVERRIDE_SOURCE)
    return root


@pytest.fixture
def base_source() -> str:
    return BASE_SOURCE


@pytest.fixture
def override_source() -> str:
    return OVERRIDE_SOURCE


@pytest.fixture
def minimal_base_source() -> str:
    return MINIMAL_BASE_SOURCE


@pytest.fixture
def banner() -> str:
    return BANNER
