"""Derive fork-specific spec modules from a shared base module."""

__version__ = "0.1.0"

from forkgen.engine.pipeline import assemble
from forkgen.exceptions import GenSpecError
from forkgen.model import FunctionDecl, ImportDecl, Module, Opaque

__all__ = ["assemble", "GenSpecError", "FunctionDecl", "ImportDecl", "Module", "Opaque"]
