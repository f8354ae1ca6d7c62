"""The passes that derive a fork module from the base module.

Every pass takes the module produced by the previous one together with the
pipeline state and returns a new module. Modules and the state are immutable,
so a pass can be run on its own against any fixture.
"""

import logging
from dataclasses import dataclass, replace

from forkgen.adapters.rust import (
    GENERIC_LIST_TYPES,
    GENERIC_REFERENCE_TYPES,
    IDENTIFIER_TYPES,
    Edit,
    append_argument,
    apply_edits,
    node_text,
    parse_declaration,
    parse_tree,
    reference_name,
)
from forkgen.config import GenericRewriteRule, GenSpecConfig, SentinelImport
from forkgen.engine.collector import OverrideSet
from forkgen.exceptions import NoLeadingImports, SentinelCardinalityError
from forkgen.model import Declaration, FunctionDecl, ImportDecl, Module
from forkgen.render import render_statement

logger = logging.getLogger("forkgen.engine.passes")


@dataclass(frozen=True)
class PipelineState:
    overrides: OverrideSet
    expiration_prefix: str
    fork: str
    source_module: str
    sentinel: SentinelImport
    override_import_template: str
    fork_import_template: str
    insertion_point: int
    """Index right after the leading imports of the unmodified base module."""
    generic_rule: GenericRewriteRule | None = None
    """Set only when ``fork`` is the fork the rule is designated for."""

    @classmethod
    def for_module(
        cls,
        base: Module,
        overrides: OverrideSet,
        *,
        fork: str,
        source_module: str,
        config: GenSpecConfig,
    ) -> "PipelineState":
        insertion_point = base.leading_import_count()
        if insertion_point == 0:
            raise NoLeadingImports(source_module)
        rule = config.generic_rule
        return cls(
            overrides=overrides,
            expiration_prefix=config.expiration_prefix,
            fork=fork,
            source_module=source_module,
            sentinel=config.sentinel,
            override_import_template=config.override_import_template,
            fork_import_template=config.fork_import_template,
            insertion_point=insertion_point,
            generic_rule=rule if rule is not None and rule.fork == fork else None,
        )


def _is_superseded(declaration: Declaration, state: PipelineState) -> bool:
    if not isinstance(declaration, FunctionDecl):
        return False
    return declaration.name in state.overrides or declaration.name.startswith(state.expiration_prefix)


def remove_overrides(module: Module, state: PipelineState) -> Module:
    """Drop base functions that are overridden or carry the expiration prefix."""
    kept = tuple(decl for decl in module.declarations if not _is_superseded(decl, state))
    removed = [decl.name for decl in module.declarations if _is_superseded(decl, state)]
    if removed:
        logger.debug(f"{state.fork}/{state.source_module}: removed {', '.join(removed)}")
    return replace(module, declarations=kept)


def _generic_edits(node, source: bytes, rule: GenericRewriteRule, in_generic_list: bool = False) -> list[Edit]:
    edits = []
    if in_generic_list and node.type in IDENTIFIER_TYPES and node_text(source, node) == rule.rename_from:
        edits.append(Edit(node.start_byte, node.end_byte, rule.rename_to))
    if node.type in GENERIC_REFERENCE_TYPES:
        arguments = node.child_by_field_name("type_arguments")
        # Only this reference's own list is extended; nested lists are judged by their own name
        if arguments is not None and rule.trigger in reference_name(node, source):
            edits.append(append_argument(arguments, rule.argument))
    in_generic_list = in_generic_list or node.type in GENERIC_LIST_TYPES
    for child in node.children:
        edits.extend(_generic_edits(child, source, rule, in_generic_list))
    return edits


def fix_generics(module: Module, state: PipelineState) -> Module:
    """Extend triggering generic argument lists and rename the bound identifier.

    A no-op unless the state carries a generic rule, i.e. unless the target
    fork is the one the rule is designated for.
    """
    rule = state.generic_rule
    if rule is None:
        return module
    label = f"{state.fork}/{state.source_module}"
    declarations = []
    for decl in module.declarations:
        tree, source = parse_tree(decl.code, label)
        edits = _generic_edits(tree.root_node, source, rule)
        if edits:
            logger.debug(f"{label}: {len(edits)} generic edits in {getattr(decl, 'name', decl.code.split()[0])}")
            decl = parse_declaration(apply_edits(decl.code, edits), trivia=decl.trivia, label=label)
        declarations.append(decl)
    return replace(module, declarations=tuple(declarations))


def import_overrides(module: Module, state: PipelineState) -> Module:
    """Re-export every override from the fork's override module after the leading imports."""
    if not state.overrides:
        return module
    label = f"{state.fork}/{state.source_module}"
    imports = tuple(
        parse_declaration(
            render_statement(
                state.override_import_template,
                fork=state.fork,
                source_module=state.source_module,
                name=name,
            ),
            trivia="\n",
            label=label,
        )
        for name in state.overrides
    )
    logger.debug(f"{label}: inserting {len(imports)} override imports at {state.insertion_point}")
    position = state.insertion_point
    declarations = module.declarations[:position] + imports + module.declarations[position:]
    return replace(module, declarations=declarations)


def _is_sentinel(declaration: Declaration, sentinel: SentinelImport) -> bool:
    return (
        isinstance(declaration, ImportDecl)
        and not declaration.visibility
        and declaration.path == sentinel.path
        and declaration.alias == sentinel.alias
    )


def finalize(module: Module, state: PipelineState) -> Module:
    """Point the sentinel import at the fork module, keeping its alias.

    Raises SentinelCardinalityError unless the sentinel occurs exactly once.
    """
    positions = [i for i, decl in enumerate(module.declarations) if _is_sentinel(decl, state.sentinel)]
    if len(positions) != 1:
        raise SentinelCardinalityError(str(state.sentinel), len(positions))
    [position] = positions
    replacement = parse_declaration(
        render_statement(state.fork_import_template, fork=state.fork, alias=state.sentinel.alias),
        trivia=module.declarations[position].trivia,
        label=f"{state.fork}/{state.source_module}",
    )
    declarations = list(module.declarations)
    declarations[position] = replacement
    return replace(module, declarations=tuple(declarations))
