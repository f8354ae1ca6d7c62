from forkgen.adapters.rust import parse_declaration, parse_module, render_module

__all__ = ["parse_declaration", "parse_module", "render_module"]
