"""Loading of the modules a program declares under `modules`.

A module is evaluated at most once per program run, on first import, in its
own environment whose parent frame holds the same builtins as the program.
Its top-level function and `let` bindings, and nothing else, become its
exports; macro definitions are expanded within the module and are not
importable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from jexl import EvaluatorFn
from jexl.builtin.env_builtin import register
from jexl.types.environment import Environment
from jexl.types.errors import UnknownModule, UnknownSymbol, UnsupportedOperation
from jexl.types.macro_environment import MacroEnvironment

logger = logging.getLogger(__name__)


@dataclass
class LoadedModule:
    name: str
    env: Environment
    macros: set[str] = field(default_factory=set)

    def bind_export(self, symbol: str, target: Environment) -> None:
        """Bind export `symbol` into the current frame of `target`."""
        if symbol in self.env.functions:
            target.define_function(symbol, self.env.functions[symbol])
        elif symbol in self.env.vars:
            target.set_var(symbol, self.env.vars[symbol])
        elif symbol in self.macros:
            raise UnsupportedOperation(f"Cannot import macro '{symbol}' from module '{self.name}'")
        else:
            raise UnknownSymbol(self.name, symbol)


def module_environment(root: Environment) -> Environment:
    """Create the top-level frame of a module.

    Builtins and the program's module registries live in a fresh root frame
    above it, so the module frame only ever holds the module's own bindings.
    """
    base = Environment(max_call_depth=root.max_call_depth)
    register(base, root.builtins)
    base.modules = root.modules
    base.loaded_modules = root.loaded_modules
    base.loading_modules = root.loading_modules
    return base.child()


def load_module(env: Environment, name: str, evaluate_fn: EvaluatorFn) -> LoadedModule:
    root = env.root()
    loaded = root.loaded_modules.get(name)
    if loaded is not None:
        return loaded

    declaration = root.get_module_declaration(name)
    if declaration is None:
        raise UnknownModule(name)
    if name in root.loading_modules:
        raise UnsupportedOperation(f"Circular import of module '{name}'")

    logger.debug("Loading module %s (%d exports)", name, len(declaration.exports))
    module_env = module_environment(root)
    macros = MacroEnvironment()
    exports = macros.expand_all(macros.collect(declaration.exports))

    root.loading_modules.add(name)
    try:
        for expr in exports:
            evaluate_fn(expr, module_env)
    finally:
        root.loading_modules.discard(name)

    loaded = LoadedModule(name, module_env, set(macros.macros))
    root.loaded_modules[name] = loaded
    return loaded
