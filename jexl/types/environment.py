"""Runtime environment for JEXL.

The Environment stores variable bindings and function definitions in two
independent namespaces and supports nested scopes via an `outer` link. The
root frame additionally carries the builtin registry and the module registry
used by `import`.
"""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING, Callable, Mapping, Optional, Union

from jexl import JexlValue
from jexl.types.errors import UnboundFunction, UnboundVariable

if TYPE_CHECKING:
    from jexl.types.expression import Module
    from jexl.modules.module_loader import LoadedModule
    from jexl.types.function import UserFunction

BuiltinFn = Callable[["Environment", list], JexlValue]
FunctionValue = Union[BuiltinFn, "UserFunction"]


class Environment:
    """Hierarchical scope frame with separate variable and function namespaces."""

    __slots__ = (
        "vars",
        "functions",
        "outer",
        "depth",
        "max_call_depth",
        "builtins",
        "modules",
        "loaded_modules",
        "loading_modules",
    )

    def __init__(
        self,
        outer: Optional[Environment] = None,
        *,
        depth: int | None = None,
        max_call_depth: int | None = None,
    ):
        self.vars: dict[str, JexlValue] = {}
        self.functions: dict[str, FunctionValue] = {}
        self.outer: Environment | None = outer
        # Number of user-function activations this frame is nested in
        if depth is None:
            depth = outer.depth if outer is not None else 0
        self.depth: int = depth
        if max_call_depth is None and outer is not None:
            max_call_depth = outer.max_call_depth
        self.max_call_depth: int | None = max_call_depth
        # Only meaningful on a root frame
        self.builtins: Mapping[str, BuiltinFn] = {}
        self.modules: dict[str, Module] = {}
        self.loaded_modules: dict[str, LoadedModule] = {}
        self.loading_modules: set[str] = set()

    def child(self, depth: int | None = None) -> Environment:
        """Create a new frame whose parent is this one."""
        return Environment(self, depth=depth)

    def root(self) -> Environment:
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    # --- variables ---
    def get_var(self, name: str) -> JexlValue:
        env: Environment | None = self
        while env is not None:
            if name in env.vars:
                return env.vars[name]
            env = env.outer
        raise UnboundVariable(name)

    def set_var(self, name: str, value: JexlValue) -> None:
        """Bind `name` in the current frame, shadowing any outer binding."""
        self.vars[name] = value

    def has_var(self, name: str) -> bool:
        env: Environment | None = self
        while env is not None:
            if name in env.vars:
                return True
            env = env.outer
        return False

    # --- functions ---
    def get_function(self, name: str) -> FunctionValue:
        env: Environment | None = self
        while env is not None:
            if name in env.functions:
                return env.functions[name]
            env = env.outer
        raise UnboundFunction(name)

    def define_function(self, name: str, fn: FunctionValue) -> None:
        self.functions[name] = fn

    def has_function(self, name: str) -> bool:
        env: Environment | None = self
        while env is not None:
            if name in env.functions:
                return True
            env = env.outer
        return False

    def update(self, mapping: Mapping[str, FunctionValue]) -> None:
        """Bulk-define functions in the current frame."""
        for k, v in mapping.items():
            self.functions[k] = v

    # --- modules (root frame) ---
    def declare_module(self, module: Module) -> None:
        self.root().modules[module.name] = module

    def get_module_declaration(self, name: str) -> Module | None:
        return self.root().modules.get(name)

    def _write_frame(self, buffer: StringIO) -> None:
        """Write this frame's bindings into the buffer in a compact form."""
        buffer.write("{")
        first = True
        for k, v in self.vars.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{k}: {v!r}")
            first = False
        for k in self.functions:
            if not first:
                buffer.write(", ")
            buffer.write(f"{k}()")
            first = False
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_frame(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Detailed chain representation for debugging purposes."""
        with StringIO() as buffer:
            buffer.write("<Environment chain: ")
            env = self
            chain = []
            while env is not None:
                env_buf = StringIO()
                env._write_frame(env_buf)
                chain.append(env_buf.getvalue())
                env = env.outer
            buffer.write(" -> ".join(chain))
            buffer.write(">")
            return buffer.getvalue()
