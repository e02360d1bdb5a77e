from dataclasses import dataclass
from typing import Any, Callable, List

from gamalox.types import LoxCallable


@dataclass(eq=False)
class BuiltinFunction(LoxCallable):
    name: str
    param_count: int
    fn: Callable[[List[Any]], Any]

    def arity(self) -> int:
        return self.param_count

    def call(self, interpreter, arguments: List[Any]) -> Any:
        return self.fn(arguments)

    def __str__(self) -> str:
        return '<native fn>'

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
