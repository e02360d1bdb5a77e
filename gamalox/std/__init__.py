import time
from typing import Any, List

from gamalox.builtin_function import BuiltinFunction
from gamalox.environment import Environment


def populate_global_environment(env: Environment) -> Environment:
    """Define the native functions every program starts with."""

    def std_clock(args: List[Any]) -> Any:
        return time.time()

    env.define('clock', BuiltinFunction('clock', 0, std_clock))
    return env
