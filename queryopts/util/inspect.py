import inspect
from functools import lru_cache
from typing import Callable, Mapping, Tuple


@lru_cache(100)
def get_function_defaults(for_func: Callable) -> dict:
    """ Get a dict of function's arguments that have default values """
    # Analyze the method
    signature = inspect.signature(for_func)

    # Only process those that have defaults
    return {name: param.default
            for name, param in signature.parameters.items()
            if param.default is not inspect.Parameter.empty
            and param.kind in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)}


def pluck_kwargs_from(dct: Mapping, for_func: Callable, skip: Tuple[str] = ()) -> dict:
    """ Analyze a function, pluck the arguments it needs from a dict """
    defaults = get_function_defaults(for_func)

    # Get the values for these kwargs
    kwargs = {k: dct.get(k, defaults[k])
              for k in defaults.keys()
              if k not in skip}

    # Done
    return kwargs
