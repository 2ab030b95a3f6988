from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Type, TypeVar

from .params import ParameterSource, RunParams

_MODELS: Dict[str, type] = {}

T = TypeVar("T", bound=type)


def register_model(name: str) -> Callable[[T], T]:
    def decorator(cls: T) -> T:
        if name in _MODELS and _MODELS[name] is not cls:
            raise ValueError(f"Model '{name}' is already registered")
        _MODELS[name] = cls
        return cls

    return decorator


def available_models() -> List[str]:
    return sorted(_MODELS)


def model_class(name: str) -> Type:
    try:
        return _MODELS[name]
    except KeyError:
        raise KeyError(f"Unknown model '{name}'; available: {', '.join(available_models())}") from None


def build_model(
    name: str,
    source: ParameterSource | Mapping[str, Any],
    run: RunParams | None = None,
):
    return model_class(name)(source, run)
