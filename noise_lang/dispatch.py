"""Method dispatch: one operation per (kind, method) pair of the schema table."""

import logging
import math
from typing import Any, Callable, Dict, List

from .exceptions import CyclicReference, InvalidParameter
from .models import ArgType, MethodCall
from .modules import Module, ModuleError
from .registry import ModuleNode, StagedGraph
from .schema import ModuleKind, validate_call

logger = logging.getLogger(__name__)

Operation = Callable[..., None]

_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1


def _as_int(value: float) -> int:
    if not _INT_MIN <= value <= _INT_MAX:
        raise ModuleError(f"{value:g} does not fit an integer parameter")
    return int(value)


def _set_source(m: Module, index: float, source: Module) -> None:
    m.set_source_module(_as_int(index), source)


_SOURCE_OPS: Dict[str, Operation] = {"SetSourceModule": _set_source}

_FRACTAL_OPS: Dict[str, Operation] = {
    "SetFrequency": lambda m, v: m.set_frequency(v),
    "SetLacunarity": lambda m, v: m.set_lacunarity(v),
    "SetNoiseQuality": lambda m, v: m.set_noise_quality(_as_int(v)),
    "SetOctaveCount": lambda m, v: m.set_octave_count(_as_int(v)),
    "SetPersistence": lambda m, v: m.set_persistence(v),
    "SetSeed": lambda m, v: m.set_seed(_as_int(v)),
}

_FREQUENCY_OPS: Dict[str, Operation] = {
    "SetFrequency": lambda m, v: m.set_frequency(v),
}

_CONTROL_OPS: Dict[str, Operation] = {
    "SetControlModule": lambda m, control: m.set_control_module(control),
}

OPERATIONS: Dict[ModuleKind, Dict[str, Operation]] = {
    ModuleKind.ABS: {**_SOURCE_OPS},
    ModuleKind.ADD: {**_SOURCE_OPS},
    ModuleKind.BILLOW: {**_FRACTAL_OPS},
    ModuleKind.BLEND: {**_SOURCE_OPS, **_CONTROL_OPS},
    ModuleKind.CACHE: {**_SOURCE_OPS},
    ModuleKind.CHECKERBOARD: {},
    ModuleKind.CLAMP: {
        **_SOURCE_OPS,
        "SetBounds": lambda m, lower, upper: m.set_bounds(lower, upper),
    },
    ModuleKind.CONST: {
        "SetConstValue": lambda m, v: m.set_const_value(v),
    },
    ModuleKind.CURVE: {
        **_SOURCE_OPS,
        "AddControlPoint": lambda m, i, o: m.add_control_point(i, o),
        "ClearAllControlPoints": lambda m: m.clear_all_control_points(),
    },
    ModuleKind.CYLINDERS: {**_FREQUENCY_OPS},
    ModuleKind.DISPLACE: {
        **_SOURCE_OPS,
        "SetDisplaceModules": lambda m, x, y, z: m.set_displace_modules(x, y, z),
        "SetXDisplaceModule": lambda m, x: m.set_x_displace_module(x),
        "SetYDisplaceModule": lambda m, y: m.set_y_displace_module(y),
        "SetZDisplaceModule": lambda m, z: m.set_z_displace_module(z),
    },
    ModuleKind.EXPONENT: {
        **_SOURCE_OPS,
        "SetExponent": lambda m, v: m.set_exponent(v),
    },
    ModuleKind.INVERT: {**_SOURCE_OPS},
    ModuleKind.MAX: {**_SOURCE_OPS},
    ModuleKind.MIN: {**_SOURCE_OPS},
    ModuleKind.MULTIPLY: {**_SOURCE_OPS},
    ModuleKind.PERLIN: {**_FRACTAL_OPS},
    ModuleKind.POWER: {**_SOURCE_OPS},
    ModuleKind.RIDGEDMULTI: {
        name: op for name, op in _FRACTAL_OPS.items() if name != "SetPersistence"
    },
    ModuleKind.ROTATEPOINT: {
        **_SOURCE_OPS,
        "SetAngles": lambda m, x, y, z: m.set_angles(x, y, z),
        "SetXAngle": lambda m, v: m.set_x_angle(v),
        "SetYAngle": lambda m, v: m.set_y_angle(v),
        "SetZAngle": lambda m, v: m.set_z_angle(v),
    },
    ModuleKind.SCALEBIAS: {
        **_SOURCE_OPS,
        "SetBias": lambda m, v: m.set_bias(v),
        "SetScale": lambda m, v: m.set_scale(v),
    },
    ModuleKind.SCALEPOINT: {
        **_SOURCE_OPS,
        "SetScale": lambda m, x, y, z: m.set_scale(x, y, z),
        "SetXScale": lambda m, v: m.set_x_scale(v),
        "SetYScale": lambda m, v: m.set_y_scale(v),
        "SetZScale": lambda m, v: m.set_z_scale(v),
    },
    ModuleKind.SELECT: {
        **_SOURCE_OPS,
        **_CONTROL_OPS,
        "SetBounds": lambda m, lower, upper: m.set_bounds(lower, upper),
        "SetEdgeFalloff": lambda m, v: m.set_edge_falloff(v),
    },
    ModuleKind.SPHERES: {**_FREQUENCY_OPS},
    ModuleKind.TERRACE: {
        **_SOURCE_OPS,
        "InvertTerraces": lambda m: m.invert_terraces(not m.is_terraces_inverted()),
        "MakeControlPoints": lambda m, n: m.make_control_points(_as_int(n)),
        "AddControlPoint": lambda m, v: m.add_control_point(v),
        "ClearAllControlPoints": lambda m: m.clear_all_control_points(),
    },
    ModuleKind.TRANSLATEPOINT: {
        **_SOURCE_OPS,
        "SetTranslation": lambda m, x, y, z: m.set_translation(x, y, z),
        "SetXTranslation": lambda m, v: m.set_x_translation(v),
        "SetYTranslation": lambda m, v: m.set_y_translation(v),
        "SetZTranslation": lambda m, v: m.set_z_translation(v),
    },
    ModuleKind.TURBULENCE: {
        **_SOURCE_OPS,
        "SetFrequency": lambda m, v: m.set_frequency(v),
        "SetPower": lambda m, v: m.set_power(v),
        "SetRoughness": lambda m, v: m.set_roughness(_as_int(v)),
        "SetSeed": lambda m, v: m.set_seed(_as_int(v)),
    },
    ModuleKind.VORONOI: {
        "EnableDistance": lambda m: m.enable_distance(True),
        "DisableDistance": lambda m: m.enable_distance(False),
        "SetFrequency": lambda m, v: m.set_frequency(v),
        "SetDisplacement": lambda m, v: m.set_displacement(v),
        "SetSeed": lambda m, v: m.set_seed(_as_int(v)),
    },
}


def dispatch(graph: StagedGraph, statement: MethodCall) -> ModuleNode:
    """Apply a method call to its target node inside a staged graph."""
    node = graph.require(statement.identifier)
    validate_call(node.kind, statement.method, statement.arguments)

    decoded: List[Any] = []
    for position, arg in enumerate(statement.arguments, 1):
        if arg.type is ArgType.NUMBER:
            value = arg.number
            if not math.isfinite(value):
                raise InvalidParameter(
                    f"{statement.method} argument {position} is not a finite number"
                )
            decoded.append(value)
            continue
        source = graph.require(arg.identifier)
        if graph.reaches(source.identifier, node.identifier):
            raise CyclicReference(
                f"Wiring '{source.identifier}' into '{node.identifier}' "
                f"would make '{node.identifier}' depend on itself"
            )
        decoded.append(source.instance)

    operation = OPERATIONS[node.kind][statement.method]
    try:
        operation(node.instance, *decoded)
    except (ModuleError, ValueError, OverflowError) as e:
        raise InvalidParameter(f"{statement.describe()}: {e}") from e
    logger.debug("applied %s", statement.describe())
    return node
