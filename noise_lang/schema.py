"""Per-kind construction arity and method signatures.

Every generator or combiner kind declares how many source slots an
assignment wires, and the ordered list of methods a node of that kind
accepts together with the lexical class of each positional argument.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from .exceptions import (
    ArgumentCountMismatch,
    ArgumentTypeMismatch,
    UnknownMethodForKind,
)
from .models import Argument, ArgType

NUM = ArgType.NUMBER
IDENT = ArgType.IDENTIFIER


class ModuleKind(str, Enum):
    ABS = "abs"
    ADD = "add"
    BILLOW = "billow"
    BLEND = "blend"
    CACHE = "cache"
    CHECKERBOARD = "checkerboard"
    CLAMP = "clamp"
    CONST = "const"
    CURVE = "curve"
    CYLINDERS = "cylinders"
    DISPLACE = "displace"
    EXPONENT = "exponent"
    INVERT = "invert"
    MAX = "max"
    MIN = "min"
    MULTIPLY = "multiply"
    PERLIN = "perlin"
    POWER = "power"
    RIDGEDMULTI = "ridgedmulti"
    ROTATEPOINT = "rotatepoint"
    SCALEBIAS = "scalebias"
    SCALEPOINT = "scalepoint"
    SELECT = "select"
    SPHERES = "spheres"
    TERRACE = "terrace"
    TRANSLATEPOINT = "translatepoint"
    TURBULENCE = "turbulence"
    VORONOI = "voronoi"


@dataclass(frozen=True)
class MethodSignature:
    name: str
    params: Tuple[ArgType, ...] = ()


@dataclass(frozen=True)
class KindSchema:
    kind: ModuleKind
    source_count: int
    methods: Tuple[MethodSignature, ...]

    def find(self, name: str) -> Optional[MethodSignature]:
        for method in self.methods:
            if method.name == name:
                return method
        return None

    @property
    def method_names(self) -> Tuple[str, ...]:
        return tuple(m.name for m in self.methods)


def _m(name: str, *params: ArgType) -> MethodSignature:
    return MethodSignature(name, tuple(params))


_SOURCE = _m("SetSourceModule", NUM, IDENT)

_FRACTAL = (
    _m("SetFrequency", NUM),
    _m("SetLacunarity", NUM),
    _m("SetNoiseQuality", NUM),
    _m("SetOctaveCount", NUM),
    _m("SetPersistence", NUM),
    _m("SetSeed", NUM),
)


def _schema(kind: ModuleKind, source_count: int, *methods: MethodSignature) -> KindSchema:
    return KindSchema(kind, source_count, tuple(methods))


SCHEMA: Dict[ModuleKind, KindSchema] = {
    s.kind: s
    for s in (
        _schema(ModuleKind.ABS, 1, _SOURCE),
        _schema(ModuleKind.ADD, 2, _SOURCE),
        _schema(ModuleKind.BILLOW, 0, *_FRACTAL),
        _schema(ModuleKind.BLEND, 3, _SOURCE, _m("SetControlModule", IDENT)),
        _schema(ModuleKind.CACHE, 1, _SOURCE),
        _schema(ModuleKind.CHECKERBOARD, 0),
        _schema(ModuleKind.CLAMP, 1, _SOURCE, _m("SetBounds", NUM, NUM)),
        _schema(ModuleKind.CONST, 0, _m("SetConstValue", NUM)),
        _schema(
            ModuleKind.CURVE,
            1,
            _SOURCE,
            _m("AddControlPoint", NUM, NUM),
            _m("ClearAllControlPoints"),
        ),
        _schema(ModuleKind.CYLINDERS, 0, _m("SetFrequency", NUM)),
        _schema(
            ModuleKind.DISPLACE,
            4,
            _SOURCE,
            _m("SetDisplaceModules", IDENT, IDENT, IDENT),
            _m("SetXDisplaceModule", IDENT),
            _m("SetYDisplaceModule", IDENT),
            _m("SetZDisplaceModule", IDENT),
        ),
        _schema(ModuleKind.EXPONENT, 1, _SOURCE, _m("SetExponent", NUM)),
        _schema(ModuleKind.INVERT, 1, _SOURCE),
        _schema(ModuleKind.MAX, 2, _SOURCE),
        _schema(ModuleKind.MIN, 2, _SOURCE),
        _schema(ModuleKind.MULTIPLY, 2, _SOURCE),
        _schema(ModuleKind.PERLIN, 0, *_FRACTAL),
        _schema(ModuleKind.POWER, 2, _SOURCE),
        _schema(
            ModuleKind.RIDGEDMULTI,
            0,
            _m("SetFrequency", NUM),
            _m("SetLacunarity", NUM),
            _m("SetNoiseQuality", NUM),
            _m("SetOctaveCount", NUM),
            _m("SetSeed", NUM),
        ),
        _schema(
            ModuleKind.ROTATEPOINT,
            1,
            _SOURCE,
            _m("SetAngles", NUM, NUM, NUM),
            _m("SetXAngle", NUM),
            _m("SetYAngle", NUM),
            _m("SetZAngle", NUM),
        ),
        _schema(ModuleKind.SCALEBIAS, 1, _SOURCE, _m("SetBias", NUM), _m("SetScale", NUM)),
        _schema(
            ModuleKind.SCALEPOINT,
            1,
            _SOURCE,
            _m("SetScale", NUM, NUM, NUM),
            _m("SetXScale", NUM),
            _m("SetYScale", NUM),
            _m("SetZScale", NUM),
        ),
        _schema(
            ModuleKind.SELECT,
            3,
            _SOURCE,
            _m("SetControlModule", IDENT),
            _m("SetBounds", NUM, NUM),
            _m("SetEdgeFalloff", NUM),
        ),
        _schema(ModuleKind.SPHERES, 0, _m("SetFrequency", NUM)),
        _schema(
            ModuleKind.TERRACE,
            1,
            _SOURCE,
            _m("InvertTerraces"),
            _m("MakeControlPoints", NUM),
            _m("AddControlPoint", NUM),
            _m("ClearAllControlPoints"),
        ),
        _schema(
            ModuleKind.TRANSLATEPOINT,
            1,
            _SOURCE,
            _m("SetTranslation", NUM, NUM, NUM),
            _m("SetXTranslation", NUM),
            _m("SetYTranslation", NUM),
            _m("SetZTranslation", NUM),
        ),
        _schema(
            ModuleKind.TURBULENCE,
            1,
            _SOURCE,
            _m("SetFrequency", NUM),
            _m("SetPower", NUM),
            _m("SetRoughness", NUM),
            _m("SetSeed", NUM),
        ),
        _schema(
            ModuleKind.VORONOI,
            0,
            _m("EnableDistance"),
            _m("DisableDistance"),
            _m("SetFrequency", NUM),
            _m("SetDisplacement", NUM),
            _m("SetSeed", NUM),
        ),
    )
}

KIND_NAMES: Tuple[str, ...] = tuple(k.value for k in ModuleKind)


def schema_for(kind: ModuleKind) -> KindSchema:
    return SCHEMA[ModuleKind(kind)]


def validate_call(kind: ModuleKind, method: str, args: Sequence[Argument]) -> MethodSignature:
    """Check a method name and its arguments against the kind's schema."""
    schema = schema_for(kind)
    signature = schema.find(method)
    if signature is None:
        raise UnknownMethodForKind(
            f"Module kind '{schema.kind.value}' has no method \"{method}\""
        )
    if len(args) != len(signature.params):
        raise ArgumentCountMismatch(
            f"Invalid number of arguments to method \"{method}\": "
            f"expected {len(signature.params)}, got {len(args)}"
        )
    for pos, (arg, expected) in enumerate(zip(args, signature.params)):
        if arg.type is not expected:
            raise ArgumentTypeMismatch(
                f"Invalid argument type for \"{method}\" argument {pos + 1}: "
                f"expected {expected.value}, got {arg.type.value} ({arg.text})"
            )
    return signature
