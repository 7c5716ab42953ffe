"""Metrics, metric families and the generators that build them."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Iterable

__all__ = [
    "MetricType",
    "Metric",
    "Family",
    "FamilyGenerator",
    "format_value",
    "compose_metric_gen_funcs",
    "extract_metric_family_headers",
]


class MetricType(str, Enum):
    """The exposition type of a metric family."""

    GAUGE = "gauge"
    COUNTER = "counter"
    INFO = "info"
    STATESET = "stateset"


def format_value(value: float) -> str:
    """Format a sample value in the shortest exact form, using an exponent for large or small magnitudes."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "0"
    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    text = "".join(str(d) for d in digits)
    count = len(text)
    point = count + exponent
    exp = point - 1
    if exp < -4 or exp >= 6:
        mantissa = text[0] + (f".{text[1:]}" if count > 1 else "")
        body = f"{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
    elif point <= 0:
        body = "0." + "0" * -point + text
    elif point >= count:
        body = text + "0" * (point - count)
    else:
        body = f"{text[:point]}.{text[point:]}"
    return f"-{body}" if sign else body


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


@dataclass
class Metric:
    """A single sample: label keys, matching label values and a value."""

    label_keys: list[str] = field(default_factory=list)
    label_values: list[str] = field(default_factory=list)
    value: float = 0.0

    def render(self, name: str) -> str:
        """Render as one exposition line, without a trailing newline."""
        if len(self.label_keys) != len(self.label_values):
            raise ValueError(
                f"metric {name} has {len(self.label_keys)} label keys "
                f"but {len(self.label_values)} label values"
            )
        labels = ",".join(
            f'{key}="{_escape(val)}"' for key, val in zip(self.label_keys, self.label_values)
        )
        head = f"{name}{{{labels}}}" if labels else name
        return f"{head} {format_value(self.value)}"


@dataclass
class Family:
    """The metrics produced for one object by one generator."""

    metrics: list[Metric] = field(default_factory=list)

    def render(self, name: str) -> str:
        """Render every metric as a newline-terminated line."""
        return "".join(f"{metric.render(name)}\n" for metric in self.metrics)


@dataclass(frozen=True)
class FamilyGenerator:
    """Describes a metric family and how to build it from an object."""

    name: str
    help: str
    type: MetricType
    func: Callable[[Any], Family]

    def generate(self, obj: Any) -> Family:
        """Build the family for the given object."""
        return self.func(obj)

    def header(self) -> str:
        """The HELP and TYPE lines for this family."""
        return f"# HELP {self.name} {self.help}\n# TYPE {self.name} {MetricType(self.type).value}"


def compose_metric_gen_funcs(
    generators: Iterable[FamilyGenerator],
) -> Callable[[Any], list[str]]:
    """Combine generators into one function returning the rendered family of each."""
    gens = list(generators)

    def generate_all(obj: Any) -> list[str]:
        return [gen.generate(obj).render(gen.name) for gen in gens]

    return generate_all


def extract_metric_family_headers(generators: Iterable[FamilyGenerator]) -> list[str]:
    """The header of each generator, in order."""
    return [gen.header() for gen in generators]