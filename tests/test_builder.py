import argparse
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Protocol

import pytest

from dibox import Container, DependencyError


class A:
    pass


class B:
    def __init__(self, a: A):
        self.a = a


class C:
    def __init__(self, s: str):
        self.s = s


class Shape(ABC):
    @abstractmethod
    def area(self) -> float:
        pass


class Clock(Protocol):
    def now(self) -> float: ...


class Bar:
    def __init__(self, arg):
        self.arg = arg


class Canvas:
    def __init__(self, shape: Shape = None, width: int = 80):
        self.shape = shape
        self.width = width


class OptionalCanvas:
    def __init__(self, shape: Optional[Shape] = None):
        self.shape = shape


class Frame:
    def __init__(self, shape: Shape):
        self.shape = shape


class Point:
    def __init__(self, x: int, y: int, /, *, label: str = "origin"):
        self.x = x
        self.y = y
        self.label = label


class Variadic:
    def __init__(self, a: A, *args, **kwargs):
        self.a = a
        self.args = args
        self.kwargs = kwargs


class Chicken:
    def __init__(self, egg: "Egg"):
        self.egg = egg


class Egg:
    def __init__(self, chicken: Chicken):
        self.chicken = chicken


@pytest.fixture
def container() -> Container:
    return Container()


def test_make_class_without_constructor(container):
    assert isinstance(container.make(A), A)


def test_make_auto_wires_class_parameters(container):
    b = container.make(B)

    assert isinstance(b, B)
    assert isinstance(b.a, A)


def test_make_does_not_cache(container):
    assert container.make(B) is not container.make(B)
    assert container.make(B).a is not container.make(B).a


def test_make_by_registered_name(container):
    container.types.register(B)

    assert isinstance(container.make("B"), B)


def test_make_by_dotted_path(container):
    assert isinstance(container.make("argparse.Namespace"), argparse.Namespace)


def test_make_non_existent_class(container):
    with pytest.raises(DependencyError, match='Class "Foo" does not exists.'):
        container.make("Foo")


def test_make_abstract_class(container):
    with pytest.raises(
        DependencyError, match='Class "Shape" is not an instantiable class.'
    ):
        container.make(Shape)


def test_make_protocol(container):
    container.types.register(Clock)

    with pytest.raises(
        DependencyError, match='Class "Clock" is not an instantiable class.'
    ):
        container.make("Clock")


def test_make_without_mandatory_parameter(container):
    with pytest.raises(
        DependencyError,
        match=re.escape('Could not resolve parameter "arg" in "Bar" class.'),
    ):
        container.make(Bar)


def test_make_with_builtin_parameter_missing(container):
    with pytest.raises(
        DependencyError,
        match=re.escape('Could not resolve parameter "s" in "C" class.'),
    ):
        container.make(C)


def test_named_argument_beats_positional(container):
    assert container.make(C, {0: "a", "s": "b"}).s == "b"


def test_positional_argument(container):
    assert container.make(C, {0: "a"}).s == "a"
    assert container.make(C, ["a"]).s == "a"


def test_supplied_argument_beats_auto_wiring(container):
    a = A()

    assert container.make(B, {"a": a}).a is a


def test_falls_back_to_default_when_dependency_cannot_be_built(container):
    canvas = container.make(Canvas)

    assert canvas.shape is None
    assert canvas.width == 80


def test_optional_dependency_falls_back_to_default(container):
    assert container.make(OptionalCanvas).shape is None


def test_dependency_failure_without_default_propagates(container):
    with pytest.raises(
        DependencyError, match='Class "Shape" is not an instantiable class.'
    ):
        container.make(Frame)


def test_positional_only_and_keyword_only_parameters(container):
    point = container.make(Point, {0: 1, 1: 2, "label": "p"})

    assert (point.x, point.y, point.label) == (1, 2, "p")


def test_variadic_parameters_are_ignored(container):
    variadic = container.make(Variadic)

    assert isinstance(variadic.a, A)
    assert variadic.args == ()
    assert variadic.kwargs == {}


def test_unevaluated_annotation_is_looked_up_by_name(container):
    class Engine:
        pass

    class Car:
        def __init__(self, engine: "Engine"):
            self.engine = engine

    container.types.register(Engine, "Engine")

    assert isinstance(container.make(Car).engine, Engine)


def test_cyclic_dependencies_exhaust_the_stack(container):
    with pytest.raises(RecursionError):
        container.make(Chicken)


class Scheduler:
    def __init__(self, start: Optional[datetime] = None):
        self.start = start


def test_default_used_when_dependency_signature_is_unreadable(container):
    assert container.make(Scheduler).start is None


def test_annotations_are_evaluated_one_by_one(container):
    class Engine:
        pass

    class Garage:
        def __init__(self, engine: "Engine", sizes: "list[int]"):
            self.engine = engine
            self.sizes = sizes

    container.types.register(Engine, "Engine")

    with pytest.raises(
        DependencyError, match=re.escape('Could not resolve parameter "sizes"')
    ):
        container.make(Garage)

    garage = container.make(Garage, {"sizes": [1, 2]})
    assert isinstance(garage.engine, Engine)
    assert garage.sizes == [1, 2]
