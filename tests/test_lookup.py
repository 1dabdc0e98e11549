"""Test the step-by-step reproduction of attribute lookup."""
import functools

import pytest

from magicmethods.lookup import AttributeSource
from magicmethods.lookup import explain_lookup
from magicmethods.lookup import lookup_chain
from magicmethods.lookup import demo


class DataOnly:
    """A data descriptor without __get__: yields itself from the class, loses to the instance dict."""

    def __set__(self, instance, value):
        instance.__dict__["raw"] = value


class Base:
    inherited = "from base"
    overridden = "base value"

    def method(self):
        return "method"

    @property
    def prop(self):
        return "property"

    @property
    def broken(self):
        raise AttributeError("computed attribute failed")

    @staticmethod
    def static():
        return "static"

    @classmethod
    def klass(cls):
        return cls.__name__

    raw = DataOnly()


class Derived(Base):
    overridden = "derived value"

    @functools.cached_property
    def cached(self):
        return "cached"


class WithFallback(Derived):
    def __getattr__(self, name):
        return f"fallback:{name}"


class CallableFallback:
    """A __getattr__ hook that is a callable instance, not a function: it is not bound to the object."""

    def __call__(self, name):
        return f"callable:{name}"


class WithCallableFallback:
    __getattr__ = CallableFallback()


class Slotted:
    __slots__ = ("x",)

    def __init__(self):
        self.x = 1


@pytest.fixture
def derived():
    return Derived()


@pytest.mark.parametrize(
    "name, source, owner",
    [
        ("prop", AttributeSource.DATA_DESCRIPTOR, Base),
        ("method", AttributeSource.NON_DATA_DESCRIPTOR, Base),
        ("static", AttributeSource.NON_DATA_DESCRIPTOR, Base),
        ("klass", AttributeSource.NON_DATA_DESCRIPTOR, Base),
        ("cached", AttributeSource.NON_DATA_DESCRIPTOR, Derived),
        ("inherited", AttributeSource.CLASS_ATTRIBUTE, Base),
        ("overridden", AttributeSource.CLASS_ATTRIBUTE, Derived),
    ],
)
def test_class_sources(derived, name, source, owner):
    resolution = explain_lookup(derived, name)
    assert resolution.source == source
    assert resolution.owner is owner


def test_matches_getattr(derived):
    vars(derived).update(method="shadowed", inherited="instance", prop="hidden")
    for name in ("prop", "method", "static", "klass", "inherited", "overridden", "__class__", "__doc__"):
        assert explain_lookup(derived, name).value == getattr(derived, name)
    # A bound method is re-created on each access, but compares equal.
    other = Derived()
    assert explain_lookup(other, "method").value == other.method


def test_instance_dict_beats_non_data_descriptor(derived):
    vars(derived)["method"] = "shadowed"
    resolution = explain_lookup(derived, "method")
    assert resolution.source == AttributeSource.INSTANCE_DICT
    assert resolution.owner is None
    assert resolution.value == "shadowed"


def test_data_descriptor_beats_instance_dict(derived):
    vars(derived)["prop"] = "hidden"
    resolution = explain_lookup(derived, "prop")
    assert resolution.source == AttributeSource.DATA_DESCRIPTOR
    assert resolution.value == "property"


def test_data_descriptor_without_get(derived):
    resolution = explain_lookup(derived, "raw")
    assert resolution.source == AttributeSource.CLASS_ATTRIBUTE
    assert resolution.value is Base.__dict__["raw"]
    derived.raw = 5
    resolution = explain_lookup(derived, "raw")
    assert resolution.source == AttributeSource.INSTANCE_DICT
    assert resolution.value == 5 == derived.raw


def test_cached_property_moves_to_instance_dict(derived):
    assert explain_lookup(derived, "cached").source == AttributeSource.NON_DATA_DESCRIPTOR
    assert explain_lookup(derived, "cached").source == AttributeSource.INSTANCE_DICT


def test_missing(derived):
    with pytest.raises(AttributeError):
        explain_lookup(derived, "missing")
    with pytest.raises(AttributeError):
        # The property raises AttributeError and there is no fallback.
        explain_lookup(derived, "broken")


def test_getattr_fallback():
    obj = WithFallback()
    resolution = explain_lookup(obj, "missing")
    assert resolution.source == AttributeSource.GETATTR_FALLBACK
    assert resolution.owner is WithFallback
    assert resolution.value == "fallback:missing" == obj.missing


def test_getattr_hook_without_get():
    obj = WithCallableFallback()
    resolution = explain_lookup(obj, "missing")
    assert resolution.source == AttributeSource.GETATTR_FALLBACK
    assert resolution.owner is WithCallableFallback
    assert resolution.value == obj.missing == "callable:missing"


def test_getattr_hook_as_staticmethod():
    class WithStatic:
        @staticmethod
        def __getattr__(name):
            return name.upper()

    obj = WithStatic()
    assert explain_lookup(obj, "missing").value == obj.missing == "MISSING"


def test_attribute_error_in_descriptor_falls_back():
    obj = WithFallback()
    resolution = explain_lookup(obj, "broken")
    assert resolution.source == AttributeSource.GETATTR_FALLBACK
    assert resolution.value == obj.broken == "fallback:broken"


def test_slots():
    obj = Slotted()
    resolution = explain_lookup(obj, "x")
    # Slots are member descriptors, which are data descriptors.
    assert resolution.source == AttributeSource.DATA_DESCRIPTOR
    assert resolution.value == 1
    del obj.x
    with pytest.raises(AttributeError):
        explain_lookup(obj, "x")


def test_builtin_instances():
    assert explain_lookup([], "append").source == AttributeSource.NON_DATA_DESCRIPTOR
    assert explain_lookup(1j, "real").source == AttributeSource.DATA_DESCRIPTOR
    assert explain_lookup(1j, "real").value == 0.0


def test_classes_not_supported():
    with pytest.raises(TypeError):
        explain_lookup(Derived, "method")
    with pytest.raises(TypeError):
        lookup_chain(Derived, "method")


def test_lookup_chain():
    obj = WithFallback()
    vars(obj)["prop"] = "hidden"
    chain = lookup_chain(obj, "prop")
    assert [candidate.source for candidate in chain] == [
        AttributeSource.DATA_DESCRIPTOR,
        AttributeSource.INSTANCE_DICT,
        AttributeSource.GETATTR_FALLBACK,
    ]
    assert chain[0].owner is Base
    assert isinstance(chain[0].raw, property)
    assert chain[1].raw == "hidden"


def test_lookup_chain_ignores_hidden_base_definitions(derived):
    chain = lookup_chain(derived, "overridden")
    assert len(chain) == 1
    assert chain[0].owner is Derived
    assert chain[0].raw == "derived value"


def test_lookup_chain_empty(derived):
    assert lookup_chain(derived, "missing") == []


def test_demo():
    observations = dict(demo())
    assert observations["size"] == ("DATA_DESCRIPTOR", 3)
    assert observations["describe"] == ("INSTANCE_DICT", "shadowed method")
    assert observations["kind"] == ("INSTANCE_DICT", "instance kind")
    assert observations["extra"] == ("INSTANCE_DICT", "instance only")
    assert observations["missing"] == ("GETATTR_FALLBACK", "<fallback for missing>")
    assert observations["size candidates"] == ["DATA_DESCRIPTOR", "INSTANCE_DICT", "GETATTR_FALLBACK"]
