import pytest

from minidic import Container, ContainerError, Injection, Lifetime, UnknownIdentifierError


class Service:
    def __init__(self, ident: int = 0):
        self.ident = ident


def test_get_plain_value_returns_it_unchanged():
    c = Container()

    c.add(Injection("param", "value"))

    assert c.get("param") == "value"


def test_add_shorthand_registers_plain_value():
    c = Container()

    c.add("param", "value")

    assert c.get("param") == "value"


def test_get_function_returns_its_result():
    c = Container()

    c.add("service", lambda _: Service())

    assert isinstance(c.get("service"), Service)


def test_factory_receives_the_resolving_container():
    c = Container()
    received = []

    def make(container: Container) -> int:
        received.append(container)
        return 33

    c.add("service", make)

    assert c.get("service") == 33
    assert received == [c]
    assert received[0] is c


def test_factory_can_resolve_other_ids_through_the_container():
    c = Container()

    c.add("dsn", "sqlite://")
    c.add("service", lambda cont: f"connected to {cont.get('dsn')}")

    assert c.get("service") == "connected to sqlite://"


def test_has_injection():
    c = Container()

    c.add("param", "value")
    c.add("nil", None)
    c.add("service", lambda _: Service())

    assert c.has("param")
    assert c.has("nil")
    assert c.has("service")
    assert not c.has("non_existent")
    assert "param" in c
    assert "non_existent" not in c


def test_none_value_resolves_to_none():
    c = Container()

    c.add("nil", None)

    assert c.get("nil") is None


def test_get_unknown_id_raises_unknown_identifier():
    c = Container()

    with pytest.raises(UnknownIdentifierError) as ctx:
        c.get("foo")

    assert ctx.value.injection_id == "foo"
    assert str(ctx.value) == "Unknown injection id 'foo'"


def test_unknown_identifier_is_a_key_error():
    c = Container()

    with pytest.raises(KeyError):
        c.get("unknown-token")


def test_try_get_returns_value():
    c = Container()

    c.add("param", "value")
    res = c.try_get("param")

    assert res.ok
    assert res.error is None
    assert res.value == "value"
    assert res.unwrap() == "value"


def test_try_get_unknown_id_returns_error_instead_of_raising():
    c = Container()

    res = c.try_get("foo")

    assert not res.ok
    assert isinstance(res.error, UnknownIdentifierError)
    assert res.value is None
    with pytest.raises(UnknownIdentifierError):
        res.unwrap()


def test_try_get_reports_errors_from_nested_lookups():
    c = Container()

    c.add("service", lambda cont: cont.get("missing"))
    res = c.try_get("service")

    assert isinstance(res.error, UnknownIdentifierError)
    assert res.error.injection_id == "missing"


def test_try_get_lets_factory_errors_propagate():
    c = Container()

    def broken(_):
        msg = "boom"
        raise ValueError(msg)

    c.add("service", broken)

    with pytest.raises(ValueError, match="boom"):
        c.try_get("service")


def test_all_container_errors_share_a_base_class():
    c = Container()

    with pytest.raises(ContainerError):
        c.get("foo")


def test_add_overwrites_previous_registration():
    c = Container()

    c.add("param", "first")
    c.add("param", "second")

    assert c.get("param") == "second"


def test_add_rejects_non_injection_argument():
    c = Container()

    with pytest.raises(TypeError):
        c.add(42)  # type: ignore[call-overload]


def test_add_rejects_options_with_injection_instance():
    c = Container()

    with pytest.raises(ValueError, match="Options cannot be combined"):
        c.add(Injection("param", "value"), protected=True)  # type: ignore[call-overload]


def test_add_shorthand_requires_a_value():
    c = Container()

    with pytest.raises(ValueError, match="A value must be provided"):
        c.add("param")  # type: ignore[call-overload]


def test_add_shorthand_forwards_options():
    c = Container()
    counter = iter(range(100))

    c.add("next", lambda _: next(counter), lifetime=Lifetime.TRANSIENT)

    assert c.get("next") == 0
    assert c.get("next") == 1
