import pytest

from gravsim.constants import DEFAULT_TIME_STEP
from gravsim.settings import InvalidConfiguration, Method, SimulationSettings


@pytest.mark.parametrize("name, expected", [
    ("Euler", Method.EULER),
    ("euler", Method.EULER),
    (" RK4 ", Method.RK4),
    ("rk4", Method.RK4),
    (Method.RK4, Method.RK4),
])
def test_method_parse(name, expected):
    assert Method.parse(name) is expected


@pytest.mark.parametrize("bad", ["leapfrog", "", 4, None])
def test_method_parse_rejects(bad):
    with pytest.raises(InvalidConfiguration):
        Method.parse(bad)


def test_invalid_configuration_is_value_error():
    assert issubclass(InvalidConfiguration, ValueError)


def test_settings_defaults():
    settings = SimulationSettings()

    assert settings.method is Method.EULER
    assert settings.time_step == DEFAULT_TIME_STEP


def test_rejected_time_step_keeps_previous():
    settings = SimulationSettings(time_step=0.03)

    with pytest.raises(InvalidConfiguration):
        settings.time_step = -1

    assert settings.time_step == 0.03
    assert "0.03" in repr(settings)


def test_time_step_coerced_to_float():
    settings = SimulationSettings()
    settings.time_step = 1

    assert isinstance(settings.time_step, float)


@pytest.mark.parametrize("bad", [True, False, "0.5", b"1"])
def test_time_step_requires_real_number(bad):
    settings = SimulationSettings(time_step=0.02)

    with pytest.raises(InvalidConfiguration):
        settings.time_step = bad

    assert settings.time_step == 0.02
