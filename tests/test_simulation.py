import math

import pytest

from gravsim.constants import DEFAULT_TIME_STEP, G
from gravsim.data_models import Body
from gravsim.settings import InvalidBody, InvalidConfiguration, Method
from gravsim.simulation import Simulation


@pytest.fixture
def sim():
    return Simulation()


def test_defaults(sim):
    assert sim.method is Method.EULER
    assert sim.time_step == DEFAULT_TIME_STEP
    assert len(sim) == 0


def test_add_body_returns_handle_in_insertion_order(sim):
    a = sim.add_body(1.0, 0.5, (0.0, 0.0), (0.0, 0.0))
    b = sim.add_body(1.0, 0.5, (0.0, 0.0), (0.0, 0.0))

    assert sim.bodies == (a, b)
    assert a is not b
    assert b.position == (0.0, 0.0)
    assert a in sim


def test_add_body_argument_order(sim):
    body = sim.add_body(2.0, 0.25, (3, 4), (5, 6))

    assert body.mass == 2.0
    assert body.radius == 0.25
    assert body.velocity == (3.0, 4.0)
    assert body.position == (5.0, 6.0)


@pytest.mark.parametrize("mass, radius, velocity, position", [
    (0.0, 1.0, (0, 0), (0, 0)),
    (-1.0, 1.0, (0, 0), (0, 0)),
    (1.0, 0.0, (0, 0), (0, 0)),
    (float("nan"), 1.0, (0, 0), (0, 0)),
    (1.0, 1.0, (0, 0, 0), (0, 0)),
    (1.0, 1.0, (0, 0), "xy"),
    (1.0, 1.0, (float("inf"), 0), (0, 0)),
])
def test_add_body_rejects_bad_input(sim, mass, radius, velocity, position):
    with pytest.raises(InvalidBody):
        sim.add_body(mass, radius, velocity, position)
    assert len(sim) == 0


def test_remove_body_uses_identity(sim):
    a = sim.add_body(1.0, 1.0, (0.0, 0.0), (0.0, 0.0))
    b = sim.add_body(1.0, 1.0, (0.0, 0.0), (0.0, 0.0))

    sim.remove_body(b)

    assert sim.bodies == (a,)
    with pytest.raises(KeyError):
        sim.remove_body(b)


@pytest.mark.parametrize("bad", [0.0, -0.01, float("nan"), float("inf"), "fast", None])
def test_set_time_step_rejects_and_keeps_previous(sim, bad):
    sim.set_time_step(0.02)

    with pytest.raises(InvalidConfiguration):
        sim.set_time_step(bad)

    assert sim.time_step == 0.02


def test_set_method_accepts_names(sim):
    sim.set_method("rk4")
    assert sim.method is Method.RK4
    sim.set_method(Method.EULER)
    assert sim.method is Method.EULER


def test_set_method_rejects_unknown(sim):
    sim.set_method("RK4")

    with pytest.raises(InvalidConfiguration):
        sim.set_method("Verlet")

    assert sim.method is Method.RK4


def test_constructor_validates_settings():
    with pytest.raises(InvalidConfiguration):
        Simulation(time_step=0.0)
    assert Simulation(method="RK4", time_step=0.5).method is Method.RK4


def test_empty_tick_is_noop(sim):
    assert sim.advance_tick() == []
    assert sim.tick_count == 1
    assert len(sim) == 0


@pytest.mark.parametrize("method", ["Euler", "RK4"])
def test_single_body_at_rest_is_unchanged(method):
    sim = Simulation(method=method)
    body = sim.add_body(5.0, 1.0, (0.0, 0.0), (7.0, 8.0))

    sim.run(10)

    assert body.position == (7.0, 8.0)
    assert body.velocity == (0.0, 0.0)


def test_euler_conserves_momentum_of_isolated_pair():
    sim = Simulation(method=Method.EULER, time_step=0.01)
    mass, separation = 1000.0, 200.0
    speed = math.sqrt(G * mass / (2.0 * separation))
    sim.add_body(mass, 1.0, (0.0, speed), (-separation / 2, 0.0))
    sim.add_body(mass, 1.0, (0.0, -speed), (separation / 2, 0.0))
    initial = sim.total_momentum()

    sim.run(1000)

    assert len(sim) == 2
    px, py = sim.total_momentum()
    assert px == pytest.approx(initial[0], abs=1e-6)
    assert py == pytest.approx(initial[1], abs=1e-6)


@pytest.mark.parametrize("method", [Method.EULER, Method.RK4])
def test_three_overlapping_bodies_merge_into_one(method):
    sim = Simulation(method=method, time_step=0.01)
    masses = [2.0, 3.0, 5.0]
    # slow enough that every trial position stays inside the dead zone
    velocities = [(0.1, 0.0), (0.0, -0.2), (0.4, 0.1)]
    positions = [(0.0, 0.0), (0.01, 0.0), (0.0, 0.01)]
    handles = [sim.add_body(m, 0.5, v, p) for m, v, p in zip(masses, velocities, positions)]

    events = sim.advance_tick()

    assert len(events) == 1
    assert sim.bodies == (handles[0],)
    survivor = handles[0]
    total = sum(masses)
    assert survivor.mass == pytest.approx(total)
    assert survivor.velocity == pytest.approx((
        sum(m * v[0] for m, v in zip(masses, velocities)) / total,
        sum(m * v[1] for m, v in zip(masses, velocities)) / total,
    ))
    assert survivor.radius == pytest.approx((3 * 0.5 ** 3) ** (1.0 / 3.0))


@pytest.mark.parametrize("method", [Method.EULER, Method.RK4])
def test_chain_of_contacts_merges_transitively(method):
    sim = Simulation(method=method, time_step=0.001)
    a = sim.add_body(1.0, 1.0, (0.0, 0.0), (0.0, 0.0))
    sim.add_body(1.0, 1.0, (0.0, 0.0), (1.5, 0.0))
    sim.add_body(1.0, 1.0, (0.0, 0.0), (3.0, 0.0))

    sim.advance_tick()

    assert sim.bodies == (a,)
    assert a.mass == pytest.approx(3.0)
    assert a.radius == pytest.approx(3.0 ** (1.0 / 3.0))
    assert a.position == pytest.approx((1.5, 0.0), abs=1e-9)
    assert a.velocity == pytest.approx((0.0, 0.0), abs=1e-9)


def test_rk4_detects_contact_at_final_stage_positions():
    # B closes 1.5 units in one tick; the pair is 3 apart at the start of it.
    def build(method):
        sim = Simulation(method=method, time_step=0.001)
        sim.add_body(1e-9, 1.0, (0.0, 0.0), (0.0, 0.0))
        sim.add_body(1e-9, 1.0, (-1500.0, 0.0), (3.0, 0.0))
        return sim

    euler, rk4 = build(Method.EULER), build(Method.RK4)
    euler.advance_tick()
    rk4.advance_tick()

    assert len(euler) == 2
    assert len(rk4) == 1


def test_removal_listeners_see_removed_and_absorbed_bodies(sim):
    removed = []
    sim.add_removal_listener(removed.append)
    a = sim.add_body(1.0, 1.0, (0.0, 0.0), (0.0, 0.0))
    b = sim.add_body(1.0, 1.0, (0.0, 0.0), (0.5, 0.0))
    c = sim.add_body(1.0, 1.0, (0.0, 0.0), (100.0, 0.0))

    sim.advance_tick()
    assert removed == [b]
    assert sim.last_collision_msg is not None

    sim.remove_body(c)
    assert removed == [b, c]

    sim.clear()
    assert removed == [b, c, a]
    assert len(sim) == 0


def test_replace_bodies(sim):
    old = sim.add_body(1.0, 1.0, (0.0, 0.0), (0.0, 0.0))
    removed = []
    sim.add_removal_listener(removed.append)
    fresh = Body(mass=2.0, radius=1.0, position=(10.0, 0.0), velocity=(0.0, 0.0))

    sim.replace_bodies([fresh])

    assert removed == [old]
    assert sim.bodies == (fresh,)
    assert sim.total_mass() == 2.0


@pytest.mark.parametrize("bad", [
    Body(mass=-1.0, radius=1.0, position=(0.0, 0.0), velocity=(0.0, 0.0)),
    Body(mass=1.0, radius=0.0, position=(0.0, 0.0), velocity=(0.0, 0.0)),
    Body(mass=1.0, radius=1.0, position=(float("nan"), 0.0), velocity=(0.0, 0.0)),
    Body(mass=True, radius=1.0, position=(0.0, 0.0), velocity=(0.0, 0.0)),
    "not a body",
])
def test_replace_bodies_rejects_invalid_body_and_keeps_collection(sim, bad):
    kept = sim.add_body(1.0, 1.0, (0.0, 0.0), (0.0, 0.0))
    good = Body(mass=1.0, radius=1.0, position=(0.5, 0.0), velocity=(0.0, 0.0))

    with pytest.raises(InvalidBody):
        sim.replace_bodies([bad, good])

    assert sim.bodies == (kept,)


def test_replace_bodies_rejects_repeated_body(sim):
    body = Body(mass=1.0, radius=1.0, position=(0.0, 0.0), velocity=(0.0, 0.0))

    with pytest.raises(InvalidBody):
        sim.replace_bodies([body, body])

    assert len(sim) == 0


def test_replace_bodies_normalises_numbers(sim):
    body = Body(mass=2, radius=1, position=(3, 4), velocity=(0, 0))

    sim.replace_bodies([body])

    assert isinstance(body.mass, float)
    assert body.position == (3.0, 4.0)


@pytest.mark.parametrize("mass, radius, velocity, position", [
    (True, 1.0, (0, 0), (0, 0)),
    ("2.0", 1.0, (0, 0), (0, 0)),
    (1.0, "1", (0, 0), (0, 0)),
    (1.0, 1.0, ("1", 0), (0, 0)),
    (1.0, 1.0, (0, 0), (False, 0)),
])
def test_add_body_requires_real_numbers(sim, mass, radius, velocity, position):
    with pytest.raises(InvalidBody):
        sim.add_body(mass, radius, velocity, position)
    assert len(sim) == 0
