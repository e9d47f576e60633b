import logging
import textwrap
from fractions import Fraction

import pytest

from galaxy.engine.logger import GameLogger, LoggerConfig
from galaxy.factions import FactionsDatabase
from galaxy.loaders.session import IngestionSession
from galaxy.systems.database import CustomSystemsDatabase
from galaxy.systems.errors import IngestionActiveError, UsedHandleError
from galaxy.systems.types import BodyType, GovType


def make_logger() -> GameLogger:
    return GameLogger(
        LoggerConfig(
            level=logging.DEBUG,
            channels={"loader": True, "systems": True, "validation": True, "factions": True},
        )
    )


def make_database(tmp_path, factions=None) -> CustomSystemsDatabase:
    return CustomSystemsDatabase(tmp_path, factions if factions is not None else FactionsDatabase(), make_logger())


def write_script(tmp_path, name: str, source: str):
    path = tmp_path / name
    path.write_text(textwrap.dedent(source))
    return path


NESTED_SCRIPT = """
star = CustomSystemBody.new("Star", "STAR_G").radius(1).mass(1).temp(5000)
a = CustomSystemBody.new("A", "PLANET_TERRESTRIAL").radius(1).mass(1)
b = CustomSystemBody.new("B", "PLANET_TERRESTRIAL").radius(f(1, 2)).mass(f(1, 10))
c = CustomSystemBody.new("C", "STARPORT_ORBITAL")
d = CustomSystemBody.new("D", "PLANET_ASTEROID").radius(f(1, 100)).mass(f(1, 1000))
e = CustomSystemBody.new("E", "PLANET_GAS_GIANT").radius(10).mass(300)

system = CustomSystem.new("Nested", ["STAR_G"]).seed(7).govtype("CORPORATE")
system.bodies(star, [a, [b, [c]], [d], e])
system.add_to_sector(1, -2, 3, v(0.25, 0.5, 0.75))
"""


def test_nested_lists_attach_to_preceding_body(tmp_path) -> None:
    database = make_database(tmp_path)
    system = database.load_system(write_script(tmp_path, "nested.py", NESTED_SCRIPT))
    assert system is not None

    root = system.root
    assert root.name == "Star"
    assert [kid.name for kid in root.children] == ["A", "E"]
    a = root.children[0]
    # Both lists after A hold children of A.
    assert [kid.name for kid in a.children] == ["B", "D"]
    assert [kid.name for kid in a.children[0].children] == ["C"]
    assert [body.name for body in system.bodies()] == ["Star", "A", "B", "C", "D", "E"]


def test_script_sets_system_fields(tmp_path) -> None:
    database = make_database(tmp_path)
    system = database.load_system(write_script(tmp_path, "nested.py", NESTED_SCRIPT))
    assert system.sector == (1, -2, 3)
    assert (system.pos.x, system.pos.y, system.pos.z) == (0.25, 0.5, 0.75)
    assert system.seed == 7
    assert not system.want_rand_seed
    assert system.gov_type is GovType.CORPORATE
    assert system.num_stars == 1
    assert system.primary_type == [BodyType.STAR_G] + [BodyType.GRAVPOINT] * 3
    assert system.system_index == 0
    assert database.get_custom_systems_for_sector(1, -2, 3) == (system,)


def test_zero_seed_keeps_random_seed(tmp_path) -> None:
    database = make_database(tmp_path)
    source = NESTED_SCRIPT.replace(".seed(7)", ".seed(0)")
    system = database.load_system(write_script(tmp_path, "seed.py", source))
    assert system.want_rand_seed


BINARY_SCRIPT = """
root = CustomSystemBody.new("Barycentre", "GRAVPOINT")
a = CustomSystemBody.new("A", "STAR_G").radius(1).mass(1).temp(5800)
{extra}
system = CustomSystem.new("Binary", {stars})
system.bodies(root, [a{extra_ref}])
system.add_to_sector(0, 0, 0, v(0, 0, 0))
"""


def binary_script(stars: str, extra: str = "", extra_ref: str = "") -> str:
    return BINARY_SCRIPT.format(stars=stars, extra=extra, extra_ref=extra_ref)


def test_star_count_matches_declaration(tmp_path) -> None:
    database = make_database(tmp_path)
    source = binary_script(
        '["STAR_G", "STAR_K"]',
        extra='b = CustomSystemBody.new("B", "STAR_K").radius(f(8, 10)).mass(f(8, 10)).temp(4500)',
        extra_ref=", b",
    )
    system = database.load_system(write_script(tmp_path, "binary.py", source))
    assert system is not None
    assert system.num_stars == 2
    assert system.root.count_stars() == 2


def test_too_few_stars_in_tree_rejects_system(tmp_path, caplog) -> None:
    database = make_database(tmp_path)
    source = binary_script('["STAR_G", "STAR_K"]')
    with caplog.at_level(logging.ERROR):
        system = database.load_system(write_script(tmp_path, "binary.py", source))
    assert system is None
    assert len(database) == 0
    assert "expected 2 star(s) in system Binary, but found 1" in caplog.text


def test_too_many_stars_in_tree_rejects_system(tmp_path, caplog) -> None:
    database = make_database(tmp_path)
    source = binary_script(
        '["STAR_G", "STAR_K"]',
        extra=(
            'b = CustomSystemBody.new("B", "STAR_K").radius(1).mass(1)\n'
            'c = CustomSystemBody.new("C", "STAR_M").radius(1).mass(1)'
        ),
        extra_ref=", b, c",
    )
    with caplog.at_level(logging.ERROR):
        system = database.load_system(write_script(tmp_path, "trinary.py", source))
    assert system is None
    assert "expected 2 star(s) in system Binary, but found 3" in caplog.text


def test_primary_type_must_match_first_declared_star(tmp_path, caplog) -> None:
    database = make_database(tmp_path)
    source = """
    star = CustomSystemBody.new("Star", "STAR_K").radius(1).mass(1)
    system = CustomSystem.new("Mismatch", ["STAR_G"])
    system.bodies(star, [])
    system.add_to_sector(0, 0, 0, v(0, 0, 0))
    """
    with caplog.at_level(logging.ERROR):
        assert database.load_system(write_script(tmp_path, "mismatch.py", source)) is None
    assert "does not match" in caplog.text


def test_setter_errors_name_the_body(tmp_path, caplog) -> None:
    database = make_database(tmp_path)
    source = """
    star = CustomSystemBody.new("Squashed", "STAR_G").equatorial_to_polar_radius(f(1, 2))
    """
    with caplog.at_level(logging.ERROR):
        assert database.load_system(write_script(tmp_path, "squashed.py", source)) is None
    assert "body 'Squashed' equatorial_to_polar_radius" in caplog.text
    assert "cannot be less than 1" in caplog.text


def test_reusing_an_attached_body_raises(tmp_path) -> None:
    database = make_database(tmp_path)
    source = """
    star = CustomSystemBody.new("Star", "STAR_G").radius(1).mass(1)
    rock = CustomSystemBody.new("Rock", "PLANET_ASTEROID").radius(1).mass(1)
    system = CustomSystem.new("Twice", ["STAR_G"])
    system.bodies(star, [rock, rock])
    """
    with pytest.raises(UsedHandleError, match="already been used"):
        database.load_system(write_script(tmp_path, "twice.py", source))
    assert IngestionSession.active() is None


def test_configuring_a_moved_body_raises(tmp_path) -> None:
    database = make_database(tmp_path)
    source = """
    star = CustomSystemBody.new("Star", "STAR_G").radius(1).mass(1)
    system = CustomSystem.new("Moved", ["STAR_G"])
    system.bodies(star, [])
    star.radius(2)
    """
    with pytest.raises(UsedHandleError):
        database.load_system(write_script(tmp_path, "moved.py", source))


def test_nested_session_is_rejected(tmp_path) -> None:
    database = make_database(tmp_path)
    with IngestionSession(database):
        with pytest.raises(IngestionActiveError):
            with IngestionSession(database):
                pass
    assert IngestionSession.active() is None
    with IngestionSession(database) as session:
        assert IngestionSession.active() is session


def test_sessions_get_fresh_namespaces(tmp_path) -> None:
    database = make_database(tmp_path)
    write_script(tmp_path, "define.py", "leftover = 1\n")
    with IngestionSession(database) as session:
        session.run_script(tmp_path / "define.py")
        assert session.namespace["leftover"] == 1
    with IngestionSession(database) as session:
        assert "leftover" not in session.namespace


def test_faction_deferred_before_initialise(tmp_path) -> None:
    factions = FactionsDatabase()
    factions.add_faction("Federation", "EARTHDEMOC")
    database = make_database(tmp_path, factions)
    source = NESTED_SCRIPT.replace(".seed(7)", '.faction("Federation")')
    system = database.load_system(write_script(tmp_path, "faction.py", source))
    assert system is not None
    assert system.faction is None
    assert system.faction_name == "Federation"

    factions.initialize()
    assert system.faction.name == "Federation"


def test_unknown_faction_after_initialise_fails_script(tmp_path, caplog) -> None:
    factions = FactionsDatabase()
    factions.initialize()
    database = make_database(tmp_path, factions)
    source = NESTED_SCRIPT.replace(".seed(7)", '.faction("Nobody")')
    with caplog.at_level(logging.ERROR):
        system = database.load_system(write_script(tmp_path, "faction.py", source))
    assert system is None
    assert "Faction not found: Nobody" in caplog.text


def test_script_values_land_on_fixed_grid(tmp_path) -> None:
    database = make_database(tmp_path)
    source = NESTED_SCRIPT.replace(
        'radius(f(1, 2))', 'radius(f(1, 2)).eccentricity(0.1).orbital_phase_at_start(math.pi)'
    )
    system = database.load_system(write_script(tmp_path, "grid.py", source))
    b = system.root.children[0].children[0]
    assert b.radius == Fraction(1, 2)
    assert (b.eccentricity * 2**32).denominator == 1
    assert not b.want_rand_phase
