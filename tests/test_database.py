import json
import logging
import textwrap

import pytest

from galaxy.engine.logger import GameLogger, LoggerConfig
from galaxy.factions import FactionsDatabase
from galaxy.systems.database import CustomSystemsDatabase
from galaxy.systems.sector import SystemPath
from galaxy.systems.system import CustomSystem


def make_logger() -> GameLogger:
    return GameLogger(
        LoggerConfig(
            level=logging.DEBUG,
            channels={"loader": True, "systems": True, "validation": True, "factions": True},
        )
    )


def make_database(directory) -> CustomSystemsDatabase:
    return CustomSystemsDatabase(directory, FactionsDatabase(), make_logger())


def script_for(name: str, x: int, y: int, z: int) -> str:
    return textwrap.dedent(
        f"""
        star = CustomSystemBody.new("{name}", "STAR_M").radius(f(1, 2)).mass(f(1, 2)).temp(3000)
        system = CustomSystem.new("{name}", ["STAR_M"])
        system.bodies(star, [])
        system.add_to_sector({x}, {y}, {z}, v(0.5, 0.5, 0.5))
        """
    )


def document_for(name: str, x: int, y: int, z: int) -> dict:
    return {
        "name": name,
        "stars": ["STAR_K"],
        "sectorX": x,
        "sectorY": y,
        "sectorZ": z,
        "pos": {"x": 0.2, "y": 0.4, "z": 0.6},
        "bodies": [{"name": name, "type": "STAR_K", "radius": 1, "mass": 1, "averageTemp": 4500}],
    }


def test_empty_sectors_share_one_sentinel(tmp_path) -> None:
    database = make_database(tmp_path)
    first = database.get_custom_systems_for_sector(5, 5, 5)
    second = database.get_custom_systems_for_sector(-7, 0, 2)
    assert len(first) == 0
    assert first is second


def test_system_index_follows_insertion_order(tmp_path) -> None:
    database = make_database(tmp_path)
    path = SystemPath(0, 0, 0)
    systems = [CustomSystem(name=name) for name in ("A", "B", "C")]
    for system in systems:
        database.add_custom_system(path, system)
    stored = database.get_custom_systems_for_sector(0, 0, 0)
    assert [system.name for system in stored] == ["A", "B", "C"]
    assert [system.system_index for system in stored] == [0, 1, 2]
    assert database.last_added() is systems[-1]
    assert len(database) == 3


def test_sector_path_requires_integers() -> None:
    with pytest.raises(TypeError):
        SystemPath(0.5, 0, 0)
    assert str(SystemPath(1, -2, 3)) == "(1,-2,3)"


def test_load_directory_reads_scripts_and_documents(tmp_path) -> None:
    nested = tmp_path / "deep" / "er"
    nested.mkdir(parents=True)
    (tmp_path / "a_script.py").write_text(script_for("Alpha", 0, 0, 0))
    (nested / "b_doc.json").write_text(json.dumps(document_for("Beta", 0, 0, 0)))
    (tmp_path / "c_doc.json").write_text(
        json.dumps([document_for("Gamma", 1, 0, 0), document_for("Delta", 0, 0, 0)])
    )
    (tmp_path / "notes.txt").write_text("not content")

    database = make_database(tmp_path)
    database.load()

    # Files load in sorted path order: a_script.py, c_doc.json, deep/er/b_doc.json.
    home = database.get_custom_systems_for_sector(0, 0, 0)
    assert [system.name for system in home] == ["Alpha", "Delta", "Beta"]
    assert [system.system_index for system in home] == [0, 1, 2]
    assert [system.name for system in database.get_custom_systems_for_sector(1, 0, 0)] == ["Gamma"]
    assert len(database) == 4
    assert set(database.sectors()) == {SystemPath(0, 0, 0), SystemPath(1, 0, 0)}


def test_broken_file_does_not_stop_batch(tmp_path, caplog) -> None:
    (tmp_path / "a_broken.py").write_text("CustomSystemBody.new('X', 'NOT_A_TYPE')\n")
    (tmp_path / "b_syntax.py").write_text("this is not python\n")
    (tmp_path / "c_bad.json").write_text("{ nope")
    (tmp_path / "d_good.py").write_text(script_for("Good", 2, 2, 2))

    database = make_database(tmp_path)
    with caplog.at_level(logging.ERROR):
        database.load()
    assert [system.name for system in database] == ["Good"]
    assert "a_broken.py" in caplog.text
    assert "b_syntax.py" in caplog.text
    assert "c_bad.json" in caplog.text


def test_load_system_returns_last_added(tmp_path) -> None:
    path = tmp_path / "two.py"
    path.write_text(script_for("First", 0, 0, 0) + script_for("Second", 0, 0, 0))
    database = make_database(tmp_path)
    system = database.load_system(path)
    assert system is not None
    assert system.name == "Second"
    assert system.system_index == 1


def test_load_system_without_registration_returns_none(tmp_path) -> None:
    path = tmp_path / "empty.py"
    path.write_text("x = 1\n")
    database = make_database(tmp_path)
    database.add_custom_system(SystemPath(0, 0, 0), CustomSystem(name="Earlier"))
    assert database.load_system(path) is None


def test_missing_directory_is_not_fatal(tmp_path, caplog) -> None:
    database = make_database(tmp_path / "absent")
    with caplog.at_level(logging.WARNING):
        database.load()
    assert len(database) == 0
    assert "not found" in caplog.text


def test_out_of_range_document_value_skips_only_that_file(tmp_path) -> None:
    bad = document_for("Huge", 0, 0, 0)
    bad["bodies"][0]["radius"] = 1e308
    colour = document_for("Blinding", 0, 0, 0)
    colour["bodies"][0]["atmosColor"] = [1e308, 0, 0]
    (tmp_path / "a_bad.json").write_text(json.dumps(bad))
    (tmp_path / "b_colour.json").write_text(json.dumps(colour))
    (tmp_path / "c_good.json").write_text(json.dumps(document_for("Good", 0, 0, 0)))

    database = make_database(tmp_path)
    database.load()
    assert [system.name for system in database] == ["Good"]


def test_out_of_range_script_value_skips_only_that_file(tmp_path, caplog) -> None:
    (tmp_path / "a.py").write_text(
        script_for("Huge", 0, 0, 0).replace(".radius(f(1, 2))", ".radius(1e308)")
    )
    (tmp_path / "b.py").write_text(script_for("Good", 0, 0, 0))

    database = make_database(tmp_path)
    with caplog.at_level(logging.ERROR):
        database.load()
    assert [system.name for system in database] == ["Good"]
    assert "out of range" in caplog.text


@pytest.mark.parametrize(
    "statement",
    ['raise RuntimeError("x")', "assert False, 'broken content'", "import no_such_module"],
)
def test_any_script_failure_skips_only_that_file(tmp_path, statement) -> None:
    (tmp_path / "a.py").write_text(statement + "\n")
    (tmp_path / "b.py").write_text(script_for("Good", 0, 0, 0))

    database = make_database(tmp_path)
    database.load()
    assert [system.name for system in database] == ["Good"]


def test_sector_view_is_read_only(tmp_path) -> None:
    database = make_database(tmp_path)
    database.add_custom_system(SystemPath(0, 0, 0), CustomSystem(name="A"))
    stored = database.get_custom_systems_for_sector(0, 0, 0)
    assert isinstance(stored, tuple)
    with pytest.raises(AttributeError):
        stored.append(CustomSystem(name="Intruder"))
    database.sectors()[SystemPath(0, 0, 0)] = ()
    assert len(database.get_custom_systems_for_sector(0, 0, 0)) == 1
    database.add_custom_system(SystemPath(0, 0, 0), CustomSystem(name="B"))
    assert [system.system_index for system in database.get_custom_systems_for_sector(0, 0, 0)] == [0, 1]
