import json
import logging

import pytest

from geoquery.__main__ import main, parse_point, UsageError
from geoquery.geom import point


def _lines(out):
    return [json.loads(l) for l in out.splitlines()]


@pytest.fixture(autouse=True)
def _reset_logging():
    # main() attaches a handler to the captured stderr of the current test
    yield
    logging.getLogger("geoquery").handlers.clear()


class TestCommands:

    def test_aabb(self, capsys):
        assert main(['aabb', '0,0,0', '1,2,3', '1,0,5']) == 0
        rows = _lines(capsys.readouterr().out)
        assert rows[0] == {"Length": 0.0, "X": 0.0, "Y": 0.0, "Z": 0.0}
        assert (rows[1]["X"], rows[1]["Y"], rows[1]["Z"]) == (1.0, 2.0, 5.0)

    def test_aabb_json(self, capsys):
        assert main(['--json', 'aabb', '0,0,0', '1,2,3']) == 0
        doc = json.loads(capsys.readouterr().out)
        assert doc == {"kind": "AABB", "min": [0.0, 0.0, 0.0], "max": [1.0, 2.0, 3.0]}

    def test_cloud_file(self, capsys, tmp_path):
        cloud = tmp_path / "cloud.json"
        cloud.write_text(json.dumps([[0, 0, 0], [1, 2, 3], [-1, 0, 5]]))
        assert main(['aabb', '--file', str(cloud)]) == 0
        rows = _lines(capsys.readouterr().out)
        assert (rows[0]["X"], rows[1]["Z"]) == (-1.0, 5.0)

    def test_obb(self, capsys):
        args = ['obb', '0,0,0', '1,0,0', '0,1,0', '0,0,1', '1,1,1']
        assert main(args) == 0
        assert len(_lines(capsys.readouterr().out)) == 8

    def test_intersect(self, capsys):
        assert main(['intersect', '0,0,0', '2,0,0', '1,0,0', '3,0,0']) == 0
        rows = _lines(capsys.readouterr().out)
        assert rows[0] == {"IntersectionType": "SEGMENT"}
        assert [r["X"] for r in rows[1:]] == [1.0, 2.0]

    def test_intersect_lines(self, capsys):
        assert main(['intersect', '--lines', '0,0,0', '1,0,0', '0,0,1', '1,0,1']) == 0
        assert _lines(capsys.readouterr().out) == [{"IntersectionType": "NULL"}]

    def test_locate(self, capsys):
        assert main(['locate', '0.1,0.1,0.1', '0,0,0', '1,0,0', '0,1,0', '0,0,1']) == 0
        rows = _lines(capsys.readouterr().out)
        assert rows[0] == {"Location": "CELL"}
        assert len(rows) == 5

    def test_hull_side(self, capsys):
        assert main(['hull-side', '3,3,3', '0,0,0', '1,0,0', '0,1,0', '0,0,1']) == 0
        assert _lines(capsys.readouterr().out) == [{"Side": "ON_UNBOUNDED_SIDE"}]

    def test_transform(self, capsys):
        args = ['transform', '1,0,0', '--source', '1,1,1', '0,1,0', '0,0,1', '1,0,0']
        assert main(args) == 0
        row = _lines(capsys.readouterr().out)[0]
        assert (row["X"], row["Y"], row["Z"]) == pytest.approx((1.0, 2.0, 1.0))


class TestOptions:

    def test_epsilon(self, capsys):
        cloud = ['0,0,0', '1,0,0', '0,1,0', '0,0,1']
        assert main(['locate', '1.0005,0,0'] + cloud) == 0
        assert _lines(capsys.readouterr().out) == [{"Location": "OUTSIDE_CONVEX_HULL"}]
        assert main(['--epsilon', '0.01', 'locate', '1.0005,0,0'] + cloud) == 0
        assert _lines(capsys.readouterr().out)[0] == {"Location": "VERTEX"}

    def test_config_file(self, capsys, tmp_path):
        cfg = tmp_path / "tol.yaml"
        cfg.write_text("epsilon: 0.01\n")
        cloud = ['0,0,0', '1,0,0', '0,1,0', '0,0,1']
        assert main(['--config', str(cfg), 'locate', '1.0005,0,0'] + cloud) == 0
        assert _lines(capsys.readouterr().out)[0] == {"Location": "VERTEX"}


class TestExitCodes:

    def test_geometry_error(self, capsys):
        assert main(['locate', '0,0,0', '0,0,0', '1,0,0']) == 1
        assert "E100" in capsys.readouterr().err

    def test_bad_point(self, capsys):
        assert main(['aabb', '1,2']) == 2
        assert "Invalid point" in capsys.readouterr().err

    def test_missing_file(self, capsys, tmp_path):
        assert main(['aabb', '--file', str(tmp_path / "nope.json")]) == 2
        assert "File not found" in capsys.readouterr().err

    def test_bad_epsilon(self, capsys):
        assert main(['--epsilon', '-1', 'aabb', '0,0,0']) == 2

    def test_usage(self):
        with pytest.raises(SystemExit) as info:
            main([])
        assert info.value.code == 2


def test_parse_point():
    assert parse_point('1,2.5,-3') == point(1, 2.5, -3)
    with pytest.raises(UsageError):
        parse_point('1,2,x')
    with pytest.raises(UsageError):
        parse_point('1,2,nan')
