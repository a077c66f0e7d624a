import pytest

from mathsolver.capture.geometry import Circle, Freehand, Point, ShapeSet
from mathsolver.capture.recorder import PathRecorder


def make_recorder(tool="freehand", gate=lambda: True):
    calls = []
    recorder = PathRecorder(ShapeSet(), gate=gate, on_change=lambda: calls.append(1), tool=tool)
    return recorder, calls


def test_freehand_single_point_is_discarded():
    recorder, _ = make_recorder()
    recorder.begin(Point(x=5, y=5))
    recorder.commit()
    assert len(recorder.shapes) == 0
    assert recorder.shapes.in_progress is None


def test_freehand_keeps_points_in_drawing_order():
    recorder, _ = make_recorder()
    recorder.begin(Point(x=1, y=1))
    recorder.extend(Point(x=2, y=3))
    recorder.extend(Point(x=4, y=9))
    recorder.commit()
    (shape,) = recorder.shapes.committed
    assert isinstance(shape, Freehand)
    assert [(p.x, p.y) for p in shape.points] == [(1, 1), (2, 3), (4, 9)]


@pytest.mark.parametrize("end", [(20, 0), (10, 10), (0, 0)])
def test_small_circles_are_discarded(end):
    # distance <= 20 means radius <= 10
    recorder, _ = make_recorder(tool="circle")
    recorder.begin(Point(x=0, y=0))
    recorder.extend(Point(x=end[0], y=end[1]))
    recorder.commit()
    assert len(recorder.shapes) == 0


def test_circle_radius_and_center_from_drag():
    recorder, _ = make_recorder(tool="circle")
    recorder.begin(Point(x=10, y=20))
    recorder.extend(Point(x=40, y=60))
    recorder.commit()
    (shape,) = recorder.shapes.committed
    assert isinstance(shape, Circle)
    assert shape.radius == 25.0
    assert (shape.center.x, shape.center.y) == (25.0, 40.0)


def test_circle_uses_last_extend_only():
    recorder, _ = make_recorder(tool="circle")
    recorder.begin(Point(x=0, y=0))
    recorder.extend(Point(x=100, y=0))
    recorder.extend(Point(x=0, y=30))
    recorder.commit()
    (shape,) = recorder.shapes.committed
    assert shape.radius == 15.0
    assert (shape.center.x, shape.center.y) == (0.0, 15.0)


def test_closed_gate_blocks_begin_and_extend():
    recorder, calls = make_recorder(gate=lambda: False)
    recorder.begin(Point(x=1, y=1))
    recorder.extend(Point(x=50, y=50))
    recorder.commit()
    assert recorder.shapes.in_progress is None
    assert len(recorder.shapes) == 0
    assert calls == []


def test_every_mutation_triggers_redraw():
    recorder, calls = make_recorder()
    recorder.begin(Point(x=0, y=0))
    recorder.extend(Point(x=5, y=0))
    recorder.commit()
    recorder.clear()
    assert len(calls) == 4


def test_clear_empties_committed():
    recorder, _ = make_recorder()
    for y in (0, 10):
        recorder.begin(Point(x=0, y=y))
        recorder.extend(Point(x=30, y=y))
        recorder.commit()
    assert len(recorder.shapes) == 2
    recorder.clear()
    assert len(recorder.shapes) == 0


def test_switching_tool_drops_in_progress_shape():
    recorder, _ = make_recorder()
    recorder.begin(Point(x=0, y=0))
    recorder.extend(Point(x=30, y=0))
    recorder.set_tool("circle")
    assert recorder.shapes.in_progress is None
    recorder.commit()
    assert len(recorder.shapes) == 0


def test_unknown_tool_rejected():
    recorder, _ = make_recorder()
    with pytest.raises(ValueError):
        recorder.set_tool("rectangle")


def test_scaling_variants():
    path = Freehand(points=[Point(x=100, y=100), Point(x=150, y=50)])
    assert [(p.x, p.y) for p in path.scaled(2, 3).points] == [(200, 300), (300, 150)]

    ring = Circle(center=Point(x=50, y=25), radius=12).scaled(2, 4)
    assert (ring.center.x, ring.center.y) == (100, 100)
    assert ring.radius == 48
