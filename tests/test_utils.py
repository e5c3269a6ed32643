from flight_calculator import generate_path
from utils import create_flight_path_plot


def test_plot_traces(square):
    path = generate_path(square, "grid", subdivisions=2)
    fig = create_flight_path_plot(path, square)

    names = [trace.name for trace in fig.data]
    assert names == ["Survey Area", "Flight Path", "Start", "End"]
    assert tuple(fig.data[2].x) == (path[0][0],)
    assert tuple(fig.data[3].y) == (path[-1][1],)


def test_plot_without_outline(square):
    fig = create_flight_path_plot(generate_path(square, "perimeter"))

    assert len(fig.data) == 3
    assert len(fig.data[0].x) == 4
